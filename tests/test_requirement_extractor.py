"""Tests for requirement extraction from job postings."""

import pytest

from cv_tailor.errors import ValidationError
from cv_tailor.models.job import RequirementRecord
from cv_tailor.parsers.requirement_extractor import (
    HIRING_MANAGER_PATTERNS,
    MAX_KEYWORDS,
    TECH_SKILLS,
    detect_experience_level,
    extract,
    extract_contact_emails,
    extract_hiring_manager_name,
    extract_keywords,
    find_key_skills,
    is_two_word_name,
)


def _posting(description: str, **extra) -> dict:
    return {"title": "Engineer", "company": "Acme", "description": description, **extra}


class TestExtract:
    def test_full_record(self, posting):
        req = extract(posting)
        assert isinstance(req, RequirementRecord)
        assert req.job_title == "Senior Backend Engineer"
        assert req.company == "Acme Corp"
        assert req.key_skills == [
            "python", "django", "docker", "kubernetes", "aws",
            "sql", "postgresql", "api", "rest", "terraform",
        ]
        assert req.required_skills == ["5+ years of Python", "PostgreSQL"]
        assert req.preferred_skills == ["Terraform"]
        assert req.experience_level == "senior"
        assert req.location == "Berlin"
        assert req.salary_range == "70k-90k EUR"
        assert req.contact_emails == ["jobs@acme.example.com"]
        assert req.hiring_manager_name == "Jane Doe"

    def test_accepts_mapping(self, posting_data):
        req = extract(posting_data)
        assert req.company == "Acme Corp"

    def test_deterministic(self, posting_data):
        first = extract(posting_data)
        second = extract(posting_data)
        assert first == second
        assert first.model_dump_json() == second.model_dump_json()

    def test_does_not_mutate_input(self, posting_data):
        snapshot = {k: (list(v) if isinstance(v, list) else v) for k, v in posting_data.items()}
        extract(posting_data)
        assert posting_data == snapshot

    def test_record_is_frozen(self, requirements):
        with pytest.raises(Exception):
            requirements.company = "Other"

    def test_missing_mandatory_field(self):
        with pytest.raises(ValidationError) as exc_info:
            extract({"title": "Engineer", "company": "Acme"})
        assert "description" in str(exc_info.value).lower()

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError):
            extract(_posting("Some text", title=""))

    def test_oversized_description_rejected(self):
        with pytest.raises(ValidationError):
            extract(_posting("x" * 50_001))

    def test_too_many_requirements_rejected(self):
        with pytest.raises(ValidationError):
            extract(_posting("text", requirements=["req"] * 101))

    def test_error_does_not_echo_input(self):
        secret = "<script>" + "y" * 60_000
        with pytest.raises(ValidationError) as exc_info:
            extract(_posting(secret))
        assert "<script>" not in exc_info.value.user_message

    def test_non_mapping_rejected(self):
        with pytest.raises(ValidationError):
            extract(["not", "a", "posting"])

    def test_no_signals_degrade_to_defaults(self):
        req = extract(_posting("Nice team."))
        assert req.key_skills == []
        assert req.experience_level == "mid"
        assert req.contact_emails == []
        assert req.hiring_manager_name is None


class TestKeySkills:
    def test_vocabulary_order_independent_of_text_order(self):
        assert find_key_skills("terraform, docker then python") == ["python", "docker", "terraform"]
        assert find_key_skills("python then docker then terraform") == ["python", "docker", "terraform"]

    def test_case_insensitive_substring(self):
        assert find_key_skills("We use PostgreSQL") == ["sql", "postgresql"]

    def test_vocabulary_has_no_duplicates(self):
        assert len(TECH_SKILLS) == len(set(TECH_SKILLS))


class TestExperienceLevel:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Senior developer", "senior"),
            ("Tech Lead wanted", "senior"),
            ("Junior developer", "junior"),
            ("Entry level role", "junior"),
            ("Developer", "mid"),
            ("Junior or senior developers welcome", "senior"),
        ],
    )
    def test_levels(self, text, expected):
        assert detect_experience_level(text) == expected


class TestKeywords:
    def test_filters_short_and_stop_words(self):
        assert extract_keywords("The team will build great tools with Python") == [
            "team", "build", "great", "tools", "python",
        ]

    def test_dedupes_preserving_first_seen(self):
        assert extract_keywords("Python python PYTHON django Python") == ["python", "django"]

    def test_capped(self):
        text = " ".join(f"word{i:03d}" for i in range(50))
        keywords = extract_keywords(text)
        assert len(keywords) == MAX_KEYWORDS
        assert keywords[0] == "word000"


class TestContactEmails:
    def test_all_in_order(self):
        text = "Send CV to hr@acme.com or cc boss.name+jobs@mail.acme.io."
        assert extract_contact_emails(text) == ["hr@acme.com", "boss.name+jobs@mail.acme.io"]

    def test_none(self):
        assert extract_contact_emails("no contacts here") == []


class TestHiringManager:
    def test_contact_pattern(self):
        assert extract_hiring_manager_name("Contact John Smith for details") == "John Smith"

    def test_all_caps_rejected(self):
        assert extract_hiring_manager_name("Contact JOHN for details") is None

    def test_single_word_rejected(self):
        assert extract_hiring_manager_name("Hiring manager: John") is None

    @pytest.mark.parametrize(
        "text",
        [
            "Please reach out to Maria Lopez with questions.",
            "Hiring Manager: Maria Lopez",
            "Maria Lopez, Hiring Manager",
            "Please send your resume to Maria Lopez today.",
        ],
    )
    def test_phrase_patterns(self, text):
        assert extract_hiring_manager_name(text) == "Maria Lopez"

    def test_first_matching_pattern_wins(self):
        text = "Hiring manager: Maria Lopez. Contact John Smith for details."
        assert extract_hiring_manager_name(text) == "John Smith"

    def test_title_is_not_searched(self):
        req = extract({
            "title": "Contact John Smith",
            "company": "Acme",
            "description": "Great role.",
        })
        assert req.hiring_manager_name is None

    def test_custom_pattern_list(self):
        patterns = HIRING_MANAGER_PATTERNS[2:3]
        assert extract_hiring_manager_name("Contact John Smith", patterns) is None
        assert extract_hiring_manager_name("hiring manager John Smith", patterns) == "John Smith"

    @pytest.mark.parametrize(
        "candidate,expected",
        [
            ("John Smith", True),
            ("JOHN SMITH", False),
            ("John", False),
            ("John Paul Smith", False),
            ("john smith", False),
        ],
    )
    def test_two_word_validator(self, candidate, expected):
        assert is_two_word_name(candidate) is expected

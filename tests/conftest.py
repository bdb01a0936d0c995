"""Shared test fixtures."""

from __future__ import annotations

import pytest

from cv_tailor.config import RenderConfig
from cv_tailor.export.renderer import DocumentRenderer
from cv_tailor.models.job import JobPosting, RequirementRecord
from cv_tailor.models.profile import ApplicantProfile
from cv_tailor.parsers.requirement_extractor import extract
from cv_tailor.pipeline.profile_tailor import tailor


@pytest.fixture
def posting_data() -> dict:
    return {
        "title": "Senior Backend Engineer",
        "company": "Acme Corp",
        "description": (
            "We are looking for a senior engineer to build REST APIs with Python "
            "and Django. Experience with Docker, Kubernetes and AWS is expected.\n\n"
            "Questions? Contact Jane Doe at jobs@acme.example.com."
        ),
        "requirements": ["5+ years of Python", "PostgreSQL"],
        "preferredSkills": ["Terraform"],
        "location": "Berlin",
        "salaryRange": "70k-90k EUR",
    }


@pytest.fixture
def posting(posting_data) -> JobPosting:
    return JobPosting.model_validate(posting_data)


@pytest.fixture
def requirements(posting) -> RequirementRecord:
    return extract(posting)


@pytest.fixture
def profile_data() -> dict:
    return {
        "personalInfo": {
            "fullName": "Alex Morgan",
            "email": "alex@example.com",
            "phone": "+49 30 1234567",
            "location": "Berlin, Germany",
            "linkedIn": "https://linkedin.com/in/alexmorgan",
            "github": "https://github.com/alexmorgan",
        },
        "summary": "Backend developer experienced in building web services with Python.",
        "experience": [
            {
                "jobTitle": "Engineer",
                "company": "Acme",
                "startDate": "2019-01",
                "endDate": "2021-03",
                "description": "Built internal tools with Django.",
                "achievements": ["Reduced build time with Docker caching"],
            },
            {
                "jobTitle": "Senior Engineer",
                "company": "Acme",
                "startDate": "2021-04",
                "endDate": "present",
                "description": "Lead the platform team running Kubernetes on AWS.",
                "achievements": ["Migrated services to Kubernetes"],
            },
            {
                "jobTitle": "Junior Developer",
                "company": "Startup GmbH",
                "location": "Hamburg",
                "startDate": "2016-09",
                "endDate": "2018-12",
                "description": "Wrote REST endpoints in Flask.",
                "achievements": [],
            },
        ],
        "education": [
            {
                "degree": "BSc Computer Science",
                "institution": "TU Berlin",
                "graduationYear": "2016",
                "gpa": "1.7",
                "honors": ["Dean's list"],
            }
        ],
        "skills": {
            "technical": ["Go", "Python", "Django", "Excel", "Docker"],
            "soft": ["Communication", "Mentoring"],
            "languages": ["English", "German"],
            "certifications": ["AWS Solutions Architect"],
        },
        "projects": [
            {"name": "ledger", "description": "Accounting CLI", "technologies": ["Rust"]},
            {
                "name": "shipit",
                "description": "Deployment bot",
                "technologies": ["Python", "Docker"],
                "url": "https://github.com/alexmorgan/shipit",
            },
        ],
    }


@pytest.fixture
def profile(profile_data) -> ApplicantProfile:
    return ApplicantProfile.model_validate(profile_data)


@pytest.fixture
def tailored(profile, requirements):
    return tailor(profile, requirements)


@pytest.fixture
def renderer(tmp_path) -> DocumentRenderer:
    return DocumentRenderer(RenderConfig(timeout_seconds=5), temp_dir=tmp_path / "tmp")

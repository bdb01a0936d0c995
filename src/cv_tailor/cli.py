"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from cv_tailor.config import AppConfig, load_config
from cv_tailor.errors import CVTailorError, report_error
from cv_tailor.export.renderer import DocumentRenderer, OutputFormat, parse_format
from cv_tailor.export.style import PAGE_SIZES
from cv_tailor.models.correspondence import EmailTemplateType
from cv_tailor.models.job import JobPosting
from cv_tailor.parsers.jd_parser import load_posting_file
from cv_tailor.parsers.profile_parser import load_profile_file
from cv_tailor.parsers.requirement_extractor import extract as extract_requirements
from cv_tailor.pipeline.correspondence import (
    compose_cover_letter,
    compose_email,
    first_choice,
    seeded_choice,
)
from cv_tailor.pipeline.orchestrator import TailoringPipeline
from cv_tailor.utils.path_guard import sanitize_file_name

app = typer.Typer(
    name="cv-tailor",
    help="Tailor a CV, cover letter and outreach email to a job posting.",
    no_args_is_help=True,
)
console = Console()

_FORMAT_HELP = "Output format: text, markdown, html or pdf"


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _fail(exc: BaseException, context: str) -> None:
    console.print(f"[red]{report_error(exc, context)}[/red]")
    raise typer.Exit(1)


def _require_file(path: Path, label: str) -> None:
    if not path.is_file():
        console.print(f"[red]{label} file not found: {path.name}[/red]")
        raise typer.Exit(1)


def _load_posting(posting: Path, title: str | None, company: str | None) -> JobPosting:
    return load_posting_file(posting, title=title, company=company)


def _config(config_path: Path | None) -> AppConfig:
    try:
        return load_config(config_path)
    except ValueError as exc:
        console.print(f"[red]Invalid configuration: {exc}[/red]")
        raise typer.Exit(1)


def _style_overrides(page_size: str | None) -> dict[str, str] | None:
    return {"page_size": page_size} if page_size else None


@app.command()
def extract(
    posting: Path = typer.Argument(help="Job posting file (YAML/JSON, or .txt with --title/--company)"),
    title: str = typer.Option(None, "--title", help="Job title (required for .txt postings)"),
    company: str = typer.Option(None, "--company", help="Company name (required for .txt postings)"),
    as_json: bool = typer.Option(False, "--json", help="Print the requirement record as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Extract the requirement record from a job posting."""
    _setup_logging(verbose)
    _require_file(posting, "Job posting")
    try:
        req = extract_requirements(_load_posting(posting, title, company))
    except CVTailorError as exc:
        _fail(exc, "extract")

    if as_json:
        console.print_json(req.model_dump_json())
        return

    table = Table(title=f"{req.job_title} @ {req.company}", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Experience level", req.experience_level)
    table.add_row("Key skills", ", ".join(req.key_skills) or "-")
    table.add_row("Required skills", ", ".join(req.required_skills) or "-")
    table.add_row("Preferred skills", ", ".join(req.preferred_skills) or "-")
    table.add_row("Keywords", ", ".join(req.keywords) or "-")
    table.add_row("Location", req.location or "-")
    table.add_row("Salary range", req.salary_range or "-")
    table.add_row("Contact emails", ", ".join(req.contact_emails) or "-")
    table.add_row("Hiring manager", req.hiring_manager_name or "-")
    console.print(table)


@app.command()
def tailor(
    posting: Path = typer.Argument(help="Job posting file"),
    profile: Path = typer.Argument(help="Applicant profile file (YAML/JSON)"),
    fmt: str = typer.Option("pdf", "--format", "-f", help=_FORMAT_HELP),
    output_dir: Path = typer.Option(None, "--output-dir", "-o", help="Output directory"),
    file_name: str = typer.Option(None, "--file-name", help="Output file name (without extension)"),
    page_size: str = typer.Option(None, "--page-size", help=f"One of: {', '.join(PAGE_SIZES)}"),
    with_letter: bool = typer.Option(False, "--with-letter", help="Also write cover letter and email"),
    title: str = typer.Option(None, "--title", help="Job title (for .txt postings)"),
    company: str = typer.Option(None, "--company", help="Company name (for .txt postings)"),
    config_path: Path = typer.Option(None, "--config", help="Path to config.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Generate a CV tailored to the job posting."""
    _setup_logging(verbose)
    _require_file(posting, "Job posting")
    _require_file(profile, "Profile")
    config = _config(config_path)
    pipeline = TailoringPipeline(config)

    try:
        job = _load_posting(posting, title, company)
        applicant = load_profile_file(profile)
        output_format = parse_format(fmt)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Tailoring CV...", total=None)

            def on_phase(phase: str, detail: str) -> None:
                progress.update(task, description=detail)

            result = pipeline.run(
                job, applicant, with_correspondence=with_letter, on_phase=on_phase
            )
            progress.update(task, description="Writing files")
            saved = asyncio.run(
                pipeline.save(
                    result,
                    output_format,
                    output_dir,
                    file_name=file_name,
                    style=_style_overrides(page_size),
                )
            )
    except Exception as exc:
        _fail(exc, "tailor")

    req = result.requirements
    console.print(
        Panel(
            f"Level: {req.experience_level} | Key skills: {', '.join(req.key_skills) or '-'}"
            f"\nElapsed: {result.elapsed_seconds:.2f}s",
            title=f"{req.job_title} @ {req.company}",
        )
    )
    for kind, path in saved.items():
        console.print(f"[green]Saved {kind}: {path}[/green]")


@app.command("cover-letter")
def cover_letter(
    posting: Path = typer.Argument(help="Job posting file"),
    profile: Path = typer.Argument(help="Applicant profile file (YAML/JSON)"),
    fmt: str = typer.Option("pdf", "--format", "-f", help=_FORMAT_HELP),
    output_dir: Path = typer.Option(None, "--output-dir", "-o", help="Output directory"),
    file_name: str = typer.Option("cover_letter", "--file-name", help="Output file name"),
    hiring_manager: str = typer.Option(None, "--hiring-manager", help="Override the addressee"),
    to: str = typer.Option(None, "--to", help="Recipient email address"),
    seed: int = typer.Option(None, "--seed", help="Seed for choosing opening/closing wording"),
    letter_date: str = typer.Option(None, "--date", help="Letter date (YYYY-MM-DD), default today"),
    title: str = typer.Option(None, "--title", help="Job title (for .txt postings)"),
    company: str = typer.Option(None, "--company", help="Company name (for .txt postings)"),
    config_path: Path = typer.Option(None, "--config", help="Path to config.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Generate a cover letter for the job posting."""
    _setup_logging(verbose)
    _require_file(posting, "Job posting")
    _require_file(profile, "Profile")
    config = _config(config_path)
    renderer = DocumentRenderer(config.render, temp_dir=config.output.resolved_temp_dir)

    try:
        when = date.fromisoformat(letter_date) if letter_date else None
    except ValueError:
        console.print("[red]--date must be YYYY-MM-DD[/red]")
        raise typer.Exit(1)

    try:
        req = extract_requirements(_load_posting(posting, title, company))
        letter = compose_cover_letter(
            load_profile_file(profile),
            req,
            hiring_manager_name=hiring_manager,
            email_address=to,
            chooser=seeded_choice(seed) if seed is not None else first_choice,
        )
        path = asyncio.run(
            renderer.save(
                letter,
                fmt,
                output_dir or config.output.default_dir,
                file_name,
                letter_date=when,
            )
        )
    except Exception as exc:
        _fail(exc, "cover-letter")

    console.print(f"[green]Saved cover letter: {path}[/green]")


@app.command()
def email(
    posting: Path = typer.Argument(help="Job posting file"),
    profile: Path = typer.Argument(help="Applicant profile file (YAML/JSON)"),
    template_type: EmailTemplateType = typer.Option(
        EmailTemplateType.APPLICATION, "--type", help="Email template"
    ),
    to: str = typer.Option(None, "--to", help="Recipient email (default: first contact in posting)"),
    hiring_manager: str = typer.Option(None, "--hiring-manager", help="Override the addressee"),
    output_dir: Path = typer.Option(None, "--output-dir", "-o", help="Write to this directory"),
    file_name: str = typer.Option("email", "--file-name", help="Output file name"),
    fmt: str = typer.Option("text", "--format", "-f", help="text or markdown"),
    title: str = typer.Option(None, "--title", help="Job title (for .txt postings)"),
    company: str = typer.Option(None, "--company", help="Company name (for .txt postings)"),
    config_path: Path = typer.Option(None, "--config", help="Path to config.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Draft an outreach email; printed unless --output-dir is given."""
    _setup_logging(verbose)
    _require_file(posting, "Job posting")
    _require_file(profile, "Profile")
    config = _config(config_path)
    renderer = DocumentRenderer(config.render, temp_dir=config.output.resolved_temp_dir)

    try:
        req = extract_requirements(_load_posting(posting, title, company))
        draft = compose_email(
            load_profile_file(profile),
            req,
            recipient_email=to,
            template_type=template_type,
            hiring_manager_name=hiring_manager,
        )
        if output_dir is not None:
            path = asyncio.run(renderer.save(draft, fmt, output_dir, file_name))
            console.print(f"[green]Saved email: {path}[/green]")
            return
    except Exception as exc:
        _fail(exc, "email")

    header = f"To: {draft.recipient.email}\nSubject: {draft.subject}"
    if draft.attachments:
        header += f"\nAttachments: {', '.join(draft.attachments)}"
    console.print(Panel(header, title="Email"))
    console.print(draft.body, markup=False, highlight=False)


@app.command()
def sanitize(name: str = typer.Argument(help="File name to sanitize")) -> None:
    """Show how a file name would be sanitized before writing."""
    try:
        console.print(sanitize_file_name(name), markup=False, highlight=False)
    except CVTailorError as exc:
        _fail(exc, "sanitize")


@app.command()
def formats() -> None:
    """List output formats and page sizes."""
    console.print("[bold]Formats:[/bold] " + ", ".join(f.value for f in OutputFormat))
    console.print("[bold]Page sizes:[/bold] " + ", ".join(PAGE_SIZES))


if __name__ == "__main__":
    app()

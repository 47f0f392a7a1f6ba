#!/usr/bin/env python3
"""
Analyze a saved job page against the saved resume.

Goes through the same guard as every other caller: result cache first,
then the daily quota, then the backend. Save a resume first with
parse_resume.py --save.

Usage:
    python scripts/analyze_job.py page.html --url "https://www.linkedin.com/jobs/view/123"
    python scripts/analyze_job.py page.html --url "..." --backend http://localhost:8000
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from joblens.contexts.analysis.backend_client import AnalysisResult
from joblens.contexts.analysis.coordinator import Coordinator
from joblens.contexts.analysis.exceptions import AnalysisError
from joblens.contexts.analysis.logger import setup_analysis_logger
from joblens.contexts.analysis.storage import get_settings, load_resume, save_settings
from joblens.contexts.intake.job_extractor import try_extract_job_data
from joblens.contexts.intake.page_snapshot import PageSnapshot
from joblens.utils.kv_store import JsonFileStore
from joblens.utils.logger import session_log_dir

app = typer.Typer(add_completion=False)


def _print_list(label: str, items) -> None:
    if not items:
        return
    typer.echo(f"  {label}:")
    for item in items:
        typer.echo(f"    • {item}")


@app.command()
def main(
    html_file: Path = typer.Argument(..., help="Saved page HTML", exists=True, dir_okay=False),
    url: str = typer.Option(..., "--url", "-u", help="URL the page was loaded from"),
    backend: Optional[str] = typer.Option(None, "--backend", "-b", help="Save this backend URL before analyzing"),
    state_file: Optional[Path] = typer.Option(None, "--state-file", help="State store path (default: JOBLENS_STATE_FILE)"),
):
    """
    Run one guarded analysis.

    Examples:\n

        $ analyze_job.py page.html --url https://www.linkedin.com/jobs/view/123
    """
    store = JsonFileStore(state_file)

    try:
        if backend:
            save_settings(store, backendUrl=backend)
    except AnalysisError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    setup_analysis_logger(session_log_dir("analyze_job"), backend_url=get_settings(store)["backendUrl"])

    resume = load_resume(store)
    if resume is None:
        typer.secho("✗ No saved resume. Run parse_resume.py FILE --save first.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    posting = try_extract_job_data(PageSnapshot.from_file(html_file, url))
    if posting is None:
        typer.secho("✗ No job posting found on this page.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    coordinator = Coordinator(store)
    try:
        outcome = asyncio.run(coordinator.analyze_job(posting.to_dict(), resume.raw, url))
    except AnalysisError as e:
        color = typer.colors.YELLOW if e.rate_limited else typer.colors.RED
        typer.secho(f"✗ {e}", fg=color, err=True)
        raise typer.Exit(code=1)

    result = AnalysisResult.from_dict(outcome.result)
    source = " (cached)" if outcome.from_cache else ""
    typer.secho(
        f"\n{posting.title}: {result.match_percentage:g}% match{source}", fg=typer.colors.BLUE, bold=True
    )
    typer.echo(f"  Confidence:  {result.confidence_score:g}")
    if result.experience_required:
        typer.echo(f"  Experience:  {result.experience_required}")
    _print_list("Matched skills", result.matched_skills)
    _print_list("Missing skills", result.missing_skills)
    _print_list("Missing ATS keywords", result.ats_keywords_missing)
    _print_list("Hidden requirements", result.hidden_requirements)
    _print_list("Suggestions", result.resume_improvement_suggestions)
    _print_list("Recommended projects", result.recommended_projects)

    status = coordinator.ledger.status()
    typer.echo(f"\nQuota: {status.remaining}/{status.total} left today")


if __name__ == "__main__":
    app()

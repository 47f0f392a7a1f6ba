#!/usr/bin/env python3
"""
Extract a job posting from a saved HTML page.

Runs the same site detection, selector cascades and description fallback
used during live browsing, then reports the posting, its identity and the
tracker event it would produce.

Usage:
    python scripts/extract_job.py page.html --url "https://www.linkedin.com/jobs/view/123"
    python scripts/extract_job.py page.html --url "https://example.com/careers/42" --tab 7
"""

import json
from pathlib import Path
from typing import Optional

import typer

from joblens.contexts.analysis.storage import TabJobNotifier
from joblens.contexts.intake.change_detector import JobTracker, compute_identity
from joblens.contexts.intake.job_extractor import detect_site
from joblens.contexts.intake.logger import setup_intake_logger
from joblens.contexts.intake.page_snapshot import PageSnapshot
from joblens.utils.kv_store import JsonFileStore
from joblens.utils.logger import session_log_dir

app = typer.Typer(add_completion=False)


@app.command()
def main(
    html_file: Path = typer.Argument(..., help="Saved page HTML", exists=True, dir_okay=False),
    url: str = typer.Option(..., "--url", "-u", help="URL the page was loaded from"),
    tab: Optional[str] = typer.Option(None, "--tab", "-t", help="Record the posting as this tab's current job"),
    as_json: bool = typer.Option(False, "--json", help="Print the posting as JSON"),
    state_file: Optional[Path] = typer.Option(None, "--state-file", help="State store path (default: JOBLENS_STATE_FILE)"),
):
    """
    Extract one posting from a saved page.

    Examples:\n

        $ extract_job.py page.html --url https://www.linkedin.com/jobs/view/123 --tab 1
    """
    setup_intake_logger(session_log_dir("extract_job"), page_url=url)

    page = PageSnapshot.from_file(html_file, url)
    site = detect_site(page)

    notify = TabJobNotifier(JsonFileStore(state_file), tab) if tab is not None else None
    tracker = JobTracker(notify=notify)
    event = tracker.on_page_change(page)
    posting = tracker.current_posting

    if posting is None:
        typer.secho(f"✗ No job posting found ({site.value} page, {event.value})", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(posting.to_dict(), indent=2, ensure_ascii=False))
        return

    typer.secho(f"\n{posting.title}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"  Company:     {posting.company or '-'}")
    typer.echo(f"  Location:    {posting.location or '-'}")
    typer.echo(f"  Experience:  {posting.experience}")
    typer.echo(f"  Salary:      {posting.salary}")
    typer.echo(f"  Skills:      {', '.join(posting.skills) or '-'}")
    typer.echo(f"  Site:        {posting.site.value}")
    typer.echo(f"  Identity:    {compute_identity(posting, url)}")
    typer.echo(f"  Event:       {event.value}")
    typer.echo(f"  Description: {len(posting.description)} characters")
    if tab is not None:
        typer.secho(f"✓ Recorded as current job for tab {tab}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()

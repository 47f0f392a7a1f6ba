#!/usr/bin/env python3
"""
Watch a saved page file and track the job it shows.

Every time the file changes on disk it is treated as a DOM mutation, so the
debounced re-extraction and the job tracker run exactly as they would in a
browser tab. The URL can be changed mid-session by editing the --url-file
(one line), which the URL poll picks up like an in-app navigation.

Usage:
    python scripts/watch_page.py page.html --url "https://www.linkedin.com/jobs/search/?currentJobId=1"
    python scripts/watch_page.py page.html --url-file current_url.txt --tab 3
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from joblens.contexts.analysis.storage import TabJobNotifier
from joblens.contexts.intake.change_detector import JobTracker
from joblens.contexts.intake.logger import _log_info, setup_intake_logger
from joblens.contexts.intake.page_snapshot import PageSnapshot
from joblens.contexts.intake.page_watcher import PageWatcher
from joblens.utils.kv_store import JsonFileStore
from joblens.utils.logger import session_log_dir

app = typer.Typer(add_completion=False)

FILE_POLL_INTERVAL_S = 0.5


async def _watch(html_file: Path, read_url, tab: Optional[str], state_file: Optional[Path]) -> None:
    def report(posting):
        if posting is None:
            _log_info("No job on page")
        else:
            _log_info(f"Current job: {posting.title} @ {posting.company or '-'}")

    notify = report
    if tab is not None:
        notifier = TabJobNotifier(JsonFileStore(state_file), tab)

        def notify(posting):
            report(posting)
            notifier(posting)

    tracker = JobTracker(notify=notify)
    watcher = PageWatcher(
        tracker,
        page_source=lambda: PageSnapshot.from_file(html_file, read_url()),
        current_url=read_url,
    )

    await watcher.start()
    last_mtime = html_file.stat().st_mtime
    try:
        while True:
            await asyncio.sleep(FILE_POLL_INTERVAL_S)
            mtime = html_file.stat().st_mtime
            if mtime != last_mtime:
                last_mtime = mtime
                watcher.on_mutation()
    finally:
        await watcher.stop()


@app.command()
def main(
    html_file: Path = typer.Argument(..., help="Page HTML file to watch", exists=True, dir_okay=False),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Fixed page URL"),
    url_file: Optional[Path] = typer.Option(None, "--url-file", help="File holding the current page URL"),
    tab: Optional[str] = typer.Option(None, "--tab", "-t", help="Mirror the tracked job into this tab's state"),
    state_file: Optional[Path] = typer.Option(None, "--state-file", help="State store path (default: JOBLENS_STATE_FILE)"),
):
    """Track the job shown in a page file until interrupted (Ctrl+C)."""
    if (url is None) == (url_file is None):
        typer.secho("✗ Give exactly one of --url or --url-file", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if url_file is not None:
        def read_url() -> str:
            return url_file.read_text(encoding="utf-8").strip()
    else:
        def read_url() -> str:
            return url

    setup_intake_logger(session_log_dir("watch_page"), page_url=read_url())
    try:
        asyncio.run(_watch(html_file, read_url, tab, state_file))
    except KeyboardInterrupt:
        typer.echo("\nStopped")


if __name__ == "__main__":
    app()

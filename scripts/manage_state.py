#!/usr/bin/env python3
"""
Command-line interface for the local JobLens state store.

Commands:
    quota          - Show today's remaining analyses
    clear-cache    - Delete every cached analysis result
    history        - List past analyses, newest first
    settings       - Show settings, or change them
    verify-backend - Check a backend URL's /health endpoint
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from joblens.contexts.analysis.coordinator import Coordinator
from joblens.contexts.analysis.exceptions import AnalysisError
from joblens.contexts.analysis.quota_ledger import QuotaLedger
from joblens.contexts.analysis.result_cache import ResultCache
from joblens.contexts.analysis.storage import get_analysis_history, get_settings, save_settings
from joblens.utils.kv_store import JsonFileStore
from joblens.utils.timestamp import format_timestamp

app = typer.Typer(
    add_completion=False,
    help="Inspect and manage the JobLens state store",
    invoke_without_command=True,
)

state = {"store": None}


@app.callback()
def main(
    ctx: typer.Context,
    state_file: Optional[Path] = typer.Option(None, "--state-file", help="State store path (default: JOBLENS_STATE_FILE)"),
):
    """Show help by default when no command is provided."""
    state["store"] = JsonFileStore(state_file)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("quota")
def quota_command():
    """Show today's remaining analyses."""
    status = QuotaLedger(state["store"]).status()
    color = typer.colors.GREEN if status.remaining else typer.colors.YELLOW
    typer.secho(f"{status.remaining}/{status.total} analyses left on {status.date}", fg=color)


@app.command("clear-cache")
def clear_cache_command():
    """Delete every cached analysis result."""
    cleared = ResultCache(state["store"]).clear()
    typer.secho(f"✓ Cleared {cleared} cached result(s)", fg=typer.colors.GREEN)


@app.command("history")
def history_command(
    limit: int = typer.Option(10, "--limit", "-n", help="Maximum entries to show"),
):
    """List past analyses, newest first."""
    history = get_analysis_history(state["store"])
    if not history:
        typer.echo("No analyses yet")
        return

    for entry in history[:limit]:
        match = entry.get("matchPercentage")
        match_text = f"{match}%" if match is not None else "?"
        when = format_timestamp(entry.get("analyzedAt", ""), relative=True)
        typer.echo(f"{match_text:>5}  {entry.get('jobTitle', '')} @ {entry.get('company') or '-'}  ({when})")


@app.command("settings")
def settings_command(
    backend_url: Optional[str] = typer.Option(None, "--backend-url", help="Backend base URL"),
    overlay: Optional[bool] = typer.Option(None, "--overlay/--no-overlay", help="Enable the on-page overlay"),
):
    """
    Show settings, or change them.

    Examples:\n

        $ manage_state.py settings --backend-url http://localhost:8000
    """
    changes = {}
    if backend_url is not None:
        changes["backendUrl"] = backend_url
    if overlay is not None:
        changes["overlayEnabled"] = overlay

    store = state["store"]
    try:
        settings = save_settings(store, **changes) if changes else get_settings(store)
    except AnalysisError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if changes:
        typer.secho("✓ Settings saved", fg=typer.colors.GREEN)
    for key, value in settings.items():
        typer.echo(f"  {key}: {value}")


@app.command("verify-backend")
def verify_backend_command(
    url: Optional[str] = typer.Argument(None, help="Backend URL (default: saved setting)"),
):
    """Check a backend URL's /health endpoint."""
    store = state["store"]
    url = url or get_settings(store)["backendUrl"]
    try:
        health = asyncio.run(Coordinator(store).verify_backend_url(url))
    except AnalysisError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(
        f"✓ {health['backendUrl']}: {health['service']} ({health['status']})", fg=typer.colors.GREEN
    )


if __name__ == "__main__":
    app()

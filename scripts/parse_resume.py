#!/usr/bin/env python3
"""
Parse a resume document and show (or save) the extracted fields.

Accepts .txt, .pdf and .docx files. With --save the raw text and parsed
fields are written to the state store, where analyze_job.py picks them up.

Usage:
    python scripts/parse_resume.py resume.pdf
    python scripts/parse_resume.py resume.docx --save
    python scripts/parse_resume.py resume.txt --json
"""

import json
from pathlib import Path
from typing import Optional

import typer

from joblens.contexts.analysis.storage import save_resume
from joblens.contexts.resume.exceptions import DocumentError
from joblens.contexts.resume.logger import setup_resume_logger
from joblens.contexts.resume.resume_parser import parse_resume
from joblens.utils.kv_store import JsonFileStore
from joblens.utils.logger import session_log_dir

app = typer.Typer(add_completion=False)


@app.command()
def main(
    resume_file: Path = typer.Argument(..., help="Resume file (.txt, .pdf, .docx)", exists=True, dir_okay=False),
    save: bool = typer.Option(False, "--save", "-s", help="Save raw text and parsed fields to the state store"),
    as_json: bool = typer.Option(False, "--json", help="Print parsed fields as JSON"),
    state_file: Optional[Path] = typer.Option(None, "--state-file", help="State store path (default: JOBLENS_STATE_FILE)"),
):
    """
    Decode and parse a resume.

    Examples:\n

        $ parse_resume.py resume.pdf --save
    """
    setup_resume_logger(session_log_dir("parse_resume"), source=str(resume_file))

    try:
        document = parse_resume(resume_file)
    except DocumentError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    parsed = document.parsed

    if as_json:
        typer.echo(json.dumps(parsed.to_dict(), indent=2, ensure_ascii=False))
    else:
        typer.secho(f"\n{parsed.name or '(name not found)'}", fg=typer.colors.BLUE, bold=True)
        typer.echo(f"  Email:       {parsed.email or '-'}")
        typer.echo(f"  Experience:  {parsed.experience_years:g} years")
        typer.echo(f"  Skills ({len(parsed.skills)}): {', '.join(parsed.skills) or '-'}")
        for label, items in (
            ("Education", parsed.education),
            ("Projects", parsed.projects),
            ("Certifications", parsed.certifications),
        ):
            typer.echo(f"  {label}:")
            for item in items:
                typer.echo(f"    • {item}")
            if not items:
                typer.echo("    -")

    if save:
        store = JsonFileStore(state_file)
        save_resume(store, document.raw, parsed)
        typer.secho(f"✓ Resume saved to {store.path}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()

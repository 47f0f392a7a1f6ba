"""
Integration test for resume intake.
Tests: document file -> text -> parsed fields -> persisted -> reloaded.
"""

import docx
import pytest

from joblens.contexts.analysis.storage import load_resume, save_resume
from joblens.contexts.resume.exceptions import TooShort
from joblens.contexts.resume.resume_parser import parse_resume
from joblens.utils.kv_store import JsonFileStore

RESUME_LINES = [
    "Arjun Mehta",
    "arjun.mehta@example.com | +91 9988776655",
    "Skills: Python, FastAPI, PostgreSQL, Docker",
    "Experience",
    "Backend Engineer, Razorpay 2020-2023",
    "Projects",
    "- Payments reconciliation service",
    "Education",
    "B.Tech Computer Science, NIT Trichy 2020",
]


@pytest.fixture
def docx_resume(tmp_path):
    document = docx.Document()
    for line in RESUME_LINES:
        document.add_paragraph(line)
    path = tmp_path / "arjun_mehta.docx"
    document.save(str(path))
    return path


@pytest.mark.integration
def test_docx_resume_round_trip(docx_resume, tmp_path):
    """Test a Word resume is parsed, stored on disk and read back by a new store."""
    parsed_document = parse_resume(docx_resume)
    parsed = parsed_document.parsed

    assert parsed.name == "Arjun Mehta"
    assert parsed.email == "arjun.mehta@example.com"
    assert {"python", "fastapi", "postgresql", "docker"} <= set(parsed.skills)
    assert parsed.experience_years == 3.0
    assert parsed.projects == ("Payments reconciliation service",)
    assert parsed.education == ("B.Tech Computer Science, NIT Trichy 2020",)

    state_path = tmp_path / "state.json"
    save_resume(JsonFileStore(state_path), parsed_document.raw, parsed)

    reloaded = load_resume(JsonFileStore(state_path))
    assert reloaded.raw == parsed_document.raw
    assert reloaded.parsed == parsed


@pytest.mark.integration
def test_pasted_resume_matches_file(docx_resume):
    """Test pasted text and the same content in a file parse identically."""
    from_file = parse_resume(docx_resume).parsed
    from_text = parse_resume("\n".join(RESUME_LINES)).parsed
    assert from_file == from_text


@pytest.mark.integration
def test_empty_document_rejected(tmp_path):
    document = docx.Document()
    document.add_paragraph("Arjun")
    path = tmp_path / "empty.docx"
    document.save(str(path))

    with pytest.raises(TooShort):
        parse_resume(path)

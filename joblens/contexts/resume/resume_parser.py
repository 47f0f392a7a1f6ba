"""
Resume field extraction for the Resume context.

Each extractor is an independent pure function over raw resume text, built on
the segmenter and the pattern tables. parse_resume_text() runs all of them and
returns a ParsedResume; parse_resume() adds text acquisition in front.

Extraction is best-effort pattern matching: fields that cannot be found
degrade to "" / [] / 0 rather than raising.
"""

from datetime import date
from pathlib import Path
from typing import Optional, Union

from joblens.contexts.resume.document_reader import load_resume_text
from joblens.contexts.resume.logger import log_resume_parsed
from joblens.contexts.resume.resume_data_structure import ParsedResume, ResumeDocument
from joblens.contexts.resume.section_patterns import (
    EDUCATION_LINE_LENGTH,
    ITEM_LINE_LENGTH,
    MAX_CERTIFICATIONS,
    MAX_EDUCATION,
    MAX_PROJECTS,
    MAX_SKILLS,
    NAME_SEARCH_LINES,
    SKILL_TOKEN_LENGTH,
    ExperiencePatterns,
    ResumeLinePatterns,
    ResumeSectionAliases,
    matches_name_length,
    within,
)
from joblens.contexts.resume.segmenter import segment
from joblens.contexts.resume.skill_patterns import find_keyword_skills

# =============================================================================
# CONTACT FIELDS
# =============================================================================


def extract_name(text: str) -> str:
    """
    Name is the first plausible line among the first few non-blank lines.

    Skips contact lines, implausible lengths, and document header words
    ("Resume", "Curriculum Vitae", "Objective", ...).
    """
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    for line in lines[:NAME_SEARCH_LINES]:
        if ResumeLinePatterns.CONTACT_INDICATOR.search(line):
            continue
        if not matches_name_length(line):
            continue
        if ResumeLinePatterns.HEADER_WORD.match(line):
            continue
        return line
    return ""


def extract_email(text: str) -> str:
    """First local@domain.tld in the text, or ""."""
    match = ResumeLinePatterns.EMAIL.search(text)
    return match.group(0) if match else ""


# =============================================================================
# SKILLS
# =============================================================================


def extract_skills(text: str) -> list[str]:
    """
    Collect skills from curated keywords plus the skills section's own tokens.

    Keywords are scanned over the skills section when one exists, else over
    the whole document. Tokens split from the section are added only when the
    section exists. Result is lowercased, deduplicated in first-seen order
    and capped.
    """
    section = segment(text, ResumeSectionAliases.SKILLS)
    scan_text = section if section is not None else text

    candidates = find_keyword_skills(scan_text)

    if section is not None:
        for token in ResumeLinePatterns.SKILL_SEPARATOR.split(section):
            cleaned = ResumeLinePatterns.SKILL_TOKEN_NOISE.sub("", token).strip()
            if within(cleaned, SKILL_TOKEN_LENGTH):
                candidates.append(cleaned.lower())

    # dict preserves first insertion order
    unique = dict.fromkeys(skill for skill in candidates if len(skill.strip()) > 1)
    return list(unique)[:MAX_SKILLS]


# =============================================================================
# EDUCATION / PROJECTS / CERTIFICATIONS
# =============================================================================


def extract_education(text: str) -> list[str]:
    """Degree-like lines from the education section (empty if no section)."""
    section = segment(text, ResumeSectionAliases.EDUCATION)
    if section is None:
        return []

    entries = []
    for line in section.split("\n"):
        line = line.strip()
        if not within(line, EDUCATION_LINE_LENGTH):
            continue
        if ResumeLinePatterns.EDUCATION_LINE.search(line):
            entries.append(line)
    return entries[:MAX_EDUCATION]


def _section_items(text: str, aliases: tuple, cap: int) -> list[str]:
    """Bullet-stripped lines of a section within the item length window."""
    section = segment(text, aliases)
    if section is None:
        return []

    items = []
    for line in section.split("\n"):
        item = ResumeLinePatterns.LEADING_BULLET.sub("", line.strip()).strip()
        if within(item, ITEM_LINE_LENGTH):
            items.append(item)
    return items[:cap]


def extract_projects(text: str) -> list[str]:
    """Project lines from the projects section."""
    return _section_items(text, ResumeSectionAliases.PROJECTS, MAX_PROJECTS)


def extract_certifications(text: str) -> list[str]:
    """Certification/award lines from the certifications section."""
    return _section_items(text, ResumeSectionAliases.CERTIFICATIONS, MAX_CERTIFICATIONS)


# =============================================================================
# EXPERIENCE
# =============================================================================


def extract_experience_years(text: str, current_year: Optional[int] = None) -> float:
    """
    Total years of experience.

    A direct statement ("5 years of experience", "Experience: 3 years") wins.
    Otherwise every year range in the document is summed, with "present" /
    "current" resolving to current_year (defaults to this year).

    Overlapping ranges are summed, not merged, so concurrent roles are counted
    twice. Kept as-is until the intended behavior is decided.
    """
    for pattern in ExperiencePatterns.DIRECT:
        match = pattern.search(text)
        if match:
            return float(match.group(1))

    if current_year is None:
        current_year = date.today().year

    total_months = 0
    for match in ExperiencePatterns.YEAR_RANGE.finditer(text):
        start = int(match.group(1))
        end_token = match.group(2)
        end = current_year if ExperiencePatterns.OPEN_ENDED.fullmatch(end_token) else int(end_token)
        total_months += (end - start) * 12

    if total_months > 0:
        return float(round(total_months / 12))
    return 0.0


# =============================================================================
# ENTRY POINTS
# =============================================================================


def parse_resume_text(text: str, current_year: Optional[int] = None) -> ParsedResume:
    """
    Run every field extractor over raw resume text.

    Args:
        text: Raw resume text (already decoded)
        current_year: Year that "present" resolves to (defaults to this year)

    Returns:
        A new ParsedResume
    """
    parsed = ParsedResume(
        name=extract_name(text),
        email=extract_email(text),
        skills=tuple(extract_skills(text)),
        education=tuple(extract_education(text)),
        experience_years=extract_experience_years(text, current_year=current_year),
        projects=tuple(extract_projects(text)),
        certifications=tuple(extract_certifications(text)),
    )
    log_resume_parsed(parsed)
    return parsed


def parse_resume(source: Union[str, Path]) -> ResumeDocument:
    """
    Acquire resume text (pasted string or file path) and parse it.

    Raises:
        DocumentError: Any acquisition failure (see document_reader)
    """
    raw = load_resume_text(source)
    return ResumeDocument(raw=raw, parsed=parse_resume_text(raw))

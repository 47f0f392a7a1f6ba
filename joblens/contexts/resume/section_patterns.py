"""
Heading tables and line patterns for resume section identification.

Pattern classes follow one convention:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
- Helper functions that use these patterns

Adding a heading alias is a data change here, never a change to the segmenter.
"""

import re
from dataclasses import dataclass

# =============================================================================
# SECTION HEADINGS
# =============================================================================


@dataclass(frozen=True)
class ResumeSectionAliases:
    """
    Heading aliases that open each extractable resume section.

    Matching is case-insensitive on the trimmed line: equal to an alias, or
    starting with "alias:" or "alias ".
    """

    SKILLS: tuple = (
        "skills",
        "technical skills",
        "core competencies",
        "technologies",
        "tech stack",
        "tools",
        "competencies",
    )

    EDUCATION: tuple = (
        "education",
        "academic",
        "degree",
        "qualification",
    )

    PROJECTS: tuple = (
        "projects",
        "personal projects",
        "side projects",
        "portfolio",
    )

    CERTIFICATIONS: tuple = (
        "certifications",
        "certificates",
        "courses",
        "achievements",
        "awards",
    )


# Headings that end whatever section is currently being collected
# (unless the heading is itself one of the target aliases)
KNOWN_SECTION_HEADINGS = (
    "experience",
    "work experience",
    "employment",
    "education",
    "skills",
    "technical skills",
    "projects",
    "certifications",
    "achievements",
    "summary",
    "objective",
    "contact",
    "references",
    "publications",
    "languages",
)


# =============================================================================
# LINE PATTERNS
# =============================================================================


@dataclass(frozen=True)
class ResumeLinePatterns:
    """Regex patterns applied to individual resume lines."""

    # Anything that marks a line as contact info rather than a name
    CONTACT_INDICATOR: re.Pattern = re.compile(r"@|linkedin|github|phone|mobile|\d{10}", re.IGNORECASE)

    # Document header words that are never a name
    HEADER_WORD: re.Pattern = re.compile(r"^(?:resume|curriculum|cv|objective|summary)", re.IGNORECASE)

    EMAIL: re.Pattern = re.compile(r"[\w.+-]+@[\w-]+\.[\w.]+")

    # Degree abbreviations, degree words, common fields, or a bare year
    EDUCATION_LINE: re.Pattern = re.compile(
        r"(b\.?tech|m\.?tech|b\.?e|m\.?e|b\.?sc|m\.?sc|bca|mca|bachelor|master|phd|diploma"
        r"|engineering|computer science|information technology|\d{4})",
        re.IGNORECASE,
    )

    # Leading bullet glyph on project/certification lines
    LEADING_BULLET: re.Pattern = re.compile(r"^[•·▪◦\-*]\s*")

    # Separators inside a skills section
    SKILL_SEPARATOR: re.Pattern = re.compile(r"[,\n|•·▪◦\t]")

    # Characters stripped from each skill token
    SKILL_TOKEN_NOISE: re.Pattern = re.compile(r"[^\w\s.#+]")


@dataclass(frozen=True)
class ExperiencePatterns:
    """Patterns for total years of experience on a resume."""

    # Direct statements, tried in order; group 1 is the number of years
    DIRECT: tuple = (
        re.compile(r"(\d+\.?\d*)\+?\s*years?\s+(?:of\s+)?(?:experience|exp|work)", re.IGNORECASE),
        re.compile(r"experience[:\s]+(\d+\.?\d*)\+?\s*years?", re.IGNORECASE),
    )

    # Employment date ranges: 2019-2021, 2019 – present, 2020-current
    YEAR_RANGE: re.Pattern = re.compile(
        r"\b((?:19|20)\d{2})\s*[-–]\s*((?:19|20)\d{2}|present|current)\b", re.IGNORECASE
    )

    OPEN_ENDED: re.Pattern = re.compile(r"present|current", re.IGNORECASE)


# =============================================================================
# LENGTH WINDOWS AND CAPS
# =============================================================================

# Exclusive (min, max) length windows
NAME_LENGTH = (2, 50)  # upper bound inclusive, see matches_name_length
SKILL_TOKEN_LENGTH = (1, 40)
EDUCATION_LINE_LENGTH = (5, 200)
ITEM_LINE_LENGTH = (5, 150)

MAX_SKILLS = 60
MAX_EDUCATION = 5
MAX_PROJECTS = 8
MAX_CERTIFICATIONS = 8

# Name is looked for in this many leading non-blank lines
NAME_SEARCH_LINES = 5


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def normalize_heading(line: str) -> str:
    """Lowercase, strip and collapse internal whitespace of a candidate heading line."""
    return re.sub(r"\s+", " ", line.strip().lower())


def within(value: str, window: tuple) -> bool:
    """True if len(value) lies strictly inside the (min, max) window."""
    low, high = window
    return low < len(value) < high


def matches_name_length(value: str) -> bool:
    """Names must be longer than 2 and at most 50 characters."""
    low, high = NAME_LENGTH
    return low < len(value) <= high

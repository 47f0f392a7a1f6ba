"""
Reusable patterns and constants for job page extraction.

Each free-text extractor is an ordered table of patterns evaluated
first-match-wins, so adding a format is a data change, not a control-flow
change.

Pattern classes follow one convention:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
- Helper functions that use these patterns
"""

import re
from dataclasses import dataclass

# =============================================================================
# FIELD DEFAULTS AND LIMITS
# =============================================================================

EXPERIENCE_NOT_SPECIFIED = "Not specified"
SALARY_NOT_DISCLOSED = "Not disclosed"

# Hard cap on stored description length
MAX_DESCRIPTION_CHARS = 8000

# Below this (after whitespace collapse) a description counts as still loading
MIN_DESCRIPTION_CHARS = 50

# Fallback description search stops once a candidate is at least this long
GOOD_ENOUGH_FALLBACK_CHARS = 1200

# Text that marks an arbitrary page as a job posting
JOB_KEYWORDS = (
    "responsibilities",
    "requirements",
    "qualifications",
    "about the role",
    "about the job",
    "job description",
    "what you will do",
    "what we're looking for",
    "skills required",
    "experience required",
)


# =============================================================================
# EXPERIENCE PATTERNS
# =============================================================================


@dataclass(frozen=True)
class ExperienceRangePatterns:
    """
    Patterns for required experience in a job description.

    Two capture groups format as "N-M years", one as "N+ years".
    """

    RANGE: re.Pattern = re.compile(r"(\d+)\+?\s*(?:to|-|–)\s*(\d+)\s*years?", re.IGNORECASE)
    PLUS_YEARS: re.Pattern = re.compile(
        r"(\d+)\+?\s*years?\s*(?:of\s+)?(?:experience|exp)", re.IGNORECASE
    )
    LABELED: re.Pattern = re.compile(r"experience[:\s]+(\d+)\+?\s*years?", re.IGNORECASE)
    MINIMUM: re.Pattern = re.compile(r"minimum\s+(\d+)\s*years?", re.IGNORECASE)
    AT_LEAST: re.Pattern = re.compile(r"at least\s+(\d+)\s*years?", re.IGNORECASE)


EXPERIENCE_PATTERNS = [
    ExperienceRangePatterns.RANGE,
    ExperienceRangePatterns.PLUS_YEARS,
    ExperienceRangePatterns.LABELED,
    ExperienceRangePatterns.MINIMUM,
    ExperienceRangePatterns.AT_LEAST,
]


# =============================================================================
# SALARY PATTERNS
# =============================================================================


@dataclass(frozen=True)
class SalaryPatterns:
    """
    Regex patterns for salary or stipend text. The whole match is the value.
    """

    # ₹ 50,000 - 80,000 /month, Rs. 12 LPA, INR 6,00,000 per annum
    RUPEE_RANGE: re.Pattern = re.compile(
        r"(?:₹|rs\.?|inr)\s*[\d,]+(?:\s*-\s*[\d,]+)?\s*(?:lpa|lakh|k/month|/month|per annum)?",
        re.IGNORECASE,
    )

    # $120,000 - 150,000/year, $90k/year, $8k/month
    DOLLAR_RANGE: re.Pattern = re.compile(
        r"\$\s*[\d,]+(?:\s*-\s*\$?\s*[\d,]+)?\s*(?:k?/year|k?/month|k\b)", re.IGNORECASE
    )

    SALARY_LABEL: re.Pattern = re.compile(r"salary[:\s]+[\d,₹$][^\n]*", re.IGNORECASE)
    COMPENSATION_LABEL: re.Pattern = re.compile(r"compensation[:\s]+[^\n]*", re.IGNORECASE)
    STIPEND_LABEL: re.Pattern = re.compile(r"stipend[:\s]+[\d,₹$][^\n]*", re.IGNORECASE)


SALARY_PATTERNS = [
    SalaryPatterns.RUPEE_RANGE,
    SalaryPatterns.DOLLAR_RANGE,
    SalaryPatterns.SALARY_LABEL,
    SalaryPatterns.COMPENSATION_LABEL,
    SalaryPatterns.STIPEND_LABEL,
]


# =============================================================================
# JOB ID AND JOB PAGE URL PATTERNS
# =============================================================================


@dataclass(frozen=True)
class JobIdPatterns:
    """
    Site-native job IDs carried in the page URL.

    Tried in order; the first match gives the identity prefix and the ID.
    """

    LINKEDIN_VIEW: re.Pattern = re.compile(r"linkedin\.com/jobs/view/(\d+)", re.IGNORECASE)
    LINKEDIN_CURRENT_JOB: re.Pattern = re.compile(r"[?&]currentJobId=(\d+)", re.IGNORECASE)


# (identity prefix, pattern)
JOB_ID_PATTERNS = [
    ("li_view", JobIdPatterns.LINKEDIN_VIEW),
    ("li_search", JobIdPatterns.LINKEDIN_CURRENT_JOB),
]


@dataclass(frozen=True)
class JobPageUrlPatterns:
    """URLs that are known to show a single job, even before the page has rendered."""

    LINKEDIN_VIEW: re.Pattern = re.compile(r"linkedin\.com/jobs/view/", re.IGNORECASE)
    LINKEDIN_SEARCH: re.Pattern = re.compile(r"linkedin\.com/jobs/search/.*currentJobId", re.IGNORECASE)
    INTERNSHALA: re.Pattern = re.compile(r"internshala\.com/(?:internship|jobs)/", re.IGNORECASE)


JOB_PAGE_URL_PATTERNS = [
    JobPageUrlPatterns.LINKEDIN_VIEW,
    JobPageUrlPatterns.LINKEDIN_SEARCH,
    JobPageUrlPatterns.INTERNSHALA,
]

# Trailing " | LinkedIn", " - Company", " – Site" on a tab title
TAB_TITLE_SUFFIX: re.Pattern = re.compile(r" *[|\-–] .*$")


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def parse_experience(text: str) -> str:
    """
    Required experience as display text.

    Returns:
        "N-M years", "N+ years", or "Not specified"
    """
    for pattern in EXPERIENCE_PATTERNS:
        match = pattern.search(text or "")
        if match:
            groups = [g for g in match.groups() if g]
            if len(groups) >= 2:
                return f"{groups[0]}-{groups[1]} years"
            return f"{groups[0]}+ years"
    return EXPERIENCE_NOT_SPECIFIED


def extract_salary(text: str) -> str:
    """Salary or stipend text exactly as written, or "Not disclosed"."""
    for pattern in SALARY_PATTERNS:
        match = pattern.search(text or "")
        if match:
            return match.group(0).strip()
    return SALARY_NOT_DISCLOSED


def has_job_keywords(text: str) -> bool:
    """True if the text reads like a job posting."""
    lowered = (text or "").lower()
    return any(keyword in lowered for keyword in JOB_KEYWORDS)


def is_job_page_url(url: str) -> bool:
    """True for URLs that show one specific job."""
    return any(pattern.search(url or "") for pattern in JOB_PAGE_URL_PATTERNS)


def strip_tab_title_suffix(title: str) -> str:
    """'Senior Engineer | Acme | LinkedIn' -> 'Senior Engineer'."""
    return TAB_TITLE_SUFFIX.sub("", title or "").strip()

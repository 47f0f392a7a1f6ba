"""
Job posting extraction for the Intake context.

Turns a PageSnapshot into a JobPosting. Site detection picks a selector
cascade from the SiteSelectorRegistry; a site extractor that raises falls
back to the generic extractor, and a page with no resolvable title yields
None rather than an error.

Entry points:
    extract_job_data(page)      - strict extraction used on demand
    try_extract_job_data(page)  - lenient extraction used by live detection
    ensure_job_description(...) - fills in a description that is still loading
"""

import dataclasses
from typing import Optional

from joblens.contexts.intake.exceptions import ExtractionFailed
from joblens.contexts.intake.extraction_patterns import (
    GOOD_ENOUGH_FALLBACK_CHARS,
    MAX_DESCRIPTION_CHARS,
    MIN_DESCRIPTION_CHARS,
    extract_salary,
    has_job_keywords,
    parse_experience,
    strip_tab_title_suffix,
)
from joblens.contexts.intake.job_data_structure import JobPosting, SiteType
from joblens.contexts.intake.logger import _log_debug, _log_warning, log_job_extracted
from joblens.contexts.intake.normalizer import collapse_whitespace
from joblens.contexts.intake.page_snapshot import PageSnapshot
from joblens.contexts.intake.site_registry import SiteSelectorRegistry, SiteSelectors
from joblens.utils.timestamp import now_exact

_default_registry: Optional[SiteSelectorRegistry] = None


def get_registry() -> SiteSelectorRegistry:
    """Process-wide selector registry (created on first use)."""
    global _default_registry
    if _default_registry is None:
        _default_registry = SiteSelectorRegistry()
    return _default_registry


# =============================================================================
# SITE DETECTION
# =============================================================================


KNOWN_SITES = frozenset(site.value for site in SiteType)


def detect_site(page: PageSnapshot, registry: SiteSelectorRegistry = None) -> SiteType:
    """
    Classify a page.

    Site URL patterns are tried in selectors-file order and win; otherwise
    any page whose body reads like a job posting is generic, and everything
    else is unsupported.
    """
    registry = registry or get_registry()
    for key in registry.site_keys():
        if key in KNOWN_SITES and registry.get_selectors(key).matches_url(page.url):
            return SiteType(key)
    if has_job_keywords(page.body_text()):
        return SiteType.GENERIC
    return SiteType.UNSUPPORTED


# =============================================================================
# EXTRACTORS
# =============================================================================


def _extract_with(page: PageSnapshot, selectors: SiteSelectors, site: SiteType) -> JobPosting:
    """
    Run one site's selector cascades over the page.

    Raises:
        ExtractionFailed: If no title selector (or tab title fallback) yields text
    """
    title = page.first_text(selectors.title)
    if not title and selectors.title_from_document:
        title = strip_tab_title_suffix(page.document_title())
    if not title:
        raise ExtractionFailed(site.value, page.url)

    if site is SiteType.GENERIC:
        description = page.content_text(page.first_element(selectors.description))
    else:
        description = page.first_text(selectors.description)
        if not description and selectors.description_body_chars:
            description = page.body_text()[: selectors.description_body_chars]
    description = description[:MAX_DESCRIPTION_CHARS]

    salary_source = page.first_text(selectors.salary) or description
    skills = tuple(page.texts(selectors.skills)) if selectors.skills else ()

    return JobPosting(
        title=title,
        url=page.url,
        site=site,
        extracted_at=now_exact(),
        company=page.first_text(selectors.company),
        location=page.first_text(selectors.location),
        experience=parse_experience(description),
        salary=extract_salary(salary_source),
        description=description,
        skills=skills,
    )


def _extract_site(
    page: PageSnapshot, site: SiteType, registry: SiteSelectorRegistry, live: bool
) -> JobPosting:
    """Extract with a site's cascades, falling back to generic if the site extractor breaks."""
    selectors = registry.get_selectors(site.value, live=live)
    if site is SiteType.GENERIC:
        return _extract_with(page, selectors, site)
    try:
        return _extract_with(page, selectors, site)
    except ExtractionFailed:
        raise
    except Exception as e:
        _log_warning(f"{site.value} extraction error, falling back to generic: {e}")
        return _extract_with(page, registry.get_selectors(SiteType.GENERIC.value), SiteType.GENERIC)


def extract_job_data(page: PageSnapshot, registry: SiteSelectorRegistry = None) -> Optional[JobPosting]:
    """
    Extract a job posting from a page.

    Args:
        page: Rendered page
        registry: Selector registry (defaults to the process-wide one)

    Returns:
        JobPosting, or None for unsupported pages and pages with no title
    """
    registry = registry or get_registry()
    site = detect_site(page, registry)
    if site is SiteType.UNSUPPORTED:
        _log_debug(f"No job posting detected at {page.url}")
        return None

    try:
        posting = _extract_site(page, site, registry, live=False)
    except ExtractionFailed as e:
        _log_debug(str(e))
        return None
    except Exception as e:
        _log_warning(f"Generic extraction error at {page.url}: {e}")
        return None

    log_job_extracted(posting)
    return posting


def try_extract_job_data(page: PageSnapshot, registry: SiteSelectorRegistry = None) -> Optional[JobPosting]:
    """
    Lenient extraction for live page-change detection. Never raises.

    LinkedIn uses the wider "live" cascades (title falls back to the tab
    title); other sites reuse extract_job_data(). Either way the description
    is passed through ensure_job_description().
    """
    registry = registry or get_registry()
    try:
        if registry.get_selectors(SiteType.LINKEDIN.value).matches_url(page.url):
            posting = _extract_site(page, SiteType.LINKEDIN, registry, live=True)
        else:
            posting = extract_job_data(page, registry)
    except ExtractionFailed:
        return None
    except Exception as e:
        _log_warning(f"Live extraction failed at {page.url}: {e}")
        return None

    if posting is None:
        return None
    return ensure_job_description(posting, page, registry)


def ensure_job_description(
    posting: JobPosting, page: PageSnapshot, registry: SiteSelectorRegistry = None
) -> JobPosting:
    """
    Guarantee a usable description, searching the page if it is still loading.

    A description of at least MIN_DESCRIPTION_CHARS (whitespace collapsed) is
    kept. Otherwise the fallback selectors are searched for the longest text,
    stopping early once one is long enough, and the result is appended to
    whatever was already there.

    Returns:
        A new JobPosting; the input is not modified
    """
    registry = registry or get_registry()
    current = collapse_whitespace(posting.description)
    if len(current) >= MIN_DESCRIPTION_CHARS:
        return dataclasses.replace(posting, description=current[:MAX_DESCRIPTION_CHARS])

    fallback = ""
    for selector in registry.description_fallbacks():
        text = collapse_whitespace(page.text(selector))
        if len(text) > len(fallback):
            fallback = text
        if len(fallback) >= GOOD_ENOUGH_FALLBACK_CHARS:
            break

    merged = "\n\n".join(part for part in (current, fallback) if part).strip()
    if merged != current:
        _log_debug(f"Description filled from page fallback ({len(current)} -> {len(merged)} chars)")
    return dataclasses.replace(posting, description=merged[:MAX_DESCRIPTION_CHARS])

"""
Job identity and change detection for the Intake context.

JobTracker holds the "job currently being viewed" for one page and decides,
on every extraction attempt, whether the page shows a new job, the same job
with fresher fields, a job that is still loading, or no job at all.

The tracker is driven by PageWatcher but has no timers of its own; the
clock is injected so staleness can be tested without sleeping.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from joblens.contexts.intake.extraction_patterns import JOB_ID_PATTERNS, is_job_page_url
from joblens.contexts.intake.job_data_structure import JobPosting
from joblens.contexts.intake.job_extractor import try_extract_job_data
from joblens.contexts.intake.logger import _log_debug, _log_info, _log_warning
from joblens.contexts.intake.page_snapshot import PageSnapshot

# Seconds of continuous extraction failure on a job URL before state is dropped
STALENESS_THRESHOLD_S = 12.0

SIGNATURE_SEPARATOR = "|"


def compute_identity(posting: JobPosting, page_url: str = "") -> str:
    """
    Stable comparison key for "the same job".

    A site-native job ID in the URL is authoritative ("li_view_<id>",
    "li_search_<id>"). Without one, the key is the lowercased, trimmed
    url|title|company signature, so any drift in those fields changes it.

    Args:
        posting: Extracted posting
        page_url: Used when the posting carries no URL
    """
    url = posting.url or page_url
    for prefix, pattern in JOB_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return f"{prefix}_{match.group(1)}"

    return SIGNATURE_SEPARATOR.join(
        part.strip().lower() for part in (url, posting.title, posting.company)
    )


class TrackerEvent(str, Enum):
    """Outcome of one page-change evaluation."""

    NEW_JOB = "new-job"
    UPDATED = "updated"
    LOADING = "loading"
    STALE = "stale"
    NAVIGATED_AWAY = "navigated-away"


@dataclass
class TrackerState:
    """Per-page tracking state. Lives in process memory only."""

    current_identity: str = ""
    current_posting: Optional[JobPosting] = None
    last_success_at: Optional[float] = None
    analyzed: bool = False

    def clear(self) -> None:
        self.current_identity = ""
        self.current_posting = None
        self.last_success_at = None
        self.analyzed = False


class JobTracker:
    """
    Decides new/same/stale for the job on one page.

    Args:
        notify: Called with the freshest posting after every successful
            extraction, and with None when the job is gone
        clock: Monotonic seconds source
        extractor: Lenient extractor (page -> JobPosting | None)
        staleness_threshold: Seconds of failure tolerated on a job URL
    """

    def __init__(
        self,
        notify: Optional[Callable[[Optional[JobPosting]], None]] = None,
        clock: Callable[[], float] = time.monotonic,
        extractor: Callable[[PageSnapshot], Optional[JobPosting]] = try_extract_job_data,
        staleness_threshold: float = STALENESS_THRESHOLD_S,
    ):
        self.notify = notify or (lambda posting: None)
        self.clock = clock
        self.extractor = extractor
        self.staleness_threshold = staleness_threshold
        self.state = TrackerState()

    @property
    def current_posting(self) -> Optional[JobPosting]:
        return self.state.current_posting

    def mark_analyzed(self) -> None:
        """Record that the current job has been sent for analysis."""
        self.state.analyzed = True

    def on_page_change(self, page: PageSnapshot) -> TrackerEvent:
        """
        Re-extract and update state for one page-change signal.

        Never raises; extraction and notification failures are logged and the
        event reflects the page as seen.
        """
        posting = self._extract(page)
        if posting is None:
            return self._on_failure(page.url)
        return self._on_success(posting, page.url)

    def _on_success(self, posting: JobPosting, url: str) -> TrackerEvent:
        next_identity = compute_identity(posting, url)
        is_new_job = next_identity != self.state.current_identity

        if is_new_job:
            self.state.analyzed = False
            _log_info(f"New job detected: {posting.title} ({next_identity})")

        self.state.current_identity = next_identity
        self.state.current_posting = posting
        self.state.last_success_at = self.clock()
        self._notify(posting)

        return TrackerEvent.NEW_JOB if is_new_job else TrackerEvent.UPDATED

    def _on_failure(self, url: str) -> TrackerEvent:
        if not is_job_page_url(url):
            had_job = self.state.current_posting is not None
            self.state.clear()
            if had_job:
                _log_debug(f"Navigated away from job page: {url}")
            self._notify(None)
            return TrackerEvent.NAVIGATED_AWAY

        last = self.state.last_success_at
        if last is not None and self.clock() - last > self.staleness_threshold:
            _log_debug(f"Extraction failing for over {self.staleness_threshold:g}s, dropping job state")
            self.state.clear()
            self._notify(None)
            return TrackerEvent.STALE

        return TrackerEvent.LOADING

    def _extract(self, page: PageSnapshot) -> Optional[JobPosting]:
        try:
            return self.extractor(page)
        except Exception as e:
            _log_warning(f"Extraction failed at {page.url}: {e}")
            return None

    def _notify(self, posting: Optional[JobPosting]) -> None:
        try:
            self.notify(posting)
        except Exception as e:
            # State is already updated; the next successful check re-notifies
            _log_warning(f"Job change notification failed: {e}")

    def refresh(self, page: PageSnapshot) -> Optional[JobPosting]:
        """
        Fresh on-demand extraction (e.g. a data request for the current tab).

        A successful extraction updates state like a page change. A failed one
        leaves state alone and the last known posting is returned.
        """
        posting = self._extract(page)
        if posting is not None:
            self._on_success(posting, page.url)
        return self.state.current_posting

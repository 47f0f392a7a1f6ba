"""Unit tests for job identity and JobTracker."""

import pytest

from joblens.contexts.intake.change_detector import (
    STALENESS_THRESHOLD_S,
    JobTracker,
    TrackerEvent,
    compute_identity,
)
from joblens.contexts.intake.job_data_structure import JobPosting, SiteType
from joblens.contexts.intake.page_snapshot import PageSnapshot

SEARCH_URL = "https://www.linkedin.com/jobs/search/?currentJobId=12345"
FEED_URL = "https://www.linkedin.com/feed/"


def make_posting(title="Senior Engineer", company="Acme Corp", url=SEARCH_URL):
    return JobPosting(
        title=title,
        url=url,
        site=SiteType.LINKEDIN,
        extracted_at="2024-05-01T10:00:00",
        company=company,
    )


class ScriptedExtractor:
    """Returns queued postings (or None) one per call."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0

    def __call__(self, page):
        self.calls += 1
        return self.results.pop(0)


def page_at(url):
    return PageSnapshot("<html><body></body></html>", url)


class TestComputeIdentity:
    """Test job identity keys."""

    @pytest.mark.unit
    def test_linkedin_view_id(self):
        posting = make_posting(url="https://www.linkedin.com/jobs/view/3812345678/?trk=abc")
        assert compute_identity(posting) == "li_view_3812345678"

    @pytest.mark.unit
    def test_linkedin_search_id(self):
        assert compute_identity(make_posting()) == "li_search_12345"

    @pytest.mark.unit
    def test_id_ignores_field_drift(self):
        assert compute_identity(make_posting(title="A")) == compute_identity(make_posting(title="B"))

    @pytest.mark.unit
    def test_signature_without_id(self):
        posting = make_posting(title="  Data Analyst ", company="GLOBEX", url="https://globex.com/careers/7")
        assert compute_identity(posting) == "https://globex.com/careers/7|data analyst|globex"

    @pytest.mark.unit
    def test_page_url_used_when_posting_has_none(self):
        posting = make_posting(url="")
        assert compute_identity(posting, page_url="https://www.linkedin.com/jobs/view/99") == "li_view_99"


class TestJobTracker:
    """Test new/updated/loading/stale decisions."""

    @pytest.mark.unit
    def test_new_then_updated_for_same_id(self, clock):
        """Test a title change under the same job ID updates instead of re-announcing."""
        notified = []
        extractor = ScriptedExtractor(make_posting(), make_posting(title="Senior Engineer II"))
        tracker = JobTracker(notify=notified.append, clock=clock, extractor=extractor)

        assert tracker.on_page_change(page_at(SEARCH_URL)) == TrackerEvent.NEW_JOB
        assert tracker.on_page_change(page_at(SEARCH_URL)) == TrackerEvent.UPDATED

        assert tracker.state.current_identity == "li_search_12345"
        assert tracker.current_posting.title == "Senior Engineer II"
        assert [p.title for p in notified] == ["Senior Engineer", "Senior Engineer II"]

    @pytest.mark.unit
    def test_different_job_is_new(self, clock):
        other = make_posting(url="https://www.linkedin.com/jobs/search/?currentJobId=777")
        tracker = JobTracker(clock=clock, extractor=ScriptedExtractor(make_posting(), other))

        tracker.on_page_change(page_at(SEARCH_URL))
        assert tracker.on_page_change(page_at(other.url)) == TrackerEvent.NEW_JOB
        assert tracker.state.current_identity == "li_search_777"

    @pytest.mark.unit
    def test_new_job_resets_analyzed(self, clock):
        other = make_posting(url="https://www.linkedin.com/jobs/view/1")
        tracker = JobTracker(clock=clock, extractor=ScriptedExtractor(make_posting(), make_posting(), other))

        tracker.on_page_change(page_at(SEARCH_URL))
        tracker.mark_analyzed()
        tracker.on_page_change(page_at(SEARCH_URL))
        assert tracker.state.analyzed is True

        tracker.on_page_change(page_at(other.url))
        assert tracker.state.analyzed is False

    @pytest.mark.unit
    def test_navigated_away_clears_state(self, clock):
        notified = []
        tracker = JobTracker(notify=notified.append, clock=clock, extractor=ScriptedExtractor(make_posting(), None))

        tracker.on_page_change(page_at(SEARCH_URL))
        assert tracker.on_page_change(page_at(FEED_URL)) == TrackerEvent.NAVIGATED_AWAY

        assert tracker.current_posting is None
        assert tracker.state.current_identity == ""
        assert notified[-1] is None

    @pytest.mark.unit
    def test_loading_keeps_state(self, clock):
        """Test a failed extraction on a job URL inside the threshold changes nothing."""
        notified = []
        tracker = JobTracker(notify=notified.append, clock=clock, extractor=ScriptedExtractor(make_posting(), None))

        tracker.on_page_change(page_at(SEARCH_URL))
        clock.advance(STALENESS_THRESHOLD_S - 1)

        assert tracker.on_page_change(page_at(SEARCH_URL)) == TrackerEvent.LOADING
        assert tracker.current_posting is not None
        assert None not in notified

    @pytest.mark.unit
    def test_stale_after_threshold(self, clock):
        notified = []
        extractor = ScriptedExtractor(make_posting(), None, None)
        tracker = JobTracker(notify=notified.append, clock=clock, extractor=extractor)

        tracker.on_page_change(page_at(SEARCH_URL))
        clock.advance(STALENESS_THRESHOLD_S + 0.5)

        assert tracker.on_page_change(page_at(SEARCH_URL)) == TrackerEvent.STALE
        assert tracker.current_posting is None
        assert notified[-1] is None

        # Stale fires once; afterwards the page is simply still loading
        assert tracker.on_page_change(page_at(SEARCH_URL)) == TrackerEvent.LOADING

    @pytest.mark.unit
    def test_loading_without_prior_success(self, clock):
        tracker = JobTracker(clock=clock, extractor=ScriptedExtractor(None))
        clock.advance(100)
        assert tracker.on_page_change(page_at(SEARCH_URL)) == TrackerEvent.LOADING

    @pytest.mark.unit
    def test_refresh_returns_current_posting(self, clock):
        tracker = JobTracker(clock=clock, extractor=ScriptedExtractor(make_posting(), None))

        assert tracker.refresh(page_at(SEARCH_URL)).title == "Senior Engineer"
        assert tracker.refresh(page_at(SEARCH_URL)).title == "Senior Engineer"

    @pytest.mark.unit
    def test_real_extraction(self, clock, make_linkedin_page):
        """Test the default extractor drives the tracker end to end."""
        tracker = JobTracker(clock=clock)

        first = PageSnapshot(make_linkedin_page(), SEARCH_URL)
        second = PageSnapshot(make_linkedin_page(title="Senior Engineer II"), SEARCH_URL)

        assert tracker.on_page_change(first) == TrackerEvent.NEW_JOB
        assert tracker.on_page_change(second) == TrackerEvent.UPDATED
        assert tracker.current_posting.title == "Senior Engineer II"


class TestFailureContainment:
    """Test collaborator failures stay inside the tracker."""

    @staticmethod
    def failing_notify(posting):
        raise OSError("state file is read-only")

    @pytest.mark.unit
    def test_notify_failure_still_reports_event(self, clock, make_linkedin_page):
        tracker = JobTracker(notify=self.failing_notify, clock=clock)

        event = tracker.on_page_change(PageSnapshot(make_linkedin_page(), SEARCH_URL))

        assert event == TrackerEvent.NEW_JOB
        assert tracker.state.current_identity == "li_search_12345"

    @pytest.mark.unit
    def test_notify_failure_when_leaving(self, clock):
        tracker = JobTracker(
            notify=self.failing_notify, clock=clock, extractor=ScriptedExtractor(make_posting(), None)
        )
        tracker.on_page_change(page_at(SEARCH_URL))

        assert tracker.on_page_change(page_at(FEED_URL)) == TrackerEvent.NAVIGATED_AWAY
        assert tracker.current_posting is None

    @pytest.mark.unit
    def test_extractor_error_is_loading(self, clock):
        def broken_extractor(page):
            raise ValueError("unexpected markup")

        tracker = JobTracker(clock=clock, extractor=broken_extractor)
        assert tracker.on_page_change(page_at(SEARCH_URL)) == TrackerEvent.LOADING


class TestRefresh:
    """Test on-demand extraction for job data requests."""

    @pytest.mark.unit
    def test_failed_refresh_keeps_last_posting_off_job_page(self, clock):
        notified = []
        tracker = JobTracker(
            notify=notified.append, clock=clock, extractor=ScriptedExtractor(make_posting(), None)
        )
        tracker.on_page_change(page_at(SEARCH_URL))

        assert tracker.refresh(page_at(FEED_URL)).title == "Senior Engineer"
        assert tracker.state.current_identity == "li_search_12345"
        assert notified == [make_posting()]

    @pytest.mark.unit
    def test_refresh_picks_up_fresher_fields(self, clock):
        tracker = JobTracker(
            clock=clock, extractor=ScriptedExtractor(make_posting(), make_posting(title="Staff Engineer"))
        )
        tracker.on_page_change(page_at(SEARCH_URL))

        assert tracker.refresh(page_at(SEARCH_URL)).title == "Staff Engineer"

    @pytest.mark.unit
    def test_refresh_without_any_job(self, clock):
        tracker = JobTracker(clock=clock, extractor=ScriptedExtractor(None))
        assert tracker.refresh(page_at(FEED_URL)) is None

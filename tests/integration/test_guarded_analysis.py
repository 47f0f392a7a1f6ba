"""
Integration test for the guarded analysis call.
Tests: saved resume + extracted job -> message channel -> coordinator ->
cache / quota ledger / backend (httpx MockTransport) -> persisted state.
"""

import httpx
import pytest

from joblens.contexts.analysis.channel import MessageChannel
from joblens.contexts.analysis.coordinator import Coordinator
from joblens.contexts.analysis.messages import AnalyzeJob, GetRateLimitStatus
from joblens.contexts.analysis.quota_ledger import DAILY_LIMIT, QUOTA_KEY, QuotaLedger
from joblens.contexts.analysis.storage import get_analysis_history, load_resume, save_resume
from joblens.contexts.intake.job_extractor import try_extract_job_data
from joblens.contexts.intake.page_snapshot import PageSnapshot
from joblens.contexts.resume.resume_parser import parse_resume
from joblens.utils.kv_store import JsonFileStore

DAY = "2024-05-01"
JOB_URL = "https://www.linkedin.com/jobs/view/3812345678/"

RESUME = """Jane Smith
jane@example.com
Skills: Python, Docker, AWS
Experience
Backend Engineer 2019-2024
"""


@pytest.fixture
def state_store(tmp_path):
    store = JsonFileStore(tmp_path / "state.json")
    document = parse_resume(RESUME)
    save_resume(store, document.raw, document.parsed)
    return store


@pytest.fixture
def channel(state_store, backend):
    coordinator = Coordinator(
        state_store,
        client_factory=backend.client_factory,
        ledger=QuotaLedger(state_store, today=lambda: DAY),
    )
    return MessageChannel(coordinator.handle, timeout=5)


def analyze_message(store, posting):
    return AnalyzeJob(job_data=posting.to_dict(), resume_text=load_resume(store).raw, url=posting.url)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_analysis_then_cache(channel, state_store, backend, make_linkedin_page):
    """Test the first request spends quota and the repeat is served from cache."""
    posting = try_extract_job_data(PageSnapshot(make_linkedin_page(), JOB_URL))
    message = analyze_message(state_store, posting)

    first = await channel.request(message)
    second = await channel.request(message)

    assert first.success and not first.from_cache
    assert second.success and second.from_cache
    assert first.data == second.data
    assert len(backend.requests) == 1

    status = await channel.request(GetRateLimitStatus())
    assert status.data["remaining"] == DAILY_LIMIT - 1
    assert get_analysis_history(state_store)[0]["jobTitle"] == "Senior Engineer"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_exhausted_quota_blocks_network(channel, state_store, backend, make_linkedin_page):
    state_store.set({QUOTA_KEY: {"date": DAY, "remaining": 0}})
    posting = try_extract_job_data(PageSnapshot(make_linkedin_page(), JOB_URL))

    result = await channel.request(analyze_message(state_store, posting))

    assert not result.success
    assert result.rate_limited
    assert backend.requests == []
    assert state_store.get(QUOTA_KEY)[QUOTA_KEY]["remaining"] == 0


@pytest.mark.integration
@pytest.mark.asyncio
async def test_backend_rejects_short_description(channel, state_store, backend, make_linkedin_page):
    """Test the backend's validation error reads as "still loading" and costs no quota."""
    backend.status = 422
    backend.body = {"detail": [{"loc": ["body", "jobData"], "msg": "description must be at least 100 characters"}]}
    posting = try_extract_job_data(PageSnapshot(make_linkedin_page(), JOB_URL))

    result = await channel.request(analyze_message(state_store, posting))

    assert not result.success
    assert "Job description is still loading" in result.error
    assert "Server error" not in result.error
    assert not result.rate_limited
    assert state_store.get(QUOTA_KEY)[QUOTA_KEY]["remaining"] == DAILY_LIMIT


@pytest.mark.integration
@pytest.mark.asyncio
async def test_backend_down_costs_nothing(channel, state_store, backend, make_linkedin_page):
    backend.error = httpx.ConnectError("connection refused")
    posting = try_extract_job_data(PageSnapshot(make_linkedin_page(), JOB_URL))

    result = await channel.request(analyze_message(state_store, posting))

    assert not result.success
    assert "Cannot reach backend" in result.error
    assert state_store.get(QUOTA_KEY)[QUOTA_KEY]["remaining"] == DAILY_LIMIT

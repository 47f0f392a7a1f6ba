"""Unit tests for wire message parsing and results."""

import pytest

from joblens.contexts.analysis.messages import (
    AnalyzeAndShow,
    AnalyzeJob,
    ClearCache,
    GetCachedResult,
    GetJobData,
    GetRateLimitStatus,
    InvalidMessage,
    MessageResult,
    MessageType,
    ShowError,
    VerifyBackendUrl,
    parse_message,
    to_wire,
)


class TestParseMessage:
    """Test request validation."""

    @pytest.mark.unit
    def test_analyze_job(self, job_data):
        message = parse_message(
            {"type": "ANALYZE_JOB", "payload": {"jobData": job_data, "resumeText": "resume"}}
        )

        assert isinstance(message, AnalyzeJob)
        assert message.resume_text == "resume"
        # url falls back to the job's own url
        assert message.url == job_data["url"]

    @pytest.mark.unit
    def test_analyze_and_show(self, job_data):
        message = parse_message(
            {
                "type": "ANALYZE_AND_SHOW",
                "payload": {"jobData": job_data, "resumeText": "resume", "url": "https://x.io/j", "tabId": 4},
            }
        )

        assert message == AnalyzeAndShow(job_data=job_data, resume_text="resume", url="https://x.io/j", tab_id=4)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"jobData": {"title": "x"}},
            {"resumeText": "resume"},
            {"jobData": {}, "resumeText": "resume"},
            {"jobData": {"title": "x"}, "resumeText": "   "},
            {"jobData": "not a dict", "resumeText": "resume"},
        ],
    )
    def test_analyze_missing_payload(self, payload):
        with pytest.raises(InvalidMessage, match="Missing job or resume payload."):
            parse_message({"type": "ANALYZE_JOB", "payload": payload})

    @pytest.mark.unit
    def test_simple_requests(self):
        assert parse_message({"type": "GET_RATE_LIMIT_STATUS"}) == GetRateLimitStatus()
        assert parse_message({"type": "CLEAR_CACHE", "payload": {}}) == ClearCache()
        assert parse_message({"type": "GET_CACHED_RESULT", "payload": {"url": "u"}}) == GetCachedResult(url="u")
        assert parse_message({"type": "GET_JOB_DATA", "payload": {"tabId": 2}}) == GetJobData(tab_id=2)

    @pytest.mark.unit
    def test_verify_backend_requires_url(self):
        assert parse_message(
            {"type": "VERIFY_BACKEND_URL", "payload": {"url": "http://localhost:8000"}}
        ) == VerifyBackendUrl(url="http://localhost:8000")

        with pytest.raises(InvalidMessage, match="url"):
            parse_message({"type": "VERIFY_BACKEND_URL", "payload": {}})

    @pytest.mark.unit
    @pytest.mark.parametrize("raw", [{"type": "LAUNCH_ROCKET"}, {}, {"payload": {}}])
    def test_unknown_type(self, raw):
        with pytest.raises(InvalidMessage, match="Unknown message type"):
            parse_message(raw)

    @pytest.mark.unit
    def test_not_an_object(self):
        with pytest.raises(InvalidMessage, match="Message must be an object"):
            parse_message(["ANALYZE_JOB"])

    @pytest.mark.unit
    def test_payload_not_an_object(self):
        with pytest.raises(InvalidMessage, match="payload must be an object"):
            parse_message({"type": "CLEAR_CACHE", "payload": [1]})

    @pytest.mark.unit
    def test_notifications_are_not_requests(self):
        with pytest.raises(InvalidMessage, match="notification"):
            parse_message({"type": "SHOW_RESULT", "payload": {"data": {}}})


class TestWireFormat:
    """Test outgoing wire shapes."""

    @pytest.mark.unit
    def test_to_wire_round_trip(self, job_data):
        message = AnalyzeJob(job_data=job_data, resume_text="resume", url=job_data["url"])
        assert parse_message(to_wire(message)) == message

    @pytest.mark.unit
    def test_notification_wire(self):
        assert to_wire(ShowError(error="Daily limit", rate_limited=True)) == {
            "type": MessageType.SHOW_ERROR.value,
            "payload": {"error": "Daily limit", "rateLimited": True},
        }


class TestMessageResult:
    """Test the uniform response shape."""

    @pytest.mark.unit
    def test_ok(self):
        result = MessageResult.ok({"a": 1}, from_cache=True)
        assert result.to_dict() == {"success": True, "data": {"a": 1}, "fromCache": True}

    @pytest.mark.unit
    def test_queued(self):
        assert MessageResult.ok(queued=True).to_dict() == {"success": True, "queued": True}

    @pytest.mark.unit
    def test_failure(self):
        result = MessageResult.failure("Daily analysis limit reached", rate_limited=True)
        assert result.to_dict() == {
            "success": False,
            "error": "Daily analysis limit reached",
            "rateLimited": True,
        }

"""
Messages exchanged between execution contexts.

Requests travel to the coordinator; notifications travel to a tab. On the
wire every message is {"type": "<TYPE>", "payload": {...}} with camelCase
payload keys. parse_message() is the only way in: it validates the type and
payload shape and returns one of the request dataclasses below.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Union


class MessageType(str, Enum):
    ANALYZE_JOB = "ANALYZE_JOB"
    ANALYZE_AND_SHOW = "ANALYZE_AND_SHOW"
    GET_RATE_LIMIT_STATUS = "GET_RATE_LIMIT_STATUS"
    CLEAR_CACHE = "CLEAR_CACHE"
    GET_CACHED_RESULT = "GET_CACHED_RESULT"
    VERIFY_BACKEND_URL = "VERIFY_BACKEND_URL"
    GET_JOB_DATA = "GET_JOB_DATA"
    # Tab notifications
    OPEN_OVERLAY_LOADING = "OPEN_OVERLAY_LOADING"
    SHOW_RESULT = "SHOW_RESULT"
    SHOW_ERROR = "SHOW_ERROR"


class InvalidMessage(ValueError):
    """Raised for unknown message types and malformed payloads."""


# =============================================================================
# REQUESTS
# =============================================================================


@dataclass(frozen=True)
class AnalyzeJob:
    type: ClassVar[MessageType] = MessageType.ANALYZE_JOB
    job_data: Dict[str, Any]
    resume_text: str
    url: str = ""

    def payload(self) -> Dict[str, Any]:
        return {"jobData": self.job_data, "resumeText": self.resume_text, "url": self.url}


@dataclass(frozen=True)
class AnalyzeAndShow:
    type: ClassVar[MessageType] = MessageType.ANALYZE_AND_SHOW
    job_data: Dict[str, Any]
    resume_text: str
    url: str = ""
    tab_id: Optional[Any] = None

    def payload(self) -> Dict[str, Any]:
        return {
            "jobData": self.job_data,
            "resumeText": self.resume_text,
            "url": self.url,
            "tabId": self.tab_id,
        }


@dataclass(frozen=True)
class GetRateLimitStatus:
    type: ClassVar[MessageType] = MessageType.GET_RATE_LIMIT_STATUS

    def payload(self) -> Dict[str, Any]:
        return {}


@dataclass(frozen=True)
class ClearCache:
    type: ClassVar[MessageType] = MessageType.CLEAR_CACHE

    def payload(self) -> Dict[str, Any]:
        return {}


@dataclass(frozen=True)
class GetCachedResult:
    type: ClassVar[MessageType] = MessageType.GET_CACHED_RESULT
    url: str

    def payload(self) -> Dict[str, Any]:
        return {"url": self.url}


@dataclass(frozen=True)
class VerifyBackendUrl:
    type: ClassVar[MessageType] = MessageType.VERIFY_BACKEND_URL
    url: str

    def payload(self) -> Dict[str, Any]:
        return {"url": self.url}


@dataclass(frozen=True)
class GetJobData:
    type: ClassVar[MessageType] = MessageType.GET_JOB_DATA
    tab_id: Optional[Any] = None

    def payload(self) -> Dict[str, Any]:
        return {"tabId": self.tab_id}


Request = Union[
    AnalyzeJob,
    AnalyzeAndShow,
    GetRateLimitStatus,
    ClearCache,
    GetCachedResult,
    VerifyBackendUrl,
    GetJobData,
]


# =============================================================================
# TAB NOTIFICATIONS
# =============================================================================


@dataclass(frozen=True)
class OpenOverlayLoading:
    type: ClassVar[MessageType] = MessageType.OPEN_OVERLAY_LOADING

    def payload(self) -> Dict[str, Any]:
        return {}


@dataclass(frozen=True)
class ShowResult:
    type: ClassVar[MessageType] = MessageType.SHOW_RESULT
    data: Dict[str, Any] = field(default_factory=dict)

    def payload(self) -> Dict[str, Any]:
        return {"data": self.data}


@dataclass(frozen=True)
class ShowError:
    type: ClassVar[MessageType] = MessageType.SHOW_ERROR
    error: str
    rate_limited: bool = False

    def payload(self) -> Dict[str, Any]:
        return {"error": self.error, "rateLimited": self.rate_limited}


Notification = Union[OpenOverlayLoading, ShowResult, ShowError]


# =============================================================================
# RESULTS
# =============================================================================


@dataclass
class MessageResult:
    """
    Uniform response to every request.

    Failures carry a user-facing error message, never a stack trace.
    """

    success: bool
    data: Any = None
    error: str = ""
    rate_limited: bool = False
    from_cache: bool = False
    queued: bool = False

    @classmethod
    def ok(cls, data: Any = None, **flags: bool) -> "MessageResult":
        return cls(success=True, data=data, **flags)

    @classmethod
    def failure(cls, error: str, rate_limited: bool = False) -> "MessageResult":
        return cls(success=False, error=error, rate_limited=rate_limited)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"success": self.success}
        if self.data is not None:
            result["data"] = self.data
        if self.error:
            result["error"] = self.error
        if self.rate_limited:
            result["rateLimited"] = True
        if self.from_cache:
            result["fromCache"] = True
        if self.queued:
            result["queued"] = True
        return result


# =============================================================================
# WIRE CONVERSION
# =============================================================================


def to_wire(message: Union[Request, Notification]) -> Dict[str, Any]:
    return {"type": message.type.value, "payload": message.payload()}


def _require_str(payload: Dict[str, Any], key: str, message_type: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidMessage(f"{message_type} requires a non-empty '{key}'")
    return value


def _analysis_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    job_data = payload.get("jobData")
    resume_text = payload.get("resumeText")
    if not isinstance(job_data, dict) or not job_data or not isinstance(resume_text, str) or not resume_text.strip():
        raise InvalidMessage("Missing job or resume payload.")
    url = payload.get("url") or job_data.get("url") or ""
    return {"job_data": job_data, "resume_text": resume_text, "url": str(url)}


def parse_message(raw: Any) -> Request:
    """
    Validate a wire message and build its request dataclass.

    Raises:
        InvalidMessage: Unknown type, notification type, or malformed payload
    """
    if not isinstance(raw, dict):
        raise InvalidMessage("Message must be an object")

    try:
        message_type = MessageType(raw.get("type"))
    except ValueError:
        raise InvalidMessage("Unknown message type") from None

    payload = raw.get("payload") or {}
    if not isinstance(payload, dict):
        raise InvalidMessage(f"{message_type.value} payload must be an object")

    if message_type is MessageType.ANALYZE_JOB:
        return AnalyzeJob(**_analysis_fields(payload))
    if message_type is MessageType.ANALYZE_AND_SHOW:
        return AnalyzeAndShow(**_analysis_fields(payload), tab_id=payload.get("tabId"))
    if message_type is MessageType.GET_RATE_LIMIT_STATUS:
        return GetRateLimitStatus()
    if message_type is MessageType.CLEAR_CACHE:
        return ClearCache()
    if message_type is MessageType.GET_CACHED_RESULT:
        return GetCachedResult(url=str(payload.get("url") or ""))
    if message_type is MessageType.VERIFY_BACKEND_URL:
        return VerifyBackendUrl(url=_require_str(payload, "url", message_type.value))
    if message_type is MessageType.GET_JOB_DATA:
        return GetJobData(tab_id=payload.get("tabId"))

    raise InvalidMessage(f"{message_type.value} is a tab notification, not a request")

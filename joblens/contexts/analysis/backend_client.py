"""
HTTP client for the analysis backend.

Two endpoints:
    POST {backend}/analyze  {"jobData": ..., "resumeText": ...}  (60 s)
    GET  {backend}/health                                        (10 s)

Transport failures become BackendUnreachable, non-2xx answers become
BackendRejected (or DescriptionStillLoading for the backend's "description
too short" validation error). Nothing here retries; the caller decides.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import httpx
from dotenv import load_dotenv

from joblens.contexts.analysis.exceptions import (
    BackendRejected,
    BackendUnreachable,
    DescriptionStillLoading,
    InvalidBackendUrl,
)
from joblens.contexts.analysis.logger import _log_debug, _log_info, _log_warning

load_dotenv()
DEFAULT_BACKEND_URL = os.getenv("JOBLENS_BACKEND_URL", "http://localhost:8000")

ANALYZE_TIMEOUT_S = 60.0
HEALTH_TIMEOUT_S = 10.0

# Longest response body quoted back in an error message
MAX_ERROR_BODY_CHARS = 300


def normalize_backend_url(url: str) -> str:
    """
    Trim whitespace and trailing slashes; require an absolute http(s) URL.

    Raises:
        InvalidBackendUrl: Empty, relative, or non-http(s) URL
    """
    cleaned = (url or "").strip().rstrip("/")
    parsed = urlparse(cleaned)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidBackendUrl(url)
    return cleaned


@dataclass(frozen=True)
class AnalysisResult:
    """
    Read-only view over a backend analysis result.

    The raw dict is what gets cached and returned to callers; this view only
    gives typed access to the fields the scripts print.
    """

    match_percentage: float = 0.0
    matched_skills: tuple[str, ...] = ()
    missing_skills: tuple[str, ...] = ()
    ats_keywords_missing: tuple[str, ...] = ()
    hidden_requirements: tuple[str, ...] = ()
    resume_improvement_suggestions: tuple[str, ...] = ()
    recommended_projects: tuple[Any, ...] = ()
    confidence_score: float = 0.0
    experience_required: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisResult":
        def _list(key):
            value = data.get(key) or ()
            return tuple(value) if isinstance(value, (list, tuple)) else (value,)

        def _number(key):
            try:
                return float(data.get(key) or 0)
            except (TypeError, ValueError):
                return 0.0

        return cls(
            match_percentage=_number("match_percentage"),
            matched_skills=_list("matched_skills"),
            missing_skills=_list("missing_skills"),
            ats_keywords_missing=_list("ats_keywords_missing"),
            hidden_requirements=_list("hidden_requirements"),
            resume_improvement_suggestions=_list("resume_improvement_suggestions"),
            recommended_projects=_list("recommended_projects"),
            confidence_score=_number("confidence_score"),
            experience_required=str(data.get("experience_required") or ""),
            raw=dict(data),
        )


def is_description_too_short(response: httpx.Response) -> bool:
    """
    True for a 422 whose validation details point at a too-short description.

    Validation errors look like {"detail": [{"loc": [...], "msg": ..., "type": ...}]}.
    """
    if response.status_code != 422:
        return False
    try:
        body = response.json()
    except ValueError:
        return False
    detail = body.get("detail") if isinstance(body, dict) else None
    if not isinstance(detail, list):
        return False

    for item in detail:
        if not isinstance(item, dict):
            continue
        location = " ".join(str(part) for part in item.get("loc") or ())
        text = f"{location} {item.get('msg', '')} {item.get('type', '')}".lower()
        if "description" in text and ("short" in text or "at least" in text):
            return True
    return False


class BackendClient:
    """
    Async client for one backend base URL.

    Args:
        base_url: Backend root (normalized on construction)
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BACKEND_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        analyze_timeout: float = ANALYZE_TIMEOUT_S,
        health_timeout: float = HEALTH_TIMEOUT_S,
    ):
        self.base_url = normalize_backend_url(base_url)
        self.transport = transport
        self.analyze_timeout = analyze_timeout
        self.health_timeout = health_timeout

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, transport=self.transport, timeout=timeout)

    async def analyze(self, job_data: Dict[str, Any], resume_text: str) -> Dict[str, Any]:
        """
        Request a match analysis.

        Returns:
            Result dict as returned by the backend

        Raises:
            BackendUnreachable: Connection failure or timeout
            DescriptionStillLoading: Backend rejected the description as too short
            BackendRejected: Any other non-2xx answer, or a non-JSON body
        """
        _log_info(f"POST {self.base_url}/analyze ({job_data.get('title', '')!r})")
        try:
            async with self._client(self.analyze_timeout) as client:
                response = await client.post(
                    "/analyze", json={"jobData": job_data, "resumeText": resume_text}
                )
        except httpx.TimeoutException as e:
            _log_warning(f"Analyze timed out after {self.analyze_timeout:g}s")
            raise BackendUnreachable(self.base_url, e) from e
        except httpx.RequestError as e:
            _log_warning(f"Analyze request failed: {e}")
            raise BackendUnreachable(self.base_url, e) from e

        if not response.is_success:
            if is_description_too_short(response):
                raise DescriptionStillLoading(response.status_code, response.text)
            raise BackendRejected(response.status_code, response.text[:MAX_ERROR_BODY_CHARS])

        try:
            result = response.json()
        except ValueError as e:
            raise BackendRejected(response.status_code, message="Backend returned invalid JSON") from e
        if not isinstance(result, dict):
            raise BackendRejected(response.status_code, message="Backend returned an unexpected result")

        _log_debug(f"Analyze succeeded: match {result.get('match_percentage')}")
        return result

    async def health(self) -> Dict[str, Any]:
        """
        Check the backend's /health endpoint.

        Returns:
            {"success": True, "backendUrl", "status", "service"}

        Raises:
            BackendUnreachable, BackendRejected
        """
        try:
            async with self._client(self.health_timeout) as client:
                response = await client.get("/health")
        except httpx.RequestError as e:
            raise BackendUnreachable(self.base_url, e) from e

        if not response.is_success:
            raise BackendRejected(response.status_code, response.text[:MAX_ERROR_BODY_CHARS])

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        return {
            "success": True,
            "backendUrl": self.base_url,
            "status": body.get("status") or "ok",
            "service": body.get("service") or "unknown",
        }

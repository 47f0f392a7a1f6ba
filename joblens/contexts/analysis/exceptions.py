"""Exceptions raised around the guarded analysis call."""

from typing import Optional


class AnalysisError(Exception):
    """
    Base class for analysis failures.

    Messages are user-facing. rate_limited tells the caller to show the
    quota message rather than a generic error.
    """

    rate_limited: bool = False


class QuotaExceeded(AnalysisError):
    """Raised when today's analysis quota is used up. No network call was made."""

    rate_limited = True

    def __init__(self, daily_limit: int):
        self.daily_limit = daily_limit
        super().__init__(
            f"Daily analysis limit reached ({daily_limit}/day). Resets at midnight."
        )


class InvalidBackendUrl(AnalysisError):
    """Raised when a backend URL is not an absolute http(s) URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Invalid backend URL: {url!r}. Use a full http(s) URL.")


class BackendUnreachable(AnalysisError):
    """
    Raised when the backend cannot be reached or does not answer in time.

    Attributes:
        backend_url: Base URL that was tried
        original_error: Transport exception
    """

    def __init__(self, backend_url: str, original_error: Optional[Exception] = None):
        self.backend_url = backend_url
        self.original_error = original_error
        detail = f" ({original_error})" if original_error else ""
        super().__init__(
            f"Cannot reach backend at {backend_url}{detail}. Check that it is running."
        )


class BackendRejected(AnalysisError):
    """Raised when the backend answers with a non-2xx status."""

    def __init__(self, status: int, body: str = "", message: Optional[str] = None):
        self.status = status
        self.body = body
        if message is None:
            message = f"Server error {status}: {body}" if body else f"Server error {status}"
        super().__init__(message)


class DescriptionStillLoading(BackendRejected):
    """
    Raised when the job description is too short to analyze yet.

    Comes either from the local pre-flight check or from the backend's 422
    validation response; either way the fix is to wait and retry.
    """

    def __init__(self, status: int = 422, body: str = ""):
        super().__init__(
            status,
            body,
            message=(
                "Job description is still loading. Scroll the job details once, "
                "wait a few seconds, then try again."
            ),
        )

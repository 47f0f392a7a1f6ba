"""
Analysis coordinator.

Owns the guarded external call: result cache first, then the daily quota,
then the backend. A debited unit is credited back whenever the call (or
anything after the debit) fails, so only successful analyses consume quota.

handle() is the message boundary. It accepts wire dicts or request
dataclasses and always answers with a MessageResult; no exception escapes.
"""

import asyncio
import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from joblens.contexts.analysis.backend_client import BackendClient, normalize_backend_url
from joblens.contexts.analysis.exceptions import AnalysisError, DescriptionStillLoading, QuotaExceeded
from joblens.contexts.analysis.logger import _log_debug, _log_error, _log_info, _log_success
from joblens.contexts.analysis.messages import (
    AnalyzeAndShow,
    AnalyzeJob,
    ClearCache,
    GetCachedResult,
    GetJobData,
    GetRateLimitStatus,
    InvalidMessage,
    MessageResult,
    Notification,
    OpenOverlayLoading,
    Request,
    ShowError,
    ShowResult,
    VerifyBackendUrl,
    parse_message,
)
from joblens.contexts.analysis.quota_ledger import QuotaLedger
from joblens.contexts.analysis.result_cache import ResultCache
from joblens.contexts.analysis.storage import (
    get_current_job_for_tab,
    get_settings,
    save_analysis_to_history,
)
from joblens.contexts.intake.extraction_patterns import MIN_DESCRIPTION_CHARS
from joblens.contexts.intake.job_data_structure import JobPosting
from joblens.contexts.intake.normalizer import collapse_whitespace
from joblens.utils.kv_store import KeyValueStore

ClientFactory = Callable[[str], BackendClient]
TabSender = Callable[[Any, Notification], Optional[Awaitable[None]]]
JobSource = Callable[[Any], Optional[JobPosting]]


@dataclass(frozen=True)
class AnalysisOutcome:
    """Backend result plus whether it came from the cache."""

    result: Dict[str, Any]
    from_cache: bool = False

    def to_data(self) -> Dict[str, Any]:
        return {**self.result, "fromCache": self.from_cache}


def preflight_description(job_data: Union[JobPosting, Dict[str, Any]]) -> None:
    """
    Refuse to send a description that is still loading.

    Raises:
        DescriptionStillLoading: Description under MIN_DESCRIPTION_CHARS once
            whitespace is collapsed
    """
    description = job_data.description if isinstance(job_data, JobPosting) else job_data.get("description", "")
    if len(collapse_whitespace(description or "")) < MIN_DESCRIPTION_CHARS:
        raise DescriptionStillLoading(status=0)


class Coordinator:
    """
    Routes requests and guards the backend call with the ledger and cache.

    Args:
        store: Shared key-value store (quota, cache, settings, history)
        client_factory: Builds a BackendClient for a base URL
        tab_sender: Delivers notifications to a tab; delivery failures are ignored
        job_source: Returns the freshest posting for a tab (GET_JOB_DATA); falls
            back to the last posting stored for that tab
        ledger / cache: Override the defaults built over store
    """

    def __init__(
        self,
        store: KeyValueStore,
        client_factory: ClientFactory = BackendClient,
        tab_sender: Optional[TabSender] = None,
        job_source: Optional[JobSource] = None,
        ledger: Optional[QuotaLedger] = None,
        cache: Optional[ResultCache] = None,
    ):
        self.store = store
        self.client_factory = client_factory
        self.tab_sender = tab_sender
        self.job_source = job_source
        self.ledger = ledger or QuotaLedger(store)
        self.cache = cache or ResultCache(store)
        self._pending: set[asyncio.Task] = set()

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    async def analyze_job(
        self, job_data: Dict[str, Any], resume_text: str, url: str = ""
    ) -> AnalysisOutcome:
        """
        Cached result if there is one; otherwise spend one unit of quota on a
        backend analysis and cache it.

        Raises:
            DescriptionStillLoading: Description too short (nothing debited)
            QuotaExceeded: No quota left (no network call made)
            AnalysisError: Backend failure (quota credited back)
        """
        url = url or job_data.get("url", "")
        cached = self.cache.get(url)
        if cached is not None:
            _log_info(f"Cache hit for {url}")
            return AnalysisOutcome(result=cached, from_cache=True)

        preflight_description(job_data)

        if not self.ledger.check_and_debit():
            raise QuotaExceeded(self.ledger.daily_limit)

        try:
            backend_url = normalize_backend_url(get_settings(self.store)["backendUrl"])
            client = self.client_factory(backend_url)
            result = await client.analyze(job_data, resume_text)
            save_analysis_to_history(self.store, job_data, result)
            self.cache.put(url, result)
        except (Exception, asyncio.CancelledError):
            self.ledger.credit()
            raise

        _log_success(f"Analyzed {job_data.get('title', '')!r}: match {result.get('match_percentage')}")
        return AnalysisOutcome(result=result, from_cache=False)

    async def analyze_and_show(
        self, job_data: Dict[str, Any], resume_text: str, url: str = "", tab_id: Any = None
    ) -> MessageResult:
        """
        Queue an analysis whose outcome is pushed to a tab. Returns immediately.

        The tab is told to show a loading state first, then receives
        ShowResult or ShowError.
        """
        if not job_data or not resume_text:
            return MessageResult.failure("Missing job or resume payload.")

        task = asyncio.get_running_loop().create_task(
            self._analyze_and_notify(job_data, resume_text, url, tab_id)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return MessageResult.ok(queued=True)

    async def _analyze_and_notify(
        self, job_data: Dict[str, Any], resume_text: str, url: str, tab_id: Any
    ) -> None:
        await self._send_to_tab(tab_id, OpenOverlayLoading())
        try:
            outcome = await self.analyze_job(job_data, resume_text, url)
        except AnalysisError as e:
            await self._send_to_tab(tab_id, ShowError(error=str(e), rate_limited=e.rate_limited))
            return
        except Exception as e:
            _log_error(f"Queued analysis failed: {e}")
            await self._send_to_tab(tab_id, ShowError(error=str(e) or "Analysis failed"))
            return
        await self._send_to_tab(tab_id, ShowResult(data=outcome.to_data()))

    async def _send_to_tab(self, tab_id: Any, notification: Notification) -> None:
        if self.tab_sender is None or tab_id is None:
            return
        try:
            delivered = self.tab_sender(tab_id, notification)
            if inspect.isawaitable(delivered):
                await delivered
        except Exception as e:
            # Closed tabs and missing listeners are expected
            _log_debug(f"Could not deliver {notification.type.value} to tab {tab_id}: {e}")

    async def drain(self) -> None:
        """Wait for every queued analysis to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def verify_backend_url(self, url: str) -> Dict[str, Any]:
        """
        Normalize url and check its /health endpoint.

        Raises:
            InvalidBackendUrl, BackendUnreachable, BackendRejected
        """
        client = self.client_factory(normalize_backend_url(url))
        return await client.health()

    def job_data(self, tab_id: Any = None) -> Optional[JobPosting]:
        if self.job_source is not None:
            return self.job_source(tab_id)
        return get_current_job_for_tab(self.store, tab_id)

    # =========================================================================
    # MESSAGE BOUNDARY
    # =========================================================================

    async def handle(self, message: Union[Request, Dict[str, Any]]) -> MessageResult:
        """Dispatch one request. Never raises."""
        try:
            request = parse_message(message) if isinstance(message, dict) else message
            return await self._dispatch(request)
        except InvalidMessage as e:
            return MessageResult.failure(str(e))
        except AnalysisError as e:
            return MessageResult.failure(str(e), rate_limited=e.rate_limited)
        except Exception as e:
            _log_error(f"Request failed: {e}")
            return MessageResult.failure(str(e) or "Request failed")

    async def _dispatch(self, request: Request) -> MessageResult:
        if isinstance(request, AnalyzeJob):
            outcome = await self.analyze_job(request.job_data, request.resume_text, request.url)
            return MessageResult.ok(outcome.result, from_cache=outcome.from_cache)
        if isinstance(request, AnalyzeAndShow):
            return await self.analyze_and_show(
                request.job_data, request.resume_text, request.url, request.tab_id
            )
        if isinstance(request, GetRateLimitStatus):
            return MessageResult.ok(self.ledger.status().to_dict())
        if isinstance(request, ClearCache):
            return MessageResult.ok({"cleared": self.cache.clear()})
        if isinstance(request, GetCachedResult):
            return MessageResult.ok(self.cache.get(request.url))
        if isinstance(request, VerifyBackendUrl):
            return MessageResult.ok(await self.verify_backend_url(request.url))
        if isinstance(request, GetJobData):
            posting = self.job_data(request.tab_id)
            return MessageResult.ok(posting.to_dict() if posting else None)
        raise InvalidMessage("Unknown message type")

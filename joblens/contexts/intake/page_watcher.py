"""
Re-extraction triggers for single-page-app job sites.

No single signal reliably reports an in-app navigation, so three run side
by side against one JobTracker:

- on_navigation(): history push/replace/pop hooks call this
- on_mutation(): DOM mutation callbacks, debounced
- a URL poll loop, as a safety net for navigations neither hook saw

Navigation and URL-poll signals schedule several checks at short delays so
content that loads after the URL changes is still picked up. All callbacks
run on one asyncio loop, so each check is atomic with respect to tracker
state.
"""

import asyncio
from typing import Callable, Optional

from joblens.contexts.intake.change_detector import JobTracker, TrackerEvent
from joblens.contexts.intake.logger import _log_debug, _log_warning
from joblens.contexts.intake.page_snapshot import PageSnapshot

MUTATION_DEBOUNCE_S = 0.8
URL_POLL_INTERVAL_S = 1.5
RECHECK_DELAYS_S = (0.4, 1.2, 3.0)


class PageWatcher:
    """
    Drives a JobTracker from page-change signals.

    Args:
        tracker: Tracker to update
        page_source: Returns a snapshot of the page as currently rendered
        current_url: Cheap URL read for polling (defaults to page_source().url)
    """

    def __init__(
        self,
        tracker: JobTracker,
        page_source: Callable[[], PageSnapshot],
        current_url: Optional[Callable[[], str]] = None,
        debounce: float = MUTATION_DEBOUNCE_S,
        poll_interval: float = URL_POLL_INTERVAL_S,
        recheck_delays: tuple[float, ...] = RECHECK_DELAYS_S,
    ):
        self.tracker = tracker
        self.page_source = page_source
        self.current_url = current_url or (lambda: page_source().url)
        self.debounce = debounce
        self.poll_interval = poll_interval
        self.recheck_delays = recheck_delays

        self._last_url: Optional[str] = None
        self._poll_task: Optional[asyncio.Task] = None
        self._debounce_task: Optional[asyncio.Task] = None
        self._pending: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    async def start(self) -> Optional[TrackerEvent]:
        """Check the page once and start the URL poll loop."""
        self._last_url = self.current_url()
        event = self.check_now()
        self._poll_task = asyncio.get_running_loop().create_task(self._poll_loop())
        return event

    async def stop(self) -> None:
        """Cancel the poll loop and every pending check."""
        tasks = list(self._pending)
        if self._poll_task is not None:
            tasks.append(self._poll_task)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        self._pending.clear()
        self._debounce_task = None
        self._poll_task = None

    def check_now(self) -> Optional[TrackerEvent]:
        """
        Snapshot the page and run one tracker evaluation.

        Returns None if the page could not be read; never raises.
        """
        try:
            page = self.page_source()
        except Exception as e:
            _log_warning(f"Could not read page: {e}")
            return None
        event = self.tracker.on_page_change(page)
        _log_debug(f"Page check at {page.url}: {event.value}")
        return event

    def on_navigation(self) -> None:
        """History navigation hook (push/replace/pop)."""
        self.schedule_page_check()

    def on_mutation(self) -> None:
        """Structural DOM change; restarts the debounce timer."""
        if self._debounce_task is not None:
            self._debounce_task.cancel()
        self._debounce_task = self._spawn(self._check_after(self.debounce))

    def schedule_page_check(self) -> None:
        """Queue one check at each recheck delay."""
        for delay in self.recheck_delays:
            self._spawn(self._check_after(delay))

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _check_after(self, delay: float) -> None:
        await asyncio.sleep(delay)
        self.check_now()

    async def _poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self.poll_interval)
            try:
                url = self.current_url()
            except Exception as e:
                _log_warning(f"Could not read page URL: {e}")
                continue
            if url != self._last_url:
                self._last_url = url
                _log_debug(f"URL change seen by poll: {url}")
                self.schedule_page_check()

"""
Per-day analysis quota.

One record under the "rateLimit" key: {"date": "YYYY-MM-DD", "remaining": N}.
Day rollover is lazy: a record dated before today reads as a full quota and
is only rewritten on the next debit.

Every operation re-reads the store right before writing. Writers in other
processes can still interleave (last writer wins); the quota is a soft abuse
limiter, not a billing counter.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict

from joblens.contexts.analysis.logger import _log_debug, _log_warning
from joblens.utils.kv_store import KeyValueStore
from joblens.utils.timestamp import today as utc_today

DAILY_LIMIT = 10
QUOTA_KEY = "rateLimit"


@dataclass(frozen=True)
class QuotaStatus:
    remaining: int
    total: int
    date: str

    def to_dict(self) -> Dict[str, Any]:
        return {"remaining": self.remaining, "total": self.total, "date": self.date}


class QuotaLedger:
    """
    Debit/credit ledger over a key-value store.

    Args:
        store: Shared key-value store
        daily_limit: Analyses allowed per day
        today: Returns the current day key (injectable for tests)
    """

    def __init__(
        self,
        store: KeyValueStore,
        daily_limit: int = DAILY_LIMIT,
        today: Callable[[], str] = utc_today,
    ):
        self.store = store
        self.daily_limit = daily_limit
        self.today = today

    def _read(self) -> Dict[str, Any]:
        record = self.store.get([QUOTA_KEY]).get(QUOTA_KEY)
        return record if isinstance(record, dict) else {}

    def _clamp(self, remaining: Any) -> int:
        try:
            value = int(remaining)
        except (TypeError, ValueError):
            return self.daily_limit
        return max(0, min(value, self.daily_limit))

    def status(self) -> QuotaStatus:
        """Current quota. Never writes."""
        day = self.today()
        record = self._read()
        if record.get("date") != day:
            return QuotaStatus(remaining=self.daily_limit, total=self.daily_limit, date=day)
        return QuotaStatus(
            remaining=self._clamp(record.get("remaining", self.daily_limit)),
            total=self.daily_limit,
            date=day,
        )

    def check_and_debit(self) -> bool:
        """
        Take one unit of today's quota.

        Returns:
            True if a unit was taken; False (nothing written) if none remain
        """
        day = self.today()
        record = self._read()
        if record.get("date") != day:
            record = {"date": day, "remaining": self.daily_limit}

        remaining = self._clamp(record.get("remaining", self.daily_limit))
        if remaining <= 0:
            _log_warning(f"Daily quota exhausted ({self.daily_limit}/day)")
            return False

        self.store.set({QUOTA_KEY: {"date": day, "remaining": remaining - 1}})
        _log_debug(f"Quota debited: {remaining - 1}/{self.daily_limit} left")
        return True

    def credit(self) -> None:
        """
        Return one unit after a failed call.

        Only a record dated today is credited, and never above the daily limit;
        a failure that straddles midnight credits nothing.
        """
        day = self.today()
        record = self._read()
        if record.get("date") != day:
            return
        remaining = min(self._clamp(record.get("remaining", 0)) + 1, self.daily_limit)
        self.store.set({QUOTA_KEY: {"date": day, "remaining": remaining}})
        _log_debug(f"Quota credited: {remaining}/{self.daily_limit} left")

"""
Persisted state helpers.

Thin read/write functions over the shared key-value store for everything
that is not the quota ledger or the result cache:

    resume          {"raw", "parsed", "savedAt"}
    settings        {"backendUrl", "overlayEnabled"}
    history         newest-first list of past analyses (capped)
    currentJobByTab {tab_id: posting dict}
"""

import time
from typing import Any, Dict, Optional

from joblens.contexts.analysis.backend_client import DEFAULT_BACKEND_URL, normalize_backend_url
from joblens.contexts.intake.job_data_structure import JobPosting
from joblens.contexts.resume.resume_data_structure import ParsedResume, ResumeDocument
from joblens.utils.kv_store import KeyValueStore
from joblens.utils.timestamp import now_exact

RESUME_KEY = "resume"
SETTINGS_KEY = "settings"
HISTORY_KEY = "history"
CURRENT_JOB_KEY = "currentJobByTab"

MAX_HISTORY_ENTRIES = 50

DEFAULT_SETTINGS = {
    "backendUrl": DEFAULT_BACKEND_URL,
    "overlayEnabled": True,
}


# =============================================================================
# RESUME
# =============================================================================


def save_resume(store: KeyValueStore, raw: str, parsed: ParsedResume) -> Dict[str, Any]:
    """Persist the raw resume text with its parsed fields. Returns the stored record."""
    record = {"raw": raw, "parsed": parsed.to_dict(), "savedAt": now_exact()}
    store.set({RESUME_KEY: record})
    return record


def load_resume(store: KeyValueStore) -> Optional[ResumeDocument]:
    """The saved resume, or None."""
    record = store.get([RESUME_KEY]).get(RESUME_KEY)
    if not record or not record.get("raw"):
        return None
    return ResumeDocument(raw=record["raw"], parsed=ParsedResume.from_dict(record.get("parsed") or {}))


def delete_resume(store: KeyValueStore) -> None:
    store.remove([RESUME_KEY])


# =============================================================================
# SETTINGS
# =============================================================================


def get_settings(store: KeyValueStore) -> Dict[str, Any]:
    """Stored settings over the defaults."""
    stored = store.get([SETTINGS_KEY]).get(SETTINGS_KEY) or {}
    return {**DEFAULT_SETTINGS, **stored}


def save_settings(store: KeyValueStore, **changes: Any) -> Dict[str, Any]:
    """
    Merge changes over the current settings.

    Raises:
        InvalidBackendUrl: If backendUrl is given and invalid (nothing is saved)
    """
    if "backendUrl" in changes:
        changes["backendUrl"] = normalize_backend_url(changes["backendUrl"])
    settings = {**get_settings(store), **changes}
    store.set({SETTINGS_KEY: settings})
    return settings


# =============================================================================
# HISTORY
# =============================================================================


def save_analysis_to_history(
    store: KeyValueStore, posting: Dict[str, Any], result: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Prepend a summary of one analysis to the history, keeping the newest entries.

    Args:
        posting: Job data in wire shape
        result: Backend result
    """
    entry = {
        "id": str(int(time.time() * 1000)),
        "jobTitle": posting.get("title", ""),
        "company": posting.get("company", ""),
        "matchPercentage": result.get("match_percentage"),
        "url": posting.get("url", ""),
        "analyzedAt": now_exact(),
    }
    history = get_analysis_history(store)
    history.insert(0, entry)
    store.set({HISTORY_KEY: history[:MAX_HISTORY_ENTRIES]})
    return entry


def get_analysis_history(store: KeyValueStore) -> list[Dict[str, Any]]:
    """Past analyses, newest first."""
    history = store.get([HISTORY_KEY]).get(HISTORY_KEY)
    return list(history) if isinstance(history, list) else []


# =============================================================================
# CURRENT JOB PER TAB
# =============================================================================


def set_current_job_for_tab(store: KeyValueStore, tab_id: Any, posting: Optional[JobPosting]) -> None:
    """Record (or with None, clear) the job a tab is showing."""
    by_tab = store.get([CURRENT_JOB_KEY]).get(CURRENT_JOB_KEY) or {}
    if posting is None:
        by_tab.pop(str(tab_id), None)
    else:
        by_tab[str(tab_id)] = posting.to_dict()
    store.set({CURRENT_JOB_KEY: by_tab})


def get_current_job_for_tab(store: KeyValueStore, tab_id: Any) -> Optional[JobPosting]:
    by_tab = store.get([CURRENT_JOB_KEY]).get(CURRENT_JOB_KEY) or {}
    data = by_tab.get(str(tab_id))
    return JobPosting.from_dict(data) if data else None


class TabJobNotifier:
    """
    JobTracker notify callback that mirrors the tracked job into the store.

    Usage:
        tracker = JobTracker(notify=TabJobNotifier(store, tab_id=7))
    """

    def __init__(self, store: KeyValueStore, tab_id: Any):
        self.store = store
        self.tab_id = tab_id

    def __call__(self, posting: Optional[JobPosting]) -> None:
        set_current_job_for_tab(self.store, self.tab_id, posting)

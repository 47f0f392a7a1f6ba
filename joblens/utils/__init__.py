"""
Shared utilities for JobLens.

Common functionality used across contexts:
- Key-value state storage
- Logging setup
- Timestamps
"""

from joblens.utils.kv_store import JsonFileStore, KeyValueStore, MemoryStore
from joblens.utils.timestamp import epoch_ms, now, now_exact, today

__all__ = [
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "epoch_ms",
    "now",
    "now_exact",
    "today",
]

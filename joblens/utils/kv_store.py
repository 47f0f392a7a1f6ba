"""
Key-value state storage.

The ledger, the result cache, the saved resume, settings and per-tab job state
all live in one flat key-value namespace. Two implementations are provided:

    MemoryStore    - process-local dict, used by tests and one-shot scripts
    JsonFileStore  - a single JSON document on disk, shared between processes

Neither offers transactions. Callers that read-modify-write must re-read
immediately before writing; concurrent writers resolve last-writer-wins.

Usage:
    from joblens.utils.kv_store import JsonFileStore

    store = JsonFileStore(Path("outs/state/joblens_state.json"))
    store.set({"settings": {"backendUrl": "http://localhost:8000"}})
    store.get(["settings"])  # {"settings": {...}}
"""

import copy
import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, Protocol, Union

from dotenv import load_dotenv

load_dotenv()
STATE_FILE = Path(os.getenv("JOBLENS_STATE_FILE", "outs/state/joblens_state.json"))

Keys = Union[str, Iterable[str]]


def _as_key_list(keys: Keys) -> list[str]:
    if isinstance(keys, str):
        return [keys]
    return list(keys)


class KeyValueStore(Protocol):
    """Minimal storage contract shared by every execution context."""

    def get(self, keys: Keys) -> Dict[str, Any]:
        """Return {key: value} for the keys that exist (missing keys are omitted)."""
        ...

    def get_all(self) -> Dict[str, Any]:
        """Return every stored entry."""
        ...

    def set(self, items: Dict[str, Any]) -> None:
        """Write (overwrite) the given entries."""
        ...

    def remove(self, keys: Keys) -> None:
        """Delete the given keys; unknown keys are ignored."""
        ...


class MemoryStore:
    """
    In-process key-value store.

    Values are deep-copied on the way in and out so callers can never mutate
    stored state through a returned reference.
    """

    def __init__(self, initial: Dict[str, Any] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, keys: Keys) -> Dict[str, Any]:
        return {k: copy.deepcopy(self._data[k]) for k in _as_key_list(keys) if k in self._data}

    def get_all(self) -> Dict[str, Any]:
        return copy.deepcopy(self._data)

    def set(self, items: Dict[str, Any]) -> None:
        for key, value in items.items():
            self._data[key] = copy.deepcopy(value)

    def remove(self, keys: Keys) -> None:
        for key in _as_key_list(keys):
            self._data.pop(key, None)

    def __len__(self) -> int:
        return len(self._data)


class JsonFileStore:
    """
    Key-value store persisted as one JSON object.

    Every operation re-reads the file so that separate processes (a CLI run
    and a long-lived watcher, say) see each other's writes. Writes go to a
    temp file first and are moved into place.
    """

    def __init__(self, path: Path = None):
        self.path = Path(path) if path is not None else STATE_FILE

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            content = f.read()
        if not content.strip():
            return {}
        data = json.loads(content)
        if not isinstance(data, dict):
            raise ValueError(f"State file {self.path} does not contain a JSON object")
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_fd, temp_path = tempfile.mkstemp(suffix=".json", dir=self.path.parent, text=True)
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            shutil.move(temp_path, self.path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

    def get(self, keys: Keys) -> Dict[str, Any]:
        data = self._read()
        return {k: data[k] for k in _as_key_list(keys) if k in data}

    def get_all(self) -> Dict[str, Any]:
        return self._read()

    def set(self, items: Dict[str, Any]) -> None:
        data = self._read()
        data.update(items)
        self._write(data)

    def remove(self, keys: Keys) -> None:
        data = self._read()
        changed = False
        for key in _as_key_list(keys):
            if key in data:
                del data[key]
                changed = True
        if changed:
            self._write(data)

"""
Key-value backends for persisted version state.

Values are JSON-compatible (dicts, lists, strings). A backend only has to
get, set and remove values by string key; VersionStore adds the scoping
and the record format on top.
"""

import copy
import json
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from .env import Settings

SQLITE_SUFFIXES = {".db", ".sqlite", ".sqlite3"}


class KeyValueStore(ABC):
    """Minimal string-keyed store."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the value stored under key, or None."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete key. Missing keys are ignored."""


class InMemoryStore(KeyValueStore):
    """Dict backed store. Values are copied in and out like a real backend."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self.data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self.data.get(key))

    def set(self, key: str, value: Any) -> None:
        self.data[key] = copy.deepcopy(value)

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


def load_store(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            content = f.read().strip()
            if not content:
                return {}
            data = json.loads(content)
    except (ValueError, IOError):
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def save_store(path: Path, store: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as f:
        json.dump(store, f, indent=2, ensure_ascii=False)
    os.replace(f.name, path)


_path_locks: Dict[Path, threading.Lock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _path_locks_guard:
        return _path_locks.setdefault(path.resolve(), threading.Lock())


class JsonFileStore(KeyValueStore):
    """
    Whole store kept in a single JSON file.

    Every operation re-reads the file, so two instances pointed at the same
    path see each other's writes. Within a process all instances for one
    path share a lock around read-modify-write. A missing, empty or
    unreadable file reads as an empty store.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = _lock_for(self.path)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return load_store(self.path).get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            store = load_store(self.path)
            store[key] = value
            save_store(self.path, store)

    def remove(self, key: str) -> None:
        with self._lock:
            store = load_store(self.path)
            if key in store:
                del store[key]
                save_store(self.path, store)


def open_default_store(settings: Optional[Settings] = None) -> KeyValueStore:
    """
    Open the store configured by VERSIONTRACKER_STORE_PATH.

    SQLite files (.db, .sqlite, .sqlite3) get a SqliteStore, anything else
    a JsonFileStore.
    """
    if settings is None:
        settings = Settings.from_env()
    path = settings.store_path
    if path.suffix.lower() in SQLITE_SUFFIXES:
        from .database import SqliteStore
        return SqliteStore(path)
    return JsonFileStore(path)

"""
Session tracking: merge the launched version into the history once per
scope and process, then expose what changed since the previous launch.

The "once" flags live in memory only. They reset when the process
restarts, while the store keeps the history across launches.
"""

import sys
import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, NamedTuple, Optional, Tuple, Union

from .change_state import ChangeState, classify
from .errors import ConfigurationError
from .logger import get_logger
from .storage import KeyValueStore
from .version import Version
from .version_store import VersionStore

logger = get_logger()

APP_VERSION_SCOPE = "appVersion"
OS_VERSION_SCOPE = "osVersion"

StoreLike = Union[KeyValueStore, VersionStore]
VersionSupplier = Union[Version, Callable[[], Version]]


class MergeState(Enum):
    NEVER_MERGED = "never_merged"
    MERGING = "merging"
    MERGED = "merged"


class MergeResult(NamedTuple):
    history: Tuple[Version, ...]
    previous_version: Optional[Version]
    current_version: Version


class _MergeRegistry:
    """Process wide merge state per scope, each scope with its own lock."""

    def __init__(self):
        self._guard = threading.Lock()
        self._scopes = {APP_VERSION_SCOPE, OS_VERSION_SCOPE}
        self._locks: Dict[str, threading.Lock] = {}
        self._states: Dict[str, MergeState] = {}

    def register(self, scope: str) -> None:
        with self._guard:
            self._scopes.add(scope)

    def is_supported(self, scope: str) -> bool:
        with self._guard:
            return scope in self._scopes

    def lock_for(self, scope: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(scope, threading.Lock())

    def state(self, scope: str) -> MergeState:
        return self._states.get(scope, MergeState.NEVER_MERGED)

    def set_state(self, scope: str, state: MergeState) -> None:
        self._states[scope] = state

    def clear(self) -> None:
        with self._guard:
            self._states.clear()


_registry = _MergeRegistry()


def register_scope(scope: str) -> None:
    """Allow merging versions in a custom scope besides app and OS versions."""
    if not scope or "." in scope:
        raise ConfigurationError(f"invalid version scope '{scope}'")
    _registry.register(scope)


def _as_version_store(store: StoreLike) -> VersionStore:
    if isinstance(store, VersionStore):
        return store
    return VersionStore(store)


def merge_once(scope: str, version: Version, store: StoreLike) -> Optional[MergeResult]:
    """
    Update the version history of a scope once per session.

    Loads the history, adds the version if it was never seen before and
    moves the launch markers forward.

    Returns:
        MergeResult for the first call per scope in this process,
        None for every later call (nothing is read or written then)

    Raises:
        ConfigurationError: If the scope was never registered
    """
    if not _registry.is_supported(scope):
        raise ConfigurationError(f"unsupported version scope '{scope}'")

    with _registry.lock_for(scope):
        if _registry.state(scope) is MergeState.MERGED:
            logger.record_skipped_merge()
            return None

        _registry.set_state(scope, MergeState.MERGING)
        try:
            result = _merge(scope, version, _as_version_store(store))
        except Exception:
            _registry.set_state(scope, MergeState.NEVER_MERGED)
            raise
        _registry.set_state(scope, MergeState.MERGED)
        return result


def _merge(scope: str, version: Version, store: VersionStore) -> MergeResult:
    history = store.load_history(scope)

    known = next((entry for entry in history if entry == version), None)
    if known is not None:
        # the stored entry keeps its original install date
        current = known
    else:
        current = version.with_install_date(datetime.now(timezone.utc))
        history = history + (current,)
        store.save_history(scope, history)

    store.record_new_launch(scope, current)
    previous = store.get_previous_launched(scope)

    logger.record_merge(scope, new_version=known is None)
    logger.info(
        "Merged launched version",
        scope=scope,
        current=str(current),
        previous=str(previous) if previous is not None else None,
        new_version=known is None,
    )
    return MergeResult(history, previous, current)


def reset_merge_flags() -> None:
    """
    Forget which scopes were merged in this process. For tests only.

    Raises:
        ConfigurationError: If called outside a pytest run
    """
    if "pytest" not in sys.modules:
        raise ConfigurationError("reset_merge_flags() shall only be called in unit tests")
    _registry.clear()


def reset_scope(store: StoreLike, scope: str) -> None:
    """Remove all stored state of a scope."""
    _as_version_store(store).reset(scope)


class VersionTracker:
    """
    Version state of one scope for the running session.

    Creating a tracker merges the current version into the history if that
    did not happen yet in this process. Otherwise the state is read back
    from the store. Either way the attributes never change afterwards.

    Args:
        current_version: The running version, or a callable returning it
        scope: Key namespace, e.g. APP_VERSION_SCOPE
        store: Backend holding the version history

    Raises:
        ConfigurationError: If the scope is unknown, or the session was
            already merged against another store
    """

    def __init__(self, current_version: VersionSupplier, scope: str, store: StoreLike):
        self.scope = scope
        self._store = _as_version_store(store)

        if callable(current_version):
            current_version = current_version()

        merged = merge_once(scope, current_version, self._store)
        if merged is not None:
            self._version_history = merged.history
            self._raw_previous_version = merged.previous_version
            self._current_version = merged.current_version
        else:
            # another tracker merged this session, the store already holds the result
            if not self._store.has_last_launched(scope):
                raise ConfigurationError(
                    "VersionTracker was already initialized with another store before."
                )
            last_launched = self._store.get_last_launched(scope)
            if last_launched is None:
                raise ConfigurationError(
                    f"Last launched version of scope '{scope}' cannot be read back."
                )
            self._current_version = last_launched
            self._raw_previous_version = self._store.get_previous_launched(scope)
            self._version_history = self._store.load_history(scope)

        self._change_state = classify(self._raw_previous_version, self._current_version)

    @property
    def current_version(self) -> Version:
        return self._current_version

    @property
    def previous_version(self) -> Optional[Version]:
        """
        The version of the previous launch, or None if it is the same as
        the current one.

        None does not mean this is the very first launch; check
        change_state for INSTALLED instead.
        """
        if self._raw_previous_version == self._current_version:
            return None
        return self._raw_previous_version

    @property
    def change_state(self) -> ChangeState:
        return self._change_state

    @property
    def version_history(self) -> Tuple[Version, ...]:
        """All versions ever launched, oldest first. The last one is current."""
        return self._version_history

    def __repr__(self) -> str:
        return (
            f"VersionTracker(scope={self.scope!r}, current={self._current_version}, "
            f"change_state={self._change_state})"
        )

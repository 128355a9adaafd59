"""
versiontracker - remembers which app and OS versions were launched before.
"""

from .change_state import ChangeKind, ChangeState, classify
from .errors import ConfigurationError, CorruptRecordError, VersionTrackerError
from .storage import InMemoryStore, JsonFileStore, KeyValueStore
from .tracker import (
    APP_VERSION_SCOPE,
    OS_VERSION_SCOPE,
    MergeResult,
    VersionTracker,
    merge_once,
    register_scope,
    reset_merge_flags,
    reset_scope,
)
from .version import Version, compare, parse_components
from .version_store import VersionStore
from .versions_tracker import VersionsTracker

__version__ = "0.1.0"

__all__ = [
    "APP_VERSION_SCOPE",
    "OS_VERSION_SCOPE",
    "ChangeKind",
    "ChangeState",
    "ConfigurationError",
    "CorruptRecordError",
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "MergeResult",
    "Version",
    "VersionStore",
    "VersionTracker",
    "VersionTrackerError",
    "VersionsTracker",
    "classify",
    "compare",
    "merge_once",
    "parse_components",
    "register_scope",
    "reset_merge_flags",
    "reset_scope",
]

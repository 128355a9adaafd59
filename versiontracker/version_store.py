"""
Scoped version state on top of a key-value store.

Every scope owns three keys:

    VersionsTracker.<scope>.lastLaunchedVersion
        the version of the most recent merge. Before a merge it still holds
        the version of the launch before, afterwards the current version.
    VersionsTracker.<scope>.previousLaunchedVersion
        what lastLaunchedVersion held right before the most recent merge
    VersionsTracker.<scope>.installedVersions
        every version ever seen, in install order
"""

from typing import Iterable, Optional, Tuple

from .errors import CorruptRecordError
from .logger import get_logger
from .storage import KeyValueStore
from .version import Version

logger = get_logger()

KEY_PREFIX = "VersionsTracker"
LAST_LAUNCHED_VERSION_KEY = "lastLaunchedVersion"
PREVIOUS_LAUNCHED_VERSION_KEY = "previousLaunchedVersion"
INSTALLED_VERSIONS_KEY = "installedVersions"


def build_key(scope: str, field: str) -> str:
    return ".".join([KEY_PREFIX, scope, field])


class VersionStore:
    """Reads and writes the version history and launch markers of a scope."""

    def __init__(self, backend: KeyValueStore):
        self.backend = backend

    def load_history(self, scope: str) -> Tuple[Version, ...]:
        """
        Load all versions seen in a scope, oldest first.

        Entries that cannot be parsed are skipped and logged.
        """
        key = build_key(scope, INSTALLED_VERSIONS_KEY)
        records = self.backend.get(key)
        if records is None:
            return ()
        if not isinstance(records, list):
            logger.warning("Ignoring malformed version history", key=key)
            logger.record_corrupt_record()
            return ()

        history = []
        for index, record in enumerate(records):
            try:
                history.append(Version.from_record(record))
            except CorruptRecordError as e:
                logger.warning(
                    "Skipping corrupt version record",
                    key=key,
                    index=index,
                    error=str(e),
                )
                logger.record_corrupt_record()
        return tuple(history)

    def save_history(self, scope: str, history: Iterable[Version]) -> None:
        key = build_key(scope, INSTALLED_VERSIONS_KEY)
        self.backend.set(key, [version.to_record() for version in history])

    def get_last_launched(self, scope: str) -> Optional[Version]:
        return self._get_version(scope, LAST_LAUNCHED_VERSION_KEY)

    def set_last_launched(self, scope: str, version: Version) -> None:
        self.backend.set(build_key(scope, LAST_LAUNCHED_VERSION_KEY), version.to_record())

    def get_previous_launched(self, scope: str) -> Optional[Version]:
        return self._get_version(scope, PREVIOUS_LAUNCHED_VERSION_KEY)

    def has_last_launched(self, scope: str) -> bool:
        return isinstance(self.backend.get(build_key(scope, LAST_LAUNCHED_VERSION_KEY)), dict)

    def record_new_launch(self, scope: str, version: Version) -> None:
        """
        Make version the last launched one.

        **Should only be called once per scope and session.**

        The stored last launched version moves into the previous slot first,
        so the previous version stays readable for the rest of the session.
        """
        last_key = build_key(scope, LAST_LAUNCHED_VERSION_KEY)
        previous_key = build_key(scope, PREVIOUS_LAUNCHED_VERSION_KEY)

        last_record = self.backend.get(last_key)
        if last_record is None:
            self.backend.remove(previous_key)
        else:
            self.backend.set(previous_key, last_record)
        self.backend.set(last_key, version.to_record())

    def reset(self, scope: str) -> None:
        """Remove everything stored for a scope."""
        for field in (
            PREVIOUS_LAUNCHED_VERSION_KEY,
            LAST_LAUNCHED_VERSION_KEY,
            INSTALLED_VERSIONS_KEY,
        ):
            self.backend.remove(build_key(scope, field))

    def _get_version(self, scope: str, field: str) -> Optional[Version]:
        key = build_key(scope, field)
        record = self.backend.get(key)
        if record is None:
            return None
        try:
            return Version.from_record(record)
        except CorruptRecordError as e:
            logger.warning("Ignoring corrupt version marker", key=key, error=str(e))
            logger.record_corrupt_record()
            return None

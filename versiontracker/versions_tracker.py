"""
Convenience wrapper tracking the host app and OS versions together,
usable as a process wide singleton.

    VersionsTracker.initialize(track_app_version=True, track_os_version=True,
                               app_version="myapp")
    tracker = VersionsTracker.shared_instance()
    if tracker.app_version.change_state.kind is ChangeKind.UPGRADED:
        show_release_notes()
"""

import sys
import threading
from typing import Optional, Union

from .errors import ConfigurationError
from .logger import get_logger
from .storage import KeyValueStore, open_default_store
from .system import current_app_version, current_os_version
from .tracker import (
    APP_VERSION_SCOPE,
    OS_VERSION_SCOPE,
    VersionSupplier,
    VersionTracker,
    merge_once,
)
from .version import Version

logger = get_logger()

# a Version, a callable returning one, or the name of an installed distribution
AppVersionSource = Union[VersionSupplier, str]


def _resolve(source: Union[VersionSupplier, str]) -> Version:
    if isinstance(source, str):
        return current_app_version(source)
    if callable(source):
        return source()
    return source


class VersionsTracker:
    """
    Tracks the app version and the OS version in one store.

    Args:
        track_app_version: Merge the app version right away
        track_os_version: Merge the OS version right away
        store: Backend for the history (default: VERSIONTRACKER_STORE_PATH)
        app_version: The running app version, a callable returning it, or
            the distribution name to read it from
        os_version: Override for the OS version supplier
    """

    _shared_instance: Optional["VersionsTracker"] = None
    _shared_lock = threading.Lock()

    def __init__(
        self,
        track_app_version: bool = False,
        track_os_version: bool = False,
        store: Optional[KeyValueStore] = None,
        app_version: Optional[AppVersionSource] = None,
        os_version: Optional[VersionSupplier] = None,
    ):
        self.store = store if store is not None else open_default_store()
        self._app_version_source = app_version
        self._os_version_source = os_version if os_version is not None else current_os_version
        self._app_version: Optional[VersionTracker] = None
        self._os_version: Optional[VersionTracker] = None

        # building the trackers triggers the history update
        if track_app_version:
            self.app_version
        if track_os_version:
            self.os_version

    @property
    def app_version(self) -> VersionTracker:
        if self._app_version is None:
            if self._app_version_source is None:
                raise ConfigurationError("No app version supplied to VersionsTracker")
            self._app_version = VersionTracker(
                lambda: _resolve(self._app_version_source),
                APP_VERSION_SCOPE,
                self.store,
            )
        return self._app_version

    @property
    def os_version(self) -> VersionTracker:
        if self._os_version is None:
            self._os_version = VersionTracker(
                lambda: _resolve(self._os_version_source),
                OS_VERSION_SCOPE,
                self.store,
            )
        return self._os_version

    # Singleton

    @classmethod
    def initialize(
        cls,
        track_app_version: bool,
        track_os_version: bool,
        store: Optional[KeyValueStore] = None,
        **kwargs,
    ) -> "VersionsTracker":
        """
        **When using VersionsTracker as a singleton, call this on each launch.**

        Creates the shared instance, loading and updating the version history.

        Raises:
            ConfigurationError: If called more than once
        """
        with cls._shared_lock:
            if cls._shared_instance is not None:
                raise ConfigurationError(
                    "VersionsTracker.initialize() was already called before and must be called only once."
                )
            cls._shared_instance = cls(track_app_version, track_os_version, store, **kwargs)
            return cls._shared_instance

    @classmethod
    def shared_instance(cls) -> "VersionsTracker":
        """
        Raises:
            ConfigurationError: If initialize() was not called yet
        """
        if cls._shared_instance is None:
            raise ConfigurationError(
                "VersionsTracker.initialize() must be called before accessing the shared instance"
            )
        return cls._shared_instance

    @classmethod
    def update_version_histories(
        cls,
        track_app_version: bool,
        track_os_version: bool,
        store: Optional[KeyValueStore] = None,
        app_version: Optional[AppVersionSource] = None,
        os_version: Optional[VersionSupplier] = None,
    ) -> None:
        """
        **When NOT using the singleton, call this on each launch.**

        Updates the version histories once per session without building
        trackers, so no version change gets lost when no tracker is ever
        created. Trackers created later read the merged state.
        """
        store = store if store is not None else open_default_store()
        if track_app_version:
            if app_version is None:
                raise ConfigurationError("No app version supplied to VersionsTracker")
            if merge_once(APP_VERSION_SCOPE, _resolve(app_version), store) is None:
                logger.warning("App version history was already updated")
        if track_os_version:
            os_source = os_version if os_version is not None else current_os_version
            if merge_once(OS_VERSION_SCOPE, _resolve(os_source), store) is None:
                logger.warning("OS version history was already updated")

    @classmethod
    def _reset_shared_instance(cls) -> None:
        if "pytest" not in sys.modules:
            raise ConfigurationError("_reset_shared_instance() shall only be called in unit tests")
        with cls._shared_lock:
            cls._shared_instance = None

"""Exceptions raised by versiontracker."""


class VersionTrackerError(Exception):
    """Base class for all versiontracker errors."""
    pass


class ConfigurationError(VersionTrackerError):
    """
    Raised for programming errors: unknown scopes, singletons initialized
    twice, or a tracker pointed at a store it never initialized.

    These are not meant to be caught and recovered from.
    """
    pass


class CorruptRecordError(VersionTrackerError):
    """Raised when a stored version record cannot be read back."""
    pass

"""
Version values and dotted version string comparison.

A Version holds a marketing version ("1.2.3"), an opaque build string and
the date it was first seen. Ordering only looks at the numeric components
of the marketing version; equality also requires the build strings to match.
"""

import re
from datetime import datetime, timezone
from itertools import zip_longest
from typing import Any, Dict, Optional, Tuple, Union

from .errors import CorruptRecordError

VERSION_STRING_KEY = "versionString"
BUILD_STRING_KEY = "buildString"
INSTALL_DATE_KEY = "installDate"

_LEADING_DIGITS = re.compile(r"\s*(\d+)")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_component(segment: str) -> int:
    match = _LEADING_DIGITS.match(segment)
    if match is None:
        return 0
    return int(match.group(1))


def parse_components(version_string: str) -> Tuple[int, ...]:
    """
    Split a dotted version string into integers.

    Segments are read from their leading digits, so "3rc1" gives 3.
    Empty and non-numeric segments give 0. Never raises.

    Examples:
        "1.2.3"  -> (1, 2, 3)
        "2.00.1" -> (2, 0, 1)
        ".5"     -> (0, 5)
        "1.x"    -> (1, 0)
    """
    if not version_string:
        return (0,)
    return tuple(_parse_component(segment) for segment in version_string.split("."))


VersionLike = Union["Version", str]


def _components_of(value: VersionLike) -> Tuple[int, ...]:
    if isinstance(value, Version):
        return value.components
    return parse_components(value)


def compare(a: VersionLike, b: VersionLike) -> int:
    """
    Compare the numeric parts of two versions. Build strings are ignored.

    Returns:
        -1 if a < b
         0 if a == b (after padding the shorter one with zeros)
         1 if a > b
    """
    for left, right in zip_longest(_components_of(a), _components_of(b), fillvalue=0):
        if left < right:
            return -1
        if left > right:
            return 1
    return 0


class Version:
    """
    One observed version of an app or OS.

    Args:
        version_string: Dotted marketing version, e.g. "1.4.2"
        build_string: Opaque build identifier (None is stored as "")
        install_date: When the version was first seen (default: now, UTC)
    """

    __slots__ = ("_version_string", "_build_string", "_install_date", "_components")

    def __init__(
        self,
        version_string: str,
        build_string: Optional[str] = None,
        install_date: Optional[datetime] = None,
    ):
        self._version_string = version_string
        self._build_string = build_string or ""
        self._install_date = install_date or _utcnow()
        self._components = parse_components(version_string)

    @property
    def version_string(self) -> str:
        return self._version_string

    @property
    def build_string(self) -> str:
        return self._build_string

    @property
    def install_date(self) -> datetime:
        return self._install_date

    @property
    def components(self) -> Tuple[int, ...]:
        return self._components

    def with_install_date(self, install_date: datetime) -> "Version":
        """Return a copy of this version stamped with a new install date."""
        return Version(self._version_string, self._build_string, install_date)

    # Persistence

    @classmethod
    def from_record(cls, record: Any) -> "Version":
        """
        Rebuild a Version from a stored record.

        Raises:
            CorruptRecordError: If the record is not a dict or its fields
                have the wrong shape
        """
        if not isinstance(record, dict):
            raise CorruptRecordError(f"Expected a dict record, got {type(record).__name__}")

        version_string = record.get(VERSION_STRING_KEY)
        if not isinstance(version_string, str):
            raise CorruptRecordError(f"Missing or invalid '{VERSION_STRING_KEY}'")

        build_string = record.get(BUILD_STRING_KEY)
        if build_string is not None and not isinstance(build_string, str):
            raise CorruptRecordError(f"Invalid '{BUILD_STRING_KEY}'")

        raw_date = record.get(INSTALL_DATE_KEY)
        install_date = None
        if raw_date is not None:
            try:
                install_date = datetime.fromisoformat(raw_date)
            except (TypeError, ValueError) as e:
                raise CorruptRecordError(f"Invalid '{INSTALL_DATE_KEY}': {raw_date!r}") from e

        return cls(version_string, build_string, install_date)

    def to_record(self) -> Dict[str, str]:
        return {
            VERSION_STRING_KEY: self._version_string,
            BUILD_STRING_KEY: self._build_string,
            INSTALL_DATE_KEY: self._install_date.isoformat(),
        }

    # Comparison

    @staticmethod
    def _coerce(other: Any) -> Optional["Version"]:
        if isinstance(other, Version):
            return other
        if isinstance(other, str):
            return Version(other)
        return None

    def __eq__(self, other: Any) -> bool:
        # strings are only coerced for ordering; a str can never share our hash
        if not isinstance(other, Version):
            return NotImplemented
        return (
            compare(self, other) == 0
            and self._build_string == other._build_string
        )

    def __ne__(self, other: Any) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __lt__(self, other: Any) -> bool:
        other_version = self._coerce(other)
        if other_version is None:
            return NotImplemented
        return compare(self, other_version) < 0

    def __gt__(self, other: Any) -> bool:
        other_version = self._coerce(other)
        if other_version is None:
            return NotImplemented
        return compare(self, other_version) > 0

    def __le__(self, other: Any) -> bool:
        other_version = self._coerce(other)
        if other_version is None:
            return NotImplemented
        return compare(self, other_version) <= 0

    def __ge__(self, other: Any) -> bool:
        other_version = self._coerce(other)
        if other_version is None:
            return NotImplemented
        return compare(self, other_version) >= 0

    def __hash__(self) -> int:
        # trailing zeros do not change equality, so they must not change the hash
        components = list(self._components)
        while components and components[-1] == 0:
            components.pop()
        return hash((tuple(components), self._build_string))

    def __str__(self) -> str:
        return f"{self._version_string} ({self._build_string})"

    def __repr__(self) -> str:
        return (
            f"Version({self._version_string!r}, build_string={self._build_string!r}, "
            f"install_date={self._install_date.isoformat()!r})"
        )

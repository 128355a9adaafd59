"""
Classification of the version change between two launches.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .version import Version, compare


class ChangeKind(Enum):
    """
    - INSTALLED: clean install, very first launch
    - NOT_CHANGED: same version and build as the previous launch
    - UPDATED: build string changed, marketing version stayed the same
    - UPGRADED: marketing version increased
    - DOWNGRADED: marketing version decreased
    """

    INSTALLED = "installed"
    NOT_CHANGED = "not_changed"
    UPDATED = "updated"
    UPGRADED = "upgraded"
    DOWNGRADED = "downgraded"


@dataclass(frozen=True)
class ChangeState:
    """A change kind plus the version it changed from (if any)."""

    kind: ChangeKind
    previous_version: Optional[Version] = None

    @classmethod
    def installed(cls) -> "ChangeState":
        return cls(ChangeKind.INSTALLED)

    @classmethod
    def not_changed(cls) -> "ChangeState":
        return cls(ChangeKind.NOT_CHANGED)

    @classmethod
    def updated(cls, previous_version: Version) -> "ChangeState":
        return cls(ChangeKind.UPDATED, previous_version)

    @classmethod
    def upgraded(cls, previous_version: Version) -> "ChangeState":
        return cls(ChangeKind.UPGRADED, previous_version)

    @classmethod
    def downgraded(cls, previous_version: Version) -> "ChangeState":
        return cls(ChangeKind.DOWNGRADED, previous_version)

    def __str__(self) -> str:
        if self.previous_version is None:
            return self.kind.value
        return f"{self.kind.value} from {self.previous_version}"


def classify(previous: Optional[Version], current: Version) -> ChangeState:
    """Determine the change state from one version to another."""
    if previous is None:
        return ChangeState.installed()

    order = compare(previous, current)
    if order < 0:
        return ChangeState.upgraded(previous)
    if order > 0:
        return ChangeState.downgraded(previous)
    if previous != current:
        return ChangeState.updated(previous)
    return ChangeState.not_changed()

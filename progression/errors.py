"""Exception types raised by the progression engine."""

from __future__ import annotations


class ProgressionError(Exception):
    """Base class for all engine errors."""


class EntityDataError(ProgressionError, ValueError):
    """Raised when base data cannot produce a valid entity."""


class MissingEntityError(ProgressionError, KeyError):
    """Raised when a task, item or requirement name is not registered."""

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"unknown {kind}: {name!r}")
        self.kind = kind
        self.name = name

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message instead.
        return self.args[0]


class SaveCorruptError(ProgressionError):
    """Raised when a save blob cannot be parsed or validated."""


class DeprecatedSaveError(SaveCorruptError):
    """Raised when a save uses a naming scheme that is no longer supported."""

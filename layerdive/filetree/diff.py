"""Comparison results between file nodes and per-path failures."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class DiffType(enum.IntEnum):
    """The result of comparing a node against another layer."""

    UNMODIFIED = 0
    MODIFIED = 1
    ADDED = 2
    REMOVED = 3

    def __str__(self) -> str:
        return self.name.capitalize()

    def merge(self, other: DiffType) -> DiffType:
        """Combine two results: equal values stay, differing ones mean a change."""
        if self == other:
            return self
        return DiffType.MODIFIED


class FileAction(enum.Enum):
    """The operation that was being applied to a path."""

    ADD = "add"
    REMOVE = "remove"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PathError:
    """A failure to apply an action to a single path in a tree."""

    path: str
    action: FileAction
    error: BaseException

    def __str__(self) -> str:
        return f"unable to {self.action} '{self.path}': {self.error}"
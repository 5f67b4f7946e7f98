"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any host-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class NodeKind(str, Enum):
    """Kind of node reported in a structural change notification."""

    ELEMENT = "element"
    TEXT = "text"
    COMMENT = "comment"


@dataclass(frozen=True)
class MutationRecord:
    """One structural change notification from the watched container."""

    type: str
    added_nodes: tuple[NodeKind, ...] = field(default_factory=tuple)

    @property
    def adds_element(self) -> bool:
        return any(node is NodeKind.ELEMENT for node in self.added_nodes)


@dataclass(frozen=True)
class ClassificationResult:
    """Summary of a single classification pass."""

    scanned: int
    hidden: int
    changed: int


class WatchState(str, Enum):
    """States of the change watcher."""

    IDLE = "idle"
    PENDING_FLUSH = "pending_flush"


class InvalidPatternPolicy(str, Enum):
    """What to do with persisted patterns that no longer compile."""

    SKIP = "skip"
    FAIL = "fail"

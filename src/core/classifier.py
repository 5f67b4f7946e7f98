"""Item classification against compiled matchers."""

from __future__ import annotations

from typing import Iterable

from core.config import DEFAULT_MARKER
from core.models import ClassificationResult
from core.ports import ItemPort
from core.rules_engine import CompiledMatcher, matches_any

NOOP_RESULT = ClassificationResult(scanned=0, hidden=0, changed=0)


def classify(
    items: Iterable[ItemPort],
    matchers: Iterable[CompiledMatcher],
    marker: str = DEFAULT_MARKER,
) -> ClassificationResult:
    """Mark items whose text matches any matcher and unmark the rest.

    With no matchers this is a no-op: items keep whatever marker state they
    had. Text is read from each item at call time, and the marker is only
    written when the state actually changes.
    """

    matchers = tuple(matchers)
    if not matchers:
        return NOOP_RESULT

    scanned = hidden = changed = 0
    for item in items:
        scanned += 1
        blocked = matches_any(item.text(), matchers)
        if blocked:
            hidden += 1
        if item.has_marker(marker) != blocked:
            item.set_marker(marker, blocked)
            changed += 1
    return ClassificationResult(scanned=scanned, hidden=hidden, changed=changed)


def reveal_all(items: Iterable[ItemPort], marker: str = DEFAULT_MARKER) -> int:
    """Remove the marker from every item carrying it; return how many."""

    revealed = 0
    for item in items:
        if item.has_marker(marker):
            item.set_marker(marker, False)
            revealed += 1
    return revealed

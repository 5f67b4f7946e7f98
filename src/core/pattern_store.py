"""Persisted, validated, deduplicated pattern set."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterable, List, Optional

from core.config import DEFAULT_STORAGE_KEY
from core.errors import PatternValidationError
from core.models import InvalidPatternPolicy
from core.ports import KeyValueStorePort
from core.rules_engine import EMPTY_SNAPSHOT, MatcherSnapshot, build_snapshot

LOGGER = logging.getLogger(__name__)


def validate_pattern(raw: Optional[str]) -> str:
    """Return the trimmed pattern or raise PatternValidationError."""

    trimmed = (raw or "").strip()
    if not trimmed:
        raise PatternValidationError("", "Pattern is empty")
    try:
        re.compile(trimmed)
    except re.error:
        raise PatternValidationError(
            trimmed,
            f'Invalid Regex Pattern: "{trimmed}"\nPlease check your syntax.',
        ) from None
    return trimmed


def _dedupe(patterns: Iterable[str]) -> List[str]:
    # dict keeps first-seen order
    return list(dict.fromkeys(patterns))


class PatternStore:
    """Owns the raw patterns and the compiled matcher snapshot.

    Every mutation persists the new list and rebuilds the whole snapshot
    before returning, so a classification that runs right after a mutation
    always sees the new rules.
    """

    def __init__(
        self,
        storage: KeyValueStorePort,
        key: str = DEFAULT_STORAGE_KEY,
        policy: InvalidPatternPolicy = InvalidPatternPolicy.SKIP,
        alert: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._storage = storage
        self._key = key
        self._policy = policy
        self._alert = alert
        self._patterns: List[str] = []
        self._snapshot: MatcherSnapshot = EMPTY_SNAPSHOT

    @property
    def snapshot(self) -> MatcherSnapshot:
        return self._snapshot

    def load(self) -> List[str]:
        """Read persisted patterns and compile them."""

        raw = self._storage.load(self._key, [])
        self._patterns = _dedupe(self._sanitize(raw))
        self._snapshot = build_snapshot(self._patterns, self._policy)
        LOGGER.info(
            "%s patterns are loaded (%s skipped)",
            len(self._patterns),
            len(self._snapshot.skipped),
        )
        return self.get()

    def get(self) -> List[str]:
        return list(self._patterns)

    def add(self, raw: Optional[str]) -> bool:
        """Insert a pattern; return False when the input is rejected."""

        try:
            pattern = validate_pattern(raw)
        except PatternValidationError as exc:
            if exc.pattern:
                LOGGER.warning("Rejected pattern %r", exc.pattern)
                if self._alert is not None:
                    self._alert(exc.message)
            return False

        if pattern in self._patterns:
            return True
        self._commit(self._patterns + [pattern])
        LOGGER.info("Pattern added: %r", pattern)
        return True

    def remove(self, raw: str) -> bool:
        """Drop a stored pattern; returns False when it was not stored."""

        if raw not in self._patterns:
            return False
        self._commit([pattern for pattern in self._patterns if pattern != raw])
        LOGGER.info("Pattern removed: %r", raw)
        return True

    def clear(self) -> None:
        self._commit([])
        LOGGER.info("All patterns cleared")

    def _commit(self, patterns: List[str]) -> None:
        # User-facing mutations never fail on stale stored patterns.
        snapshot = build_snapshot(patterns, InvalidPatternPolicy.SKIP)
        self._storage.save(self._key, list(patterns))
        self._patterns = patterns
        self._snapshot = snapshot

    def _sanitize(self, raw: Any) -> List[str]:
        if not isinstance(raw, list):
            if raw is not None:
                LOGGER.warning("Ignoring stored %s value of type %s", self._key, type(raw).__name__)
            return []
        patterns: List[str] = []
        for entry in raw:
            if not isinstance(entry, str) or not entry.strip():
                LOGGER.warning("Ignoring stored pattern entry %r", entry)
                continue
            patterns.append(entry)
        return patterns

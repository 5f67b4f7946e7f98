"""Pattern compilation and matching logic (core domain)."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import Iterable, Iterator, List

from core.errors import MalformedPersistedPattern
from core.models import InvalidPatternPolicy

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledMatcher:
    """Compiled form of one stored pattern."""

    pattern: str
    regex: re.Pattern

    def matches(self, text: str) -> bool:
        return self.regex.search(text) is not None


@dataclass(frozen=True)
class MatcherSnapshot:
    """Immutable set of matchers built from one version of the pattern set.

    A snapshot is never edited; the store swaps in a new one after every
    mutation.
    """

    matchers: tuple[CompiledMatcher, ...] = ()
    skipped: tuple[str, ...] = ()

    def __iter__(self) -> Iterator[CompiledMatcher]:
        return iter(self.matchers)

    def __len__(self) -> int:
        return len(self.matchers)


EMPTY_SNAPSHOT = MatcherSnapshot()


def compile_matcher(pattern: str) -> CompiledMatcher:
    """Compile a raw pattern for case-insensitive searching."""

    return CompiledMatcher(pattern=pattern, regex=re.compile(pattern, re.IGNORECASE))


def build_snapshot(
    patterns: Iterable[str],
    policy: InvalidPatternPolicy = InvalidPatternPolicy.SKIP,
) -> MatcherSnapshot:
    """Compile every pattern into a fresh snapshot.

    Patterns that fail to compile are either left out (and reported in
    ``skipped``) or abort the build, depending on ``policy``.
    """

    compiled: List[CompiledMatcher] = []
    skipped: List[str] = []
    for pattern in patterns:
        try:
            compiled.append(compile_matcher(pattern))
        except re.error as exc:
            if policy is InvalidPatternPolicy.FAIL:
                raise MalformedPersistedPattern(pattern, str(exc)) from exc
            LOGGER.warning("Skipping pattern %r: %s", pattern, exc)
            skipped.append(pattern)
    return MatcherSnapshot(matchers=tuple(compiled), skipped=tuple(skipped))


def matches_any(text: str, matchers: Iterable[CompiledMatcher]) -> bool:
    """Return True when any matcher finds the text."""

    return any(matcher.matches(text) for matcher in matchers)


def explain(text: str, matchers: Iterable[CompiledMatcher]) -> List[str]:
    """Return the raw patterns that match the given text, in store order."""

    return [matcher.pattern for matcher in matchers if matcher.matches(text)]

"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from core.models import InvalidPatternPolicy

DEFAULT_CONTAINER_SELECTOR = "#posting-list"
DEFAULT_ITEM_SELECTOR = "PostingCard"
DEFAULT_MARKER = "blocked-item"
DEFAULT_STORAGE_KEY = "blockedKeywords"
DEFAULT_QUIESCENCE_MS = 200


@dataclass(frozen=True)
class DiscoveryConfig:
    """How long to wait for the watched container at startup."""

    timeout_seconds: float = 30.0
    poll_interval_ms: int = 100


@dataclass(frozen=True)
class FilterConfig:
    """Settings for the classification pipeline."""

    container_selector: str = DEFAULT_CONTAINER_SELECTOR
    item_selector: str = DEFAULT_ITEM_SELECTOR
    marker_class: str = DEFAULT_MARKER
    quiescence_ms: int = DEFAULT_QUIESCENCE_MS
    storage_key: str = DEFAULT_STORAGE_KEY
    invalid_pattern_policy: InvalidPatternPolicy = InvalidPatternPolicy.SKIP
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)

    @property
    def quiescence_seconds(self) -> float:
        return self.quiescence_ms / 1000.0


@dataclass(frozen=True)
class FeedConfig:
    """Settings for the sample feed shown by the viewer."""

    path: str
    page_size: int = 10
    auto_load_seconds: Optional[float] = None

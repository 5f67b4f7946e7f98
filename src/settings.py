"""Static configuration for listblock.

All user-editable settings (selectors, debounce window, storage, feed,
logging) live in a single JSON file for quick edits without touching Python.
"""

from __future__ import annotations

import json
import os
from typing import Any, Optional

from dotenv import load_dotenv

from core.config import (
    DEFAULT_CONTAINER_SELECTOR,
    DEFAULT_ITEM_SELECTOR,
    DEFAULT_MARKER,
    DEFAULT_QUIESCENCE_MS,
    DEFAULT_STORAGE_KEY,
    DiscoveryConfig,
    FeedConfig,
    FilterConfig,
)
from core.models import InvalidPatternPolicy

load_dotenv()

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# config.json sits next to src/ unless LISTBLOCK_CONFIG points elsewhere.
CONFIG_PATH = os.getenv("LISTBLOCK_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))

# Where to store the SQLite database holding the patterns.
DB_PATH = os.getenv("LISTBLOCK_DB", os.path.join(PROJECT_ROOT, "listblock.db"))


def _load_json_config(path: str) -> dict:
    """Load config.json; a missing file means all defaults."""

    if not os.path.exists(path):
        return {}

    with open(path, "r", encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: config root must be an object")
    return data


def _positive(value: Any, name: str) -> float:
    number = float(value)
    if number <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return number


def _positive_int(value: Any, name: str) -> int:
    # Truncate before the check: 0.5 ms is a zero window.
    number = int(float(value))
    if number <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return number


def _section(raw: dict, name: str) -> dict:
    """Return a config section; a missing or null section means defaults."""

    section = raw.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"{name} must be an object, got {type(section).__name__}")
    return section


def build_filter_config(raw: dict) -> FilterConfig:
    """Build FilterConfig from the "filter" section of config.json."""

    discovery_raw = _section(raw, "discovery")
    discovery = DiscoveryConfig(
        timeout_seconds=_positive(discovery_raw.get("timeout_seconds", 30), "discovery.timeout_seconds"),
        poll_interval_ms=_positive_int(discovery_raw.get("poll_interval_ms", 100), "discovery.poll_interval_ms"),
    )

    policy_raw = raw.get("invalid_pattern_policy", InvalidPatternPolicy.SKIP.value)
    try:
        policy = InvalidPatternPolicy(policy_raw)
    except ValueError:
        raise ValueError(f"invalid_pattern_policy must be 'skip' or 'fail', got {policy_raw!r}") from None

    return FilterConfig(
        container_selector=raw.get("container_selector", DEFAULT_CONTAINER_SELECTOR),
        item_selector=raw.get("item_selector", DEFAULT_ITEM_SELECTOR),
        marker_class=raw.get("marker_class", DEFAULT_MARKER),
        quiescence_ms=_positive_int(raw.get("quiescence_ms", DEFAULT_QUIESCENCE_MS), "quiescence_ms"),
        storage_key=raw.get("storage_key", DEFAULT_STORAGE_KEY),
        invalid_pattern_policy=policy,
        discovery=discovery,
    )


def build_feed_config(raw: dict, project_root: str = PROJECT_ROOT) -> FeedConfig:
    """Build FeedConfig from the "feed" section; relative paths are project-relative."""

    path = raw.get("path", "data/postings.json")
    if not os.path.isabs(path):
        path = os.path.join(project_root, path)
    auto_load: Optional[float] = None
    if raw.get("auto_load_seconds"):
        auto_load = _positive(raw["auto_load_seconds"], "feed.auto_load_seconds")
    return FeedConfig(
        path=path,
        page_size=_positive_int(raw.get("page_size", 10), "feed.page_size"),
        auto_load_seconds=auto_load,
    )


_CONFIG = _load_json_config(CONFIG_PATH)

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

FILTER = build_filter_config(_section(_CONFIG, "filter"))

FEED = build_feed_config(_section(_CONFIG, "feed"))

# Logging configuration (optional).
LOGGING = _section(_CONFIG, "logging")

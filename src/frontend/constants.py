"""Shared constants for the Textual UI."""

from __future__ import annotations

ACCENT = "#E8A33D"
LIST_ID = "posting-list"
STATUS_ID = "feed-status"
# Delay before the list is mounted, mimicking a host page that renders late.
LIST_MOUNT_DELAY = 0.5

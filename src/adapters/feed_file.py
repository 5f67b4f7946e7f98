"""JSON feed source for the viewer.

Reads a list of postings from a JSON file and hands them out one page at a
time, the way a paginated host page would.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
from typing import Any, List


@dataclass(frozen=True)
class Posting:
    """One entry of the sample feed."""

    title: str
    company: str = ""
    location: str = ""
    description: str = ""

    @property
    def plain_text(self) -> str:
        parts = [self.title, self.company, self.location, self.description]
        return "\n".join(part for part in parts if part)


def _posting_from_dict(entry: dict[str, Any]) -> Posting:
    title = entry.get("title")
    if not title:
        raise ValueError("posting is missing a title")
    return Posting(
        title=str(title),
        company=str(entry.get("company", "")),
        location=str(entry.get("location", "")),
        description=str(entry.get("description", "")),
    )


def load_postings(path: Path) -> List[Posting]:
    """Load postings from a JSON array or an object with a "postings" array."""

    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("postings", [])
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of postings")
    return [_posting_from_dict(entry) for entry in data if isinstance(entry, dict)]


class FeedPager:
    """Serve postings page by page; wraps around when the feed runs out."""

    def __init__(self, postings: List[Posting], page_size: int) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self._postings = postings
        self._page_size = page_size
        self._offset = 0
        self.pages_served = 0

    def next_page(self) -> List[Posting]:
        if not self._postings:
            return []
        page: List[Posting] = []
        for _ in range(self._page_size):
            page.append(self._postings[self._offset % len(self._postings)])
            self._offset += 1
        self.pages_served += 1
        return page

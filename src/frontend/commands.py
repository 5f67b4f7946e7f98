"""Command palette provider listing the pattern commands."""

from __future__ import annotations

from typing import List

from rich.text import Text
from textual.command import DiscoveryHit, Hit, Hits, Provider

from adapters.textual_host import CommandEntry

HELP = "listblock pattern command"


class PatternCommands(Provider):
    """Expose the entries of the app's command registry."""

    def _entries(self) -> List[CommandEntry]:
        registry = getattr(self.app, "command_registry", None)
        if registry is None:
            return []
        return registry.entries()

    async def discover(self) -> Hits:
        for entry in self._entries():
            yield DiscoveryHit(Text(entry.label), entry.run, help=HELP)

    async def search(self, query: str) -> Hits:
        matcher = self.matcher(query)
        for entry in self._entries():
            score = matcher.match(entry.label)
            if score > 0:
                yield Hit(score, matcher.highlight(entry.label), entry.run, help=HELP)

"""Command-surface facade over the pattern store."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Hashable, Tuple

from core.pattern_store import PatternStore
from core.ports import CommandAction, CommandSurfacePort, PromptPort

LOGGER = logging.getLogger(__name__)

ADD_LABEL = "Block Keyword / Regex"
REMOVE_LABEL = "Unblock: {pattern}"
CLEAR_LABEL = "Unblock All Keywords"
ADD_PROMPT = "Enter keyword:"
CLEAR_CONFIRM = "Unblock all?"

CommandKey = Tuple[str, str]


class ConfigInterface:
    """Translate menu intents into store mutations and keep the menu in sync.

    ``refresh`` runs an immediate classification of the container and
    ``reveal`` strips the hide marker from every item. Removals reveal first
    because a pass with an empty rule set leaves markers untouched.
    """

    def __init__(
        self,
        store: PatternStore,
        surface: CommandSurfacePort,
        prompts: PromptPort,
        refresh: Callable[[], object],
        reveal: Callable[[], object],
    ) -> None:
        self._store = store
        self._surface = surface
        self._prompts = prompts
        self._refresh = refresh
        self._reveal = reveal
        self._registered: Dict[CommandKey, Hashable] = {}

    def rebuild(self) -> None:
        """Register missing commands and unregister stale ones."""

        desired = self._desired_commands()
        for key in [key for key in self._registered if key not in desired]:
            self._surface.unregister(self._registered.pop(key))
        for key, action in desired.items():
            if key in self._registered:
                continue
            self._registered[key] = self._surface.register(self._label_for(key), action)

    def dispose(self) -> None:
        for handle in self._registered.values():
            self._surface.unregister(handle)
        self._registered.clear()

    async def add_pattern(self) -> None:
        raw = await self._prompts.prompt(ADD_PROMPT)
        if raw and self._store.add(raw):
            self._refresh()
            self.rebuild()

    async def remove_pattern(self, pattern: str) -> None:
        self._store.remove(pattern)
        self._reveal()
        self._refresh()
        self.rebuild()

    async def clear_patterns(self) -> None:
        if not await self._prompts.confirm(CLEAR_CONFIRM):
            return
        self._store.clear()
        self._reveal()
        self.rebuild()

    def _desired_commands(self) -> Dict[CommandKey, CommandAction]:
        commands: Dict[CommandKey, CommandAction] = {("add", ""): self.add_pattern}
        patterns = self._store.get()
        for pattern in patterns:
            commands[("remove", pattern)] = self._remover(pattern)
        if patterns:
            commands[("clear", "")] = self.clear_patterns
        return commands

    def _remover(self, pattern: str) -> CommandAction:
        async def action() -> None:
            await self.remove_pattern(pattern)

        return action

    @staticmethod
    def _label_for(key: CommandKey) -> str:
        kind, pattern = key
        if kind == "add":
            return ADD_LABEL
        if kind == "clear":
            return CLEAR_LABEL
        return REMOVE_LABEL.format(pattern=pattern)

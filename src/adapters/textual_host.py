"""Textual host adapters.

Expose a Textual widget tree through the core ports: the document (container
lookup and hide rule), the container and its items, structural change
notifications, and a command registry backing the command palette.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import count
import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from textual.app import App
from textual.containers import VerticalScroll
from textual.css.query import NoMatches
from textual.widget import Widget

from core.models import MutationRecord, NodeKind
from core.ports import CommandAction, MutationCallback

LOGGER = logging.getLogger(__name__)


class ObservableList(VerticalScroll):
    """Scrolling container that reports every child it mounts."""

    def __init__(self, *children: Widget, **kwargs) -> None:
        super().__init__(*children, **kwargs)
        self._mutation_listeners: List[MutationCallback] = []

    def add_mutation_listener(self, callback: MutationCallback) -> None:
        self._mutation_listeners.append(callback)

    def remove_mutation_listener(self, callback: MutationCallback) -> None:
        if callback in self._mutation_listeners:
            self._mutation_listeners.remove(callback)

    async def append_items(self, widgets: Iterable[Widget]) -> int:
        """Mount widgets one by one, notifying listeners after each mount."""

        mounted = 0
        for widget in widgets:
            await self.mount(widget)
            mounted += 1
            self._notify([MutationRecord(type="childList", added_nodes=(NodeKind.ELEMENT,))])
        return mounted

    def _notify(self, records: Sequence[MutationRecord]) -> None:
        for callback in list(self._mutation_listeners):
            callback(records)


class WidgetItem:
    """ItemPort over one Textual widget; the marker is a CSS class."""

    def __init__(self, widget: Widget) -> None:
        self.widget = widget

    def text(self) -> str:
        """Visible text of the widget, as rendered."""

        rendered = self.widget.render()
        plain = getattr(rendered, "plain", None)
        if plain is not None:
            return str(plain)
        if isinstance(rendered, str):
            return rendered
        # Renderables without a plain form (tables, panels) fall back to the model.
        fallback = getattr(self.widget, "plain_text", None)
        return str(fallback) if fallback is not None else str(rendered)

    def has_marker(self, marker: str) -> bool:
        return self.widget.has_class(marker)

    def set_marker(self, marker: str, enabled: bool) -> None:
        self.widget.set_class(enabled, marker)


class WidgetContainer:
    """ContainerPort over an ObservableList."""

    def __init__(self, widget: ObservableList, item_selector: str) -> None:
        self.widget = widget
        self._item_selector = item_selector

    def items(self) -> List[WidgetItem]:
        return [WidgetItem(widget) for widget in self.widget.query(self._item_selector)]


class TextualDocument:
    """DocumentPort over a running Textual app."""

    def __init__(self, app: App, item_selector: str) -> None:
        self._app = app
        self._item_selector = item_selector

    def query_container(self, selector: str) -> Optional[WidgetContainer]:
        try:
            widget = self._app.query_one(selector)
        except NoMatches:
            return None
        if not isinstance(widget, ObservableList):
            raise TypeError(f"{selector!r} is a {type(widget).__name__}, not an ObservableList")
        return WidgetContainer(widget, self._item_selector)

    def install_hide_rule(self, marker: str) -> None:
        css = f".{marker} {{ display: none; }}"
        self._app.stylesheet.add_source(css, read_from=("listblock", f"hide-rule:{marker}"))
        self._app.refresh_css()
        LOGGER.debug("Installed hide rule for .%s", marker)


class TextualChangeSource:
    """ChangeSourcePort backed by ObservableList listeners."""

    def observe(self, container: WidgetContainer, callback: MutationCallback) -> Callable[[], None]:
        widget = container.widget
        widget.add_mutation_listener(callback)

        def unsubscribe() -> None:
            widget.remove_mutation_listener(callback)

        return unsubscribe


@dataclass(frozen=True)
class CommandEntry:
    """A command as shown in the palette."""

    label: str
    run: Callable[[], None]


class CommandRegistry:
    """CommandSurfacePort that runs each action in a Textual worker."""

    WORKER_GROUP = "pattern-commands"

    def __init__(self, app: App) -> None:
        self._app = app
        self._entries: Dict[int, CommandEntry] = {}
        self._ids = count(1)

    def register(self, label: str, action: CommandAction) -> int:
        handle = next(self._ids)

        async def guarded() -> None:
            try:
                await action()
            except Exception:
                LOGGER.exception("Command %r failed", label)

        def run() -> None:
            self._app.run_worker(guarded(), group=self.WORKER_GROUP, exit_on_error=False)

        self._entries[handle] = CommandEntry(label=label, run=run)
        return handle

    def unregister(self, handle: int) -> None:
        self._entries.pop(handle, None)

    def entries(self) -> List[CommandEntry]:
        return list(self._entries.values())

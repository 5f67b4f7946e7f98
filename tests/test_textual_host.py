from __future__ import annotations

import asyncio
import logging

from rich.text import Text

from adapters.textual_host import CommandRegistry, WidgetItem


class DummyApp:
    def __init__(self) -> None:
        self.workers: list = []

    def run_worker(self, work, group: str = "default", exit_on_error: bool = True) -> None:
        self.workers.append((work, group))


class DummyWidget:
    def __init__(self, rendered, plain_text: str = "") -> None:
        self.rendered = rendered
        self.plain_text = plain_text
        self.classes: set[str] = set()

    def render(self):
        return self.rendered

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def set_class(self, add: bool, *names: str) -> None:
        for name in names:
            if add:
                self.classes.add(name)
            else:
                self.classes.discard(name)


def test_registry_runs_actions_in_a_worker() -> None:
    app = DummyApp()
    registry = CommandRegistry(app)
    calls: list[str] = []

    async def action() -> None:
        calls.append("ran")

    registry.register("Block Keyword / Regex", action)
    entry = registry.entries()[0]
    entry.run()

    work, group = app.workers[0]
    asyncio.run(work)

    assert entry.label == "Block Keyword / Regex"
    assert group == CommandRegistry.WORKER_GROUP
    assert calls == ["ran"]


def test_registry_unregister_and_failed_action(caplog) -> None:
    app = DummyApp()
    registry = CommandRegistry(app)

    async def broken() -> None:
        raise RuntimeError("boom")

    keep = registry.register("Unblock: intern", broken)
    drop = registry.register("Unblock: senior", broken)
    registry.unregister(drop)
    registry.unregister(drop)

    assert [entry.label for entry in registry.entries()] == ["Unblock: intern"]

    registry.entries()[0].run()
    with caplog.at_level(logging.ERROR):
        asyncio.run(app.workers[0][0])

    assert keep != drop
    assert "Command 'Unblock: intern' failed" in caplog.text


def test_widget_item_uses_css_class_as_marker() -> None:
    widget = DummyWidget(Text("Internship Program"))
    item = WidgetItem(widget)

    item.set_marker("blocked-item", True)

    assert item.text() == "Internship Program"
    assert item.has_marker("blocked-item")
    item.set_marker("blocked-item", False)
    assert not widget.classes


def test_widget_item_reads_rendered_text_before_model_text() -> None:
    widget = DummyWidget(Text("Internship Program\nAcme"), plain_text="stale model text")

    assert WidgetItem(widget).text() == "Internship Program\nAcme"
    assert WidgetItem(DummyWidget("Senior Engineer")).text() == "Senior Engineer"


def test_widget_item_falls_back_to_model_text_for_opaque_renderables() -> None:
    widget = DummyWidget(object(), plain_text="Staff Engineer")

    assert WidgetItem(widget).text() == "Staff Engineer"

from __future__ import annotations

import asyncio

from core.classifier import classify, reveal_all
from core.config_interface import ADD_LABEL, ADD_PROMPT, CLEAR_CONFIRM, CLEAR_LABEL, ConfigInterface
from core.pattern_store import PatternStore
from fakes import FakeContainer, FakeItem, FakePrompts, FakeStorage, FakeSurface

MARKER = "blocked-item"


def _setup(patterns=None, answers=None, confirm_answer=True):
    storage = FakeStorage({"blockedKeywords": list(patterns or [])})
    prompts = FakePrompts(answers, confirm_answer)
    store = PatternStore(storage, alert=prompts.alert)
    store.load()
    container = FakeContainer([FakeItem("Internship Program"), FakeItem("Senior Engineer")])
    surface = FakeSurface()
    interface = ConfigInterface(
        store,
        surface,
        prompts,
        refresh=lambda: classify(container.items(), store.snapshot, MARKER),
        reveal=lambda: reveal_all(container.items(), MARKER),
    )
    interface.rebuild()
    classify(container.items(), store.snapshot, MARKER)
    return store, container, surface, prompts, interface


def _hidden(container) -> list[str]:
    return [item.content for item in container.item_list if item.has_marker(MARKER)]


def test_menu_without_patterns_only_offers_add() -> None:
    _, _, surface, _, _ = _setup()

    assert surface.labels() == [ADD_LABEL]


def test_menu_lists_each_pattern_and_clear_all() -> None:
    _, _, surface, _, interface = _setup(["intern", "senior"])

    assert sorted(surface.labels()) == sorted(
        [ADD_LABEL, "Unblock: intern", "Unblock: senior", CLEAR_LABEL]
    )
    assert surface.registrations == 4


def test_add_command_hides_matches_and_updates_menu() -> None:
    store, container, surface, prompts, _ = _setup(answers=["intern"])

    asyncio.run(surface.invoke(ADD_LABEL))

    assert prompts.prompted == [ADD_PROMPT]
    assert store.get() == ["intern"]
    assert _hidden(container) == ["Internship Program"]
    assert "Unblock: intern" in surface.labels()
    assert CLEAR_LABEL in surface.labels()


def test_add_command_with_invalid_pattern_changes_nothing() -> None:
    store, container, surface, prompts, _ = _setup(answers=["[unterminated"])
    registrations = surface.registrations

    asyncio.run(surface.invoke(ADD_LABEL))

    assert store.get() == []
    assert len(prompts.alerts) == 1
    assert surface.registrations == registrations
    assert _hidden(container) == []


def test_add_command_cancelled_prompt_is_ignored() -> None:
    store, _, surface, _, _ = _setup(answers=[None])

    asyncio.run(surface.invoke(ADD_LABEL))

    assert store.get() == []


def test_menu_rebuild_only_registers_the_difference() -> None:
    _, _, surface, _, _ = _setup(answers=["intern", "senior"])

    asyncio.run(surface.invoke(ADD_LABEL))
    after_first = surface.registrations
    asyncio.run(surface.invoke(ADD_LABEL))

    assert surface.registrations == after_first + 1
    assert surface.unregistrations == 0


def test_remove_restores_visibility() -> None:
    store, container, surface, _, _ = _setup(["intern"])
    assert _hidden(container) == ["Internship Program"]

    asyncio.run(surface.invoke("Unblock: intern"))

    assert store.get() == []
    assert _hidden(container) == []
    assert surface.labels() == [ADD_LABEL]


def test_remove_one_of_several_keeps_other_matches_hidden() -> None:
    _, container, surface, _, _ = _setup(["intern", "senior"])

    asyncio.run(surface.invoke("Unblock: intern"))

    assert _hidden(container) == ["Senior Engineer"]
    assert "Unblock: intern" not in surface.labels()


def test_clear_all_requires_confirmation() -> None:
    store, container, surface, prompts, _ = _setup(["intern"], confirm_answer=False)

    asyncio.run(surface.invoke(CLEAR_LABEL))

    assert prompts.confirmed == [CLEAR_CONFIRM]
    assert store.get() == ["intern"]
    assert _hidden(container) == ["Internship Program"]


def test_clear_all_reveals_everything() -> None:
    store, container, surface, _, _ = _setup(["intern", "senior"])

    asyncio.run(surface.invoke(CLEAR_LABEL))

    assert store.get() == []
    assert _hidden(container) == []
    assert surface.labels() == [ADD_LABEL]


def test_dispose_unregisters_everything() -> None:
    _, _, surface, _, interface = _setup(["intern"])

    interface.dispose()

    assert surface.commands == {}
    assert surface.labels() == []
    assert surface.unregistrations == surface.registrations

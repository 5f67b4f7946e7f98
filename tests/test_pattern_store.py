from __future__ import annotations

import logging

import pytest

from core.errors import MalformedPersistedPattern, PatternValidationError
from core.models import InvalidPatternPolicy
from core.pattern_store import PatternStore, validate_pattern
from fakes import FakeStorage

KEY = "blockedKeywords"


def _store(initial=None, policy=InvalidPatternPolicy.SKIP):
    storage = FakeStorage({KEY: initial} if initial is not None else None)
    alerts: list[str] = []
    store = PatternStore(storage, key=KEY, policy=policy, alert=alerts.append)
    store.load()
    return store, storage, alerts


def test_add_valid_pattern_persists_and_compiles() -> None:
    store, storage, alerts = _store()

    assert store.add("senior") is True

    assert store.get() == ["senior"]
    assert storage.data[KEY] == ["senior"]
    assert [matcher.pattern for matcher in store.snapshot] == ["senior"]
    assert not alerts


def test_add_invalid_regex_is_rejected_with_alert() -> None:
    store, storage, alerts = _store(["senior"])

    assert store.add("[unterminated") is False

    assert store.get() == ["senior"]
    assert storage.saves == []
    assert len(alerts) == 1
    assert 'Invalid Regex Pattern: "[unterminated"' in alerts[0]


@pytest.mark.parametrize("raw", ["", "   ", "\t\n", None])
def test_add_blank_input_fails_closed_without_alert(raw) -> None:
    store, storage, alerts = _store()

    assert store.add(raw) is False

    assert store.get() == []
    assert storage.saves == []
    assert alerts == []


def test_add_trims_and_dedupes() -> None:
    store, _, _ = _store()

    assert store.add("intern") is True
    assert store.add("  intern  ") is True

    assert store.get() == ["intern"]
    assert len(store.snapshot) == 1


def test_remove_and_clear_rebuild_snapshot() -> None:
    store, storage, _ = _store(["intern", "senior"])

    assert store.remove("intern") is True
    assert store.get() == ["senior"]
    assert [matcher.pattern for matcher in store.snapshot] == ["senior"]

    store.clear()
    assert store.get() == []
    assert len(store.snapshot) == 0
    assert storage.data[KEY] == []


def test_remove_absent_pattern_writes_and_logs_nothing(caplog) -> None:
    store, storage, _ = _store(["senior"])
    before = store.snapshot

    with caplog.at_level(logging.INFO, logger="core.pattern_store"):
        assert store.remove("absent") is False

    assert store.get() == ["senior"]
    assert store.snapshot is before
    assert storage.saves == []
    assert "Pattern removed" not in caplog.text


def test_mutation_swaps_snapshot_instead_of_editing_it() -> None:
    store, _, _ = _store(["intern"])
    before = store.snapshot

    store.add("senior")

    assert store.snapshot is not before
    assert [matcher.pattern for matcher in before] == ["intern"]


def test_load_sanitizes_stored_value() -> None:
    store, _, _ = _store(["intern", 42, "", "intern", "senior"])

    assert store.get() == ["intern", "senior"]


def test_load_ignores_non_list_value() -> None:
    store, _, _ = _store({"not": "a list"})

    assert store.get() == []


def test_skip_policy_keeps_malformed_pattern_visible_but_inert() -> None:
    store, _, _ = _store(["[unterminated", "intern"])

    assert store.get() == ["[unterminated", "intern"]
    assert [matcher.pattern for matcher in store.snapshot] == ["intern"]
    assert store.snapshot.skipped == ("[unterminated",)

    store.remove("[unterminated")
    assert store.get() == ["intern"]
    assert store.snapshot.skipped == ()


def test_fail_policy_raises_on_malformed_pattern() -> None:
    storage = FakeStorage({KEY: ["[unterminated"]})
    store = PatternStore(storage, key=KEY, policy=InvalidPatternPolicy.FAIL)

    with pytest.raises(MalformedPersistedPattern) as excinfo:
        store.load()

    assert excinfo.value.pattern == "[unterminated"


def test_validate_pattern() -> None:
    assert validate_pattern("  senior ") == "senior"
    with pytest.raises(PatternValidationError):
        validate_pattern("(")
    with pytest.raises(PatternValidationError):
        validate_pattern(" ")

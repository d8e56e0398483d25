"""Tests for profile and ledger persistence."""

import json
import logging
from datetime import timedelta

from calorie_tracker.adapters.json_file_store import JsonFileKeyValueStore
from calorie_tracker.domain.ledger import Ledger
from calorie_tracker.domain.profile import Profile
from calorie_tracker.services.ledger import ENTRIES_KEY, LedgerService
from calorie_tracker.services.profiles import PROFILE_KEY, ProfileService
from calorie_tracker.services.storage import InMemoryKeyValueStore
from tests.conftest import NOW, make_entry


def test_profile_round_trip_uses_profile_key(profile: Profile) -> None:
    store = InMemoryKeyValueStore()
    service = ProfileService(store)

    service.save(profile)

    assert json.loads(store.get(PROFILE_KEY) or "")["activityLevel"] == "medium"
    assert service.load() == profile


def test_profile_missing_or_corrupt_is_absent(caplog) -> None:
    store = InMemoryKeyValueStore()
    service = ProfileService(store)
    assert service.load() is None

    store.set(PROFILE_KEY, "{not json")
    with caplog.at_level(logging.WARNING):
        assert service.load() is None

    store.set(PROFILE_KEY, json.dumps({"name": "Kim", "age": 3}))
    assert service.load() is None


def test_profile_clear_removes_key(profile: Profile) -> None:
    store = InMemoryKeyValueStore()
    service = ProfileService(store)
    service.save(profile)

    service.clear()

    assert store.get(PROFILE_KEY) is None


def test_ledger_save_and_load_preserves_order() -> None:
    store = InMemoryKeyValueStore()
    service = LedgerService(store)
    ledger = Ledger()
    ledger.add_entry(make_entry("Breakfast", 300, NOW - timedelta(hours=4)))
    ledger.add_entry(make_entry("Lunch", 600, NOW))

    service.save(ledger)
    loaded = service.load()

    assert [entry.name for entry in loaded.entries] == ["Lunch", "Breakfast"]
    assert json.loads(store.get(ENTRIES_KEY) or "")[0]["timestamp"] == (
        ledger.entries[0].timestamp
    )


def test_ledger_corrupt_json_loads_empty() -> None:
    store = InMemoryKeyValueStore({ENTRIES_KEY: "[{broken"})

    assert LedgerService(store).load().entries == []


def test_ledger_non_list_loads_empty() -> None:
    store = InMemoryKeyValueStore({ENTRIES_KEY: '{"name": "Lunch"}'})

    assert LedgerService(store).load().entries == []


def test_ledger_filters_invalid_entries(caplog) -> None:
    valid = make_entry("Lunch", 600, NOW).model_dump()
    store = InMemoryKeyValueStore(
        {
            ENTRIES_KEY: json.dumps(
                [valid, {"name": "Mystery", "calories": 100}, None, "junk"]
            )
        }
    )

    with caplog.at_level(logging.WARNING):
        loaded = LedgerService(store).load()

    assert [entry.name for entry in loaded.entries] == ["Lunch"]
    assert "Filtered out 3 invalid entries" in caplog.text


def test_ledger_filters_entries_with_unrepresentable_timestamps() -> None:
    valid = make_entry("Lunch", 600, NOW).model_dump()
    far_future = {**valid, "name": "Glitch", "timestamp": 10**20}
    before_epoch = {**valid, "name": "Ancient", "timestamp": -(10**20)}
    store = InMemoryKeyValueStore(
        {ENTRIES_KEY: json.dumps([valid, far_future, before_epoch])}
    )

    loaded = LedgerService(store).load()

    assert [entry.name for entry in loaded.entries] == ["Lunch"]
    assert loaded.today_totals(NOW).calories == 600


def test_json_file_store_persists_between_instances(tmp_path) -> None:
    path = tmp_path / "state" / "tracker.json"
    first = JsonFileKeyValueStore(path)
    first.set("userProfile", '{"name": "Kim"}')
    first.set("calorie-tracker-entries", "[]")

    second = JsonFileKeyValueStore(path)
    second.delete("calorie-tracker-entries")

    assert JsonFileKeyValueStore(path).get("userProfile") == '{"name": "Kim"}'
    assert JsonFileKeyValueStore(path).get("calorie-tracker-entries") is None


def test_json_file_store_treats_corrupt_file_as_empty(tmp_path) -> None:
    path = tmp_path / "tracker.json"
    path.write_text("not json", encoding="utf-8")
    store = JsonFileKeyValueStore(path)

    assert store.get("userProfile") is None

    store.set("userProfile", "{}")
    assert store.get("userProfile") == "{}"

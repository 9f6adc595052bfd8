import json
import logging

import pytest

from services.feed.FilterStateStore import STORAGE_KEY, FilterStateStore
from shared.storage.SessionStorageFile import SessionStorageFile
from shared.storage.SessionStorageMemory import SessionStorageMemory


class BrokenStorage(SessionStorageMemory):
    def get_item(self, key: str) -> str | None:
        raise OSError("disk gone")


def _store(helper_config, storage=None) -> tuple[FilterStateStore, SessionStorageMemory]:
    storage = storage if storage is not None else SessionStorageMemory()
    return FilterStateStore(helper_config, storage), storage


def test_empty_storage_has_no_filters(helper_config):
    store, _ = _store(helper_config)
    assert store.get_active_filters() == []


def test_add_filter_persists_immediately(helper_config):
    store, storage = _store(helper_config)

    assert store.add_filter(3) is True
    assert store.add_filter(7) is True

    assert json.loads(storage.get_item(STORAGE_KEY)) == [3, 7]
    assert store.get_active_filters() == [3, 7]


def test_add_existing_filter_is_a_noop(helper_config):
    store, storage = _store(helper_config)
    store.add_filter(3)
    stored = storage.get_item(STORAGE_KEY)

    assert store.add_filter(3) is False
    assert storage.get_item(STORAGE_KEY) == stored


def test_remove_filter(helper_config):
    store, storage = _store(helper_config)
    store.add_filter(3)
    store.add_filter(7)

    assert store.remove_filter(3) is True
    assert store.remove_filter(3) is False
    assert json.loads(storage.get_item(STORAGE_KEY)) == [7]


def test_round_trip_through_a_new_store(helper_config):
    storage = SessionStorageMemory()
    first, _ = _store(helper_config, storage)
    for tag_id in (9, 2, 5):
        first.add_filter(tag_id)

    second, _ = _store(helper_config, storage)
    assert set(second.get_active_filters()) == {2, 5, 9}


def test_stored_duplicates_are_collapsed(helper_config):
    store, _ = _store(helper_config, SessionStorageMemory({STORAGE_KEY: "[1, 1, 2]"}))
    assert store.get_active_filters() == [1, 2]


@pytest.mark.parametrize(
    "raw",
    [
        "not json at all",
        '{"tags": [1]}',
        '"3"',
        '[1, "two"]',
        "[true]",
        "[1.5]",
    ],
)
def test_corrupt_slot_yields_empty_set(helper_config, raw):
    store, _ = _store(helper_config, SessionStorageMemory({STORAGE_KEY: raw}))
    assert store.get_active_filters() == []


def test_null_slot_yields_empty_set(helper_config):
    store, _ = _store(helper_config, SessionStorageMemory({STORAGE_KEY: "null"}))
    assert store.get_active_filters() == []


def test_unreadable_storage_yields_empty_set(helper_config, caplog):
    store, _ = _store(helper_config, BrokenStorage())
    with caplog.at_level(logging.WARNING, logger="tests"):
        assert store.get_active_filters() == []
    assert "Ignoring stored tag filters" in caplog.text


def test_add_filter_overwrites_corrupt_slot(helper_config):
    store, storage = _store(helper_config, SessionStorageMemory({STORAGE_KEY: "garbage"}))

    assert store.add_filter(4) is True
    assert json.loads(storage.get_item(STORAGE_KEY)) == [4]


def test_file_storage_round_trip(helper_config, tmp_path):
    storage = SessionStorageFile(storage_dir=str(tmp_path), session_id="alice")
    store, _ = _store(helper_config, storage)
    store.add_filter(11)
    store.add_filter(12)

    reopened = SessionStorageFile(storage_dir=str(tmp_path), session_id="alice")
    assert FilterStateStore(helper_config, reopened).get_active_filters() == [11, 12]


def test_corrupt_session_file_yields_empty_set(helper_config, tmp_path):
    storage = SessionStorageFile(storage_dir=str(tmp_path), session_id="alice")
    with open(storage.get_path(), "w", encoding="utf-8") as f:
        f.write("[[[")

    store, _ = _store(helper_config, storage)
    assert store.get_active_filters() == []
    assert store.add_filter(1) is True
    assert store.get_active_filters() == [1]

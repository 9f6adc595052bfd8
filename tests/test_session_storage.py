import json
import os

import pytest

from shared.storage.SessionStorageFile import SessionStorageFile
from shared.storage.SessionStorageMemory import SessionStorageMemory


def test_memory_storage_set_get_remove():
    storage = SessionStorageMemory({"a": "1"})
    assert storage.get_item("a") == "1"

    storage.set_item("b", "2")
    storage.remove_item("a")
    storage.remove_item("missing")

    assert storage.get_item("a") is None
    assert storage.get_item("b") == "2"


def test_file_storage_creates_directory_and_file(tmp_path):
    storage_dir = tmp_path / "sessions"
    storage = SessionStorageFile(storage_dir=str(storage_dir), session_id="s1")
    assert storage_dir.is_dir()
    assert storage.get_item("filterTags") is None

    storage.set_item("filterTags", "[1]")

    with open(storage.get_path(), encoding="utf-8") as f:
        assert json.load(f) == {"filterTags": "[1]"}
    assert not os.path.exists(storage.get_path() + ".tmp")


def test_file_storage_sessions_are_isolated(tmp_path):
    first = SessionStorageFile(storage_dir=str(tmp_path), session_id="one")
    second = SessionStorageFile(storage_dir=str(tmp_path), session_id="two")

    first.set_item("filterTags", "[1]")

    assert second.get_item("filterTags") is None


def test_file_storage_remove_item(tmp_path):
    storage = SessionStorageFile(storage_dir=str(tmp_path), session_id="s1")
    storage.set_item("a", "x")
    storage.set_item("b", "y")

    storage.remove_item("a")

    assert storage.get_item("a") is None
    assert storage.get_item("b") == "y"


def test_file_storage_ignores_non_string_values(tmp_path):
    storage = SessionStorageFile(storage_dir=str(tmp_path), session_id="s1")
    with open(storage.get_path(), "w", encoding="utf-8") as f:
        json.dump({"filterTags": [1, 2]}, f)

    assert storage.get_item("filterTags") is None


def test_file_storage_reports_non_object_file(tmp_path):
    storage = SessionStorageFile(storage_dir=str(tmp_path), session_id="s1")
    with open(storage.get_path(), "w", encoding="utf-8") as f:
        json.dump([1, 2], f)

    with pytest.raises(ValueError):
        storage.get_item("filterTags")


@pytest.mark.parametrize("session_id", ["", ".hidden", f"a{os.sep}b"])
def test_file_storage_rejects_invalid_session_ids(tmp_path, session_id):
    with pytest.raises(ValueError):
        SessionStorageFile(storage_dir=str(tmp_path), session_id=session_id)

"""File backed session storage: one JSON object per session id."""

import json
import os

from shared.storage.SessionStorageInterface import SessionStorageInterface


class SessionStorageFile(SessionStorageInterface):
    """
    Stores all slots of one session in ``<storage_dir>/<session_id>.json``.

    The file is rewritten on every set/remove through a temp file and
    ``os.replace`` so a crash never leaves a half-written slot behind.
    """

    def __init__(self, storage_dir: str, session_id: str) -> None:
        if not session_id or os.sep in session_id or session_id.startswith("."):
            raise ValueError(f"Invalid session id: '{session_id}'")
        self._path = os.path.join(storage_dir, f"{session_id}.json")
        os.makedirs(storage_dir, exist_ok=True)

    def get_path(self) -> str:
        return self._path

    def get_item(self, key: str) -> str | None:
        items = self._read()
        value = items.get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        items = self._read_or_empty()
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read_or_empty()
        if items.pop(key, None) is not None:
            self._write(items)

    def _read(self) -> dict:
        """
        Raises:
            OSError: If the file exists but cannot be read.
            ValueError: If the file is not a JSON object.
        """
        if not os.path.exists(self._path):
            return {}
        with open(self._path, "r", encoding="utf-8") as f:
            items = json.load(f)
        if not isinstance(items, dict):
            raise ValueError(f"Session file {self._path} does not hold a JSON object")
        return items

    def _read_or_empty(self) -> dict:
        # a corrupt file is overwritten on the next write instead of blocking it forever
        try:
            return self._read()
        except ValueError:
            return {}

    def _write(self, items: dict) -> None:
        tmp_path = f"{self._path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(items, f)
        os.replace(tmp_path, self._path)

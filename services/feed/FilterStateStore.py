"""Persisted tag filter set of one browser-like session.

The set is stored as a JSON list of tag ids under a single storage slot.
Reads never fail: missing or corrupt data yields an empty set.
"""

import json

from shared.helper.HelperConfig import HelperConfig
from shared.models.errors import PersistenceReadError
from shared.storage.SessionStorageInterface import SessionStorageInterface

STORAGE_KEY = "filterTags"


class FilterStateStore:
    """Owns the ordered, duplicate-free set of active tag filters."""

    def __init__(self, helper_config: HelperConfig, storage: SessionStorageInterface, storage_key: str = STORAGE_KEY) -> None:
        self.logging = helper_config.get_logger()
        self._storage = storage
        self._storage_key = storage_key

    ##########################################
    ################ GETTER ##################
    ##########################################

    def get_active_filters(self) -> list[int]:
        """Return the active tag ids in stored order.

        Returns:
            list[int]: The active filters, empty if nothing valid is stored.
        """
        try:
            return self._load()
        except PersistenceReadError as e:
            self.logging.warning("Ignoring stored tag filters: %s", e)
            return []

    ##########################################
    ############### MUTATIONS ################
    ##########################################

    def add_filter(self, tag_id: int) -> bool:
        """Add a tag filter and persist immediately.

        Args:
            tag_id (int): The tag to filter by.

        Returns:
            bool: True if the set changed, False if the tag was already active.
        """
        filters = self.get_active_filters()
        if tag_id in filters:
            return False
        filters.append(tag_id)
        self._save(filters)
        self.logging.info("Added tag filter %d, active filters: %s", tag_id, filters)
        return True

    def remove_filter(self, tag_id: int) -> bool:
        """Remove a tag filter and persist immediately.

        Args:
            tag_id (int): The tag to stop filtering by.

        Returns:
            bool: True if the set changed, False if the tag was not active.
        """
        filters = self.get_active_filters()
        if tag_id not in filters:
            return False
        filters = [f for f in filters if f != tag_id]
        self._save(filters)
        self.logging.info("Removed tag filter %d, active filters: %s", tag_id, filters)
        return True

    ##########################################
    ############### HELPERS ##################
    ##########################################

    def _load(self) -> list[int]:
        """
        Raises:
            PersistenceReadError: If the slot cannot be read or does not hold a list of integers.
        """
        try:
            raw = self._storage.get_item(self._storage_key)
        except (OSError, ValueError) as e:
            raise PersistenceReadError(f"storage slot '{self._storage_key}' unreadable: {e}") from e
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise PersistenceReadError(f"storage slot '{self._storage_key}' is not valid JSON") from e
        if data is None:
            return []
        if not isinstance(data, list):
            raise PersistenceReadError(f"storage slot '{self._storage_key}' holds {type(data).__name__}, expected a list")

        filters: list[int] = []
        for value in data:
            # bool is an int subclass but never a tag id
            if isinstance(value, bool) or not isinstance(value, int):
                raise PersistenceReadError(f"storage slot '{self._storage_key}' contains non-integer tag id {value!r}")
            if value not in filters:
                filters.append(value)
        return filters

    def _save(self, filters: list[int]) -> None:
        self._storage.set_item(self._storage_key, json.dumps(filters))

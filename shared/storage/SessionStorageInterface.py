from abc import ABC, abstractmethod


class SessionStorageInterface(ABC):
    """
    Key/value slot storage scoped to one client session, modelled after the
    browser sessionStorage: string keys, string values, synchronous access.
    """

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """
        Returns the stored value, or None if the key is not set.

        Raises:
            OSError: If the backing store cannot be read.
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Stores a value. Must be durable once this returns.
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        pass

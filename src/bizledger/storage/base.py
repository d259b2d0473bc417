"""Abstract key-value store interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class KeyValueStore(ABC):
    """Abstract key-value store for bizledger.

    Values are JSON-encoded on write and decoded on read. Every operation is
    atomic for its own key; there is no multi-key transaction.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the backing store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the backing store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize the backing schema (create tables)."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: Any) -> None:
        """Serialize value and write it under key, replacing any prior value.

        Raises:
            StorageWriteError: If serialization or the write fails
        """
        pass

    @abstractmethod
    def get_item(self, key: str) -> Optional[Any]:
        """Read and decode the value under key.

        Returns None if the key is absent or its value cannot be decoded.
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete key. No-op if absent."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Delete every key in this store's namespace only."""
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List keys in this store's namespace."""
        pass

    @abstractmethod
    def get_raw(self, key: str) -> Optional[str]:
        """Return the stored text under key without decoding it."""
        pass

"""Storage layer for bizledger application."""

from bizledger.storage.base import KeyValueStore
from bizledger.storage.factories import create_sqlite_store

__all__ = ["KeyValueStore", "create_sqlite_store"]

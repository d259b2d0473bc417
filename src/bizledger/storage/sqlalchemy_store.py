"""SQLAlchemy-backed key-value store."""

import json
import logging
from typing import Any, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bizledger.domain.errors import StorageReadError, StorageWriteError
from bizledger.storage.base import KeyValueStore
from bizledger.storage.models import StoredItem, create_session_factory
from bizledger.utils.json_utils import dump_json, load_json

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "bizledger"


class SQLAlchemyKeyValueStore(KeyValueStore):
    """SQLAlchemy-based implementation of the KeyValueStore interface."""

    def __init__(self, database_url: str, namespace: str = DEFAULT_NAMESPACE):
        """Initialize the store.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
            namespace: Key namespace owned by this application. Other namespaces
                in the same database are never read or cleared.
        """
        self.database_url = database_url
        self.namespace = namespace
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        # Schema is created automatically by create_session_factory
        pass

    def _find(self, session: Session, key: str) -> Optional[StoredItem]:
        # Another process may have written the row since it was last loaded
        return session.get(StoredItem, (self.namespace, key), populate_existing=True)

    def set_item(self, key: str, value: Any) -> None:
        """Serialize value and write it under key."""
        try:
            encoded = dump_json(value)
        except (TypeError, ValueError) as e:
            logger.error("Error serializing %s: %s", key, e)
            raise StorageWriteError(f"Could not serialize value for '{key}': {e}") from e

        session = self._get_session()
        try:
            item = self._find(session, key)
            if item is None:
                session.add(StoredItem(namespace=self.namespace, key=key, value=encoded))
            else:
                item.value = encoded
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Error saving %s: %s", key, e)
            raise StorageWriteError(f"Could not write '{key}': {e}") from e

    def get_raw(self, key: str) -> Optional[str]:
        """Return the stored text under key without decoding it."""
        session = self._get_session()
        try:
            item = self._find(session, key)
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageReadError(f"Could not read '{key}': {e}") from e
        return None if item is None else item.value

    def get_item(self, key: str) -> Optional[Any]:
        """Read and decode the value under key, None if absent or unreadable."""
        try:
            raw = self.get_raw(key)
            if raw is None:
                return None
            try:
                return load_json(raw)
            except json.JSONDecodeError as e:
                raise StorageReadError(f"Could not decode '{key}': {e}") from e
        except StorageReadError as e:
            logger.warning("Error reading %s: %s", key, e)
            return None

    def remove_item(self, key: str) -> None:
        """Delete key, no-op if absent."""
        session = self._get_session()
        try:
            item = self._find(session, key)
            if item is None:
                return
            session.delete(item)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Error removing %s: %s", key, e)
            raise StorageWriteError(f"Could not remove '{key}': {e}") from e

    def clear(self) -> None:
        """Delete every key in this store's namespace."""
        session = self._get_session()
        try:
            session.query(StoredItem).filter(StoredItem.namespace == self.namespace).delete(
                synchronize_session="evaluate"
            )
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Error clearing storage: %s", e)
            raise StorageWriteError(f"Could not clear namespace '{self.namespace}': {e}") from e

    def keys(self) -> list[str]:
        """List keys in this store's namespace."""
        session = self._get_session()
        try:
            rows = (
                session.query(StoredItem.key)
                .filter(StoredItem.namespace == self.namespace)
                .order_by(StoredItem.key)
                .all()
            )
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageReadError(f"Could not list keys: {e}") from e
        return [row.key for row in rows]

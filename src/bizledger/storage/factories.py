"""Store factory functions for creating key-value store instances."""

import os
from pathlib import Path
from typing import Optional

from bizledger.storage.sqlalchemy_store import DEFAULT_NAMESPACE, SQLAlchemyKeyValueStore


def create_sqlite_store(
    database_path: Optional[str] = None, namespace: Optional[str] = None
) -> SQLAlchemyKeyValueStore:
    """Create a SQLite-backed key-value store.

    Args:
        database_path: Path to SQLite database file. If None, checks BIZLEDGER_DB_PATH
            environment variable, then defaults to ~/.bizledger/bizledger.db
        namespace: Key namespace. If None, checks BIZLEDGER_NAMESPACE environment
            variable, then defaults to "bizledger"

    Returns:
        SQLAlchemyKeyValueStore instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("BIZLEDGER_DB_PATH")

    if database_path is None:
        home = Path.home()
        db_dir = home / ".bizledger"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "bizledger.db")

    if namespace is None:
        namespace = os.environ.get("BIZLEDGER_NAMESPACE", DEFAULT_NAMESPACE)

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyKeyValueStore(database_url, namespace=namespace)

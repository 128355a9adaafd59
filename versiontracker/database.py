"""
SQLite key-value backend.

Uses SQLite with SQLAlchemy; each key is one row holding its JSON value.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from sqlalchemy import create_engine, Column, String, Text, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker

from .storage import KeyValueStore

Base = declarative_base()


class StoreEntry(Base):
    """One stored key."""

    __tablename__ = "store_entries"

    key = Column(String, primary_key=True)  # VersionsTracker.<scope>.<field>
    value = Column(Text, nullable=False)  # JSON
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)


def init_database(db_path: Path):
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy engine bound to the file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)
    return engine


class SqliteStore(KeyValueStore):
    """Key-value store persisted in a SQLite file."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._engine = init_database(self.db_path)
        self._Session = sessionmaker(bind=self._engine)

    def session(self):
        """
        Open a new SQLAlchemy session on this store's database.

        Returns:
            SQLAlchemy session, usable as a context manager
        """
        return self._Session()

    def get(self, key: str) -> Optional[Any]:
        with self.session() as session:
            entry = session.get(StoreEntry, key)
            if entry is None:
                return None
            try:
                return json.loads(entry.value)
            except json.JSONDecodeError:
                return None

    def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        with self.session() as session:
            entry = session.get(StoreEntry, key)
            if entry is None:
                session.add(StoreEntry(key=key, value=payload))
            else:
                entry.value = payload
            session.commit()

    def remove(self, key: str) -> None:
        with self.session() as session:
            entry = session.get(StoreEntry, key)
            if entry is not None:
                session.delete(entry)
                session.commit()

    def close(self) -> None:
        self._engine.dispose()

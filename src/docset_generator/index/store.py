"""SQLite search index storage."""

import logging
import sqlite3
from collections.abc import Iterable
from pathlib import Path

from docset_generator.errors import IndexStoreError
from docset_generator.index.builder import IndexRecord

logger = logging.getLogger(__name__)

_SCHEMA = "CREATE TABLE searchIndex(id INTEGER PRIMARY KEY, name TEXT, type TEXT, path TEXT)"


class SearchIndex:
    """The ``searchIndex`` table of a docset, rebuilt from scratch each run."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    def open(self) -> "SearchIndex":
        """Delete any existing database and create an empty index.

        Raises:
            IndexStoreError: the database could not be created.
        """
        try:
            self.db_path.unlink(missing_ok=True)
            self._conn = sqlite3.connect(self.db_path)
            self._conn.execute(_SCHEMA)
            self._conn.commit()
        except (OSError, sqlite3.Error) as e:
            self.close()
            raise IndexStoreError(f"Cannot create search index at {self.db_path}: {e}") from e
        logger.info("Initialized search index at %s", self.db_path)
        return self

    def add_records(self, records: Iterable[IndexRecord]) -> int:
        """Insert records in order. Returns the number inserted."""
        if self._conn is None:
            raise RuntimeError("Search index is not open")
        rows = [(r.name, r.entry_type.value, r.path) for r in records]
        self._conn.executemany(
            "INSERT INTO searchIndex(name, type, path) VALUES (?, ?, ?)", rows
        )
        self._conn.commit()
        return len(rows)

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "SearchIndex":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

"""SQLite-backed record store for passages and their embeddings.

The table holds one row per reference (``INSERT OR REPLACE``); rows are
read back in insertion order, which is the order ties keep when ranking.
Every method issues a single statement under the store lock, so requests
served on concurrent worker threads never interleave on the connection.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from typing import Optional

from src.paragraphs.config import SearchConfig
from src.paragraphs.errors import StoreReadError, StoreWriteError
from src.paragraphs.records import Passage, StoredRecord
from src.paragraphs.result import Err, Ok, Result
from src.storage.codec import decode_passage, decode_row, encode_embedding

logger = logging.getLogger(__name__)


class ParagraphStore:
    """Record store adapter over a SQLite table."""

    def __init__(
        self,
        config: SearchConfig,
        connection: Optional[sqlite3.Connection] = None,
    ) -> None:
        self._table = config.table_name
        self._lock = threading.Lock()

        if connection is not None:
            self._conn = connection
        else:
            self._conn = sqlite3.connect(
                config.database_path,
                check_same_thread=False,
                isolation_level=None,
            )
        self._conn.row_factory = sqlite3.Row

        self._conn.execute(
            f"CREATE TABLE IF NOT EXISTS {self._table} ("
            "reference TEXT PRIMARY KEY, "
            "text TEXT NOT NULL, "
            "embedding BLOB NOT NULL)"
        )
        self._conn.commit()

    @property
    def count(self) -> int:
        """Return the number of stored rows."""
        with self._lock:
            row = self._conn.execute(f"SELECT COUNT(*) FROM {self._table}").fetchone()
        return int(row[0])

    def insert(self, record: StoredRecord) -> Result[None, StoreWriteError]:
        """Insert a record, replacing any existing row with the same reference."""
        blob = encode_embedding(record.embedding)
        try:
            with self._lock:
                self._conn.execute(
                    f"INSERT OR REPLACE INTO {self._table} (reference, text, embedding) "
                    "VALUES (?, ?, ?)",
                    (record.reference, record.text, blob),
                )
                self._conn.commit()
        except sqlite3.Error as e:
            return Err(StoreWriteError(f"Insert of {record.reference!r} failed: {e}"))
        return Ok(None)

    def fetch_all(self) -> Result[list[StoredRecord], StoreReadError]:
        """Load every decodable record; malformed rows are skipped."""
        try:
            with self._lock:
                rows = self._conn.execute(
                    f"SELECT reference, text, embedding FROM {self._table} ORDER BY rowid"
                ).fetchall()
        except sqlite3.Error as e:
            logger.error("Failed to get paragraphs to compare with: %s", e)
            return Err(StoreReadError(f"Select failed: {e}"))

        records: list[StoredRecord] = []
        for row in rows:
            decoded = decode_row(row)
            if decoded.is_err():
                logger.warning("Skipping malformed row: %s", decoded.error)  # type: ignore[union-attr]
                continue
            records.append(decoded.unwrap())
        return Ok(records)

    def list_passages(self) -> Result[list[Passage], StoreReadError]:
        """Load every stored passage without its embedding."""
        try:
            with self._lock:
                rows = self._conn.execute(
                    f"SELECT reference, text FROM {self._table} ORDER BY rowid"
                ).fetchall()
        except sqlite3.Error as e:
            logger.error("Error getting paragraphs from db: %s", e)
            return Err(StoreReadError(f"Select failed: {e}"))

        passages: list[Passage] = []
        for row in rows:
            decoded = decode_passage(row)
            if decoded.is_err():
                logger.warning("Skipping malformed row: %s", decoded.error)  # type: ignore[union-attr]
                continue
            passages.append(decoded.unwrap())
        return Ok(passages)

    def delete(self, reference: str) -> Result[bool, StoreWriteError]:
        """Delete the row for ``reference``; False if there was none."""
        try:
            with self._lock:
                cursor = self._conn.execute(
                    f"DELETE FROM {self._table} WHERE reference = ?", (reference,)
                )
                self._conn.commit()
                deleted = cursor.rowcount > 0
        except sqlite3.Error as e:
            return Err(StoreWriteError(f"Delete of {reference!r} failed: {e}"))
        return Ok(deleted)

    def clear(self) -> Result[None, StoreWriteError]:
        """Delete all rows."""
        try:
            with self._lock:
                self._conn.execute(f"DELETE FROM {self._table}")
                self._conn.commit()
        except sqlite3.Error as e:
            return Err(StoreWriteError(f"Clear failed: {e}"))
        return Ok(None)

    def close(self) -> None:
        self._conn.close()

"""Tests for the SQLite record store."""

import sqlite3
from pathlib import Path

from src.paragraphs.config import SearchConfig
from src.paragraphs.errors import StoreReadError, StoreWriteError
from src.paragraphs.records import Passage, StoredRecord
from src.storage.sqlite_store import ParagraphStore


def record(reference: str, text: str = "text", embedding: tuple[float, ...] = (1.0, 0.0)) -> StoredRecord:
    return StoredRecord(reference=reference, text=text, embedding=embedding)


class TestParagraphStore:
    def test_insert_and_fetch(self, store: ParagraphStore) -> None:
        assert store.insert(record("r1", "hello world", (0.25, 0.5))).is_ok()
        records = store.fetch_all().unwrap()
        assert records == [record("r1", "hello world", (0.25, 0.5))]
        assert store.count == 1

    def test_fetch_preserves_insertion_order(self, store: ParagraphStore) -> None:
        for ref in ["c", "a", "b"]:
            store.insert(record(ref))
        assert [r.reference for r in store.fetch_all().unwrap()] == ["c", "a", "b"]

    def test_same_reference_replaces(self, store: ParagraphStore) -> None:
        store.insert(record("r1", "old"))
        store.insert(record("r2"))
        store.insert(record("r1", "new"))
        passages = store.list_passages().unwrap()
        assert passages == [Passage("r2", "text"), Passage("r1", "new")]
        assert store.count == 2

    def test_list_passages(self, store: ParagraphStore) -> None:
        store.insert(record("r1", "hello"))
        assert store.list_passages().unwrap() == [Passage(reference="r1", text="hello")]

    def test_delete_existing(self, store: ParagraphStore) -> None:
        store.insert(record("r1"))
        assert store.delete("r1").unwrap() is True
        assert store.count == 0

    def test_delete_unknown(self, store: ParagraphStore) -> None:
        assert store.delete("missing").unwrap() is False

    def test_clear(self, store: ParagraphStore) -> None:
        store.insert(record("r1"))
        store.insert(record("r2"))
        assert store.clear().is_ok()
        assert store.count == 0

    def test_malformed_rows_skipped(
        self, store: ParagraphStore, connection: sqlite3.Connection
    ) -> None:
        store.insert(record("good1"))
        connection.execute(
            "INSERT INTO paragraphs (reference, text, embedding) VALUES (?, ?, ?)",
            ("bad", "text", b"not json"),
        )
        store.insert(record("good2"))
        refs = [r.reference for r in store.fetch_all().unwrap()]
        assert refs == ["good1", "good2"]

    def test_read_failure(self, store: ParagraphStore, connection: sqlite3.Connection) -> None:
        connection.execute("DROP TABLE paragraphs")
        result = store.fetch_all()
        assert result.is_err()
        assert isinstance(result.error, StoreReadError)
        assert isinstance(store.list_passages().error, StoreReadError)  # type: ignore[union-attr]

    def test_write_failure(self, store: ParagraphStore, connection: sqlite3.Connection) -> None:
        connection.execute("DROP TABLE paragraphs")
        result = store.insert(record("r1"))
        assert result.is_err()
        assert isinstance(result.error, StoreWriteError)
        assert isinstance(store.delete("r1").error, StoreWriteError)  # type: ignore[union-attr]

    def test_custom_table_name(self, connection: sqlite3.Connection) -> None:
        config = SearchConfig(database_path=":memory:", table_name="pages")
        store = ParagraphStore(config, connection=connection)
        store.insert(record("r1"))
        assert connection.execute("SELECT COUNT(*) FROM pages").fetchone()[0] == 1

    def test_file_database_persists(self, tmp_path: Path) -> None:
        config = SearchConfig(database_path=str(tmp_path / "paragraphs.db"))
        first = ParagraphStore(config)
        first.insert(record("r1", "kept"))
        first.close()

        second = ParagraphStore(config)
        assert second.list_passages().unwrap() == [Passage("r1", "kept")]
        second.close()

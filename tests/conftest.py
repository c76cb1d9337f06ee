"""Shared fakes and fixtures for the paragraph search tests."""

from __future__ import annotations

import logging
import sqlite3
from typing import Iterator, Optional

import pytest

from src.paragraphs.config import MockConfig, SearchConfig
from src.paragraphs.embeddings import EmbeddingProvider
from src.paragraphs.errors import StoreWriteError, SummarizationError
from src.paragraphs.records import StoredRecord
from src.paragraphs.result import Err, Ok, Result
from src.paragraphs.summarizer import Summarizer
from src.storage.sqlite_store import ParagraphStore


class FakeEmbeddingProvider(EmbeddingProvider):
    """Looks vectors up by text; records every batch it is asked to embed."""

    def __init__(
        self,
        vectors: Optional[dict[str, list[float]]] = None,
        dimensions: int = 3,
        fail_with: Optional[Exception] = None,
        raw_output: Optional[list[list[float]]] = None,
    ) -> None:
        self._vectors = vectors or {}
        self._dimensions = dimensions
        self._fail_with = fail_with
        self._raw_output = raw_output
        self.calls: list[list[str]] = []

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _generate(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        if self._fail_with is not None:
            raise self._fail_with
        if self._raw_output is not None:
            return self._raw_output
        return [self._vectors.get(text, [1.0] * self._dimensions) for text in texts]


class EchoSummarizer(Summarizer):
    """Returns ``summary: <text>``; fails for texts listed in ``fail_on``."""

    def __init__(self, fail_on: tuple[str, ...] = ()) -> None:
        self._fail_on = fail_on
        self.calls: list[str] = []

    def summarize(self, text: str) -> Result[str, SummarizationError]:
        self.calls.append(text)
        if text in self._fail_on:
            return Err(SummarizationError(f"cannot summarize {text!r}"))
        return Ok(f"summary: {text}")


class FlakyStore(ParagraphStore):
    """A store whose inserts fail for the given references."""

    def __init__(self, config: SearchConfig, fail_on: tuple[str, ...] = ()) -> None:
        super().__init__(config)
        self._fail_on = fail_on

    def insert(self, record: StoredRecord) -> Result[None, StoreWriteError]:
        if record.reference in self._fail_on:
            return Err(StoreWriteError(f"disk full for {record.reference}"))
        return super().insert(record)


@pytest.fixture
def config() -> SearchConfig:
    return MockConfig.default()


@pytest.fixture
def connection() -> Iterator[sqlite3.Connection]:
    conn = sqlite3.connect(":memory:", check_same_thread=False)
    yield conn
    conn.close()


@pytest.fixture
def store(config: SearchConfig, connection: sqlite3.Connection) -> ParagraphStore:
    return ParagraphStore(config, connection=connection)


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("src")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

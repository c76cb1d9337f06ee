"""Paragraph service: the entry point wiring the engine together.

The service owns one record store and injects it, together with the
embedding and summarization capabilities, into the ingestion pipeline
and similarity engine. It holds no other state between calls.

Usage:
    config = SearchConfig(mode=RunMode.MOCK, database_path=":memory:")
    service = ParagraphService(config)

    service.ingest([Passage(reference="https://a", text="...")])
    result = service.search("feline pets")
"""

from __future__ import annotations

from typing import Optional, Sequence

from src.paragraphs.config import SearchConfig
from src.paragraphs.embeddings import EmbeddingProvider, create_embedding_provider
from src.paragraphs.errors import (
    EmbeddingProviderError,
    SearchError,
    StoreReadError,
    StoreWriteError,
)
from src.paragraphs.ingestion import IngestionPipeline
from src.paragraphs.records import Passage, QueryResultSet
from src.paragraphs.result import Result
from src.paragraphs.similarity import SimilarityEngine
from src.paragraphs.summarizer import Summarizer, create_summarizer
from src.storage.sqlite_store import ParagraphStore


class ParagraphService:
    """Ingest, search, list and delete stored passages."""

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        embedding_provider: Optional[EmbeddingProvider] = None,
        summarizer: Optional[Summarizer] = None,
        store: Optional[ParagraphStore] = None,
    ) -> None:
        self._config = config or SearchConfig()

        # Dependency injection with sensible defaults
        self._embeddings = embedding_provider or create_embedding_provider(self._config)
        self._summarizer = summarizer or create_summarizer(self._config)
        self._store = store or ParagraphStore(self._config)

        self._ingestion = IngestionPipeline(self._summarizer, self._embeddings, self._store)
        self._similarity = SimilarityEngine(self._embeddings, self._store)

    @property
    def config(self) -> SearchConfig:
        return self._config

    @property
    def record_count(self) -> int:
        """Return the number of stored records."""
        return self._store.count

    def ingest(self, passages: Sequence[Passage]) -> Result[int, EmbeddingProviderError]:
        """Ingest passages; returns the submitted count."""
        return self._ingestion.ingest(passages)

    def search(self, sentence: str) -> Result[QueryResultSet, SearchError]:
        """Rank all stored passages against ``sentence``."""
        return self._similarity.search(sentence)

    def list_all(self) -> Result[list[Passage], StoreReadError]:
        """Return every stored passage, without embeddings."""
        return self._store.list_passages()

    def delete(self, reference: str) -> Result[bool, StoreWriteError]:
        """Delete the passage stored under ``reference``."""
        return self._store.delete(reference)

    def clear(self) -> Result[None, StoreWriteError]:
        """Delete every stored passage."""
        return self._store.clear()

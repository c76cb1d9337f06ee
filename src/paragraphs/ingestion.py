"""Ingestion pipeline: passages in, stored records out.

Each passage is summarized, the surviving summaries are embedded in one
batch, and every (passage, embedding) pair is written to the store with
the passage's original text.

Two failures are tolerated rather than propagated:
- a passage whose summarization fails is dropped from the batch;
- a failed insert does not stop the remaining inserts.

Both are logged. The returned count is always the number of passages
submitted, not the number stored.
"""

from __future__ import annotations

import logging
from typing import Sequence

from src.paragraphs.embeddings import EmbeddingProvider
from src.paragraphs.errors import EmbeddingProviderError
from src.paragraphs.records import Passage, StoredRecord
from src.paragraphs.result import Err, Ok, Result
from src.paragraphs.summarizer import Summarizer
from src.storage.sqlite_store import ParagraphStore

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """Summarize, embed and persist submitted passages."""

    def __init__(
        self,
        summarizer: Summarizer,
        embedding_provider: EmbeddingProvider,
        store: ParagraphStore,
    ) -> None:
        self._summarizer = summarizer
        self._embeddings = embedding_provider
        self._store = store

    def ingest(self, passages: Sequence[Passage]) -> Result[int, EmbeddingProviderError]:
        """Ingest ``passages`` and return how many were submitted."""
        survivors: list[Passage] = []
        summaries: list[str] = []

        for passage in passages:
            summary = self._summarizer.summarize(passage.text)
            if summary.is_err():
                logger.warning(
                    "Dropping %s: %s", passage.reference, summary.error  # type: ignore[union-attr]
                )
                continue
            survivors.append(passage)
            summaries.append(summary.unwrap())

        if survivors:
            embed_result = self._embeddings.embed(summaries)
            if embed_result.is_err():
                logger.error(
                    "Failed to generate embeddings: %s", embed_result.error  # type: ignore[union-attr]
                )
                return Err(embed_result.error)  # type: ignore[union-attr]

            stored = 0
            for passage, vector in zip(survivors, embed_result.unwrap(), strict=True):
                record = StoredRecord(
                    reference=passage.reference,
                    text=passage.text,
                    embedding=tuple(vector),
                )
                insert = self._store.insert(record)
                if insert.is_err():
                    logger.error("Failed to store record: %s", insert.error)  # type: ignore[union-attr]
                    continue
                stored += 1

            logger.info("Generated %d embeddings, stored %d records", len(survivors), stored)

        return Ok(len(passages))

"""Similarity engine: rank every stored passage against a query sentence.

This is a linear scan: the query vector is compared with every stored
vector, O(N * L) per query. Results are sorted by similarity descending
with a stable sort, so equal scores keep the store's row order. NaN
scores (zero-norm vectors) sort last.
"""

from __future__ import annotations

import logging

from src.paragraphs.embeddings import EmbeddingProvider
from src.paragraphs.errors import DimensionMismatchError, SearchError
from src.paragraphs.records import QueryResultSet, SimilarityScore, StoredRecord
from src.paragraphs.result import Err, Ok, Result
from src.paragraphs.vector import cosine_similarity
from src.storage.sqlite_store import ParagraphStore

logger = logging.getLogger(__name__)


def _rank_key(score: SimilarityScore) -> tuple[bool, float]:
    if score.is_nan:
        return (True, 0.0)
    return (False, -score.similarity)


def rank(scores: list[SimilarityScore]) -> list[SimilarityScore]:
    """Sort scores descending, NaN last, preserving order among ties."""
    return sorted(scores, key=_rank_key)


class SimilarityEngine:
    """Embeds a query and scores it against the whole store."""

    def __init__(self, embedding_provider: EmbeddingProvider, store: ParagraphStore) -> None:
        self._embeddings = embedding_provider
        self._store = store

    def search(self, sentence: str) -> Result[QueryResultSet, SearchError]:
        """Return every stored passage ranked by similarity to ``sentence``."""
        query_result = self._embeddings.embed_one(sentence)
        if query_result.is_err():
            logger.error(
                "Failed to generate query embedding: %s", query_result.error  # type: ignore[union-attr]
            )
            return Err(query_result.error)  # type: ignore[union-attr]
        query_vector = query_result.unwrap()

        records_result = self._store.fetch_all()
        if records_result.is_err():
            return Err(records_result.error)  # type: ignore[union-attr]

        scores: list[SimilarityScore] = []
        for record in records_result.unwrap():
            score = self._score(record, query_vector)
            if score.is_err():
                return Err(score.error)  # type: ignore[union-attr]
            scores.append(score.unwrap())

        logger.debug("Scored %d records for %r", len(scores), sentence)
        return Ok(QueryResultSet(sentence=sentence, results=rank(scores)))

    @staticmethod
    def _score(
        record: StoredRecord, query_vector: list[float]
    ) -> Result[SimilarityScore, DimensionMismatchError]:
        if len(record.embedding) != len(query_vector):
            return Err(
                DimensionMismatchError(
                    record.reference, expected=len(query_vector), actual=len(record.embedding)
                )
            )
        return Ok(
            SimilarityScore(
                passage=record.passage,
                similarity=cosine_similarity(record.embedding, query_vector),
            )
        )

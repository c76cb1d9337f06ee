"""Record models for the paragraph search engine.

Defines the data structures flowing through ingestion (Passage),
persistence (StoredRecord) and querying (SimilarityScore, QueryResultSet).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class Passage:
    """A unit of submitted text keyed by a caller-assigned reference."""

    reference: str
    text: str

    def __post_init__(self) -> None:
        if not self.reference.strip():
            raise ValueError("Passage reference cannot be empty")

    @classmethod
    def from_page(cls, page: Mapping[str, Any]) -> Passage:
        """Project a crawled page payload onto a passage.

        Only ``url`` and ``text`` are kept; crawl metadata, screenshot
        URLs and the like are dropped.
        """
        url, text = page["url"], page["text"]
        if not isinstance(url, str) or not isinstance(text, str):
            raise TypeError("Page url and text must be strings")
        return cls(reference=url, text=text)


@dataclass(frozen=True, slots=True)
class StoredRecord:
    """A persisted passage with the embedding of its summary."""

    reference: str
    text: str
    embedding: tuple[float, ...]

    @property
    def passage(self) -> Passage:
        return Passage(reference=self.reference, text=self.text)


@dataclass(frozen=True, slots=True)
class SimilarityScore:
    """A stored passage scored against a query."""

    passage: Passage
    similarity: float

    @property
    def is_nan(self) -> bool:
        return math.isnan(self.similarity)


@dataclass(frozen=True, slots=True)
class QueryResultSet:
    """Ranked results for a single query sentence."""

    sentence: str
    results: list[SimilarityScore] = field(default_factory=list)

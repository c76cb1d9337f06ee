"""Typed failures raised or carried by the search engine.

Every operation returns a ``Result`` whose error side is one of these
exceptions, so callers can branch on the failure kind without parsing
messages.
"""

from __future__ import annotations


class SearchError(Exception):
    """Base class for all engine failures."""


class EmbeddingProviderError(SearchError):
    """The embedding capability was unreachable or returned unusable output."""


class SummarizationError(SearchError):
    """The inference capability failed to summarize a passage."""


class StoreReadError(SearchError):
    """Reading from the record store failed."""


class StoreWriteError(SearchError):
    """Writing to (or deleting from) the record store failed."""


class MalformedRecordError(SearchError):
    """A stored row could not be decoded into a StoredRecord."""


class DimensionMismatchError(SearchError):
    """A stored embedding and the query embedding differ in length."""

    def __init__(self, reference: str, expected: int, actual: int) -> None:
        super().__init__(
            f"Embedding for {reference!r} has {actual} dimensions, "
            f"query has {expected}"
        )
        self.reference = reference
        self.expected = expected
        self.actual = actual

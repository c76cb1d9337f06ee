"""Paragraph search core: ingestion, similarity ranking and retrieval.

The service entry point lives in ``src.paragraphs.service``.
"""

from src.paragraphs.config import MockConfig, RunMode, SearchConfig
from src.paragraphs.records import Passage, QueryResultSet, SimilarityScore, StoredRecord
from src.paragraphs.result import Err, Ok, Result

__all__ = [
    "MockConfig",
    "RunMode",
    "SearchConfig",
    "Passage",
    "QueryResultSet",
    "SimilarityScore",
    "StoredRecord",
    "Result",
    "Ok",
    "Err",
]

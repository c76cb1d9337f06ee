"""Record store adapter: SQLite persistence for passages and embeddings."""

from src.storage.codec import (
    decode_embedding,
    decode_passage,
    decode_row,
    encode_embedding,
)
from src.storage.sqlite_store import ParagraphStore

__all__ = [
    "ParagraphStore",
    "decode_embedding",
    "decode_passage",
    "decode_row",
    "encode_embedding",
]

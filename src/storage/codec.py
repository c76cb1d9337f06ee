"""Row codec for the paragraphs table.

Embeddings are stored as a UTF-8 JSON array of numbers. Every value is a
float32 widened to a Python float, and ``repr`` of a float round-trips
exactly, so narrowing back to float32 on decode is lossless.
"""

from __future__ import annotations

import json
import math
from typing import Any, Mapping, Sequence

import numpy as np

from src.paragraphs.errors import MalformedRecordError
from src.paragraphs.records import Passage, StoredRecord
from src.paragraphs.result import Err, Ok, Result


def encode_embedding(embedding: Sequence[float]) -> bytes:
    """Encode a vector as the blob stored in the embedding column."""
    values = np.asarray(embedding, dtype=np.float32).reshape(-1)
    return json.dumps([float(v) for v in values]).encode("utf-8")


def decode_embedding(blob: Any) -> Result[tuple[float, ...], MalformedRecordError]:
    """Decode an embedding blob back into float32-valued floats."""
    if isinstance(blob, memoryview):
        blob = blob.tobytes()
    if not isinstance(blob, (bytes, bytearray, str)):
        return Err(MalformedRecordError(f"Embedding must be a blob, got {type(blob).__name__}"))

    try:
        values = json.loads(blob)
    except (UnicodeDecodeError, ValueError) as e:
        return Err(MalformedRecordError(f"Embedding blob is not valid JSON: {e}"))

    if not isinstance(values, list) or not values:
        return Err(MalformedRecordError("Embedding must be a non-empty JSON array"))
    if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values):
        return Err(MalformedRecordError("Embedding array must contain only numbers"))

    if not all(math.isfinite(v) for v in values):
        return Err(MalformedRecordError("Embedding array contains non-finite values"))

    with np.errstate(over="ignore"):
        vector = np.asarray(values, dtype=np.float32)
    if not np.all(np.isfinite(vector)):
        return Err(MalformedRecordError("Embedding value out of float32 range"))

    return Ok(tuple(float(v) for v in vector))


def decode_row(row: Mapping[str, Any]) -> Result[StoredRecord, MalformedRecordError]:
    """Decode a ``(reference, text, embedding)`` row into a StoredRecord."""
    decoded = decode_passage(row)
    if decoded.is_err():
        return decoded  # type: ignore[return-value]
    passage = decoded.unwrap()

    embedding = decode_embedding(row["embedding"])
    if embedding.is_err():
        error = embedding.error  # type: ignore[union-attr]
        return Err(MalformedRecordError(f"{passage.reference!r}: {error}"))

    return Ok(
        StoredRecord(
            reference=passage.reference,
            text=passage.text,
            embedding=embedding.unwrap(),
        )
    )


def decode_passage(row: Mapping[str, Any]) -> Result[Passage, MalformedRecordError]:
    """Decode the ``(reference, text)`` columns of a row into a Passage."""
    reference = row["reference"]
    text = row["text"]
    if not isinstance(reference, str) or not reference.strip():
        return Err(MalformedRecordError("reference column is empty"))
    if not isinstance(text, str):
        return Err(MalformedRecordError(f"text column is empty for {reference!r}"))
    return Ok(Passage(reference=reference, text=text))

"""Vector math for similarity ranking.

All arithmetic is float32. Each sum is accumulated strictly left to
right (``cumsum``), not with numpy's pairwise reduction, so scores are
reproducible bit for bit across platforms.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np


def as_float32(vector: Sequence[float]) -> np.ndarray:
    """Return ``vector`` as a one-dimensional float32 array."""
    return np.asarray(vector, dtype=np.float32).reshape(-1)


def _sequential_sum(values: np.ndarray) -> np.float32:
    if values.size == 0:
        return np.float32(0.0)
    return np.cumsum(values, dtype=np.float32)[-1]


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between two equal-length vectors.

    A zero-norm input yields NaN; callers rank NaN last instead of
    treating it as an error.
    """
    va = as_float32(a)
    vb = as_float32(b)
    if va.shape != vb.shape:
        raise ValueError(f"Vectors differ in length: {va.size} != {vb.size}")

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        dot = _sequential_sum(va * vb)
        norm_a = np.sqrt(_sequential_sum(va * va))
        norm_b = np.sqrt(_sequential_sum(vb * vb))
        similarity = np.float32(dot / (norm_a * norm_b))

    return float(similarity)

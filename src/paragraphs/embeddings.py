"""Embedding providers with dependency injection for mock mode.

Supports:
- OpenAI embeddings (production)
- Mock embeddings (demo/testing - deterministic, no API keys)

Providers implement ``_generate``; the base class validates what comes
back so a provider can never hand the engine a missing or ragged vector.
"""

from __future__ import annotations

import hashlib
import logging
import re
from abc import ABC, abstractmethod

import numpy as np

from src.paragraphs.config import SearchConfig, RunMode
from src.paragraphs.errors import EmbeddingProviderError
from src.paragraphs.result import Err, Ok, Result

logger = logging.getLogger(__name__)

_WORD_RE = re.compile(r"[a-z0-9]+")


class EmbeddingProvider(ABC):
    """Abstract embedding provider interface."""

    @abstractmethod
    def _generate(self, texts: list[str]) -> list[list[float]]:
        """Call the underlying capability. May raise anything."""
        ...

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Return the embedding dimensions."""
        ...

    def embed(self, texts: list[str]) -> Result[list[list[float]], EmbeddingProviderError]:
        """Embed ``texts``, one float32-valued vector per input, same order."""
        if not texts:
            return Ok([])

        try:
            raw = self._generate(list(texts))
        except Exception as e:
            logger.error("Embedding provider failed: %s", e)
            return Err(EmbeddingProviderError(f"Embedding failed: {e}"))

        return self._validate(raw, expected=len(texts))

    def embed_one(self, text: str) -> Result[list[float], EmbeddingProviderError]:
        """Embed a single text, failing if the provider returns no vector."""
        return self.embed([text]).and_then(_first_vector)

    def _validate(
        self, raw: list[list[float]], expected: int
    ) -> Result[list[list[float]], EmbeddingProviderError]:
        if raw is None or len(raw) != expected:
            got = 0 if raw is None else len(raw)
            return Err(
                EmbeddingProviderError(f"Expected {expected} embeddings, got {got}")
            )

        vectors = [np.asarray(v, dtype=np.float32).reshape(-1) for v in raw]
        lengths = {v.size for v in vectors}
        if 0 in lengths:
            return Err(EmbeddingProviderError("Provider returned an empty embedding"))
        if len(lengths) > 1:
            return Err(
                EmbeddingProviderError(f"Provider returned ragged embeddings: {sorted(lengths)}")
            )
        if not all(np.all(np.isfinite(v)) for v in vectors):
            return Err(EmbeddingProviderError("Provider returned non-finite embedding values"))

        return Ok([v.tolist() for v in vectors])


def _first_vector(
    vectors: list[list[float]],
) -> Result[list[float], EmbeddingProviderError]:
    if not vectors:
        return Err(EmbeddingProviderError("Provider returned no embedding for the query"))
    return Ok(vectors[0])


class MockEmbeddingProvider(EmbeddingProvider):
    """Deterministic mock embeddings for testing and demos.

    Builds a bag-of-words vector from per-word hashed features, so texts
    sharing words have higher cosine similarity. A faint text-level
    component keeps every vector non-zero.
    """

    BASE_WEIGHT = 0.05

    def __init__(self, dimensions: int = 384) -> None:
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _generate(self, texts: list[str]) -> list[list[float]]:
        return [self._generate_embedding(text) for text in texts]

    def _generate_embedding(self, text: str) -> list[float]:
        text_hash = hashlib.sha256(text.encode()).hexdigest()
        rng = np.random.RandomState(int(text_hash[:8], 16))
        vector = rng.randn(self._dimensions) * self.BASE_WEIGHT

        for word in set(_WORD_RE.findall(text.lower())):
            word_hash = hashlib.md5(word.encode()).hexdigest()
            word_rng = np.random.RandomState(int(word_hash[:8], 16))
            vector += word_rng.randn(self._dimensions)

        norm = np.linalg.norm(vector)
        if norm > 0:
            vector = vector / norm

        return vector.astype(np.float32).tolist()


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """OpenAI API embedding provider for production use."""

    def __init__(self, config: SearchConfig) -> None:
        self._config = config
        self._dimensions = config.embedding_dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _generate(self, texts: list[str]) -> list[list[float]]:
        from langchain_openai import OpenAIEmbeddings

        embeddings_model = OpenAIEmbeddings(
            model=self._config.embedding_model,
            dimensions=self._dimensions,
            openai_api_key=self._config.openai_api_key,
        )
        return embeddings_model.embed_documents(texts)


def create_embedding_provider(config: SearchConfig) -> EmbeddingProvider:
    """Factory function to create the appropriate embedding provider."""
    if config.mode == RunMode.MOCK:
        return MockEmbeddingProvider(dimensions=config.embedding_dimensions)
    return OpenAIEmbeddingProvider(config)

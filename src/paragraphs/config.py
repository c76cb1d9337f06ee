"""Configuration management for the paragraph search engine.

Supports three modes:
- Production: Real summarization and embedding APIs
- Mock: Deterministic fake responses for demos and testing
- Hybrid: Real embeddings with mock summarization (cost-effective testing)
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class RunMode(str, Enum):
    """Engine execution mode."""

    PRODUCTION = "production"
    MOCK = "mock"
    HYBRID = "hybrid"


class SearchConfig(BaseSettings):
    """Main engine configuration.

    All settings can be overridden via environment variables with the
    PARAGRAPHS_ prefix. Example: PARAGRAPHS_MODE=mock,
    PARAGRAPHS_DATABASE_PATH=/var/lib/paragraphs.db
    """

    model_config = {"env_prefix": "PARAGRAPHS_"}

    # Core mode
    mode: RunMode = Field(default=RunMode.MOCK, description="Engine execution mode")

    # Summarization settings
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    llm_model: str = Field(default="gpt-4o-mini", description="Summarization model name")
    llm_temperature: float = Field(default=0.1, description="Summarization temperature")
    llm_max_tokens: int = Field(default=256, description="Max tokens for a summary")

    # Embedding settings
    embedding_model: str = Field(
        default="text-embedding-3-small", description="Embedding model name"
    )
    embedding_dimensions: int = Field(
        default=384, ge=1, description="Embedding vector dimensions"
    )

    # Record store settings
    database_path: str = Field(
        default="paragraphs.db", description="SQLite database file, or :memory:"
    )
    table_name: str = Field(
        default="paragraphs", pattern=r"^[A-Za-z_][A-Za-z0-9_]*$", description="Table name"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level for the src logger")

    # API settings
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")


class MockConfig:
    """Configuration presets for mock/demo mode.

    Returns deterministic responses without requiring any API keys and
    keeps records in an in-memory database.
    """

    @staticmethod
    def default() -> SearchConfig:
        """Create a default mock configuration."""
        return SearchConfig(mode=RunMode.MOCK, database_path=":memory:")

    @staticmethod
    def with_overrides(**kwargs: object) -> SearchConfig:
        """Create mock config with specific overrides."""
        defaults: dict[str, object] = {"mode": RunMode.MOCK, "database_path": ":memory:"}
        defaults.update(kwargs)
        return SearchConfig(**defaults)  # type: ignore[arg-type]

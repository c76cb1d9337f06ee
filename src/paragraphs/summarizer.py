"""Summarization providers with dependency injection for mock mode.

Supports:
- OpenAI chat model (production)
- Mock summarizer (demo/testing - leading sentences, no API keys)

Summaries only feed the embedding step; stored text is never altered.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod

from src.paragraphs.config import SearchConfig, RunMode
from src.paragraphs.errors import SummarizationError
from src.paragraphs.result import Err, Ok, Result

logger = logging.getLogger(__name__)

SUMMARY_PROMPT = (
    "You are a friendly summarization assistant. Take the input text and "
    "return a summary in three sentences. Please keep your responses concise, "
    "up to three sentences.\n\n"
    "Please summarize following text: {text}"
)

_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")


def build_prompt(text: str) -> str:
    """Wrap ``text`` in the fixed summarization instruction."""
    return SUMMARY_PROMPT.format(text=text)


class Summarizer(ABC):
    """Abstract summarization interface."""

    @abstractmethod
    def summarize(self, text: str) -> Result[str, SummarizationError]:
        """Return a short summary of ``text``."""
        ...


class MockSummarizer(Summarizer):
    """Deterministic summarizer returning the leading sentences of the text."""

    def __init__(self, max_sentences: int = 3) -> None:
        self._max_sentences = max_sentences

    def summarize(self, text: str) -> Result[str, SummarizationError]:
        if not text.strip():
            return Err(SummarizationError("Nothing to summarize"))

        sentences = _SENTENCE_END.split(text.strip())
        return Ok(" ".join(sentences[: self._max_sentences]))


class OpenAISummarizer(Summarizer):
    """OpenAI chat model summarizer for production use."""

    def __init__(self, config: SearchConfig) -> None:
        self._config = config

    def summarize(self, text: str) -> Result[str, SummarizationError]:
        try:
            from langchain_openai import ChatOpenAI

            llm = ChatOpenAI(
                model=self._config.llm_model,
                temperature=self._config.llm_temperature,
                max_tokens=self._config.llm_max_tokens,
                openai_api_key=self._config.openai_api_key,
            )
            response = llm.invoke(build_prompt(text))
        except ImportError:
            return Err(SummarizationError("langchain-openai not installed"))
        except Exception as e:
            logger.error("Summarization provider failed: %s", e)
            return Err(SummarizationError(f"OpenAI summarization failed: {e}"))

        summary = str(response.content).strip()
        if not summary:
            return Err(SummarizationError("Provider returned an empty summary"))
        return Ok(summary)


def create_summarizer(config: SearchConfig) -> Summarizer:
    """Factory function to create the appropriate summarizer."""
    if config.mode in (RunMode.MOCK, RunMode.HYBRID):
        return MockSummarizer()
    return OpenAISummarizer(config)

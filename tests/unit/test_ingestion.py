"""Tests for the ingestion pipeline."""

import logging

import pytest

from conftest import EchoSummarizer, FakeEmbeddingProvider, FlakyStore
from src.paragraphs.config import SearchConfig
from src.paragraphs.errors import EmbeddingProviderError
from src.paragraphs.ingestion import IngestionPipeline
from src.paragraphs.records import Passage
from src.storage.sqlite_store import ParagraphStore

PASSAGES = [
    Passage(reference="a", text="cats are great pets"),
    Passage(reference="b", text="dogs are loyal companions"),
    Passage(reference="c", text="tomatoes need sun"),
]


class TestIngestionPipeline:
    def test_returns_submitted_count(self, store: ParagraphStore) -> None:
        pipeline = IngestionPipeline(EchoSummarizer(), FakeEmbeddingProvider(), store)
        result = pipeline.ingest(PASSAGES)
        assert result.unwrap() == 3
        assert store.count == 3

    def test_embeds_summaries_in_one_batch(self, store: ParagraphStore) -> None:
        embeddings = FakeEmbeddingProvider()
        pipeline = IngestionPipeline(EchoSummarizer(), embeddings, store)
        pipeline.ingest(PASSAGES)
        assert embeddings.calls == [[f"summary: {p.text}" for p in PASSAGES]]

    def test_stores_original_text_with_summary_embedding(self, store: ParagraphStore) -> None:
        embeddings = FakeEmbeddingProvider(
            vectors={"summary: hello world": [0.5, 0.25, 0.125]}
        )
        pipeline = IngestionPipeline(EchoSummarizer(), embeddings, store)
        pipeline.ingest([Passage(reference="r1", text="hello world")])

        [stored] = store.fetch_all().unwrap()
        assert stored.reference == "r1"
        assert stored.text == "hello world"
        assert stored.embedding == (0.5, 0.25, 0.125)

    def test_embeddings_align_with_survivors(self, store: ParagraphStore) -> None:
        embeddings = FakeEmbeddingProvider(
            vectors={
                "summary: cats are great pets": [1.0, 0.0, 0.0],
                "summary: tomatoes need sun": [0.0, 0.0, 1.0],
            }
        )
        summarizer = EchoSummarizer(fail_on=("dogs are loyal companions",))
        pipeline = IngestionPipeline(summarizer, embeddings, store)
        pipeline.ingest(PASSAGES)

        stored = {r.reference: r.embedding for r in store.fetch_all().unwrap()}
        assert stored == {"a": (1.0, 0.0, 0.0), "c": (0.0, 0.0, 1.0)}

    def test_summarization_failure_drops_passage_but_count_is_submitted(
        self, store: ParagraphStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        summarizer = EchoSummarizer(fail_on=("dogs are loyal companions",))
        pipeline = IngestionPipeline(summarizer, FakeEmbeddingProvider(), store)

        with caplog.at_level(logging.WARNING, logger="src.paragraphs.ingestion"):
            result = pipeline.ingest(PASSAGES)

        assert result.unwrap() == 3
        assert [p.reference for p in store.list_passages().unwrap()] == ["a", "c"]
        assert "Dropping b" in caplog.text

    def test_all_dropped_skips_embedding(self, store: ParagraphStore) -> None:
        embeddings = FakeEmbeddingProvider()
        summarizer = EchoSummarizer(fail_on=tuple(p.text for p in PASSAGES))
        pipeline = IngestionPipeline(summarizer, embeddings, store)

        assert pipeline.ingest(PASSAGES).unwrap() == 3
        assert embeddings.calls == []
        assert store.count == 0

    def test_embedding_failure_aborts_without_storing(self, store: ParagraphStore) -> None:
        embeddings = FakeEmbeddingProvider(fail_with=TimeoutError("slow model"))
        pipeline = IngestionPipeline(EchoSummarizer(), embeddings, store)

        result = pipeline.ingest(PASSAGES)
        assert result.is_err()
        assert isinstance(result.error, EmbeddingProviderError)
        assert store.count == 0

    def test_malformed_embedding_output_aborts(self, store: ParagraphStore) -> None:
        embeddings = FakeEmbeddingProvider(raw_output=[[1.0, 0.0, 0.0]])
        pipeline = IngestionPipeline(EchoSummarizer(), embeddings, store)

        assert pipeline.ingest(PASSAGES).is_err()
        assert store.count == 0

    def test_non_finite_embedding_aborts_without_storing(self, store: ParagraphStore) -> None:
        embeddings = FakeEmbeddingProvider(
            vectors={"summary: dogs are loyal companions": [float("nan"), 1.0, 0.0]}
        )
        pipeline = IngestionPipeline(EchoSummarizer(), embeddings, store)

        result = pipeline.ingest(PASSAGES)
        assert result.is_err()
        assert isinstance(result.error, EmbeddingProviderError)
        assert store.count == 0

    def test_insert_failure_tolerated_and_not_reported(
        self, config: SearchConfig, caplog: pytest.LogCaptureFixture
    ) -> None:
        store = FlakyStore(config, fail_on=("b",))
        pipeline = IngestionPipeline(EchoSummarizer(), FakeEmbeddingProvider(), store)

        with caplog.at_level(logging.ERROR, logger="src.paragraphs.ingestion"):
            result = pipeline.ingest(PASSAGES)

        assert result.unwrap() == 3
        assert [p.reference for p in store.list_passages().unwrap()] == ["a", "c"]
        assert "disk full for b" in caplog.text

    def test_empty_ingest(self, store: ParagraphStore) -> None:
        embeddings = FakeEmbeddingProvider()
        pipeline = IngestionPipeline(EchoSummarizer(), embeddings, store)
        assert pipeline.ingest([]).unwrap() == 0
        assert embeddings.calls == []

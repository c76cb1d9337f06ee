"""FastAPI REST API for the paragraph search engine.

Routes:
- GET /embeddings?sentence=...   rank stored passages against a sentence
- GET /embeddings                list stored passages
- POST /embeddings               ingest crawled pages
- DELETE /embeddings/{reference} delete one passage

Handlers are plain ``def`` functions, so FastAPI runs each blocking
request on a worker thread.
"""

from __future__ import annotations

import logging
import math
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from src.paragraphs.config import SearchConfig
from src.paragraphs.errors import EmbeddingProviderError, SearchError
from src.paragraphs.log import configure_logging
from src.paragraphs.records import Passage, QueryResultSet
from src.paragraphs.service import ParagraphService

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


# --- Request/Response Models ---


class PageInput(BaseModel):
    """A crawled page. Only ``url`` and ``text`` are indexed."""

    model_config = ConfigDict(extra="ignore")

    url: str = Field(..., pattern=r"\S", description="Page URL, used as the reference")
    text: str = Field(..., description="Page body text")

    def to_passage(self) -> Passage:
        return Passage(reference=self.url, text=self.text)


class ParagraphOut(BaseModel):
    """A stored passage."""

    reference: str
    text: str


class SimilarityOut(BaseModel):
    """A passage scored against the query. NaN scores are reported as null."""

    paragraph: ParagraphOut
    similarity: Optional[float]


class SearchResponse(BaseModel):
    """Ranked results for a query sentence."""

    sentence: str
    results: list[SimilarityOut]


class IngestResponse(BaseModel):
    """Response from page ingestion."""

    stored: int
    message: str


class DeleteResponse(BaseModel):
    """Response from deleting a passage."""

    reference: str
    deleted: bool


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    mode: str
    record_count: int
    version: str = VERSION


def to_search_response(result_set: QueryResultSet) -> SearchResponse:
    return SearchResponse(
        sentence=result_set.sentence,
        results=[
            SimilarityOut(
                paragraph=ParagraphOut(
                    reference=score.passage.reference, text=score.passage.text
                ),
                similarity=None if math.isnan(score.similarity) else score.similarity,
            )
            for score in result_set.results
        ],
    )


def raise_for_error(error: SearchError) -> None:
    """Translate an engine failure into an HTTP error."""
    status = 502 if isinstance(error, EmbeddingProviderError) else 500
    logger.error("Request failed: %s", error)
    raise HTTPException(status_code=status, detail=str(error))


# --- Application ---


def get_service(request: Request) -> ParagraphService:
    """Return the service built at startup."""
    return request.app.state.service


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the service once, before the first request is served."""
    if app.state.service is None:
        app.state.service = ParagraphService(app.state.config)
    yield


def create_app(
    config: Optional[SearchConfig] = None,
    service: Optional[ParagraphService] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Optional SearchConfig. Defaults to environment-based config.
        service: Optional prebuilt service, e.g. with fake capabilities.
    """
    config = config or (service.config if service is not None else SearchConfig())
    configure_logging(config.log_level)

    app = FastAPI(
        title="Paragraph Embeddings",
        description="Semantic search over summarized, embedded text passages",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.service = service

    @app.middleware("http")
    async def log_requests(request: Request, call_next):  # type: ignore[no-untyped-def]
        logger.info("Received %s request at %s", request.method, request.url.path)
        return await call_next(request)

    @app.get("/health", response_model=HealthResponse)
    def health(svc: ParagraphService = Depends(get_service)) -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            mode=svc.config.mode.value,
            record_count=svc.record_count,
        )

    @app.get("/embeddings", response_model=None)
    def get_paragraphs(
        sentence: Optional[str] = None,
        svc: ParagraphService = Depends(get_service),
    ) -> SearchResponse | list[ParagraphOut]:
        """Search when ``sentence`` is given, otherwise list every passage."""
        if sentence is not None:
            result = svc.search(sentence)
            if result.is_err():
                raise_for_error(result.error)  # type: ignore[union-attr]
            return to_search_response(result.unwrap())

        listed = svc.list_all()
        if listed.is_err():
            raise_for_error(listed.error)  # type: ignore[union-attr]
        return [ParagraphOut(reference=p.reference, text=p.text) for p in listed.unwrap()]

    @app.post("/embeddings", response_model=IngestResponse, status_code=201)
    def create_paragraphs(
        pages: list[PageInput],
        svc: ParagraphService = Depends(get_service),
    ) -> IngestResponse:
        """Summarize, embed and store crawled pages."""
        result = svc.ingest([page.to_passage() for page in pages])
        if result.is_err():
            raise_for_error(result.error)  # type: ignore[union-attr]

        stored = result.unwrap()
        return IngestResponse(stored=stored, message=f"Stored {stored} records")

    @app.delete("/embeddings/{reference:path}", response_model=DeleteResponse)
    def delete_paragraph(
        reference: str,
        svc: ParagraphService = Depends(get_service),
    ) -> DeleteResponse:
        """Delete the passage stored under ``reference``."""
        result = svc.delete(reference)
        if result.is_err():
            raise_for_error(result.error)  # type: ignore[union-attr]

        deleted = result.unwrap()
        if deleted:
            logger.info("Deleted one record")
        return DeleteResponse(reference=reference, deleted=deleted)

    return app


# Default app instance for uvicorn
app = create_app()

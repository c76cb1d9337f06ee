"""CLI interface for the paragraph search engine.

Provides command-line access to engine operations:
- demo: Ingest sample passages into an in-memory store and run a query
- ingest: Upload crawled page datasets (JSON arrays of pages)
- search: Rank stored passages against a sentence
- list: Show stored passages
- delete: Remove a passage by reference
- serve: Start the FastAPI server
"""

from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import Any

from src.paragraphs.config import MockConfig, SearchConfig
from src.paragraphs.log import configure_logging
from src.paragraphs.records import Passage, QueryResultSet
from src.paragraphs.service import ParagraphService

logger = logging.getLogger(__name__)


SAMPLE_PASSAGES = [
    Passage(
        reference="https://example.com/pets/cats",
        text=(
            "Cats are great pets for people who live in small apartments. "
            "They are independent, clean and quiet. Most cats are happy to "
            "spend the day sleeping in a sunny spot by the window."
        ),
    ),
    Passage(
        reference="https://example.com/pets/dogs",
        text=(
            "Dogs are loyal companions that thrive on attention and exercise. "
            "A dog needs daily walks and enjoys playing fetch. Training a "
            "puppy early builds a strong bond with its owner."
        ),
    ),
    Passage(
        reference="https://example.com/garden/tomatoes",
        text=(
            "Tomatoes grow best in full sun with regular watering. Stake the "
            "plants early so the fruit stays off the ground. Harvest when the "
            "tomatoes are firm and fully coloured."
        ),
    ),
    Passage(
        reference="https://example.com/kitchen/bread",
        text=(
            "Baking bread at home needs only flour, water, salt and yeast. "
            "Knead the dough until it is smooth, then let it rise. Bake in a "
            "hot oven until the crust is golden brown."
        ),
    ),
]


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Paragraph Embeddings - semantic search over text passages"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    demo_parser = subparsers.add_parser("demo", help="Run a complete demo")
    demo_parser.add_argument("--query", default="feline pets", help="Query to demo")

    ingest_parser = subparsers.add_parser("ingest", help="Ingest crawled page datasets")
    ingest_parser.add_argument("files", nargs="+", help="JSON files holding arrays of pages")
    ingest_parser.add_argument(
        "--batch-size", type=int, default=8, help="Pages submitted per ingestion call"
    )

    search_parser = subparsers.add_parser("search", help="Search stored passages")
    search_parser.add_argument("sentence", help="Sentence to search for")

    subparsers.add_parser("list", help="List stored passages")

    delete_parser = subparsers.add_parser("delete", help="Delete a stored passage")
    delete_parser.add_argument("reference", help="Reference of the passage to delete")

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--host", default=None, help="Host")
    serve_parser.add_argument("--port", type=int, default=None, help="Port")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    config = SearchConfig()
    configure_logging(config.log_level)

    if args.command == "demo":
        run_demo(args.query)
    elif args.command == "ingest":
        run_ingest(args.files, args.batch_size, config)
    elif args.command == "search":
        run_search(args.sentence, config)
    elif args.command == "list":
        run_list(config)
    elif args.command == "delete":
        run_delete(args.reference, config)
    elif args.command == "serve":
        run_serve(args.host or config.api_host, args.port or config.api_port)


def result_set_to_dict(result_set: QueryResultSet) -> dict[str, Any]:
    return {
        "sentence": result_set.sentence,
        "results": [
            {
                "paragraph": {
                    "reference": score.passage.reference,
                    "text": score.passage.text,
                },
                "similarity": None if math.isnan(score.similarity) else score.similarity,
            }
            for score in result_set.results
        ],
    }


def run_demo(query: str) -> None:
    """Run a complete demo with sample data."""
    print("=" * 60)
    print("Paragraph Embeddings - Demo Mode")
    print("=" * 60)
    print()

    service = ParagraphService(MockConfig.default())

    print(f"[1/3] Ingesting {len(SAMPLE_PASSAGES)} sample passages...")
    result = service.ingest(SAMPLE_PASSAGES)
    if result.is_err():
        print(f"ERROR: {result.error}")  # type: ignore[union-attr]
        sys.exit(1)
    print(f"      Stored {service.record_count} records")
    print()

    print(f'[2/3] Searching: "{query}"')
    print()

    search_result = service.search(query)
    if search_result.is_err():
        print(f"ERROR: {search_result.error}")  # type: ignore[union-attr]
        sys.exit(1)

    output = search_result.unwrap()

    print("[3/3] Results:")
    print("-" * 60)
    for i, score in enumerate(output.results, 1):
        print(f"  [{i}] {score.passage.reference} (similarity: {score.similarity:.3f})")
        print(f"      {score.passage.text[:100]}...")
        print()
    print("=" * 60)

    print("JSON output:")
    print(json.dumps(result_set_to_dict(output), indent=2))


def load_pages(path: Path) -> list[Passage]:
    """Read a JSON array of crawled pages and project them to passages."""
    data = json.loads(path.read_text())
    if isinstance(data, dict):
        data = [data]

    passages: list[Passage] = []
    for item in data:
        try:
            passages.append(Passage.from_page(item))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping page without url/text in %s: %s", path, e)
    return passages


def run_ingest(files: list[str], batch_size: int, config: SearchConfig) -> None:
    """Ingest page datasets from files in batches."""
    passages: list[Passage] = []
    for file_path in files:
        path = Path(file_path)
        if not path.exists():
            print(f"WARNING: File not found: {file_path}")
            continue
        try:
            passages.extend(load_pages(path))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            print(f"WARNING: Invalid JSON in {file_path}: {e}")

    if not passages:
        print("No valid pages to ingest")
        sys.exit(1)

    service = ParagraphService(config)
    size = max(1, batch_size)
    submitted = 0
    for start in range(0, len(passages), size):
        result = service.ingest(passages[start : start + size])
        if result.is_err():
            print(f"ERROR: {result.error}")  # type: ignore[union-attr]
            sys.exit(1)
        submitted += result.unwrap()

    print(f"Stored {submitted} records from {len(files)} files")


def run_search(sentence: str, config: SearchConfig) -> None:
    """Search the configured store and print JSON results."""
    service = ParagraphService(config)
    result = service.search(sentence)
    if result.is_err():
        print(f"ERROR: {result.error}")  # type: ignore[union-attr]
        sys.exit(1)
    print(json.dumps(result_set_to_dict(result.unwrap()), indent=2))


def run_list(config: SearchConfig) -> None:
    """Print every stored passage as JSON."""
    service = ParagraphService(config)
    result = service.list_all()
    if result.is_err():
        print(f"ERROR: {result.error}")  # type: ignore[union-attr]
        sys.exit(1)
    print(json.dumps(
        [{"reference": p.reference, "text": p.text} for p in result.unwrap()],
        indent=2,
    ))


def run_delete(reference: str, config: SearchConfig) -> None:
    """Delete a passage by reference."""
    service = ParagraphService(config)
    result = service.delete(reference)
    if result.is_err():
        print(f"ERROR: {result.error}")  # type: ignore[union-attr]
        sys.exit(1)
    if result.unwrap():
        print(f"Deleted {reference}")
    else:
        print(f"No record for {reference}")


def run_serve(host: str, port: int) -> None:
    """Start the FastAPI server."""
    import uvicorn
    uvicorn.run("src.api.app:app", host=host, port=port)


if __name__ == "__main__":
    main()

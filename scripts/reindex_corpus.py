"""
CLI that embeds the movie corpus and writes it into the vector store.

Example:
    python -m scripts.reindex_corpus --embed-batch 64 --clear
"""

from __future__ import annotations

import argparse
import logging
import sys

from vector_query.config import settings, setup_logging
from vector_query.embeddings.client import EmbeddingsClient
from vector_query.indexing.pipeline import ReindexService
from vector_query.search import get_search_client


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Embed the movie corpus into the vector store.")
    parser.add_argument(
        "--embed-batch",
        type=int,
        default=64,
        help="Number of plots per embedding request.",
    )
    parser.add_argument("--corpus", default=settings.corpus_path, help="JSON-lines corpus file")
    parser.add_argument("--clear", action="store_true", help="Drop existing vector indexes first")
    return parser.parse_args()


def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)
    args = parse_args()

    service = ReindexService(
        get_search_client(),
        EmbeddingsClient(),
        settings.vector_field,
        corpus_path=args.corpus,
        embed_batch=args.embed_batch,
        clear=args.clear,
        logger_=logger,
    )

    try:
        summary = service.run()
    except Exception:
        logger.exception("Reindex failed")
        sys.exit(1)

    print(f"Indexed documents: {summary.indexed_documents} (elapsed {summary.elapsed_sec:.2f}s)")


if __name__ == "__main__":
    main()

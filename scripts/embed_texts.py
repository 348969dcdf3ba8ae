"""
CLI that embeds texts with the configured provider and prints the vectors as JSON.

The output can be saved and passed back to ``scripts.search_query --vector-file``.

Example:
    python -m scripts.embed_texts "time travel" > time_travel.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from vector_query.config import settings, setup_logging
from vector_query.embeddings.client import EmbeddingsClient


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Embed texts and print vectors as JSON.")
    parser.add_argument("texts", nargs="+", help="Texts to embed (one provider call for all of them)")
    parser.add_argument("--model", default=settings.embedding_model_name, help="Embedding model name")
    parser.add_argument("--dimensions", type=int, default=settings.embedding_dimensions, help="Output dimensions")
    parser.add_argument(
        "--no-truncation",
        action="store_true",
        help="Reject inputs longer than the model context instead of truncating them",
    )
    return parser.parse_args()


def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)
    args = parse_args()

    try:
        client = EmbeddingsClient(
            model=args.model,
            dimensions=args.dimensions,
            truncation=not args.no_truncation,
        )
        vectors = client.embed_texts(args.texts)
    except Exception:
        logger.exception("Embedding failed")
        sys.exit(1)

    json.dump(vectors, sys.stdout)
    sys.stdout.write("\n")


if __name__ == "__main__":
    main()

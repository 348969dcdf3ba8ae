"""
CLI for vector similarity search over the movie collection.

Examples:
    python -m scripts.search_query --query "time travel" --limit 10
    python -m scripts.search_query --query "time travel" --year-from 1980 --year-to 1989
    python -m scripts.search_query --vector-file time_travel.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List

from vector_query.config import settings, setup_logging
from vector_query.embeddings.client import EmbeddingsClient
from vector_query.search import get_search_client
from vector_query.vector_store.base import QueryFilter


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search stored movies by plot similarity.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--query", "-q", help="Text to embed as the query vector")
    source.add_argument("--vector-file", help="JSON file holding a precomputed query vector")
    parser.add_argument("--limit", type=int, default=10, help="How many results to return")
    parser.add_argument("--path", default=settings.vector_field, help="Vector field to search")
    parser.add_argument("--year-from", type=int, default=None, help="Inclusive lower bound on year")
    parser.add_argument("--year-to", type=int, default=None, help="Inclusive upper bound on year")
    parser.add_argument("--no-score", action="store_true", help="Do not request similarity scores")
    return parser.parse_args()


def load_vector(path: str) -> List[float]:
    with open(path, encoding="utf-8") as handle:
        payload = json.load(handle)
    # embed_texts output is a list of vectors; a bare vector is accepted too
    if payload and isinstance(payload[0], list):
        payload = payload[0]
    return [float(value) for value in payload]


def year_filter(year_from: int | None, year_to: int | None) -> QueryFilter | None:
    if year_from is not None and year_to is not None:
        return QueryFilter.between("year", year_from, year_to)
    if year_from is not None:
        return QueryFilter.gte("year", year_from)
    if year_to is not None:
        return QueryFilter.lte("year", year_to)
    return None


def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)
    args = parse_args()

    try:
        vector = load_vector(args.vector_file) if args.vector_file else EmbeddingsClient().embed_text(args.query)
        results = get_search_client().search(
            args.path,
            vector,
            limit=args.limit,
            query_filter=year_filter(args.year_from, args.year_to),
            include_score=not args.no_score,
        )
    except Exception:
        logger.exception("Search failed")
        sys.exit(1)

    if not results.is_complete:
        print(f"Index is {results.index_state.value}; results may be incomplete")
    if not results:
        print("No results")
        return

    for idx, match in enumerate(results, start=1):
        fields = match.document.fields
        score = f" score={match.score:.4f}" if match.score is not None else ""
        print(f"#{idx}{score} {fields.get('title', match.document.id)} ({fields.get('year', '?')})")

    if not args.no_score:
        print(f"\nMean score delta between ranks: {results.mean_score_delta():.5f}")


if __name__ == "__main__":
    main()

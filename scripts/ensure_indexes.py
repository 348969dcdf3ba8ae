"""
CLI that creates missing vector indexes and optionally waits until they are ready.

Example:
    python -m scripts.ensure_indexes --wait --timeout 300
"""

from __future__ import annotations

import argparse
import logging
import sys

from vector_query.config import setup_logging
from vector_query.search import get_search_client


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create missing vector indexes.")
    parser.add_argument("--wait", action="store_true", help="Block until every index is ready")
    parser.add_argument("--timeout", type=float, default=None, help="Give up waiting after N seconds")
    return parser.parse_args()


def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)
    args = parse_args()

    client = get_search_client()
    try:
        created = client.ensure_indexes()
        if args.wait:
            client.wait_until_ready(timeout=args.timeout)
    except Exception:
        logger.exception("Ensuring indexes failed")
        sys.exit(1)

    print(f"Created: {', '.join(created) if created else '<none>'}")
    for definition in client.indexes.values():
        print(f"  {definition.name} ({definition.path}): {client.index_state(definition.path).value}")


if __name__ == "__main__":
    main()

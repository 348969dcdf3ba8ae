"""
Utility script to inspect stored documents without embeddings.

Usage:
    python -m scripts.inspect_index --limit 5 --offset 0
"""

from __future__ import annotations

import argparse
import json

from vector_query.config import settings
from vector_query.vector_store.chroma_store import ChromaVectorStore


def main() -> None:
    parser = argparse.ArgumentParser(description="Inspect stored documents in Chroma.")
    parser.add_argument("--limit", type=int, default=5, help="Number of documents to show")
    parser.add_argument("--offset", type=int, default=0, help="Offset for pagination")
    parser.add_argument("--path", default=settings.vector_field, help="Vector field to inspect")
    args = parser.parse_args()

    store = ChromaVectorStore()
    info = store.get_index(args.path)
    if info is None:
        print(f"No vector index for '{args.path}'")
        return

    definition = info.definition
    print(
        f"Index {definition.name}: dimensions={definition.dimensions} "
        f"similarity={definition.similarity.value} filter_fields={list(definition.filter_fields)} "
        f"quantization={definition.quantization.value} state={info.state.value}"
    )
    print(f"Total documents: {store.count(args.path)}")

    collection = store.client.get_collection(store.chroma_name(args.path))
    result = collection.get(include=["metadatas"], limit=args.limit, offset=args.offset)

    ids = result.get("ids", [])
    metas = result.get("metadatas", []) or []
    print(f"Showing {len(ids)} documents (offset={args.offset}, limit={args.limit})")
    for idx, (doc_id, meta) in enumerate(zip(ids, metas), start=1):
        ordered_meta = meta or {}
        order = ["title", "year", "genres"]
        ordered_meta = {k: ordered_meta.get(k) for k in order if k in ordered_meta} | {
            k: v for k, v in ordered_meta.items() if k not in order and k != "plot"
        }
        print(f"\n#{idx}: {doc_id}")
        print("Fields:", json.dumps(ordered_meta, ensure_ascii=False))
        plot = (meta or {}).get("plot", "")
        print("Plot:", plot[:300] + ("..." if len(plot) > 300 else ""))


if __name__ == "__main__":
    main()

"""
Indexing pipeline: load corpus, embed plots, and write embeddings into the vector store.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from tqdm import tqdm

from vector_query.embeddings.client import EmbeddingsClient
from vector_query.indexing.corpus import EMBEDDED_TEXT_FIELD, load_movies
from vector_query.search.client import SimilaritySearchClient

logger = logging.getLogger(__name__)


def reindex_corpus(
    search_client: SimilaritySearchClient,
    embeddings_client: EmbeddingsClient,
    path: str,
    corpus_path: str | Path | None = None,
    embed_batch: int = 64,
    clear: bool = False,
) -> int:
    if embed_batch <= 0:
        raise ValueError("embed_batch must be greater than zero")

    started = time.time()
    store = search_client.store
    if clear:
        store.clear()
    search_client.ensure_indexes()

    documents = load_movies(corpus_path)
    total = len(documents)

    # One provider call per batch; a failed batch aborts the run
    for i in tqdm(range(0, total, embed_batch), desc="Embedding", unit="batch"):
        batch = documents[i : i + embed_batch]
        embeddings = embeddings_client.embed_texts([doc.fields[EMBEDDED_TEXT_FIELD] for doc in batch])
        for doc, embedding in zip(batch, embeddings):
            doc.embedding = embedding
        store.upsert_documents(path, batch)
        logger.info("Upserted batch", extra={"count": len(batch), "offset": i})

    elapsed = time.time() - started
    logger.info(
        "Reindex completed",
        extra={"documents_indexed": total, "elapsed_sec": round(elapsed, 2)},
    )
    return total


@dataclass
class ReindexSummary:
    indexed_documents: int
    elapsed_sec: float


class ReindexService:
    """Embeds the movie corpus into the configured vector field."""

    def __init__(
        self,
        search_client: SimilaritySearchClient,
        embeddings_client: EmbeddingsClient,
        path: str,
        corpus_path: str | Path | None = None,
        embed_batch: int = 64,
        clear: bool = False,
        logger_: logging.Logger | None = None,
    ) -> None:
        self.search_client = search_client
        self.embeddings_client = embeddings_client
        self.path = path
        self.corpus_path = corpus_path
        self.embed_batch = embed_batch
        self.clear = clear
        self.logger = logger_ or logging.getLogger(__name__)

    def run(self) -> ReindexSummary:
        started = time.time()
        indexed = reindex_corpus(
            self.search_client,
            self.embeddings_client,
            self.path,
            corpus_path=self.corpus_path,
            embed_batch=self.embed_batch,
            clear=self.clear,
        )
        elapsed = time.time() - started
        self.logger.info(
            "ReindexService completed",
            extra={"indexed_documents": indexed, "elapsed_sec": round(elapsed, 2)},
        )
        return ReindexSummary(indexed_documents=indexed, elapsed_sec=elapsed)


__all__ = ["reindex_corpus", "ReindexService", "ReindexSummary"]

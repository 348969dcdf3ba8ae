"""
Chroma-based VectorStore implementation.

Each vector field of the document collection is stored as its own Chroma collection
named ``<collection>.<field>``; the index definition lives in the collection metadata.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional

import chromadb
from chromadb.errors import NotFoundError

from vector_query.config import settings
from vector_query.errors import DimensionMismatchError, IndexNotFoundError
from vector_query.vector_store.base import (
    Document,
    IndexInfo,
    IndexState,
    MatchResult,
    Quantization,
    QueryFilter,
    Similarity,
    VectorIndexDefinition,
    VectorStore,
)

CHROMA_PERSIST_DIR = settings.vector_store_path
DOCUMENT_COLLECTION = settings.document_collection

HNSW_SPACES = {
    Similarity.DOT_PRODUCT: "ip",
    Similarity.COSINE: "cosine",
    Similarity.EUCLIDEAN: "l2",
}

logger = logging.getLogger(__name__)


def distance_to_score(similarity: Similarity, distance: float) -> float:
    """Convert a Chroma distance into a higher-is-better score in [0, 1]."""
    if similarity is Similarity.EUCLIDEAN:
        # Chroma reports squared L2
        return 1.0 / (1.0 + math.sqrt(max(distance, 0.0)))
    return (1.0 + (1.0 - distance)) / 2.0


def _to_metadata(fields: Dict[str, Any]) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {}
    for key, value in fields.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            value = ", ".join(str(item) for item in value)
        metadata[key] = value
    return metadata


class ChromaVectorStore(VectorStore):
    def __init__(
        self,
        persist_directory: str | None = None,
        collection_name: str = DOCUMENT_COLLECTION,
        client: Any = None,
    ) -> None:
        self.persist_directory = persist_directory or CHROMA_PERSIST_DIR
        self.collection_name = collection_name
        self.client = client or chromadb.PersistentClient(path=self.persist_directory)
        logger.info(
            "ChromaVectorStore initialised",
            extra={"persist_directory": self.persist_directory, "collection": self.collection_name},
        )

    def chroma_name(self, path: str) -> str:
        return f"{self.collection_name}.{path}"

    def _collection(self, path: str):
        try:
            return self.client.get_collection(self.chroma_name(path))
        except (NotFoundError, ValueError):
            return None

    def _require_collection(self, path: str):
        collection = self._collection(path)
        if collection is None:
            raise IndexNotFoundError(path)
        return collection

    @staticmethod
    def _definition_from_metadata(path: str, metadata: Dict[str, Any]) -> VectorIndexDefinition:
        filter_fields = metadata.get("vq:filter_fields") or ""
        return VectorIndexDefinition(
            name=metadata.get("vq:index_name", path),
            path=path,
            dimensions=int(metadata["vq:dimensions"]),
            similarity=Similarity(metadata.get("vq:similarity", Similarity.DOT_PRODUCT.value)),
            filter_fields=tuple(name for name in filter_fields.split(",") if name),
            quantization=Quantization(metadata.get("vq:quantization", Quantization.NONE.value)),
        )

    def get_index(self, path: str) -> Optional[IndexInfo]:
        collection = self._collection(path)
        if collection is None:
            return None
        definition = self._definition_from_metadata(path, collection.metadata or {})
        # Chroma indexes records synchronously on write, so a visible collection is queryable.
        return IndexInfo(definition=definition, state=IndexState.READY)

    def create_index(self, definition: VectorIndexDefinition) -> bool:
        if self._collection(definition.path) is not None:
            logger.info("Vector index already exists", extra={"index": definition.name, "path": definition.path})
            return False

        metadata = {
            "hnsw:space": HNSW_SPACES[definition.similarity],
            "vq:index_name": definition.name,
            "vq:dimensions": definition.dimensions,
            "vq:similarity": definition.similarity.value,
            "vq:filter_fields": ",".join(definition.filter_fields),
            "vq:quantization": definition.quantization.value,
        }
        self.client.get_or_create_collection(self.chroma_name(definition.path), metadata=metadata)
        logger.info("Vector index created", extra={"index": definition.name, "path": definition.path})
        return True

    def upsert_documents(self, path: str, documents: List[Document]) -> None:
        if not documents:
            return

        collection = self._require_collection(path)
        definition = self._definition_from_metadata(path, collection.metadata or {})
        for doc in documents:
            if doc.embedding is None:
                raise ValueError(f"Document {doc.id} has no embedding for '{path}'")
            if len(doc.embedding) != definition.dimensions:
                raise DimensionMismatchError(definition.dimensions, len(doc.embedding))

        collection.upsert(
            ids=[doc.id for doc in documents],
            embeddings=[doc.embedding for doc in documents],
            metadatas=[_to_metadata(doc.fields) for doc in documents],
        )
        logger.info("Upserted documents into Chroma", extra={"count": len(documents), "path": path})

    def search(
        self,
        path: str,
        query_embedding: List[float],
        top_k: int,
        where: Optional[QueryFilter] = None,
        include_score: bool = True,
    ) -> List[MatchResult]:
        if top_k <= 0:
            return []

        collection = self._require_collection(path)
        if collection.count() == 0:
            return []
        definition = self._definition_from_metadata(path, collection.metadata or {})

        include = ["metadatas", "distances"] if include_score else ["metadatas"]
        result = collection.query(
            query_embeddings=[query_embedding],
            n_results=top_k,
            where=where.to_where() if where is not None else None,
            include=include,
        )

        ids = (result.get("ids") or [[]])[0] or []
        metadatas = (result.get("metadatas") or [[]])[0] or []
        distances = ((result.get("distances") or [[]])[0] or []) if include_score else []

        matches: List[MatchResult] = []
        for position, (doc_id, metadata) in enumerate(zip(ids, metadatas)):
            document = Document(id=doc_id, fields=dict(metadata or {}))
            score = distance_to_score(definition.similarity, float(distances[position])) if include_score else None
            matches.append(MatchResult(document=document, score=score))

        if include_score:
            matches.sort(key=lambda match: match.score, reverse=True)
        return matches

    def count(self, path: str) -> int:
        return self._require_collection(path).count()

    def clear(self) -> None:
        prefix = f"{self.collection_name}."
        for collection in self.client.list_collections():
            name = getattr(collection, "name", collection)
            if name.startswith(prefix):
                self.client.delete_collection(name)
        logger.info("Chroma vector indexes dropped", extra={"collection": self.collection_name})


__all__ = ["ChromaVectorStore", "CHROMA_PERSIST_DIR", "DOCUMENT_COLLECTION", "distance_to_score"]

"""
Backend selection for the document store that holds the vector indexes.
"""

from vector_query.config import settings
from vector_query.vector_store.base import VectorStore
from vector_query.vector_store.chroma_store import ChromaVectorStore

BACKENDS = {
    "chroma": ChromaVectorStore,
}


def get_vector_store(backend: str | None = None, collection: str | None = None) -> VectorStore:
    """
    Build the store named by ``backend`` (VECTOR_STORE_BACKEND when omitted) over
    ``collection`` (DOCUMENT_COLLECTION when omitted) under VECTOR_STORE_PATH.
    Settings are read on every call.
    """
    name = (backend or settings.vector_store_backend).lower()
    store_cls = BACKENDS.get(name)
    if store_cls is None:
        raise ValueError(f"Unsupported vector store backend: {name} (known: {', '.join(sorted(BACKENDS))})")
    return store_cls(
        persist_directory=settings.vector_store_path,
        collection_name=collection or settings.document_collection,
    )


__all__ = ["BACKENDS", "get_vector_store", "ChromaVectorStore", "VectorStore"]

"""
Similarity search client and factory.
"""

from typing import List

from vector_query.config import settings
from vector_query.search.client import SearchResults, SimilaritySearchClient
from vector_query.vector_store import get_vector_store
from vector_query.vector_store.base import Quantization, Similarity, VectorIndexDefinition


def default_index_definitions() -> List[VectorIndexDefinition]:
    """Index definitions declared through settings."""
    return [
        VectorIndexDefinition(
            name=settings.vector_index_name,
            path=settings.vector_field,
            dimensions=settings.embedding_dimensions,
            similarity=Similarity(settings.vector_similarity),
            filter_fields=tuple(settings.filter_fields),
            quantization=Quantization(settings.vector_quantization),
        )
    ]


def get_search_client() -> SimilaritySearchClient:
    return SimilaritySearchClient(
        get_vector_store(),
        default_index_definitions(),
        poll_interval=settings.index_poll_interval_sec,
    )


__all__ = ["SearchResults", "SimilaritySearchClient", "default_index_definitions", "get_search_client"]

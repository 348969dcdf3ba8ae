"""Shared fixtures."""

from __future__ import annotations

import math
from types import SimpleNamespace
from typing import Callable, List
from unittest.mock import MagicMock

import pytest

from tests.fakes import InMemoryVectorStore
from vector_query.search.client import SimilaritySearchClient
from vector_query.vector_store.base import Document, Similarity, VectorIndexDefinition

DIMENSIONS = 4
VECTOR_PATH = "plot_embedding"


def unit(*components: float) -> List[float]:
    norm = math.sqrt(sum(c * c for c in components))
    return [c / norm for c in components]


MOVIES = [
    Document("m1", {"title": "Back to the Future", "year": 1985}, unit(1.0, 0.05, 0.0, 0.0)),
    Document("m2", {"title": "The Terminator", "year": 1984}, unit(0.9, 0.3, 0.0, 0.1)),
    Document("m3", {"title": "12 Monkeys", "year": 1995}, unit(0.95, 0.1, 0.2, 0.0)),
    Document("m4", {"title": "Time Bandits", "year": 1981}, unit(0.6, 0.6, 0.2, 0.2)),
    Document("m5", {"title": "Looper", "year": 2012}, unit(0.85, 0.0, 0.3, 0.2)),
    Document("m6", {"title": "Top Gun", "year": 1986}, unit(0.0, 0.2, 1.0, 0.1)),
    Document("m7", {"title": "Pulp Fiction", "year": 1994}, unit(0.0, 0.1, 0.1, 1.0)),
    Document("m8", {"title": "Ghostbusters", "year": 1984}, unit(0.1, 1.0, 0.1, 0.0)),
]

QUERY = unit(1.0, 0.1, 0.05, 0.0)


@pytest.fixture
def index_definition() -> VectorIndexDefinition:
    return VectorIndexDefinition(
        name="vector_index",
        path=VECTOR_PATH,
        dimensions=DIMENSIONS,
        similarity=Similarity.DOT_PRODUCT,
        filter_fields=("year",),
    )


@pytest.fixture
def fake_store() -> InMemoryVectorStore:
    return InMemoryVectorStore()


@pytest.fixture
def search_client(fake_store: InMemoryVectorStore, index_definition: VectorIndexDefinition) -> SimilaritySearchClient:
    return SimilaritySearchClient(fake_store, [index_definition], poll_interval=0.01)


@pytest.fixture
def populated_client(search_client: SimilaritySearchClient, fake_store: InMemoryVectorStore) -> SimilaritySearchClient:
    search_client.ensure_indexes()
    fake_store.upsert_documents(VECTOR_PATH, [Document(d.id, dict(d.fields), list(d.embedding)) for d in MOVIES])
    return search_client


@pytest.fixture
def embedding_response() -> Callable[..., SimpleNamespace]:
    """Build an object shaped like the SDK's CreateEmbeddingResponse."""

    def build(*vectors: List[float]) -> SimpleNamespace:
        return SimpleNamespace(
            object="list",
            model="voyage-3-large",
            data=[SimpleNamespace(object="embedding", embedding=list(v), index=i) for i, v in enumerate(vectors)],
            usage=SimpleNamespace(total_tokens=len(vectors)),
        )

    return build


@pytest.fixture
def mock_openai() -> MagicMock:
    return MagicMock()

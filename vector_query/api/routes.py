from __future__ import annotations

import logging
from typing import Callable

from fastapi import APIRouter, Depends, Header, HTTPException, status

from vector_query.config import settings
from vector_query.embeddings.client import EmbeddingsClient
from vector_query.indexing.pipeline import ReindexService
from vector_query.models.schemas import (
    FieldCondition,
    IndexStatus,
    IndexStatusResponse,
    Match,
    ReindexRequest,
    ReindexResponse,
    SearchRequest,
    SearchResponse,
)
from vector_query.search import get_search_client
from vector_query.search.client import SimilaritySearchClient
from vector_query.vector_store.base import QueryFilter

router = APIRouter()
logger = logging.getLogger(__name__)

_OPERATORS = {
    "eq": QueryFilter.eq,
    "ne": QueryFilter.ne,
    "gt": QueryFilter.gt,
    "gte": QueryFilter.gte,
    "lt": QueryFilter.lt,
    "lte": QueryFilter.lte,
    "in": QueryFilter.in_,
}


def get_embeddings_factory() -> Callable[[], EmbeddingsClient]:
    """Embeddings clients are built lazily: vector-only searches never need the provider key."""
    return EmbeddingsClient


def _check_admin_token(x_admin_token: str | None) -> None:
    if not settings.admin_token:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Admin token is not configured",
        )
    if x_admin_token != settings.admin_token.get_secret_value():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


def build_filter(conditions: list[FieldCondition]) -> QueryFilter | None:
    if not conditions:
        return None
    return QueryFilter.all_of(*(_OPERATORS[c.op](c.field, c.value) for c in conditions))


def _index_statuses(client: SimilaritySearchClient) -> list[IndexStatus]:
    return [
        IndexStatus(
            name=definition.name,
            path=definition.path,
            dimensions=definition.dimensions,
            similarity=definition.similarity.value,
            filter_fields=list(definition.filter_fields),
            state=client.index_state(definition.path).value,
        )
        for definition in client.indexes.values()
    ]


@router.get("/admin/indexes", response_model=IndexStatusResponse, summary="Vector index states")
def list_indexes(
    x_admin_token: str | None = Header(default=None, alias="X-Admin-Token"),
    client: SimilaritySearchClient = Depends(get_search_client),
) -> IndexStatusResponse:
    _check_admin_token(x_admin_token)
    return IndexStatusResponse(indexes=_index_statuses(client))


@router.post("/admin/indexes", response_model=IndexStatusResponse, summary="Create missing vector indexes")
def ensure_indexes(
    x_admin_token: str | None = Header(default=None, alias="X-Admin-Token"),
    client: SimilaritySearchClient = Depends(get_search_client),
) -> IndexStatusResponse:
    _check_admin_token(x_admin_token)
    created = client.ensure_indexes()
    logger.info("Admin ensure indexes", extra={"created_indexes": created})
    return IndexStatusResponse(indexes=_index_statuses(client), created=created)


@router.post("/admin/reindex", response_model=ReindexResponse, summary="Embed corpus into the vector store")
def admin_reindex(
    reindex_request: ReindexRequest,
    x_admin_token: str | None = Header(default=None, alias="X-Admin-Token"),
    client: SimilaritySearchClient = Depends(get_search_client),
    embeddings_factory: Callable[[], EmbeddingsClient] = Depends(get_embeddings_factory),
) -> ReindexResponse:
    _check_admin_token(x_admin_token)

    service = ReindexService(
        client,
        embeddings_factory(),
        settings.vector_field,
        embed_batch=reindex_request.embed_batch,
        clear=reindex_request.clear,
    )
    logger.info("Admin reindex requested", extra={"mode": reindex_request.mode, "clear": reindex_request.clear})

    summary = service.run()
    return ReindexResponse(
        status="completed",
        indexed_documents=summary.indexed_documents,
        elapsed_sec=round(summary.elapsed_sec, 2),
    )


@router.post("/api/v1/search", response_model=SearchResponse, summary="Vector similarity search")
def search(
    request: SearchRequest,
    client: SimilaritySearchClient = Depends(get_search_client),
    embeddings_factory: Callable[[], EmbeddingsClient] = Depends(get_embeddings_factory),
) -> SearchResponse:
    path = request.path or settings.vector_field
    query_filter = build_filter(request.filters)

    if request.vector is not None:
        vector = request.vector
    else:
        vector = embeddings_factory().embed_text(request.query.strip())

    results = client.search(
        path,
        vector,
        limit=request.limit,
        query_filter=query_filter,
        include_score=request.include_score,
    )
    return SearchResponse(
        path=path,
        index_state=results.index_state.value,
        complete=results.is_complete,
        matches=[
            Match(id=match.document.id, fields=match.document.fields, score=match.score)
            for match in results
        ],
    )


__all__ = ["router", "build_filter", "get_embeddings_factory"]

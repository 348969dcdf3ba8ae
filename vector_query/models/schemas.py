from __future__ import annotations

from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field, model_validator


# Admin
class ReindexRequest(BaseModel):
    """Request to embed the movie corpus into the vector store."""

    mode: Literal["full"] = Field(default="full", description="Reindex mode")
    clear: bool = Field(default=False, description="Drop existing vector indexes first")
    embed_batch: int = Field(default=64, gt=0, le=1000, description="Inputs per embedding call")


class ReindexResponse(BaseModel):
    status: Literal["completed"] = Field(default="completed")
    indexed_documents: int = Field(..., ge=0)
    elapsed_sec: float | None = Field(None, ge=0)


class IndexStatus(BaseModel):
    name: str
    path: str
    dimensions: int
    similarity: str
    filter_fields: List[str]
    state: Literal["absent", "building", "ready"]


class IndexStatusResponse(BaseModel):
    indexes: List[IndexStatus]
    created: List[str] = Field(default_factory=list)


# Search
class FieldCondition(BaseModel):
    """One comparison of a scalar document field; conditions are AND-ed."""

    field: str = Field(..., min_length=1)
    op: Literal["eq", "ne", "gt", "gte", "lt", "lte", "in"] = "eq"
    value: Any


class SearchRequest(BaseModel):
    query: str | None = Field(default=None, description="Text to embed as the query vector")
    vector: List[float] | None = Field(default=None, description="Precomputed query vector")
    path: str | None = Field(default=None, description="Vector field to search; defaults to the configured one")
    limit: int = Field(default=10, gt=0, le=100)
    filters: List[FieldCondition] = Field(default_factory=list)
    include_score: bool = True

    @model_validator(mode="after")
    def _one_query_source(self) -> "SearchRequest":
        has_query = bool(self.query and self.query.strip())
        if has_query == (self.vector is not None):
            raise ValueError("Provide exactly one of 'query' or 'vector'")
        return self


class Match(BaseModel):
    id: str
    fields: Dict[str, Any]
    score: float | None = None


class SearchResponse(BaseModel):
    path: str
    index_state: Literal["absent", "building", "ready"]
    complete: bool
    matches: List[Match]


__all__ = [
    "ReindexRequest",
    "ReindexResponse",
    "IndexStatus",
    "IndexStatusResponse",
    "FieldCondition",
    "SearchRequest",
    "Match",
    "SearchResponse",
]

"""
Vector store interface and shared types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Protocol, Sequence, Tuple

from vector_query.errors import InvalidFilterError


class Similarity(str, Enum):
    DOT_PRODUCT = "dotProduct"
    COSINE = "cosine"
    EUCLIDEAN = "euclidean"


class Quantization(str, Enum):
    NONE = "none"
    SCALAR = "scalar"
    BINARY = "binary"


class IndexState(str, Enum):
    ABSENT = "absent"
    BUILDING = "building"
    READY = "ready"


@dataclass
class Document:
    id: str
    fields: Dict[str, Any]
    embedding: Optional[List[float]] = None


@dataclass
class MatchResult:
    document: Document
    score: Optional[float] = None


@dataclass(frozen=True)
class VectorIndexDefinition:
    """Similarity index over one vector field of the document collection."""

    name: str
    path: str
    dimensions: int
    similarity: Similarity = Similarity.DOT_PRODUCT
    filter_fields: Tuple[str, ...] = ()
    quantization: Quantization = Quantization.NONE

    def __post_init__(self) -> None:
        if self.dimensions <= 0:
            raise ValueError("Index dimensions must be positive")


@dataclass
class IndexInfo:
    definition: VectorIndexDefinition
    state: IndexState


_COMPARISONS = {
    "$eq": lambda left, right: left == right,
    "$ne": lambda left, right: left != right,
    "$gt": lambda left, right: left > right,
    "$gte": lambda left, right: left >= right,
    "$lt": lambda left, right: left < right,
    "$lte": lambda left, right: left <= right,
    "$in": lambda left, right: left in right,
    "$nin": lambda left, right: left not in right,
}

_RANGE_OPS = frozenset({"$gt", "$gte", "$lt", "$lte"})
_SET_OPS = frozenset({"$in", "$nin"})
_SCALARS = (str, int, float, bool)


@dataclass(frozen=True)
class QueryFilter:
    """
    Boolean predicate over a document's scalar fields.

    Leaves compare one field with a value; ``all_of``/``any_of`` combine filters.
    The store evaluates it before similarity ranking.
    """

    op: str
    field: Optional[str] = None
    value: Any = None
    clauses: Tuple["QueryFilter", ...] = ()

    @classmethod
    def _leaf(cls, op: str, name: str, value: Any) -> "QueryFilter":
        if op in _RANGE_OPS:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidFilterError([name], f"{op} needs a numeric value, got {type(value).__name__}")
        elif op in _SET_OPS:
            if not isinstance(value, (list, tuple)) or not value:
                raise InvalidFilterError([name], f"{op} needs a non-empty list of values")
            if not all(isinstance(item, _SCALARS) for item in value):
                raise InvalidFilterError([name], f"{op} values must be strings, numbers or booleans")
            value = list(value)
        elif not isinstance(value, _SCALARS):
            raise InvalidFilterError([name], f"{op} needs a string, number or boolean, got {type(value).__name__}")
        return cls(op=op, field=name, value=value)

    @classmethod
    def eq(cls, name: str, value: Any) -> "QueryFilter":
        return cls._leaf("$eq", name, value)

    @classmethod
    def ne(cls, name: str, value: Any) -> "QueryFilter":
        return cls._leaf("$ne", name, value)

    @classmethod
    def gt(cls, name: str, value: Any) -> "QueryFilter":
        return cls._leaf("$gt", name, value)

    @classmethod
    def gte(cls, name: str, value: Any) -> "QueryFilter":
        return cls._leaf("$gte", name, value)

    @classmethod
    def lt(cls, name: str, value: Any) -> "QueryFilter":
        return cls._leaf("$lt", name, value)

    @classmethod
    def lte(cls, name: str, value: Any) -> "QueryFilter":
        return cls._leaf("$lte", name, value)

    @classmethod
    def in_(cls, name: str, values: Sequence[Any]) -> "QueryFilter":
        return cls._leaf("$in", name, values)

    @classmethod
    def between(cls, name: str, low: Any, high: Any) -> "QueryFilter":
        """Inclusive range ``low <= field <= high``."""
        return cls.all_of(cls.gte(name, low), cls.lte(name, high))

    @classmethod
    def all_of(cls, *filters: "QueryFilter") -> "QueryFilter":
        return cls._combine("$and", filters)

    @classmethod
    def any_of(cls, *filters: "QueryFilter") -> "QueryFilter":
        return cls._combine("$or", filters)

    @classmethod
    def _combine(cls, op: str, filters: Sequence["QueryFilter"]) -> "QueryFilter":
        if not filters:
            raise ValueError(f"{op} needs at least one filter")
        if len(filters) == 1:
            return filters[0]
        return cls(op=op, clauses=tuple(filters))

    @property
    def fields(self) -> FrozenSet[str]:
        if self.field is not None:
            return frozenset({self.field})
        names: set[str] = set()
        for clause in self.clauses:
            names |= clause.fields
        return frozenset(names)

    def to_where(self) -> Dict[str, Any]:
        """Render as a Chroma/Mongo style ``where`` expression."""
        if self.clauses:
            return {self.op: [clause.to_where() for clause in self.clauses]}
        return {self.field: {self.op: self.value}}

    def matches(self, fields: Mapping[str, Any]) -> bool:
        if self.op == "$and":
            return all(clause.matches(fields) for clause in self.clauses)
        if self.op == "$or":
            return any(clause.matches(fields) for clause in self.clauses)
        if self.field not in fields or fields[self.field] is None:
            return self.op in ("$ne", "$nin")
        try:
            return _COMPARISONS[self.op](fields[self.field], self.value)
        except TypeError:
            return False


class VectorStore(Protocol):
    def get_index(self, path: str) -> Optional[IndexInfo]:
        ...

    def create_index(self, definition: VectorIndexDefinition) -> bool:
        ...

    def upsert_documents(self, path: str, documents: List[Document]) -> None:
        ...

    def search(
        self,
        path: str,
        query_embedding: List[float],
        top_k: int,
        where: Optional[QueryFilter] = None,
        include_score: bool = True,
    ) -> List[MatchResult]:
        ...

    def count(self, path: str) -> int:
        ...

    def clear(self) -> None:
        ...


__all__ = [
    "Document",
    "IndexInfo",
    "IndexState",
    "MatchResult",
    "Quantization",
    "QueryFilter",
    "Similarity",
    "VectorIndexDefinition",
    "VectorStore",
]

"""
Similarity query client: top-K vector search with optional scalar pre-filters.

The store owns the index, the ranking, and the filtering; this client checks the
request against the configured index definitions and reports the index state
alongside the matches.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence

from vector_query.errors import DimensionMismatchError, IndexNotFoundError, InvalidFilterError
from vector_query.vector_store.base import (
    IndexState,
    MatchResult,
    QueryFilter,
    VectorIndexDefinition,
    VectorStore,
)

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SEC = 1.0


@dataclass
class SearchResults:
    """
    Matches for one query plus the state of the index that produced them.

    A ``building`` index answers with zero or partial matches and no error, so an
    empty result is only conclusive when ``is_complete`` is true.
    """

    matches: List[MatchResult] = field(default_factory=list)
    index_state: IndexState = IndexState.READY

    @property
    def is_complete(self) -> bool:
        return self.index_state is IndexState.READY

    def __iter__(self) -> Iterator[MatchResult]:
        return iter(self.matches)

    def __len__(self) -> int:
        return len(self.matches)

    def __getitem__(self, position: int) -> MatchResult:
        return self.matches[position]

    def mean_score_delta(self) -> float:
        """Average score drop between consecutive ranks (0.0 with fewer than two scored matches)."""
        scores = [match.score for match in self.matches if match.score is not None]
        if len(scores) < 2:
            return 0.0
        deltas = [earlier - later for earlier, later in zip(scores, scores[1:])]
        return sum(deltas) / len(deltas)


class SimilaritySearchClient:
    """Sync client over a VectorStore with a fixed set of index definitions."""

    def __init__(
        self,
        store: VectorStore,
        indexes: Sequence[VectorIndexDefinition],
        poll_interval: float = DEFAULT_POLL_INTERVAL_SEC,
        logger_: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.indexes: Dict[str, VectorIndexDefinition] = {index.path: index for index in indexes}
        self.poll_interval = poll_interval
        self.logger = logger_ or logger

    def _definition(self, path: str) -> VectorIndexDefinition:
        definition = self.indexes.get(path)
        if definition is None:
            raise IndexNotFoundError(path)
        return definition

    def index_state(self, path: str) -> IndexState:
        self._definition(path)
        info = self.store.get_index(path)
        return info.state if info is not None else IndexState.ABSENT

    def ensure_indexes(self) -> List[str]:
        """Create every configured index that the store does not have yet."""
        created: List[str] = []
        for definition in self.indexes.values():
            if self.store.create_index(definition):
                created.append(definition.name)
        self.logger.info("Vector indexes ensured", extra={"created_indexes": created, "configured": len(self.indexes)})
        return created

    def wait_until_ready(self, path: str | None = None, timeout: float | None = None) -> None:
        """
        Block until the index for ``path`` (or every configured index) is ready.

        Waits indefinitely unless ``timeout`` seconds is given.
        """
        paths = [path] if path is not None else list(self.indexes)
        deadline = time.monotonic() + timeout if timeout is not None else None

        for current in paths:
            while True:
                state = self.index_state(current)
                if state is IndexState.READY:
                    break
                if state is IndexState.ABSENT:
                    raise IndexNotFoundError(current)
                if deadline is not None and time.monotonic() >= deadline:
                    raise TimeoutError(f"Vector index for '{current}' not ready after {timeout}s")
                self.logger.debug("Waiting for vector index", extra={"path": current})
                time.sleep(self.poll_interval)

    def search(
        self,
        path: str,
        vector: Sequence[float],
        limit: int,
        query_filter: Optional[QueryFilter] = None,
        include_score: bool = True,
    ) -> SearchResults:
        if limit <= 0:
            raise ValueError("limit must be greater than zero")

        definition = self._definition(path)
        if len(vector) != definition.dimensions:
            raise DimensionMismatchError(definition.dimensions, len(vector))
        if query_filter is not None:
            undeclared = query_filter.fields - set(definition.filter_fields)
            if undeclared:
                raise InvalidFilterError(undeclared)

        info = self.store.get_index(path)
        if info is None:
            raise IndexNotFoundError(path)
        if info.definition.dimensions != definition.dimensions:
            raise DimensionMismatchError(info.definition.dimensions, definition.dimensions)

        matches = self.store.search(
            path,
            list(vector),
            top_k=limit,
            where=query_filter,
            include_score=include_score,
        )
        results = SearchResults(matches=matches[:limit], index_state=info.state)

        if not results.is_complete:
            self.logger.warning(
                "Vector index still building; results may be empty or partial",
                extra={"path": path, "matches": len(results)},
            )
        self.logger.info(
            "Similarity search",
            extra={"path": path, "limit": limit, "filtered": query_filter is not None, "matches": len(results)},
        )
        return results


__all__ = ["SearchResults", "SimilaritySearchClient", "DEFAULT_POLL_INTERVAL_SEC"]

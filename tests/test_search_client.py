"""Tests for SimilaritySearchClient against the in-memory store."""

from __future__ import annotations

import pytest

from tests.conftest import DIMENSIONS, MOVIES, QUERY, VECTOR_PATH
from vector_query.errors import DimensionMismatchError, IndexNotFoundError, InvalidFilterError
from vector_query.search.client import SearchResults, SimilaritySearchClient
from vector_query.vector_store.base import (
    Document,
    IndexState,
    MatchResult,
    QueryFilter,
    VectorIndexDefinition,
)


class TestSearch:
    @pytest.mark.parametrize("limit", [1, 3, 5, 8, 20])
    def test_returns_at_most_limit_sorted_by_score(self, populated_client, limit) -> None:
        results = populated_client.search(VECTOR_PATH, QUERY, limit=limit)

        assert len(results) == min(limit, len(MOVIES))
        scores = [match.score for match in results]
        assert scores == sorted(scores, reverse=True)

    def test_most_similar_document_ranks_first(self, populated_client) -> None:
        results = populated_client.search(VECTOR_PATH, QUERY, limit=3)

        assert results[0].document.fields["title"] == "Back to the Future"

    def test_prefilter_restricts_candidates(self, populated_client) -> None:
        eighties = QueryFilter.between("year", 1980, 1989)

        results = populated_client.search(VECTOR_PATH, QUERY, limit=10, query_filter=eighties)

        years = [match.document.fields["year"] for match in results]
        assert years
        assert all(1980 <= year <= 1989 for year in years)
        # pre-filter: every 1980s movie is a candidate, not only those in the unfiltered top-k
        assert len(results) == sum(1 for doc in MOVIES if 1980 <= doc.fields["year"] <= 1989)

    def test_same_filter_twice_is_deterministic(self, populated_client) -> None:
        eighties = QueryFilter.between("year", 1980, 1989)

        first = populated_client.search(VECTOR_PATH, QUERY, limit=5, query_filter=eighties)
        second = populated_client.search(VECTOR_PATH, QUERY, limit=5, query_filter=eighties)

        assert [(m.document.id, m.score) for m in first] == [(m.document.id, m.score) for m in second]

    def test_score_can_be_omitted(self, populated_client, fake_store) -> None:
        results = populated_client.search(VECTOR_PATH, QUERY, limit=3, include_score=False)

        assert all(match.score is None for match in results)
        assert fake_store.search_calls[-1]["include_score"] is False

    def test_embedding_is_not_returned(self, populated_client) -> None:
        results = populated_client.search(VECTOR_PATH, QUERY, limit=3)

        assert all(match.document.embedding is None for match in results)

    @pytest.mark.parametrize("limit", [0, -1])
    def test_limit_must_be_positive(self, populated_client, limit) -> None:
        with pytest.raises(ValueError):
            populated_client.search(VECTOR_PATH, QUERY, limit=limit)

    def test_dimension_mismatch(self, populated_client) -> None:
        with pytest.raises(DimensionMismatchError) as exc_info:
            populated_client.search(VECTOR_PATH, [0.1] * (DIMENSIONS + 1), limit=3)

        assert exc_info.value.expected == DIMENSIONS
        assert exc_info.value.actual == DIMENSIONS + 1

    def test_store_with_different_dimensions_is_a_mismatch(self, fake_store, index_definition) -> None:
        fake_store.create_index(
            VectorIndexDefinition(name="vector_index", path=VECTOR_PATH, dimensions=8, filter_fields=("year",))
        )
        client = SimilaritySearchClient(fake_store, [index_definition])

        with pytest.raises(DimensionMismatchError):
            client.search(VECTOR_PATH, QUERY, limit=3)

    def test_filter_on_undeclared_field(self, populated_client, fake_store) -> None:
        with pytest.raises(InvalidFilterError) as exc_info:
            populated_client.search(VECTOR_PATH, QUERY, limit=3, query_filter=QueryFilter.eq("title", "Big"))

        assert exc_info.value.fields == ["title"]
        assert fake_store.search_calls == []


class TestIndexLifecycle:
    def test_absent_index_fails_explicitly(self, search_client) -> None:
        assert search_client.index_state(VECTOR_PATH) is IndexState.ABSENT

        with pytest.raises(IndexNotFoundError):
            search_client.search(VECTOR_PATH, QUERY, limit=10)

    def test_unconfigured_field_fails_explicitly(self, populated_client) -> None:
        with pytest.raises(IndexNotFoundError) as exc_info:
            populated_client.search("title_embedding", QUERY, limit=10)

        assert exc_info.value.path == "title_embedding"

    def test_building_index_returns_without_error(self, populated_client, fake_store) -> None:
        fake_store.set_state(VECTOR_PATH, IndexState.BUILDING)

        results = populated_client.search(VECTOR_PATH, QUERY, limit=10)

        assert len(results) == 0
        assert results.index_state is IndexState.BUILDING
        assert not results.is_complete

    def test_building_index_may_return_partial_results(self, populated_client, fake_store, caplog) -> None:
        fake_store.set_state(VECTOR_PATH, IndexState.BUILDING)
        fake_store.visible_while_building = 2

        results = populated_client.search(VECTOR_PATH, QUERY, limit=10)

        assert len(results) == 2
        assert "still building" in caplog.text

    def test_ensure_indexes_is_idempotent(self, search_client, fake_store) -> None:
        assert search_client.ensure_indexes() == ["vector_index"]
        assert search_client.ensure_indexes() == []

        assert list(fake_store.indexes) == [VECTOR_PATH]
        assert search_client.index_state(VECTOR_PATH) is IndexState.READY

    def test_wait_until_ready_polls_until_ready(self, populated_client, fake_store, monkeypatch) -> None:
        fake_store.set_state(VECTOR_PATH, IndexState.BUILDING)
        sleeps = []

        def fake_sleep(seconds: float) -> None:
            sleeps.append(seconds)
            if len(sleeps) == 3:
                fake_store.set_state(VECTOR_PATH, IndexState.READY)

        monkeypatch.setattr("vector_query.search.client.time.sleep", fake_sleep)

        populated_client.wait_until_ready()

        assert sleeps == [0.01, 0.01, 0.01]

    def test_wait_until_ready_honours_caller_timeout(self, populated_client, fake_store) -> None:
        fake_store.set_state(VECTOR_PATH, IndexState.BUILDING)

        with pytest.raises(TimeoutError):
            populated_client.wait_until_ready(VECTOR_PATH, timeout=0.05)

    def test_wait_until_ready_on_absent_index(self, search_client) -> None:
        with pytest.raises(IndexNotFoundError):
            search_client.wait_until_ready(VECTOR_PATH)


class TestSearchResults:
    def test_mean_score_delta(self) -> None:
        results = SearchResults(
            matches=[MatchResult(Document(str(i), {}), score) for i, score in enumerate([0.9, 0.8, 0.5])]
        )

        assert results.mean_score_delta() == pytest.approx(0.2)

    def test_mean_score_delta_needs_two_scores(self) -> None:
        assert SearchResults().mean_score_delta() == 0.0
        assert SearchResults(matches=[MatchResult(Document("a", {}), None)] * 3).mean_score_delta() == 0.0

    def test_filtered_scores_drop_off_faster(self, populated_client) -> None:
        unfiltered = populated_client.search(VECTOR_PATH, QUERY, limit=5)
        filtered = populated_client.search(
            VECTOR_PATH, QUERY, limit=5, query_filter=QueryFilter.between("year", 1980, 1989)
        )

        assert filtered.mean_score_delta() > unfiltered.mean_score_delta()

"""
Error taxonomy for embedding and similarity query calls.

Nothing here is retried: every error is raised to the immediate caller.
"""

from __future__ import annotations

from typing import Iterable


class VectorQueryError(Exception):
    """Base class for all vector_query errors."""


class ProviderError(VectorQueryError):
    """The embedding provider call did not succeed."""

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        self.reason = reason
        self.status_code = status_code
        prefix = f"Error calling embedding provider (HTTP {status_code})" if status_code else "Error calling embedding provider"
        super().__init__(f"{prefix}: {reason}")


class IndexNotFoundError(VectorQueryError):
    """No similarity index exists for the requested vector field."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"No vector index found for field '{path}'")


class DimensionMismatchError(VectorQueryError):
    """Vector length disagrees with the index's configured dimensions."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Vector has {actual} dimensions, index expects {expected}")


class InvalidFilterError(VectorQueryError):
    """The pre-filter is not usable: undeclared fields or values the store cannot compare."""

    def __init__(self, fields: Iterable[str], reason: str | None = None) -> None:
        self.fields = sorted(fields)
        self.reason = reason
        if reason is None:
            message = f"Fields not declared filterable on the index: {', '.join(self.fields)}"
        else:
            message = f"Invalid filter on {', '.join(self.fields)}: {reason}"
        super().__init__(message)


__all__ = [
    "VectorQueryError",
    "ProviderError",
    "IndexNotFoundError",
    "DimensionMismatchError",
    "InvalidFilterError",
]

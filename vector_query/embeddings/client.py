"""
Voyage AI embeddings client.

Voyage exposes an OpenAI-compatible ``/v1/embeddings`` endpoint, so the OpenAI SDK
is pointed at it; the Voyage-only request fields go through ``extra_body``.
"""

from __future__ import annotations

import logging
from typing import Any, List, Sequence

import openai
from openai import OpenAI

from vector_query.config import settings
from vector_query.errors import ProviderError

DEFAULT_EMBEDDING_MODEL = settings.embedding_model_name
DEFAULT_EMBEDDING_DIMENSIONS = settings.embedding_dimensions
DEFAULT_TRUNCATION = settings.embedding_truncation

logger = logging.getLogger(__name__)


def _provider_reason(exc: openai.APIStatusError) -> str:
    body = exc.body
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error") or body.get("message")
        if isinstance(detail, dict):
            detail = detail.get("message")
        if detail:
            return str(detail)
    return exc.response.reason_phrase or exc.message


class EmbeddingsClient:
    def __init__(
        self,
        model: str = DEFAULT_EMBEDDING_MODEL,
        dimensions: int = DEFAULT_EMBEDDING_DIMENSIONS,
        truncation: bool = DEFAULT_TRUNCATION,
        client: OpenAI | None = None,
    ) -> None:
        self.model = model
        self.dimensions = dimensions
        self.truncation = truncation
        if client is None:
            if settings.voyage_api_key is None:
                raise ProviderError("VOYAGE_API_KEY is not configured")
            # Retries are disabled: a failed batch is reported, never replayed.
            client = OpenAI(
                api_key=settings.voyage_api_key.get_secret_value(),
                base_url=settings.embedding_api_base,
                timeout=settings.embedding_timeout_sec,
                max_retries=0,
            )
        self.client = client

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        """
        Embed a batch of texts with a single provider call.

        The i-th vector returned belongs to the i-th input. Either every input is
        embedded or ProviderError is raised.
        """
        if not texts:
            raise ValueError("texts must not be empty")

        batch = list(texts)
        extra_body: dict[str, Any] = {
            "truncation": self.truncation,
            "output_dimension": self.dimensions,
        }
        try:
            response = self.client.embeddings.create(model=self.model, input=batch, extra_body=extra_body)
        except openai.APIStatusError as exc:
            logger.warning(
                "Embedding provider rejected request",
                extra={"status_code": exc.status_code, "inputs": len(batch)},
            )
            raise ProviderError(_provider_reason(exc), status_code=exc.status_code) from exc
        except openai.APIError as exc:
            logger.warning("Embedding provider unreachable", extra={"inputs": len(batch)})
            raise ProviderError(exc.message) from exc

        data = response.data or []
        if len(data) != len(batch):
            raise ProviderError(f"provider returned {len(data)} embeddings for {len(batch)} inputs")

        embeddings: List[List[float]] = []
        for item in data:
            vector = [float(value) for value in item.embedding]
            if len(vector) != self.dimensions:
                raise ProviderError(
                    f"provider returned a {len(vector)}-dimensional embedding, expected {self.dimensions}"
                )
            embeddings.append(vector)

        logger.info("Embedded batch", extra={"inputs": len(batch), "model": self.model})
        return embeddings

    def embed_text(self, text: str) -> List[float]:
        return self.embed_texts([text])[0]


__all__ = ["EmbeddingsClient", "DEFAULT_EMBEDDING_MODEL", "DEFAULT_EMBEDDING_DIMENSIONS"]

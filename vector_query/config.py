"""
Application configuration loaded from environment variables.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralised application settings."""

    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    voyage_api_key: SecretStr | None = Field(default=None, alias="VOYAGE_API_KEY")
    embedding_api_base: str = Field(default="https://api.voyageai.com/v1", alias="EMBEDDING_API_BASE")
    embedding_model_name: str = Field(default="voyage-3-large", alias="EMBEDDING_MODEL_NAME")
    embedding_dimensions: int = Field(default=2048, gt=0, alias="EMBEDDING_DIMENSIONS")
    embedding_truncation: bool = Field(default=True, alias="EMBEDDING_TRUNCATION")
    embedding_timeout_sec: float = Field(default=60.0, gt=0, alias="EMBEDDING_TIMEOUT_SEC")

    vector_store_backend: str = Field(default="chroma", alias="VECTOR_STORE_BACKEND")
    vector_store_path: str = Field(default="./data/vector_store", alias="VECTOR_STORE_PATH")
    document_collection: str = Field(default="embedded_movies", alias="DOCUMENT_COLLECTION")

    vector_index_name: str = Field(default="vector_index", alias="VECTOR_INDEX_NAME")
    vector_field: str = Field(default="plot_embedding_voyage_3_large", alias="VECTOR_FIELD")
    vector_similarity: str = Field(default="dotProduct", alias="VECTOR_SIMILARITY")
    vector_quantization: str = Field(default="none", alias="VECTOR_QUANTIZATION")
    vector_filter_fields: str = Field(default="year", alias="VECTOR_FILTER_FIELDS")
    index_poll_interval_sec: float = Field(default=1.0, gt=0, alias="INDEX_POLL_INTERVAL_SEC")

    corpus_path: str = Field(default="./data/corpus/movies.jsonl", alias="CORPUS_PATH")

    admin_token: SecretStr | None = Field(default=None, alias="ADMIN_TOKEN")

    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8000, alias="APP_PORT")

    @property
    def filter_fields(self) -> List[str]:
        """Comma-separated VECTOR_FILTER_FIELDS as a list."""
        return [name.strip() for name in self.vector_filter_fields.split(",") if name.strip()]


settings = Settings()


def setup_logging() -> logging.Logger:
    """
    Configure base logging for the app.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
    )
    return logging.getLogger("vector_query")


def public_settings() -> Dict[str, Any]:
    """
    Return settings without secrets for safe logging/inspection.
    """
    return settings.model_dump(
        exclude={"voyage_api_key", "admin_token"},
        exclude_none=True,
    )


__all__ = ["Settings", "settings", "setup_logging", "public_settings"]

"""Shared configuration loaded from environment / ``.env``."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # OpenSearch connection
    opensearch_url: str = Field(
        default="https://localhost:9200",
        description="Base URL of the OpenSearch cluster, e.g. 'https://search.example.com:9200'",
    )
    opensearch_username: str = ""
    opensearch_password: str = ""
    opensearch_ignore_ssl_issues: bool = Field(
        default=False,
        description="Skip TLS certificate verification (self-signed dev clusters only)",
    )
    opensearch_index: str = "documents"

    # Embedding
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"

    # Logging
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton: import `settings` wherever needed.
settings = Settings()

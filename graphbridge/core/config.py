"""
Configuration management for graphbridge.

Environment-driven configuration via Pydantic's `BaseSettings`. The endpoint,
the Kafka bridge and the CLI all read the shared `settings` instance.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AnyUrl, Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration sourced from environment variables."""

    SERVICE_NAME: str = "graphbridge"
    SERVICE_VERSION: str = "0.1.0"
    ENVIRONMENT: str = Field("development", pattern=r"^(development|staging|production)$")
    LOG_LEVEL: str = "INFO"

    # Graph store
    NEO4J_URI: AnyUrl = Field("bolt://localhost:7687")
    NEO4J_USER: str = "neo4j"
    NEO4J_PASSWORD: str = "password"
    NEO4J_DATABASE: Optional[str] = None

    # Endpoint addressed by routes; the part after "neo4j:" overrides NEO4J_URI
    ENDPOINT_URI: Optional[str] = None

    # Kafka bridge
    KAFKA_BOOTSTRAP_SERVERS: str = "localhost:9092"
    KAFKA_REQUEST_TOPIC: str = "graphbridge.requests"
    KAFKA_REPLY_TOPIC: str = "graphbridge.replies"
    KAFKA_GROUP_ID: str = "graphbridge"

    # Monitoring / tracing
    ENABLE_TRACING: bool = False
    OTEL_EXPORTER_OTLP_ENDPOINT: Optional[AnyUrl] = None
    OTEL_EXPORTER_OTLP_HEADERS: Optional[str] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @field_validator("LOG_LEVEL", mode="before")
    def _normalize_level(cls, value: str) -> str:
        return str(value).strip().upper() or "INFO"


@lru_cache()
def get_settings() -> Settings:
    """Return a cached `Settings` instance."""

    return Settings()


# Singleton-style settings instance for modules that prefer direct access.
settings = get_settings()

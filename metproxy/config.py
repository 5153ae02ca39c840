"""
Runtime settings for the Met collection proxy.

Values are read from environment variables prefixed with ``METPROXY_``
(for example ``METPROXY_BATCH_SIZE=10``) or from a local ``.env`` file.
List fields accept JSON, e.g.
``METPROXY_EXCLUDED_OBJECT_IDS='[436730, 436180]'``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import FrozenSet, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Artworks withheld by curators regardless of search results.
DEFAULT_EXCLUDED_OBJECT_IDS = frozenset(
    {
        436730, 436180, 436798, 437891, 438821, 437153, 437593, 344577, 363474,
        354035, 381619, 36069, 468484, 468546, 333795, 333826, 333822, 333891,
        333894, 333895, 329807, 329876, 329880, 329912, 543992, 435573, 435630,
        435747, 435823, 435894, 459059, 459069, 459077, 459197, 459260, 459286,
        716639, 329841, 329842, 331924, 16744, 435622, 206896, 209020, 435727,
        338000,
    }
)

DEFAULT_BLOCKED_TAG_TERMS = frozenset(
    {"Female Nudes", "Male Nudes", "Nursing", "Madonna and Child"}
)


class Settings(BaseSettings):
    """Application settings loaded from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="METPROXY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Upstream
    met_api_base_url: str = "https://collectionapi.metmuseum.org/public/collection/v1"
    # None means no timeout at all, matching the deployed service.
    upstream_timeout: Optional[float] = None

    # Pagination
    batch_size: int = Field(default=20, ge=1)
    default_limit: int = Field(default=30, ge=1)

    # Content filtering
    excluded_object_ids: FrozenSet[int] = DEFAULT_EXCLUDED_OBJECT_IDS
    blocked_tag_terms: FrozenSet[str] = DEFAULT_BLOCKED_TAG_TERMS

    # /api/artworks reports failures with this status (200 in the deployed service)
    artworks_error_status: int = 200

    # HTTP surface
    cors_allow_origins: List[str] = ["*"]
    cors_allow_methods: List[str] = ["GET", "POST"]
    host: str = "0.0.0.0"
    port: int = 3000

    log_level: str = "INFO"

    @field_validator("met_api_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level", mode="after")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()

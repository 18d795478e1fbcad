"""Service configuration.

All tunables that used to be process-wide constants (index name, default
search radius, moderation blocklist, bucket name) live on a single
:class:`Settings` value.  The lifespan in ``main.py`` builds it once from the
environment and hands it to each component, so tests can pass their own.
"""

from functools import lru_cache
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_RADIUS_KM = 200.0

DEFAULT_BLOCKED_TERMS: tuple[str, ...] = ("fuck", "nigger")


class Settings(BaseSettings):
    """Runtime configuration for the posts service.

    Every field is read from the environment variable of the same name
    (case-insensitive) or from ``.env``; blank values fall back to defaults.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
    )

    es_url: str = Field("http://localhost:9200", description="Elasticsearch URL")
    es_api_key: str | None = Field(None, description="Elasticsearch API key")
    posts_index: str = Field("around", description="Index holding post documents")
    default_radius_km: float = Field(DEFAULT_RADIUS_KM, gt=0)
    search_max_results: int = Field(1000, ge=1, le=10000)
    # Comma separated in the environment (BLOCKED_TERMS=foo,bar).
    blocked_terms: Annotated[tuple[str, ...], NoDecode] = DEFAULT_BLOCKED_TERMS

    blob_bucket: str = Field("post-images", description="Bucket for post media")
    s3_endpoint: str | None = Field(None, description="S3-compatible endpoint (e.g. MinIO)")
    s3_region: str = "us-east-1"
    s3_access_key: str | None = None
    s3_secret_key: str | None = None
    blob_public_base_url: str | None = Field(
        None, description="Base URL under which public objects are served"
    )

    strict_coordinates: bool = Field(
        False, description="Reject unparsable coordinates instead of using 0"
    )
    require_media: bool = Field(True, description="Reject posts without an image")
    log_level: str = "INFO"

    @field_validator("blocked_terms", mode="before")
    @classmethod
    def _split_blocked_terms(cls, value: Any) -> Any:
        if isinstance(value, str):
            return tuple(t.strip() for t in value.split(",") if t.strip())
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()

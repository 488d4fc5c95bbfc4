"""Configuration management for the docsearch service."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process settings loaded from environment variables.

    All variables use the ``DOCSEARCH_`` prefix, e.g. ``DOCSEARCH_INDEX_PATH``.
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCSEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Runtime
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_format: str = Field(default="text", description="'text' or 'json'")

    # Data locations
    metadata_path: str = "data/metadata.json"
    index_path: str = "data/docs.sqlite"

    # HTTP
    host: str = "0.0.0.0"
    port: int = 8000
    cors_allowed_origins: str = "*"

    # Result caps
    max_total: int = Field(default=10, ge=1)
    max_per_source_mixed: int = Field(default=3, ge=1)
    max_per_source_focused: int = Field(default=5, ge=1)

    # Retrieval budgets
    primary_variant_count: int = Field(default=3, ge=1)
    primary_variant_limit: int = Field(default=150, ge=1)
    supplementary_variant_limit: int = Field(default=50, ge=1)
    admission_cap: int = Field(default=30, ge=0)
    large_pool_size: int = Field(default=50, ge=0)
    candidate_target: int = Field(default=300, ge=1)

    # Concurrency
    concurrent_retrieval: bool = True
    variant_timeout_seconds: float = Field(default=2.0, gt=0)
    search_deadline_seconds: float = Field(default=5.0, gt=0)

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        if self.cors_allowed_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]


settings = Settings()

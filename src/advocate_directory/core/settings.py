"""Application settings and configuration.

This module defines all configuration options for the advocate directory.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    Leaving ``DATABASE_URL`` unset selects the in-memory fallback dataset.
    """

    # Application metadata
    app_name: str = Field(default="Advocate Directory", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Pagination
    default_page_size: int = Field(default=20, ge=1, alias="DEFAULT_PAGE_SIZE")
    max_page_size: int = Field(default=100, ge=1, alias="MAX_PAGE_SIZE")

    # Result cache for repeated searches
    query_cache_enabled: bool = Field(default=True, alias="QUERY_CACHE_ENABLED")
    query_cache_ttl_seconds: float = Field(default=300.0, alias="QUERY_CACHE_TTL_SECONDS")
    query_cache_max_entries: int = Field(default=512, ge=1, alias="QUERY_CACHE_MAX_ENTRIES")

    # Per-client request throttling
    rate_limit_enabled: bool = Field(default=True, alias="RATE_LIMIT_ENABLED")
    rate_limit_requests: int = Field(default=100, ge=1, alias="RATE_LIMIT_REQUESTS")
    rate_limit_window_seconds: float = Field(default=60.0, alias="RATE_LIMIT_WINDOW_SECONDS")

    # Search analytics
    search_history_size: int = Field(default=10_000, ge=1, alias="SEARCH_HISTORY_SIZE")

    # Relational query monitoring
    query_log_size: int = Field(default=1000, ge=1, alias="QUERY_LOG_SIZE")
    slow_query_threshold_ms: float = Field(default=1000.0, ge=0, alias="SLOW_QUERY_THRESHOLD_MS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def effective_database_url(self) -> str | None:
        """Return the database URL respecting testing overrides.

        Returns:
            The active database URL, or None when no relational store is configured
        """
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url or None

    @property
    def database_url_sync(self) -> str | None:
        """Return a sync-compatible database URL for tooling such as Alembic."""
        url = self.effective_database_url
        if url and url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url


settings = Settings()

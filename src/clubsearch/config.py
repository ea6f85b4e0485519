"""Service configuration loaded from environment variables."""
from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service configuration loaded from environment variables.

    Attributes:
        host: Bind address for the API server.
        port: Port number for the API server.
        debug: Enable debug logging and API documentation.
        log_json: Emit JSON log lines; false switches to console output.
        cors_origins_raw: Raw comma-separated CORS origins string.
        shutdown_timeout: Seconds to wait for graceful shutdown.
        cms_url: Base URL of the content repository.
        cms_timeout: Per-request timeout for content repository calls.
        cms_max_retries: Retries for transient content repository failures.
        cms_backoff_base: First retry delay in seconds, doubled per attempt.
        search_page_size: Items requested per collection page.
        search_max_pages: Page limit for a single collection fetch.
        search_cache_ttl: Seconds a cached people collection stays fresh.
        search_cache_single_flight: Share one fetch between concurrent misses.
    """

    model_config = SettingsConfigDict(
        env_prefix="CLUBSEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    log_json: bool = True
    cors_origins_raw: str = "http://localhost:3000"
    shutdown_timeout: float = 30.0

    cms_url: str = "http://localhost:3001"
    cms_timeout: float = 30.0
    cms_max_retries: int = 3
    cms_backoff_base: float = 1.0

    search_page_size: int = 50
    search_max_pages: int = 20
    search_cache_ttl: float = 300.0
    search_cache_single_flight: bool = False

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string.

        Returns:
            List of allowed origin URLs.
        """
        return [
            origin.strip()
            for origin in self.cors_origins_raw.split(",")
            if origin.strip()
        ]

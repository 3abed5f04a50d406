# @TASK S0-T0.2 - pydantic-settings 기반 애플리케이션 설정

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Linkstash application settings.

    All values are loaded from environment variables.
    A .env file in the backend directory is also supported.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Database ---
    DATABASE_URL: str = "postgresql+asyncpg://linkstash:linkstash@db:5432/linkstash"
    DATABASE_POOL_SIZE: int = 5
    DATABASE_ECHO: bool = False

    # --- Search ---
    SEARCH_SIMILARITY_THRESHOLD: float = 0.4  # Admission floor (strictly greater)
    SEARCH_SHORT_STRING_LENGTH: int = 10  # Containment matching at or below this length
    SEARCH_MERGE_POOL_SIZE: int = 100  # Per-source candidates fetched by unified search
    SEARCH_MAX_PAGE_SIZE: int = 100
    SEARCH_MAX_QUERY_LENGTH: int = 100

    # --- Web dashboard ---
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver."""
        url = self.DATABASE_URL
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings singleton."""
    return Settings()

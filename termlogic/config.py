"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Settings come from TERMLOGIC_* environment variables or a .env file
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: works out of the box against a local SQLite file
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="TERMLOGIC_", case_sensitive=False,
    )

    # Identifier store
    database_url: str = "sqlite:///./termlogic.db"
    database_pool_pre_ping: bool = True

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres URLs come as postgresql://; pin the psycopg2 driver."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+psycopg2://", 1)
        return v

    # Serializer
    serializer_indent: int = 2
    max_document_bytes: int = 1_048_576
    max_expression_depth: int = 256

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()

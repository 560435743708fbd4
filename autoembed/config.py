"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables.
No secrets are hardcoded.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class WaitStrategy(str, Enum):
    """How the smoke test waits for embeddings before querying."""

    FIXED = "fixed"
    POLL = "poll"


class MongoSettings(BaseSettings):
    """MongoDB connection configuration.

    The database named in the URI path takes precedence over ``database``.
    """

    model_config = SettingsConfigDict(
        env_prefix="MONGODB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    uri: SecretStr = Field(
        default=SecretStr("mongodb://localhost:27020"),
        description="MongoDB connection string (may embed credentials)",
    )
    database: str = Field(
        default="wikipedia",
        description="Database used when the URI names none",
    )
    collection: str = Field(
        default="articles",
        description="Collection holding the searchable documents",
    )
    server_selection_timeout_ms: int = Field(
        default=30000,
        description="Server selection timeout in milliseconds",
    )
    app_name: str = Field(
        default="autoembed",
        description="Application name reported to the server",
    )


class VectorIndexSettings(BaseSettings):
    """Vector search index configuration."""

    model_config = SettingsConfigDict(
        env_prefix="VECTOR_INDEX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    name: str = Field(
        default="vector_index",
        description="Search index name",
    )
    embedding_path: str = Field(
        default="content",
        description="Document field embedded by the server",
    )
    model: str = Field(
        default="voyage-4",
        description="Embedding model identifier",
    )
    modality: str = Field(
        default="text",
        description="Content modality of the embedded field",
    )
    filter_paths: list[str] = Field(
        default_factory=lambda: ["title"],
        description="Fields indexed for filtering alongside similarity",
    )


class SmokeTestSettings(BaseSettings):
    """Embedding smoke test configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SMOKE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    query: str = Field(
        default="AI algorithms that learn from data",
        description="Natural-language query text",
    )
    limit: int = Field(
        default=10,
        gt=0,
        description="Maximum results to return",
    )
    num_candidates: int = Field(
        default=100,
        gt=0,
        description="Nearest neighbours considered before ranking",
    )
    wait_strategy: WaitStrategy = Field(
        default=WaitStrategy.FIXED,
        description="Fixed sleep or index status polling",
    )
    wait_seconds: float = Field(
        default=30.0,
        ge=0,
        description="Fixed wait before querying, in seconds",
    )
    poll_timeout: float = Field(
        default=120.0,
        gt=0,
        description="Upper bound on status polling, in seconds",
    )
    poll_interval: float = Field(
        default=1.0,
        gt=0,
        description="Initial delay between status polls, in seconds",
    )
    poll_max_interval: float = Field(
        default=8.0,
        gt=0,
        description="Backoff cap between status polls, in seconds",
    )

    @model_validator(mode="after")
    def _interval_within_cap(self) -> "SmokeTestSettings":
        if self.poll_max_interval < self.poll_interval:
            raise ValueError("poll_max_interval must be >= poll_interval")
        return self


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    # Nested settings
    mongodb: MongoSettings = Field(default_factory=MongoSettings)
    index: VectorIndexSettings = Field(default_factory=VectorIndexSettings)
    smoke: SmokeTestSettings = Field(default_factory=SmokeTestSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()

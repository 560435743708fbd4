"""Tests for application configuration."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from autoembed.config import (
    Environment,
    MongoSettings,
    Settings,
    SmokeTestSettings,
    VectorIndexSettings,
    WaitStrategy,
    get_settings,
)


class TestMongoSettings:
    """Tests for MongoDB configuration."""

    def test_default_values(self) -> None:
        """Defaults target the local wikipedia database."""
        settings = MongoSettings()
        assert settings.uri.get_secret_value() == "mongodb://localhost:27020"
        assert settings.database == "wikipedia"
        assert settings.collection == "articles"
        assert settings.server_selection_timeout_ms == 30000

    def test_uri_is_secret(self) -> None:
        """Connection string is masked when printed."""
        with patch.dict(os.environ, {"MONGODB_URI": "mongodb://user:hunter2@db:27017"}):
            settings = MongoSettings()
            assert "hunter2" not in str(settings.uri)
            assert "hunter2" not in repr(settings)
            assert settings.uri.get_secret_value() == "mongodb://user:hunter2@db:27017"

    def test_env_override(self) -> None:
        """Environment variables override defaults."""
        with patch.dict(os.environ, {"MONGODB_COLLECTION": "pages"}):
            settings = MongoSettings()
            assert settings.collection == "pages"


class TestVectorIndexSettings:
    """Tests for index configuration."""

    def test_default_values(self) -> None:
        """Defaults embed content with voyage-4 and filter on title."""
        settings = VectorIndexSettings()
        assert settings.name == "vector_index"
        assert settings.embedding_path == "content"
        assert settings.model == "voyage-4"
        assert settings.modality == "text"
        assert settings.filter_paths == ["title"]

    def test_filter_paths_from_env(self) -> None:
        """Filter paths are parsed from a JSON list."""
        with patch.dict(os.environ, {"VECTOR_INDEX_FILTER_PATHS": '["title", "lang"]'}):
            settings = VectorIndexSettings()
            assert settings.filter_paths == ["title", "lang"]


class TestSmokeTestSettings:
    """Tests for smoke test configuration."""

    def test_default_values(self) -> None:
        """Defaults match the reference query and fixed wait."""
        settings = SmokeTestSettings()
        assert settings.query == "AI algorithms that learn from data"
        assert settings.limit == 10
        assert settings.num_candidates == 100
        assert settings.wait_strategy == WaitStrategy.FIXED
        assert settings.wait_seconds == 30.0

    def test_wait_strategy_from_env(self) -> None:
        """Polling can be enabled via environment."""
        with patch.dict(os.environ, {"SMOKE_WAIT_STRATEGY": "poll"}):
            settings = SmokeTestSettings()
            assert settings.wait_strategy == WaitStrategy.POLL

    def test_zero_poll_interval_rejected(self) -> None:
        """A zero poll interval would spin without pausing."""
        with pytest.raises(ValidationError, match="poll_interval"):
            SmokeTestSettings(poll_interval=0)

    def test_negative_wait_rejected(self) -> None:
        """Fixed wait cannot be negative."""
        with pytest.raises(ValidationError, match="wait_seconds"):
            SmokeTestSettings(wait_seconds=-1)

    def test_interval_above_cap_rejected(self) -> None:
        """Initial poll interval cannot exceed the backoff cap."""
        with pytest.raises(ValidationError, match="poll_max_interval"):
            SmokeTestSettings(poll_interval=10.0, poll_max_interval=2.0)

    def test_zero_limit_rejected(self) -> None:
        """Result limit must be positive."""
        with pytest.raises(ValidationError, match="limit"):
            SmokeTestSettings(limit=0)


class TestSettings:
    """Tests for main application settings."""

    def test_default_environment(self) -> None:
        """Default environment is development."""
        settings = Settings()
        assert settings.environment == Environment.DEVELOPMENT

    def test_nested_settings_loaded(self) -> None:
        """Nested settings are initialized."""
        settings = Settings()
        assert isinstance(settings.mongodb, MongoSettings)
        assert isinstance(settings.index, VectorIndexSettings)
        assert isinstance(settings.smoke, SmokeTestSettings)

    def test_environment_enum(self) -> None:
        """Environment can be set via string."""
        with patch.dict(os.environ, {"ENVIRONMENT": "production"}):
            settings = Settings()
            assert settings.environment == Environment.PRODUCTION


class TestDotEnv:
    """Tests for reading nested sections from a .env file."""

    def test_sections_read_dotenv(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Connection, index and smoke settings all come from .env."""
        (tmp_path / ".env").write_text(
            "MONGODB_URI=mongodb://prod:27017/wikipedia\n"
            "VECTOR_INDEX_MODEL=voyage-4-large\n"
            "SMOKE_WAIT_SECONDS=5\n"
            "LOG_LEVEL=DEBUG\n",
            encoding="utf-8",
        )
        for name in ("MONGODB_URI", "VECTOR_INDEX_MODEL", "SMOKE_WAIT_SECONDS", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.log_level == "DEBUG"
        assert settings.mongodb.uri.get_secret_value() == "mongodb://prod:27017/wikipedia"
        assert settings.index.model == "voyage-4-large"
        assert settings.smoke.wait_seconds == 5.0

    def test_environment_beats_dotenv(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Process environment takes precedence over .env."""
        (tmp_path / ".env").write_text("MONGODB_COLLECTION=from_file\n", encoding="utf-8")
        monkeypatch.setenv("MONGODB_COLLECTION", "from_env")
        monkeypatch.chdir(tmp_path)

        assert Settings().mongodb.collection == "from_env"


class TestGetSettings:
    """Tests for settings singleton."""

    def test_returns_settings_instance(self) -> None:
        """get_settings returns a Settings instance."""
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_caching(self) -> None:
        """Settings are cached."""
        get_settings.cache_clear()
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2

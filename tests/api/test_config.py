"""Tests for configuration classes."""

import dataclasses
import os
import pytest
from decimal import Decimal
from unittest.mock import patch


class TestCORSConfig:
    """Tests for CORSConfig class."""

    def test_cors_default_origins(self):
        """Default origin is the local server."""
        with patch.dict(os.environ, {}, clear=True):
            from config import CORSConfig

            config = CORSConfig()

            assert config.allowed_origins == ["http://localhost:8000"]

    def test_cors_parses_env_var_with_whitespace(self):
        """Origins are split on commas and stripped."""
        with patch.dict(os.environ, {"CORS_ORIGINS": " http://a.test , http://b.test ,"}):
            from config import _parse_cors_origins

            assert _parse_cors_origins() == ["http://a.test", "http://b.test"]


class TestRateLimitConfig:
    """Tests for RateLimitConfig class."""

    def test_rate_limit_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            from config import RateLimitConfig

            config = RateLimitConfig()

            assert config.enabled is True
            assert config.requests_per_minute == 60

    def test_rate_limit_from_env(self):
        with patch.dict(os.environ, {"RATE_LIMIT_ENABLED": "False", "RATE_LIMIT_RPM": "120"}):
            from config import RateLimitConfig

            config = RateLimitConfig()

            assert config.enabled is False
            assert config.requests_per_minute == 120


class TestSecurityConfig:
    """Tests for SecurityConfig class."""

    def test_secret_key_auto_generates(self):
        with patch.dict(os.environ, {}, clear=True):
            from config import SecurityConfig

            assert len(SecurityConfig().secret_key) > 0

    def test_secret_key_from_env(self):
        with patch.dict(os.environ, {"SECRET_KEY": "hunter2-but-longer"}):
            from config import SecurityConfig

            assert SecurityConfig().secret_key == "hunter2-but-longer"


class TestRedisConfig:
    """Tests for RedisConfig class."""

    def test_redis_url_without_password(self):
        with patch.dict(os.environ, {}, clear=True):
            from config import RedisConfig

            assert RedisConfig().url == "redis://localhost:6379/0"

    def test_redis_url_with_password(self):
        with patch.dict(os.environ, {"REDIS_PASSWORD": "mypass", "REDIS_DB": "2"}):
            from config import RedisConfig

            assert RedisConfig().url == "redis://:mypass@localhost:6379/2"


class TestSessionConfig:
    """Tests for SessionConfig class."""

    def test_session_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            from config import SessionConfig

            config = SessionConfig()

            assert config.backend == "memory"
            assert config.ttl == 86400
            assert config.cleanup_interval == 300.0

    def test_session_from_env(self):
        with patch.dict(os.environ, {"SESSION_BACKEND": "Redis", "SESSION_TTL": "60"}):
            from config import SessionConfig

            config = SessionConfig()

            assert config.backend == "redis"
            assert config.ttl == 60


class TestGameConfig:
    """Tests for GameConfig and FairnessConfig."""

    def test_initial_balance_default(self):
        with patch.dict(os.environ, {}, clear=True):
            from config import GameConfig

            assert GameConfig().initial_balance == Decimal("1000")

    def test_initial_balance_from_env(self):
        with patch.dict(os.environ, {"INITIAL_BALANCE": "250.50"}):
            from config import GameConfig

            assert GameConfig().initial_balance == Decimal("250.50")

    def test_seed_sizes_have_floor(self):
        """Seed entropy cannot be configured below 256/128 bits."""
        with patch.dict(os.environ, {"SERVER_SEED_BYTES": "8", "CLIENT_SEED_BYTES": "4"}):
            from config import FairnessConfig

            config = FairnessConfig()

            assert config.server_seed_bytes == 32
            assert config.client_seed_bytes == 16

    def test_game_config_frozen(self):
        from config import GameConfig

        config = GameConfig()

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.initial_balance = Decimal("5")  # type: ignore[misc]


class TestLoggingConfig:
    """Tests for LoggingConfig class."""

    def test_level_is_upper_cased(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
            from config import LoggingConfig

            assert LoggingConfig().level == "DEBUG"


class TestAppConfig:
    """Tests for AppConfig class."""

    def test_app_config_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            from config import AppConfig

            config = AppConfig()

            assert config.debug is False
            assert config.host == "0.0.0.0"
            assert config.port == 8000

    def test_app_config_has_nested_configs(self):
        from config import AppConfig

        config = AppConfig()

        for name in ("session", "redis", "game", "fairness", "cors", "rate_limit", "security", "logging"):
            assert hasattr(config, name)

"""Tests for configuration classes."""

import logging
import os
import pytest
from unittest.mock import patch

from blackjack.logging_setup import configure_logging
from blackjack.rules import RuleSet
from config import (
    AppConfig,
    CORSConfig,
    GameConfig,
    LoggingConfig,
    RateLimitConfig,
    _parse_cors_origins,
)


class TestCORSConfig:
    """Tests for CORSConfig class."""

    def test_cors_default_origins(self):
        """Test that default CORS origins are set correctly."""
        with patch.dict(os.environ, {}, clear=True):
            assert CORSConfig().allowed_origins == ["http://localhost:8000"]

    def test_cors_parses_env_var_with_whitespace(self):
        """Test that CORS origins are split on commas and stripped."""
        env_origins = "  http://example.com  ,http://localhost:3000,, "
        with patch.dict(os.environ, {"CORS_ORIGINS": env_origins}):
            assert _parse_cors_origins() == ["http://example.com", "http://localhost:3000"]

    def test_cors_defaults_allow_all(self):
        config = CORSConfig()
        assert config.allow_credentials is True
        assert config.allow_methods == ["*"]
        assert config.allow_headers == ["*"]


class TestRateLimitConfig:
    """Tests for RateLimitConfig class."""

    def test_rate_limit_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = RateLimitConfig()
            assert config.enabled is True
            assert config.requests_per_minute == 60

    def test_rate_limit_from_env(self):
        with patch.dict(os.environ, {"RATE_LIMIT_ENABLED": "FALSE", "RATE_LIMIT_RPM": "120"}):
            config = RateLimitConfig()
            assert config.enabled is False
            assert config.requests_per_minute == 120

    @pytest.mark.parametrize("value", ["false", "0", "no", "yes"])
    def test_only_true_enables(self, value):
        """Only "true" (case insensitive) counts as enabled."""
        with patch.dict(os.environ, {"RATE_LIMIT_ENABLED": value}):
            assert RateLimitConfig().enabled is False


class TestGameConfig:
    """Tests for GameConfig class."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = GameConfig()

            assert config.num_decks == 1
            assert config.default_bet == 10
            assert config.starting_balance == 1000
            assert config.max_bet == 1000
            assert config.blackjack_payout == 1.5
            assert config.dealer_hits_soft_17 is True
            assert config.surrender == "late"
            assert config.surrender_refund == 0.5
            assert config.skip_dealer_turn is True

    def test_from_env(self):
        env = {
            "NUM_DECKS": "6",
            "MAX_BET": "500",
            "BLACKJACK_PAYOUT": "1.2",
            "DEALER_HITS_SOFT_17": "false",
            "SURRENDER": "NONE",
            "SKIP_DEALER_TURN": "false",
        }
        with patch.dict(os.environ, env):
            config = GameConfig()

            assert config.num_decks == 6
            assert config.max_bet == 500
            assert config.blackjack_payout == 1.2
            assert config.dealer_hits_soft_17 is False
            assert config.surrender == "none"
            assert config.skip_dealer_turn is False

    def test_rules_from_config(self):
        with patch.dict(os.environ, {"NUM_DECKS": "2", "SURRENDER": "any", "SURRENDER_REFUND": "0.4"}):
            rules = RuleSet.from_config(GameConfig())

            assert rules.num_decks == 2
            assert rules.surrender == "any"
            assert rules.surrender_refund == 0.4

    def test_invalid_rules_rejected(self):
        with patch.dict(os.environ, {"NUM_DECKS": "0"}):
            with pytest.raises(ValueError):
                RuleSet.from_config(GameConfig())


class TestLoggingConfig:
    """Tests for LoggingConfig and logging setup."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = LoggingConfig()
            assert config.level == "INFO"
            assert "%(message)s" in config.format

    def test_level_from_env(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
            assert LoggingConfig().level == "DEBUG"

    def test_configure_logging_sets_root_level(self):
        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging(LoggingConfig(level="WARNING"))
            assert root.level == logging.WARNING

            configure_logging(LoggingConfig(level="INFO"), level="debug")
            assert root.level == logging.DEBUG
            assert logging.getLogger("transitions").level == logging.WARNING
        finally:
            root.setLevel(previous)

    def test_configure_logging_rejects_unknown_level(self):
        with pytest.raises(ValueError):
            configure_logging(LoggingConfig(level="LOUD"))


class TestAppConfig:
    """Tests for AppConfig class."""

    def test_app_config_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = AppConfig()

            assert config.debug is False
            assert config.host == "0.0.0.0"
            assert config.port == 8000
            assert config.max_tables == 100

    def test_app_config_from_env(self):
        with patch.dict(os.environ, {"DEBUG": "true", "MAX_TABLES": "3"}):
            config = AppConfig()

            assert config.debug is True
            assert config.max_tables == 3

    def test_app_config_has_nested_configs(self):
        config = AppConfig()

        assert isinstance(config.game, GameConfig)
        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.cors, CORSConfig)
        assert isinstance(config.rate_limit, RateLimitConfig)

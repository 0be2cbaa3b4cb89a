"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field
from typing import Literal, cast


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class CORSConfig:
    """CORS configuration."""

    allowed_origins: list[str] = field(default_factory=_parse_cors_origins)
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["*"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class RateLimitConfig:
    """Rate limiting configuration."""

    enabled: bool = field(default_factory=lambda: _env_bool("RATE_LIMIT_ENABLED", "true"))
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "60"))
    )


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    format: str = field(
        default_factory=lambda: os.getenv(
            "LOG_FORMAT", "%(asctime)s %(levelname)s %(name)s: %(message)s"
        )
    )


@dataclass(frozen=True)
class GameConfig:
    """Default table configuration."""

    num_decks: int = field(default_factory=lambda: int(os.getenv("NUM_DECKS", "1")))
    default_bet: int = field(default_factory=lambda: int(os.getenv("DEFAULT_BET", "10")))
    starting_balance: int = field(
        default_factory=lambda: int(os.getenv("STARTING_BALANCE", "1000"))
    )
    max_bet: int = field(default_factory=lambda: int(os.getenv("MAX_BET", "1000")))
    blackjack_payout: float = field(
        default_factory=lambda: float(os.getenv("BLACKJACK_PAYOUT", "1.5"))
    )
    dealer_hits_soft_17: bool = field(
        default_factory=lambda: _env_bool("DEALER_HITS_SOFT_17", "true")
    )
    surrender: Literal["none", "late", "any"] = field(
        default_factory=lambda: cast(
            Literal["none", "late", "any"], os.getenv("SURRENDER", "late").lower()
        )
    )
    surrender_refund: float = field(
        default_factory=lambda: float(os.getenv("SURRENDER_REFUND", "0.5"))
    )
    skip_dealer_turn: bool = field(
        default_factory=lambda: _env_bool("SKIP_DEALER_TURN", "true")
    )


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: _env_bool("DEBUG", "false"))
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    max_tables: int = field(default_factory=lambda: int(os.getenv("MAX_TABLES", "100")))

    game: GameConfig = field(default_factory=GameConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)


# Global configuration instance
config = AppConfig()

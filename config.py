"""Configuration management with environment variable support."""

import os
import secrets
from dataclasses import dataclass, field
from typing import Literal

from core.rules import SetRules


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


def _env_flag(name: str, default: str) -> bool:
    """Read a boolean flag; only 'true' (any case) is true."""
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

    enabled: bool = field(default_factory=lambda: _env_flag("RATE_LIMIT_ENABLED", "true"))
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "120"))
    )


@dataclass(frozen=True)
class SecurityConfig:
    """Security configuration."""

    secret_key: str = field(
        default_factory=lambda: os.getenv("SECRET_KEY", secrets.token_urlsafe(32))
    )


@dataclass(frozen=True)
class GameConfig:
    """Default table policy, overridable per deployment."""

    table_size: int = field(default_factory=lambda: int(os.getenv("SET_TABLE_SIZE", "12")))
    deal_size: int = field(default_factory=lambda: int(os.getenv("SET_DEAL_SIZE", "3")))
    deal_gate_table_size: int = field(
        default_factory=lambda: int(os.getenv("SET_DEAL_GATE", "15"))
    )
    resolve_delay_ms: int = field(
        default_factory=lambda: int(os.getenv("SET_RESOLVE_DELAY_MS", "1000"))
    )
    reselect_policy: Literal["ignore", "restart"] = field(
        default_factory=lambda: os.getenv("SET_RESELECT_POLICY", "ignore")  # type: ignore[return-value]
    )

    def rules(self) -> SetRules:
        """Build the engine rules; raises ValueError on inconsistent values."""
        return SetRules(
            table_size=self.table_size,
            deal_size=self.deal_size,
            deal_gate_table_size=self.deal_gate_table_size,
            resolve_delay=self.resolve_delay_ms / 1000,
            reselect_policy=self.reselect_policy,
        )


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: _env_flag("DEBUG", "false"))
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    session_ttl: int = 3600  # Session timeout in seconds

    game: GameConfig = field(default_factory=GameConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)


# Global configuration instance
config = AppConfig()

"""
Settings Module - Centralized Configuration Management
=======================================================

ARCHITECTURAL DECISION:
- All configuration is loaded from environment variables (no hardcoded secrets)
- Settings are immutable dataclass for safety and clarity
- Single source of truth for all configurable values

Per-guild review form settings (embed text, catalog, review channel) are NOT
here: those live in the database and are edited by guild admins at runtime.
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file if present (development convenience)
load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class DiscordSettings:
    """Discord bot credentials and command registration."""

    token: str = field(default_factory=lambda: os.getenv("DISCORD_BOT_TOKEN", ""))
    client_id: str = field(default_factory=lambda: os.getenv("DISCORD_CLIENT_ID", ""))

    # When set, slash commands are synced to this guild only (instant, for development)
    dev_guild_id: Optional[int] = field(
        default_factory=lambda: _env_int("DISCORD_DEV_GUILD_ID", 0) or None
    )
    sync_commands_on_start: bool = field(
        default_factory=lambda: _env_bool("SYNC_COMMANDS_ON_START", True)
    )


@dataclass(frozen=True)
class ReviewFlowSettings:
    """Review flow limits and session housekeeping."""

    comment_min_length: int = field(default_factory=lambda: _env_int("COMMENT_MIN_LENGTH", 10))
    comment_max_length: int = field(default_factory=lambda: _env_int("COMMENT_MAX_LENGTH", 1000))

    # Characters of the comment echoed back on the product step
    comment_preview_length: int = 100

    # Discord select menus hold at most 25 options
    max_products: int = 25

    # Seconds a session may sit idle before the reaper drops it (0 = never)
    session_idle_timeout: int = field(default_factory=lambda: _env_int("SESSION_IDLE_TIMEOUT", 3600))
    reaper_interval: int = field(default_factory=lambda: _env_int("REAPER_INTERVAL", 300))


@dataclass(frozen=True)
class WebSettings:
    """Liveness HTTP endpoint settings."""

    host: str = field(default_factory=lambda: os.getenv("WEB_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _env_int("WEB_PORT", 5000))
    enabled: bool = field(default_factory=lambda: _env_bool("WEB_ENABLED", True))


@dataclass(frozen=True)
class Settings:
    """
    Root settings container - Single source of truth for all configuration.

    Usage:
        from reviewbot.infrastructure.config import get_settings
        settings = get_settings()
        print(settings.discord.token)
    """

    # Sub-settings groups
    discord: DiscordSettings = field(default_factory=DiscordSettings)
    flow: ReviewFlowSettings = field(default_factory=ReviewFlowSettings)
    web: WebSettings = field(default_factory=WebSettings)

    database_file: Path = field(
        default_factory=lambda: Path(os.getenv("DATABASE_FILE", "reviews.db"))
    )
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    def validate(self) -> list[str]:
        """
        Validate settings and return list of warnings/errors.
        Returns empty list if all settings are valid.
        """
        issues = []

        if not self.discord.token:
            issues.append(
                "ERROR: DISCORD_BOT_TOKEN not set. "
                "The bot cannot log in without it."
            )

        if self.flow.comment_min_length < 1:
            issues.append(
                "WARNING: COMMENT_MIN_LENGTH below 1. "
                "Empty comments will still be rejected."
            )

        if self.flow.comment_max_length < self.flow.comment_min_length:
            issues.append(
                f"ERROR: COMMENT_MAX_LENGTH ({self.flow.comment_max_length}) is smaller "
                f"than COMMENT_MIN_LENGTH ({self.flow.comment_min_length})."
            )

        if self.flow.session_idle_timeout == 0:
            issues.append(
                "WARNING: SESSION_IDLE_TIMEOUT is 0. "
                "Abandoned review sessions will never be evicted."
            )

        return issues


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get singleton Settings instance.
    Cached to ensure consistent settings throughout application lifecycle.
    """
    return Settings()

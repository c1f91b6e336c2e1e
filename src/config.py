"""Settings loader.

Reads a local ``.env`` file (python-dotenv). Values in the file win; keys
missing from the file fall back to the process environment.

Keys:
- TELEGRAM_BOT_TOKEN: bot credential (required for the Telegram bot)
- VBUCKS_CACHE_FILE: cache path (default: vbucks_cache.json)
- VBUCKS_MISSIONS_URL: page to scrape
- VBUCKS_FETCH_TIMEOUT: HTTP timeout in seconds (default: 20)
- LOG_LEVEL: logging level name (default: INFO)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import dotenv_values
from pydantic import BaseModel, Field, ValidationError, field_validator

from mission_source import DEFAULT_TIMEOUT_S, MISSIONS_URL

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = ".env"
TOKEN_PLACEHOLDER = "your_bot_token_here"

_PLACEHOLDER_ENV = f"""\
# Telegram Bot Configuration
TELEGRAM_BOT_TOKEN={TOKEN_PLACEHOLDER}
"""


class ConfigError(RuntimeError):
    """Configuration is missing or incomplete."""


class Settings(BaseModel):
    telegram_bot_token: str = ""
    cache_file: Path = Path("vbucks_cache.json")
    missions_url: str = MISSIONS_URL
    fetch_timeout_s: float = Field(default=DEFAULT_TIMEOUT_S, gt=0)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value!r}")
        return level


def write_placeholder_env(path: Path) -> None:
    """Create *path* with a placeholder token for the operator to fill in."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(_PLACEHOLDER_ENV, encoding="utf-8")


def load_settings(
    env_path: str | Path = DEFAULT_ENV_FILE,
    *,
    require_token: bool = True,
) -> Settings:
    """Load :class:`Settings` from *env_path*.

    Raises:
        ConfigError: when *require_token* is set and the file is missing
            (a placeholder file is created first) or the token is unset.
    """
    path = Path(env_path)

    if not path.exists():
        if require_token:
            try:
                write_placeholder_env(path)
            except OSError as exc:
                raise ConfigError(f"Failed to create default {path}: {exc}") from exc
            raise ConfigError(
                f"Created {path}; please edit it and set TELEGRAM_BOT_TOKEN"
            )
        file_values: dict[str, str | None] = {}
    else:
        file_values = dotenv_values(path)

    def _get(key: str) -> str | None:
        value = file_values.get(key)
        if value is None:
            value = os.environ.get(key)
        if value is None:
            return None
        value = value.strip()
        return value or None

    raw: dict[str, object] = {}
    for field_name, key in (
        ("telegram_bot_token", "TELEGRAM_BOT_TOKEN"),
        ("cache_file", "VBUCKS_CACHE_FILE"),
        ("missions_url", "VBUCKS_MISSIONS_URL"),
        ("fetch_timeout_s", "VBUCKS_FETCH_TIMEOUT"),
        ("log_level", "LOG_LEVEL"),
    ):
        value = _get(key)
        if value is not None:
            raw[field_name] = value

    try:
        settings = Settings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings in {path}: {exc}") from exc

    if require_token and settings.telegram_bot_token in ("", TOKEN_PLACEHOLDER):
        raise ConfigError(f"TELEGRAM_BOT_TOKEN not set in {path}")

    return settings

"""
Runtime configuration — read once from the environment (and .env).

Startup checks are explicit functions rather than import-time side effects:
  ensure_upload_dir()  — called from the FastAPI lifespan
  require_api_key()    — called by the generator right before the API call
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger("quiz.config")

DEFAULT_MODEL = "claude-sonnet-4-6"
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10MB


class ConfigurationError(RuntimeError):
    """Required configuration is missing."""


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default


class Settings:
    """Centralised runtime configuration."""

    def __init__(self) -> None:
        self.anthropic_api_key: str | None = os.getenv("ANTHROPIC_API_KEY") or None
        self.model = os.getenv("QUIZ_MODEL", DEFAULT_MODEL)
        self.max_tokens = _int_env("QUIZ_MAX_TOKENS", 4096)
        self.upload_dir = Path(os.getenv("UPLOAD_DIR", "uploads")).resolve()
        self.max_upload_bytes = _int_env("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)
        self.default_question_count = _int_env("DEFAULT_QUESTION_COUNT", 5)
        self.min_text_length = _int_env("MIN_TEXT_LENGTH", 50)
        self.cors_origins = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]
        self.app_env = os.getenv("APP_ENV", "production")

    @property
    def api_key_configured(self) -> bool:
        return bool(self.anthropic_api_key)

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


def ensure_upload_dir(settings: Settings) -> Path:
    """Create the upload directory if it does not exist yet."""
    if settings.upload_dir.exists():
        logger.info("Uploads directory already exists: %s", settings.upload_dir)
    else:
        settings.upload_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Created uploads directory: %s", settings.upload_dir)
    return settings.upload_dir


def require_api_key(settings: Settings) -> str:
    """Return the Anthropic API key or raise ConfigurationError."""
    if not settings.anthropic_api_key:
        raise ConfigurationError(
            "ANTHROPIC_API_KEY is not set in environment variables. "
            "Add ANTHROPIC_API_KEY=your_api_key_here to your .env file."
        )
    return settings.anthropic_api_key

"""
nextexport - Configuration Management
=====================================
Centralized configuration with environment variable support and validation.

Usage:
    from nextexport.config import get_settings

    settings = get_settings()
    build_dir = project_dir / settings.dist_dir
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from nextexport.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _default_threads() -> int:
    return max(1, (os.cpu_count() or 1) - 1)


def _int_env(name: str, *, minimum: int = 1) -> int | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}", setting_name=name) from exc
    if value < minimum:
        raise ConfigurationError(f"{name} must be at least {minimum}, got {value}", setting_name=name)
    return value


@dataclass
class Settings:
    """Export settings with environment variable overrides."""

    # Project layout
    dist_dir: str = ".next"
    default_outdir_name: str = "out"

    # Export pipeline
    default_threads: int = field(default_factory=_default_threads)

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"

    # Feature flags
    trace_enabled: bool = False
    debug_mode: bool = False

    def __post_init__(self):
        """Load overrides from environment variables."""
        self._load_env_overrides()

    def _load_env_overrides(self):
        """Load configuration from environment variables."""
        # Project layout
        if dist_dir := os.environ.get("NEXT_EXPORT_DIST_DIR", "").strip():
            self.dist_dir = dist_dir
        if outdir_name := os.environ.get("NEXT_EXPORT_OUTDIR_NAME", "").strip():
            self.default_outdir_name = outdir_name

        # Export pipeline
        if (threads := _int_env("NEXT_EXPORT_THREADS")) is not None:
            self.default_threads = threads

        # Logging
        if level := os.environ.get("LOG_LEVEL", "").strip():
            self.log_level = level.upper()
        log_format = os.environ.get("LOG_FORMAT", "").strip().lower()
        if log_format in ("console", "json"):
            self.log_format = log_format
        elif log_format:
            logger.warning("Ignoring unsupported LOG_FORMAT %r", log_format)

        # Feature flags
        if os.environ.get("NEXT_EXPORT_TRACE", "").lower() in ("1", "true", "yes"):
            self.trace_enabled = True
        if os.environ.get("DEBUG", "").lower() in ("1", "true"):
            self.debug_mode = True


# Singleton instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
        if _settings.debug_mode:
            logger.info("Settings loaded with debug mode enabled")
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from environment."""
    global _settings
    _settings = Settings()
    return _settings

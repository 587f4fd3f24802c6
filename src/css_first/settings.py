"""
Central settings for CSS First.

Reads configuration from ``~/.config/css-first/config.toml`` (POSIX) or
``%APPDATA%/css-first/config.toml`` (Windows).  Environment variables
override config-file values.

Usage::

    from .settings import get_settings
    settings = get_settings()
    print(settings.cache_ttl)
"""

import logging
import os
import platform
import sys
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Use stdlib tomllib on 3.11+, fall back to tomli on older versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[no-redef]


DEFAULT_MDN_BASE_URL = "https://developer.mozilla.org/en-US/docs/Web/CSS"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _default_config_dir() -> Path:
    """Return the platform-appropriate config directory."""
    if platform.system() == "Windows":
        appdata = os.environ.get("APPDATA", str(Path.home() / "AppData" / "Roaming"))
        return Path(appdata) / "css-first"
    return Path.home() / ".config" / "css-first"


def _default_config_path() -> Path:
    return _default_config_dir() / "config.toml"


@dataclass
class Settings:
    """Resolved css-first settings (config file + env var overrides)."""

    # [mdn]
    mdn_base_url: str = DEFAULT_MDN_BASE_URL
    request_timeout: float = 10.0
    live_fetch: bool = True

    # [cache]
    cache_ttl_seconds: int = 3600

    # [suggestions]
    max_suggestions: int = 5
    max_concurrency: int = 4

    # [logging]
    log_level: str = "INFO"

    # Path to the config file that was loaded (empty string if none)
    _config_file: str = ""

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(seconds=self.cache_ttl_seconds)


# Module-level singleton
_settings: Optional[Settings] = None


def _parse_bool(raw: object, default: bool) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    logger.debug("unrecognised boolean value %r, keeping %s", raw, default)
    return default


def _parse_positive_int(raw: object, default: int) -> int:
    try:
        value = int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        logger.warning("expected an integer, got %r; keeping %s", raw, default)
        return default
    if value < 1:
        logger.warning("expected a positive integer, got %r; keeping %s", raw, default)
        return default
    return value


def _parse_positive_float(raw: object, default: float) -> float:
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        logger.warning("expected a number, got %r; keeping %s", raw, default)
        return default
    return value if value > 0 else default


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Load settings from config file, then apply env var overrides."""
    settings = Settings()
    path = config_path or _default_config_path()

    # --- Read config file ---
    if path.is_file():
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
            settings._config_file = str(path)

            mdn = data.get("mdn", {})
            if "base_url" in mdn:
                settings.mdn_base_url = str(mdn["base_url"]).strip().rstrip("/")
            if "timeout" in mdn:
                settings.request_timeout = _parse_positive_float(
                    mdn["timeout"], settings.request_timeout
                )
            if "live_fetch" in mdn:
                settings.live_fetch = _parse_bool(mdn["live_fetch"], settings.live_fetch)

            cache = data.get("cache", {})
            if "ttl_seconds" in cache:
                settings.cache_ttl_seconds = _parse_positive_int(
                    cache["ttl_seconds"], settings.cache_ttl_seconds
                )

            suggestions = data.get("suggestions", {})
            if "max_suggestions" in suggestions:
                settings.max_suggestions = _parse_positive_int(
                    suggestions["max_suggestions"], settings.max_suggestions
                )
            if "max_concurrency" in suggestions:
                settings.max_concurrency = _parse_positive_int(
                    suggestions["max_concurrency"], settings.max_concurrency
                )

            log = data.get("logging", {})
            if "level" in log:
                settings.log_level = str(log["level"]).upper()

            logger.debug("Loaded settings from %s", path)
        except Exception:
            logger.warning("Failed to parse config file %s", path, exc_info=True)

    # --- Env var overrides (take priority over config file) ---
    env_base_url = os.environ.get("CSS_FIRST_MDN_BASE_URL", "").strip()
    if env_base_url:
        settings.mdn_base_url = env_base_url.rstrip("/")

    env_timeout = os.environ.get("CSS_FIRST_TIMEOUT", "").strip()
    if env_timeout:
        settings.request_timeout = _parse_positive_float(
            env_timeout, settings.request_timeout
        )

    env_live = os.environ.get("CSS_FIRST_LIVE_FETCH", "").strip()
    if env_live:
        settings.live_fetch = _parse_bool(env_live, settings.live_fetch)

    env_ttl = os.environ.get("CSS_FIRST_CACHE_TTL", "").strip()
    if env_ttl:
        settings.cache_ttl_seconds = _parse_positive_int(
            env_ttl, settings.cache_ttl_seconds
        )

    env_concurrency = os.environ.get("CSS_FIRST_MAX_CONCURRENCY", "").strip()
    if env_concurrency:
        settings.max_concurrency = _parse_positive_int(
            env_concurrency, settings.max_concurrency
        )

    env_level = os.environ.get("CSS_FIRST_LOG_LEVEL", "").strip()
    if env_level:
        settings.log_level = env_level.upper()

    return settings


def get_settings() -> Settings:
    """Return the cached Settings singleton, loading on first call."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the singleton so the next ``get_settings()`` reloads from disk."""
    global _settings
    _settings = None


# ---------------------------------------------------------------------------
# Default config template
# ---------------------------------------------------------------------------

DEFAULT_CONFIG_TOML = """\
# CSS First configuration

[mdn]
# Where property documentation is fetched from
base_url = "https://developer.mozilla.org/en-US/docs/Web/CSS"
timeout = 10.0
# Set to false to use the static support table only (no network)
live_fetch = true

[cache]
ttl_seconds = 3600

[suggestions]
max_suggestions = 5
# Documentation fetches in flight per request
max_concurrency = 4

[logging]
level = "INFO"
"""

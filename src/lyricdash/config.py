"""Configuration settings for lyricdash."""

import os
from pathlib import Path

from .exceptions import ConfigError

# Directories
DEFAULT_CACHE_DIR = Path.home() / ".cache" / "lyricdash"
LOG_FILE_NAME = "lyricdash.log"

# Polling (can be overridden via environment variables)
POLL_INTERVAL = float(os.getenv("LYRICDASH_POLL_INTERVAL", "1.0"))
PROBE_TIMEOUT = float(os.getenv("LYRICDASH_PROBE_TIMEOUT", "1.0"))
PLAYERCTL_COMMAND = os.getenv("LYRICDASH_PLAYERCTL", "playerctl")

# Lyrics fetching
FETCH_TIMEOUT = float(os.getenv("LYRICDASH_FETCH_TIMEOUT", "10"))
FETCH_RETRIES = int(os.getenv("LYRICDASH_FETCH_RETRIES", "2"))

# Display color: name, 0-255 index or #rrggbb. Checked by the UI layer only.
DEFAULT_COLOR = os.getenv("LYRICDASH_COLOR", "2")

# Dashboard
PANEL_WIDTH = 60
REFRESH_PER_SECOND = 10

def validate_config() -> None:
    """Validate configuration values."""
    if POLL_INTERVAL <= 0:
        raise ConfigError("Poll interval must be positive")

    if PROBE_TIMEOUT <= 0:
        raise ConfigError("Probe timeout must be positive")

    if FETCH_TIMEOUT <= 0:
        raise ConfigError("Fetch timeout must be positive")

    if FETCH_RETRIES < 0:
        raise ConfigError("Fetch retries cannot be negative")

    if not PLAYERCTL_COMMAND.strip():
        raise ConfigError("Media-control command cannot be empty")

def get_cache_dir() -> Path:
    """Get cache directory from environment or default."""
    cache_dir = os.getenv("LYRICDASH_CACHE_DIR")
    if cache_dir:
        return Path(cache_dir)
    return DEFAULT_CACHE_DIR

def get_log_file() -> Path:
    """Default log file location inside the cache directory."""
    return get_cache_dir() / LOG_FILE_NAME

# Validate config on import
validate_config()

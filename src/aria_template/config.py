"""
Configuration management for aria-template

Loads configuration from environment variables (optionally seeded from a
.env file) with sensible defaults for serialization, logging and polling.
"""

import logging
import os
from pathlib import Path
from typing import TypedDict

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "ARIA_TEMPLATE_"

# Load environment variables from .env file
# Try multiple paths for .env file
env_loaded = False
for env_path in [
    Path.cwd() / ".env",
    Path(__file__).parent.parent.parent / ".env",
    Path.home() / ".env",
]:
    if env_path.exists():
        logger.info(f"Loading environment from: {env_path}")
        load_dotenv(env_path)
        env_loaded = True
        break

if not env_loaded:
    logger.debug("No .env file found, using system environment variables only")


class MatcherConfig(TypedDict):
    """Configuration for the matcher, serializer and polling loop"""

    indent_width: int
    log_file: str
    log_level: str
    poll_timeout_ms: int
    poll_interval_ms: int


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable"""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring non-integer value for {key}: {value!r}")
        return default


def load_matcher_config() -> MatcherConfig:
    """
    Load configuration from ARIA_TEMPLATE_* environment variables.

    Returns:
        MatcherConfig with defaults applied

    Raises:
        ValueError: If a value is out of range
    """
    config: MatcherConfig = {
        "indent_width": _get_int_env(f"{ENV_PREFIX}INDENT_WIDTH", 2),
        "log_file": os.getenv(f"{ENV_PREFIX}LOG_FILE", "logs/aria-template.log"),
        "log_level": os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO").upper(),
        "poll_timeout_ms": _get_int_env(f"{ENV_PREFIX}POLL_TIMEOUT_MS", 5000),
        "poll_interval_ms": _get_int_env(f"{ENV_PREFIX}POLL_INTERVAL_MS", 100),
    }

    if config["indent_width"] < 1:
        raise ValueError(f"{ENV_PREFIX}INDENT_WIDTH must be >= 1, got {config['indent_width']}")
    if config["poll_timeout_ms"] < 0:
        raise ValueError(f"{ENV_PREFIX}POLL_TIMEOUT_MS must be >= 0, got {config['poll_timeout_ms']}")
    if config["poll_interval_ms"] < 1:
        raise ValueError(f"{ENV_PREFIX}POLL_INTERVAL_MS must be >= 1, got {config['poll_interval_ms']}")
    if config["log_level"] not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ValueError(f"{ENV_PREFIX}LOG_LEVEL is not a logging level: {config['log_level']}")

    return config

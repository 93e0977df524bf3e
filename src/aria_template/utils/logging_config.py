"""
Logging configuration utilities for aria-template

Provides file-only logging configuration. When the tool server runs over the
stdio transport, stdout carries JSON-RPC messages, so log records must never
reach stdout/stderr.
"""

import logging
import tempfile
import time
from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import Any


def setup_file_logging(
    log_file: str | Path = "logs/aria-template.log",
    level: int | str = logging.INFO,
    format_string: str | None = None,
) -> logging.Logger:
    """
    Configure file-only logging for the application.

    Args:
        log_file: Path to the log file (relative or absolute)
        level: Logging level (default: logging.INFO)
        format_string: Custom format string (default: timestamp - name - level - message)

    Returns:
        The root logger instance
    """
    log_path = Path(log_file)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        # Unwritable location, keep logging somewhere predictable
        log_path = Path(tempfile.gettempdir()) / log_path.name

    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_string,
        handlers=[
            logging.FileHandler(log_path),
        ],
        force=True,  # Override any existing configuration
    )

    logger = logging.getLogger()
    logger.info(
        f"Logging configured: file={log_path}, level={logging.getLevelName(logger.level)}"
    )

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the specified module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def log_dict(
    logger: logging.Logger, message: str, data: dict[str, Any], level: int = logging.INFO
) -> None:
    """
    Log a dictionary with formatted key-value pairs.

    Args:
        logger: Logger instance
        message: Prefix message
        data: Dictionary to log
        level: Log level (default: INFO)
    """
    logger.log(level, message)
    for key, value in data.items():
        # Mask sensitive values
        if any(sensitive in key.lower() for sensitive in ["token", "password", "secret", "key"]):
            value = "***REDACTED***"
        logger.log(level, f"  {key}: {value}")


def log_tool_result(logger: logging.Logger) -> Callable:
    """
    Decorator that logs duration and outcome of an async tool function.

    Args:
        logger: Logger that receives the records

    Returns:
        Decorator wrapping the tool coroutine
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.time()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                elapsed = time.time() - start_time
                logger.error(f"{func.__name__} failed after {elapsed:.3f}s: {e}")
                raise
            elapsed = time.time() - start_time
            if isinstance(result, dict) and result.get("success") is False:
                logger.warning(f"{func.__name__} returned error after {elapsed:.3f}s: {result.get('error')}")
            else:
                logger.info(f"{func.__name__} completed in {elapsed:.3f}s")
            return result

        return wrapper

    return decorator

"""Utility modules for aria-template."""

from .logging_config import get_logger, log_dict, log_tool_result, setup_file_logging
from .text import normalize_text, quote_string

__all__ = [
    "get_logger",
    "log_dict",
    "log_tool_result",
    "normalize_text",
    "quote_string",
    "setup_file_logging",
]

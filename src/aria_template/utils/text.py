"""Text helpers shared by the parser, matcher and serializer."""

import re
from typing import Literal

ROLE_RE = re.compile(r"[A-Za-z0-9\-]+")
BARE_WORD_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_\-]*")
NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")


def normalize_text(text: str) -> str:
    """
    Normalize text for comparison:
    1. Remove zero-width characters and soft hyphens
    2. Collapse whitespace (multiple spaces -> single space)
    3. Trim leading/trailing whitespace

    Args:
        text: Text to normalize

    Returns:
        Normalized text
    """
    # Remove zero-width space (\u200b) and soft hyphen (\u00ad)
    text = text.replace("\u200b", "").replace("\u00ad", "")

    # Collapse all whitespace runs to single space
    text = re.sub(r"\s+", " ", text)

    return text.strip()


QUOTE_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r"}

# Remaining characters str.splitlines() breaks on
LINE_BREAKS = "\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029"


def quote_string(text: str) -> str:
    """
    Render ``text`` as a double-quoted template literal.

    The result always fits on one line: line breaks are written as
    ``\\n``, ``\\r`` or ``\\uXXXX`` escapes.
    """
    chars = []
    for char in text:
        if char in QUOTE_ESCAPES:
            chars.append(QUOTE_ESCAPES[char])
        elif char in LINE_BREAKS:
            chars.append(f"\\u{ord(char):04x}")
        else:
            chars.append(char)
    return '"' + "".join(chars) + '"'


def is_bare_word(text: str) -> bool:
    """Check whether ``text`` can be written unquoted as an attribute value."""
    return bool(BARE_WORD_RE.fullmatch(text)) and text not in ("true", "false")


def parse_boolean(value: str | bool) -> bool:
    """
    Parse boolean value from string or bool.

    Args:
        value: Boolean value as string or bool

    Returns:
        Boolean value

    Raises:
        ValueError: If value cannot be parsed as boolean
    """
    if isinstance(value, bool):
        return value

    if value == "true":
        return True
    elif value == "false":
        return False
    else:
        raise ValueError(f"expected true or false, got '{value}'")


def parse_mixed_boolean(value: str | bool) -> bool | Literal["mixed"]:
    """
    Parse boolean or 'mixed' value (for checked/pressed attributes).

    Raises:
        ValueError: If value cannot be parsed
    """
    if value == "mixed":
        return "mixed"
    try:
        return parse_boolean(value)
    except ValueError as e:
        raise ValueError(f"expected true, false or mixed, got '{value}'") from e


def validate_level(level: object) -> int:
    """
    Validate a heading/tree level.

    Raises:
        ValueError: If level is not a positive integer
    """
    if isinstance(level, bool) or not isinstance(level, int) or level < 1:
        raise ValueError(f"level must be a positive integer, got '{level}'")
    return level


def coerce_literal(raw: str) -> bool | int | float | str:
    """Convert an unquoted attribute value token into its typed value."""
    if raw == "true":
        return True
    if raw == "false":
        return False
    if NUMBER_RE.fullmatch(raw):
        return float(raw) if "." in raw else int(raw)
    return raw


def validate_attribute(key: str, value: bool | int | float | str) -> bool | int | float | str:
    """
    Check a recognized state attribute against its value domain.

    Unknown keys pass through untouched.

    Raises:
        ValueError: If the value is outside the attribute's domain
    """
    if key in ("checked", "pressed", "disabled", "expanded", "selected"):
        if not isinstance(value, (bool, str)):
            raise ValueError(f"expected a boolean, got {value!r}")
        if key in ("checked", "pressed"):
            return parse_mixed_boolean(value)
        return parse_boolean(value)
    if key == "level":
        return validate_level(value)
    return value

"""Comparison primitives for roles, names, text and attributes."""

import re
from collections.abc import Mapping
from functools import lru_cache

from .types import AttributeValue, TextValue
from .utils.text import normalize_text


@lru_cache(maxsize=512)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def role_matches(expected: str, actual: str) -> bool:
    """Roles compare verbatim and case-sensitively."""
    return expected == actual


def text_matches(expected: TextValue | None, actual: str | None) -> bool:
    """
    Match a name/text constraint against an actual value.

    ``None`` is unconstrained. Literals compare after whitespace
    normalization of both sides; regexes are searched anywhere within the
    normalized actual value.
    """
    if expected is None:
        return True
    if actual is None:
        return False

    actual = normalize_text(actual)
    if expected.is_regex:
        return _compile(expected.value).search(actual) is not None
    return normalize_text(expected.value) == actual


# Name and text share one rule
name_matches = text_matches


def _same_type(expected: AttributeValue, actual: object) -> bool:
    if isinstance(expected, bool) or isinstance(actual, bool):
        return isinstance(expected, bool) and isinstance(actual, bool)
    if isinstance(expected, (int, float)):
        return isinstance(actual, (int, float))
    return type(expected) is type(actual)


def attribute_value_matches(expected: AttributeValue, actual: object) -> bool:
    """Equal values of the same kind; ints and floats count as one kind."""
    return _same_type(expected, actual) and expected == actual


def first_attribute_mismatch(
    expected: Mapping[str, AttributeValue], actual: Mapping[str, object]
) -> str | None:
    """
    Find the first template attribute the actual attributes do not satisfy.

    Keys are checked in template order. Keys only present on the actual side
    are ignored.

    Returns:
        The offending key, or None when every constrained key matches
    """
    for key, value in expected.items():
        if key not in actual or not attribute_value_matches(value, actual[key]):
            return key
    return None


def attributes_match(expected: Mapping[str, AttributeValue], actual: Mapping[str, object]) -> bool:
    return first_attribute_mismatch(expected, actual) is None

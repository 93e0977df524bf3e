"""
ARIA Template

Parse indentation-based accessibility templates, match them against captured
accessible trees and serialize captures back into templates.
"""

__version__ = "0.1.0"

from .accessible import build_accessible_tree, validate_accessible_tree
from .diff import describe_mismatch, describe_path, format_failure
from .exceptions import AriaTemplateError, ContractViolationError, ParseError
from .matcher import match
from .parser import parse
from .polling import PollOutcome, wait_for_match
from .serializer import TemplateSerializer, serialize
from .types import (
    MAX_TREE_DEPTH,
    ROOT_ROLE,
    AccessibleNode,
    MatchResult,
    Mismatch,
    PathStep,
    TemplateNode,
    TextValue,
)

__all__ = [
    # Operations
    "parse",
    "match",
    "serialize",
    "format_failure",
    "describe_mismatch",
    "describe_path",
    "build_accessible_tree",
    "validate_accessible_tree",
    "wait_for_match",
    "matches",
    # Data types
    "AccessibleNode",
    "MatchResult",
    "Mismatch",
    "PathStep",
    "MAX_TREE_DEPTH",
    "PollOutcome",
    "ROOT_ROLE",
    "TemplateNode",
    "TemplateSerializer",
    "TextValue",
    # Exceptions
    "AriaTemplateError",
    "ContractViolationError",
    "ParseError",
]


def matches(template_text: str, actual: AccessibleNode) -> MatchResult:
    """
    Parse template text and match it against an accessible tree.

    This is a convenience function combining ``parse`` and ``match``.

    Example:
        >>> result = matches('- heading "Title" [level=1]', tree)
        >>> if not result.ok:
        ...     print(format_failure(result, tree))
    """
    return match(parse(template_text), actual)

"""
Template Tools

Plain async functions registered as MCP tools by ``aria_template.server``.
Malformed input (bad template text, malformed accessible trees) is reported
in the response instead of raised, so clients always get structured data.
"""

from typing import Any

from typing_extensions import TypedDict

from ..accessible import build_accessible_tree
from ..config import load_matcher_config
from ..diff import describe_mismatch, format_failure
from ..exceptions import ContractViolationError, ParseError
from ..matcher import match
from ..parser import parse
from ..serializer import TemplateSerializer, serialize
from ..utils.logging_config import get_logger, log_tool_result

logger = get_logger(__name__)


class ParseResponse(TypedDict, total=False):
    """Response for parse_template."""

    success: bool
    tree: dict[str, Any] | None
    error: str | None
    line: int | None
    column: int | None


class MatchResponse(TypedDict, total=False):
    """Response for match_snapshot."""

    success: bool  # False when the input could not be processed
    matched: bool
    failure_path: list[dict[str, Any]]
    reason: dict[str, Any] | None
    report: str
    error: str | None


class SerializeResponse(TypedDict, total=False):
    """Response for serialize_snapshot."""

    success: bool
    template: str | None
    error: str | None


def _parse_error(e: ParseError) -> dict[str, Any]:
    return {"success": False, "error": str(e), "line": e.line, "column": e.column}


@log_tool_result(logger)
async def parse_template(template: str) -> ParseResponse:
    """
    Parse template text and return its tree as JSON-compatible data.

    Args:
        template: Template text, one ``- role "name" [attrs]: text`` entry per line

    Returns:
        A dictionary containing:
        - success: Whether the template parsed
        - tree: Parsed tree (root role ``fragment``) when successful
        - error, line, column: Parse error details otherwise
    """
    try:
        root = parse(template)
    except ParseError as e:
        return _parse_error(e)  # type: ignore[return-value]

    return {"success": True, "tree": TemplateSerializer().to_dict(root)}  # type: ignore[typeddict-item]


@log_tool_result(logger)
async def match_snapshot(template: str, tree: dict[str, Any]) -> MatchResponse:
    """
    Match template text against an accessible tree.

    Args:
        template: Template text
        tree: Accessible tree as a nested dictionary with ``role``, ``name``,
            ``children``, optional ``text`` and state attributes

    Returns:
        A dictionary containing:
        - success: Whether both inputs were well-formed
        - matched: Whether the tree satisfies the template
        - failure_path: ``[{"role", "index"}]`` steps to the first divergence
        - reason: Mismatched dimension and values
        - report: Human-readable divergence trace
    """
    try:
        root = parse(template)
    except ParseError as e:
        return _parse_error(e)  # type: ignore[return-value]

    try:
        actual = build_accessible_tree(tree)
        result = match(root, actual)
    except ContractViolationError as e:
        return {"success": False, "error": str(e)}

    reason = None
    if result.reason is not None:
        reason = {
            "kind": result.reason.kind,
            "expected": result.reason.expected,
            "actual": result.reason.actual,
            "key": result.reason.key,
            "template_line": result.reason.template_line,
            "description": describe_mismatch(result.reason),
        }

    return {
        "success": True,
        "matched": result.ok,
        "failure_path": [{"role": step.role, "index": step.index} for step in result.failure_path],
        "reason": reason,
        "report": format_failure(result),
    }


@log_tool_result(logger)
async def serialize_snapshot(tree: dict[str, Any], indent_width: int | None = None) -> SerializeResponse:
    """
    Render an accessible tree as template text.

    Args:
        tree: Accessible tree as a nested dictionary
        indent_width: Spaces per nesting level (default: ARIA_TEMPLATE_INDENT_WIDTH)

    Returns:
        A dictionary containing:
        - success: Whether the tree could be rendered
        - template: Template text when successful
        - error: Error message otherwise
    """
    if indent_width is None:
        indent_width = load_matcher_config()["indent_width"]
    if indent_width < 1:
        return {"success": False, "error": f"indent_width must be >= 1, got {indent_width}"}

    try:
        text = serialize(build_accessible_tree(tree), indent_width=indent_width)
    except ContractViolationError as e:
        return {"success": False, "error": str(e)}

    return {"success": True, "template": text}

"""Human-readable rendering of failed matches."""

from .serializer import DEFAULT_INDENT_WIDTH, format_attribute_value, serialize
from .types import AccessibleNode, MatchResult, Mismatch, PathStep
from .utils.text import quote_string


def describe_path(path: tuple[PathStep, ...]) -> str:
    """Render ``role[index] > role[index]``; an empty path is the root sequence."""
    if not path:
        return "(root)"
    return " > ".join(str(step) for step in path)


def _value(value: object) -> str:
    if value is None:
        return "nothing"
    try:
        return format_attribute_value(value)  # type: ignore[arg-type]
    except ValueError:
        return repr(value)


def _received(value: object, missing: str) -> str:
    return missing if value is None else quote_string(str(value))


def describe_mismatch(reason: Mismatch) -> str:
    """One-line description of the mismatched dimension."""
    if reason.kind == "role":
        return f"role mismatch: expected {reason.expected}, received {reason.actual}"
    if reason.kind == "name":
        return f"name mismatch: expected {reason.expected}, received {_received(reason.actual, 'no name')}"
    if reason.kind == "attribute":
        return (
            f"attribute '{reason.key}' mismatch: expected {_value(reason.expected)}, "
            f"received {_value(reason.actual)}"
        )
    if reason.kind == "text":
        return f"text mismatch: expected {reason.expected}, received {_received(reason.actual, 'no text')}"
    if reason.kind == "missing":
        return f"no remaining actual sibling available for '{reason.expected}'"
    return (
        f"children count mismatch: expected {reason.expected} element children, "
        f"received {reason.actual}"
    )


def format_failure(
    result: MatchResult,
    actual: AccessibleNode | None = None,
    indent_width: int = DEFAULT_INDENT_WIDTH,
) -> str:
    """
    Render a match result as a divergence trace.

    Args:
        result: Result returned by ``match``
        actual: Accessible tree that was matched; when given, its serialized
            form is appended for context
        indent_width: Indentation used for the appended tree

    Returns:
        Multi-line report
    """
    if result.ok or result.reason is None:
        return "Accessible tree matches template"

    lines = [
        "Accessible tree does not match template",
        f"  at: {describe_path(result.failure_path)}",
        f"  {describe_mismatch(result.reason)}",
    ]
    if result.reason.template_line:
        lines.append(f"  template line: {result.reason.template_line}")

    if actual is not None:
        lines.append("")
        lines.append("Received:")
        lines.append(serialize(actual, indent_width=indent_width))

    return "\n".join(lines)

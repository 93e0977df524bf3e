"""Serialization of accessible trees to template text and of template trees to JSON."""

import json
import math
from typing import Any

from .accessible import validate_accessible_tree
from .exceptions import ContractViolationError
from .types import ROOT_ROLE, AccessibleNode, AttributeValue, TemplateNode
from .utils.text import BARE_WORD_RE, NUMBER_RE, ROLE_RE, is_bare_word, normalize_text, quote_string

DEFAULT_INDENT_WIDTH = 2


def format_attribute_value(value: AttributeValue) -> str:
    """
    Render an attribute value in template syntax.

    Raises:
        ValueError: If the value has no template representation
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        text = repr(value)
        if math.isfinite(value) and NUMBER_RE.fullmatch(text):
            return text
        raise ValueError(f"number {value!r} has no template representation")
    if isinstance(value, str):
        return value if is_bare_word(value) else quote_string(value)
    raise ValueError(f"unsupported attribute value {value!r}")


def _format_attributes(attributes: dict[str, AttributeValue], sort: bool) -> str:
    keys = sorted(attributes) if sort else list(attributes)
    if not keys:
        return ""
    pairs = ", ".join(f"{key}={format_attribute_value(attributes[key])}" for key in keys)
    return f"[{pairs}]"


def _format_text(text: str) -> str:
    if not text or text[0] in "\"/":
        return quote_string(text)
    return text


def format_template_entry(node: TemplateNode) -> str:
    """Render a single template node as it would appear on its source line."""
    parts = [node.role]
    if node.name is not None:
        parts.append(str(node.name))
    attributes = _format_attributes(node.attributes, sort=False)
    if attributes:
        parts.append(attributes)
    entry = " ".join(parts)
    if node.text is not None:
        entry += f": {node.text}"
    return entry


def serialize(node: AccessibleNode, indent_width: int = DEFAULT_INDENT_WIDTH) -> str:
    """
    Render an accessible tree as template text.

    A ``fragment`` root is not rendered itself; its children become the
    top-level entries. Names are always written as quoted literals and
    attributes are sorted by key.

    Args:
        node: Root of the accessible tree
        indent_width: Spaces per nesting level

    Returns:
        Template text, one line per node

    Raises:
        ContractViolationError: If the tree is malformed or holds values the
            template grammar cannot express
    """
    if indent_width < 1:
        raise ValueError("indent_width must be >= 1")
    validate_accessible_tree(node)

    lines: list[str] = []
    top_level = node.children if node.role == ROOT_ROLE else (node,)
    for index, child in enumerate(top_level):
        _render(child, 0, indent_width, lines, ((child.role, index),))
    return "\n".join(lines)


def _render(
    node: AccessibleNode,
    depth: int,
    indent_width: int,
    lines: list[str],
    path: tuple[tuple[str, int], ...],
) -> None:
    if not ROLE_RE.fullmatch(node.role):
        raise ContractViolationError(f"role '{node.role}' cannot be written", path)
    parts = ["-", node.role]

    name = normalize_text(node.name)
    if name:
        parts.append(quote_string(name))

    for key in node.attributes:
        if not BARE_WORD_RE.fullmatch(key):
            raise ContractViolationError(f"attribute key '{key}' cannot be written", path)
    try:
        attributes = _format_attributes(dict(node.attributes), sort=True)
    except ValueError as e:
        raise ContractViolationError(str(e), path) from e
    if attributes:
        parts.append(attributes)

    line = " " * (depth * indent_width) + " ".join(parts)
    if node.children:
        line += ":"
    elif node.text is not None:
        line += ": " + _format_text(normalize_text(node.text))
    lines.append(line)

    for index, child in enumerate(node.children):
        _render(child, depth + 1, indent_width, lines, path + ((child.role, index),))


class TemplateSerializer:
    """Serialize parsed template trees to JSON."""

    def to_dict(self, node: TemplateNode | list[TemplateNode] | None) -> dict[str, Any] | list[Any] | None:
        """
        Convert node to dictionary (recursive).

        Args:
            node: Node to convert

        Returns:
            Dictionary representation
        """
        if node is None:
            return None

        if isinstance(node, list):
            return [self.to_dict(item) for item in node]

        result: dict[str, Any] = {"role": node.role}

        if node.name is not None:
            result["name"] = {"value": node.name.value, "is_regex": node.name.is_regex}

        if node.attributes:
            result["attributes"] = dict(node.attributes)

        if node.text is not None:
            result["text"] = {"value": node.text.value, "is_regex": node.text.is_regex}

        if node.children_mode is not None:
            result["children_mode"] = node.children_mode

        if node.line:
            result["line"] = node.line

        if node.children:
            result["children"] = [self.to_dict(child) for child in node.children]

        return result

    def to_json(self, node: TemplateNode | list[TemplateNode] | None, indent: int | None = 2, **kwargs: Any) -> str:
        """
        Convert node to JSON string.

        Args:
            node: Node to convert
            indent: Number of spaces for indentation
            **kwargs: Additional arguments for json.dumps

        Returns:
            JSON string
        """
        return json.dumps(self.to_dict(node), indent=indent, **kwargs)

    def to_json_file(self, node: TemplateNode | list[TemplateNode] | None, filepath: str, **kwargs: Any) -> None:
        """
        Write node to JSON file.

        Args:
            node: Node to convert
            filepath: Path to output file
            **kwargs: Additional arguments for json.dump
        """
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(node), f, indent=2, **kwargs)

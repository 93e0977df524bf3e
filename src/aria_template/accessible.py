"""Boundary with the accessible-tree producer.

The page-side capture (for instance Playwright's ``page.accessibility.snapshot()``)
hands over plain dictionaries. :func:`build_accessible_tree` turns them into
:class:`~aria_template.types.AccessibleNode` values and
:func:`validate_accessible_tree` checks trees built elsewhere. Both raise
:class:`~aria_template.exceptions.ContractViolationError` for malformed input.
"""

from collections.abc import Mapping
from typing import Any

from .exceptions import ContractViolationError
from .types import MAX_TREE_DEPTH, RECOGNIZED_ATTRIBUTES, AccessibleNode

Path = tuple[tuple[str, int], ...]


def _check_depth(path: Path) -> None:
    if len(path) > MAX_TREE_DEPTH:
        raise ContractViolationError(f"accessible tree is deeper than {MAX_TREE_DEPTH} levels", path)


def _check_value(key: object, value: object, path: Path) -> None:
    if not isinstance(key, str) or not key:
        raise ContractViolationError(f"attribute key must be a non-empty string, got {key!r}", path)
    if not isinstance(value, (bool, int, float, str)):
        raise ContractViolationError(
            f"attribute '{key}' has unsupported value {value!r} ({type(value).__name__})", path
        )


def validate_accessible_tree(node: AccessibleNode) -> None:
    """
    Check that ``node`` is a well-formed accessible tree.

    Raises:
        ContractViolationError: On missing or mistyped fields, on cycles and
            on trees deeper than MAX_TREE_DEPTH levels below the root
    """
    _validate(node, (), set())


def _validate(node: object, path: Path, ancestors: set[int]) -> None:
    _check_depth(path)
    if not isinstance(node, AccessibleNode):
        raise ContractViolationError(f"expected AccessibleNode, got {type(node).__name__}", path)
    if not isinstance(node.role, str) or not node.role:
        raise ContractViolationError("node has no role", path)
    if not isinstance(node.name, str):
        raise ContractViolationError(f"name of '{node.role}' must be a string", path)
    if node.text is not None and not isinstance(node.text, str):
        raise ContractViolationError(f"text of '{node.role}' must be a string", path)
    if not isinstance(node.attributes, Mapping):
        raise ContractViolationError(f"attributes of '{node.role}' must be a mapping", path)
    for key, value in node.attributes.items():
        _check_value(key, value, path)
    if not isinstance(node.children, (tuple, list)):
        raise ContractViolationError(f"children of '{node.role}' must be a sequence", path)

    if id(node) in ancestors:
        raise ContractViolationError("accessible tree contains a cycle", path)
    ancestors.add(id(node))
    for index, child in enumerate(node.children):
        role = child.role if isinstance(child, AccessibleNode) else "?"
        _validate(child, path + ((role, index),), ancestors)
    ancestors.discard(id(node))


def build_accessible_tree(data: Mapping[str, Any]) -> AccessibleNode:
    """
    Build an accessible tree from a snapshot dictionary.

    Expected keys per node: ``role`` (required), ``name``, ``text``,
    ``children`` and any of the recognized state attributes (``checked``,
    ``disabled``, ``expanded``, ``level``, ``pressed``, ``selected``).
    Other keys are ignored; ``None`` values count as absent.

    Args:
        data: Root node dictionary

    Returns:
        Root AccessibleNode

    Raises:
        ContractViolationError: If the dictionary does not describe a tree
    """
    return _build(data, (), set())


def _build(data: object, path: Path, ancestors: set[int]) -> AccessibleNode:
    _check_depth(path)
    if not isinstance(data, Mapping):
        raise ContractViolationError(f"expected a mapping, got {type(data).__name__}", path)
    if id(data) in ancestors:
        raise ContractViolationError("accessible tree contains a cycle", path)

    role = data.get("role")
    if not isinstance(role, str) or not role:
        raise ContractViolationError("node has no role", path)

    name = data.get("name") or ""
    if not isinstance(name, str):
        raise ContractViolationError(f"name of '{role}' must be a string", path)

    text = data.get("text")
    if text is not None and not isinstance(text, str):
        raise ContractViolationError(f"text of '{role}' must be a string", path)

    attributes = {}
    for key in RECOGNIZED_ATTRIBUTES:
        value = data.get(key)
        if value is None:
            continue
        _check_value(key, value, path)
        attributes[key] = value

    raw_children = data.get("children") or []
    if not isinstance(raw_children, (list, tuple)):
        raise ContractViolationError(f"children of '{role}' must be a list", path)

    ancestors.add(id(data))
    children = []
    for index, child in enumerate(raw_children):
        child_role = child.get("role", "?") if isinstance(child, Mapping) else "?"
        children.append(_build(child, path + ((str(child_role), index),), ancestors))
    ancestors.discard(id(data))

    return AccessibleNode(
        role=role,
        name=name,
        attributes=attributes,
        text=text,
        children=tuple(children),
    )

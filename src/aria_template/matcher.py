"""Tree matcher comparing a template tree against an accessible tree.

Children are matched as an ordered, non-contiguous subsequence by default:
every template child must pair with an actual child, pairs keep their
relative order, and unclaimed actual siblings are skipped. The pairing is
greedy and never revisited, so each sibling list is walked once. Whether a
template child accepts an actual child does not depend on any other pairing,
so claiming the earliest acceptable sibling never rules out a later pair.

The ``/children: equal`` and ``/children: deep-equal`` directives switch a
node (or a whole subtree) to exact pairwise matching.
"""

import logging
from collections.abc import Sequence

from .accessible import validate_accessible_tree
from .serializer import format_template_entry
from .types import (
    ROOT_ROLE,
    AccessibleNode,
    MatchResult,
    Mismatch,
    PathStep,
    TemplateNode,
)
from .values import first_attribute_mismatch, name_matches, role_matches, text_matches

logger = logging.getLogger(__name__)

Path = tuple[PathStep, ...]


def match(template: TemplateNode, actual: AccessibleNode) -> MatchResult:
    """
    Match a parsed template against an accessible tree.

    The template root produced by :func:`~aria_template.parser.parse` is
    never compared itself; its children are matched against the children of
    a ``fragment`` actual root, or against the actual root alone when it is an
    ordinary node.

    Args:
        template: Template tree, usually the result of ``parse``
        actual: Accessible tree captured from the page

    Returns:
        MatchResult describing success or the first divergence

    Raises:
        ContractViolationError: If the accessible tree is malformed
    """
    validate_accessible_tree(actual)

    if actual.role == ROOT_ROLE:
        actual_children: Sequence[AccessibleNode] = actual.children
    else:
        actual_children = (actual,)

    if _is_synthetic_root(template):
        mode = template.children_mode or "contain"
        result = _match_children(template, template.children, actual_children, (), mode)
    else:
        result = _match_sequence((template,), actual_children, (), "contain")

    if result.ok:
        logger.debug("Template matched")
    else:
        logger.debug(f"Template did not match: {result.reason} at {list(map(str, result.failure_path))}")
    return result


def _is_synthetic_root(template: TemplateNode) -> bool:
    return template.role == ROOT_ROLE and template.line == 0


def _match_node(template: TemplateNode, actual: AccessibleNode, path: Path, inherited: str) -> MatchResult:
    """Match one node and, recursively, its children. ``path`` ends at ``actual``."""
    line = template.line

    if not role_matches(template.role, actual.role):
        return MatchResult.failure(
            path, Mismatch("role", expected=template.role, actual=actual.role, template_line=line)
        )

    if not name_matches(template.name, actual.name):
        return MatchResult.failure(
            path, Mismatch("name", expected=str(template.name), actual=actual.name, template_line=line)
        )

    key = first_attribute_mismatch(template.attributes, actual.attributes)
    if key is not None:
        return MatchResult.failure(
            path,
            Mismatch(
                "attribute",
                expected=template.attributes[key],
                actual=actual.attributes.get(key),
                key=key,
                template_line=line,
            ),
        )

    if template.text is not None and not text_matches(template.text, actual.text):
        return MatchResult.failure(
            path, Mismatch("text", expected=str(template.text), actual=actual.text, template_line=line)
        )

    mode = template.children_mode or ("deep-equal" if inherited == "deep-equal" else "contain")
    return _match_children(template, template.children, actual.children, path, mode)


def _match_children(
    parent: TemplateNode,
    template_children: Sequence[TemplateNode],
    actual_children: Sequence[AccessibleNode],
    path: Path,
    mode: str,
) -> MatchResult:
    if mode == "contain":
        return _match_sequence(template_children, actual_children, path, "contain")
    inherited = "deep-equal" if mode == "deep-equal" else "contain"
    return _match_exact(parent, template_children, actual_children, path, inherited)


def _match_sequence(
    template_children: Sequence[TemplateNode],
    actual_children: Sequence[AccessibleNode],
    path: Path,
    inherited: str,
) -> MatchResult:
    """Greedy two-pointer subsequence match."""
    a = 0
    for template_child in template_children:
        attempts: list[MatchResult] = []
        while a < len(actual_children):
            actual_child = actual_children[a]
            result = _match_node(
                template_child, actual_child, path + (PathStep(actual_child.role, a),), inherited
            )
            a += 1
            if result.ok:
                break
            attempts.append(result)
        else:
            return _unplaced(template_child, attempts, path)
    return MatchResult.success()


def _unplaced(template_child: TemplateNode, attempts: list[MatchResult], path: Path) -> MatchResult:
    """Pick the divergence to report for a template child no sibling accepted."""
    same_role = [
        attempt
        for attempt in attempts
        if not (
            attempt.reason is not None
            and attempt.reason.kind == "role"
            and len(attempt.failure_path) == len(path) + 1
        )
    ]
    if same_role:
        return max(same_role, key=lambda attempt: len(attempt.failure_path))
    if attempts:
        return attempts[0]
    return MatchResult.failure(
        path,
        Mismatch(
            "missing",
            expected=format_template_entry(template_child),
            template_line=template_child.line,
        ),
    )


def _match_exact(
    parent: TemplateNode,
    template_children: Sequence[TemplateNode],
    actual_children: Sequence[AccessibleNode],
    path: Path,
    inherited: str,
) -> MatchResult:
    """Pairwise match with no skipped siblings."""
    for index, (template_child, actual_child) in enumerate(zip(template_children, actual_children)):
        result = _match_node(
            template_child, actual_child, path + (PathStep(actual_child.role, index),), inherited
        )
        if not result.ok:
            return result

    if len(actual_children) < len(template_children):
        template_child = template_children[len(actual_children)]
        return MatchResult.failure(
            path,
            Mismatch(
                "missing",
                expected=format_template_entry(template_child),
                template_line=template_child.line,
            ),
        )
    if len(actual_children) > len(template_children):
        return MatchResult.failure(
            path,
            Mismatch(
                "children-count",
                expected=len(template_children),
                actual=len(actual_children),
                template_line=parent.line,
            ),
        )
    return MatchResult.success()

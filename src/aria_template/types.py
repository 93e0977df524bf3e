"""Data models for ARIA templates, accessible trees and match results."""

from dataclasses import dataclass, field
from typing import Literal, Union

from .utils.text import quote_string

AttributeValue = Union[bool, int, float, str]

ChildrenMode = Literal["contain", "equal", "deep-equal"]
CHILDREN_MODES: tuple[str, ...] = ("contain", "equal", "deep-equal")

# Role shared by the synthetic parse root and a collaborator's container node
ROOT_ROLE = "fragment"

# Levels allowed below the root of a template or accessible tree
MAX_TREE_DEPTH = 200

# State attributes the accessible-tree collaborator is expected to expose
RECOGNIZED_ATTRIBUTES: tuple[str, ...] = (
    "checked",
    "disabled",
    "expanded",
    "level",
    "pressed",
    "selected",
)

MismatchKind = Literal["role", "name", "attribute", "text", "missing", "children-count"]


@dataclass(frozen=True)
class TextValue:
    """Name or text constraint: a literal string or a regex pattern."""

    value: str
    is_regex: bool = False

    def __str__(self) -> str:
        if self.is_regex:
            return "/" + self.value.replace("/", "\\/") + "/"
        return quote_string(self.value)


@dataclass(frozen=True)
class TemplateNode:
    """
    Parsed template node.

    A ``None`` name or text is unconstrained. Attributes only list the keys the
    template constrains; anything missing here is not checked.
    """

    role: str
    name: TextValue | None = None
    attributes: dict[str, AttributeValue] = field(default_factory=dict)
    text: TextValue | None = None
    children: tuple["TemplateNode", ...] = field(default_factory=tuple)
    children_mode: ChildrenMode | None = None  # None means "contain"
    line: int = 0  # 1-based source line, 0 for the synthetic root


@dataclass(frozen=True)
class AccessibleNode:
    """
    Node of an accessible tree as captured from a page.

    Produced by the capturing collaborator and treated as an immutable
    snapshot by the matcher and serializer.
    """

    role: str
    name: str = ""
    attributes: dict[str, AttributeValue] = field(default_factory=dict)
    text: str | None = None
    children: tuple["AccessibleNode", ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PathStep:
    """One hop on the way from the root to a divergence."""

    role: str
    index: int

    def __str__(self) -> str:
        return f"{self.role}[{self.index}]"


@dataclass(frozen=True)
class Mismatch:
    """The dimension in which a template disagreed with the accessible tree."""

    kind: MismatchKind
    expected: object = None
    actual: object = None
    key: str | None = None  # attribute key, for kind == "attribute"
    template_line: int | None = None


@dataclass(frozen=True)
class MatchResult:
    """Outcome of matching a template against an accessible tree."""

    ok: bool
    failure_path: tuple[PathStep, ...] = ()
    reason: Mismatch | None = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls) -> "MatchResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, path: tuple[PathStep, ...], reason: Mismatch) -> "MatchResult":
        return cls(ok=False, failure_path=path, reason=reason)

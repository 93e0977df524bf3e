"""Parser for the indentation-based ARIA template format.

A template is a list of lines of the form::

    - role "name" [key=value, key]: text

nested by indentation. The parser turns the text into an immutable
:class:`~aria_template.types.TemplateNode` tree rooted at a synthetic
``fragment`` node, or raises :class:`~aria_template.exceptions.ParseError`.
"""

import logging
import re
from dataclasses import dataclass, field

from .exceptions import ParseError
from .types import CHILDREN_MODES, MAX_TREE_DEPTH, ROOT_ROLE, AttributeValue, TemplateNode, TextValue
from .utils.text import BARE_WORD_RE, NUMBER_RE, ROLE_RE, coerce_literal, validate_attribute

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"
INDENT_CHARS = " \t"

ATTR_KEY_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_\-]*")
ATTR_TOKEN_RE = re.compile(r"[^\s,\]]+")
DIRECTIVE_RE = re.compile(r"/children\s*:\s*(?P<mode>\S*)\s*$")
ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}
UNICODE_ESCAPE_RE = re.compile(r"u([0-9A-Fa-f]{4})")


@dataclass
class _Draft:
    """Mutable node used while the tree is being assembled."""

    role: str
    line: int
    name: TextValue | None = None
    attributes: dict[str, AttributeValue] = field(default_factory=dict)
    text: TextValue | None = None
    children: list["_Draft"] = field(default_factory=list)
    children_mode: str | None = None

    def freeze(self) -> TemplateNode:
        return TemplateNode(
            role=self.role,
            name=self.name,
            attributes=dict(self.attributes),
            text=self.text,
            children=tuple(child.freeze() for child in self.children),
            children_mode=self.children_mode,  # type: ignore[arg-type]
            line=self.line,
        )


@dataclass
class _Directive:
    """A ``- /children: <mode>`` line."""

    mode: str
    line: int


class _LineParser:
    """Recursive-descent scanner over the body of a single template line."""

    def __init__(self, source: str, line_number: int, offset: int) -> None:
        self.source = source
        self.line_number = line_number
        self.offset = offset  # index of source[0] within the physical line
        self.pos = 0

    def error(self, message: str, pos: int | None = None) -> ParseError:
        if pos is None:
            pos = self.pos
        return ParseError(message, line=self.line_number, column=self.offset + pos + 1)

    def peek(self) -> str:
        return self.source[self.pos] if self.pos < len(self.source) else ""

    def skip_spaces(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos] in INDENT_CHARS:
            self.pos += 1

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def parse(self) -> _Draft | _Directive:
        if self.peek() != "-":
            raise self.error("expected '-' at the start of the entry")
        self.pos += 1
        if not self.at_end() and self.peek() not in INDENT_CHARS:
            raise self.error("expected a space after '-'")
        self.skip_spaces()

        if self.source.startswith("/children", self.pos):
            return self.parse_directive()

        match = ROLE_RE.match(self.source, self.pos)
        if match is None:
            raise self.error("missing role")
        node = _Draft(role=match.group(0), line=self.line_number)
        self.pos = match.end()
        if not self.at_end() and self.peek() not in INDENT_CHARS + "[:":
            raise self.error(f"unexpected character '{self.peek()}' in role")
        self.skip_spaces()

        if self.peek() == '"':
            node.name = TextValue(self.parse_quoted())
        elif self.peek() == "/":
            node.name = self.parse_regex()
        self.skip_spaces()

        while self.peek() == "[":
            self.parse_attribute_group(node.attributes)
            self.skip_spaces()

        if self.peek() == ":":
            self.pos += 1
            node.text = self.parse_text()

        self.skip_spaces()
        if not self.at_end():
            raise self.error(f"unexpected character '{self.peek()}'")
        return node

    def parse_directive(self) -> _Directive:
        start = self.pos
        match = DIRECTIVE_RE.match(self.source, self.pos)
        if match is None:
            raise self.error("malformed '/children' directive", start)
        mode = match.group("mode")
        if mode not in CHILDREN_MODES:
            raise self.error(
                f"unknown children mode '{mode}', expected one of {', '.join(CHILDREN_MODES)}",
                match.start("mode"),
            )
        self.pos = match.end()
        return _Directive(mode=mode, line=self.line_number)

    def parse_quoted(self) -> str:
        """
        Parse a double-quoted literal.

        ``\\n``, ``\\t``, ``\\r`` and ``\\uXXXX`` are decoded; a backslash before
        any other character stands for that character.
        """
        start = self.pos
        self.pos += 1
        chars: list[str] = []
        while not self.at_end():
            char = self.source[self.pos]
            if char == "\\" and self.pos + 1 < len(self.source):
                unicode_match = UNICODE_ESCAPE_RE.match(self.source, self.pos + 1)
                if unicode_match is not None:
                    chars.append(chr(int(unicode_match.group(1), 16)))
                    self.pos = unicode_match.end()
                    continue
                following = self.source[self.pos + 1]
                chars.append(ESCAPES.get(following, following))
                self.pos += 2
                continue
            if char == '"':
                self.pos += 1
                return "".join(chars)
            chars.append(char)
            self.pos += 1
        raise self.error("unterminated string literal", start)

    def parse_regex(self) -> TextValue:
        """Parse a slash-delimited regex; ``\\/`` stands for a literal slash."""
        start = self.pos
        self.pos += 1
        chars: list[str] = []
        while not self.at_end():
            char = self.source[self.pos]
            if char == "\\" and self.pos + 1 < len(self.source):
                following = self.source[self.pos + 1]
                chars.append(following if following == "/" else char + following)
                self.pos += 2
                continue
            if char == "/":
                self.pos += 1
                pattern = "".join(chars)
                try:
                    re.compile(pattern)
                except re.error as e:
                    raise self.error(f"invalid regular expression: {e}", start) from e
                return TextValue(pattern, is_regex=True)
            chars.append(char)
            self.pos += 1
        raise self.error("unterminated regular expression", start)

    def parse_attribute_group(self, attributes: dict[str, AttributeValue]) -> None:
        """Parse ``[key=value, key]`` into ``attributes``."""
        start = self.pos
        self.pos += 1
        while True:
            self.skip_spaces()
            if self.at_end():
                raise self.error("unterminated attribute list", start)

            key_match = ATTR_KEY_RE.match(self.source, self.pos)
            if key_match is None:
                raise self.error("expected attribute name")
            key = key_match.group(0)
            if key in attributes:
                raise self.error(f"duplicate attribute '{key}'")
            self.pos = key_match.end()
            self.skip_spaces()

            value_pos = self.pos
            value: AttributeValue = True
            if self.peek() == "=":
                self.pos += 1
                self.skip_spaces()
                value_pos = self.pos
                value = self.parse_attribute_value(key)

            try:
                attributes[key] = validate_attribute(key, value)
            except ValueError as e:
                raise self.error(f"invalid value for attribute '{key}': {e}", value_pos) from e

            self.skip_spaces()
            if self.peek() == ",":
                self.pos += 1
                continue
            if self.peek() == "]":
                self.pos += 1
                return
            if self.at_end():
                raise self.error("unterminated attribute list", start)
            raise self.error(f"expected ',' or ']' but found '{self.peek()}'")

    def parse_attribute_value(self, key: str) -> AttributeValue:
        if self.peek() == '"':
            return self.parse_quoted()
        token_match = ATTR_TOKEN_RE.match(self.source, self.pos)
        if token_match is None:
            raise self.error(f"missing value for attribute '{key}'")
        token = token_match.group(0)
        if not (NUMBER_RE.fullmatch(token) or BARE_WORD_RE.fullmatch(token)):
            raise self.error(f"malformed value '{token}' for attribute '{key}'")
        self.pos = token_match.end()
        return coerce_literal(token)

    def parse_text(self) -> TextValue | None:
        """Parse what follows ``:``; nothing at all means children follow."""
        self.skip_spaces()
        if self.at_end():
            return None
        if self.peek() == '"':
            return TextValue(self.parse_quoted())
        if self.peek() == "/":
            return self.parse_regex()
        text = self.source[self.pos :].strip()
        self.pos = len(self.source)
        return TextValue(text)


def _structural_lines(text: str) -> list[tuple[int, str]]:
    """Drop blank and comment lines, keeping 1-based line numbers."""
    result = []
    for number, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIX):
            continue
        result.append((number, raw.rstrip()))
    return result


class _IndentTracker:
    """Turns leading whitespace into nesting depth."""

    def __init__(self) -> None:
        self.base: int | None = None
        self.unit: int | None = None
        self.char: str | None = None
        self.depth = -1

    def depth_of(self, number: int, indent: str) -> int:
        for column, char in enumerate(indent, start=1):
            if self.char is None:
                self.char = char
            elif char != self.char:
                raise ParseError("inconsistent indentation characters", line=number, column=column)

        width = len(indent)
        if self.base is None:
            self.base = width
        if width < self.base:
            raise ParseError(
                "line is indented less than the first entry", line=number, column=width + 1
            )

        relative = width - self.base
        if relative and self.unit is None:
            self.unit = relative
        if relative and relative % self.unit:  # type: ignore[operator]
            raise ParseError(
                f"indentation is not a multiple of {self.unit}", line=number, column=width + 1
            )

        depth = relative // self.unit if relative else 0
        if depth > self.depth + 1:
            raise ParseError(
                "indentation increases by more than one level", line=number, column=width + 1
            )
        self.depth = depth
        return depth


def parse(text: str) -> TemplateNode:
    """
    Parse template text into a template tree.

    Args:
        text: Template source

    Returns:
        Synthetic ``fragment`` root owning the top-level entries

    Raises:
        ParseError: If the template is malformed or nested deeper than
            MAX_TREE_DEPTH levels
    """
    root = _Draft(role=ROOT_ROLE, line=0)
    stack: list[tuple[int, _Draft | _Directive]] = [(-1, root)]
    indents = _IndentTracker()
    count = 0

    for number, raw in _structural_lines(text):
        body = raw.lstrip(INDENT_CHARS)
        indent = raw[: len(raw) - len(body)]
        depth = indents.depth_of(number, indent)
        if depth >= MAX_TREE_DEPTH:
            raise ParseError(
                f"entries are nested deeper than {MAX_TREE_DEPTH} levels", line=number, column=len(indent) + 1
            )
        entry = _LineParser(body, number, len(indent)).parse()

        while stack[-1][0] >= depth:
            stack.pop()
        parent = stack[-1][1]
        if isinstance(parent, _Directive):
            raise ParseError(
                "'/children' directive cannot have nested entries",
                line=number,
                column=len(indent) + 1,
            )

        if isinstance(entry, _Directive):
            if parent.children_mode is not None:
                raise ParseError(
                    "duplicate '/children' directive", line=number, column=len(indent) + 1
                )
            parent.children_mode = entry.mode
        else:
            parent.children.append(entry)
            count += 1
        stack.append((depth, entry))

    logger.debug(f"Parsed template: {count} node(s)")
    return root.freeze()

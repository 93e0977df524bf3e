"""
Pytest Configuration and Fixtures

This module provides shared fixtures for all tests.
"""

from collections.abc import Callable
from typing import Any

import pytest

from aria_template import AccessibleNode


def _node(role: str, name: str = "", *children: AccessibleNode, text: str | None = None, **attributes: Any) -> AccessibleNode:
    return AccessibleNode(role=role, name=name, attributes=attributes, text=text, children=tuple(children))


@pytest.fixture
def node() -> Callable[..., AccessibleNode]:
    """Builder for AccessibleNode: ``node(role, name, *children, text=..., **attributes)``."""
    return _node


@pytest.fixture
def fragment() -> Callable[..., AccessibleNode]:
    """Builder for a ``fragment`` container root."""

    def build(*children: AccessibleNode) -> AccessibleNode:
        return AccessibleNode(role="fragment", children=tuple(children))

    return build


@pytest.fixture
def features_page() -> AccessibleNode:
    """A small page: heading, feature list and a form."""
    return AccessibleNode(
        role="fragment",
        children=(
            _node("banner", "", _node("link", "Home"), _node("link", "About")),
            _node("heading", "Issues 12", level=1),
            _node(
                "list",
                "Main Features",
                _node("listitem", text="Feature 1"),
                _node("listitem", text="Feature 2"),
                _node("listitem", text="Feature 3"),
            ),
            _node(
                "form",
                "Sign up",
                _node("textbox", "Email"),
                _node("checkbox", "Subscribe", checked=True),
                _node("button", "Submit", disabled=False),
            ),
        ),
    )


@pytest.fixture
def features_template() -> str:
    """Template text matching ``features_page`` partially."""
    return """
# Page structure
- heading /Issues \\d+/ [level=1]
- list "Main Features":
  - listitem: Feature 1
  - listitem: Feature 3
- form:
  - checkbox "Subscribe" [checked=true]
  - button "Submit"
"""


@pytest.fixture
def playwright_snapshot() -> dict[str, Any]:
    """Dictionary shaped like Playwright's ``page.accessibility.snapshot()`` output."""
    return {
        "role": "fragment",
        "name": "",
        "children": [
            {"role": "heading", "name": "Welcome", "level": 1},
            {
                "role": "navigation",
                "name": "Main",
                "children": [
                    {"role": "link", "name": "Home"},
                    {"role": "link", "name": "Docs", "description": "ignored"},
                ],
            },
            {"role": "checkbox", "name": "Remember me", "checked": "mixed", "disabled": None},
            {"role": "text", "name": "", "text": "Hello   world"},
        ],
    }

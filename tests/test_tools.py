"""
Tests for the MCP tool functions and server wiring.
"""

import importlib
import logging
import sys

import pytest

from aria_template.api import tools


class TestParseTemplate:
    """Tests for the parse_template tool."""

    @pytest.mark.asyncio
    async def test_parse_success(self):
        """Test parsing returns the tree as data."""
        result = await tools.parse_template('- list:\n  - /children: equal\n  - listitem "One"')

        assert result["success"] is True
        (items,) = result["tree"]["children"]
        assert items["role"] == "list"
        assert items["children_mode"] == "equal"
        assert items["children"][0]["name"] == {"value": "One", "is_regex": False}

    @pytest.mark.asyncio
    async def test_parse_error_location(self):
        """Test that parse errors are reported with their location."""
        result = await tools.parse_template("- heading\n- [level=1]")

        assert result == {
            "success": False,
            "error": "missing role (line 2, column 3)",
            "line": 2,
            "column": 3,
        }


class TestMatchSnapshot:
    """Tests for the match_snapshot tool."""

    @pytest.mark.asyncio
    async def test_match(self, playwright_snapshot):
        """Test a template that the snapshot satisfies."""
        template = '- heading "Welcome" [level=1]\n- navigation:\n  - link "Docs"'

        result = await tools.match_snapshot(template, playwright_snapshot)

        assert result["success"] is True
        assert result["matched"] is True
        assert result["failure_path"] == []
        assert result["reason"] is None
        assert result["report"] == "Accessible tree matches template"

    @pytest.mark.asyncio
    async def test_mismatch(self, playwright_snapshot):
        """Test that a failed match is a normal result with details."""
        result = await tools.match_snapshot('- checkbox "Remember me" [checked=true]', playwright_snapshot)

        assert result["success"] is True
        assert result["matched"] is False
        assert result["failure_path"] == [{"role": "checkbox", "index": 2}]
        assert result["reason"] == {
            "kind": "attribute",
            "expected": True,
            "actual": "mixed",
            "key": "checked",
            "template_line": 1,
            "description": "attribute 'checked' mismatch: expected true, received mixed",
        }
        assert "  at: checkbox[2]" in result["report"]

    @pytest.mark.asyncio
    async def test_template_error(self, playwright_snapshot):
        result = await tools.match_snapshot('- heading "Welcome', playwright_snapshot)

        assert result["success"] is False
        assert result["error"].startswith("unterminated string literal")

    @pytest.mark.asyncio
    async def test_malformed_tree(self):
        """Test that malformed trees are reported instead of raised."""
        result = await tools.match_snapshot("- button", {"role": "list", "children": [{"name": "x"}]})

        assert result == {"success": False, "error": "node has no role (at ?[0])"}


class TestSerializeSnapshot:
    """Tests for the serialize_snapshot tool."""

    @pytest.mark.asyncio
    async def test_serialize(self, playwright_snapshot):
        result = await tools.serialize_snapshot(playwright_snapshot)

        assert result == {
            "success": True,
            "template": (
                '- heading "Welcome" [level=1]\n'
                '- navigation "Main":\n'
                '  - link "Home"\n'
                '  - link "Docs"\n'
                '- checkbox "Remember me" [checked=mixed]\n'
                "- text: Hello world"
            ),
        }

    @pytest.mark.asyncio
    async def test_indent_width(self):
        tree = {"role": "list", "children": [{"role": "listitem", "text": "One"}]}

        result = await tools.serialize_snapshot(tree, indent_width=4)

        assert result["template"] == "- list:\n    - listitem: One"

    @pytest.mark.asyncio
    async def test_indent_width_from_config(self, monkeypatch):
        """Test that the configured width is used when none is given."""
        monkeypatch.setenv("ARIA_TEMPLATE_INDENT_WIDTH", "3")
        tree = {"role": "list", "children": [{"role": "listitem"}]}

        result = await tools.serialize_snapshot(tree)

        assert result["template"] == "- list:\n   - listitem"

    @pytest.mark.asyncio
    async def test_invalid_indent_width(self):
        """Test that a bad width is reported in the response."""
        result = await tools.serialize_snapshot({"role": "button"}, indent_width=0)

        assert result == {"success": False, "error": "indent_width must be >= 1, got 0"}

    @pytest.mark.asyncio
    async def test_malformed_tree(self):
        result = await tools.serialize_snapshot({"role": "heading", "level": {"n": 1}})

        assert result["success"] is False
        assert "attribute 'level' has unsupported value" in result["error"]


class TestServer:
    """Tests for the server module."""

    @pytest.fixture
    def server(self, monkeypatch, tmp_path):
        """Import the server with logging redirected to a temporary file."""
        monkeypatch.setenv("ARIA_TEMPLATE_LOG_FILE", str(tmp_path / "server.log"))
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level

        if "aria_template.server" in sys.modules:
            module = importlib.reload(sys.modules["aria_template.server"])
        else:
            module = importlib.import_module("aria_template.server")
        yield module

        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_server_name(self, server):
        assert server.mcp.name == "ARIA Template Matcher"

    def test_logs_to_configured_file(self, server, tmp_path):
        """Test that startup logging goes to the configured file."""
        contents = (tmp_path / "server.log").read_text()

        assert "Matcher configuration:" in contents
        assert "indent_width: 2" in contents

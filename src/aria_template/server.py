"""
ARIA Template MCP Server

Exposes the template parser, tree matcher and serializer as MCP tools so
that clients holding an accessible-tree capture can check it against a
template or turn it into one.
"""

import sys
from typing import Any

from fastmcp import FastMCP

from . import __version__
from .api import tools
from .config import load_matcher_config
from .utils.logging_config import get_logger, log_dict, setup_file_logging

config = load_matcher_config()

# Configure logging using centralized utility
setup_file_logging(log_file=config["log_file"], level=config["log_level"])
logger = get_logger(__name__)

logger.info(f"Python interpreter: {sys.executable}")
log_dict(logger, "Matcher configuration:", dict(config))

GRAMMAR_SUMMARY = """\
- role "literal name" [key=value, key]: text
- role /regex name/
  - child-role
  - /children: contain | equal | deep-equal

Two-space (or any consistent) indentation nests entries. Lines starting
with # are comments. Unlisted names, attributes and siblings are not checked.
"""

# Initialize the MCP server
mcp = FastMCP(
    name="ARIA Template Matcher",
    instructions="""
    Checks accessible-tree captures against indentation-based templates.

    Use serialize_snapshot to turn a captured tree into template text,
    parse_template to validate a template, and match_snapshot to check a
    captured tree against a template. A failed match is a normal result
    (matched=false) carrying the path to the first divergence.
    """,
)


# =============================================================================
# TOOLS
# =============================================================================


@mcp.tool()
async def health_check() -> dict[str, Any]:
    """
    Check the health status of the MCP server.

    Returns:
        A dictionary with the server status and configuration info.
    """
    return {
        "status": "healthy",
        "server": "ARIA Template Matcher",
        "version": __version__,
        "indent_width": config["indent_width"],
    }


mcp.tool()(tools.parse_template)
mcp.tool()(tools.match_snapshot)
mcp.tool()(tools.serialize_snapshot)


# =============================================================================
# RESOURCES
# =============================================================================


@mcp.resource("aria-template://grammar")
async def get_grammar() -> str:
    """Summary of the template grammar."""
    return GRAMMAR_SUMMARY


# =============================================================================
# MAIN
# =============================================================================


def main() -> None:
    """Run the MCP server."""
    logger.info(f"Starting ARIA Template Matcher v{__version__}...")
    mcp.run()


if __name__ == "__main__":
    main()

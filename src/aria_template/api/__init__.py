"""Tool functions exposed by the aria-template MCP server."""

"""MCP server for reqlint."""

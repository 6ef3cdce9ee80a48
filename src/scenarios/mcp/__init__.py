"""MCP server for Scenarios."""

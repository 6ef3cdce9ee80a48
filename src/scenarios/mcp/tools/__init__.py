"""MCP tools for Scenarios."""

"""HTTP client for the Jira MCP server."""

from ticketron.client.mcp import MCPClient

__all__ = ["MCPClient"]

"""MCP (Model Context Protocol) support for weather-tools.

Expose the weather tools as an MCP server for use by MCP clients:

    from weather_tools.mcp import create_mcp_server

    server = create_mcp_server()
    server.run()  # Runs on stdio

The server itself needs the optional `mcp` package
(pip install 'weather-tools[mcp]'); it is imported when the server starts.
"""
from __future__ import annotations

from weather_tools.mcp.exceptions import MCPError
from weather_tools.mcp.server import MCPServer, create_mcp_server

__all__ = [
    "MCPServer",
    "create_mcp_server",
    "MCPError",
]

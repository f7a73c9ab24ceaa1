"""MCP-specific exceptions."""
from __future__ import annotations


class MCPError(Exception):
    """Base exception for MCP-related errors."""
    pass

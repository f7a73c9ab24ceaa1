"""MCP Server - exposes the weather tools as an MCP server."""
from __future__ import annotations

import inspect
import json
import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

from weather_tools.agent import WEATHER_AGENT_INSTRUCTIONS
from weather_tools.core.datamodels import ToolEntry, ToolOutput
from weather_tools.mcp.exceptions import MCPError

if TYPE_CHECKING:
    from weather_tools.core.registry import ToolRegistry

logger = logging.getLogger(__name__)

DEFAULT_SERVER_NAME = "weather-tools"


class MCPServer:
    """MCP Server that exposes registry tools.

    This allows the weather tools to be used by MCP clients like Claude Desktop.

    Usage:
        from weather_tools.tools import registry
        server = MCPServer(registry)
        server.run()  # Runs on stdio by default
    """

    def __init__(
        self,
        registry: "ToolRegistry",
        name: str = DEFAULT_SERVER_NAME,
        instructions: Optional[str] = WEATHER_AGENT_INSTRUCTIONS,
    ):
        self.registry = registry
        self.name = name
        self.instructions = instructions
        self._mcp = None

    def _create_server(self):
        """Create the FastMCP server instance."""
        try:
            from mcp.server.fastmcp import FastMCP
        except ImportError:
            raise MCPError(
                "MCP package not installed. Install with: pip install 'weather-tools[mcp]'"
            )

        self._mcp = FastMCP(self.name, instructions=self.instructions)
        self._register_tools()
        return self._mcp

    def _register_tools(self) -> None:
        """Register all registry tools with the MCP server."""
        if self._mcp is None:
            return

        for entry in self.registry:
            self._register_tool(entry)

    def make_handler(self, entry: ToolEntry) -> Callable[..., str]:
        """Create an MCP handler that runs a registry tool and returns JSON.

        The handler carries the tool's own parameter signature so MCP
        clients see the same input schema as the registry. Failures are
        returned as "Error: <message>" rather than raised.
        """
        def handler(**kwargs) -> str:
            try:
                result = self.registry.execute(entry.name, kwargs)
            except Exception as e:
                logger.warning(f"Tool {entry.name} failed: {e}")
                return f"Error: {e}"
            return _to_json(result.output)

        handler.__name__ = entry.name
        handler.__doc__ = entry.get_description()
        handler.__signature__ = inspect.signature(entry.callable_fn).replace(
            return_annotation=str
        )
        return handler

    def _register_tool(self, entry: ToolEntry) -> None:
        """Register a single tool with MCP."""
        handler = self.make_handler(entry)
        self._mcp.tool(name=entry.name, description=entry.get_description())(handler)
        logger.debug(f"Registered tool with MCP: {entry.name}")

    def run(self, transport: str = "stdio") -> None:
        """Run the MCP server.

        Args:
            transport: Transport type - "stdio" or "sse"
        """
        if transport not in ("stdio", "sse"):
            raise MCPError(f"Unknown transport: {transport}")

        mcp = self._create_server()
        logger.info(f"Starting MCP server '{self.name}' with {transport} transport")
        mcp.run(transport=transport)


def _to_json(output: Any) -> str:
    """Serialize a tool result for an MCP reply."""
    data = output.data if isinstance(output, ToolOutput) else output
    return json.dumps(data, ensure_ascii=False)


def create_mcp_server(
    registry: Optional["ToolRegistry"] = None,
    name: str = DEFAULT_SERVER_NAME,
) -> MCPServer:
    """Create an MCP server with the given or default registry.

    Args:
        registry: Tool registry to expose (uses global if None)
        name: Server name

    Returns:
        MCPServer instance
    """
    if registry is None:
        from weather_tools.tools import registry as default_registry
        registry = default_registry

    return MCPServer(registry, name=name)

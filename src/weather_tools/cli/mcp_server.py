#!/usr/bin/env python3
"""CLI entry point for running the weather tools as an MCP server
(weather-tools-mcp command).

This exposes the weather tools to MCP clients like Claude Desktop.
"""
from __future__ import annotations

import argparse
import sys


def main():
    """Main entry point for the weather-tools-mcp CLI."""
    parser = argparse.ArgumentParser(
        description="Run the weather tools as an MCP server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    weather-tools-mcp                    # Run with stdio transport (default)
    weather-tools-mcp --transport sse    # Run with SSE transport
    weather-tools-mcp --list-tools       # List available tools

To use with Claude Desktop, add to your MCP settings:
    {
      "mcpServers": {
        "weather-tools": {
          "command": "weather-tools-mcp"
        }
      }
    }
        """,
    )
    parser.add_argument(
        "--transport", "-t",
        choices=["stdio", "sse"],
        default="stdio",
        help="Transport type (default: stdio)"
    )
    parser.add_argument(
        "--name", "-n",
        default="weather-tools",
        help="Server name (default: weather-tools)"
    )
    parser.add_argument(
        "--list-tools", "-l",
        action="store_true",
        help="List available tools and exit"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args()

    from weather_tools.cli import setup_logging
    setup_logging(args.verbose)

    try:
        # Import here to avoid loading everything for --help
        from weather_tools.tools import registry

        if args.list_tools:
            print("Available tools:")
            for entry in registry:
                aliases = f" (aliases: {', '.join(entry.aliases)})" if entry.aliases else ""
                print(f"  {entry.name}{aliases}")
                print(f"    {entry.get_description()}")
            return

        from weather_tools.mcp import create_mcp_server

        server = create_mcp_server(registry=registry, name=args.name)
        server.run(transport=args.transport)

    except KeyboardInterrupt:
        pass
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

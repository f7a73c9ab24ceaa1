#!/usr/bin/env python3
"""
CLI entry point for listing, inspecting and calling tools (weather-tools command).
"""

import argparse
import json
import sys


def parse_call_args(pairs: list[str]) -> dict[str, str]:
    """Parse key=value pairs into tool arguments.

    Values stay strings; the tool's parameter model coerces them.

    Examples:
        ["location=Paris"]                 -> {"location": "Paris"}
        ["location=New York", "date=2024-01-15"]
                                           -> {"location": "New York", "date": "2024-01-15"}
    """
    arguments = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Invalid argument '{pair}': must be key=value")
        key, value = pair.split("=", 1)
        arguments[key.strip()] = value
    return arguments


def _decode_value(value: str):
    """Decode a config value as JSON (numbers, booleans, null), else keep the string."""
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def cmd_list(args):
    """List all registered tools."""
    from weather_tools.tools import registry

    if args.as_json:
        tools = [
            {
                "name": e.name,
                "aliases": e.aliases,
                "description": e.get_description(),
            }
            for e in registry
        ]
        print(json.dumps(tools, indent=2))
    else:
        print("\nAvailable tools:")
        for entry in registry:
            aliases = f" (aliases: {', '.join(entry.aliases)})" if entry.aliases else ""
            print(f"  - {entry.name}{aliases}")
            print(f"    {entry.get_description()}")
        print()


def cmd_schema(args):
    """Output OpenAI-style tool schema."""
    from weather_tools.tools import registry

    print(json.dumps(registry.to_openai_tools(), indent=2))


def cmd_info(args):
    """Show detailed info for a specific tool."""
    from weather_tools.tools import registry

    try:
        entry = registry.get(args.tool)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    spec = entry.to_openai_spec()
    output_schema = entry.get_output_schema()
    if args.as_json:
        print(json.dumps({**spec, "output_schema": output_schema}, indent=2))
        return

    print(f"\nTool: {entry.name}")
    print(f"Aliases: {', '.join(entry.aliases) or 'none'}")
    print(f"Description: {entry.get_description()}")
    print("\nParameters:")
    params = spec["function"]["parameters"]
    for name, prop in params.get("properties", {}).items():
        required = name in params.get("required", [])
        req_marker = " (required)" if required else ""
        print(f"  - {name}: {prop.get('type', 'any')}{req_marker}")
        if "description" in prop:
            print(f"    {prop['description']}")
    if output_schema:
        print("\nReturns:")
        required = output_schema.get("required", [])
        for name, prop in output_schema.get("properties", {}).items():
            marker = "" if name in required else " (optional)"
            print(f"  - {name}{marker}")
    print()


def cmd_call(args):
    """Call a tool and print its result."""
    from weather_tools.core import ToolError, ToolOutput
    from weather_tools.tools import registry

    try:
        arguments = parse_call_args(args.arguments)
        result = registry.execute(args.tool, arguments)
    except (ToolError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    output = result.output
    if isinstance(output, ToolOutput):
        if args.as_json or not output.llm_format:
            print(json.dumps(output.data, indent=2))
        else:
            print(output.llm_format)
    else:
        print(output)


def cmd_prompt(args):
    """Print the weather agent's system prompt."""
    from weather_tools.agent import build_agent_prompt

    print(build_agent_prompt())


def cmd_config(args):
    """Show or change settings in the config file."""
    from weather_tools.config import get_config_manager

    manager = get_config_manager()
    try:
        if args.action == "set":
            manager.set(args.key, _decode_value(args.value) if args.value is not None else None)
        elif args.action == "unset":
            manager.unset(args.key)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    settings = {k: manager.get(k) for k in manager.config.model_fields}
    print(json.dumps(settings, indent=2))
    print(f"\nConfig file: {manager.CONFIG_FILE}")


def main():
    """Main entry point for the weather-tools CLI."""
    parser = argparse.ArgumentParser(
        description="List, inspect and call weather tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    weather-tools list                                   List all available tools
    weather-tools schema                                 Output OpenAI-style tool schema
    weather-tools info get_weather_by_date               Show details for a tool
    weather-tools call get_weather location=Paris        Current weather in Paris
    weather-tools call weather_on location=Paris date=2024-01-15
    weather-tools config set reference_timezone location
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # list command
    list_parser = subparsers.add_parser("list", help="List all registered tools")
    list_parser.add_argument(
        "--json", action="store_true", dest="as_json", help="Output as JSON"
    )
    list_parser.set_defaults(func=cmd_list)

    # schema command
    schema_parser = subparsers.add_parser(
        "schema", help="Output OpenAI-style tool schema"
    )
    schema_parser.set_defaults(func=cmd_schema, as_json=False)

    # info command
    info_parser = subparsers.add_parser("info", help="Show details for a specific tool")
    info_parser.add_argument("tool", help="Tool name or alias")
    info_parser.add_argument(
        "--json", action="store_true", dest="as_json", help="Output as JSON"
    )
    info_parser.set_defaults(func=cmd_info)

    # call command
    call_parser = subparsers.add_parser("call", help="Call a tool")
    call_parser.add_argument("tool", help="Tool name or alias")
    call_parser.add_argument(
        "arguments", nargs="*", metavar="KEY=VALUE", help="Tool arguments"
    )
    call_parser.add_argument(
        "--json", action="store_true", dest="as_json", help="Output the raw record as JSON"
    )
    call_parser.set_defaults(func=cmd_call)

    # prompt command
    prompt_parser = subparsers.add_parser("prompt", help="Print the agent system prompt")
    prompt_parser.set_defaults(func=cmd_prompt)

    # config command
    config_parser = subparsers.add_parser("config", help="Show or change settings")
    config_parser.add_argument(
        "action", nargs="?", choices=["show", "set", "unset"], default="show"
    )
    config_parser.add_argument("key", nargs="?", help="Setting name")
    config_parser.add_argument("value", nargs="?", help="New value (for set)")
    config_parser.set_defaults(func=cmd_config)

    args = parser.parse_args()

    from weather_tools.cli import setup_logging
    setup_logging(args.verbose)

    if getattr(args, "action", None) in ("set", "unset") and not args.key:
        parser.error(f"config {args.action} requires a key")

    # Default to 'list' if no command given
    if args.command is None:
        args.command = "list"
        args.as_json = False
        args.func = cmd_list

    args.func(args)


if __name__ == "__main__":
    main()

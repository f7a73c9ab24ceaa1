"""
Decorators for the tool registry.
"""

from __future__ import annotations

import functools
from typing import Any, Callable

from weather_tools.core.datamodels import ToolOutput


def tool_output(
    llm_format: str | Callable[[Any], str] | None = None,
) -> Callable:
    """
    Decorator that wraps function return value in ToolOutput.

    The format is resolved against the stored data, so for Pydantic results
    the format sees the serialized field names.

    Usage:
        @tool_output(llm_format="{location}: {temperature}°C")
        def get_weather(...): ...

        @tool_output(llm_format=lambda x: f"Temp: {x['temperature']}")
        def get_weather(...): ...
    """
    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args, **kwargs) -> ToolOutput:
            output = ToolOutput.create(fn(*args, **kwargs))

            output.llm_format = _resolve_format(llm_format, output.data)
            return output

        return wrapper
    return decorator


def _resolve_format(fmt: str | Callable[[Any], str] | None, data: Any) -> str | None:
    """Resolve format string or callable to final string."""
    if fmt is None:
        return None
    if callable(fmt):
        return fmt(data)
    if isinstance(fmt, str) and isinstance(data, dict):
        try:
            return fmt.format(**data)
        except KeyError:
            return fmt
    return str(fmt)

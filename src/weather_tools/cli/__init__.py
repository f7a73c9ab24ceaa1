"""
CLI module for the weather_tools package.

Provides command-line interfaces for tool inspection and the MCP server.
"""

import logging


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging for a CLI run.

    Uses DEBUG when verbose, otherwise the configured log_level. Logs go to
    stderr so they never mix with tool output or the MCP stdio stream.
    """
    if verbose:
        level = logging.DEBUG
    else:
        from weather_tools.config import get_config
        level = logging.getLevelName(str(get_config().get("log_level")).upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


__all__ = ["setup_logging"]

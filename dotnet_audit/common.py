"""
Common utilities shared across dotnet_audit modules.
"""

from __future__ import annotations

import os


def is_debug_enabled() -> bool:
    """Check whether DOTNET_AUDIT_DEBUG requests verbose output."""
    return os.environ.get("DOTNET_AUDIT_DEBUG", "0") == "1"


def is_blank(value: str | None) -> bool:
    """Return True for None, empty or whitespace-only strings."""
    return value is None or not value.strip()


def vlog(msg: str, verbose: bool = False) -> None:
    """
    Log a verbose message through the dotnet_audit logger.

    Args:
        msg: Message to log
        verbose: Whether verbose mode is enabled
    """
    if verbose or is_debug_enabled():
        from .logging_config import get_logger
        get_logger().info(msg)

"""
Color utilities for terminal output.
"""

import sys
from typing import IO, Optional


class Colors:
    """ANSI color codes for terminal output."""

    BRIGHT_RED = '\033[1;91m'

    RESET = '\033[0m'


def supports_color(stream: Optional[IO] = None) -> bool:
    stream = stream or sys.stderr
    return hasattr(stream, "isatty") and stream.isatty()


def colorize(text: str, color: str, enabled: bool = True) -> str:
    """Apply color to text."""
    if not enabled:
        return text
    return f"{color}{text}{Colors.RESET}"


def error(text: str, enabled: bool = True) -> str:
    """Format error text."""
    return colorize(f"[ERROR] {text}", Colors.BRIGHT_RED, enabled)

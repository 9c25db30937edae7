"""Terminal output helpers for the CLI: coloured status lines and prompts."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from typing import TextIO


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"


def _supports_color(stream: TextIO | None = None) -> bool:
    """Check if terminal supports color output."""
    stream = stream or sys.stdout
    if os.environ.get("NO_COLOR"):
        return False
    if not hasattr(stream, "isatty") or not stream.isatty():
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return True


def colorize(text: str, color: str, bold: bool = False, stream: TextIO | None = None) -> str:
    """Apply color to text if terminal supports it."""
    if not _supports_color(stream):
        return text
    prefix = (Colors.BOLD if bold else "") + color
    return f"{prefix}{text}{Colors.RESET}"


def _quiet() -> bool:
    return os.environ.get("REPOSUITE_QUIET") == "1"


def print_success(message: str, stream: TextIO | None = None) -> None:
    """Print success message in green."""
    if _quiet():
        return
    stream = stream or sys.stdout
    print(colorize("✓", Colors.GREEN, bold=True, stream=stream) + " " + message, file=stream)


def print_error(message: str, stream: TextIO | None = None) -> None:
    """Print error message in red. Never silenced by quiet mode."""
    stream = stream or sys.stderr
    print(colorize("✗", Colors.RED, bold=True, stream=stream) + " " + message, file=stream)


def print_warning(message: str, stream: TextIO | None = None) -> None:
    stream = stream or sys.stderr
    print(colorize("⚠", Colors.YELLOW, bold=True, stream=stream) + " " + message, file=stream)


def print_info(message: str, stream: TextIO | None = None) -> None:
    if _quiet():
        return
    stream = stream or sys.stdout
    print(colorize("ℹ", Colors.BLUE, bold=True, stream=stream) + " " + message, file=stream)


def confirm(
    message: str,
    *,
    input_fn: Callable[[str], str] = input,
    stream: TextIO | None = None,
) -> bool:
    """Ask a yes/no question on the terminal; anything but y/yes is a no.

    End of input (e.g. a closed pipe) is treated as a decline.
    """
    stream = stream or sys.stdout
    prompt = colorize(f"{message} (y/N) ", Colors.MAGENTA, bold=True, stream=stream)
    try:
        answer = input_fn(prompt)
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


__all__ = [
    "Colors",
    "colorize",
    "confirm",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]

"""
Utility functions for the datedbackup command-line tool.

This module provides formatting and colorization helpers for the console
output of a backup run.
"""

import math
from pathlib import PurePath
from typing import NamedTuple, Optional, Union

from colorama import Fore, Style


COLORS = {
    'RED': Fore.RED,
    'GREEN': Fore.GREEN,
    'YELLOW': Fore.YELLOW,
    'CYAN': Fore.CYAN,
    'BOLD': Style.BRIGHT,
}

# Flag to indicate if color is enabled
color_enabled = True


def disable_color():
    """Disable colored output."""
    global color_enabled
    color_enabled = False


def enable_color():
    """Enable colored output."""
    global color_enabled
    color_enabled = True


def colorize(text: str, color: str) -> str:
    """
    Add color to text for terminal output.

    Args:
        text: The text to colorize
        color: The color to apply (must be a key in COLORS dict)

    Returns:
        Colorized string if color is enabled, otherwise the original string
    """
    if not color_enabled or color not in COLORS:
        return text

    return f"{COLORS[color]}{text}{Style.RESET_ALL}"


class FileSize(NamedTuple):
    """A byte count scaled to a human-readable unit."""
    value: Union[int, float]
    units: str

    def __str__(self) -> str:
        return f"{format_number(self.value)} {self.units}"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_size(byte_count: int) -> FileSize:
    """
    Scale a byte count to B, KB, MB or GB (decimal units).

    Values are rounded to two decimal places. A count exactly on a threshold
    stays in the lower unit, so 1000 bytes is "1000 B" and 1500 is "1.5 KB".

    Args:
        byte_count: Non-negative number of bytes

    Returns:
        FileSize with the scaled value and its unit
    """
    # Scale to hundredths first and round there so large counts keep two clean decimals
    if byte_count > 1_000_000_000:
        return FileSize(_round_half_up(byte_count / 10_000_000) / 100, 'GB')
    elif byte_count > 1_000_000:
        return FileSize(_round_half_up(byte_count / 10_000) / 100, 'MB')
    elif byte_count > 1_000:
        return FileSize(_round_half_up(byte_count / 10) / 100, 'KB')
    return FileSize(byte_count, 'B')


def format_number(value: Union[int, float]) -> str:
    """Render a size value without trailing zeros (1.0 -> "1", 1.50 -> "1.5")."""
    if isinstance(value, int) or value == int(value):
        return str(int(value))
    return f"{value:.2f}".rstrip('0').rstrip('.')


def format_path(path: Union[str, PurePath], relative_to: Optional[Union[str, PurePath]] = None) -> str:
    """
    Format a path for display, optionally making it relative to another path.

    Args:
        path: The path to format
        relative_to: Path to make the path relative to (optional)

    Returns:
        Formatted path string
    """
    path_obj = path if isinstance(path, PurePath) else PurePath(path)

    if relative_to is not None:
        try:
            return str(path_obj.relative_to(relative_to))
        except ValueError:
            # Can't make relative, use absolute path
            return str(path)

    return str(path)

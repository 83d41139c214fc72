"""
Platform-specific implementations for pathkit.

This module picks the entry filter the directory walker uses to hide
entries the operating system marks as system or temporary files, and the
volume style used when mapping source paths into the backup tree.
"""

import logging
import platform

from .attributes import has_hidden_attributes, is_link_entry, is_link_stat

# Set up module-level logger
logger = logging.getLogger(__name__)

# Determine platform
PLATFORM = platform.system().lower()

if PLATFORM == 'windows':
    from .windows import is_system_entry
else:
    from .unix import is_system_entry


def is_windows() -> bool:
    """
    Check if the current platform is Windows.

    Returns:
        bool: True if Windows, False otherwise
    """
    return PLATFORM == 'windows'


def default_volume_style() -> str:
    """
    Volume style for the current platform.

    Windows paths are addressed by drive letter; everywhere else the first
    segment below the root (the mount point name) stands in for it.
    """
    return 'drive' if is_windows() else 'mount'


__all__ = [
    'PLATFORM', 'is_windows', 'default_volume_style', 'is_system_entry',
    'has_hidden_attributes', 'is_link_entry', 'is_link_stat',
]

"""
Platform-specific implementations for Unix-like systems.

Unix has no system or temporary attribute at the metadata level, so no
entry is hidden from the walk.
"""

import os
import sys

# Platform check
if sys.platform == 'win32':
    raise ImportError("This module is only available on Unix-like systems")


def is_system_entry(entry: os.DirEntry) -> bool:
    """Always False: nothing is flagged as a system entry on Unix."""
    return False

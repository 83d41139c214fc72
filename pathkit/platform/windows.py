"""
Platform-specific implementations for Windows.

Entries flagged with the SYSTEM or TEMPORARY attribute are invisible to
the directory walk (pagefile.sys, hiberfil.sys, System Volume Information).
"""

import os
import sys

# Platform check
if sys.platform != 'win32':
    raise ImportError("This module is only available on Windows")

from .attributes import has_hidden_attributes


def is_system_entry(entry: os.DirEntry) -> bool:
    """
    Check whether a directory entry is a system or temporary entry.

    Args:
        entry: Entry produced by os.scandir

    Returns:
        True if the entry should be left out of the walk, False otherwise
    """
    return has_hidden_attributes(entry)

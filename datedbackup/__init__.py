"""
datedbackup - Back up a list of paths into a dated folder with robocopy.

This package provides the datedbackup command-line tool, which checks a
list of source paths, reports their total size and file/folder counts, and
copies each one into a dated backup folder after confirmation.
"""

import logging

# Version information
__version__ = "0.1.0"

# Set up package-level logger
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# Don't add handlers here - they are configured by datedbackup.py's setup_logging

# Import core functionality
from .datedbackup import main

__all__ = ['main']

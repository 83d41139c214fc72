"""
pathkit - Source path validation, volume mapping and tree walking.

This package validates the source paths of a backup run, maps each one into
a dated backup tree keyed by volume, and walks source trees lazily while
reporting unreadable entries and symbolic links without stopping.
"""

import logging

# Setup package-level logging
# Handlers are configured by the application (datedbackup.setup_logging)
logger = logging.getLogger(__name__)

from .errors import BackupError, BackupErrorKind

from .paths import (
    SourceEntry,
    VolumePath,
    VOLUME_STYLES,
    DEFAULT_FOLDER_FORMAT,
    resolve_volume_style,
    validate_source,
    extract_volume_id,
    backup_folder_name,
    backup_root,
    map_destination,
    read_source_list
)

from .walker import DirectoryWalker, WalkResult, walk

__version__ = '0.1.0'

__all__ = [
    'BackupError', 'BackupErrorKind',
    'SourceEntry', 'VolumePath', 'VOLUME_STYLES', 'DEFAULT_FOLDER_FORMAT',
    'resolve_volume_style', 'validate_source', 'extract_volume_id',
    'backup_folder_name', 'backup_root', 'map_destination',
    'read_source_list',
    'DirectoryWalker', 'WalkResult', 'walk',
]

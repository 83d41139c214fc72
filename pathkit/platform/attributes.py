"""
File attribute checks shared by the platform modules.

The checks only read fields of a stat result, so they work on any platform:
fields a platform does not provide (st_file_attributes, st_reparse_tag)
count as unset.
"""

import logging
import os
import stat

# Set up module-level logger
logger = logging.getLogger(__name__)

# pagefile.sys, hiberfil.sys, System Volume Information and the like
HIDDEN_ATTRIBUTES = stat.FILE_ATTRIBUTE_SYSTEM | stat.FILE_ATTRIBUTE_TEMPORARY

# Reparse tags from winnt.h; the stat module only defines them on Windows
IO_REPARSE_TAG_MOUNT_POINT = 0xA0000003
IO_REPARSE_TAG_SYMLINK = 0xA000000C

# Reparse points that name another location: symbolic links and junctions
LINK_REPARSE_TAGS = (IO_REPARSE_TAG_SYMLINK, IO_REPARSE_TAG_MOUNT_POINT)


def has_hidden_attributes(entry: os.DirEntry) -> bool:
    """
    Check whether a directory entry carries the SYSTEM or TEMPORARY attribute.

    Args:
        entry: Entry produced by os.scandir

    Returns:
        True if the entry should be left out of the walk, False otherwise
    """
    try:
        entry_stat = entry.stat(follow_symlinks=False)
    except OSError as e:
        # Let the walk report the entry; the stat failure surfaces there
        logger.debug(f"Cannot read attributes of {entry.path}: {e}")
        return False
    attributes = getattr(entry_stat, 'st_file_attributes', 0)
    return (attributes & HIDDEN_ATTRIBUTES) != 0


def is_link_stat(entry_stat: os.stat_result) -> bool:
    """
    Check whether an lstat result describes a link.

    Windows junctions are not symlinks to S_ISLNK but redirect just the same,
    so their reparse tag is checked as well.
    """
    if stat.S_ISLNK(entry_stat.st_mode):
        return True
    return getattr(entry_stat, 'st_reparse_tag', 0) in LINK_REPARSE_TAGS


def is_link_entry(entry: os.DirEntry) -> bool:
    """
    Check whether a directory entry is a symbolic link or a junction.

    Raises:
        OSError: If the entry's metadata cannot be read
    """
    if entry.is_symlink():
        return True
    return is_link_stat(entry.stat(follow_symlinks=False))

"""
Source path validation and destination mapping.

This module turns the raw lines of a source list into validated, canonical
source entries, and maps each canonical source path to its place in the
dated backup tree:

    output_root / "Backup DD-MM-YYYY" / <volume id> / <rest of source path>

The volume id keeps sources from different volumes apart in the backup tree.
On Windows it is the drive letter; on systems without drive letters the
first path segment below the root (the mount point name) is used instead.
"""

import datetime
import logging
import re
import stat
from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath
from typing import NamedTuple, Optional, Tuple, Type, Union

from .errors import BackupError, BackupErrorKind
from .platform import default_volume_style, is_link_stat

# Set up module-level logger
logger = logging.getLogger(__name__)

VOLUME_STYLES = ('drive', 'mount')

DEFAULT_FOLDER_FORMAT = "Backup %d-%m-%Y"

# Plain "C:" or verbatim "\\?\C:" drive prefixes
_DRIVE_PATTERN = re.compile(r'^(?:\\\\[?.]\\)?([A-Za-z]):$')


class SourceEntry:
    """
    A validated source path.

    When the source line named a single file, ``path`` is the canonical parent
    directory and ``file_name`` holds the file's name, so the copy tool can be
    asked for "this one file from this directory". Otherwise ``path`` is the
    canonical directory itself and ``file_name`` is None.
    """

    def __init__(self, path: Path, file_name: Optional[str] = None):
        self.path = path
        self.file_name = file_name

    @property
    def is_directory(self) -> bool:
        return self.file_name is None

    @property
    def full_path(self) -> Path:
        """The file itself for single-file sources, otherwise the directory."""
        if self.file_name is None:
            return self.path
        return self.path / self.file_name

    def __eq__(self, other):
        if not isinstance(other, SourceEntry):
            return NotImplemented
        return self.path == other.path and self.file_name == other.file_name

    def __repr__(self):
        return f"SourceEntry(path={str(self.path)!r}, file_name={self.file_name!r})"


class VolumePath(NamedTuple):
    """A canonical path split into its volume id and the components below the root."""
    volume_id: str
    parts: Tuple[str, ...]


def resolve_volume_style(style: Optional[str] = None) -> str:
    """
    Resolve a configured volume style to 'drive' or 'mount'.

    Args:
        style: 'drive', 'mount', 'auto' or None (auto picks the platform default)

    Returns:
        The concrete volume style
    """
    if style is None or style == 'auto':
        return default_volume_style()
    if style not in VOLUME_STYLES:
        raise ValueError(f"Unknown volume style: {style}")
    return style


def _path_class(style: str) -> Type[PurePath]:
    """Concrete Path when the style matches this platform, pure flavour otherwise."""
    flavour = PureWindowsPath if style == 'drive' else PurePosixPath
    if isinstance(Path(), flavour):
        return Path
    return flavour


def validate_source(raw_path: Union[str, Path]) -> SourceEntry:
    """
    Validate a raw source path and canonicalize it.

    The entry is inspected without following symbolic links: symlinks are
    never copied (Windows junctions included), and a single file is split
    into its parent directory plus the file name.

    Args:
        raw_path: Path as read from the source list

    Returns:
        The validated SourceEntry

    Raises:
        BackupError: IO if the path cannot be read or canonicalized,
            IS_SYMLINK if it is a symbolic link or junction
    """
    source_path = Path(raw_path)

    try:
        source_stat = source_path.lstat()
    except OSError as e:
        raise BackupError.io(e, raw_path)

    if is_link_stat(source_stat):
        raise BackupError(BackupErrorKind.IS_SYMLINK, raw_path)

    file_name = None
    if stat.S_ISREG(source_stat.st_mode):
        file_name = source_path.name
        source_path = source_path.parent
    elif not stat.S_ISDIR(source_stat.st_mode):
        raise BackupError(BackupErrorKind.IO, raw_path,
                          detail=f"Not a regular file or directory (mode {oct(source_stat.st_mode)})")

    try:
        canonical = source_path.resolve(strict=True)
    except OSError as e:
        raise BackupError.io(e, source_path)
    except RuntimeError as e:
        # Symlink loop on older interpreters
        raise BackupError(BackupErrorKind.IO, source_path, cause=e)

    logger.debug(f"Validated {raw_path} -> {canonical} (file: {file_name})")
    return SourceEntry(canonical, file_name)


def extract_volume_id(path: Union[str, PurePath], style: Optional[str] = None) -> VolumePath:
    """
    Split a canonical absolute path into its volume id and remaining components.

    Args:
        path: Canonical absolute source path
        style: Volume style ('drive', 'mount' or 'auto')

    Returns:
        VolumePath with the volume id and the components after the root

    Raises:
        BackupError: NO_VOLUME_ID if the path does not begin with a recognized volume
    """
    style = resolve_volume_style(style)

    if style == 'drive':
        pure = PureWindowsPath(path)
        match = _DRIVE_PATTERN.match(pure.drive)
        if not match:
            raise BackupError(BackupErrorKind.NO_VOLUME_ID, path)
        # parts[0] is the anchor (drive plus root), dropped so it cannot reset the join
        return VolumePath(match.group(1).upper(), tuple(pure.parts[1:]))

    pure = PurePosixPath(path)
    if not pure.root or len(pure.parts) < 2:
        raise BackupError(BackupErrorKind.NO_VOLUME_ID, path,
                          detail="Absolute paths must begin with a mount point")
    return VolumePath(pure.parts[1], tuple(pure.parts[2:]))


def backup_folder_name(
    when: Optional[datetime.date] = None,
    folder_format: str = DEFAULT_FOLDER_FORMAT
) -> str:
    """
    Name of the dated backup folder, e.g. "Backup 17-10-2026".

    Args:
        when: Date to use (defaults to today's local date)
        folder_format: strftime format for the folder name
    """
    if when is None:
        when = datetime.date.today()
    return when.strftime(folder_format)


def backup_root(
    output_root: Union[str, PurePath],
    when: Optional[datetime.date] = None,
    folder_format: str = DEFAULT_FOLDER_FORMAT,
    style: Optional[str] = None
) -> PurePath:
    """
    Build the dated backup root below the output root.

    Args:
        output_root: Output root given on the command line
        when: Date to use (defaults to today's local date)
        folder_format: strftime format for the folder name
        style: Volume style, which also decides the path flavour

    Returns:
        output_root / <dated folder>
    """
    path_cls = _path_class(resolve_volume_style(style))
    return path_cls(output_root) / backup_folder_name(when, folder_format)


def map_destination(
    root: Union[str, PurePath],
    source_path: Union[str, PurePath],
    style: Optional[str] = None
) -> PurePath:
    """
    Map a canonical source path into the backup tree.

    No I/O is done here. Sources on different volumes always land under
    different volume directories, so they cannot collide.

    Args:
        root: Dated backup root (see backup_root)
        source_path: Canonical absolute source path
        style: Volume style ('drive', 'mount' or 'auto')

    Returns:
        root / <volume id> / <source components below the root>

    Raises:
        BackupError: NO_VOLUME_ID if the source has no recognized volume
    """
    style = resolve_volume_style(style)
    volume = extract_volume_id(source_path, style)
    dest_path = _path_class(style)(root) / volume.volume_id
    for part in volume.parts:
        dest_path = dest_path / part
    return dest_path


def read_source_list(list_file: Union[str, Path]):
    """
    Read the raw source paths from a source list file.

    One path per line, native syntax, no quoting. Blank lines are skipped.

    Raises:
        OSError: If the list file cannot be read
        UnicodeDecodeError: If the list file is not valid UTF-8
    """
    with open(list_file, 'r', encoding='utf-8') as f:
        content = f.read()

    raw_paths = []
    for line in content.splitlines():
        if not line.strip():
            continue
        raw_paths.append(line)
    return raw_paths


"""
Lazy, error-tolerant directory tree walker.

DirectoryWalker enumerates every file and directory below a root, depth
first, using an explicit stack of pending directories instead of recursion
so tree depth is not bounded by the interpreter's recursion limit.

Failures never end the walk. An unreadable directory, a failed listing or a
symbolic link is yielded as a WalkResult carrying a BackupError, and the walk
carries on with the next entry or pending directory. Symbolic links are
reported but never followed; Windows junctions count as symbolic links.

The order of entries is not defined; only completeness is.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Union

from .errors import BackupError, BackupErrorKind
from .platform import is_link_entry, is_system_entry

# Set up module-level logger
logger = logging.getLogger(__name__)

EntryFilter = Callable[[os.DirEntry], bool]


class WalkResult:
    """One item produced by the walk: either a directory entry or an error."""

    __slots__ = ('entry', 'error')

    def __init__(self, entry: Optional[os.DirEntry] = None, error: Optional[BackupError] = None):
        self.entry = entry
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    def __repr__(self):
        if self.error is not None:
            return f"WalkResult(error={self.error})"
        return f"WalkResult(entry={self.entry.path!r})"


class DirectoryWalker:
    """
    Iterator over all entries below a root directory.

    Directories are yielded as entries and also scheduled for descent.
    Entries rejected by ``entry_filter`` are invisible: not yielded, not
    descended into and not reported as errors.

    ``root_unreadable`` is set once the root directory itself could not be
    opened. A listing that fails part way through does not set it.

    Args:
        root: Directory to walk
        entry_filter: Predicate returning True for entries to hide
            (defaults to the platform's system/temporary entry check)
    """

    def __init__(self, root: Union[str, Path], entry_filter: Optional[EntryFilter] = None):
        self.root = str(root)
        self.entry_filter = entry_filter if entry_filter is not None else is_system_entry
        self.root_unreadable = False
        self._pending: List[str] = [self.root]
        self._listing = None
        self._listing_path: Optional[str] = None

    def __iter__(self) -> Iterator[WalkResult]:
        return self

    def __next__(self) -> WalkResult:
        while True:
            if self._listing is not None:
                try:
                    entry = next(self._listing)
                except StopIteration:
                    self._close_listing()
                    continue
                except OSError as e:
                    path = self._listing_path
                    self._close_listing()
                    return WalkResult(error=BackupError.io(e, path))

                result = self._inspect(entry)
                if result is not None:
                    return result
                continue

            if not self._pending:
                raise StopIteration

            path = self._pending.pop()
            try:
                self._listing = os.scandir(path)
                self._listing_path = path
            except OSError as e:
                logger.debug(f"Cannot open directory {path}: {e}")
                if path == self.root:
                    self.root_unreadable = True
                return WalkResult(error=BackupError.io(e, path))

    def _inspect(self, entry: os.DirEntry) -> Optional[WalkResult]:
        if self.entry_filter(entry):
            logger.debug(f"Skipping system entry: {entry.path}")
            return None

        try:
            if is_link_entry(entry):
                return WalkResult(error=BackupError(BackupErrorKind.IS_SYMLINK, entry.path))
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as e:
            # Type unknown; hand the entry on and let the caller's stat report it
            logger.debug(f"Cannot determine type of {entry.path}: {e}")
            is_dir = False

        if is_dir:
            self._pending.append(entry.path)
        return WalkResult(entry=entry)

    def _close_listing(self):
        if self._listing is not None:
            self._listing.close()
        self._listing = None
        self._listing_path = None

    def restart(self):
        """Start the walk over from the root."""
        self._close_listing()
        self.root_unreadable = False
        self._pending = [self.root]

    def close(self):
        """Release the open directory handle, if any, and end the walk."""
        self._close_listing()
        self._pending.clear()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def walk(root: Union[str, Path], entry_filter: Optional[EntryFilter] = None) -> DirectoryWalker:
    """Convenience wrapper returning a DirectoryWalker for ``root``."""
    return DirectoryWalker(root, entry_filter)

"""
Error types shared by the path validation, mapping and walking code.

A BackupError is built at the point of failure, reported once and never
retried. It always carries a kind and, where one is known, the offending path.
"""

from enum import Enum
from pathlib import PurePath
from typing import Optional, Union


class BackupErrorKind(Enum):
    """Kinds of failure a source path or directory entry can hit."""
    IO = 'io'
    IS_SYMLINK = 'is_symlink'
    NO_VOLUME_ID = 'no_volume_id'


class BackupError(Exception):
    """
    A failure tied to a single source path or directory entry.

    Args:
        kind: What went wrong
        path: The offending path (optional)
        cause: The underlying OSError for IO failures (optional)
        detail: Override for the kind's default message (optional)
    """

    MESSAGES = {
        BackupErrorKind.IS_SYMLINK: "Cannot copy symlinks",
        BackupErrorKind.NO_VOLUME_ID: "Absolute paths must begin with a drive letter",
    }

    def __init__(
        self,
        kind: BackupErrorKind,
        path: Optional[Union[str, PurePath]] = None,
        cause: Optional[BaseException] = None,
        detail: Optional[str] = None
    ):
        self.kind = kind
        self.path = path
        self.cause = cause
        self.detail = detail
        super().__init__(str(self))

    @classmethod
    def io(cls, cause: OSError, path: Optional[Union[str, PurePath]] = None) -> 'BackupError':
        """Wrap an OSError, tagging it with a path when one is known."""
        if path is None and getattr(cause, 'filename', None):
            path = cause.filename
        return cls(BackupErrorKind.IO, path, cause=cause)

    @property
    def message(self) -> str:
        if self.detail:
            return self.detail
        if self.kind is BackupErrorKind.IO:
            if isinstance(self.cause, OSError) and self.cause.strerror:
                return self.cause.strerror
            return str(self.cause) if self.cause else "I/O error"
        return self.MESSAGES[self.kind]

    def __str__(self) -> str:
        if self.path is not None:
            return f"Error: {self.message}. Path: {self.path}"
        return f"Error: {self.message}"

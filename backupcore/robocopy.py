"""
Delegated copy through robocopy.

The copy itself is left entirely to robocopy; this module only builds its
command line and applies its exit-code convention:

    0-7   success, possibly with informational notes (extra files, mismatches)
    8+    at least one copy failed

A directory source is copied recursively. A single-file source is passed as
source directory, destination directory and file name, so robocopy copies
just that file.
"""

import logging
import subprocess
from pathlib import PurePath
from typing import Callable, List, Optional, Union

# Set up module-level logger
logger = logging.getLogger(__name__)

DEFAULT_COMMAND = 'robocopy'
DEFAULT_RETRIES = 10
DEFAULT_WAIT = 5
SEVERITY_THRESHOLD = 8

RECURSIVE_FLAGS = ['/S', '/E']
COMMON_FLAGS = [
    '/DCOPY:DAT',   # Directory data, attributes and timestamps
    '/xj',          # Skip junction points
    '/eta',         # Show estimated time of arrival
]


class CopyError(Exception):
    """
    Raised when a copy invocation fails badly enough to stop the batch.

    ``exit_code`` is None when no exit code was returned (the process was
    killed or could not be started).
    """

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        self.exit_code = exit_code


class CopyOptions:
    """Settings for the copy command, normally read from the configuration."""

    def __init__(
        self,
        command: str = DEFAULT_COMMAND,
        retries: int = DEFAULT_RETRIES,
        wait: int = DEFAULT_WAIT,
        severity_threshold: int = SEVERITY_THRESHOLD
    ):
        self.command = command
        self.retries = retries
        self.wait = wait
        self.severity_threshold = severity_threshold

    @classmethod
    def from_config(cls, config) -> 'CopyOptions':
        return cls(
            command=config.get('copy.command', DEFAULT_COMMAND),
            retries=int(config.get('copy.retries', DEFAULT_RETRIES)),
            wait=int(config.get('copy.wait', DEFAULT_WAIT)),
            severity_threshold=int(config.get('copy.severity_threshold', SEVERITY_THRESHOLD)),
        )


def build_copy_command(
    source: Union[str, PurePath],
    destination: Union[str, PurePath],
    file_name: Optional[str] = None,
    options: Optional[CopyOptions] = None
) -> List[str]:
    """
    Build the robocopy command line for one source.

    Args:
        source: Source directory
        destination: Destination directory
        file_name: Name of the single file to copy (optional)
        options: Copy settings

    Returns:
        Command as a list of arguments
    """
    options = options or CopyOptions()

    cmd = [options.command, str(source), str(destination)]
    if file_name:
        cmd.append(file_name)
    else:
        cmd.extend(RECURSIVE_FLAGS)
    cmd.extend(COMMON_FLAGS)
    cmd.append(f'/R:{options.retries}')
    cmd.append(f'/W:{options.wait}')
    return cmd


def run_copy(
    source: Union[str, PurePath],
    destination: Union[str, PurePath],
    file_name: Optional[str] = None,
    options: Optional[CopyOptions] = None,
    runner: Optional[Callable] = None
) -> int:
    """
    Run robocopy for one source and check its exit code.

    The process inherits the console so its progress display stays visible.
    No timeout is applied.

    Args:
        source: Source directory
        destination: Destination directory
        file_name: Name of the single file to copy (optional)
        options: Copy settings
        runner: Callable used to start the process (defaults to subprocess.run)

    Returns:
        The exit code, which is below the severity threshold

    Raises:
        CopyError: If the process could not be started, returned no exit code,
            or returned an exit code at or above the severity threshold
    """
    options = options or CopyOptions()
    runner = runner or subprocess.run
    cmd = build_copy_command(source, destination, file_name, options)
    logger.debug(f"Running: {subprocess.list2cmdline(cmd)}")

    try:
        completed = runner(cmd)
    except OSError as e:
        raise CopyError(f"Warning: Could not start {options.command}: {e}") from e

    code = completed.returncode
    # Negative return codes mean the process was killed by a signal
    if code is None or code < 0:
        raise CopyError("Warning: No exit code returned")

    if code >= options.severity_threshold:
        raise CopyError(f"Warning: Errors during copy, exit code: {code}", exit_code=code)

    return code

"""
High-level operations for a dated backup run.

This module ties the path layer together: it validates and maps every line
of the source list, walks each validated source to gather pre-flight
statistics, and finally hands each (source, destination) pair to robocopy.

A bad source line never stops the run. Its error is logged and counted and
the line is left out of the copy phase. Only a failed copy invocation (exit
code at or above the severity threshold) stops the remaining batch.
"""

import logging
from pathlib import PurePath
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from pathkit import (
    BackupError,
    DirectoryWalker,
    SourceEntry,
    map_destination,
    validate_source,
)
from pathkit.walker import EntryFilter

from .robocopy import CopyOptions, run_copy

# Set up module-level logger
logger = logging.getLogger(__name__)


class WalkStats:
    """
    Running totals gathered while walking the sources.

    Owned by a single BackupPlan and only updated from the thread that
    consumes the walkers.
    """

    def __init__(self):
        self.byte_count = 0
        self.file_count = 0
        self.folder_count = 0
        self.error_count = 0

    def add_file(self, size: int) -> None:
        self.file_count += 1
        self.byte_count += size

    def add_folder(self) -> None:
        self.folder_count += 1

    def add_error(self) -> None:
        self.error_count += 1

    def as_dict(self) -> Dict[str, int]:
        return {
            'byte_count': self.byte_count,
            'file_count': self.file_count,
            'folder_count': self.folder_count,
            'error_count': self.error_count,
        }

    def __repr__(self):
        return (f"WalkStats(bytes={self.byte_count}, files={self.file_count}, "
                f"folders={self.folder_count}, errors={self.error_count})")


class SourcePlan:
    """A validated source and the destination it will be copied to."""

    def __init__(self, source: SourceEntry, destination: PurePath):
        self.source = source
        self.destination = destination

    @property
    def file_name(self) -> Optional[str]:
        return self.source.file_name

    def overlaps(self, other: 'SourcePlan') -> bool:
        """
        True when this single-file source lands inside another directory source.

        Both copies then write the same file in the backup tree.
        """
        if self.source.is_directory or not other.source.is_directory:
            return False
        return self.destination == other.destination or other.destination in self.destination.parents

    def __repr__(self):
        return f"SourcePlan({self.source!r} -> {str(self.destination)!r})"


class BackupPlan:
    """
    Outcome of checking a source list: what will be copied where, the
    aggregate statistics and every error found on the way.
    """

    def __init__(self, backup_root: PurePath):
        self.backup_root = backup_root
        self.sources: List[SourcePlan] = []
        self.errors: List[BackupError] = []
        self.stats = WalkStats()

    def add_source(self, source: SourceEntry, destination: PurePath) -> SourcePlan:
        plan = SourcePlan(source, destination)
        self.sources.append(plan)
        return plan

    def add_error(self, error: BackupError) -> None:
        """Record an error, report it and count it."""
        logger.error(str(error))
        self.errors.append(error)
        self.stats.add_error()

    @property
    def error_count(self) -> int:
        return self.stats.error_count

    def has_errors(self) -> bool:
        return self.stats.error_count > 0

    def get_summary(self) -> Dict[str, Any]:
        summary = self.stats.as_dict()
        summary['backup_root'] = str(self.backup_root)
        summary['source_count'] = len(self.sources)
        return summary


class BackupResult:
    """Exit codes of the copy invocations that ran."""

    def __init__(self):
        self.succeeded: List[Tuple[SourcePlan, int]] = []

    def add_success(self, source_plan: SourcePlan, exit_code: int) -> None:
        self.succeeded.append((source_plan, exit_code))

    def success_count(self) -> int:
        return len(self.succeeded)

    def exit_codes(self) -> List[int]:
        return [code for _, code in self.succeeded]


def collect_stats(
    source: SourceEntry,
    stats: WalkStats,
    on_error: Callable[[BackupError], None],
    entry_filter: Optional[EntryFilter] = None
) -> bool:
    """
    Add the size and file/folder counts of one source to ``stats``.

    A single-file source counts just that file. A directory source is walked
    in full; every entry error is passed to ``on_error`` and the walk goes on.

    Args:
        source: Validated source
        stats: Totals to update
        on_error: Called with each error found (expected to count it)
        entry_filter: Walker filter for entries to hide

    Returns:
        False if the source directory could not be opened, True otherwise
    """
    if not source.is_directory:
        try:
            file_stat = source.full_path.lstat()
        except OSError as e:
            on_error(BackupError.io(e, source.full_path))
            return False
        stats.add_file(file_stat.st_size)
        return True

    with DirectoryWalker(source.path, entry_filter) as walker:
        for result in walker:
            if not result.ok:
                on_error(result.error)
                continue

            entry = result.entry
            try:
                entry_stat = entry.stat(follow_symlinks=False)
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = entry.is_file(follow_symlinks=False)
            except OSError as e:
                on_error(BackupError.io(e, entry.path))
                continue

            if is_dir:
                stats.add_folder()
            elif is_file:
                stats.add_file(entry_stat.st_size)

    # Nothing below an unopenable root was counted
    return not walker.root_unreadable


def plan_backup(
    raw_paths: Iterable[str],
    backup_root: PurePath,
    style: Optional[str] = None,
    entry_filter: Optional[EntryFilter] = None
) -> BackupPlan:
    """
    Check every source line and decide what gets copied where.

    Args:
        raw_paths: Lines of the source list (blank lines already removed)
        backup_root: Dated backup root the destinations are built under
        style: Volume style ('drive', 'mount' or 'auto')
        entry_filter: Walker filter for entries to hide

    Returns:
        BackupPlan holding the copyable sources, statistics and errors
    """
    plan = BackupPlan(backup_root)

    for raw_path in raw_paths:
        try:
            source = validate_source(raw_path)
            destination = map_destination(backup_root, source.path, style)
        except BackupError as e:
            plan.add_error(e)
            continue

        logger.debug(f"Mapped {source.full_path} -> {destination}")

        if not collect_stats(source, plan.stats, plan.add_error, entry_filter):
            logger.debug(f"Excluding unreadable source: {raw_path}")
            continue

        source_plan = plan.add_source(source, destination)
        _warn_overlaps(plan, source_plan)

    return plan


def _warn_overlaps(plan: BackupPlan, new_plan: SourcePlan) -> None:
    # Which copy wins is left to robocopy; only make the overlap visible
    for existing in plan.sources:
        if existing is new_plan:
            continue
        if new_plan.overlaps(existing) or existing.overlaps(new_plan):
            logger.warning(
                f"Warning: {new_plan.source.full_path} and {existing.source.full_path} "
                f"are both copied into {existing.destination}"
            )


def execute_plan(
    plan: BackupPlan,
    options: Optional[CopyOptions] = None,
    runner: Optional[Callable] = None
) -> BackupResult:
    """
    Copy every planned source, one robocopy invocation each, in order.

    Args:
        plan: Plan produced by plan_backup
        options: Copy settings
        runner: Process runner passed to run_copy (subprocess.run by default)

    Returns:
        BackupResult with the exit code of each copy

    Raises:
        CopyError: On the first copy that fails; the remaining sources are not copied
    """
    result = BackupResult()

    for source_plan in plan.sources:
        logger.debug(f"Copying {source_plan.source.full_path} to {source_plan.destination}")
        code = run_copy(
            source_plan.source.path,
            source_plan.destination,
            source_plan.file_name,
            options,
            runner=runner
        )
        logger.info(f"Copy complete, exit code: {code}")
        result.add_success(source_plan, code)

    return result

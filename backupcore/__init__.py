"""
backupcore - Planning and running dated backups.

This package checks a list of source paths, gathers pre-flight statistics
for them and copies each one into the dated backup tree through robocopy.
"""

import logging

# Setup package-level logging
# Handlers are configured by the application (datedbackup.setup_logging)
logger = logging.getLogger(__name__)

from .operations import (
    WalkStats,
    SourcePlan,
    BackupPlan,
    BackupResult,
    collect_stats,
    plan_backup,
    execute_plan
)

from .robocopy import (
    CopyError,
    CopyOptions,
    SEVERITY_THRESHOLD,
    build_copy_command,
    run_copy
)

__version__ = '0.1.0'

__all__ = [
    'WalkStats', 'SourcePlan', 'BackupPlan', 'BackupResult',
    'collect_stats', 'plan_backup', 'execute_plan',
    'CopyError', 'CopyOptions', 'SEVERITY_THRESHOLD',
    'build_copy_command', 'run_copy',
]

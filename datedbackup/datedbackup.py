#!/usr/bin/env python3
"""
datedbackup.py - Back up a list of paths into a dated folder

This tool reads source paths from a text file, maps each one into
<OUTPUT_ROOT>/Backup DD-MM-YYYY/<volume>/<path>, reports the total size and
file/folder/error counts, and after confirmation copies every source with
robocopy.

Usage:
    datedbackup INPUT_FILE OUTPUT_ROOT [OPTIONS]

Examples:
    # Back up the paths listed in sources.txt to D:\\backups
    datedbackup sources.txt "D:\\backups"

    # Only check the sources and show the totals
    datedbackup sources.txt "D:\\backups" --dry-run
"""

import logging
import platform
import sys
from typing import Callable, Optional

from colorama import Fore, Style, just_fix_windows_console

from pathkit import backup_root, read_source_list, resolve_volume_style

from backupcore import BackupPlan, CopyError, CopyOptions, execute_plan, plan_backup

from . import __version__, utils
from .cli import create_parser
from .config import BackupConfig, ConfigError


class StdinUnavailableError(Exception):
    """Raised when the confirmation answer cannot be read from standard input."""


def setup_logging(args):
    """Set up logging based on verbosity level"""
    log_level = logging.INFO
    if args.verbose:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.WARNING

    # Get the root logger
    root_logger = logging.getLogger()

    # Remove all existing handlers from the root logger
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)

    # Use simpler format for normal output, detailed format for verbose
    if args.verbose:
        console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    else:
        use_color = not getattr(args, 'no_color', False)

        class ColoredFormatter(logging.Formatter):
            def format(self, record):
                if record.levelno == logging.INFO:
                    # INFO messages - no prefix, no color (clean output)
                    return record.getMessage()
                elif record.levelno == logging.WARNING:
                    if use_color:
                        return f"{Fore.YELLOW}{record.getMessage()}{Style.RESET_ALL}"
                    return record.getMessage()
                elif record.levelno == logging.ERROR:
                    if use_color:
                        return f"{Fore.RED}{record.getMessage()}{Style.RESET_ALL}"
                    return record.getMessage()
                elif record.levelno == logging.DEBUG:
                    if use_color:
                        return f"{Fore.CYAN}DEBUG: {record.getMessage()}{Style.RESET_ALL}"
                    return f"DEBUG: {record.getMessage()}"
                else:
                    return f"{record.levelname}: {record.getMessage()}"

        console_handler.setFormatter(ColoredFormatter())

    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)
    root_logger.setLevel(log_level)

    # Configure a separate file handler if log file specified
    if args.log:
        file_handler = logging.FileHandler(args.log, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)

    # Package loggers only set levels; output goes through the root logger
    for module_name in ['datedbackup', 'backupcore', 'pathkit']:
        module_logger = logging.getLogger(module_name)
        for handler in module_logger.handlers[:]:
            module_logger.removeHandler(handler)
        module_logger.setLevel(log_level)
        module_logger.propagate = True

    return logging.getLogger('datedbackup')


def apply_overrides(args, config: BackupConfig) -> None:
    """Apply command-line options on top of the loaded configuration."""
    if args.volume_style:
        config.set('paths.volume_style', args.volume_style)
    if args.include_system:
        config.set('walk.skip_system_entries', False)


def report_plan(plan: BackupPlan, logger) -> None:
    """Log the pre-flight totals and whether any source will be skipped."""
    stats = plan.stats
    total_size = utils.format_size(stats.byte_count)

    for source_plan in plan.sources:
        logger.debug(f"{source_plan.source.full_path} -> "
                     f"{utils.format_path(source_plan.destination, plan.backup_root)}")

    logger.info("")
    logger.info(
        f"Size: {total_size}, Files: {stats.file_count}, "
        f"Folders: {stats.folder_count}, Errors: {stats.error_count}"
    )
    logger.info("")

    if plan.has_errors():
        logger.warning("Warning: errors found, affected paths will be skipped")
    else:
        logger.info("All source paths ok")


def confirm(question: str, read: Callable[[str], str] = input) -> bool:
    """
    Ask a y/n question until a recognised answer is given.

    Raises:
        StdinUnavailableError: If standard input cannot be read
    """
    print()
    print(utils.colorize(question, 'CYAN'))
    while True:
        try:
            answer = read('').strip()
        except (EOFError, OSError) as e:
            raise StdinUnavailableError(f"Cannot read from standard input: {e or 'end of input'}") from e

        if answer in ('y', 'Y'):
            return True
        if answer in ('n', 'N'):
            return False
        print("Unrecognised input")


def handle_backup(
    args,
    config: BackupConfig,
    logger,
    read: Optional[Callable[[str], str]] = None,
    runner: Optional[Callable] = None
) -> int:
    """
    Run one backup: plan, report, confirm, copy.

    ``read`` replaces input() for the confirmation and ``runner`` replaces
    subprocess.run for the copy step.
    """
    try:
        style = resolve_volume_style(config.get('paths.volume_style'))
    except ValueError as e:
        logger.error(f"Error: {e}")
        return 1

    root = backup_root(args.output_root, folder_format=config.get('naming.folder_format'), style=style)

    try:
        raw_paths = read_source_list(args.input_file)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error: Cannot read input file {args.input_file}: {e}")
        return 1

    entry_filter = None
    if not config.get('walk.skip_system_entries', True):
        def entry_filter(entry):
            return False

    logger.info("Checking source paths...")
    plan = plan_backup(raw_paths, root, style, entry_filter)
    report_plan(plan, logger)

    if args.dry_run:
        logger.info("Dry run, nothing copied")
        return 0

    question = (f'Are you sure you want to backup the paths in "{args.input_file}" '
                f'to "{root}"? (y/n)')
    try:
        proceed = confirm(question, read or input)
    except StdinUnavailableError as e:
        logger.error(f"Error: {e}")
        return 1

    if not proceed:
        logger.info("Program quit")
        return 0

    try:
        execute_plan(plan, CopyOptions.from_config(config), runner=runner)
    except CopyError as e:
        logger.error(str(e))
        return 1

    logger.info(utils.colorize("Backup complete", 'GREEN'))
    return 0


def main(argv=None, read=None, runner=None):
    """Main entry point for the program"""
    parser = create_parser()
    args = parser.parse_args(argv)

    just_fix_windows_console()
    logger = setup_logging(args)

    # Disable colors if requested
    if args.no_color:
        utils.disable_color()

    logger.debug(f"Platform: {platform.platform()}")
    logger.debug(f"Python version: {platform.python_version()}")
    logger.debug(f"datedbackup {__version__} invoked with: {' '.join(sys.argv)}")

    try:
        config = BackupConfig.load(args.config)
    except ConfigError as e:
        logger.error(f"Error: {e}")
        return 1
    apply_overrides(args, config)

    try:
        return handle_backup(args, config, logger, read, runner)
    except Exception:
        logger.exception("Error during backup")
        return 1


if __name__ == "__main__":
    sys.exit(main())

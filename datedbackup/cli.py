"""
Command-line interface and argument parser for datedbackup.

This module contains the argument parser and help text.
"""

import argparse

from datedbackup import __version__


def create_parser():
    """Create argument parser with all CLI options"""
    parser = argparse.ArgumentParser(
        prog='datedbackup',
        description=f'datedbackup v{__version__} - Back up a list of paths into a dated folder with robocopy',
        epilog='''Examples:
  Back up every path listed in sources.txt:
    datedbackup sources.txt "D:\\backups"

  Check the sources and show the totals without copying:
    datedbackup sources.txt "D:\\backups" --dry-run

The source list holds one path per line; blank lines are ignored.
Each source is copied to <OUTPUT_ROOT>\\Backup DD-MM-YYYY\\<drive letter>\\<rest of path>.''',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument('input_file', metavar='INPUT_FILE',
                        help='Text file listing the source paths, one per line')
    parser.add_argument('output_root', metavar='OUTPUT_ROOT',
                        help='Directory the dated backup folder is created in')

    # General options
    parser.add_argument('--version', '-V', action='version',
                        version=f'datedbackup {__version__}')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose output')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Suppress all non-error output')
    parser.add_argument('--log', help='Write log to specified file')
    parser.add_argument('--no-color', action='store_true',
                        help='Disable colored output')
    parser.add_argument('--config', help='Path to a JSON configuration file')

    # Run options
    parser.add_argument('--dry-run', action='store_true',
                        help='Check the sources and report totals without copying')
    parser.add_argument('--volume-style', choices=['auto', 'drive', 'mount'],
                        help='How the volume folder is derived: drive letter or first path segment '
                             '(default: from config, auto)')
    parser.add_argument('--include-system', action='store_true',
                        help='Count entries flagged as system or temporary files')

    return parser

"""
Tests for robocopy command building and exit-code handling.
"""

import unittest
from pathlib import PureWindowsPath
from types import SimpleNamespace
from unittest.mock import patch

from backupcore import CopyError, CopyOptions, SEVERITY_THRESHOLD, build_copy_command, run_copy
from datedbackup.config import BackupConfig


class TestBuildCopyCommand(unittest.TestCase):

    def test_directory_copy(self):
        cmd = build_copy_command(PureWindowsPath('C:\\data'),
                                 PureWindowsPath('D:\\backups\\Backup 17-10-2026\\C\\data'))
        self.assertEqual(cmd, [
            'robocopy', 'C:\\data', 'D:\\backups\\Backup 17-10-2026\\C\\data',
            '/S', '/E', '/DCOPY:DAT', '/xj', '/eta', '/R:10', '/W:5',
        ])

    def test_single_file_copy(self):
        cmd = build_copy_command(PureWindowsPath('C:\\'),
                                 PureWindowsPath('D:\\backups\\Backup 17-10-2026\\C'),
                                 'file.txt')
        self.assertEqual(cmd, [
            'robocopy', 'C:\\', 'D:\\backups\\Backup 17-10-2026\\C', 'file.txt',
            '/DCOPY:DAT', '/xj', '/eta', '/R:10', '/W:5',
        ])

    def test_options_from_config(self):
        config = BackupConfig({'copy': {'command': 'robocopy.exe', 'retries': 2, 'wait': 1}})
        options = CopyOptions.from_config(config)
        cmd = build_copy_command('C:\\a', 'D:\\b', options=options)

        self.assertEqual(cmd[0], 'robocopy.exe')
        self.assertEqual(cmd[-2:], ['/R:2', '/W:1'])
        self.assertEqual(options.severity_threshold, SEVERITY_THRESHOLD)


class TestRunCopy(unittest.TestCase):

    def test_success_returns_code(self):
        runner = lambda cmd: SimpleNamespace(returncode=1)
        self.assertEqual(run_copy('C:\\a', 'D:\\b', runner=runner), 1)

    def test_threshold_raises(self):
        runner = lambda cmd: SimpleNamespace(returncode=16)
        with self.assertRaises(CopyError) as ctx:
            run_copy('C:\\a', 'D:\\b', runner=runner)
        self.assertEqual(ctx.exception.exit_code, 16)
        self.assertEqual(str(ctx.exception), "Warning: Errors during copy, exit code: 16")

    def test_missing_command_raises(self):
        def runner(cmd):
            raise FileNotFoundError(2, 'No such file or directory', cmd[0])

        with self.assertRaises(CopyError) as ctx:
            run_copy('C:\\a', 'D:\\b', runner=runner)
        self.assertIsNone(ctx.exception.exit_code)

    def test_uses_subprocess_run_by_default(self):
        with patch('backupcore.robocopy.subprocess.run', return_value=SimpleNamespace(returncode=0)) as run:
            self.assertEqual(run_copy('C:\\a', 'D:\\b', 'x.txt'), 0)
        run.assert_called_once()
        self.assertEqual(run.call_args[0][0][:4], ['robocopy', 'C:\\a', 'D:\\b', 'x.txt'])


if __name__ == '__main__':
    unittest.main()

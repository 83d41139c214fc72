"""
Tests for the lazy directory walker.
"""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from pathkit import BackupErrorKind, DirectoryWalker, WalkResult, walk


def _can_symlink(directory):
    probe = Path(directory) / 'symlink_probe'
    try:
        os.symlink(directory, probe)
    except (OSError, NotImplementedError):
        return False
    probe.unlink()
    return True


def _show_everything(entry):
    return False


class _FailingListing:
    """Directory listing that yields its first entry and then fails."""

    def __init__(self, inner):
        self._inner = inner
        self._served = False
        self.closed = False

    def __iter__(self):
        return self

    def __next__(self):
        if not self._served:
            self._served = True
            return next(self._inner)
        raise OSError(5, 'Input/output error')

    def close(self):
        self.closed = True
        self._inner.close()


class TestDirectoryWalker(unittest.TestCase):
    """Test completeness and error handling of DirectoryWalker."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name).resolve()

        # 3 directories, 4 files
        (self.root / 'a' / 'a1').mkdir(parents=True)
        (self.root / 'b').mkdir()
        (self.root / 'top.txt').write_text('top')
        (self.root / 'a' / 'one.txt').write_text('1')
        (self.root / 'a' / 'a1' / 'two.txt').write_text('22')
        (self.root / 'b' / 'three.txt').write_text('333')

    def tearDown(self):
        self.temp_dir.cleanup()

    def _collect(self, walker):
        entries, errors = [], []
        for result in walker:
            self.assertIsInstance(result, WalkResult)
            if result.ok:
                entries.append(result.entry)
            else:
                errors.append(result.error)
        return entries, errors

    def test_yields_every_file_and_directory(self):
        entries, errors = self._collect(DirectoryWalker(self.root, _show_everything))

        self.assertEqual(errors, [])
        dirs = sorted(Path(e.path).relative_to(self.root).as_posix() for e in entries if e.is_dir())
        files = sorted(Path(e.path).relative_to(self.root).as_posix() for e in entries if e.is_file())
        self.assertEqual(dirs, ['a', 'a/a1', 'b'])
        self.assertEqual(files, ['a/a1/two.txt', 'a/one.txt', 'b/three.txt', 'top.txt'])

    def test_root_itself_is_not_yielded(self):
        entries, _ = self._collect(walk(self.root, _show_everything))
        self.assertNotIn(str(self.root), [e.path for e in entries])

    def test_empty_directory(self):
        with tempfile.TemporaryDirectory() as empty:
            entries, errors = self._collect(DirectoryWalker(empty, _show_everything))
        self.assertEqual(entries, [])
        self.assertEqual(errors, [])

    def test_missing_root_yields_single_error(self):
        missing = self.root / 'missing'
        walker = DirectoryWalker(missing, _show_everything)
        entries, errors = self._collect(walker)

        self.assertEqual(entries, [])
        self.assertEqual(len(errors), 1)
        self.assertIs(errors[0].kind, BackupErrorKind.IO)
        self.assertEqual(errors[0].path, str(missing))
        self.assertTrue(walker.root_unreadable)

    def test_unreadable_subdirectory_does_not_stop_walk(self):
        blocked = str(self.root / 'a')
        real_scandir = os.scandir

        def fake_scandir(path):
            if os.path.normpath(str(path)) == blocked:
                raise PermissionError(13, 'Permission denied', str(path))
            return real_scandir(path)

        with patch('pathkit.walker.os.scandir', side_effect=fake_scandir):
            entries, errors = self._collect(DirectoryWalker(self.root, _show_everything))

        names = sorted(Path(e.path).relative_to(self.root).as_posix() for e in entries)
        # The blocked directory is still yielded; its contents are not
        self.assertEqual(names, ['a', 'b', 'b/three.txt', 'top.txt'])
        self.assertEqual(len(errors), 1)
        self.assertIs(errors[0].kind, BackupErrorKind.IO)
        self.assertEqual(errors[0].path, blocked)
        self.assertIsInstance(errors[0].cause, PermissionError)

    def test_listing_failure_closes_listing_and_continues(self):
        failing = str(self.root / 'b')
        real_scandir = os.scandir
        listings = []

        def fake_scandir(path):
            if os.path.normpath(str(path)) == failing:
                listing = _FailingListing(real_scandir(path))
                listings.append(listing)
                return listing
            return real_scandir(path)

        with patch('pathkit.walker.os.scandir', side_effect=fake_scandir):
            entries, errors = self._collect(DirectoryWalker(self.root, _show_everything))

        self.assertEqual(len(errors), 1)
        self.assertIs(errors[0].kind, BackupErrorKind.IO)
        self.assertEqual(errors[0].path, failing)
        self.assertTrue(listings[0].closed)

        names = [Path(e.path).relative_to(self.root).as_posix() for e in entries]
        self.assertIn('b/three.txt', names)
        self.assertIn('a/a1/two.txt', names)

    def test_root_listing_failure_leaves_root_readable(self):
        real_scandir = os.scandir

        def fake_scandir(path):
            if os.path.normpath(str(path)) == str(self.root):
                return _FailingListing(real_scandir(path))
            return real_scandir(path)

        walker = DirectoryWalker(self.root, _show_everything)
        with patch('pathkit.walker.os.scandir', side_effect=fake_scandir):
            entries, errors = self._collect(walker)

        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0].path, str(self.root))
        self.assertGreaterEqual(len(entries), 1)
        self.assertFalse(walker.root_unreadable)

    def test_restart_clears_unreadable_root(self):
        walker = DirectoryWalker(self.root, _show_everything)
        with patch('pathkit.walker.os.scandir', side_effect=FileNotFoundError(2, 'gone')):
            self._collect(walker)
        self.assertTrue(walker.root_unreadable)

        walker.restart()
        self._collect(walker)
        self.assertFalse(walker.root_unreadable)

    def test_symlink_is_reported_and_not_followed(self):
        if not _can_symlink(self.root):
            self.skipTest("Symbolic links not supported here")

        outside = tempfile.TemporaryDirectory()
        self.addCleanup(outside.cleanup)
        (Path(outside.name) / 'secret.txt').write_text('not part of the backup')
        link = self.root / 'b' / 'outside'
        os.symlink(outside.name, link, target_is_directory=True)

        entries, errors = self._collect(DirectoryWalker(self.root, _show_everything))

        self.assertEqual(len(errors), 1)
        self.assertIs(errors[0].kind, BackupErrorKind.IS_SYMLINK)
        self.assertEqual(errors[0].path, str(link))
        self.assertNotIn('secret.txt', [e.name for e in entries])
        self.assertEqual(len(entries), 7)

    def test_symlink_cycle_terminates(self):
        if not _can_symlink(self.root):
            self.skipTest("Symbolic links not supported here")
        os.symlink(self.root, self.root / 'a' / 'a1' / 'loop', target_is_directory=True)

        entries, errors = self._collect(DirectoryWalker(self.root, _show_everything))

        self.assertEqual(len(entries), 7)
        self.assertEqual([e.kind for e in errors], [BackupErrorKind.IS_SYMLINK])

    def test_filtered_entries_are_invisible(self):
        def hide_b(entry):
            return entry.name == 'b'

        entries, errors = self._collect(DirectoryWalker(self.root, hide_b))

        names = sorted(Path(e.path).relative_to(self.root).as_posix() for e in entries)
        self.assertEqual(names, ['a', 'a/a1', 'a/a1/two.txt', 'a/one.txt', 'top.txt'])
        self.assertEqual(errors, [])

    def test_deep_tree(self):
        depth = 300
        current = self.root / 'b'
        for _ in range(depth):
            current = current / 'd'
            current.mkdir()

        entries, errors = self._collect(DirectoryWalker(self.root, _show_everything))

        self.assertEqual(errors, [])
        self.assertEqual(sum(1 for e in entries if e.name == 'd'), depth)

    def test_restart_walks_again(self):
        walker = DirectoryWalker(self.root, _show_everything)
        first, _ = self._collect(walker)
        walker.restart()
        second, _ = self._collect(walker)
        self.assertEqual(sorted(e.path for e in first), sorted(e.path for e in second))

    def test_close_ends_walk(self):
        with DirectoryWalker(self.root, _show_everything) as walker:
            next(walker)
        self.assertEqual(list(walker), [])

    def test_default_filter_hides_nothing_on_unix(self):
        if os.name == 'nt':
            self.skipTest("Windows hides system and temporary entries")
        entries, _ = self._collect(DirectoryWalker(self.root))
        self.assertEqual(len(entries), 7)


if __name__ == '__main__':
    unittest.main()

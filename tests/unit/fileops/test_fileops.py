"""Tests for single-item filesystem mutation primitives."""

from __future__ import annotations

import errno
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from send2trash.exceptions import TrashPermissionError

from freefinder.errors import (
    ConflictError,
    FinderError,
    InvalidNameError,
    NotFoundError,
    PermissionDeniedError,
    translate_os_error,
)
from freefinder.fileops import FileOperations, validate_item_name


class ValidateItemNameTests(unittest.TestCase):
    def test_strips_and_accepts_plain_names(self) -> None:
        self.assertEqual(validate_item_name("  Report.pdf "), "Report.pdf")

    def test_rejects_empty_dot_and_separator_names(self) -> None:
        for name in ("", "   ", ".", "..", "a/b"):
            with self.subTest(name=name):
                with self.assertRaises(InvalidNameError):
                    validate_item_name(name)


class TranslateOsErrorTests(unittest.TestCase):
    def test_maps_errno_to_kinds(self) -> None:
        path = Path("/x/y")
        self.assertIsInstance(translate_os_error(PermissionError(errno.EACCES, "denied"), path), PermissionDeniedError)
        self.assertIsInstance(translate_os_error(FileNotFoundError(errno.ENOENT, "missing"), path), NotFoundError)
        self.assertIsInstance(translate_os_error(FileExistsError(errno.EEXIST, "exists"), path), ConflictError)
        generic = translate_os_error(OSError(errno.EIO, "I/O error"), path)
        self.assertIs(type(generic), FinderError)
        self.assertEqual(generic.path, path)
        self.assertIn("I/O error", str(generic))


class FileOperationsTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name).resolve()
        self.ops = FileOperations()

    def test_copy_file_and_tree(self) -> None:
        (self.root / "a.txt").write_text("alpha", encoding="utf-8")
        (self.root / "dir" / "nested").mkdir(parents=True)
        (self.root / "dir" / "nested" / "b.txt").write_text("beta", encoding="utf-8")
        dest = self.root / "dest"
        dest.mkdir()

        self.ops.copy(self.root / "a.txt", dest / "a.txt")
        self.ops.copy(self.root / "dir", dest / "dir")

        self.assertEqual((dest / "a.txt").read_text(encoding="utf-8"), "alpha")
        self.assertEqual((dest / "dir" / "nested" / "b.txt").read_text(encoding="utf-8"), "beta")
        self.assertTrue((self.root / "a.txt").exists())

    def test_move_removes_source(self) -> None:
        (self.root / "a.txt").write_text("alpha", encoding="utf-8")
        (self.root / "dest").mkdir()

        self.ops.move(self.root / "a.txt", self.root / "dest" / "a.txt")

        self.assertFalse((self.root / "a.txt").exists())
        self.assertTrue((self.root / "dest" / "a.txt").exists())

    def test_delete_file_and_folder(self) -> None:
        (self.root / "a.txt").write_text("alpha", encoding="utf-8")
        (self.root / "dir").mkdir()
        (self.root / "dir" / "b.txt").write_text("beta", encoding="utf-8")

        self.ops.delete(self.root / "a.txt")
        self.ops.delete(self.root / "dir")

        self.assertEqual(list(self.root.iterdir()), [])
        with self.assertRaises(NotFoundError):
            self.ops.delete(self.root / "a.txt")

    def test_create_directory_and_file_refuse_existing_names(self) -> None:
        self.ops.create_directory(self.root / "New Folder")
        self.ops.create_file(self.root / "untitled.txt")
        self.assertTrue((self.root / "New Folder").is_dir())
        self.assertTrue((self.root / "untitled.txt").is_file())

        with self.assertRaises(ConflictError):
            self.ops.create_directory(self.root / "New Folder")
        with self.assertRaises(ConflictError):
            self.ops.create_file(self.root / "untitled.txt")

    def test_rename_returns_new_path_and_detects_conflicts(self) -> None:
        (self.root / "a.txt").write_text("alpha", encoding="utf-8")
        (self.root / "b.txt").write_text("beta", encoding="utf-8")

        renamed = self.ops.rename(self.root / "a.txt", "c.txt")

        self.assertEqual(renamed, self.root / "c.txt")
        self.assertTrue(renamed.exists())
        with self.assertRaises(ConflictError):
            self.ops.rename(renamed, "b.txt")
        self.assertEqual(self.ops.rename(renamed, "c.txt"), renamed)

    def test_trash_delegates_to_send2trash(self) -> None:
        target = self.root / "a.txt"
        target.write_text("alpha", encoding="utf-8")
        with mock.patch("freefinder.fileops.send2trash") as send:
            self.ops.trash(target)
        send.assert_called_once_with(str(target))

    def test_trash_permission_problems_become_permission_denied(self) -> None:
        target = self.root / "a.txt"
        target.write_text("alpha", encoding="utf-8")
        with mock.patch("freefinder.fileops.send2trash", side_effect=TrashPermissionError(str(target))):
            with self.assertRaises(PermissionDeniedError):
                self.ops.trash(target)

    def test_exists_sees_dangling_symlinks(self) -> None:
        link = self.root / "dangling"
        try:
            link.symlink_to(self.root / "missing")
        except OSError:
            self.skipTest("symlinks unavailable")
        self.assertTrue(self.ops.exists(link))


if __name__ == "__main__":
    unittest.main()

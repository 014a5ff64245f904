"""Tests for entry listing, kind labels and directory-first sorting."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from freefinder.errors import FinderError, NotFoundError
from freefinder.file_model import (
    FileEntry,
    LocalDirectoryProvider,
    SortCriteria,
    SortField,
    is_trash_location,
    kind_label,
    list_directory,
    natural_key,
    sort_entries,
)
from freefinder.location import FilesystemLocation, NetworkRoot


def _entry(name: str, *, is_dir: bool = False, size: int = 0, mtime: int | None = None, kind: str = "Document") -> FileEntry:
    return FileEntry(
        location=FilesystemLocation(Path("/x") / name),
        name=name,
        is_directory=is_dir,
        byte_size=size,
        mtime_ns=mtime,
        kind=kind,
    )


def _names(entries: list[FileEntry]) -> list[str]:
    return [entry.name for entry in entries]


class FileEntryTests(unittest.TestCase):
    def test_equality_and_hash_use_location_only(self) -> None:
        first = _entry("a.txt", size=1)
        second = _entry("a.txt", size=99, kind="Other")
        self.assertEqual(first, second)
        self.assertEqual(len({first, second}), 1)
        self.assertNotEqual(first, _entry("b.txt"))


class SortingTests(unittest.TestCase):
    def test_natural_key_orders_digit_runs_numerically(self) -> None:
        names = ["file10", "File2", "file1"]
        self.assertEqual(sorted(names, key=natural_key), ["file1", "File2", "file10"])

    def test_directories_precede_files_for_every_field_and_direction(self) -> None:
        entries = [_entry("b.txt", size=5), _entry("zeta", is_dir=True), _entry("a.txt", size=9), _entry("alpha", is_dir=True)]
        for field in SortField:
            for ascending in (True, False):
                with self.subTest(field=field, ascending=ascending):
                    ordered = sort_entries(entries, SortCriteria(field, ascending))
                    self.assertEqual([entry.is_directory for entry in ordered], [True, True, False, False])

    def test_descending_inverts_the_whole_comparison(self) -> None:
        entries = [_entry("a", size=3), _entry("b", size=1), _entry("c", size=2)]
        self.assertEqual(_names(sort_entries(entries, SortCriteria(SortField.SIZE))), ["b", "c", "a"])
        self.assertEqual(_names(sort_entries(entries, SortCriteria(SortField.SIZE, ascending=False))), ["a", "c", "b"])

    def test_name_breaks_ties_within_field(self) -> None:
        entries = [_entry("item10", size=1), _entry("item2", size=1), _entry("Item1", size=1)]
        self.assertEqual(_names(sort_entries(entries, SortCriteria(SortField.SIZE))), ["Item1", "item2", "item10"])

    def test_date_and_kind_fields(self) -> None:
        entries = [_entry("new", mtime=30, kind="Python source"), _entry("old", mtime=10, kind="Markdown source"), _entry("none")]
        self.assertEqual(_names(sort_entries(entries, SortCriteria(SortField.DATE_MODIFIED))), ["none", "old", "new"])
        self.assertEqual(_names(sort_entries(entries, SortCriteria(SortField.KIND))), ["none", "old", "new"])

    def test_toggled_flips_same_field_and_resets_new_field(self) -> None:
        criteria = SortCriteria(SortField.NAME, True)
        self.assertEqual(criteria.toggled(SortField.NAME), SortCriteria(SortField.NAME, False))
        self.assertEqual(SortCriteria(SortField.NAME, False).toggled(SortField.SIZE), SortCriteria(SortField.SIZE, True))

    def test_sort_field_parse_accepts_dashes_and_case(self) -> None:
        self.assertIs(SortField.parse("Date-Modified"), SortField.DATE_MODIFIED)
        self.assertIsNone(SortField.parse("owner"))


class KindLabelTests(unittest.TestCase):
    def test_folders_and_packages(self) -> None:
        self.assertEqual(kind_label("docs", True, False), "Folder")
        self.assertEqual(kind_label("Safari.app", False, True), "Package")

    def test_source_files_use_lexer_names(self) -> None:
        self.assertEqual(kind_label("main.py", False, False), "Python source")

    def test_unknown_extension_and_no_extension(self) -> None:
        self.assertEqual(kind_label("archive.zzq", False, False), "ZZQ File")
        self.assertEqual(kind_label("LICENSE_NOEXT_zz", False, False), "Document")


class ListingTests(unittest.TestCase):
    def test_list_directory_hides_dotfiles_unless_requested(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "visible.txt").write_text("hello", encoding="utf-8")
            (root / ".hidden").write_text("x", encoding="utf-8")
            (root / "sub").mkdir()

            hidden_off = {entry.name for entry in list_directory(root, show_hidden=False)}
            hidden_on = {entry.name for entry in list_directory(root, show_hidden=True)}

            self.assertEqual(hidden_off, {"visible.txt", "sub"})
            self.assertEqual(hidden_on, {"visible.txt", "sub", ".hidden"})

    def test_entries_carry_metadata(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "notes.txt").write_text("hello", encoding="utf-8")
            (root / "Tool.app").mkdir()

            entries = {entry.name: entry for entry in list_directory(root, show_hidden=False)}

            notes = entries["notes.txt"]
            self.assertEqual(notes.location, FilesystemLocation(root / "notes.txt"))
            self.assertFalse(notes.is_directory)
            self.assertEqual(notes.byte_size, 5)
            self.assertIsNotNone(notes.mtime_ns)
            package = entries["Tool.app"]
            self.assertTrue(package.is_package)
            self.assertFalse(package.is_directory)
            self.assertEqual(package.kind, "Package")

    def test_provider_sorts_and_raises_typed_errors(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "b.txt").write_text("", encoding="utf-8")
            (root / "a").mkdir()
            provider = LocalDirectoryProvider()

            entries = provider.list_contents(FilesystemLocation(root), False, SortCriteria())
            self.assertEqual(_names(entries), ["a", "b.txt"])

            with self.assertRaises(NotFoundError):
                provider.list_contents(FilesystemLocation(root / "missing"), False, SortCriteria())
            with self.assertRaises(FinderError):
                provider.list_contents(NetworkRoot(), False, SortCriteria())

    @unittest.skipIf(not hasattr(os, "symlink"), "symlinks are required")
    def test_symlinked_folder_lists_as_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "real").mkdir()
            os.symlink(root / "real", root / "link")

            entries = {entry.name: entry for entry in list_directory(root, show_hidden=False)}

            self.assertTrue(entries["link"].is_directory)
            self.assertEqual(entries["link"].icon, "folder-symlink")

    def test_is_trash_location(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            trash = Path(tmp).resolve() / ".Trash"
            trash.mkdir()
            self.assertTrue(is_trash_location(FilesystemLocation(trash), (trash,)))
            self.assertFalse(is_trash_location(FilesystemLocation(trash.parent), (trash,)))
            self.assertFalse(is_trash_location(NetworkRoot(), (trash,)))


if __name__ == "__main__":
    unittest.main()

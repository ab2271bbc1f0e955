"""
Test reverse organization back to a flat directory.
"""

import asyncio
from datetime import datetime, timedelta

import pytest

from conftest import all_files, root_files
from weeksort import file_operations
from weeksort.core import TreeOrganizer, organize, reverse_organize
from weeksort.errors import DirectoryListingError, MoveError
from weeksort.file_operations import FileOperations


class TestReverseOrganize:
    """Test flattening the week folder hierarchy."""

    def test_round_trip(self, create_test_files):
        specs = [{"name": f"doc{i}.txt", "mtime": datetime(2023, 12, 20, 12) + timedelta(days=4 * i)}
                 for i in range(8)]
        root = create_test_files(specs)
        original = root_files(root)

        organize(root)
        assert root_files(root) == set()

        stats = reverse_organize(root)

        assert root_files(root) == original
        assert len(all_files(root)) == len(original)
        assert stats.get_moved() == len(original)

    def test_deeply_nested_file(self, create_test_files):
        root = create_test_files([{"name": "a/b/c/deep.txt"}])

        reverse_organize(root)

        assert (root / "deep.txt").read_text() == "test content for a/b/c/deep.txt"
        assert not (root / "a" / "b" / "c" / "deep.txt").exists()

    def test_empty_directory(self, tmp_path):
        stats = reverse_organize(tmp_path)

        assert list(tmp_path.iterdir()) == []
        assert stats.get_moved() == 0
        assert stats.get_scanned() == 1

    def test_emptied_folders_left_in_place(self, week_files):
        organize(week_files)
        reverse_organize(week_files)

        assert (week_files / "2024" / "May" / "week of 2024-05-12").is_dir()
        assert (week_files / "2024" / "May" / "week of 2024-05-19").is_dir()
        assert root_files(week_files) == {"report.txt", "notes.md", "photo.jpg"}

    def test_root_files_stay_put(self, create_test_files):
        root = create_test_files([
            {"name": "top.txt"},
            {"name": "2024/May/week of 2024-05-12/nested.txt"},
        ])

        stats = reverse_organize(root)

        assert root_files(root) == {"top.txt", "nested.txt"}
        assert stats.get_moved() == 1
        assert stats.get_skipped() == 1
        assert stats.get_scanned() == 4

    def test_prune_removes_emptied_folders(self, week_files):
        organize(week_files)

        stats = TreeOrganizer(prune_empty_dirs=True).reverse_organize(week_files)

        assert sorted(p.name for p in week_files.iterdir()) == ["notes.md", "photo.jpg", "report.txt"]
        assert stats.get_pruned() == 4

    def test_bounded_concurrency(self, create_test_files):
        root = create_test_files([{"name": f"d{i}/e{i}/f{i}.txt"} for i in range(10)])

        TreeOrganizer(max_concurrency=1).reverse_organize(root)

        assert root_files(root) == {f"f{i}.txt" for i in range(10)}


class TestReverseDryRun:

    def test_nothing_changes(self, create_test_files):
        root = create_test_files([{"name": "x/y/one.txt"}, {"name": "x/two.txt"}])
        before = all_files(root)

        stats = TreeOrganizer(dry_run=True, prune_empty_dirs=True).reverse_organize(root)

        assert all_files(root) == before
        assert stats.get_moved() == 2
        assert stats.get_pruned() == 0


class TestReverseFailures:

    def test_missing_root(self, tmp_path):
        with pytest.raises(DirectoryListingError):
            reverse_organize(tmp_path / "missing")

    def test_unlistable_subdirectory(self, create_test_files, monkeypatch):
        root = create_test_files([{"name": "ok.txt"}, {"name": "locked/inner/file.txt"}])
        real_scan = file_operations._scan

        def scan(directory):
            if directory.name == "inner":
                raise PermissionError(13, "Permission denied", str(directory))
            return real_scan(directory)
        monkeypatch.setattr(file_operations, "_scan", scan)

        with pytest.raises(DirectoryListingError) as excinfo:
            reverse_organize(root)
        assert excinfo.value.path.name == "inner"
        assert (root / "locked" / "inner" / "file.txt").exists()

    def test_move_failure(self, create_test_files, monkeypatch):
        root = create_test_files([{"name": "a/one.txt"}, {"name": "b/c/two.txt"}])

        def fail(source, dest):
            raise OSError(18, "Invalid cross-device link", str(source))
        monkeypatch.setattr(file_operations.os, "rename", fail)

        with pytest.raises(MoveError):
            reverse_organize(root)


class TestPrune:

    def test_keeps_non_empty_folders(self, create_test_files):
        root = create_test_files([{"name": "keep/me.txt"}])
        (root / "empty" / "nested").mkdir(parents=True)

        pruned = asyncio.run(FileOperations().prune_empty_directories(root))

        assert pruned == 2
        assert (root / "keep" / "me.txt").is_file()
        assert not (root / "empty").exists()
        assert root.is_dir()

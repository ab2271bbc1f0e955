"""
pytest configuration and fixtures for weeksort tests.
"""

import io
import os
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Set

import pytest


@dataclass
class CliResult:
    """Result from running CLI command."""
    exit_code: int
    output: str
    error: str


@pytest.fixture
def cli_runner():
    """Create a CLI runner that captures output."""

    def run_cli(*args):
        """Run weeksort CLI with given arguments.

        Returns:
            CliResult with exit_code, output, and error
        """
        from weeksort.cli import main

        old_stdout = sys.stdout
        old_stderr = sys.stderr
        stdout = io.StringIO()
        stderr = io.StringIO()
        old_argv = sys.argv

        try:
            sys.stdout = stdout
            sys.stderr = stderr
            sys.argv = ['weeksort'] + [str(a) for a in args]

            exit_code = main()

            return CliResult(
                exit_code=exit_code,
                output=stdout.getvalue(),
                error=stderr.getvalue()
            )
        except SystemExit as e:
            # argparse exits on usage errors
            return CliResult(
                exit_code=e.code if e.code is not None else 0,
                output=stdout.getvalue(),
                error=stderr.getvalue()
            )
        finally:
            sys.stdout = old_stdout
            sys.stderr = old_stderr
            sys.argv = old_argv

    return run_cli


def set_mtime(file_path: Path, mtime: datetime) -> None:
    """Set access and modification time of a file."""
    timestamp = mtime.timestamp()
    os.utime(file_path, (timestamp, timestamp))


@pytest.fixture
def create_test_files(tmp_path):
    """Helper to create test files with specific properties."""

    def create_files(file_specs: List[dict]) -> Path:
        """Create test files based on specifications.

        Args:
            file_specs: List of dicts with keys:
                - name: filename, may include sub-directories
                - content: file content (optional)
                - mtime: modification time as datetime (optional)

        Returns:
            Path to directory containing created files
        """
        test_dir = tmp_path / "test_files"
        test_dir.mkdir(exist_ok=True)

        for spec in file_specs:
            file_path = test_dir / spec['name']
            file_path.parent.mkdir(parents=True, exist_ok=True)

            content = spec.get('content', f"test content for {spec['name']}")
            if isinstance(content, str):
                file_path.write_text(content)
            else:
                file_path.write_bytes(content)

            if 'mtime' in spec:
                set_mtime(file_path, spec['mtime'])

        return test_dir

    return create_files


@pytest.fixture
def assert_file_structure():
    """Helper to assert expected file structure."""

    def check_structure(base_path: Path, expected_structure: dict):
        """Assert that directory has expected structure.

        Args:
            base_path: Root directory to check
            expected_structure: Dict describing expected structure
                e.g., {
                    "2024": {
                        "May": {
                            "week of 2024-05-12": ["a.txt", "b.txt"],
                        }
                    }
                }
        """
        def check_level(path: Path, structure: dict):
            for name, value in structure.items():
                item_path = path / name
                assert item_path.exists(), f"Expected {item_path} to exist"

                if isinstance(value, dict):
                    assert item_path.is_dir(), f"Expected {item_path} to be a directory"
                    check_level(item_path, value)
                elif isinstance(value, list):
                    assert item_path.is_dir(), f"Expected {item_path} to be a directory"
                    actual_files = sorted([f.name for f in item_path.iterdir() if f.is_file()])
                    expected_files = sorted(value)
                    assert actual_files == expected_files, \
                        f"Expected files {expected_files} in {item_path}, got {actual_files}"

        check_level(base_path, expected_structure)

    return check_structure


def root_files(directory: Path) -> Set[str]:
    """Names of the regular files directly inside directory."""
    return {p.name for p in directory.iterdir() if p.is_file()}


def all_files(directory: Path) -> List[Path]:
    """Every regular file below directory, relative to it."""
    return sorted(p.relative_to(directory) for p in directory.rglob("*") if p.is_file())


@pytest.fixture
def week_files(create_test_files):
    """Three files: two in the week of 2024-05-12, one in the next week."""
    return create_test_files([
        {"name": "report.txt", "mtime": datetime(2024, 5, 15, 12, 0)},
        {"name": "notes.md", "mtime": datetime(2024, 5, 16, 9, 30)},
        {"name": "photo.jpg", "mtime": datetime(2024, 5, 22, 18, 45)},
    ])

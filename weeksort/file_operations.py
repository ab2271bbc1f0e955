"""
Asynchronous filesystem primitives for weeksort.

Every call runs in a worker thread through ``asyncio.to_thread`` so the event
loop stays free while the OS does the I/O. Failures are wrapped in the
matching ``weeksort.errors`` exception.
"""

import asyncio
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, TypeVar

from .constants import get_logger
from .errors import (ConfigurationError, DirectoryCreationError, DirectoryListingError,
                     MetadataReadError, MoveError)

T = TypeVar("T")


@dataclass(frozen=True)
class DirectoryEntry:
    """One child of a listed directory."""
    path: Path
    is_file: bool
    is_dir: bool


def _scan(directory: Path) -> List[DirectoryEntry]:
    with os.scandir(directory) as it:
        return [DirectoryEntry(Path(entry.path), entry.is_file(), entry.is_dir())
                for entry in it]


def _stat_mtime(file_path: Path) -> float:
    return os.stat(file_path).st_mtime


def _make_directory(directory: Path) -> None:
    directory.mkdir(exist_ok=True)


class FileOperations:
    """Filesystem calls with dry-run support and an optional concurrency cap."""

    def __init__(self, dry_run: bool = False, max_concurrency: Optional[int] = None):
        if max_concurrency is not None and max_concurrency < 1:
            raise ConfigurationError(f"Concurrency limit must be positive: {max_concurrency}")
        self.dry_run = dry_run
        self.max_concurrency = max_concurrency
        self.logger = get_logger()
        self._limit: Optional[asyncio.Semaphore] = None
        self._directories: Dict[Path, "asyncio.Task[int]"] = {}

    def reset(self) -> None:
        """Forget per-run state before starting on a new event loop."""
        self._limit = None
        self._directories = {}

    async def _run(self, func: Callable[..., T], *args) -> T:
        """Run a blocking call off the event loop, honoring the concurrency cap."""
        if self.max_concurrency is None:
            return await asyncio.to_thread(func, *args)
        if self._limit is None:
            self._limit = asyncio.Semaphore(self.max_concurrency)
        async with self._limit:
            return await asyncio.to_thread(func, *args)

    async def list_directory(self, directory: Path) -> List[DirectoryEntry]:
        """List the immediate children of a directory."""
        try:
            return await self._run(_scan, directory)
        except OSError as e:
            raise DirectoryListingError(directory, e) from e

    async def read_mtime(self, file_path: Path) -> float:
        """Return the modification time of a file as a POSIX timestamp."""
        try:
            return await self._run(_stat_mtime, file_path)
        except OSError as e:
            raise MetadataReadError(file_path, e) from e

    async def ensure_directory(self, directory: Path) -> int:
        """Create a directory and any missing parents.

        Each folder gets one shared creation task per run, so concurrent
        requests for the same folder, or for siblings under a new parent,
        never count it twice. Returns how many folders this call created.
        """
        task = self._directories.get(directory)
        if task is not None:
            await task
            return 0

        task = asyncio.ensure_future(self._create_directory(directory))
        self._directories[directory] = task
        return await task

    async def _create_directory(self, directory: Path) -> int:
        if await self._run(directory.is_dir):
            return 0

        created = 0
        if directory.parent != directory:
            created += await self.ensure_directory(directory.parent)

        if self.dry_run:
            self.logger.info(f"[dry-run] Create folder {directory}")
            return created + 1

        try:
            await self._run(_make_directory, directory)
        except OSError as e:
            raise DirectoryCreationError(directory, e) from e
        self.logger.debug(f"Created folder {directory}")
        return created + 1

    async def move_file(self, source: Path, dest: Path) -> None:
        """Rename a file to its destination path."""
        if self.dry_run:
            self.logger.info(f"[dry-run] {source} -> {dest}")
            return

        try:
            await self._run(os.rename, source, dest)
        except OSError as e:
            raise MoveError(source, e, dest=dest) from e
        self.logger.info(f"{source} -> {dest}")

    async def prune_empty_directories(self, root: Path) -> int:
        """Remove empty folders below root, deepest first. Root is kept."""
        if self.dry_run:
            return 0
        return await self._run(self._prune, root)

    def _prune(self, root: Path) -> int:
        pruned = 0
        for thisdir, subdirs, _ in os.walk(root, topdown=False):
            for thissubdir in subdirs:
                subdir = Path(thisdir) / thissubdir
                try:
                    os.rmdir(subdir)
                except OSError:
                    # Not empty
                    continue
                self.logger.debug(f"Removed empty folder {subdir}")
                pruned += 1
        return pruned

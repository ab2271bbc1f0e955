"""
Core organize / reverse functionality.
"""

import asyncio
from datetime import tzinfo
from pathlib import Path
from typing import Awaitable, Iterable, Optional, Union

from .bucketing import BucketPath, bucket_path, resolve_timezone
from .constants import get_logger
from .errors import TaskFailedError, WeeksortError
from .file_operations import FileOperations
from .progress import ProgressContext
from .stats import StatsManager

PathLike = Union[str, Path]


async def join_all(aws: Iterable[Awaitable[None]]) -> None:
    """Run awaitables as concurrent tasks and wait for all of them.

    The first failure cancels the remaining tasks and is re-raised.
    Unexpected exceptions are wrapped in TaskFailedError.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    if not tasks:
        return

    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        raise

    for task in pending:
        task.cancel()
    if pending:
        await asyncio.wait(pending)

    error = None
    for task in tasks:
        if task.cancelled():
            continue
        exc = task.exception()
        if exc is not None and error is None:
            error = exc

    if error is None:
        return
    if isinstance(error, WeeksortError):
        raise error
    raise TaskFailedError(f"Task failed: {error!r}") from error


class TreeOrganizer:
    """Moves files into week buckets and back out again."""

    def __init__(self, dry_run: bool = False, timezone: Optional[str] = None,
                 max_concurrency: Optional[int] = None, prune_empty_dirs: bool = False):
        self.dry_run = dry_run
        self.timezone = timezone
        self.tz: Optional[tzinfo] = resolve_timezone(timezone)
        self.prune_empty_dirs = prune_empty_dirs
        self.logger = get_logger()
        self.file_ops = FileOperations(dry_run=dry_run, max_concurrency=max_concurrency)
        self.stats_manager = StatsManager()
        self.progress_ctx = ProgressContext()

    def bucket_for(self, mod_time: float) -> BucketPath:
        """Bucket a modification time in this organizer's timezone."""
        return bucket_path(mod_time, self.tz)

    def organize(self, root: PathLike,
                 progress_ctx: Optional[ProgressContext] = None) -> StatsManager:
        """Move the files directly inside root into week buckets."""
        return asyncio.run(self.organize_async(root, progress_ctx))

    def reverse_organize(self, root: PathLike,
                         progress_ctx: Optional[ProgressContext] = None) -> StatsManager:
        """Move every file below root back up into root."""
        return asyncio.run(self.reverse_organize_async(root, progress_ctx))

    def _start_run(self, progress_ctx: Optional[ProgressContext]) -> None:
        self.stats_manager = StatsManager()
        self.progress_ctx = progress_ctx or ProgressContext()
        self.file_ops.reset()

    async def organize_async(self, root: PathLike,
                             progress_ctx: Optional[ProgressContext] = None) -> StatsManager:
        root = Path(root)
        self._start_run(progress_ctx)
        self.logger.info(f"Organizing {root}{' (dry run)' if self.dry_run else ''}")

        entries = await self.file_ops.list_directory(root)
        self.stats_manager.increment_scanned()

        # Sub-directories are left alone
        files = [entry.path for entry in entries if entry.is_file]
        self.progress_ctx.add_total(len(files))
        await join_all(self._organize_file(root, file_path) for file_path in files)

        self.logger.info(f"Organized {self.stats_manager.get_moved()} files in {root}")
        return self.stats_manager

    async def _organize_file(self, root: Path, file_path: Path) -> None:
        mod_time = await self.file_ops.read_mtime(file_path)
        bucket = self.bucket_for(mod_time)
        dest_dir = root / bucket.relative_path

        self.stats_manager.add_created(await self.file_ops.ensure_directory(dest_dir))

        await self.file_ops.move_file(file_path, dest_dir / file_path.name)
        self.stats_manager.increment_moved()
        self.progress_ctx.update(f"Organized: {file_path.name}")
        self.progress_ctx.advance()

    async def reverse_organize_async(self, root: PathLike,
                                     progress_ctx: Optional[ProgressContext] = None) -> StatsManager:
        root = Path(root)
        self._start_run(progress_ctx)
        self.logger.info(f"Flattening {root}{' (dry run)' if self.dry_run else ''}")

        await self._reverse_directory(root, root)

        if self.prune_empty_dirs:
            self.stats_manager.add_pruned(await self.file_ops.prune_empty_directories(root))

        self.logger.info(f"Moved {self.stats_manager.get_moved()} files back into {root}")
        return self.stats_manager

    async def _reverse_directory(self, directory: Path, target: Path) -> None:
        entries = await self.file_ops.list_directory(directory)
        self.stats_manager.increment_scanned()

        jobs = []
        for entry in entries:
            if entry.is_file:
                jobs.append(self._flatten_file(entry.path, target))
            elif entry.is_dir:
                jobs.append(self._reverse_directory(entry.path, target))

        self.progress_ctx.add_total(sum(1 for entry in entries if entry.is_file))
        await join_all(jobs)

    async def _flatten_file(self, file_path: Path, target: Path) -> None:
        dest = target / file_path.name
        if file_path.parent == target:
            self.stats_manager.increment_skipped()
        else:
            await self.file_ops.move_file(file_path, dest)
            self.stats_manager.increment_moved()
            self.progress_ctx.update(f"Moved: {file_path.name}")
        self.progress_ctx.advance()


def organize(root: PathLike, **kwargs) -> StatsManager:
    """Organize root into week buckets with a one-off TreeOrganizer."""
    return TreeOrganizer(**kwargs).organize(root)


def reverse_organize(root: PathLike, **kwargs) -> StatsManager:
    """Flatten root with a one-off TreeOrganizer."""
    return TreeOrganizer(**kwargs).reverse_organize(root)

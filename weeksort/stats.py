"""
Statistics tracking for organize and reverse runs.
"""

from typing import Dict


class StatsManager:
    """Counters for a single weeksort run.

    Only touched from the event loop thread, so no locking is needed.
    """

    def __init__(self):
        self._stats = {
            'files_moved': 0,
            'files_skipped': 0,
            'directories_scanned': 0,
            'directories_created': 0,
            'directories_pruned': 0,
        }

    def increment_moved(self) -> None:
        """Increment when a file is moved (or planned, in dry-run mode)."""
        self._stats['files_moved'] += 1

    def increment_skipped(self) -> None:
        """Increment when a file is already at its destination."""
        self._stats['files_skipped'] += 1

    def increment_scanned(self) -> None:
        self._stats['directories_scanned'] += 1

    def add_created(self, count: int) -> None:
        self._stats['directories_created'] += count

    def add_pruned(self, count: int) -> None:
        self._stats['directories_pruned'] += count

    def get_stats(self) -> Dict[str, int]:
        """Get a copy of current statistics."""
        return self._stats.copy()

    def get_moved(self) -> int:
        return self._stats['files_moved']

    def get_skipped(self) -> int:
        return self._stats['files_skipped']

    def get_scanned(self) -> int:
        return self._stats['directories_scanned']

    def get_created(self) -> int:
        return self._stats['directories_created']

    def get_pruned(self) -> int:
        return self._stats['directories_pruned']

"""Progress bar shared between the CLI and the tree organizer.

The bar starts with no total. Organize adds one step per file once the root
is listed; reverse mode adds steps as each directory listing comes back.
"""

from typing import Optional
from rich.progress import Progress, TaskID


class ProgressContext:
    """A rich progress task, or a no-op when the organizer runs without a CLI."""

    def __init__(self, progress: Optional[Progress] = None, task: Optional[TaskID] = None):
        self.progress = progress
        self.task = task

    @property
    def is_active(self) -> bool:
        """Check if progress tracking is active."""
        return self.progress is not None and self.task is not None

    def update(self, description: str) -> None:
        """Update progress description if tracking is active."""
        if self.is_active:
            self.progress.update(self.task, description=description)

    def add_total(self, steps: int) -> None:
        """Grow the expected total as more work is discovered."""
        if self.is_active and steps:
            task = next(t for t in self.progress.tasks if t.id == self.task)
            current = task.total or 0
            self.progress.update(self.task, total=current + steps)

    def advance(self, steps: int = 1) -> None:
        """Advance progress by given number of steps."""
        if self.is_active:
            self.progress.advance(self.task, steps)

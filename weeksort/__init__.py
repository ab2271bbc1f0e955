"""
weeksort - Organize files into year/month/week folders by modification time.

Files directly inside a directory are moved into
``<year>/<MonthName>/week of <YYYY-MM-DD>`` folders, where the date is the
Sunday starting the week the file was last modified. ``--reverse`` moves
everything back out into the directory.
"""

__version__ = "1.0.0"


# Public API
from .bucketing import BucketPath, bucket_path, week_start
from .cli import main
from .config import Config
from .core import TreeOrganizer, organize, reverse_organize
from .file_operations import FileOperations

__all__ = [ "main", "Config", "BucketPath", "bucket_path", "week_start", "TreeOrganizer",
            "organize", "reverse_organize", "FileOperations" ]

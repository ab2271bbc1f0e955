"""
Map file modification times to week-bucket folder paths.

A bucket is ``<year>/<MonthName>/week of <YYYY-MM-DD>`` where the date is the
Sunday that starts the week containing the modification time. Year and month
name come from the modification date itself, so a file modified early in a
month can land in a week folder dated in the previous month, e.g.
2024-03-01 -> ``2024/March/week of 2024-02-25``.
"""

import zoneinfo
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from pathlib import Path
from typing import Optional, Tuple, Union

from .constants import MONTH_NAMES, WEEK_DATE_FORMAT, WEEK_FOLDER_PREFIX
from .errors import ConfigurationError

Timestamp = Union[float, int, datetime]

LOCAL_TIMEZONE_NAMES = ("", "local")


@dataclass(frozen=True)
class BucketPath:
    """Relative destination folder for a file."""
    year: int
    month_name: str
    week_start: date

    @property
    def week_folder(self) -> str:
        return f"{WEEK_FOLDER_PREFIX}{self.week_start.strftime(WEEK_DATE_FORMAT)}"

    @property
    def parts(self) -> Tuple[str, str, str]:
        return (f"{self.year:04d}", self.month_name, self.week_folder)

    @property
    def relative_path(self) -> Path:
        return Path(*self.parts)

    def __str__(self) -> str:
        return "/".join(self.parts)


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """Turn a timezone name into a tzinfo; None means the system local zone."""
    if name is None or name.strip().lower() in LOCAL_TIMEZONE_NAMES:
        return None
    try:
        return zoneinfo.ZoneInfo(name.strip())
    except (zoneinfo.ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Unknown timezone: {name}") from e


def week_start(day: date) -> date:
    """Return the Sunday on or before the given date."""
    # date.weekday() has Monday=0 .. Sunday=6; shift so Sunday=0
    days_since_sunday = (day.weekday() + 1) % 7
    return day - timedelta(days=days_since_sunday)


def to_local_datetime(mod_time: Timestamp, tz: Optional[tzinfo] = None) -> datetime:
    """Convert an mtime or datetime to a datetime in the bucketing zone.

    Naive datetimes are assumed to already be in the bucketing zone.
    """
    if isinstance(mod_time, datetime):
        if mod_time.tzinfo is None:
            return mod_time
        return mod_time.astimezone(tz) if tz else mod_time.astimezone()
    if tz is None:
        return datetime.fromtimestamp(mod_time)
    return datetime.fromtimestamp(mod_time, tz=tz)


def bucket_path(mod_time: Timestamp, tz: Optional[tzinfo] = None) -> BucketPath:
    """Compute the bucket folder for a modification time."""
    moment = to_local_datetime(mod_time, tz)
    day = moment.date()
    return BucketPath(
        year=day.year,
        month_name=MONTH_NAMES[day.month - 1],
        week_start=week_start(day),
    )

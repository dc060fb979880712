"""Calendar buckets for report aggregation."""

import enum
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

WEEK_LABEL_PREFIX = "Week of "

_WEEK_RE = re.compile(r"Week of (\d{4})-(\d{2})-(\d{2})")
_MONTH_RE = re.compile(r"([A-Z][a-z]+) (\d{4})")
_YEAR_RE = re.compile(r"(\d{4})")


class Timeframe(str, enum.Enum):
    """Granularity of report buckets."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ANNUAL = "annual"


@dataclass(frozen=True)
class PeriodKey:
    """A calendar bucket: its display label and the local date it starts on."""

    label: str
    start: date


def local_date(timestamp_ms: int) -> date:
    """Date of a millisecond timestamp on the local system calendar."""
    return datetime.fromtimestamp(timestamp_ms / 1000).date()


def period_key(timestamp_ms: int, timeframe: Timeframe) -> PeriodKey:
    """
    Map a timestamp to its calendar bucket.

    Weeks start on Sunday. Months and years follow calendar boundaries.
    """
    day = local_date(timestamp_ms)

    if timeframe == Timeframe.WEEKLY:
        # date.weekday() is 0 for Monday, so Sunday is 6
        start = day - timedelta(days=(day.weekday() + 1) % 7)
        return PeriodKey(f"{WEEK_LABEL_PREFIX}{start.isoformat()}", start)

    if timeframe == Timeframe.MONTHLY:
        start = day.replace(day=1)
        return PeriodKey(f"{MONTH_NAMES[start.month - 1]} {start.year}", start)

    start = date(day.year, 1, 1)
    return PeriodKey(str(day.year), start)


def parse_period_label(label: str) -> date | None:
    """Recover the start date of a bucket from its label, or None if unrecognized."""
    try:
        match = _WEEK_RE.fullmatch(label)
        if match:
            return date(int(match[1]), int(match[2]), int(match[3]))

        match = _MONTH_RE.fullmatch(label)
        if match and match[1] in MONTH_NAMES:
            return date(int(match[2]), MONTH_NAMES.index(match[1]) + 1, 1)

        match = _YEAR_RE.fullmatch(label)
        if match:
            return date(int(match[1]), 1, 1)
    except ValueError:
        return None

    return None

"""Builders for test records."""

from datetime import datetime

from reports.records import ScoreRecord

STORAGE_KEY = "ecoBrowseReports"


def local_ms(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> int:
    """Milliseconds since epoch of a wall-clock time on the local calendar."""
    return int(datetime(year, month, day, hour, minute).timestamp() * 1000)


def record(url: str, score, year: int = 2024, month: int = 7, day: int = 21, hour: int = 12) -> ScoreRecord:
    return ScoreRecord(timestamp=local_ms(year, month, day, hour), website_url=url, score=score)

"""Groups score records into calendar periods and summarizes each one."""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass

from reports.periods import Timeframe, parse_period_label, period_key
from reports.records import ScoreRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SiteScore:
    """A website and its score on the 0-100 scale."""

    url: str
    score: float

    @property
    def label(self) -> str:
        return f"{self.url} ({round_half_up(self.score)})"


@dataclass(frozen=True)
class PeriodSummary:
    """Aggregate statistics over every record in one calendar period."""

    period: str
    total_visits: int
    average_score: float  # 0-100, higher is better
    best_site: SiteScore
    worst_site: SiteScore


@dataclass
class _Bucket:
    count: int
    total: float
    best: ScoreRecord
    worst: ScoreRecord

    def add(self, record: ScoreRecord) -> None:
        self.count += 1
        self.total += record.score
        # Strict comparisons keep the first record seen on ties
        if record.score > self.best.score:
            self.best = record
        if record.score < self.worst.score:
            self.worst = record


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.floor(value + 0.5)) if value >= 0 else -int(math.floor(-value + 0.5))


def is_valid_score(score: object) -> bool:
    """True for a finite real number in [0, 1]. Booleans are not scores."""
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return False
    return math.isfinite(score) and 0.0 <= score <= 1.0


def aggregate(records: Iterable[ScoreRecord], timeframe: Timeframe) -> list[PeriodSummary]:
    """
    Summarize records per calendar period, most recent period first.

    Records with an invalid score are skipped. Records are scanned in the
    order given, which decides best/worst ties. The result depends only on
    the arguments.
    """
    timeframe = Timeframe(timeframe)
    buckets: dict[str, _Bucket] = {}

    for record in records:
        if not is_valid_score(record.score):
            logger.debug(f"Skipping record with invalid score: {record!r}")
            continue

        key = period_key(record.timestamp, timeframe)
        bucket = buckets.get(key.label)
        if bucket is None:
            buckets[key.label] = _Bucket(count=1, total=record.score, best=record, worst=record)
        else:
            bucket.add(record)

    summaries = [
        PeriodSummary(
            period=label,
            total_visits=bucket.count,
            average_score=(bucket.total / bucket.count) * 100,
            best_site=SiteScore(bucket.best.website_url, bucket.best.score * 100),
            worst_site=SiteScore(bucket.worst.website_url, bucket.worst.score * 100),
        )
        for label, bucket in buckets.items()
    ]
    return _sort_recent_first(summaries)


def _sort_recent_first(summaries: list[PeriodSummary]) -> list[PeriodSummary]:
    starts = {summary.period: parse_period_label(summary.period) for summary in summaries}

    if all(start is not None for start in starts.values()):
        return sorted(summaries, key=lambda s: starts[s.period], reverse=True)

    # Labels are built by period_key, so reaching this is a bug
    unparsed = [label for label, start in starts.items() if start is None]
    logger.error(f"Could not parse period labels {unparsed}; sorting by label")
    return sorted(summaries, key=lambda s: s.period, reverse=True)

"""EcoBrowse reports package."""

from reports.aggregator import PeriodSummary, SiteScore, aggregate
from reports.exporter import ReportDocument, export_report
from reports.notifier import (
    ChangeEvent,
    ChangeKind,
    ChangeNotifier,
    InMemoryChangeNotifier,
    RedisChangeNotifier,
    build_notifier,
)
from reports.periods import PeriodKey, Timeframe, period_key
from reports.records import ScoreRecord
from reports.store import LoadResult, ScoreRecordStore
from reports.view import ReportView

__all__ = [
    "PeriodSummary",
    "SiteScore",
    "aggregate",
    "ReportDocument",
    "export_report",
    "ChangeEvent",
    "ChangeKind",
    "ChangeNotifier",
    "InMemoryChangeNotifier",
    "RedisChangeNotifier",
    "build_notifier",
    "PeriodKey",
    "Timeframe",
    "period_key",
    "ScoreRecord",
    "LoadResult",
    "ScoreRecordStore",
    "ReportView",
]

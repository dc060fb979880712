"""Renders period summaries into a downloadable CSV report."""

import csv
import io
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from config import settings
from exceptions import EmptyReportError
from reports.aggregator import PeriodSummary, round_half_up
from reports.periods import Timeframe

logger = logging.getLogger(__name__)

REPORT_COLUMNS = [
    "Period",
    "Visits",
    "Avg. Score",
    "Best Site (Score)",
    "Worst Site (Score)",
]

SCORE_POLARITY_NOTE = (
    "Note: Scores range from 0 (worst) to 100 (best). "
    "Higher scores indicate better eco-efficiency."
)

CSV_MEDIA_TYPE = "text/csv"


@dataclass(frozen=True)
class ReportDocument:
    """A rendered report ready to be downloaded."""

    filename: str
    content: bytes
    media_type: str = CSV_MEDIA_TYPE


def report_filename(timeframe: Timeframe, generated_at: datetime) -> str:
    return f"EcoBrowse_Report_{timeframe.value}_{generated_at.date().isoformat()}.csv"


def report_rows(summaries: Sequence[PeriodSummary]) -> list[list[str]]:
    """Table body in column order, scores rounded to whole numbers."""
    return [
        [
            summary.period,
            str(summary.total_visits),
            str(round_half_up(summary.average_score)),
            summary.best_site.label,
            summary.worst_site.label,
        ]
        for summary in summaries
    ]


def export_report(
    summaries: Sequence[PeriodSummary],
    timeframe: Timeframe,
    generated_at: datetime | None = None,
) -> ReportDocument:
    """
    Render summaries as a CSV report.

    The document carries a title, the timeframe, the generation date, the
    table and a note on score polarity.

    Raises:
        EmptyReportError: if there are no summaries to export
    """
    if not summaries:
        raise EmptyReportError("Cannot export an empty report")

    timeframe = Timeframe(timeframe)
    generated_at = generated_at or datetime.now().astimezone()

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow([settings.report_title])
    writer.writerow(["Timeframe", timeframe.value.capitalize()])
    writer.writerow(["Generated on", generated_at.date().isoformat()])
    writer.writerow([])
    writer.writerow(REPORT_COLUMNS)
    writer.writerows(report_rows(summaries))
    writer.writerow([])
    writer.writerow([SCORE_POLARITY_NOTE])

    filename = report_filename(timeframe, generated_at)
    logger.info(f"Exported {len(summaries)} {timeframe.value} period(s) to {filename}")

    return ReportDocument(filename=filename, content=buffer.getvalue().encode("utf-8"))

"""Score history and report endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from api.dependencies import get_report_view
from api.schemas import (
    ClearResponse,
    PeriodSummaryResponse,
    RecordListResponse,
    ReportResponse,
    ScoreRecordResponse,
)
from exceptions import EmptyReportError, StoreError
from reports.periods import Timeframe
from reports.view import ReportView

router = APIRouter(tags=["Reports"])


@router.get(
    "/records",
    response_model=RecordListResponse,
    summary="List score history",
    description="Reload the score history from storage, newest first.",
)
async def list_records(view: ReportView = Depends(get_report_view)) -> RecordListResponse:
    """An unreadable history is reported in `error` alongside the last good records."""
    records = await view.refresh()
    return RecordListResponse(
        records=[ScoreRecordResponse.from_record(r) for r in records],
        count=len(records),
        error=str(view.last_error) if view.last_error else None,
    )


@router.delete(
    "/records",
    response_model=ClearResponse,
    summary="Clear score history",
    description="Permanently delete every stored score record.",
)
async def clear_records(view: ReportView = Depends(get_report_view)) -> ClearResponse:
    try:
        await view.clear_all()
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Could not remove report data from storage: {e}",
        )
    return ClearResponse()


@router.get(
    "/reports",
    response_model=ReportResponse,
    summary="Get aggregated report",
    description="Visits, average score and best/worst sites per week, month or year.",
)
async def get_report(
    timeframe: Timeframe = Timeframe.WEEKLY,
    view: ReportView = Depends(get_report_view),
) -> ReportResponse:
    summaries = view.summaries(timeframe)
    return ReportResponse(
        timeframe=timeframe.value,
        periods=[PeriodSummaryResponse.from_summary(s) for s in summaries],
        count=len(summaries),
    )


@router.get(
    "/reports/export",
    summary="Download report",
    description="Download the aggregated report as a CSV document.",
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_report(
    timeframe: Timeframe = Timeframe.WEEKLY,
    view: ReportView = Depends(get_report_view),
) -> Response:
    try:
        document = view.export(timeframe)
    except EmptyReportError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No data: cannot download an empty report.",
        )

    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )

"""Health check endpoint."""

from fastapi import APIRouter, Depends

from api.dependencies import get_report_view
from api.schemas import HealthResponse
from reports.view import ReportView

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check that the service is running and the score history is readable.",
)
async def health_check(view: ReportView = Depends(get_report_view)) -> HealthResponse:
    result = await view.store.load()
    if result.ok:
        return HealthResponse()
    return HealthResponse(status="degraded", storage_error=str(result.error))

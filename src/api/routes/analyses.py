"""Analysis API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_analysis_service
from api.schemas import (
    AnalysisQueuedResponse,
    AnalyzeRequest,
    AnalyzeResponse,
    QueueAnalyzeRequest,
    ScoreRecordResponse,
    SuggestionResponse,
)
from exceptions import AnalysisError
from reports.aggregator import round_half_up
from services.analysis import AnalysisService
from worker.tasks import analyze_website

router = APIRouter(prefix="/analyses", tags=["Analyses"])


@router.post(
    "",
    response_model=AnalyzeResponse,
    summary="Analyze a website",
    description="Score a website, add the result to the history and return suggestions.",
)
async def analyze(
    request: AnalyzeRequest,
    service: AnalysisService = Depends(get_analysis_service),
) -> AnalyzeResponse:
    """
    Run an analysis and wait for it.

    A failure to save the score is reported in the response body; the score
    itself is still returned.
    """
    try:
        outcome = await service.analyze(request.url)
    except AnalysisError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Could not analyze {e.url}. Please check the URL or try again. ({e.reason})",
        )

    return AnalyzeResponse(
        record=ScoreRecordResponse.from_record(outcome.record),
        score_percent=round_half_up(outcome.record.score * 100),
        notes=outcome.notes,
        metrics=outcome.metrics,
        suggestions=[SuggestionResponse(**s.to_dict()) for s in outcome.suggestions],
        stored=outcome.stored,
        store_error=outcome.store_error,
    )


@router.post(
    "/queue",
    response_model=AnalysisQueuedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Queue a website analysis",
    description="Queue an analysis in the background worker. Returns immediately.",
)
async def queue_analysis(request: QueueAnalyzeRequest) -> AnalysisQueuedResponse:
    """The worker stores the record and publishes the change when it finishes."""
    url = str(request.url)
    task = analyze_website.delay(url)
    return AnalysisQueuedResponse(task_id=task.id, url=url)

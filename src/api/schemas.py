"""Pydantic schemas for API request/response validation."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, HttpUrl

from reports.aggregator import PeriodSummary, round_half_up
from reports.records import ScoreRecord


# =============================================================================
# Request Schemas (what clients send to us)
# =============================================================================


class AnalyzeRequest(BaseModel):
    """Request body for analyzing a website."""

    url: str = Field(
        ...,
        min_length=1,
        description="The website to analyze; https:// is assumed when no scheme is given",
        examples=["example.com"],
    )


class QueueAnalyzeRequest(BaseModel):
    """Request body for queueing an analysis in the background worker."""

    url: HttpUrl = Field(
        ...,
        description="The URL of the website to analyze",
        examples=["https://example.com"],
    )


# =============================================================================
# Response Schemas (what we send back to clients)
# =============================================================================


class ScoreRecordResponse(BaseModel):
    """A stored score observation."""

    timestamp: int
    recorded_at: datetime = Field(
        ...,
        description=(
            "The timestamp as a UTC datetime. Report periods use the server's local "
            "calendar, so a record near midnight may fall in a period whose date differs"
        ),
    )
    website_url: str
    score: float = Field(..., description="Eco-efficiency, 0 (worst) to 1 (best)")

    @classmethod
    def from_record(cls, record: ScoreRecord) -> "ScoreRecordResponse":
        return cls(
            timestamp=record.timestamp,
            recorded_at=datetime.fromtimestamp(record.timestamp / 1000, tz=timezone.utc),
            website_url=record.website_url,
            score=record.score,
        )


class SuggestionResponse(BaseModel):
    """Response schema for a single suggestion."""

    id: str
    category: str
    severity: str
    title: str
    description: str
    fix_suggestion: str
    reference_url: str | None


class AnalyzeResponse(BaseModel):
    """Result of analyzing a website."""

    record: ScoreRecordResponse
    score_percent: int
    notes: str
    metrics: dict
    suggestions: list[SuggestionResponse] = []
    stored: bool
    store_error: str | None = None


class AnalysisQueuedResponse(BaseModel):
    """Response when an analysis is successfully queued."""

    task_id: str
    url: str
    status: str = "queued"
    message: str = "Analysis queued successfully"


class PopularSiteResponse(BaseModel):
    """Score of one popular site."""

    rank: int
    url: str
    score_percent: int | None = Field(None, description="Eco-efficiency, 0 (worst) to 100 (best)")
    error: str | None = None


class SiteScoreResponse(BaseModel):
    url: str
    score: int


class PeriodSummaryResponse(BaseModel):
    """Statistics for one calendar period."""

    period: str
    total_visits: int
    average_score: int
    best_site: SiteScoreResponse
    worst_site: SiteScoreResponse

    @classmethod
    def from_summary(cls, summary: PeriodSummary) -> "PeriodSummaryResponse":
        return cls(
            period=summary.period,
            total_visits=summary.total_visits,
            average_score=round_half_up(summary.average_score),
            best_site=SiteScoreResponse(
                url=summary.best_site.url, score=round_half_up(summary.best_site.score)
            ),
            worst_site=SiteScoreResponse(
                url=summary.worst_site.url, score=round_half_up(summary.worst_site.score)
            ),
        )


# =============================================================================
# List Response Wrappers
# =============================================================================


class RecordListResponse(BaseModel):
    """Response for listing the score history."""

    records: list[ScoreRecordResponse]
    count: int
    error: str | None = None


class ReportResponse(BaseModel):
    """Aggregated report for one timeframe."""

    timeframe: str
    periods: list[PeriodSummaryResponse]
    count: int


class PopularSitesResponse(BaseModel):
    """Popular sites, best score first and failures last."""

    sites: list[PopularSiteResponse]
    count: int
    failed: int


class ClearResponse(BaseModel):
    status: str = "cleared"
    message: str = "All historical report data has been removed."


# =============================================================================
# Health Check
# =============================================================================


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = "healthy"
    service: str = "ecobrowse"
    version: str = "0.1.0"
    storage_error: str | None = None

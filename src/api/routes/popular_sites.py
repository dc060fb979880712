"""Popular sites API endpoint."""

from fastapi import APIRouter, Depends

from api.dependencies import get_analysis_service
from api.schemas import PopularSiteResponse, PopularSitesResponse
from config import settings
from reports.aggregator import round_half_up
from services.analysis import AnalysisService

router = APIRouter(prefix="/popular-sites", tags=["Popular Sites"])


@router.get(
    "",
    response_model=PopularSitesResponse,
    summary="Score popular websites",
    description="Score the configured popular websites. The results are not added to the history.",
)
async def list_popular_sites(
    service: AnalysisService = Depends(get_analysis_service),
) -> PopularSitesResponse:
    """Sites that could not be scored are listed last with their error."""
    scores = await service.score_popular_sites(settings.popular_sites)

    sites = [
        PopularSiteResponse(
            rank=index,
            url=site.url,
            score_percent=None if site.failed else round_half_up(site.score * 100),
            error=site.error,
        )
        for index, site in enumerate(scores, start=1)
    ]
    return PopularSitesResponse(
        sites=sites,
        count=len(sites),
        failed=sum(1 for site in scores if site.failed),
    )

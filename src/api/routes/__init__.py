"""API route exports."""

from api.routes.analyses import router as analyses_router
from api.routes.health import router as health_router
from api.routes.popular_sites import router as popular_sites_router
from api.routes.reports import router as reports_router

__all__ = ["analyses_router", "health_router", "popular_sites_router", "reports_router"]

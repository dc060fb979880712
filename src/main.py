"""EcoBrowse API - website eco-efficiency scoring and reports."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from analyzers.ecoindex import EcoIndexAnalyzer
from api.routes import analyses_router, health_router, popular_sites_router, reports_router
from config import settings
from db.session import build_engine, build_session_factory, init_models
from recommendations.engine import SuggestionEngine
from reports.notifier import RedisChangeNotifier, build_notifier
from reports.store import ScoreRecordStore
from reports.view import ReportView
from services.analysis import AnalysisService

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup wires the store, its notifier and the live report view into
    `app.state`; shutdown releases them.
    """
    configure_logging()
    logger.info(f"Starting {settings.app_name}...")

    engine = build_engine()
    await init_models(engine)

    notifier = build_notifier(settings)
    if isinstance(notifier, RedisChangeNotifier):
        await notifier.start()

    store = ScoreRecordStore(build_session_factory(engine), notifier, settings.storage_key)
    view = ReportView(store, notifier)
    await view.open()

    app.state.report_view = view
    app.state.analysis_service = AnalysisService(EcoIndexAnalyzer(), store, SuggestionEngine())

    yield

    logger.info(f"Shutting down {settings.app_name}...")
    view.close()
    await notifier.close()
    await engine.dispose()


app = FastAPI(
    title="EcoBrowse API",
    description="Scores websites for eco-efficiency and reports on browsing history.",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS (origins come from CORS_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health_router, prefix="/api/v1")
app.include_router(analyses_router, prefix="/api/v1")
app.include_router(reports_router, prefix="/api/v1")
app.include_router(popular_sites_router, prefix="/api/v1")


@app.get("/", include_in_schema=False)
async def root():
    """Point the root at the API docs."""
    return {
        "service": "EcoBrowse API",
        "docs": "/docs",
        "health": "/api/v1/health",
    }

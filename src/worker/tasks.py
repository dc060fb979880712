"""Celery tasks for analyzing websites in the background."""

import asyncio

from celery.utils.log import get_task_logger

from analyzers.ecoindex import EcoIndexAnalyzer
from config import settings
from db.session import build_engine, build_session_factory, init_models
from exceptions import AnalysisError
from reports.notifier import build_notifier
from reports.store import ScoreRecordStore
from services.analysis import AnalysisOutcome, AnalysisService
from worker.celery_app import celery_app

# Logger for tasks
logger = get_task_logger(__name__)


async def _run_analysis(url: str) -> AnalysisOutcome:
    """
    Analyze one URL inside a fresh event loop.

    The worker is its own execution context: it gets its own engine and a
    notifier built from settings, so API processes hear about the new record
    only when the notifier backend is shared (Redis).
    """
    engine = build_engine(pooled=False)
    notifier = build_notifier(settings)
    try:
        await init_models(engine)
        store = ScoreRecordStore(build_session_factory(engine), notifier, settings.storage_key)
        return await AnalysisService(EcoIndexAnalyzer(), store).analyze(url)
    finally:
        await notifier.close()
        await engine.dispose()


@celery_app.task(bind=True, name="worker.tasks.analyze_website")
def analyze_website(self, url: str) -> dict:
    """
    Score a website and append the result to the history.
    """
    logger.info(f"Starting analysis of {url}")

    try:
        outcome = asyncio.run(_run_analysis(url))
    except AnalysisError as e:
        logger.error(f"Analysis of {url} failed: {e.reason}")
        return {
            "url": url,
            "status": "failed",
            "error": e.reason,
        }

    logger.info(f"Analysis of {url} completed with score {outcome.record.score:.3f}")

    return {
        "url": outcome.record.website_url,
        "status": "completed",
        "timestamp": outcome.record.timestamp,
        "score": outcome.record.score,
        "stored": outcome.stored,
        "store_error": outcome.store_error,
        "suggestions": [s.title for s in outcome.suggestions],
    }

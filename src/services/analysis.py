"""The "Analyze" action: score a website and record the result."""

import asyncio
import logging
import time
from dataclasses import dataclass, field

from analyzers.base import AnalysisResult, BaseAnalyzer
from exceptions import AnalysisError, StoreError
from recommendations.engine import Suggestion, SuggestionEngine
from reports.records import ScoreRecord
from reports.store import ScoreRecordStore

logger = logging.getLogger(__name__)


@dataclass
class AnalysisOutcome:
    """Everything the user sees after analyzing one website."""

    record: ScoreRecord
    notes: str
    metrics: dict
    suggestions: list[Suggestion] = field(default_factory=list)
    stored: bool = True
    store_error: str | None = None


@dataclass
class PopularSiteScore:
    """Score of one popular site, or why it could not be scored."""

    url: str
    score: float | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def normalize_url(url: str) -> str:
    """Strip whitespace and assume https when no scheme is given."""
    url = url.strip()
    if url and "://" not in url:
        url = f"https://{url}"
    return url


def now_ms() -> int:
    return int(time.time() * 1000)


class AnalysisService:
    """Runs the scoring capability, stores the record, then asks for suggestions."""

    def __init__(
        self,
        analyzer: BaseAnalyzer,
        store: ScoreRecordStore,
        suggestion_engine: SuggestionEngine | None = None,
    ):
        self.analyzer = analyzer
        self.store = store
        self.suggestion_engine = suggestion_engine or SuggestionEngine()

    async def analyze(self, url: str) -> AnalysisOutcome:
        """
        Analyze a website and append its score to the history.

        Raises:
            AnalysisError: if the website could not be scored; nothing is stored
        """
        url = normalize_url(url)
        result = await self._score(url)

        record = ScoreRecord(timestamp=now_ms(), website_url=url, score=float(result.score))
        outcome = AnalysisOutcome(record=record, notes=result.notes, metrics=result.metrics)

        try:
            await self.store.append(record)
        except StoreError as e:
            logger.warning(f"Score for {url} computed but not saved: {e}")
            outcome.stored = False
            outcome.store_error = str(e)

        outcome.suggestions = self._suggest(record, result.metrics)
        return outcome

    def _suggest(self, record: ScoreRecord, metrics: dict) -> list[Suggestion]:
        try:
            return self.suggestion_engine.suggest(record.website_url, record.score, metrics)
        except Exception as e:
            logger.exception(f"Suggestions failed for {record.website_url}: {e}")
            return []

    async def score_popular_sites(self, sites: list[str]) -> list[PopularSiteScore]:
        """
        Score a list of well-known sites without recording them.

        All sites are scored concurrently. A site that fails is reported with
        its error and does not stop the others. Results are ordered best score
        first, failures last.
        """

        async def score_one(site: str) -> PopularSiteScore:
            try:
                result = await self._score(normalize_url(site))
            except AnalysisError as e:
                logger.warning(f"Could not score popular site {site}: {e.reason}")
                return PopularSiteScore(url=site, error=e.reason)
            except Exception as e:
                logger.exception(f"Unexpected error scoring popular site {site}: {e}")
                return PopularSiteScore(url=site, error="Unexpected error")
            return PopularSiteScore(url=site, score=float(result.score))

        scores = await asyncio.gather(*(score_one(site) for site in sites))
        return sorted(scores, key=lambda s: (s.failed, -(s.score or 0.0)))

    async def _score(self, url: str) -> AnalysisResult:
        if not url:
            raise AnalysisError(url, "URL is empty")

        logger.info(f"Analyzing {url} with {self.analyzer.name}")
        # Analyzers do blocking I/O
        result = await asyncio.to_thread(self.analyzer.analyze, url)

        if not result.success or result.score is None:
            raise AnalysisError(url, result.error or "No score produced")
        if not 0.0 <= result.score <= 1.0:
            raise AnalysisError(url, f"Score {result.score} is outside [0, 1]")
        return result

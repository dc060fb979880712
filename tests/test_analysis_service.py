"""Tests for the analyze-and-record flow."""

import asyncio

import pytest

from analyzers.base import AnalysisResult, BaseAnalyzer
from exceptions import AnalysisError, StoreError
from reports.notifier import ChangeKind
from services.analysis import AnalysisService, normalize_url


class StubAnalyzer(BaseAnalyzer):
    """Returns a fixed result and remembers the URLs it was given."""

    def __init__(self, result: AnalysisResult):
        self.result = result
        self.urls = []

    @property
    def name(self) -> str:
        return "stub"

    def analyze(self, url: str) -> AnalysisResult:
        self.urls.append(url)
        return self.result


def _success(score=0.72):
    return AnalysisResult(
        score=score,
        metrics={"page_size_kb": 3000},
        raw_data={},
        success=True,
        notes="Scored by stub",
    )


def _failure(error="Could not reach website"):
    return AnalysisResult(score=None, metrics={}, raw_data={}, success=False, error=error)


class BrokenSuggestions:
    def suggest(self, url, score, metrics):
        raise RuntimeError("advisor offline")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("example.com", "https://example.com"),
        ("  http://example.com  ", "http://example.com"),
        ("https://example.com/page", "https://example.com/page"),
        ("   ", ""),
    ],
)
def test_normalize_url(raw, expected):
    assert normalize_url(raw) == expected


def test_successful_analysis_is_stored_and_announced(store, events):
    analyzer = StubAnalyzer(_success(0.72))
    service = AnalysisService(analyzer, store)

    outcome = asyncio.run(service.analyze("example.com"))

    assert analyzer.urls == ["https://example.com"]
    assert outcome.stored
    assert outcome.record.website_url == "https://example.com"
    assert outcome.record.score == 0.72
    assert outcome.notes == "Scored by stub"
    assert asyncio.run(store.load()).records == [outcome.record]
    assert [e.kind for e in events] == [ChangeKind.UPDATED]


def test_suggestions_come_from_metrics(store):
    service = AnalysisService(StubAnalyzer(_success(0.72)), store)

    outcome = asyncio.run(service.analyze("example.com"))

    assert "heavy-page" in [s.id for s in outcome.suggestions]


def test_failed_analysis_stores_nothing(store, events):
    service = AnalysisService(StubAnalyzer(_failure()), store)

    with pytest.raises(AnalysisError, match="Could not reach website") as exc_info:
        asyncio.run(service.analyze("error.com"))

    assert exc_info.value.url == "https://error.com"
    assert asyncio.run(store.load()).records == []
    assert events == []


def test_out_of_range_score_is_an_analysis_failure(store):
    service = AnalysisService(StubAnalyzer(_success(1.4)), store)

    with pytest.raises(AnalysisError, match="outside"):
        asyncio.run(service.analyze("example.com"))


def test_empty_url_is_rejected(store):
    analyzer = StubAnalyzer(_success())
    service = AnalysisService(analyzer, store)

    with pytest.raises(AnalysisError):
        asyncio.run(service.analyze("   "))

    assert analyzer.urls == []


def test_suggestion_failure_does_not_prevent_storing(store):
    service = AnalysisService(StubAnalyzer(_success()), store, BrokenSuggestions())

    outcome = asyncio.run(service.analyze("example.com"))

    assert outcome.suggestions == []
    assert outcome.stored
    assert len(asyncio.run(store.load()).records) == 1


def test_store_failure_still_returns_score(store, monkeypatch):
    async def failing_append(record):
        raise StoreError("Could not save report data: quota exceeded")

    monkeypatch.setattr(store, "append", failing_append)
    service = AnalysisService(StubAnalyzer(_success(0.4)), store)

    outcome = asyncio.run(service.analyze("example.com"))

    assert outcome.record.score == 0.4
    assert not outcome.stored
    assert "quota exceeded" in outcome.store_error


class ScoresByHost(BaseAnalyzer):
    """Scores from a table keyed by URL; unknown URLs fail."""

    def __init__(self, scores: dict):
        self.scores = scores

    @property
    def name(self) -> str:
        return "table"

    def analyze(self, url: str) -> AnalysisResult:
        if url not in self.scores:
            return _failure(f"Could not reach website: {url}")
        return _success(self.scores[url])


def test_popular_sites_best_first_failures_last(store):
    analyzer = ScoresByHost({"https://a.com": 0.3, "https://b.com": 0.9, "https://c.com": 0.6})
    service = AnalysisService(analyzer, store)

    scores = asyncio.run(service.score_popular_sites(["a.com", "down.com", "b.com", "c.com"]))

    assert [s.url for s in scores] == ["b.com", "c.com", "a.com", "down.com"]
    assert scores[0].score == 0.9
    assert scores[-1].failed
    assert scores[-1].score is None
    assert "Could not reach website" in scores[-1].error


def test_popular_sites_are_not_recorded(store, events):
    service = AnalysisService(ScoresByHost({"https://a.com": 0.3}), store)

    asyncio.run(service.score_popular_sites(["a.com"]))

    assert asyncio.run(store.load()).records == []
    assert events == []


def test_popular_site_crash_does_not_stop_others(store):
    class Crashy(ScoresByHost):
        def analyze(self, url):
            if "crash" in url:
                raise RuntimeError("parser exploded")
            return super().analyze(url)

    service = AnalysisService(Crashy({"https://a.com": 0.3}), store)

    scores = asyncio.run(service.score_popular_sites(["crash.com", "a.com"]))

    assert [(s.url, s.error) for s in scores] == [("a.com", None), ("crash.com", "Unexpected error")]

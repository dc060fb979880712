"""EcoBrowse services package."""

from services.analysis import AnalysisOutcome, AnalysisService, PopularSiteScore, normalize_url

__all__ = ["AnalysisOutcome", "AnalysisService", "PopularSiteScore", "normalize_url"]

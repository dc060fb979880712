"""EcoBrowse analyzers package."""

from analyzers.base import AnalysisResult, BaseAnalyzer
from analyzers.ecoindex import EcoIndexAnalyzer

__all__ = [
    "AnalysisResult",
    "BaseAnalyzer",
    "EcoIndexAnalyzer",
]

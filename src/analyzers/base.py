"""Base analyzer interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class AnalysisResult:
    """Standard result format for all analyzers."""

    score: float | None  # Eco-efficiency score (0 = worst, 1 = best)
    metrics: dict  # Key metrics extracted
    raw_data: dict  # Full raw output for debugging
    success: bool  # Whether analysis completed successfully
    error: str | None = None  # Error message if failed
    notes: str = field(default="")  # Human-readable explanation of the score


class BaseAnalyzer(ABC):
    """
    Abstract base class for website scoring capabilities.

    Implementations are opaque to the rest of the system: only the [0, 1]
    `score` of a successful result is recorded.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return analyzer name."""
        pass

    @abstractmethod
    def analyze(self, url: str) -> AnalysisResult:
        """
        Run analysis on the given URL.

        Args:
            url: The website URL to analyze

        Returns:
            AnalysisResult with the score, metrics, and raw data
        """
        pass

"""EcoBrowse recommendations package."""

from recommendations.engine import Suggestion, SuggestionEngine
from recommendations.rules import ALL_RULES, Rule

__all__ = [
    "Suggestion",
    "SuggestionEngine",
    "ALL_RULES",
    "Rule",
]

"""Suggestion engine that turns an analysis into eco-friendly advice."""

import logging
from dataclasses import asdict, dataclass

from recommendations.rules import ALL_RULES, Rule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Suggestion:
    """One piece of advice for a website."""

    id: str
    category: str
    severity: str
    title: str
    description: str
    fix_suggestion: str
    reference_url: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


class SuggestionEngine:
    """
    Generates suggestions by evaluating rules against one analysis.

    The engine:
    1. Builds a context from the URL, score and analyzer metrics
    2. Evaluates each rule against the context
    3. Deduplicates and orders triggered rules by severity
    """

    SEVERITY_ORDER = {"high": 0, "medium": 1, "low": 2, "info": 3}

    def __init__(self, rules: list[Rule] | None = None):
        self.rules = ALL_RULES if rules is None else rules

    def suggest(self, url: str, score: float, metrics: dict | None = None) -> list[Suggestion]:
        """
        Produce suggestions for a scored website.

        Args:
            url: The analyzed website
            score: Eco-efficiency score in [0, 1]
            metrics: Optional analyzer metrics

        Returns:
            Suggestions, most severe first
        """
        context = {"url": url, "score": score, "metrics": metrics or {}}
        triggered = self._evaluate_rules(context)
        logger.info(f"Triggered {len(triggered)} rules for {url}")
        return self._create_suggestions(triggered)

    def _evaluate_rules(self, context: dict) -> list[Rule]:
        triggered = []

        for rule in self.rules:
            try:
                if rule.condition(context):
                    triggered.append(rule)
                    logger.debug(f"Rule triggered: {rule.id}")
            except Exception as e:
                logger.warning(f"Error evaluating rule {rule.id}: {e}")

        # Sort by severity (high first)
        triggered.sort(key=lambda r: self.SEVERITY_ORDER.get(r.severity, 99))

        return triggered

    def _create_suggestions(self, triggered_rules: list[Rule]) -> list[Suggestion]:
        suggestions = []
        seen_ids = set()

        for rule in triggered_rules:
            # Skip duplicates (same rule ID)
            if rule.id in seen_ids:
                continue
            seen_ids.add(rule.id)

            suggestions.append(
                Suggestion(
                    id=rule.id,
                    category=rule.category,
                    severity=rule.severity,
                    title=rule.title,
                    description=rule.description,
                    fix_suggestion=rule.fix_suggestion,
                    reference_url=rule.reference_url,
                )
            )

        return suggestions

"""Eco-efficiency suggestion rules."""

from dataclasses import dataclass
from typing import Any, Callable


@dataclass
class Rule:
    """A single suggestion rule."""

    id: str
    category: str  # efficiency, page_weight, requests, dom, hosting
    severity: str  # high, medium, low, info
    title: str
    description: str
    fix_suggestion: str
    condition: Callable[[dict], bool]
    reference_url: str | None = None


def _get_nested(data: dict, path: str, default: Any = None) -> Any:
    """Get a nested value from a dict using dot notation."""
    keys = path.split(".")
    value = data
    for key in keys:
        if isinstance(value, dict):
            value = value.get(key, default)
        else:
            return default
    return value


# =============================================================================
# Overall efficiency (from the score alone)
# =============================================================================

EFFICIENCY_RULES = [
    Rule(
        id="poor-eco-score",
        category="efficiency",
        severity="high",
        title="Poor Eco-Efficiency Score",
        description="This website scored below 35 out of 100, placing it among the heaviest pages on the web.",
        fix_suggestion="Audit the page for unnecessary scripts, oversized media and third-party embeds, and remove what visitors do not need.",
        condition=lambda ctx: (ctx.get("score") if ctx.get("score") is not None else 1) < 0.35,
    ),
    Rule(
        id="average-eco-score",
        category="efficiency",
        severity="medium",
        title="Room to Improve Eco-Efficiency",
        description="This website scored between 35 and 65 out of 100.",
        fix_suggestion="Lazy-load below-the-fold content and cache static assets so repeat visits transfer less data.",
        condition=lambda ctx: 0.35 <= (ctx.get("score") if ctx.get("score") is not None else 1) < 0.65,
    ),
    Rule(
        id="good-eco-score",
        category="efficiency",
        severity="info",
        title="Good Eco-Efficiency",
        description="This website scored 65 or more out of 100.",
        fix_suggestion="Keep monitoring page weight as content is added so the score does not regress.",
        condition=lambda ctx: (ctx.get("score") or 0) >= 0.65,
    ),
]

# =============================================================================
# Page weight
# =============================================================================

PAGE_WEIGHT_RULES = [
    Rule(
        id="heavy-page",
        category="page_weight",
        severity="high",
        title="Heavy Page Transfer",
        description="The page and its linked resources transfer more than 2 MB.",
        fix_suggestion="Compress images to modern formats (WebP, AVIF), enable text compression, and drop unused libraries.",
        condition=lambda ctx: (_get_nested(ctx, "metrics.page_size_kb") or 0) > 2048,
        reference_url="https://web.dev/articles/fast#optimize_your_images",
    ),
    Rule(
        id="moderate-page-weight",
        category="page_weight",
        severity="medium",
        title="Moderate Page Transfer",
        description="The page and its linked resources transfer between 1 and 2 MB.",
        fix_suggestion="Serve responsive image sizes and minify scripts and stylesheets.",
        condition=lambda ctx: 1024 < (_get_nested(ctx, "metrics.page_size_kb") or 0) <= 2048,
    ),
]

# =============================================================================
# Requests and DOM
# =============================================================================

STRUCTURE_RULES = [
    Rule(
        id="many-requests",
        category="requests",
        severity="medium",
        title="Too Many Requests",
        description="The page triggers more than 70 requests, each costing network and server energy.",
        fix_suggestion="Bundle scripts and stylesheets, use image sprites or inline SVG for icons, and remove unused third-party tags.",
        condition=lambda ctx: (_get_nested(ctx, "metrics.request_count") or 0) > 70,
    ),
    Rule(
        id="large-dom",
        category="dom",
        severity="medium",
        title="Large DOM",
        description="The page has more than 1,500 elements, which costs memory and CPU on every device that renders it.",
        fix_suggestion="Paginate or virtualize long lists and simplify deeply nested layouts.",
        condition=lambda ctx: (_get_nested(ctx, "metrics.dom_size") or 0) > 1500,
        reference_url="https://developer.chrome.com/docs/lighthouse/performance/dom-size",
    ),
]

# =============================================================================
# Hosting
# =============================================================================

HOSTING_RULES = [
    Rule(
        id="green-hosting",
        category="hosting",
        severity="low",
        title="Check the Hosting Provider",
        description="Hosting on renewable energy lowers the footprint of every visit, whatever the page weight.",
        fix_suggestion="Check whether the host appears in the Green Web Foundation directory and consider a provider powered by renewables.",
        condition=lambda ctx: (ctx.get("score") if ctx.get("score") is not None else 1) < 0.65,
        reference_url="https://www.thegreenwebfoundation.org/",
    ),
]

# =============================================================================
# All Rules Combined
# =============================================================================

ALL_RULES = EFFICIENCY_RULES + PAGE_WEIGHT_RULES + STRUCTURE_RULES + HOSTING_RULES

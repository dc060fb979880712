"""EcoIndex-style page weight analyzer."""

import logging
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from analyzers.base import AnalysisResult, BaseAnalyzer
from config import settings

logger = logging.getLogger(__name__)


class EcoIndexAnalyzer(BaseAnalyzer):
    """
    Estimates the environmental footprint of a page.

    Measures:
    - DOM size (number of elements)
    - Number of requests (the page plus linked scripts, stylesheets, images)
    - Transfer size in KB

    Each measure is placed on a quantile scale built from a large corpus of
    pages, then the weighted quantiles give a grade out of 100, scaled here
    to [0, 1].
    """

    # Weights for DOM, requests, size
    WEIGHTS = (3, 2, 1)

    QUANTILES_DOM = [
        0, 47, 75, 159, 233, 298, 358, 417, 476, 537, 603,
        674, 753, 843, 949, 1076, 1237, 1459, 1801, 2479, 594601,
    ]
    QUANTILES_REQUESTS = [
        0, 2, 15, 25, 34, 42, 49, 56, 63, 70, 78,
        86, 95, 105, 117, 130, 147, 170, 205, 281, 3920,
    ]
    QUANTILES_SIZE_KB = [
        0, 1.37, 144.7, 319.53, 479.46, 631.97, 783.38, 937.91, 1098.62,
        1265.47, 1448.32, 1648.27, 1876.08, 2142.06, 2465.37, 2866.31,
        3401.59, 4155.73, 5400.08, 8037.54, 223212.26,
    ]

    # Lower bound of each grade, best first
    GRADES = [
        ("A", 75),
        ("B", 65),
        ("C", 50),
        ("D", 35),
        ("E", 20),
        ("F", 5),
        ("G", 0),
    ]

    def __init__(self, transport: httpx.BaseTransport | None = None):
        self.transport = transport

    @property
    def name(self) -> str:
        return "ecoindex"

    def analyze(self, url: str) -> AnalysisResult:
        """
        Fetch the page and score it.

        Args:
            url: Website URL to analyze

        Returns:
            AnalysisResult with a [0, 1] score, or success=False with an error
        """
        error = self._validate_url(url)
        if error:
            return AnalysisResult(
                score=None,
                metrics={},
                raw_data={},
                success=False,
                error=error,
            )

        try:
            with self._client() as client:
                response = client.get(url)
                response.raise_for_status()
                html = response.content
                base_url = str(response.url)

                soup = BeautifulSoup(html, "lxml")
                resources = self._linked_resources(soup, base_url)
                resource_bytes = self._measure_resources(client, resources)

            dom_size = len(soup.find_all(True))
            requests = 1 + len(resources)
            size_kb = (len(html) + resource_bytes) / 1024

            ecoindex = self.compute_ecoindex(dom_size, requests, size_kb)
            score = round(ecoindex / 100, 4)

            metrics = {
                "ecoindex": round(ecoindex, 2),
                "grade": self.grade(ecoindex),
                "dom_size": dom_size,
                "request_count": requests,
                "page_size_kb": round(size_kb, 1),
                "ghg_g": round(2 + 2 * (50 * (100 - ecoindex)) / 100, 2),
                "water_cl": round(3 + 3 * (50 * (100 - ecoindex)) / 100, 2),
            }

            return AnalysisResult(
                score=score,
                metrics=metrics,
                raw_data={"html_length": len(html), "resources": resources},
                success=True,
                notes=self._build_notes(metrics),
            )

        except httpx.TimeoutException:
            logger.error(f"Timeout fetching {url}")
            return AnalysisResult(
                score=None,
                metrics={},
                raw_data={},
                success=False,
                error="Timeout fetching page",
            )

        except httpx.HTTPStatusError as e:
            logger.error(f"{url} answered {e.response.status_code}")
            return AnalysisResult(
                score=None,
                metrics={},
                raw_data={},
                success=False,
                error=f"Page returned HTTP {e.response.status_code}",
            )

        except httpx.HTTPError as e:
            logger.error(f"Could not reach {url}: {e}")
            return AnalysisResult(
                score=None,
                metrics={},
                raw_data={},
                success=False,
                error=f"Could not reach website: {e}",
            )

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=settings.http_timeout,
            follow_redirects=True,
            headers={"User-Agent": settings.user_agent},
            transport=self.transport,
        )

    def _validate_url(self, url: str) -> str | None:
        try:
            parsed = urlparse(url)
            hostname = parsed.hostname
        except ValueError:
            return "Invalid URL format"
        if parsed.scheme not in ("http", "https"):
            return f"Unsupported URL scheme: {parsed.scheme or 'none'}"
        if not hostname:
            return "URL has no hostname"
        return None

    def _linked_resources(self, soup: BeautifulSoup, base_url: str) -> list[str]:
        """Absolute URLs of scripts, stylesheets and images the page loads."""
        urls = []
        for tag in soup.find_all("script", src=True):
            urls.append(tag["src"])
        for tag in soup.find_all("link", rel="stylesheet", href=True):
            urls.append(tag["href"])
        for tag in soup.find_all("img", src=True):
            urls.append(tag["src"])

        resources = []
        seen = set()
        for url in urls:
            full_url = urljoin(base_url, url)
            # Skip data URLs and blob URLs
            if full_url.startswith(("data:", "blob:")) or full_url in seen:
                continue
            seen.add(full_url)
            resources.append(full_url)
        return resources

    def _measure_resources(self, client: httpx.Client, resources: list[str]) -> int:
        """Sum the advertised sizes of linked resources."""
        total = 0
        for url in resources[: settings.max_linked_resources]:
            try:
                response = client.head(url)
                total += int(response.headers.get("content-length", 0))
            except (httpx.HTTPError, ValueError) as e:
                logger.debug(f"Failed to measure resource {url}: {e}")
        return total

    @staticmethod
    def _quantile(quantiles: list[float], value: float) -> float:
        for i in range(1, len(quantiles)):
            if value < quantiles[i]:
                return i - 1 + (value - quantiles[i - 1]) / (quantiles[i] - quantiles[i - 1])
        return len(quantiles) - 1

    @classmethod
    def compute_ecoindex(cls, dom_size: int, requests: int, size_kb: float) -> float:
        """EcoIndex grade out of 100 (higher is better)."""
        q_dom = cls._quantile(cls.QUANTILES_DOM, dom_size)
        q_req = cls._quantile(cls.QUANTILES_REQUESTS, requests)
        q_size = cls._quantile(cls.QUANTILES_SIZE_KB, size_kb)

        w_dom, w_req, w_size = cls.WEIGHTS
        weighted = (w_dom * q_dom + w_req * q_req + w_size * q_size) / sum(cls.WEIGHTS)
        return max(0.0, min(100.0, 100 - 5 * weighted))

    @classmethod
    def grade(cls, ecoindex: float) -> str:
        for letter, lower_bound in cls.GRADES:
            if ecoindex > lower_bound:
                return letter
        return "G"

    def _build_notes(self, metrics: dict) -> str:
        return (
            f"Eco-efficiency grade {metrics['grade']} based on {metrics['dom_size']} DOM "
            f"elements, {metrics['request_count']} requests and "
            f"{metrics['page_size_kb']} KB transferred. Estimated "
            f"{metrics['ghg_g']} gCO2e and {metrics['water_cl']} cl of water per visit. "
            f"Final score: {metrics['ecoindex'] / 100:.3f} (higher is better)."
        )

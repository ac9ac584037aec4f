"""Home-page photo style analysis."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence

from stylecart.catalog.models import Product
from stylecart.metrics.prometheus_exporter import style_analysis_total
from stylecart.recommender.engine import ScoreGenerator, random_score
from stylecart.services.requests import Delay, LatestResult
from stylecart.tryon.loader import ImageLoader, ImageSource, TryOnError

logger = logging.getLogger(__name__)

DEFAULT_PICKS = 4
DEFAULT_ANALYSIS_RANGE = (80, 99)


@dataclass(slots=True, frozen=True)
class StyleAnalysis:
    """Suggested products for an uploaded photo plus a style score."""

    products: tuple[Product, ...]
    score: int

    @property
    def product_ids(self) -> list[str]:
        return [product.id for product in self.products]


class StyleAnalysisService:
    """Simulated photo analysis.

    The photo is only checked to be a decodable image. Suggestions are the head
    of the catalog and the score is presentational, as on the stylist page.
    """

    def __init__(
        self,
        loader: ImageLoader,
        *,
        picks: int = DEFAULT_PICKS,
        score_range: tuple[int, int] = DEFAULT_ANALYSIS_RANGE,
        score_generator: ScoreGenerator | None = None,
        delay_seconds: float = 2.0,
        delay: Delay | None = None,
    ) -> None:
        if picks < 1:
            raise ValueError("picks must be at least 1")
        low, high = score_range
        self._loader = loader
        self._picks = picks
        self._score_range = (low, high)
        self._score_generator = score_generator or random_score(low, high)
        self._delay_seconds = delay_seconds
        self._delay = delay or asyncio.sleep
        self._latest: LatestResult[StyleAnalysis] = LatestResult()

    @property
    def latest(self) -> StyleAnalysis | None:
        return self._latest.value

    def _score(self) -> int:
        low, high = self._score_range
        value = int(self._score_generator())
        if not low <= value <= high:
            logger.warning("Analysis score %s outside [%s, %s]; clamping", value, low, high)
        return min(max(value, low), high)

    async def analyse(self, photo: ImageSource, catalog: Sequence[Product]) -> StyleAnalysis:
        """Validate ``photo``, pause, then suggest the first products of ``catalog``."""

        token = self._latest.begin()
        snapshot = tuple(catalog)
        try:
            await self._loader.load(photo, role="photo")
        except TryOnError:
            style_analysis_total.labels(status="failed").inc()
            raise
        await self._delay(self._delay_seconds)

        analysis = StyleAnalysis(products=snapshot[: self._picks], score=self._score())
        style_analysis_total.labels(status="ok").inc()
        if not self._latest.publish(token, analysis):
            logger.info("Discarding superseded style analysis")
        else:
            logger.info("Style analysis suggested %s with score %s", analysis.product_ids, analysis.score)
        return analysis

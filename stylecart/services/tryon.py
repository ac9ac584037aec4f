"""Try-on page flow."""

from __future__ import annotations

import asyncio
import logging

from stylecart.catalog.models import Product
from stylecart.metrics.prometheus_exporter import tryon_requests_total
from stylecart.services.requests import Delay, LatestResult
from stylecart.tryon.compositor import TryOnCompositor, TryOnResult
from stylecart.tryon.loader import ImageSource, TryOnError

logger = logging.getLogger(__name__)


class TryOnService:
    """Runs previews for the try-on page with a simulated processing pause."""

    def __init__(
        self,
        compositor: TryOnCompositor,
        *,
        delay_seconds: float = 2.5,
        delay: Delay | None = None,
    ) -> None:
        self._compositor = compositor
        self._delay_seconds = delay_seconds
        self._delay = delay or asyncio.sleep
        self._latest: LatestResult[TryOnResult] = LatestResult()

    @property
    def latest(self) -> TryOnResult | None:
        return self._latest.value

    async def preview(self, user_image: ImageSource, product: Product) -> TryOnResult:
        """Composite ``product`` onto ``user_image``.

        Decode failures propagate as ``ImageDecodeError`` and leave the last
        visible preview untouched.
        """

        token = self._latest.begin()
        await self._delay(self._delay_seconds)
        try:
            result = await self._compositor.compose(user_image, product.image_url)
        except TryOnError as exc:
            tryon_requests_total.labels(status="failed").inc()
            logger.warning("Try-on for product %s failed: %s", product.id, exc)
            raise
        tryon_requests_total.labels(status="ok").inc()
        if not self._latest.publish(token, result):
            logger.info("Discarding superseded try-on preview for product %s", product.id)
        return result

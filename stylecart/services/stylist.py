"""Stylist page flow: generate outfits and hand saved ones to the backend."""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Sequence

from stylecart.catalog.gateway import CatalogGateway
from stylecart.catalog.models import Product
from stylecart.metrics.prometheus_exporter import outfit_generation_total
from stylecart.recommender.engine import GeneratedOutfit, RecommendationEngine
from stylecart.recommender.occasions import Occasion
from stylecart.services.requests import Delay, LatestResult

logger = logging.getLogger(__name__)


def outfit_name(occasion: Occasion, on: date | None = None) -> str:
    """Default label used when a generated outfit is saved."""

    day = on or date.today()
    return f"{occasion.value} outfit - {day.isoformat()}"


class StylistService:
    """Runs outfit requests with a simulated analysis pause.

    Overlapping requests are allowed; ``latest`` only ever shows the outfit of
    the most recently started one.
    """

    def __init__(
        self,
        engine: RecommendationEngine,
        *,
        delay_seconds: float = 2.0,
        delay: Delay | None = None,
    ) -> None:
        self._engine = engine
        self._delay_seconds = delay_seconds
        self._delay = delay or asyncio.sleep
        self._latest: LatestResult[GeneratedOutfit] = LatestResult()

    @property
    def engine(self) -> RecommendationEngine:
        return self._engine

    @property
    def latest(self) -> GeneratedOutfit | None:
        return self._latest.value

    async def request_outfit(self, occasion: Occasion | str, catalog: Sequence[Product]) -> GeneratedOutfit:
        """Generate an outfit after the configured pause and publish it if still current."""

        occasion = Occasion.parse(occasion)
        snapshot = tuple(catalog)
        token = self._latest.begin()
        await self._delay(self._delay_seconds)

        outfit = self._engine.generate(occasion, snapshot)
        outfit_generation_total.labels(occasion=occasion.value).inc()
        if not self._latest.publish(token, outfit):
            logger.info("Discarding superseded %s outfit", occasion.value)
        return outfit

    async def save_outfit(
        self,
        gateway: CatalogGateway,
        user_id: str,
        outfit: GeneratedOutfit,
        *,
        name: str | None = None,
    ) -> str | None:
        """Persist ``outfit`` for ``user_id``; returns the new id or ``None``."""

        if not outfit.products:
            logger.warning("Refusing to save an empty outfit for user %s", user_id)
            return None
        outfit_id = await gateway.save_outfit(
            user_id,
            name or outfit_name(outfit.occasion),
            outfit.product_ids,
            outfit.score,
            outfit.occasion.value,
        )
        if outfit_id:
            logger.info("Saved %s outfit %s for user %s", outfit.occasion.value, outfit_id, user_id)
        return outfit_id

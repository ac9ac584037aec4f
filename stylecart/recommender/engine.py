"""Occasion-based outfit selection."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Sequence

from stylecart.catalog.models import Product
from stylecart.recommender.occasions import Occasion

logger = logging.getLogger(__name__)

DEFAULT_OUTFIT_SIZE = 3
DEFAULT_SCORE_RANGE = (85, 99)

ScoreGenerator = Callable[[], int]


def random_score(low: int = DEFAULT_SCORE_RANGE[0], high: int = DEFAULT_SCORE_RANGE[1]) -> ScoreGenerator:
    """Return a generator of uniform integers in ``[low, high]``.

    The style score is presentational only. It does not measure outfit quality.
    """

    if low > high:
        raise ValueError(f"Invalid score range [{low}, {high}]")

    def _generate() -> int:
        return random.randint(low, high)

    return _generate


@dataclass(slots=True, frozen=True)
class GeneratedOutfit:
    """Products picked for an occasion plus a style score."""

    occasion: Occasion
    products: tuple[Product, ...]
    score: int

    @property
    def product_ids(self) -> list[str]:
        return [product.id for product in self.products]


class RecommendationEngine:
    """Maps an occasion and a catalog snapshot to an outfit.

    Selection is deterministic for a given catalog order: the first
    ``outfit_size`` tag-matching products, or the head of the whole catalog when
    too few match. The score is drawn fresh on every call.
    """

    def __init__(
        self,
        *,
        outfit_size: int = DEFAULT_OUTFIT_SIZE,
        score_range: tuple[int, int] = DEFAULT_SCORE_RANGE,
        score_generator: ScoreGenerator | None = None,
    ) -> None:
        if outfit_size < 1:
            raise ValueError("outfit_size must be at least 1")
        low, high = score_range
        self._outfit_size = outfit_size
        self._score_range = (low, high)
        self._score_generator = score_generator or random_score(low, high)

    @property
    def outfit_size(self) -> int:
        return self._outfit_size

    @property
    def score_range(self) -> tuple[int, int]:
        return self._score_range

    def select(self, occasion: Occasion, catalog: Sequence[Product]) -> tuple[Product, ...]:
        """Pick products for ``occasion`` without scoring them."""

        wanted = occasion.tags
        matching = [product for product in catalog if product.tags & wanted]
        if len(matching) >= self._outfit_size:
            return tuple(matching[: self._outfit_size])
        logger.info(
            "Only %s products match %s; falling back to catalog head",
            len(matching),
            occasion.value,
        )
        return tuple(catalog[: self._outfit_size])

    def score(self) -> int:
        low, high = self._score_range
        value = int(self._score_generator())
        if value < low or value > high:
            logger.warning("Style score %s outside [%s, %s]; clamping", value, low, high)
            value = min(max(value, low), high)
        return value

    def generate(self, occasion: Occasion | str, catalog: Sequence[Product]) -> GeneratedOutfit:
        """Build a fresh outfit for ``occasion`` from ``catalog``."""

        occasion = Occasion.parse(occasion)
        products = self.select(occasion, catalog)
        outfit = GeneratedOutfit(occasion=occasion, products=products, score=self.score())
        logger.info(
            "Generated %s outfit %s with score %s",
            occasion.value,
            outfit.product_ids,
            outfit.score,
        )
        return outfit

"""Outfit recommendation."""

from .engine import GeneratedOutfit, RecommendationEngine, ScoreGenerator, random_score
from .occasions import OCCASION_TAGS, Occasion

__all__ = [
    "GeneratedOutfit",
    "OCCASION_TAGS",
    "Occasion",
    "RecommendationEngine",
    "ScoreGenerator",
    "random_score",
]

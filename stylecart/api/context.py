"""Shared dependencies for the HTTP routes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from fastapi import Request

from stylecart.cart.store import CartRegistry
from stylecart.catalog.gateway import CatalogGateway
from stylecart.config.settings import Settings, get_settings
from stylecart.metrics.prometheus_exporter import active_carts
from stylecart.recommender.engine import RecommendationEngine, ScoreGenerator
from stylecart.services.analysis import StyleAnalysisService
from stylecart.services.requests import Delay
from stylecart.services.stylist import StylistService
from stylecart.services.tryon import TryOnService
from stylecart.tryon.compositor import TryOnCompositor
from stylecart.tryon.loader import ImageLoader


@dataclass(slots=True)
class SessionViews:
    """Per-shopper page state: each page only shows its own newest result."""

    stylist: StylistService
    tryon: TryOnService
    analysis: StyleAnalysisService


class ViewRegistry:
    """Lazily creates one set of page views per session id."""

    def __init__(self, factory: Callable[[], SessionViews]) -> None:
        self._factory = factory
        self._views: dict[str, SessionViews] = {}

    def get(self, session_id: str) -> SessionViews:
        views = self._views.get(session_id)
        if views is None:
            views = self._factory()
            self._views[session_id] = views
        return views

    def discard(self, session_id: str) -> None:
        self._views.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._views)


@dataclass(slots=True)
class AppContext:
    """Container for objects shared across routes."""

    settings: Settings
    carts: CartRegistry
    views: ViewRegistry
    engine: RecommendationEngine
    gateway: CatalogGateway | None = None


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def build_context(
    settings: Settings | None = None,
    *,
    gateway: CatalogGateway | None = None,
    loader: ImageLoader | None = None,
    delay: Delay | None = None,
    score_generator: ScoreGenerator | None = None,
) -> AppContext:
    """Wire services from settings. Without catalog credentials only the curated collection is served."""

    settings = settings or get_settings()
    if gateway is None and settings.catalog_base_url and settings.catalog_api_key:
        gateway = CatalogGateway(settings)

    engine = RecommendationEngine(
        outfit_size=settings.outfit_size,
        score_range=(settings.style_score_min, settings.style_score_max),
        score_generator=score_generator,
    )
    loader = loader or ImageLoader(timeout=settings.catalog_timeout)
    compositor = TryOnCompositor(loader, opacity=settings.tryon_overlay_opacity)

    def _new_views() -> SessionViews:
        return SessionViews(
            stylist=StylistService(engine, delay_seconds=settings.stylist_delay_seconds, delay=delay),
            tryon=TryOnService(compositor, delay_seconds=settings.tryon_delay_seconds, delay=delay),
            analysis=StyleAnalysisService(
                loader,
                picks=settings.analysis_picks,
                score_range=(settings.analysis_score_min, settings.analysis_score_max),
                score_generator=score_generator,
                delay_seconds=settings.analysis_delay_seconds,
                delay=delay,
            ),
        )

    return AppContext(
        settings=settings,
        carts=CartRegistry(on_change=active_carts.set),
        views=ViewRegistry(_new_views),
        engine=engine,
        gateway=gateway,
    )

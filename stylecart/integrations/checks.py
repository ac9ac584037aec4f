"""Connectivity checks for the catalog backend and hotlinked garment images."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable

from stylecart.catalog.browse import TRYON_CATEGORIES, merge_collection
from stylecart.catalog.gateway import CatalogGateway
from stylecart.config.settings import Settings
from stylecart.tryon.loader import ImageLoader, TryOnError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IntegrationCheckResult:
    """Outcome of one connectivity check."""

    name: str
    success: bool
    message: str
    elapsed_ms: float = 0.0


async def _run_check(
    name: str,
    attempt: Callable[[], Awaitable[str | None]],
) -> IntegrationCheckResult:
    """Run ``attempt``; it returns a success message, or ``None`` for a negative answer."""

    started = time.perf_counter()
    try:
        message = await attempt()
    except Exception as exc:  # noqa: BLE001 - report any failure as a check result
        logger.warning("%s check failed: %s", name, exc)
        success, message = False, str(exc)
    else:
        success = message is not None
        if message is None:
            message = "Service responded with non-success status."
    elapsed_ms = (time.perf_counter() - started) * 1000
    return IntegrationCheckResult(name=name, success=success, message=message, elapsed_ms=elapsed_ms)


async def check_catalog(settings: Settings | None = None) -> IntegrationCheckResult:
    """Query the products table with the configured credentials."""

    async def _attempt() -> str | None:
        gateway = CatalogGateway(settings)
        try:
            if not await gateway.ping():
                return None
        finally:
            await gateway.close()
        return "Catalog backend is reachable."

    return await _run_check("Catalog", _attempt)


async def check_tryon_images(loader: ImageLoader | None = None) -> IntegrationCheckResult:
    """Download and decode every curated garment image offered for try-on."""

    loader = loader or ImageLoader()
    products = merge_collection([], TRYON_CATEGORIES)

    async def _attempt() -> str | None:
        outcomes = await asyncio.gather(
            *(loader.load(product.image_url, role="garment") for product in products),
            return_exceptions=True,
        )
        broken: list[str] = []
        for product, outcome in zip(products, outcomes):
            if isinstance(outcome, TryOnError):
                broken.append(f"{product.id} ({outcome})")
            elif isinstance(outcome, BaseException):
                raise outcome
        if broken:
            raise RuntimeError("Unreachable garment images: " + "; ".join(broken))
        return f"{len(products)} garment images decode."

    return await _run_check("Try-on images", _attempt)


async def run_all_checks() -> list[IntegrationCheckResult]:
    """Execute all integration checks concurrently."""

    return list(await asyncio.gather(check_catalog(), check_tryon_images()))

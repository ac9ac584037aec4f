"""Shared fixtures for the storefront test-suite."""

from __future__ import annotations

from decimal import Decimal
from io import BytesIO
from typing import Callable, Iterable

import pytest
from PIL import Image

from stylecart.catalog.models import Product


@pytest.fixture
def make_product() -> Callable[..., Product]:
    def _make(
        product_id: str,
        *,
        price: int | str = 10,
        tags: Iterable[str] = (),
        category: str = "tops",
        **extra: object,
    ) -> Product:
        fields: dict[str, object] = {
            "id": product_id,
            "name": f"Product {product_id}",
            "price": Decimal(str(price)),
            "category": category,
            "image_url": f"https://cdn.test/{product_id}.png",
            "stock": 5,
            "tags": frozenset(tags),
        }
        fields.update(extra)
        return Product(**fields)

    return _make


@pytest.fixture
def make_png() -> Callable[..., bytes]:
    def _make(size: tuple[int, int], color: tuple[int, ...], mode: str = "RGB") -> bytes:
        buffer = BytesIO()
        Image.new(mode, size, color).save(buffer, format="PNG")
        return buffer.getvalue()

    return _make

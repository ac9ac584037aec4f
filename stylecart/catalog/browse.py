"""Catalog loading and shop-page filtering."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Sequence

from stylecart.catalog.collection import CURATED_COLLECTION
from stylecart.catalog.gateway import CatalogGateway
from stylecart.catalog.models import Order, Product, ProductCategory, ProductFilter

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"
TRYON_CATEGORIES = (ProductCategory.TOPS, ProductCategory.DRESSES, ProductCategory.OUTERWEAR)
TRYON_REMOTE_LIMIT = 12


@dataclass(slots=True, frozen=True)
class StoreStats:
    """Headline numbers for the admin overview."""

    total_products: int
    total_orders: int
    total_revenue: Decimal


def merge_collection(
    remote: Sequence[Product],
    categories: Iterable[ProductCategory] | None = None,
) -> list[Product]:
    """Append curated products to remote stock, skipping ids already present."""

    allowed = set(categories) if categories is not None else None
    seen = {product.id for product in remote}
    merged = list(remote)
    for product in CURATED_COLLECTION:
        if product.id in seen:
            continue
        if allowed is not None and product.category not in allowed:
            continue
        merged.append(product)
    return merged


async def load_catalog(
    gateway: CatalogGateway,
    product_filter: ProductFilter | None = None,
) -> list[Product]:
    """Fetch remote products and merge the curated collection after them."""

    remote = await gateway.list_products(product_filter)
    categories = product_filter.categories if product_filter else None
    catalog = merge_collection(remote, categories)
    logger.info("Loaded catalog with %s remote and %s total products", len(remote), len(catalog))
    return catalog


async def load_tryon_candidates(gateway: CatalogGateway) -> list[Product]:
    """Products whose imagery suits the torso overlay."""

    product_filter = ProductFilter(categories=list(TRYON_CATEGORIES), limit=TRYON_REMOTE_LIMIT)
    return await load_catalog(gateway, product_filter)


def filter_products(
    products: Iterable[Product],
    category: str = ALL_CATEGORIES,
    query: str = "",
) -> list[Product]:
    """Apply the shop's category selector and free-text search."""

    selected = list(products)
    if category and category != ALL_CATEGORIES:
        selected = [product for product in selected if product.category.value == category]

    needle = query.strip().lower()
    if needle:
        selected = [
            product
            for product in selected
            if needle in product.name.lower()
            or (product.description is not None and needle in product.description.lower())
        ]
    return selected


def summarise_store(products: Sequence[Product], orders: Sequence[Order]) -> StoreStats:
    return StoreStats(
        total_products=len(products),
        total_orders=len(orders),
        total_revenue=sum((order.total_amount for order in orders), Decimal("0")),
    )

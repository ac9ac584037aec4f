"""Catalog schemas, backend gateway and browsing helpers."""

from .gateway import CatalogGateway, CatalogRequestError
from .models import (
    Order,
    OrderItem,
    Product,
    ProductCategory,
    ProductDraft,
    ProductFilter,
    ProductUpdate,
    Profile,
    SavedOutfit,
)

__all__ = [
    "CatalogGateway",
    "CatalogRequestError",
    "Order",
    "OrderItem",
    "Product",
    "ProductCategory",
    "ProductDraft",
    "ProductFilter",
    "ProductUpdate",
    "Profile",
    "SavedOutfit",
]

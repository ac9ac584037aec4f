"""Pydantic schemas for records exchanged with the catalog backend."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


IMAGE_URL_SCHEMES = ("http://", "https://", "data:image/")


def _check_image_url(value: str) -> str:
    if not value.lower().startswith(IMAGE_URL_SCHEMES):
        raise ValueError("image_url must be an http(s) URL or a data:image URL")
    return value


# Only remote or inline images; never a server-local path.
ImageUrl = Annotated[str, AfterValidator(_check_image_url)]


class ProductCategory(str, Enum):
    """Fixed set of shop departments."""

    DRESSES = "dresses"
    TOPS = "tops"
    BOTTOMS = "bottoms"
    OUTERWEAR = "outerwear"
    SHOES = "shoes"
    ACCESSORIES = "accessories"
    MENS_TOPS = "mens-tops"
    MENS_BOTTOMS = "mens-bottoms"
    MENS_OUTERWEAR = "mens-outerwear"
    MENS_SHOES = "mens-shoes"


class Product(BaseModel):
    """Catalog item. Instances are read-only once validated."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    description: str | None = None
    price: Decimal = Field(ge=0)
    category: ProductCategory
    image_url: ImageUrl
    stock: int = Field(default=0, ge=0)
    tags: frozenset[str] = frozenset()
    created_at: datetime = Field(default_factory=_utcnow)


class OrderItem(BaseModel):
    """Single order position as stored by the backend."""

    product_id: str
    quantity: int = Field(ge=1)


class Order(BaseModel):
    """Placed order record."""

    id: str
    user_id: str
    items: list[OrderItem] = Field(default_factory=list)
    total_amount: Decimal = Field(ge=0)
    status: str = "pending"
    created_at: datetime = Field(default_factory=_utcnow)


class SavedOutfit(BaseModel):
    """Outfit a user chose to keep from the stylist page."""

    id: str
    user_id: str
    outfit_name: str
    product_ids: list[str] = Field(default_factory=list)
    ai_score: int = 0
    event_type: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)


class ProductFilter(BaseModel):
    """Server-side filter applied when listing products."""

    categories: list[ProductCategory] | None = None
    ids: list[str] | None = None
    limit: int | None = Field(default=None, ge=1)
    newest_first: bool = True


class ProductDraft(BaseModel):
    """Admin input for a new product; the backend assigns ``id`` and ``created_at``."""

    name: str = Field(min_length=1)
    description: str | None = None
    price: Decimal = Field(ge=0)
    category: ProductCategory = ProductCategory.TOPS
    image_url: ImageUrl
    stock: int = Field(default=0, ge=0)
    tags: list[str] = Field(default_factory=list)


class ProductUpdate(BaseModel):
    """Partial admin edit; only the fields that were set are sent."""

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    price: Decimal | None = Field(default=None, ge=0)
    category: ProductCategory | None = None
    image_url: ImageUrl | None = None
    stock: int | None = Field(default=None, ge=0)
    tags: list[str] | None = None


class Profile(BaseModel):
    """Public slice of a shopper profile shown on the style leaderboard."""

    id: str
    full_name: str | None = None
    avatar_url: str | None = None
    style_score: int = 0

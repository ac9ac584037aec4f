"""Request and response bodies for the HTTP API."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from stylecart.cart.store import CartStore
from stylecart.catalog.models import Product
from stylecart.recommender.engine import GeneratedOutfit
from stylecart.services.analysis import StyleAnalysis


class CartLineView(BaseModel):
    product_id: str
    quantity: int
    product: Product | None = None


class CartView(BaseModel):
    lines: list[CartLineView]
    total: Decimal
    count: int

    @classmethod
    def from_store(cls, cart: CartStore) -> "CartView":
        return cls(
            lines=[
                CartLineView(product_id=line.product_id, quantity=line.quantity, product=line.product)
                for line in cart.lines
            ],
            total=cart.total(),
            count=cart.count(),
        )


class AddItemRequest(BaseModel):
    product_id: str


class UpdateQuantityRequest(BaseModel):
    quantity: int


class CheckoutRequest(BaseModel):
    user_id: str = Field(min_length=1)


class CheckoutResponse(BaseModel):
    order_id: str


class OutfitRequest(BaseModel):
    occasion: str


class OutfitView(BaseModel):
    occasion: str
    products: list[Product]
    score: int

    @classmethod
    def from_outfit(cls, outfit: GeneratedOutfit) -> "OutfitView":
        return cls(occasion=outfit.occasion.value, products=list(outfit.products), score=outfit.score)


class SaveOutfitRequest(BaseModel):
    user_id: str = Field(min_length=1)
    occasion: str
    product_ids: list[str] = Field(min_length=1)
    score: int
    name: str | None = None


class SaveOutfitResponse(BaseModel):
    outfit_id: str


class StatsView(BaseModel):
    total_products: int
    total_orders: int
    total_revenue: Decimal


class StyleAnalysisView(BaseModel):
    products: list[Product]
    score: int

    @classmethod
    def from_analysis(cls, analysis: StyleAnalysis) -> "StyleAnalysisView":
        return cls(products=list(analysis.products), score=analysis.score)

"""Async client for the hosted catalog, order and saved-outfit tables."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Sequence, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from stylecart.catalog.models import (
    Order,
    Product,
    ProductDraft,
    ProductFilter,
    ProductUpdate,
    Profile,
    SavedOutfit,
)
from stylecart.config.settings import Settings, get_settings

if TYPE_CHECKING:
    from stylecart.cart.store import CartLine

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class CatalogRequestError(RuntimeError):
    """Raised when the catalog backend cannot be reached or rejects a call."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


def _validate_records(model: type[RecordT], rows: Any) -> list[RecordT]:
    """Convert raw rows into schema instances, skipping malformed entries."""

    if not isinstance(rows, list):
        logger.warning("Expected a list of %s records, got %s", model.__name__, type(rows).__name__)
        return []
    records: list[RecordT] = []
    for row in rows:
        try:
            records.append(model.model_validate(row))
        except ValidationError as exc:
            logger.warning("Skipping %s record due to validation error: %s", model.__name__, exc)
    return records


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _in_filter(values: Iterable[str]) -> str:
    """PostgREST ``in`` filter with every value double-quoted."""

    return "in.(" + ",".join(_quote(value) for value in values) + ")"


class CatalogGateway:
    """Talks to the PostgREST-style backend that stores products, orders and outfits.

    Reads never raise on transport problems: they log and return an empty result.
    Writes return ``None``/``False`` instead. Nothing is retried.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = settings or get_settings()
        if not settings.catalog_base_url:
            raise RuntimeError("Catalog base URL is not configured.")
        if not settings.catalog_api_key:
            raise RuntimeError("Catalog API key is not configured.")

        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.catalog_base_url.rstrip("/"),
            timeout=settings.catalog_timeout,
            transport=transport,
            headers={
                "apikey": settings.catalog_api_key,
                "Authorization": f"Bearer {settings.catalog_api_key}",
            },
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""

        await self._client.aclose()

    async def _request_json(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        try:
            response = await self._client.request(
                method,
                endpoint,
                params=params,
                json=json_body,
                headers=headers,
            )
            response.raise_for_status()
            if not response.content:
                return None
            return response.json()
        except httpx.TimeoutException as exc:
            raise CatalogRequestError("Catalog backend timed out.") from exc
        except httpx.HTTPStatusError as exc:
            raise CatalogRequestError(
                f"Catalog backend returned {exc.response.status_code}: {exc.response.text}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise CatalogRequestError(f"Catalog backend is unreachable: {exc}") from exc
        except ValueError as exc:
            raise CatalogRequestError("Catalog backend returned malformed JSON.") from exc

    async def _insert(self, table: str, row: Mapping[str, Any]) -> str | None:
        try:
            data = await self._request_json(
                "POST",
                f"/{table}",
                json_body=dict(row),
                headers={"Prefer": "return=representation"},
            )
        except CatalogRequestError as exc:
            logger.warning("Failed to insert into %s: %s", table, exc)
            return None
        if isinstance(data, list) and data and isinstance(data[0], Mapping):
            data = data[0]
        if not isinstance(data, Mapping) or data.get("id") is None:
            logger.warning("Insert into %s returned no id: %s", table, data)
            return None
        return str(data["id"])

    async def list_products(self, product_filter: ProductFilter | None = None) -> list[Product]:
        """Return validated products, or an empty list if the backend fails."""

        product_filter = product_filter or ProductFilter()
        params: dict[str, str] = {"select": "*"}
        if product_filter.newest_first:
            params["order"] = "created_at.desc"
        if product_filter.categories:
            params["category"] = _in_filter(category.value for category in product_filter.categories)
        if product_filter.ids is not None:
            params["id"] = _in_filter(product_filter.ids)
        if product_filter.limit:
            params["limit"] = str(product_filter.limit)

        try:
            rows = await self._request_json("GET", "/products", params=params)
        except CatalogRequestError as exc:
            logger.warning("Product listing failed, treating as empty: %s", exc)
            return []
        return _validate_records(Product, rows)

    async def get_products(self, product_ids: Sequence[str]) -> list[Product]:
        """Fetch specific products by id."""

        if not product_ids:
            return []
        return await self.list_products(ProductFilter(ids=list(product_ids), newest_first=False))

    async def create_order(
        self,
        user_id: str,
        lines: Sequence[CartLine],
        total_amount: Decimal,
    ) -> str | None:
        """Persist an order built from cart lines and return its id."""

        row = {
            "user_id": user_id,
            "items": [{"product_id": line.product_id, "quantity": line.quantity} for line in lines],
            "total_amount": str(total_amount),
            "status": "pending",
        }
        return await self._insert("orders", row)

    async def save_outfit(
        self,
        user_id: str,
        outfit_name: str,
        product_ids: Sequence[str],
        score: int,
        occasion: str,
    ) -> str | None:
        """Store a generated outfit for the user and return its id."""

        row = {
            "user_id": user_id,
            "outfit_name": outfit_name,
            "product_ids": list(product_ids),
            "ai_score": score,
            "event_type": occasion,
        }
        return await self._insert("saved_outfits", row)

    async def delete_outfit(self, outfit_id: str) -> bool:
        """Delete a saved outfit; ``False`` when the backend call failed."""

        try:
            await self._request_json("DELETE", "/saved_outfits", params={"id": f"eq.{outfit_id}"})
        except CatalogRequestError as exc:
            logger.warning("Failed to delete outfit %s: %s", outfit_id, exc)
            return False
        return True

    async def list_user_outfits(self, user_id: str) -> list[SavedOutfit]:
        """Return the user's saved outfits, newest first."""

        params = {"select": "*", "user_id": f"eq.{user_id}", "order": "created_at.desc"}
        try:
            rows = await self._request_json("GET", "/saved_outfits", params=params)
        except CatalogRequestError as exc:
            logger.warning("Saved outfit listing failed, treating as empty: %s", exc)
            return []
        return _validate_records(SavedOutfit, rows)

    async def list_user_orders(self, user_id: str) -> list[Order]:
        """Return the user's order history, newest first."""

        params = {"select": "*", "user_id": f"eq.{user_id}", "order": "created_at.desc"}
        try:
            rows = await self._request_json("GET", "/orders", params=params)
        except CatalogRequestError as exc:
            logger.warning("Order listing failed, treating as empty: %s", exc)
            return []
        return _validate_records(Order, rows)

    async def list_orders(self) -> list[Order]:
        """Return every order; used for store statistics."""

        try:
            rows = await self._request_json("GET", "/orders", params={"select": "*"})
        except CatalogRequestError as exc:
            logger.warning("Order listing failed, treating as empty: %s", exc)
            return []
        return _validate_records(Order, rows)

    async def _write_product(
        self,
        method: str,
        params: Mapping[str, str] | None,
        row: Mapping[str, Any],
    ) -> Product | None:
        try:
            data = await self._request_json(
                method,
                "/products",
                params=params,
                json_body=dict(row),
                headers={"Prefer": "return=representation"},
            )
        except CatalogRequestError as exc:
            logger.warning("Product %s failed: %s", method, exc)
            return None
        if data is None or data == []:
            return None
        records = _validate_records(Product, data if isinstance(data, list) else [data])
        return records[0] if records else None

    async def create_product(self, draft: ProductDraft) -> Product | None:
        """Insert a product and return the stored record."""

        product = await self._write_product("POST", None, draft.model_dump(mode="json"))
        if product is not None:
            logger.info("Created product %s", product.id)
        return product

    async def update_product(self, product_id: str, changes: ProductUpdate) -> Product | None:
        """Apply the fields set on ``changes``; ``None`` if nothing matched or the call failed."""

        row = changes.model_dump(mode="json", exclude_unset=True)
        if not row:
            logger.warning("Ignoring empty update for product %s", product_id)
            return None
        return await self._write_product("PATCH", {"id": f"eq.{product_id}"}, row)

    async def delete_product(self, product_id: str) -> bool:
        """Delete a product row; ``False`` when the backend call failed."""

        try:
            await self._request_json("DELETE", "/products", params={"id": f"eq.{product_id}"})
        except CatalogRequestError as exc:
            logger.warning("Failed to delete product %s: %s", product_id, exc)
            return False
        return True

    async def list_top_profiles(self, limit: int = 10) -> list[Profile]:
        """Highest style scores first, for the leaderboard."""

        params = {
            "select": "id,full_name,style_score,avatar_url",
            "order": "style_score.desc",
            "limit": str(limit),
        }
        try:
            rows = await self._request_json("GET", "/profiles", params=params)
        except CatalogRequestError as exc:
            logger.warning("Leaderboard listing failed, treating as empty: %s", exc)
            return []
        return _validate_records(Profile, rows)

    async def ping(self) -> bool:
        """Return ``True`` if the products table answers a minimal query."""

        await self._request_json("GET", "/products", params={"select": "id", "limit": "1"})
        return True

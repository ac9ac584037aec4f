"""FastAPI entrypoint and HTTP routes."""

from __future__ import annotations

import contextlib
import logging
from typing import AsyncIterator

from fastapi import Depends, FastAPI, File, Form, Header, HTTPException, Response, UploadFile, status

from stylecart.api.auth import AdminAuthDependency
from stylecart.api.context import AppContext, SessionViews, build_context, get_context
from stylecart.api.schemas import (
    AddItemRequest,
    CartView,
    CheckoutRequest,
    CheckoutResponse,
    OutfitRequest,
    OutfitView,
    SaveOutfitRequest,
    SaveOutfitResponse,
    StatsView,
    StyleAnalysisView,
    UpdateQuantityRequest,
)
from stylecart.cart.store import CartStore
from stylecart.catalog.browse import (
    ALL_CATEGORIES,
    TRYON_CATEGORIES,
    filter_products,
    load_catalog,
    load_tryon_candidates,
    merge_collection,
    summarise_store,
)
from stylecart.catalog.gateway import CatalogGateway
from stylecart.catalog.models import Order, Product, ProductDraft, ProductUpdate, Profile, SavedOutfit
from stylecart.monitoring.logging import configure_logging
from stylecart.recommender.engine import GeneratedOutfit
from stylecart.recommender.occasions import Occasion
from stylecart.services.checkout import EmptyCartError, place_order
from stylecart.tryon.loader import ImageDecodeError

logger = logging.getLogger(__name__)


def get_cart(
    x_session_id: str = Header(alias="X-Session-Id", min_length=1),
    context: AppContext = Depends(get_context),
) -> CartStore:
    return context.carts.get(x_session_id)


def get_views(
    x_session_id: str = Header(alias="X-Session-Id", min_length=1),
    context: AppContext = Depends(get_context),
) -> SessionViews:
    return context.views.get(x_session_id)


async def _catalog(context: AppContext) -> list[Product]:
    if context.gateway is None:
        return merge_collection([])
    return await load_catalog(context.gateway)


async def _find_product(context: AppContext, product_id: str) -> Product:
    for product in await _catalog(context):
        if product.id == product_id:
            return product
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown product {product_id}")


def _require_gateway(context: AppContext) -> CatalogGateway:
    if context.gateway is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Catalog backend is not configured.",
        )
    return context.gateway


async def _read_upload(upload: UploadFile, limit: int) -> bytes:
    # one byte past the limit is enough to tell an oversized upload apart
    content = await upload.read(limit + 1)
    if len(content) > limit:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="File too large")
    return content


def _decode_failed(exc: ImageDecodeError, hint: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=f"{exc} Please try again with a different {hint}.",
    )



def create_app(context: AppContext | None = None) -> FastAPI:
    """Initialise the FastAPI application."""

    context = context or build_context()

    @contextlib.asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        try:
            yield
        finally:
            if context.gateway is not None:
                await context.gateway.close()

    app = FastAPI(
        title="Stylecart API",
        version="0.1.0",
        docs_url="/docs" if context.settings.environment != "prod" else None,
        redoc_url="/redoc" if context.settings.environment != "prod" else None,
        lifespan=lifespan,
    )
    app.state.context = context

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple health endpoint used for readiness checks."""

        return {"status": "ok"}

    @app.get("/products", tags=["catalog"], response_model=list[Product])
    async def list_products(
        category: str = ALL_CATEGORIES,
        q: str = "",
        context: AppContext = Depends(get_context),
    ) -> list[Product]:
        return filter_products(await _catalog(context), category=category, query=q)

    @app.get("/cart", tags=["cart"], response_model=CartView)
    async def read_cart(cart: CartStore = Depends(get_cart)) -> CartView:
        return CartView.from_store(cart)

    @app.post("/cart/items", tags=["cart"], response_model=CartView)
    async def add_cart_item(
        body: AddItemRequest,
        cart: CartStore = Depends(get_cart),
        context: AppContext = Depends(get_context),
    ) -> CartView:
        product = await _find_product(context, body.product_id)
        cart.add_item(product)
        return CartView.from_store(cart)

    @app.patch("/cart/items/{product_id}", tags=["cart"], response_model=CartView)
    async def update_cart_item(
        product_id: str,
        body: UpdateQuantityRequest,
        cart: CartStore = Depends(get_cart),
    ) -> CartView:
        cart.update_quantity(product_id, body.quantity)
        return CartView.from_store(cart)

    @app.delete("/cart/items/{product_id}", tags=["cart"], response_model=CartView)
    async def remove_cart_item(product_id: str, cart: CartStore = Depends(get_cart)) -> CartView:
        cart.remove_item(product_id)
        return CartView.from_store(cart)

    @app.post("/cart/checkout", tags=["cart"], response_model=CheckoutResponse)
    async def checkout(
        body: CheckoutRequest,
        cart: CartStore = Depends(get_cart),
        context: AppContext = Depends(get_context),
    ) -> CheckoutResponse:
        gateway = _require_gateway(context)
        try:
            order_id = await place_order(cart, gateway, body.user_id)
        except EmptyCartError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        if order_id is None:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Order could not be placed. Please try again.",
            )
        return CheckoutResponse(order_id=order_id)

    @app.post("/outfits", tags=["stylist"], response_model=OutfitView)
    async def generate_outfit(
        body: OutfitRequest,
        views: SessionViews = Depends(get_views),
        context: AppContext = Depends(get_context),
    ) -> OutfitView:
        try:
            occasion = Occasion.parse(body.occasion)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
        outfit = await views.stylist.request_outfit(occasion, await _catalog(context))
        return OutfitView.from_outfit(outfit)

    @app.get("/outfits/latest", tags=["stylist"], response_model=OutfitView)
    async def latest_outfit(views: SessionViews = Depends(get_views)) -> OutfitView:
        outfit = views.stylist.latest
        if outfit is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No outfit generated yet")
        return OutfitView.from_outfit(outfit)

    @app.post("/outfits/save", tags=["stylist"], response_model=SaveOutfitResponse)
    async def save_outfit(
        body: SaveOutfitRequest,
        views: SessionViews = Depends(get_views),
        context: AppContext = Depends(get_context),
    ) -> SaveOutfitResponse:
        gateway = _require_gateway(context)
        try:
            occasion = Occasion.parse(body.occasion)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
        low, high = context.engine.score_range
        if not low <= body.score <= high:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Score must be between {low} and {high}.",
            )
        by_id = {product.id: product for product in await _catalog(context)}
        missing = [product_id for product_id in body.product_ids if product_id not in by_id]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unknown products: {', '.join(missing)}",
            )
        products = [by_id[product_id] for product_id in body.product_ids]
        outfit = GeneratedOutfit(occasion=occasion, products=tuple(products), score=body.score)
        outfit_id = await views.stylist.save_outfit(gateway, body.user_id, outfit, name=body.name)
        if outfit_id is None:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Outfit could not be saved. Please try again.",
            )
        return SaveOutfitResponse(outfit_id=outfit_id)

    @app.delete("/outfits/{outfit_id}", tags=["stylist"], status_code=status.HTTP_204_NO_CONTENT)
    async def delete_outfit(outfit_id: str, context: AppContext = Depends(get_context)) -> Response:
        gateway = _require_gateway(context)
        if not await gateway.delete_outfit(outfit_id):
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Outfit could not be deleted. Please try again.",
            )
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/users/{user_id}/orders", tags=["account"], response_model=list[Order])
    async def list_user_orders(user_id: str, context: AppContext = Depends(get_context)) -> list[Order]:
        return await _require_gateway(context).list_user_orders(user_id)

    @app.get("/users/{user_id}/outfits", tags=["account"], response_model=list[SavedOutfit])
    async def list_user_outfits(user_id: str, context: AppContext = Depends(get_context)) -> list[SavedOutfit]:
        return await _require_gateway(context).list_user_outfits(user_id)

    @app.get("/leaderboard", tags=["account"], response_model=list[Profile])
    async def leaderboard(context: AppContext = Depends(get_context)) -> list[Profile]:
        return await _require_gateway(context).list_top_profiles()

    @app.post("/analysis", tags=["analysis"], response_model=StyleAnalysisView)
    async def analyse_style(
        photo: UploadFile = File(...),
        views: SessionViews = Depends(get_views),
        context: AppContext = Depends(get_context),
    ) -> StyleAnalysisView:
        content = await _read_upload(photo, context.settings.tryon_max_upload_mb * 1024 * 1024)
        try:
            analysis = await views.analysis.analyse(content, await _catalog(context))
        except ImageDecodeError as exc:
            raise _decode_failed(exc, "photo") from exc
        return StyleAnalysisView.from_analysis(analysis)

    @app.get("/analysis/latest", tags=["analysis"], response_model=StyleAnalysisView)
    async def latest_analysis(views: SessionViews = Depends(get_views)) -> StyleAnalysisView:
        analysis = views.analysis.latest
        if analysis is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No photo analysed yet")
        return StyleAnalysisView.from_analysis(analysis)

    @app.post("/tryon", tags=["tryon"])
    async def try_on(
        photo: UploadFile = File(...),
        product_id: str = Form(...),
        views: SessionViews = Depends(get_views),
        context: AppContext = Depends(get_context),
    ) -> Response:
        if context.gateway is None:
            candidates = merge_collection([], TRYON_CATEGORIES)
        else:
            candidates = await load_tryon_candidates(context.gateway)
        product = next((candidate for candidate in candidates if candidate.id == product_id), None)
        if product is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Product {product_id} is not available for try-on",
            )

        content = await _read_upload(photo, context.settings.tryon_max_upload_mb * 1024 * 1024)
        try:
            result = await views.tryon.preview(content, product)
        except ImageDecodeError as exc:
            raise _decode_failed(exc, "photo or product") from exc
        return Response(content=result.image, media_type=result.media_type)

    @app.get("/tryon/latest", tags=["tryon"])
    async def latest_tryon(views: SessionViews = Depends(get_views)) -> Response:
        result = views.tryon.latest
        if result is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No try-on preview yet")
        return Response(content=result.image, media_type=result.media_type)

    @app.get("/admin/stats", tags=["admin"], response_model=StatsView, dependencies=[AdminAuthDependency])
    async def store_stats(context: AppContext = Depends(get_context)) -> StatsView:
        orders = await context.gateway.list_orders() if context.gateway is not None else []
        stats = summarise_store(await _catalog(context), orders)
        return StatsView(
            total_products=stats.total_products,
            total_orders=stats.total_orders,
            total_revenue=stats.total_revenue,
        )

    @app.post(
        "/admin/products",
        tags=["admin"],
        response_model=Product,
        status_code=status.HTTP_201_CREATED,
        dependencies=[AdminAuthDependency],
    )
    async def create_product(body: ProductDraft, context: AppContext = Depends(get_context)) -> Product:
        product = await _require_gateway(context).create_product(body)
        if product is None:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Product could not be created. Please try again.",
            )
        return product

    @app.patch(
        "/admin/products/{product_id}",
        tags=["admin"],
        response_model=Product,
        dependencies=[AdminAuthDependency],
    )
    async def update_product(
        product_id: str,
        body: ProductUpdate,
        context: AppContext = Depends(get_context),
    ) -> Product:
        gateway = _require_gateway(context)
        if not body.model_fields_set:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="No fields to update.")
        product = await gateway.update_product(product_id, body)
        if product is None:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Product {product_id} could not be updated.",
            )
        return product

    @app.delete(
        "/admin/products/{product_id}",
        tags=["admin"],
        status_code=status.HTTP_204_NO_CONTENT,
        dependencies=[AdminAuthDependency],
    )
    async def delete_product(product_id: str, context: AppContext = Depends(get_context)) -> Response:
        if not await _require_gateway(context).delete_product(product_id):
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Product could not be deleted. Please try again.",
            )
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


app = create_app()

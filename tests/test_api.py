"""Tests for the FastAPI routes."""

from __future__ import annotations

from decimal import Decimal
from io import BytesIO

import httpx
import pytest
import pytest_mock
from fastapi.testclient import TestClient
from PIL import Image

from stylecart.api.context import build_context
from stylecart.api.main import create_app
from stylecart.catalog.gateway import CatalogGateway
from stylecart.catalog.models import Order, Product, Profile, SavedOutfit
from stylecart.config.settings import Settings
from stylecart.recommender import Occasion
from stylecart.services.requests import no_delay
from stylecart.services.stylist import outfit_name
from stylecart.tryon import ImageLoader

SESSION = {"X-Session-Id": "session-1"}


@pytest.fixture
def garment_png(make_png) -> bytes:
    return make_png((16, 16), (0, 0, 255))


def _client(garment: bytes, gateway: CatalogGateway | None = None, settings: Settings | None = None) -> TestClient:
    loader = ImageLoader(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, content=garment)),
    )
    context = build_context(
        settings or Settings(),
        gateway=gateway,
        loader=loader,
        delay=no_delay,
        score_generator=lambda: 90,
    )
    return TestClient(create_app(context))


@pytest.fixture
def client(garment_png: bytes) -> TestClient:
    return _client(garment_png)


@pytest.fixture
def gateway(mocker: pytest_mock.MockerFixture):
    gateway = mocker.Mock(spec=CatalogGateway)
    gateway.list_products = mocker.AsyncMock(return_value=[])
    gateway.create_order = mocker.AsyncMock(return_value="order-1")
    gateway.save_outfit = mocker.AsyncMock(return_value="saved-1")
    return gateway


def test_health_returns_ok(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_products_can_be_filtered(client: TestClient) -> None:
    everything = client.get("/products").json()
    dresses = client.get("/products", params={"category": "dresses"}).json()
    searched = client.get("/products", params={"q": "SAREE"}).json()

    assert len(everything) == 10
    assert [product["id"] for product in dresses] == ["indian-2", "indian-4", "indian-8"]
    assert [product["id"] for product in searched] == ["indian-2"]


def test_cart_flow(client: TestClient) -> None:
    client.post("/cart/items", json={"product_id": "indian-1"}, headers=SESSION)
    client.post("/cart/items", json={"product_id": "indian-10"}, headers=SESSION)
    response = client.post("/cart/items", json={"product_id": "indian-1"}, headers=SESSION)

    body = response.json()
    assert [(line["product_id"], line["quantity"]) for line in body["lines"]] == [("indian-1", 2), ("indian-10", 1)]
    assert Decimal(body["total"]) == Decimal("6297")
    assert body["count"] == 3

    body = client.patch("/cart/items/indian-1", json={"quantity": 0}, headers=SESSION).json()
    assert [line["product_id"] for line in body["lines"]] == ["indian-10"]

    body = client.delete("/cart/items/indian-10", headers=SESSION).json()
    assert body["lines"] == []
    assert Decimal(body["total"]) == 0


def test_carts_are_isolated_per_session(client: TestClient) -> None:
    client.post("/cart/items", json={"product_id": "indian-1"}, headers=SESSION)

    other = client.get("/cart", headers={"X-Session-Id": "session-2"}).json()

    assert other["count"] == 0


def test_cart_requires_session_header(client: TestClient) -> None:
    assert client.get("/cart").status_code == 422


def test_adding_unknown_product_is_404(client: TestClient) -> None:
    response = client.post("/cart/items", json={"product_id": "missing"}, headers=SESSION)

    assert response.status_code == 404


def test_checkout_without_backend_is_unavailable(client: TestClient) -> None:
    client.post("/cart/items", json={"product_id": "indian-1"}, headers=SESSION)

    response = client.post("/cart/checkout", json={"user_id": "u1"}, headers=SESSION)

    assert response.status_code == 503


def test_checkout_places_order(garment_png: bytes, gateway) -> None:
    client = _client(garment_png, gateway)
    client.post("/cart/items", json={"product_id": "indian-1"}, headers=SESSION)

    empty = client.post("/cart/checkout", json={"user_id": "u1"}, headers={"X-Session-Id": "other"})
    response = client.post("/cart/checkout", json={"user_id": "u1"}, headers=SESSION)

    assert empty.status_code == 400
    assert response.json() == {"order_id": "order-1"}
    assert client.get("/cart", headers=SESSION).json()["count"] == 0


def test_checkout_failure_is_bad_gateway(garment_png: bytes, gateway) -> None:
    gateway.create_order.return_value = None
    client = _client(garment_png, gateway)
    client.post("/cart/items", json={"product_id": "indian-1"}, headers=SESSION)

    response = client.post("/cart/checkout", json={"user_id": "u1"}, headers=SESSION)

    assert response.status_code == 502
    assert client.get("/cart", headers=SESSION).json()["count"] == 1


def test_formal_outfit_from_collection(client: TestClient) -> None:
    response = client.post("/outfits", json={"occasion": "formal"}, headers=SESSION)

    body = response.json()
    assert response.status_code == 200
    assert [product["id"] for product in body["products"]] == ["indian-3", "indian-5", "indian-6"]
    assert body["score"] == 90
    assert body["occasion"] == "formal"


def test_outfit_without_matches_falls_back_to_catalog_head(client: TestClient) -> None:
    body = client.post("/outfits", json={"occasion": "party"}, headers=SESSION).json()

    assert [product["id"] for product in body["products"]] == ["indian-1", "indian-2", "indian-3"]


def test_unknown_occasion_is_rejected(client: TestClient) -> None:
    assert client.post("/outfits", json={"occasion": "gala"}, headers=SESSION).status_code == 422


def test_save_outfit(garment_png: bytes, gateway) -> None:
    client = _client(garment_png, gateway)
    payload = {"user_id": "u1", "occasion": "formal", "product_ids": ["indian-3", "indian-5"], "score": 90}

    response = client.post("/outfits/save", json=payload, headers=SESSION)

    assert response.json() == {"outfit_id": "saved-1"}
    gateway.save_outfit.assert_awaited_once_with(
        "u1",
        outfit_name(Occasion.FORMAL),
        ["indian-3", "indian-5"],
        90,
        "formal",
    )


def test_save_outfit_validates_request(garment_png: bytes, gateway) -> None:
    client = _client(garment_png, gateway)
    base = {"user_id": "u1", "occasion": "formal", "product_ids": ["indian-3"], "score": 90}

    assert client.post("/outfits/save", json={**base, "score": 40}, headers=SESSION).status_code == 422
    assert client.post("/outfits/save", json={**base, "occasion": "gala"}, headers=SESSION).status_code == 422
    assert client.post("/outfits/save", json={**base, "product_ids": ["nope"]}, headers=SESSION).status_code == 404
    gateway.save_outfit.assert_not_awaited()


def test_tryon_returns_png_of_photo_size(client: TestClient, make_png) -> None:
    photo = make_png((120, 80), (255, 255, 255))

    response = client.post(
        "/tryon",
        files={"photo": ("me.png", photo, "image/png")},
        data={"product_id": "indian-1"},
        headers=SESSION,
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert Image.open(BytesIO(response.content)).size == (120, 80)


def test_tryon_rejects_non_tryon_product(client: TestClient, make_png) -> None:
    response = client.post(
        "/tryon",
        files={"photo": ("me.png", make_png((10, 10), (0, 0, 0)), "image/png")},
        data={"product_id": "indian-3"},
        headers=SESSION,
    )

    assert response.status_code == 404


def test_tryon_reports_undecodable_photo(client: TestClient) -> None:
    response = client.post(
        "/tryon",
        files={"photo": ("me.png", b"not an image", "image/png")},
        data={"product_id": "indian-2"},
        headers=SESSION,
    )

    assert response.status_code == 422
    assert "photo" in response.json()["detail"]


def test_account_history_requires_backend(client: TestClient) -> None:
    assert client.get("/users/u1/orders").status_code == 503
    assert client.delete("/outfits/o1").status_code == 503


def test_account_history(garment_png: bytes, gateway, mocker: pytest_mock.MockerFixture) -> None:
    gateway.list_user_orders = mocker.AsyncMock(
        return_value=[Order(id="o1", user_id="u1", total_amount=Decimal("12.00"))]
    )
    gateway.list_user_outfits = mocker.AsyncMock(
        return_value=[SavedOutfit(id="s1", user_id="u1", outfit_name="party look", ai_score=88)]
    )
    gateway.delete_outfit = mocker.AsyncMock(side_effect=[True, False])
    client = _client(garment_png, gateway)

    orders = client.get("/users/u1/orders").json()
    outfits = client.get("/users/u1/outfits").json()

    assert [order["id"] for order in orders] == ["o1"]
    assert outfits[0]["outfit_name"] == "party look"
    assert client.delete("/outfits/s1").status_code == 204
    assert client.delete("/outfits/s1").status_code == 502
    gateway.list_user_orders.assert_awaited_once_with("u1")


ADMIN = {"X-Internal-Token": "admin-secret"}
ADMIN_SETTINGS = Settings(admin_token="admin-secret")


def test_store_stats_require_admin_token(garment_png: bytes, gateway, mocker: pytest_mock.MockerFixture) -> None:
    gateway.list_orders = mocker.AsyncMock(
        return_value=[
            Order(id="o1", user_id="u1", total_amount=Decimal("10.50")),
            Order(id="o2", user_id="u2", total_amount=Decimal("4.50")),
        ]
    )
    client = _client(garment_png, gateway, ADMIN_SETTINGS)

    assert client.get("/admin/stats").status_code == 401
    assert client.get("/admin/stats", headers={"X-Internal-Token": "wrong"}).status_code == 401
    body = client.get("/admin/stats", headers=ADMIN).json()

    assert body["total_products"] == 10
    assert body["total_orders"] == 2
    assert Decimal(body["total_revenue"]) == Decimal("15.00")


def test_admin_routes_are_closed_without_configured_token(client: TestClient) -> None:
    response = client.get("/admin/stats")

    assert response.status_code == 503
    assert client.delete("/admin/products/p1", headers=ADMIN).status_code == 503


def test_admin_product_management(garment_png: bytes, gateway, mocker: pytest_mock.MockerFixture) -> None:
    product = Product(
        id="new-1",
        name="Linen Shirt",
        price=Decimal("1299"),
        category="tops",
        image_url="https://cdn.test/linen.jpg",
        stock=4,
    )
    gateway.create_product = mocker.AsyncMock(return_value=product)
    gateway.update_product = mocker.AsyncMock(side_effect=[product.model_copy(update={"stock": 0}), None])
    gateway.delete_product = mocker.AsyncMock(side_effect=[True, False])
    client = _client(garment_png, gateway, ADMIN_SETTINGS)
    draft = {"name": "Linen Shirt", "price": "1299", "image_url": "https://cdn.test/linen.jpg", "stock": 4}

    created = client.post("/admin/products", json=draft, headers=ADMIN)
    updated = client.patch("/admin/products/new-1", json={"stock": 0}, headers=ADMIN)
    failed = client.patch("/admin/products/new-1", json={"stock": 1}, headers=ADMIN)
    empty = client.patch("/admin/products/new-1", json={}, headers=ADMIN)

    assert created.status_code == 201
    assert created.json()["id"] == "new-1"
    assert updated.json()["stock"] == 0
    assert failed.status_code == 502
    assert empty.status_code == 422
    assert client.delete("/admin/products/new-1", headers=ADMIN).status_code == 204
    assert client.delete("/admin/products/new-1", headers=ADMIN).status_code == 502
    assert gateway.create_product.await_args.args[0].name == "Linen Shirt"
    assert gateway.update_product.await_args_list[0].args[1].model_dump(exclude_unset=True) == {"stock": 0}


def test_admin_rejects_local_image_paths(garment_png: bytes, gateway, mocker: pytest_mock.MockerFixture) -> None:
    gateway.create_product = mocker.AsyncMock()
    client = _client(garment_png, gateway, ADMIN_SETTINGS)

    response = client.post(
        "/admin/products",
        json={"name": "Shirt", "price": "10", "image_url": "/etc/passwd"},
        headers=ADMIN,
    )

    assert response.status_code == 422
    gateway.create_product.assert_not_awaited()


def test_leaderboard(garment_png: bytes, gateway, mocker: pytest_mock.MockerFixture) -> None:
    gateway.list_top_profiles = mocker.AsyncMock(
        return_value=[Profile(id="u2", full_name="Asha", style_score=97), Profile(id="u1", style_score=88)]
    )
    client = _client(garment_png, gateway)

    body = client.get("/leaderboard").json()

    assert [(row["id"], row["style_score"]) for row in body] == [("u2", 97), ("u1", 88)]


def test_leaderboard_requires_backend(client: TestClient) -> None:
    assert client.get("/leaderboard").status_code == 503


def test_latest_outfit_is_kept_per_session(client: TestClient) -> None:
    other = {"X-Session-Id": "session-2"}

    assert client.get("/outfits/latest", headers=SESSION).status_code == 404
    client.post("/outfits", json={"occasion": "formal"}, headers=SESSION)
    client.post("/outfits", json={"occasion": "party"}, headers=other)

    assert client.get("/outfits/latest", headers=SESSION).json()["occasion"] == "formal"
    assert client.get("/outfits/latest", headers=other).json()["occasion"] == "party"


def test_outfits_require_session_header(client: TestClient) -> None:
    assert client.post("/outfits", json={"occasion": "formal"}).status_code == 422


def test_latest_tryon_preview(client: TestClient, make_png) -> None:
    assert client.get("/tryon/latest", headers=SESSION).status_code == 404

    client.post(
        "/tryon",
        files={"photo": ("me.png", make_png((30, 20), (255, 255, 255)), "image/png")},
        data={"product_id": "indian-1"},
        headers=SESSION,
    )
    response = client.get("/tryon/latest", headers=SESSION)

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert Image.open(BytesIO(response.content)).size == (30, 20)
    assert client.get("/tryon/latest", headers={"X-Session-Id": "session-2"}).status_code == 404


def test_tryon_rejects_oversized_upload(garment_png: bytes) -> None:
    client = _client(garment_png, settings=Settings(tryon_max_upload_mb=1))

    response = client.post(
        "/tryon",
        files={"photo": ("me.png", b"x" * (1024 * 1024 + 1), "image/png")},
        data={"product_id": "indian-1"},
        headers=SESSION,
    )

    assert response.status_code == 413
    assert client.get("/tryon/latest", headers=SESSION).status_code == 404


def test_style_analysis(client: TestClient, make_png) -> None:
    response = client.post(
        "/analysis",
        files={"photo": ("me.png", make_png((12, 12), (200, 150, 100)), "image/png")},
        headers=SESSION,
    )

    body = response.json()
    assert response.status_code == 200
    assert [product["id"] for product in body["products"]] == ["indian-1", "indian-2", "indian-3", "indian-4"]
    assert body["score"] == 90
    assert client.get("/analysis/latest", headers=SESSION).json() == body
    assert client.get("/analysis/latest", headers={"X-Session-Id": "session-2"}).status_code == 404


def test_style_analysis_reports_undecodable_photo(client: TestClient) -> None:
    response = client.post(
        "/analysis",
        files={"photo": ("me.png", b"not an image", "image/png")},
        headers=SESSION,
    )

    assert response.status_code == 422
    assert "photo" in response.json()["detail"]

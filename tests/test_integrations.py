"""Tests for external integration connectivity helpers."""

from __future__ import annotations

import httpx
import pytest
import pytest_mock

from stylecart.catalog.gateway import CatalogRequestError
from stylecart.config.settings import get_settings
from stylecart.integrations.checks import check_catalog, check_tryon_images, run_all_checks
from stylecart.tryon import ImageLoader


@pytest.fixture(autouse=True)
def _setup_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CATALOG_BASE_URL", "https://catalog.test/rest/v1")
    monkeypatch.setenv("CATALOG_API_KEY", "test-key")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def gateway_instance(mocker: pytest_mock.MockerFixture):
    gateway_mock = mocker.patch("stylecart.integrations.checks.CatalogGateway", autospec=True)
    instance = gateway_mock.return_value
    instance.close = mocker.AsyncMock(return_value=None)
    return instance


@pytest.mark.asyncio
async def test_check_catalog_success(gateway_instance, mocker: pytest_mock.MockerFixture) -> None:
    gateway_instance.ping = mocker.AsyncMock(return_value=True)

    result = await check_catalog()

    assert result.success
    assert result.name == "Catalog"
    assert result.elapsed_ms >= 0
    gateway_instance.ping.assert_awaited_once()
    gateway_instance.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_check_catalog_failure(gateway_instance, mocker: pytest_mock.MockerFixture) -> None:
    gateway_instance.ping = mocker.AsyncMock(return_value=False)

    result = await check_catalog()

    assert not result.success
    assert "non-success" in result.message.lower()
    gateway_instance.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_check_catalog_reports_request_errors(gateway_instance, mocker: pytest_mock.MockerFixture) -> None:
    gateway_instance.ping = mocker.AsyncMock(side_effect=CatalogRequestError("Catalog backend timed out."))

    result = await check_catalog()

    assert (result.success, result.message) == (False, "Catalog backend timed out.")
    gateway_instance.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_check_catalog_without_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CATALOG_API_KEY", "")
    get_settings.cache_clear()

    result = await check_catalog()

    assert not result.success
    assert "API key" in result.message


@pytest.mark.asyncio
async def test_check_tryon_images_success(make_png) -> None:
    garment = make_png((8, 8), (0, 0, 255))
    loader = ImageLoader(transport=httpx.MockTransport(lambda request: httpx.Response(200, content=garment)))

    result = await check_tryon_images(loader)

    assert result.success
    assert result.message == "4 garment images decode."


@pytest.mark.asyncio
async def test_check_tryon_images_lists_broken_products(make_png) -> None:
    garment = make_png((8, 8), (0, 0, 255))

    def handler(request: httpx.Request) -> httpx.Response:
        if "gs-ss04ubu2" in str(request.url):
            return httpx.Response(404)
        return httpx.Response(200, content=garment)

    result = await check_tryon_images(ImageLoader(transport=httpx.MockTransport(handler)))

    assert not result.success
    assert "indian-2" in result.message
    assert "indian-1" not in result.message


@pytest.mark.asyncio
async def test_run_all_checks_covers_every_integration(
    gateway_instance,
    make_png,
    mocker: pytest_mock.MockerFixture,
) -> None:
    gateway_instance.ping = mocker.AsyncMock(return_value=True)
    garment = make_png((8, 8), (0, 0, 255))
    loader = ImageLoader(transport=httpx.MockTransport(lambda request: httpx.Response(200, content=garment)))
    mocker.patch("stylecart.integrations.checks.ImageLoader", return_value=loader)

    results = await run_all_checks()

    assert [(result.name, result.success) for result in results] == [("Catalog", True), ("Try-on images", True)]

"""Asynchronous image loading for the try-on pipeline."""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from io import BytesIO
from pathlib import Path
from typing import Union

import httpx
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, str, Path]


class TryOnError(RuntimeError):
    """Base error for a failed try-on request."""


class ImageDecodeError(TryOnError):
    """Raised when one of the source images cannot be fetched or decoded."""

    def __init__(self, role: str, reason: str) -> None:
        self.role = role
        super().__init__(f"Could not load {role} image: {reason}")


def _decode(data: bytes, role: str) -> Image.Image:
    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            # detach from the BytesIO so the image outlives the context manager
            return img.copy()
    except UnidentifiedImageError as exc:
        raise ImageDecodeError(role, "unsupported image type") from exc
    except (OSError, ValueError, EOFError, SyntaxError, Image.DecompressionBombError) as exc:
        raise ImageDecodeError(role, str(exc) or type(exc).__name__) from exc


def _decode_data_url(source: str, role: str) -> bytes:
    header, _, encoded = source.partition(",")
    if not encoded or ";base64" not in header:
        raise ImageDecodeError(role, "data URL is not base64 encoded")
    try:
        return base64.b64decode(encoded, validate=True)
    except (ValueError, binascii.Error) as exc:
        raise ImageDecodeError(role, "invalid base64 payload") from exc


class ImageLoader:
    """Turns bytes, ``data:`` URLs, http(s) URLs or ``Path`` objects into decoded images.

    Strings are only ever treated as URLs; reading a local file needs an explicit
    ``Path``.

    Decoding runs in a worker thread so the event loop stays responsive.
    """

    def __init__(
        self,
        *,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    async def _fetch(self, url: str, role: str) -> bytes:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(url, follow_redirects=True)
                response.raise_for_status()
                return response.content
        except httpx.HTTPStatusError as exc:
            raise ImageDecodeError(role, f"download failed with {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise ImageDecodeError(role, f"download failed: {exc}") from exc

    async def _read_file(self, path: Path, role: str) -> bytes:
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise ImageDecodeError(role, f"cannot read {path.name}") from exc

    async def read(self, source: ImageSource, role: str = "source") -> bytes:
        """Return the raw encoded bytes behind ``source``."""

        if isinstance(source, (bytes, bytearray)):
            return bytes(source)
        if isinstance(source, Path):
            return await self._read_file(source, role)
        if source.startswith("data:"):
            return _decode_data_url(source, role)
        if source.startswith(("http://", "https://")):
            return await self._fetch(source, role)
        raise ImageDecodeError(role, "unsupported image source; expected an http(s) or data: URL")

    async def load(self, source: ImageSource, role: str = "source") -> Image.Image:
        """Fetch and fully decode ``source``."""

        data = await self.read(source, role)
        if not data:
            raise ImageDecodeError(role, "empty payload")
        image = await asyncio.to_thread(_decode, data, role)
        logger.debug("Decoded %s image %sx%s (%s)", role, image.width, image.height, image.mode)
        return image

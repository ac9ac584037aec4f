"""Garment-on-photo preview compositing."""

from __future__ import annotations

import asyncio
import base64
import logging
from dataclasses import dataclass
from io import BytesIO

from PIL import Image

from stylecart.tryon.geometry import OverlayGeometry
from stylecart.tryon.loader import ImageLoader, ImageSource

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class TryOnResult:
    """Flattened preview image."""

    image: bytes
    width: int
    height: int
    media_type: str = "image/png"

    def as_data_url(self) -> str:
        encoded = base64.b64encode(self.image).decode("ascii")
        return f"data:{self.media_type};base64,{encoded}"


class TryOnCompositor:
    """Overlays a garment image onto the shopper's photo.

    The photo is drawn at full opacity, then the garment is scaled into the
    overlay box with its alpha multiplied by ``opacity``. Output keeps the
    photo's pixel dimensions.
    """

    def __init__(
        self,
        loader: ImageLoader | None = None,
        *,
        geometry: OverlayGeometry | None = None,
        opacity: float = 0.8,
    ) -> None:
        if not 0 <= opacity <= 1:
            raise ValueError(f"opacity must be in [0, 1], got {opacity}")
        self._loader = loader or ImageLoader()
        self._geometry = geometry or OverlayGeometry()
        self._opacity = opacity

    async def compose(self, user_image: ImageSource, product_image: ImageSource) -> TryOnResult:
        """Return the composited preview.

        Raises ``ImageDecodeError`` if either image cannot be loaded; there is
        no partial result.
        """

        base, garment = await asyncio.gather(
            self._loader.load(user_image, role="photo"),
            self._loader.load(product_image, role="garment"),
        )
        result = await asyncio.to_thread(self._render, base, garment)
        logger.info("Composited try-on preview %sx%s", result.width, result.height)
        return result

    def _render(self, base: Image.Image, garment: Image.Image) -> TryOnResult:
        has_alpha = "A" in base.getbands()
        canvas = base.convert("RGBA")
        rect = self._geometry.rect_for(canvas.size)

        overlay = garment.convert("RGBA").resize((rect.width, rect.height), Image.Resampling.LANCZOS)
        if self._opacity < 1:
            opacity = self._opacity
            overlay.putalpha(overlay.getchannel("A").point(lambda value: round(value * opacity)))
        canvas.alpha_composite(overlay, dest=(rect.x, rect.y))

        if not has_alpha:
            canvas = canvas.convert("RGB")
        buffer = BytesIO()
        canvas.save(buffer, format="PNG")
        return TryOnResult(image=buffer.getvalue(), width=canvas.width, height=canvas.height)

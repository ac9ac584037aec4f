"""Virtual try-on preview."""

from .compositor import TryOnCompositor, TryOnResult
from .geometry import OverlayGeometry, OverlayRect
from .loader import ImageDecodeError, ImageLoader, TryOnError

__all__ = [
    "ImageDecodeError",
    "ImageLoader",
    "OverlayGeometry",
    "OverlayRect",
    "TryOnCompositor",
    "TryOnError",
    "TryOnResult",
]

"""Placement of the garment overlay on the shopper's photo."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class OverlayRect:
    x: int
    y: int
    width: int
    height: int


@dataclass(slots=True, frozen=True)
class OverlayGeometry:
    """Fixed-fraction torso box. There is no body detection behind it."""

    width_ratio: float = 0.6
    height_ratio: float = 0.4
    top_ratio: float = 0.2

    def __post_init__(self) -> None:
        for name in ("width_ratio", "height_ratio"):
            value = getattr(self, name)
            if not 0 < value <= 1:
                raise ValueError(f"{name} must be in (0, 1], got {value}")
        if not 0 <= self.top_ratio < 1:
            raise ValueError(f"top_ratio must be in [0, 1), got {self.top_ratio}")

    def rect_for(self, size: tuple[int, int]) -> OverlayRect:
        """Return the overlay box for a base image of ``size`` (width, height)."""

        base_width, base_height = size
        width = max(1, round(base_width * self.width_ratio))
        height = max(1, round(base_height * self.height_ratio))
        x = round((base_width - width) / 2)
        y = min(round(base_height * self.top_ratio), max(0, base_height - height))
        return OverlayRect(x=x, y=y, width=width, height=height)

"""Viewport geometry: screen pan/zoom to a world-space rectangle."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_SCREEN_WIDTH = 1920.0
DEFAULT_SCREEN_HEIGHT = 1080.0


@dataclass(frozen=True)
class Viewport:
    """Pan offset (screen pixels) and zoom factor."""

    x: float = 0.0
    y: float = 0.0
    zoom: float = 1.0

    def __post_init__(self) -> None:
        if self.zoom <= 0:
            raise ValueError("zoom must be positive")


@dataclass(frozen=True)
class ViewportBounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def intersects(self, x: float, y: float, width: float, height: float) -> bool:
        """Closed-interval overlap test against an axis-aligned box."""
        return (
            x + width >= self.min_x
            and x <= self.max_x
            and y + height >= self.min_y
            and y <= self.max_y
        )


def compute_viewport_bounds(
    viewport: Viewport,
    padding: float = 0.0,
    screen_width: float = DEFAULT_SCREEN_WIDTH,
    screen_height: float = DEFAULT_SCREEN_HEIGHT,
) -> ViewportBounds:
    """Inverse-project the screen into world space and pad it on all sides."""
    left = -viewport.x / viewport.zoom
    top = -viewport.y / viewport.zoom
    return ViewportBounds(
        min_x=left - padding,
        max_x=left + screen_width / viewport.zoom + padding,
        min_y=top - padding,
        max_y=top + screen_height / viewport.zoom + padding,
    )

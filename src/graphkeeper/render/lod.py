"""Level-of-detail selection from zoom."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DetailLevel(str, Enum):
    FULL = "full"
    SIMPLIFIED = "simplified"
    MINIMAL = "minimal"


@dataclass(frozen=True)
class LodThresholds:
    """Minimum zoom for each tier."""

    full: float = 0.75
    simplified: float = 0.5
    minimal: float = 0.25

    def __post_init__(self) -> None:
        if not self.full > self.simplified > self.minimal:
            raise ValueError("thresholds must satisfy full > simplified > minimal")


DEFAULT_LOD_THRESHOLDS = LodThresholds()


@dataclass(frozen=True)
class LevelOfDetail:
    detail_level: DetailLevel
    should_render_labels: bool
    should_render_icons: bool


def select_level_of_detail(
    zoom: float, thresholds: LodThresholds = DEFAULT_LOD_THRESHOLDS
) -> LevelOfDetail:
    """Pick the rendering tier for ``zoom``.

    Labels appear from the ``simplified`` threshold, icons only from
    ``full``, so mid-range zoom shows labels without icons.
    """
    if zoom >= thresholds.full:
        level = DetailLevel.FULL
    elif zoom >= thresholds.simplified:
        level = DetailLevel.SIMPLIFIED
    else:
        level = DetailLevel.MINIMAL
    return LevelOfDetail(
        detail_level=level,
        should_render_labels=zoom >= thresholds.simplified,
        should_render_icons=zoom >= thresholds.full,
    )

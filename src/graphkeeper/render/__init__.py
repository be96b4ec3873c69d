"""Rendering support: viewport culling, progressive loading, level of detail."""

from .culling import (
    DEFAULT_VIRTUALIZATION_OPTIONS,
    RenderStats,
    VirtualizationOptions,
    VirtualizationResult,
    virtualize,
)
from .lod import DetailLevel, LevelOfDetail, LodThresholds, select_level_of_detail
from .progressive import ProgressiveLoader
from .viewport import Viewport, ViewportBounds, compute_viewport_bounds

__all__ = [
    "DEFAULT_VIRTUALIZATION_OPTIONS",
    "DetailLevel",
    "LevelOfDetail",
    "LodThresholds",
    "ProgressiveLoader",
    "RenderStats",
    "Viewport",
    "ViewportBounds",
    "VirtualizationOptions",
    "VirtualizationResult",
    "compute_viewport_bounds",
    "select_level_of_detail",
    "virtualize",
]

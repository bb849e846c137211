"""Fabulator geometry processing module.

Components:
- low_lod: Low level-of-detail wire rectangles for tile rendering
"""

from fabulator.geometry.low_lod import build_density_grid, extract_rects, rasterize

__all__ = ["build_density_grid", "extract_rects", "rasterize"]

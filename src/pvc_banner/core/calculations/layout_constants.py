"""
Fixed banner template constants.
All lengths are millimetres; the ratios are applied to the font size.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BannerConstants:
    margin_mm: float = 25.0
    border_thickness_mm: float = 0.5
    circle_diameter_mm: float = 12.0
    circle_offset_mm: float = 37.5
    min_circle_spacing_mm: float = 500.0
    text_indent_mm: float = 5.0
    line_spacing_ratio: float = 1.3
    visual_center_ratio: float = 0.35
    half_line_ratio: float = 0.5
    mm_per_inch: float = 25.4
    points_per_inch: float = 72.0

    @property
    def circle_radius_mm(self) -> float:
        return self.circle_diameter_mm / 2


CONSTANTS = BannerConstants()

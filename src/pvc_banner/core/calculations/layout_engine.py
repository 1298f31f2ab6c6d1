"""
Geometry engine for the banner template.
Pure functions: BannerSpec in, LayoutPlan out. Everything is millimetres;
conversion to PDF points happens only through mm_to_points/points_to_mm.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Sequence

from pvc_banner.core.calculations.layout_constants import CONSTANTS, BannerConstants
from pvc_banner.core.models.banner import BannerSpec, Circle, LayoutPlan, Panel, Rect, TextLine

# (text, font size in points) -> rendered width in points
TextMeasurer = Callable[[str, float], float]


def mm_to_points(mm: float) -> float:
    return mm / CONSTANTS.mm_per_inch * CONSTANTS.points_per_inch


def points_to_mm(points: float) -> float:
    return points / CONSTANTS.points_per_inch * CONSTANTS.mm_per_inch


@dataclass(frozen=True)
class EdgeDistribution:
    """Intermediate circles along one axis (both parallel edges)."""

    span_mm: float
    count: int
    spacing_mm: float
    circles: tuple[Circle, ...]


def background_rect(spec: BannerSpec) -> Rect:
    return Rect(x=0.0, y=0.0, width=spec.width_mm, height=spec.height_mm)


def panel_rect(spec: BannerSpec, constants: BannerConstants = CONSTANTS) -> Panel:
    # Not validated: banners smaller than 2 * margin give a negative panel.
    margin = constants.margin_mm
    return Panel(
        x=margin,
        y=margin,
        width=spec.width_mm - 2 * margin,
        height=spec.height_mm - 2 * margin,
        border_width_mm=constants.border_thickness_mm,
    )


def corner_circles(width_mm: float, height_mm: float, constants: BannerConstants = CONSTANTS) -> tuple[Circle, ...]:
    offset = constants.circle_offset_mm
    radius = constants.circle_radius_mm
    return (
        Circle(offset, offset, radius),
        Circle(width_mm - offset, offset, radius),
        Circle(offset, height_mm - offset, radius),
        Circle(width_mm - offset, height_mm - offset, radius),
    )


def intermediate_circles(
    width_mm: float,
    height_mm: float,
    axis: str,
    constants: BannerConstants = CONSTANTS,
) -> EdgeDistribution:
    """
    Distribute circles between two corners along `axis` ("horizontal" or "vertical").

    The span between corner centres is split into count+1 equal segments with
    count = floor(span / min spacing). The resulting segment can be shorter than
    the minimum spacing; that is the intended template behaviour.
    """
    if axis not in ("horizontal", "vertical"):
        raise ValueError(f"Unknown axis: {axis}")
    offset = constants.circle_offset_mm
    radius = constants.circle_radius_mm
    dimension = width_mm if axis == "horizontal" else height_mm
    span = dimension - 2 * offset
    if span < constants.min_circle_spacing_mm:
        return EdgeDistribution(span_mm=span, count=0, spacing_mm=0.0, circles=())

    count = int(math.floor(span / constants.min_circle_spacing_mm))
    spacing = span / (count + 1)
    circles: list[Circle] = []
    for i in range(1, count + 1):
        pos = offset + i * spacing
        if axis == "horizontal":
            circles.append(Circle(pos, height_mm - offset, radius))  # top
            circles.append(Circle(pos, offset, radius))  # bottom
        else:
            circles.append(Circle(offset, pos, radius))  # left
            circles.append(Circle(width_mm - offset, pos, radius))  # right
    return EdgeDistribution(span_mm=span, count=count, spacing_mm=spacing, circles=tuple(circles))


def compute_circles(width_mm: float, height_mm: float, constants: BannerConstants = CONSTANTS) -> tuple[Circle, ...]:
    horizontal = intermediate_circles(width_mm, height_mm, "horizontal", constants)
    vertical = intermediate_circles(width_mm, height_mm, "vertical", constants)
    return corner_circles(width_mm, height_mm, constants) + horizontal.circles + vertical.circles


def compute_text_lines(
    lines: Sequence[str],
    font_size_mm: float,
    page_width_mm: float,
    page_height_mm: float,
    center_text: bool,
    measure: TextMeasurer,
    constants: BannerConstants = CONSTANTS,
) -> tuple[TextLine, ...]:
    """
    Baseline positions for each line, top to bottom.

    `measure` works in PDF points; it is called once per line before any
    position is computed and its errors are not caught here.
    """
    font_size_pt = mm_to_points(font_size_mm)
    widths = [points_to_mm(measure(line, font_size_pt)) for line in lines]

    font_size = font_size_mm
    line_spacing = font_size * constants.line_spacing_ratio
    total_text_height = (len(lines) - 1) * line_spacing + font_size

    if center_text:
        start_y = (
            page_height_mm / 2
            + total_text_height / 2
            - font_size * constants.visual_center_ratio
            - line_spacing * constants.half_line_ratio
        )
    else:
        start_y = page_height_mm - constants.margin_mm

    result: list[TextLine] = []
    for index, (line, width) in enumerate(zip(lines, widths)):
        if center_text:
            x = (page_width_mm - width) / 2
        else:
            x = constants.margin_mm + constants.text_indent_mm
        result.append(TextLine(content=line, x=x, y=start_y - index * line_spacing))
    return tuple(result)


def build_layout(spec: BannerSpec, measure: TextMeasurer, constants: BannerConstants = CONSTANTS) -> LayoutPlan:
    return LayoutPlan(
        width_mm=spec.width_mm,
        height_mm=spec.height_mm,
        font_size_mm=spec.font_size_mm,
        background=background_rect(spec),
        panel=panel_rect(spec, constants),
        circles=compute_circles(spec.width_mm, spec.height_mm, constants),
        text_lines=compute_text_lines(
            spec.text,
            spec.font_size_mm,
            spec.width_mm,
            spec.height_mm,
            spec.center_text,
            measure,
            constants,
        ),
    )

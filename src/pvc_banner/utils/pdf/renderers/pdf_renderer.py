from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from pvc_banner.core.calculations.layout_engine import build_layout, intermediate_circles, mm_to_points
from pvc_banner.core.models.banner import BannerSpec, LayoutPlan
from pvc_banner.core.services.colors import CmykColor, get_color
from pvc_banner.utils.pdf.core.builder import FONT_RESOURCE, build_pdf_bytes
from pvc_banner.utils.pdf.core.drawing import (
    _draw_circle,
    _draw_rect,
    _draw_text,
    _fill_cmyk,
    _line_width,
    _stroke_cmyk,
)
from pvc_banner.utils.pdf.core.fonts import BannerFont, load_banner_font

logger = logging.getLogger(__name__)

WHITE: CmykColor = (0, 0, 0, 0)


class PdfCanvas:
    """
    Collects drawing primitives for a single page; coordinates are PDF points.
    Serialized once with `to_bytes`.
    """

    def __init__(self, width: float, height: float, font: BannerFont):
        self.width = width
        self.height = height
        self.font = font
        self._parts: list[str] = []

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Sequence[float]) -> None:
        self._parts.append(_fill_cmyk(color))
        self._parts.append(_draw_rect(x, y, w, h, stroke=False, fill=True))

    def stroke_rect(
        self,
        x: float,
        y: float,
        w: float,
        h: float,
        fill: Sequence[float],
        border: Sequence[float],
        border_width: float,
    ) -> None:
        self._parts.append(_fill_cmyk(fill))
        self._parts.append(_stroke_cmyk(border))
        self._parts.append(_line_width(border_width))
        self._parts.append(_draw_rect(x, y, w, h, stroke=True, fill=True))

    def fill_circle(self, cx: float, cy: float, r: float, color: Sequence[float]) -> None:
        self._parts.append(_fill_cmyk(color))
        self._parts.append(_draw_circle(cx, cy, r))

    def draw_text_run(self, text: str, x: float, y: float, size: float, color: Sequence[float]) -> None:
        self._parts.append(_fill_cmyk(color))
        self._parts.append(_draw_text(self.font.encode_text(text), x, y, FONT_RESOURCE, size))

    @property
    def content(self) -> str:
        return "".join(self._parts)

    def to_bytes(self) -> bytes:
        return build_pdf_bytes(self.content, (self.width, self.height), self.font)


def render_layout(plan: LayoutPlan, font: BannerFont, foreground: CmykColor, background: CmykColor) -> bytes:
    """Draw a LayoutPlan: white page, bordered panel, circles, then text."""
    canvas = PdfCanvas(mm_to_points(plan.width_mm), mm_to_points(plan.height_mm), font)

    bg_rect = plan.background
    canvas.fill_rect(
        mm_to_points(bg_rect.x),
        mm_to_points(bg_rect.y),
        mm_to_points(bg_rect.width),
        mm_to_points(bg_rect.height),
        WHITE,
    )

    panel = plan.panel
    canvas.stroke_rect(
        mm_to_points(panel.x),
        mm_to_points(panel.y),
        mm_to_points(panel.width),
        mm_to_points(panel.height),
        fill=background,
        border=foreground,
        border_width=mm_to_points(panel.border_width_mm),
    )

    for circle in plan.circles:
        canvas.fill_circle(mm_to_points(circle.x), mm_to_points(circle.y), mm_to_points(circle.radius_mm), foreground)

    font_size = mm_to_points(plan.font_size_mm)
    for line in plan.text_lines:
        x, y = mm_to_points(line.x), mm_to_points(line.y)
        canvas.draw_text_run(line.content, x, y, font_size, foreground)
        logger.info('Drawing text "%s" at (%.2f, %.2f)', line.content, x, y)

    return canvas.to_bytes()


def _log_distribution(spec: BannerSpec) -> None:
    for axis in ("horizontal", "vertical"):
        dist = intermediate_circles(spec.width_mm, spec.height_mm, axis)
        if dist.count:
            logger.info("Added %d intermediate circles on %s edges (spacing: %.1fmm)", dist.count, axis, dist.spacing_mm)


def render_pdf(path: Path, spec: BannerSpec, font: BannerFont | None = None) -> LayoutPlan:
    """
    Full pipeline for one banner: resolve font and colors, lay out, write the PDF.
    Returns the plan that was rendered.
    """
    logger.info(
        "Generating PVC banner (%gx%gmm), font %gmm, colors %s/%s, text: %r",
        spec.width_mm,
        spec.height_mm,
        spec.font_size_mm,
        spec.foreground_color_name,
        spec.background_color_name,
        "\n".join(spec.text),
    )
    if font is None:
        font = load_banner_font()

    foreground = get_color(spec.foreground_color_name)
    background = get_color(spec.background_color_name)

    plan = build_layout(spec, font.text_width)
    _log_distribution(spec)

    pdf_bytes = render_layout(plan, font, foreground, background)
    path.write_bytes(pdf_bytes)
    logger.info('File "%s" created', path)
    return plan

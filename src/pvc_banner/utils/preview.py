"""
Raster proof of a LayoutPlan.
Drawn in CMYK with Pillow and saved as PNG; text uses Pillow's own font
rendering, so glyph widths may differ slightly from the PDF.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from PIL import Image, ImageDraw, ImageFont

from pvc_banner.core.models.banner import LayoutPlan
from pvc_banner.core.services.colors import CmykColor

logger = logging.getLogger(__name__)

WHITE: CmykColor = (0, 0, 0, 0)


def _cmyk255(color: Sequence[float]) -> tuple[int, int, int, int]:
    return tuple(int(round(max(0.0, min(1.0, float(v))) * 255)) for v in color)  # type: ignore[return-value]


def _load_font(size_px: int, font_path: Path | None):
    if font_path is not None:
        try:
            return ImageFont.truetype(str(font_path), size_px)
        except OSError as exc:
            logger.warning("Cannot load preview font %s (%s), using Pillow default", font_path, exc)
    return ImageFont.load_default(size=size_px)


def build_preview(
    plan: LayoutPlan,
    foreground: CmykColor,
    background: CmykColor,
    dpi: float = 25.0,
    font_path: Path | None = None,
) -> Image.Image:
    scale = dpi / 25.4  # px per mm
    width_px = max(1, int(round(plan.width_mm * scale)))
    height_px = max(1, int(round(plan.height_mm * scale)))

    def px(x_mm: float, y_mm: float) -> tuple[float, float]:
        # PDF origin is bottom-left, image origin top-left
        return x_mm * scale, height_px - y_mm * scale

    img = Image.new("CMYK", (width_px, height_px), _cmyk255(WHITE))
    draw = ImageDraw.Draw(img)
    fg = _cmyk255(foreground)

    panel = plan.panel
    left, top = px(panel.x, panel.y + panel.height)
    right, bottom = px(panel.x + panel.width, panel.y)
    if right > left and bottom > top:
        draw.rectangle(
            [left, top, right, bottom],
            fill=_cmyk255(background),
            outline=fg,
            width=max(1, int(round(panel.border_width_mm * scale))),
        )

    for circle in plan.circles:
        cx, cy = px(circle.x, circle.y)
        r = circle.radius_mm * scale
        draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=fg)

    size_px = max(1, int(round(plan.font_size_mm * scale)))
    font = _load_font(size_px, font_path)
    for line in plan.text_lines:
        x, y = px(line.x, line.y)
        if isinstance(font, ImageFont.FreeTypeFont):
            draw.text((x, y), line.content, fill=fg, font=font, anchor="ls")
        else:
            draw.text((x, y - size_px), line.content, fill=fg, font=font)
    return img


def render_preview(
    plan: LayoutPlan,
    path: Path,
    foreground: CmykColor,
    background: CmykColor,
    dpi: float = 25.0,
    font_path: Path | None = None,
) -> Path:
    img = build_preview(plan, foreground, background, dpi=dpi, font_path=font_path)
    img.convert("RGB").save(path, format="PNG")
    return path

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class BannerSpec:
    """Input for one banner: page size, text block and color names (millimetres)."""

    width_mm: float
    height_mm: float
    font_size_mm: float
    text: Tuple[str, ...]
    center_text: bool = True
    foreground_color_name: str = "black"
    background_color_name: str = "yellow"

    @classmethod
    def from_text(
        cls,
        raw_text: str,
        width_mm: float,
        height_mm: float,
        font_size_mm: float,
        center_text: bool = True,
        foreground_color_name: str = "black",
        background_color_name: str = "yellow",
    ) -> "BannerSpec":
        """Split raw text on line breaks; k breaks always give k+1 lines."""
        return cls(
            width_mm=float(width_mm),
            height_mm=float(height_mm),
            font_size_mm=float(font_size_mm),
            text=tuple(str(raw_text).split("\n")),
            center_text=bool(center_text),
            foreground_color_name=foreground_color_name,
            background_color_name=background_color_name,
        )


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class Panel:
    x: float
    y: float
    width: float
    height: float
    border_width_mm: float


@dataclass(frozen=True)
class Circle:
    x: float
    y: float
    radius_mm: float


@dataclass(frozen=True)
class TextLine:
    content: str
    x: float
    y: float


@dataclass(frozen=True)
class LayoutPlan:
    """Every coordinate of one banner page, in millimetres, origin bottom-left."""

    width_mm: float
    height_mm: float
    font_size_mm: float
    background: Rect
    panel: Panel
    circles: Tuple[Circle, ...]
    text_lines: Tuple[TextLine, ...]

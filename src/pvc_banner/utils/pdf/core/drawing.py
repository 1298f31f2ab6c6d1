from __future__ import annotations

from typing import Sequence

# 4 * (sqrt(2) - 1) / 3, control point distance for a quarter circle
KAPPA = 0.5522847498


def _num(value: float) -> str:
    """PDF real without exponent notation."""
    text = f"{float(value):.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _fill_cmyk(color: Sequence[float]) -> str:
    c, m, y, k = color
    return f"{_num(c)} {_num(m)} {_num(y)} {_num(k)} k\n"


def _stroke_cmyk(color: Sequence[float]) -> str:
    c, m, y, k = color
    return f"{_num(c)} {_num(m)} {_num(y)} {_num(k)} K\n"


def _draw_rect(x: float, y: float, w: float, h: float, stroke: bool = True, fill: bool = False) -> str:
    if fill and stroke:
        op = "B"
    elif fill:
        op = "f"
    else:
        op = "S"
    return f"{_num(x)} {_num(y)} {_num(w)} {_num(h)} re {op}\n"


def _draw_circle(cx: float, cy: float, r: float, stroke: bool = False, fill: bool = True) -> str:
    d = r * KAPPA
    segments = [
        (cx + d, cy + r, cx + r, cy + d, cx + r, cy),
        (cx + r, cy - d, cx + d, cy - r, cx, cy - r),
        (cx - d, cy - r, cx - r, cy - d, cx - r, cy),
        (cx - r, cy + d, cx - d, cy + r, cx, cy + r),
    ]
    out = [f"{_num(cx)} {_num(cy + r)} m\n"]
    for seg in segments:
        out.append(" ".join(_num(v) for v in seg) + " c\n")
    if fill and stroke:
        out.append("B\n")
    elif fill:
        out.append("f\n")
    else:
        out.append("S\n")
    return "".join(out)


def _line_width(width: float) -> str:
    return f"{_num(width)} w\n"


def _draw_text(encoded: str, x: float, y: float, font: str, size: float) -> str:
    """`encoded` is a ready PDF string operand, `(..)` or `<..>`."""
    return f"BT {font} {_num(size)} Tf {_num(x)} {_num(y)} Td {encoded} Tj ET\n"

from __future__ import annotations

import bisect
import logging
import os
import struct
from pathlib import Path
from typing import Callable, Dict, Sequence, Union

logger = logging.getLogger(__name__)

FONT_ENV_VAR = "PVC_BANNER_FONT"
CUSTOM_FONT_PATH = Path("DejaVuSansCondensed-Bold.ttf")
SYSTEM_FONT_PATH = Path("/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf")

# Helvetica-Bold advance widths (1/1000 em), WinAnsi codes 32..126
_HELVETICA_BOLD_WIDTHS: Dict[str, int] = dict(
    zip(
        " !\"#$%&'()*+,-./0123456789:;<=>?@ABCDEFGHIJKLMNOPQRSTUVWXYZ[\\]^_`abcdefghijklmnopqrstuvwxyz{|}~",
        [
            278, 333, 474, 556, 556, 889, 722, 238, 333, 333, 389, 584, 278, 333, 278, 278,
            556, 556, 556, 556, 556, 556, 556, 556, 556, 556, 333, 333, 584, 584, 584, 611,
            975, 722, 722, 722, 722, 667, 611, 778, 722, 278, 556, 722, 611, 833, 722, 778,
            667, 778, 722, 667, 611, 722, 667, 944, 667, 667, 611, 333, 278, 333, 584, 556,
            333, 556, 611, 556, 611, 556, 333, 611, 611, 278, 278, 556, 278, 889, 611, 611,
            611, 611, 389, 556, 333, 611, 556, 778, 556, 556, 500, 389, 280, 389, 584,
        ],
    )
)

# WinAnsi codes 128..255 (cp1252 leaves 0x81, 0x8D, 0x8F, 0x90 and 0x9D undefined)
_WINANSI_HIGH_CODES = [0x80, *range(0x82, 0x8D), 0x8E, *range(0x91, 0x9D), 0x9E, 0x9F, *range(0xA0, 0x100)]
_HELVETICA_BOLD_WIDTHS.update(
    zip(
        bytes(_WINANSI_HIGH_CODES).decode("cp1252"),
        [
            556,
            278, 556, 500, 1000, 556, 556, 333, 1000, 667, 333, 1000,
            611,
            278, 278, 500, 500, 350, 556, 1000, 333, 1000, 556, 333, 944,
            500, 667,
            278, 333, 556, 556, 556, 556, 280, 556, 333, 737, 370, 556, 584, 333, 737, 333,
            400, 584, 333, 333, 333, 611, 556, 278, 333, 333, 365, 556, 834, 834, 834, 611,
            722, 722, 722, 722, 722, 722, 1000, 722, 667, 667, 667, 667, 278, 278, 278, 278,
            722, 722, 778, 778, 778, 778, 778, 584, 778, 722, 722, 722, 722, 667, 667, 611,
            556, 556, 556, 556, 556, 556, 889, 556, 556, 556, 556, 556, 278, 278, 278, 278,
            611, 611, 611, 611, 611, 611, 611, 584, 611, 611, 611, 611, 611, 556, 611, 556,
        ],
    )
)

# Unicode cmap subtables that may carry format 4, best first
_CMAP_PREFERENCE = [(3, 1), (0, 3), (0, 4), (0, 2), (0, 1), (3, 10)]
_REQUIRED_TABLES = ("cmap", "head", "hhea", "hmtx", "maxp")


class UnsupportedGlyphError(ValueError):
    """Raised when the active font cannot encode a character of the text."""


def _table_directory(data: bytes) -> dict[str, int]:
    """Offsets of the tables a banner font needs, keyed by tag."""
    if len(data) < 12:
        raise ValueError("Invalid TTF (too small)")
    (num_tables,) = struct.unpack_from(">H", data, 4)
    offsets = {}
    for i in range(num_tables):
        tag, _, offset, _ = struct.unpack_from(">4sIII", data, 12 + i * 16)
        offsets[tag.decode("ascii", "replace")] = offset
    missing = [t for t in _REQUIRED_TABLES if t not in offsets]
    if missing:
        raise ValueError(f"TTF missing tables: {', '.join(missing)}")
    return offsets


def _format4_lookup(data: bytes, start: int) -> Callable[[int], int]:
    """Codepoint -> glyph id for a format 4 subtable; unmapped codepoints give glyph 0."""
    seg_count = struct.unpack_from(">H", data, start + 6)[0] // 2
    ends_at = start + 14
    starts_at = ends_at + 2 * seg_count + 2
    deltas_at = starts_at + 2 * seg_count
    ranges_at = deltas_at + 2 * seg_count
    ends = struct.unpack_from(f">{seg_count}H", data, ends_at)
    starts = struct.unpack_from(f">{seg_count}H", data, starts_at)
    deltas = struct.unpack_from(f">{seg_count}h", data, deltas_at)
    ranges = struct.unpack_from(f">{seg_count}H", data, ranges_at)

    def lookup(codepoint: int) -> int:
        seg = bisect.bisect_left(ends, codepoint)
        if codepoint > 0xFFFF or seg >= seg_count or codepoint < starts[seg]:
            return 0
        if ranges[seg] == 0:
            return (codepoint + deltas[seg]) & 0xFFFF
        addr = ranges_at + 2 * seg + ranges[seg] + 2 * (codepoint - starts[seg])
        if addr + 2 > len(data):
            return 0
        glyph = struct.unpack_from(">H", data, addr)[0]
        return (glyph + deltas[seg]) & 0xFFFF if glyph else 0

    return lookup


class TrueTypeFont:
    """TTF read for width metrics and embedded whole as a CID font."""

    def __init__(self, path: Path, pdf_name: str = "/BannerFont"):
        self.path = path
        self.pdf_name = pdf_name
        self.data = data = path.read_bytes()
        tables = _table_directory(data)

        head = tables["head"]
        self.units_per_em = struct.unpack_from(">H", data, head + 18)[0] or 1000
        self.bbox = struct.unpack_from(">hhhh", data, head + 36)
        self.ascent, self.descent = struct.unpack_from(">hh", data, tables["hhea"] + 4)
        long_metrics = struct.unpack_from(">H", data, tables["hhea"] + 34)[0]
        self.num_glyphs = struct.unpack_from(">H", data, tables["maxp"] + 4)[0]

        # glyphs past the long metrics reuse the last advance
        count = max(1, min(long_metrics, self.num_glyphs))
        advances = [struct.unpack_from(">H", data, tables["hmtx"] + i * 4)[0] for i in range(count)]
        self._advances = advances + [advances[-1]] * (self.num_glyphs - count)
        self._lookup = self._unicode_cmap(data, tables["cmap"])
        self.used_gids: set[int] = {self.glyph_id(ord(" "))}

    @property
    def label(self) -> str:
        return self.path.name

    @staticmethod
    def _unicode_cmap(data: bytes, cmap: int) -> Callable[[int], int]:
        version, num_tables = struct.unpack_from(">HH", data, cmap)
        if version != 0 or num_tables <= 0:
            raise ValueError("Invalid cmap table")
        subtables = {}
        for i in range(num_tables):
            platform_id, encoding_id, offset = struct.unpack_from(">HHI", data, cmap + 4 + i * 8)
            subtables.setdefault((platform_id, encoding_id), cmap + offset)
        for key in _CMAP_PREFERENCE:
            start = subtables.get(key)
            if start is not None and struct.unpack_from(">H", data, start)[0] == 4:
                return _format4_lookup(data, start)
        raise ValueError("No format 4 Unicode cmap")

    def glyph_id(self, codepoint: int) -> int:
        gid = self._lookup(codepoint)
        return gid if gid < self.num_glyphs else 0

    def width_1000(self, gid: int) -> int:
        if not 0 <= gid < len(self._advances):
            return 500
        return round(self._advances[gid] * 1000.0 / self.units_per_em)

    def text_width(self, text: str, size: float) -> float:
        """Advance width of `text` at `size`, in the same unit as `size`."""
        total = sum(self._advances[self.glyph_id(ord(ch))] for ch in str(text))
        return total * size / self.units_per_em

    def encode_text(self, text: str) -> str:
        gids = [self.glyph_id(ord(ch)) for ch in str(text)]
        self.used_gids.update(gids)
        return "<" + "".join(f"{gid:04X}" for gid in gids) + ">"


class StandardFont:
    """Built-in Helvetica-Bold in WinAnsi encoding; last step of the fallback chain."""

    pdf_name = "/Helvetica-Bold"
    label = "Helvetica-Bold"

    def _check(self, text: str) -> None:
        for ch in str(text):
            if ch not in _HELVETICA_BOLD_WIDTHS:
                raise UnsupportedGlyphError(f"Helvetica-Bold cannot encode {ch!r} (U+{ord(ch):04X})")

    def text_width(self, text: str, size: float) -> float:
        self._check(text)
        return sum(_HELVETICA_BOLD_WIDTHS[ch] for ch in str(text)) * size / 1000.0

    def encode_text(self, text: str) -> str:
        """PDF string operand; WinAnsi codes above 127 become octal escapes."""
        self._check(text)
        out = []
        for code in str(text).encode("cp1252"):
            if code > 127:
                out.append(f"\\{code:03o}")
            elif chr(code) in "\\()":
                out.append("\\" + chr(code))
            else:
                out.append(chr(code))
        return "(" + "".join(out) + ")"


BannerFont = Union[TrueTypeFont, StandardFont]


def default_font_candidates() -> list[Path]:
    """Custom font (or $PVC_BANNER_FONT), then the system DejaVu Sans Bold."""
    override = os.environ.get(FONT_ENV_VAR)
    custom = Path(override) if override else CUSTOM_FONT_PATH
    return [custom, SYSTEM_FONT_PATH]


def load_banner_font(candidates: Sequence[Path] | None = None) -> BannerFont:
    """
    Walk the fallback chain; each TTF is tried only if the previous one failed.
    The built-in font closes the chain and cannot fail.
    """
    paths = list(default_font_candidates() if candidates is None else candidates)
    for path in paths:
        try:
            font: BannerFont = TrueTypeFont(path)
        except (OSError, ValueError, struct.error) as exc:
            logger.warning("Cannot load font %s (%s), trying next fallback", path, exc)
            continue
        logger.info("Loaded font %s from %s", font.label, path.parent)
        return font
    font = StandardFont()
    logger.info("Using built-in %s as final fallback", font.label)
    return font


def _scale_font_units(value: int, units_per_em: int) -> int:
    if units_per_em <= 0:
        return int(value)
    return int(round(value * 1000.0 / float(units_per_em)))


def _format_cid_widths(font: TrueTypeFont) -> str:
    gids = sorted(font.used_gids)
    parts: list[str] = []
    i = 0
    while i < len(gids):
        start = gids[i]
        widths = [font.width_1000(start)]
        j = i + 1
        while j < len(gids) and gids[j] == gids[j - 1] + 1:
            widths.append(font.width_1000(gids[j]))
            j += 1
        parts.append(f"{start} [{' '.join(str(w) for w in widths)}]")
        i = j
    return " ".join(parts)


def build_font_objs(font: BannerFont, first_id: int) -> tuple[list[bytes], int, int]:
    """
    PDF objects for `font` numbered from `first_id`.
    Returns (objects, id of the font resource, next free id).
    """
    if not isinstance(font, TrueTypeFont):
        obj = (
            f"{first_id} 0 obj << /Type /Font /Subtype /Type1 /BaseFont {font.pdf_name} "
            f"/Encoding /WinAnsiEncoding >> endobj\n"
        ).encode("ascii")
        return [obj], first_id, first_id + 1

    file_id, desc_id, cid_id, type0_id = first_id, first_id + 1, first_id + 2, first_id + 3
    units = int(font.units_per_em or 1000)
    x_min, y_min, x_max, y_max = (_scale_font_units(v, units) for v in font.bbox)
    ascent = _scale_font_units(int(font.ascent), units)
    descent = _scale_font_units(int(font.descent), units)

    fontfile = (
        f"{file_id} 0 obj << /Length {len(font.data)} >> stream\n".encode("ascii")
        + font.data
        + b"\nendstream endobj\n"
    )
    descriptor = (
        f"{desc_id} 0 obj << /Type /FontDescriptor /FontName {font.pdf_name} "
        f"/Flags 32 /FontBBox [{x_min} {y_min} {x_max} {y_max}] "
        f"/ItalicAngle 0 /Ascent {ascent} /Descent {descent} /CapHeight {ascent} "
        f"/StemV 80 /FontFile2 {file_id} 0 R >> endobj\n"
    ).encode("ascii")

    dw = font.width_1000(font.glyph_id(ord(" "))) or 500
    widths = _format_cid_widths(font)
    w_part = f" /W [{widths}]" if widths else ""
    cid_font = (
        f"{cid_id} 0 obj << /Type /Font /Subtype /CIDFontType2 /BaseFont {font.pdf_name} "
        f"/CIDSystemInfo << /Registry (Adobe) /Ordering (Identity) /Supplement 0 >> "
        f"/FontDescriptor {desc_id} 0 R /CIDToGIDMap /Identity /DW {dw}{w_part} >> endobj\n"
    ).encode("ascii")
    type0 = (
        f"{type0_id} 0 obj << /Type /Font /Subtype /Type0 /BaseFont {font.pdf_name}-Identity-H "
        f"/Encoding /Identity-H /DescendantFonts [{cid_id} 0 R] >> endobj\n"
    ).encode("ascii")
    return [fontfile, descriptor, cid_font, type0], type0_id, type0_id + 1

import struct
import sys
from pathlib import Path

import pytest

# Ensure `src` is importable when running tests from repo root.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def default_spec():
    from pvc_banner.core.models.banner import BannerSpec

    return BannerSpec.from_text("Banner PVC", width_mm=1000, height_mm=700, font_size_mm=25)


@pytest.fixture
def fixed_measure():
    """Every character is 0.6 em wide; widths come back in points like a real font."""

    def measure(text, size):
        return len(text) * size * 0.6

    return measure


@pytest.fixture
def builtin_font_only(tmp_path, monkeypatch):
    """Point both TTF steps of the fallback chain at missing files."""
    from pvc_banner.utils.pdf.core import fonts

    monkeypatch.delenv(fonts.FONT_ENV_VAR, raising=False)
    monkeypatch.setattr(fonts, "CUSTOM_FONT_PATH", tmp_path / "missing-custom.ttf")
    monkeypatch.setattr(fonts, "SYSTEM_FONT_PATH", tmp_path / "missing-system.ttf")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _build_ttf(mapping, advances, units_per_em=1000):
    """
    Minimal TrueType file with cmap (format 4), head, hhea, hmtx and maxp.
    `mapping` is codepoint -> glyph id, `advances` the advance width per glyph.
    """
    num_glyphs = len(advances)

    head = bytearray(54)
    struct.pack_into(">I", head, 0, 0x00010000)
    struct.pack_into(">H", head, 18, units_per_em)
    struct.pack_into(">hhhh", head, 36, 0, -200, 1000, 800)

    hhea = bytearray(36)
    struct.pack_into(">I", hhea, 0, 0x00010000)
    struct.pack_into(">hh", hhea, 4, 800, -200)
    struct.pack_into(">H", hhea, 34, num_glyphs)

    maxp = struct.pack(">IH", 0x00005000, num_glyphs)
    hmtx = b"".join(struct.pack(">Hh", adv, 0) for adv in advances)

    codes = sorted(mapping) + [0xFFFF]
    seg_count = len(codes)
    deltas = [((mapping[c] - c + 0x8000) % 0x10000) - 0x8000 for c in codes[:-1]] + [1]
    subtable = struct.pack(">HHHHHHH", 4, 0, 0, seg_count * 2, 0, 0, 0)
    subtable += struct.pack(f">{seg_count}H", *codes)
    subtable += struct.pack(">H", 0)
    subtable += struct.pack(f">{seg_count}H", *codes)
    subtable += struct.pack(f">{seg_count}h", *deltas)
    subtable += struct.pack(f">{seg_count}H", *([0] * seg_count))
    cmap = struct.pack(">HHHHI", 0, 1, 3, 1, 12) + subtable

    tables = [(b"cmap", cmap), (b"head", bytes(head)), (b"hhea", bytes(hhea)), (b"hmtx", hmtx), (b"maxp", maxp)]
    offset = 12 + 16 * len(tables)
    directory = b""
    body = b""
    for tag, data in tables:
        directory += tag + struct.pack(">III", 0, offset + len(body), len(data))
        body += data + b"\0" * (-len(data) % 4)
    header = struct.pack(">IHHHH", 0x00010000, len(tables), 0, 0, 0)
    return header + directory + body


@pytest.fixture
def tiny_ttf(tmp_path):
    """Glyphs: 0 .notdef, 1 space, 2 'A', 3 'B', 4 'ą'."""
    path = tmp_path / "tiny.ttf"
    path.write_bytes(_build_ttf({32: 1, 65: 2, 66: 3, 0x105: 4}, [500, 250, 600, 700, 550]))
    return path

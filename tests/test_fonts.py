import logging

import pytest

from pvc_banner.utils.pdf.core import fonts
from pvc_banner.utils.pdf.core.fonts import (
    StandardFont,
    TrueTypeFont,
    UnsupportedGlyphError,
    build_font_objs,
    default_font_candidates,
    load_banner_font,
)


def test_standard_font_widths():
    font = StandardFont()

    assert font.text_width("A", 1000) == 722
    assert font.text_width("Banner PVC", 10) == pytest.approx(
        (722 + 556 + 611 + 611 + 556 + 389 + 278 + 667 + 667 + 722) / 100
    )
    assert font.text_width("", 10) == 0


def test_standard_font_rejects_unencodable_text():
    font = StandardFont()

    with pytest.raises(UnsupportedGlyphError):
        font.text_width("Zażółć", 10)
    assert issubclass(UnsupportedGlyphError, ValueError)


def test_standard_font_escapes_string_operand():
    assert StandardFont().encode_text("a (b) \\") == "(a \\(b\\) \\\\)"


def test_truetype_font_metrics(tiny_ttf):
    font = TrueTypeFont(tiny_ttf)

    assert font.units_per_em == 1000
    assert font.num_glyphs == 5
    assert font.glyph_id(ord("A")) == 2
    assert font.glyph_id(0x105) == 4
    assert font.glyph_id(ord("Z")) == 0
    assert font.text_width("A B", 10) == pytest.approx(15.5)
    assert font.text_width("Z", 10) == pytest.approx(5.0)


def test_truetype_encode_tracks_used_glyphs(tiny_ttf):
    font = TrueTypeFont(tiny_ttf)

    assert font.encode_text("AąB") == "<000200040003>"
    assert {1, 2, 3, 4} <= font.used_gids


def test_truetype_rejects_garbage(tmp_path):
    bad = tmp_path / "bad.ttf"
    bad.write_bytes(b"not a font")
    with pytest.raises(ValueError):
        TrueTypeFont(bad)


def test_fallback_uses_first_loadable_font(tmp_path, tiny_ttf, caplog):
    bad = tmp_path / "bad.ttf"
    bad.write_bytes(b"not a font")

    with caplog.at_level(logging.INFO, logger="pvc_banner.utils.pdf.core.fonts"):
        font = load_banner_font([tmp_path / "missing.ttf", bad, tiny_ttf])

    assert isinstance(font, TrueTypeFont)
    assert font.path == tiny_ttf
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 2


def test_fallback_stops_at_first_success(tmp_path, tiny_ttf):
    font = load_banner_font([tiny_ttf, tmp_path / "missing.ttf"])
    assert font.path == tiny_ttf


def test_fallback_ends_with_builtin_font(tmp_path):
    font = load_banner_font([tmp_path / "a.ttf", tmp_path / "b.ttf"])
    assert isinstance(font, StandardFont)


def test_env_var_replaces_custom_font(monkeypatch, tiny_ttf):
    monkeypatch.setenv(fonts.FONT_ENV_VAR, str(tiny_ttf))

    candidates = default_font_candidates()

    assert candidates[0] == tiny_ttf
    assert candidates[1] == fonts.SYSTEM_FONT_PATH


def test_default_chain_without_env(monkeypatch):
    monkeypatch.delenv(fonts.FONT_ENV_VAR, raising=False)
    assert default_font_candidates() == [fonts.CUSTOM_FONT_PATH, fonts.SYSTEM_FONT_PATH]


def test_build_font_objs_for_builtin_font():
    objs, font_id, next_id = build_font_objs(StandardFont(), first_id=3)

    assert (font_id, next_id) == (3, 4)
    assert b"/BaseFont /Helvetica-Bold" in objs[0]
    assert b"/WinAnsiEncoding" in objs[0]


def test_build_font_objs_embeds_truetype(tiny_ttf):
    font = TrueTypeFont(tiny_ttf)
    font.encode_text("AB")

    objs, font_id, next_id = build_font_objs(font, first_id=3)

    assert len(objs) == 4
    assert (font_id, next_id) == (6, 7)
    assert objs[0].startswith(b"3 0 obj") and font.data in objs[0]
    assert b"/FontFile2 3 0 R" in objs[1]
    assert b"/W [1 [250 600 700]]" in objs[2]
    assert b"/Encoding /Identity-H" in objs[3]


def test_standard_font_covers_winansi_accents():
    font = StandardFont()

    assert font.text_width("Café", 10) == pytest.approx((722 + 556 + 333 + 556) / 100)
    assert font.text_width("€ „ß“ Łódź"[:6], 1000) == 556 + 278 + 500 + 611 + 500 + 278


def test_standard_font_writes_high_codes_as_octal():
    font = StandardFont()

    assert font.encode_text("Café") == "(Caf\\351)"
    assert font.encode_text("€5 (ok)") == "(\\2005 \\(ok\\))"
    assert font.encode_text("Café").isascii()


def test_standard_font_still_rejects_non_winansi():
    with pytest.raises(UnsupportedGlyphError):
        StandardFont().encode_text("Łódź")


def test_truetype_label_and_bbox(tiny_ttf):
    font = TrueTypeFont(tiny_ttf)

    assert font.label == "tiny.ttf"
    assert font.bbox == (0, -200, 1000, 800)
    assert (font.ascent, font.descent) == (800, -200)


def test_fallback_logs_font_label(tmp_path, tiny_ttf, caplog):
    with caplog.at_level(logging.INFO, logger="pvc_banner.utils.pdf.core.fonts"):
        load_banner_font([tiny_ttf])
        load_banner_font([tmp_path / "missing.ttf"])

    messages = [r.getMessage() for r in caplog.records]
    assert any("Loaded font tiny.ttf" in m for m in messages)
    assert any("Using built-in Helvetica-Bold" in m for m in messages)

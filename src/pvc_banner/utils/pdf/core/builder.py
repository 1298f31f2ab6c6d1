"""
PDF object builder: one page content stream plus its font into PDF bytes.
"""

from __future__ import annotations

from pvc_banner.utils.pdf.core.drawing import _num
from pvc_banner.utils.pdf.core.fonts import BannerFont, build_font_objs

FONT_RESOURCE = "/F1"


def build_pdf_bytes(content_stream: str, page_size: tuple[float, float], font: BannerFont) -> bytes:
    """
    Given the page content stream and page size in points, return ready-to-write PDF bytes.
    Font objects are built after the stream so embedded widths cover every used glyph.
    """
    stream = content_stream.encode("ascii")
    font_objs, font_id, next_obj_id = build_font_objs(font, first_id=3)

    content_id = next_obj_id
    page_id = next_obj_id + 1
    width, height = page_size
    content_obj = f"{content_id} 0 obj << /Length {len(stream)} >> stream\n".encode("ascii") + stream + b"\nendstream endobj\n"
    page_obj = (
        f"{page_id} 0 obj << /Type /Page /Parent 2 0 R /MediaBox [0 0 {_num(width)} {_num(height)}] "
        f"/Contents {content_id} 0 R /Resources << /Font << {FONT_RESOURCE} {font_id} 0 R >> >> >> endobj\n"
    ).encode("ascii")
    pages_obj = f"2 0 obj << /Type /Pages /Count 1 /Kids [{page_id} 0 R] >> endobj\n".encode("ascii")
    catalog_obj = b"1 0 obj << /Type /Catalog /Pages 2 0 R >> endobj\n"

    objs = [catalog_obj, pages_obj] + font_objs + [content_obj, page_obj]

    header = b"%PDF-1.4\n"
    offsets = [0]
    pdf_body = bytearray()
    current_offset = len(header)
    for obj in objs:
        offsets.append(current_offset)
        pdf_body += obj
        current_offset += len(obj)

    xref_entries = ["0000000000 65535 f \n"] + [_format_xref_entry(off) for off in offsets[1:]]
    xref = ("xref\n0 %d\n" % len(offsets)).encode("ascii") + "".join(xref_entries).encode("ascii")
    startxref = len(header) + len(pdf_body)
    trailer = f"trailer << /Size {len(offsets)} /Root 1 0 R >>\nstartxref\n{startxref}\n%%EOF\n".encode("ascii")

    return header + bytes(pdf_body) + xref + trailer


def _format_xref_entry(offset: int) -> str:
    return f"{offset:010d} 00000 n \n"

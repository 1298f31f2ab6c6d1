from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from pvc_banner.core.models.banner import BannerSpec
from pvc_banner.core.services.colors import color_names, get_color
from pvc_banner.core.services.settings import load_settings
from pvc_banner.utils.pdf.core.fonts import TrueTypeFont, UnsupportedGlyphError, load_banner_font
from pvc_banner.utils.pdf.renderers.pdf_renderer import render_pdf
from pvc_banner.utils.preview import render_preview

logger = logging.getLogger("pvc_banner")


def build_parser() -> argparse.ArgumentParser:
    colors = ",".join(color_names())
    parser = argparse.ArgumentParser(
        prog="pvc-banner",
        description="PVC banner generator: PDF with a bordered panel, mounting circles and centered text.",
    )
    # None defaults so values from --config are only overridden by explicit flags
    parser.add_argument("-t", "--text", default=None, help="Banner text; line breaks (or a literal \\n) split lines (default: Banner PVC)")
    parser.add_argument("-o", "--output", default=None, help="Output PDF file (default: banner.pdf)")
    parser.add_argument("-w", "--width", type=float, default=None, help="Banner width in mm (default: 1000)")
    parser.add_argument("-e", "--height", type=float, default=None, help="Banner height in mm (default: 700)")
    parser.add_argument("-f", "--font-size", type=float, default=None, help="Font size in mm: 3=small, 12=medium, 25=large (default: 25)")
    parser.add_argument("--fg", default=None, help=f"Text, border and circle color: {colors} (default: black)")
    parser.add_argument("--bg", default=None, help=f"Panel color: {colors} (default: yellow)")
    parser.add_argument("-c", "--center", action=argparse.BooleanOptionalAction, default=None, help="Center the text on the page (default: on)")
    parser.add_argument("--config", type=Path, default=None, help="JSON file with default values")
    parser.add_argument("--preview", type=Path, default=None, help="Also write a PNG proof to this path")
    parser.add_argument("--preview-dpi", type=float, default=25.0, help="Resolution of the PNG proof (default: 25)")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log debug details")
    return parser


def _configure_logging(quiet: bool, verbose: bool) -> None:
    level = logging.INFO
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _resolve(args: argparse.Namespace) -> dict:
    settings = load_settings(args.config)
    for key in ("text", "output", "width", "height", "font_size", "fg", "bg", "center"):
        value = getattr(args, key)
        if value is not None:
            settings[key] = value
    # shells rarely pass real line breaks, accept the escaped form too
    settings["text"] = str(settings["text"]).replace("\\n", "\n")
    return settings


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.quiet, args.verbose)
    settings = _resolve(args)

    spec = BannerSpec.from_text(
        settings["text"],
        width_mm=settings["width"],
        height_mm=settings["height"],
        font_size_mm=settings["font_size"],
        center_text=settings["center"],
        foreground_color_name=settings["fg"],
        background_color_name=settings["bg"],
    )
    output = Path(settings["output"])

    try:
        font = load_banner_font()
        plan = render_pdf(output, spec, font=font)
        if args.preview is not None:
            font_path = font.path if isinstance(font, TrueTypeFont) else None
            render_preview(
                plan,
                args.preview,
                get_color(spec.foreground_color_name),
                get_color(spec.background_color_name),
                dpi=args.preview_dpi,
                font_path=font_path,
            )
            logger.info('Preview "%s" created', args.preview)
    except (UnsupportedGlyphError, OSError) as exc:
        logger.error("Banner generation failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations

import logging
from typing import Dict, Tuple

logger = logging.getLogger(__name__)

CmykColor = Tuple[float, float, float, float]

# Hand-tuned print values (cyan, magenta, yellow, key), not converted from RGB.
CMYK_COLORS: Dict[str, CmykColor] = {
    # basic
    "black": (0, 0, 0, 1),
    "white": (0, 0, 0, 0),
    "red": (0, 1, 1, 0),
    "blue": (1, 0, 0, 0),
    "yellow": (0, 0, 1, 0),
    "green": (1, 0, 1, 0),
    # extended banner palette
    "orange": (0, 0.5, 1, 0),
    "purple": (0.5, 1, 0, 0),
    "pink": (0, 0.7, 0.2, 0),
    "cyan": (1, 0, 0.2, 0),
    "magenta": (0, 1, 0, 0),
    "lime": (0.5, 0, 1, 0),
    "navy": (1, 0.5, 0, 0.2),
    "maroon": (0.2, 1, 1, 0.2),
    "teal": (1, 0.2, 0.5, 0),
    "olive": (0.3, 0.2, 1, 0.1),
    "silver": (0, 0, 0, 0.25),
    "gold": (0, 0.2, 0.8, 0.1),
}

DEFAULT_COLOR = "black"


def get_color(name: str) -> CmykColor:
    """Return the CMYK tuple for `name`; unknown names fall back to black."""
    color = CMYK_COLORS.get(name)
    if color is None:
        logger.debug("Unknown color %r, using %s", name, DEFAULT_COLOR)
        return CMYK_COLORS[DEFAULT_COLOR]
    return color


def color_names() -> list[str]:
    return list(CMYK_COLORS)

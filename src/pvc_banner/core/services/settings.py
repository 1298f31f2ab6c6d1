from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: Dict[str, object] = {
    "text": "Banner PVC",
    "output": "banner.pdf",
    "width": 1000.0,
    "height": 700.0,
    "font_size": 25.0,
    "fg": "black",
    "bg": "yellow",
    "center": True,
}

_TRUE_WORDS = {"true", "1", "yes", "on"}
_FALSE_WORDS = {"false", "0", "no", "off"}


def _to_bool(value: object) -> bool:
    """JSON booleans, 0/1 and the usual yes/no words; anything else is rejected."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    word = str(value).strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(f"not a boolean: {value!r}")


_CASTS = {
    "text": str,
    "output": str,
    "width": float,
    "height": float,
    "font_size": float,
    "fg": str,
    "bg": str,
    "center": _to_bool,
}


def load_settings(path: Path | None = None) -> dict:
    """
    Defaults merged with an optional JSON file.
    Missing or unreadable files give the plain defaults; unknown keys are ignored.
    """
    settings = dict(DEFAULT_SETTINGS)
    if path is None or not path.exists():
        return settings
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Cannot read settings %s: %s", path, exc)
        return settings
    if not isinstance(data, dict):
        logger.warning("Settings file %s does not hold an object, ignoring", path)
        return settings

    for key, cast in _CASTS.items():
        if key not in data or data[key] is None:
            continue
        try:
            settings[key] = cast(data[key])
        except (TypeError, ValueError):
            logger.warning("Invalid value for %r in %s: %r", key, path, data[key])
    return settings

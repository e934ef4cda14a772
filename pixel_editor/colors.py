"""
Color construction and resolution.
Colors are built once from config values or UI input; resolving a cell value
to something paintable is a pure function.
"""

import re
from typing import Any, Dict, Tuple

from .models import CellValue, Color, ComponentColor, NamedColor

BACKGROUND_COLOR = "black"

# CSS basic color keywords
NAMED_RGB: Dict[str, Tuple[int, int, int]] = {
    "black": (0, 0, 0),
    "silver": (192, 192, 192),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
    "white": (255, 255, 255),
    "maroon": (128, 0, 0),
    "red": (255, 0, 0),
    "purple": (128, 0, 128),
    "fuchsia": (255, 0, 255),
    "magenta": (255, 0, 255),
    "green": (0, 128, 0),
    "lime": (0, 255, 0),
    "olive": (128, 128, 0),
    "yellow": (255, 255, 0),
    "navy": (0, 0, 128),
    "blue": (0, 0, 255),
    "teal": (0, 128, 128),
    "aqua": (0, 255, 255),
    "cyan": (0, 255, 255),
    "orange": (255, 165, 0),
}

UNKNOWN_RGB = (128, 128, 128)

_HEX_RE = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def make_color(spec: Any) -> Color:
    """
    Build a Color from a string, a mapping of components, or a Color.

    Missing components default to red=0, green=0, blue=0, opacity=1.
    """
    if isinstance(spec, (NamedColor, ComponentColor)):
        return spec
    if isinstance(spec, str):
        return NamedColor(spec)
    if isinstance(spec, dict):
        if "value" in spec:
            return NamedColor(str(spec["value"]))
        return ComponentColor(
            red=int(spec.get("red", 0)),
            green=int(spec.get("green", 0)),
            blue=int(spec.get("blue", 0)),
            opacity=float(spec.get("opacity", 1.0)),
        )
    raise ValueError(f"Cannot build a color from {spec!r}")


def resolve_color(value: CellValue, background: str = BACKGROUND_COLOR) -> str:
    if value is None:
        return background
    if isinstance(value, NamedColor):
        return value.value
    return f"rgba({value.red}, {value.green}, {value.blue}, {value.opacity:g})"


def to_rgb(value: CellValue, background: str = BACKGROUND_COLOR) -> Tuple[int, int, int]:
    """RGB triple for raster surfaces. Opacity is not blended."""
    if isinstance(value, ComponentColor):
        return value.red, value.green, value.blue
    name = resolve_color(value, background).strip().lower()
    match = _HEX_RE.match(name)
    if match:
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return tuple(int(digits[i : i + 2], 16) for i in (0, 2, 4))
    return NAMED_RGB.get(name, UNKNOWN_RGB)

"""Color parsing and conversion.

Every accepted notation converts to a canonical 8-bit ``RGB`` triple.
Unparseable input yields ``None`` rather than raising.
"""

import math
import re
from typing import NamedTuple, Optional


class RGB(NamedTuple):
    r: int
    g: int
    b: int


class HSL(NamedTuple):
    h: float  # degrees, [0, 360)
    s: float  # [0, 1]
    l: float  # [0, 1]


NAMED_COLORS: dict[str, RGB] = {
    "black": RGB(0, 0, 0),
    "white": RGB(255, 255, 255),
    "red": RGB(255, 0, 0),
    "green": RGB(0, 128, 0),
    "blue": RGB(0, 0, 255),
    "yellow": RGB(255, 255, 0),
    "cyan": RGB(0, 255, 255),
    "magenta": RGB(255, 0, 255),
    "gray": RGB(128, 128, 128),
    "grey": RGB(128, 128, 128),
    "silver": RGB(192, 192, 192),
    "maroon": RGB(128, 0, 0),
    "olive": RGB(128, 128, 0),
    "lime": RGB(0, 255, 0),
    "aqua": RGB(0, 255, 255),
    "teal": RGB(0, 128, 128),
    "navy": RGB(0, 0, 128),
    "fuchsia": RGB(255, 0, 255),
    "purple": RGB(128, 0, 128),
    "orange": RGB(255, 165, 0),
    # Channel values only; alpha is not modelled.
    "transparent": RGB(0, 0, 0),
}

_HEX_PATTERN = re.compile(r"#([0-9a-f]{3}|[0-9a-f]{6}|[0-9a-f]{8})")
_RGB_PATTERN = re.compile(
    r"rgba?\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*[\d.]+%?\s*)?\)"
)
_HSL_PATTERN = re.compile(
    r"hsla?\s*\(\s*(\d+(?:\.\d+)?)(?:deg)?\s*,\s*(\d+(?:\.\d+)?)%\s*,\s*(\d+(?:\.\d+)?)%\s*(?:,\s*[\d.]+%?\s*)?\)"
)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp_channel(value: float) -> int:
    return max(0, min(255, _round_half_up(value)))


def _parse_hex(value: str) -> Optional[RGB]:
    match = _HEX_PATTERN.fullmatch(value)
    if not match:
        return None

    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)

    # 8-digit form carries alpha in the last byte; it is dropped
    return RGB(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def _parse_rgb(value: str) -> Optional[RGB]:
    match = _RGB_PATTERN.fullmatch(value)
    if not match:
        return None
    r, g, b = (min(255, int(c)) for c in match.groups())
    return RGB(r, g, b)


def _parse_hsl(value: str) -> Optional[RGB]:
    match = _HSL_PATTERN.fullmatch(value)
    if not match:
        return None
    h = float(match.group(1)) % 360
    s = min(100.0, float(match.group(2))) / 100
    l = min(100.0, float(match.group(3))) / 100
    return hsl_to_rgb(HSL(h, s, l))


def parse_color(value: object) -> Optional[RGB]:
    """Parse a CSS color string into RGB.

    Supports ``#rgb``, ``#rrggbb``, ``#rrggbbaa``, ``rgb()``/``rgba()``,
    ``hsl()``/``hsla()`` and a table of named colors. Alpha is ignored.

    Returns:
        The parsed color, or None when the value is not a recognizable color
    """
    if not value or not isinstance(value, str):
        return None

    normalized = value.strip().lower()

    if normalized in NAMED_COLORS:
        return NAMED_COLORS[normalized]
    if normalized.startswith("#"):
        return _parse_hex(normalized)
    if normalized.startswith("rgb"):
        return _parse_rgb(normalized)
    if normalized.startswith("hsl"):
        return _parse_hsl(normalized)
    return None


def rgb_to_hsl(rgb: RGB) -> HSL:
    r, g, b = rgb.r / 255, rgb.g / 255, rgb.b / 255

    high = max(r, g, b)
    low = min(r, g, b)
    l = (high + low) / 2

    if high == low:
        return HSL(0.0, 0.0, l)

    d = high - low
    s = d / (2 - high - low) if l > 0.5 else d / (high + low)

    if high == r:
        h = ((g - b) / d + (6 if g < b else 0)) / 6
    elif high == g:
        h = ((b - r) / d + 2) / 6
    else:
        h = ((r - g) / d + 4) / 6

    return HSL(h * 360, s, l)


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(hsl: HSL) -> RGB:
    h, s, l = hsl
    h_norm = h / 360

    if s == 0:
        value = _clamp_channel(l * 255)
        return RGB(value, value, value)

    q = l * (1 + s) if l < 0.5 else l + s - l * s
    p = 2 * l - q

    return RGB(
        _clamp_channel(_hue_to_channel(p, q, h_norm + 1 / 3) * 255),
        _clamp_channel(_hue_to_channel(p, q, h_norm) * 255),
        _clamp_channel(_hue_to_channel(p, q, h_norm - 1 / 3) * 255),
    )


def rgb_to_hex(rgb: RGB) -> str:
    """Format as ``#rrggbb``; out-of-range channels saturate instead of failing."""
    return "#" + "".join(f"{_clamp_channel(c):02x}" for c in rgb)


def rgb_to_string(rgb: RGB) -> str:
    return f"rgb({_round_half_up(rgb.r)}, {_round_half_up(rgb.g)}, {_round_half_up(rgb.b)})"

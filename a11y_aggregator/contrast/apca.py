"""APCA lightness contrast (Lc), the perceptual metric proposed for WCAG 3.

Uses the published APCA-W3 0.0.98G-4g constants. Lc is signed: positive for
dark text on a light background, negative for light text on a dark one, and
its magnitude depends on which color is the text.
"""

from dataclasses import dataclass
from typing import Literal

from .color import RGB

APCA_THRESHOLDS = {
    "BODY_TEXT": 75.0,
    "LARGE_TEXT": 60.0,
    "NON_TEXT": 45.0,
}

APCACategory = Literal["body", "large", "nonText"]

_MAIN_TRC = 2.4
_S_RCO, _S_GCO, _S_BCO = 0.2126729, 0.7151522, 0.0721750

_NORM_BG, _NORM_TXT = 0.56, 0.57
_REV_TXT, _REV_BG = 0.62, 0.65

_BLK_THRS, _BLK_CLMP = 0.022, 1.414
_SCALE_BOW = _SCALE_WOB = 1.14
_LO_BOW_OFFSET = _LO_WOB_OFFSET = 0.027
_LO_CLIP = 0.1
_DELTA_Y_MIN = 0.0005


@dataclass(frozen=True)
class APCAContrastResult:
    lc: float
    meets_body: bool
    meets_large: bool
    meets_non_text: bool

    def to_dict(self) -> dict:
        return {
            "lc": self.lc,
            "meetsBody": self.meets_body,
            "meetsLarge": self.meets_large,
            "meetsNonText": self.meets_non_text,
        }


def screen_luminance(rgb: RGB) -> float:
    """Estimated screen luminance Y with APCA's simple 2.4 exponent."""
    return (
        _S_RCO * (rgb.r / 255) ** _MAIN_TRC
        + _S_GCO * (rgb.g / 255) ** _MAIN_TRC
        + _S_BCO * (rgb.b / 255) ** _MAIN_TRC
    )


def _soft_clamp_black(y: float) -> float:
    if y > _BLK_THRS:
        return y
    return y + (_BLK_THRS - y) ** _BLK_CLMP


def apca_contrast(text: RGB, background: RGB) -> float:
    """Lightness contrast Lc of ``text`` drawn over ``background``."""
    y_txt = _soft_clamp_black(screen_luminance(text))
    y_bg = _soft_clamp_black(screen_luminance(background))

    if abs(y_bg - y_txt) < _DELTA_Y_MIN:
        return 0.0

    if y_bg > y_txt:
        # Normal polarity: dark text on light background
        sapc = (y_bg ** _NORM_BG - y_txt ** _NORM_TXT) * _SCALE_BOW
        output = 0.0 if sapc < _LO_CLIP else sapc - _LO_BOW_OFFSET
    else:
        # Reverse polarity: light text on dark background
        sapc = (y_bg ** _REV_BG - y_txt ** _REV_TXT) * _SCALE_WOB
        output = 0.0 if sapc > -_LO_CLIP else sapc + _LO_WOB_OFFSET

    return output * 100


def required_apca_lightness(large_text: bool) -> float:
    return APCA_THRESHOLDS["LARGE_TEXT"] if large_text else APCA_THRESHOLDS["BODY_TEXT"]


def meets_apca(lc: float, category: APCACategory) -> bool:
    """Compare ``abs(lc)`` against the category threshold; polarity is ignored."""
    threshold = {
        "body": APCA_THRESHOLDS["BODY_TEXT"],
        "large": APCA_THRESHOLDS["LARGE_TEXT"],
        "nonText": APCA_THRESHOLDS["NON_TEXT"],
    }[category]
    return abs(lc) >= threshold


def apca_contrast_result(text: RGB, background: RGB) -> APCAContrastResult:
    lc = apca_contrast(text, background)
    return APCAContrastResult(
        lc=round(lc, 1),
        meets_body=meets_apca(lc, "body"),
        meets_large=meets_apca(lc, "large"),
        meets_non_text=meets_apca(lc, "nonText"),
    )

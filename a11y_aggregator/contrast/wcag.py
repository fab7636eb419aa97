"""WCAG 2.1 relative luminance and contrast ratio.

Thresholds (success criteria 1.4.3, 1.4.6 and 1.4.11):
- AA: 4.5:1 normal text, 3:1 large text
- AAA: 7:1 normal text, 4.5:1 large text
- Non-text UI components: 3:1
"""

from dataclasses import dataclass

from ..models import WCAGLevel
from .color import RGB

WCAG_THRESHOLDS = {
    "AA_NORMAL": 4.5,
    "AA_LARGE": 3.0,
    "AAA_NORMAL": 7.0,
    "AAA_LARGE": 4.5,
    "NON_TEXT": 3.0,
}

# ITU-R BT.709 coefficients
_LUMINANCE_WEIGHTS = (0.2126, 0.7152, 0.0722)


@dataclass(frozen=True)
class WCAGContrastResult:
    """Contrast ratio of a color pair and the thresholds it meets."""
    ratio: float
    meets_aa: bool
    meets_aaa: bool
    meets_aa_large_text: bool
    meets_aaa_large_text: bool

    def to_dict(self) -> dict:
        return {
            "ratio": self.ratio,
            "meetsAA": self.meets_aa,
            "meetsAAA": self.meets_aaa,
            "meetsAALargeText": self.meets_aa_large_text,
            "meetsAAALargeText": self.meets_aaa_large_text,
        }


def linearize(channel: float) -> float:
    """Convert an 8-bit sRGB channel to linear light."""
    normalized = channel / 255
    if normalized <= 0.03928:
        return normalized / 12.92
    return ((normalized + 0.055) / 1.055) ** 2.4


def relative_luminance(rgb: RGB) -> float:
    wr, wg, wb = _LUMINANCE_WEIGHTS
    return wr * linearize(rgb.r) + wg * linearize(rgb.g) + wb * linearize(rgb.b)


def contrast_ratio(fg: RGB, bg: RGB) -> float:
    """WCAG contrast ratio in [1, 21]. Order of arguments does not matter."""
    fg_luminance = relative_luminance(fg)
    bg_luminance = relative_luminance(bg)

    lighter = max(fg_luminance, bg_luminance)
    darker = min(fg_luminance, bg_luminance)

    return (lighter + 0.05) / (darker + 0.05)


def is_large_text(font_size_px: float, font_weight: int) -> bool:
    """WCAG "large scale" text: 18.5px bold or 24px regular, inclusive."""
    if font_weight >= 700:
        return font_size_px >= 18.5
    return font_size_px >= 24


def required_ratio(level: WCAGLevel | str, large_text: bool) -> float:
    """Minimum ratio for text at the given level.

    Level A has no contrast criterion of its own; it falls back to AA.
    """
    if WCAGLevel(level) == WCAGLevel.AAA:
        return WCAG_THRESHOLDS["AAA_LARGE"] if large_text else WCAG_THRESHOLDS["AAA_NORMAL"]
    return WCAG_THRESHOLDS["AA_LARGE"] if large_text else WCAG_THRESHOLDS["AA_NORMAL"]


def meets_wcag(ratio: float, level: WCAGLevel | str, large_text: bool) -> bool:
    return ratio >= required_ratio(level, large_text)


def meets_wcag_non_text(ratio: float) -> bool:
    return ratio >= WCAG_THRESHOLDS["NON_TEXT"]


def wcag_contrast_result(fg: RGB, bg: RGB) -> WCAGContrastResult:
    ratio = contrast_ratio(fg, bg)
    return WCAGContrastResult(
        ratio=round(ratio, 2),
        meets_aa=ratio >= WCAG_THRESHOLDS["AA_NORMAL"],
        meets_aaa=ratio >= WCAG_THRESHOLDS["AAA_NORMAL"],
        meets_aa_large_text=ratio >= WCAG_THRESHOLDS["AA_LARGE"],
        meets_aaa_large_text=ratio >= WCAG_THRESHOLDS["AAA_LARGE"],
    )

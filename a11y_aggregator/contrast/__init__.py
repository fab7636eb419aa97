"""Contrast analysis: color parsing, WCAG ratio, APCA Lc and fix suggestion."""

from .apca import (
    APCA_THRESHOLDS,
    APCAContrastResult,
    apca_contrast,
    apca_contrast_result,
    meets_apca,
    required_apca_lightness,
)
from .color import HSL, NAMED_COLORS, RGB, hsl_to_rgb, parse_color, rgb_to_hex, rgb_to_hsl, rgb_to_string
from .fixes import (
    FixSearchResult,
    find_fixed_color,
    find_fixed_color_for_apca,
    suggest_fixed_color,
    suggest_fixed_color_for_apca,
)
from .wcag import (
    WCAG_THRESHOLDS,
    WCAGContrastResult,
    contrast_ratio,
    is_large_text,
    linearize,
    meets_wcag,
    meets_wcag_non_text,
    relative_luminance,
    required_ratio,
    wcag_contrast_result,
)

__all__ = [
    # Colors
    "RGB",
    "HSL",
    "NAMED_COLORS",
    "parse_color",
    "rgb_to_hsl",
    "hsl_to_rgb",
    "rgb_to_hex",
    "rgb_to_string",
    # WCAG 2.1
    "WCAG_THRESHOLDS",
    "WCAGContrastResult",
    "linearize",
    "relative_luminance",
    "contrast_ratio",
    "is_large_text",
    "required_ratio",
    "meets_wcag",
    "meets_wcag_non_text",
    "wcag_contrast_result",
    # APCA
    "APCA_THRESHOLDS",
    "APCAContrastResult",
    "apca_contrast",
    "apca_contrast_result",
    "meets_apca",
    "required_apca_lightness",
    # Fixes
    "FixSearchResult",
    "find_fixed_color",
    "find_fixed_color_for_apca",
    "suggest_fixed_color",
    "suggest_fixed_color_for_apca",
]

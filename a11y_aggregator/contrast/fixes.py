"""Compliant foreground suggestions for failing color pairs.

The search keeps the foreground's hue and saturation and bisects its HSL
lightness, always pushing the foreground's luminance away from the
background's. Candidates that cross to the other side of the background are
rejected so that foreground and background never swap perceived roles.
"""

from dataclasses import dataclass
from typing import Callable

import structlog

from .apca import apca_contrast
from .color import HSL, RGB, hsl_to_rgb, rgb_to_hsl
from .wcag import contrast_ratio, relative_luminance

logger = structlog.get_logger()

MAX_ITERATIONS = 50
RATIO_TOLERANCE = 0.01
LC_TOLERANCE = 0.1

# Background luminance at which black and white give the same contrast ratio
_CROSSOVER_LUMINANCE = (1.05 * 0.05) ** 0.5 - 0.05


@dataclass(frozen=True)
class FixSearchResult:
    """Outcome of a lightness search.

    ``converged`` is False when the iteration budget ran out before the metric
    landed within tolerance of the target; ``color`` is then the best meeting
    candidate, or the extreme in the search direction if nothing met it.
    """
    color: RGB
    value: float
    converged: bool
    iterations: int


def _should_lighten(fg: RGB, bg: RGB) -> bool:
    fg_luminance = relative_luminance(fg)
    bg_luminance = relative_luminance(bg)
    if fg_luminance == bg_luminance:
        return bg_luminance < _CROSSOVER_LUMINANCE
    return fg_luminance > bg_luminance


def _search_lightness(
    fg: RGB,
    bg: RGB,
    target: float,
    metric: Callable[[RGB, RGB], float],
    tolerance: float,
) -> FixSearchResult:
    current = metric(fg, bg)
    if abs(current) >= target:
        return FixSearchResult(color=fg, value=current, converged=True, iterations=0)

    lighten = _should_lighten(fg, bg)
    bg_luminance = relative_luminance(bg)
    fg_hsl = rgb_to_hsl(fg)

    def on_correct_side(candidate: RGB) -> bool:
        luminance = relative_luminance(candidate)
        return luminance > bg_luminance if lighten else luminance < bg_luminance

    low, high = 0.0, 1.0
    best: tuple[RGB, float] | None = None
    iterations = 0

    while iterations < MAX_ITERATIONS:
        iterations += 1
        mid = (low + high) / 2
        candidate = hsl_to_rgb(HSL(fg_hsl.h, fg_hsl.s, mid))
        value = metric(candidate, bg)
        met = on_correct_side(candidate) and abs(value) >= target

        if met:
            best = (candidate, value)
            if abs(value) - target < tolerance:
                return FixSearchResult(color=candidate, value=value, converged=True, iterations=iterations)
            # Met with room to spare: move back towards the original lightness
            if lighten:
                high = mid
            else:
                low = mid
        elif lighten:
            low = mid
        else:
            high = mid

    if best is None:
        extreme = hsl_to_rgb(HSL(fg_hsl.h, fg_hsl.s, 1.0 if lighten else 0.0))
        best = (extreme, metric(extreme, bg))

    logger.debug(
        "Fix search exhausted iteration budget",
        target=target,
        achieved=round(best[1], 2),
        lighten=lighten,
    )
    return FixSearchResult(color=best[0], value=best[1], converged=False, iterations=iterations)


def find_fixed_color(fg: RGB, bg: RGB, target_ratio: float) -> FixSearchResult:
    """Search for a foreground meeting ``target_ratio`` against ``bg``."""
    return _search_lightness(fg, bg, target_ratio, contrast_ratio, RATIO_TOLERANCE)


def find_fixed_color_for_apca(fg: RGB, bg: RGB, target_lc: float) -> FixSearchResult:
    """Search for a foreground whose ``abs(Lc)`` over ``bg`` reaches ``target_lc``."""
    return _search_lightness(fg, bg, target_lc, apca_contrast, LC_TOLERANCE)


def suggest_fixed_color(fg: RGB, bg: RGB, target_ratio: float) -> RGB:
    return find_fixed_color(fg, bg, target_ratio).color


def suggest_fixed_color_for_apca(fg: RGB, bg: RGB, target_lc: float) -> RGB:
    return find_fixed_color_for_apca(fg, bg, target_lc).color

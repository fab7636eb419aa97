"""Tests for WCAG 2.1 luminance and contrast ratio."""

import itertools

import pytest

from a11y_aggregator.contrast.color import NAMED_COLORS, RGB
from a11y_aggregator.contrast.wcag import (
    WCAG_THRESHOLDS,
    contrast_ratio,
    is_large_text,
    linearize,
    meets_wcag,
    meets_wcag_non_text,
    relative_luminance,
    required_ratio,
    wcag_contrast_result,
)
from a11y_aggregator.models import WCAGLevel

BLACK = RGB(0, 0, 0)
WHITE = RGB(255, 255, 255)


class TestLuminance:
    """Tests for channel linearization and relative luminance."""

    def test_linearize_extremes(self):
        """Test 0 and 255 map to 0 and 1."""
        assert linearize(0) == 0
        assert linearize(255) == pytest.approx(1.0)

    def test_linearize_low_segment(self):
        """Test the linear segment below the sRGB knee."""
        assert linearize(10) == pytest.approx(10 / 255 / 12.92)

    def test_primary_ordering(self):
        """Test green is brighter than red, which is brighter than blue."""
        green = relative_luminance(RGB(0, 255, 0))
        red = relative_luminance(RGB(255, 0, 0))
        blue = relative_luminance(RGB(0, 0, 255))

        assert green > red > blue

    def test_white_is_one(self):
        """Test white has luminance 1."""
        assert relative_luminance(WHITE) == pytest.approx(1.0)


class TestContrastRatio:
    """Tests for contrast_ratio."""

    def test_black_white(self):
        """Test black/white gives 21 in either order."""
        assert contrast_ratio(BLACK, WHITE) == pytest.approx(21.0)
        assert contrast_ratio(WHITE, BLACK) == pytest.approx(21.0)

    @pytest.mark.parametrize("color", list(NAMED_COLORS.values()))
    def test_identical_colors(self, color):
        """Test a color against itself gives exactly 1."""
        assert contrast_ratio(color, color) == 1

    def test_symmetry(self):
        """Test contrast ratio ignores argument order."""
        colors = [RGB(119, 119, 119), RGB(255, 0, 0), RGB(0, 0, 128), RGB(250, 240, 230), BLACK]
        for a, b in itertools.combinations(colors, 2):
            assert contrast_ratio(a, b) == contrast_ratio(b, a)

    def test_known_gray(self):
        """Test #777 on white sits just below AA."""
        assert contrast_ratio(RGB(0x77, 0x77, 0x77), WHITE) == pytest.approx(4.48, abs=0.01)
        assert contrast_ratio(RGB(0x76, 0x76, 0x76), WHITE) == pytest.approx(4.54, abs=0.01)


class TestThresholds:
    """Tests for WCAG threshold checks."""

    def test_threshold_table(self):
        """Test the published threshold values."""
        assert WCAG_THRESHOLDS == {
            "AA_NORMAL": 4.5,
            "AA_LARGE": 3.0,
            "AAA_NORMAL": 7.0,
            "AAA_LARGE": 4.5,
            "NON_TEXT": 3.0,
        }

    @pytest.mark.parametrize(
        "level,large,passing,failing",
        [
            ("AA", False, 4.5, 4.49),
            ("AA", True, 3.0, 2.99),
            ("AAA", False, 7.0, 6.99),
            ("AAA", True, 4.5, 4.49),
        ],
    )
    def test_boundaries(self, level, large, passing, failing):
        """Test thresholds are inclusive at each level and text size."""
        assert meets_wcag(passing, level, large) is True
        assert meets_wcag(failing, level, large) is False

    def test_level_a_uses_aa_thresholds(self):
        """Test level A has the same contrast requirement as AA."""
        assert required_ratio(WCAGLevel.A, False) == 4.5
        assert required_ratio(WCAGLevel.A, True) == 3.0

    def test_non_text(self):
        """Test the non-text contrast threshold."""
        assert meets_wcag_non_text(3.0) is True
        assert meets_wcag_non_text(2.99) is False


class TestLargeText:
    """Tests for is_large_text."""

    def test_boundaries(self):
        """Test large text boundaries for regular and bold weights."""
        assert is_large_text(24, 400) is True
        assert is_large_text(23.9, 400) is False
        assert is_large_text(18.5, 700) is True
        assert is_large_text(18.4, 700) is False

    def test_semibold_is_not_bold(self):
        """Test weights below 700 need the regular size."""
        assert is_large_text(20, 600) is False


class TestContrastResult:
    """Tests for wcag_contrast_result."""

    def test_result_flags(self):
        """Test result rounding and pass flags for a mid gray."""
        result = wcag_contrast_result(RGB(0x77, 0x77, 0x77), WHITE)

        assert result.ratio == 4.48
        assert result.meets_aa is False
        assert result.meets_aa_large_text is True
        assert result.meets_aaa is False
        assert result.meets_aaa_large_text is False

    def test_to_dict(self):
        """Test camelCase serialization."""
        data = wcag_contrast_result(BLACK, WHITE).to_dict()

        assert data == {
            "ratio": 21.0,
            "meetsAA": True,
            "meetsAAA": True,
            "meetsAALargeText": True,
            "meetsAAALargeText": True,
        }

"""Tests for APCA lightness contrast."""

import pytest

from a11y_aggregator.contrast.apca import (
    APCA_THRESHOLDS,
    apca_contrast,
    apca_contrast_result,
    meets_apca,
    required_apca_lightness,
)
from a11y_aggregator.contrast.color import RGB

BLACK = RGB(0, 0, 0)
WHITE = RGB(255, 255, 255)
GRAY = RGB(128, 128, 128)


class TestApcaContrast:
    """Tests for apca_contrast."""

    def test_polarity(self):
        """Test dark-on-light is positive and light-on-dark is negative."""
        normal = apca_contrast(BLACK, WHITE)
        reverse = apca_contrast(WHITE, BLACK)

        assert normal * reverse < 0
        assert normal == pytest.approx(106.0, abs=0.5)
        assert reverse == pytest.approx(-107.9, abs=0.5)

    def test_same_color_is_zero(self):
        """Test identical colors have no contrast."""
        assert abs(apca_contrast(GRAY, GRAY)) < 1
        assert apca_contrast(WHITE, WHITE) == 0

    def test_low_contrast_clips_to_zero(self):
        """Test near-identical light colors clip to 0."""
        assert apca_contrast(RGB(250, 250, 250), WHITE) == 0

    def test_monotonic_in_text_darkness(self):
        """Test darker text on white gives higher Lc."""
        values = [apca_contrast(RGB(v, v, v), WHITE) for v in (200, 150, 100, 50, 0)]

        assert values == sorted(values)


class TestApcaThresholds:
    """Tests for APCA threshold checks."""

    def test_threshold_table(self):
        """Test body, large and non-text thresholds."""
        assert APCA_THRESHOLDS == {"BODY_TEXT": 75.0, "LARGE_TEXT": 60.0, "NON_TEXT": 45.0}

    def test_meets_uses_magnitude(self):
        """Test polarity does not affect pass/fail."""
        assert meets_apca(-80, "body") is True
        assert meets_apca(74.9, "body") is False
        assert meets_apca(-60, "large") is True
        assert meets_apca(44, "nonText") is False

    def test_required_lightness(self):
        """Test required Lc by text size."""
        assert required_apca_lightness(False) == 75
        assert required_apca_lightness(True) == 60

    def test_result(self):
        """Test the rounded result and its flags."""
        result = apca_contrast_result(BLACK, WHITE)

        assert result.lc == round(apca_contrast(BLACK, WHITE), 1)
        assert result.meets_body and result.meets_large and result.meets_non_text
        assert result.to_dict()["meetsBody"] is True

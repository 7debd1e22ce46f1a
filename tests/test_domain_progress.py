"""Tests for progress clamping and levels."""
from __future__ import annotations

import math

import pytest

from planmap.domain.errors import ValidationError
from planmap.domain.progress import PROGRESS_COLORS, clamp_progress, progress_color, progress_level


class TestClampProgress:
    """Test clamp_progress rounding and bounds."""

    @pytest.mark.parametrize("value,expected", [
        (-5, 0),
        (150, 100),
        (42.6, 43),
        (42.5, 43),
        (42.4, 42),
        (0, 0),
        (100, 100),
        (99.5, 100),
        (-0.4, 0),
        (math.inf, 100),
        (-math.inf, 0),
    ])
    def test_clamp(self, value, expected):
        assert clamp_progress(value) == expected

    def test_returns_int(self):
        assert isinstance(clamp_progress(12.0), int)

    @pytest.mark.parametrize("value", ["50", None, True, float("nan"), [50]])
    def test_rejects_non_numbers(self, value):
        with pytest.raises(ValidationError):
            clamp_progress(value)


class TestProgressLevel:
    """Test level boundaries and colours."""

    @pytest.mark.parametrize("progress,level", [
        (0, "low"), (33, "low"), (34, "medium"), (66, "medium"), (67, "high"), (100, "high"),
    ])
    def test_level(self, progress, level):
        assert progress_level(progress) == level

    def test_color_palette(self):
        assert progress_color(10) is PROGRESS_COLORS["low"]
        assert set(progress_color(90)) == {"color", "bg_color", "border_color", "text_color"}

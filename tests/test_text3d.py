"""Tests for the label font and label text."""

import pytest

from brickrail.text3d import (
    BLOCK_FONT,
    CHAR_HEIGHT,
    CHAR_WIDTH,
    label_text,
    text_shape,
    text_solid,
    text_width,
)


class TestBlockFont:

    def test_font_covers_labels(self):
        for c in '0123456789RL. -':
            assert c in BLOCK_FONT, f"Missing character {c}"

    def test_rectangles_fit_cell(self):
        for char, rects in BLOCK_FONT.items():
            for x, y, w, h in rects:
                assert w > 0 and h > 0, f"Empty rectangle in {char}"
                assert x + w <= CHAR_WIDTH, f"Rectangle too wide in {char}"
                assert y + h <= CHAR_HEIGHT, f"Rectangle too tall in {char}"


class TestLabelText:

    @pytest.mark.parametrize("radius, angle, expected", [
        (56, 20, "R56 L20"),
        (120, 11.25, "R120 L11.25"),
        (40.0, 22.5, "R40 L22.5"),
    ])
    def test_format(self, radius, angle, expected):
        assert label_text(radius, angle) == expected


class TestTextShape:

    def test_width(self):
        # seven characters, six gaps of one grid unit
        assert text_width("R56 L20", height=7.0) == pytest.approx(7 * 5 + 6)
        assert text_width("", height=7.0) == 0.0

    def test_shape_bounds(self):
        shape = text_shape("R56", height=7.0)
        minx, miny, maxx, maxy = shape.bounds
        assert (minx, miny) == pytest.approx((0.0, 0.0))
        assert maxx == pytest.approx(text_width("R56", height=7.0))
        assert maxy == pytest.approx(7.0)

    def test_blank_text(self):
        assert text_shape("   ") is None
        assert text_solid("") is None

    def test_unknown_character_uses_placeholder(self):
        assert text_shape("?") is not None

    def test_solid_depth(self):
        solid = text_solid("L20", height=4.0, depth=0.6, base_z=1.0)
        assert solid.is_watertight
        assert solid.bounds[0][2] == pytest.approx(1.0)
        assert solid.bounds[1][2] == pytest.approx(1.6)

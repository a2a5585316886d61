"""Tests for contain-to-width page layout."""

from __future__ import annotations

import math

import pytest

from imgpdf.constants import PAGE_HEIGHT, PAGE_WIDTH
from imgpdf.layout import compute_layout


class TestComputeLayout:
    """Tests for compute_layout."""

    def test_tall_image_overflows_page(self):
        """Test that a 1000x2000 image is scaled to width and overflows vertically."""
        layout = compute_layout(1000, 2000)

        assert layout.render_width == 595
        assert layout.render_height == pytest.approx(1190)
        assert layout.offset_x == 0
        assert layout.offset_y == pytest.approx(-174)
        assert layout.offset_y < 0

    def test_wide_image_scaled_to_page_width(self):
        """Test that images wider than the page shrink to the page width."""
        layout = compute_layout(1190, 842)

        assert layout.render_width == PAGE_WIDTH
        assert layout.render_height == pytest.approx(421)
        assert layout.offset_x == 0
        assert layout.offset_y == pytest.approx((PAGE_HEIGHT - 421) / 2)

    def test_small_image_not_upscaled(self):
        """Test that images narrower than the page keep their natural size."""
        layout = compute_layout(200, 100)

        assert layout.render_width == 200
        assert layout.render_height == 100
        assert layout.offset_x == pytest.approx(197.5)
        assert layout.offset_y == pytest.approx(371)

    def test_exact_page_width(self):
        """Test an image exactly as wide as the page."""
        layout = compute_layout(595, 842)

        assert layout.render_width == 595
        assert layout.render_height == 842
        assert layout.offset_x == 0
        assert layout.offset_y == 0

    @pytest.mark.parametrize(
        ("width", "height"),
        [(1, 1), (1, 10_000), (10_000, 1), (4032, 3024), (3024, 4032), (596, 7), (594.5, 0.25)],
    )
    def test_aspect_ratio_and_centering(self, width, height):
        """Test that aspect ratio is kept and the image is centered on both axes."""
        layout = compute_layout(width, height)

        assert layout.render_width <= PAGE_WIDTH
        assert layout.render_height / layout.render_width == pytest.approx(height / width, rel=1e-6)
        assert layout.offset_x * 2 + layout.render_width == pytest.approx(PAGE_WIDTH)
        assert layout.offset_y * 2 + layout.render_height == pytest.approx(PAGE_HEIGHT)
        assert layout.offset_x >= 0

    def test_custom_page_size(self):
        """Test layout on a non-default canvas."""
        layout = compute_layout(400, 200, page_width=200, page_height=300)

        assert layout.render_width == 200
        assert layout.render_height == 100
        assert layout.offset_x == 0
        assert layout.offset_y == 100

    @pytest.mark.parametrize(
        "args",
        [(0, 100), (100, 0), (-5, 100), (100, -5), (math.inf, 100), (100, math.nan), (100, 100, 0, 842)],
    )
    def test_invalid_dimensions_raise(self, args):
        """Test that non-positive or non-finite dimensions are rejected."""
        with pytest.raises(ValueError, match="positive finite"):
            compute_layout(*args)

    def test_rect_and_aspect_ratio(self):
        """Test derived rectangle and aspect ratio."""
        layout = compute_layout(1000, 2000)

        x0, y0, x1, y1 = layout.rect
        assert (x0, x1) == (0, 595)
        assert y0 == pytest.approx(-174)
        assert y1 == pytest.approx(1016)
        assert layout.aspect_ratio == pytest.approx(2.0)

"""Tests for image dataclasses."""

from __future__ import annotations

import dataclasses

import pytest

from imgpdf.types import ImageFormat, NormalizedImage, RawImage


class TestImageFormat:
    """Tests for ImageFormat enum."""

    def test_values(self):
        assert [f.value for f in ImageFormat] == ["jpeg", "png", "webp", "unsupported"]

    def test_native_formats(self):
        assert ImageFormat.JPEG.is_native
        assert ImageFormat.PNG.is_native
        assert not ImageFormat.WEBP.is_native
        assert not ImageFormat.UNSUPPORTED.is_native

    def test_mime_type(self):
        assert ImageFormat.WEBP.mime_type == "image/webp"
        assert ImageFormat.UNSUPPORTED.mime_type is None

    def test_string_comparison(self):
        assert ImageFormat("png") is ImageFormat.PNG
        assert ImageFormat.PNG == "png"


class TestRawImage:
    """Tests for RawImage."""

    def test_is_read_only(self):
        raw = RawImage(b"abc")

        with pytest.raises(dataclasses.FrozenInstanceError):
            raw.data = b"xyz"  # type: ignore[misc]

    def test_label(self):
        assert RawImage(b"abc", source="a.png").label == "a.png"
        assert RawImage(b"abc").label == "<3 bytes>"

    def test_repr_hides_bytes(self):
        assert "data" not in repr(RawImage(b"\x00" * 10_000, source="a.png"))


class TestNormalizedImage:
    """Tests for NormalizedImage invariants."""

    def test_valid(self):
        image = NormalizedImage(data=b"png", format=ImageFormat.PNG, width=10, height=20)

        assert image.size == (10, 20)
        assert image.to_dict() == {"format": "png", "width": 10, "height": 20, "bytes": 3}

    @pytest.mark.parametrize("fmt", [ImageFormat.WEBP, ImageFormat.UNSUPPORTED])
    def test_non_native_rejected(self, fmt):
        with pytest.raises(ValueError, match="jpeg or png"):
            NormalizedImage(data=b"x", format=fmt, width=1, height=1)

    @pytest.mark.parametrize(("width", "height"), [(0, 1), (1, 0), (-3, 4)])
    def test_invalid_dimensions_rejected(self, width, height):
        with pytest.raises(ValueError, match="dimensions"):
            NormalizedImage(data=b"x", format=ImageFormat.JPEG, width=width, height=height)

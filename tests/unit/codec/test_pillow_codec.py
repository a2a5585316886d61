"""Tests for the Pillow image codec."""

from __future__ import annotations

import io

import pytest
from PIL import Image

from imgpdf.codec import PillowCodec
from imgpdf.exceptions import DecodeError, UnsupportedFormatError
from imgpdf.types import ImageFormat


@pytest.fixture
def codec():
    return PillowCodec()


class TestDetectFormat:
    """Tests for content-derived format classification."""

    def test_jpeg(self, codec, jpeg_bytes):
        assert codec.detect_format(jpeg_bytes) is ImageFormat.JPEG

    def test_png(self, codec, png_bytes, rgba_png_bytes):
        assert codec.detect_format(png_bytes) is ImageFormat.PNG
        assert codec.detect_format(rgba_png_bytes) is ImageFormat.PNG

    def test_webp(self, codec, webp_bytes):
        assert codec.detect_format(webp_bytes) is ImageFormat.WEBP

    def test_gif_is_unsupported(self, codec, gif_bytes):
        """Test that parseable formats outside the set are unsupported."""
        assert codec.detect_format(gif_bytes) is ImageFormat.UNSUPPORTED

    def test_bmp_is_unsupported(self, codec, make_image):
        assert codec.detect_format(make_image("BMP")) is ImageFormat.UNSUPPORTED

    def test_animated_webp_is_unsupported(self, codec, animated_webp_bytes):
        """Test that multi-frame animations are unsupported."""
        assert codec.detect_format(animated_webp_bytes) is ImageFormat.UNSUPPORTED

    def test_truncated_png_is_unsupported(self, codec, truncated_png_bytes):
        """Test that a PNG failing structural verification is unsupported."""
        assert codec.detect_format(truncated_png_bytes) is ImageFormat.UNSUPPORTED

    def test_junk_raises_decode_error(self, codec, corrupt_bytes):
        """Test that unparseable buffers raise DecodeError."""
        with pytest.raises(DecodeError):
            codec.detect_format(corrupt_bytes)

    def test_empty_raises_decode_error(self, codec):
        with pytest.raises(DecodeError, match="Empty"):
            codec.detect_format(b"")

    def test_magic_bytes_alone_are_not_an_image(self, codec, png_bytes):
        """Test that a bare JPEG signature without a stream is not classified as JPEG."""
        with pytest.raises(DecodeError):
            codec.detect_format(b"\xff\xd8\xff" + b"\x00" * 32)
        assert codec.detect_format(png_bytes) is ImageFormat.PNG


class TestDecodeDimensions:
    """Tests for full decode and dimension reading."""

    def test_reads_dimensions(self, codec, jpeg_bytes, png_bytes):
        assert codec.decode_dimensions(jpeg_bytes) == (800, 600)
        assert codec.decode_dimensions(png_bytes) == (400, 300)

    def test_truncated_jpeg_raises(self, codec, truncated_jpeg_bytes):
        """Test that truncated pixel data is rejected on full decode."""
        with pytest.raises(DecodeError):
            codec.decode_dimensions(truncated_jpeg_bytes)

    def test_junk_raises(self, codec, corrupt_bytes):
        with pytest.raises(DecodeError):
            codec.decode_dimensions(corrupt_bytes)


class TestTranscode:
    """Tests for re-encoding."""

    def test_webp_to_png(self, codec, webp_bytes):
        """Test WebP to PNG transcoding keeps size and alpha."""
        png = codec.transcode(webp_bytes, ImageFormat.WEBP, ImageFormat.PNG)

        assert codec.detect_format(png) is ImageFormat.PNG
        with Image.open(io.BytesIO(png)) as img:
            assert img.size == (300, 200)
            assert img.mode == "RGBA"

    def test_png_to_jpeg_flattens_alpha(self, codec, rgba_png_bytes):
        jpeg = codec.transcode(rgba_png_bytes, ImageFormat.PNG, ImageFormat.JPEG)

        with Image.open(io.BytesIO(jpeg)) as img:
            assert img.format == "JPEG"
            assert img.mode == "RGB"

    def test_unsupported_target(self, codec, png_bytes):
        with pytest.raises(UnsupportedFormatError):
            codec.transcode(png_bytes, ImageFormat.PNG, ImageFormat.WEBP)

    def test_corrupt_source(self, codec, corrupt_bytes):
        with pytest.raises(DecodeError):
            codec.transcode(corrupt_bytes, ImageFormat.WEBP, ImageFormat.PNG)


class TestResample:
    """Tests for width-constrained resampling."""

    def test_resample_keeps_aspect(self, codec, jpeg_bytes):
        data, size = codec.resample(jpeg_bytes, ImageFormat.JPEG, 400)

        assert size == (400, 300)
        assert codec.detect_format(data) is ImageFormat.JPEG
        assert codec.decode_dimensions(data) == (400, 300)

    def test_resample_palette_png(self, codec, gif_bytes):
        """Test that palette images are converted before resizing."""
        with Image.open(io.BytesIO(gif_bytes)) as img:
            buffer = io.BytesIO()
            img.save(buffer, format="PNG")

        data, size = codec.resample(buffer.getvalue(), ImageFormat.PNG, 25)

        assert size == (25, 25)
        assert codec.detect_format(data) is ImageFormat.PNG

    def test_invalid_width(self, codec, png_bytes):
        with pytest.raises(ValueError):
            codec.resample(png_bytes, ImageFormat.PNG, 0)

    def test_unsupported_format(self, codec, webp_bytes):
        with pytest.raises(UnsupportedFormatError):
            codec.resample(webp_bytes, ImageFormat.WEBP, 100)

    def test_jpeg_quality_is_used(self, make_image):
        """Test that a lower quality produces a smaller JPEG."""
        noisy = make_image("JPEG", size=(300, 300), noise=True, quality=95)

        low, _ = PillowCodec(jpeg_quality=10).resample(noisy, ImageFormat.JPEG, 200)
        high, _ = PillowCodec(jpeg_quality=95).resample(noisy, ImageFormat.JPEG, 200)

        assert len(low) < len(high)

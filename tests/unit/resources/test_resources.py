"""Tests for resource management utilities."""

from __future__ import annotations

import pytest
from PIL import Image

from imgpdf.exceptions import DecodeError
from imgpdf.resources import ManagedResource, open_image


class TestOpenImage:
    """Tests for the Pillow image context manager."""

    def test_opens_and_closes_image(self, png_bytes):
        """Test that the image is usable inside the block and closed after it."""
        with open_image(png_bytes) as img:
            assert img.format == "PNG"
            assert img.size == (400, 300)

        assert img.fp is None

    def test_closes_on_error(self, png_bytes):
        with pytest.raises(RuntimeError):
            with open_image(png_bytes) as img:
                raise RuntimeError("inside")

        assert img.fp is None

    def test_empty_buffer(self):
        with pytest.raises(DecodeError, match="Empty"):
            with open_image(b""):
                pass

    def test_unidentified_buffer(self, corrupt_bytes):
        with pytest.raises(DecodeError, match="identify"):
            with open_image(corrupt_bytes):
                pass

    def test_decompression_bomb_rejected(self, monkeypatch: pytest.MonkeyPatch, png_bytes):
        """Test that images above the hard pixel limit are a decode error."""
        # 400x300 = 120000 pixels; the hard limit is twice MAX_IMAGE_PIXELS
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)

        with pytest.raises(DecodeError, match="decompression limit"):
            with open_image(png_bytes):
                pass


class TestManagedResource:
    """Tests for generic managed resource."""

    def test_calls_cleanup_function(self):
        """Test that cleanup function is called."""
        cleanup_called = []

        def cleanup(resource: dict) -> None:
            cleanup_called.append(True)
            resource.clear()

        resource = {"pages": [1, 2, 3]}

        with ManagedResource(resource, cleanup, "working document") as res:
            assert res == {"pages": [1, 2, 3]}

        assert len(cleanup_called) == 1
        assert resource == {}

    def test_cleanup_runs_when_body_raises(self):
        cleaned = []

        with pytest.raises(ValueError):
            with ManagedResource("doc", cleaned.append):
                raise ValueError("serialize failed")

        assert cleaned == ["doc"]

    def test_handles_cleanup_errors(self):
        """Test that cleanup errors are handled gracefully."""

        def failing_cleanup(resource: object) -> None:
            raise ValueError("Cleanup failed")

        resource = object()

        # Should not raise, just log warning
        with ManagedResource(resource, failing_cleanup, "failing-resource"):
            pass

"""Tests for ClassificationStage."""

from __future__ import annotations

import logging
from unittest.mock import Mock

import pytest

from imgpdf.codec import PillowCodec
from imgpdf.exceptions import DecodeError
from imgpdf.stages import ClassificationStage, StageError
from imgpdf.types import ImageFormat, RawImage


class TestClassificationStage:
    """Tests for content-derived classification."""

    def test_uses_buffer_content(self, png_bytes):
        stage = ClassificationStage(PillowCodec())

        assert stage.process(RawImage(png_bytes)) is ImageFormat.PNG

    def test_content_type_hint_is_ignored(self, png_bytes):
        """Test that a wrong transport hint never changes the result."""
        stage = ClassificationStage(PillowCodec())

        assert stage.process(RawImage(png_bytes, content_type="image/jpeg")) is ImageFormat.PNG

    def test_mismatched_hint_logged_at_debug(self, webp_bytes, caplog):
        stage = ClassificationStage(PillowCodec())

        with caplog.at_level(logging.DEBUG, logger="imgpdf.stages.classification_stage"):
            stage.process(RawImage(webp_bytes, content_type="image/png", source="a.png"))

        assert "disagrees" in caplog.text

    def test_jpeg_alias_hint_not_reported(self, jpeg_bytes, caplog):
        stage = ClassificationStage(PillowCodec())

        with caplog.at_level(logging.DEBUG, logger="imgpdf.stages.classification_stage"):
            assert stage.process(RawImage(jpeg_bytes, content_type="image/jpg")) is ImageFormat.JPEG

        assert "disagrees" not in caplog.text

    def test_unsupported_is_a_result_not_an_error(self, gif_bytes):
        stage = ClassificationStage(PillowCodec())

        assert stage.process(RawImage(gif_bytes, content_type="image/gif")) is ImageFormat.UNSUPPORTED

    def test_unparseable_raises_stage_error(self, corrupt_bytes):
        stage = ClassificationStage(PillowCodec())

        with pytest.raises(StageError) as exc_info:
            stage.process(RawImage(corrupt_bytes))

        assert exc_info.value.error_type == "DecodeError"

    def test_delegates_to_codec(self):
        codec = Mock()
        codec.detect_format.side_effect = DecodeError("nope")
        stage = ClassificationStage(codec)

        with pytest.raises(StageError):
            stage.process(RawImage(b"xyz"))

        codec.detect_format.assert_called_once_with(b"xyz")

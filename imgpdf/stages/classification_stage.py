"""Classification Stage: content-derived format detection."""

from __future__ import annotations

import logging
from typing import Any

from ..types import ImageCodec, ImageFormat, RawImage
from .base import BaseStage

logger = logging.getLogger(__name__)


class ClassificationStage(BaseStage[RawImage, ImageFormat]):
    """Stage 1: Classify a raw buffer as jpeg, png, webp or unsupported.

    The transport content-type hint is compared against the result for
    diagnostics only. It never changes the classification.
    """

    name = "classification"

    def __init__(self, codec: ImageCodec):
        self.codec = codec

    def _process_impl(self, input_data: RawImage, **context: Any) -> ImageFormat:
        fmt = self.codec.detect_format(input_data.data)

        hint = input_data.content_type
        if hint and fmt.mime_type and hint.lower() != fmt.mime_type and not _is_jpeg_alias(hint, fmt):
            logger.debug(
                "Content-type hint %s for %s disagrees with detected %s; using detected format",
                hint,
                input_data.label,
                fmt.value,
            )

        return fmt


def _is_jpeg_alias(hint: str, fmt: ImageFormat) -> bool:
    return fmt is ImageFormat.JPEG and hint.lower() in ("image/jpg", "image/pjpeg")

"""Normalization Stage: turn a classified buffer into an embeddable image."""

from __future__ import annotations

import logging
from typing import Any, assert_never

from ..constants import PAGE_WIDTH
from ..exceptions import UnsupportedFormatError
from ..types import ImageCodec, ImageFormat, NormalizedImage, RawImage
from .base import BaseStage

logger = logging.getLogger(__name__)


class NormalizationStage(BaseStage[RawImage, NormalizedImage]):
    """Stage 2: Normalize a classified image into JPEG or PNG.

    - ``jpeg`` / ``png``: bytes pass through unchanged
    - ``webp``: transcoded to ``png``
    - ``unsupported``: rejected (callers filter these out beforehand)

    With ``downsample`` enabled, images wider than the page are resampled
    to the page width so the PDF does not carry unused pixels.
    """

    name = "normalization"

    def __init__(
        self,
        codec: ImageCodec,
        downsample: bool = False,
        page_width: float = PAGE_WIDTH,
    ):
        """Initialize NormalizationStage.

        Args:
            codec: Image codec used for decoding and transcoding
            downsample: Resample images wider than ``page_width``
            page_width: Target pixel width for downsampling
        """
        self.codec = codec
        self.downsample = downsample
        self.page_width = page_width

    def _process_impl(self, input_data: RawImage, *, fmt: ImageFormat, **context: Any) -> NormalizedImage:
        if fmt is ImageFormat.JPEG or fmt is ImageFormat.PNG:
            data, native = input_data.data, fmt
        elif fmt is ImageFormat.WEBP:
            data, native = self.codec.transcode(input_data.data, fmt, ImageFormat.PNG), ImageFormat.PNG
        elif fmt is ImageFormat.UNSUPPORTED:
            raise UnsupportedFormatError(f"{input_data.label} is not a supported image format")
        else:
            assert_never(fmt)

        width, height = self.codec.decode_dimensions(data)

        target_width = int(self.page_width)
        if self.downsample and width > target_width:
            data, (width, height) = self.codec.resample(data, native, target_width)
            logger.debug("Downsampled %s to %dx%d", input_data.label, width, height)

        return NormalizedImage(data=data, format=native, width=width, height=height)

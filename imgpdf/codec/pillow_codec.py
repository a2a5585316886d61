"""Pillow-backed image codec.

Classification, dimension decoding and transcoding are all derived from
the buffer content. File names and transport MIME types play no part.
"""

from __future__ import annotations

import io
import logging
import struct

from PIL import Image

from ..constants import DEFAULT_JPEG_QUALITY
from ..exceptions import DecodeError, UnsupportedFormatError
from ..resources import open_image
from ..types import ImageFormat

logger = logging.getLogger(__name__)

__all__ = ["PillowCodec"]

# Pillow format names -> classifier result.
# MPO is the multi-picture JPEG variant written by many phone cameras;
# its first frame is a baseline JPEG stream.
_PIL_FORMATS: dict[str, ImageFormat] = {
    "JPEG": ImageFormat.JPEG,
    "MPO": ImageFormat.JPEG,
    "PNG": ImageFormat.PNG,
    "WEBP": ImageFormat.WEBP,
}

_ENCODERS: dict[ImageFormat, str] = {
    ImageFormat.JPEG: "JPEG",
    ImageFormat.PNG: "PNG",
}

_PNG_MODES = {"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"}

_DECODE_ERRORS = (OSError, SyntaxError, ValueError, struct.error, EOFError)


class PillowCodec:
    """Image codec built on Pillow.

    Attributes:
        name: Codec identifier
        jpeg_quality: Quality used whenever JPEG data has to be re-encoded

    Example:
        >>> codec = PillowCodec()
        >>> codec.detect_format(webp_bytes)
        <ImageFormat.WEBP: 'webp'>
        >>> png = codec.transcode(webp_bytes, ImageFormat.WEBP, ImageFormat.PNG)
        >>> codec.detect_format(png)
        <ImageFormat.PNG: 'png'>
    """

    name = "pillow"

    def __init__(self, jpeg_quality: int = DEFAULT_JPEG_QUALITY):
        self.jpeg_quality = jpeg_quality

    def detect_format(self, data: bytes) -> ImageFormat:
        """Classify an encoded buffer by its own header and structure.

        Returns ``UNSUPPORTED`` for formats outside JPEG/PNG/WebP, for
        animations, and for buffers whose structure fails verification.

        Raises:
            DecodeError: If Pillow cannot identify the buffer at all
        """
        with open_image(data) as img:
            detected = _PIL_FORMATS.get(img.format or "")
            if detected is None:
                logger.debug("Unsupported image format: %s", img.format)
                return ImageFormat.UNSUPPORTED

            if img.format != "MPO" and getattr(img, "is_animated", False):
                logger.debug("Animated %s with %d frames is not supported", img.format, img.n_frames)
                return ImageFormat.UNSUPPORTED

            try:
                img.verify()
            except _DECODE_ERRORS as e:
                logger.debug("%s image failed verification: %s", img.format, e)
                return ImageFormat.UNSUPPORTED

        return detected

    def decode_dimensions(self, data: bytes) -> tuple[int, int]:
        """Fully decode the buffer and return its (width, height).

        Decoding the pixel data (not just the header) rejects truncated
        payloads before they reach the document writer.

        Raises:
            DecodeError: If the pixel data cannot be decoded
        """
        with open_image(data) as img:
            try:
                img.load()
            except _DECODE_ERRORS as e:
                raise DecodeError(f"Failed to decode {img.format} image: {e}") from e
            width, height = img.size

        if width <= 0 or height <= 0:
            raise DecodeError(f"Image has invalid dimensions {width}x{height}")
        return width, height

    def transcode(self, data: bytes, from_format: ImageFormat, to_format: ImageFormat) -> bytes:
        """Re-encode ``data`` (in ``from_format``) as ``to_format``.

        Raises:
            UnsupportedFormatError: If ``to_format`` cannot be encoded
            DecodeError: If decoding or encoding fails
        """
        if to_format not in _ENCODERS:
            raise UnsupportedFormatError(f"Cannot transcode to {to_format.value}")

        with open_image(data) as img:
            if _PIL_FORMATS.get(img.format or "") is not from_format:
                logger.debug("Declared source format %s, buffer is %s", from_format.value, img.format)
            try:
                img.load()
                encoded = self._encode(img, to_format)
            except _DECODE_ERRORS as e:
                raise DecodeError(f"Failed to transcode {from_format.value} to {to_format.value}: {e}") from e

        logger.debug(
            "Transcoded %s (%d bytes) to %s (%d bytes)",
            from_format.value,
            len(data),
            to_format.value,
            len(encoded),
        )
        return encoded

    def resample(self, data: bytes, fmt: ImageFormat, width: int) -> tuple[bytes, tuple[int, int]]:
        """Resize to ``width`` pixels wide, keeping the aspect ratio.

        Returns:
            Tuple of (encoded bytes in ``fmt``, (width, height))

        Raises:
            UnsupportedFormatError: If ``fmt`` cannot be encoded
            DecodeError: If decoding or encoding fails
        """
        if fmt not in _ENCODERS:
            raise UnsupportedFormatError(f"Cannot encode {fmt.value}")
        if width <= 0:
            raise ValueError(f"width must be positive, got {width}")

        with open_image(data) as img:
            try:
                img.load()
                src_width, src_height = img.size
                height = max(1, round(src_height * width / src_width))
                source = img
                if img.mode == "P":
                    source = img.convert("RGBA")
                elif img.mode == "1":
                    source = img.convert("L")
                resized = source.resize((width, height), Image.Resampling.LANCZOS)
                encoded = self._encode(resized, fmt)
            except _DECODE_ERRORS as e:
                raise DecodeError(f"Failed to resample {fmt.value} image: {e}") from e

        logger.debug("Resampled %dx%d to %dx%d", src_width, src_height, width, height)
        return encoded, (width, height)

    def _encode(self, img: Image.Image, fmt: ImageFormat) -> bytes:
        buffer = io.BytesIO()
        if fmt is ImageFormat.PNG:
            if img.mode not in _PNG_MODES:
                img = img.convert("RGBA" if "A" in img.getbands() else "RGB")
            img.save(buffer, format=_ENCODERS[fmt], optimize=False)
        else:
            if img.mode not in ("L", "RGB", "CMYK"):
                img = _flatten_to_rgb(img)
            img.save(buffer, format=_ENCODERS[fmt], quality=self.jpeg_quality)
        return buffer.getvalue()


def _flatten_to_rgb(img: Image.Image) -> Image.Image:
    """Composite an image onto white and drop any alpha channel."""
    rgba = img.convert("RGBA")
    background = Image.new("RGB", rgba.size, (255, 255, 255))
    background.paste(rgba, mask=rgba.getchannel("A"))
    return background

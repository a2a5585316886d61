"""Collaborator interface definitions for the image-to-PDF pipeline.

This module defines Protocol interfaces for the two external collaborators:
- ImageCodec: format detection, dimension decoding and transcoding
- DocumentSerializer: page-by-page document assembly and serialization
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .image import ImageFormat


@runtime_checkable
class ImageCodec(Protocol):
    """Image codec interface.

    Implementations raise ``DecodeError`` when a buffer cannot be parsed
    and never trust anything but the buffer's own content.

    Attributes:
        name: Codec identifier (e.g., "pillow")

    Example:
        >>> codec = PillowCodec()
        >>> codec.detect_format(png_bytes)
        <ImageFormat.PNG: 'png'>
        >>> codec.decode_dimensions(png_bytes)
        (800, 600)
    """

    name: str

    def detect_format(self, data: bytes) -> ImageFormat:
        """Classify an encoded buffer.

        Args:
            data: Encoded image bytes

        Returns:
            Detected format, ``ImageFormat.UNSUPPORTED`` for anything else

        Raises:
            DecodeError: If the buffer is not recognizable as an image
        """
        ...

    def decode_dimensions(self, data: bytes) -> tuple[int, int]:
        """Return (width, height) in pixels.

        Raises:
            DecodeError: If the buffer cannot be decoded
        """
        ...

    def transcode(self, data: bytes, from_format: ImageFormat, to_format: ImageFormat) -> bytes:
        """Re-encode a buffer into another format.

        Raises:
            DecodeError: If decoding or encoding fails
        """
        ...

    def resample(self, data: bytes, fmt: ImageFormat, width: int) -> tuple[bytes, tuple[int, int]]:
        """Resize to ``width`` pixels keeping aspect ratio, re-encoded in ``fmt``.

        Returns:
            Tuple of (encoded bytes, (width, height))

        Raises:
            DecodeError: If decoding or encoding fails
        """
        ...


@runtime_checkable
class DocumentSerializer(Protocol):
    """Document assembly interface.

    Expected call order for one batch: ``new_document`` once, then per
    successful item one ``embed_image`` + one ``add_page`` + one
    ``draw_image``, then one ``serialize``. ``close`` releases the working
    document in every case.

    Attributes:
        name: Serializer identifier (e.g., "pymupdf")
    """

    name: str

    def new_document(self) -> Any:
        """Create an empty working document."""
        ...

    def add_page(self, document: Any, page_size: tuple[float, float]) -> Any:
        """Append a blank page and return its handle."""
        ...

    def embed_image(self, document: Any, data: bytes, fmt: ImageFormat) -> Any:
        """Register encoded image bytes with the document and return a handle."""
        ...

    def draw_image(self, page: Any, image: Any, x: float, y: float, width: float, height: float) -> None:
        """Draw an embedded image into the rectangle (x, y, width, height)."""
        ...

    def remove_page(self, document: Any, page: Any) -> None:
        """Remove a page added during a failed append."""
        ...

    def serialize(self, document: Any) -> bytes:
        """Serialize the working document to bytes.

        Raises:
            SerializationError: If the document cannot be written
        """
        ...

    def close(self, document: Any) -> None:
        """Release the working document."""
        ...

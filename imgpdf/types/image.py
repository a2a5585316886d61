"""Image dataclasses - raw input buffers and normalized embeddable images."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ImageFormat(str, Enum):
    """Closed set of encodings the classifier can report.

    Only JPEG and PNG are natively embeddable in the output document.
    WebP is accepted but always normalized to PNG first.
    """

    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"
    UNSUPPORTED = "unsupported"

    @property
    def is_native(self) -> bool:
        """Whether the document writer can embed this encoding directly."""
        return self in (ImageFormat.JPEG, ImageFormat.PNG)

    @property
    def mime_type(self) -> str | None:
        """MIME type for the encoding, None for unsupported."""
        if self is ImageFormat.UNSUPPORTED:
            return None
        return f"image/{self.value}"


@dataclass(frozen=True)
class RawImage:
    """One input image as delivered by the input collaborator.

    Attributes:
        data: Encoded image bytes, read-only once received
        content_type: Transport-supplied MIME hint; advisory only, never
            used for classification
        source: Optional label (usually a file name) for logs and reports
    """

    data: bytes = field(repr=False)
    content_type: str | None = None
    source: str | None = None

    @property
    def size(self) -> int:
        """Buffer length in bytes."""
        return len(self.data)

    @property
    def label(self) -> str:
        """Human-readable identifier used in log messages."""
        return self.source or f"<{self.size} bytes>"


@dataclass(frozen=True)
class NormalizedImage:
    """Image bytes guaranteed to be in a natively embeddable encoding.

    Attributes:
        data: Encoded bytes (JPEG or PNG)
        format: Encoding of ``data``
        width: Pixel width
        height: Pixel height
    """

    data: bytes = field(repr=False)
    format: ImageFormat
    width: int
    height: int

    def __post_init__(self) -> None:
        if not self.format.is_native:
            raise ValueError(f"NormalizedImage requires jpeg or png, got {self.format.value}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid image dimensions: {self.width}x{self.height}")

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) in pixels."""
        return (self.width, self.height)

    def to_dict(self) -> dict[str, Any]:
        """Convert metadata to a JSON-serializable dict (bytes omitted)."""
        return {
            "format": self.format.value,
            "width": self.width,
            "height": self.height,
            "bytes": len(self.data),
        }

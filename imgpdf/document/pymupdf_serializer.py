"""PyMuPDF-backed document serializer.

PyMuPDF uses a top-left origin, so page layouts are applied as-is:
a centered image occupies the same rectangle under either origin.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import fitz  # type: ignore[import-untyped]

from ..exceptions import DecodeError, SerializationError, UnsupportedFormatError
from ..types import ImageFormat

logger = logging.getLogger(__name__)

__all__ = ["EmbeddedImage", "PyMuPDFSerializer"]


@dataclass
class EmbeddedImage:
    """Image bytes accepted for drawing into a working document."""

    data: bytes = field(repr=False)
    format: ImageFormat


class PyMuPDFSerializer:
    """Assemble and serialize PDF documents with PyMuPDF.

    Attributes:
        name: Serializer identifier
        garbage: Garbage collection level passed to ``Document.tobytes``
        deflate: Compress uncompressed streams on save
        creator: Value written to the PDF ``creator`` metadata field

    Example:
        >>> serializer = PyMuPDFSerializer()
        >>> doc = serializer.new_document()
        >>> page = serializer.add_page(doc, (595, 842))
        >>> image = serializer.embed_image(doc, png_bytes, ImageFormat.PNG)
        >>> serializer.draw_image(page, image, 97.5, 271.0, 400, 300)
        >>> pdf_bytes = serializer.serialize(doc)
    """

    name = "pymupdf"

    def __init__(self, garbage: int = 3, deflate: bool = True, creator: str = "imgpdf"):
        self.garbage = garbage
        self.deflate = deflate
        self.creator = creator

    def new_document(self) -> fitz.Document:
        document = fitz.open()
        logger.debug("Created empty PDF document")
        return document

    def add_page(self, document: fitz.Document, page_size: tuple[float, float]) -> fitz.Page:
        width, height = page_size
        return document.new_page(width=width, height=height)

    def embed_image(self, document: fitz.Document, data: bytes, fmt: ImageFormat) -> EmbeddedImage:
        """Register image bytes for drawing.

        Raises:
            UnsupportedFormatError: If ``fmt`` is not natively embeddable
        """
        if not fmt.is_native:
            raise UnsupportedFormatError(f"{fmt.value} cannot be embedded directly")
        if not data:
            raise DecodeError("Empty image buffer")
        return EmbeddedImage(data=data, format=fmt)

    def draw_image(
        self,
        page: fitz.Page,
        image: EmbeddedImage,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        """Draw ``image`` into the rectangle starting at (x, y).

        Raises:
            DecodeError: If MuPDF rejects the image stream
        """
        rect = fitz.Rect(x, y, x + width, y + height)
        try:
            xref = page.insert_image(rect, stream=image.data, keep_proportion=False)
        except Exception as e:  # noqa: BLE001 - MuPDF raises several error types
            raise DecodeError(f"PDF writer rejected {image.format.value} image: {e}") from e

        logger.debug("Drew image xref=%d at %s on page %d", xref, rect, page.number)

    def remove_page(self, document: fitz.Document, page: fitz.Page) -> None:
        document.delete_page(page.number)

    def serialize(self, document: fitz.Document) -> bytes:
        """Write the document to PDF bytes.

        Raises:
            SerializationError: If the document is empty or cannot be written
        """
        if document.page_count == 0:
            raise SerializationError("Cannot serialize a document with zero pages")

        try:
            document.set_metadata({"creator": self.creator, "producer": f"PyMuPDF {fitz.VersionBind}"})
            pdf_bytes = document.tobytes(garbage=self.garbage, deflate=self.deflate)
        except Exception as e:  # noqa: BLE001 - any writer failure is fatal for the batch
            raise SerializationError(f"Failed to serialize PDF: {e}") from e

        logger.debug("Serialized %d pages into %d bytes", document.page_count, len(pdf_bytes))
        return pdf_bytes

    def close(self, document: Any) -> None:
        if document is not None and not document.is_closed:
            document.close()

"""Document serializer implementations."""

from __future__ import annotations

from .pymupdf_serializer import EmbeddedImage, PyMuPDFSerializer

__all__ = ["EmbeddedImage", "PyMuPDFSerializer"]

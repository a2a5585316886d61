"""Unified type definitions for the image-to-PDF pipeline.

This module provides:
- ImageFormat, RawImage, NormalizedImage: Image buffers and their encodings
- PageLayout, Page: Placement of an image on the page canvas
- OutputDocument: Working document accumulated for one batch
- PreparedItem, ItemFailure, ItemOutcome, BatchResult, ConversionResult: Result types
- ImageCodec, DocumentSerializer: Collaborator interfaces
"""

from .document import OutputDocument
from .image import ImageFormat, NormalizedImage, RawImage
from .interfaces import DocumentSerializer, ImageCodec
from .page import Page, PageLayout
from .result import BatchResult, ConversionResult, ItemFailure, ItemOutcome, PreparedItem

__all__ = [
    # Image types
    "ImageFormat",
    "RawImage",
    "NormalizedImage",
    # Page types
    "PageLayout",
    "Page",
    "OutputDocument",
    # Collaborator interfaces
    "ImageCodec",
    "DocumentSerializer",
    # Result types
    "PreparedItem",
    "ItemFailure",
    "ItemOutcome",
    "BatchResult",
    "ConversionResult",
]

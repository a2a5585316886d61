"""Convert batches of JPEG, PNG and WebP images into one multi-page PDF.

Each image becomes one A4 page (595x842 units), scaled to the page width
and centered. Images that cannot be processed are skipped and reported
without aborting the batch.

Example:
    >>> from imgpdf import Converter, RawImage
    >>>
    >>> converter = Converter()
    >>> result = converter.convert([RawImage(data) for data in buffers])
    >>> result.page_count, [f.index for f in result.failures]
    (2, [1])
"""

from __future__ import annotations

from .batch import BatchProgress, CancellationToken, PageAccumulator
from .config import ConverterConfig
from .converter import Converter
from .exceptions import (
    BatchCancelledError,
    BatchError,
    ConversionError,
    DecodeError,
    EmptyBatchError,
    ItemError,
    SerializationError,
    UnsupportedFormatError,
)
from .layout import compute_layout
from .types import (
    BatchResult,
    ConversionResult,
    ImageFormat,
    ItemFailure,
    NormalizedImage,
    OutputDocument,
    Page,
    PageLayout,
    RawImage,
)

__version__ = "0.1.0"

__all__ = [
    "Converter",
    "ConverterConfig",
    "PageAccumulator",
    "BatchProgress",
    "CancellationToken",
    "compute_layout",
    # Types
    "ImageFormat",
    "RawImage",
    "NormalizedImage",
    "PageLayout",
    "Page",
    "OutputDocument",
    "ItemFailure",
    "BatchResult",
    "ConversionResult",
    # Errors
    "ConversionError",
    "BatchError",
    "EmptyBatchError",
    "SerializationError",
    "BatchCancelledError",
    "ItemError",
    "DecodeError",
    "UnsupportedFormatError",
]

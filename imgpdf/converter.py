"""Converter facade: raw image buffers in, one finished PDF out."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from .batch import CancellationToken, PageAccumulator, ProgressCallback
from .config import ConverterConfig
from .exceptions import DecodeError, ItemError, UnsupportedFormatError
from .resources import ManagedResource
from .types import BatchResult, ConversionResult, DocumentSerializer, ImageCodec, OutputDocument, RawImage

logger = logging.getLogger(__name__)

_ITEM_ERRORS: dict[str, type[ItemError]] = {
    DecodeError.__name__: DecodeError,
    UnsupportedFormatError.__name__: UnsupportedFormatError,
}


class Converter:
    """Convert batches of JPEG/PNG/WebP images into multi-page PDFs.

    Each successfully processed image becomes one A4 page, scaled to the
    page width and centered. Images that cannot be processed are skipped
    and reported; they never abort the batch.

    Example:
        >>> from imgpdf import Converter, RawImage
        >>>
        >>> converter = Converter()
        >>> result = converter.convert([RawImage(jpg_bytes), RawImage(png_bytes)])
        >>> result.page_count
        2
        >>> Path("out.pdf").write_bytes(result.pdf_bytes)
    """

    def __init__(
        self,
        config: ConverterConfig | None = None,
        codec: ImageCodec | None = None,
        serializer: DocumentSerializer | None = None,
        progress_callback: ProgressCallback | None = None,
    ):
        """Initialize converter.

        Args:
            config: Converter configuration. If None, uses default configuration.
            codec: Image codec override (default: PillowCodec)
            serializer: Document writer override (default: PyMuPDFSerializer)
            progress_callback: Called after each image settles
        """
        self.config = config or ConverterConfig()
        self.config.validate()

        self.accumulator = PageAccumulator.from_config(
            self.config,
            codec=codec,
            serializer=serializer,
            progress_callback=progress_callback,
        )
        self.serializer = self.accumulator.serializer

    def build_document(
        self,
        raw_images: Sequence[RawImage],
        cancel_token: CancellationToken | None = None,
    ) -> BatchResult:
        """Accumulate a batch into a working document without serializing it.

        The caller owns the returned document and must pass it to either
        ``serialize`` or ``discard``.
        """
        return self.accumulator.build_document(raw_images, cancel_token=cancel_token)

    def serialize(self, document: OutputDocument) -> bytes:
        """Serialize a working document and release it.

        Raises:
            SerializationError: If the PDF cannot be written
        """
        with ManagedResource(document.release(), self.serializer.close, "working document") as handle:
            return self.serializer.serialize(handle)

    def discard(self, document: OutputDocument) -> None:
        """Release a working document without serializing it."""
        self.serializer.close(document.release())

    def convert(
        self,
        raw_images: Sequence[RawImage],
        cancel_token: CancellationToken | None = None,
    ) -> ConversionResult:
        """Convert a batch of images into one PDF.

        When every image fails, no PDF is produced (``pdf_bytes`` is None)
        and the full failure list is returned; that is not a batch error.

        Args:
            raw_images: Images in input order
            cancel_token: Optional cancellation token

        Returns:
            ConversionResult with PDF bytes, page layouts and skipped items

        Raises:
            EmptyBatchError: If ``raw_images`` is empty
            BatchCancelledError: If cancelled mid-flight
            SerializationError: If the finished document cannot be written
        """
        start_time = time.perf_counter()
        batch = self.build_document(raw_images, cancel_token=cancel_token)
        document = batch.document

        if document.is_empty:
            logger.warning("All %d images were skipped; no PDF produced", len(batch.failures))
            self.discard(document)
            pdf_bytes = None
        else:
            pdf_bytes = self.serialize(document)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "Converted %d/%d images in %.1fms",
            document.page_count,
            document.page_count + len(batch.failures),
            elapsed_ms,
        )

        return ConversionResult(
            pdf_bytes=pdf_bytes,
            layouts=document.layouts,
            source_indices=document.source_indices,
            failures=batch.failures,
            processing_time_ms=elapsed_ms,
        )

    def convert_one(self, raw_image: RawImage) -> bytes:
        """Convert a single image into a one-page PDF.

        Raises:
            DecodeError: If the image cannot be decoded
            UnsupportedFormatError: If the image format is not supported
            SerializationError: If the PDF cannot be written
        """
        result = self.convert([raw_image])
        if result.pdf_bytes is None:
            failure = result.failures[0]
            error_cls = _ITEM_ERRORS.get(failure.error_type, DecodeError)
            raise error_cls(failure.reason)
        return result.pdf_bytes

"""Custom exception classes for the image-to-PDF pipeline.

This module defines a hierarchy of custom exceptions that separates
batch-level failures (which abort a conversion) from per-item failures
(which are recorded and skipped).

Exception Hierarchy:
    ConversionError (base)
    ├── BatchError
    │   ├── EmptyBatchError
    │   ├── SerializationError
    │   └── BatchCancelledError
    ├── ItemError
    │   ├── DecodeError
    │   └── UnsupportedFormatError
    ├── ConfigurationError
    │   └── InvalidConfigError
    ├── InputError
    │   ├── InputLoadError
    │   └── TooManyItemsError
    └── OutputError
        └── OutputSaveError

Usage:
    try:
        result = converter.convert(images)
    except EmptyBatchError:
        logger.error("Nothing to convert")
    except BatchError as e:
        logger.error("Conversion aborted: %s", e)
"""

from __future__ import annotations


class ConversionError(Exception):
    """Base exception for all conversion errors.

    All custom exceptions in the package inherit from this class.
    This allows catching all package-specific errors with a single handler.
    """


# ============================================================================
# Batch Errors
# ============================================================================


class BatchError(ConversionError):
    """Base exception for batch-level errors.

    Batch-level errors propagate to the caller as the sole result.
    No partial document is returned alongside them.
    """


class EmptyBatchError(BatchError):
    """Raised when a batch contains zero input items.

    Raised before any processing starts.
    """


class SerializationError(BatchError):
    """Raised when the finished document cannot be serialized to bytes.

    Examples:
        - PDF writer failure
        - Document with zero pages handed to the writer
    """


class BatchCancelledError(BatchError):
    """Raised when the caller cancels a batch that is still in flight."""


# ============================================================================
# Per-Item Errors
# ============================================================================


class ItemError(ConversionError):
    """Base exception for errors scoped to a single input image.

    The accumulator recovers these locally and records them as
    skipped items. They never unwind the batch.
    """


class DecodeError(ItemError):
    """Raised when an image cannot be parsed, decoded or transcoded.

    Examples:
        - Buffer is not an image at all
        - Corrupt or truncated WebP payload
        - Decode did not finish within the item timeout
        - PDF writer refused to embed the image
    """


class UnsupportedFormatError(ItemError):
    """Raised when an image is parseable but not in the embeddable set.

    Examples:
        - GIF, TIFF or BMP input
        - Animated WebP or APNG
        - Image that fails integrity verification
    """


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(ConversionError):
    """Base exception for configuration-related errors."""


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid or malformed.

    Examples:
        - Non-positive page size
        - Worker count below 1
        - Malformed YAML
    """


# ============================================================================
# Input / Output Errors
# ============================================================================


class InputError(ConversionError):
    """Base exception for errors raised while collecting input images."""


class InputLoadError(InputError):
    """Raised when an input file cannot be found or read."""


class TooManyItemsError(InputError):
    """Raised when more images are supplied than the configured maximum."""


class OutputError(ConversionError):
    """Base exception for errors raised while writing results."""


class OutputSaveError(OutputError):
    """Raised when the PDF or the report cannot be written.

    Examples:
        - Permission denied
        - Disk full
        - Invalid path
    """

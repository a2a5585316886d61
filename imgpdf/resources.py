"""Resource management utilities with context managers.

This module provides context managers for automatic resource cleanup
so that decoded images and working documents are released promptly,
even when a batch item fails or a batch is cancelled.
"""

from __future__ import annotations

import io
import logging
import warnings
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from PIL import Image, UnidentifiedImageError

from .exceptions import DecodeError

logger = logging.getLogger(__name__)


# ==================== Pillow Image Context Manager ====================


@contextmanager
def open_image(data: bytes) -> Iterator[Image.Image]:
    """Context manager for a Pillow image opened from an in-memory buffer.

    Pillow opens images lazily and keeps the underlying buffer referenced
    until the image is closed. Closing as soon as the caller is done keeps
    peak memory low when many large images are in flight.

    Args:
        data: Encoded image bytes

    Yields:
        Lazily opened PIL image

    Raises:
        DecodeError: If Pillow cannot identify the buffer as an image

    Example:
        >>> with open_image(png_bytes) as img:
        ...     print(img.format, img.size)
        PNG (800, 600)
    """
    if not data:
        raise DecodeError("Empty image buffer")

    try:
        with warnings.catch_warnings():
            # Only the hard limit (DecompressionBombError) rejects an image
            warnings.simplefilter("ignore", Image.DecompressionBombWarning)
            img = Image.open(io.BytesIO(data))
    except UnidentifiedImageError as e:
        raise DecodeError(f"Cannot identify image data: {e}") from e
    except Image.DecompressionBombError as e:
        raise DecodeError(f"Image exceeds the decompression limit: {e}") from e
    except (OSError, ValueError, SyntaxError) as e:
        raise DecodeError(f"Cannot parse image data: {e}") from e

    try:
        yield img
    finally:
        img.close()


# ==================== Generic Resource Manager ====================


class ManagedResource:
    """Context manager for any resource with cleanup function.

    This is a generic wrapper that can manage any resource that needs cleanup.

    Args:
        resource: The resource object to manage
        cleanup_fn: Function to call for cleanup (receives resource as argument)
        name: Optional name for logging

    Example:
        >>> with ManagedResource(doc, serializer.close, "working document") as doc:
        ...     serializer.add_page(doc, (595, 842))
        ... # Document automatically closed
    """

    def __init__(
        self,
        resource: Any,
        cleanup_fn: Callable[[Any], None],
        name: str | None = None,
    ):
        """Initialize managed resource.

        Args:
            resource: Resource to manage
            cleanup_fn: Cleanup function
            name: Optional name for logging
        """
        self.resource = resource
        self.cleanup_fn = cleanup_fn
        self.name = name or "resource"

    def __enter__(self) -> Any:
        """Enter context."""
        logger.debug("Acquired resource: %s", self.name)
        return self.resource

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit context and cleanup."""
        try:
            self.cleanup_fn(self.resource)
            logger.debug("Cleaned up resource: %s", self.name)
        except Exception as e:  # noqa: BLE001 - catch all for cleanup
            logger.warning("Error cleaning up resource %s: %s", self.name, e)

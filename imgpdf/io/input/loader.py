"""Input loading: collect image files from disk as raw buffers."""

from __future__ import annotations

import logging
import mimetypes
from collections.abc import Iterable
from pathlib import Path

from ...constants import DEFAULT_MAX_ITEMS, SUPPORTED_EXTENSIONS
from ...exceptions import InputLoadError, TooManyItemsError
from ...types import RawImage

logger = logging.getLogger(__name__)


class InputLoader:
    """Collect input images in the order the user gave them.

    Explicit files are kept in argument order (any extension, the
    classifier decides what is an image). Directories are expanded to
    their supported image files, sorted by name.

    Attributes:
        max_items: Maximum number of images per batch (None for no limit)

    Example:
        >>> loader = InputLoader(max_items=10)
        >>> images = loader.load([Path("scans/"), Path("cover.png")])
        >>> images[0].source
        'scans/page1.jpg'
    """

    def __init__(self, max_items: int | None = DEFAULT_MAX_ITEMS):
        self.max_items = max_items

    def collect_paths(self, inputs: Iterable[Path | str]) -> list[Path]:
        """Expand ``inputs`` into the ordered list of files to read.

        Raises:
            InputLoadError: If an input path does not exist
            TooManyItemsError: If more than ``max_items`` files are collected
        """
        paths: list[Path] = []
        for item in inputs:
            path = Path(item)
            if path.is_dir():
                found = sorted(
                    p for p in path.iterdir() if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS
                )
                if not found:
                    logger.warning("No image files found in directory: %s", path)
                paths.extend(found)
            elif path.is_file():
                paths.append(path)
            else:
                raise InputLoadError(f"Input not found: {path}")

        if self.max_items is not None and len(paths) > self.max_items:
            raise TooManyItemsError(f"{len(paths)} images given, at most {self.max_items} allowed per batch")

        return paths

    def load(self, inputs: Iterable[Path | str]) -> list[RawImage]:
        """Read every collected file into a RawImage.

        Returns:
            RawImages in input order, with a content-type hint guessed
            from the file extension

        Raises:
            InputLoadError: If a file cannot be read
            TooManyItemsError: If more than ``max_items`` files are collected
        """
        images: list[RawImage] = []
        for path in self.collect_paths(inputs):
            try:
                data = path.read_bytes()
            except OSError as e:
                raise InputLoadError(f"Failed to read {path}: {e}") from e

            content_type, _ = mimetypes.guess_type(path.name)
            images.append(RawImage(data=data, content_type=content_type, source=str(path)))
            logger.debug("Loaded %s (%d bytes, hint=%s)", path, len(data), content_type)

        logger.info("Loaded %d input images", len(images))
        return images

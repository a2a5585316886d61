"""Pytest configuration and shared fixtures for imgpdf tests.

This module provides:
- Image buffer factories (JPEG, PNG, WebP, GIF) generated with Pillow
- Corrupt and truncated buffers for failure-path tests
- Helpers for inspecting generated PDFs with PyMuPDF
- Test configuration and path setup
"""

from __future__ import annotations

import io
import random
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import fitz  # type: ignore[import-untyped]
import pytest
from PIL import Image

# Ensure project root is importable when running tests via python -m pytest
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from imgpdf.types import RawImage  # noqa: E402

ImageFactory = Callable[..., bytes]


def encode_image(
    fmt: str = "PNG",
    size: tuple[int, int] = (64, 48),
    mode: str = "RGB",
    color: Any = (200, 30, 30),
    noise: bool = False,
    **save_kwargs: Any,
) -> bytes:
    """Encode a generated image with Pillow.

    Args:
        fmt: Pillow format name (PNG, JPEG, WEBP, GIF, ...)
        size: (width, height) in pixels
        mode: Pillow image mode
        color: Fill color for solid images
        noise: Fill with seeded random pixels instead (RGB only)
        **save_kwargs: Extra arguments for ``Image.save``
    """
    if noise:
        rng = random.Random(size[0] * 10_000 + size[1])
        img = Image.frombytes("RGB", size, rng.randbytes(size[0] * size[1] * 3))
    else:
        img = Image.new(mode, size, color)

    buffer = io.BytesIO()
    img.save(buffer, format=fmt, **save_kwargs)
    return buffer.getvalue()


# ==================== Image Buffer Fixtures ====================


@pytest.fixture
def make_image() -> ImageFactory:
    """Factory fixture producing encoded image bytes (see ``encode_image``)."""
    return encode_image


@pytest.fixture
def jpeg_bytes() -> bytes:
    """800x600 JPEG."""
    return encode_image("JPEG", size=(800, 600))


@pytest.fixture
def png_bytes() -> bytes:
    """400x300 PNG."""
    return encode_image("PNG", size=(400, 300))


@pytest.fixture
def rgba_png_bytes() -> bytes:
    """120x80 PNG with a semi-transparent alpha channel."""
    return encode_image("PNG", size=(120, 80), mode="RGBA", color=(0, 128, 255, 128))


@pytest.fixture
def webp_bytes() -> bytes:
    """300x200 lossless WebP with alpha."""
    return encode_image("WEBP", size=(300, 200), mode="RGBA", color=(10, 200, 10, 200), lossless=True)


@pytest.fixture
def gif_bytes() -> bytes:
    """50x50 single-frame GIF (parseable but unsupported)."""
    return encode_image("GIF", size=(50, 50), mode="P", color=1)


@pytest.fixture
def animated_webp_bytes() -> bytes:
    """Three-frame animated WebP."""
    frames = [Image.new("RGB", (40, 40), (i * 80, 0, 0)) for i in range(3)]
    buffer = io.BytesIO()
    frames[0].save(buffer, format="WEBP", save_all=True, append_images=frames[1:], duration=100, loop=0)
    return buffer.getvalue()


@pytest.fixture
def corrupt_bytes() -> bytes:
    """Bytes that are not an image at all."""
    return b"this is definitely not an image" * 4


@pytest.fixture
def truncated_png_bytes() -> bytes:
    """PNG whose IDAT and IEND chunks are cut off."""
    data = encode_image("PNG", size=(200, 200), noise=True)
    return data[: len(data) // 2]


@pytest.fixture
def truncated_jpeg_bytes() -> bytes:
    """JPEG whose scan data is cut in half."""
    data = encode_image("JPEG", size=(400, 400), noise=True, quality=95)
    return data[: len(data) // 2]


@pytest.fixture
def raw() -> Callable[..., RawImage]:
    """Wrap bytes into a RawImage."""

    def _raw(data: bytes, content_type: str | None = None, source: str | None = None) -> RawImage:
        return RawImage(data=data, content_type=content_type, source=source)

    return _raw


# ==================== PDF Inspection Helpers ====================


def open_pdf(pdf_bytes: bytes) -> fitz.Document:
    """Open PDF bytes with PyMuPDF (caller closes)."""
    return fitz.open(stream=pdf_bytes, filetype="pdf")


@pytest.fixture
def pdf_page_sizes() -> Callable[[bytes], list[tuple[float, float]]]:
    """Return (width, height) of every page of a PDF."""

    def _sizes(pdf_bytes: bytes) -> list[tuple[float, float]]:
        with open_pdf(pdf_bytes) as doc:
            return [(page.rect.width, page.rect.height) for page in doc]

    return _sizes


@pytest.fixture
def pdf_image_boxes() -> Callable[[bytes], list[list[tuple[float, float, float, float]]]]:
    """Return the placement rectangles of the images on every page of a PDF."""

    def _boxes(pdf_bytes: bytes) -> list[list[tuple[float, float, float, float]]]:
        with open_pdf(pdf_bytes) as doc:
            return [[tuple(info["bbox"]) for info in page.get_image_info()] for page in doc]

    return _boxes

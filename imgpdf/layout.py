"""Contain-to-width layout of an image on the fixed page canvas."""

from __future__ import annotations

import logging
import math

from .constants import PAGE_HEIGHT, PAGE_WIDTH
from .types import PageLayout

logger = logging.getLogger(__name__)

__all__ = ["compute_layout"]


def compute_layout(
    native_width: float,
    native_height: float,
    page_width: float = PAGE_WIDTH,
    page_height: float = PAGE_HEIGHT,
) -> PageLayout:
    """Scale an image to the page width and center it.

    Images wider than the page are shrunk to the page width; narrower
    images keep their natural size (never upscaled). Height follows the
    same scale factor, regardless of whether it then exceeds the page
    height. In that case ``offset_y`` is negative and the image overflows
    the page symmetrically at top and bottom.

    Args:
        native_width: Natural image width in pixels
        native_height: Natural image height in pixels
        page_width: Page width in page units (default: A4 width)
        page_height: Page height in page units (default: A4 height)

    Returns:
        PageLayout with render size and centering offsets

    Raises:
        ValueError: If any dimension is not a positive finite number

    Example:
        >>> compute_layout(1000, 2000)
        PageLayout(render_width=595, render_height=1190.0, offset_x=0.0, offset_y=-174.0)
        >>> compute_layout(200, 100)
        PageLayout(render_width=200, render_height=100.0, offset_x=197.5, offset_y=371.0)
    """
    for name, value in (
        ("native_width", native_width),
        ("native_height", native_height),
        ("page_width", page_width),
        ("page_height", page_height),
    ):
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"{name} must be a positive finite number, got {value!r}")

    render_width = min(page_width, native_width)
    render_height = native_height * (render_width / native_width)

    layout = PageLayout(
        render_width=render_width,
        render_height=render_height,
        offset_x=(page_width - render_width) / 2,
        offset_y=(page_height - render_height) / 2,
    )

    if render_height > page_height:
        logger.debug(
            "Image %sx%s overflows page height: render height %.2f > %s",
            native_width,
            native_height,
            render_height,
            page_height,
        )

    return layout

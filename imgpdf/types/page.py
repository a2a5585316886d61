"""Page dataclasses - layout of one image on the fixed page canvas."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .image import NormalizedImage


@dataclass(frozen=True)
class PageLayout:
    """Placement of an image on the page, in page-coordinate units.

    Offsets are measured from the top-left page corner. Because the
    image is centered, the same numbers hold for a bottom-left origin.
    ``offset_y`` is negative when a scaled image is taller than the page.
    """

    render_width: float
    render_height: float
    offset_x: float
    offset_y: float

    @property
    def rect(self) -> tuple[float, float, float, float]:
        """(x0, y0, x1, y1) rectangle the image is drawn into."""
        return (
            self.offset_x,
            self.offset_y,
            self.offset_x + self.render_width,
            self.offset_y + self.render_height,
        )

    @property
    def aspect_ratio(self) -> float:
        """Ratio of rendered height to rendered width."""
        return self.render_height / self.render_width

    def to_dict(self) -> dict[str, float]:
        """Convert to JSON-serializable dict."""
        return {
            "render_width": self.render_width,
            "render_height": self.render_height,
            "offset_x": self.offset_x,
            "offset_y": self.offset_y,
        }


@dataclass
class Page:
    """One output page: a normalized image and where it is drawn.

    Attributes:
        index: Position of the source image in the input batch (0-indexed)
        image: Embeddable image
        layout: Placement on the page canvas
        source: Optional label of the source image
    """

    index: int
    image: NormalizedImage
    layout: PageLayout
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict.

        Example:
            >>> page.to_dict()
            {'index': 0, 'image': {...}, 'layout': {...}}
        """
        result: dict[str, Any] = {
            "index": self.index,
            "image": self.image.to_dict(),
            "layout": self.layout.to_dict(),
        }
        if self.source is not None:
            result["source"] = self.source
        return result

"""Per-item and per-batch result types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from .document import OutputDocument
    from .image import NormalizedImage
    from .page import PageLayout


@dataclass(frozen=True)
class PreparedItem:
    """Successful outcome of classifying and normalizing one input image."""

    index: int
    image: NormalizedImage
    source: str | None = None


@dataclass(frozen=True)
class ItemFailure:
    """Descriptor of a skipped input image.

    Attributes:
        index: Position of the image in the input batch (0-indexed)
        reason: Human-readable failure reason
        error_type: Name of the per-item exception class
        source: Optional label of the source image
    """

    index: int
    reason: str
    error_type: str = "DecodeError"
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        result: dict[str, Any] = {
            "index": self.index,
            "reason": self.reason,
            "error_type": self.error_type,
        }
        if self.source is not None:
            result["source"] = self.source
        return result


ItemOutcome = Union[PreparedItem, ItemFailure]
"""Result of the per-item pipeline: success with an image, or failure with a reason."""


@dataclass
class BatchResult:
    """Result of accumulating one batch into a working document.

    Attributes:
        document: Accumulated document (may contain zero pages)
        failures: Skipped items in ascending index order
    """

    document: OutputDocument
    failures: list[ItemFailure] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return self.document.page_count

    @property
    def failed_indices(self) -> list[int]:
        return [f.index for f in self.failures]


@dataclass
class ConversionResult:
    """Final result handed back to the caller of the converter.

    Attributes:
        pdf_bytes: Finished PDF, or None when no page survived
        layouts: Layout of every page, in page order
        source_indices: Input index of every page, in page order
        failures: Skipped items in ascending index order
        processing_time_ms: Wall time of the conversion
    """

    pdf_bytes: bytes | None
    layouts: list[PageLayout] = field(default_factory=list)
    source_indices: list[int] = field(default_factory=list)
    failures: list[ItemFailure] = field(default_factory=list)
    processing_time_ms: float = 0.0

    @property
    def page_count(self) -> int:
        return len(self.layouts)

    @property
    def success(self) -> bool:
        """True when a PDF was produced."""
        return self.pdf_bytes is not None

    @property
    def total_items(self) -> int:
        return self.page_count + len(self.failures)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict (PDF bytes omitted)."""
        return {
            "success": self.success,
            "total_items": self.total_items,
            "page_count": self.page_count,
            "pages": [
                {"index": index, "layout": layout.to_dict()}
                for index, layout in zip(self.source_indices, self.layouts, strict=True)
            ],
            "failures": [f.to_dict() for f in self.failures],
            "pdf_bytes": len(self.pdf_bytes) if self.pdf_bytes is not None else 0,
            "processing_time_ms": round(self.processing_time_ms, 2),
        }

"""OutputDocument dataclass - the working document accumulated for one batch."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .page import Page, PageLayout


@dataclass
class OutputDocument:
    """Ordered pages of one batch plus the writer's working document.

    Pages are the surviving subsequence of the input order. The document
    is consumed exactly once: either serialized or discarded. After that,
    ``handle`` is released and the object only keeps page metadata.

    Attributes:
        handle: Writer-specific working document (None once consumed)
        pages: Pages in output order
    """

    handle: Any = field(repr=False)
    pages: list[Page] = field(default_factory=list)
    consumed: bool = False

    @property
    def page_count(self) -> int:
        """Number of pages accumulated so far."""
        return len(self.pages)

    @property
    def is_empty(self) -> bool:
        """True when every item of the batch failed."""
        return not self.pages

    @property
    def layouts(self) -> list[PageLayout]:
        """Layouts in page order."""
        return [page.layout for page in self.pages]

    @property
    def source_indices(self) -> list[int]:
        """Input indices of the pages, in page order."""
        return [page.index for page in self.pages]

    def release(self) -> Any:
        """Hand out the working document exactly once.

        Raises:
            RuntimeError: If the document was already serialized or discarded
        """
        if self.consumed:
            raise RuntimeError("OutputDocument has already been consumed")
        handle = self.handle
        self.handle = None
        self.consumed = True
        return handle

    def to_dict(self) -> dict[str, Any]:
        """Convert page metadata to JSON-serializable dict."""
        return {
            "page_count": self.page_count,
            "pages": [p.to_dict() for p in self.pages],
        }

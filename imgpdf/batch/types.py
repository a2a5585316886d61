"""Data types for batch accumulation."""

from __future__ import annotations

import threading
from dataclasses import dataclass


@dataclass
class BatchProgress:
    """Progress tracking for one batch.

    Attributes:
        total_items: Number of input images in the batch
        completed_items: Images that became pages
        failed_items: Images that were skipped
    """

    total_items: int
    completed_items: int = 0
    failed_items: int = 0

    @property
    def settled_items(self) -> int:
        """Images that are either completed or failed."""
        return self.completed_items + self.failed_items

    @property
    def progress_pct(self) -> float:
        """Progress percentage (0-100)."""
        if self.total_items == 0:
            return 0.0
        return (self.settled_items / self.total_items) * 100

    @property
    def is_complete(self) -> bool:
        """Check if all items are settled."""
        return self.settled_items == self.total_items

    def record_success(self) -> None:
        self.completed_items += 1

    def record_failure(self) -> None:
        self.failed_items += 1


class CancellationToken:
    """Cooperative cancellation flag shared between a caller and a batch.

    The caller (e.g. a request handler noticing a client disconnect)
    calls ``cancel()``; the accumulator checks ``is_cancelled`` before
    issuing new work and between pages.

    Example:
        >>> token = CancellationToken()
        >>> threading.Timer(5.0, token.cancel).start()
        >>> accumulator.build_document(images, cancel_token=token)
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancelled})"

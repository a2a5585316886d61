"""Batch accumulation of images into one document.

Architecture:
    Input batch ──▶ [classify → normalize] (bounded worker pool, any order)
                ──▶ [layout → append page] (calling thread, input order)
                ──▶ OutputDocument + skipped items

Usage:
    from imgpdf.batch import PageAccumulator

    accumulator = PageAccumulator(max_workers=4, item_timeout=30)
    batch = accumulator.build_document(raw_images)
"""

from __future__ import annotations

from .accumulator import PageAccumulator, ProgressCallback
from .types import BatchProgress, CancellationToken

__all__ = [
    "PageAccumulator",
    "ProgressCallback",
    "BatchProgress",
    "CancellationToken",
]

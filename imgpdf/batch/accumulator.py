"""Page accumulator: turns a batch of raw images into one working document."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..codec import PillowCodec
from ..constants import DEFAULT_ITEM_TIMEOUT, DEFAULT_MAX_WORKERS, PAGE_SIZE
from ..document import PyMuPDFSerializer
from ..exceptions import BatchCancelledError, DecodeError, EmptyBatchError, ItemError, UnsupportedFormatError
from ..layout import compute_layout
from ..stages import ClassificationStage, NormalizationStage, StageError
from ..types import (
    BatchResult,
    DocumentSerializer,
    ImageCodec,
    ImageFormat,
    ItemFailure,
    ItemOutcome,
    OutputDocument,
    Page,
    PreparedItem,
    RawImage,
)
from .types import BatchProgress, CancellationToken

if TYPE_CHECKING:
    from ..config import ConverterConfig

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[BatchProgress], None]

# Upper bound on how long a wait blocks before re-checking cancellation
_POLL_INTERVAL = 0.1


@dataclass
class _InFlight:
    """Future of one submitted item and the time a worker started it."""

    future: Future[ItemOutcome] = field(init=False)
    started_at: float | None = None


class PageAccumulator:
    """Build one multi-page document from an ordered batch of images.

    Architecture:
        Workers (bounded pool): classify -> normalize, one image per task
        Calling thread: layout -> embed + add page + draw, in input order

    Per-item failures never abort the batch: the image is skipped and
    recorded as an ``ItemFailure``. Pages keep the input order of the
    images that survived, regardless of which worker finished first.
    The document writer is only touched from the calling thread.

    Example:
        >>> accumulator = PageAccumulator()
        >>> batch = accumulator.build_document([RawImage(png), RawImage(b"junk"), RawImage(jpg)])
        >>> batch.document.source_indices
        [0, 2]
        >>> batch.failed_indices
        [1]
    """

    def __init__(
        self,
        codec: ImageCodec | None = None,
        serializer: DocumentSerializer | None = None,
        *,
        page_size: tuple[float, float] = PAGE_SIZE,
        max_workers: int = DEFAULT_MAX_WORKERS,
        item_timeout: float | None = DEFAULT_ITEM_TIMEOUT,
        downsample: bool = False,
        progress_callback: ProgressCallback | None = None,
    ):
        """Initialize the accumulator.

        Args:
            codec: Image codec (default: PillowCodec)
            serializer: Document writer (default: PyMuPDFSerializer)
            page_size: (width, height) of every page in page units
            max_workers: Maximum number of images decoded concurrently
            item_timeout: Seconds allowed per image, None for no limit
            downsample: Resample images wider than the page to the page width
            progress_callback: Called with the current progress after each image settles
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")

        self.codec = codec or PillowCodec()
        self.serializer = serializer or PyMuPDFSerializer()
        self.page_size = page_size
        self.max_workers = max_workers
        self.item_timeout = item_timeout
        self.progress_callback = progress_callback

        self.classification_stage = ClassificationStage(self.codec)
        self.normalization_stage = NormalizationStage(self.codec, downsample=downsample, page_width=page_size[0])

    @classmethod
    def from_config(
        cls,
        config: ConverterConfig,
        codec: ImageCodec | None = None,
        serializer: DocumentSerializer | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> PageAccumulator:
        """Create an accumulator from a converter configuration."""
        return cls(
            codec=codec or PillowCodec(jpeg_quality=config.jpeg_quality),
            serializer=serializer,
            page_size=(config.page_width, config.page_height),
            max_workers=config.max_workers,
            item_timeout=config.item_timeout,
            downsample=config.downsample,
            progress_callback=progress_callback,
        )

    # ==================== Batch ====================

    def build_document(
        self,
        raw_images: Sequence[RawImage],
        *,
        cancel_token: CancellationToken | None = None,
    ) -> BatchResult:
        """Accumulate every processable image of the batch into one document.

        Args:
            raw_images: Images in input order
            cancel_token: Optional token the caller may use to abandon the batch

        Returns:
            BatchResult with the working document (possibly zero pages) and
            the skipped items in ascending index order

        Raises:
            EmptyBatchError: If ``raw_images`` is empty
            BatchCancelledError: If ``cancel_token`` is cancelled mid-flight
        """
        images = list(raw_images)
        if not images:
            raise EmptyBatchError("No images provided")

        token = cancel_token or CancellationToken()
        progress = BatchProgress(total_items=len(images))
        logger.info("Building document from %d images (workers=%d)", len(images), self.max_workers)

        document = OutputDocument(handle=self.serializer.new_document())
        failures: list[ItemFailure] = []
        outcomes = self._iter_outcomes(images, token)

        try:
            for outcome in outcomes:
                if isinstance(outcome, PreparedItem):
                    failure = self._append_page(document, outcome)
                else:
                    failure = outcome

                if failure is None:
                    progress.record_success()
                else:
                    logger.warning(
                        "Skipping image %d (%s): %s",
                        failure.index,
                        failure.source or "unnamed",
                        failure.reason,
                    )
                    failures.append(failure)
                    progress.record_failure()

                if self.progress_callback is not None:
                    self.progress_callback(progress)
        except BaseException:
            self.serializer.close(document.release())
            raise
        finally:
            outcomes.close()

        logger.info(
            "Document built: %d pages, %d skipped of %d images",
            document.page_count,
            len(failures),
            len(images),
        )
        return BatchResult(document=document, failures=failures)

    def _iter_outcomes(self, images: list[RawImage], token: CancellationToken) -> Iterator[ItemOutcome]:
        """Yield per-item outcomes in strictly ascending index order.

        At most ``max_workers`` items are submitted ahead of the item
        currently awaited. No new item is submitted once cancelled. When an
        item times out, its worker is abandoned: items that have not started
        yet move to a fresh pool, so a hung decode never starves the rest.
        """
        executor = self._new_executor()
        pending: dict[int, _InFlight] = {}
        next_index = 0

        try:
            for index, raw in enumerate(images):
                while next_index < len(images) and next_index < index + self.max_workers:
                    self._check_cancelled(token)
                    pending[next_index] = self._submit(executor, next_index, images[next_index])
                    next_index += 1

                slot = pending.pop(index)
                outcome = self._await_outcome(slot, token)
                if outcome is None:
                    outcome = ItemFailure(
                        index=index,
                        reason=f"Decoding timed out after {self.item_timeout:g}s",
                        error_type=DecodeError.__name__,
                        source=raw.source,
                    )
                    executor = self._replace_executor(executor, pending, images)
                yield outcome
        finally:
            for slot in pending.values():
                slot.future.cancel()
            pending.clear()
            # Do not block on a decode that overran its timeout
            executor.shutdown(wait=False, cancel_futures=True)

    def _new_executor(self) -> ThreadPoolExecutor:
        return ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="imgpdf-decode")

    def _submit(self, executor: ThreadPoolExecutor, index: int, raw: RawImage) -> _InFlight:
        slot = _InFlight()
        slot.future = executor.submit(self._run_item, slot, index, raw)
        return slot

    def _run_item(self, slot: _InFlight, index: int, raw: RawImage) -> ItemOutcome:
        slot.started_at = time.monotonic()
        return self.prepare_item(index, raw)

    def _replace_executor(
        self,
        executor: ThreadPoolExecutor,
        pending: dict[int, _InFlight],
        images: list[RawImage],
    ) -> ThreadPoolExecutor:
        """Move not-yet-started items from ``executor`` onto a fresh pool.

        Items already running stay on the old pool and are awaited as usual.
        """
        fresh = self._new_executor()
        moved = 0
        for index, slot in list(pending.items()):
            if slot.future.cancel():
                pending[index] = self._submit(fresh, index, images[index])
                moved += 1
        executor.shutdown(wait=False)
        logger.debug("Replaced decode pool after timeout (%d queued items moved)", moved)
        return fresh

    def _await_outcome(self, slot: _InFlight, token: CancellationToken) -> ItemOutcome | None:
        """Wait for one item, returning None if it ran longer than ``item_timeout``.

        The deadline starts when a worker picks the item up; time spent
        queued behind other items does not count.
        """
        while True:
            self._check_cancelled(token)

            wait = _POLL_INTERVAL
            started_at = slot.started_at
            if self.item_timeout is not None and started_at is not None:
                remaining = started_at + self.item_timeout - time.monotonic()
                if remaining <= 0 and not slot.future.done():
                    return None
                wait = min(wait, max(remaining, 0))

            try:
                return slot.future.result(timeout=wait)
            except FutureTimeoutError:
                continue

    @staticmethod
    def _check_cancelled(token: CancellationToken) -> None:
        if token.is_cancelled:
            raise BatchCancelledError("Batch cancelled by caller")

    # ==================== Per Item ====================

    def prepare_item(self, index: int, raw: RawImage) -> ItemOutcome:
        """Classify and normalize one image.

        Runs on a worker thread. Never raises for per-item problems: they
        are returned as ``ItemFailure``.

        Args:
            index: Position of the image in the batch
            raw: Image to prepare

        Returns:
            PreparedItem on success, ItemFailure otherwise
        """
        try:
            fmt = self.classification_stage.process(raw)
        except StageError as e:
            return _failure_from_stage_error(index, raw, e)

        if fmt is ImageFormat.UNSUPPORTED:
            return ItemFailure(
                index=index,
                reason="Unsupported or invalid image format",
                error_type=UnsupportedFormatError.__name__,
                source=raw.source,
            )

        try:
            image = self.normalization_stage.process(raw, fmt=fmt)
        except StageError as e:
            return _failure_from_stage_error(index, raw, e)

        logger.debug("Prepared image %d (%s): %s %dx%d", index, raw.label, fmt.value, image.width, image.height)
        return PreparedItem(index=index, image=image, source=raw.source)

    def _append_page(self, document: OutputDocument, item: PreparedItem) -> ItemFailure | None:
        """Lay out ``item`` and draw it on a new page of ``document``.

        A page added for an image the writer then rejects is removed again,
        so failed items never leave blank pages behind.
        """
        layout = compute_layout(item.image.width, item.image.height, *self.page_size)
        handle = document.handle

        try:
            embedded = self.serializer.embed_image(handle, item.image.data, item.image.format)
        except ItemError as e:
            return ItemFailure(index=item.index, reason=str(e), error_type=type(e).__name__, source=item.source)

        page_handle = self.serializer.add_page(handle, self.page_size)
        try:
            self.serializer.draw_image(
                page_handle,
                embedded,
                layout.offset_x,
                layout.offset_y,
                layout.render_width,
                layout.render_height,
            )
        except ItemError as e:
            self.serializer.remove_page(handle, page_handle)
            return ItemFailure(index=item.index, reason=str(e), error_type=type(e).__name__, source=item.source)

        document.pages.append(Page(index=item.index, image=item.image, layout=layout, source=item.source))
        return None


def _failure_from_stage_error(index: int, raw: RawImage, error: StageError) -> ItemFailure:
    # Anything that is not a typed per-item error is reported as a decode failure
    error_type = error.error_type if isinstance(error.cause, ItemError) else DecodeError.__name__
    return ItemFailure(index=index, reason=error.reason, error_type=error_type, source=raw.source)

"""Base stage class for pipeline stages.

This module defines the abstract base class for the per-item stages,
providing a consistent interface and common functionality.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

__all__ = ["BaseStage", "StageError"]

# Type variables for generic stage input/output
InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class StageError(Exception):
    """Exception raised when stage processing fails.

    Attributes:
        stage_name: Name of the failing stage
        cause: Original exception, if any
    """

    def __init__(self, stage_name: str, message: str, cause: Exception | None = None):
        self.stage_name = stage_name
        self.cause = cause
        super().__init__(f"[{stage_name}] {message}")

    @property
    def error_type(self) -> str:
        """Class name of the underlying cause (or of this error)."""
        return type(self.cause).__name__ if self.cause is not None else type(self).__name__

    @property
    def reason(self) -> str:
        """Message of the underlying cause without the stage prefix."""
        return str(self.cause) if self.cause is not None else str(self)


class BaseStage(ABC, Generic[InputT, OutputT]):
    """Abstract base class for all pipeline stages.

    All stage implementations should inherit from this class and implement
    the `_process_impl` method. This base class provides:

    - Consistent interface (process)
    - Timing and logging
    - Error handling with stage context

    Attributes:
        name: Stage name for logging and identification

    Example:
        >>> class MyStage(BaseStage[RawImage, ImageFormat]):
        ...     name = "my-stage"
        ...
        ...     def _process_impl(self, input_data, **context):
        ...         return ImageFormat.PNG
    """

    # Subclasses should override this
    name: str = "base-stage"

    @abstractmethod
    def _process_impl(self, input_data: InputT, **context: Any) -> OutputT:
        """Internal processing implementation.

        Args:
            input_data: Input from previous stage
            **context: Additional context (detected format, item index, etc.)

        Returns:
            Processed output for next stage
        """

    def process(self, input_data: InputT, **context: Any) -> OutputT:
        """Process input and produce output.

        This method wraps _process_impl with timing, logging, and error handling.

        Args:
            input_data: Input from previous stage
            **context: Additional context

        Returns:
            Processed output for next stage

        Raises:
            StageError: If processing fails
        """
        start_time = time.perf_counter()

        try:
            result = self._process_impl(input_data, **context)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.debug("%s failed after %.2fms: %s", self.name, elapsed_ms, e)
            raise StageError(self.name, str(e), cause=e) from e

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.debug("%s completed in %.2fms", self.name, elapsed_ms)
        return result

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.__class__.__name__}(name={self.name!r})"

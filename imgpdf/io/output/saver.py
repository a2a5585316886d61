"""Output saving utilities for the converter.

This module handles writing the finished PDF and the JSON conversion report.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime, tzinfo
from pathlib import Path
from typing import Any

from ...constants import REPORT_SUFFIX
from ...exceptions import OutputSaveError
from ...types import ConversionResult

logger = logging.getLogger(__name__)


class OutputSaver:
    """Handles saving of conversion results.

    Files are written to a temporary sibling first and then moved into
    place, so a failed write never leaves a truncated PDF behind.
    """

    def __init__(self, timezone: tzinfo = UTC):
        """Initialize saver.

        Args:
            timezone: Timezone of the ``processed_at`` report timestamp
        """
        self.timezone = timezone

    def save_pdf(self, pdf_bytes: bytes, output_path: Path) -> Path:
        """Write PDF bytes to ``output_path`` (parent directories created).

        Raises:
            OutputSaveError: If the file cannot be written
        """
        output_path = Path(output_path)
        self._write_atomic(output_path, pdf_bytes)
        logger.info("Saved PDF (%d bytes) to %s", len(pdf_bytes), output_path)
        return output_path

    @staticmethod
    def report_path_for(output_path: Path) -> Path:
        """Report file that belongs to ``output_path`` (``<stem>.report.json``)."""
        output_path = Path(output_path)
        return output_path.with_name(f"{output_path.stem}{REPORT_SUFFIX}")

    def build_report(self, result: ConversionResult, sources: list[str | None] | None = None) -> dict[str, Any]:
        """Build the JSON report for a conversion.

        Args:
            result: Conversion result
            sources: Optional per-input labels, indexed like the input batch

        Returns:
            JSON-serializable report dict
        """
        report = result.to_dict()
        if sources is not None:
            for page in report["pages"]:
                page["source"] = sources[page["index"]]
        report["processed_at"] = datetime.now(self.timezone).isoformat()
        return report

    def save_report(
        self,
        result: ConversionResult,
        report_path: Path,
        sources: list[str | None] | None = None,
    ) -> Path:
        """Write the JSON conversion report.

        Raises:
            OutputSaveError: If the file cannot be written
        """
        report = self.build_report(result, sources)
        payload = json.dumps(report, ensure_ascii=False, indent=2).encode("utf-8")
        self._write_atomic(Path(report_path), payload)
        logger.info("Conversion report saved to: %s", report_path)
        return Path(report_path)

    @staticmethod
    def _write_atomic(path: Path, payload: bytes) -> None:
        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(payload)
            os.replace(tmp_path, path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise OutputSaveError(f"Failed to write {path}: {e}") from e

#!/usr/bin/env python3
"""
Main entry point for imgpdf
Provides command-line interface for converting JPEG/PNG/WebP images into one multi-page PDF
"""

from __future__ import annotations

import argparse
import logging
import sys
import textwrap
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Note: converter imports are moved to function-level
# to improve CLI startup time (--help, argument validation, etc.)
if TYPE_CHECKING:
    from imgpdf import ConversionResult, ConverterConfig

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def setup_logging(level: str = "INFO", timezone: str | None = None) -> None:
    """Setup logging configuration with timestamped log files."""
    logs_dir = Path(".logs")
    logs_dir.mkdir(exist_ok=True)

    tz = ZoneInfo(timezone) if timezone else UTC
    timestamp = datetime.now(tz).strftime("%Y-%m-%d_%H-%M-%S")
    log_filename = logs_dir / f"{timestamp}_imgpdf.log"

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout), logging.FileHandler(log_filename, encoding="utf-8")],
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = _build_argument_parser()
    args = parser.parse_args(argv)

    if args.timezone:
        try:
            ZoneInfo(args.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            parser.error(f"unknown timezone {args.timezone!r}: {exc}")

    setup_logging(args.log_level, args.timezone)
    logger = logging.getLogger(__name__)

    return _execute_command(args, logger)


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="imgpdf - Convert JPEG, PNG and WebP images into one multi-page A4 PDF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent(
            """
            Examples:
              # Convert images in the given order
              python main.py --input cover.png page1.jpg page2.webp

              # Convert every image in a directory (sorted by name)
              python main.py --input scans/ --output out/scans.pdf

              # Advanced options
              python main.py --input scans/ --workers 1 --timeout 10
              python main.py --input scans/ --max-items 0 --downsample
              python main.py --input scans/ --config settings/config.yaml --no-report
            """
        ),
    )

    parser.add_argument(
        "--input",
        "-i",
        nargs="+",
        required=True,
        help="Input image files and/or directories, in page order",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Output PDF path (default: output/converted.pdf)",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="YAML configuration file (default: $IMGPDF_CONFIG or settings/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--timezone",
        type=str,
        help="IANA timezone for log file names and report timestamps (default: UTC)",
    )

    # Batch Processing
    batch_group = parser.add_argument_group("Batch Processing")
    batch_group.add_argument(
        "--workers",
        type=int,
        help="Number of images decoded concurrently (default: 4)",
    )
    batch_group.add_argument(
        "--timeout",
        type=float,
        help="Per-image decode timeout in seconds, 0 disables (default: 30)",
    )
    batch_group.add_argument(
        "--max-items",
        type=int,
        help="Maximum number of images per batch, 0 disables (default: 10)",
    )

    # Image Options
    image_group = parser.add_argument_group("Image Options")
    image_group.add_argument(
        "--downsample",
        action="store_true",
        help="Resample images wider than the page to the page width before embedding",
    )
    image_group.add_argument(
        "--jpeg-quality",
        type=int,
        help="JPEG quality used when downsampling JPEG images (default: 90)",
    )

    # Output Options
    output_group = parser.add_argument_group("Output Options")
    output_group.add_argument(
        "--no-report",
        action="store_true",
        help="Do not write the JSON conversion report next to the PDF",
    )

    return parser


def _load_config(args: argparse.Namespace) -> ConverterConfig:
    from imgpdf.config import ConverterConfig  # noqa: PLC0415

    config_path = Path(args.config) if args.config else None
    config = ConverterConfig.from_cli(args, config_path=config_path)
    config.validate()
    return config


def _execute_command(args: argparse.Namespace, logger: logging.Logger) -> int:
    # Lazy import: only load the converter when actually processing input
    from imgpdf import BatchError, Converter  # noqa: PLC0415
    from imgpdf.exceptions import ConfigurationError, InputError, OutputError  # noqa: PLC0415
    from imgpdf.io import InputLoader, OutputSaver  # noqa: PLC0415

    try:
        config = _load_config(args)
    except ConfigurationError as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_USAGE

    try:
        raw_images = InputLoader(max_items=config.max_items).load(args.input)
    except InputError as exc:
        logger.error("%s", exc)
        return EXIT_USAGE

    try:
        converter = Converter(config=config)
        result = converter.convert(raw_images)

        saver = OutputSaver(timezone=config.tzinfo)
        if result.pdf_bytes is not None:
            saver.save_pdf(result.pdf_bytes, config.output_path)
        if config.write_report:
            saver.save_report(
                result,
                saver.report_path_for(config.output_path),
                sources=[raw.source for raw in raw_images],
            )
    except BatchError as exc:
        logger.error("Conversion failed: %s", exc)
        return EXIT_FAILED
    except OutputError as exc:
        logger.error("%s", exc)
        return EXIT_FAILED
    except KeyboardInterrupt:
        logger.info("Process interrupted by user")
        return EXIT_FAILED

    _print_summary(result, config.output_path)
    return EXIT_OK if result.success else EXIT_FAILED


def _print_summary(result: ConversionResult, output_path: Path) -> None:
    if result.success:
        print(f"\n✅ {result.page_count} page(s) written to {output_path}")
    else:
        print("\n❌ No image could be converted; no PDF written")

    if result.failures:
        print(f"⚠️  Skipped {len(result.failures)} image(s):")
        for failure in result.failures:
            print(f"   [{failure.index}] {failure.source or 'unnamed'}: {failure.reason}")


if __name__ == "__main__":
    sys.exit(main())

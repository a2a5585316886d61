"""Shared constants for the image-to-PDF pipeline."""

# =============================================================================
# Page Canvas
# =============================================================================
PAGE_WIDTH = 595
"""ISO A4 page width in PDF units (72 units per inch)."""

PAGE_HEIGHT = 842
"""ISO A4 page height in PDF units (72 units per inch)."""

PAGE_SIZE = (PAGE_WIDTH, PAGE_HEIGHT)
"""Fixed page size every image is placed on."""

# =============================================================================
# Batch Processing
# =============================================================================
DEFAULT_MAX_WORKERS = 4
"""Default size of the bounded decode worker pool."""

DEFAULT_ITEM_TIMEOUT = 30.0
"""Default per-item decode/normalize timeout in seconds."""

DEFAULT_MAX_ITEMS = 10
"""Default maximum number of images accepted by the input loader."""

# =============================================================================
# Image Processing
# =============================================================================
DEFAULT_JPEG_QUALITY = 90
"""JPEG quality used when a JPEG has to be re-encoded (downsampling)."""

SUPPORTED_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp")
"""File extensions picked up when expanding input directories."""

# =============================================================================
# Output
# =============================================================================
DEFAULT_OUTPUT_PATH = "output/converted.pdf"
"""Default PDF written by the CLI."""

REPORT_SUFFIX = ".report.json"
"""Suffix appended to the PDF stem for the JSON conversion report."""

DEFAULT_TIMEZONE = "UTC"
"""IANA timezone used for report timestamps and log file names."""

"""Converter configuration module.

This module provides:
- ConverterConfig: Dataclass for all converter configuration options
- YAML configuration file loading
- Validation of page, worker and output settings
"""

from __future__ import annotations

import argparse
import logging
import math
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from .constants import (
    DEFAULT_ITEM_TIMEOUT,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_MAX_ITEMS,
    DEFAULT_MAX_WORKERS,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_TIMEZONE,
    PAGE_HEIGHT,
    PAGE_WIDTH,
)
from .exceptions import InvalidConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "IMGPDF_CONFIG"
DEFAULT_CONFIG_PATH = Path("settings") / "config.yaml"


def default_config_path() -> Path:
    """Config file to use when none is given: ``$IMGPDF_CONFIG`` or settings/config.yaml."""
    env_value = os.environ.get(CONFIG_ENV_VAR)
    return Path(env_value) if env_value else DEFAULT_CONFIG_PATH


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load YAML configuration file with error handling.

    Args:
        config_path: Path to YAML config file

    Returns:
        Configuration dict, or empty dict if file not found or invalid
    """
    try:
        if config_path.exists():
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                logger.warning("Config file %s does not contain a mapping, ignoring it", config_path)
                return {}
            return data
        logger.debug("Config file not found: %s", config_path)
        return {}
    except yaml.YAMLError as e:
        logger.warning("Failed to parse config file %s: %s", config_path, e)
        return {}
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read config file %s: %s", config_path, e)
        return {}


@dataclass
class ConverterConfig:
    """Converter configuration with validation.

    Configuration Sources (in order of precedence):
    1. Constructor arguments / overrides (highest priority)
    2. CLI arguments via from_cli()
    3. YAML configuration files via from_yaml()
    4. Default values (lowest priority)

    Example:
        >>> config = ConverterConfig(max_workers=2, item_timeout=10)
        >>> config.validate()

        >>> config = ConverterConfig.from_yaml(Path("settings/config.yaml"))
    """

    # ==================== Page Canvas ====================
    page_width: float = PAGE_WIDTH
    page_height: float = PAGE_HEIGHT

    # ==================== Batch Processing ====================
    max_workers: int = DEFAULT_MAX_WORKERS
    item_timeout: float | None = DEFAULT_ITEM_TIMEOUT
    max_items: int | None = DEFAULT_MAX_ITEMS

    # ==================== Image Options ====================
    downsample: bool = False
    jpeg_quality: int = DEFAULT_JPEG_QUALITY

    # ==================== Output Options ====================
    output_path: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT_PATH))
    write_report: bool = True
    timezone: str = DEFAULT_TIMEZONE

    def __post_init__(self) -> None:
        """Convert path strings to Path objects."""
        if isinstance(self.output_path, str):
            self.output_path = Path(self.output_path)

    @property
    def page_size(self) -> tuple[float, float]:
        return (self.page_width, self.page_height)

    @property
    def tzinfo(self) -> ZoneInfo:
        """Timezone for report timestamps and log file names."""
        return ZoneInfo(self.timezone)

    @classmethod
    def from_yaml(cls, config_path: Path, **overrides: Any) -> ConverterConfig:
        """Load configuration from YAML file.

        Unknown keys are ignored with a warning.

        Args:
            config_path: Path to YAML configuration file
            **overrides: Values to override from file

        Returns:
            ConverterConfig instance

        Example:
            >>> config = ConverterConfig.from_yaml(Path("settings/config.yaml"), max_workers=1)
        """
        yaml_config = _load_yaml_config(Path(config_path))

        field_names = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in yaml_config.items():
            if key in field_names:
                kwargs[key] = value
            else:
                logger.warning("Ignoring unknown config key %r in %s", key, config_path)

        kwargs.update(overrides)
        return cls(**kwargs)

    @staticmethod
    def _get_arg(args: argparse.Namespace, name: str, default: Any = None) -> Any:
        return getattr(args, name, default)

    @classmethod
    def _extract_cli_kwargs(cls, args: argparse.Namespace) -> dict[str, Any]:
        """Extract configuration kwargs from CLI arguments.

        Only arguments the user actually set (not None) are returned, so
        YAML values survive when a flag is omitted.
        """
        # Format: (cli_name, config_name, transform_func)
        mappings: list[tuple[str, str, Any]] = [
            ("workers", "max_workers", None),
            ("timeout", "item_timeout", None),
            ("max_items", "max_items", None),
            ("output", "output_path", Path),
            ("jpeg_quality", "jpeg_quality", None),
            ("timezone", "timezone", None),
        ]

        kwargs: dict[str, Any] = {}
        for cli_name, config_name, transform in mappings:
            value = cls._get_arg(args, cli_name)
            if value is not None:
                kwargs[config_name] = transform(value) if transform else value

        # Special handling for boolean flags
        if cls._get_arg(args, "downsample"):
            kwargs["downsample"] = True
        if cls._get_arg(args, "no_report"):
            kwargs["write_report"] = False

        # 0 disables the per-item timeout / the item cap on the command line
        if kwargs.get("item_timeout") == 0:
            kwargs["item_timeout"] = None
        if kwargs.get("max_items") == 0:
            kwargs["max_items"] = None

        return kwargs

    @classmethod
    def from_cli(cls, args: argparse.Namespace, config_path: Path | None = None) -> ConverterConfig:
        """Create configuration from CLI arguments layered over a YAML file.

        Args:
            args: Parsed CLI arguments from argparse
            config_path: YAML file (default: ``default_config_path()``)

        Returns:
            ConverterConfig instance
        """
        kwargs = cls._extract_cli_kwargs(args)
        return cls.from_yaml(config_path or default_config_path(), **kwargs)

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            InvalidConfigError: If any value is out of range

        Example:
            >>> ConverterConfig(max_workers=0).validate()  # Raises InvalidConfigError
        """
        errors: list[str] = []

        for name in ("page_width", "page_height"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
                errors.append(f"{name} must be a positive number, got {value!r}")

        if not isinstance(self.max_workers, int) or self.max_workers < 1:
            errors.append(f"max_workers must be an integer >= 1, got {self.max_workers!r}")

        if self.item_timeout is not None and (
            not isinstance(self.item_timeout, (int, float)) or self.item_timeout <= 0
        ):
            errors.append(f"item_timeout must be positive or null, got {self.item_timeout!r}")

        if self.max_items is not None and (not isinstance(self.max_items, int) or self.max_items < 1):
            errors.append(f"max_items must be an integer >= 1 or null, got {self.max_items!r}")

        if not isinstance(self.jpeg_quality, int) or not 1 <= self.jpeg_quality <= 95:
            errors.append(f"jpeg_quality must be between 1 and 95, got {self.jpeg_quality!r}")

        if self.output_path.suffix.lower() != ".pdf":
            errors.append(f"output_path must end with .pdf, got {self.output_path}")

        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError, TypeError):
            errors.append(f"timezone must be an IANA timezone name, got {self.timezone!r}")

        if errors:
            raise InvalidConfigError("; ".join(errors))

        logger.info(
            "Configuration validated: page=%sx%s, workers=%d, timeout=%s, max_items=%s, downsample=%s",
            self.page_width,
            self.page_height,
            self.max_workers,
            self.item_timeout,
            self.max_items,
            self.downsample,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a YAML/JSON-serializable dict."""
        data = asdict(self)
        data["output_path"] = str(self.output_path)
        return data

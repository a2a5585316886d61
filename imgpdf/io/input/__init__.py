"""Input loading utilities."""

from .loader import InputLoader

__all__ = ["InputLoader"]

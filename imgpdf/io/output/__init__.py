"""Output saving utilities."""

from .saver import OutputSaver

__all__ = ["OutputSaver"]

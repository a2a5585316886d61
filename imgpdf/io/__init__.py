"""IO module for input loading and output saving.

This module provides unified interfaces for:
- Loading input images from files and directories
- Saving results (PDF, JSON report)
"""

from .input import InputLoader
from .output import OutputSaver

__all__ = ["InputLoader", "OutputSaver"]

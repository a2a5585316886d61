"""Per-item pipeline stages.

Each stage processes one input image:
1. ClassificationStage: raw bytes -> ImageFormat
2. NormalizationStage: raw bytes + ImageFormat -> NormalizedImage
"""

from __future__ import annotations

from .base import BaseStage, StageError
from .classification_stage import ClassificationStage
from .normalization_stage import NormalizationStage

__all__ = [
    "BaseStage",
    "StageError",
    "ClassificationStage",
    "NormalizationStage",
]

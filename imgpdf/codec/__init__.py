"""Image codec implementations."""

from __future__ import annotations

from .pillow_codec import PillowCodec

__all__ = ["PillowCodec"]

# MIT License (see LICENSE)
"""Optional renderer adapters consuming simulation snapshots."""
from .adapter import (
    DEFAULT_PALETTE,
    BufferedRenderer,
    DebugRenderer,
    NullRenderer,
    Palette,
    RendererAdapter,
)

__all__ = [
    "DEFAULT_PALETTE",
    "BufferedRenderer",
    "DebugRenderer",
    "NullRenderer",
    "Palette",
    "RendererAdapter",
]

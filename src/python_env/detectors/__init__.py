"""
detectors for the supported python toolchains.
"""

from __future__ import annotations

from .base import ToolAdapter
from .poetry import PoetryAdapter
from .uv import UvAdapter

__all__ = [
    "ToolAdapter",
    "UvAdapter",
    "PoetryAdapter",
]

"""Mosaic: metadata-driven UI composition runtime."""

from __future__ import annotations

__version__ = "0.1.0"

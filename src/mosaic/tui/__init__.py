"""Textual presentation host for routing scopes."""

from __future__ import annotations

from mosaic.tui.container import ViewContainer

__all__ = ["ViewContainer"]

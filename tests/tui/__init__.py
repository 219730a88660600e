"""Textual pilot tests for the view container and built-in views."""

from __future__ import annotations

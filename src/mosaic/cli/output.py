"""Output formatting helpers for CLI commands."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

__all__ = ["OutputFormat", "format_error", "format_json"]


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Example:
        >>> print(format_error("Boot failed", details=["no such module"]))
        Error: Boot failed
          no such module
    """
    lines = [f"Error: {message}"]
    for detail in details or []:
        lines.append(f"  {detail}")
    if suggestion:
        lines.append(f"Suggestion: {suggestion}")
    return "\n".join(lines)


def format_json(data: Any) -> str:
    return json.dumps(data, indent=2, default=str)

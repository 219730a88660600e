"""Session abstraction consumed as an authentication gate."""

from __future__ import annotations

from mosaic.session.manager import SessionManager
from mosaic.session.types import (
    AnonymousSessionProvider,
    Session,
    SessionProvider,
    StaticSessionProvider,
    UserInfo,
)

__all__ = [
    "AnonymousSessionProvider",
    "Session",
    "SessionManager",
    "SessionProvider",
    "StaticSessionProvider",
    "UserInfo",
]

"""Holds the session provider for one engine."""

from __future__ import annotations

from mosaic.logging import get_logger
from mosaic.session.types import AnonymousSessionProvider, Session, SessionProvider

__all__ = ["SessionManager"]

logger = get_logger(__name__)


class SessionManager:
    """Resolves the current session through the configured provider.

    Without a provider, or when the provider fails, the session is an
    unauthenticated one.
    """

    def __init__(self, provider: SessionProvider | None = None) -> None:
        self._provider: SessionProvider | None = provider or AnonymousSessionProvider()

    def set_provider(self, provider: SessionProvider | None) -> None:
        self._provider = provider

    def get_provider(self) -> SessionProvider | None:
        return self._provider

    async def get_session(self) -> Session:
        if self._provider is None:
            return Session()
        try:
            return await self._provider.session()
        except Exception:
            logger.exception(
                "session_provider_failed", provider=self._provider.provider_type
            )
            return Session()

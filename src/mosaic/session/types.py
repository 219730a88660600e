"""Session data and providers."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

from pydantic import Field

from mosaic.meta.types import CamelModel

__all__ = [
    "AnonymousSessionProvider",
    "Session",
    "SessionProvider",
    "StaticSessionProvider",
    "UserInfo",
]


class UserInfo(CamelModel):
    id: str
    email: str
    name: str
    avatar: str | None = None
    roles: list[str] = Field(default_factory=list)


class Session:
    """The current user's session.

    A session is authenticated exactly when it carries user info.
    ``update`` reloads the user info through the provider's loader.
    """

    def __init__(
        self,
        user_info: UserInfo | None = None,
        loader: Callable[[], Awaitable[UserInfo | None]] | None = None,
    ) -> None:
        self._user_info = user_info
        self._loader = loader
        self._update_time = time.time()

    @property
    def user_info(self) -> UserInfo | None:
        return self._user_info

    @property
    def session_id(self) -> str | None:
        return self._user_info.id if self._user_info else None

    @property
    def update_time(self) -> float:
        return self._update_time

    def is_authenticated(self) -> bool:
        return self._user_info is not None

    async def update(self) -> None:
        if self._loader is None:
            return
        self._user_info = await self._loader()
        self._update_time = time.time()


@runtime_checkable
class SessionProvider(Protocol):
    """Source of the current session."""

    @property
    def provider_type(self) -> str: ...

    async def session(self) -> Session: ...


class AnonymousSessionProvider:
    """Provider that never authenticates anyone."""

    @property
    def provider_type(self) -> str:
        return "anonymous"

    async def session(self) -> Session:
        return Session()


class StaticSessionProvider:
    """Provider returning a fixed user; useful for hosts and tests."""

    def __init__(self, user_info: UserInfo | None) -> None:
        self._user_info = user_info

    @property
    def provider_type(self) -> str:
        return "static"

    async def session(self) -> Session:
        return Session(self._user_info)

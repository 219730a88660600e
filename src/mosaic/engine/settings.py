"""Runtime settings of one engine instance."""

from __future__ import annotations

from dataclasses import dataclass

from mosaic.config import EngineConfig
from mosaic.constants import DEFAULT_ENDPOINT, SERVLET_PATH, Tier

__all__ = ["EngineSettings"]


@dataclass(slots=True)
class EngineSettings:
    """Mutable settings an initializer may adjust before modules apply.

    Attributes:
        tier: ``presentation`` or ``service``.
        base_url: Origin of the service tier.
        endpoint: Mount point of engine services.
        authentication_enabled: Route every action to the auth view while
            the session is unauthenticated.
    """

    tier: Tier = "presentation"
    base_url: str = ""
    endpoint: str = DEFAULT_ENDPOINT
    authentication_enabled: bool = False

    @classmethod
    def from_config(cls, config: EngineConfig) -> EngineSettings:
        return cls(
            tier=config.tier,
            base_url=config.base_url,
            endpoint=config.endpoint,
            authentication_enabled=config.authentication_enabled,
        )

    @property
    def is_service(self) -> bool:
        return self.tier == "service"

    @property
    def is_presentation(self) -> bool:
        return self.tier == "presentation"

    @property
    def servlet_prefix(self) -> str:
        """Path prefix under which servlets are dispatched."""
        endpoint = self.endpoint.strip("/")
        return f"/{endpoint}{SERVLET_PATH}" if endpoint else SERVLET_PATH

    def get_url(self, path: str) -> str:
        """Absolute URL of ``path`` below the endpoint."""
        base = self.base_url.rstrip("/")
        endpoint = self.endpoint.strip("/")
        if endpoint:
            return f"{base}/{endpoint}/{path.lstrip('/')}"
        return f"{base}/{path.lstrip('/')}"

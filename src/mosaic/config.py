from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar, Literal, Self

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from mosaic.constants import DEFAULT_ENDPOINT, Tier
from mosaic.exceptions import ConfigError
from mosaic.logging import get_logger

__all__ = [
    "MosaicConfig",
    "EngineConfig",
    "LoggingConfig",
    "load_config",
    "get_user_config_path",
]

logger = get_logger(__name__)


class EngineConfig(BaseModel):
    """Settings for the engine instance of this process.

    Attributes:
        tier: Which side of the system this process runs. ``presentation``
            runs the component phase and pulls the persisted configuration;
            ``service`` runs the seed phase and pushes it.
        base_url: Origin of the service tier, used by presentation hosts.
        endpoint: Mount point of engine services under ``base_url``.
        authentication_enabled: Substitute the auth view for every action
            while no authenticated session exists.
    """

    tier: Tier = "presentation"
    base_url: str = ""
    endpoint: str = DEFAULT_ENDPOINT
    authentication_enabled: bool = False

    @field_validator("endpoint")
    @classmethod
    def normalize_endpoint(cls, v: str) -> str:
        """Ensure the endpoint has a single leading slash and no trailing one."""
        v = v.strip()
        if not v:
            return DEFAULT_ENDPOINT
        return "/" + v.strip("/")

    @model_validator(mode="after")
    def check_base_url_for_presentation(self) -> Self:
        if self.tier == "presentation" and self.authentication_enabled and not self.base_url:
            logger.warning(
                "authentication_without_base_url",
                hint="session refresh has no service origin to talk to",
            )
        return self


class LoggingConfig(BaseModel):
    """Settings for structured logging output."""

    level: Literal["error", "warning", "info", "debug"] = "info"
    json_output: bool = False


class YamlConfigSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from YAML files."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = {}
        if yaml_file and yaml_file.exists():
            try:
                with open(yaml_file) as f:
                    loaded = yaml.safe_load(f)
                    if loaded is None:
                        logger.warning("config_file_empty", path=str(yaml_file))
                    elif isinstance(loaded, dict):
                        self._config_data = loaded
                    else:
                        raise ConfigError(
                            message=f"Config file {yaml_file} must contain a mapping",
                            field=None,
                            value=type(loaded).__name__,
                        )
            except yaml.YAMLError as e:
                raise ConfigError(
                    message=f"Invalid YAML in {yaml_file}: {e}",
                    field=None,
                    value=None,
                ) from e

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        """Get value for a specific field from the YAML config."""
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return the complete config data."""
        return self._config_data


class MosaicConfig(BaseSettings):
    """Root configuration object containing all Mosaic settings."""

    model_config = SettingsConfigDict(
        env_prefix="MOSAIC_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    #: Project config file consulted by settings_customise_sources
    project_config_path: ClassVar[Path | None] = None

    engine: EngineConfig = Field(default_factory=EngineConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of settings sources.

        Priority (highest to lowest):
        1. Init settings (explicit keyword arguments)
        2. Environment variables (MOSAIC_*)
        3. Project YAML config (./mosaic.yaml)
        4. User YAML config (~/.config/mosaic/config.yaml)
        """
        project_config_path = cls.project_config_path or Path.cwd() / "mosaic.yaml"
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, project_config_path),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


def get_user_config_path() -> Path:
    """Get the path to the user configuration file.

    Returns:
        Path to ~/.config/mosaic/config.yaml
    """
    return Path.home() / ".config" / "mosaic" / "config.yaml"


def load_config(config_path: Path | None = None) -> MosaicConfig:
    """Load configuration with hierarchy: defaults -> user -> project -> env.

    Args:
        config_path: Optional path to project config file. Defaults to ./mosaic.yaml

    Returns:
        MosaicConfig instance with merged configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    if config_path is None:
        config_path = Path.cwd() / "mosaic.yaml"

    if not config_path.exists():
        logger.info("project_config_not_found", path=str(config_path))

    previous = MosaicConfig.project_config_path
    MosaicConfig.project_config_path = config_path
    try:
        return MosaicConfig()
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
    finally:
        MosaicConfig.project_config_path = previous

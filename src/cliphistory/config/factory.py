# region Docstring
"""
cliphistory.config.factory
Settings base class with YAML, .env and environment variable sources.
Overview:
- FactoryBaseSettings resolves each field from, in priority order:
    0. Keyword arguments passed to the constructor
    1. Environment variables
    2. .env file in the application root
    3. config.{APP_ENV}.yaml in the application root
    4. config.yaml in the application root
    5. Field defaults
- get_settings(settings_cls) is an LRU-cached factory so configuration files are
    read once per settings class.
Design notes:
- decode_complex_value returns the raw string when a complex env value is not
    valid JSON, leaving the field validators to interpret it.
- get_settings.cache_clear() is used by tests after changing the environment.
"""

# region Imports
import json
from functools import lru_cache
from typing import Any, Type, TypeVar

from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .base import APP_ENV, APP_ROOT

# endregion
# region FactoryBaseSettings Class
T = TypeVar("T", bound=BaseSettings)


class FactoryBaseSettings(BaseSettings):
    """
    BaseSettings that also reads the application's YAML files.
    Priority: Env Vars > .env > YAML (env specific) > YAML (default) > Defaults
    """

    model_config = SettingsConfigDict(
        env_file=APP_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        yaml_settings = YamlConfigSettingsSource(
            settings_cls,
            yaml_file=[APP_ROOT / "config.yaml", APP_ROOT / f"config.{APP_ENV}.yaml"],
        )
        return (
            init_settings,  # Explicit kwargs (tests, CLI overrides)
            env_settings,
            dotenv_settings,
            yaml_settings,
        )

    def decode_complex_value(
        self, field_name: str, field: FieldInfo, value: Any
    ) -> Any:
        """Return the raw string when the value is not JSON."""
        if isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return value
        return value


# endregion
# region get_settings Factory Function


@lru_cache
def get_settings(settings_cls: Type[T]) -> T:
    """
    Factory function to load any settings class.
    Results are cached so files are not re-read on every lookup.
    """
    return settings_cls()


# endregion

"""Engine settings.

Bounds for the autonomous ``act`` loop and for path enumeration. Every
bound defaults to unbounded; set them in code, in a machine file's
``settings`` section, or through ``DREAMCATCHER_*`` environment variables.
"""

import os
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dreamcatcher.exceptions import ConfigurationError

ENV_PREFIX = "DREAMCATCHER_"


class EngineSettings(BaseModel):
    """Safety valves for the engine.

    Attributes:
        max_act_attempts: Most candidates ``act`` tries before giving up.
        max_path_length: Longest path ``find_paths`` enumerates.
        max_paths: Most paths ``find_paths`` returns.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_act_attempts: int | None = Field(default=None, ge=1)
    max_path_length: int | None = Field(default=None, ge=1)
    max_paths: int | None = Field(default=None, ge=1)

    def merged(self, overrides: Mapping[str, Any] | None) -> "EngineSettings":
        """Return a copy with ``overrides`` applied on top."""
        if not overrides:
            return self
        values = self.model_dump()
        values.update(overrides)
        return build_settings(values)


def build_settings(values: Mapping[str, Any]) -> EngineSettings:
    """Validate ``values`` into settings.

    Raises:
        ConfigurationError: If any value is invalid.
    """
    try:
        return EngineSettings(**dict(values))
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid engine settings: {e}",
            context={"settings": dict(values)},
        ) from e


def _settings_from_env(environ: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for name in EngineSettings.model_fields:
        raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None and raw.strip():
            values[name] = raw.strip()
    return values


def get_settings(environ: Mapping[str, str] | None = None) -> EngineSettings:
    """Settings from ``DREAMCATCHER_*`` environment variables.

    Args:
        environ: Mapping to read instead of ``os.environ``.

    Returns:
        Validated settings; unset variables stay unbounded.
    """
    return build_settings(_settings_from_env(os.environ if environ is None else environ))

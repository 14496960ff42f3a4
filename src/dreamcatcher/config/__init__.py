"""Configuration: engine settings and declarative machine files."""

from dreamcatcher.config.settings import EngineSettings, build_settings, get_settings
from dreamcatcher.config.schema import EdgeConfig, MachineConfig, ValidatorConfig, validate_config
from dreamcatcher.config.loader import MachineLoader, load_machine

__all__ = [
    "EngineSettings",
    "build_settings",
    "get_settings",
    "EdgeConfig",
    "ValidatorConfig",
    "MachineConfig",
    "validate_config",
    "MachineLoader",
    "load_machine",
]

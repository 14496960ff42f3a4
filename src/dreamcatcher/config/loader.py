"""Loader for declarative machine files.

This module builds a ``StmDef`` from:
- Files (JSON, YAML)
- Dictionaries

Function references are either names registered with the loader or
``module:attribute`` import paths. String values of the form ``${VAR}``,
``${VAR:-default}`` or ``${VAR:?message}`` are taken from the environment.
"""

import functools
import importlib
import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Tuple, Union

import yaml

from dreamcatcher.config.schema import EdgeConfig, MachineConfig, validate_config
from dreamcatcher.config.settings import EngineSettings, get_settings
from dreamcatcher.core.definition import StmDef
from dreamcatcher.core.states import ANY
from dreamcatcher.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class MachineLoader:
    """Load machine definitions from files and dictionaries."""

    def __init__(self, functions: Dict[str, Callable] | None = None):
        """Initialize the loader.

        Args:
            functions: Named functions that machine files may refer to.
        """
        self._functions: Dict[str, Callable] = dict(functions or {})

    def register_function(self, name: str, fn: Callable) -> None:
        """Make ``fn`` available to machine files as ``name``."""
        if not callable(fn):
            raise ConfigurationError(f"Function '{name}' is not callable")
        self._functions[name] = fn

    def load_from_file(self, file_path: Union[str, Path]) -> Tuple[StmDef, EngineSettings]:
        """Load a machine from a JSON or YAML file.

        Args:
            file_path: Path to the machine file.

        Returns:
            The definition and the engine settings (environment settings
            overridden by the file's ``settings`` section).

        Raises:
            ConfigurationError: If the file is missing, malformed or refers
                to functions that cannot be resolved.
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise ConfigurationError(
                f"Machine file not found: {file_path}",
                context={"path": str(file_path)},
            )
        raw_config = self._load_file(file_path)
        logger.debug("Loaded machine file %s", file_path)
        return self.load_from_dict(raw_config)

    def load_from_dict(self, config_dict: Dict[str, Any]) -> Tuple[StmDef, EngineSettings]:
        """Load a machine from a configuration dictionary."""
        config = validate_config(self._resolve_environment_vars(config_dict))
        overrides = config.settings.model_dump(exclude_unset=True)
        return self.build(config), get_settings().merged(overrides)

    def build(self, config: MachineConfig) -> StmDef:
        """Build a definition from a validated configuration."""
        stm = StmDef(config.name)
        for state in config.states:
            stm.add_state(state)
        for edge in config.transitions:
            fn = self._resolve_function(edge) if edge.function else None
            stm.add_transition(
                self._state(edge.source, config), self._state(edge.target, config), fn
            )
        for edge in config.validators:
            stm.add_validator(
                self._state(edge.source, config),
                self._state(edge.target, config),
                self._resolve_function(edge),
            )
        return stm

    def _state(self, value: Any, config: MachineConfig) -> Any:
        return ANY if value == config.any_state else value

    def _load_file(self, file_path: Path) -> Dict[str, Any]:
        """Load raw configuration from a file.

        Raises:
            ConfigurationError: If the format is unsupported or unparsable.
        """
        suffix = file_path.suffix.lower()

        try:
            with open(file_path) as f:
                if suffix == ".json":
                    return json.load(f)
                elif suffix in [".yaml", ".yml"]:
                    return yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Cannot parse machine file {file_path}: {e}",
                context={"path": str(file_path)},
            ) from e
        raise ConfigurationError(
            f"Unsupported file format: {suffix}",
            context={"path": str(file_path)},
        )

    def _resolve_environment_vars(self, config: Any) -> Any:
        """Resolve ``${...}`` environment references in configuration values."""
        if isinstance(config, str):
            if config.startswith("${") and config.endswith("}"):
                var_expr = config[2:-1]

                if ":-" in var_expr:
                    var_name, default_value = var_expr.split(":-", 1)
                    return os.environ.get(var_name, default_value)

                elif ":?" in var_expr:
                    var_name, error_msg = var_expr.split(":?", 1)
                    if var_name not in os.environ:
                        raise ConfigurationError(
                            f"Required environment variable: {error_msg}",
                            context={"variable": var_name},
                        )
                    return os.environ[var_name]

                else:
                    if var_expr not in os.environ:
                        raise ConfigurationError(
                            f"Environment variable not found: {var_expr}",
                            context={"variable": var_expr},
                        )
                    return os.environ[var_expr]

            return config

        elif isinstance(config, dict):
            return {key: self._resolve_environment_vars(value) for key, value in config.items()}

        elif isinstance(config, list):
            return [self._resolve_environment_vars(item) for item in config]

        else:
            return config

    def _resolve_function(self, edge: EdgeConfig) -> Callable:
        """Resolve an edge's function reference to a callable.

        Raises:
            ConfigurationError: If the reference cannot be resolved.
        """
        reference = edge.function
        if reference in self._functions:
            func = self._functions[reference]
        elif ":" in reference:
            module_name, _, attr_path = reference.partition(":")
            try:
                func = importlib.import_module(module_name)
                for attr in attr_path.split("."):
                    func = getattr(func, attr)
            except (ImportError, AttributeError) as e:
                raise ConfigurationError(
                    f"Cannot import function '{reference}': {e}",
                    context={"function": reference, "from": edge.source, "to": edge.target},
                ) from e
        else:
            raise ConfigurationError(
                f"Function not registered: {reference}",
                context={
                    "function": reference,
                    "registered": sorted(self._functions),
                },
            )

        if not callable(func):
            raise ConfigurationError(
                f"'{reference}' is not callable",
                context={"function": reference},
            )
        if edge.params:
            func = functools.partial(func, **edge.params)
        return func


def load_machine(
    source: Union[str, Path, Dict[str, Any]],
    functions: Dict[str, Callable] | None = None,
) -> Tuple[StmDef, EngineSettings]:
    """Load a machine definition from a file path or dictionary.

    Args:
        source: Path to a JSON/YAML file, or a configuration dictionary.
        functions: Named functions the configuration may refer to.

    Returns:
        The definition and the effective engine settings.
    """
    loader = MachineLoader(functions)
    if isinstance(source, dict):
        return loader.load_from_dict(source)
    return loader.load_from_file(source)

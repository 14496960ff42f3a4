"""Schema of declarative machine files, using Pydantic.

A machine file lists transitions and validators as ``from``/``to`` pairs
with an optional function reference each:

```yaml
name: door
any_state: "*"
transitions:
  - {from: opened, to: closed, function: "doors.actions:close"}
  - {from: closed, to: opened}
validators:
  - {from: closed, to: opened, function: "doors.guards:unlocked"}
```
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from dreamcatcher.config.settings import EngineSettings
from dreamcatcher.exceptions import ConfigurationError


class EdgeConfig(BaseModel):
    """One transition or validator."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    source: Any = Field(alias="from")
    target: Any = Field(alias="to")
    function: str | None = None
    params: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_params(self) -> "EdgeConfig":
        """Parameters only make sense with a function to bind them to."""
        if self.params and not self.function:
            raise ValueError("'params' given without a 'function'")
        return self


class ValidatorConfig(EdgeConfig):
    """A validator; unlike transitions, the function is mandatory."""

    function: str


class MachineConfig(BaseModel):
    """A complete machine file."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    any_state: str = "*"
    states: List[Any] = Field(default_factory=list)
    transitions: List[EdgeConfig] = Field(default_factory=list)
    validators: List[ValidatorConfig] = Field(default_factory=list)
    settings: EngineSettings = Field(default_factory=EngineSettings)

    @model_validator(mode="after")
    def validate_wildcards(self) -> "MachineConfig":
        """The wildcard token may not double as a real state."""
        if self.any_state in self.states:
            raise ValueError(f"'{self.any_state}' is the wildcard token and cannot be a state")
        for edge in self.transitions:
            if edge.source == self.any_state and edge.target == self.any_state:
                raise ValueError("A transition cannot go from the wildcard to the wildcard")
        return self


def validate_config(config: Dict[str, Any]) -> MachineConfig:
    """Validate a raw configuration dictionary.

    Raises:
        ConfigurationError: If the configuration does not match the schema.
    """
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Machine configuration must be a mapping, got {type(config).__name__}"
        )
    try:
        return MachineConfig.model_validate(config)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid machine configuration: {e}",
            context={"errors": e.errors(include_url=False)},
        ) from e

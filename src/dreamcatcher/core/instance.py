"""Machine instances.

An instance is an immutable snapshot of one running machine: the shared
definition, the current state, a caller payload and an optional life
policy. Every operation returns a new instance (or the very same one when
a move is rejected).
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict

from dreamcatcher.core.choices import ChoiceList
from dreamcatcher.core.definition import StmDef
from dreamcatcher.core.states import is_any
from dreamcatcher.exceptions import ConfigurationError


@dataclass(frozen=True)
class LifeState:
    """Autonomous stepping policy of an instance.

    Attributes:
        alive: Whether ``act`` may advance the instance.
        choices: State -> ordered preference of next states.
    """
    alive: bool = False
    choices: Dict[Any, ChoiceList] = field(default_factory=dict)

    def choices_for(self, state: Any) -> ChoiceList | None:
        return self.choices.get(state)

    def with_choices(self, state: Any, choice_list: ChoiceList) -> "LifeState":
        """Return a copy with the list of ``state`` replaced."""
        choices = dict(self.choices)
        choices[state] = choice_list
        return replace(self, choices=choices)


@dataclass(frozen=True, eq=False)
class MachineInstance:
    """Immutable value of one machine.

    Two instances are equal when their state and data are equal and they
    share the same definition object. The life policy is not compared, so
    equality answers "did the machine change?".

    Attributes:
        definition: Shared definition store.
        state: Current state.
        data: Caller payload.
        life: Optional autonomous stepping policy.
    """
    definition: StmDef
    state: Any
    data: Any = None
    life: LifeState | None = None

    def with_data(self, data: Any) -> "MachineInstance":
        """Return a copy carrying ``data``."""
        return replace(self, data=data)

    def update_data(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> "MachineInstance":
        """Return a copy whose data is ``fn(data, *args, **kwargs)``."""
        return replace(self, data=fn(self.data, *args, **kwargs))

    def with_state(self, state: Any) -> "MachineInstance":
        """Return a copy in ``state`` without running any transition."""
        return replace(self, state=state)

    def with_life(self, life: LifeState | None) -> "MachineInstance":
        return replace(self, life=life)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MachineInstance):
            return NotImplemented
        return (
            self.definition is other.definition and
            self.state == other.state and
            self.data == other.data
        )

    # Payloads are arbitrary and possibly unhashable.
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        alive = self.life is not None and self.life.alive
        return (
            f"MachineInstance(state={self.state!r}, data={self.data!r}, "
            f"alive={alive})"
        )


def make_instance(definition: StmDef, initial_state: Any, data: Any = None) -> MachineInstance:
    """Create an instance of ``definition`` in ``initial_state``.

    Freezes the definition, since instances share it by reference.

    Raises:
        ConfigurationError: If ``initial_state`` is unknown or ``ANY``.
    """
    if not isinstance(definition, StmDef):
        raise ConfigurationError(
            f"Expected a StmDef, got {type(definition).__name__}"
        )
    if is_any(initial_state) or not definition.has_state(initial_state):
        raise ConfigurationError(
            f"Unknown initial state '{initial_state}'",
            context={"definition": definition.name, "state": initial_state},
        )
    definition.freeze()
    return MachineInstance(definition=definition, state=initial_state, data=data)


def state(instance: MachineInstance) -> Any:
    return instance.state


def data(instance: MachineInstance) -> Any:
    return instance.data


def definition(instance: MachineInstance) -> StmDef:
    return instance.definition


def state_changed(before: MachineInstance, after: MachineInstance) -> bool:
    """True when ``after`` differs from ``before`` in state, data or definition."""
    return before != after

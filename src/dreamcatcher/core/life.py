"""Life/act engine.

An instance given life carries a preference list of next states for every
state. ``act`` walks the list of the current state, trying each candidate
until a move changes the instance.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Mapping, Tuple

from dreamcatcher.config.settings import EngineSettings, get_settings
from dreamcatcher.core.choices import ChoiceList, Cyclic, Depleting
from dreamcatcher.core.guards import permits
from dreamcatcher.core.instance import LifeState, MachineInstance
from dreamcatcher.core.states import ANY
from dreamcatcher.core.transition import move
from dreamcatcher.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def default_choices(instance: MachineInstance) -> Dict[Any, ChoiceList]:
    """Cyclic list of every direct target, for every state."""
    stm = instance.definition
    return {state: Cyclic(stm.targets(state)) for state in stm.states()}


def give_life(
    instance: MachineInstance,
    overrides: Mapping[Any, ChoiceList] | None = None,
) -> MachineInstance:
    """Make ``instance`` alive with default choices plus ``overrides``.

    Args:
        instance: Instance to bring to life.
        overrides: State -> ``Depleting`` or ``Cyclic`` list replacing the
            default for that state.

    Returns:
        The instance with a fresh, alive ``LifeState``.

    Raises:
        ConfigurationError: If an override is not a ``Depleting`` or
            ``Cyclic`` list, or names an unknown state.
    """
    choices = default_choices(instance)
    for state, choice_list in (overrides or {}).items():
        if not isinstance(choice_list, (Depleting, Cyclic)):
            raise ConfigurationError(
                f"Choices for '{state}' must be Depleting or Cyclic, "
                f"got {type(choice_list).__name__}",
                context={"state": state},
            )
        if not instance.definition.has_state(state):
            raise ConfigurationError(
                f"Choices given for unknown state '{state}'",
                context={"state": state},
            )
        choices[state] = choice_list
    return instance.with_life(LifeState(alive=True, choices=choices))


def kill(instance: MachineInstance) -> MachineInstance:
    """Stop ``act`` from advancing ``instance``."""
    life = instance.life or LifeState()
    return instance.with_life(replace(life, alive=False))


def is_alive(instance: MachineInstance) -> bool:
    return instance.life is not None and instance.life.alive


def choices(instance: MachineInstance) -> Tuple[Any, ...]:
    """Preference list of the current state, without consuming it.

    Falls back to the default list when the instance has no life.
    """
    if instance.life is not None:
        choice_list = instance.life.choices_for(instance.state)
        return choice_list.states if choice_list is not None else ()
    return tuple(instance.definition.targets(instance.state))


def candidates(instance: MachineInstance) -> Tuple[Any, ...]:
    """Choices whose guards currently pass.

    Advisory only: guards are evaluated again when the move happens.
    """
    current = instance.state
    if not permits(instance, current, ANY):
        return ()
    return tuple(
        target for target in choices(instance)
        if permits(instance, current, target) and permits(instance, ANY, target)
    )


def act(instance: MachineInstance, settings: EngineSettings | None = None) -> MachineInstance:
    """Advance ``instance`` by its own choices.

    Tries the choices of the current state in order, consuming each one
    tried, and returns as soon as a move changes the instance. At most
    one pass over the list is made.

    Args:
        instance: Alive instance.
        settings: Optional bound on the attempts; defaults to the
            environment settings.

    Returns:
        The moved instance, or an instance with the same state and data
        (but an advanced choice list) when no choice could move it.

    Raises:
        ConfigurationError: If the instance is not alive.
    """
    if not is_alive(instance):
        raise ConfigurationError(
            "Instance is not alive",
            context={"state": instance.state},
        )
    settings = settings or get_settings()
    origin = instance.state
    life = instance.life
    choice_list = life.choices_for(origin)
    if choice_list is None:
        choice_list = Cyclic()

    attempts = len(choice_list)
    if settings.max_act_attempts is not None:
        attempts = min(attempts, settings.max_act_attempts)

    for _ in range(attempts):
        target = choice_list.head
        choice_list = choice_list.advance()
        moved = move(instance, target)
        if moved != instance:
            moved_life = moved.life or life
            return moved.with_life(moved_life.with_choices(origin, choice_list))
        logger.debug("Life choice %r -> %r rejected", origin, target)

    logger.info("No life choice could move the instance out of %r", origin)
    return instance.with_life(life.with_choices(origin, choice_list))

"""Guard evaluation."""

from typing import Any

from dreamcatcher.core.instance import MachineInstance


def permits(instance: MachineInstance, from_state: Any, to_state: Any) -> bool:
    """Check whether the edge ``from_state -> to_state`` may fire.

    Either endpoint may be ``ANY``. An edge without a validator is always
    permitted, as is any edge leaving a state the definition does not
    know.

    Args:
        instance: Instance the validator is evaluated against.
        from_state: Edge source.
        to_state: Edge target.

    Returns:
        The validator's verdict, or True if there is none.
    """
    validator = instance.definition.get_validator(from_state, to_state)
    if validator is None:
        return True
    return bool(validator(instance))

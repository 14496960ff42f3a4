"""Transition engine.

A move from ``current`` to ``target`` runs up to three functions in order:

1. the exit hook ``transitions[current][ANY]``
2. the direct transition ``transitions[current][target]``
3. the entry hook ``transitions[ANY][target]``

Before each step all three validators, ``(current, ANY)``,
``(current, target)`` and ``(ANY, target)``, are consulted against the
instance that step receives. A closed gate aborts the whole move and hands
back the original instance untouched.
"""

import logging
from dataclasses import replace
from typing import Any, Callable

from dreamcatcher.core.definition import StmDef
from dreamcatcher.core.guards import permits
from dreamcatcher.core.instance import MachineInstance
from dreamcatcher.core.states import ANY
from dreamcatcher.exceptions import ConfigurationError, ContractViolation

logger = logging.getLogger(__name__)


def _identity(instance: MachineInstance) -> MachineInstance:
    return instance


def _function_name(fn: Callable) -> str:
    return getattr(fn, '__qualname__', None) or getattr(fn, '__name__', None) or repr(fn)


def _gates_open(instance: MachineInstance, from_state: Any, to_state: Any) -> bool:
    return (
        permits(instance, from_state, ANY) and
        permits(instance, from_state, to_state) and
        permits(instance, ANY, to_state)
    )


def _apply(
    fn: Callable[[MachineInstance], Any],
    instance: MachineInstance,
    from_state: Any,
    to_state: Any,
) -> MachineInstance:
    result = fn(instance)
    if not isinstance(result, MachineInstance):
        raise ContractViolation(
            from_state, to_state,
            f"'{_function_name(fn)}' returned {type(result).__name__}, expected MachineInstance",
            details={"function": _function_name(fn)},
        )
    if not isinstance(result.definition, StmDef):
        raise ContractViolation(
            from_state, to_state,
            f"'{_function_name(fn)}' returned an instance without a definition",
            details={"function": _function_name(fn)},
        )
    return result


def move(instance: MachineInstance, to_state: Any) -> MachineInstance:
    """Move ``instance`` to ``to_state``.

    Args:
        instance: Instance to move.
        to_state: Target state.

    Returns:
        The new instance in ``to_state``, or ``instance`` itself when a
        validator rejected the move.

    Raises:
        ConfigurationError: If ``to_state`` is unknown or there is no
            direct transition to it from the current state.
        ContractViolation: If a transition function returns something
            other than a ``MachineInstance``.
    """
    stm = instance.definition
    from_state = instance.state

    if not stm.has_state(to_state):
        raise ConfigurationError(
            f"Unknown target state '{to_state}'",
            context={"definition": stm.name, "from_state": from_state, "to_state": to_state},
        )
    direct = stm.get_transition(from_state, to_state)
    if direct is None:
        raise ConfigurationError(
            f"No transition from '{from_state}' to '{to_state}'",
            context={"definition": stm.name, "from_state": from_state, "to_state": to_state},
        )
    out_hook = stm.get_transition(from_state, ANY) or _identity
    in_hook = stm.get_transition(ANY, to_state) or _identity

    current = instance
    for step, fn in (("exit hook", out_hook), ("direct transition", direct), ("entry hook", in_hook)):
        if not _gates_open(current, from_state, to_state):
            logger.debug("Move %r -> %r rejected before %s", from_state, to_state, step)
            return instance
        current = _apply(fn, current, from_state, to_state)

    return replace(current, state=to_state)

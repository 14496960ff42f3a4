"""Definition store for state machines.

A ``StmDef`` maps every state to its outgoing transition functions and
guard (validator) functions. It is built by repeated insertion, then
frozen as soon as an instance is created from it, after which it is
shared read-only by every instance.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Set, Tuple

from dreamcatcher.core.states import ANY, is_any
from dreamcatcher.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

TransitionFn = Callable[[Any], Any]
ValidatorFn = Callable[[Any], bool]


@dataclass
class StateEntry:
    """Outgoing functions of a single state.

    Attributes:
        transitions: Target state -> transition function.
        validators: Target state -> validator function.
    """
    transitions: Dict[Any, TransitionFn] = field(default_factory=dict)
    validators: Dict[Any, ValidatorFn] = field(default_factory=dict)


class StmDef:
    """Graph of states, transitions and validators.

    Transitions and validators may use ``ANY`` as either endpoint. ``ANY``
    always has an (implicit) entry but is never listed as a state.
    """

    def __init__(self, name: str | None = None):
        """Initialize an empty definition.

        Args:
            name: Optional name, used in error messages and descriptions.
        """
        self.name = name
        self._entries: Dict[Any, StateEntry] = {ANY: StateEntry()}
        self._frozen = False

    @classmethod
    def from_triples(
        cls,
        transitions: Iterable[Tuple[Any, Any, TransitionFn]],
        validators: Iterable[Tuple[Any, Any, ValidatorFn]] = (),
        name: str | None = None,
    ) -> "StmDef":
        """Build a definition from ``(from, to, fn)`` triples.

        Args:
            transitions: Transition triples.
            validators: Validator triples.
            name: Optional definition name.

        Returns:
            New (not yet frozen) definition.
        """
        stm = cls(name)
        for from_state, to_state, fn in transitions:
            stm.add_transition(from_state, to_state, fn)
        for from_state, to_state, fn in validators:
            stm.add_validator(from_state, to_state, fn)
        return stm

    @property
    def frozen(self) -> bool:
        """Whether the definition can still be modified."""
        return self._frozen

    def freeze(self) -> "StmDef":
        """Forbid further modification. Idempotent."""
        if not self._frozen:
            logger.debug("Freezing definition %r with %d states", self.name, len(self.states()))
        self._frozen = True
        return self

    def _check_mutable(self, operation: str) -> None:
        if self._frozen:
            raise ConfigurationError(
                f"Cannot {operation}: definition is frozen",
                context={"definition": self.name, "operation": operation},
            )

    def _entry(self, state: Any) -> StateEntry:
        try:
            hash(state)
        except TypeError as e:
            raise ConfigurationError(
                f"State identifiers must be hashable, got {type(state).__name__}",
                context={"state": repr(state)},
            ) from e
        if state not in self._entries:
            self._entries[state] = StateEntry()
        return self._entries[state]

    def add_state(self, state: Any) -> "StmDef":
        """Register a state with no outgoing edges yet."""
        self._check_mutable("add state")
        if is_any(state):
            raise ConfigurationError("ANY cannot be added as a state")
        self._entry(state)
        return self

    def add_transition(self, from_state: Any, to_state: Any, fn: TransitionFn | None = None) -> "StmDef":
        """Add (or replace) the transition function for an edge.

        Both endpoints are registered as states unless they are ``ANY``.

        Args:
            from_state: Source state or ``ANY`` (entry hook for ``to_state``).
            to_state: Target state or ``ANY`` (exit hook for ``from_state``).
            fn: Transition function; ``None`` means identity.

        Returns:
            This definition, for chaining.
        """
        self._check_mutable("add transition")
        if is_any(from_state) and is_any(to_state):
            raise ConfigurationError("A transition cannot go from ANY to ANY")
        self._entry(from_state).transitions[to_state] = fn if fn is not None else _identity
        self._entry(to_state)
        return self

    def add_validator(self, from_state: Any, to_state: Any, fn: ValidatorFn) -> "StmDef":
        """Add (or replace) the validator guarding an edge."""
        self._check_mutable("add validator")
        if not callable(fn):
            raise ConfigurationError(
                "Validator must be callable",
                context={"from_state": from_state, "to_state": to_state},
            )
        self._entry(from_state).validators[to_state] = fn
        return self

    def remove_transition(self, from_state: Any, to_state: Any) -> "StmDef":
        """Remove an edge's transition function; states stay registered."""
        self._check_mutable("remove transition")
        entry = self._entries.get(from_state)
        if entry is None or to_state not in entry.transitions:
            raise ConfigurationError(
                f"No transition from '{from_state}' to '{to_state}'",
                context={"from_state": from_state, "to_state": to_state},
            )
        del entry.transitions[to_state]
        return self

    def remove_validator(self, from_state: Any, to_state: Any) -> "StmDef":
        """Remove an edge's validator."""
        self._check_mutable("remove validator")
        entry = self._entries.get(from_state)
        if entry is None or to_state not in entry.validators:
            raise ConfigurationError(
                f"No validator from '{from_state}' to '{to_state}'",
                context={"from_state": from_state, "to_state": to_state},
            )
        del entry.validators[to_state]
        return self

    def states(self) -> List[Any]:
        """All states in insertion order, excluding ``ANY``."""
        return [state for state in self._entries if not is_any(state)]

    def has_state(self, state: Any) -> bool:
        """Check if ``state`` is a known (non-wildcard) state."""
        if is_any(state):
            return False
        try:
            return state in self._entries
        except TypeError:
            return False

    def entry(self, state: Any) -> StateEntry | None:
        """The entry of ``state`` (``ANY`` included), or None."""
        try:
            return self._entries.get(state)
        except TypeError:
            return None

    def transitions(self, state: Any) -> Dict[Any, TransitionFn]:
        """Copy of the outgoing transitions of ``state``."""
        entry = self.entry(state)
        return dict(entry.transitions) if entry else {}

    def validators(self, state: Any) -> Dict[Any, ValidatorFn]:
        """Copy of the outgoing validators of ``state``."""
        entry = self.entry(state)
        return dict(entry.validators) if entry else {}

    def get_transition(self, from_state: Any, to_state: Any) -> TransitionFn | None:
        entry = self.entry(from_state)
        return entry.transitions.get(to_state) if entry else None

    def get_validator(self, from_state: Any, to_state: Any) -> ValidatorFn | None:
        entry = self.entry(from_state)
        return entry.validators.get(to_state) if entry else None

    def has_transition(self, from_state: Any, to_state: Any) -> bool:
        entry = self.entry(from_state)
        return entry is not None and to_state in entry.transitions

    def targets(self, state: Any) -> List[Any]:
        """Direct targets of ``state`` in insertion order, excluding ``ANY``."""
        entry = self.entry(state)
        if entry is None:
            return []
        return [target for target in entry.transitions if not is_any(target)]

    def reachable_states(self, start: Any) -> Set[Any]:
        """Find all states reachable from ``start`` over direct transitions.

        Args:
            start: Starting state.

        Returns:
            Set of reachable states, including ``start``.
        """
        reachable: Set[Any] = set()
        to_visit = [start]

        while to_visit:
            current = to_visit.pop()
            if current in reachable:
                continue
            reachable.add(current)
            for target in self.targets(current):
                if target not in reachable:
                    to_visit.append(target)

        return reachable

    def to_dict(self) -> Dict[str, Any]:
        """Describe the graph by state names only.

        ``ANY`` is rendered as ``"*"``.

        Returns:
            Dictionary with ``name``, ``states``, ``transitions`` and
            ``validators`` (the latter two as ``[from, to]`` pairs).
        """
        def label(state: Any) -> Any:
            return "*" if is_any(state) else state

        return {
            'name': self.name,
            'states': self.states(),
            'transitions': [
                [label(source), label(target)]
                for source, entry in self._entries.items()
                for target in entry.transitions
            ],
            'validators': [
                [label(source), label(target)]
                for source, entry in self._entries.items()
                for target in entry.validators
            ],
        }

    def __repr__(self) -> str:
        return f"StmDef({self.name!r}, {len(self.states())} states)"


def _identity(instance: Any) -> Any:
    return instance

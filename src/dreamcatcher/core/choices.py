"""Choice lists used by the life/act engine.

The kind of a list decides what happens to its head once consumed:

- ``Depleting``: the head is dropped; an empty list offers no more moves.
- ``Cyclic``: the head goes back to the tail, rotating forever.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Tuple


@dataclass(frozen=True, init=False)
class ChoiceList:
    """Immutable, ordered preference list of next states.

    Only ``Depleting`` and ``Cyclic`` carry a kind; a bare ``ChoiceList``
    cannot be advanced and is refused by ``give_life``.
    """

    states: Tuple[Any, ...]

    def __init__(self, states: Iterable[Any] = ()):
        object.__setattr__(self, "states", tuple(states))

    @property
    def head(self) -> Any | None:
        """The preferred next state, or None when the list is empty."""
        return self.states[0] if self.states else None

    def advance(self) -> "ChoiceList":
        """Return the list after its head has been consumed."""
        raise NotImplementedError

    def __iter__(self) -> Iterator[Any]:
        return iter(self.states)

    def __len__(self) -> int:
        return len(self.states)

    def __bool__(self) -> bool:
        return bool(self.states)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self.states)!r})"


@dataclass(frozen=True, init=False, repr=False)
class Depleting(ChoiceList):
    """Consumed front to back, never replenished."""

    def advance(self) -> "Depleting":
        return Depleting(self.states[1:])


@dataclass(frozen=True, init=False, repr=False)
class Cyclic(ChoiceList):
    """Consumed front to back with each head re-queued at the tail."""

    def advance(self) -> "Cyclic":
        if not self.states:
            return self
        return Cyclic(self.states[1:] + self.states[:1])

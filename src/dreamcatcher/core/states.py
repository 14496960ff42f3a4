"""The wildcard pseudo-state."""

from typing import Any


class _AnyState:
    """Singleton standing for "every state" as a transition endpoint.

    ``transitions[s][ANY]`` is an exit hook run whenever the machine leaves
    ``s``; ``transitions[ANY][t]`` is an entry hook run whenever it enters
    ``t``. The same holds for validators. ``ANY`` is never the current state
    of an instance.
    """

    _instance = None

    def __new__(cls) -> "_AnyState":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ANY"

    def __reduce__(self) -> Any:
        return (_AnyState, ())


ANY = _AnyState()


def is_any(state: Any) -> bool:
    """Check whether ``state`` is the wildcard."""
    return state is ANY

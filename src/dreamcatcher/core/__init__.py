"""Core engine components."""

from dreamcatcher.core.choices import ChoiceList, Cyclic, Depleting
from dreamcatcher.core.definition import StateEntry, StmDef
from dreamcatcher.core.guards import permits
from dreamcatcher.core.instance import (
    LifeState,
    MachineInstance,
    data,
    definition,
    make_instance,
    state,
    state_changed,
)
from dreamcatcher.core.life import (
    act,
    candidates,
    choices,
    give_life,
    is_alive,
    kill,
)
from dreamcatcher.core.paths import (
    NotReachable,
    TransitionCache,
    find_paths,
    paths_to,
    reach_state,
)
from dreamcatcher.core.states import ANY
from dreamcatcher.core.transition import move

__all__ = [
    "ANY",
    # Definition
    "StmDef",
    "StateEntry",
    # Instances
    "MachineInstance",
    "LifeState",
    "make_instance",
    "state",
    "data",
    "definition",
    "state_changed",
    # Transitions
    "permits",
    "move",
    # Life
    "ChoiceList",
    "Depleting",
    "Cyclic",
    "give_life",
    "kill",
    "is_alive",
    "act",
    "choices",
    "candidates",
    # Paths
    "find_paths",
    "paths_to",
    "reach_state",
    "NotReachable",
    "TransitionCache",
]

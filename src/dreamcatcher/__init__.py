"""Dreamcatcher: a small finite state machine engine.

Machines are declared as a graph of transition and validator functions,
driven through immutable instances, optionally left to act on their own,
and searched for paths between states.
"""

__version__ = "1.0.2"

from .core import (
    ANY,
    ChoiceList,
    Cyclic,
    Depleting,
    LifeState,
    MachineInstance,
    NotReachable,
    StateEntry,
    StmDef,
    TransitionCache,
    act,
    candidates,
    choices,
    data,
    definition,
    find_paths,
    give_life,
    is_alive,
    kill,
    make_instance,
    move,
    paths_to,
    permits,
    reach_state,
    state,
    state_changed,
)
from .config.loader import MachineLoader, load_machine
from .config.settings import EngineSettings, get_settings
from .exceptions import ConfigurationError, ContractViolation, DreamcatcherError

__all__ = [
    "__version__",
    # Core
    "ANY",
    "StmDef",
    "StateEntry",
    "MachineInstance",
    "LifeState",
    "make_instance",
    "state",
    "data",
    "definition",
    "state_changed",
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
    # Config
    "EngineSettings",
    "get_settings",
    "MachineLoader",
    "load_machine",
    # Errors
    "DreamcatcherError",
    "ConfigurationError",
    "ContractViolation",
]

"""Path search over the transition graph.

``find_paths`` enumerates simple paths between two states, counting the
entry hooks of ``ANY`` as edges available from every state unless asked
for direct transitions only. ``reach_state`` walks the direct paths with
real moves, shortest first, until one arrives.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from dreamcatcher.config.settings import EngineSettings, get_settings
from dreamcatcher.core.definition import StmDef
from dreamcatcher.core.instance import MachineInstance
from dreamcatcher.core.states import ANY
from dreamcatcher.core.transition import move
from dreamcatcher.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

Path = Tuple[Any, ...]


def _neighbours(definition: StmDef, state: Any, wildcard: List[Any]) -> List[Any]:
    neighbours = definition.targets(state)
    neighbours.extend(target for target in wildcard if target not in neighbours)
    return neighbours


def find_paths(
    definition: StmDef,
    start: Any,
    target: Any,
    include_wildcard: bool = True,
    settings: EngineSettings | None = None,
) -> List[Path]:
    """Enumerate simple paths from ``start`` to ``target``.

    Paths are extended breadth first, one hop per round, until no path can
    grow any further. A state never appears twice in a path and ``start``
    is never revisited; the same state may still show up in many
    different paths.

    Args:
        definition: Graph to search.
        start: Starting state (not included in the paths).
        target: State every returned path ends with.
        include_wildcard: Count ``ANY -> s`` transitions as edges from
            every state.
        settings: Optional caps on path length and count; defaults to
            the environment settings.

    Returns:
        Paths as tuples of states, shortest first. Empty when ``start``
        equals ``target`` or ``target`` cannot be reached.

    Raises:
        ConfigurationError: If ``start`` or ``target`` is unknown.
    """
    for state in (start, target):
        if not definition.has_state(state):
            raise ConfigurationError(
                f"Unknown state '{state}'",
                context={"definition": definition.name, "state": state},
            )
    if start == target:
        return []

    settings = settings or get_settings()
    max_length = settings.max_path_length
    max_paths = settings.max_paths
    wildcard = definition.targets(ANY) if include_wildcard else []

    found: List[Path] = []
    frontier: List[Path] = [()]
    while frontier:
        extended: List[Path] = []
        for path in frontier:
            current = path[-1] if path else start
            for nxt in _neighbours(definition, current, wildcard):
                if nxt == start or nxt in path:
                    continue
                candidate = path + (nxt,)
                if nxt == target:
                    found.append(candidate)
                    if max_paths is not None and len(found) >= max_paths:
                        logger.debug("Path search %r -> %r capped at %d paths", start, target, max_paths)
                        return found
                elif max_length is None or len(candidate) < max_length:
                    extended.append(candidate)
        frontier = extended

    return found


def paths_to(
    instance: MachineInstance,
    target: Any,
    include_wildcard: bool = False,
    settings: EngineSettings | None = None,
) -> List[Path]:
    """Paths from the current state of ``instance`` to ``target``.

    Only direct transitions count as edges unless ``include_wildcard`` is
    set, so every hop of a returned path is one ``move`` can take.
    """
    return find_paths(instance.definition, instance.state, target, include_wildcard, settings)


class TransitionCache:
    """Memo of ``move`` results for one traversal.

    Entries are keyed by ``(source state, next state)`` and matched on
    full instance equality, so payloads need not be hashable. Only valid
    while transition functions are deterministic in state and data.
    """

    def __init__(self) -> None:
        self._entries: Dict[Tuple[Any, Any], List[Tuple[MachineInstance, MachineInstance]]] = {}
        self.hits = 0
        self.misses = 0

    def move(self, instance: MachineInstance, to_state: Any) -> MachineInstance:
        """``move(instance, to_state)``, reusing a previous identical move."""
        bucket = self._entries.setdefault((instance.state, to_state), [])
        for source, result in bucket:
            if source == instance:
                self.hits += 1
                logger.debug("Cached move %r -> %r", instance.state, to_state)
                return result
        self.misses += 1
        result = move(instance, to_state)
        bucket.append((instance, result))
        return result

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._entries.values())


@dataclass(frozen=True)
class NotReachable:
    """Outcome of a ``reach_state`` call that found no working path.

    Falsy, so callers can write ``if result := reach_state(...)``.

    Attributes:
        instance: The instance the search started from.
        target: The requested state.
        paths_tried: How many candidate paths were walked.
    """
    instance: MachineInstance
    target: Any
    paths_tried: int = 0

    def __bool__(self) -> bool:
        return False


def reach_state(
    instance: MachineInstance,
    target: Any,
    settings: EngineSettings | None = None,
) -> MachineInstance | NotReachable:
    """Drive ``instance`` to ``target`` along the first path that works.

    Only direct transitions are followed; ``ANY`` entry hooks run as part
    of the moves but never stand in for a missing edge. Paths are tried
    shortest first and a path is abandoned as soon as a move ends anywhere
    but the expected hop. Moves shared by several paths run only once.

    Args:
        instance: Starting instance.
        target: Desired state.
        settings: Optional caps for the path search.

    Returns:
        The instance in ``target``, or ``NotReachable``. An instance that
        is already in ``target`` is returned as is rather than reported
        unreachable, even though no path leads to it.

    Raises:
        ConfigurationError: If ``target`` is unknown.
    """
    if instance.state == target and instance.definition.has_state(target):
        return instance

    paths = paths_to(instance, target, settings=settings)
    cache = TransitionCache()

    for path in paths:
        current = instance
        for hop in path:
            moved = cache.move(current, hop)
            if moved.state != hop:
                logger.debug("Abandoning path %r: move %r -> %r was rejected", path, current.state, hop)
                break
            current = moved
        else:
            return current

    logger.debug("State %r not reachable from %r (%d paths tried)", target, instance.state, len(paths))
    return NotReachable(instance=instance, target=target, paths_tried=len(paths))

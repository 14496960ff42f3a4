"""Pytest configuration and shared fixtures for dreamcatcher tests."""

import pytest
from pathlib import Path
import sys

from typing import Any

# Add src to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from dreamcatcher import ANY, MachineInstance, StmDef  # noqa: E402


def incr(instance: MachineInstance) -> MachineInstance:
    """Transition adding one to the payload."""
    return instance.update_data(lambda value: value + 1)


def visit(label: Any):
    """Transition appending ``label`` to a tuple payload."""
    def _visit(instance: MachineInstance) -> MachineInstance:
        return instance.with_data(instance.data + (label,))
    _visit.__name__ = f"visit_{label}"
    return _visit


def never(instance: MachineInstance) -> bool:
    return False


@pytest.fixture
def abc_machine():
    """A -> B -> C, each step incrementing the payload."""
    return StmDef.from_triples(
        [("A", "B", incr), ("B", "C", incr)],
        name="abc",
    )


@pytest.fixture
def hub_machine():
    """S fans out to X and Y, both of which lead back to S."""
    return StmDef.from_triples(
        [
            ("S", "X", visit("X")),
            ("S", "Y", visit("Y")),
            ("X", "S", visit("S")),
            ("Y", "S", visit("S")),
        ],
        name="hub",
    )


@pytest.fixture
def hooked_machine():
    """A -> B with an exit hook on A and an entry hook on B."""
    return StmDef.from_triples(
        [
            ("A", ANY, visit("out")),
            ("A", "B", visit("direct")),
            (ANY, "B", visit("in")),
        ],
        name="hooked",
    )

"""Tests for path search and traversal."""

import pytest

from dreamcatcher import (
    ANY,
    EngineSettings,
    NotReachable,
    StmDef,
    TransitionCache,
    find_paths,
    make_instance,
    paths_to,
    reach_state,
)
from dreamcatcher.exceptions import ConfigurationError

from conftest import incr, never, visit


def _graph(*edges, validators=()):
    return StmDef.from_triples(
        [(source, target, visit(target)) for source, target in edges],
        validators,
    )


class TestFindPaths:
    """Test path enumeration."""

    def test_single_path(self):
        """Test a graph with one path of length 2."""
        stm = _graph(("A", "B"), ("B", "D"), ("C", "A"))

        assert find_paths(stm, "A", "D") == [("B", "D")]

    def test_shortest_first(self):
        """Test that paths come back sorted by length."""
        stm = _graph(
            ("A", "B"), ("B", "C"), ("C", "D"),
            ("B", "D"), ("A", "D"),
        )

        assert find_paths(stm, "A", "D") == [("D",), ("B", "D"), ("B", "C", "D")]

    def test_no_repeated_states(self):
        """Test that cycles never produce repeated states."""
        stm = _graph(
            ("A", "B"), ("B", "A"), ("B", "C"),
            ("C", "A"), ("C", "B"), ("C", "D"), ("B", "D"),
        )

        found = find_paths(stm, "A", "D")

        assert found == [("B", "D"), ("B", "C", "D")]
        for path in found:
            assert len(set(path)) == len(path)
            assert "A" not in path

    def test_same_state_in_independent_paths(self):
        """Test that cycle prevention is per path."""
        stm = _graph(("A", "B"), ("A", "C"), ("B", "C"), ("C", "B"), ("B", "D"), ("C", "D"))

        found = find_paths(stm, "A", "D")

        assert found[:2] == [("B", "D"), ("C", "D")]
        assert set(found[2:]) == {("B", "C", "D"), ("C", "B", "D")}

    def test_wildcard_edges(self):
        """Test that entry hooks count as edges from every state."""
        stm = _graph(("A", "B"), (ANY, "D"))

        assert find_paths(stm, "A", "D") == [("D",), ("B", "D")]
        assert find_paths(stm, "B", "D") == [("D",)]
        assert find_paths(stm, "A", "D", include_wildcard=False) == []

    def test_exit_hooks_are_not_edges(self):
        """Test that ANY as a target never becomes a path node."""
        stm = _graph(("A", "B"))
        stm.add_transition("A", ANY, incr)

        assert find_paths(stm, "A", "B") == [("B",)]

    def test_start_equals_target(self, abc_machine):
        """Test that no path is needed to stay put."""
        assert find_paths(abc_machine, "A", "A") == []

    def test_unreachable(self, abc_machine):
        """Test a target upstream of the start."""
        assert find_paths(abc_machine, "C", "A") == []

    def test_unknown_states(self, abc_machine):
        """Test searching with unknown endpoints."""
        with pytest.raises(ConfigurationError):
            find_paths(abc_machine, "A", "Z")
        with pytest.raises(ConfigurationError):
            find_paths(abc_machine, ANY, "C")

    def test_caps(self):
        """Test the path count and length safety valves."""
        stm = _graph(
            ("A", "B"), ("B", "C"), ("C", "D"),
            ("B", "D"), ("A", "D"),
        )

        assert find_paths(stm, "A", "D", settings=EngineSettings(max_paths=2)) == [
            ("D",), ("B", "D"),
        ]
        assert find_paths(stm, "A", "D", settings=EngineSettings(max_path_length=2)) == [
            ("D",), ("B", "D"),
        ]

    def test_paths_to_uses_current_state(self, abc_machine):
        """Test the instance-level wrapper."""
        instance = make_instance(abc_machine, "B", 0)

        assert paths_to(instance, "C") == [("C",)]

    def test_paths_to_follows_direct_transitions(self):
        """Test that entry hooks are not edges unless asked for."""
        stm = _graph(("A", "B"), ("B", "C"), (ANY, "D"))
        instance = make_instance(stm, "A", ())

        assert paths_to(instance, "D") == []
        assert paths_to(instance, "D", include_wildcard=True) == [
            ("D",), ("B", "D"), ("B", "C", "D"),
        ]


class TestReachState:
    """Test best-effort traversal."""

    def test_reaches_target(self, abc_machine):
        """Test walking a plain path."""
        instance = make_instance(abc_machine, "A", 0)

        result = reach_state(instance, "C")

        assert result.state == "C"
        assert result.data == 2

    def test_shortest_successful_path(self):
        """Test that a blocked shorter path falls back to a longer one."""
        stm = _graph(
            ("A", "B"), ("B", "D"),
            ("A", "C"), ("C", "E"), ("E", "D"),
            validators=[("B", "D", never)],
        )
        instance = make_instance(stm, "A", ())

        result = reach_state(instance, "D")

        assert result.state == "D"
        assert result.data == ("C", "E", "D")

    def test_all_paths_blocked(self):
        """Test that guards on every path give NotReachable."""
        stm = _graph(
            ("A", "B"), ("B", "D"), ("A", "D"),
            validators=[("A", ANY, never)],
        )
        instance = make_instance(stm, "A", ())

        result = reach_state(instance, "D")

        assert isinstance(result, NotReachable)
        assert not result
        assert result.instance is instance
        assert result.target == "D"
        assert result.paths_tried == 2

    def test_no_path_at_all(self, abc_machine):
        """Test a target with no path."""
        instance = make_instance(abc_machine, "C", 0)

        result = reach_state(instance, "A")

        assert isinstance(result, NotReachable)
        assert result.paths_tried == 0

    def test_already_there(self, abc_machine):
        """Test reaching the current state."""
        instance = make_instance(abc_machine, "B", 0)

        assert reach_state(instance, "B") is instance

    def test_unknown_target(self, abc_machine):
        """Test that unknown targets stay configuration errors."""
        instance = make_instance(abc_machine, "A", 0)

        with pytest.raises(ConfigurationError):
            reach_state(instance, "Z")

    def test_entry_hook_is_not_an_edge(self):
        """Test that only direct transitions are walked."""
        stm = _graph(("A", "B"), ("B", "D"), (ANY, "D"))
        instance = make_instance(stm, "A", ())

        result = reach_state(instance, "D")

        assert result.state == "D"
        # B -> D runs the direct transition and the entry hook of D
        assert result.data == ("B", "D", "D")

    def test_entry_hook_alone_is_not_reachable(self):
        """Test that a target with only an entry hook is unreachable."""
        stm = _graph(("A", "B"), ("B", "C"), (ANY, "D"))
        instance = make_instance(stm, "A", ())

        result = reach_state(instance, "D")

        assert isinstance(result, NotReachable)
        assert result.paths_tried == 0

    def test_shared_prefix_runs_once(self):
        """Test that a hop shared by two paths executes a single time."""
        calls = []

        def tracked(instance):
            calls.append(instance.state)
            return instance.with_data(instance.data + ("Q",))

        stm = StmDef.from_triples(
            [
                ("P", "Q", tracked),
                ("Q", "X", visit("X")),
                ("Q", "Y", visit("Y")),
                ("X", "T", visit("T")),
                ("Y", "T", visit("T")),
            ],
            [("X", "T", never)],
        )
        instance = make_instance(stm, "P", ())

        result = reach_state(instance, "T")

        assert result.state == "T"
        assert result.data == ("Q", "Y", "T")
        assert calls == ["P"]


class TestTransitionCache:
    """Test move memoization."""

    def test_hits_on_equal_instances(self):
        """Test that equal source instances share a result."""
        def bump(i):
            return i.with_data({"n": i.data["n"] + 1})

        cache = TransitionCache()
        instance = make_instance(StmDef.from_triples([("A", "B", bump)]), "A", {"n": 0})

        first = cache.move(instance, "B")
        second = cache.move(instance.with_data({"n": 0}), "B")

        assert second is first
        assert cache.hits == 1
        assert cache.misses == 1
        assert len(cache) == 1

    def test_misses_on_different_data(self, abc_machine):
        """Test that a different payload is a different entry."""
        cache = TransitionCache()
        instance = make_instance(abc_machine, "A", 0)

        cache.move(instance, "B")
        result = cache.move(instance.with_data(5), "B")

        assert result.data == 6
        assert cache.misses == 2
        assert len(cache) == 2

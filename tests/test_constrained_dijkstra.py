"""Tests for the stepwise engine in runpath.core.constrained_dijkstra."""

from __future__ import annotations

import pytest

from runpath.core.constrained_dijkstra import ConstrainedDijkstra
from runpath.core.errors import SearchBudgetExceeded
from runpath.core.types import Direction, Grid, State


def _engine(grid, start=(0, 0), goal=None, min_run=1, max_run=3) -> ConstrainedDijkstra:
    algo = ConstrainedDijkstra(min_run=min_run, max_run=max_run)
    algo.init(grid, start, grid.corners()[1] if goal is None else goal)
    return algo


class TestLifecycle:
    def test_idle_before_init(self) -> None:
        res = ConstrainedDijkstra().step()
        assert res.status == "idle"
        assert not res.terminal

    def test_initialized_seeds_start_state(self, sample_grid) -> None:
        algo = _engine(sample_grid)
        assert algo.status == "initialized"
        assert algo.g == {State((0, 0), Direction.NONE): 0}
        assert len(algo.open_pq) == 1

    def test_first_step_expands_start(self, sample_grid) -> None:
        algo = _engine(sample_grid)
        res = algo.step()
        assert res.status == "expanding"
        assert res.closed == [(0, 0)]
        assert sorted(res.opened) == [(0, 1), (0, 2), (0, 3), (1, 0), (2, 0), (3, 0)]
        assert res.metrics["frontier_size"] == 6

    def test_run_to_goal(self, sample_grid) -> None:
        algo = _engine(sample_grid)
        res = algo.run()
        assert res.status == "goal_found"
        assert res.terminal
        assert algo.cost == 102
        assert res.metrics["total_cost"] == 102
        assert res.path[0] == (0, 0)
        assert res.path[-1] == (12, 12)
        assert res.metrics["path_len"] == len(res.path)

    def test_goal_found_is_sticky(self, sample_grid) -> None:
        algo = _engine(sample_grid)
        algo.run()
        popped = algo.popped_count
        again = algo.step()
        assert again.status == "goal_found"
        assert algo.popped_count == popped
        assert again.path == algo.path()

    def test_exhausted_is_sticky(self) -> None:
        algo = _engine(Grid.from_rows([[1, 2, 3]]), min_run=4, max_run=10)
        assert algo.step().status == "expanding"   # start popped, nothing fits
        assert algo.step().status == "exhausted"
        assert algo.step().status == "exhausted"
        assert algo.cost is None
        assert algo.path() == []

    def test_reset_restarts_search(self, sample_grid) -> None:
        algo = _engine(sample_grid)
        algo.run()
        algo.reset()
        assert algo.status == "initialized"
        assert algo.popped_count == 0
        assert algo.goal_state is None
        assert algo.run().metrics["total_cost"] == 102

    def test_start_equals_goal(self) -> None:
        algo = _engine(Grid.from_rows([[7]]), goal=(0, 0))
        res = algo.step()
        assert res.status == "goal_found"
        assert res.path == [(0, 0)]
        assert algo.cost == 0


class TestDominance:
    def test_stale_entry_is_skipped(self, sample_grid) -> None:
        algo = _engine(sample_grid)
        s = State((5, 5), Direction.UP)
        algo.open_pq[:] = [(7, 99, s)]
        algo.g[s] = 3
        res = algo.step()
        assert res.status == "expanding"
        assert res.closed == []
        assert res.current == s
        assert algo.stale_count == 1
        assert s not in algo.closed_set

    def test_equal_cost_entry_is_expanded(self, sample_grid) -> None:
        algo = _engine(sample_grid)
        s = State((5, 5), Direction.UP)
        algo.open_pq[:] = [(7, 99, s)]
        algo.g[s] = 7
        res = algo.step()
        assert res.closed == [(5, 5)]
        assert algo.stale_count == 0
        assert {c[1] for c in res.opened} == {5}

    def test_table_only_improves(self, sample_grid) -> None:
        algo = _engine(sample_grid, max_run=3)
        seen = {}
        while not algo.step().terminal:
            for state, cost in algo.g.items():
                assert cost <= seen.get(state, cost)
                seen[state] = cost

    def test_heap_accounting(self, sample_grid) -> None:
        algo = _engine(sample_grid, min_run=4, max_run=10)
        res = algo.run()
        assert res.metrics["total_cost"] == 94
        assert algo.pushed_count == algo.popped_count + len(algo.open_pq)
        assert res.metrics["expanded"] + res.metrics["stale"] + 1 == res.metrics["popped"]


class TestBudget:
    def test_budget_exceeded(self, sample_grid) -> None:
        algo = _engine(sample_grid)
        with pytest.raises(SearchBudgetExceeded) as info:
            algo.run(max_pops=5)
        assert info.value.max_pops == 5
        assert algo.popped_count == 5

    def test_generous_budget_is_fine(self, sample_grid) -> None:
        assert _engine(sample_grid).run(max_pops=100_000).status == "goal_found"

    def test_exhausted_within_budget(self) -> None:
        algo = _engine(Grid.from_rows([[1, 2, 3]]), min_run=4, max_run=10)
        assert algo.run(max_pops=1).status == "exhausted"
        assert algo.popped_count == 1

    def test_goal_on_last_allowed_pop(self) -> None:
        grid = Grid.from_rows([[1, 1]])
        assert _engine(grid, goal=(1, 0)).run(max_pops=2).status == "goal_found"
        with pytest.raises(SearchBudgetExceeded):
            _engine(grid, goal=(1, 0)).run(max_pops=1)


def test_runs_alternate_direction(sample_grid) -> None:
    algo = _engine(sample_grid, min_run=4, max_run=10)
    algo.run()
    runs = algo.runs()
    assert runs[0] == State((0, 0), Direction.NONE)
    for prev, nxt in zip(runs[1:], runs[2:]):
        assert nxt.direction in prev.direction.perpendicular()

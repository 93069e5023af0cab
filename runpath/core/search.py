# runpath/core/search.py
#!/usr/bin/env python3
"""
Query driver: validate one query, run the engine, hand back the cost.

Each call builds its own ConstrainedDijkstra, so nothing is shared between
calls and independent searches can run side by side.
"""

import logging
from typing import Any, Optional

from runpath.core.constrained_dijkstra import ConstrainedDijkstra
from runpath.core.errors import InvalidConfiguration, Unreachable
from runpath.core.types import Cell, Cost, Grid, Scenario, SearchResult

log = logging.getLogger(__name__)


def validate_run_bounds(min_run: Any, max_run: Any) -> None:
    for label, v in (("min_run", min_run), ("max_run", max_run)):
        if isinstance(v, bool) or not isinstance(v, int):
            raise InvalidConfiguration(f"{label} must be an integer, got {v!r}")
    if min_run < 1:
        raise InvalidConfiguration(f"min_run must be >= 1, got {min_run}")
    if min_run > max_run:
        raise InvalidConfiguration(f"min_run ({min_run}) exceeds max_run ({max_run})")


def _check_cell(grid: Grid, c: Any, label: str) -> Cell:
    try:
        x, y = c
    except (TypeError, ValueError):
        raise InvalidConfiguration(f"{label} must be an (x, y) pair, got {c!r}") from None
    if any(isinstance(v, bool) or not isinstance(v, int) for v in (x, y)):
        raise InvalidConfiguration(f"{label} coordinates must be integers, got {c!r}")
    if not grid.in_bounds((x, y)):
        raise InvalidConfiguration(f"{label} {(x, y)} outside {grid.width}x{grid.height} grid")
    return (x, y)


def search_path(grid: Grid, start: Optional[Cell] = None, goal: Optional[Cell] = None,
                min_run: int = 1, max_run: int = 3, max_pops: Optional[int] = None) -> SearchResult:
    """Cheapest route from start to goal with straight runs of min_run..max_run cells.

    start/goal default to the top-left and bottom-right corners. Raises
    InvalidConfiguration before searching, Unreachable when no route exists and
    SearchBudgetExceeded when max_pops pops were not enough.
    """
    validate_run_bounds(min_run, max_run)
    if max_pops is not None and (isinstance(max_pops, bool) or not isinstance(max_pops, int)
                                 or max_pops < 1):
        raise InvalidConfiguration(f"max_pops must be a positive integer, got {max_pops!r}")
    top_left, bottom_right = grid.corners()
    start = _check_cell(grid, top_left if start is None else start, "start")
    goal = _check_cell(grid, bottom_right if goal is None else goal, "goal")

    algo = ConstrainedDijkstra(min_run=min_run, max_run=max_run)
    algo.init(grid, start, goal)
    res = algo.run(max_pops=max_pops)
    if res.status != "goal_found":
        raise Unreachable(start, goal, min_run, max_run, expanded=len(algo.closed_set))

    return SearchResult(cost=algo.cost, path=res.path or [], runs=algo.runs(), metrics=res.metrics)


def search(grid: Grid, start: Optional[Cell] = None, goal: Optional[Cell] = None,
           min_run: int = 1, max_run: int = 3, max_pops: Optional[int] = None) -> Cost:
    """Minimal total cost only; see search_path for the arguments and errors."""
    return search_path(grid, start, goal, min_run, max_run, max_pops).cost


def search_scenario(scenario: Scenario, max_pops: Optional[int] = None) -> SearchResult:
    log.debug("running scenario %s", scenario.name)
    return search_path(scenario.grid, scenario.start, scenario.goal,
                       scenario.min_run, scenario.max_run, max_pops)

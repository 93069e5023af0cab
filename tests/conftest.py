from __future__ import annotations

from math import inf
from random import Random

import pytest

from runpath.core.maps import parse_grid
from runpath.core.types import MOVES, Grid

SAMPLE = """\
2413432311323
3215453535623
3255245654254
3446585845452
4546657867536
1438598798454
4457876987766
3637877979653
4654967986887
4564679986453
1224686865563
2546548887735
4322674655533
"""

WIDE_VALLEY = """\
111111111111
999999999991
999999999991
999999999991
999999999991
"""


@pytest.fixture
def sample_text() -> str:
    return SAMPLE


@pytest.fixture
def sample_grid() -> Grid:
    return parse_grid(SAMPLE)


@pytest.fixture
def wide_valley_grid() -> Grid:
    return parse_grid(WIDE_VALLEY)


@pytest.fixture
def make_random_grid():
    def make(width: int, height: int, seed: int, lo: int = 0, hi: int = 9) -> Grid:
        rng = Random(seed)
        return Grid.from_rows([[rng.randint(lo, hi) for _ in range(width)] for _ in range(height)])
    return make


@pytest.fixture
def walk_oracle():
    return _walk_oracle


def _walk_oracle(grid: Grid, start, goal, min_run: int, max_run: int):
    """Exhaustive single-cell-step search carrying a run counter; inf when no route."""
    if start == goal:
        return 0
    best = inf
    seen = {}
    stack = [(start, None, 0, 0)]  # cell, direction, run so far, cost
    while stack:
        cell, d, run, cost = stack.pop()
        if cost >= best:
            continue
        if cell == goal and run >= min_run:
            best = cost
            continue
        key = (cell, d, run)
        if seen.get(key, inf) <= cost:
            continue
        seen[key] = cost
        for nd in MOVES:
            if d is not None:
                if nd is d.opposite():
                    continue
                if nd is d and run >= max_run:
                    continue
                if nd is not d and run < min_run:
                    continue
            dx, dy = nd.delta
            nxt = (cell[0] + dx, cell[1] + dy)
            if not grid.in_bounds(nxt):
                continue
            stack.append((nxt, nd, run + 1 if nd is d else 1, cost + grid.cost_of(nxt)))
    return best

# runpath/core/successors.py
#!/usr/bin/env python3
"""
Successor generation for run-constrained moves.

One edge = turn, then travel L straight cells (min_run <= L <= max_run).
Because a whole run is bundled into one edge, the state never needs a
run-length counter: after a run the only legal moves are the two
perpendicular directions.
"""

from typing import List, NamedTuple, Tuple

from runpath.core.types import MOVES, Cell, Cost, Direction, Grid, State


class Edge(NamedTuple):
    target: State
    cost: Cost      # sum of the cells entered, start cell excluded
    length: int


def next_directions(d: Direction) -> Tuple[Direction, ...]:
    """Directions a new run may take after a run in direction d."""
    if d is Direction.NONE:
        return MOVES
    return d.perpendicular()


def successors(grid: Grid, state: State, min_run: int, max_run: int) -> List[Edge]:
    x, y = state.cell
    out: List[Edge] = []
    for d in next_directions(state.direction):
        dx, dy = d.delta
        total: Cost = 0
        for m in range(1, max_run + 1):
            nxt: Cell = (x + dx * m, y + dy * m)
            cost = grid.get(nxt)
            if cost is None:
                break   # longer runs would leave the grid too
            total += cost
            if m < min_run:
                continue
            out.append(Edge(State(nxt, d), total, m))
    return out


def run_cells(start: Cell, target: State) -> List[Cell]:
    """Cells entered by the run that ends in `target`, in walking order."""
    (sx, sy), (tx, ty) = start, target.cell
    dx, dy = target.direction.delta
    n = abs(tx - sx) + abs(ty - sy)
    return [(sx + dx * i, sy + dy * i) for i in range(1, n + 1)]

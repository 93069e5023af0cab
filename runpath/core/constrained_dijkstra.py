# runpath/core/constrained_dijkstra.py
#!/usr/bin/env python3
"""
Dijkstra over (cell, last-run direction) states, one pop per step().

Implements the Algorithm API the viewer drives:
- init(grid, start, goal) - reset() - step() -> StepResult
and run() for callers that only want the final result.

Frontier entries are (g, seq, state); seq is a monotonic counter so cost
ties pop FIFO and states are never compared. Stale entries are left in the
heap and skipped when popped (lazy deletion).
"""

import heapq
import logging
from dataclasses import dataclass, field
from math import inf
from typing import Dict, List, Optional, Set, Tuple

from runpath.core.errors import SearchBudgetExceeded
from runpath.core.successors import run_cells, successors
from runpath.core.types import Cell, Cost, Direction, Grid, State, StepResult

log = logging.getLogger(__name__)


@dataclass
class ConstrainedDijkstra:
    min_run: int = 1
    max_run: int = 3
    name: str = "Constrained Dijkstra"

    # Internal state
    grid: Optional[Grid] = None
    start: Optional[Cell] = None
    goal: Optional[Cell] = None
    open_pq: List[Tuple[Cost, int, State]] = field(default_factory=list)  # (g, seq, state)
    g: Dict[State, Cost] = field(default_factory=dict)                    # dominance table
    parent: Dict[State, State] = field(default_factory=dict)
    closed_set: Set[State] = field(default_factory=set)
    closed_cells: Set[Cell] = field(default_factory=set)
    popped_count: int = 0
    stale_count: int = 0
    pushed_count: int = 0
    status: str = "idle"
    goal_state: Optional[State] = None
    seq: int = 0

    # -------------------- lifecycle --------------------

    def init(self, grid: Grid, start: Cell, goal: Cell) -> None:
        self.grid = grid
        self.start = start
        self.goal = goal
        self.reset()

    def reset(self) -> None:
        """Clear all state and seed the frontier with the start state."""
        if self.grid is None:
            return
        self.open_pq.clear()
        self.g.clear()
        self.parent.clear()
        self.closed_set.clear()
        self.closed_cells.clear()
        self.popped_count = 0
        self.stale_count = 0
        self.pushed_count = 0
        self.goal_state = None
        self.seq = 0

        s = State(self.start, Direction.NONE)
        self.g[s] = 0
        self._push(0, s)
        self.status = "initialized"

    # -------------------- helpers --------------------

    def _bump(self) -> int:
        self.seq += 1
        return self.seq

    def _push(self, cost: Cost, s: State) -> None:
        heapq.heappush(self.open_pq, (cost, self._bump(), s))
        self.pushed_count += 1

    @property
    def cost(self) -> Optional[Cost]:
        if self.goal_state is None:
            return None
        return self.g[self.goal_state]

    def runs(self) -> List[State]:
        """States at the end of each run on the winning route, start included."""
        if self.goal_state is None:
            return []
        out: List[State] = []
        cur = self.goal_state
        while True:
            out.append(cur)
            if cur.direction is Direction.NONE:
                break
            cur = self.parent[cur]
        out.reverse()
        return out

    def path(self) -> List[Cell]:
        """Every cell on the winning route, start included."""
        states = self.runs()
        if not states:
            return []
        cells: List[Cell] = [states[0].cell]
        for s in states[1:]:
            cells.extend(run_cells(cells[-1], s))
        return cells

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        """
        Run ONE pop:
          - Goal cell popped -> goal_found (terminal).
          - Stale entry (table already holds something cheaper) -> skipped.
          - Otherwise relax every run-edge out of the popped state.
        """
        if self.grid is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.status == "goal_found":
            path = self.path()
            return StepResult(status="goal_found", path=path,
                              metrics=self._metrics(path_len=len(path)))

        if self.status == "exhausted":
            return StepResult(status="exhausted", metrics=self._metrics())

        if not self.open_pq:
            self.status = "exhausted"
            log.debug("frontier exhausted after %d expansions: %s -> %s unreachable",
                      len(self.closed_set), self.start, self.goal)
            return StepResult(status="exhausted", metrics=self._metrics())

        g_u, _, u = heapq.heappop(self.open_pq)
        self.popped_count += 1
        self.status = "expanding"

        if u.cell == self.goal:
            self.status = "goal_found"
            self.goal_state = u
            path = self.path()
            log.debug("goal %s reached at cost %s after %d pops", self.goal, g_u, self.popped_count)
            return StepResult(status="goal_found", closed=[u.cell], current=u, path=path,
                              metrics=self._metrics(path_len=len(path)))

        if self.g.get(u, inf) < g_u:
            self.stale_count += 1
            return StepResult(status="expanding", current=u, metrics=self._metrics())

        self.closed_set.add(u)
        self.closed_cells.add(u.cell)
        opened_now: List[Cell] = []
        for edge in successors(self.grid, u, self.min_run, self.max_run):
            alt = g_u + edge.cost
            v = edge.target
            if alt < self.g.get(v, inf):
                self.g[v] = alt
                self.parent[v] = u
                self._push(alt, v)
                opened_now.append(v.cell)

        return StepResult(status="expanding", opened=opened_now, closed=[u.cell], current=u,
                          metrics=self._metrics())

    def run(self, max_pops: Optional[int] = None) -> StepResult:
        """Step until goal_found or exhausted; raise if max_pops runs out first."""
        log.debug("%s: %s -> %s on %r, runs %d..%d", self.name, self.start, self.goal,
                  self.grid, self.min_run, self.max_run)
        while True:
            res = self.step()
            if res.terminal or res.status == "idle":
                return res
            # another pop would exceed the budget; an empty frontier ends without one
            if max_pops is not None and self.popped_count >= max_pops and self.open_pq:
                raise SearchBudgetExceeded(max_pops)

    # -------------------- metrics --------------------

    def _metrics(self, path_len: int = 0) -> dict:
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "expanded": len(self.closed_set),
            "stale": self.stale_count,
            "pushed": self.pushed_count,
            "frontier_size": len(self.open_pq),
            "closed_count": len(self.closed_cells),
            "path_len": path_len,
            "total_cost": self.cost,
        }

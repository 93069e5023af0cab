# runpath/core/types.py
#!/usr/bin/env python3
import math
from dataclasses import dataclass, field
from enum import Enum
from numbers import Real
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

from runpath.core.errors import MalformedGrid

Cell = Tuple[int, int]  # (col, row)
Cost = Union[int, float]


class Direction(Enum):
    NONE = None         # start state only: no run made yet
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def delta(self) -> Cell:
        if self.value is None:
            raise ValueError("Direction.NONE has no delta")
        return self.value

    def perpendicular(self) -> Tuple["Direction", "Direction"]:
        if self in (Direction.UP, Direction.DOWN):
            return (Direction.LEFT, Direction.RIGHT)
        if self in (Direction.LEFT, Direction.RIGHT):
            return (Direction.UP, Direction.DOWN)
        raise ValueError("Direction.NONE has no perpendicular")

    def opposite(self) -> "Direction":
        if self is Direction.NONE:
            return Direction.NONE
        dx, dy = self.value
        return Direction((-dx, -dy))


MOVES: Tuple[Direction, ...] = (Direction.LEFT, Direction.RIGHT, Direction.UP, Direction.DOWN)


class State(NamedTuple):
    cell: Cell
    direction: Direction


@dataclass(frozen=True)
class Grid:
    cells: Tuple[Tuple[Cost, ...], ...]    # [row][col]
    width: int = field(init=False)
    height: int = field(init=False)

    def __post_init__(self):
        rows = _validate_rows(self.cells)
        object.__setattr__(self, "cells", rows)
        object.__setattr__(self, "height", len(rows))
        object.__setattr__(self, "width", len(rows[0]))

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[Cost]]) -> "Grid":
        return cls(rows)

    def in_bounds(self, c: Cell) -> bool:
        x, y = c
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, c: Cell) -> Optional[Cost]:
        if not self.in_bounds(c):
            return None
        x, y = c
        return self.cells[y][x]

    def cost_of(self, c: Cell) -> Cost:
        if not self.in_bounds(c):
            raise IndexError(f"cell {c} outside {self.width}x{self.height} grid")
        x, y = c
        return self.cells[y][x]

    def corners(self) -> Tuple[Cell, Cell]:
        return (0, 0), (self.width - 1, self.height - 1)

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height})"


def _validate_rows(cells: Any) -> Tuple[Tuple[Cost, ...], ...]:
    try:
        rows = tuple(tuple(r) for r in cells)
    except TypeError:
        raise MalformedGrid("grid must be a sequence of rows") from None
    if not rows:
        raise MalformedGrid("grid has no rows")
    width = len(rows[0])
    if width == 0:
        raise MalformedGrid("grid row is empty", row=0)
    for y, row in enumerate(rows):
        if len(row) != width:
            raise MalformedGrid(f"ragged grid: expected {width} cells, got {len(row)}", row=y)
        for x, v in enumerate(row):
            # bool is a Real subclass but never a cost
            if isinstance(v, bool) or not isinstance(v, Real):
                raise MalformedGrid(f"non-numeric cell {v!r}", row=y, col=x)
            if not math.isfinite(v) or v < 0:
                raise MalformedGrid(f"cost must be finite and >= 0, got {v!r}", row=y, col=x)
    return rows


@dataclass
class StepResult:
    status: str                   # "idle" | "initialized" | "expanding" | "goal_found" | "exhausted"
    opened: List[Cell] = field(default_factory=list)
    closed: List[Cell] = field(default_factory=list)
    current: Optional[State] = None
    path: Optional[List[Cell]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def terminal(self) -> bool:
        return self.status in ("goal_found", "exhausted")


@dataclass
class SearchResult:
    cost: Cost
    path: List[Cell]
    runs: List[State]
    metrics: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Scenario:
    grid: Grid
    start: Cell
    goal: Cell
    min_run: int = 1
    max_run: int = 3
    name: str = "custom"

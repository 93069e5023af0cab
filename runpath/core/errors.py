# runpath/core/errors.py
#!/usr/bin/env python3
from typing import Optional, Tuple

Cell = Tuple[int, int]  # (col, row)


class SearchError(Exception):
    """Base class for everything the search core raises."""


class MalformedGrid(SearchError, ValueError):
    """Ragged rows, non-numeric cells, negative costs or no cells at all."""

    def __init__(self, message: str, row: Optional[int] = None, col: Optional[int] = None):
        if row is not None and col is not None:
            message = f"{message} (row {row}, col {col})"
        elif row is not None:
            message = f"{message} (row {row})"
        super().__init__(message)
        self.row = row
        self.col = col


class InvalidConfiguration(SearchError, ValueError):
    """Run-length bounds or start/goal cells rejected before the search starts."""


class Unreachable(SearchError):
    """The frontier emptied before the goal was ever popped."""

    def __init__(self, start: Cell, goal: Cell, min_run: int, max_run: int, expanded: int = 0):
        super().__init__(
            f"no path from {start} to {goal} with runs of {min_run}..{max_run} "
            f"({expanded} states expanded)"
        )
        self.start = start
        self.goal = goal
        self.min_run = min_run
        self.max_run = max_run
        self.expanded = expanded


class SearchBudgetExceeded(SearchError):
    """The caller's pop budget ran out before the search reached a terminal state."""

    def __init__(self, max_pops: int):
        super().__init__(f"search budget of {max_pops} pops exceeded")
        self.max_pops = max_pops

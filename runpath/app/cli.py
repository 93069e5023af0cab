# runpath/app/cli.py
#!/usr/bin/env python3
"""
Command-line driver: read a digit grid, print the cheapest run-constrained cost.

Exit codes: 0 found, 1 no path, 2 bad input / bad bounds / budget exceeded.
"""

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from runpath.config import ENV_VAR, parse_run_bounds, resolve_run_bounds
from runpath.core.errors import SearchError, Unreachable
from runpath.core.maps import load_map
from runpath.core.search import search_path
from runpath.core.types import Cell, Direction, Grid, SearchResult

log = logging.getLogger(__name__)

ARROWS = {
    Direction.UP: "^",
    Direction.DOWN: "v",
    Direction.LEFT: "<",
    Direction.RIGHT: ">",
}


def _parse_cell(text: str) -> Cell:
    try:
        x, y = (int(p) for p in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected X,Y, got {text!r}") from None
    return (x, y)


def _parse_bounds(text: str):
    try:
        return parse_run_bounds(text)
    except SearchError as ex:
        raise argparse.ArgumentTypeError(str(ex)) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="runpath",
        description="Cheapest path across a digit grid when every straight run "
                    "must be MIN..MAX cells long.",
    )
    parser.add_argument("grid", help="text grid of digits, or a .json map")
    parser.add_argument("--runs", type=_parse_bounds, default=None,
                        help=f"preset name or MIN..MAX (default: ${ENV_VAR} or 'standard')")
    parser.add_argument("--min-run", type=int, default=None)
    parser.add_argument("--max-run", type=int, default=None)
    parser.add_argument("--start", type=_parse_cell, default=None, help="X,Y (default: map start)")
    parser.add_argument("--goal", type=_parse_cell, default=None, help="X,Y (default: map goal)")
    parser.add_argument("--max-pops", type=int, default=None,
                        help="give up after this many frontier pops")
    parser.add_argument("--path", action="store_true", help="also draw the route")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def render_route(grid: Grid, result: SearchResult) -> str:
    """Grid digits with the cells entered along the route replaced by arrows."""
    marks = {}
    for prev, nxt in zip(result.path, result.path[1:]):
        d = Direction((nxt[0] - prev[0], nxt[1] - prev[1]))
        marks[nxt] = ARROWS[d]
    lines: List[str] = []
    for y, row in enumerate(grid.cells):
        lines.append("".join(marks.get((x, y), _fmt(v)) for x, v in enumerate(row)))
    return "\n".join(lines)


def _fmt(v) -> str:
    s = str(v)
    return s if len(s) == 1 else "#"


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        scenario = load_map(args.grid)
        if args.runs is not None:
            min_run, max_run = args.runs
        elif args.grid.lower().endswith(".json"):
            min_run, max_run = scenario.min_run, scenario.max_run
        else:
            min_run, max_run = resolve_run_bounds(argv=[])
        if args.min_run is not None:
            min_run = args.min_run
        if args.max_run is not None:
            max_run = args.max_run
        result = search_path(
            scenario.grid,
            args.start if args.start is not None else scenario.start,
            args.goal if args.goal is not None else scenario.goal,
            min_run, max_run, args.max_pops,
        )
    except Unreachable as ex:
        log.info("%s", ex)
        print(f"no path: {ex}", file=sys.stderr)
        return 1
    except (SearchError, OSError) as ex:
        print(f"error: {ex}", file=sys.stderr)
        return 2

    print(result.cost)
    if args.path:
        print(render_route(scenario.grid, result))
    log.debug("metrics: %s", result.metrics)
    return 0


if __name__ == "__main__":
    sys.exit(main())

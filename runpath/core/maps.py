# runpath/core/maps.py
#!/usr/bin/env python3
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from runpath.config import DEFAULT_PRESET, PRESETS
from runpath.core.errors import InvalidConfiguration, MalformedGrid
from runpath.core.search import validate_run_bounds
from runpath.core.types import Cell, Grid, Scenario

log = logging.getLogger(__name__)

MAP_DIR = Path(__file__).resolve().parents[1] / "maps"
MAP_FILES = {
    "01_sample":      MAP_DIR / "01_sample.txt",
    "02_wide_valley": MAP_DIR / "02_wide_valley.json",
    "03_corridor":    MAP_DIR / "03_corridor.json",
}

PathLike = Union[str, Path]


def parse_grid(text: str) -> Grid:
    """Rows of single decimal digits, one row per line."""
    lines = [ln.strip() for ln in text.strip().splitlines()]
    if not lines or not lines[0]:
        raise MalformedGrid("grid text is empty")
    rows: List[List[int]] = []
    for y, line in enumerate(lines):
        if not line:
            raise MalformedGrid("blank line inside grid", row=y)
        row = []
        for x, ch in enumerate(line):
            # str.isdigit accepts superscripts and other scripts' digits
            if ch not in "0123456789":
                raise MalformedGrid(f"expected a digit, got {ch!r}", row=y, col=x)
            row.append(ord(ch) - ord("0"))
        rows.append(row)
    return Grid.from_rows(rows)


def load_grid(path: PathLike) -> Grid:
    with open(path, "r", encoding="utf-8") as f:
        try:
            text = f.read()
        except UnicodeDecodeError as ex:
            raise MalformedGrid(f"{Path(path).name}: not UTF-8 text: {ex}") from ex
    return parse_grid(text)


def _cell(data: Dict[str, Any], key: str, default: Cell) -> Cell:
    if key not in data:
        return default
    v = data[key]
    if (not isinstance(v, list) or len(v) != 2
            or any(isinstance(i, bool) or not isinstance(i, int) for i in v)):
        raise InvalidConfiguration(f"{key} must be [x, y], got {v!r}")
    return (v[0], v[1])


def load_map(path: PathLike) -> Scenario:
    """JSON map (cells or digit rows + optional start/goal/run bounds) or a plain text grid."""
    path = Path(path)
    default_min, default_max = PRESETS[DEFAULT_PRESET]
    if path.suffix.lower() != ".json":
        grid = load_grid(path)
        start, goal = grid.corners()
        return Scenario(grid, start, goal, default_min, default_max, name=path.stem)

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except UnicodeDecodeError as ex:
            raise MalformedGrid(f"{path.name}: not UTF-8 text: {ex}") from ex
        except json.JSONDecodeError as ex:
            raise MalformedGrid(f"{path.name}: invalid JSON: {ex}") from ex
    if not isinstance(data, dict):
        raise MalformedGrid(f"{path.name}: top level must be an object")

    if "cells" in data:
        grid = Grid.from_rows(data["cells"])
    elif "grid" in data:
        rows = data["grid"]
        if not isinstance(rows, list) or not all(isinstance(r, str) for r in rows):
            raise MalformedGrid(f"{path.name}: 'grid' must be a list of digit strings")
        grid = parse_grid("\n".join(rows))
    else:
        raise MalformedGrid(f"{path.name}: needs 'cells' or 'grid'")

    for key, actual in (("width", grid.width), ("height", grid.height)):
        if key not in data:
            continue
        if isinstance(data[key], bool) or not isinstance(data[key], int):
            raise MalformedGrid(f"{path.name}: {key} must be an integer, got {data[key]!r}")
        if data[key] != actual:
            raise MalformedGrid(f"{path.name}: {key} says {data[key]}, cells give {actual}")

    top_left, bottom_right = grid.corners()
    start = _cell(data, "start", top_left)
    goal = _cell(data, "goal", bottom_right)
    for label, c in (("start", start), ("goal", goal)):
        if not grid.in_bounds(c):
            raise InvalidConfiguration(f"{path.name}: {label} {c} out of bounds")
    min_run = data.get("min_run", default_min)
    max_run = data.get("max_run", default_max)
    validate_run_bounds(min_run, max_run)
    name: Optional[str] = data.get("name")
    return Scenario(grid, start, goal, min_run, max_run, name=name or path.stem)

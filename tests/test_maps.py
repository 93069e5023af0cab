"""Tests for runpath.core.maps."""

from __future__ import annotations

import json

import pytest

from runpath.core.errors import InvalidConfiguration, MalformedGrid
from runpath.core.maps import MAP_FILES, load_grid, load_map, parse_grid


class TestParseGrid:
    def test_sample_corners(self, sample_text) -> None:
        grid = parse_grid(sample_text)
        assert (grid.width, grid.height) == (13, 13)
        assert grid.get((0, 0)) == 2
        assert grid.get((12, 0)) == 3
        assert grid.get((0, 12)) == 4
        assert grid.get((12, 12)) == 3

    def test_surrounding_whitespace_ignored(self) -> None:
        grid = parse_grid("\n\n  12\n  34  \n\n")
        assert grid.cells == ((1, 2), (3, 4))

    @pytest.mark.parametrize("text", ["", "   \n\n"])
    def test_empty(self, text) -> None:
        with pytest.raises(MalformedGrid):
            parse_grid(text)

    def test_ragged(self) -> None:
        with pytest.raises(MalformedGrid) as info:
            parse_grid("123\n12\n")
        assert info.value.row == 1

    def test_blank_line_inside(self) -> None:
        with pytest.raises(MalformedGrid):
            parse_grid("12\n\n34\n")

    @pytest.mark.parametrize(("text", "row", "col"), [("12\n3x", 1, 1), ("1-2", 0, 1), ("1²", 0, 1)])
    def test_non_digit(self, text, row, col) -> None:
        with pytest.raises(MalformedGrid) as info:
            parse_grid(text)
        assert (info.value.row, info.value.col) == (row, col)

    def test_load_grid(self, tmp_path) -> None:
        p = tmp_path / "g.txt"
        p.write_text("19\n91\n")
        assert load_grid(p).cells == ((1, 9), (9, 1))

    def test_load_grid_not_utf8(self, tmp_path) -> None:
        p = tmp_path / "g.txt"
        p.write_bytes(b"\xff\xfe12")
        with pytest.raises(MalformedGrid):
            load_grid(p)


class TestLoadMap:
    def _write(self, tmp_path, data) -> str:
        p = tmp_path / "map.json"
        p.write_text(json.dumps(data))
        return str(p)

    def test_cells_map(self, tmp_path) -> None:
        scenario = load_map(self._write(tmp_path, {
            "name": "tiny", "cells": [[1, 2.5], [3, 4]], "start": [1, 0], "goal": [0, 1],
            "min_run": 1, "max_run": 2,
        }))
        assert scenario.name == "tiny"
        assert scenario.grid.get((1, 0)) == 2.5
        assert (scenario.start, scenario.goal) == ((1, 0), (0, 1))
        assert (scenario.min_run, scenario.max_run) == (1, 2)

    def test_digit_rows_and_defaults(self, tmp_path) -> None:
        scenario = load_map(self._write(tmp_path, {"grid": ["123", "456"]}))
        assert scenario.name == "map"
        assert (scenario.start, scenario.goal) == ((0, 0), (2, 1))
        assert (scenario.min_run, scenario.max_run) == (1, 3)

    def test_text_file_is_a_grid(self, tmp_path, sample_text) -> None:
        p = tmp_path / "plain.txt"
        p.write_text(sample_text)
        scenario = load_map(p)
        assert scenario.goal == (12, 12)
        assert scenario.name == "plain"

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {"nothing": 1},
            {"grid": "123"},
            {"grid": ["12", "3"]},
            {"cells": [[1, 2]], "width": 3},
            {"cells": 5},
            {"cells": [1, 2]},
            {"cells": "12"},
            {"cells": [[1, 2]], "width": "x"},
            {"cells": [[1, 2]], "height": 1.0},
            {"cells": [[1, 2]], "height": True},
        ],
    )
    def test_malformed(self, tmp_path, data) -> None:
        with pytest.raises(MalformedGrid):
            load_map(self._write(tmp_path, data))

    def test_invalid_json(self, tmp_path) -> None:
        p = tmp_path / "bad.json"
        p.write_text("{not json")
        with pytest.raises(MalformedGrid):
            load_map(p)

    @pytest.mark.parametrize("name", ["bad.json", "bad.txt"])
    def test_not_utf8(self, tmp_path, name) -> None:
        p = tmp_path / name
        p.write_bytes(b"\xff\xfe12")
        with pytest.raises(MalformedGrid):
            load_map(p)

    @pytest.mark.parametrize(
        "extra",
        [{"start": [5, 0]}, {"goal": [0]}, {"goal": ["a", 0]}, {"min_run": 3, "max_run": 2},
         {"min_run": 0}],
    )
    def test_invalid_configuration(self, tmp_path, extra) -> None:
        with pytest.raises(InvalidConfiguration):
            load_map(self._write(tmp_path, {"cells": [[1, 2], [3, 4]], **extra}))


@pytest.mark.parametrize("key", sorted(MAP_FILES))
def test_bundled_maps_load(key) -> None:
    scenario = load_map(MAP_FILES[key])
    assert scenario.grid.in_bounds(scenario.goal)

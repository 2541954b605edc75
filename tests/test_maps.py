import json

import pytest

from gridsearch.app.settings import MAP_DIR, MAP_FILES
from gridsearch.core.astar import GridSearch
from gridsearch.core.dijkstra import dijkstra
from gridsearch.core.maps import (
    grid_from_dict,
    grid_from_rows,
    grid_to_dict,
    load_map,
    render_text,
    save_map,
)
from gridsearch.core.types import Cell, InvalidConfig


@pytest.mark.parametrize("key", sorted(MAP_FILES))
def test_bundled_maps_load_and_agree_with_dijkstra(key):
    grid = load_map(MAP_FILES[key])
    res = GridSearch.from_grid(grid).run_to_completion()
    cost, path = dijkstra(grid)
    assert res.found == (path is not None)
    if path is not None:
        assert res.cost == pytest.approx(cost)


def test_scatter_map_layout():
    grid = load_map(MAP_FILES["03_scatter_30"])
    assert (grid.width, grid.height) == (30, 30)
    assert grid.start == (0, 0) and grid.goal == (29, 29)
    assert len(grid.obstacles) == 386
    assert Cell(1, 9) in grid.obstacles


def test_obstacles_list_form():
    grid = load_map(MAP_FILES["02_walled_3"])
    assert grid.obstacles == {(1, 0), (1, 1), (1, 2)}
    assert grid.name == "walled_3"


def test_save_then_load(tmp_path):
    grid = grid_from_rows([
        "S..#",
        ".#..",
        "...G",
    ], name="tiny")
    target = save_map(grid, tmp_path / "tiny.json")
    again = load_map(target)
    assert again == grid
    assert json.loads(target.read_text())["cells"][1] == [0, 1, 0, 0]


def test_name_defaults_to_file_stem(tmp_path):
    data = grid_to_dict(grid_from_rows(["SG"]))
    del data["name"]
    p = tmp_path / "unnamed.json"
    p.write_text(json.dumps(data))
    assert load_map(p).name == "unnamed"


@pytest.mark.parametrize("data", [
    {"width": 2, "height": 1, "start": [0, 0]},
    {"width": 2, "height": 1, "start": [0, 0], "goal": [1, 0], "cells": [[0, 0, 0]]},
    {"width": 2, "height": 1, "start": [0, 0], "goal": [1, 0], "cells": [[0, 1]]},
    {"width": 2, "height": 1, "start": [0, 0], "goal": [1, 0], "obstacles": [[5, 5]]},
    {"width": 2, "height": 1, "start": [0, 0], "goal": ["a", 0]},
    {"width": 2, "height": 1, "start": [1.5, 0], "goal": [1, 0]},
    {"width": 2, "height": 1, "start": [0, 0], "goal": [1, 0], "cells": 5},
    {"width": 2, "height": 2, "start": [0, 0], "goal": [1, 1], "cells": [[0, 0], None]},
    {"width": 2, "height": 1, "start": [0, 0], "goal": [1, 0], "obstacles": "x"},
    {"width": 2, "height": 1, "start": [0, 0], "goal": [1, 0], "obstacles": [[1]]},
])
def test_malformed_maps(data):
    with pytest.raises(InvalidConfig):
        grid_from_dict(data)


def test_bad_json(tmp_path):
    p = tmp_path / "broken.json"
    p.write_text("{not json")
    with pytest.raises(InvalidConfig):
        load_map(p)


def test_grid_from_rows_needs_endpoints():
    with pytest.raises(InvalidConfig):
        grid_from_rows(["...", ".G."])
    with pytest.raises(InvalidConfig):
        grid_from_rows(["S..", ".G"])


@pytest.mark.parametrize("raw", [b"\xff\xfe{\x00", b"[1, 2]"])
def test_undecodable_or_non_object_file(tmp_path, raw):
    p = tmp_path / "odd.json"
    p.write_bytes(raw)
    with pytest.raises(InvalidConfig):
        load_map(p)


@pytest.mark.parametrize("rows", [["SS.G"], ["S.GG"], ["S.G", "S.."]])
def test_grid_from_rows_rejects_duplicate_endpoints(rows):
    with pytest.raises(InvalidConfig):
        grid_from_rows(rows)


def test_bundled_maps_ship_inside_the_package():
    assert MAP_DIR.parent.name == "gridsearch"
    for path in MAP_FILES.values():
        assert path.parent == MAP_DIR
        assert path.is_file()


def test_render_text_marks_path_and_walls():
    grid = grid_from_rows([
        "S....",
        ".#...",
        ".#...",
        ".###.",
        "....G",
    ])
    res = GridSearch.from_grid(grid).run_to_completion()
    rows = [line.split() for line in render_text(grid, res).splitlines()]
    assert rows[0][:2] == ["S", "*"]
    assert rows[1][1] == "#"
    assert rows[2][3] == "*"
    assert rows[4][4] == "G"


def test_render_text_mid_search():
    grid = grid_from_rows(["S...G"])
    search = GridSearch.from_grid(grid)
    search.step()
    res = search.step()
    assert render_text(grid, res) == "S @ o . G"
    assert render_text(grid) == "S . . . G"

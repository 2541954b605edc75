# gridsearch/core/maps.py
#!/usr/bin/env python3
"""
Map files and text rendering.

Map JSON (same shape the workshop maps use):
    {"name": "...", "width": W, "height": H, "start": [x, y], "goal": [x, y],
     "cells": [[0, 1, ...], ...]}          # cells[row][col], 1 = obstacle
An "obstacles": [[x, y], ...] list may be given instead of "cells".
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from gridsearch.core.types import Cell, Grid, InvalidConfig, StepResult, as_cell

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_map(path: PathLike) -> Grid:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as ex:
            raise InvalidConfig(f"{path.name}: not valid JSON ({ex})") from ex
    if not isinstance(data, dict):
        raise InvalidConfig(f"{path.name}: top level must be an object")
    grid = grid_from_dict(data, default_name=path.stem)
    logger.debug("loaded map %s (%dx%d, %d obstacles)", path, grid.width, grid.height, len(grid.obstacles))
    return grid


def grid_from_dict(data: dict, default_name: str = "custom") -> Grid:
    try:
        width = int(data["width"])
        height = int(data["height"])
    except (KeyError, TypeError, ValueError) as ex:
        raise InvalidConfig(f"map is missing or has a bad field: {ex}") from ex
    if "start" not in data or "goal" not in data:
        raise InvalidConfig("map needs a start and a goal")
    start = as_cell(data["start"])
    goal = as_cell(data["goal"])

    if "cells" in data:
        cells = data["cells"]
        try:
            if len(cells) != height or any(len(r) != width for r in cells):
                raise InvalidConfig("cells size mismatch")
        except TypeError as ex:
            raise InvalidConfig(f"cells must be a list of rows: {ex}") from ex
        obstacles = {Cell(col, row) for row, r in enumerate(cells) for col, v in enumerate(r) if v == 1}
    else:
        entries = data.get("obstacles", [])
        if not isinstance(entries, list):
            raise InvalidConfig("obstacles must be a list of [x, y] pairs")
        obstacles = {as_cell(c) for c in entries}
        out = [c for c in obstacles if not (0 <= c.x < width and 0 <= c.y < height)]
        if out:
            raise InvalidConfig(f"obstacle {tuple(out[0])} out of bounds")

    return Grid(width, height, obstacles, start, goal, name=str(data.get("name", default_name)))


def grid_to_dict(grid: Grid) -> dict:
    cells = [[1 if Cell(col, row) in grid.obstacles else 0 for col in range(grid.width)]
             for row in range(grid.height)]
    return {
        "name": grid.name,
        "width": grid.width,
        "height": grid.height,
        "start": list(grid.start),
        "goal": list(grid.goal),
        "cells": cells,
    }


def save_map(grid: Grid, path: PathLike) -> Path:
    path = Path(path)
    data = grid_to_dict(grid)
    # one row per line keeps the files diffable
    rows = ",\n".join("    " + json.dumps(r) for r in data.pop("cells"))
    head = json.dumps(data, indent=2)[:-2]
    path.write_text(f'{head},\n  "cells": [\n{rows}\n  ]\n}}\n')
    logger.debug("saved map %s", path)
    return path


def grid_from_rows(rows: Sequence[str], name: str = "custom") -> Grid:
    """Build a grid from ASCII rows: S start, G goal, # wall, anything else free."""
    height = len(rows)
    width = len(rows[0]) if rows else 0
    if any(len(r) != width for r in rows):
        raise InvalidConfig("rows must all have the same length")
    start = goal = None
    obstacles = set()
    for y, r in enumerate(rows):
        for x, ch in enumerate(r):
            if ch == "#":
                obstacles.add(Cell(x, y))
            elif ch == "S":
                if start is not None:
                    raise InvalidConfig(f"second S at {(x, y)}")
                start = Cell(x, y)
            elif ch == "G":
                if goal is not None:
                    raise InvalidConfig(f"second G at {(x, y)}")
                goal = Cell(x, y)
    if start is None or goal is None:
        raise InvalidConfig("rows need one S and one G")
    return Grid(width, height, obstacles, start, goal, name=name)


def render_text(grid: Grid, result: Optional[StepResult] = None) -> str:
    """
    ASCII picture of the grid, overlaid with a search snapshot if given:
    S start, G goal, # wall, * path, @ current, o open, x visited, . empty.
    """
    path = set(result.path or []) if result else set()
    current = result.current if result else None
    open_set = result.open_set if result else frozenset()
    visited = result.came_from if result else {}

    lines: List[str] = []
    for y in range(grid.height):
        row = []
        for x in range(grid.width):
            c = Cell(x, y)
            if c == grid.start:
                ch = "S"
            elif c == grid.goal:
                ch = "G"
            elif c in grid.obstacles:
                ch = "#"
            elif c in path:
                ch = "*"
            elif c == current:
                ch = "@"
            elif c in open_set:
                ch = "o"
            elif c in visited:
                ch = "x"
            else:
                ch = "."
            row.append(ch)
        lines.append(" ".join(row))
    return "\n".join(lines)

# gridsearch/app/cli.py
#!/usr/bin/env python3
"""
Headless runner: load a map, search it, print the grid and the path.

    gridsearch [--map=PATH|KEY] [--step] [--verbose]

Exit status: 0 path found, 1 no path, 2 bad map / config.
"""

import logging
import sys
from typing import List, Optional

from gridsearch.app.settings import configure_logging, resolve_settings
from gridsearch.core.astar import GridSearch
from gridsearch.core.maps import load_map, render_text
from gridsearch.core.types import InvalidConfig

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    settings = resolve_settings(argv)
    configure_logging(settings.log_level)

    try:
        grid = load_map(settings.map_path)
        search = GridSearch.from_grid(grid)
    except (InvalidConfig, OSError) as ex:
        print(f"Failed to load map {settings.map_path}: {ex}", file=sys.stderr)
        return 2

    logger.info("searching %s from %s to %s", grid.name, tuple(grid.start), tuple(grid.goal))
    if settings.step:
        res = search.step()
        n = 1
        while not res.terminal:
            print(f"-- step {n}: current={tuple(res.current)} open={len(res.open_set)}")
            print(render_text(grid, res))
            res = search.step()
            n += 1
    else:
        res = search.run_to_completion()

    print(f"== {grid.name} ({grid.width}x{grid.height}) ==")
    print(render_text(grid, res))
    m = res.metrics
    if res.found:
        print(f"Path: {' '.join(f'({x},{y})' for x, y in res.path)}")
        print(f"Length: {len(res.path)} cells, cost {res.cost:.4f}, expanded {m['expanded']}")
        return 0
    print(f"No path (expanded {m['expanded']})")
    return 1


if __name__ == "__main__":
    sys.exit(main())

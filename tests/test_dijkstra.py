import math

import pytest

from gridsearch.core.dijkstra import dijkstra
from gridsearch.core.types import Grid


def test_dijkstra_detour_cost():
    grid = Grid(5, 5, {(1, 1), (1, 2), (1, 3), (2, 3), (3, 3)}, (0, 0), (4, 4))
    cost, path = dijkstra(grid)
    assert cost == pytest.approx(2 + 3 * math.sqrt(2))
    assert path[0] == (0, 0) and path[-1] == (4, 4)


def test_dijkstra_no_path():
    grid = Grid(3, 3, {(1, 0), (1, 1), (1, 2)}, (0, 0), (2, 2))
    assert dijkstra(grid) == (math.inf, None)


def test_dijkstra_trivial():
    assert dijkstra(Grid(1, 1, set(), (0, 0), (0, 0))) == (0.0, [(0, 0)])

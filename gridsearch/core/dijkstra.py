# gridsearch/core/dijkstra.py
#!/usr/bin/env python3
"""Uniform-cost search over the same 8-connected grid, used as a cost oracle."""

import heapq
from math import inf
from typing import Dict, List, Optional, Set, Tuple

from gridsearch.core.astar import move_cost, neighbors8
from gridsearch.core.types import Cell, Grid


def dijkstra(grid: Grid) -> Tuple[float, Optional[List[Cell]]]:
    """Return (cost, path) of a cheapest start-to-goal route, or (inf, None)."""
    grid.validate()
    s, t = grid.start, grid.goal
    open_pq: List[Tuple[float, Cell]] = [(0.0, s)]
    g: Dict[Cell, float] = {s: 0.0}
    parent: Dict[Cell, Cell] = {}
    closed_set: Set[Cell] = set()

    while open_pq:
        g_u, u = heapq.heappop(open_pq)
        if u in closed_set:
            continue
        closed_set.add(u)
        if u == t:
            path = [u]
            while path[-1] in parent:
                path.append(parent[path[-1]])
            path.reverse()
            return g_u, path
        for v in neighbors8(grid, u):
            if v in closed_set:
                continue
            alt = g_u + move_cost(u, v)
            if alt < g.get(v, inf):
                g[v] = alt
                parent[v] = u
                heapq.heappush(open_pq, (alt, v))

    return inf, None

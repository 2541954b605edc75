# gridsearch/core/astar.py
#!/usr/bin/env python3
"""
A* on an 8-connected grid, one expansion per step() so callers can watch it.

API used by the viewer and the CLI:
- GridSearch(width, height, obstacles, start, goal) / GridSearch.from_grid(grid)
- reset() - step() -> StepResult - run_to_completion() -> StepResult

Costs and heuristic:
- Orthogonal move 1.0, diagonal move sqrt(2).
- Euclidean distance to the goal (admissible and consistent here).

Tie-breaking in the PQ:
- (f, h, x, y, cell): lower f, then lower h (the deeper node), then lower x,
  then lower y. Depends only on coordinates and scores, never on insertion
  order, so two runs on the same grid expand cells in the same order.

The PQ keeps a secondary index cell -> live entry. A decrease-key pushes a new
entry and repoints the index; entries the index no longer points at are
dropped when popped and do not count as a step.
"""

import heapq
import logging
import math
from dataclasses import dataclass, field
from math import inf
from typing import Dict, Iterable, List, Optional, Set, Tuple

from gridsearch.core.types import (
    EXHAUSTED,
    FOUND,
    INITIALIZED,
    RUNNING,
    Cell,
    Grid,
    StepResult,
    as_cell,
)

logger = logging.getLogger(__name__)

DIAGONAL_COST = math.sqrt(2)

# up, down, left, right, then the four diagonals
DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (-1, 0), (1, 0), (0, -1), (0, 1),
    (1, -1), (1, 1), (-1, -1), (-1, 1),
)

_Entry = Tuple[float, float, int, int, Cell]  # (f, h, x, y, cell)


def heuristic(a: Cell, b: Cell) -> float:
    """Straight-line distance between two cells."""
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return math.sqrt(dx * dx + dy * dy)


def move_cost(a: Cell, b: Cell) -> float:
    if abs(a[0] - b[0]) == 1 and abs(a[1] - b[1]) == 1:
        return DIAGONAL_COST
    return 1.0


def neighbors8(grid: Grid, c: Cell, blocked: Optional[Iterable[Cell]] = None) -> List[Cell]:
    """Return the in-bounds, non-obstacle cells around ``c``."""
    x, y = c
    out: List[Cell] = []
    for dx, dy in DIRECTIONS:
        n = Cell(x + dx, y + dy)
        if blocked is None:
            ok = grid.passable(n)
        else:
            ok = grid.in_bounds(n) and n not in blocked
        if ok:
            out.append(n)
    return out


def path_cost(path: List[Cell]) -> float:
    """Sum of per-step move costs along ``path``."""
    total = 0.0
    for a, b in zip(path, path[1:]):
        total += move_cost(a, b)
    return total


@dataclass
class SearchState:
    start: Cell
    goal: Cell
    open_set: Set[Cell] = field(default_factory=set)
    came_from: Dict[Cell, Cell] = field(default_factory=dict)
    g_score: Dict[Cell, float] = field(default_factory=dict)
    f_score: Dict[Cell, float] = field(default_factory=dict)
    current: Optional[Cell] = None
    status: str = INITIALIZED
    path: Optional[List[Cell]] = None
    expanded: int = 0

    @classmethod
    def fresh(cls, start: Cell, goal: Cell) -> "SearchState":
        return cls(
            start=start,
            goal=goal,
            open_set={start},
            g_score={start: 0.0},
            f_score={start: heuristic(start, goal)},
        )


class GridSearch:
    name = "A*"

    def __init__(self, width: int, height: int, obstacles: Iterable = (), start=(0, 0), goal=(0, 0)):
        self._bind(Grid(width, height, {as_cell(c) for c in obstacles}, as_cell(start), as_cell(goal)))

    @classmethod
    def from_grid(cls, grid: Grid) -> "GridSearch":
        """Search ``grid`` in place; edits made to it show up after reset()."""
        search = cls.__new__(cls)
        search._bind(grid)
        return search

    def _bind(self, grid: Grid) -> None:
        self.grid = grid
        self.reset()

    # -------------------- lifecycle --------------------

    def reset(self) -> None:
        """Re-validate the grid and start over with a fresh SearchState."""
        self.grid.validate()
        self._blocked = frozenset(self.grid.obstacles)
        self.state = SearchState.fresh(self.grid.start, self.grid.goal)
        self._heap: List[_Entry] = []
        self._live: Dict[Cell, _Entry] = {}
        self._terminal: Optional[StepResult] = None
        s = self.grid.start
        self._push(s, self.state.f_score[s], heuristic(s, self.grid.goal))

    @property
    def status(self) -> str:
        return self.state.status

    @property
    def done(self) -> bool:
        return self._terminal is not None

    # -------------------- frontier --------------------

    def _push(self, c: Cell, f: float, h: float) -> None:
        entry = (f, h, c.x, c.y, c)
        self._live[c] = entry
        heapq.heappush(self._heap, entry)

    def _pop(self) -> Optional[Cell]:
        while self._heap:
            entry = heapq.heappop(self._heap)
            c = entry[4]
            if self._live.get(c) is entry:
                del self._live[c]
                return c
        return None

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        """
        Run ONE A* expansion:
          - Pop the open cell with the lowest (f, h, x, y).
          - If it is the goal, reconstruct and finish.
          - Else close it and relax its neighbours.
        Once found/exhausted, returns that same result on every call.
        """
        if self._terminal is not None:
            return self._terminal

        if self.state.status == INITIALIZED:
            # first step of a run: take in grid edits made since the last reset
            self.reset()
            logger.debug("search %s -> %s on %dx%d", tuple(self.state.start), tuple(self.state.goal),
                         self.grid.width, self.grid.height)
        st = self.state
        st.status = RUNNING

        u = self._pop()
        if u is None:
            st.status = EXHAUSTED
            return self._finish()

        st.current = u
        st.expanded += 1

        if u == st.goal:
            st.path = self._reconstruct_path(u)
            st.status = FOUND
            return self._finish()

        st.open_set.discard(u)
        g_u = st.g_score[u]
        for v in neighbors8(self.grid, u, self._blocked):
            alt = g_u + move_cost(u, v)
            if alt < st.g_score.get(v, inf):
                h_v = heuristic(v, st.goal)
                st.came_from[v] = u
                st.g_score[v] = alt
                st.f_score[v] = alt + h_v
                st.open_set.add(v)
                self._push(v, st.f_score[v], h_v)

        return self.snapshot()

    def run_to_completion(self) -> StepResult:
        """Step until found or exhausted and return the terminal result."""
        res = self.step()
        while not res.terminal:
            res = self.step()
        return res

    def _finish(self) -> StepResult:
        self._terminal = self.snapshot()
        m = self._terminal.metrics
        logger.debug("search %s after %d expansions (path_len=%d, cost=%s)",
                     self.state.status, m["expanded"], m["path_len"], m["total_cost"])
        return self._terminal

    def _reconstruct_path(self, end: Cell) -> List[Cell]:
        path = [end]
        cur = end
        while cur in self.state.came_from:
            cur = self.state.came_from[cur]
            path.append(cur)
        path.reverse()
        return path

    # -------------------- observability --------------------

    def snapshot(self) -> StepResult:
        """Copy of the current search state, safe to keep across steps."""
        st = self.state
        path = list(st.path) if st.path is not None else None
        cost = st.g_score[st.goal] if st.status == FOUND else None
        return StepResult(
            status=st.status,
            current=st.current,
            open_set=frozenset(st.open_set),
            came_from=dict(st.came_from),
            g_score=dict(st.g_score),
            path=path,
            cost=cost,
            metrics=self._metrics(path_len=len(path) if path else 0, total_cost=cost),
        )

    def _metrics(self, path_len: int = 0, total_cost: Optional[float] = None) -> dict:
        return {
            "algo": self.name,
            "expanded": self.state.expanded,
            "open_size": len(self.state.open_set),
            "visited_count": len(self.state.came_from),
            "path_len": path_len,
            "total_cost": total_cost,
        }


def find_path(grid: Grid) -> Optional[List[Cell]]:
    """Run A* on ``grid`` and return the start-to-goal path, or None."""
    res = GridSearch.from_grid(grid).run_to_completion()
    return res.path if res.found else None

# gridsearch/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Set

# status tags carried by StepResult
INITIALIZED = "initialized"
RUNNING = "running"
FOUND = "found"
EXHAUSTED = "exhausted"
TERMINAL = (FOUND, EXHAUSTED)


class InvalidConfig(ValueError):
    """Grid dimensions, start/goal placement or a map file is unusable."""


class Cell(NamedTuple):
    x: int  # col
    y: int  # row


def as_cell(c: Iterable[int]) -> Cell:
    if isinstance(c, Cell):
        return c
    try:
        x, y = c
    except (TypeError, ValueError) as ex:
        raise InvalidConfig(f"a cell is an (x, y) pair, got {c!r}") from ex
    for v in (x, y):
        integral = isinstance(v, int) or (isinstance(v, float) and v.is_integer())
        if isinstance(v, bool) or not integral:
            raise InvalidConfig(f"cell coordinates must be integers, got {c!r}")
    return Cell(int(x), int(y))


@dataclass
class Grid:
    width: int
    height: int
    obstacles: Set[Cell] = field(default_factory=set)
    start: Cell = Cell(0, 0)
    goal: Cell = Cell(0, 0)
    name: str = "custom"

    def __post_init__(self):
        self.start = as_cell(self.start)
        self.goal = as_cell(self.goal)
        self.obstacles = {as_cell(c) for c in self.obstacles}
        self.validate()

    def in_bounds(self, c: Cell) -> bool:
        x, y = c
        return 0 <= x < self.width and 0 <= y < self.height

    def is_block(self, c: Cell) -> bool:
        return c in self.obstacles

    def passable(self, c: Cell) -> bool:
        return self.in_bounds(c) and c not in self.obstacles

    def validate(self) -> None:
        """Raise InvalidConfig unless the grid can be searched."""
        if not isinstance(self.width, int) or not isinstance(self.height, int):
            raise InvalidConfig(f"dimensions must be integers, got {self.width!r}x{self.height!r}")
        if self.width <= 0 or self.height <= 0:
            raise InvalidConfig(f"dimensions must be positive, got {self.width}x{self.height}")
        for label, c in (("start", self.start), ("goal", self.goal)):
            if not self.in_bounds(c):
                raise InvalidConfig(f"{label} {tuple(c)} out of bounds for {self.width}x{self.height}")
            if self.is_block(c):
                raise InvalidConfig(f"{label} {tuple(c)} is on an obstacle")

    # -------------------- editing (between searches only) --------------------

    def _check_editable(self, c: Cell) -> Cell:
        c = as_cell(c)
        if not self.in_bounds(c):
            raise InvalidConfig(f"cell {tuple(c)} out of bounds")
        if c in (self.start, self.goal):
            raise InvalidConfig(f"cell {tuple(c)} is the start or goal")
        return c

    def add_obstacle(self, c: Cell) -> None:
        self.obstacles.add(self._check_editable(c))

    def remove_obstacle(self, c: Cell) -> None:
        self.obstacles.discard(as_cell(c))

    def toggle_obstacle(self, c: Cell) -> bool:
        """Flip a cell between wall and free. Returns True if it is now a wall."""
        c = self._check_editable(c)
        if c in self.obstacles:
            self.obstacles.remove(c)
            return False
        self.obstacles.add(c)
        return True


@dataclass
class StepResult:
    status: str                                   # see the status tags above
    current: Optional[Cell] = None
    open_set: frozenset = frozenset()
    came_from: Dict[Cell, Cell] = field(default_factory=dict)
    g_score: Dict[Cell, float] = field(default_factory=dict)
    path: Optional[List[Cell]] = None
    cost: Optional[float] = None
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def terminal(self) -> bool:
        return self.status in TERMINAL

    @property
    def found(self) -> bool:
        return self.status == FOUND



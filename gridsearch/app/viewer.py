# gridsearch/app/viewer.py
#!/usr/bin/env python3
"""
A* Viewer: step the search and watch the open set grow

- Keyboard:
    [1]/[2]/[3]  -> switch map
    [SPACE]      -> run/pause
    [N]          -> single step
    [R]          -> reset
    [+]/[-]      -> steps/sec
    [S]          -> save map (walls included) to the working directory
    [Q]/[ESC]    -> quit
- Mouse:
    left click on a cell toggles a wall (only while no search is running)

Settings: see gridsearch/app/settings.py (--map=..., --speed=...).
"""

import logging
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

import pygame

from gridsearch.app.settings import (
    MAP_FILES,
    clamp_speed,
    configure_logging,
    resolve_settings,
)
from gridsearch.core.astar import GridSearch
from gridsearch.core.maps import load_map, save_map
from gridsearch.core.types import FOUND, EXHAUSTED, INITIALIZED, Cell, Grid, InvalidConfig, StepResult

logger = logging.getLogger(__name__)

PANEL_W = 360            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 24
FONT_NAME = None  # default pygame font

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
FLOOR_GRAY  = (200,200,200)
WALL_DARK   = ( 30, 30, 34)
START_GREEN = ( 46,139, 87)
GOAL_RED    = (220, 50, 47)
OPEN_ORANGE = (255,150,  0,120)
VISITED_BLUE= ( 70,130,180,110)
CURRENT_RED = (255, 60, 60,170)
PATH_YELLOW = (255,210,  0)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)

STATE_LABELS = {FOUND: "Done", EXHAUSTED: "No path"}


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        if self.active and self.togglable:
            bg = (58, 86, 160, 235)
        elif self.hover:
            bg = (46, 50, 60, 230)
        else:
            bg = (36, 40, 48, 220)
        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, (120, 170, 255, 255), self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()
                return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, grid: Grid, steps_per_sec: int = 8):
        pygame.init()

        self.grid = grid
        self.search = GridSearch.from_grid(grid)
        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        self._buttons: List[UIButton] = []
        self.cell_size = self._auto_cell_size(grid)
        win_w = GRID_MARGIN*2 + grid.width * self.cell_size + PANEL_W
        win_h = max(GRID_MARGIN*2 + grid.height * self.cell_size, 560)
        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption(f"A* | {grid.name}")
        self._layout(win_w, win_h)

        self.running = False
        self.clock = pygame.time.Clock()
        self.steps_per_sec = clamp_speed(steps_per_sec)
        self._last_step_t = 0.0
        self.selected_map_key = self._infer_map_key()
        self.message = ""
        self._reset_overlays()

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window and place the grid at the left."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = int(max(8, min(avail_w // self.grid.width, avail_h // self.grid.height)))

        plate_w = self.grid.width * self.cell_size + 2 * GRID_MARGIN
        plate_h = self.grid.height * self.cell_size + 2 * GRID_MARGIN
        top_y = max(0, (win_h - plate_h) // 2)
        self.canvas_rect = pygame.Rect(0, top_y, plate_w, plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN, self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right), win_h)
        self._build_buttons()

    def _auto_cell_size(self, grid: Grid) -> int:
        target_h = 720 - GRID_MARGIN*2
        return max(14, min(CELL_SIZE_DEFAULT, target_h // grid.height))

    def _infer_map_key(self) -> str:
        for k, p in MAP_FILES.items():
            if p.stem == self.grid.name or p.stem.endswith(self.grid.name):
                return k
        return "custom"

    def cell_at(self, pos: Tuple[int, int]) -> Optional[Cell]:
        """Grid cell under a window position, or None outside the grid."""
        ox, oy = self._grid_origin
        col = (pos[0] - ox) // self.cell_size
        row = (pos[1] - oy) // self.cell_size
        c = Cell(col, row)
        return c if self.grid.in_bounds(c) else None

    # ---------- loop ----------
    def run(self):
        while True:
            self._handle_events()
            if self.running:
                self._tick_algorithm()
            self._draw()
            self.clock.tick(60)

    def _tick_algorithm(self):
        t0 = time.time()
        if t0 - self._last_step_t >= 1.0 / max(1, self.steps_per_sec):
            self._last_step_t = t0
            self._do_step()

    def _do_step(self) -> StepResult:
        res = self.search.step()
        self.last = res
        if res.terminal:
            self.state = STATE_LABELS[res.status]
            self.running = False
        else:
            self.state = "Running" if self.running else "Paused"
        self._refresh_active_states()
        return res

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    pygame.quit(); sys.exit(0)
                elif e.key == pygame.K_SPACE:
                    self._toggle_run()
                elif e.key == pygame.K_r:
                    self._reset()
                elif e.key == pygame.K_n:
                    self._do_step()
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._bump_speed(+1)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
                    self._bump_speed(-1)
                elif e.key == pygame.K_s:
                    self._save_map()
                elif e.key == pygame.K_1:
                    self._switch_map("01_diagonal_5")
                elif e.key == pygame.K_2:
                    self._switch_map("02_walled_3")
                elif e.key == pygame.K_3:
                    self._switch_map("03_scatter_30")
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((max(640, e.w), max(480, e.h)), pygame.RESIZABLE)
                self._layout(*self.screen.get_size())
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                self.handle_mouse(e)

    def handle_mouse(self, e: pygame.event.Event):
        for b in self._buttons:
            if b.handle_mouse(e):
                return
        if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
            c = self.cell_at(e.pos)
            if c is not None:
                self.toggle_wall(c)

    # ---------- editing ----------
    def search_in_progress(self) -> bool:
        st = self.search.status
        return st != INITIALIZED and st not in STATE_LABELS

    def toggle_wall(self, c: Cell) -> bool:
        """Flip a wall between searches; a finished search is cleared first."""
        if self.search_in_progress():
            self.message = "Reset before editing walls"
            return False
        try:
            self.grid.toggle_obstacle(c)
        except InvalidConfig as ex:
            self.message = str(ex)
            return False
        self._reset()
        return True

    def _save_map(self) -> Optional[Path]:
        target = Path.cwd() / f"{self.grid.name}.json"
        try:
            save_map(self.grid, target)
        except OSError as ex:
            print(f"Failed to save map {target}: {ex}")
            return None
        self.message = f"Saved {target.name}"
        return target

    def _switch_map(self, key: str):
        if key not in MAP_FILES:
            return
        try:
            grid = load_map(MAP_FILES[key])
        except (InvalidConfig, OSError) as ex:
            print(f"Failed to load map {key}: {ex}")
            return
        self.grid = grid
        self.search = GridSearch.from_grid(grid)
        self.selected_map_key = key
        pygame.display.set_caption(f"A* | {grid.name}")
        self.running = False
        self._reset_overlays()
        self._layout(*self.screen.get_size())

    def _reset_overlays(self):
        self.last = self.search.snapshot()
        self.state = "Idle"
        self._refresh_active_states()

    def _reset(self):
        self.running = False
        try:
            self.search.reset()
        except InvalidConfig as ex:
            self.message = str(ex)
        self._reset_overlays()

    def _toggle_run(self):
        if self.state in STATE_LABELS.values():
            return
        self.running = not self.running
        self.state = "Running" if self.running else "Paused"
        self._refresh_active_states()

    def _bump_speed(self, dv: int):
        self.steps_per_sec = clamp_speed(self.steps_per_sec + dv)

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        top = (24, 26, 32); bot = (36, 40, 48)
        for y in range(h):
            t = y / max(1, h-1)
            c = tuple(int(top[i] + (bot[i]-top[i]) * t) for i in range(3))
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _fill_cells(self, cells, rgba):
        cs = self.cell_size
        ox, oy = self._grid_origin
        s = pygame.Surface((cs, cs), pygame.SRCALPHA); s.fill(rgba)
        for (col, row) in cells:
            self.screen.blit(s, (ox + col*cs, oy + row*cs))

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin

        for row in range(self.grid.height):
            for col in range(self.grid.width):
                rect = pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)
                color = WALL_DARK if Cell(col, row) in self.grid.obstacles else FLOOR_GRAY
                pygame.draw.rect(self.screen, color, rect)
                pygame.draw.rect(self.screen, BLACK, rect, 1)

        # overlays, later ones on top
        res = self.last
        self._fill_cells(res.came_from.keys(), VISITED_BLUE)
        self._fill_cells(res.open_set, OPEN_ORANGE)
        if res.current is not None:
            self._fill_cells([res.current], CURRENT_RED)

        if res.path and len(res.path) >= 2:
            pts = [(ox + col*cs + cs//2, oy + row*cs + cs//2) for (col, row) in res.path]
            pygame.draw.lines(self.screen, PATH_YELLOW, False, pts, max(2, cs // 5))

        self._draw_badge(self.grid.start, START_GREEN, "S")
        self._draw_badge(self.grid.goal, GOAL_RED, "G")

    def _draw_badge(self, cell: Cell, color: Tuple[int, int, int], label: str):
        cs = self.cell_size
        ox, oy = self._grid_origin
        col, row = cell
        cx = ox + col*cs + cs//2
        cy = oy + row*cs + cs//2
        pygame.draw.circle(self.screen, color, (cx, cy), max(4, cs//2 - 2))
        txt = self.font_small.render(label, True, WHITE)
        self.screen.blit(txt, txt.get_rect(center=(cx, cy)))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 250  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 34
        gap = 8

        def add(label, cb, *, togglable=False, store_as: Optional[str] = None, rect=None):
            btn = UIButton(label, rect or pygame.Rect(x, y, w, h), cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Run / Pause", self._toggle_run, togglable=True, store_as="btn_run"); y += h + gap
        add("Step Once", self._do_step); y += h + gap
        add("Reset", self._reset); y += h + gap

        half = (w - 8) // 2
        add("Speed −", lambda: self._bump_speed(-1), rect=pygame.Rect(x, y, half, h))
        add("Speed +", lambda: self._bump_speed(+1), rect=pygame.Rect(x + half + 8, y, half, h))
        y += h + gap

        add("Map 1: Diagonal 5x5", lambda: self._switch_map("01_diagonal_5"), togglable=True, store_as="btn_map1"); y += h + gap
        add("Map 2: Walled 3x3",   lambda: self._switch_map("02_walled_3"),   togglable=True, store_as="btn_map2"); y += h + gap
        add("Map 3: Scatter 30x30", lambda: self._switch_map("03_scatter_30"), togglable=True, store_as="btn_map3"); y += h + gap
        add("Save Map", self._save_map)

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(getattr(self, "running", False))
        for n, key in enumerate(MAP_FILES, start=1):
            btn = getattr(self, f"btn_map{n}", None)
            if btn is not None:
                btn.set_active(getattr(self, "selected_map_key", None) == key)

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card = pygame.Surface((rb.width - 20, 230), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        m = self.last.metrics
        line("Metrics", big=True, color=ACCENT_GOLD)
        line(f"State: {self.state}")
        line(f"Expanded: {m.get('expanded', 0)}")
        line(f"Open: {m.get('open_size', 0)}")
        line(f"Visited: {m.get('visited_count', 0)}")
        line(f"Path Len: {m.get('path_len', 0)}")
        if m.get("total_cost") is not None:
            line(f"Total Cost: {m['total_cost']:.3f}")
        line(f"Speed: {self.steps_per_sec} steps/s")
        if self.message:
            line(self.message, color=ACCENT_GOLD)

        for b in self._buttons:
            b.draw(self.screen, self.font)


# ---------- main ----------
def main():
    settings = resolve_settings(sys.argv[1:])
    configure_logging(settings.log_level)
    try:
        grid = load_map(settings.map_path)
    except (InvalidConfig, OSError) as ex:
        print(f"Failed to load map {settings.map_path}: {ex}")
        sys.exit(1)
    logger.info("viewer opening %s", grid.name)
    Viewer(grid, steps_per_sec=settings.speed).run()


if __name__ == "__main__":
    main()

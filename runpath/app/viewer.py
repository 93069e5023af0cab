# runpath/app/viewer.py
#!/usr/bin/env python3
"""
Run-Constrained Pathfinding Viewer: Minimal Controls + Metrics

- Keyboard:
    [1]/[2]/[3]  -> switch map
    [ and ]      -> min_run down / up
    ; and '      -> max_run down / up
    [P]          -> cycle run presets (standard 1..3, ultra 4..10)
    [SPACE]      -> run/pause
    [N]          -> single step
    [R]          -> reset
    [+]/[-]      -> steps/sec
    [Q]/[ESC]    -> quit

Run bounds at startup:
- ENV: RUNPATH_RUNS=standard|ultra|MIN..MAX
- CLI: --runs=standard|ultra|MIN..MAX
"""

import logging
import sys
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import pygame

from runpath.config import PRESETS, preset_name, resolve_run_bounds
from runpath.core.constrained_dijkstra import ConstrainedDijkstra
from runpath.core.errors import InvalidConfiguration, SearchError
from runpath.core.maps import MAP_FILES, load_map
from runpath.core.search import validate_run_bounds
from runpath.core.types import Cell, Cost, Direction, Scenario, StepResult

log = logging.getLogger(__name__)

# ---------- Config ----------
PANEL_W = 420            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 40
FONT_NAME = None  # default pygame font

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
BLUE        = ( 70,130,180)
RED         = (220, 50, 47)
NEON_CYAN_A = (0,150,255,110)
NEON_MAG_A  = (255,0,120,90)
NEON_MINT   = (0,255,200)
COOL        = ( 40, 60, 90)    # cheapest cell
HOT         = (230,120, 40)    # most expensive cell

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)
BTN_IDLE    = (36,40,48,220)
BTN_HOVER   = (46,50,60,230)
BTN_LIT     = (58,86,160,235)
BTN_EDGE    = (120,170,255)
WARN_RED    = (255,110,110)

STATUS_LABELS = {
    "idle": "Idle",
    "initialized": "Ready",
    "expanding": "Running",
    "goal_found": "Done",
    "exhausted": "No path",
}


def cost_color(cost: Cost, lo: Cost, hi: Cost) -> Tuple[int, int, int]:
    """Blend COOL -> HOT by where cost sits in [lo, hi]."""
    t = 0.0 if hi <= lo else (cost - lo) / (hi - lo)
    t = min(1.0, max(0.0, t))
    return tuple(int(a + (b - a) * t) for a, b in zip(COOL, HOT))


def load_scenario(key: str) -> Scenario:
    return load_map(MAP_FILES[key])


# ---------- panel buttons ----------
@dataclass
class PanelButton:
    """One row of the control stack; `lit` marks the running toggle or the current map."""
    label: str
    rect: pygame.Rect
    on_click: Callable[[], None]
    lit: bool = False

    def contains(self, pos: Tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font, mouse: Tuple[int, int]):
        fill = BTN_LIT if self.lit else BTN_HOVER if self.contains(mouse) else BTN_IDLE
        face = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        face.fill(fill)
        screen.blit(face, self.rect.topleft)
        if self.lit:
            pygame.draw.rect(screen, BTN_EDGE, self.rect, width=2)
        caption = font.render(self.label, True, TEXT_LIGHT)
        screen.blit(caption, caption.get_rect(midleft=(self.rect.x + 12, self.rect.centery)))


# ---------- Viewer ----------
class Viewer:
    def __init__(self, scenario: Scenario, map_key: str = "custom",
                 bounds: Optional[Tuple[int, int]] = None):
        pygame.init()

        self.scenario = scenario
        self.selected_map_key = map_key
        self.min_run, self.max_run = bounds or (scenario.min_run, scenario.max_run)
        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        self.cell_size = self._auto_cell_size()
        grid = scenario.grid
        win_w = GRID_MARGIN*2 + grid.width * self.cell_size + PANEL_W
        win_h = max(GRID_MARGIN*2 + grid.height * self.cell_size, 600)
        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption(f"Run-constrained paths: {scenario.name}")

        self._buttons: List[PanelButton] = []
        self._layout(win_w, win_h)

        self.open_set: set = set()
        self.closed_set: set = set()
        self.path: List[Cell] = []
        self.current = None

        self.running = False
        self.clock = pygame.time.Clock()
        self.steps_per_sec = 8
        self._last_step_t = 0.0
        self.error: Optional[str] = None
        self.algo = ConstrainedDijkstra(self.min_run, self.max_run)
        self._restart_algo()

    # ---------- layout ----------
    def _auto_cell_size(self) -> int:
        g = self.scenario.grid
        target = 720 - GRID_MARGIN*2
        return max(10, min(CELL_SIZE_DEFAULT, target // max(g.width, g.height)))

    def _layout(self, win_w: int, win_h: int):
        """Integer cell_size that fits the window; grid centred left of the panel."""
        g = self.scenario.grid
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = int(max(8, min(avail_w // g.width, avail_h // g.height)))

        plate_w = g.width * self.cell_size + 2 * GRID_MARGIN
        plate_h = g.height * self.cell_size + 2 * GRID_MARGIN
        left_x = max(0, (win_w - PANEL_W - plate_w) // 2)
        top_y = max(0, (win_h - plate_h) // 2)
        self.canvas_rect = pygame.Rect(left_x, top_y, plate_w, plate_h)
        self._grid_origin = (left_x + GRID_MARGIN, top_y + GRID_MARGIN)
        self._right_band = pygame.Rect(win_w - PANEL_W, 0, PANEL_W, win_h)
        self._build_buttons()

    # ---------- algorithm plumbing ----------
    def _restart_algo(self):
        self.running = False
        self._reset_overlays()
        try:
            validate_run_bounds(self.min_run, self.max_run)
        except InvalidConfiguration as ex:
            self.error = str(ex)
            self.algo = ConstrainedDijkstra(self.min_run, self.max_run)
            self.state = "Invalid bounds"
            self._refresh_active_states()
            return
        self.error = None
        self.algo = ConstrainedDijkstra(self.min_run, self.max_run)
        self.algo.init(self.scenario.grid, self.scenario.start, self.scenario.goal)
        self.state = STATUS_LABELS[self.algo.status]
        self._refresh_active_states()

    def _reset_overlays(self):
        self.open_set.clear()
        self.closed_set.clear()
        self.path = []
        self.current = None
        self._last_metrics = {"algo": self.algo.name,
                              "popped": 0, "expanded": 0, "stale": 0,
                              "frontier_size": 0, "path_len": 0, "total_cost": None}

    def _do_step(self):
        if self.error:
            return
        res: StepResult = self.algo.step()
        for c in res.opened:
            self.open_set.add(c)
        for c in res.closed:
            self.closed_set.add(c)
            self.open_set.discard(c)
        if res.current is not None:
            self.current = res.current
        if res.path is not None:
            self.path = res.path
        if res.terminal:
            self.running = False
        self.state = STATUS_LABELS.get(res.status, res.status)
        if res.status == "expanding" and not self.running:
            self.state = "Paused"
        if res.metrics:
            self._last_metrics = res.metrics
        self._refresh_active_states()

    def _tick_algorithm(self):
        t0 = time.time()
        if t0 - self._last_step_t >= 1.0 / max(1, self.steps_per_sec):
            self._last_step_t = t0
            self._do_step()

    def _set_bounds(self, min_run: int, max_run: int):
        # out-of-range values are kept so the panel can show them as invalid
        self.min_run, self.max_run = min_run, max_run
        self._restart_algo()

    def _cycle_preset(self):
        names = list(PRESETS)
        cur = preset_name((self.min_run, self.max_run))
        nxt = names[(names.index(cur) + 1) % len(names)] if cur in names else names[0]
        self._set_bounds(*PRESETS[nxt])

    def _switch_map(self, key: str):
        if key not in MAP_FILES:
            return
        try:
            scenario = load_scenario(key)
        except (SearchError, OSError) as ex:
            log.warning("Failed to load map %s: %s", key, ex)
            return
        self.scenario = scenario
        self.selected_map_key = key
        self.min_run, self.max_run = scenario.min_run, scenario.max_run
        pygame.display.set_caption(f"Run-constrained paths: {scenario.name}")
        self._layout(*self.screen.get_size())
        self._restart_algo()

    def _toggle_run(self):
        if self.error or self.algo.status in ("goal_found", "exhausted"):
            return
        self.running = not self.running
        self.state = "Running" if self.running else "Paused"
        self._refresh_active_states()

    def _bump_speed(self, dv: int):
        self.steps_per_sec = int(max(1, min(120, self.steps_per_sec + dv)))

    # ---------- main loop ----------
    def run(self):
        while True:
            self._handle_events()
            if self.running:
                self._tick_algorithm()
            self._draw()
            self.clock.tick(60)

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
                    self._restart_algo()
                elif e.key == pygame.K_n:
                    self._do_step()
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._bump_speed(+1)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
                    self._bump_speed(-1)
                elif e.key == pygame.K_LEFTBRACKET:
                    self._set_bounds(self.min_run - 1, self.max_run)
                elif e.key == pygame.K_RIGHTBRACKET:
                    self._set_bounds(self.min_run + 1, self.max_run)
                elif e.key == pygame.K_SEMICOLON:
                    self._set_bounds(self.min_run, self.max_run - 1)
                elif e.key == pygame.K_QUOTE:
                    self._set_bounds(self.min_run, self.max_run + 1)
                elif e.key == pygame.K_p:
                    self._cycle_preset()
                elif e.key == pygame.K_1:
                    self._switch_map("01_sample")
                elif e.key == pygame.K_2:
                    self._switch_map("02_wide_valley")
                elif e.key == pygame.K_3:
                    self._switch_map("03_corridor")
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((max(640, e.w), max(480, e.h)), pygame.RESIZABLE)
                self._layout(*self.screen.get_size())
            elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                self._click(e.pos)

    def _click(self, pos: Tuple[int, int]):
        for b in self._buttons:
            if b.contains(pos):
                b.on_click()
                return

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
            c = tuple(int(a + (b - a) * t) for a, b in zip(top, bot))
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _cell_rect(self, cell: Cell) -> pygame.Rect:
        cs = self.cell_size
        ox, oy = self._grid_origin
        col, row = cell
        return pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)

    def _draw_grid(self):
        g = self.scenario.grid
        flat = [v for row in g.cells for v in row]
        lo, hi = min(flat), max(flat)
        show_digits = self.cell_size >= 18

        for row in range(g.height):
            for col in range(g.width):
                v = g.cells[row][col]
                rect = self._cell_rect((col, row))
                pygame.draw.rect(self.screen, cost_color(v, lo, hi), rect)
                pygame.draw.rect(self.screen, BLACK, rect, 1)
                if show_digits:
                    txt = self.font_small.render(f"{v:g}", True, TEXT_LIGHT)
                    self.screen.blit(txt, txt.get_rect(center=rect.center))

        cs = self.cell_size
        for cell in self.closed_set:
            s = pygame.Surface((cs, cs), pygame.SRCALPHA); s.fill(NEON_MAG_A)
            self.screen.blit(s, self._cell_rect(cell).topleft)
        for cell in self.open_set:
            s = pygame.Surface((cs, cs), pygame.SRCALPHA); s.fill(NEON_CYAN_A)
            self.screen.blit(s, self._cell_rect(cell).topleft)

        if self.current is not None and self.current.direction is not Direction.NONE:
            rect = self._cell_rect(self.current.cell)
            dx, dy = self.current.direction.delta
            tip = (rect.centerx + dx * cs // 3, rect.centery + dy * cs // 3)
            pygame.draw.line(self.screen, ACCENT_GOLD, rect.center, tip, 3)

        if len(self.path) >= 2:
            pts = [self._cell_rect(c).center for c in self.path]
            glow = pygame.Surface(self.screen.get_size(), pygame.SRCALPHA)
            pygame.draw.lines(glow, (0, 255, 220, 60), False, pts, 7)
            self.screen.blit(glow, (0,0), special_flags=pygame.BLEND_ADD)
            pygame.draw.lines(self.screen, NEON_MINT, False, pts, 4)

        self._draw_badge(self.scenario.start, BLUE, "S")
        self._draw_badge(self.scenario.goal, RED, "G")

    def _draw_badge(self, cell: Cell, color: Tuple[int, int, int], label: str):
        rect = self._cell_rect(cell)
        pygame.draw.circle(self.screen, color, rect.center, max(6, self.cell_size//2 - 4), 3)
        txt = self.font_small.render(label, True, WHITE)
        self.screen.blit(txt, txt.get_rect(topleft=(rect.x + 2, rect.y + 1)))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 270  # metrics card sits above
        w = max(160, rb.width - 32)
        h = 34
        gap = 8

        def add(label, cb, *, store_as: Optional[str] = None):
            btn = PanelButton(label, pygame.Rect(x, y, w, h), cb)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Run / Pause", self._toggle_run, store_as="btn_run"); y += h + gap
        add("Step Once", self._do_step); y += h + gap
        add("Reset", self._restart_algo); y += h + gap
        add("Preset: next", self._cycle_preset); y += h + gap
        add("Map 1: Sample", lambda: self._switch_map("01_sample"), store_as="btn_map1"); y += h + gap
        add("Map 2: Wide valley", lambda: self._switch_map("02_wide_valley"), store_as="btn_map2"); y += h + gap
        add("Map 3: Corridor", lambda: self._switch_map("03_corridor"), store_as="btn_map3")
        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.lit = getattr(self, "running", False)
        for key, attr in (("01_sample", "btn_map1"), ("02_wide_valley", "btn_map2"),
                          ("03_corridor", "btn_map3")):
            if hasattr(self, attr):
                getattr(self, attr).lit = self.selected_map_key == key

    def _draw_metrics_and_buttons(self):
        rb = self._right_band
        card = pygame.Surface((rb.width - 20, 250), pygame.SRCALPHA)
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
            y0 += surf.get_height() + 5

        line("Metrics", big=True, color=ACCENT_GOLD)
        m = self._last_metrics
        line(f"Popped: {m.get('popped', 0)}   Stale: {m.get('stale', 0)}")
        line(f"Expanded states: {m.get('expanded', 0)}")
        line(f"Frontier: {m.get('frontier_size', 0)}")
        line(f"Path Len: {m.get('path_len', 0)}")
        if m.get("total_cost") is not None:
            line(f"Total Cost: {m['total_cost']}", color=NEON_MINT)
        line("-" * 26)
        bounds = f"Runs: {self.min_run}..{self.max_run} ({preset_name((self.min_run, self.max_run))})"
        line(bounds, color=WARN_RED if self.error else TEXT_LIGHT)
        line(f"State: {self.state}")
        line(f"Speed: {self.steps_per_sec} steps/s")
        if self.error:
            line(self.error[:40], color=WARN_RED)

        mouse = pygame.mouse.get_pos()
        for b in self._buttons:
            b.draw(self.screen, self.font, mouse)


# ---------- main ----------
def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    try:
        scenario = load_scenario("01_sample")
        bounds = resolve_run_bounds()
    except SearchError as ex:
        log.error("Failed to start viewer: %s", ex)
        sys.exit(1)
    Viewer(scenario, map_key="01_sample", bounds=bounds).run()


if __name__ == "__main__":
    main()

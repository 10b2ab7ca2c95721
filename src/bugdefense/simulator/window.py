"""
Main simulator window using pygame.

Hosts the play field, HUD, gate palette, name entry, end-of-game overlay
and leaderboard panel. All game rules live in SessionController; this
module only turns pygame input into controller calls and draws snapshots.
"""

import pygame
import asyncio
import logging
import time
from typing import Optional
from dataclasses import dataclass

from ..core.events import Event, EventType
from ..core.state import Phase
from ..game.catalog import BugCategory
from ..game.controller import SessionController
from ..game.loop import FrameLoop
from ..graphics.field_renderer import FieldRenderer, GATE_COLORS
from ..leaderboard.models import ScoreRecord
from ..leaderboard.service import LeaderboardService

logger = logging.getLogger(__name__)


@dataclass
class WindowConfig:
    """Simulator window configuration."""
    width: int = 1280
    height: int = 720
    title: str = "BUG DEFENSE"
    fullscreen: bool = False
    fps: int = 60

    # Colors
    bg_color: tuple[int, int, int] = (12, 12, 20)
    panel_color: tuple[int, int, int] = (32, 32, 46)
    text_color: tuple[int, int, int] = (210, 210, 230)
    accent_color: tuple[int, int, int] = (57, 255, 20)


PALETTE = [BugCategory.UNIT, BugCategory.CONTRACT, BugCategory.INTEGRATION]

NOTICE_SECONDS = 0.9
LEADERBOARD_WIDTH = 360


class SimulatorWindow:
    """
    Desktop window for playing BUG DEFENSE.

    Mouse:
        Drag a gate from the palette and drop it on a lane.

    Keyboard Mapping:
        Letters/BACKSPACE: Edit player name (name entry)
        RETURN: Confirm name / begin / play again
        N/SPACE: Spawn next bug manually
        A: Abort running session
        R: Reset after a session ends
        P: New player after a session ends
        L: Toggle leaderboard panel
        ESC: Exit simulator
    """

    def __init__(
        self,
        controller: SessionController,
        frame_loop: FrameLoop,
        field_renderer: FieldRenderer,
        leaderboard: Optional[LeaderboardService] = None,
        config: WindowConfig | None = None,
    ) -> None:
        self.config = config or WindowConfig()
        self.controller = controller
        self.frame_loop = frame_loop
        self.field_renderer = field_renderer
        self.leaderboard = leaderboard

        # Pygame setup
        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._running = False

        self._font: pygame.font.Font | None = None
        self._small_font: pygame.font.Font | None = None
        self._big_font: pygame.font.Font | None = None

        self._layout: dict[str, pygame.Rect] = {}
        self._field_buffer = field_renderer.new_buffer()

        # Input state
        self._name_text = ""
        self._dragging: Optional[BugCategory] = None
        self._drag_pos: tuple[int, int] = (0, 0)

        # Transient notice and leaderboard panel
        self._notice: Optional[str] = None
        self._notice_until = 0.0
        self._show_leaderboard = False
        self._global_rows: list[ScoreRecord] = []
        self._local_rows: list[ScoreRecord] = []
        self._background: set[asyncio.Task] = set()

        controller.event_bus.subscribe(EventType.NOTICE, self._on_notice)
        controller.event_bus.subscribe(EventType.RANK_RESOLVED, self._on_rank_resolved)

        logger.info("SimulatorWindow created")

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)

        flags = pygame.DOUBLEBUF
        if self.config.fullscreen:
            flags |= pygame.FULLSCREEN

        self._screen = pygame.display.set_mode(
            (self.config.width, self.config.height),
            flags
        )
        self._clock = pygame.time.Clock()

        pygame.font.init()
        self._font = pygame.font.SysFont("DejaVu Sans", 18)
        self._small_font = pygame.font.SysFont("DejaVu Sans", 14)
        self._big_font = pygame.font.SysFont("DejaVu Sans", 40, bold=True)

        self._calculate_layout()
        logger.info(f"Pygame initialized: {self.config.width}x{self.config.height}")

    def _calculate_layout(self) -> None:
        """Calculate positions for all UI elements."""
        w, h = self.config.width, self.config.height
        layout = self.field_renderer.layout
        field_x = (w - layout.width) // 2
        field_y = 70

        palette_y = field_y + layout.height + 20
        slot_w = 180
        gap = 20
        palette_x = (w - (slot_w * len(PALETTE) + gap * (len(PALETTE) - 1))) // 2

        self._layout = {
            "hud": pygame.Rect(0, 0, w, 60),
            "field": pygame.Rect(field_x, field_y, layout.width, layout.height),
        }
        for idx, category in enumerate(PALETTE):
            self._layout[f"gate_{category.value}"] = pygame.Rect(
                palette_x + idx * (slot_w + gap), palette_y, slot_w, 48
            )

        # Leaderboard beside the field when it fits, otherwise centered over it
        field = self._layout["field"]
        panel_w = LEADERBOARD_WIDTH
        if w - field.right - 20 >= panel_w:
            panel_x = field.right + 10
        else:
            panel_x = (w - panel_w) // 2
        self._layout["leaderboard"] = pygame.Rect(panel_x, field_y, panel_w, h - field_y - 30)

    # Events

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_keydown(event)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._handle_mouse_down(event.pos)
            elif event.type == pygame.MOUSEMOTION:
                self._drag_pos = event.pos
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self._handle_drop(event.pos)

    def _handle_keydown(self, event: pygame.event.Event) -> None:
        """Handle key press."""
        key = event.key
        phase = self.controller.phase

        if key == pygame.K_ESCAPE:
            self._running = False
            return

        if phase is Phase.IDLE:
            if key == pygame.K_RETURN:
                if self.controller.set_player(self._name_text):
                    self.controller.begin()
            elif key == pygame.K_BACKSPACE:
                self._name_text = self._name_text[:-1]
            elif event.unicode and event.unicode.isprintable() and len(self._name_text) < 20:
                self._name_text += event.unicode
            return

        if key == pygame.K_l:
            self._toggle_leaderboard()
        elif key == pygame.K_RETURN and phase in (Phase.READY, Phase.ENDED):
            self.controller.play_again()
        elif key in (pygame.K_n, pygame.K_SPACE) and phase is Phase.RUNNING:
            self.controller.request_spawn()
        elif key == pygame.K_a and phase is Phase.RUNNING:
            self.controller.abort()
        elif key == pygame.K_r and phase is Phase.ENDED:
            self.controller.reset()
        elif key == pygame.K_p and phase in (Phase.READY, Phase.ENDED):
            self.controller.new_player()
            self._name_text = ""

    def _handle_mouse_down(self, pos: tuple[int, int]) -> None:
        for category in PALETTE:
            if self._layout[f"gate_{category.value}"].collidepoint(pos):
                self._dragging = category
                self._drag_pos = pos
                return

    def _handle_drop(self, pos: tuple[int, int]) -> None:
        category = self._dragging
        self._dragging = None
        if category is None:
            return
        field = self._layout["field"]
        if not field.collidepoint(pos):
            return
        local_x = pos[0] - field.x
        local_y = pos[1] - field.y
        lane = self.field_renderer.lane_at(local_y)
        offset = self.field_renderer.to_position(local_x)
        self.controller.place_gate(category, lane, offset)

    def _on_notice(self, event: Event) -> None:
        self._notice = event.data.get("text")
        self._notice_until = time.monotonic() + NOTICE_SECONDS

    def _on_rank_resolved(self, event: Event) -> None:
        if self._show_leaderboard:
            self._refresh_leaderboard()

    # Leaderboard panel

    def _toggle_leaderboard(self) -> None:
        self._show_leaderboard = not self._show_leaderboard
        if self._show_leaderboard:
            self._refresh_leaderboard()

    def _refresh_leaderboard(self) -> None:
        if self.leaderboard is None:
            return
        self._local_rows = self.leaderboard.local_scores()
        task = asyncio.get_running_loop().create_task(self._load_global_rows())
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _load_global_rows(self) -> None:
        self._global_rows = await self.leaderboard.fetch_top()

    # Rendering

    def _text(self, font: pygame.font.Font, text: str, color, pos, center: bool = False) -> None:
        surface = font.render(text, True, color)
        rect = surface.get_rect()
        if center:
            rect.center = pos
        else:
            rect.topleft = pos
        self._screen.blit(surface, rect)

    def _render(self) -> None:
        """Render all UI elements."""
        if not self._screen:
            return

        self._screen.fill(self.config.bg_color)

        if self.controller.phase is Phase.IDLE:
            self._render_name_entry()
        else:
            self._render_hud()
            self._render_field()
            self._render_palette()
            if self.controller.phase is Phase.ENDED:
                self._render_end_overlay()

        if self._show_leaderboard:
            self._render_leaderboard()

        pygame.display.flip()

    def _render_name_entry(self) -> None:
        w, h = self.config.width, self.config.height
        self._text(self._big_font, "BUG DEFENSE", self.config.accent_color, (w // 2, h // 2 - 80), center=True)
        self._text(self._font, "Enter your name and press RETURN", self.config.text_color, (w // 2, h // 2 - 20), center=True)
        box = pygame.Rect(w // 2 - 160, h // 2 + 10, 320, 40)
        pygame.draw.rect(self._screen, self.config.panel_color, box)
        self._text(self._font, self._name_text + "_", (255, 255, 255), (box.x + 10, box.y + 9))

    def _render_hud(self) -> None:
        hud = self.controller.hud()
        pygame.draw.rect(self._screen, self.config.panel_color, self._layout["hud"])

        items = [
            f"Player: {hud.player or '-'}",
            f"Score: {hud.score}",
            f"Combo: {hud.combo}",
            f"Bugs: {hud.remaining}",
            f"Speed: {hud.speed_text}",
            f"Time: {hud.time_left}",
            f"Prod: {hud.health_percent}%",
        ]
        x = 16
        for item in items:
            self._text(self._font, item, self.config.text_color, (x, 8))
            x += 170

        banner = hud.banner
        if self._notice and time.monotonic() < self._notice_until:
            banner = self._notice
        self._text(self._small_font, banner, self.config.accent_color, (16, 36))

    def _render_field(self) -> None:
        self.field_renderer.render(
            self.controller.state,
            self._field_buffer,
            paused=self.controller.phase is Phase.ENDED,
        )
        surface = pygame.surfarray.make_surface(self._field_buffer.swapaxes(0, 1))
        self._screen.blit(surface, self._layout["field"].topleft)

    def _render_palette(self) -> None:
        for category in PALETTE:
            rect = self._layout[f"gate_{category.value}"]
            color = GATE_COLORS[category]
            pygame.draw.rect(self._screen, color, rect, width=2)
            self._text(self._font, category.gate_name, color, rect.center, center=True)

        if self._dragging is not None:
            color = GATE_COLORS[self._dragging]
            x, y = self._drag_pos
            pygame.draw.line(self._screen, color, (x, y - 24), (x, y + 24), 3)

    def _render_end_overlay(self) -> None:
        summary = self.controller.end_summary
        if summary is None:
            return
        w, h = self.config.width, self.config.height
        overlay = pygame.Surface((w, h), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 170))
        self._screen.blit(overlay, (0, 0))

        self._text(self._big_font, summary.title, (255, 210, 110), (w // 2, h // 2 - 60), center=True)
        self._text(self._font, summary.score_text, (255, 255, 255), (w // 2, h // 2), center=True)
        if summary.rank_text:
            self._text(self._font, summary.rank_text, self.config.accent_color, (w // 2, h // 2 + 30), center=True)
        self._text(
            self._small_font,
            "RETURN play again   R reset   P new player   L leaderboard",
            self.config.text_color,
            (w // 2, h // 2 + 70),
            center=True,
        )

    def leaderboard_covers_field(self) -> bool:
        return self._layout["leaderboard"].colliderect(self._layout["field"])

    def _render_leaderboard(self) -> None:
        panel = self._layout["leaderboard"]
        if self.leaderboard_covers_field():
            # Field stays visible but clearly inactive under the panel
            shade = pygame.Surface((self.config.width, self.config.height), pygame.SRCALPHA)
            shade.fill((0, 0, 0, 150))
            self._screen.blit(shade, (0, 0))
        pygame.draw.rect(self._screen, self.config.panel_color, panel)
        my_ids = {r.id for r in self._local_rows if r.id}
        player = self.controller.state.player

        y = panel.y + 10
        self._text(self._font, "Global", self.config.accent_color, (panel.x + 10, y))
        y += 26
        if not self._global_rows:
            self._text(self._small_font, "No scores yet", self.config.text_color, (panel.x + 10, y))
            y += 20
        for idx, row in enumerate(self._global_rows):
            color = (255, 210, 110) if row.id in my_ids or row.name == player else self.config.text_color
            self._text(self._small_font, f"{idx + 1:>2}. {row.name}", color, (panel.x + 10, y))
            self._text(self._small_font, str(row.score), color, (panel.right - 80, y))
            y += 18

        y += 12
        self._text(self._font, "My Scores", self.config.accent_color, (panel.x + 10, y))
        y += 26
        for idx, row in enumerate(self._local_rows[:10]):
            self._text(self._small_font, f"{idx + 1:>2}. {row.name}", self.config.text_color, (panel.x + 10, y))
            self._text(self._small_font, str(row.score), self.config.text_color, (panel.right - 80, y))
            y += 18

    # Main loop

    async def run(self) -> None:
        """Main simulator loop."""
        self._init_pygame()
        self._running = True

        logger.info("Simulator started")

        while self._running:
            self._handle_events()
            self.frame_loop.frame()
            self._render()

            if self._clock:
                self._clock.tick(self.config.fps)

            # Yield to the countdown timer and leaderboard tasks
            await asyncio.sleep(0)

        self._cleanup()

    def _cleanup(self) -> None:
        """Clean up pygame resources."""
        for task in list(self._background):
            task.cancel()
        pygame.quit()
        logger.info("Simulator stopped")

    def stop(self) -> None:
        """Stop the simulator."""
        self._running = False

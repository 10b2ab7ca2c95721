"""Draws the play field into an RGB buffer.

The field is laid out left to right: lanes with the travelling bug and any
placed gates, then the production column, with the health bar along the
bottom edge. Travel-axis positions are scaled onto the lane area.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from bugdefense.game.catalog import BugCategory
from bugdefense.game.constants import GameConfig, DEFAULT_CONFIG
from bugdefense.game.session import SessionState
from bugdefense.graphics.hud import production_status
from bugdefense.graphics.primitives import (
    Buffer,
    Color,
    dim,
    draw_hline,
    draw_rect,
    draw_vline,
    fill,
    new_buffer,
)

logger = logging.getLogger(__name__)


GATE_COLORS: dict = {
    BugCategory.UNIT: (80, 255, 140),
    BugCategory.CONTRACT: (90, 200, 255),
    BugCategory.INTEGRATION: (255, 170, 60),
}

PRODUCTION_COLORS: dict = {
    "healthy": (60, 200, 120),
    "damaged": (230, 190, 60),
    "critical": (240, 110, 60),
    "broken": (200, 40, 40),
}


@dataclass
class FieldLayout:
    """Pixel layout of the field buffer."""
    width: int = 640
    height: int = 360
    margin: int = 8
    production_width: int = 48
    health_bar_height: int = 10

    @property
    def lanes_bottom(self) -> int:
        return self.height - self.health_bar_height - self.margin

    @property
    def production_left(self) -> int:
        return self.width - self.margin - self.production_width


class FieldRenderer:
    """Renders a SessionState onto a numpy buffer."""

    BG_COLOR: Color = (14, 14, 24)
    LANE_COLOR: Color = (40, 40, 60)
    BUG_COLOR: Color = (255, 90, 90)
    SPENT_GATE_COLOR: Color = (70, 70, 80)

    def __init__(self, layout: Optional[FieldLayout] = None, config: GameConfig = DEFAULT_CONFIG):
        self.layout = layout or FieldLayout()
        self.config = config

    def new_buffer(self) -> Buffer:
        return new_buffer(self.layout.width, self.layout.height, self.BG_COLOR)

    # Coordinate mapping

    @property
    def _px_per_unit(self) -> float:
        geometry = self.config.geometry
        span = self.layout.production_left - self.layout.margin
        return span / (geometry.production_position + geometry.bug_length)

    def to_px(self, position: float) -> int:
        """Travel-axis position to buffer x."""
        return self.layout.margin + int(round(position * self._px_per_unit))

    def to_position(self, x: int) -> float:
        """Buffer x to travel-axis position (for mouse drops)."""
        return (x - self.layout.margin) / self._px_per_unit

    def lane_bounds(self, lane: int) -> Tuple[int, int]:
        """Top and bottom y of a lane."""
        top = self.layout.margin
        lane_h = (self.layout.lanes_bottom - top) // self.config.lanes
        y1 = top + lane * lane_h
        return y1, y1 + lane_h - 1

    def lane_at(self, y: int) -> int:
        """Lane under buffer y, clamped to the valid range."""
        top = self.layout.margin
        lane_h = max(1, (self.layout.lanes_bottom - top) // self.config.lanes)
        return max(0, min(self.config.lanes - 1, (y - top) // lane_h))

    # Drawing

    def render(self, state: SessionState, buffer: Optional[Buffer] = None, paused: bool = False) -> Buffer:
        """Draw the whole field. Returns the buffer drawn into."""
        if buffer is None:
            buffer = self.new_buffer()
        fill(buffer, self.BG_COLOR)

        self._render_lanes(buffer)
        self._render_gates(buffer, state)
        self._render_bug(buffer, state)
        self._render_production(buffer, state)
        self._render_health(buffer, state)

        if paused:
            dim(buffer, 0.5)
        return buffer

    def _render_lanes(self, buffer: Buffer) -> None:
        right = self.layout.production_left - 1
        for lane in range(self.config.lanes):
            y1, y2 = self.lane_bounds(lane)
            draw_hline(buffer, self.layout.margin, right, y1, self.LANE_COLOR)
            draw_hline(buffer, self.layout.margin, right, y2, self.LANE_COLOR)

    def _render_gates(self, buffer: Buffer, state: SessionState) -> None:
        half = max(1, int(self.config.geometry.gate_half_width * self._px_per_unit))
        for gate in state.gates:
            y1, y2 = self.lane_bounds(gate.lane)
            x = self.to_px(gate.center)
            color = self.SPENT_GATE_COLOR if gate.consumed else GATE_COLORS[gate.category]
            draw_rect(buffer, x - half, y1 + 2, half * 2, y2 - y1 - 3, color, filled=False)
            draw_vline(buffer, x, y1 + 2, y2 - 2, color)

    def _render_bug(self, buffer: Buffer, state: SessionState) -> None:
        bug = state.current_bug
        if bug is None or not bug.alive:
            return
        y1, y2 = self.lane_bounds(bug.lane)
        x1 = self.to_px(bug.position)
        x2 = self.to_px(bug.position + self.config.geometry.bug_length)
        pad = max(2, (y2 - y1) // 4)
        draw_rect(buffer, x1, y1 + pad, x2 - x1, y2 - y1 - 2 * pad, self.BUG_COLOR)

    def _render_production(self, buffer: Buffer, state: SessionState) -> None:
        status = production_status(state.health_percent)
        draw_rect(
            buffer,
            self.layout.production_left,
            self.layout.margin,
            self.layout.production_width,
            self.layout.lanes_bottom - self.layout.margin,
            PRODUCTION_COLORS[status],
        )

    def _render_health(self, buffer: Buffer, state: SessionState) -> None:
        y = self.layout.height - self.layout.health_bar_height - self.layout.margin // 2
        full = self.layout.width - 2 * self.layout.margin
        draw_rect(buffer, self.layout.margin, y, full, self.layout.health_bar_height, (40, 40, 40))

        pct = state.health_percent
        color = (255, 107, 107) if pct < 30 else (57, 255, 20)
        draw_rect(buffer, self.layout.margin, y, full * pct // 100, self.layout.health_bar_height, color)

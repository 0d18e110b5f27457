"""Simulation state and the render-ready scene snapshot.

:class:`SimulationState` is mutated in place by the loop once per tick.
:class:`Scene` is an immutable copy handed to the renderer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class LoopState(StrEnum):
    RUNNING = "running"
    TERMINATED = "terminated"


@dataclass(slots=True)
class Ball:
    x: float
    y: float
    speed_x: float
    speed_y: float


@dataclass(slots=True)
class Paddle:
    x: float
    y: float
    points: int = 0


@dataclass(slots=True)
class SimulationState:
    """Ball plus the volume-controlled (left) and autopilot (right) paddles."""

    ball: Ball
    player1: Paddle
    player2: Paddle


class PaddleRect(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    width: float
    height: float


class Scene(BaseModel):
    """Everything the renderer needs to draw one frame."""

    model_config = ConfigDict(frozen=True)

    ball_x: float
    ball_y: float
    ball_radius: float
    player1: PaddleRect
    player2: PaddleRect
    volume: int = Field(..., ge=0)
    player1_points: int = Field(default=0, ge=0)
    player2_points: int = Field(default=0, ge=0)
    ball_speed_x: float = 0.0

    def overlay_lines(self, *, show_ball_speed: bool = True) -> list[str]:
        """Text lines drawn in the top-left corner."""
        lines = [
            f"Volume: {self.volume}",
            f"Player 1: {self.player1_points}",
            f"Player 2: {self.player2_points}",
        ]
        if show_ball_speed:
            lines.append(f"Ball Speed: {self.ball_speed_x:f}")
        return lines

"""Fixed-tick Pong simulation driven by the latest known volume."""

from volpong.simulation.loop import SimulationLoop
from volpong.simulation.models import Ball, LoopState, Paddle, PaddleRect, Scene, SimulationState
from volpong.simulation.physics import volume_to_paddle_y

__all__ = [
    "Ball",
    "LoopState",
    "Paddle",
    "PaddleRect",
    "Scene",
    "SimulationLoop",
    "SimulationState",
    "volume_to_paddle_y",
]

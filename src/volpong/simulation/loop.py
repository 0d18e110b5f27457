"""Fixed-tick simulation loop."""

from __future__ import annotations

import logging
import random

from volpong.config import PongConfig
from volpong.exceptions import SimulationTerminatedError
from volpong.simulation import physics
from volpong.simulation.models import LoopState, PaddleRect, Scene, SimulationState
from volpong.state.bridge import VolumeBridge

_logger = logging.getLogger(__name__)


class SimulationLoop:
    """Advances the game one tick at a time.

    The loop owns :class:`SimulationState` and is its only writer. It
    reads the bridge once per tick and never waits on it. The external
    renderer drives the cadence by calling :meth:`tick`.
    """

    def __init__(
        self,
        config: PongConfig,
        bridge: VolumeBridge,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config
        self._bridge = bridge
        self._rng = rng or random.Random()
        self._state = physics.initial_state(config, self._rng)
        self._status = LoopState.RUNNING
        self._ticks = 0

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def status(self) -> LoopState:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._status is LoopState.RUNNING

    @property
    def ticks(self) -> int:
        return self._ticks

    def terminate(self) -> None:
        """Move to ``TERMINATED``. There is no way back."""
        if self._status is LoopState.TERMINATED:
            return
        self._status = LoopState.TERMINATED
        _logger.debug(
            "Simulation terminated after %d ticks score=%d:%d",
            self._ticks,
            self._state.player1.points,
            self._state.player2.points,
        )

    def tick(self) -> Scene:
        """Run one tick and return the scene to draw."""
        if self._status is LoopState.TERMINATED:
            raise SimulationTerminatedError("tick() called on a terminated simulation")

        config = self._config
        state = self._state

        volume = self._bridge.load()
        state.player1.y = physics.volume_to_paddle_y(
            volume,
            screen_height=config.screen_height,
            paddle_height=config.paddle_height,
            volume_max=self._bridge.maximum,
        )

        physics.advance_ball(state.ball)
        hit = physics.bounce_off_paddles(state, config)
        physics.bounce_off_walls(state.ball, config)
        physics.steer_autopilot(state, config)
        # A returned ball is back in play even if its edge is past the goal line.
        scorer = None if hit else physics.score_if_out(state, config, self._rng)
        if scorer is not None:
            _logger.debug(
                "Player %d scored, score=%d:%d",
                scorer,
                state.player1.points,
                state.player2.points,
            )

        self._ticks += 1
        return self._scene(volume)

    def _scene(self, volume: int) -> Scene:
        config = self._config
        state = self._state
        return Scene(
            ball_x=state.ball.x,
            ball_y=state.ball.y,
            ball_radius=config.ball_radius,
            player1=PaddleRect(
                x=state.player1.x,
                y=state.player1.y,
                width=config.paddle_width,
                height=config.paddle_height,
            ),
            player2=PaddleRect(
                x=state.player2.x,
                y=state.player2.y,
                width=config.paddle_width,
                height=config.paddle_height,
            ),
            volume=volume,
            player1_points=state.player1.points,
            player2_points=state.player2.points,
            ball_speed_x=state.ball.speed_x,
        )

"""Per-tick physics steps.

Each function mutates the state it is given and nothing else. The
order in which :class:`~volpong.simulation.loop.SimulationLoop` calls
them is part of the game rules.
"""

from __future__ import annotations

import random

from volpong.config import PongConfig
from volpong.simulation.models import Ball, Paddle, SimulationState


def volume_to_paddle_y(
    volume: int,
    *,
    screen_height: float,
    paddle_height: float,
    volume_max: int,
) -> float:
    """Map ``[0, volume_max]`` linearly onto ``[0, screen_height - paddle_height]``.

    No smoothing: a jump in volume is a jump in paddle position.
    """
    clamped = max(0, min(volume_max, volume))
    return (screen_height - paddle_height) * (clamped / volume_max)


def serve(ball: Ball, config: PongConfig, rng: random.Random, *, direction: int) -> None:
    """Recentre the ball and launch it horizontally toward ``direction`` (-1 left, +1 right)."""
    ball.x = config.screen_width / 2
    ball.y = config.screen_height / 2
    ball.speed_x = config.serve_speed if direction > 0 else -config.serve_speed
    ball.speed_y = rng.uniform(-config.serve_jitter, config.serve_jitter)


def initial_state(config: PongConfig, rng: random.Random) -> SimulationState:
    ball = Ball(x=0.0, y=0.0, speed_x=0.0, speed_y=0.0)
    serve(ball, config, rng, direction=1)
    bottom = float(config.screen_height - config.paddle_height)
    return SimulationState(
        ball=ball,
        player1=Paddle(x=float(config.paddle_margin), y=bottom),
        player2=Paddle(x=float(config.screen_width - config.paddle_width - config.paddle_margin), y=bottom),
    )


def advance_ball(ball: Ball) -> None:
    ball.x += ball.speed_x
    ball.y += ball.speed_y


def _within_span(ball: Ball, paddle: Paddle, paddle_height: float) -> bool:
    return paddle.y <= ball.y <= paddle.y + paddle_height


def _hit(ball: Ball, accel: float) -> None:
    ball.speed_x = -(ball.speed_x * accel)
    ball.speed_y = ball.speed_y * accel


def bounce_off_paddles(state: SimulationState, config: PongConfig) -> bool:
    """Reflect and accelerate the ball on contact with a paddle's front edge.

    Only a ball moving toward the paddle can hit it, so a ball that is
    still overlapping the edge on the next tick is not reflected back.
    Returns ``True`` on a hit.
    """
    ball = state.ball
    r = config.ball_radius
    left = state.player1
    right = state.player2

    if (
        ball.speed_x < 0
        and ball.x - r <= left.x + config.paddle_width
        and _within_span(ball, left, config.paddle_height)
    ):
        _hit(ball, config.ball_accel)
        return True

    if ball.speed_x > 0 and ball.x + r >= right.x and _within_span(ball, right, config.paddle_height):
        _hit(ball, config.ball_accel)
        return True

    return False


def bounce_off_walls(ball: Ball, config: PongConfig) -> None:
    r = config.ball_radius
    if (ball.y - r <= 0 and ball.speed_y < 0) or (ball.y + r >= config.screen_height and ball.speed_y > 0):
        ball.speed_y = -ball.speed_y


def steer_autopilot(state: SimulationState, config: PongConfig) -> None:
    """Move the right paddle one step toward the ball once it is past the midline."""
    ball = state.ball
    paddle = state.player2
    if ball.x <= config.screen_width / 2:
        return

    center = paddle.y + config.paddle_height / 2
    if ball.y > center:
        paddle.y = min(paddle.y + config.autopilot_speed, config.screen_height - config.paddle_height)
    elif ball.y < center:
        paddle.y = max(paddle.y - config.autopilot_speed, 0.0)


def score_if_out(state: SimulationState, config: PongConfig, rng: random.Random) -> int | None:
    """Award a point when the ball leaves through a side.

    Returns the scoring player (1 or 2), or ``None``. After a point the
    ball is served toward the side that was just scored against.
    """
    ball = state.ball
    r = config.ball_radius

    if ball.x - r <= 0:
        state.player2.points += 1
        serve(ball, config, rng, direction=-1)
        return 2

    if ball.x + r >= config.screen_width:
        state.player1.points += 1
        serve(ball, config, rng, direction=1)
        return 1

    return None

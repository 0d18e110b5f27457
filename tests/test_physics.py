from __future__ import annotations

import math
import random

import pytest

from volpong.config import PongConfig
from volpong.simulation import physics
from volpong.simulation.models import Ball, Paddle, SimulationState

CONFIG = PongConfig()
TRAVEL = CONFIG.screen_height - CONFIG.paddle_height


def _state(ball: Ball, *, left_y: float = 200.0, right_y: float = 200.0) -> SimulationState:
    return SimulationState(
        ball=ball,
        player1=Paddle(x=20.0, y=left_y),
        player2=Paddle(x=610.0, y=right_y),
    )


def _map(volume: int) -> float:
    return physics.volume_to_paddle_y(
        volume,
        screen_height=CONFIG.screen_height,
        paddle_height=CONFIG.paddle_height,
        volume_max=CONFIG.volume_max,
    )


def test_volume_mapping_is_monotonic_and_bounded() -> None:
    positions = [_map(v) for v in range(128)]

    assert positions == sorted(positions)
    assert all(0 <= y <= TRAVEL for y in positions)
    assert positions[0] == 0
    assert positions[127] == pytest.approx(TRAVEL)


def test_volume_mapping_clamps_out_of_range_input() -> None:
    assert _map(-10) == 0
    assert _map(1000) == pytest.approx(TRAVEL)


def test_initial_state_places_paddles_and_serves_right() -> None:
    state = physics.initial_state(CONFIG, random.Random(1))

    assert state.player1.x == 20
    assert state.player2.x == CONFIG.screen_width - CONFIG.paddle_width - 20
    assert state.player1.y == state.player2.y == TRAVEL
    assert state.ball.x == CONFIG.screen_width / 2
    assert state.ball.y == CONFIG.screen_height / 2
    assert state.ball.speed_x == CONFIG.serve_speed
    assert abs(state.ball.speed_y) <= CONFIG.serve_jitter


def test_left_paddle_hit_reflects_and_accelerates() -> None:
    state = _state(Ball(x=34.0, y=240.0, speed_x=-5.0, speed_y=1.0))

    assert physics.bounce_off_paddles(state, CONFIG) is True
    assert state.ball.speed_x == pytest.approx(6.0)
    assert state.ball.speed_y == pytest.approx(1.2)


def test_right_paddle_hit_reflects_and_accelerates() -> None:
    state = _state(Ball(x=607.0, y=210.0, speed_x=3.0, speed_y=-2.0))

    assert physics.bounce_off_paddles(state, CONFIG) is True
    assert state.ball.speed_x == pytest.approx(-3.6)
    assert state.ball.speed_y == pytest.approx(-2.4)


def test_ball_outside_paddle_span_is_not_reflected() -> None:
    state = _state(Ball(x=34.0, y=100.0, speed_x=-5.0, speed_y=1.0))

    assert physics.bounce_off_paddles(state, CONFIG) is False
    assert state.ball.speed_x == -5.0


def test_ball_leaving_paddle_is_not_reflected_again() -> None:
    state = _state(Ball(x=34.0, y=240.0, speed_x=6.0, speed_y=1.2))

    assert physics.bounce_off_paddles(state, CONFIG) is False
    assert state.ball.speed_x == 6.0


def test_speed_grows_monotonically_across_rallies() -> None:
    ball = Ball(x=34.0, y=240.0, speed_x=-2.0, speed_y=0.5)
    state = _state(ball)
    speeds = [math.hypot(ball.speed_x, ball.speed_y)]

    for rally in range(30):
        ball.x = 34.0 if ball.speed_x < 0 else 607.0
        ball.y = 240.0
        assert physics.bounce_off_paddles(state, CONFIG) is True
        speeds.append(math.hypot(ball.speed_x, ball.speed_y))

    assert all(later > earlier for earlier, later in zip(speeds, speeds[1:]))
    assert all(math.isfinite(speed) for speed in speeds)


@pytest.mark.parametrize(
    ("y", "speed_y", "expected"),
    [
        (4.0, -1.5, 1.5),
        (476.0, 1.5, -1.5),
        (4.0, 1.5, 1.5),
        (240.0, -1.5, -1.5),
    ],
)
def test_wall_bounce(y: float, speed_y: float, expected: float) -> None:
    ball = Ball(x=320.0, y=y, speed_x=2.0, speed_y=speed_y)
    physics.bounce_off_walls(ball, CONFIG)
    assert ball.speed_y == expected


def test_autopilot_holds_before_midline() -> None:
    state = _state(Ball(x=300.0, y=450.0, speed_x=2.0, speed_y=0.0), right_y=100.0)
    physics.steer_autopilot(state, CONFIG)
    assert state.player2.y == 100.0


def test_autopilot_steps_toward_ball_after_midline() -> None:
    state = _state(Ball(x=400.0, y=450.0, speed_x=2.0, speed_y=0.0), right_y=100.0)
    physics.steer_autopilot(state, CONFIG)
    assert state.player2.y == pytest.approx(100.0 + CONFIG.autopilot_speed)

    state.ball.y = 10.0
    physics.steer_autopilot(state, CONFIG)
    assert state.player2.y == pytest.approx(100.0)


def test_autopilot_stays_on_screen() -> None:
    state = _state(Ball(x=400.0, y=479.0, speed_x=2.0, speed_y=0.0), right_y=TRAVEL - 1.0)
    physics.steer_autopilot(state, CONFIG)
    assert state.player2.y == TRAVEL


def test_left_exit_scores_for_right_player_and_resets_ball() -> None:
    state = _state(Ball(x=3.0, y=50.0, speed_x=-9.0, speed_y=4.0))

    assert physics.score_if_out(state, CONFIG, random.Random(7)) == 2
    assert state.player2.points == 1
    assert state.player1.points == 0
    assert state.ball.x == CONFIG.screen_width / 2
    assert state.ball.y == CONFIG.screen_height / 2
    assert state.ball.speed_x == -CONFIG.serve_speed
    assert abs(state.ball.speed_y) <= CONFIG.serve_jitter


def test_right_exit_scores_for_left_player_and_resets_ball() -> None:
    state = _state(Ball(x=637.0, y=50.0, speed_x=9.0, speed_y=4.0))

    assert physics.score_if_out(state, CONFIG, random.Random(7)) == 1
    assert state.player1.points == 1
    assert state.player2.points == 0
    assert state.ball.speed_x == CONFIG.serve_speed


def test_ball_in_play_does_not_score() -> None:
    state = _state(Ball(x=320.0, y=240.0, speed_x=2.0, speed_y=0.0))
    assert physics.score_if_out(state, CONFIG, random.Random(7)) is None
    assert state.player1.points == state.player2.points == 0

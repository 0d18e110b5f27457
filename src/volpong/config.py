"""Runtime configuration for volpong."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from volpong._constants import (
    BLUEZ_SERVICE,
    DEFAULT_VOLUME,
    DEVICE_VOLUME_MAX,
    MEDIA_TRANSPORT_INTERFACE,
    VOLUME_PROPERTY,
)
from volpong.exceptions import VolpongConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class PongConfig:
    """Game geometry, physics constants and bus identities.

    Parameters
    ----------
    screen_width, screen_height : int
        Logical playfield size in pixels.
    paddle_width, paddle_height : int
        Paddle rectangle size.
    paddle_margin : int
        Distance between each paddle and its side of the screen.
    ball_radius : float
        Ball radius used for wall, paddle and goal tests.
    ball_accel : float
        Factor applied to both velocity components on every paddle hit.
        Must be greater than 1.
    autopilot_speed : float
        Step per tick of the computer-controlled (right) paddle.
    serve_speed : float
        Horizontal speed of the ball after a point is scored.
    serve_jitter : float
        Bound of the random vertical speed after a point is scored.
    tick_rate : int
        Ticks per second of the render loop.
    volume_max : int
        Top of the device volume range (AVRCP uses 0-127).
    default_volume : int
        Value reported before the first volume notification arrives.
    bus_address : str or None
        Explicit D-Bus address. ``None`` uses the system bus.
    publisher : str
        Bus name of the signal sender installed in the match rule.
    transport_interface : str
        Interface whose ``PropertiesChanged`` carries the volume.
    volume_property : str
        Property key holding the volume.
    startup_timeout : float
        Seconds ``VolumeListener.start`` waits for the bus setup.
    show_ball_speed : bool
        Draw the horizontal ball speed in the overlay.
    window_title : str
        Title of the game window.
    """

    screen_width: int = 640
    screen_height: int = 480
    paddle_width: int = 10
    paddle_height: int = 80
    paddle_margin: int = 20
    ball_radius: float = 5.0
    ball_accel: float = 1.2
    autopilot_speed: float = 1.8
    serve_speed: float = 2.0
    serve_jitter: float = 1.0
    tick_rate: int = 60
    volume_max: int = DEVICE_VOLUME_MAX
    default_volume: int = DEFAULT_VOLUME
    bus_address: str | None = None
    publisher: str = BLUEZ_SERVICE
    transport_interface: str = MEDIA_TRANSPORT_INTERFACE
    volume_property: str = VOLUME_PROPERTY
    startup_timeout: float = 10.0
    show_ball_speed: bool = True
    window_title: str = "volpong"

    def __post_init__(self) -> None:
        if self.screen_width <= 0 or self.screen_height <= 0:
            raise VolpongConfigError("screen dimensions must be positive")
        if not 0 < self.paddle_height < self.screen_height:
            raise VolpongConfigError(
                f"paddle_height must be between 0 and screen_height ({self.screen_height}), got {self.paddle_height}"
            )
        if self.paddle_width <= 0 or 2 * (self.paddle_margin + self.paddle_width) >= self.screen_width:
            raise VolpongConfigError("paddles do not fit horizontally on the screen")
        if self.ball_radius <= 0:
            raise VolpongConfigError("ball_radius must be positive")
        if self.ball_accel <= 1.0:
            raise VolpongConfigError(f"ball_accel must be greater than 1, got {self.ball_accel}")
        if self.tick_rate <= 0:
            raise VolpongConfigError("tick_rate must be positive")
        if self.volume_max <= 0:
            raise VolpongConfigError("volume_max must be positive")
        if not 0 <= self.default_volume <= self.volume_max:
            raise VolpongConfigError(
                f"default_volume must be within 0..{self.volume_max}, got {self.default_volume}"
            )

    @classmethod
    def from_env(cls, **overrides: Any) -> PongConfig:
        """Create configuration from environment variables.

        Reads optional ``VOLPONG_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        PongConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "VOLPONG_BUS_ADDRESS": "bus_address",
            "VOLPONG_PUBLISHER": "publisher",
            "VOLPONG_TRANSPORT_INTERFACE": "transport_interface",
            "VOLPONG_VOLUME_PROPERTY": "volume_property",
            "VOLPONG_WINDOW_TITLE": "window_title",
        }
        _ENV_INT_MAP = {
            "VOLPONG_SCREEN_WIDTH": "screen_width",
            "VOLPONG_SCREEN_HEIGHT": "screen_height",
            "VOLPONG_TICK_RATE": "tick_rate",
            "VOLPONG_VOLUME_MAX": "volume_max",
            "VOLPONG_DEFAULT_VOLUME": "default_volume",
        }
        _ENV_FLOAT_MAP = {
            "VOLPONG_BALL_ACCEL": "ball_accel",
            "VOLPONG_AUTOPILOT_SPEED": "autopilot_speed",
            "VOLPONG_SERVE_SPEED": "serve_speed",
            "VOLPONG_STARTUP_TIMEOUT": "startup_timeout",
        }

        config_kwargs: dict[str, Any] = {}
        try:
            for env_key, field_name in _ENV_STR_MAP.items():
                val = env.get(env_key)
                if val is not None and field_name not in overrides:
                    config_kwargs[field_name] = val
            for env_key, field_name in _ENV_INT_MAP.items():
                val = env.get(env_key)
                if val is not None and field_name not in overrides:
                    config_kwargs[field_name] = int(val)
            for env_key, field_name in _ENV_FLOAT_MAP.items():
                val = env.get(env_key)
                if val is not None and field_name not in overrides:
                    config_kwargs[field_name] = float(val)
        except ValueError as exc:
            raise VolpongConfigError(f"Invalid numeric environment value: {exc}") from exc

        if "show_ball_speed" not in overrides:
            config_kwargs["show_ball_speed"] = _env_bool(env.get("VOLPONG_SHOW_BALL_SPEED"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)

"""pygame renderer and frame clock."""

from __future__ import annotations

import logging
from typing import Protocol

import pygame

from volpong.config import PongConfig
from volpong.simulation.models import Scene

_logger = logging.getLogger(__name__)

_BACKGROUND = (0, 0, 0)
_FOREGROUND = (255, 255, 255)


class RendererProtocol(Protocol):
    """What the application loop needs from a renderer.

    The renderer also owns the frame cadence: :meth:`wait_for_next_tick`
    sleeps until the next tick is due.
    """

    def open(self) -> None:
        ...

    def close_requested(self) -> bool:
        ...

    def draw(self, scene: Scene) -> None:
        ...

    def wait_for_next_tick(self) -> None:
        ...

    def close(self) -> None:
        ...


class PygameRenderer:
    """Draws a :class:`Scene` into a pygame window at ``config.tick_rate``."""

    def __init__(self, config: PongConfig) -> None:
        self._config = config
        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._font: pygame.font.Font | None = None

    def open(self) -> None:
        pygame.init()
        pygame.display.set_caption(self._config.window_title)
        self._screen = pygame.display.set_mode((self._config.screen_width, self._config.screen_height))
        self._clock = pygame.time.Clock()
        try:
            self._font = pygame.font.SysFont("monospace", 14)
        except Exception:
            _logger.debug("Font init failed; overlay disabled", exc_info=True)
            self._font = None
        _logger.debug(
            "Window opened %dx%d at %d Hz",
            self._config.screen_width,
            self._config.screen_height,
            self._config.tick_rate,
        )

    def close_requested(self) -> bool:
        requested = False
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                requested = True
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                requested = True
        return requested

    def draw(self, scene: Scene) -> None:
        screen = self._screen
        if screen is None:
            raise RuntimeError("PygameRenderer.draw() called before open()")

        screen.fill(_BACKGROUND)
        pygame.draw.circle(screen, _FOREGROUND, (scene.ball_x, scene.ball_y), scene.ball_radius)
        for paddle in (scene.player1, scene.player2):
            pygame.draw.rect(screen, _FOREGROUND, pygame.Rect(paddle.x, paddle.y, paddle.width, paddle.height))

        if self._font is not None:
            y = 10
            for line in scene.overlay_lines(show_ball_speed=self._config.show_ball_speed):
                screen.blit(self._font.render(line, True, _FOREGROUND), (10, y))
                y += 20

        pygame.display.flip()

    def wait_for_next_tick(self) -> None:
        if self._clock is not None:
            self._clock.tick(self._config.tick_rate)

    def close(self) -> None:
        self._screen = None
        self._clock = None
        self._font = None
        pygame.quit()

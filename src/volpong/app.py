"""Application wiring: bus listener in the background, game loop in the foreground."""

from __future__ import annotations

import logging
from typing import Protocol

from volpong._listener import VolumeListener
from volpong.config import PongConfig
from volpong.render import PygameRenderer, RendererProtocol
from volpong.simulation.loop import SimulationLoop
from volpong.state.bridge import VolumeBridge

_logger = logging.getLogger(__name__)


class ListenerProtocol(Protocol):
    def start(self) -> None:
        ...

    def stop(self) -> None:
        ...


def run(
    config: PongConfig,
    *,
    bridge: VolumeBridge | None = None,
    listener: ListenerProtocol | None = None,
    renderer: RendererProtocol | None = None,
) -> SimulationLoop:
    """Run the game until the window is closed.

    Bus setup errors from ``listener.start()`` propagate before any
    window is opened. Returns the terminated simulation.
    """
    bridge = bridge or VolumeBridge(config.default_volume, maximum=config.volume_max)
    listener = listener or VolumeListener(config=config, bridge=bridge)
    renderer = renderer or PygameRenderer(config)

    listener.start()
    simulation = SimulationLoop(config, bridge)
    try:
        try:
            renderer.open()
            while simulation.is_running:
                if renderer.close_requested():
                    simulation.terminate()
                    break
                renderer.draw(simulation.tick())
                renderer.wait_for_next_tick()
        finally:
            renderer.close()
    finally:
        simulation.terminate()
        listener.stop()

    state = simulation.state
    _logger.info("Final score %d:%d", state.player1.points, state.player2.points)
    return simulation

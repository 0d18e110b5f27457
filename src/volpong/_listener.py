"""Background bus listener feeding the volume bridge.

Owns:
- the bus connection and its asyncio loop, on a dedicated daemon thread
- the one-time match rule install
- decoding every delivered signal and storing the result
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from collections.abc import Callable

from dbus_fast import Message, MessageType
from dbus_fast.aio import MessageBus

from volpong._bus import build_match_rule, connect, install_filter
from volpong.config import PongConfig
from volpong.exceptions import BusConnectionError, BusError
from volpong.ingestion.signals import RawSignal, decode_volume
from volpong.state.bridge import VolumeBridge


class VolumeListener:
    """Threaded dbus-fast runtime that stores decoded volumes into a :class:`VolumeBridge`.

    This is the only writer of the bridge. The thread parks on bus
    delivery; nothing here ever runs on the simulation thread except
    :meth:`start` and :meth:`stop`.
    """

    def __init__(
        self,
        *,
        config: PongConfig,
        bridge: VolumeBridge,
        on_volume: Callable[[int], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._bridge = bridge
        self._on_volume = on_volume
        self._logger = logger or logging.getLogger(__name__)
        self._thread: threading.Thread | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._bus: MessageBus | None = None
        self._ready = threading.Event()
        self._startup_error: BusError | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        """Whether the listener is connected and receiving signals."""
        return self._running

    def start(self) -> None:
        """Connect, install the match rule and start receiving.

        Blocks until the bus daemon acknowledged the match rule and the
        message handler is registered. Setup failures are re-raised here.
        """
        self.stop()
        self._ready.clear()
        self._startup_error = None

        thread = threading.Thread(target=self._thread_main, name="volpong-bus", daemon=True)
        self._thread = thread
        thread.start()

        timeout = self._config.startup_timeout
        if not self._ready.wait(timeout):
            raise BusConnectionError(
                f"Bus setup did not complete within {timeout:g}s",
                address=self._config.bus_address,
            )

        error = self._startup_error
        if error is not None:
            thread.join()
            self._thread = None
            raise error

        self._logger.debug("Bus listener thread started")

    def stop(self) -> None:
        """Disconnect from the bus and join the listener thread."""
        thread = self._thread
        loop = self._loop
        bus = self._bus
        self._thread = None
        self._running = False

        if thread is None:
            return
        if bus is not None and loop is not None and not loop.is_closed():
            self._logger.debug("Bus disconnect requested")
            # The loop may close between the check and the call.
            with contextlib.suppress(RuntimeError):
                loop.call_soon_threadsafe(bus.disconnect)
        thread.join(timeout=self._config.startup_timeout)
        self._logger.debug("Bus listener thread stopped")

    def handle_message(self, message: Message) -> None:
        """Message handler registered on the bus; runs on the listener thread."""
        if message.message_type != MessageType.SIGNAL:
            return None
        try:
            signal = RawSignal.from_message(message)
            volume = decode_volume(
                signal,
                interface=self._config.transport_interface,
                key=self._config.volume_property,
                maximum=self._bridge.maximum,
            )
            if volume is None:
                return None
            self._logger.debug("Volume changed to %d path=%s", volume, signal.path)
            self._bridge.store(volume)
            if self._on_volume is not None:
                self._on_volume(volume)
        except Exception:
            self._logger.debug("Bus signal handling failure", exc_info=True)
        return None

    def _thread_main(self) -> None:
        asyncio.run(self._run())

    async def _run(self) -> None:
        self._loop = asyncio.get_running_loop()
        try:
            bus = await self._setup()
        except BusError as exc:
            self._startup_error = exc
            self._ready.set()
            return
        except Exception as exc:
            error = BusConnectionError(
                f"Bus setup failed: {type(exc).__name__}: {exc}",
                address=self._config.bus_address,
            )
            error.__cause__ = exc
            self._startup_error = error
            self._ready.set()
            return

        self._bus = bus
        self._running = True
        self._logger.info("Listening for %s signals...", self._config.publisher)
        self._ready.set()
        try:
            await bus.wait_for_disconnect()
        except Exception:
            self._logger.warning("Bus connection lost", exc_info=True)
        else:
            if self._running:
                self._logger.warning(
                    "Bus disconnected; volume stays at %d",
                    self._bridge.load(),
                )
        finally:
            self._bus = None
            self._running = False

    async def _setup(self) -> MessageBus:
        bus = await connect(self._config)
        try:
            await install_filter(bus, build_match_rule(self._config))
        except Exception:
            bus.disconnect()
            raise
        # Registered only after the daemon acknowledged the rule.
        bus.add_message_handler(self.handle_message)
        return bus

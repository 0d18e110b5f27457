"""Internal system bus bootstrap: connection and server-side match rule."""

from __future__ import annotations

import logging
from typing import Protocol

from dbus_fast import BusType, Message, MessageType
from dbus_fast.aio import MessageBus
from dbus_fast.errors import AuthError, DBusError, InvalidAddressError

from volpong._constants import DBUS_INTERFACE, DBUS_PATH, DBUS_SERVICE
from volpong.config import PongConfig
from volpong.exceptions import BusConnectionError, FilterInstallError

_logger = logging.getLogger(__name__)


class CallableBus(Protocol):
    """Structural bus interface used by :func:`install_filter`.

    Lets tests pass a double instead of a live ``MessageBus``.
    """

    async def call(self, msg: Message) -> Message | None:
        ...


def build_match_rule(config: PongConfig) -> str:
    """Match rule limiting delivery to signals sent by the configured publisher."""
    return f"type='signal',sender='{config.publisher}'"


async def connect(config: PongConfig) -> MessageBus:
    """Open a session on the system bus (or ``config.bus_address``).

    Raises :class:`BusConnectionError` on any failure. There is no retry.
    """
    address = config.bus_address
    _logger.debug("Connecting to %s", address or "system bus")
    try:
        if address:
            bus = MessageBus(bus_address=address)
        else:
            bus = MessageBus(bus_type=BusType.SYSTEM)
        connected = await bus.connect()
    except (OSError, AuthError, InvalidAddressError, DBusError) as exc:
        raise BusConnectionError(
            f"Failed to connect to {address or 'system bus'}: {exc}",
            address=address,
        ) from exc
    _logger.debug("Connected to bus unique_name=%s", connected.unique_name)
    return connected


async def install_filter(bus: CallableBus, rule: str) -> None:
    """Ask the bus daemon to route messages matching *rule* to this connection.

    Returns once the daemon has acknowledged the rule. Raises
    :class:`FilterInstallError` on an error reply or a missing reply.
    """
    _logger.debug("AddMatch rule=%s", rule)
    request = Message(
        destination=DBUS_SERVICE,
        path=DBUS_PATH,
        interface=DBUS_INTERFACE,
        member="AddMatch",
        signature="s",
        body=[rule],
    )
    try:
        reply = await bus.call(request)
    except (OSError, DBusError) as exc:
        raise FilterInstallError(f"AddMatch request failed: {exc}", rule=rule) from exc

    if reply is None:
        raise FilterInstallError("AddMatch returned no reply", rule=rule)
    if reply.message_type == MessageType.ERROR:
        detail = reply.body[0] if reply.body else ""
        raise FilterInstallError(
            f"AddMatch rejected: {reply.error_name}: {detail}",
            rule=rule,
            error_name=reply.error_name,
        )

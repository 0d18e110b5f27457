"""D-Bus signal ingestion helpers.

This module turns raw bus messages into volume values. Decoding is a
filter, not a protocol parser: anything that is not a BlueZ media
transport ``PropertiesChanged`` carrying a ``uint16`` volume yields
``None``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from dbus_fast import Message, Variant
from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from volpong._constants import (
    DEVICE_VOLUME_MAX,
    MEDIA_TRANSPORT_INTERFACE,
    PROPERTIES_CHANGED_SIGNAL,
    VOLUME_PROPERTY,
    VOLUME_SIGNATURE,
)

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawSignal:
    """A received bus signal, reduced to what the decoder looks at."""

    name: str
    body: tuple[Any, ...] = ()
    sender: str | None = None
    path: str | None = None

    @classmethod
    def from_message(cls, message: Message) -> RawSignal:
        """Build from a ``dbus_fast`` message (``<interface>.<member>`` naming)."""
        interface = message.interface or ""
        member = message.member or ""
        name = f"{interface}.{member}" if interface else member
        return cls(
            name=name,
            body=tuple(message.body or ()),
            sender=message.sender,
            path=message.path,
        )


class _PropertiesChangedBody(BaseModel):
    """Leading fields of a ``PropertiesChanged`` body (``sa{sv}as``)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    interface: StrictStr = Field(...)
    changed: dict[StrictStr, Any] = Field(...)


def _extract_changed(body: tuple[Any, ...], interface: str) -> dict[str, Any] | None:
    if len(body) < 2:
        return None
    try:
        envelope = _PropertiesChangedBody.model_validate({"interface": body[0], "changed": body[1]})
    except ValidationError:
        return None
    if envelope.interface != interface:
        return None
    return envelope.changed


def clamp_volume(value: int, maximum: int = DEVICE_VOLUME_MAX) -> int:
    """Clamp *value* into ``[0, maximum]``."""
    return max(0, min(maximum, int(value)))


def decode_volume(
    signal: RawSignal,
    *,
    interface: str = MEDIA_TRANSPORT_INTERFACE,
    key: str = VOLUME_PROPERTY,
    maximum: int = DEVICE_VOLUME_MAX,
) -> int | None:
    """Extract the volume from a ``PropertiesChanged`` signal.

    Returns ``None`` for any other signal name, any other interface, a
    property map without *key*, or a value whose variant signature is
    not ``uint16``. Device reports above *maximum* are clamped.
    """
    if signal.name != PROPERTIES_CHANGED_SIGNAL:
        return None

    changed = _extract_changed(signal.body, interface)
    if changed is None or key not in changed:
        return None

    variant = changed[key]
    if not isinstance(variant, Variant) or variant.signature != VOLUME_SIGNATURE:
        _logger.debug(
            "Ignoring %s.%s with unexpected wire type %r",
            interface,
            key,
            getattr(variant, "signature", type(variant).__name__),
        )
        return None

    value = variant.value
    # bool is an int subclass; never a valid uint16 payload.
    if not isinstance(value, int) or isinstance(value, bool):
        return None
    return clamp_volume(value, maximum)

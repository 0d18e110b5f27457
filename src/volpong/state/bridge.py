"""Volume hand-off between the bus listener and the simulation loop."""

from __future__ import annotations

from volpong._constants import DEFAULT_VOLUME, DEVICE_VOLUME_MAX
from volpong.ingestion.signals import clamp_volume


class VolumeBridge:
    """Latest known device volume.

    Supports exactly one writer thread (the bus listener) and one reader
    thread (the simulation loop). Both operations rebind or read a single
    attribute holding an immutable ``int``, which is atomic under the
    interpreter lock, so no lock is taken on either side. Multiple
    writers would need a versioned cell instead.
    """

    __slots__ = ("_maximum", "_value")

    def __init__(self, default: int = DEFAULT_VOLUME, *, maximum: int = DEVICE_VOLUME_MAX) -> None:
        self._maximum = maximum
        self._value = clamp_volume(default, maximum)

    @property
    def maximum(self) -> int:
        return self._maximum

    def store(self, value: int) -> None:
        """Replace the current value. Out-of-range input is clamped."""
        self._value = clamp_volume(value, self._maximum)

    def load(self) -> int:
        """Return the most recently stored value, or the default. Never blocks."""
        return self._value

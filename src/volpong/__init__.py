"""volpong - Pong driven by Bluetooth volume changes on the system bus."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("volpong")
except PackageNotFoundError:
    __version__ = "0+local"
from volpong._listener import VolumeListener
from volpong.config import PongConfig
from volpong.exceptions import (
    BusConnectionError,
    BusError,
    FilterInstallError,
    SimulationTerminatedError,
    VolpongConfigError,
    VolpongError,
)
from volpong.ingestion.signals import RawSignal, clamp_volume, decode_volume
from volpong.simulation import LoopState, Scene, SimulationLoop, SimulationState, volume_to_paddle_y
from volpong.state.bridge import VolumeBridge

__all__ = [
    "__version__",
    "BusConnectionError",
    "BusError",
    "FilterInstallError",
    "LoopState",
    "PongConfig",
    "RawSignal",
    "Scene",
    "SimulationLoop",
    "SimulationState",
    "SimulationTerminatedError",
    "VolpongConfigError",
    "VolpongError",
    "VolumeBridge",
    "VolumeListener",
    "clamp_volume",
    "decode_volume",
    "volume_to_paddle_y",
]

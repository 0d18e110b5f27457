"""Custom exception hierarchy for volpong."""

from __future__ import annotations


class VolpongError(Exception):
    """Base exception for all volpong errors."""


class VolpongConfigError(VolpongError):
    """Invalid or inconsistent configuration."""


class BusError(VolpongError):
    """System bus setup failure.

    Both subclasses are fatal at startup: without the bus there is no
    volume source, and the process is expected to exit.
    """


class BusConnectionError(BusError):
    """Could not open a session on the system bus."""

    def __init__(self, message: str, *, address: str | None = None) -> None:
        self.address = address
        super().__init__(message)


class FilterInstallError(BusError):
    """The bus daemon rejected (or never answered) the AddMatch request."""

    def __init__(
        self,
        message: str,
        *,
        rule: str = "",
        error_name: str | None = None,
    ) -> None:
        self.rule = rule
        self.error_name = error_name
        super().__init__(message)


class SimulationTerminatedError(VolpongError):
    """``tick()`` was called after the simulation loop was terminated."""

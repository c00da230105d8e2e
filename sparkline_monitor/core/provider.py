"""Surface of the OS telemetry provider consumed by the sampler."""

from __future__ import annotations

from typing import Iterable, NamedTuple, Protocol, Tuple

# Returned by battery_status() when the platform cannot report a battery.
DEFAULT_BATTERY_STATUS: Tuple[float, bool] = (100.0, False)


class TelemetryReadError(Exception):
    """A provider refresh or read failed for one metric class this tick."""


class InterfaceCounters(NamedTuple):
    name: str
    total_received: int
    total_transmitted: int


class VolumeSpace(NamedTuple):
    mount: str
    total_bytes: int
    available_bytes: int


class TelemetryProvider(Protocol):
    """
    Raw counters on demand. Each ``refresh_*`` must be called before the
    matching reads; any of them may raise :class:`TelemetryReadError`.
    """

    def refresh_cpu(self) -> None: ...

    def refresh_memory(self) -> None: ...

    def global_cpu_percent(self) -> float: ...

    def used_memory_bytes(self) -> int: ...

    def total_memory_bytes(self) -> int: ...

    def refresh_networks(self) -> None: ...

    def interfaces(self) -> Iterable[InterfaceCounters]: ...

    def refresh_disks(self) -> None: ...

    def volumes(self) -> Iterable[VolumeSpace]: ...

    def battery_status(self) -> Tuple[float, bool]: ...

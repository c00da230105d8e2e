"""psutil-backed telemetry provider."""

from __future__ import annotations

from typing import List, Tuple

from . import battery, cpu, disks, network
from ..core.provider import InterfaceCounters, VolumeSpace


class PsutilTelemetryProvider:
    """
    Caches the latest psutil readings between ``refresh_*`` and the reads
    that follow, so one tick sees one consistent set of numbers.
    """

    def __init__(self, include_loopback: bool = False):
        self.include_loopback = include_loopback
        self._cpu = 0.0
        self._mem: Tuple[int, int] = (0, 0)
        self._nics: List[InterfaceCounters] = []
        self._volumes: List[VolumeSpace] = []
        cpu.warm_up()

    # ----- CPU / memory -----
    def refresh_cpu(self) -> None:
        self._cpu = cpu.percent()

    def refresh_memory(self) -> None:
        self._mem = cpu.memory()

    def global_cpu_percent(self) -> float:
        return self._cpu

    def used_memory_bytes(self) -> int:
        return self._mem[0]

    def total_memory_bytes(self) -> int:
        return self._mem[1]

    # ----- network -----
    def refresh_networks(self) -> None:
        self._nics = network.interfaces(self.include_loopback)

    def interfaces(self) -> List[InterfaceCounters]:
        return list(self._nics)

    # ----- disks -----
    def refresh_disks(self) -> None:
        self._volumes = disks.volumes()

    def volumes(self) -> List[VolumeSpace]:
        return list(self._volumes)

    # ----- battery -----
    def battery_status(self) -> Tuple[float, bool]:
        return battery.status()

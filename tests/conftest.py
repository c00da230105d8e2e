from __future__ import annotations

from typing import List, Set, Tuple

import pytest

from sparkline_monitor.core.provider import (
    InterfaceCounters,
    TelemetryReadError,
    VolumeSpace,
)


class FakeProvider:
    """In-memory provider; put a class name in ``fail`` to make its refresh raise."""

    def __init__(self):
        self.cpu = 10.0
        self.used_mem = 4096
        self.total_mem = 8192
        self.nics: List[InterfaceCounters] = [InterfaceCounters("eth0", 0, 0)]
        self.vols: List[VolumeSpace] = [VolumeSpace("/", 100, 25)]
        self.battery: Tuple[float, bool] = (80.0, True)
        self.fail: Set[str] = set()
        self.calls: List[str] = []

    def _check(self, what: str) -> None:
        self.calls.append(what)
        if what in self.fail:
            raise TelemetryReadError(f"{what} unavailable")

    def refresh_cpu(self):
        self._check("cpu")

    def refresh_memory(self):
        self._check("memory")

    def global_cpu_percent(self):
        return self.cpu

    def used_memory_bytes(self):
        return self.used_mem

    def total_memory_bytes(self):
        return self.total_mem

    def refresh_networks(self):
        self._check("network")

    def interfaces(self):
        return list(self.nics)

    def refresh_disks(self):
        self._check("disk")

    def volumes(self):
        return list(self.vols)

    def battery_status(self):
        self._check("battery")
        return self.battery


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()

"""One sampling tick: provider counters → Reading + rolling histories."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .config import (
    BATTERY,
    BITS_PER_BYTE,
    BITS_PER_MEGABIT,
    BYTES_PER_GIB,
    DISK,
    MEMORY_UNIT_DIVISOR,
    NETWORK,
)
from .delta import CounterPair, DeltaTracker
from .provider import TelemetryProvider, TelemetryReadError
from .state import (
    BATTERY_LEVEL,
    CPU,
    DISK_USAGE,
    DOWN,
    RAM,
    UP,
    EMPTY_BATTERY,
    BatteryReading,
    DiskReading,
    NetworkReading,
    Reading,
    ViewModel,
)

logger = logging.getLogger(__name__)


def percentage(used: float, total: float) -> float:
    """``used / total * 100``, or 0.0 when ``total`` is 0."""
    if total <= 0:
        return 0.0
    return float(used) / float(total) * 100.0


def bytes_to_megabits(n_bytes: int) -> float:
    return n_bytes * BITS_PER_BYTE / BITS_PER_MEGABIT


class Sampler:
    """
    Runs the per-tick sampling routine against a provider and writes the
    results into a :class:`ViewModel`.

    Every metric class is read independently: if the provider raises
    :class:`TelemetryReadError` for one of them, that class keeps its previous
    values and gets no history entry this tick, while the others proceed.
    """

    def __init__(self):
        self.net_tracker = DeltaTracker()

    def tick(self, provider: TelemetryProvider, state: ViewModel) -> None:
        config = state.config
        prev = state.reading
        samples: List[Tuple[str, float]] = []

        cpu_percent = prev.cpu_percent
        cpu = self._read_cpu(provider)
        if cpu is not None:
            cpu_percent = cpu
            samples.append((CPU, cpu_percent))

        used_mb, total_mb, ram_percent = prev.used_mem_mb, prev.total_mem_mb, prev.ram_percent
        mem = self._read_memory(provider)
        if mem is not None:
            used_mb, total_mb = mem
            ram_percent = percentage(used_mb, total_mb)
            samples.append((RAM, ram_percent))

        network: Optional[NetworkReading] = None
        if config.enabled(NETWORK):
            network = self._read_network(provider)
            if network is None:
                network = prev.network or NetworkReading()
            else:
                samples.append((DOWN, network.down_mbps))
                samples.append((UP, network.up_mbps))
        else:
            self.net_tracker.reset()

        disk: Optional[DiskReading] = None
        if config.enabled(DISK):
            disk = self._read_disk(provider)
            if disk is None:
                disk = prev.disk or DiskReading()
            else:
                samples.append((DISK_USAGE, disk.percent))

        battery: Optional[BatteryReading] = None
        if config.enabled(BATTERY):
            battery = self._read_battery(provider)
            if battery is None:
                battery = prev.battery or EMPTY_BATTERY
            else:
                samples.append((BATTERY_LEVEL, battery.percent))

        state.reading = Reading(
            cpu_percent=cpu_percent,
            used_mem_mb=used_mb,
            total_mem_mb=total_mb,
            ram_percent=ram_percent,
            network=network,
            disk=disk,
            battery=battery,
        )
        for key, value in samples:
            state.history(key).push(value)

    # ---------- per-class reads ----------
    def _read_cpu(self, provider: TelemetryProvider) -> Optional[float]:
        try:
            provider.refresh_cpu()
            return float(provider.global_cpu_percent())
        except TelemetryReadError as e:
            logger.warning("CPU read failed, keeping previous value: %s", e)
            return None

    def _read_memory(self, provider: TelemetryProvider) -> Optional[Tuple[int, int]]:
        try:
            provider.refresh_memory()
            used = int(provider.used_memory_bytes()) // MEMORY_UNIT_DIVISOR
            total = int(provider.total_memory_bytes()) // MEMORY_UNIT_DIVISOR
        except TelemetryReadError as e:
            logger.warning("Memory read failed, keeping previous value: %s", e)
            return None
        return used, total

    def _read_network(self, provider: TelemetryProvider) -> Optional[NetworkReading]:
        try:
            provider.refresh_networks()
            current = CounterPair.summed(
                (nic.total_received, nic.total_transmitted) for nic in provider.interfaces()
            )
        except TelemetryReadError as e:
            logger.warning("Network read failed, skipping this tick: %s", e)
            return None
        delta_rx, delta_tx = self.net_tracker.update(current)
        return NetworkReading(
            down_mbps=bytes_to_megabits(delta_rx),
            up_mbps=bytes_to_megabits(delta_tx),
            total_rx_gib=current.rx / BYTES_PER_GIB,
            total_tx_gib=current.tx / BYTES_PER_GIB,
        )

    def _read_disk(self, provider: TelemetryProvider) -> Optional[DiskReading]:
        total = used = 0
        try:
            provider.refresh_disks()
            for vol in provider.volumes():
                total += int(vol.total_bytes)
                used += max(0, int(vol.total_bytes) - int(vol.available_bytes))
        except TelemetryReadError as e:
            logger.warning("Disk read failed, keeping previous value: %s", e)
            return None
        return DiskReading(
            percent=percentage(used, total),
            used_gib=used // BYTES_PER_GIB,
            total_gib=total // BYTES_PER_GIB,
        )

    def _read_battery(self, provider: TelemetryProvider) -> Optional[BatteryReading]:
        try:
            percent, charging = provider.battery_status()
        except TelemetryReadError as e:
            logger.warning("Battery read failed, keeping previous value: %s", e)
            return None
        return BatteryReading(percent=float(percent), charging=bool(charging))

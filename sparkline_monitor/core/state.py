"""Read model shared by the sampler (writer) and the renderer (reader)."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple

from .config import BATTERY, DISK, HISTORY_CAPACITY, NETWORK, OPTIONAL_CLASSES, MetricsConfig
from .history import RollingHistory

# History keys, one per plotted metric
CPU = "cpu"
RAM = "ram"
DOWN = "down"
UP = "up"
BATTERY_LEVEL = "battery"
DISK_USAGE = "disk"
HISTORY_KEYS: Tuple[str, ...] = (CPU, RAM, DOWN, UP, BATTERY_LEVEL, DISK_USAGE)

# Which metric class feeds each optional history
HISTORY_CLASS = {DOWN: NETWORK, UP: NETWORK, BATTERY_LEVEL: BATTERY, DISK_USAGE: DISK}


class ViewId(enum.Enum):
    SYSTEM = "system"
    NETWORK = "network"
    POWER = "power"


@dataclass(frozen=True)
class NetworkReading:
    down_mbps: float = 0.0
    up_mbps: float = 0.0
    total_rx_gib: float = 0.0
    total_tx_gib: float = 0.0


@dataclass(frozen=True)
class DiskReading:
    percent: float = 0.0
    used_gib: int = 0
    total_gib: int = 0


@dataclass(frozen=True)
class BatteryReading:
    percent: float = 100.0
    charging: bool = False


# Shown before the first successful battery read
EMPTY_BATTERY = BatteryReading(percent=0.0)


@dataclass(frozen=True)
class Reading:
    """
    One tick's snapshot. ``None`` in an optional section means the metric
    class is not tracked under the current config.
    """
    cpu_percent: float = 0.0
    used_mem_mb: int = 0
    total_mem_mb: int = 0
    ram_percent: float = 0.0
    network: Optional[NetworkReading] = None
    disk: Optional[DiskReading] = None
    battery: Optional[BatteryReading] = None

    @classmethod
    def zero(cls, config: MetricsConfig) -> "Reading":
        return cls(
            network=NetworkReading() if config.network else None,
            disk=DiskReading() if config.disk else None,
            battery=EMPTY_BATTERY if config.battery else None,
        )


@dataclass
class ViewModel:
    config: MetricsConfig = field(default_factory=MetricsConfig)
    capacity: int = HISTORY_CAPACITY
    selected_view: ViewId = ViewId.SYSTEM
    reading: Reading = None  # type: ignore[assignment]
    histories: Dict[str, RollingHistory] = field(default_factory=dict)

    def __post_init__(self):
        if self.reading is None:
            self.reading = Reading.zero(self.config)
        for key in HISTORY_KEYS:
            self.histories.setdefault(key, RollingHistory(self.capacity))

    def history(self, key: str) -> RollingHistory:
        return self.histories[key]

    def is_tracked(self, key: str) -> bool:
        metric_class = HISTORY_CLASS.get(key)
        return metric_class is None or self.config.enabled(metric_class)

    def set_config(self, config: MetricsConfig) -> None:
        """Switch metric classes, dropping history and reading of any class turned off.

        A class switched back on starts from an empty history rather than
        joining new samples onto stale ones.
        """
        dropped = {name for name in OPTIONAL_CLASSES
                   if self.config.enabled(name) and not config.enabled(name)}
        for key, metric_class in HISTORY_CLASS.items():
            if metric_class in dropped:
                self.histories[key].clear()
        self.config = config
        self.reading = replace(
            self.reading,
            network=(self.reading.network or NetworkReading()) if config.network else None,
            disk=(self.reading.disk or DiskReading()) if config.disk else None,
            battery=(self.reading.battery or EMPTY_BATTERY) if config.battery else None,
        )


def select_view(state: ViewModel, view: ViewId) -> None:
    """Switch the displayed view. Never touches readings or histories."""
    state.selected_view = ViewId(view)


_VIEW_METRICS = {
    ViewId.SYSTEM: (CPU, RAM, DISK_USAGE),
    ViewId.NETWORK: (DOWN, UP),
    ViewId.POWER: (BATTERY_LEVEL,),
}


def visible_metrics(state: ViewModel) -> Tuple[str, ...]:
    """History keys the renderer shows for the selected view."""
    return tuple(k for k in _VIEW_METRICS[state.selected_view] if state.is_tracked(k))

"""Sampling constants and the runtime set of enabled metric classes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

# One sample per tick; 120 ticks at 1 s give two minutes of history.
TICK_INTERVAL_MS = 1000
HISTORY_CAPACITY = 120

# Unit conversions
MEMORY_UNIT_DIVISOR = 1024
BITS_PER_BYTE = 8
BITS_PER_MEGABIT = 1_000_000
BYTES_PER_GIB = 1_073_741_824

NETWORK = "network"
DISK = "disk"
BATTERY = "battery"
OPTIONAL_CLASSES: Tuple[str, ...] = (NETWORK, DISK, BATTERY)


@dataclass(frozen=True)
class MetricsConfig:
    """Which optional metric classes are sampled.

    CPU and memory are always sampled.
    """
    network: bool = True
    disk: bool = True
    battery: bool = True

    def enabled(self, metric_class: str) -> bool:
        if metric_class not in OPTIONAL_CLASSES:
            raise ValueError(f"unknown metric class: {metric_class!r}")
        return bool(getattr(self, metric_class))

    def as_dict(self) -> dict:
        return {name: self.enabled(name) for name in OPTIONAL_CLASSES}

    @classmethod
    def from_dict(cls, data: dict) -> "MetricsConfig":
        """Build a config from a mapping, ignoring unknown keys."""
        defaults = cls()
        return cls(**{
            name: bool(data.get(name, getattr(defaults, name)))
            for name in OPTIONAL_CLASSES
        })

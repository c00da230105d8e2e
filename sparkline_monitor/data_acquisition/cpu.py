"""CPU and memory data acquisition helpers."""

from __future__ import annotations

from typing import Tuple

import psutil

from ..core.provider import TelemetryReadError


def warm_up() -> None:
    """Prime psutil's CPU baseline.

    The first non-blocking :func:`psutil.cpu_percent` call always returns
    0.0, so it is made once at startup and discarded.
    """
    psutil.cpu_percent(interval=None)


def percent() -> float:
    """Return overall CPU utilisation since the previous call, in percent."""
    try:
        return float(psutil.cpu_percent(interval=None))
    except (psutil.Error, OSError) as e:
        raise TelemetryReadError(f"cpu_percent failed: {e}") from e


def memory() -> Tuple[int, int]:
    """Return ``(used_bytes, total_bytes)`` of physical memory."""
    try:
        vm = psutil.virtual_memory()
    except (psutil.Error, OSError) as e:
        raise TelemetryReadError(f"virtual_memory failed: {e}") from e
    return int(vm.used), int(vm.total)

"""Per-interface cumulative network counters."""

from __future__ import annotations

import logging
from typing import List

import psutil

from ..core.provider import InterfaceCounters, TelemetryReadError

logger = logging.getLogger(__name__)


def interfaces(include_loopback: bool = False) -> List[InterfaceCounters]:
    """Return cumulative byte counters for each network interface.

    Loopback traffic never leaves the host and is skipped unless asked for.
    """
    try:
        per_nic = psutil.net_io_counters(pernic=True)
    except (psutil.Error, OSError) as e:
        raise TelemetryReadError(f"net_io_counters failed: {e}") from e

    loopback = set()
    if not include_loopback:
        try:
            for name, addrs in psutil.net_if_addrs().items():
                if any(getattr(a, "address", "") in ("127.0.0.1", "::1") for a in addrs):
                    loopback.add(name)
        except (psutil.Error, OSError) as e:
            logger.debug("net_if_addrs failed, loopback not filtered: %s", e)

    return [
        InterfaceCounters(name, int(io.bytes_recv), int(io.bytes_sent))
        for name, io in (per_nic or {}).items()
        if name not in loopback
    ]

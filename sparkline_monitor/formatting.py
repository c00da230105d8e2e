# Display strings for readings. Kept free of Qt so they can be tested alone.

from __future__ import annotations

from typing import Tuple

# Battery card colors by charge level (RGB)
BATTERY_OK = (0x10, 0xB9, 0x81)
BATTERY_LOW = (0xF5, 0x9E, 0x0B)
BATTERY_CRITICAL = (0xEF, 0x44, 0x44)


def percent_text(value: float, decimals: int = 1) -> str:
    return f"{value:.{decimals}f} %"


def rate_mbps(value: float) -> str:
    return f"{value:.2f} Mb/s"


def memory_text(used_mb: int, total_mb: int) -> str:
    """'used / total GiB' from memory counted in 1024-byte units."""
    if total_mb <= 0:
        return "(waiting)"
    return f"{used_mb / 1024.0 / 1024.0:.2f} / {total_mb / 1024.0 / 1024.0:.2f} GiB"


def disk_text(used_gib: int, total_gib: int) -> str:
    return f"{used_gib} / {total_gib} GiB"


def totals_text(rx_gib: float, tx_gib: float) -> str:
    return f"Total: ↓ {rx_gib:.2f} GiB  ↑ {tx_gib:.2f} GiB"


def battery_color(percent: float) -> Tuple[int, int, int]:
    if percent > 50.0:
        return BATTERY_OK
    if percent > 20.0:
        return BATTERY_LOW
    return BATTERY_CRITICAL


def battery_state(charging: bool) -> str:
    return "Charging" if charging else "On battery"

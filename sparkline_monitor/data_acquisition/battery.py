"""Battery charge and charging state.

macOS is queried through ``pmset -g batt``; other platforms go through
:func:`psutil.sensors_battery`. Hosts without a battery report the fixed
default ``(100.0, False)``.
"""

from __future__ import annotations

import logging
import platform
import subprocess
from typing import Optional, Tuple

import psutil

from ..core.provider import DEFAULT_BATTERY_STATUS

logger = logging.getLogger(__name__)

IS_MACOS = platform.system() == "Darwin"

# The pmset call runs on the GUI thread; bound how long a tick can stall.
PMSET_TIMEOUT_S = 2.0


def parse_pmset(output: str) -> Optional[Tuple[float, bool]]:
    """Extract ``(percent, charging)`` from ``pmset -g batt`` output.

    Charging is reported when the battery line says "charging" (but not
    "discharging") or when the machine draws from AC power. Returns
    ``None`` if no internal battery line carries a percentage.
    """
    ac_power = "AC Power" in output
    for line in output.splitlines():
        if "InternalBattery" not in line or "%" not in line:
            continue
        for part in line.split():
            if not (part.endswith("%;") or part.endswith("%")):
                continue
            clean = part.rstrip(";").rstrip("%")
            try:
                pct = float(clean)
            except ValueError:
                continue
            charging = "charging" in line and "discharging" not in line
            return pct, charging or ac_power
    return None


def _macos_status() -> Optional[Tuple[float, bool]]:
    try:
        out = subprocess.check_output(
            ["pmset", "-g", "batt"], text=True, timeout=PMSET_TIMEOUT_S
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("pmset failed: %s", e)
        return None
    return parse_pmset(out)


def _psutil_status() -> Optional[Tuple[float, bool]]:
    sensors_battery = getattr(psutil, "sensors_battery", None)
    if sensors_battery is None:
        return None
    try:
        bat = sensors_battery()
    except (psutil.Error, OSError) as e:
        logger.debug("sensors_battery failed: %s", e)
        return None
    if bat is None:
        return None
    return float(bat.percent), bool(bat.power_plugged)


def status() -> Tuple[float, bool]:
    """Return ``(percent, charging)``, falling back to ``(100.0, False)``."""
    found = _macos_status() if IS_MACOS else _psutil_status()
    return found if found is not None else DEFAULT_BATTERY_STATUS

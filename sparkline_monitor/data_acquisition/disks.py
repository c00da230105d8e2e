"""Mounted volume capacity."""

from __future__ import annotations

import logging
from typing import List

import psutil

from ..core.provider import TelemetryReadError, VolumeSpace

logger = logging.getLogger(__name__)


def volumes() -> List[VolumeSpace]:
    """
    Return total/available bytes for each physical mounted volume.

    Volumes sharing a device are counted once; a mount point that cannot be
    queried (permission denied, stale network mount) is skipped.
    """
    try:
        parts = psutil.disk_partitions(all=False)
    except (psutil.Error, OSError) as e:
        raise TelemetryReadError(f"disk_partitions failed: {e}") from e

    seen = set()
    result: List[VolumeSpace] = []
    for p in parts:
        if not p.device or p.device in seen:
            continue
        try:
            usage = psutil.disk_usage(p.mountpoint)
        except OSError as e:
            logger.debug("Skipping %s: %s", p.mountpoint, e)
            continue
        if usage.total <= 0:
            continue
        seen.add(p.device)
        result.append(VolumeSpace(p.mountpoint, int(usage.total), int(usage.free)))
    return result

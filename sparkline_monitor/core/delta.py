"""Per-tick deltas of cumulative network byte counters."""

from __future__ import annotations

import logging
from typing import Iterable, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)


class CounterPair(NamedTuple):
    """Cumulative received / transmitted byte counters."""
    rx: int
    tx: int

    @classmethod
    def summed(cls, pairs: Iterable[Tuple[int, int]]) -> "CounterPair":
        rx = tx = 0
        for r, t in pairs:
            rx += int(r)
            tx += int(t)
        return cls(rx, tx)


def delta(previous: CounterPair, current: CounterPair) -> Tuple[int, int]:
    """Return ``current - previous`` for rx and tx.

    A counter that went backwards (interface reset, wrap) saturates to 0
    for that direction instead of going negative.
    """
    return max(0, current.rx - previous.rx), max(0, current.tx - previous.tx)


class DeltaTracker:
    """Holds the previous counter pair and turns each new one into a delta."""

    def __init__(self):
        self.previous: Optional[CounterPair] = None

    def update(self, current: CounterPair) -> Tuple[int, int]:
        """Delta against the stored pair, then store ``current``.

        The first observation has nothing to compare against and yields
        ``(0, 0)``. Call once per tick, only with a successfully read pair.
        """
        if self.previous is None:
            result = (0, 0)
        else:
            if current.rx < self.previous.rx or current.tx < self.previous.tx:
                logger.info(
                    "Network counters went backwards (%s -> %s), clamping to 0",
                    tuple(self.previous), tuple(current),
                )
            result = delta(self.previous, current)
        self.previous = current
        return result

    def reset(self) -> None:
        self.previous = None

"""Sample sequence → polyline geometry for sparkline charts."""

from __future__ import annotations

from typing import Iterable, List, NamedTuple, Sequence

MOVE = "move"
LINE = "line"


class PathSegment(NamedTuple):
    op: str
    x: float
    y: float


def build_path(
    samples: Sequence[float],
    max_value: float,
    width: float,
    height: float,
) -> List[PathSegment]:
    """
    Map samples onto a ``width`` x ``height`` viewport (origin top-left).

    Samples are spread evenly along x, clamped to ``[0, max_value]`` and
    inverted so larger values plot higher. The first segment is a move, the
    rest are line-tos. Fewer than two samples or a non-positive
    ``max_value`` give an empty path.
    """
    count = len(samples)
    if count < 2 or max_value <= 0:
        return []

    step_x = width / (count - 1)
    path: List[PathSegment] = []
    for i, value in enumerate(samples):
        clamped = min(max(float(value), 0.0), max_value)
        ratio = clamped / max_value
        y = height - ratio * height
        path.append(PathSegment(MOVE if i == 0 else LINE, i * step_x, y))
    return path


def rate_ceiling(samples: Iterable[float], floor: float = 1.0) -> float:
    """Chart ceiling for unbounded rates: the running max, at least ``floor``."""
    return max([floor, *samples])

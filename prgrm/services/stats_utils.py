"""Small, pure statistics helpers shared by every engine layer."""

from __future__ import annotations

from statistics import fmean, pstdev
from typing import Sequence

from prgrm.services.constants import TREND_NOISE_FRACTION


def clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


def avg(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    return fmean(values) if values else 0.0


def stddev(values: Sequence[float]) -> float:
    """Population standard deviation; 0.0 for an empty sequence."""
    return pstdev(values) if values else 0.0


def z_score(x: float, mean: float, sd: float) -> float:
    """z-score with a zero short-circuit when the spread is zero."""
    if sd == 0:
        return 0.0
    return (x - mean) / sd


def trend3(values: Sequence[float]) -> str:
    """Compare the first third with the last third: rising, flat or falling.

    Differences within 5% of the overall mean are treated as noise. Fewer
    than three values are always flat.
    """
    n = len(values)
    if n < 3:
        return "flat"
    first = avg(values[: n // 3])
    last = avg(values[(2 * n) // 3:])
    eps = TREND_NOISE_FRACTION * (avg(values) or 1)
    if last - first > eps:
        return "rising"
    if first - last > eps:
        return "falling"
    return "flat"

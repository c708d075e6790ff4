"""Block aggregation: trends, deload detection and a block score."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from prgrm.services.constants import DELOAD_BONUS, DELOAD_DROP_THRESHOLD, RISING_VOLUME_BONUS
from prgrm.services.stats_utils import trend3
from prgrm.services.week_projector import WeekMetrics


@dataclass(frozen=True)
class BlockMetrics:
    block_index: int
    weekly: tuple[WeekMetrics, ...]
    volume_trend: str        # rising / flat / falling
    intensity_trend: str
    deload_detected: bool
    block_score: int         # 0..100
    weekly_volumes: tuple[float, ...] = ()
    weekly_high_shares: tuple[float, ...] = ()


def total_volume(week: WeekMetrics) -> float:
    return sum(week.volume_by_muscle.values())


def detect_deload(volumes: Sequence[float]) -> bool:
    """True when any week-over-week volume drop reaches 30%."""
    for prev, cur in zip(volumes, volumes[1:]):
        if (prev - cur) / max(1.0, prev) >= DELOAD_DROP_THRESHOLD:
            return True
    return False


def aggregate_block(weeks: Sequence[WeekMetrics], block_index: int = 0) -> BlockMetrics:
    """Summarize consecutive weeks.

    Score = mean weekly score, nudged up by 5% of the remaining headroom
    when a deload is present and a further 3% when volume is rising.
    """
    volumes = [total_volume(w) for w in weeks]
    high_shares = [w.intensity_histogram.high for w in weeks]

    volume_trend = trend3(volumes)
    intensity_trend = trend3(high_shares)
    deload = detect_deload(volumes)

    score = sum(w.projected_weekly_score for w in weeks) / max(1, len(weeks))
    if deload:
        score += (100 - score) * DELOAD_BONUS
    if volume_trend == "rising":
        score += (100 - score) * RISING_VOLUME_BONUS

    return BlockMetrics(
        block_index=block_index,
        weekly=tuple(weeks),
        volume_trend=volume_trend,
        intensity_trend=intensity_trend,
        deload_detected=deload,
        block_score=round(score),
        weekly_volumes=tuple(volumes),
        weekly_high_shares=tuple(high_shares),
    )

"""Week projection from an ordered sequence of session metrics.

Produces the stress strip (roles re-derived by z-score against the week's
own loads), spacing flags, muscle volume coverage, balance ratios, a coarse
intensity histogram, projected minutes and a 0-100 weekly score. No
calendar is involved: sessions are slots.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from prgrm.schemas import WeeklyTargets
from prgrm.services.constants import DEFAULT_COVERAGE_SCORE, ROLE_Z_THRESHOLD, SPACING_FLAG_PENALTY
from prgrm.services.session_metrics import DayMetrics
from prgrm.services.stats_utils import avg, clamp01, stddev, z_score
from prgrm.services.taxonomy import push_pull_ratio, quad_ham_ratio, upper_lower_ratio

logger = logging.getLogger(__name__)

EMPTY_CYCLE_FLAG = "Empty cycle"


@dataclass(frozen=True)
class BalanceRatios:
    push_pull: float | None = None
    quad_ham: float | None = None
    upper_lower: float | None = None


@dataclass(frozen=True)
class IntensityHistogram:
    """Share of sessions per intensity bucket (fractions of the week)."""
    low: float = 0.0
    moderate: float = 0.0
    high: float = 0.0


@dataclass(frozen=True)
class WeekMetrics:
    week_index: int
    roles: tuple[str, ...]
    spacing_flags: tuple[str, ...]
    volume_by_muscle: dict[str, float] = field(default_factory=dict)
    balance_ratios: BalanceRatios = field(default_factory=BalanceRatios)
    intensity_histogram: IntensityHistogram = field(default_factory=IntensityHistogram)
    projected_weekly_minutes: int = 0
    projected_weekly_score: int = 0


def roles_from_loads(loads: Sequence[float]) -> list[str]:
    """Classify each load relative to the others: z >= +0.5 High, z <= -0.5 Low."""
    mean, sd = avg(loads), stddev(loads)
    roles = []
    for load in loads:
        z = z_score(load, mean, sd)
        if z >= ROLE_Z_THRESHOLD:
            roles.append("High")
        elif z <= -ROLE_Z_THRESHOLD:
            roles.append("Low")
        else:
            roles.append("Medium")
    return roles


def spacing_flags_for_roles(
    roles: Sequence[str],
    max_high_in_3: int = 2,
    forbid_adjacent_high: bool = True,
) -> list[str]:
    """Return human-readable flags describing stress-spacing issues."""
    flags: list[str] = []
    if forbid_adjacent_high:
        for i in range(len(roles) - 1):
            if roles[i] == "High" and roles[i + 1] == "High":
                flags.append(f"Back-to-back High at slots {i}–{i + 1}")
    for i in range(len(roles) - 2):
        highs = sum(1 for r in roles[i:i + 3] if r == "High")
        if highs > max_high_in_3:
            flags.append(f">{max_high_in_3} High in 3 slots starting at {i}")
    return flags


def volume_by_muscle_from_days(days: Sequence[DayMetrics]) -> dict[str, float]:
    """Sum effective muscle sets across session slots."""
    out: dict[str, float] = {}
    for d in days:
        for muscle, sets in d.muscle_sets.items():
            out[muscle] = out.get(muscle, 0.0) + sets
    return out


def balance_ratios(volume_by_muscle: Mapping[str, float]) -> BalanceRatios:
    return BalanceRatios(
        push_pull=push_pull_ratio(volume_by_muscle),
        quad_ham=quad_ham_ratio(volume_by_muscle),
        upper_lower=upper_lower_ratio(volume_by_muscle),
    )


def coverage_score(volume_by_muscle: Mapping[str, float], targets: WeeklyTargets | None) -> float:
    """Fraction of muscles with volume that sit inside their target band.

    Muscles without an explicit band count as covered. Without targets the
    score is the neutral default of 0.7.
    """
    if not targets or not targets.sets_per_muscle:
        return DEFAULT_COVERAGE_SCORE
    hits = []
    # only trained muscles are scored; a banded muscle with no volume is not a miss
    for muscle, got in volume_by_muscle.items():
        lo, hi = targets.sets_per_muscle.get(muscle, (0.0, float("inf")))
        hits.append(1.0 if lo <= got <= hi else 0.0)
    return avg(hits) if hits else DEFAULT_COVERAGE_SCORE


def empty_week(week_index: int = 0) -> WeekMetrics:
    return WeekMetrics(
        week_index=week_index,
        roles=(),
        spacing_flags=(EMPTY_CYCLE_FLAG,),
        balance_ratios=BalanceRatios(),
    )


def project_week(
    days: Sequence[DayMetrics],
    targets: WeeklyTargets | None = None,
    week_index: int = 0,
    max_high_in_3: int = 2,
    forbid_adjacent_high: bool = True,
) -> WeekMetrics:
    """Project WeekMetrics from the session slots of one week."""
    if not days:
        logger.debug("Empty cycle for week %d", week_index)
        return empty_week(week_index)

    projected = list(days)
    n = len(projected)

    roles = roles_from_loads([d.session_load for d in projected])
    flags = spacing_flags_for_roles(roles, max_high_in_3, forbid_adjacent_high)
    volume = volume_by_muscle_from_days(projected)

    # role distribution stands in for an intensity histogram
    histogram = IntensityHistogram(
        low=roles.count("Low") / n,
        moderate=roles.count("Medium") / n,
        high=roles.count("High") / n,
    )

    minutes = sum(d.est_duration_min for d in projected)

    spacing_penalty = max(0.0, 1 - SPACING_FLAG_PENALTY * len(flags))
    score = round(100 * clamp01(coverage_score(volume, targets) * spacing_penalty))

    return WeekMetrics(
        week_index=week_index,
        roles=tuple(roles),
        spacing_flags=tuple(flags),
        volume_by_muscle=volume,
        balance_ratios=balance_ratios(volume),
        intensity_histogram=histogram,
        projected_weekly_minutes=minutes,
        projected_weekly_score=score,
    )

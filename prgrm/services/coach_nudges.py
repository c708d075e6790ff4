"""Coach nudges: short, independent suggestions for one projected week.

Each nudge carries one fix. Spacing flags are rephrased into actions,
balance ratios outside the thresholds state the sets needed to get back
inside them, muscles outside their weekly band state the set gap, and the
goal and time cap add intensity-mix and time-budget warnings.
"""

from __future__ import annotations

import math

from prgrm.config import get_settings
from prgrm.schemas import ProgramSpec, WeeklyTargets
from prgrm.services.goal_profiles import resolve_weekly_targets
from prgrm.services.taxonomy import group_volume
from prgrm.services.week_projector import WeekMetrics

# ratio key -> (numerator group, denominator group, label, numerator work, denominator work)
_BALANCE_NUDGES = (
    ("push_pull", "push", "pull", "Push:Pull", "pressing (bench/overhead)", "pulling (rows/pulldowns)"),
    ("quad_ham", "quads", "hams", "Quad:Ham", "quad emphasis (squats/split squats)", "hip hinge (RDLs, hip thrusts)"),
    ("upper_lower", "upper", "lower", "Upper:Lower", "upper-body", "lower-body"),
)


def _spacing_nudge(flag: str) -> str:
    if "Back-to-back High" in flag:
        return "Separate back-to-back High days by inserting a Low/Rest slot."
    if " High in 3 slots" in flag:
        return "Limit High days within any 3 sessions; swap one to Medium/Low."
    return flag


def _balance_nudges(week: WeekMetrics, ratio_low: float, ratio_high: float) -> list[str]:
    nudges = []
    volume = week.volume_by_muscle
    for key, numerator, denominator, label, numerator_work, denominator_work in _BALANCE_NUDGES:
        ratio = getattr(week.balance_ratios, key)
        if ratio is None:
            continue
        # the ratio floors an empty side at 1; set gaps use the real volumes
        top = group_volume(volume, numerator)
        bottom = group_volume(volume, denominator)
        if ratio > ratio_high:
            sets = max(1, math.ceil((top or 1.0) / ratio_high - bottom))
            nudges.append(f"{label} is high ({ratio:.2f}): add {sets} {denominator_work} sets this week.")
        elif ratio < ratio_low:
            sets = max(1, math.ceil((bottom or 1.0) * ratio_low - top))
            nudges.append(f"{label} is low ({ratio:.2f}): add {sets} {numerator_work} sets this week.")
    return nudges


def _target_nudges(week: WeekMetrics, targets: WeeklyTargets | None) -> list[str]:
    if targets is None or not targets.sets_per_muscle:
        return []
    nudges = []
    for muscle, (lo, hi) in targets.sets_per_muscle.items():
        got = week.volume_by_muscle.get(muscle, 0.0)
        if got < lo:
            nudges.append(f"{muscle}: add {math.ceil(lo - got)} sets to reach the target band.")
        elif got > hi:
            nudges.append(f"{muscle}: consider removing {math.ceil(got - hi)} sets to stay within target.")
    return nudges


def _intensity_nudges(week: WeekMetrics, goal: str) -> list[str]:
    hist = week.intensity_histogram
    if goal == "strength" and hist.high < 0.25:
        return ["For strength, include at least ~25% High-intensity sessions (heavy top sets)."]
    if goal == "hypertrophy" and hist.moderate < 0.5:
        return ["For hypertrophy, ensure at least 50% Medium-intensity sessions with sufficient volume."]
    return []


def coach_nudges_for_week(
    week: WeekMetrics,
    spec: ProgramSpec | None = None,
    targets: WeeklyTargets | None = None,
    minutes_cap_slack: float | None = None,
    ratio_low: float | None = None,
    ratio_high: float | None = None,
) -> list[str]:
    """Turn one week's metrics (plus the optional spec) into coaching nudges.

    Thresholds default to the configured values. Targets default to the
    ProgramSpec's resolved weekly targets when no override is given.
    """
    settings = get_settings()
    if minutes_cap_slack is None:
        minutes_cap_slack = settings.nudge_minutes_slack
    if ratio_low is None:
        ratio_low = settings.nudge_ratio_low
    if ratio_high is None:
        ratio_high = settings.nudge_ratio_high

    nudges = [_spacing_nudge(f) for f in week.spacing_flags]
    nudges.extend(_balance_nudges(week, ratio_low, ratio_high))

    if targets is None and spec is not None:
        targets = resolve_weekly_targets(spec)
    nudges.extend(_target_nudges(week, targets))

    if spec is None:
        return nudges

    nudges.extend(_intensity_nudges(week, spec.goal))

    cap = spec.constraints.time_cap_min if spec.constraints else None
    if cap:
        minutes = week.projected_weekly_minutes
        if minutes > cap + minutes_cap_slack * cap:
            reduce_by = round((minutes - cap) / 10) * 10
            nudges.append(f"Time: reduce ~{reduce_by} minutes this week to fit your cap.")

    return nudges

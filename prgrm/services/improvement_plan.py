"""Improvement plan: ranked, explainable fixes derived from program sub-scores.

For each dimension the potential gain is weight x (1 - current) x 100 points.
Dimensions already at 0.95+ or worth less than one point are dropped; the
rest are sorted by gain. Every quantity quoted in a step is computed from the
metrics (set gaps, session-count gaps, minute gaps) or read from the
reference tables.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping

from prgrm.config import get_settings
from prgrm.schemas import ProgramSpec
from prgrm.services.constants import (
    DEFAULT_SET_BAND_BY_GOAL,
    DELOAD_DROP_THRESHOLD,
    SUB_SCORE_KEYS,
    TREND_NOISE_FRACTION,
)
from prgrm.services.goal_profiles import get_goal_profile, resolve_weekly_targets
from prgrm.services.program_scorer import ProgramMetrics
from prgrm.services.taxonomy import group_volume
from prgrm.services.week_projector import WeekMetrics

NEAR_PERFECT = 0.95
MAX_MUSCLES_PER_STEP = 3

GOAL_LABELS = MappingProxyType({
    "strength": "strength",
    "hypertrophy": "muscle growth",
    "athletic": "athletic performance",
    "fat_loss": "fat loss",
    "endurance": "endurance",
    "power": "power development",
})

# Which intensity bucket each goal leans on, and how to load it
INTENSITY_FOCUS = MappingProxyType({
    "strength": ("high", "heavy compound lifts at 80-90% 1RM for 3-5 reps"),
    "power": ("high", "heavy compound lifts at 80-95% 1RM for 1-5 reps paired with jumps or throws"),
    "hypertrophy": ("moderate", "65-80% 1RM for 8-12 reps"),
    "fat_loss": ("moderate", "65-80% 1RM for 8-15 reps with shorter rests"),
    "athletic": ("moderate", "65-80% 1RM with crisp, fast concentric reps"),
    "endurance": ("low", "light circuit-style work at 15-20+ reps"),
})
BUCKET_ROLE = MappingProxyType({"high": "High", "moderate": "Medium", "low": "Low"})

BALANCE_FIXES = MappingProxyType({
    "push_pull": ("pull", "push", "rowing or pulldown", "pressing (bench, overhead press)"),
    "quad_ham": ("hams", "quads", "posterior-chain (RDLs, hip thrusts, hamstring curls)", "quad (squats, lunges, leg press)"),
    "upper_lower": ("lower", "upper", "lower-body", "upper-body"),
})
BALANCE_LABELS = MappingProxyType({"push_pull": "Push:Pull", "quad_ham": "Quad:Ham", "upper_lower": "Upper:Lower"})


@dataclass(frozen=True)
class ImprovementItem:
    dimension: str
    title: str
    why: str
    steps: tuple[str, ...]
    points_gain: int
    priority: str      # high / medium / low
    current: float     # sub-score 0..1


def priority_from_gain(points: int) -> str:
    if points >= 8:
        return "high"
    if points >= 4:
        return "medium"
    return "low"


def format_muscle_name(muscle_id: str) -> str:
    return muscle_id.replace("_", " ").replace("-", " ").title()


def _goal_label(goal: str) -> str:
    return GOAL_LABELS.get(goal, goal)


def _volume_fit_item(spec: ProgramSpec, week: WeekMetrics, program: ProgramMetrics) -> tuple[str, str, list[str]]:
    lo, hi = DEFAULT_SET_BAND_BY_GOAL[spec.goal]
    gl = _goal_label(spec.goal)
    volume = week.volume_by_muscle
    targets = resolve_weekly_targets(spec)
    explicit = (targets.sets_per_muscle or {}) if targets else {}

    def band(muscle: str) -> tuple[float, float]:
        return explicit.get(muscle, (lo, hi))

    under = [m for m in program.priority_muscles_auto if volume.get(m, 0.0) < band(m)[0]]
    over = [m for m in program.priority_muscles_auto if volume.get(m, 0.0) > band(m)[1]]

    steps = []
    if under:
        parts = [
            f"{format_muscle_name(m)} (+{math.ceil(band(m)[0] - volume.get(m, 0.0))})"
            for m in under[:MAX_MUSCLES_PER_STEP]
        ]
        steps.append(f"Add sets for {', '.join(parts)} to reach the bottom of each target band.")
        steps.append("Spread the extra sets across several sessions rather than one.")
    if over:
        parts = [
            f"{format_muscle_name(m)} (-{math.ceil(volume.get(m, 0.0) - band(m)[1])})"
            for m in over[:MAX_MUSCLES_PER_STEP]
        ]
        steps.append(f"Trim volume for {', '.join(parts)} to stay inside each target band.")
    if not steps:
        steps.append(f"Keep each priority muscle between {lo} and {hi} weekly sets for {gl}.")

    return (
        "Volume isn't optimized for your goal",
        f"For {gl}, your key muscles need {lo}-{hi} effective sets per week.",
        steps,
    )


def _intensity_fit_item(spec: ProgramSpec, week: WeekMetrics, program: ProgramMetrics) -> tuple[str, str, list[str]]:
    gl = _goal_label(spec.goal)
    bucket, prescription = INTENSITY_FOCUS.get(spec.goal, INTENSITY_FOCUS["hypertrophy"])
    intensity = get_goal_profile(spec.goal).intensity
    target = intensity.minimums.get(bucket, intensity.desired.get(bucket, 0.0))
    current = getattr(week.intensity_histogram, bucket)
    sessions = len(week.roles)
    role = BUCKET_ROLE[bucket]

    steps = [f"Currently {round(current * 100)}% of sessions are {role} - aim for at least {round(target * 100)}%."]
    needed = math.ceil(target * sessions - 1e-9) - week.roles.count(role)
    if needed > 0:
        steps.append(f"Shift {needed} session{'s' if needed != 1 else ''} to {role} using {prescription}.")
    else:
        steps.append(f"Build your {role} sessions around {prescription}.")
    cap = intensity.maximums.get("high")
    if cap is not None:
        steps.append(f"Keep High sessions at or below {round(cap * 100)}% of the week to protect recovery.")

    return (
        "Intensity mix doesn't match your goal",
        f"{gl.capitalize()} responds best to a specific effort distribution; your current split is off.",
        steps,
    )


def _stress_patterning_item(spec: ProgramSpec, week: WeekMetrics, program: ProgramMetrics) -> tuple[str, str, list[str]]:
    back_to_back = [f for f in week.spacing_flags if f.startswith("Back-to-back High")]
    clustered = [f for f in week.spacing_flags if " High in 3 slots" in f]

    steps = []
    for flag in back_to_back:
        slots = flag.rsplit(" ", 1)[-1]
        steps.append(f"Insert a Low session or rest between slots {slots}.")
    if clustered:
        steps.append(
            f"Change {len(clustered)} High session{'s' if len(clustered) != 1 else ''} in the clustered "
            "windows to Medium."
        )
    if not steps:
        steps.append("Alternate heavy and light sessions throughout the week.")
    steps.append("A good pattern: Heavy, Light, Moderate, Rest, Heavy, Moderate, Rest.")

    return (
        "Recovery between hard sessions needs work",
        "Stacking heavy sessions limits recovery and raises injury risk.",
        steps,
    )


def _balance_item(spec: ProgramSpec, week: WeekMetrics, program: ProgramMetrics) -> tuple[str, str, list[str]]:
    bounds = get_goal_profile(spec.goal).balance
    volume = week.volume_by_muscle
    steps = []
    for key, (denominator, numerator, denominator_fix, numerator_fix) in BALANCE_FIXES.items():
        ratio = getattr(week.balance_ratios, key)
        if ratio is None:
            continue
        lo, hi = bounds[key]
        # the ratio floors an empty side at 1; set gaps use the real volumes
        top = group_volume(volume, numerator)
        bottom = group_volume(volume, denominator)
        if ratio > hi:
            sets = math.ceil((top or 1.0) / hi - bottom)
            steps.append(f"{BALANCE_LABELS[key]} is {ratio:.2f}: add {sets} {denominator_fix} sets per week.")
        elif ratio < lo:
            sets = math.ceil((bottom or 1.0) * lo - top)
            steps.append(f"{BALANCE_LABELS[key]} is {ratio:.2f}: add {sets} {numerator_fix} sets per week.")
    if not steps:
        pp_lo, pp_hi = bounds["push_pull"]
        steps.append(f"Your balance is close; keep ratios between {pp_lo} and {pp_hi}.")

    return (
        "Muscle balance could be more even",
        "Lopsided push/pull and upper/lower ratios limit development and raise injury risk.",
        steps,
    )


def _specificity_item(spec: ProgramSpec, week: WeekMetrics, program: ProgramMetrics) -> tuple[str, str, list[str]]:
    gl = _goal_label(spec.goal)
    heat = program.coverage_heatmap
    steps = ["Make your highest-volume exercises target the muscles that matter most for your goal."]
    low = program.low_attention_muscles[:4]
    if low:
        threshold = get_settings().low_attention_threshold
        parts = [f"{format_muscle_name(m)} (+{math.ceil(threshold - heat.get(m, 0.0))})" for m in low]
        steps.append(f"These muscles get very little work: {', '.join(parts)} sets/week if they matter for {gl}.")
    steps.append("Swap isolation exercises for compounds that hit several priority muscles at once.")

    return (
        "Training isn't specific enough to your goal",
        f"For {gl}, your priority muscles should get noticeably more volume than secondary ones.",
        steps,
    )


def _progression_item(spec: ProgramSpec, week: WeekMetrics, program: ProgramMetrics) -> tuple[str, str, list[str]]:
    gl = _goal_label(spec.goal)
    # blocks without weeks have no trend to fix
    planned = [b for b in program.blocks if b.weekly]
    not_rising = [b for b in planned if b.volume_trend != "rising"]
    no_deload = [b for b in planned if not b.deload_detected]

    steps = []
    if not_rising:
        volumes = [v for b in not_rising for v in b.weekly_volumes]
        mean_volume = sum(volumes) / len(volumes)
        bump = math.floor(TREND_NOISE_FRACTION * mean_volume) + 1
        blocks = f"{len(not_rising)} blocks show" if len(not_rising) != 1 else "1 block shows"
        steps.append(
            f"{blocks} no rising volume: end each block "
            f"at least {bump} weekly set{'s' if bump != 1 else ''} above where it starts."
        )
    if no_deload:
        steps.append(
            f"Plan a deload week that cuts volume by at least {round(DELOAD_DROP_THRESHOLD * 100)}% "
            f"in {len(no_deload)} block{'s' if len(no_deload) != 1 else ''}."
        )
    steps.append("Track your lifts so small weekly jumps in weight or reps add up.")

    return (
        "Progression strategy could improve",
        f"{gl.capitalize()} requires structured overload over time; flat volume leaves gains on the table.",
        steps,
    )


def _feasibility_item(spec: ProgramSpec, week: WeekMetrics, program: ProgramMetrics) -> tuple[str, str, list[str]]:
    lo, hi = program.recommended_minutes_band
    actual = round(program.avg_weekly_minutes)
    steps = []
    if actual > hi:
        steps.append(f"Your weekly total is ~{actual} min, {actual - hi} min over the {lo}-{hi} min range.")
        steps.append("Remove 1-2 isolation exercises from your longest session, or cut a set per exercise.")
    elif actual < lo:
        steps.append(f"Your weekly total is ~{actual} min, {lo - actual} min under the {lo}-{hi} min range.")
        steps.append("Add an exercise to 1-2 sessions, or add one more training day.")
    else:
        steps.append(f"Your weekly total (~{actual} min) fits the {lo}-{hi} min range.")

    return (
        "Weekly time budget needs adjustment",
        f"Programs that fit your schedule are programs you stick with. Aim for {lo}-{hi} min/week.",
        steps,
    )


_ItemBuilder = Callable[[ProgramSpec, WeekMetrics, ProgramMetrics], tuple[str, str, list[str]]]

ITEM_BUILDERS: Mapping[str, _ItemBuilder] = MappingProxyType({
    "specificity": _specificity_item,
    "progression": _progression_item,
    "stress_patterning": _stress_patterning_item,
    "volume_fit": _volume_fit_item,
    "intensity_fit": _intensity_fit_item,
    "balance_health": _balance_item,
    "feasibility": _feasibility_item,
})
if set(ITEM_BUILDERS) != set(SUB_SCORE_KEYS):
    raise RuntimeError("every sub-score dimension needs an improvement item builder")


def build_improvement_plan(
    spec: ProgramSpec,
    week: WeekMetrics,
    program: ProgramMetrics | None,
) -> list[ImprovementItem]:
    """Ranked improvement items, highest potential gain first."""
    if program is None:
        return []

    current = program.sub_scores.as_dict()
    potentials = []
    for dim in SUB_SCORE_KEYS:
        gain = round(program.weights[dim] * (1 - current[dim]) * 100)
        potentials.append((dim, current[dim], gain))
    potentials.sort(key=lambda p: -p[2])

    items = []
    for dim, score, gain in potentials:
        if score >= NEAR_PERFECT or gain < 1:
            continue
        title, why, steps = ITEM_BUILDERS[dim](spec, week, program)
        items.append(ImprovementItem(
            dimension=dim,
            title=title,
            why=why,
            steps=tuple(steps),
            points_gain=gain,
            priority=priority_from_gain(gain),
            current=score,
        ))
    return items

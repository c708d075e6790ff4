"""Program scoring: goal-aware sub-scores combined into a 0-100 goal-fit score.

Flattens every week across every block and computes seven sub-scores in
[0, 1]:
- specificity: volume on the auto-detected priority muscles vs. the rest
- progression: rising volume trend and deloads per block
- stress_patterning: fewer spacing flags per week is better
- volume_fit: priority muscles inside the goal's weekly set band
- intensity_fit: High/Medium/Low session shares vs. what the goal favors
- balance_health: push:pull, quad:ham and upper:lower close to 1.0
- feasibility: average weekly minutes vs. the goal's recommended band

Also derives the classic coachable statistics: monotony (mean/stddev of
role-bucketed session loads) and strain (mean x monotony).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from prgrm.config import get_settings
from prgrm.schemas import ProgramSpec
from prgrm.services.block_aggregator import BlockMetrics
from prgrm.services.constants import (
    DEFAULT_SET_BAND_BY_GOAL,
    LOAD_FROM_ROLE,
    PRIORITY_MUSCLE_COUNT,
    RECOMMENDED_MINUTES_BAND,
    SPACING_FLAG_PENALTY,
    TOP_MUSCLE_COUNT,
)
from prgrm.services.goal_profiles import resolve_weights
from prgrm.services.stats_utils import avg, clamp01, stddev
from prgrm.services.week_projector import BalanceRatios, IntensityHistogram, WeekMetrics

MONOTONY_WHEN_UNIFORM = 3.0


@dataclass(frozen=True)
class SubScores:
    specificity: float
    progression: float
    stress_patterning: float
    volume_fit: float
    intensity_fit: float
    balance_health: float
    feasibility: float

    def as_dict(self) -> dict[str, float]:
        return {
            "specificity": self.specificity,
            "progression": self.progression,
            "stress_patterning": self.stress_patterning,
            "volume_fit": self.volume_fit,
            "intensity_fit": self.intensity_fit,
            "balance_health": self.balance_health,
            "feasibility": self.feasibility,
        }


@dataclass(frozen=True)
class ProgramMetrics:
    blocks: tuple[BlockMetrics, ...]
    goal_fit_score: int                   # 0..100
    sub_scores: SubScores
    weights: dict[str, float]
    coverage_heatmap: dict[str, float]    # weekly-average effective sets per muscle
    insights: tuple[str, ...]
    recommended_minutes_band: tuple[float, float]
    avg_weekly_minutes: float
    minutes_fit: float
    sessions_per_week: float
    avg_session_minutes: float
    monotony: float
    strain: float
    intensity_mix: IntensityHistogram = field(default_factory=IntensityHistogram)
    balance_avg: BalanceRatios = field(default_factory=BalanceRatios)
    priority_muscles_auto: tuple[str, ...] = ()
    top_muscles: tuple[str, ...] = ()
    low_attention_muscles: tuple[str, ...] = ()


def weekly_average_volume(weeks: Sequence[WeekMetrics]) -> dict[str, float]:
    totals: dict[str, float] = {}
    for w in weeks:
        for muscle, sets in w.volume_by_muscle.items():
            totals[muscle] = totals.get(muscle, 0.0) + sets
    n = max(1, len(weeks))
    return {m: v / n for m, v in totals.items()}


def _ranked(weekly_avg: dict[str, float]) -> list[str]:
    return [m for m, _ in sorted(weekly_avg.items(), key=lambda kv: -kv[1])]


def specificity_score(weekly_avg: dict[str, float], priority: Sequence[str]) -> float:
    pri = sum(weekly_avg.get(m, 0.0) for m in priority)
    non_pri = sum(v for m, v in weekly_avg.items() if m not in priority)
    return clamp01(0.5 + 0.25 * math.log2(1 + pri / max(1.0, non_pri)))


def progression_score(blocks: Sequence[BlockMetrics]) -> float:
    return clamp01(avg([
        (0.8 if b.volume_trend == "rising" else 0.6) + (0.2 if b.deload_detected else 0.0)
        for b in blocks
    ]))


def stress_patterning_score(weeks: Sequence[WeekMetrics]) -> float:
    return clamp01(avg([1 - min(1.0, SPACING_FLAG_PENALTY * len(w.spacing_flags)) for w in weeks]))


def volume_fit_score(weekly_avg: dict[str, float], priority: Sequence[str], band: tuple[float, float]) -> float:
    lo, hi = band
    return clamp01(avg([1.0 if lo <= weekly_avg.get(m, 0.0) <= hi else 0.0 for m in priority]))


def intensity_mix(weeks: Sequence[WeekMetrics]) -> IntensityHistogram:
    high = avg([w.intensity_histogram.high for w in weeks])
    moderate = avg([w.intensity_histogram.moderate for w in weeks])
    return IntensityHistogram(low=max(0.0, 1 - high - moderate), moderate=moderate, high=high)


def intensity_fit_score(goal: str, mix: IntensityHistogram) -> float:
    if goal == "strength":
        return clamp01(0.5 + 0.5 * mix.high)
    if goal == "hypertrophy":
        return clamp01(0.5 + 0.5 * mix.moderate)
    if goal == "endurance":
        return clamp01(0.5 + 0.5 * mix.low)
    return 0.6


def ratio_closeness(ratio: float | None) -> float:
    """1 at a ratio of 1.0, falling to 0 at 2:1 or 1:2."""
    if ratio is None:
        ratio = 1.0
    if ratio <= 0:
        return 0.0
    return 1 - min(1.0, abs(math.log2(ratio)))


def balance_health_score(weeks: Sequence[WeekMetrics]) -> float:
    per_week = []
    for w in weeks:
        r = w.balance_ratios
        per_week.append(
            (ratio_closeness(r.push_pull) + ratio_closeness(r.quad_ham) + ratio_closeness(r.upper_lower)) / 3
        )
    return clamp01(avg(per_week))


def minutes_fit_score(avg_weekly_minutes: float, band: tuple[float, float]) -> float:
    """1.0 inside the band; a soft linear penalty by distance from its midpoint outside."""
    lo, hi = band
    if lo <= avg_weekly_minutes <= hi:
        return 1.0
    mid = (lo + hi) / 2
    span = (hi - lo) / 2 or 1
    return clamp01(1 - abs(avg_weekly_minutes - mid) / (span * 2))


def monotony_and_strain(weeks: Sequence[WeekMetrics]) -> tuple[float, float]:
    loads = [LOAD_FROM_ROLE[r] for w in weeks for r in w.roles]
    if not loads:
        return 0.0, 0.0
    mean = avg(loads)
    sd = stddev(loads)
    monotony = mean / sd if sd else MONOTONY_WHEN_UNIFORM
    return monotony, mean * monotony


def _balance_average(weeks: Sequence[WeekMetrics]) -> BalanceRatios:
    def _mean(attr: str) -> float:
        values = [getattr(w.balance_ratios, attr) for w in weeks]
        return avg([1.0 if v is None else v for v in values])

    return BalanceRatios(push_pull=_mean("push_pull"), quad_ham=_mean("quad_ham"), upper_lower=_mean("upper_lower"))


def score_program(
    spec: ProgramSpec,
    blocks: Sequence[BlockMetrics],
    low_attention_threshold: float | None = None,
) -> ProgramMetrics:
    """Score a whole program (all blocks) against its ProgramSpec goal."""
    if low_attention_threshold is None:
        low_attention_threshold = get_settings().low_attention_threshold

    goal = spec.goal
    weeks = [w for b in blocks for w in b.weekly]
    weekly_avg = weekly_average_volume(weeks)
    ranked = _ranked(weekly_avg)
    priority = ranked[:PRIORITY_MUSCLE_COUNT]

    mix = intensity_mix(weeks)
    minutes_band = RECOMMENDED_MINUTES_BAND[goal]
    avg_weekly_minutes = avg([w.projected_weekly_minutes for w in weeks])
    minutes_fit = minutes_fit_score(avg_weekly_minutes, minutes_band)

    sub = SubScores(
        specificity=specificity_score(weekly_avg, priority),
        progression=progression_score(blocks),
        stress_patterning=stress_patterning_score(weeks),
        volume_fit=volume_fit_score(weekly_avg, priority, DEFAULT_SET_BAND_BY_GOAL[goal]),
        intensity_fit=intensity_fit_score(goal, mix),
        balance_health=balance_health_score(weeks),
        feasibility=minutes_fit,
    )
    weights = resolve_weights(goal)
    weighted = sum(weights[k] * v for k, v in sub.as_dict().items())
    goal_fit_score = max(0, min(100, round(100 * weighted)))

    sessions_per_week = avg([len(w.roles) for w in weeks])
    avg_session_minutes = avg([
        w.projected_weekly_minutes / len(w.roles) if w.roles else 0.0 for w in weeks
    ])
    monotony, strain = monotony_and_strain(weeks)

    low_attention = [m for m, v in weekly_avg.items() if 0 < v < low_attention_threshold]

    insights: list[str] = []
    if goal_fit_score >= 85:
        insights.append("Great alignment with your goal.")
    if minutes_fit < 0.8:
        insights.append("Weekly minutes are outside the recommended range.")
    if monotony > 2.5:
        insights.append("Sessions feel very similar; consider more variation.")
    if low_attention:
        insights.append("Some muscle groups get little attention.")
    cap = spec.constraints.time_cap_min if spec.constraints else None
    if cap is not None and avg_weekly_minutes > cap:
        insights.append(f"Average week runs ~{round(avg_weekly_minutes - cap)} min over your time cap.")

    return ProgramMetrics(
        blocks=tuple(blocks),
        goal_fit_score=goal_fit_score,
        sub_scores=sub,
        weights=weights,
        coverage_heatmap=weekly_avg,
        insights=tuple(insights),
        recommended_minutes_band=minutes_band,
        avg_weekly_minutes=avg_weekly_minutes,
        minutes_fit=minutes_fit,
        sessions_per_week=sessions_per_week,
        avg_session_minutes=avg_session_minutes,
        monotony=monotony,
        strain=strain,
        intensity_mix=mix,
        balance_avg=_balance_average(weeks),
        priority_muscles_auto=tuple(priority),
        top_muscles=tuple(ranked[:TOP_MUSCLE_COUNT]),
        low_attention_muscles=tuple(low_attention),
    )

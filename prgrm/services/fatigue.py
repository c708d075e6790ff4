"""Explainable per-exercise fatigue bars (CNS / metabolic / joint).

Exercise traits arrive as 0..1 from the catalog; set context adds bonuses
for heavy work, high reps and short rest. Each channel is returned on a
0..100 scale. This is a coaching heuristic, not a physiology model.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Sequence

from prgrm.schemas import ExerciseDefinition, SetPrescription
from prgrm.services.intensity import effective_rest
from prgrm.services.stats_utils import avg

LOAD_PROFILE_JOINT_BONUS = MappingProxyType({"vertical": 35, "horizontal": 20, "rotational": 10})
OTHER_LOAD_PROFILE_BONUS = 5


@dataclass(frozen=True)
class FatigueBreakdown:
    cns: float = 0.0
    metabolic: float = 0.0
    joint: float = 0.0


def _clamp100(x: float) -> float:
    return max(0.0, min(100.0, x))


def _unit(x: float) -> float:
    return max(0.0, min(1.0, x))


def fatigue_from_exercise(ex: ExerciseDefinition, sets: Sequence[SetPrescription]) -> FatigueBreakdown:
    avg_pct = avg([s.one_rep_max_percent or 0.0 for s in sets])
    avg_rpe = avg([s.rpe or 0.0 for s in sets])
    avg_rest = avg([effective_rest(s) for s in sets])
    avg_reps = avg([s.reps for s in sets])

    heavy = avg_pct >= 80 or avg_rpe >= 8.5
    high_rep = avg_reps >= 12
    short_rest = avg_rest <= 60

    # exercise identity dominates; set context layers on top
    cns = 60 * _unit(ex.cns_demand)
    metabolic = 60 * _unit(ex.metabolic_demand)
    joint = 50 * _unit(ex.joint_stress)

    if heavy:
        cns += 25
        joint += 10
    if high_rep:
        metabolic += 25
    if short_rest:
        metabolic += 15

    joint += LOAD_PROFILE_JOINT_BONUS.get(ex.load_profile, OTHER_LOAD_PROFILE_BONUS)

    if ex.ballistic:
        cns += 5
        metabolic += 5
    if ex.skill_requirement == "high":
        cns += 5

    return FatigueBreakdown(cns=_clamp100(cns), metabolic=_clamp100(metabolic), joint=_clamp100(joint))

"""Flat per-session summary for calendar and block views.

Works straight from the exercise catalog traits (fatigue index, joint
stress, recovery days, muscle regions and movement types) without running
the load model.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from prgrm.schemas import Session

JOINT_STRESS_HIGH = 0.7
JOINT_STRESS_MODERATE = 0.4
REGION_DOMINANCE = 1.3
TOP_MUSCLES = 5


@dataclass(frozen=True)
class SessionSummary:
    session_id: str
    total_sets: int
    avg_fatigue: float
    avg_joint: float
    avg_recovery_days: float
    injury_risk: str                 # Low / Moderate / High
    workout_type: str                # Upper / Lower / Full Body / Mixed
    push_pull_ratio: float
    upper_lower_ratio: float
    muscle_volumes: dict[str, float] = field(default_factory=dict)
    muscle_set_counts: dict[str, int] = field(default_factory=dict)
    top_muscles: tuple[tuple[str, float], ...] = ()
    category_counts: dict[str, int] = field(default_factory=dict)
    energy_system_counts: dict[str, int] = field(default_factory=dict)


def injury_risk_for_joint_stress(avg_joint: float) -> str:
    if avg_joint > JOINT_STRESS_HIGH:
        return "High"
    if avg_joint > JOINT_STRESS_MODERATE:
        return "Moderate"
    return "Low"


def workout_type_for_regions(upper: float, lower: float) -> str:
    if upper > lower * REGION_DOMINANCE:
        return "Upper"
    if lower > upper * REGION_DOMINANCE:
        return "Lower"
    if upper > 0 and lower > 0:
        return "Full Body"
    return "Mixed"


def summarize_session(session: Session) -> SessionSummary:
    """Summarize one session; averages are per set, counts are per exercise."""
    muscle_volumes: dict[str, float] = {}
    muscle_set_counts: dict[str, int] = {}
    category_counts: dict[str, int] = {}
    energy_counts: dict[str, int] = {}
    regions = {"upper": 0.0, "lower": 0.0, "core": 0.0}
    movements = {"push": 0.0, "pull": 0.0, "neutral": 0.0, "abduction": 0.0}

    total_sets = 0
    fatigue = joint = recovery = 0.0

    for se in session.exercises:
        ex = se.exercise
        category_counts[ex.category] = category_counts.get(ex.category, 0) + 1
        energy_counts[ex.energy_system] = energy_counts.get(ex.energy_system, 0) + 1

        n = len(se.sets)
        total_sets += n
        fatigue += n * ex.fatigue_index
        joint += n * ex.joint_stress
        recovery += n * ex.recovery_days

        for m in ex.muscles:
            muscle_volumes[m.muscle_id] = muscle_volumes.get(m.muscle_id, 0.0) + n * m.contribution
            muscle_set_counts[m.muscle_id] = muscle_set_counts.get(m.muscle_id, 0) + n
            if m.region:
                regions[m.region] += n * m.contribution
            if m.movement_type:
                movements[m.movement_type] += n * m.contribution

    avg_joint = joint / total_sets if total_sets else 0.0
    top = sorted(muscle_volumes.items(), key=lambda kv: -kv[1])[:TOP_MUSCLES]

    push, pull = movements["push"], movements["pull"]
    upper, lower = regions["upper"], regions["lower"]

    return SessionSummary(
        session_id=session.session_id,
        total_sets=total_sets,
        avg_fatigue=fatigue / total_sets if total_sets else 0.0,
        avg_joint=avg_joint,
        avg_recovery_days=recovery / total_sets if total_sets else 0.0,
        injury_risk=injury_risk_for_joint_stress(avg_joint),
        workout_type=workout_type_for_regions(upper, lower),
        push_pull_ratio=push / pull if pull > 0 else push,
        upper_lower_ratio=upper / lower if upper > 0 and lower > 0 else 1.0,
        muscle_volumes=muscle_volumes,
        muscle_set_counts=muscle_set_counts,
        top_muscles=tuple(top),
        category_counts=category_counts,
        energy_system_counts=energy_counts,
    )

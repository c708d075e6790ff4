"""Session metrics: turn one planned session into explainable load figures.

Every set contributes a raw load (reps x intensity x density), a time
estimate and an energy-system split; every exercise contributes effective
and raw muscle sets plus a fatigue breakdown. The session load is
normalized to 0-10 and mapped to a provisional High/Medium/Low role. The
Week Projector re-derives roles relative to the week; the role here stays
context-free.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from prgrm.config import get_settings
from prgrm.schemas import Session
from prgrm.services.constants import SECONDS_PER_REP, SESSION_LOAD_CAP, SESSION_LOAD_DIVISOR
from prgrm.services.energy import ENERGY_SYSTEMS, energy_mix_for_set
from prgrm.services.fatigue import FatigueBreakdown, fatigue_from_exercise
from prgrm.services.intensity import effective_rest, set_raw_load

logger = logging.getLogger(__name__)

HIGH_ROLE_LOAD = 7.0
LOW_ROLE_LOAD = 3.0
JOINT_RISK_THRESHOLD = 70.0
CNS_RISK_THRESHOLD = 75.0


@dataclass(frozen=True)
class DayMetrics:
    """Per-session metrics consumed by the Week Projector and session views."""
    session_load: float          # normalized 0..10
    raw_load: float              # unbounded, pre-normalization
    est_duration_min: int
    role_computed: str           # from load thresholds
    role_final: str              # respects the user's role intent
    fatigue: FatigueBreakdown = field(default_factory=FatigueBreakdown)
    energy: dict[str, float] = field(default_factory=dict)
    muscle_sets: dict[str, float] = field(default_factory=dict)      # effective (weighted)
    muscle_set_hits: dict[str, int] = field(default_factory=dict)    # raw set counts
    pattern_exposure: dict[str, int] = field(default_factory=dict)
    risk_flags: tuple[str, ...] = ()


def role_for_session_load(session_load: float) -> str:
    if session_load >= HIGH_ROLE_LOAD:
        return "High"
    if session_load <= LOW_ROLE_LOAD:
        return "Low"
    return "Medium"


def compute_day_metrics(session: Session, default_time_cap_min: float | None = None) -> DayMetrics:
    """Compute DayMetrics for one session.

    Never raises for sparse plan data: an exercise with no muscle
    contributions adds no volume, and a set without RPE or %1RM is treated
    as moderate intensity.
    """
    intent = session.intent
    density_intent = intent.density_intent if intent else None

    raw_load = 0.0
    total_minutes = 0.0
    muscle_sets: dict[str, float] = {}
    muscle_hits: dict[str, int] = {}
    pattern_exposure: dict[str, int] = {}
    energy_acc = {k: 0.0 for k in ENERGY_SYSTEMS}
    cns = metabolic = joint = 0.0
    loaded_exercises = 0

    for se in session.exercises:
        ex = se.exercise
        pattern_exposure[ex.category] = pattern_exposure.get(ex.category, 0) + 1

        set_count = len(se.sets)
        contributing = [m for m in ex.muscles if m.contribution > 0]
        if not contributing:
            logger.debug("Exercise %s has no muscle contributions; no volume counted", ex.id)
        for m in contributing:
            muscle_hits[m.muscle_id] = muscle_hits.get(m.muscle_id, 0) + set_count
            muscle_sets[m.muscle_id] = muscle_sets.get(m.muscle_id, 0.0) + set_count * m.contribution

        for s in se.sets:
            raw_load += set_raw_load(s, density_intent)
            total_minutes += (s.reps * SECONDS_PER_REP + effective_rest(s)) / 60
            for system, share in energy_mix_for_set(s).items():
                energy_acc[system] += share

        if not se.sets:
            continue
        f = fatigue_from_exercise(ex, se.sets)
        cns += f.cns
        metabolic += f.metabolic
        joint += f.joint
        loaded_exercises += 1

    session_load = min(SESSION_LOAD_CAP, raw_load / SESSION_LOAD_DIVISOR)

    ex_count = max(1, loaded_exercises)
    fatigue = FatigueBreakdown(cns=cns / ex_count, metabolic=metabolic / ex_count, joint=joint / ex_count)

    energy_total = sum(energy_acc.values()) or 1.0
    energy = {k: v / energy_total for k, v in energy_acc.items()}

    role_computed = role_for_session_load(session_load)
    role_final = intent.role_intent if intent and intent.role_intent else role_computed

    if session.time_cap_min is not None:
        time_cap = session.time_cap_min
    elif default_time_cap_min is not None:
        time_cap = default_time_cap_min
    else:
        time_cap = get_settings().default_time_cap_min

    risk_flags: list[str] = []
    if fatigue.joint >= JOINT_RISK_THRESHOLD:
        risk_flags.append("High joint load")
    if fatigue.cns >= CNS_RISK_THRESHOLD:
        risk_flags.append("High CNS demand")
    if total_minutes > time_cap:
        risk_flags.append("Over time cap")

    return DayMetrics(
        session_load=session_load,
        raw_load=raw_load,
        est_duration_min=round(total_minutes),
        role_computed=role_computed,
        role_final=role_final,
        fatigue=fatigue,
        energy=energy,
        muscle_sets=muscle_sets,
        muscle_set_hits=muscle_hits,
        pattern_exposure=pattern_exposure,
        risk_flags=tuple(risk_flags),
    )

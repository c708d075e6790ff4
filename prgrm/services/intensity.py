"""Per-set intensity and density heuristics.

Converts %1RM / RPE / RIR plus rest and set type into a per-set load
multiplier. Every calibration number lives here so the load model can be
tuned without touching the session computer.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

from prgrm.schemas import SetPrescription
from prgrm.services.constants import DEFAULT_INTENSITY_FACTOR, DEFAULT_REST_SEC

# Density multipliers for set methods that compress rest
SET_TYPE_DENSITY_BUMP = MappingProxyType({
    "amrap": 1.08,
    "cluster": 1.07,
    "rest_pause": 1.06,
    "myo_reps": 1.06,
})
SHORT_REST_INTENT_BUMP = 1.05


@dataclass(frozen=True)
class ResolvedIntensity:
    """Which intensity field drives a set, and its value."""
    source: str  # "percent_1rm", "rpe", "rir", "default"
    value: float | None


def resolve_intensity(s: SetPrescription) -> ResolvedIntensity:
    """Pick the single intensity signal for a set.

    Precedence: %1RM, then RPE, then RIR (read as RPE = 10 - RIR), then none.
    """
    if s.one_rep_max_percent is not None:
        return ResolvedIntensity("percent_1rm", float(s.one_rep_max_percent))
    if s.rpe is not None:
        return ResolvedIntensity("rpe", float(s.rpe))
    if s.rir is not None:
        return ResolvedIntensity("rir", max(0.0, 10.0 - float(s.rir)))
    return ResolvedIntensity("default", None)


def percent_1rm_factor(pct: float) -> float:
    """60% -> 0.5, 90%+ -> 1.0, clamped to [0.5, 1.0]."""
    return max(0.5, min(1.0, ((pct - 60) / 30) * 0.5 + 0.5))


def rpe_factor(rpe: float) -> float:
    """RPE 6 -> 0.65, RPE 9.5 -> 1.0, clamped to [0.65, 1.0]."""
    return max(0.65, min(1.0, ((rpe - 6) / 3.5) * 0.35 + 0.65))


def intensity_factor(s: SetPrescription) -> float:
    resolved = resolve_intensity(s)
    if resolved.source == "percent_1rm":
        return percent_1rm_factor(resolved.value)
    if resolved.source in ("rpe", "rir"):
        return rpe_factor(resolved.value)
    return DEFAULT_INTENSITY_FACTOR


def effective_rest(s: SetPrescription) -> float:
    return float(s.rest) if s.rest is not None else float(DEFAULT_REST_SEC)


def density_factor(s: SetPrescription, density_intent: str | None = None) -> float:
    """Load multiplier for rest length, short-rest intent and dense set methods."""
    rest = effective_rest(s)
    if rest <= 60:
        base = 1.15
    elif rest <= 90:
        base = 1.05
    elif rest <= 150:
        base = 1.0
    else:
        base = 0.95
    if density_intent == "short_rests":
        base *= SHORT_REST_INTENT_BUMP
    return base * SET_TYPE_DENSITY_BUMP.get(s.set_type, 1.0)


def set_raw_load(s: SetPrescription, density_intent: str | None = None) -> float:
    """Per-set raw load proxy: reps x intensity x density."""
    return s.reps * intensity_factor(s) * density_factor(s, density_intent)

"""Coarse energy-system split (ATP-CP / Glycolytic / Oxidative) per set."""

from __future__ import annotations

from prgrm.schemas import SetPrescription
from prgrm.services.intensity import effective_rest

ENERGY_SYSTEMS = ("ATP_CP", "Glycolytic", "Oxidative")


def energy_mix_for_set(s: SetPrescription) -> dict[str, float]:
    """Return energy-system proportions for one set; fractions sum to 1."""
    reps = s.reps
    rest = effective_rest(s)

    if reps <= 3 and rest >= 120:
        atp, gly, ox = 0.70, 0.25, 0.05
    elif reps <= 6:
        atp, gly, ox = 0.45, 0.45, 0.10
    elif reps <= 12:
        atp, gly, ox = 0.20, 0.60, 0.20
    else:
        atp, gly, ox = 0.10, 0.45, 0.45

    if rest <= 60:
        gly += 0.08
        ox += 0.05
        atp -= 0.13

    total = atp + gly + ox or 1.0
    return {"ATP_CP": atp / total, "Glycolytic": gly / total, "Oxidative": ox / total}

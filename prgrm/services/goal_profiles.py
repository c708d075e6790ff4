"""Goal profiles: per-goal presets used by scoring, coaching and UI defaults.

Only strength, hypertrophy and athletic have bespoke profiles; the other
goals resolve to their nearest analog.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from prgrm.schemas import ProgramSpec, WeeklyTargets
from prgrm.services.constants import GOAL_WEIGHTS, SUB_SCORE_KEYS


@dataclass(frozen=True)
class RoleMix:
    high: float
    medium: float
    low: float


@dataclass(frozen=True)
class IntensityTargets:
    desired: Mapping[str, float] = field(default_factory=dict)
    minimums: Mapping[str, float] = field(default_factory=dict)
    maximums: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class SpacingPolicy:
    max_high_in_3: int = 2
    forbid_adjacent_high: bool = True


@dataclass(frozen=True)
class GoalProfile:
    id: str
    label: str
    overview: str
    coaching_tone: str
    weights: Mapping[str, float]
    default_target_band: tuple[float, float]
    role_mix: RoleMix
    intensity: IntensityTargets
    spacing: SpacingPolicy
    balance: Mapping[str, tuple[float, float]]
    weekly_targets: WeeklyTargets | None = None

    def targets_from_spec(self, spec: ProgramSpec) -> WeeklyTargets | None:
        """Apply the default band to each user-declared priority muscle."""
        if not spec.priority_muscles:
            return None
        return WeeklyTargets(sets_per_muscle={m: self.default_target_band for m in spec.priority_muscles})


STRENGTH_PROFILE = GoalProfile(
    id="strength",
    label="Strength",
    overview=(
        "Emphasizes heavy exposures (80-85%+ 1RM) with supportive volume. "
        "Targets ~6-12 effective sets per priority muscle."
    ),
    coaching_tone="direct",
    weights=MappingProxyType({
        "intensity_fit": 0.25,
        "progression": 0.20,
        "stress_patterning": 0.20,
        "volume_fit": 0.10,
    }),
    default_target_band=(6, 12),
    role_mix=RoleMix(high=0.3, medium=0.5, low=0.2),
    intensity=IntensityTargets(
        desired=MappingProxyType({"high": 0.3, "moderate": 0.45, "low": 0.25}),
        minimums=MappingProxyType({"high": 0.25}),
        maximums=MappingProxyType({"high": 0.67}),
    ),
    spacing=SpacingPolicy(max_high_in_3=2, forbid_adjacent_high=True),
    balance=MappingProxyType({
        "push_pull": (0.8, 1.3),
        "quad_ham": (0.8, 1.3),
        "upper_lower": (0.8, 1.3),
    }),
)

HYPERTROPHY_PROFILE = GoalProfile(
    id="hypertrophy",
    label="Hypertrophy",
    overview=(
        "Prioritizes weekly volume at moderate intensity with balanced movement "
        "patterns. Targets 10-20 effective sets per priority muscle."
    ),
    coaching_tone="gentle",
    weights=MappingProxyType({"volume_fit": 0.35, "intensity_fit": 0.10, "specificity": 0.20}),
    default_target_band=(10, 20),
    role_mix=RoleMix(high=0.15, medium=0.65, low=0.2),
    intensity=IntensityTargets(
        desired=MappingProxyType({"moderate": 0.55, "high": 0.15, "low": 0.3}),
        minimums=MappingProxyType({"moderate": 0.5}),
        maximums=MappingProxyType({"high": 0.5}),
    ),
    spacing=SpacingPolicy(max_high_in_3=2, forbid_adjacent_high=True),
    balance=MappingProxyType({
        "push_pull": (0.8, 1.25),
        "quad_ham": (0.8, 1.25),
        "upper_lower": (0.85, 1.2),
    }),
)

ATHLETIC_PROFILE = GoalProfile(
    id="athletic",
    label="Athletic",
    overview=(
        "Blends force, speed, and capacity. Balanced intensity mix with solid "
        "spacing and moderate volume per priority muscle."
    ),
    coaching_tone="gentle",
    weights=MappingProxyType({
        "stress_patterning": 0.25,
        "intensity_fit": 0.15,
        "progression": 0.15,
        "volume_fit": 0.15,
    }),
    default_target_band=(8, 14),
    role_mix=RoleMix(high=0.2, medium=0.55, low=0.25),
    intensity=IntensityTargets(
        desired=MappingProxyType({"high": 0.2, "moderate": 0.5, "low": 0.3}),
        minimums=MappingProxyType({"high": 0.15, "moderate": 0.35}),
        maximums=MappingProxyType({"high": 0.6}),
    ),
    spacing=SpacingPolicy(max_high_in_3=2, forbid_adjacent_high=True),
    balance=MappingProxyType({
        "push_pull": (0.85, 1.2),
        "quad_ham": (0.85, 1.2),
        "upper_lower": (0.9, 1.15),
    }),
)

PROFILES = MappingProxyType({
    "strength": STRENGTH_PROFILE,
    "hypertrophy": HYPERTROPHY_PROFILE,
    "athletic": ATHLETIC_PROFILE,
    "fat_loss": HYPERTROPHY_PROFILE,   # volume bias
    "endurance": ATHLETIC_PROFILE,     # mixed intensity and spacing
    "power": STRENGTH_PROFILE,         # heavy compound emphasis
})


def get_goal_profile(goal: str) -> GoalProfile:
    return PROFILES.get(goal, HYPERTROPHY_PROFILE)


def resolve_weekly_targets(spec: ProgramSpec) -> WeeklyTargets | None:
    """Weekly targets in precedence order.

    Explicit user targets win, then targets derived from the ProgramSpec priority
    muscles, then whatever preset the profile embeds.
    """
    if spec.targets is not None and spec.targets.sets_per_muscle:
        return spec.targets
    profile = get_goal_profile(spec.goal)
    return profile.targets_from_spec(spec) or profile.weekly_targets


def resolve_weights(goal: str) -> dict[str, float]:
    """Goal weights with the profile's overrides applied, renormalized to sum to 1."""
    base = GOAL_WEIGHTS.get(goal, GOAL_WEIGHTS["hypertrophy"])
    merged = {k: float(get_goal_profile(goal).weights.get(k, base[k])) for k in SUB_SCORE_KEYS}
    total = sum(merged.values()) or 1.0
    return {k: v / total for k, v in merged.items()}

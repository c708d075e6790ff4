"""Muscle-group helpers for balance ratios."""

from __future__ import annotations

from typing import Iterable, Mapping

from prgrm.services.constants import MUSCLE_GROUPS


def sum_muscles(volume_by_muscle: Mapping[str, float], muscle_ids: Iterable[str]) -> float:
    return sum(volume_by_muscle.get(m, 0.0) for m in muscle_ids)


def group_volume(volume_by_muscle: Mapping[str, float], group: str) -> float:
    return sum_muscles(volume_by_muscle, MUSCLE_GROUPS[group])


def _ratio(volume_by_muscle: Mapping[str, float], numerator: str, denominator: str) -> float:
    # an empty side counts as 1 so the ratio never divides by zero
    top = group_volume(volume_by_muscle, numerator) or 1.0
    bottom = group_volume(volume_by_muscle, denominator) or 1.0
    return top / bottom


def push_pull_ratio(volume_by_muscle: Mapping[str, float]) -> float:
    return _ratio(volume_by_muscle, "push", "pull")


def quad_ham_ratio(volume_by_muscle: Mapping[str, float]) -> float:
    return _ratio(volume_by_muscle, "quads", "hams")


def upper_lower_ratio(volume_by_muscle: Mapping[str, float]) -> float:
    return _ratio(volume_by_muscle, "upper", "lower")

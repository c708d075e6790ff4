"""Tests for week projection: roles, spacing flags, coverage and score."""

from __future__ import annotations

import pytest

from prgrm.schemas import WeeklyTargets
from prgrm.services.session_metrics import DayMetrics
from prgrm.services.week_projector import (
    EMPTY_CYCLE_FLAG,
    coverage_score,
    project_week,
    roles_from_loads,
    spacing_flags_for_roles,
)


def day(load: float, muscles: dict[str, float] | None = None, minutes: int = 60) -> DayMetrics:
    return DayMetrics(
        session_load=load,
        raw_load=load * 22,
        est_duration_min=minutes,
        role_computed="Medium",
        role_final="Medium",
        muscle_sets=muscles or {},
    )


def test_empty_week_sentinel():
    week = project_week([])
    assert week.spacing_flags == (EMPTY_CYCLE_FLAG,)
    assert week.projected_weekly_score == 0
    assert week.roles == ()
    assert week.projected_weekly_minutes == 0


def test_roles_by_z_score():
    assert roles_from_loads([2.0, 5.0, 8.0]) == ["Low", "Medium", "High"]


def test_uniform_loads_are_all_medium():
    assert roles_from_loads([4.0, 4.0, 4.0]) == ["Medium", "Medium", "Medium"]


def test_back_to_back_high_flag():
    flags = spacing_flags_for_roles(["High", "High"])
    assert any(f.startswith("Back-to-back High") for f in flags)
    assert "Back-to-back High at slots 0–1" in flags


def test_three_window_needs_more_than_two_high():
    flags = spacing_flags_for_roles(["High", "Low", "High"])
    assert flags == []
    flags = spacing_flags_for_roles(["High", "High", "Low", "High"])
    assert not any("High in 3 slots" in f for f in flags)
    flags = spacing_flags_for_roles(["High", "High", "High"])
    assert ">2 High in 3 slots starting at 0" in flags


def test_spacing_policy_can_allow_adjacent_high():
    assert spacing_flags_for_roles(["High", "High"], forbid_adjacent_high=False) == []


def test_coverage_defaults_without_targets():
    assert coverage_score({"pecs": 10}, None) == 0.7
    assert coverage_score({"pecs": 10}, WeeklyTargets()) == 0.7


def test_coverage_counts_untargeted_muscles_as_covered():
    targets = WeeklyTargets(sets_per_muscle={"pecs": (10, 20), "lats": (10, 20)})
    assert coverage_score({"pecs": 12, "lats": 4, "biceps": 2}, targets) == pytest.approx(2 / 3)


def test_coverage_ignores_targeted_muscles_without_volume():
    targets = WeeklyTargets(sets_per_muscle={"pecs": (10, 20), "quads": (10, 20)})
    assert coverage_score({"biceps": 6}, targets) == 1.0
    assert coverage_score({"pecs": 4}, targets) == 0.0


def test_project_week_aggregates():
    days = [
        day(2.0, {"pecs": 6.0}, minutes=45),
        day(5.0, {"lats": 6.0}, minutes=50),
        day(8.0, {"pecs": 2.0, "quads": 4.0}, minutes=70),
    ]
    week = project_week(days, week_index=3)
    assert week.week_index == 3
    assert week.roles == ("Low", "Medium", "High")
    assert week.spacing_flags == ()
    assert week.volume_by_muscle == {"pecs": 8.0, "lats": 6.0, "quads": 4.0}
    assert week.projected_weekly_minutes == 165
    assert week.intensity_histogram.high == pytest.approx(1 / 3)
    assert week.balance_ratios.push_pull == pytest.approx(8 / 6)
    assert week.projected_weekly_score == 70


def test_spacing_flags_reduce_score():
    days = [day(9.0), day(9.0), day(1.0), day(1.0)]
    week = project_week(days)
    assert week.roles == ("High", "High", "Low", "Low")
    assert len(week.spacing_flags) == 1
    assert week.projected_weekly_score == round(100 * (0.7 * (1 - 0.15)))


def test_does_not_mutate_days():
    days = [day(3.0, {"pecs": 3.0}), day(6.0, {"pecs": 3.0})]
    project_week(days)
    assert days[0].muscle_sets == {"pecs": 3.0}

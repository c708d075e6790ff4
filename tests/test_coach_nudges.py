"""Tests for weekly coach nudges."""

from __future__ import annotations

from prgrm.schemas import ProgramConstraints, ProgramSpec, WeeklyTargets
from prgrm.services.coach_nudges import coach_nudges_for_week
from prgrm.services.week_projector import IntensityHistogram, WeekMetrics, balance_ratios, empty_week


def week(volume=None, flags=(), minutes: int = 120, high: float = 0.3, moderate: float = 0.5) -> WeekMetrics:
    volume = volume if volume is not None else {"pecs": 10.0, "lats": 10.0, "quads": 10.0, "hamstrings": 10.0}
    return WeekMetrics(
        week_index=0,
        roles=("High", "Medium", "Low"),
        spacing_flags=tuple(flags),
        volume_by_muscle=volume,
        balance_ratios=balance_ratios(volume),
        intensity_histogram=IntensityHistogram(low=1 - high - moderate, moderate=moderate, high=high),
        projected_weekly_minutes=minutes,
    )


def test_balanced_week_has_no_nudges():
    assert coach_nudges_for_week(week()) == []


def test_spacing_flags_become_actions():
    flags = ("Back-to-back High at slots 0–1", ">2 High in 3 slots starting at 2")
    nudges = coach_nudges_for_week(week(flags=flags))
    assert nudges[0] == "Separate back-to-back High days by inserting a Low/Rest slot."
    assert nudges[1].startswith("Limit High days within any 3 sessions")


def test_unknown_flags_are_echoed():
    assert coach_nudges_for_week(empty_week()) == ["Empty cycle"]


def test_balance_nudge_states_sets_needed():
    # push:pull = 20 / 10 = 2.0 > 1.5 -> ceil(20 / 1.5 - 10) = 4 pulling sets
    nudges = coach_nudges_for_week(week({"pecs": 20.0, "lats": 10.0, "quads": 15.0, "hamstrings": 15.0}))
    assert nudges == ["Push:Pull is high (2.00): add 4 pulling (rows/pulldowns) sets this week."]


def test_low_balance_nudge():
    # quad:ham = 5 / 10 = 0.5 < 0.67 -> ceil(10 * 0.67 - 5) = 2 quad sets
    nudges = coach_nudges_for_week(week({"quads": 5.0, "hamstrings": 10.0, "pecs": 8.0, "lats": 7.0}))
    assert "Quad:Ham is low (0.50): add 2 quad emphasis (squats/split squats) sets this week." in nudges


def test_balance_nudge_with_empty_lower_side():
    # upper:lower reads 4 / 1 (floored); ceil(4 / 1.5 - 0) = 3 lower-body sets
    nudges = coach_nudges_for_week(week({"pecs": 2.0, "lats": 2.0}))
    assert nudges == ["Upper:Lower is high (4.00): add 3 lower-body sets this week."]
    assert balance_ratios({"pecs": 2.0, "lats": 2.0, "quads": 3.0}).upper_lower <= 1.5


def test_balance_nudge_with_empty_push_side():
    # push:pull reads 1 (floored) / 2 = 0.5; ceil(2 * 0.67 - 0) = 2 pressing sets
    nudges = coach_nudges_for_week(week({"lats": 2.0, "quads": 1.0, "hamstrings": 1.0}))
    assert nudges == ["Push:Pull is low (0.50): add 2 pressing (bench/overhead) sets this week."]


def test_custom_ratio_thresholds():
    w = week({"pecs": 13.0, "lats": 10.0, "quads": 11.5, "hamstrings": 11.5})
    assert coach_nudges_for_week(w) == []
    assert coach_nudges_for_week(w, ratio_high=1.2)


def test_ratio_thresholds_from_settings(monkeypatch):
    monkeypatch.setenv("PRGRM_NUDGE_RATIO_HIGH", "1.2")
    assert coach_nudges_for_week(week({"pecs": 13.0, "lats": 10.0, "quads": 11.5, "hamstrings": 11.5}))


def test_target_override_nudges():
    targets = WeeklyTargets(sets_per_muscle={"pecs": (12, 16), "lats": (4, 8)})
    nudges = coach_nudges_for_week(week(), targets=targets)
    assert "pecs: add 2 sets to reach the target band." in nudges
    assert "lats: consider removing 2 sets to stay within target." in nudges


def test_targets_resolved_from_spec():
    spec = ProgramSpec(goal="hypertrophy", priority_muscles=("pecs", "glutes"))
    nudges = coach_nudges_for_week(week(), spec)
    assert "glutes: add 10 sets to reach the target band." in nudges
    assert not any(n.startswith("pecs:") for n in nudges)


def test_strength_intensity_warning():
    spec = ProgramSpec(goal="strength")
    nudges = coach_nudges_for_week(week(high=0.2), spec)
    assert any(n.startswith("For strength") for n in nudges)
    assert not any(n.startswith("For strength") for n in coach_nudges_for_week(week(high=0.3), spec))


def test_hypertrophy_intensity_warning():
    spec = ProgramSpec(goal="hypertrophy")
    assert any(n.startswith("For hypertrophy") for n in coach_nudges_for_week(week(moderate=0.4), spec))


def test_time_cap_warning_respects_slack():
    spec = ProgramSpec(goal="athletic", constraints=ProgramConstraints(time_cap_min=200))
    assert coach_nudges_for_week(week(minutes=215), spec) == []
    nudges = coach_nudges_for_week(week(minutes=260), spec)
    assert nudges == ["Time: reduce ~60 minutes this week to fit your cap."]
    assert coach_nudges_for_week(week(minutes=215), spec, minutes_cap_slack=0.0)

"""Tests for ranked improvement items."""

from __future__ import annotations

from dataclasses import replace

from prgrm.schemas import ProgramSpec, WeeklyTargets
from prgrm.services.block_aggregator import aggregate_block
from prgrm.services.constants import SUB_SCORE_KEYS
from prgrm.services.improvement_plan import (
    ITEM_BUILDERS,
    build_improvement_plan,
    format_muscle_name,
    priority_from_gain,
)
from prgrm.services.program_scorer import SubScores, score_program
from prgrm.services.week_projector import IntensityHistogram, WeekMetrics, balance_ratios


def week(volume: dict[str, float], roles=("Medium", "Medium", "Low"), minutes: int = 200, flags=()) -> WeekMetrics:
    n = len(roles)
    return WeekMetrics(
        week_index=0,
        roles=tuple(roles),
        spacing_flags=tuple(flags),
        volume_by_muscle=volume,
        balance_ratios=balance_ratios(volume),
        intensity_histogram=IntensityHistogram(
            low=roles.count("Low") / n,
            moderate=roles.count("Medium") / n,
            high=roles.count("High") / n,
        ),
        projected_weekly_minutes=minutes,
        projected_weekly_score=70,
    )


def plan_for(spec: ProgramSpec, w: WeekMetrics):
    program = score_program(spec, [aggregate_block([w])])
    return program, build_improvement_plan(spec, w, program)


def test_builders_cover_every_dimension():
    assert set(ITEM_BUILDERS) == set(SUB_SCORE_KEYS)


def test_priority_tiers():
    assert priority_from_gain(8) == "high"
    assert priority_from_gain(4) == "medium"
    assert priority_from_gain(3) == "low"


def test_format_muscle_name():
    assert format_muscle_name("rear_delts") == "Rear Delts"


def test_no_program_no_items():
    assert build_improvement_plan(ProgramSpec(), week({}), None) == []


def test_items_sorted_and_below_threshold():
    w = week({"pecs": 20.0, "triceps": 6.0, "quads": 3.0}, roles=("High", "High", "Low"), flags=("Back-to-back High at slots 0–1",))
    program, items = plan_for(ProgramSpec(goal="strength"), w)
    assert items
    gains = [i.points_gain for i in items]
    assert gains == sorted(gains, reverse=True)
    for item in items:
        assert item.current < 0.95
        assert item.points_gain >= 1
        assert item.steps
        assert item.priority == priority_from_gain(item.points_gain)


def test_balance_steps_quote_sets_needed():
    # push 12 vs no pull: the ratio floors pull at 1 -> 12.0 (strength bounds 0.8-1.3)
    w = week({"pecs": 12.0, "quads": 10.0, "hamstrings": 10.0})
    _, items = plan_for(ProgramSpec(goal="strength"), w)
    balance = next(i for i in items if i.dimension == "balance_health")
    # 12 / 1.3 - 0 = 9.23 -> 10 sets of pulling brings the ratio to 1.2
    assert any("Push:Pull is 12.00: add 10 rowing" in s for s in balance.steps)


def test_volume_steps_quote_set_gaps():
    w = week({"pecs": 4.0, "lats": 25.0})
    _, items = plan_for(ProgramSpec(goal="hypertrophy"), w)
    volume = next(i for i in items if i.dimension == "volume_fit")
    assert any("Pecs (+6)" in s for s in volume.steps)
    assert any("Lats (-5)" in s for s in volume.steps)


def test_volume_steps_use_explicit_targets():
    w = week({"pecs": 4.0, "lats": 25.0})
    spec = ProgramSpec(goal="hypertrophy", targets=WeeklyTargets(sets_per_muscle={"pecs": (8, 12)}))
    _, items = plan_for(spec, w)
    volume = next(i for i in items if i.dimension == "volume_fit")
    assert any("Pecs (+4)" in s for s in volume.steps)


def test_feasibility_quotes_minute_gap():
    w = week({"pecs": 12.0, "lats": 12.0}, minutes=60)
    _, items = plan_for(ProgramSpec(goal="hypertrophy"), w)
    feasibility = next(i for i in items if i.dimension == "feasibility")
    assert any("120 min under the 180-300 min range" in s for s in feasibility.steps)


def test_intensity_steps_quote_session_gap():
    w = week({"pecs": 12.0, "lats": 12.0}, roles=("Medium", "Medium", "Low", "Low"))
    _, items = plan_for(ProgramSpec(goal="strength"), w)
    intensity = next(i for i in items if i.dimension == "intensity_fit")
    assert intensity.steps[0].startswith("Currently 0% of sessions are High")
    assert any("Shift 1 session to High" in s for s in intensity.steps)


def test_near_perfect_dimensions_are_dropped():
    w = week({"pecs": 12.0, "lats": 12.0, "quads": 12.0, "hamstrings": 12.0})
    program = score_program(ProgramSpec(), [aggregate_block([w])])
    perfect = replace(program, sub_scores=SubScores(1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0))
    assert build_improvement_plan(ProgramSpec(), w, perfect) == []


def test_progression_steps_skip_blocks_without_weeks():
    w = week({"pecs": 6.0, "lats": 6.0})
    spec = ProgramSpec(goal="hypertrophy")
    program = score_program(spec, [aggregate_block([], block_index=0), aggregate_block([w], block_index=1)])
    _, _, steps = ITEM_BUILDERS["progression"](spec, w, program)
    # one real block at 12 sets: floor(0.05 * 12) + 1 = 1
    assert steps[0] == "1 block shows no rising volume: end each block at least 1 weekly set above where it starts."
    assert steps[1].endswith("in 1 block.")


def test_progression_steps_pluralize_sets_and_blocks():
    w = week({"pecs": 20.0, "lats": 20.0})
    spec = ProgramSpec(goal="hypertrophy")
    program = score_program(spec, [aggregate_block([w]), aggregate_block([w], block_index=1)])
    _, _, steps = ITEM_BUILDERS["progression"](spec, w, program)
    # floor(0.05 * 40) + 1 = 3
    assert steps[0].startswith("2 blocks show no rising volume")
    assert "at least 3 weekly sets above" in steps[0]

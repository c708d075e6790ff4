"""Tests for plain-dict export and pandas frames."""

from __future__ import annotations

import json

from prgrm.schemas import ProgramSpec
from prgrm.services.engine import analyze_program, compute_all
from prgrm.services.reporting import (
    COVERAGE_COLUMNS,
    IMPROVEMENT_COLUMNS,
    WEEKLY_COLUMNS,
    coverage_frame,
    improvement_frame,
    output_as_dict,
    weekly_frame,
)
from tests.factories import balanced_week, make_block


def test_output_as_dict_is_json_serializable():
    out = compute_all(ProgramSpec(), balanced_week([6, 8]).sessions, [make_block([[6, 8], [8, 10]])])
    data = output_as_dict(out)
    assert data["mode"] == "structured"
    assert isinstance(data["days"], list)
    assert data["program"]["sub_scores"]["volume_fit"] == out.program.sub_scores.volume_fit
    assert data["days"][0]["fatigue"]["cns"] == out.days[0].fatigue.cns
    json.dumps(data)


def test_output_as_dict_handles_models():
    assert output_as_dict(ProgramSpec(goal="power"))["goal"] == "power"


def test_coverage_frame_sorted():
    out = compute_all(ProgramSpec(), balanced_week([6, 10, 6]).sessions)
    df = coverage_frame(out.program)
    assert list(df.columns) == COVERAGE_COLUMNS
    assert df["muscle"].tolist() == ["pecs", "lats"]
    assert df["weekly_sets"].tolist() == [12.0, 10.0]
    assert df["priority"].all()


def test_weekly_frame_rows_per_week():
    out = compute_all(ProgramSpec(), balanced_week([6]).sessions, [make_block([[6, 8], [8, 10]]), make_block([[4, 4]])])
    df = weekly_frame(out.program)
    assert list(df.columns) == WEEKLY_COLUMNS
    assert len(df) == 3
    assert df["block_index"].tolist() == [0, 0, 1]
    assert df["total_volume"].tolist() == [14.0, 18.0, 8.0]


def test_empty_frames_keep_columns():
    out = compute_all(ProgramSpec(), [])
    assert list(coverage_frame(out.program).columns) == COVERAGE_COLUMNS
    assert coverage_frame(out.program).empty
    assert list(improvement_frame([]).columns) == IMPROVEMENT_COLUMNS


def test_improvement_frame():
    report = analyze_program(ProgramSpec(goal="strength"), balanced_week([6, 8]).sessions)
    df = improvement_frame(report.improvements)
    assert list(df.columns) == IMPROVEMENT_COLUMNS
    assert len(df) == len(report.improvements)
    assert df["points_gain"].tolist() == sorted(df["points_gain"].tolist(), reverse=True)

"""Export helpers for rendering and export collaborators.

Converts engine outputs into plain dicts/lists and pandas DataFrames for
charts (coverage heatmap, weekly strip, improvement list).
"""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any, Iterable, Mapping

import pandas as pd
from pydantic import BaseModel

from prgrm.services.improvement_plan import ImprovementItem
from prgrm.services.program_scorer import ProgramMetrics

COVERAGE_COLUMNS = ["muscle", "weekly_sets", "priority", "low_attention"]
WEEKLY_COLUMNS = [
    "block_index",
    "week_index",
    "sessions",
    "high_sessions",
    "total_volume",
    "projected_minutes",
    "weekly_score",
    "spacing_flags",
]
IMPROVEMENT_COLUMNS = ["dimension", "title", "priority", "points_gain", "current", "steps"]


def output_as_dict(obj: Any) -> Any:
    """Recursively convert dataclasses, models, enums and mappings to plain data."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: output_as_dict(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Mapping):
        return {k: output_as_dict(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [output_as_dict(v) for v in obj]
    return obj


def coverage_frame(program: ProgramMetrics) -> pd.DataFrame:
    """Weekly-average sets per muscle, highest first."""
    if not program.coverage_heatmap:
        return pd.DataFrame(columns=COVERAGE_COLUMNS)
    priority = set(program.priority_muscles_auto)
    low = set(program.low_attention_muscles)
    df = pd.DataFrame([
        {"muscle": m, "weekly_sets": sets, "priority": m in priority, "low_attention": m in low}
        for m, sets in program.coverage_heatmap.items()
    ])
    return df.sort_values("weekly_sets", ascending=False, kind="stable").reset_index(drop=True)


def weekly_frame(program: ProgramMetrics) -> pd.DataFrame:
    """One row per projected week across every block."""
    rows = [
        {
            "block_index": b.block_index,
            "week_index": w.week_index,
            "sessions": len(w.roles),
            "high_sessions": w.roles.count("High"),
            "total_volume": sum(w.volume_by_muscle.values()),
            "projected_minutes": w.projected_weekly_minutes,
            "weekly_score": w.projected_weekly_score,
            "spacing_flags": len(w.spacing_flags),
        }
        for b in program.blocks
        for w in b.weekly
    ]
    if not rows:
        return pd.DataFrame(columns=WEEKLY_COLUMNS)
    return pd.DataFrame(rows, columns=WEEKLY_COLUMNS)


def improvement_frame(items: Iterable[ImprovementItem]) -> pd.DataFrame:
    rows = [
        {
            "dimension": i.dimension,
            "title": i.title,
            "priority": i.priority,
            "points_gain": i.points_gain,
            "current": i.current,
            "steps": len(i.steps),
        }
        for i in items
    ]
    if not rows:
        return pd.DataFrame(columns=IMPROVEMENT_COLUMNS)
    return pd.DataFrame(rows, columns=IMPROVEMENT_COLUMNS)

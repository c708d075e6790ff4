"""Orchestrator: stitches session -> week -> block -> program metrics.

Two modes:
- FLAT: only an ordered session sequence is known. The sequence is projected
  as one week and scored as a one-week block.
- STRUCTURED: real blocks of weeks are supplied. Every week is projected on
  its own and every block aggregated from its true weeks.

The day metrics and the single projected week are always computed from the
sequence so simple day views keep working in both modes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from prgrm.schemas import BlockInput, ProgramSpec, Session, WeeklyTargets
from prgrm.services.block_aggregator import BlockMetrics, aggregate_block
from prgrm.services.coach_nudges import coach_nudges_for_week
from prgrm.services.goal_profiles import SpacingPolicy, get_goal_profile, resolve_weekly_targets
from prgrm.services.improvement_plan import ImprovementItem, build_improvement_plan
from prgrm.services.program_scorer import ProgramMetrics, score_program
from prgrm.services.session_metrics import DayMetrics, compute_day_metrics
from prgrm.services.week_projector import WeekMetrics, project_week

logger = logging.getLogger(__name__)


class EngineMode(str, Enum):
    FLAT = "flat"
    STRUCTURED = "structured"


def select_mode(blocks: Sequence[BlockInput] | None) -> EngineMode:
    return EngineMode.STRUCTURED if blocks else EngineMode.FLAT


@dataclass(frozen=True)
class EngineOutput:
    days: tuple[DayMetrics, ...]
    week: WeekMetrics
    block: BlockMetrics | None
    program: ProgramMetrics | None
    mode: EngineMode = EngineMode.FLAT


@dataclass(frozen=True)
class EngineReport:
    output: EngineOutput
    nudges: tuple[str, ...]
    improvements: tuple[ImprovementItem, ...]


def _project_sessions(
    sessions: Sequence[Session],
    targets: WeeklyTargets | None,
    spacing: SpacingPolicy,
    week_index: int = 0,
) -> tuple[list[DayMetrics], WeekMetrics]:
    days = [compute_day_metrics(s) for s in sessions]
    week = project_week(
        days,
        targets,
        week_index=week_index,
        max_high_in_3=spacing.max_high_in_3,
        forbid_adjacent_high=spacing.forbid_adjacent_high,
    )
    return days, week


def _structured_blocks(
    blocks: Sequence[BlockInput],
    targets: WeeklyTargets | None,
    spacing: SpacingPolicy,
) -> list[BlockMetrics]:
    out = []
    for block_index, block in enumerate(blocks):
        weeks = [
            _project_sessions(w.sessions, targets, spacing, week_index)[1]
            for week_index, w in enumerate(block.weeks)
        ]
        out.append(aggregate_block(weeks, block_index=block_index))
    return out


def compute_all(
    spec: ProgramSpec,
    sequence: Sequence[Session],
    blocks: Sequence[BlockInput] | None = None,
) -> EngineOutput:
    """Compute every metrics layer for a ProgramSpec and its sessions.

    In structured mode the program is scored from all supplied weeks; the
    first block's metrics are exposed as ``block``. In flat mode the single
    projected week forms the only block. A week is never duplicated to fake
    a longer program.
    """
    mode = select_mode(blocks)
    targets = resolve_weekly_targets(spec)
    spacing = get_goal_profile(spec.goal).spacing

    days, week = _project_sessions(sequence, targets, spacing)

    if mode is EngineMode.STRUCTURED:
        block_metrics = _structured_blocks(blocks, targets, spacing)
    else:
        block_metrics = [aggregate_block([week])]

    program = score_program(spec, block_metrics)
    logger.debug(
        "Computed %s program: %d sessions, %d blocks, goal fit %d",
        mode.value,
        len(days),
        len(block_metrics),
        program.goal_fit_score,
        extra={
            "ctx_goal": spec.goal,
            "ctx_mode": mode.value,
            "ctx_blocks": len(block_metrics),
            "ctx_goal_fit": program.goal_fit_score,
        },
    )
    return EngineOutput(
        days=tuple(days),
        week=week,
        block=block_metrics[0],
        program=program,
        mode=mode,
    )


def latest_week(output: EngineOutput) -> WeekMetrics:
    """Last projected week of the last block with weeks, else the flat week."""
    if output.mode is EngineMode.STRUCTURED and output.program is not None:
        for block in reversed(output.program.blocks):
            if block.weekly:
                return block.weekly[-1]
    return output.week


def analyze_program(
    spec: ProgramSpec,
    sequence: Sequence[Session],
    blocks: Sequence[BlockInput] | None = None,
) -> EngineReport:
    """compute_all plus coach nudges and the improvement plan for the latest week."""
    output = compute_all(spec, sequence, blocks)
    week = latest_week(output)
    return EngineReport(
        output=output,
        nudges=tuple(coach_nudges_for_week(week, spec)),
        improvements=tuple(build_improvement_plan(spec, week, output.program)),
    )

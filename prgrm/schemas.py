"""Pydantic input models for plan data and the program spec.

Plan data arrives from the editing and exercise-catalog collaborators. Every
model is frozen: the engine reads these objects and never mutates them.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

Goal = Literal["strength", "hypertrophy", "athletic", "fat_loss", "endurance", "power"]
DayRole = Literal["High", "Medium", "Low"]
SetType = Literal[
    "warmup",
    "standard",
    "amrap",
    "drop",
    "cluster",
    "myo_reps",
    "rest_pause",
    "top_set",
    "backoff",
    "other",
]
MovementPattern = Literal[
    "squat",
    "hinge",
    "horizontal_push",
    "horizontal_pull",
    "vertical_push",
    "vertical_pull",
    "carry",
    "lunge",
    "rotation",
    "gait",
    "core",
]

# Method-specific fields each set type may carry
METHOD_FIELDS_BY_SET_TYPE = MappingProxyType({
    "drop": ("drop_percent", "drop_sets"),
    "cluster": ("cluster_reps", "intra_rest"),
    "myo_reps": ("activation_set_reps", "mini_sets", "intra_rest"),
    "rest_pause": ("initial_reps", "mini_sets", "pause_duration"),
})
_ALL_METHOD_FIELDS = (
    "drop_percent",
    "drop_sets",
    "cluster_reps",
    "intra_rest",
    "activation_set_reps",
    "mini_sets",
    "initial_reps",
    "pause_duration",
)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class SetPrescription(_Frozen):
    reps: int = Field(default=0, ge=0)
    rest: Optional[float] = Field(default=None, ge=0)
    rpe: Optional[float] = Field(default=None, ge=0, le=10)
    rir: Optional[float] = Field(default=None, ge=0)
    one_rep_max_percent: Optional[float] = Field(default=None, ge=0)
    set_type: SetType = "standard"

    drop_percent: Optional[float] = Field(default=None, gt=0, lt=100)
    drop_sets: Optional[int] = Field(default=None, ge=1)
    cluster_reps: Optional[int] = Field(default=None, ge=1)
    intra_rest: Optional[float] = Field(default=None, ge=0)
    activation_set_reps: Optional[int] = Field(default=None, ge=1)
    mini_sets: Optional[int] = Field(default=None, ge=1)
    initial_reps: Optional[int] = Field(default=None, ge=1)
    pause_duration: Optional[float] = Field(default=None, ge=0)

    notes: str = Field(default="", max_length=2000)

    @model_validator(mode="after")
    def _method_fields_match_set_type(self):
        allowed = METHOD_FIELDS_BY_SET_TYPE.get(self.set_type, ())
        stray = [f for f in _ALL_METHOD_FIELDS if getattr(self, f) is not None and f not in allowed]
        if stray:
            raise ValueError(f"{', '.join(stray)} not valid for set_type '{self.set_type}'")
        return self

    @property
    def method_fields(self) -> dict[str, float | int]:
        """Method-specific fields that are set and active for this set type."""
        return {
            f: getattr(self, f)
            for f in METHOD_FIELDS_BY_SET_TYPE.get(self.set_type, ())
            if getattr(self, f) is not None
        }


class MuscleContribution(_Frozen):
    muscle_id: str = Field(min_length=1)
    contribution: float = Field(default=0.0, ge=0.0, le=1.0)
    region: Optional[Literal["upper", "lower", "core"]] = None
    movement_type: Optional[Literal["push", "pull", "neutral", "abduction"]] = None


class ExerciseDefinition(_Frozen):
    id: str
    name: str = "Exercise"
    category: str = "other"
    load_profile: str = "other"
    muscles: tuple[MuscleContribution, ...] = ()
    cns_demand: float = 0.5
    metabolic_demand: float = 0.5
    joint_stress: float = 0.5
    ballistic: bool = False
    skill_requirement: Literal["low", "medium", "high"] = "low"
    energy_system: str = "Glycolytic"
    fatigue_index: float = 0.5
    recovery_days: float = 1.0


class SessionExercise(_Frozen):
    exercise: ExerciseDefinition
    sets: tuple[SetPrescription, ...] = ()
    order: int = 0


class SessionIntent(_Frozen):
    role_intent: Optional[DayRole] = None
    focus_muscles: tuple[str, ...] = ()
    focus_patterns: tuple[MovementPattern, ...] = ()
    objective: Optional[str] = None
    density_intent: Literal["normal", "short_rests"] = "normal"


class Session(_Frozen):
    session_id: str
    slot_index: int = Field(default=0, ge=0)
    exercises: tuple[SessionExercise, ...] = ()
    time_cap_min: Optional[float] = Field(default=None, gt=0)
    intent: Optional[SessionIntent] = None


class WeeklyTargets(_Frozen):
    sets_per_muscle: Optional[dict[str, tuple[float, float]]] = None
    percent_1rm_band: Optional[tuple[float, float]] = None

    @model_validator(mode="after")
    def _bands_ordered(self):
        for muscle, (lo, hi) in (self.sets_per_muscle or {}).items():
            if lo > hi:
                raise ValueError(f"target band for {muscle} has min > max")
        if self.percent_1rm_band and self.percent_1rm_band[0] > self.percent_1rm_band[1]:
            raise ValueError("percent_1rm_band has min > max")
        return self


class ProgramConstraints(_Frozen):
    time_cap_min: Optional[float] = Field(default=None, gt=0)
    equipment: tuple[str, ...] = ()
    fatigue_tolerance: Optional[Literal["low", "med", "high"]] = None


class ProgramSpec(_Frozen):
    goal: Goal = "hypertrophy"
    targets: Optional[WeeklyTargets] = None
    constraints: Optional[ProgramConstraints] = None
    priority_muscles: tuple[str, ...] = ()


class WeekInput(_Frozen):
    sessions: tuple[Session, ...] = ()


class BlockInput(_Frozen):
    weeks: tuple[WeekInput, ...] = ()

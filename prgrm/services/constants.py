"""Shared reference tables: goal weights, recommended bands, muscle groups.

All tables are read-only views built once at import time.
"""

from __future__ import annotations

from types import MappingProxyType

SUB_SCORE_KEYS = (
    "specificity",
    "progression",
    "stress_patterning",
    "volume_fit",
    "intensity_fit",
    "balance_health",
    "feasibility",
)

# Program scoring weights by goal; each row sums to 1.0
GOAL_WEIGHTS = MappingProxyType({
    "strength": MappingProxyType({
        "specificity": 0.20,
        "progression": 0.20,
        "stress_patterning": 0.20,
        "volume_fit": 0.10,
        "intensity_fit": 0.20,
        "balance_health": 0.05,
        "feasibility": 0.05,
    }),
    "hypertrophy": MappingProxyType({
        "specificity": 0.20,
        "progression": 0.15,
        "stress_patterning": 0.15,
        "volume_fit": 0.30,
        "intensity_fit": 0.10,
        "balance_health": 0.10,
        "feasibility": 0.10,
    }),
    "athletic": MappingProxyType({
        "specificity": 0.20,
        "progression": 0.15,
        "stress_patterning": 0.25,
        "volume_fit": 0.10,
        "intensity_fit": 0.15,
        "balance_health": 0.10,
        "feasibility": 0.05,
    }),
    "fat_loss": MappingProxyType({
        "specificity": 0.15,
        "progression": 0.10,
        "stress_patterning": 0.20,
        "volume_fit": 0.20,
        "intensity_fit": 0.10,
        "balance_health": 0.15,
        "feasibility": 0.10,
    }),
    "endurance": MappingProxyType({
        "specificity": 0.20,
        "progression": 0.15,
        "stress_patterning": 0.20,
        "volume_fit": 0.15,
        "intensity_fit": 0.15,
        "balance_health": 0.05,
        "feasibility": 0.10,
    }),
    "power": MappingProxyType({
        "specificity": 0.20,
        "progression": 0.20,
        "stress_patterning": 0.20,
        "volume_fit": 0.10,
        "intensity_fit": 0.20,
        "balance_health": 0.05,
        "feasibility": 0.05,
    }),
})

# Recommended training minutes per week
RECOMMENDED_MINUTES_BAND = MappingProxyType({
    "strength": (150, 240),
    "hypertrophy": (180, 300),
    "athletic": (150, 300),
    "fat_loss": (180, 300),
    "endurance": (200, 360),
    "power": (150, 240),
})

# Effective sets per priority muscle per week
DEFAULT_SET_BAND_BY_GOAL = MappingProxyType({
    "strength": (6, 12),
    "hypertrophy": (10, 20),
    "athletic": (8, 14),
    "fat_loss": (10, 20),
    "endurance": (8, 16),
    "power": (6, 12),
})

PRIORITY_MUSCLE_COUNT = 6
TOP_MUSCLE_COUNT = 8

# Session-level calibration
SESSION_LOAD_DIVISOR = 22.0
SESSION_LOAD_CAP = 10.0
SECONDS_PER_REP = 3
DEFAULT_REST_SEC = 120
DEFAULT_INTENSITY_FACTOR = 0.75

# Week / block calibration
ROLE_Z_THRESHOLD = 0.5
SPACING_FLAG_PENALTY = 0.15
DEFAULT_COVERAGE_SCORE = 0.7
TREND_NOISE_FRACTION = 0.05
DELOAD_DROP_THRESHOLD = 0.30
DELOAD_BONUS = 0.05
RISING_VOLUME_BONUS = 0.03

# Monotony bucket loads per role
LOAD_FROM_ROLE = MappingProxyType({"High": 85, "Medium": 55, "Low": 25})

MUSCLE_GROUPS = MappingProxyType({
    "push": ("pecs", "front_delts", "triceps"),
    "pull": ("lats", "mid_back", "rear_delts", "biceps"),
    "quads": ("quads",),
    "hams": ("hamstrings", "glutes"),
    "upper": (
        "shoulders",
        "chest",
        "back",
        "biceps",
        "triceps",
        "forearms",
        "lats",
        "mid_back",
        "rear_delts",
        "front_delts",
        "pecs",
    ),
    "lower": ("quads", "hamstrings", "glutes", "adductors", "calves"),
})

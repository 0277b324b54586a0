"""
Configuration constants for the plan generator and overload allocator.

All adjustable parameters are centralized here for easy tuning.
Muscle volume guidelines live in the bundled model.yaml (see muscles.py);
movement definitions live in movements.yaml (see movements/).
"""

from typing import Final

# =============================================================================
# PLAN HORIZON
# =============================================================================

MIN_PLAN_WEEKS: Final[int] = 3  # Shortest plan generate_plan accepts
MAX_PLAN_WEEKS: Final[int] = 8  # Longest plan generate_plan accepts
DEFAULT_PLAN_WEEKS: Final[int] = 4

MIN_DAYS_PER_WEEK: Final[int] = 1
MAX_DAYS_PER_WEEK: Final[int] = 7

# =============================================================================
# SCHEDULING
# =============================================================================

# Weekday offsets (0 = first day of the plan week) used for each training
# frequency.  Training days are spread so rest days fall between sessions
# wherever the frequency allows it.
TRAINING_DAY_OFFSETS: Final[dict[int, tuple[int, ...]]] = {
    1: (0,),
    2: (0, 3),
    3: (0, 2, 4),
    4: (0, 1, 3, 4),
    5: (0, 1, 2, 4, 5),
    6: (0, 1, 2, 3, 4, 5),
    7: (0, 1, 2, 3, 4, 5, 6),
}

WEEKDAY_NAMES: Final[tuple[str, ...]] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

# Minimum training days each split needs to cover its day types
MIN_DAYS_FOR_SPLIT: Final[dict[str, int]] = {
    "full_body": 1,
    "upper_lower": 2,
    "push_pull_legs": 3,
}

# =============================================================================
# SESSION COMPOSITION
# =============================================================================

# Exercise slots per workout, by session duration category
EXERCISES_PER_SESSION: Final[dict[str, int]] = {
    "short": 4,   # ~45 min
    "medium": 6,  # ~60 min
    "long": 8,    # ~90 min
}

MAX_SETS_PER_EXERCISE: Final[int] = 5  # Hard cap for automated allocation
MIN_SETS_PER_EXERCISE: Final[int] = 1
MAX_MOVEMENT_USES_PER_WEEK: Final[int] = 2

# Exercises one muscle may take up in a single workout
MAX_EXERCISES_PER_MUSCLE_PER_SESSION: Final[dict[str, int]] = {
    "grow": 3,
    "maintain": 2,
}

# Movement patterns that count as two directions of the same motion.
# A muscle trained in one direction should see the other when possible.
VARIETY_PATTERN_PAIRS: Final[tuple[tuple[str, str], ...]] = (
    ("horizontal_push", "vertical_push"),
    ("horizontal_pull", "vertical_pull"),
)

# =============================================================================
# REP RANGES (goal → experience → (min, max))
# =============================================================================

REP_RANGES: Final[dict[str, dict[str, tuple[int, int]]]] = {
    "hypertrophy": {
        "beginner": (10, 15),
        "intermediate": (8, 12),
        "advanced": (6, 12),
    },
    "strength": {
        "beginner": (6, 10),
        "intermediate": (4, 6),
        "advanced": (3, 5),
    },
}

# =============================================================================
# VOLUME RAMP
# =============================================================================

# Sets added to a "grow" muscle's weekly target per week of the plan
RAMP_SETS_PER_WEEK: Final[dict[str, int]] = {
    "beginner": 1,
    "intermediate": 1,
    "advanced": 2,
}

# Week-1 offset above the low end of the goal range for "grow" muscles
GROW_START_OFFSET: Final[dict[str, int]] = {
    "beginner": 0,
    "intermediate": 2,
    "advanced": 4,
}

# =============================================================================
# LOAD PROGRESSION
# =============================================================================

# Smallest realistic weight jump per loading implement (kg)
WEIGHT_INCREMENT_KG: Final[dict[str, float]] = {
    "barbell": 2.5,
    "dumbbell": 2.0,
    "kettlebell": 4.0,
    "machine": 5.0,
    "cable": 2.5,
    "band": 0.0,
    "bodyweight": 0.0,
}

# Small muscles progress at this fraction of the implement increment
SMALL_MUSCLE_INCREMENT_FACTOR: Final[float] = 0.5

# Equipment always treated as available
IMPLICIT_EQUIPMENT: Final[frozenset[str]] = frozenset({"bodyweight"})

# =============================================================================
# FEEDBACK
# =============================================================================

# Joint pain area → muscles whose exercises load that joint
JOINT_PAIN_MUSCLES: Final[dict[str, tuple[str, ...]]] = {
    "knee": ("quads", "hamstrings", "calves"),
    "shoulder": ("chest", "shoulders", "back", "triceps"),
    "elbow": ("biceps", "triceps"),
}

# Weight steps applied next time, by the exercise's intensity rating.
# Unrated exercises and other ratings take one step once every target is met.
INTENSITY_WEIGHT_STEPS: Final[dict[str, int]] = {
    "too_easy": 2,
    "failed": -1,  # deload
}

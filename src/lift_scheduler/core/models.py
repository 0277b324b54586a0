"""
Data models for lift-scheduler.

All core dataclasses representing plan input, workouts, and plans.
A plan owns its weeks, a week owns its workouts, a workout owns its
exercise instances and those own their sets.  Movements are shared catalog
entries referenced by ``movement_id`` only; workouts point back at their
plan by ``plan_id`` and their position by (week_index, day_index).
"""

from dataclasses import dataclass, field
from typing import Literal, get_args

from .config import MAX_DAYS_PER_WEEK, MIN_DAYS_PER_WEEK
from .errors import ConfigurationError

MuscleGroup = Literal[
    "chest",
    "back",
    "quads",
    "hamstrings",
    "glutes",
    "calves",
    "biceps",
    "triceps",
    "shoulders",
    "abs",
]
MuscleSize = Literal["small", "large"]
MovementPattern = Literal[
    "horizontal_push",
    "vertical_push",
    "horizontal_pull",
    "vertical_pull",
    "squat",
    "hinge",
    "lunge",
    "knee_extension",
    "knee_flexion",
    "elbow_flexion",
    "elbow_extension",
    "abduction",
    "adduction",
    "calf_raise",
    "core",
    "rotation",
    "carry",
]
TrainingGoal = Literal["strength", "hypertrophy"]
MuscleGoal = Literal["grow", "maintain"]
SessionDuration = Literal["short", "medium", "long"]
SplitStyle = Literal["full_body", "upper_lower", "push_pull_legs"]
Experience = Literal["beginner", "intermediate", "advanced"]
DayType = Literal["push", "pull", "legs", "upper", "lower", "full_body", "rest"]
SetStatus = Literal["pending", "completed", "skipped"]
SessionFatigue = Literal["fresh", "normal", "tired", "completely_drained"]
ExerciseIntensity = Literal["too_easy", "moderate", "challenging", "failed"]
SetVolumeFeedback = Literal["too_little", "just_right", "too_much"]

# Runtime views of the Literal aliases above, in catalog order
MUSCLE_GROUPS: tuple[str, ...] = get_args(MuscleGroup)
MOVEMENT_PATTERNS: tuple[str, ...] = get_args(MovementPattern)
TRAINING_GOALS: tuple[str, ...] = get_args(TrainingGoal)
MUSCLE_GOALS: tuple[str, ...] = get_args(MuscleGoal)
SESSION_DURATIONS: tuple[str, ...] = get_args(SessionDuration)
SPLIT_STYLES: tuple[str, ...] = get_args(SplitStyle)
EXPERIENCE_LEVELS: tuple[str, ...] = get_args(Experience)
SET_STATUSES: tuple[str, ...] = get_args(SetStatus)
SESSION_FATIGUE_LEVELS: tuple[str, ...] = get_args(SessionFatigue)
EXERCISE_INTENSITIES: tuple[str, ...] = get_args(ExerciseIntensity)
SET_VOLUME_FEEDBACK: tuple[str, ...] = get_args(SetVolumeFeedback)


@dataclass(frozen=True)
class MuscleTrainingPreference:
    """Whether a muscle should be grown or just maintained."""

    muscle: MuscleGroup
    goal: MuscleGoal = "maintain"

    def __post_init__(self) -> None:
        if self.muscle not in MUSCLE_GROUPS:
            raise ValueError(f"Unknown muscle group '{self.muscle}'")
        if self.goal not in MUSCLE_GOALS:
            raise ValueError(f"muscle goal must be one of {MUSCLE_GOALS}")


@dataclass(frozen=True)
class PlanInput:
    """
    Questionnaire answers a plan is generated from.

    Never mutated once built.  Muscles without an explicit preference are
    maintained.  Bodyweight is always implicitly available, so ``equipment``
    only needs to list actual gear.
    """

    goal: TrainingGoal
    muscle_preferences: tuple[MuscleTrainingPreference, ...] = ()
    days_per_week: int = 3
    session_duration: SessionDuration = "medium"
    equipment: frozenset[str] = frozenset()
    split: SplitStyle = "full_body"
    experience: Experience = "beginner"

    def __post_init__(self) -> None:
        """Validate questionnaire answers."""
        if self.goal not in TRAINING_GOALS:
            raise ConfigurationError(f"goal must be one of {TRAINING_GOALS}")
        if not MIN_DAYS_PER_WEEK <= self.days_per_week <= MAX_DAYS_PER_WEEK:
            raise ConfigurationError(
                f"days_per_week must be between {MIN_DAYS_PER_WEEK} and {MAX_DAYS_PER_WEEK}"
            )
        if self.session_duration not in SESSION_DURATIONS:
            raise ConfigurationError(f"session_duration must be one of {SESSION_DURATIONS}")
        if self.split not in SPLIT_STYLES:
            raise ConfigurationError(f"split must be one of {SPLIT_STYLES}")
        if self.experience not in EXPERIENCE_LEVELS:
            raise ConfigurationError(f"experience must be one of {EXPERIENCE_LEVELS}")
        seen = [p.muscle for p in self.muscle_preferences]
        if len(seen) != len(set(seen)):
            raise ConfigurationError("muscle_preferences lists the same muscle twice")
        # Normalise containers so the frozen instance is hashable
        object.__setattr__(self, "muscle_preferences", tuple(self.muscle_preferences))
        object.__setattr__(self, "equipment", frozenset(self.equipment))

    def muscle_goal(self, muscle: str) -> MuscleGoal:
        """Return 'grow' or 'maintain' for a muscle (default maintain)."""
        for pref in self.muscle_preferences:
            if pref.muscle == muscle:
                return pref.goal
        return "maintain"

    @property
    def grow_muscles(self) -> tuple[str, ...]:
        return tuple(p.muscle for p in self.muscle_preferences if p.goal == "grow")


@dataclass
class ExerciseSet:
    """
    A single prescribed set.

    ``completed_reps`` is -1 until the set is logged.  ``status`` is the
    single source of truth for completion: a skipped set is distinct from a
    completed set of zero reps.
    """

    target_reps: int
    weight: float = 0.0
    completed_reps: int = -1
    status: SetStatus = "pending"

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.target_reps < 0:
            raise ValueError("target_reps must be non-negative")
        if self.weight < 0:
            raise ValueError("weight must be non-negative")
        if self.completed_reps < -1:
            raise ValueError("completed_reps must be -1 (untouched) or non-negative")
        if self.status not in SET_STATUSES:
            raise ValueError(f"status must be one of {SET_STATUSES}")

    @property
    def is_complete(self) -> bool:
        return self.status == "completed"

    @property
    def is_skipped(self) -> bool:
        return self.status == "skipped"

    def complete(self, reps: int, weight: float | None = None) -> None:
        """Log this set as performed."""
        if reps < 0:
            raise ValueError("reps must be non-negative")
        if weight is not None:
            if weight < 0:
                raise ValueError("weight must be non-negative")
            self.weight = weight
        self.completed_reps = reps
        self.status = "completed"

    def skip(self) -> None:
        """Log this set as skipped."""
        self.completed_reps = -1
        self.status = "skipped"


@dataclass
class ExerciseFeedback:
    """Per-exercise feedback given when a workout is finished."""

    intensity: ExerciseIntensity | None = None
    set_volume: SetVolumeFeedback | None = None

    def __post_init__(self) -> None:
        if self.intensity is not None and self.intensity not in EXERCISE_INTENSITIES:
            raise ValueError(f"intensity must be one of {EXERCISE_INTENSITIES}")
        if self.set_volume is not None and self.set_volume not in SET_VOLUME_FEEDBACK:
            raise ValueError(f"set_volume must be one of {SET_VOLUME_FEEDBACK}")


@dataclass
class WorkoutFeedback:
    """Session-level feedback given when a workout is finished."""

    sore_muscles: list[str] = field(default_factory=list)
    joint_pain_areas: list[str] = field(default_factory=list)
    session_fatigue: SessionFatigue | None = None

    def __post_init__(self) -> None:
        for muscle in self.sore_muscles:
            if muscle not in MUSCLE_GROUPS:
                raise ValueError(f"Unknown muscle group '{muscle}'")
        if self.session_fatigue is not None and self.session_fatigue not in SESSION_FATIGUE_LEVELS:
            raise ValueError(f"session_fatigue must be one of {SESSION_FATIGUE_LEVELS}")


@dataclass
class ExerciseInstance:
    """One movement prescribed inside a workout, with its own sets."""

    instance_id: str
    movement_id: str
    sets: list[ExerciseSet] = field(default_factory=list)
    note: str = ""
    joint_warning: bool = False
    feedback: ExerciseFeedback | None = None

    @property
    def set_count(self) -> int:
        return len(self.sets)

    @property
    def completed_sets(self) -> list[ExerciseSet]:
        return [s for s in self.sets if s.is_complete]


@dataclass
class Workout:
    """
    A single scheduled training day.

    ``plan_id`` is a navigation-only back-reference; the plan owns the
    workout through ``TrainingPlan.weeks``.
    """

    workout_id: str
    title: str
    day_type: DayType
    week_index: int  # 1-based
    day_index: int  # 0-based position within the week
    plan_id: str
    scheduled_date: str | None = None  # ISO format: YYYY-MM-DD
    is_complete: bool = False
    completed_at: str | None = None  # ISO timestamp of the completion transition
    exercises: list[ExerciseInstance] = field(default_factory=list)
    feedback: WorkoutFeedback | None = None

    def __post_init__(self) -> None:
        if self.week_index < 1:
            raise ValueError("week_index is 1-based")
        if self.day_index < 0:
            raise ValueError("day_index must be non-negative")

    @property
    def movement_ids(self) -> list[str]:
        return [ex.movement_id for ex in self.exercises]

    def find_exercise(self, instance_id: str) -> ExerciseInstance | None:
        for ex in self.exercises:
            if ex.instance_id == instance_id:
                return ex
        return None


@dataclass
class TrainingPlan:
    """
    A complete multi-week plan.

    ``weeks[k]`` is the list of workouts of week k+1 in schedule order.
    ``applied_completions`` holds ids of workouts whose completion has
    already been processed by the overload allocator.
    """

    plan_id: str
    name: str
    start_date: str  # ISO format: YYYY-MM-DD
    end_date: str
    days_per_week: int
    plan_input: PlanInput
    weeks: list[list[Workout]] = field(default_factory=list)
    is_completed: bool = False
    applied_completions: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def goal(self) -> TrainingGoal:
        return self.plan_input.goal

    @property
    def muscle_preferences(self) -> tuple[MuscleTrainingPreference, ...]:
        return self.plan_input.muscle_preferences

    @property
    def week_count(self) -> int:
        return len(self.weeks)

    def all_workouts(self) -> list[Workout]:
        """Every workout in schedule order."""
        return [w for week in self.weeks for w in week]

    def get_workout(self, workout_id: str) -> Workout:
        """
        Look up a workout by id.

        Raises:
            KeyError: If no workout has that id
        """
        for workout in self.all_workouts():
            if workout.workout_id == workout_id:
                return workout
        raise KeyError(workout_id)

    def workout_at(self, week_index: int, day_index: int) -> Workout | None:
        """Return the workout at a 1-based week / 0-based day position, if any."""
        if not 1 <= week_index <= len(self.weeks):
            return None
        week = self.weeks[week_index - 1]
        if not 0 <= day_index < len(week):
            return None
        return week[day_index]

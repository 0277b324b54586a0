"""
Plan progress and volume metrics.

Pure functions over a TrainingPlan; nothing here mutates the plan.
"""

from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass

from .models import TrainingPlan, Workout
from .movements import Movement, get_movement
from .volume import guideline_range


@dataclass
class PlanCompletionStats:
    total_workouts: int
    completed_workouts: int
    total_sets: int
    completed_sets: int
    skipped_sets: int

    @property
    def percent_complete(self) -> float:
        """Share of workouts completed, 0-100."""
        if self.total_workouts == 0:
            return 0.0
        return 100.0 * self.completed_workouts / self.total_workouts


@dataclass
class MuscleVolume:
    """Planned vs completed weekly sets for one muscle."""

    muscle: str
    planned_sets: int
    completed_sets: int
    range_low: int
    range_high: int

    @property
    def within_range(self) -> bool:
        return self.range_low <= self.planned_sets <= self.range_high


def completion_stats(plan: TrainingPlan) -> PlanCompletionStats:
    workouts = plan.all_workouts()
    sets = [s for w in workouts for ex in w.exercises for s in ex.sets]
    return PlanCompletionStats(
        total_workouts=len(workouts),
        completed_workouts=sum(1 for w in workouts if w.is_complete),
        total_sets=len(sets),
        completed_sets=sum(1 for s in sets if s.is_complete),
        skipped_sets=sum(1 for s in sets if s.is_skipped),
    )


def workout_sets_by_muscle(
    workout: Workout,
    movement_of: Callable[[str], Movement] = get_movement,
    completed_only: bool = False,
) -> Counter:
    """Sets per lead primary muscle in one workout."""
    counts: Counter = Counter()
    for ex in workout.exercises:
        muscle = movement_of(ex.movement_id).primary_muscle
        counts[muscle] += len(ex.completed_sets) if completed_only else ex.set_count
    return counts


def weekly_volume(
    plan: TrainingPlan,
    week_index: int,
    movement_of: Callable[[str], Movement] = get_movement,
) -> list[MuscleVolume]:
    """
    Planned and completed sets per muscle for one week.

    Only muscles the week trains are listed, in order of first appearance.

    Raises:
        IndexError: If the week does not exist
    """
    if not 1 <= week_index <= plan.week_count:
        raise IndexError(f"Plan has no week {week_index}")
    planned: Counter = Counter()
    completed: Counter = Counter()
    for workout in plan.weeks[week_index - 1]:
        planned.update(workout_sets_by_muscle(workout, movement_of))
        completed.update(workout_sets_by_muscle(workout, movement_of, completed_only=True))

    p = plan.plan_input
    rows = []
    for muscle in planned:
        lo, hi = guideline_range(muscle, p.goal, p.muscle_goal(muscle))
        rows.append(
            MuscleVolume(
                muscle=muscle,
                planned_sets=planned[muscle],
                completed_sets=completed[muscle],
                range_low=lo,
                range_high=hi,
            )
        )
    return rows


def next_workout(plan: TrainingPlan) -> Workout | None:
    """First workout in schedule order that is not complete."""
    for workout in plan.all_workouts():
        if not workout.is_complete:
            return workout
    return None


def movement_uses_per_week(plan: TrainingPlan) -> list[Counter]:
    """movement_id → occurrences, for each week."""
    return [Counter(mid for w in week for mid in w.movement_ids) for week in plan.weeks]

"""
Progressive overload allocator.

Runs once per workout completion and adjusts the next occurrence of the
same day type (same position in the following week).  Week 1 is never
touched because a next occurrence is always in a later week.

State machine:

    idle ──► evaluating ──► distributing ──► applied

- idle: workout not complete, or no next occurrence (plan ends); nothing
  changes.
- evaluating: the completion is recorded on the plan, then for every
  muscle the workout trained (by lead primary muscle):

      occurrence_target = ceil(target_next_week / workouts_training_it_next_week)
      deficit = min(occurrence_target - sets_completed_in_this_workout,
                    guideline_upper - sets_planned_next_week)

  Only positive deficits proceed; volume is never removed here.
- distributing: next-occurrence exercises led by the muscle, sorted
  ascending by set count (stable), receive the deficit round-robin with
  the per-exercise cap.  Leftover deficit is dropped.
- applied: weight/rep progression from the completed sets, scaled by
  the exercise's intensity rating (see adaptation.py).

A workout whose completion has been recorded is never processed again,
so calling the allocator twice cannot double-allocate.
"""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from .adaptation import AdditionGate, build_addition_gate, weight_step_multiplier
from .config import MAX_SETS_PER_EXERCISE, SMALL_MUSCLE_INCREMENT_FACTOR, WEIGHT_INCREMENT_KG
from .distribution import distribute_round_robin
from .models import ExerciseInstance, ExerciseSet, TrainingPlan, Workout, WorkoutFeedback
from .movements import Movement, get_movement
from .muscles import get_muscle
from .volume import guideline_range, rep_range, target_sets

logger = logging.getLogger(__name__)

AllocatorState = Literal["idle", "evaluating", "distributing", "applied"]


@dataclass
class MuscleAllocation:
    """Outcome of distributing one muscle's deficit."""

    muscle: str
    deficit: int
    added: dict[str, int] = field(default_factory=dict)  # instance_id → sets added
    dropped: int = 0


@dataclass
class Progression:
    """Weight/rep change applied to one next-occurrence exercise."""

    instance_id: str
    movement_id: str
    weight: float
    target_reps: int
    sets_added: int = 0
    reason: str = ""


@dataclass
class AllocationResult:
    workout_id: str
    state: AllocatorState = "idle"
    next_workout_id: str | None = None
    already_applied: bool = False
    allocations: list[MuscleAllocation] = field(default_factory=list)
    progressions: list[Progression] = field(default_factory=list)

    @property
    def sets_added(self) -> int:
        return sum(sum(a.added.values()) for a in self.allocations) + sum(
            p.sets_added for p in self.progressions
        )

    @property
    def dropped(self) -> int:
        return sum(a.dropped for a in self.allocations)


def find_next_occurrence(plan: TrainingPlan, workout: Workout) -> Workout | None:
    """
    The workout of the following week with the same day type.

    The same day position is preferred; otherwise the first workout of that
    week with a matching day type.  None when the plan ends.
    """
    candidate = plan.workout_at(workout.week_index + 1, workout.day_index)
    if candidate is not None and candidate.day_type == workout.day_type:
        return candidate
    if workout.week_index >= plan.week_count:
        return None
    for other in plan.weeks[workout.week_index]:
        if other.day_type == workout.day_type:
            return other
    return None


def weight_increment(movement: Movement) -> float:
    """Weight jump for a movement: implement increment, halved for small muscles."""
    base = WEIGHT_INCREMENT_KG.get(movement.loading_equipment, 0.0)
    if not get_muscle(movement.primary_muscle).is_large:
        base *= SMALL_MUSCLE_INCREMENT_FACTOR
    return base


class ProgressiveOverloadAllocator:
    """
    Applies completion-driven overload to a plan.

    Args:
        movement_of: Movement lookup by id (defaults to the registry)
    """

    def __init__(self, movement_of: Callable[[str], Movement] = get_movement):
        self.movement_of = movement_of

    def _lead(self, ex: ExerciseInstance) -> str:
        return self.movement_of(ex.movement_id).primary_muscle

    def on_workout_completed(self, plan: TrainingPlan, workout: Workout) -> AllocationResult:
        """
        Process one completion transition.

        Returns:
            AllocationResult whose ``state`` is the last state reached
        """
        result = AllocationResult(workout_id=workout.workout_id)

        if not workout.is_complete:
            logger.debug("Workout %s is not complete; nothing to allocate", workout.workout_id)
            return result
        if workout.workout_id in plan.applied_completions:
            logger.debug("Workout %s already processed", workout.workout_id)
            result.state = "applied"
            result.already_applied = True
            return result

        next_workout = find_next_occurrence(plan, workout)
        if next_workout is None:
            logger.info("No next occurrence for %s; plan ends", workout.workout_id)
            return result

        result.state = "evaluating"
        result.next_workout_id = next_workout.workout_id
        plan.applied_completions.append(workout.workout_id)

        gate = build_addition_gate(workout, next_workout, self.movement_of)
        deficits = self._deficits(plan, workout, next_workout)

        result.state = "distributing"
        for muscle, deficit in deficits.items():
            result.allocations.append(self._distribute(muscle, deficit, next_workout, gate))

        result.state = "applied"
        result.progressions = self._progress(plan, workout, next_workout, gate)
        logger.info(
            "Completed %s: %d sets added to %s, %d dropped",
            workout.workout_id,
            result.sets_added,
            next_workout.workout_id,
            result.dropped,
        )
        return result

    # ------------------------------------------------------------------
    # Evaluating
    # ------------------------------------------------------------------

    def _deficits(self, plan: TrainingPlan, workout: Workout, next_workout: Workout) -> dict[str, int]:
        p = plan.plan_input
        next_week = plan.weeks[next_workout.week_index - 1]
        deficits: dict[str, int] = {}

        muscles: list[str] = []
        for ex in workout.exercises:
            if self._lead(ex) not in muscles:
                muscles.append(self._lead(ex))

        for muscle in muscles:
            goal = p.muscle_goal(muscle)
            target = target_sets(muscle, next_workout.week_index, p.goal, p.experience, goal)
            frequency = sum(
                1 for w in next_week if any(self._lead(ex) == muscle for ex in w.exercises)
            )
            occurrence_target = math.ceil(target / max(1, frequency))
            completed = sum(
                len(ex.completed_sets) for ex in workout.exercises if self._lead(ex) == muscle
            )
            _, upper = guideline_range(muscle, p.goal, goal)
            planned = self._planned_week_sets(next_week, muscle)

            deficit = min(occurrence_target - completed, upper - planned)
            if deficit > 0:
                deficits[muscle] = deficit
            else:
                logger.debug("%s: no deficit (%d)", muscle, deficit)
        return deficits

    def _planned_week_sets(self, week: list[Workout], muscle: str) -> int:
        return sum(ex.set_count for w in week for ex in w.exercises if self._lead(ex) == muscle)

    # ------------------------------------------------------------------
    # Distributing
    # ------------------------------------------------------------------

    def _distribute(self, muscle: str, deficit: int, next_workout: Workout, gate: AdditionGate) -> MuscleAllocation:
        allocation = MuscleAllocation(muscle=muscle, deficit=deficit)
        candidates = [
            ex
            for ex in next_workout.exercises
            if self._lead(ex) == muscle and gate.allows(muscle, ex)
        ]
        if not candidates:
            logger.debug("%s: no candidate exercises in %s", muscle, next_workout.workout_id)
            allocation.dropped = deficit
            return allocation

        candidates.sort(key=lambda ex: ex.set_count)  # stable: ties keep workout order
        added = distribute_round_robin([ex.set_count for ex in candidates], deficit, MAX_SETS_PER_EXERCISE)
        for ex, extra in zip(candidates, added):
            if extra:
                _add_sets(ex, extra)
                allocation.added[ex.instance_id] = extra
        allocation.dropped = deficit - sum(added)
        if allocation.dropped:
            logger.debug("%s: %d sets dropped, every candidate at the cap", muscle, allocation.dropped)
        return allocation

    # ------------------------------------------------------------------
    # Applied
    # ------------------------------------------------------------------

    def _progress(
        self,
        plan: TrainingPlan,
        workout: Workout,
        next_workout: Workout,
        gate: AdditionGate,
    ) -> list[Progression]:
        p = plan.plan_input
        lo, hi = rep_range(p.goal, p.experience)
        next_week = plan.weeks[next_workout.week_index - 1]
        matched: set[str] = set()
        progressions: list[Progression] = []

        for ex in workout.exercises:
            target = next(
                (
                    n
                    for n in next_workout.exercises
                    if n.movement_id == ex.movement_id and n.instance_id not in matched
                ),
                None,
            )
            done = ex.completed_sets
            if target is None or not done:
                continue
            matched.add(target.instance_id)

            movement = self.movement_of(ex.movement_id)
            increment = weight_increment(movement)
            used_weight = max(s.weight for s in done)
            all_met = len(done) == len(ex.sets) and all(s.completed_reps >= s.target_reps for s in done)
            at_top = all_met and min(s.completed_reps for s in done) >= hi
            current_reps = max(s.target_reps for s in ex.sets)

            steps = weight_step_multiplier(ex)

            if steps < 0:
                weight, reps, sets_added = max(0.0, used_weight + steps * increment), current_reps, 0
                reason = "deload" if weight < used_weight else "hold"
            elif not all_met:
                weight, reps, sets_added, reason = used_weight, current_reps, 0, "hold"
            elif increment > 0 and (at_top or steps > 1):
                reps = lo if at_top else current_reps
                weight, sets_added, reason = used_weight + steps * increment, 0, "weight"
            elif at_top:
                # Unloaded movement at the top of the range: add a set instead
                weight, reps, sets_added, reason = used_weight, hi, 0, "set"
                muscle = movement.primary_muscle
                _, upper = guideline_range(muscle, p.goal, p.muscle_goal(muscle))
                if (
                    target.set_count < MAX_SETS_PER_EXERCISE
                    and self._planned_week_sets(next_week, muscle) < upper
                    and gate.allows(muscle, target)
                ):
                    sets_added = 1
            else:
                weight, reps, sets_added, reason = used_weight, min(current_reps + 1, hi), 0, "reps"

            if sets_added:
                _add_sets(target, sets_added)
            for s in target.sets:
                s.target_reps = reps
                if not movement.is_bodyweight:
                    s.weight = weight
            progressions.append(
                Progression(
                    instance_id=target.instance_id,
                    movement_id=target.movement_id,
                    weight=target.sets[0].weight,
                    target_reps=reps,
                    sets_added=sets_added,
                    reason=reason,
                )
            )
        return progressions


def _add_sets(ex: ExerciseInstance, count: int) -> None:
    template = ex.sets[-1]
    for _ in range(count):
        ex.sets.append(ExerciseSet(target_reps=template.target_reps, weight=template.weight))


def complete_workout(
    plan: TrainingPlan,
    workout_id: str,
    completed_at: str | None = None,
    feedback: WorkoutFeedback | None = None,
    fill_pending: bool = False,
    allocator: ProgressiveOverloadAllocator | None = None,
) -> AllocationResult:
    """
    Mark a workout complete and run the allocator for that transition.

    Args:
        plan: Plan owning the workout
        workout_id: Workout to complete
        completed_at: ISO timestamp (defaults to now)
        feedback: Optional session feedback
        fill_pending: Log still-pending sets as done at their target reps
        allocator: Allocator to use (defaults to a registry-backed one)

    Raises:
        KeyError: If the plan has no such workout
    """
    allocator = allocator or ProgressiveOverloadAllocator()
    workout = plan.get_workout(workout_id)
    if workout.is_complete:
        return allocator.on_workout_completed(plan, workout)

    if fill_pending:
        for ex in workout.exercises:
            for s in ex.sets:
                if s.status == "pending":
                    s.complete(s.target_reps)
    if feedback is not None:
        workout.feedback = feedback
    workout.is_complete = True
    workout.completed_at = completed_at or datetime.now().isoformat(timespec="seconds")
    plan.is_completed = all(w.is_complete for w in plan.all_workouts())
    return allocator.on_workout_completed(plan, workout)


def apply_pending_completions(
    plan: TrainingPlan,
    allocator: ProgressiveOverloadAllocator | None = None,
) -> list[AllocationResult]:
    """
    Run the allocator for every completed workout not yet processed.

    Completions are processed strictly in completion-time order, schedule
    order breaking ties.
    """
    allocator = allocator or ProgressiveOverloadAllocator()
    pending = [
        w
        for w in plan.all_workouts()
        if w.is_complete and w.workout_id not in plan.applied_completions
    ]
    pending.sort(key=lambda w: (w.completed_at or "", w.week_index, w.day_index))
    return [allocator.on_workout_completed(plan, w) for w in pending]

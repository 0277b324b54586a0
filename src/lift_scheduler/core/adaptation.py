"""
Feedback-driven adaptation rules.

Workout feedback never removes planned sets; it only withholds the
extra sets the overload allocator would otherwise add, and flags
exercises that load a joint the user reported pain in.

Rules:
- session fatigue "completely_drained": no sets are added to the next
  occurrence at all
- sore muscles that were trained again in the completed workout get no
  added sets
- joint pain: next-occurrence exercises whose primary muscles load the
  painful joint are flagged and get no added sets
- set_volume "too_much" on an exercise: its next occurrence gets no
  added sets
- intensity "failed" on an exercise: loaded movements drop one weight
  step, reps are held
- intensity "too_easy" on an exercise: loaded movements that met every
  target jump two weight steps
"""

from collections.abc import Callable
from dataclasses import dataclass, field

from .config import INTENSITY_WEIGHT_STEPS, JOINT_PAIN_MUSCLES
from .models import ExerciseInstance, Workout
from .movements import Movement


@dataclass
class AdditionGate:
    """Which muscles and exercises may receive added sets."""

    block_all: bool = False
    blocked_muscles: set[str] = field(default_factory=set)
    blocked_instances: set[str] = field(default_factory=set)

    def allows(self, muscle: str, instance: ExerciseInstance) -> bool:
        if self.block_all:
            return False
        if muscle in self.blocked_muscles:
            return False
        return instance.instance_id not in self.blocked_instances


def joint_affected_muscles(areas) -> set[str]:
    """Muscles whose exercises load any of the given joints."""
    affected: set[str] = set()
    for area in areas:
        affected.update(JOINT_PAIN_MUSCLES.get(area, ()))
    return affected


def build_addition_gate(
    completed: Workout,
    next_workout: Workout,
    movement_of: Callable[[str], Movement],
) -> AdditionGate:
    """
    Translate the completed workout's feedback into an AdditionGate.

    Flags ``joint_warning`` (and a note) on affected next-occurrence
    exercises as a side effect.
    """
    gate = AdditionGate()
    trained = {
        muscle
        for ex in completed.exercises
        for muscle in movement_of(ex.movement_id).primary_muscles
    }

    feedback = completed.feedback
    if feedback is not None:
        if feedback.session_fatigue == "completely_drained":
            gate.block_all = True
        gate.blocked_muscles.update(m for m in feedback.sore_muscles if m in trained)

        affected = joint_affected_muscles(feedback.joint_pain_areas)
        if affected:
            areas = ", ".join(sorted(feedback.joint_pain_areas))
            for ex in next_workout.exercises:
                if set(movement_of(ex.movement_id).primary_muscles) & affected:
                    ex.joint_warning = True
                    if not ex.note:
                        ex.note = f"Joint pain reported ({areas}); check before loading"
                    gate.blocked_instances.add(ex.instance_id)

    too_much = {
        ex.movement_id
        for ex in completed.exercises
        if ex.feedback is not None and ex.feedback.set_volume == "too_much"
    }
    for ex in next_workout.exercises:
        if ex.movement_id in too_much:
            gate.blocked_instances.add(ex.instance_id)

    return gate


def weight_step_multiplier(ex: ExerciseInstance) -> int:
    """
    Weight steps the exercise's intensity rating asks for next time.

    Returns:
        -1 after "failed", 2 after "too_easy", otherwise 1
    """
    if ex.feedback is None:
        return 1
    return INTENSITY_WEIGHT_STEPS.get(ex.feedback.intensity, 1)

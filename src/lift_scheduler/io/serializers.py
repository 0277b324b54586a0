"""
JSON serialization for plan data models.

Handles conversion between dataclasses and JSON-compatible dicts.  Every
field of a TrainingPlan round-trips; workouts keep their original order.
"""

import re
from datetime import datetime
from typing import Any

from ..core.models import (
    EXERCISE_INTENSITIES,
    MUSCLE_GROUPS,
    SESSION_FATIGUE_LEVELS,
    SET_STATUSES,
    SET_VOLUME_FEEDBACK,
    ExerciseFeedback,
    ExerciseInstance,
    ExerciseSet,
    MuscleTrainingPreference,
    PlanInput,
    TrainingPlan,
    Workout,
    WorkoutFeedback,
)

PLAN_FORMAT_VERSION = 1


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> str:
    """
    Validate and normalize date string to ISO format.

    Args:
        date_str: Date string to validate

    Returns:
        Normalized YYYY-MM-DD string

    Raises:
        ValidationError: If date format is invalid
    """
    try:
        dt = datetime.strptime(date_str, "%Y-%m-%d")
        return dt.strftime("%Y-%m-%d")
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def _require(data: dict[str, Any], *keys: str) -> None:
    missing = [k for k in keys if k not in data]
    if missing:
        raise ValidationError(f"Missing fields: {', '.join(missing)}")


# ---------------------------------------------------------------------------
# Sets and exercises
# ---------------------------------------------------------------------------


def exercise_set_to_dict(s: ExerciseSet) -> dict[str, Any]:
    return {
        "target_reps": s.target_reps,
        "weight": s.weight,
        "completed_reps": s.completed_reps,
        "status": s.status,
    }


def dict_to_exercise_set(data: dict[str, Any]) -> ExerciseSet:
    """
    Convert dict to ExerciseSet.

    Older files stored a boolean ``is_complete`` instead of ``status``; it
    maps to "completed" / "pending".  Skips cannot be recovered from that
    format and load as completed sets.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, "target_reps")
    status = data.get("status")
    if status is None:
        status = "completed" if data.get("is_complete") else "pending"
    if status not in SET_STATUSES:
        raise ValidationError(f"Invalid set status: {status}")

    validate_non_negative(data["target_reps"], "target_reps")
    validate_non_negative(data.get("weight", 0.0), "weight")
    completed_reps = int(data.get("completed_reps", -1))
    if completed_reps < -1:
        raise ValidationError(f"completed_reps must be >= -1, got {completed_reps}")

    return ExerciseSet(
        target_reps=int(data["target_reps"]),
        weight=float(data.get("weight", 0.0)),
        completed_reps=completed_reps,
        status=status,
    )


def exercise_feedback_to_dict(fb: ExerciseFeedback) -> dict[str, Any]:
    return {"intensity": fb.intensity, "set_volume": fb.set_volume}


def dict_to_exercise_feedback(data: dict[str, Any]) -> ExerciseFeedback:
    intensity = data.get("intensity")
    set_volume = data.get("set_volume")
    if intensity is not None and intensity not in EXERCISE_INTENSITIES:
        raise ValidationError(f"Invalid intensity: {intensity}")
    if set_volume is not None and set_volume not in SET_VOLUME_FEEDBACK:
        raise ValidationError(f"Invalid set volume feedback: {set_volume}")
    return ExerciseFeedback(intensity=intensity, set_volume=set_volume)


def exercise_instance_to_dict(ex: ExerciseInstance) -> dict[str, Any]:
    result: dict[str, Any] = {
        "instance_id": ex.instance_id,
        "movement_id": ex.movement_id,
        "sets": [exercise_set_to_dict(s) for s in ex.sets],
        "note": ex.note,
        "joint_warning": ex.joint_warning,
    }
    if ex.feedback is not None:
        result["feedback"] = exercise_feedback_to_dict(ex.feedback)
    return result


def dict_to_exercise_instance(data: dict[str, Any]) -> ExerciseInstance:
    _require(data, "instance_id", "movement_id", "sets")
    sets = [dict_to_exercise_set(s) for s in data["sets"]]
    if not sets:
        raise ValidationError(f"Exercise {data['instance_id']} has no sets")
    feedback = data.get("feedback")
    return ExerciseInstance(
        instance_id=str(data["instance_id"]),
        movement_id=str(data["movement_id"]),
        sets=sets,
        note=str(data.get("note", "")),
        joint_warning=bool(data.get("joint_warning", False)),
        feedback=dict_to_exercise_feedback(feedback) if feedback else None,
    )


# ---------------------------------------------------------------------------
# Workouts
# ---------------------------------------------------------------------------


def workout_feedback_to_dict(fb: WorkoutFeedback) -> dict[str, Any]:
    return {
        "sore_muscles": list(fb.sore_muscles),
        "joint_pain_areas": list(fb.joint_pain_areas),
        "session_fatigue": fb.session_fatigue,
    }


def dict_to_workout_feedback(data: dict[str, Any]) -> WorkoutFeedback:
    sore = list(data.get("sore_muscles", []))
    for muscle in sore:
        if muscle not in MUSCLE_GROUPS:
            raise ValidationError(f"Invalid muscle group: {muscle}")
    fatigue = data.get("session_fatigue")
    if fatigue is not None and fatigue not in SESSION_FATIGUE_LEVELS:
        raise ValidationError(f"Invalid session fatigue: {fatigue}")
    return WorkoutFeedback(
        sore_muscles=sore,
        joint_pain_areas=list(data.get("joint_pain_areas", [])),
        session_fatigue=fatigue,
    )


def workout_to_dict(workout: Workout) -> dict[str, Any]:
    result: dict[str, Any] = {
        "workout_id": workout.workout_id,
        "title": workout.title,
        "day_type": workout.day_type,
        "week_index": workout.week_index,
        "day_index": workout.day_index,
        "plan_id": workout.plan_id,
        "scheduled_date": workout.scheduled_date,
        "is_complete": workout.is_complete,
        "completed_at": workout.completed_at,
        "exercises": [exercise_instance_to_dict(ex) for ex in workout.exercises],
    }
    if workout.feedback is not None:
        result["feedback"] = workout_feedback_to_dict(workout.feedback)
    return result


def dict_to_workout(data: dict[str, Any]) -> Workout:
    """
    Convert dict to Workout.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, "workout_id", "title", "day_type", "week_index", "day_index", "plan_id")
    scheduled = data.get("scheduled_date")
    feedback = data.get("feedback")
    try:
        return Workout(
            workout_id=str(data["workout_id"]),
            title=str(data["title"]),
            day_type=data["day_type"],
            week_index=int(data["week_index"]),
            day_index=int(data["day_index"]),
            plan_id=str(data["plan_id"]),
            scheduled_date=validate_date(scheduled) if scheduled else None,
            is_complete=bool(data.get("is_complete", False)),
            completed_at=data.get("completed_at"),
            exercises=[dict_to_exercise_instance(ex) for ex in data.get("exercises", [])],
            feedback=dict_to_workout_feedback(feedback) if feedback else None,
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


# ---------------------------------------------------------------------------
# Plan input and plan
# ---------------------------------------------------------------------------


def plan_input_to_dict(plan_input: PlanInput) -> dict[str, Any]:
    return {
        "goal": plan_input.goal,
        "muscle_preferences": [
            {"muscle": p.muscle, "goal": p.goal} for p in plan_input.muscle_preferences
        ],
        "days_per_week": plan_input.days_per_week,
        "session_duration": plan_input.session_duration,
        "equipment": sorted(plan_input.equipment),
        "split": plan_input.split,
        "experience": plan_input.experience,
    }


def dict_to_plan_input(data: dict[str, Any]) -> PlanInput:
    """
    Convert dict to PlanInput.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, "goal", "days_per_week")
    try:
        return PlanInput(
            goal=data["goal"],
            muscle_preferences=tuple(
                MuscleTrainingPreference(muscle=p["muscle"], goal=p.get("goal", "maintain"))
                for p in data.get("muscle_preferences", [])
            ),
            days_per_week=int(data["days_per_week"]),
            session_duration=data.get("session_duration", "medium"),
            equipment=frozenset(data.get("equipment", [])),
            split=data.get("split", "full_body"),
            experience=data.get("experience", "beginner"),
        )
    except (KeyError, ValueError) as e:
        raise ValidationError(f"Invalid plan input: {e}") from e


def plan_to_dict(plan: TrainingPlan) -> dict[str, Any]:
    return {
        "format_version": PLAN_FORMAT_VERSION,
        "plan_id": plan.plan_id,
        "name": plan.name,
        "start_date": plan.start_date,
        "end_date": plan.end_date,
        "days_per_week": plan.days_per_week,
        "is_completed": plan.is_completed,
        "plan_input": plan_input_to_dict(plan.plan_input),
        "weeks": [[workout_to_dict(w) for w in week] for week in plan.weeks],
        "applied_completions": list(plan.applied_completions),
        "warnings": list(plan.warnings),
    }


def dict_to_plan(data: dict[str, Any]) -> TrainingPlan:
    """
    Convert dict to TrainingPlan.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, "plan_id", "name", "start_date", "end_date", "days_per_week", "plan_input", "weeks")
    version = data.get("format_version", PLAN_FORMAT_VERSION)
    if version > PLAN_FORMAT_VERSION:
        raise ValidationError(f"Plan file format {version} is newer than supported ({PLAN_FORMAT_VERSION})")

    weeks = [[dict_to_workout(w) for w in week] for week in data["weeks"]]
    for k, week in enumerate(weeks, 1):
        for w in week:
            if w.week_index != k:
                raise ValidationError(f"Workout {w.workout_id} is stored in week {k} but says week {w.week_index}")

    return TrainingPlan(
        plan_id=str(data["plan_id"]),
        name=str(data["name"]),
        start_date=validate_date(data["start_date"]),
        end_date=validate_date(data["end_date"]),
        days_per_week=int(data["days_per_week"]),
        plan_input=dict_to_plan_input(data["plan_input"]),
        weeks=weeks,
        is_completed=bool(data.get("is_completed", False)),
        applied_completions=list(data.get("applied_completions", [])),
        warnings=list(data.get("warnings", [])),
    )


# ---------------------------------------------------------------------------
# CLI input parsing
# ---------------------------------------------------------------------------

SetLogEntry = tuple[int, float | None] | None  # None = skipped


def parse_set_log(text: str) -> list[SetLogEntry]:
    """
    Parse a logged-sets string for one exercise.

    Comma-separated, one entry per set, in set order:
        reps@weight   e.g. "8@60"    reps done at this weight (kg)
        reps          e.g. "8"       reps done at the planned weight
        NxM[@weight]  e.g. "8x3@60"  N reps for M sets
        -  or  skip                  set skipped

    Returns:
        One entry per set: (reps, weight or None) or None for a skip

    Raises:
        ValidationError: If format is invalid
    """
    if not text or not text.strip():
        raise ValidationError("Sets string cannot be empty")

    entries: list[SetLogEntry] = []
    for part in (p.strip() for p in text.split(",")):
        if not part:
            continue
        if part.lower() in ("-", "skip", "x"):
            entries.append(None)
            continue
        m = re.fullmatch(r"(\d+)\s*(?:[xX×]\s*(\d+))?\s*(?:@\s*\+?(\d+(?:\.\d+)?)\s*(?:kg)?)?", part)
        if not m:
            raise ValidationError(
                f"Invalid set format: '{part}'.\n"
                "Use: reps@weight (e.g. 8@60), reps (e.g. 8), 8x3@60, or '-' to skip."
            )
        reps = int(m.group(1))
        count = int(m.group(2)) if m.group(2) else 1
        weight = float(m.group(3)) if m.group(3) else None
        if count < 1:
            raise ValidationError(f"Set count must be at least 1: '{part}'")
        entries.extend([(reps, weight)] * count)

    if not entries:
        raise ValidationError("No valid sets found in sets string")
    return entries

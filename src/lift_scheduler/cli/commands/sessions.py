"""Session commands: complete a workout and feed the overload allocator."""

from typing import Annotated, Optional

import typer

from ...core.allocator import complete_workout
from ...core.config import JOINT_PAIN_MUSCLES
from ...core.metrics import next_workout
from ...core.models import (
    EXERCISE_INTENSITIES,
    MUSCLE_GROUPS,
    SESSION_FATIGUE_LEVELS,
    SET_VOLUME_FEEDBACK,
    ExerciseFeedback,
    ExerciseInstance,
    Workout,
    WorkoutFeedback,
)
from ...io.serializers import ValidationError, parse_set_log
from .. import views
from ..app import PlanPathOption, app, get_store, load_plan_or_exit, split_values


def _resolve_exercise(workout: Workout, key: str) -> ExerciseInstance:
    """Find an exercise by 1-based number or instance id."""
    if key.isdigit():
        index = int(key) - 1
        if 0 <= index < len(workout.exercises):
            return workout.exercises[index]
    else:
        found = workout.find_exercise(key)
        if found is not None:
            return found
    raise ValidationError(f"No exercise '{key}' in {workout.workout_id}")


def _parse_assignments(values: list[str] | None, what: str) -> list[tuple[str, str]]:
    """Split 'N=value' pairs."""
    pairs = []
    for value in values or []:
        key, sep, rest = value.partition("=")
        if not sep or not key.strip() or not rest.strip():
            raise ValidationError(f"Invalid --{what} value '{value}'. Use N=value, where N is the exercise number")
        pairs.append((key.strip(), rest.strip()))
    return pairs


def apply_set_log(ex: ExerciseInstance, text: str) -> None:
    """
    Record logged sets on one exercise.

    Entries map to sets in order.  Sets beyond the log are skipped.

    Raises:
        ValidationError: If the log is malformed or has more entries than sets
    """
    entries = parse_set_log(text)
    if len(entries) > ex.set_count:
        raise ValidationError(
            f"{ex.instance_id}: {len(entries)} sets logged but only {ex.set_count} prescribed"
        )
    for s, entry in zip(ex.sets, entries):
        if entry is None:
            s.skip()
        else:
            reps, weight = entry
            s.complete(reps, weight)
    for s in ex.sets[len(entries):]:
        s.skip()


@app.command()
def complete(
    workout_id: Annotated[
        Optional[str],
        typer.Argument(help="Workout to complete (default: the next one)"),
    ] = None,
    log: Annotated[
        Optional[list[str]],
        typer.Option("--log", "-l", help="Logged sets, N=sets, e.g. 1=8@60,8@60,7@60 or 2=10x3,- (N = exercise number)"),
    ] = None,
    fatigue: Annotated[
        Optional[str],
        typer.Option("--fatigue", help="Session fatigue: fresh, normal, tired, completely_drained"),
    ] = None,
    sore: Annotated[
        Optional[list[str]],
        typer.Option("--sore", help="Sore muscles (repeat or comma-separate)"),
    ] = None,
    joint_pain: Annotated[
        Optional[list[str]],
        typer.Option("--joint-pain", help="Painful joints: knee, shoulder, elbow"),
    ] = None,
    intensity: Annotated[
        Optional[list[str]],
        typer.Option("--intensity", help="Per-exercise intensity, N=too_easy|moderate|challenging|failed"),
    ] = None,
    volume: Annotated[
        Optional[list[str]],
        typer.Option("--volume", help="Per-exercise set volume, N=too_little|just_right|too_much"),
    ] = None,
    no_fill: Annotated[
        bool,
        typer.Option("--no-fill", help="Do not log unlogged exercises as done at their targets"),
    ] = False,
    plan_path: PlanPathOption = None,
) -> None:
    """
    Mark a workout complete and adapt the next week's matching workout.

    Exercises without --log are recorded as done at their prescribed reps
    and weight unless --no-fill is given.
    """
    store = get_store(plan_path)
    plan = load_plan_or_exit(store)

    if workout_id is None:
        upcoming = next_workout(plan)
        if upcoming is None:
            views.print_info("Every workout in the plan is already complete.")
            raise typer.Exit(0)
        workout_id = upcoming.workout_id

    try:
        workout = plan.get_workout(workout_id)
    except KeyError:
        views.print_error(f"No workout '{workout_id}' in the plan")
        raise typer.Exit(1)

    if workout.is_complete:
        views.print_warning(f"{workout.workout_id} is already complete.")

    try:
        if fatigue is not None and fatigue not in SESSION_FATIGUE_LEVELS:
            raise ValidationError(f"fatigue must be one of: {', '.join(SESSION_FATIGUE_LEVELS)}")
        sore_muscles = split_values(sore)
        for muscle in sore_muscles:
            if muscle not in MUSCLE_GROUPS:
                raise ValidationError(f"Unknown muscle group '{muscle}'")
        pain_areas = split_values(joint_pain)
        for area in pain_areas:
            if area not in JOINT_PAIN_MUSCLES:
                raise ValidationError(f"joint pain area must be one of: {', '.join(JOINT_PAIN_MUSCLES)}")

        if not workout.is_complete:
            for key, text in _parse_assignments(log, "log"):
                apply_set_log(_resolve_exercise(workout, key), text)

            ratings: dict[str, ExerciseFeedback] = {}
            for key, value in _parse_assignments(intensity, "intensity"):
                if value not in EXERCISE_INTENSITIES:
                    raise ValidationError(f"intensity must be one of: {', '.join(EXERCISE_INTENSITIES)}")
                ex = _resolve_exercise(workout, key)
                ratings.setdefault(ex.instance_id, ExerciseFeedback()).intensity = value
            for key, value in _parse_assignments(volume, "volume"):
                if value not in SET_VOLUME_FEEDBACK:
                    raise ValidationError(f"volume must be one of: {', '.join(SET_VOLUME_FEEDBACK)}")
                ex = _resolve_exercise(workout, key)
                ratings.setdefault(ex.instance_id, ExerciseFeedback()).set_volume = value
            for instance_id, fb in ratings.items():
                workout.find_exercise(instance_id).feedback = fb
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    feedback = None
    if fatigue or sore_muscles or pain_areas:
        feedback = WorkoutFeedback(
            sore_muscles=sore_muscles,
            joint_pain_areas=pain_areas,
            session_fatigue=fatigue,
        )

    result = complete_workout(plan, workout.workout_id, feedback=feedback, fill_pending=not no_fill)
    store.save(plan)

    views.print_success(f"Completed {workout.title} (week {workout.week_index}, day {workout.day_index + 1})")
    views.print_allocation_result(result, plan)
    if plan.is_completed:
        views.console.print()
        views.print_success("Plan finished. Run 'init' to start a new one.")


@app.command()
def workout(
    workout_id: Annotated[
        Optional[str],
        typer.Argument(help="Workout to show (default: the next one)"),
    ] = None,
    plan_path: PlanPathOption = None,
) -> None:
    """
    Show one workout with its exercise numbers, for use with 'complete --log'.
    """
    store = get_store(plan_path)
    plan = load_plan_or_exit(store)

    if workout_id is None:
        target = next_workout(plan)
        if target is None:
            views.print_info("Every workout in the plan is already complete.")
            return
    else:
        try:
            target = plan.get_workout(workout_id)
        except KeyError:
            views.print_error(f"No workout '{workout_id}' in the plan")
            raise typer.Exit(1)

    views.console.print(views.format_workout_table(target))
    views.print_info(f"Workout id: {target.workout_id}")

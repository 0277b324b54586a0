"""Planning commands: init, show, and movements."""

from typing import Annotated, Optional

import typer

from ...core.config import DEFAULT_PLAN_WEEKS, MAX_PLAN_WEEKS, MIN_PLAN_WEEKS
from ...core.errors import ConfigurationError
from ...core.models import (
    EXPERIENCE_LEVELS,
    MUSCLE_GROUPS,
    SESSION_DURATIONS,
    SPLIT_STYLES,
    TRAINING_GOALS,
    MuscleTrainingPreference,
    PlanInput,
)
from ...core.movements import catalog_movements, movements_for_muscle
from ...core.planner import generate_plan
from ...io.serializers import ValidationError, validate_date
from .. import views
from ..app import PlanPathOption, app, get_store, load_plan_or_exit, split_values


def _check_choice(value: str, choices: tuple[str, ...], name: str) -> str:
    if value not in choices:
        views.print_error(f"{name} must be one of: {', '.join(choices)}")
        raise typer.Exit(1)
    return value


@app.command()
def init(
    goal: Annotated[
        str,
        typer.Option("--goal", "-g", help="Training goal: hypertrophy or strength"),
    ] = "hypertrophy",
    days: Annotated[
        int,
        typer.Option("--days", "-d", help="Training days per week (1-7)"),
    ] = 3,
    split: Annotated[
        str,
        typer.Option("--split", "-s", help="full_body, upper_lower or push_pull_legs"),
    ] = "full_body",
    duration: Annotated[
        str,
        typer.Option("--duration", help="Session length: short, medium or long"),
    ] = "medium",
    experience: Annotated[
        str,
        typer.Option("--experience", "-e", help="beginner, intermediate or advanced"),
    ] = "beginner",
    equipment: Annotated[
        Optional[list[str]],
        typer.Option("--equipment", help="Available equipment (repeat or comma-separate); bodyweight is implied"),
    ] = None,
    grow: Annotated[
        Optional[list[str]],
        typer.Option("--grow", help="Muscles to grow (repeat or comma-separate); others are maintained"),
    ] = None,
    weeks: Annotated[
        int,
        typer.Option("--weeks", "-w", help=f"Plan length in weeks ({MIN_PLAN_WEEKS}-{MAX_PLAN_WEEKS})"),
    ] = DEFAULT_PLAN_WEEKS,
    start: Annotated[
        Optional[str],
        typer.Option("--start", help="First day of week 1 (YYYY-MM-DD, default today)"),
    ] = None,
    name: Annotated[
        Optional[str],
        typer.Option("--name", help="Plan name"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing plan without asking"),
    ] = False,
    plan_path: PlanPathOption = None,
) -> None:
    """
    Generate a new multi-week plan from questionnaire answers.
    """
    store = get_store(plan_path)

    _check_choice(goal, TRAINING_GOALS, "goal")
    _check_choice(split, SPLIT_STYLES, "split")
    _check_choice(duration, SESSION_DURATIONS, "duration")
    _check_choice(experience, EXPERIENCE_LEVELS, "experience")

    grow_muscles = split_values(grow)
    for muscle in grow_muscles:
        _check_choice(muscle, MUSCLE_GROUPS, "muscle")

    if start is not None:
        try:
            validate_date(start)
        except ValidationError as e:
            views.print_error(str(e))
            raise typer.Exit(1)

    if store.exists() and not force:
        if not views.confirm_action(f"A plan already exists at {store.plan_path}. Replace it?"):
            views.print_info("Kept the existing plan.")
            raise typer.Exit(0)

    try:
        plan_input = PlanInput(
            goal=goal,
            muscle_preferences=tuple(
                MuscleTrainingPreference(m, "grow") for m in dict.fromkeys(grow_muscles)
            ),
            days_per_week=days,
            session_duration=duration,
            equipment=frozenset(split_values(equipment)),
            split=split,
            experience=experience,
        )
        plan = generate_plan(plan_input, weeks, start_date=start, name=name)
    except ConfigurationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store.save(plan)
    views.print_success(f"Generated '{plan.name}' ({plan.week_count} weeks, {plan.days_per_week} days/week)")
    views.print_info(f"Saved to {store.plan_path}")
    views.console.print()
    views.print_week(plan, 1)
    views.print_plan_warnings(plan)


@app.command()
def show(
    week: Annotated[
        Optional[int],
        typer.Option("--week", "-w", help="Week to show (default: the week of the next workout)"),
    ] = None,
    all_weeks: Annotated[
        bool,
        typer.Option("--all", "-a", help="Show every week"),
    ] = False,
    plan_path: PlanPathOption = None,
) -> None:
    """
    Show the plan, one week at a time.
    """
    store = get_store(plan_path)
    plan = load_plan_or_exit(store)

    if all_weeks:
        for k in range(1, plan.week_count + 1):
            views.print_week(plan, k)
            views.console.print()
        views.print_plan_warnings(plan)
        return

    if week is None:
        week = next((w.week_index for w in plan.all_workouts() if not w.is_complete), plan.week_count)
    if not 1 <= week <= plan.week_count:
        views.print_error(f"Week must be between 1 and {plan.week_count}")
        raise typer.Exit(1)

    views.print_week(plan, week)


@app.command()
def movements(
    muscle: Annotated[
        Optional[str],
        typer.Option("--muscle", "-m", help="Only movements whose primary muscles include this one"),
    ] = None,
    equipment: Annotated[
        Optional[list[str]],
        typer.Option("--equipment", help="Only movements doable with this equipment"),
    ] = None,
) -> None:
    """
    List the movement catalog.
    """
    if muscle is not None:
        _check_choice(muscle, MUSCLE_GROUPS, "muscle")
        items = movements_for_muscle(muscle)
    else:
        items = catalog_movements()

    if equipment:
        available = frozenset(split_values(equipment))
        items = [m for m in items if m.is_available(available)]

    if not items:
        views.print_warning("No movements match.")
        return
    views.console.print(views.format_movement_table(items))

"""
Plan generation.

generate_plan() is the single entry point that turns questionnaire
answers into a TrainingPlan:

    day types per week  → day_split.week_day_types
    week-1 movements    → WorkoutAssembler (selection, variety, anti-repetition)
    weekly set targets  → volume.weekly_targets
    weeks 2..N          → structural copies of week 1, refitted per week

Invalid input raises ConfigurationError before anything is built.
"""

import logging
import uuid
from datetime import date, datetime, timedelta

from .assembler import WorkoutAssembler
from .config import MAX_PLAN_WEEKS, MIN_PLAN_WEEKS
from .day_split import DAY_TYPE_TITLES, training_day_offsets, validate_split, week_day_types
from .errors import ConfigurationError
from .models import PlanInput, TrainingPlan
from .selector import MovementSelector

logger = logging.getLogger(__name__)


def validate_weeks(weeks: int) -> None:
    """
    Raises:
        ConfigurationError: If weeks is outside [MIN_PLAN_WEEKS, MAX_PLAN_WEEKS]
    """
    if not MIN_PLAN_WEEKS <= weeks <= MAX_PLAN_WEEKS:
        raise ConfigurationError(
            f"Plan length must be between {MIN_PLAN_WEEKS} and {MAX_PLAN_WEEKS} weeks, got {weeks}"
        )


def schedule_dates(start: date, week_index: int, days_per_week: int) -> list[str]:
    """ISO dates of one week's training days."""
    week_start = start + timedelta(days=7 * (week_index - 1))
    return [
        (week_start + timedelta(days=offset)).strftime("%Y-%m-%d")
        for offset in training_day_offsets(days_per_week)
    ]


def default_plan_name(plan_input: PlanInput, weeks: int) -> str:
    split = {
        "full_body": "Full Body",
        "upper_lower": f"{DAY_TYPE_TITLES['upper']} / {DAY_TYPE_TITLES['lower']}",
        "push_pull_legs": "Push / Pull / Legs",
    }[plan_input.split]
    return f"{weeks}-Week {plan_input.goal.title()} {split}"


def generate_plan(
    plan_input: PlanInput,
    weeks: int,
    start_date: str | None = None,
    name: str | None = None,
    plan_id: str | None = None,
    selector: MovementSelector | None = None,
) -> TrainingPlan:
    """
    Generate a complete multi-week plan.

    Args:
        plan_input: Questionnaire answers
        weeks: Plan length in weeks
        start_date: First day of week 1 (YYYY-MM-DD, defaults to today)
        name: Plan name (defaults to a description of goal and split)
        plan_id: Plan identity (defaults to a random id)
        selector: Movement selector (defaults to the full catalog)

    Returns:
        TrainingPlan with weeks × days_per_week workouts

    Raises:
        ConfigurationError: Invalid weeks or split/day-count combination
    """
    validate_weeks(weeks)
    validate_split(plan_input.split, plan_input.days_per_week)

    start = (
        datetime.strptime(start_date, "%Y-%m-%d").date() if start_date is not None else date.today()
    )
    plan_id = plan_id or uuid.uuid4().hex[:12]
    day_types = week_day_types(plan_input.split, plan_input.days_per_week)

    assembler = WorkoutAssembler(plan_input, selector=selector)
    layout = assembler.assemble_week_one(day_types)

    week_one = assembler.build_week(
        plan_id, 1, day_types, layout, schedule_dates(start, 1, plan_input.days_per_week)
    )
    plan_weeks = [week_one]
    for week_index in range(2, weeks + 1):
        dates = schedule_dates(start, week_index, plan_input.days_per_week)
        plan_weeks.append(assembler.copy_week(plan_id, week_index, week_one, dates))

    last = plan_weeks[-1][-1].scheduled_date or start.strftime("%Y-%m-%d")
    plan = TrainingPlan(
        plan_id=plan_id,
        name=name or default_plan_name(plan_input, weeks),
        start_date=start.strftime("%Y-%m-%d"),
        end_date=last,
        days_per_week=plan_input.days_per_week,
        plan_input=plan_input,
        weeks=plan_weeks,
        warnings=list(assembler.warnings),
    )
    logger.info(
        "Generated plan %s: %d weeks × %d days, %d warnings",
        plan.plan_id,
        weeks,
        plan_input.days_per_week,
        len(plan.warnings),
    )
    return plan

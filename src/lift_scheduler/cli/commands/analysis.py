"""Analysis commands: status."""

import json
from typing import Annotated, Optional

import typer

from ...core.metrics import completion_stats, next_workout, weekly_volume
from .. import views
from ..app import PlanPathOption, app, get_store, load_plan_or_exit


@app.command()
def status(
    week: Annotated[
        Optional[int],
        typer.Option("--week", "-w", help="Week for the volume table (default: current week)"),
    ] = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    plan_path: PlanPathOption = None,
) -> None:
    """
    Show plan progress and weekly sets per muscle against guidelines.
    """
    store = get_store(plan_path)
    plan = load_plan_or_exit(store)

    stats = completion_stats(plan)
    upcoming = next_workout(plan)
    if week is None:
        week = upcoming.week_index if upcoming is not None else plan.week_count
    if not 1 <= week <= plan.week_count:
        views.print_error(f"Week must be between 1 and {plan.week_count}")
        raise typer.Exit(1)
    volume = weekly_volume(plan, week)

    if json_out:
        print(json.dumps({
            "plan_id": plan.plan_id,
            "name": plan.name,
            "completed_workouts": stats.completed_workouts,
            "total_workouts": stats.total_workouts,
            "percent_complete": round(stats.percent_complete, 1),
            "completed_sets": stats.completed_sets,
            "skipped_sets": stats.skipped_sets,
            "next_workout": upcoming.workout_id if upcoming is not None else None,
            "is_completed": plan.is_completed,
            "week": week,
            "volume": [
                {
                    "muscle": row.muscle,
                    "planned_sets": row.planned_sets,
                    "completed_sets": row.completed_sets,
                    "range": [row.range_low, row.range_high],
                }
                for row in volume
            ],
        }, indent=2))
        return

    views.console.print(views.format_status_display(plan, stats, upcoming))
    views.console.print()
    views.console.print(views.format_volume_table(volume, week))

"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of plans, workouts, and progress.
"""

from datetime import datetime

from rich.console import Console
from rich.table import Table

from ..core.allocator import AllocationResult
from ..core.config import WEEKDAY_NAMES
from ..core.metrics import MuscleVolume, PlanCompletionStats
from ..core.models import ExerciseInstance, TrainingPlan, Workout
from ..core.movements import Movement, get_movement

console = Console()


def _fmt_sets(ex: ExerciseInstance) -> str:
    """Compact prescription, e.g. '3×10' or '10, 10, 9'."""
    reps = [s.target_reps for s in ex.sets]
    if len(set(reps)) == 1:
        return f"{len(reps)}×{reps[0]}"
    return ", ".join(str(r) for r in reps)


def _fmt_weight(ex: ExerciseInstance) -> str:
    movement = get_movement(ex.movement_id)
    if movement.is_bodyweight:
        return "BW"
    weight = ex.sets[0].weight
    return f"{weight:g} kg" if weight > 0 else "-"


def _fmt_logged(ex: ExerciseInstance) -> str:
    parts = []
    for s in ex.sets:
        if s.status == "completed":
            parts.append(str(s.completed_reps))
        elif s.status == "skipped":
            parts.append("skip")
    return ", ".join(parts) if parts else ""


def _workout_status(workout: Workout) -> str:
    return "[green]done[/green]" if workout.is_complete else "[dim]planned[/dim]"


def _weekday(date_str: str | None) -> str:
    if not date_str:
        return ""
    return WEEKDAY_NAMES[datetime.strptime(date_str, "%Y-%m-%d").weekday()]


def format_week_table(plan: TrainingPlan, week_index: int) -> Table:
    """
    Create a Rich table for one week of the plan.

    Args:
        plan: Plan to display
        week_index: 1-based week

    Returns:
        Rich Table object
    """
    table = Table(title=f"{plan.name}: week {week_index} of {plan.week_count}")

    table.add_column("Day", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Workout", style="magenta")
    table.add_column("Exercise")
    table.add_column("Sets", justify="right", style="bold")
    table.add_column("Load", justify="right")
    table.add_column("Logged", justify="right")
    table.add_column("Status")

    for workout in plan.weeks[week_index - 1]:
        first = True
        for ex in workout.exercises:
            name = get_movement(ex.movement_id).name
            if ex.joint_warning:
                name = f"{name} [yellow](!)[/yellow]"
            table.add_row(
                str(workout.day_index + 1) if first else "",
                f"{_weekday(workout.scheduled_date)} {workout.scheduled_date or ''}" if first else "",
                workout.title if first else "",
                name,
                _fmt_sets(ex),
                _fmt_weight(ex),
                _fmt_logged(ex),
                _workout_status(workout) if first else "",
            )
            first = False
        if not workout.exercises:
            table.add_row(
                str(workout.day_index + 1),
                workout.scheduled_date or "",
                workout.title,
                "[dim]no exercises[/dim]",
                "",
                "",
                "",
                _workout_status(workout),
            )
        table.add_section()

    return table


def print_week(plan: TrainingPlan, week_index: int) -> None:
    console.print(format_week_table(plan, week_index))


def format_workout_table(workout: Workout) -> Table:
    """Exercises of one workout with their numbers, as used by 'complete --log'."""
    table = Table(title=f"{workout.title}: week {workout.week_index}, day {workout.day_index + 1}")
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Exercise")
    table.add_column("Sets", justify="right", style="bold")
    table.add_column("Load", justify="right")
    table.add_column("Note", style="yellow")
    for i, ex in enumerate(workout.exercises, 1):
        table.add_row(
            str(i),
            get_movement(ex.movement_id).name,
            _fmt_sets(ex),
            _fmt_weight(ex),
            ex.note,
        )
    return table


def print_plan_warnings(plan: TrainingPlan) -> None:
    if not plan.warnings:
        return
    console.print()
    console.print(f"[yellow]{len(plan.warnings)} planning note(s):[/yellow]")
    for message in plan.warnings:
        console.print(f"  [yellow]-[/yellow] {message}")


def print_allocation_result(result: AllocationResult, plan: TrainingPlan) -> None:
    """Describe what completing a workout changed in the following week."""
    if result.already_applied:
        print_info("This workout's completion was already applied.")
        return
    if result.next_workout_id is None:
        print_info("No later workout of this type; the plan is unchanged.")
        return

    nxt = plan.get_workout(result.next_workout_id)
    console.print()
    console.print(
        f"[bold]Adjusted {nxt.title}, week {nxt.week_index}[/bold] "
        f"({result.sets_added} set(s) added"
        + (f", {result.dropped} over the cap dropped" if result.dropped else "")
        + ")"
    )
    for p in result.progressions:
        name = get_movement(p.movement_id).name
        change = {
            "weight": f"weight → {p.weight:g} kg, reps → {p.target_reps}",
            "reps": f"reps → {p.target_reps}",
            "set": f"reps stay at {p.target_reps}" + (", +1 set" if p.sets_added else ""),
            "deload": f"weight down to {p.weight:g} kg",
            "hold": "held",
        }.get(p.reason, p.reason)
        console.print(f"  {name}: {change}")


def format_status_display(plan: TrainingPlan, stats: PlanCompletionStats, upcoming: Workout | None) -> str:
    """
    Format plan progress as text block.

    Returns:
        Formatted string
    """
    p = plan.plan_input
    lines = [
        f"{plan.name}",
        f"- Dates: {plan.start_date} → {plan.end_date}",
        f"- Goal: {p.goal}, {p.experience}, {p.days_per_week} days/week ({p.split})",
        f"- Workouts: {stats.completed_workouts}/{stats.total_workouts} "
        f"({stats.percent_complete:.0f}% complete)",
        f"- Sets logged: {stats.completed_sets}/{stats.total_sets}"
        + (f" ({stats.skipped_sets} skipped)" if stats.skipped_sets else ""),
    ]
    if upcoming is not None:
        lines.append(
            f"- Next: {upcoming.title}, week {upcoming.week_index} day {upcoming.day_index + 1}"
            + (f" ({upcoming.scheduled_date})" if upcoming.scheduled_date else "")
        )
    elif plan.is_completed:
        lines.append("- Plan completed")
    return "\n".join(lines)


def format_volume_table(rows: list[MuscleVolume], week_index: int) -> Table:
    table = Table(title=f"Weekly sets, week {week_index}")
    table.add_column("Muscle", style="cyan")
    table.add_column("Planned", justify="right", style="bold")
    table.add_column("Done", justify="right")
    table.add_column("Guideline", justify="right", style="dim")
    for row in rows:
        planned = str(row.planned_sets)
        if not row.within_range:
            planned = f"[yellow]{planned}[/yellow]"
        table.add_row(
            row.muscle,
            planned,
            str(row.completed_sets),
            f"{row.range_low}-{row.range_high}",
        )
    return table


def format_movement_table(movements: list[Movement]) -> Table:
    table = Table(title="Movements")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Primary", style="cyan")
    table.add_column("Pattern", style="magenta")
    table.add_column("Equipment")
    table.add_column("Type")
    for m in movements:
        table.add_row(
            m.movement_id,
            m.name,
            ", ".join(m.primary_muscles),
            m.pattern,
            ", ".join(m.equipment),
            ("compound" if m.is_compound else "isolation") + (" *" if m.is_technical else ""),
        )
    return table


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")

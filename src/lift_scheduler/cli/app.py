"""Shared Typer app object, shared option types, and store utility."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.models import TrainingPlan
from ..io.plan_store import PlanStore, get_default_plan_path
from ..io.serializers import ValidationError
from . import views
from .logging_setup import setup_logging

# Shared --plan-path option type used across all commands
PlanPathOption = Annotated[
    Optional[Path],
    typer.Option("--plan-path", "-p", help="Path to plan JSON file (default ~/.lift-scheduler/plan.json)"),
]

app = typer.Typer(
    name="lift-scheduler",
    help="Multi-week resistance-training planner with per-workout progressive overload.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show planner diagnostics"),
    ] = False,
) -> None:
    """
    Generate a training plan, log workouts, and let later weeks adapt.
    """
    setup_logging(logging.INFO if verbose else logging.WARNING)


def get_store(plan_path: Path | None) -> PlanStore:
    """Get plan store from path or default location."""
    if plan_path is None:
        plan_path = get_default_plan_path()
    return PlanStore(plan_path)


def load_plan_or_exit(store: PlanStore) -> TrainingPlan:
    """Load the stored plan, printing an error and exiting with code 1 on failure."""
    if not store.exists():
        views.print_error(f"Plan file not found: {store.plan_path}")
        views.print_info("Run 'init' first to generate a plan.")
        raise typer.Exit(1)
    try:
        return store.load()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def split_values(values: list[str] | None) -> list[str]:
    """Flatten repeated options that may also be comma-separated."""
    items: list[str] = []
    for value in values or []:
        items.extend(v.strip() for v in value.split(",") if v.strip())
    return items

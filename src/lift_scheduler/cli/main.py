"""
CLI entry point using Typer.

Provides commands for plan management:
- init: Generate a plan from questionnaire answers
- show: Display a week of the plan
- workout: Display one workout with exercise numbers
- complete: Log a workout and adapt the following week
- status: Progress and weekly volume per muscle
- movements: Browse the movement catalog
"""

from .app import app

# Register commands by importing their modules
from .commands import analysis, planning, sessions  # noqa: F401


if __name__ == "__main__":
    app()

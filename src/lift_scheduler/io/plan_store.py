"""
JSON file storage for a training plan.

One plan per file.  Writes go through a temporary file in the same
directory and are renamed into place, so an interrupted save never leaves
a truncated plan behind.
"""

import json
import os
from pathlib import Path

from ..core.engine.config_loader import get_user_config_dir
from ..core.models import TrainingPlan
from .serializers import ValidationError, dict_to_plan, plan_to_dict


class PlanStore:
    """
    Manages a single plan stored as JSON.

    The file holds the output of plan_to_dict(); see serializers.py.
    """

    def __init__(self, plan_path: str | Path):
        """
        Initialize the plan store.

        Args:
            plan_path: Path to the JSON plan file
        """
        self.plan_path = Path(plan_path)

    def exists(self) -> bool:
        """Check if the plan file exists."""
        return self.plan_path.exists()

    def load(self) -> TrainingPlan:
        """
        Load the plan.

        Returns:
            The stored TrainingPlan

        Raises:
            FileNotFoundError: If the plan file doesn't exist
            ValidationError: If the file is not a valid plan
        """
        if not self.plan_path.exists():
            raise FileNotFoundError(f"Plan file not found: {self.plan_path}")

        with open(self.plan_path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValidationError(f"Plan file is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValidationError("Plan file must contain a JSON object")
        return dict_to_plan(data)

    def save(self, plan: TrainingPlan) -> None:
        """
        Write the plan, replacing any previous one.

        Creates parent directories if needed.
        """
        self.plan_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.plan_path.with_suffix(self.plan_path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(plan_to_dict(plan), f, indent=2)
            f.write("\n")
        os.replace(tmp_path, self.plan_path)

    def delete(self) -> bool:
        """Remove the plan file; returns False if there was none."""
        if not self.plan_path.exists():
            return False
        self.plan_path.unlink()
        return True


def get_default_plan_path() -> Path:
    """
    Get default plan file path.

    Returns:
        Path to ~/.lift-scheduler/plan.json
    """
    return get_user_config_dir() / "plan.json"

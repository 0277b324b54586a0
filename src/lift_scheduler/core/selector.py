"""
Movement selection.

Picks one catalog movement for a target muscle under the constraints of
the workout being assembled.  ``select`` returns None when nothing fits;
``require`` raises SelectionUnsatisfiable for callers that want to handle
the miss as an exception.

Ordering of valid candidates:
  1. movements whose lead primary muscle is the target
  2. compound before isolation (unless a kind is requested)
  3. variation group not yet used this week
  4. catalog order
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Literal

from .config import MAX_MOVEMENT_USES_PER_WEEK
from .errors import SelectionUnsatisfiable
from .models import Experience
from .movements import Movement, catalog_movements

MovementKind = Literal["compound", "isolation"]


@dataclass
class SelectionConstraints:
    """
    Everything the selector needs to know about the current week and day.

    Attributes:
        available_equipment: Equipment the user has (bodyweight implied)
        experience: Beginners never get technical movements
        week_usage: movement_id → times already used this week
        previous_day_movements: Movement ids of the preceding training day
        exclude: Movement ids already in the workout being built
        kind: Restrict to compound or isolation movements
        pattern: Restrict to one movement pattern
        used_variation_groups: Variation groups already used this week
        avoid_muscles: Reject movements with any of these primary muscles
        saturated_muscles: Reject movements whose lead muscle already has
            all the exercises it may take
    """

    available_equipment: frozenset[str]
    experience: Experience
    week_usage: Counter = field(default_factory=Counter)
    previous_day_movements: frozenset[str] = frozenset()
    exclude: frozenset[str] = frozenset()
    kind: MovementKind | None = None
    pattern: str | None = None
    used_variation_groups: frozenset[str] = frozenset()
    avoid_muscles: frozenset[str] = frozenset()
    saturated_muscles: frozenset[str] = frozenset()


class MovementSelector:
    """Selects movements from a catalog (defaults to the registry)."""

    def __init__(self, movements: list[Movement] | None = None):
        self.movements = sorted(
            movements if movements is not None else catalog_movements(),
            key=lambda m: m.catalog_index,
        )

    def candidates(self, muscle: str, constraints: SelectionConstraints) -> list[Movement]:
        """All movements valid for ``muscle``, best first."""
        valid = [m for m in self.movements if self._is_valid(m, muscle, constraints)]
        return sorted(valid, key=lambda m: self._rank(m, muscle, constraints))

    def select(self, muscle: str, constraints: SelectionConstraints) -> Movement | None:
        """Best valid movement for ``muscle``, or None if nothing qualifies."""
        ranked = self.candidates(muscle, constraints)
        return ranked[0] if ranked else None

    def require(self, muscle: str, constraints: SelectionConstraints) -> Movement:
        """
        Like select(), but a miss is an exception.

        Raises:
            SelectionUnsatisfiable: If no movement qualifies
        """
        movement = self.select(muscle, constraints)
        if movement is None:
            raise SelectionUnsatisfiable(f"No available movement for {muscle}", muscle=muscle)
        return movement

    def has_pattern(self, muscle: str, pattern: str, available_equipment: frozenset[str], experience: Experience) -> bool:
        """True if the catalog offers ``pattern`` for ``muscle`` as lead muscle at all."""
        return any(
            m.primary_muscle == muscle
            and m.pattern == pattern
            and m.is_available(available_equipment)
            and not (experience == "beginner" and m.is_technical)
            for m in self.movements
        )

    @staticmethod
    def _is_valid(movement: Movement, muscle: str, c: SelectionConstraints) -> bool:
        if not movement.trains(muscle):
            return False
        if not movement.is_available(c.available_equipment):
            return False
        if c.week_usage.get(movement.movement_id, 0) >= MAX_MOVEMENT_USES_PER_WEEK:
            return False
        if movement.movement_id in c.previous_day_movements:
            return False
        if movement.movement_id in c.exclude:
            return False
        if c.experience == "beginner" and movement.is_technical:
            return False
        if c.kind == "compound" and not movement.is_compound:
            return False
        if c.kind == "isolation" and movement.is_compound:
            return False
        if c.pattern is not None and movement.pattern != c.pattern:
            return False
        if c.avoid_muscles and set(movement.primary_muscles) & c.avoid_muscles:
            return False
        if movement.primary_muscle in c.saturated_muscles:
            return False
        return True

    @staticmethod
    def _rank(movement: Movement, muscle: str, c: SelectionConstraints) -> tuple:
        group_used = (
            movement.variation_group is not None
            and movement.variation_group in c.used_variation_groups
        )
        return (
            0 if movement.primary_muscle == muscle else 1,
            0 if movement.is_compound else 1,
            1 if group_used else 0,
            movement.catalog_index,
        )

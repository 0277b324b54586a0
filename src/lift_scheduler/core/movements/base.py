"""
Movement definition.

A Movement is an immutable catalog entry.  Workouts never hold a Movement
object; they store its ``movement_id`` and resolve it through the registry.
"""

from dataclasses import dataclass

from ..config import IMPLICIT_EQUIPMENT
from ..models import MOVEMENT_PATTERNS, MUSCLE_GROUPS


@dataclass(frozen=True)
class Movement:
    """
    One trainable movement.

    Attributes:
        movement_id: Stable identifier, e.g. "barbell_bench_press"
        name: Display name
        primary_muscles: Muscles the movement mainly trains; the first entry
            is the muscle its sets are counted against
        secondary_muscles: Muscles trained as synergists
        equipment: Everything required to perform it; the first entry is the
            implement that carries the load ("bodyweight" when unloaded)
        pattern: MovementPattern tag used for variety enforcement
        is_compound: Multi-joint movement
        is_technical: Skill-heavy lift beginners should not be given
        variation_group: Interchangeable movements share a group
        catalog_index: Position in the catalog, the final tie-breaker
    """

    movement_id: str
    name: str
    primary_muscles: tuple[str, ...]
    secondary_muscles: tuple[str, ...]
    equipment: tuple[str, ...]
    pattern: str
    is_compound: bool
    is_technical: bool = False
    variation_group: str | None = None
    catalog_index: int = 0

    def __post_init__(self) -> None:
        if not self.primary_muscles:
            raise ValueError(f"{self.movement_id}: at least one primary muscle is required")
        for muscle in (*self.primary_muscles, *self.secondary_muscles):
            if muscle not in MUSCLE_GROUPS:
                raise ValueError(f"{self.movement_id}: unknown muscle group '{muscle}'")
        if self.pattern not in MOVEMENT_PATTERNS:
            raise ValueError(f"{self.movement_id}: unknown movement pattern '{self.pattern}'")
        if not self.equipment:
            raise ValueError(f"{self.movement_id}: equipment must list at least one item")

    @property
    def primary_muscle(self) -> str:
        """The muscle this movement's sets count toward."""
        return self.primary_muscles[0]

    @property
    def loading_equipment(self) -> str:
        return self.equipment[0]

    @property
    def is_bodyweight(self) -> bool:
        return self.loading_equipment == "bodyweight"

    def trains(self, muscle: str) -> bool:
        """True if ``muscle`` is one of the primary muscles."""
        return muscle in self.primary_muscles

    def is_available(self, available_equipment: frozenset[str]) -> bool:
        """True if every required item is available (bodyweight always is)."""
        required = set(self.equipment) - IMPLICIT_EQUIPMENT
        return required <= available_equipment

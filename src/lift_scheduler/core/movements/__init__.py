"""
Movement catalog for lift-scheduler.

Each movement is an immutable Movement entry loaded from movements.yaml
and shared by every plan.
"""

from .base import Movement
from .registry import MOVEMENT_REGISTRY, catalog_movements, get_movement, movements_for_muscle

__all__ = [
    "Movement",
    "MOVEMENT_REGISTRY",
    "catalog_movements",
    "get_movement",
    "movements_for_muscle",
]

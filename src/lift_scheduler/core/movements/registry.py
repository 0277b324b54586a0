"""
Movement registry.

All catalog movements are loaded here once at import time and exposed as
a read-only mapping keyed by movement id.  Workouts reference movements by
id; use get_movement() to resolve one.

If the catalog cannot be loaded or ends up empty, a RuntimeError is
raised; the application cannot plan without movements.

User overrides: ``~/.lift-scheduler/movements.yaml``.
"""

from types import MappingProxyType

from .base import Movement


def _build_registry() -> MappingProxyType:
    from .loader import load_movements_from_yaml

    loaded = load_movements_from_yaml()
    if not loaded:
        raise RuntimeError(
            "lift-scheduler: no movements could be loaded from YAML. "
            "Check that src/lift_scheduler/movements.yaml is present and valid."
        )
    return MappingProxyType(loaded)


MOVEMENT_REGISTRY: "MappingProxyType[str, Movement]" = _build_registry()


def get_movement(movement_id: str) -> Movement:
    """
    Return the Movement for the given movement_id.

    Args:
        movement_id: Catalog key, e.g. "barbell_bench_press"

    Returns:
        Movement for the requested id

    Raises:
        ValueError: If movement_id is not in the registry
    """
    if movement_id not in MOVEMENT_REGISTRY:
        raise ValueError(f"Unknown movement '{movement_id}'")
    return MOVEMENT_REGISTRY[movement_id]


def catalog_movements() -> list[Movement]:
    """All movements in catalog order."""
    return sorted(MOVEMENT_REGISTRY.values(), key=lambda m: m.catalog_index)


def movements_for_muscle(muscle: str) -> list[Movement]:
    """Movements listing ``muscle`` as a primary muscle, in catalog order."""
    return [m for m in catalog_movements() if m.trains(muscle)]

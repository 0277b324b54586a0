"""
YAML → Movement loader.

Loads the bundled ``src/lift_scheduler/movements.yaml`` catalog.  Each
top-level key is a movement id mapping to its definition.

User overrides: ``~/.lift-scheduler/movements.yaml`` with the same layout.
An entry whose id matches a bundled movement is deep-merged over it, so
only changed keys need to be listed.  Unknown ids are added as new
movements after the bundled ones.

Usage (internal, called by registry.py):
    from .loader import load_movements_from_yaml
    movements = load_movements_from_yaml()
"""

from __future__ import annotations

import warnings

from ..engine.config_loader import (
    deep_merge,
    get_bundled_data_path,
    get_user_yaml_path,
    load_user_override,
    load_yaml_file,
)
from .base import Movement

CATALOG_FILENAME = "movements.yaml"

_REQUIRED_MOVEMENT_FIELDS: frozenset[str] = frozenset(
    {
        "name",
        "primary_muscles",
        "equipment",
        "pattern",
        "is_compound",
    }
)


def movement_from_dict(movement_id: str, d: dict, catalog_index: int = 0) -> Movement:
    """Convert a raw dict (from YAML) to a Movement.

    Raises ValueError if any required field is absent or invalid.
    """
    missing = _REQUIRED_MOVEMENT_FIELDS - set(d)
    if missing:
        raise ValueError(f"Movement missing fields: {sorted(missing)}")

    group = d.get("variation_group")
    return Movement(
        movement_id=str(movement_id),
        name=str(d["name"]),
        primary_muscles=tuple(str(m) for m in d["primary_muscles"]),
        secondary_muscles=tuple(str(m) for m in d.get("secondary_muscles") or ()),
        equipment=tuple(str(e) for e in d["equipment"]),
        pattern=str(d["pattern"]),
        is_compound=bool(d["is_compound"]),
        is_technical=bool(d.get("is_technical", False)),
        variation_group=str(group) if group else None,
        catalog_index=catalog_index,
    )


def load_movements_from_yaml() -> dict[str, Movement]:
    """Return {movement_id: Movement} in catalog order.

    Bundled entries come first (in file order), then user-only entries.
    Invalid entries are skipped with a warning rather than failing the
    whole catalog.

    Raises:
        OSError: If the bundled catalog cannot be read
        yaml.YAMLError: If the bundled catalog is not valid YAML
    """
    raw = load_yaml_file(get_bundled_data_path(CATALOG_FILENAME))
    user_raw = load_user_override(get_user_yaml_path(CATALOG_FILENAME))

    merged: dict[str, dict] = {}
    for movement_id, entry in raw.items():
        if not isinstance(entry, dict):
            continue
        user_entry = user_raw.get(movement_id)
        merged[movement_id] = deep_merge(entry, user_entry) if isinstance(user_entry, dict) else entry
    for movement_id, entry in user_raw.items():
        if movement_id not in merged and isinstance(entry, dict):
            merged[movement_id] = entry

    result: dict[str, Movement] = {}
    for index, (movement_id, entry) in enumerate(merged.items()):
        try:
            result[str(movement_id)] = movement_from_dict(movement_id, entry, catalog_index=index)
        except (ValueError, TypeError) as exc:
            warnings.warn(
                f"lift-scheduler: skipping movement '{movement_id}': {exc}",
                stacklevel=2,
            )
    return result

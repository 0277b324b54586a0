"""
Muscle catalog: weekly volume guidelines and size class per muscle group.

Built once at import time from model.yaml (plus user overrides) and
shared read-only by every plan.  A catalog that fails to load raises
RuntimeError; the planner cannot work without guidelines.
"""

from dataclasses import dataclass

from .engine.config_loader import load_model_config
from .models import MUSCLE_GROUPS, MuscleSize

SetRange = tuple[int, int]


@dataclass(frozen=True)
class TrainingVolumeGuidelines:
    """Weekly hard-set ranges for one muscle group."""

    maintenance: SetRange
    hypertrophy: SetRange
    strength: SetRange

    def __post_init__(self) -> None:
        for name in ("maintenance", "hypertrophy", "strength"):
            lo, hi = getattr(self, name)
            if lo < 1 or hi < lo:
                raise ValueError(f"{name} range must satisfy 1 <= low <= high, got ({lo}, {hi})")

    def for_goal(self, goal: str) -> SetRange:
        """Return the range for a training goal ('strength' or 'hypertrophy')."""
        if goal == "strength":
            return self.strength
        return self.hypertrophy


@dataclass(frozen=True)
class MuscleInfo:
    muscle: str
    size: MuscleSize
    guidelines: TrainingVolumeGuidelines
    catalog_index: int

    @property
    def is_large(self) -> bool:
        return self.size == "large"


def _as_range(raw, field_name: str, muscle: str) -> SetRange:
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise ValueError(f"{muscle}.{field_name} must be a [low, high] pair")
    return int(raw[0]), int(raw[1])


def muscle_info_from_dict(muscle: str, d: dict, catalog_index: int) -> MuscleInfo:
    """
    Convert a raw YAML entry to MuscleInfo.

    Raises:
        ValueError: If a field is missing or malformed
    """
    missing = {"size", "maintenance", "hypertrophy", "strength"} - set(d)
    if missing:
        raise ValueError(f"muscle '{muscle}' missing fields: {sorted(missing)}")
    size = str(d["size"])
    if size not in ("small", "large"):
        raise ValueError(f"muscle '{muscle}' size must be 'small' or 'large'")
    guidelines = TrainingVolumeGuidelines(
        maintenance=_as_range(d["maintenance"], "maintenance", muscle),
        hypertrophy=_as_range(d["hypertrophy"], "hypertrophy", muscle),
        strength=_as_range(d["strength"], "strength", muscle),
    )
    return MuscleInfo(muscle=muscle, size=size, guidelines=guidelines, catalog_index=catalog_index)


def _build_catalog() -> dict[str, MuscleInfo]:
    raw_muscles = load_model_config().get("muscles", {})
    missing = [m for m in MUSCLE_GROUPS if m not in raw_muscles]
    if missing:
        raise RuntimeError(
            f"lift-scheduler: model.yaml has no guidelines for {missing}. "
            "Check that src/lift_scheduler/model.yaml is present and valid."
        )
    catalog: dict[str, MuscleInfo] = {}
    for i, muscle in enumerate(MUSCLE_GROUPS):
        try:
            catalog[muscle] = muscle_info_from_dict(muscle, raw_muscles[muscle], i)
        except ValueError as exc:
            raise RuntimeError(f"lift-scheduler: invalid muscle guideline ({exc})") from exc
    return catalog


MUSCLE_CATALOG: dict[str, MuscleInfo] = _build_catalog()


def get_muscle(muscle: str) -> MuscleInfo:
    """
    Return catalog data for a muscle group.

    Raises:
        ValueError: If the muscle is not a known group
    """
    if muscle not in MUSCLE_CATALOG:
        valid = ", ".join(MUSCLE_CATALOG)
        raise ValueError(f"Unknown muscle group '{muscle}'. Valid groups: {valid}")
    return MUSCLE_CATALOG[muscle]


def guidelines_for(muscle: str) -> TrainingVolumeGuidelines:
    return get_muscle(muscle).guidelines

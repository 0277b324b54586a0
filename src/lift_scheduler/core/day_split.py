"""
Day split planning.

Maps a position in the training week to a semantic day type for the
chosen split style, and a day type to the muscle groups it trains.
All functions are pure; invalid split/day-count combinations raise
ConfigurationError.
"""

from .config import MAX_DAYS_PER_WEEK, MIN_DAYS_FOR_SPLIT, MIN_DAYS_PER_WEEK, TRAINING_DAY_OFFSETS
from .errors import ConfigurationError
from .models import MUSCLE_GROUPS, DayType, SplitStyle

DAY_TYPE_MUSCLES: dict[str, tuple[str, ...]] = {
    "push": ("chest", "shoulders", "triceps"),
    "pull": ("back", "biceps"),
    "legs": ("quads", "hamstrings", "glutes", "calves"),
    "upper": ("chest", "back", "shoulders", "biceps", "triceps"),
    "lower": ("quads", "hamstrings", "glutes", "calves", "abs"),
    "full_body": MUSCLE_GROUPS,
    "rest": (),
}

DAY_TYPE_TITLES: dict[str, str] = {
    "push": "Push",
    "pull": "Pull",
    "legs": "Legs",
    "upper": "Upper Body",
    "lower": "Lower Body",
    "full_body": "Full Body",
    "rest": "Rest",
}

_SPLIT_ROTATION: dict[str, tuple[str, ...]] = {
    "full_body": ("full_body",),
    "upper_lower": ("upper", "lower"),
    "push_pull_legs": ("push", "pull", "legs"),
}


def validate_split(split: str, total_days: int) -> None:
    """
    Check that a split can be laid out over ``total_days`` training days.

    Raises:
        ConfigurationError: Unknown split, days outside [1, 7], or too few
            days for the split to cover each of its day types
    """
    if split not in _SPLIT_ROTATION:
        raise ConfigurationError(f"Unknown split style '{split}'")
    if not MIN_DAYS_PER_WEEK <= total_days <= MAX_DAYS_PER_WEEK:
        raise ConfigurationError(
            f"Training days per week must be between {MIN_DAYS_PER_WEEK} and "
            f"{MAX_DAYS_PER_WEEK}, got {total_days}"
        )
    if total_days < MIN_DAYS_FOR_SPLIT[split]:
        raise ConfigurationError(
            f"Split '{split}' needs at least {MIN_DAYS_FOR_SPLIT[split]} training days "
            f"per week, got {total_days}"
        )


def training_day_offsets(total_days: int) -> tuple[int, ...]:
    """Weekday offsets (0 = first plan day) that are training days."""
    if total_days not in TRAINING_DAY_OFFSETS:
        raise ConfigurationError(f"No weekly layout for {total_days} training days")
    return TRAINING_DAY_OFFSETS[total_days]


def day_type_for_session(session_index: int, split: SplitStyle, total_days: int) -> DayType:
    """
    Day type of the n-th training session of the week (0-based).

    Upper/lower alternates, push/pull/legs cycles in that order, full body
    is constant.
    """
    validate_split(split, total_days)
    if not 0 <= session_index < total_days:
        raise ConfigurationError(
            f"Session index {session_index} outside a {total_days}-day week"
        )
    rotation = _SPLIT_ROTATION[split]
    return rotation[session_index % len(rotation)]  # type: ignore[return-value]


def day_type(calendar_day: int, split: SplitStyle, total_days: int) -> DayType:
    """
    Map a weekday offset to its day type.

    Args:
        calendar_day: 0-based day within the plan week (0..6)
        split: Split style
        total_days: Training days per week

    Returns:
        Day type, or "rest" when the offset is not a training day

    Raises:
        ConfigurationError: Invalid split/day count or offset outside 0..6
    """
    validate_split(split, total_days)
    if not 0 <= calendar_day < 7:
        raise ConfigurationError(f"Calendar day must be in 0..6, got {calendar_day}")
    offsets = training_day_offsets(total_days)
    if calendar_day not in offsets:
        return "rest"
    return day_type_for_session(offsets.index(calendar_day), split, total_days)


def week_day_types(split: SplitStyle, total_days: int) -> list[DayType]:
    """Day types of one week's training sessions, in schedule order."""
    validate_split(split, total_days)
    return [day_type_for_session(i, split, total_days) for i in range(total_days)]


def muscles_for(day: DayType) -> tuple[str, ...]:
    """Muscle groups trained on a day type, in catalog order."""
    if day not in DAY_TYPE_MUSCLES:
        raise ConfigurationError(f"Unknown day type '{day}'")
    return DAY_TYPE_MUSCLES[day]

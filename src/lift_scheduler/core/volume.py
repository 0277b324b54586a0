"""
Weekly volume ramp.

Target weekly sets per muscle for each week of a plan:

    maintain:  (low + high) // 2 of the maintenance range, every week
    grow:      low + start_offset[experience] + (week - 1) * ramp[experience],
               clamped to the goal range (hypertrophy or strength)

Grow targets never decrease week over week and never exceed the upper
bound of the range they are clamped to.
"""

from .config import GROW_START_OFFSET, RAMP_SETS_PER_WEEK, REP_RANGES
from .models import Experience, MuscleGoal, TrainingGoal
from .muscles import guidelines_for


def guideline_range(muscle: str, goal: TrainingGoal, muscle_goal: MuscleGoal) -> tuple[int, int]:
    """The weekly set range a muscle is held to."""
    guidelines = guidelines_for(muscle)
    if muscle_goal == "maintain":
        return guidelines.maintenance
    return guidelines.for_goal(goal)


def target_sets(
    muscle: str,
    week_index: int,
    goal: TrainingGoal,
    experience: Experience,
    muscle_goal: MuscleGoal = "grow",
) -> int:
    """
    Target weekly working sets for a muscle in a given week.

    Args:
        muscle: Muscle group
        week_index: 1-based week of the plan
        goal: Training goal selecting the grow range
        experience: Experience level selecting start offset and ramp
        muscle_goal: "grow" ramps, "maintain" stays flat

    Returns:
        Weekly set target inside guideline_range(muscle, goal, muscle_goal)

    Example (beginner, hypertrophy, chest range 10-20):
        week 1 → 10, week 2 → 11, week 4 → 13
    """
    if week_index < 1:
        raise ValueError("week_index is 1-based")
    lo, hi = guideline_range(muscle, goal, muscle_goal)
    if muscle_goal == "maintain":
        return (lo + hi) // 2

    raw = lo + GROW_START_OFFSET[experience] + (week_index - 1) * RAMP_SETS_PER_WEEK[experience]
    return max(lo, min(hi, raw))


def weekly_targets(
    muscles,
    week_index: int,
    goal: TrainingGoal,
    experience: Experience,
    muscle_goal_of,
) -> dict[str, int]:
    """target_sets for several muscles; ``muscle_goal_of`` maps muscle → goal."""
    return {
        m: target_sets(m, week_index, goal, experience, muscle_goal_of(m))
        for m in muscles
    }


def rep_range(goal: TrainingGoal, experience: Experience) -> tuple[int, int]:
    """(min, max) target reps per set; beginners work in higher rep ranges."""
    return REP_RANGES[goal][experience]


def starting_reps(goal: TrainingGoal, experience: Experience, is_compound: bool) -> int:
    """Week-1 target reps: compounds at the bottom of the range, isolation mid-range."""
    lo, hi = rep_range(goal, experience)
    if is_compound:
        return lo
    return (lo + hi) // 2

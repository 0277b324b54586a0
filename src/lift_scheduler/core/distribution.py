"""
Round-robin set distribution with a per-exercise cap.

Shared by week volume fitting and the progressive overload allocator.
"""

from collections.abc import Sequence


def distribute_round_robin(set_counts: Sequence[int], deficit: int, cap: int) -> list[int]:
    """
    Spread ``deficit`` extra sets over exercises one set at a time.

    Positions are visited in the given order (callers pass exercises sorted
    ascending by current set count, ties in creation order), one set per
    visit, wrapping around until the deficit is placed.  An exercise at
    ``cap`` is skipped.  When every exercise is at the cap the remaining
    deficit is dropped.

    Args:
        set_counts: Current set count of each exercise, in visiting order
        deficit: Sets to place (non-positive places nothing)
        cap: Maximum sets any exercise may reach

    Returns:
        Sets added per position; ``sum(result) <= deficit``

    Example:
        >>> distribute_round_robin([3, 3], 3, 5)
        [2, 1]
    """
    added = [0] * len(set_counts)
    remaining = max(0, deficit)
    while remaining > 0:
        placed = False
        for i, count in enumerate(set_counts):
            if remaining == 0:
                break
            if count + added[i] >= cap:
                continue
            added[i] += 1
            remaining -= 1
            placed = True
        if not placed:
            break
    return added

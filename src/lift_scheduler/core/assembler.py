"""
Workout assembly.

Week 1 is laid out movement-first, one training day at a time:

1. Order the day type's muscles: not trained on the previous day first,
   then grow muscles, then muscles with the fewest exercises so far this
   week, large before small, catalog order.  Give each muscle one
   movement (compound preferred) until the day's slots run out.
2. Give grow muscles extra isolation/variation movements, then spend any
   free slots on extras for the maintained muscles of the day.
   While the week is first laid out, each day may only take its share of
   the movement slots the catalog can fill (every movement at most twice
   a week), so late days are never starved; remaining session slots are
   filled afterwards.
3. Grow muscles short of the low end of their range get more exercises,
   on a free slot or in place of a maintained muscle's exercise.
4. Variety pass: a muscle trained in only one direction of a
   horizontal/vertical pair gets the other direction when a slot is free,
   or by swapping one of its other exercises.
5. Anti-repetition pass: an exercise whose primary muscles were trained
   on an adjacent day is swapped for a movement on another muscle of the
   day, maintained muscles first.  The last day of the week is also
   adjacent to next week's first day.  An exercise a grow muscle needs to
   stay inside its range is never swapped out.

Sets are then fitted to each muscle's weekly target.  Weeks 2..N copy
week 1's movements, reps and weights and are refitted to their own
targets.  Anything that cannot be satisfied is logged and recorded in
``warnings``; assembly itself never fails.
"""

import logging
from collections import Counter

from .config import (
    EXERCISES_PER_SESSION,
    MAX_EXERCISES_PER_MUSCLE_PER_SESSION,
    MAX_MOVEMENT_USES_PER_WEEK,
    MAX_SETS_PER_EXERCISE,
    MIN_SETS_PER_EXERCISE,
    VARIETY_PATTERN_PAIRS,
)
from .day_split import DAY_TYPE_TITLES, muscles_for
from .distribution import distribute_round_robin
from .errors import SelectionUnsatisfiable
from .models import MUSCLE_GROUPS, DayType, ExerciseInstance, ExerciseSet, PlanInput, Workout
from .movements import Movement
from .muscles import get_muscle
from .selector import MovementKind, MovementSelector, SelectionConstraints
from .volume import guideline_range, starting_reps, weekly_targets

logger = logging.getLogger(__name__)

DayLayout = list[Movement]


def primary_muscles_of(movements) -> set[str]:
    """Union of the primary muscles of some movements."""
    return {muscle for mv in movements for muscle in mv.primary_muscles}


def adjacent_days(i: int, n: int) -> list[int]:
    """Schedule neighbours of day ``i`` in an ``n``-day week, wrapping into the next week."""
    if n < 2:
        return []
    if n == 2:
        return [1 - i]
    return [(i - 1) % n, (i + 1) % n]


class WorkoutAssembler:
    """
    Builds the workouts of a plan for one PlanInput.

    Args:
        plan_input: Questionnaire answers
        selector: Movement selector (defaults to one over the full catalog)
    """

    def __init__(self, plan_input: PlanInput, selector: MovementSelector | None = None):
        self.plan_input = plan_input
        self.selector = selector or MovementSelector()
        self.budget = EXERCISES_PER_SESSION[plan_input.session_duration]
        self.warnings: list[str] = []
        self._catalog = {m.movement_id: m for m in self.selector.movements}
        self._week_one_targets = self.targets(1)

    # ------------------------------------------------------------------
    # Targets
    # ------------------------------------------------------------------

    def targets(self, week_index: int) -> dict[str, int]:
        """Weekly set targets of every muscle."""
        p = self.plan_input
        return weekly_targets(MUSCLE_GROUPS, week_index, p.goal, p.experience, p.muscle_goal)

    def movement(self, movement_id: str) -> Movement:
        return self._catalog[movement_id]

    def week_slot_capacity(self) -> int:
        """
        Movement slots the catalog can fill in one week.

        Each muscle contributes its usable lead movements times the weekly
        use limit, but never more exercises than its week-1 target.
        """
        p = self.plan_input
        uses: Counter = Counter()
        for mv in self.selector.movements:
            if mv.is_available(p.equipment) and not (p.experience == "beginner" and mv.is_technical):
                uses[mv.primary_muscle] += MAX_MOVEMENT_USES_PER_WEEK
        return sum(min(uses[m], self._week_one_targets[m]) for m in MUSCLE_GROUPS)

    # ------------------------------------------------------------------
    # Week 1 layout
    # ------------------------------------------------------------------

    def assemble_week_one(self, day_types: list[DayType]) -> list[DayLayout]:
        """
        Choose the movements of every week-1 workout.

        Returns:
            One list of movements per training day, in schedule order
        """
        usage: Counter = Counter()
        layout: list[DayLayout] = [[] for _ in day_types]
        share = max(1, min(self.budget, self.week_slot_capacity() // len(day_types)))
        for i, day_type in enumerate(day_types):
            self._assemble_day(i, day_type, layout, usage, share)
        if share < self.budget:
            logger.debug("Week 1: %d of %d slots per day before top-up", share, self.budget)
            for i, day_type in enumerate(day_types):
                previous = primary_muscles_of(layout[i - 1]) if i > 0 else set()
                muscles = self._order_muscles(muscles_for(day_type), previous, layout)
                self._fill_day(i, muscles, layout, usage, self.budget)

        self._ensure_grow_volume(day_types, layout, usage)
        for i, day_type in enumerate(day_types):
            self._variety_pass(i, day_type, layout, usage)
        self._anti_repetition_pass(day_types, layout, usage)

        for i, day in enumerate(layout):
            if not day:
                self._warn(f"Week 1 day {i + 1} ({day_types[i]}): no movement fits the available equipment")
        for muscle in self.plan_input.grow_muscles:
            if not any(mv.primary_muscle == muscle for day in layout for mv in day):
                self._warn(f"{muscle} is marked grow but no workout trains it")
        return layout

    def _assemble_day(
        self, i: int, day_type: DayType, layout: list[DayLayout], usage: Counter, budget: int
    ) -> None:
        day = layout[i]
        previous = primary_muscles_of(layout[i - 1]) if i > 0 else set()
        muscles = self._order_muscles(muscles_for(day_type), previous, layout)

        for muscle in muscles:
            if len(day) >= budget:
                break
            try:
                movement = self.selector.require(muscle, self._constraints(i, layout, usage))
            except SelectionUnsatisfiable as exc:
                self._warn(f"Week 1 day {i + 1} ({day_type}): {exc}; slot left empty")
                continue
            self._place(day, movement, usage)

        self._fill_day(i, muscles, layout, usage, budget)

        if not day:
            # Nothing fit this day's muscles: any movement still under its
            # weekly limit will do, even one used the day before
            for muscle in MUSCLE_GROUPS:
                movement = self.selector.select(muscle, self._constraints(i, layout, usage, relaxed=True))
                if movement is not None:
                    self._place(day, movement, usage)
                    break

    def _fill_day(self, i: int, muscles: list[str], layout: list[DayLayout], usage: Counter, budget: int) -> None:
        """Extra movements for the day's trained muscles, grow first."""
        day = layout[i]
        goal_of = self.plan_input.muscle_goal
        trained = [m for m in muscles if any(mv.primary_muscle == m for mv in day)]
        self._fill(i, [m for m in trained if goal_of(m) == "grow"], layout, usage, budget)
        self._fill(i, [m for m in trained if goal_of(m) == "maintain"], layout, usage, budget)

    def _order_muscles(self, muscles, previous: set[str], layout: list[DayLayout]) -> list[str]:
        week_counts = Counter(mv.primary_muscle for day in layout for mv in day)
        goal_of = self.plan_input.muscle_goal

        def key(muscle: str) -> tuple:
            info = get_muscle(muscle)
            return (
                muscle in previous,
                goal_of(muscle) != "grow",
                week_counts[muscle],
                not info.is_large,
                info.catalog_index,
            )

        return sorted(muscles, key=key)

    def _fill(self, i: int, muscles: list[str], layout: list[DayLayout], usage: Counter, budget: int) -> None:
        """Round-robin extra movements over ``muscles`` while slots remain."""
        day = layout[i]
        while len(day) < budget:
            added = False
            for muscle in muscles:
                if len(day) >= budget:
                    break
                movement = self._select_extra(i, muscle, layout, usage)
                if movement is not None:
                    self._place(day, movement, usage)
                    added = True
            if not added:
                return

    def _select_extra(
        self, i: int, muscle: str, layout: list[DayLayout], usage: Counter, ignore_slot: int | None = None
    ) -> Movement | None:
        kinds: tuple[MovementKind | None, ...] = ("isolation", None)
        for kind in kinds:
            movement = self.selector.select(
                muscle, self._constraints(i, layout, usage, kind=kind, ignore_slot=ignore_slot)
            )
            if movement is not None and movement.primary_muscle == muscle:
                return movement
        return None

    # ------------------------------------------------------------------
    # Grow volume
    # ------------------------------------------------------------------

    def _set_room(self, muscle: str, layout: list[DayLayout]) -> int:
        """Most weekly sets the muscle's exercises can hold."""
        count = sum(1 for day in layout for mv in day if mv.primary_muscle == muscle)
        return count * MAX_SETS_PER_EXERCISE

    def _grow_floor(self, muscle: str) -> int:
        lo, _ = guideline_range(muscle, self.plan_input.goal, "grow")
        return lo

    def _needed_for_grow(self, movement: Movement, layout: list[DayLayout]) -> bool:
        """True if dropping ``movement`` would leave its grow muscle unable to reach its range."""
        muscle = movement.primary_muscle
        if self.plan_input.muscle_goal(muscle) != "grow":
            return False
        return self._set_room(muscle, layout) - MAX_SETS_PER_EXERCISE < self._grow_floor(muscle)

    def _ensure_grow_volume(self, day_types: list[DayType], layout: list[DayLayout], usage: Counter) -> None:
        for muscle in self.plan_input.grow_muscles:
            while self._set_room(muscle, layout) < self._grow_floor(muscle):
                if not self._add_grow_exercise(muscle, day_types, layout, usage):
                    logger.debug("%s: no day can take another exercise", muscle)
                    break

    def _add_grow_exercise(
        self, muscle: str, day_types: list[DayType], layout: list[DayLayout], usage: Counter
    ) -> bool:
        """
        Add one exercise led by ``muscle`` to a day whose type trains it.

        Days not adjacent to another day training the muscle come first,
        then days that already train it.  A full day gives up the exercise
        of the maintained muscle with the most exercises this week.
        """
        n = len(layout)
        goal_of = self.plan_input.muscle_goal

        def key(i: int) -> tuple:
            clashes = any(muscle in primary_muscles_of(layout[j]) for j in adjacent_days(i, n))
            present = any(mv.primary_muscle == muscle for mv in layout[i])
            return (clashes, not present, i)

        days = sorted((i for i, t in enumerate(day_types) if muscle in muscles_for(t)), key=key)
        for i in days:
            day = layout[i]
            if len(day) < self.budget:
                movement = self._select_extra(i, muscle, layout, usage)
                if movement is not None:
                    self._place(day, movement, usage)
                    return True
                continue

            week_counts = Counter(mv.primary_muscle for d in layout for mv in d)
            slots = [j for j, mv in enumerate(day) if goal_of(mv.primary_muscle) == "maintain"]
            if not slots:
                continue
            slot = max(slots, key=lambda j: (week_counts[day[j].primary_muscle], j))
            movement = self._select_extra(i, muscle, layout, usage, ignore_slot=slot)
            if movement is not None:
                logger.debug(
                    "Week 1 day %d: %s makes room for %s", i + 1, day[slot].movement_id, movement.movement_id
                )
                self._replace(day, slot, movement, usage)
                return True
        return False

    # ------------------------------------------------------------------
    # Variety pass
    # ------------------------------------------------------------------

    def _variety_pass(self, i: int, day_type: DayType, layout: list[DayLayout], usage: Counter) -> None:
        day = layout[i]
        p = self.plan_input
        for horizontal, vertical in VARIETY_PATTERN_PAIRS:
            leads: list[str] = []
            for mv in day:
                if mv.pattern in (horizontal, vertical) and mv.primary_muscle not in leads:
                    leads.append(mv.primary_muscle)

            for muscle in leads:
                patterns = {mv.pattern for mv in day if mv.primary_muscle == muscle}
                if horizontal in patterns and vertical in patterns:
                    continue
                missing = vertical if horizontal in patterns else horizontal
                if not self.selector.has_pattern(muscle, missing, p.equipment, p.experience):
                    continue

                if len(day) < self.budget:
                    movement = self.selector.select(
                        muscle, self._constraints(i, layout, usage, pattern=missing)
                    )
                    if movement is not None and movement.primary_muscle == muscle:
                        self._place(day, movement, usage)
                        continue

                slots = [j for j, mv in enumerate(day) if mv.primary_muscle == muscle]
                if len(slots) >= 2:
                    slot = slots[-1]
                    movement = self.selector.select(
                        muscle, self._constraints(i, layout, usage, pattern=missing, ignore_slot=slot)
                    )
                    if movement is not None and movement.primary_muscle == muscle:
                        self._replace(day, slot, movement, usage)
                        continue

                self._warn(
                    f"Week 1 day {i + 1} ({day_type}): no room for a {missing} movement for {muscle}"
                )

    # ------------------------------------------------------------------
    # Anti-repetition pass
    # ------------------------------------------------------------------

    def _anti_repetition_pass(self, day_types: list[DayType], layout: list[DayLayout], usage: Counter) -> None:
        n = len(layout)
        if n < 2:
            # One training day a week is only ever adjacent to itself
            return
        for t in range(1, n):
            neighbours = [t - 1]
            if t == n - 1 and n >= 3:
                neighbours.append(0)
            blocked = set().union(*(primary_muscles_of(layout[j]) for j in neighbours))

            for slot in self._swap_order(layout[t]):
                current = layout[t][slot]
                overlap = set(current.primary_muscles) & blocked
                if not overlap:
                    continue
                if self._needed_for_grow(current, layout) or not self._swap_slot(
                    t, slot, day_types[t], blocked, layout, usage
                ):
                    self._warn(
                        f"Week 1 day {t + 1} ({day_types[t]}): {current.name} repeats "
                        f"{', '.join(sorted(overlap))} from an adjacent day"
                    )

            # Identical emphasis on adjacent days is broken up with a
            # weaker constraint: only that neighbour's muscles are avoided
            for j in neighbours:
                if layout[t] and primary_muscles_of(layout[t]) == primary_muscles_of(layout[j]):
                    own = primary_muscles_of(layout[j])
                    swapped = any(
                        self._swap_slot(t, slot, day_types[t], own, layout, usage)
                        for slot in self._swap_order(layout[t], last_first=True)
                        if not self._needed_for_grow(layout[t][slot], layout)
                    )
                    if not swapped:
                        self._warn(
                            f"Week 1 day {t + 1} ({day_types[t]}) trains the same muscles "
                            f"as day {j + 1}"
                        )

    def _swap_order(self, day: DayLayout, last_first: bool = False) -> list[int]:
        """Slot indices, maintained muscles' exercises first."""
        goal_of = self.plan_input.muscle_goal
        return sorted(
            range(len(day)),
            key=lambda j: (goal_of(day[j].primary_muscle) == "grow", -j if last_first else j),
        )

    def _swap_slot(
        self,
        t: int,
        slot: int,
        day_type: DayType,
        blocked: set[str],
        layout: list[DayLayout],
        usage: Counter,
    ) -> bool:
        """Replace layout[t][slot] with a movement avoiding ``blocked`` muscles."""
        day = layout[t]
        day_counts = Counter(mv.primary_muscle for mv in day)
        goal_of = self.plan_input.muscle_goal
        alternates = sorted(
            (m for m in muscles_for(day_type) if m not in blocked),
            key=lambda m: (goal_of(m) == "grow", day_counts[m], get_muscle(m).catalog_index),
        )
        for muscle in alternates:
            movement = self.selector.select(
                muscle,
                self._constraints(t, layout, usage, avoid=frozenset(blocked), ignore_slot=slot),
            )
            if movement is not None:
                logger.debug(
                    "Week 1 day %d: swapping %s for %s", t + 1, day[slot].movement_id, movement.movement_id
                )
                self._replace(day, slot, movement, usage)
                return True
        return False

    # ------------------------------------------------------------------
    # Layout helpers
    # ------------------------------------------------------------------

    def _constraints(
        self,
        i: int,
        layout: list[DayLayout],
        usage: Counter,
        kind: MovementKind | None = None,
        pattern: str | None = None,
        avoid: frozenset[str] = frozenset(),
        ignore_slot: int | None = None,
        relaxed: bool = False,
    ) -> SelectionConstraints:
        """
        Selection constraints for day ``i``.

        ``relaxed`` drops the previous-day exclusion and the per-session
        limits, keeping the weekly ones.
        """
        day = layout[i]
        previous = layout[i - 1] if i > 0 and not relaxed else []
        groups = {mv.variation_group for d in layout for mv in d if mv.variation_group}
        return SelectionConstraints(
            available_equipment=self.plan_input.equipment,
            experience=self.plan_input.experience,
            week_usage=usage,
            previous_day_movements=frozenset(mv.movement_id for mv in previous),
            exclude=frozenset(mv.movement_id for mv in day),
            kind=kind,
            pattern=pattern,
            used_variation_groups=frozenset(groups),
            avoid_muscles=avoid,
            saturated_muscles=self._saturated(i, layout, ignore_slot, per_session=not relaxed),
        )

    def _saturated(
        self, i: int, layout: list[DayLayout], ignore_slot: int | None, per_session: bool = True
    ) -> frozenset[str]:
        """Muscles that may not take another exercise in day ``i``."""
        week_counts: Counter = Counter()
        day_counts: Counter = Counter()
        for d, day in enumerate(layout):
            for slot, mv in enumerate(day):
                if d == i and slot == ignore_slot:
                    continue
                week_counts[mv.primary_muscle] += 1
                if d == i:
                    day_counts[mv.primary_muscle] += 1
        goal_of = self.plan_input.muscle_goal
        return frozenset(
            m
            for m in MUSCLE_GROUPS
            if week_counts[m] >= self._week_one_targets[m]
            or (per_session and day_counts[m] >= MAX_EXERCISES_PER_MUSCLE_PER_SESSION[goal_of(m)])
        )

    @staticmethod
    def _place(day: DayLayout, movement: Movement, usage: Counter) -> None:
        day.append(movement)
        usage[movement.movement_id] += 1

    @staticmethod
    def _replace(day: DayLayout, slot: int, movement: Movement, usage: Counter) -> None:
        usage[day[slot].movement_id] -= 1
        day[slot] = movement
        usage[movement.movement_id] += 1

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    # ------------------------------------------------------------------
    # Workouts and sets
    # ------------------------------------------------------------------

    def build_week(
        self,
        plan_id: str,
        week_index: int,
        day_types: list[DayType],
        layout: list[DayLayout],
        dates: list[str | None],
    ) -> list[Workout]:
        """Turn a week-1 layout into workouts with fitted sets."""
        p = self.plan_input
        week: list[Workout] = []
        for d, (day_type, movements) in enumerate(zip(day_types, layout)):
            workout_id = _workout_id(plan_id, week_index, d)
            exercises = [
                ExerciseInstance(
                    instance_id=f"{workout_id}-e{j + 1}",
                    movement_id=mv.movement_id,
                    sets=[ExerciseSet(target_reps=starting_reps(p.goal, p.experience, mv.is_compound))],
                )
                for j, mv in enumerate(movements)
            ]
            week.append(
                Workout(
                    workout_id=workout_id,
                    title=DAY_TYPE_TITLES[day_type],
                    day_type=day_type,
                    week_index=week_index,
                    day_index=d,
                    plan_id=plan_id,
                    scheduled_date=dates[d],
                    exercises=exercises,
                )
            )
        self.fit_volume(week, week_index)
        return week

    def copy_week(
        self,
        plan_id: str,
        week_index: int,
        template: list[Workout],
        dates: list[str | None],
    ) -> list[Workout]:
        """Structural copy of ``template`` (same movements, reps and weights) refitted to ``week_index``."""
        week: list[Workout] = []
        for d, source in enumerate(template):
            workout_id = _workout_id(plan_id, week_index, d)
            exercises = []
            for j, ex in enumerate(source.exercises):
                first = ex.sets[0]
                exercises.append(
                    ExerciseInstance(
                        instance_id=f"{workout_id}-e{j + 1}",
                        movement_id=ex.movement_id,
                        sets=[ExerciseSet(target_reps=first.target_reps, weight=first.weight)],
                    )
                )
            week.append(
                Workout(
                    workout_id=workout_id,
                    title=source.title,
                    day_type=source.day_type,
                    week_index=week_index,
                    day_index=d,
                    plan_id=plan_id,
                    scheduled_date=dates[d],
                    exercises=exercises,
                )
            )
        self.fit_volume(week, week_index)
        return week

    def fit_volume(self, week: list[Workout], week_index: int) -> None:
        """
        Size every exercise so each muscle's weekly sets match its target.

        Every exercise keeps at least one set; the rest of the target is
        spread round-robin in schedule order, capped per exercise.  Volume
        that does not fit under the cap is dropped.
        """
        by_muscle: dict[str, list[ExerciseInstance]] = {}
        for workout in week:
            for ex in workout.exercises:
                muscle = self.movement(ex.movement_id).primary_muscle
                by_muscle.setdefault(muscle, []).append(ex)

        targets = self.targets(week_index)
        for muscle, instances in by_muscle.items():
            target = targets[muscle]
            floor = [MIN_SETS_PER_EXERCISE] * len(instances)
            added = distribute_round_robin(floor, target - sum(floor), MAX_SETS_PER_EXERCISE)
            for ex, extra in zip(instances, added):
                _resize(ex, MIN_SETS_PER_EXERCISE + extra)

            planned = sum(floor) + sum(added)
            if planned < target:
                logger.debug(
                    "Week %d %s: placed %d of %d target sets", week_index, muscle, planned, target
                )
                lo, _ = guideline_range(muscle, self.plan_input.goal, self.plan_input.muscle_goal(muscle))
                if week_index == 1 and planned < lo:
                    self._warn(
                        f"{muscle}: only {planned} weekly sets fit the schedule "
                        f"(guideline starts at {lo})"
                    )


def _workout_id(plan_id: str, week_index: int, day_index: int) -> str:
    return f"{plan_id}-w{week_index}-d{day_index + 1}"


def _resize(ex: ExerciseInstance, count: int) -> None:
    template = ex.sets[0]
    ex.sets = [ExerciseSet(target_reps=template.target_reps, weight=template.weight) for _ in range(count)]

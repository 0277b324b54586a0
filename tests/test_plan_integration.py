"""
Integration tests: plan generation and the progressive overload allocator.

Generated plans are checked for structural properties; the allocator is
exercised on small hand-built plans where every deficit and progression
can be worked out by hand (beginner hypertrophy: reps 10-15, chest
maintenance range 6-8 → weekly target 7).
"""

import pytest

from lift_scheduler.core.allocator import (
    ProgressiveOverloadAllocator,
    apply_pending_completions,
    complete_workout,
    find_next_occurrence,
    weight_increment,
)
from lift_scheduler.core.assembler import WorkoutAssembler, adjacent_days
from lift_scheduler.core.config import EXERCISES_PER_SESSION, MAX_MOVEMENT_USES_PER_WEEK, MAX_SETS_PER_EXERCISE
from lift_scheduler.core.errors import ConfigurationError
from lift_scheduler.core.metrics import (
    completion_stats,
    movement_uses_per_week,
    next_workout,
    weekly_volume,
)
from lift_scheduler.core.models import (
    ExerciseFeedback,
    ExerciseInstance,
    ExerciseSet,
    MuscleTrainingPreference,
    PlanInput,
    TrainingPlan,
    Workout,
    WorkoutFeedback,
)
from lift_scheduler.core.movements import get_movement
from lift_scheduler.core.planner import generate_plan
from lift_scheduler.core.volume import target_sets
from lift_scheduler.io.serializers import plan_to_dict, workout_to_dict

GYM = frozenset({
    "barbell", "bench", "dumbbell", "cable", "machine", "rack",
    "pullup_bar", "dip_bars", "kettlebell", "band",
})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_input(split="push_pull_legs", days=3, equipment=GYM, grow=(), goal="hypertrophy", **kwargs) -> PlanInput:
    return PlanInput(
        goal=goal,
        muscle_preferences=tuple(MuscleTrainingPreference(m, "grow") for m in grow),
        days_per_week=days,
        equipment=equipment,
        split=split,
        **kwargs,
    )


def _make_generated(weeks=4, **kwargs) -> TrainingPlan:
    return generate_plan(_make_input(**kwargs), weeks, start_date="2026-01-05", plan_id="plan")


def _exercise(instance_id: str, movement_id: str, sets: int, reps: int, weight: float = 0.0) -> ExerciseInstance:
    return ExerciseInstance(
        instance_id=instance_id,
        movement_id=movement_id,
        sets=[ExerciseSet(target_reps=reps, weight=weight) for _ in range(sets)],
    )


def _workout(week_index: int, exercises: list[tuple]) -> Workout:
    workout_id = f"p-w{week_index}-d1"
    return Workout(
        workout_id=workout_id,
        title="Full Body",
        day_type="full_body",
        week_index=week_index,
        day_index=0,
        plan_id="p",
        scheduled_date=f"2026-01-{5 + 7 * (week_index - 1):02d}",
        exercises=[_exercise(f"{workout_id}-e{j + 1}", *spec) for j, spec in enumerate(exercises)],
    )


def _make_plan(week1: list[tuple], week2: list[tuple]) -> TrainingPlan:
    """Two one-workout weeks; exercise specs are (movement_id, sets, reps[, weight])."""
    return TrainingPlan(
        plan_id="p",
        name="Test plan",
        start_date="2026-01-05",
        end_date="2026-01-12",
        days_per_week=1,
        plan_input=PlanInput(goal="hypertrophy", days_per_week=1),
        weeks=[[_workout(1, week1)], [_workout(2, week2)]],
    )


def _log_all(workout: Workout, reps: int | None = None) -> None:
    """Log every set at ``reps`` (default: its target)."""
    for ex in workout.exercises:
        for s in ex.sets:
            s.complete(s.target_reps if reps is None else reps)


def _top_of_range_plan() -> TrainingPlan:
    """
    Push-ups logged at the top of the range plus a mid-range fly.

    Chest: 4 + 3 = 7 completed sets meets the occurrence target of 7, so
    no deficit; progression alone changes week 2.
    """
    plan = _make_plan(
        [("push_up", 4, 15), ("dumbbell_fly", 3, 12, 10.0)],
        [("push_up", 4, 15), ("dumbbell_fly", 3, 12, 10.0)],
    )
    _log_all(plan.weeks[0][0])
    return plan


def _deficit_plan() -> TrainingPlan:
    """
    Week 1: push-up 3×10.  Week 2: push-up 3 + fly 3 = 6 chest sets.

    deficit = min(7 - 3, 8 - 6) = 2 → one set each, round-robin.
    """
    plan = _make_plan(
        [("push_up", 3, 10)],
        [("push_up", 3, 10), ("dumbbell_fly", 3, 12, 10.0)],
    )
    _log_all(plan.weeks[0][0])
    return plan


# ---------------------------------------------------------------------------
# Plan generation
# ---------------------------------------------------------------------------

class TestGeneratePlan:
    def test_workout_count(self):
        plan = _make_generated(weeks=4)
        assert len(plan.all_workouts()) == 4 * 3
        assert plan.week_count == 4
        assert all(len(week) == 3 for week in plan.weeks)

    def test_ids_unique_and_positional(self):
        plan = _make_generated(weeks=3)
        ids = [w.workout_id for w in plan.all_workouts()]
        assert len(ids) == len(set(ids))
        assert plan.weeks[1][2].workout_id == "plan-w2-d3"
        assert plan.weeks[1][2].exercises[0].instance_id == "plan-w2-d3-e1"

    def test_schedule_dates(self):
        """Three days a week train on offsets 0, 2 and 4."""
        plan = _make_generated(weeks=4)
        assert [w.scheduled_date for w in plan.weeks[0]] == ["2026-01-05", "2026-01-07", "2026-01-09"]
        assert plan.start_date == "2026-01-05"
        assert plan.end_date == "2026-01-30"

    def test_day_types_follow_split(self):
        plan = _make_generated(weeks=3)
        for week in plan.weeks:
            assert [w.day_type for w in week] == ["push", "pull", "legs"]

    @pytest.mark.parametrize("weeks", [2, 9, 0])
    def test_weeks_out_of_range(self, weeks):
        with pytest.raises(ConfigurationError):
            _make_generated(weeks=weeks)

    def test_split_needs_enough_days(self):
        with pytest.raises(ConfigurationError):
            _make_generated(split="push_pull_legs", days=2)

    def test_deterministic_for_same_input(self):
        a = _make_generated(weeks=4, split="upper_lower", days=4)
        b = _make_generated(weeks=4, split="upper_lower", days=4)
        assert plan_to_dict(a) == plan_to_dict(b)

    def test_later_weeks_copy_week_one(self):
        plan = _make_generated(weeks=5)
        week_one = plan.weeks[0]
        for week in plan.weeks[1:]:
            for source, copy in zip(week_one, week):
                assert copy.movement_ids == source.movement_ids
                assert copy.title == source.title
                for a, b in zip(source.exercises, copy.exercises):
                    assert a.sets[0].target_reps == b.sets[0].target_reps
                    assert a.sets[0].weight == b.sets[0].weight

    def test_every_workout_has_exercises(self):
        plan = _make_generated(weeks=3)
        assert all(w.exercises for w in plan.all_workouts())

    def test_set_counts_within_cap(self):
        plan = _make_generated(weeks=4, grow=("chest", "back"))
        for w in plan.all_workouts():
            for ex in w.exercises:
                assert 1 <= ex.set_count <= MAX_SETS_PER_EXERCISE

    def test_all_sets_pending(self):
        plan = _make_generated(weeks=3)
        assert all(s.status == "pending" for w in plan.all_workouts() for ex in w.exercises for s in ex.sets)

    def test_bodyweight_only_plan(self):
        plan = _make_generated(weeks=3, split="full_body", days=3, equipment=frozenset())
        for w in plan.all_workouts():
            assert w.exercises
            for ex in w.exercises:
                assert get_movement(ex.movement_id).is_available(frozenset())


class TestPlanInvariants:
    @pytest.mark.parametrize(
        "split,days",
        [("push_pull_legs", 3), ("upper_lower", 4), ("push_pull_legs", 6), ("full_body", 2)],
    )
    def test_movement_used_at_most_twice_per_week(self, split, days):
        plan = _make_generated(weeks=3, split=split, days=days)
        for counts in movement_uses_per_week(plan):
            assert max(counts.values()) <= MAX_MOVEMENT_USES_PER_WEEK

    @pytest.mark.parametrize("split,days", [("push_pull_legs", 3), ("upper_lower", 4)])
    def test_adjacent_days_differ_in_primary_muscles(self, split, days):
        plan = _make_generated(weeks=3, split=split, days=days)
        for week in plan.weeks:
            primaries = [
                {m for mid in w.movement_ids for m in get_movement(mid).primary_muscles}
                for w in week
            ]
            for t in range(len(primaries)):
                assert primaries[t] != primaries[(t + 1) % len(primaries)]

    @pytest.mark.parametrize("experience", ["beginner", "intermediate", "advanced"])
    def test_planned_volume_never_exceeds_guidelines(self, experience):
        plan = _make_generated(weeks=8, grow=("chest", "back", "quads"), experience=experience)
        for k in range(1, plan.week_count + 1):
            for row in weekly_volume(plan, k):
                assert row.planned_sets <= row.range_high

    def test_grow_muscle_follows_ramp(self):
        """Push day holds three chest movements, enough room for 10-13 sets."""
        plan = _make_generated(weeks=4, grow=("chest",))
        for k in range(1, 5):
            chest = next(row for row in weekly_volume(plan, k) if row.muscle == "chest")
            assert chest.planned_sets == target_sets("chest", k, "hypertrophy", "beginner", "grow")


class TestAdjacentDays:
    @pytest.mark.parametrize(
        "i,n,expected",
        [(0, 1, []), (0, 2, [1]), (1, 2, [0]), (0, 3, [2, 1]), (3, 4, [2, 0]), (2, 5, [1, 3])],
    )
    def test_neighbours_wrap_into_next_week(self, i, n, expected):
        assert adjacent_days(i, n) == expected


class TestSparseSchedules:
    """Few movements spread over many training days."""

    def test_bodyweight_catalog_cannot_fill_six_medium_days(self):
        """13 bodyweight movements, twice a week each, is fewer than 6 × 6 slots."""
        assembler = WorkoutAssembler(_make_input(split="full_body", days=6, equipment=frozenset()))
        assert assembler.week_slot_capacity() < 6 * EXERCISES_PER_SESSION["medium"]

    @pytest.mark.parametrize("duration", ["medium", "long"])
    @pytest.mark.parametrize("days", [5, 6, 7])
    @pytest.mark.parametrize("split", ["full_body", "upper_lower"])
    @pytest.mark.parametrize("equipment", [frozenset(), frozenset({"band"})])
    def test_every_workout_has_exercises(self, split, days, duration, equipment):
        plan = _make_generated(
            weeks=3, split=split, days=days, equipment=equipment, session_duration=duration
        )
        for w in plan.all_workouts():
            assert w.exercises, w.workout_id
            assert all(ex.set_count >= 1 for ex in w.exercises)
        for counts in movement_uses_per_week(plan):
            assert max(counts.values()) <= MAX_MOVEMENT_USES_PER_WEEK

    def test_late_days_not_starved(self):
        """Six full-body days without equipment: the last day still trains."""
        plan = _make_generated(weeks=3, split="full_body", days=6, equipment=frozenset())
        counts = [len(w.exercises) for w in plan.weeks[0]]
        assert min(counts) >= 1
        assert not any("no movement fits" in warning for warning in plan.warnings)


class TestGrowVolumeFloor:
    """Grow muscles keep enough exercises to reach the low end of their range."""

    @staticmethod
    def _assert_in_range(plan: TrainingPlan, muscles) -> None:
        for k in range(1, plan.week_count + 1):
            rows = {row.muscle: row for row in weekly_volume(plan, k)}
            for muscle in muscles:
                assert muscle in rows, (k, muscle)
                row = rows[muscle]
                assert row.range_low <= row.planned_sets <= row.range_high, (k, muscle, row.planned_sets)

    @pytest.mark.parametrize("experience", ["beginner", "advanced"])
    @pytest.mark.parametrize("duration", ["short", "medium"])
    @pytest.mark.parametrize(
        "split,days",
        [
            ("full_body", 2), ("full_body", 3), ("full_body", 4), ("full_body", 5),
            ("upper_lower", 2), ("upper_lower", 3), ("upper_lower", 4),
        ],
    )
    def test_grow_muscles_inside_range(self, split, days, duration, experience):
        plan = _make_generated(
            weeks=4,
            split=split,
            days=days,
            grow=("chest", "back"),
            session_duration=duration,
            experience=experience,
        )
        self._assert_in_range(plan, ("chest", "back"))

    def test_full_body_four_days_keeps_chest(self):
        """Advanced chest starts at 14 sets; at least two chest exercises (10 sets) survive."""
        plan = _make_generated(
            weeks=4, split="full_body", days=4, grow=("chest",), session_duration="medium", experience="advanced"
        )
        chest_days = [
            w.day_index for w in plan.weeks[0]
            if any(get_movement(mid).primary_muscle == "chest" for mid in w.movement_ids)
        ]
        assert len(chest_days) >= 2
        assert not any(warning.startswith("chest: only") for warning in plan.warnings)
        self._assert_in_range(plan, ("chest",))

    @pytest.mark.parametrize("split,days", [("full_body", 3), ("upper_lower", 2)])
    def test_strength_grow_inside_range(self, split, days):
        plan = _make_generated(
            weeks=3, split=split, days=days, grow=("quads",), goal="strength", session_duration="short"
        )
        self._assert_in_range(plan, ("quads",))


# ---------------------------------------------------------------------------
# Allocator
# ---------------------------------------------------------------------------

class TestWeightIncrement:
    def test_large_muscle_barbell(self):
        assert weight_increment(get_movement("barbell_bench_press")) == 2.5

    def test_small_muscle_halved(self):
        assert weight_increment(get_movement("barbell_curl")) == 1.25

    def test_bodyweight_has_no_increment(self):
        assert weight_increment(get_movement("push_up")) == 0.0


class TestAllocatorStates:
    def test_incomplete_workout_is_idle(self):
        plan = _top_of_range_plan()
        result = ProgressiveOverloadAllocator().on_workout_completed(plan, plan.weeks[0][0])
        assert result.state == "idle"
        assert plan.applied_completions == []

    def test_last_week_is_idle(self):
        plan = _top_of_range_plan()
        complete_workout(plan, "p-w1-d1")
        result = complete_workout(plan, "p-w2-d1", fill_pending=True)
        assert result.state == "idle"
        assert result.next_workout_id is None
        assert plan.is_completed

    def test_next_occurrence(self):
        plan = _make_generated(weeks=3)
        w = plan.weeks[0][1]
        assert find_next_occurrence(plan, w) is plan.weeks[1][1]
        assert find_next_occurrence(plan, plan.weeks[2][1]) is None

    def test_idempotent(self):
        plan = _make_generated(weeks=3)
        first = complete_workout(plan, "plan-w1-d1", fill_pending=True)
        snapshot = plan_to_dict(plan)

        again = ProgressiveOverloadAllocator().on_workout_completed(plan, plan.weeks[0][0])
        via_complete = complete_workout(plan, "plan-w1-d1", fill_pending=True)

        assert first.state == "applied"
        assert again.already_applied and via_complete.already_applied
        assert plan_to_dict(plan) == snapshot
        assert plan.applied_completions == ["plan-w1-d1"]

    def test_only_next_occurrence_changes(self):
        plan = _make_generated(weeks=3, grow=("chest",))
        before = {w.workout_id: workout_to_dict(w) for w in plan.all_workouts()}

        result = complete_workout(plan, "plan-w1-d1", fill_pending=True)

        assert result.next_workout_id == "plan-w2-d1"
        for w in plan.all_workouts():
            if w.workout_id not in ("plan-w1-d1", "plan-w2-d1"):
                assert workout_to_dict(w) == before[w.workout_id]

    def test_completion_fills_pending_sets(self):
        plan = _make_generated(weeks=3)
        complete_workout(plan, "plan-w1-d1", completed_at="2026-01-05T18:00:00", fill_pending=True)
        w = plan.get_workout("plan-w1-d1")
        assert w.is_complete
        assert w.completed_at == "2026-01-05T18:00:00"
        assert all(s.completed_reps == s.target_reps for ex in w.exercises for s in ex.sets)

    def test_unknown_workout(self):
        plan = _top_of_range_plan()
        with pytest.raises(KeyError):
            complete_workout(plan, "nope")

    def test_pending_completions_in_completion_order(self):
        plan = _make_generated(weeks=3)
        for workout_id, at in [("plan-w1-d1", "2026-01-07T10:00:00"), ("plan-w1-d2", "2026-01-06T10:00:00")]:
            w = plan.get_workout(workout_id)
            _log_all(w)
            w.is_complete = True
            w.completed_at = at

        results = apply_pending_completions(plan)

        assert [r.workout_id for r in results] == ["plan-w1-d2", "plan-w1-d1"]
        assert all(r.state == "applied" for r in results)
        assert plan.applied_completions == ["plan-w1-d2", "plan-w1-d1"]
        assert apply_pending_completions(plan) == []


class TestProgression:
    def test_bodyweight_at_top_adds_set(self):
        """Push-up 4×15 done: reps stay at 15, one set added (7 < upper 8)."""
        plan = _top_of_range_plan()
        result = complete_workout(plan, "p-w1-d1")

        push_up = plan.weeks[1][0].exercises[0]
        assert push_up.set_count == 5
        assert all(s.target_reps == 15 for s in push_up.sets)
        assert all(s.weight == 0.0 for s in push_up.sets)
        assert result.sets_added == 1
        assert result.progressions[0].reason == "set"

    def test_mid_range_adds_a_rep(self):
        """Fly 3×12 @ 10 kg done: 13 reps next time, same weight and sets."""
        plan = _top_of_range_plan()
        complete_workout(plan, "p-w1-d1")

        fly = plan.weeks[1][0].exercises[1]
        assert fly.set_count == 3
        assert all(s.target_reps == 13 and s.weight == 10.0 for s in fly.sets)

    def test_loaded_at_top_adds_weight(self):
        """Fly 3×15 @ 10 kg done: +2 kg dumbbell step, reps back to 10."""
        plan = _make_plan(
            [("push_up", 4, 10), ("dumbbell_fly", 3, 15, 10.0)],
            [("push_up", 4, 10), ("dumbbell_fly", 3, 15, 10.0)],
        )
        _log_all(plan.weeks[0][0])
        complete_workout(plan, "p-w1-d1")

        fly = plan.weeks[1][0].exercises[1]
        assert all(s.weight == 12.0 and s.target_reps == 10 for s in fly.sets)
        push_up = plan.weeks[1][0].exercises[0]
        assert all(s.target_reps == 11 for s in push_up.sets)

    def test_missed_reps_hold(self):
        plan = _top_of_range_plan()
        w = plan.weeks[0][0]
        w.exercises[1].sets[2].completed_reps = 9
        complete_workout(plan, "p-w1-d1")

        fly = plan.weeks[1][0].exercises[1]
        assert all(s.target_reps == 12 and s.weight == 10.0 for s in fly.sets)

    def test_skipped_sets_hold(self):
        plan = _top_of_range_plan()
        plan.weeks[0][0].exercises[0].sets[3].skip()
        result = complete_workout(plan, "p-w1-d1")

        push_up = plan.weeks[1][0].exercises[0]
        assert result.progressions[0].reason == "hold"
        assert all(s.target_reps == 15 for s in push_up.sets)


class TestDeficitDistribution:
    def test_deficit_spread_round_robin(self):
        plan = _deficit_plan()
        result = complete_workout(plan, "p-w1-d1")

        allocation = result.allocations[0]
        assert allocation.muscle == "chest"
        assert allocation.deficit == 2
        assert allocation.added == {"p-w2-d1-e1": 1, "p-w2-d1-e2": 1}
        assert result.dropped == 0
        assert [ex.set_count for ex in plan.weeks[1][0].exercises] == [4, 4]

    def test_guideline_upper_bound_respected(self):
        plan = _deficit_plan()
        complete_workout(plan, "p-w1-d1")
        chest = next(row for row in weekly_volume(plan, 2) if row.muscle == "chest")
        assert chest.planned_sets == chest.range_high == 8

    def test_cap_drops_excess(self):
        """Both week-2 exercises already at 5 sets: nothing fits."""
        plan = _make_plan(
            [("push_up", 1, 10)],
            [("push_up", 5, 10)],
        )
        _log_all(plan.weeks[0][0])
        result = complete_workout(plan, "p-w1-d1")

        assert result.allocations[0].deficit == 3  # min(7 - 1, 8 - 5)
        assert result.allocations[0].dropped == 3
        assert plan.weeks[1][0].exercises[0].set_count == 5

    def test_week_one_never_modified(self):
        plan = _deficit_plan()
        before = workout_to_dict(plan.weeks[0][0])
        complete_workout(plan, "p-w1-d1")
        after = workout_to_dict(plan.weeks[0][0])
        assert after["exercises"] == before["exercises"]


class TestFeedbackGating:
    def test_completely_drained_blocks_added_sets(self):
        plan = _top_of_range_plan()
        complete_workout(plan, "p-w1-d1", feedback=WorkoutFeedback(session_fatigue="completely_drained"))
        assert plan.weeks[1][0].exercises[0].set_count == 4

    def test_sore_muscle_blocks_deficit(self):
        plan = _deficit_plan()
        result = complete_workout(plan, "p-w1-d1", feedback=WorkoutFeedback(sore_muscles=["chest"]))
        assert result.allocations[0].dropped == 2
        assert [ex.set_count for ex in plan.weeks[1][0].exercises] == [3, 3]

    def test_joint_pain_flags_next_occurrence(self):
        plan = _top_of_range_plan()
        complete_workout(plan, "p-w1-d1", feedback=WorkoutFeedback(joint_pain_areas=["shoulder"]))

        for ex in plan.weeks[1][0].exercises:
            assert ex.joint_warning
            assert "shoulder" in ex.note
        assert plan.weeks[1][0].exercises[0].set_count == 4

    def test_unrelated_joint_pain_ignored(self):
        plan = _top_of_range_plan()
        complete_workout(plan, "p-w1-d1", feedback=WorkoutFeedback(joint_pain_areas=["knee"]))
        assert not any(ex.joint_warning for ex in plan.weeks[1][0].exercises)
        assert plan.weeks[1][0].exercises[0].set_count == 5

    def test_too_much_volume_blocks_exercise(self):
        plan = _top_of_range_plan()
        plan.weeks[0][0].exercises[0].feedback = ExerciseFeedback(set_volume="too_much")
        complete_workout(plan, "p-w1-d1")
        assert plan.weeks[1][0].exercises[0].set_count == 4


class TestIntensityScaledProgression:
    """Dumbbell fly steps are 2 kg (dumbbell increment, chest is large)."""

    def _rate(self, plan: TrainingPlan, index: int, intensity: str) -> None:
        plan.weeks[0][0].exercises[index].feedback = ExerciseFeedback(intensity=intensity)

    def test_failed_deloads_one_step(self):
        """Fly 3×12 @ 10 kg rated failed: 8 kg next time, reps held."""
        plan = _top_of_range_plan()
        self._rate(plan, 1, "failed")
        result = complete_workout(plan, "p-w1-d1")

        fly = plan.weeks[1][0].exercises[1]
        assert all(s.weight == 8.0 and s.target_reps == 12 for s in fly.sets)
        assert fly.set_count == 3
        assert result.progressions[1].reason == "deload"

    def test_failed_bodyweight_holds(self):
        """No weight to take off a push-up: held, no set added."""
        plan = _top_of_range_plan()
        self._rate(plan, 0, "failed")
        result = complete_workout(plan, "p-w1-d1")

        push_up = plan.weeks[1][0].exercises[0]
        assert push_up.set_count == 4
        assert all(s.weight == 0.0 and s.target_reps == 15 for s in push_up.sets)
        assert result.progressions[0].reason == "hold"

    def test_too_easy_mid_range_doubles_step(self):
        """Fly 3×12 @ 10 kg rated too easy: 14 kg, reps stay at 12."""
        plan = _top_of_range_plan()
        self._rate(plan, 1, "too_easy")
        result = complete_workout(plan, "p-w1-d1")

        fly = plan.weeks[1][0].exercises[1]
        assert all(s.weight == 14.0 and s.target_reps == 12 for s in fly.sets)
        assert result.progressions[1].reason == "weight"

    def test_too_easy_at_top_resets_reps(self):
        """Fly 3×15 @ 10 kg rated too easy: 14 kg, reps back to 10."""
        plan = _make_plan(
            [("push_up", 4, 10), ("dumbbell_fly", 3, 15, 10.0)],
            [("push_up", 4, 10), ("dumbbell_fly", 3, 15, 10.0)],
        )
        _log_all(plan.weeks[0][0])
        self._rate(plan, 1, "too_easy")
        complete_workout(plan, "p-w1-d1")

        fly = plan.weeks[1][0].exercises[1]
        assert all(s.weight == 14.0 and s.target_reps == 10 for s in fly.sets)

    def test_too_easy_with_missed_reps_holds(self):
        plan = _top_of_range_plan()
        plan.weeks[0][0].exercises[1].sets[0].completed_reps = 10
        self._rate(plan, 1, "too_easy")
        complete_workout(plan, "p-w1-d1")

        fly = plan.weeks[1][0].exercises[1]
        assert all(s.weight == 10.0 and s.target_reps == 12 for s in fly.sets)

    @pytest.mark.parametrize("intensity", ["moderate", "challenging"])
    def test_other_ratings_progress_normally(self, intensity):
        """Fly 3×12 @ 10 kg: one more rep, same weight."""
        plan = _top_of_range_plan()
        self._rate(plan, 1, intensity)
        complete_workout(plan, "p-w1-d1")

        fly = plan.weeks[1][0].exercises[1]
        assert all(s.weight == 10.0 and s.target_reps == 13 for s in fly.sets)


class TestMetrics:
    def test_completion_stats(self):
        plan = _top_of_range_plan()
        complete_workout(plan, "p-w1-d1")
        stats = completion_stats(plan)
        assert stats.completed_workouts == 1
        assert stats.total_workouts == 2
        assert stats.percent_complete == 50.0
        assert stats.completed_sets == 7

    def test_next_workout(self):
        plan = _top_of_range_plan()
        assert next_workout(plan).workout_id == "p-w1-d1"
        complete_workout(plan, "p-w1-d1")
        assert next_workout(plan).workout_id == "p-w2-d1"

    def test_weekly_volume_unknown_week(self):
        plan = _top_of_range_plan()
        with pytest.raises(IndexError):
            weekly_volume(plan, 3)

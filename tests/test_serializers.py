"""
Tests for plan serialization, set-log parsing and the JSON plan store.
"""

import json

import pytest

from lift_scheduler.core.allocator import complete_workout
from lift_scheduler.core.errors import ConfigurationError
from lift_scheduler.core.models import (
    ExerciseSet,
    MuscleTrainingPreference,
    PlanInput,
    WorkoutFeedback,
)
from lift_scheduler.core.planner import generate_plan
from lift_scheduler.io.plan_store import PlanStore
from lift_scheduler.io.serializers import (
    ValidationError,
    dict_to_exercise_set,
    dict_to_plan,
    dict_to_plan_input,
    dict_to_workout,
    exercise_set_to_dict,
    parse_set_log,
    plan_to_dict,
    validate_date,
)


def _make_plan():
    plan_input = PlanInput(
        goal="strength",
        muscle_preferences=(MuscleTrainingPreference("back", "grow"),),
        days_per_week=4,
        equipment=frozenset({"barbell", "rack", "bench", "dumbbell", "pullup_bar"}),
        split="upper_lower",
        experience="intermediate",
    )
    return generate_plan(plan_input, 3, start_date="2026-03-02", plan_id="abc")


class TestPlanSerialization:
    def test_fresh_plan_round_trip(self):
        plan = _make_plan()
        assert dict_to_plan(plan_to_dict(plan)) == plan

    def test_progressed_plan_round_trip(self):
        """Completion state, feedback, joint warnings and applied ids survive."""
        plan = _make_plan()
        plan.weeks[0][0].exercises[0].sets[0].skip()
        complete_workout(
            plan,
            "abc-w1-d1",
            completed_at="2026-03-02T19:30:00",
            feedback=WorkoutFeedback(sore_muscles=["chest"], joint_pain_areas=["elbow"], session_fatigue="tired"),
            fill_pending=True,
        )
        restored = dict_to_plan(plan_to_dict(plan))
        assert restored == plan
        assert restored.applied_completions == ["abc-w1-d1"]
        assert restored.weeks[0][0].exercises[0].sets[0].status == "skipped"

    def test_dict_is_json_serializable(self):
        json.dumps(plan_to_dict(_make_plan()))

    def test_newer_format_rejected(self):
        data = plan_to_dict(_make_plan())
        data["format_version"] = 99
        with pytest.raises(ValidationError):
            dict_to_plan(data)

    def test_missing_field_rejected(self):
        data = plan_to_dict(_make_plan())
        del data["weeks"]
        with pytest.raises(ValidationError):
            dict_to_plan(data)

    def test_week_mismatch_rejected(self):
        data = plan_to_dict(_make_plan())
        data["weeks"][0], data["weeks"][1] = data["weeks"][1], data["weeks"][0]
        with pytest.raises(ValidationError):
            dict_to_plan(data)

    def test_invalid_plan_input(self):
        with pytest.raises(ValidationError):
            dict_to_plan_input({"goal": "endurance", "days_per_week": 3})

    def test_invalid_workout_index(self):
        with pytest.raises(ValidationError):
            dict_to_workout({
                "workout_id": "x", "title": "Push", "day_type": "push",
                "week_index": 0, "day_index": 0, "plan_id": "p",
            })


class TestExerciseSetFormat:
    def test_status_round_trip(self):
        s = ExerciseSet(target_reps=8, weight=60.0)
        s.skip()
        assert dict_to_exercise_set(exercise_set_to_dict(s)) == s

    def test_legacy_complete_flag(self):
        s = dict_to_exercise_set({"target_reps": 8, "weight": 60, "completed_reps": 8, "is_complete": True})
        assert s.status == "completed"
        assert s.is_complete

    def test_legacy_incomplete_flag(self):
        s = dict_to_exercise_set({"target_reps": 8, "is_complete": False})
        assert s.status == "pending"

    def test_bad_status(self):
        with pytest.raises(ValidationError):
            dict_to_exercise_set({"target_reps": 8, "status": "half_done"})

    def test_negative_weight(self):
        with pytest.raises(ValidationError):
            dict_to_exercise_set({"target_reps": 8, "weight": -5})


class TestParseSetLog:
    def test_reps_at_weight(self):
        assert parse_set_log("8@60, 8@60, 7@60") == [(8, 60.0), (8, 60.0), (7, 60.0)]

    def test_reps_only(self):
        assert parse_set_log("12,12,10") == [(12, None), (12, None), (10, None)]

    def test_repeated_sets(self):
        assert parse_set_log("5x3@100") == [(5, 100.0)] * 3

    def test_skips(self):
        assert parse_set_log("10, -, skip") == [(10, None), None, None]

    def test_decimal_weight_with_unit(self):
        assert parse_set_log("6@22.5kg") == [(6, 22.5)]

    @pytest.mark.parametrize("text", ["", "   ", "abc", "8@", "@60", ","])
    def test_invalid(self, text):
        with pytest.raises(ValidationError):
            parse_set_log(text)


class TestValidateDate:
    def test_valid(self):
        assert validate_date("2026-03-02") == "2026-03-02"

    def test_invalid(self):
        with pytest.raises(ValidationError):
            validate_date("02/03/2026")


class TestPlanInputValidation:
    def test_unknown_goal(self):
        with pytest.raises(ConfigurationError):
            PlanInput(goal="endurance")

    def test_days_out_of_range(self):
        with pytest.raises(ConfigurationError):
            PlanInput(goal="hypertrophy", days_per_week=8)

    def test_duplicate_preference(self):
        with pytest.raises(ConfigurationError):
            PlanInput(
                goal="hypertrophy",
                muscle_preferences=(
                    MuscleTrainingPreference("chest", "grow"),
                    MuscleTrainingPreference("chest", "maintain"),
                ),
            )

    def test_unlisted_muscles_are_maintained(self):
        p = PlanInput(goal="hypertrophy", muscle_preferences=(MuscleTrainingPreference("chest", "grow"),))
        assert p.muscle_goal("chest") == "grow"
        assert p.muscle_goal("back") == "maintain"
        assert p.grow_muscles == ("chest",)


class TestPlanStore:
    def test_save_and_load(self, tmp_path):
        store = PlanStore(tmp_path / "nested" / "plan.json")
        plan = _make_plan()
        store.save(plan)
        assert store.exists()
        assert store.load() == plan
        assert not (tmp_path / "nested" / "plan.json.tmp").exists()

    def test_load_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PlanStore(tmp_path / "plan.json").load()

    def test_load_corrupt(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValidationError):
            PlanStore(path).load()

    def test_load_non_object(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ValidationError):
            PlanStore(path).load()

    def test_delete(self, tmp_path):
        store = PlanStore(tmp_path / "plan.json")
        assert not store.delete()
        store.save(_make_plan())
        assert store.delete()
        assert not store.exists()

"""
Tests for onboarding answers and step rules.

Step rules are pure functions of the answers, so these run without a wizard.
"""

import pytest

from onboarding.state import (
    TOTAL_STEPS,
    OnboardingAnswers,
    OnboardingStep,
    can_advance,
    missing_fields,
    progress_percent,
)


class TestOnboardingAnswersDefaults:
    """Fresh answers as the wizard starts with them."""

    def test_defaults(self):
        answers = OnboardingAnswers()
        assert answers.language == "sv"
        assert answers.country == "Sverige"
        assert answers.gender is None
        assert answers.preferences is None
        assert answers.age == ""
        assert answers.goals == []
        assert answers.workout_types == []

    def test_multi_select_lists_not_shared(self):
        a = OnboardingAnswers()
        b = OnboardingAnswers()
        a.goals.append("gym")
        assert b.goals == []

    def test_seven_steps(self):
        assert TOTAL_STEPS == 7
        assert [int(s) for s in OnboardingStep] == [1, 2, 3, 4, 5, 6, 7]


class TestCanAdvance:
    """One rule per step: false until its fields are filled, then true."""

    def test_step_1_true_by_default(self):
        assert can_advance(OnboardingAnswers(), 1) is True

    def test_step_2_needs_gender_and_age(self):
        answers = OnboardingAnswers()
        assert can_advance(answers, 2) is False
        answers.gender = "male"
        assert can_advance(answers, 2) is False
        answers.age = "42"
        assert can_advance(answers, 2) is True

    def test_step_3_needs_weight_and_height(self):
        answers = OnboardingAnswers(weight="80")
        assert can_advance(answers, 3) is False
        answers.height = "180"
        assert can_advance(answers, 3) is True

    def test_step_4_needs_country_and_address(self):
        answers = OnboardingAnswers()
        assert can_advance(answers, 4) is False  # country defaulted, address empty
        answers.address = "Storgatan 1"
        assert can_advance(answers, 4) is True
        answers.country = ""
        assert can_advance(answers, 4) is False

    def test_step_5_needs_a_goal(self):
        answers = OnboardingAnswers()
        assert can_advance(answers, 5) is False
        answers.goals = ["build_muscle"]
        assert can_advance(answers, 5) is True

    def test_step_6_needs_a_workout_type(self):
        answers = OnboardingAnswers()
        assert can_advance(answers, 6) is False
        answers.workout_types = ["swimming"]
        assert can_advance(answers, 6) is True

    def test_step_7_needs_preferences(self):
        answers = OnboardingAnswers()
        assert can_advance(answers, 7) is False
        answers.preferences = "meal_plan"
        assert can_advance(answers, 7) is True

    def test_allergies_optional(self):
        answers = OnboardingAnswers(preferences="both", allergies="")
        assert can_advance(answers, 7) is True

    def test_stays_true_when_refilled(self):
        answers = OnboardingAnswers(gender="female", age="30")
        assert can_advance(answers, 2)
        answers.gender = "other"
        answers.age = "31"
        assert can_advance(answers, 2)

    def test_later_steps_do_not_affect_earlier(self):
        answers = OnboardingAnswers(gender="female", age="30")
        answers.preferences = None
        answers.goals = []
        assert can_advance(answers, 2)

    @pytest.mark.parametrize("step", [0, -1, 8, 100])
    def test_out_of_range_steps_never_pass(self, step):
        answers = OnboardingAnswers(
            gender="male", age="1", weight="1", height="1", address="x",
            goals=["gym"], workout_types=["gym"], preferences="both",
        )
        assert can_advance(answers, step) is False


class TestMissingFields:

    def test_lists_blocking_fields(self):
        assert missing_fields(OnboardingAnswers(), 2) == ["gender", "age"]
        assert missing_fields(OnboardingAnswers(age="30"), 2) == ["gender"]

    def test_empty_when_complete(self):
        assert missing_fields(OnboardingAnswers(), 1) == []

    def test_unknown_step(self):
        assert missing_fields(OnboardingAnswers(), 9) == []


class TestSerialization:

    def test_json_roundtrip(self, sample_answers):
        answers = OnboardingAnswers.from_dict(sample_answers)
        restored = OnboardingAnswers.from_json(answers.to_json())
        assert restored == answers

    def test_from_dict_ignores_unknown_keys(self):
        answers = OnboardingAnswers.from_dict({"language": "en", "workoutTypes": ["gym"]})
        assert answers.language == "en"
        assert answers.workout_types == []

    def test_copy_is_detached(self):
        answers = OnboardingAnswers(goals=["lose_weight"])
        copy = answers.copy()
        copy.goals.append("build_muscle")
        assert answers.goals == ["lose_weight"]
        assert copy != answers


def test_progress_percent():
    assert progress_percent(1) == 14
    assert progress_percent(3) == 43
    assert progress_percent(7) == 100

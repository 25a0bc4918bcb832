"""
Tests for risk score calculation.
Covers every category's points, caps, answer kinds and overall clamping.
"""

import pytest

from api.services.risk_score import (
    Answer,
    AnswerKind,
    QuizAnswer,
    calculate_risk_score,
    category_scores,
)


def answers(**raw):
    return [QuizAnswer.from_raw(question_id, value) for question_id, value in raw.items()]


class TestAnswerTagging:
    """Test building tagged answers from JSON values."""

    @pytest.mark.parametrize("raw,kind", [
        ("yes", AnswerKind.TEXT),
        (["pcos", "thyroid"], AnswerKind.CHOICES),
        ([], AnswerKind.CHOICES),
        (42, AnswerKind.NUMBER),
        (27.5, AnswerKind.NUMBER),
    ])
    def test_supported_shapes(self, raw, kind):
        assert Answer.from_raw(raw).kind is kind

    @pytest.mark.parametrize("raw", [True, None, {"a": 1}, [1, 2], ["ok", 3]])
    def test_unsupported_shapes_raise(self, raw):
        with pytest.raises(ValueError):
            Answer.from_raw(raw)

    def test_accessors_return_none_for_other_kinds(self):
        answer = Answer.from_raw("high")
        assert answer.text == "high"
        assert answer.choices is None
        assert answer.number is None


class TestCategoryScores:
    """Test each category in isolation."""

    def test_empty_responses_score_zero(self):
        assert calculate_risk_score([]) == 0

    def test_unknown_questions_score_zero(self):
        assert calculate_risk_score(answers(favourite_colour="blue", shoe_size=9)) == 0

    def test_unrecognized_values_score_zero(self):
        assert calculate_risk_score(answers(stress_level="sometimes", exercise="parkour", age=-3)) == 0

    @pytest.mark.parametrize("family_history,expected", [
        ("yes", 15),
        ("maternal", 15),
        ("paternal", 15),
        ("both", 15),  # 20 capped at 15
        ("no", 0),
    ])
    def test_family_history(self, family_history, expected):
        assert category_scores(answers(family_history=family_history))["genetics"] == expected

    @pytest.mark.parametrize("age,expected", [(24, 0), (25, 2), (30, 3), (39, 3), (40, 5), (65, 5)])
    def test_age_bands(self, age, expected):
        assert category_scores(answers(age=age))["genetics"] == expected

    def test_age_as_text_is_ignored(self):
        assert category_scores(answers(age="45"))["genetics"] == 0

    def test_genetics_capped(self):
        assert category_scores(answers(family_history="yes", age=45))["genetics"] == 15

    def test_pcos_and_thyroid(self):
        assert calculate_risk_score(answers(medical_history=["pcos", "thyroid"])) == 18

    def test_medical_history_case_insensitive_text(self):
        assert category_scores(answers(medical_history="PCOS"))["medical_history"] == 10
        assert category_scores(answers(medical_history="Polycystic Ovary Syndrome"))["medical_history"] == 10

    def test_medical_history_capped(self):
        scores = category_scores(answers(medical_history=["pcos", "thyroid", "diabetes", "anemia"]))
        assert scores["medical_history"] == 25

    def test_medical_history_number_ignored(self):
        assert category_scores(answers(medical_history=3))["medical_history"] == 0

    def test_vitamin_deficiency_list_counts_items(self):
        assert category_scores(answers(vitamin_deficiency=["iron"]))["metabolism"] == 3
        assert category_scores(answers(vitamin_deficiency=["iron", "zinc", "vitamin_d", "vitamin_b12"]))["metabolism"] == 10

    def test_vitamin_deficiency_text(self):
        assert category_scores(answers(vitamin_deficiency="multiple"))["metabolism"] == 10
        assert category_scores(answers(vitamin_deficiency="no"))["metabolism"] == 0

    def test_metabolism_capped(self):
        scores = category_scores(answers(weight_concern="rapid_gain", digestion="poor", vitamin_deficiency="yes"))
        assert scores["metabolism"] == 20

    def test_metabolism_partial(self):
        scores = category_scores(answers(weight_concern="fluctuating", digestion="moderate"))
        assert scores["metabolism"] == 9

    @pytest.mark.parametrize("level,expected", [
        ("very_high", 20), ("extreme", 20), ("high", 15), ("moderate", 8), ("low", 3), ("none", 0),
    ])
    def test_stress_levels(self, level, expected):
        assert category_scores(answers(stress_level=level))["stress"] == expected

    def test_stress_capped(self):
        scores = category_scores(answers(stress_level="high", sleep_quality="insomnia", work_life_balance="none"))
        assert scores["stress"] == 20

    def test_stress_partial(self):
        scores = category_scores(answers(stress_level="moderate", sleep_quality="moderate"))
        assert scores["stress"] == 10

    def test_lifestyle_hair_care_list(self):
        scores = category_scores(answers(hair_care_practices=["chemical_treatments", "tight_hairstyles"]))
        assert scores["lifestyle"] == 6

    def test_lifestyle_hair_care_text_ignored(self):
        assert category_scores(answers(hair_care_practices="excessive_heat"))["lifestyle"] == 0

    def test_lifestyle_capped(self):
        scores = category_scores(answers(
            diet_quality="junk_food",
            exercise="none",
            hair_care_practices=["excessive_heat", "tight_hairstyles"],
            environment="hard_water",
        ))
        assert scores["lifestyle"] == 20

    def test_lifestyle_partial(self):
        scores = category_scores(answers(diet_quality="moderate", exercise="occasional", environment="polluted"))
        assert scores["lifestyle"] == 10


class TestRiskScore:
    """Test the combined score."""

    def test_maximum_score(self):
        responses = answers(
            family_history="both",
            age=50,
            medical_history=["pcos", "thyroid", "diabetes"],
            weight_concern="difficulty_losing",
            digestion="irregular",
            vitamin_deficiency=["iron", "zinc", "vitamin_d", "vitamin_b12"],
            stress_level="extreme",
            sleep_quality="poor",
            work_life_balance="poor",
            diet_quality="poor",
            exercise="rarely",
            hair_care_practices=["excessive_heat"],
            environment="polluted",
        )
        assert calculate_risk_score(responses) == 100

    def test_mixed_profile(self):
        responses = answers(
            family_history="maternal",  # 15
            medical_history=["thyroid"],  # 8
            stress_level="high",  # 15
            exercise="occasional",  # 3
        )
        assert calculate_risk_score(responses) == 41

    def test_last_answer_wins(self):
        responses = [
            QuizAnswer.from_raw("stress_level", "low"),
            QuizAnswer.from_raw("stress_level", "high"),
        ]
        assert calculate_risk_score(responses) == 15

    def test_deterministic(self):
        responses = answers(stress_level="moderate", age=33, diet_quality="poor")
        assert calculate_risk_score(responses) == calculate_risk_score(list(responses))
        assert 0 <= calculate_risk_score(responses) <= 100

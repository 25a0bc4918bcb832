"""
Risk score calculation.

Maps quiz answers to an integer score in [0, 100]. The score is the sum of
five independently capped categories:

    genetics         15
    medical history  25
    metabolism       20
    stress           20
    lifestyle        20

Point values and tier boundaries are a fixed contract: coach seniority routing
depends on them. Unknown question ids or answer values contribute zero;
answers that are not text, a number or a list of strings are rejected.
"""

from dataclasses import dataclass
from enum import Enum as PyEnum
from typing import Any, Iterable, Mapping


class AnswerKind(str, PyEnum):
    """Discriminator for the three shapes a quiz answer can take."""

    TEXT = "text"
    CHOICES = "choices"
    NUMBER = "number"


@dataclass(frozen=True)
class Answer:
    """A quiz answer tagged with its kind."""

    kind: AnswerKind
    value: Any

    @classmethod
    def from_raw(cls, raw: Any) -> "Answer":
        """
        Build a tagged answer from a decoded JSON value.

        Args:
            raw: A string, a list of strings, or a number

        Raises:
            ValueError: If the value has none of the supported shapes
        """
        if isinstance(raw, bool):
            raise ValueError("Boolean answers are not supported")
        if isinstance(raw, str):
            return cls(AnswerKind.TEXT, raw)
        if isinstance(raw, (int, float)):
            return cls(AnswerKind.NUMBER, raw)
        if isinstance(raw, (list, tuple)) and all(isinstance(item, str) for item in raw):
            return cls(AnswerKind.CHOICES, tuple(raw))
        raise ValueError(f"Unsupported answer type: {type(raw).__name__}")

    @property
    def text(self) -> str | None:
        return self.value if self.kind is AnswerKind.TEXT else None

    @property
    def choices(self) -> tuple[str, ...] | None:
        return self.value if self.kind is AnswerKind.CHOICES else None

    @property
    def number(self) -> float | None:
        return self.value if self.kind is AnswerKind.NUMBER else None


@dataclass(frozen=True)
class QuizAnswer:
    """Answer to one question."""

    question_id: str
    answer: Answer

    @classmethod
    def from_raw(cls, question_id: str, raw: Any) -> "QuizAnswer":
        return cls(question_id, Answer.from_raw(raw))


# ==================== Category caps ===================== #
GENETICS_CAP = 15
MEDICAL_HISTORY_CAP = 25
METABOLISM_CAP = 20
STRESS_CAP = 20
LIFESTYLE_CAP = 20

MAX_RISK_SCORE = 100
MIN_RISK_SCORE = 0

# ==================== Signal tables ===================== #
MEDICAL_CONDITION_POINTS: dict[str, int] = {
    "pcos": 10,
    "polycystic ovary syndrome": 10,
    "thyroid": 8,
    "hypothyroidism": 8,
    "hyperthyroidism": 8,
    "diabetes": 7,
    "anaemia": 6,
    "anemia": 6,
    "autoimmune": 8,
}

STRESS_LEVEL_POINTS: dict[str, int] = {
    "very_high": 20,
    "extreme": 20,
    "high": 15,
    "moderate": 8,
    "low": 3,
}

AnswerMap = Mapping[str, Answer]


def _text(answers: AnswerMap, question_id: str) -> str | None:
    answer = answers.get(question_id)
    return answer.text if answer else None


def genetics_score(answers: AnswerMap) -> int:
    """Family history and age bands."""
    score = 0

    family_history = _text(answers, "family_history")
    if family_history in ("yes", "maternal", "paternal"):
        score += 15
    elif family_history == "both":
        score += 20

    age_answer = answers.get("age")
    age = age_answer.number if age_answer else None
    if age is not None:
        if age >= 40:
            score += 5
        elif age >= 30:
            score += 3
        elif age >= 25:
            score += 2

    return min(GENETICS_CAP, score)


def medical_history_score(answers: AnswerMap) -> int:
    """Per-condition points, single or multi-select, case-insensitive."""
    answer = answers.get("medical_history")
    if answer is None:
        return 0

    if answer.kind is AnswerKind.CHOICES:
        conditions = answer.choices
    elif answer.kind is AnswerKind.TEXT:
        conditions = (answer.text,)
    else:
        return 0

    score = sum(MEDICAL_CONDITION_POINTS.get(c.lower(), 0) for c in conditions)
    return min(MEDICAL_HISTORY_CAP, score)


def metabolism_score(answers: AnswerMap) -> int:
    """Weight concern, digestion and vitamin deficiencies."""
    score = 0

    weight = _text(answers, "weight_concern")
    if weight in ("rapid_gain", "difficulty_losing"):
        score += 10
    elif weight == "fluctuating":
        score += 5

    digestion = _text(answers, "digestion")
    if digestion in ("poor", "irregular"):
        score += 8
    elif digestion == "moderate":
        score += 4

    vitamins = answers.get("vitamin_deficiency")
    if vitamins is not None:
        if vitamins.kind is AnswerKind.CHOICES and vitamins.choices:
            score += min(10, len(vitamins.choices) * 3)
        elif vitamins.text in ("yes", "multiple"):
            score += 10

    return min(METABOLISM_CAP, score)


def stress_score(answers: AnswerMap) -> int:
    """Stress level, sleep quality and work-life balance."""
    score = STRESS_LEVEL_POINTS.get(_text(answers, "stress_level") or "", 0)

    sleep = _text(answers, "sleep_quality")
    if sleep in ("poor", "insomnia"):
        score += 5
    elif sleep == "moderate":
        score += 2

    if _text(answers, "work_life_balance") in ("poor", "none"):
        score += 5

    return min(STRESS_CAP, score)


def lifestyle_score(answers: AnswerMap) -> int:
    """Diet, exercise, hair care practices and environment."""
    score = 0

    diet = _text(answers, "diet_quality")
    if diet in ("poor", "junk_food"):
        score += 8
    elif diet == "moderate":
        score += 4

    exercise = _text(answers, "exercise")
    if exercise in ("none", "rarely"):
        score += 6
    elif exercise == "occasional":
        score += 3

    hair_care_answer = answers.get("hair_care_practices")
    hair_care = hair_care_answer.choices if hair_care_answer else None
    if hair_care is not None:
        if "excessive_heat" in hair_care or "chemical_treatments" in hair_care:
            score += 4
        if "tight_hairstyles" in hair_care:
            score += 2

    if _text(answers, "environment") in ("polluted", "hard_water"):
        score += 3

    return min(LIFESTYLE_CAP, score)


def category_scores(responses: Iterable[QuizAnswer]) -> dict[str, int]:
    """
    Score each category separately.

    Args:
        responses: Quiz answers; a later answer for the same question wins

    Returns:
        Dictionary of category name to capped points
    """
    answers = {response.question_id: response.answer for response in responses}
    return {
        "genetics": genetics_score(answers),
        "medical_history": medical_history_score(answers),
        "metabolism": metabolism_score(answers),
        "stress": stress_score(answers),
        "lifestyle": lifestyle_score(answers),
    }


def calculate_risk_score(responses: Iterable[QuizAnswer]) -> int:
    """
    Calculate the risk score for a set of quiz answers.

    Args:
        responses: Quiz answers

    Returns:
        Risk score from 0 to 100
    """
    total = sum(category_scores(responses).values())
    return min(MAX_RISK_SCORE, max(MIN_RISK_SCORE, total))

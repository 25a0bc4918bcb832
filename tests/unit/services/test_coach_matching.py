"""Tests for risk score to coach seniority matching."""

from types import SimpleNamespace

import pytest

from core.exceptions import InvalidInputError
from api.services.coach_matching import (
    match_coaches,
    required_seniority,
    seniority_rank,
    validate_risk_score,
)


def coach(name, seniority_level, languages=("en",)):
    return SimpleNamespace(name=name, seniority_level=seniority_level, languages=list(languages))


COACHES = [
    coach("senior-en-hi", "senior", ("en", "hi")),
    coach("mid-hi", "mid", ("hi",)),
    coach("junior-en", "junior", ("en",)),
    coach("mystery", "principal", ("en", "hi")),
]


class TestRequiredSeniority:

    @pytest.mark.parametrize("risk_score,expected", [
        (0, "junior"),
        (30, "junior"),
        (31, "mid"),
        (60, "mid"),
        (61, "senior"),
        (100, "senior"),
    ])
    def test_tier_boundaries(self, risk_score, expected):
        assert required_seniority(risk_score) == expected

    @pytest.mark.parametrize("risk_score", [-1, 101, 1000])
    def test_out_of_range(self, risk_score):
        with pytest.raises(InvalidInputError, match="between 0 and 100"):
            required_seniority(risk_score)

    @pytest.mark.parametrize("risk_score", [50.5, "50", True, None])
    def test_not_an_integer(self, risk_score):
        with pytest.raises(InvalidInputError, match="integer"):
            validate_risk_score(risk_score)

    def test_unknown_seniority_ranks_lowest(self):
        assert seniority_rank("principal") == 0
        assert seniority_rank("junior") < seniority_rank("mid") < seniority_rank("senior")


class TestMatchCoaches:

    def names(self, coaches):
        return [c.name for c in coaches]

    def test_high_risk_gets_senior_only(self):
        assert self.names(match_coaches(COACHES, 61)) == ["senior-en-hi"]

    def test_medium_risk_gets_mid_and_above(self):
        assert self.names(match_coaches(COACHES, 31)) == ["senior-en-hi", "mid-hi"]

    def test_low_risk_gets_every_known_tier(self):
        assert self.names(match_coaches(COACHES, 0)) == ["senior-en-hi", "mid-hi", "junior-en"]

    def test_language_filter_after_seniority(self):
        assert self.names(match_coaches(COACHES, 30, "hi")) == ["senior-en-hi", "mid-hi"]
        assert self.names(match_coaches(COACHES, 61, "hi")) == ["senior-en-hi"]

    def test_no_language_match(self):
        assert match_coaches(COACHES, 10, "ta") == []

    def test_input_order_preserved(self):
        reordered = list(reversed(COACHES))
        assert self.names(match_coaches(reordered, 0)) == ["junior-en", "mid-hi", "senior-en-hi"]

    def test_invalid_score_raises(self):
        with pytest.raises(InvalidInputError):
            match_coaches(COACHES, 150)

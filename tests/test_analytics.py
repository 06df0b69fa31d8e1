"""Tests for post-draft grading"""
import pytest

from draft_engine.core.analytics import DraftAnalyticsCalculator
from draft_engine.core.models import UNRANKED_ADP, Candidate, DraftPick, Position
from draft_engine.utils.validation import ValidationError


def make_candidate(cid, adp, position=Position.RB, age=None):
    return Candidate(candidate_id=cid, name=cid, position=position, team="GB", adp=adp, age=age)


def make_pick(overall, candidate_id, team_id="t1"):
    return DraftPick(overall=overall, round=1, pick=overall, team_id=team_id, candidate_id=candidate_id)


class TestDraftAnalyticsCalculator:
    """Test draft grading"""

    @pytest.fixture
    def calculator(self):
        return DraftAnalyticsCalculator(ideal_composition={"QB": 1, "RB": 2})

    @pytest.fixture
    def balanced_draft(self):
        pool = [
            make_candidate("qb", 10, Position.QB, age=25),
            make_candidate("rb1", 20, age=25),
            make_candidate("rb2", 30, age=25)
        ]
        picks = [make_pick(10, "qb"), make_pick(20, "rb1"), make_pick(30, "rb2")]
        return pool, picks

    def test_balanced_draft(self, calculator, balanced_draft):
        """Test grades for picks made exactly at ADP"""
        pool, picks = balanced_draft
        analytics = calculator.calculate("t1", picks, pool)

        assert analytics.efficiency_score == 100
        assert analytics.average_adp == 20
        assert analytics.roster_balance == 1.0
        assert analytics.upside == pytest.approx(0.5)
        assert analytics.floor == pytest.approx(0.375)
        assert analytics.championship_probability == 100
        assert analytics.position_drafted[Position.RB] == 2
        assert analytics.position_drafted[Position.WR] == 0
        assert analytics.value_picks == analytics.reaches == analytics.steals == []

    def test_other_teams_ignored(self, calculator, balanced_draft):
        """Test only the graded team's picks count"""
        pool, picks = balanced_draft
        pool.append(make_candidate("wr", 40, Position.WR))
        picks.append(make_pick(31, "wr", team_id="t2"))

        assert calculator.calculate("t1", picks, pool).position_drafted[Position.WR] == 0

    def test_empty_draft(self, calculator):
        """Test no picks yields an all-zero result"""
        analytics = calculator.calculate("t1", [], [])

        assert analytics.efficiency_score == 0
        assert analytics.championship_probability == 0
        assert all(count == 0 for count in analytics.position_drafted.values())

    def test_classification(self):
        """Test value, steal and reach thresholds"""
        calculator = DraftAnalyticsCalculator()
        pool = [
            make_candidate("steal", 30),
            make_candidate("value", 20),
            make_candidate("reach", 2),
            make_candidate("fair", 12),
            make_candidate("unranked", UNRANKED_ADP)
        ]
        picks = [
            make_pick(5, "steal"), make_pick(8, "value"), make_pick(20, "reach"),
            make_pick(10, "fair"), make_pick(40, "unranked")
        ]
        analytics = calculator.calculate("t1", picks, pool)

        assert [p.candidate_id for p in analytics.steals] == ["steal"]
        assert [p.candidate_id for p in analytics.value_picks] == ["steal", "value"]
        assert [p.candidate_id for p in analytics.reaches] == ["reach"]

    def test_efficiency_clamped(self):
        """Test efficiency never goes negative"""
        pool = [make_candidate("late", 250)]
        analytics = DraftAnalyticsCalculator().calculate("t1", [make_pick(1, "late")], pool)

        assert analytics.efficiency_score == 0

    def test_unknown_ages_use_assumptions(self):
        """Test upside assumes age 30 and floor assumes age 25"""
        pool = [make_candidate("a", 5)]
        analytics = DraftAnalyticsCalculator().calculate("t1", [make_pick(5, "a")], pool)

        assert analytics.upside == 0
        assert analytics.floor == pytest.approx(3 / 8)

    def test_reach_and_steal_exclusive(self):
        """Test no pick is both a reach and a steal, and every steal is a value pick"""
        calculator = DraftAnalyticsCalculator()
        for overall in range(1, 200, 7):
            for adp in range(1, 300, 5):
                candidate = make_candidate("c", adp)
                pick = make_pick(overall, "c")
                assert not (calculator.is_reach(candidate, pick) and calculator.is_steal(candidate, pick))
                if calculator.is_steal(candidate, pick):
                    assert calculator.is_value_pick(candidate, pick)

    def test_overlapping_margins_rejected(self):
        """Test margins that let a pick be both reach and steal are rejected"""
        with pytest.raises(ValidationError) as exc_info:
            DraftAnalyticsCalculator(margins={"reach": -30, "steal": 20})
        assert "overlap" in str(exc_info.value)

    def test_steal_below_value_rejected(self):
        """Test a steal margin tighter than the value margin is rejected"""
        with pytest.raises(ValidationError) as exc_info:
            DraftAnalyticsCalculator(margins={"value": 25, "steal": 20})
        assert "at least the value margin" in str(exc_info.value)

    def test_invalid_composition_rejected(self):
        """Test an ideal roster with an empty slot or unknown position is rejected"""
        with pytest.raises(ValidationError) as exc_info:
            DraftAnalyticsCalculator(ideal_composition={"QB": 0, "RB": 2})
        assert "at least 1" in str(exc_info.value)

        with pytest.raises(ValidationError):
            DraftAnalyticsCalculator(ideal_composition={"LB": 2})

    def test_composition_positions_normalized(self):
        """Test lowercase and alias position codes are accepted"""
        calculator = DraftAnalyticsCalculator(ideal_composition={"qb": 1, "D/ST": 1})

        assert calculator.ideal_composition == {Position.QB: 1, Position.DST: 1}

    def test_to_dict(self, calculator, balanced_draft):
        """Test the grades serialize with position names"""
        pool, picks = balanced_draft
        data = calculator.calculate("t1", picks, {c.candidate_id: c for c in pool}).to_dict()

        assert data['position_drafted']['QB'] == 1
        assert data['efficiency_score'] == 100

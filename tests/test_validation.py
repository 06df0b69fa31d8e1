"""Tests for input validation"""
import pytest

from draft_engine.core.models import DraftStrategy, RiskTolerance
from draft_engine.utils.validation import InputValidator, ValidationError


class TestInputValidator:
    """Test input validation functionality"""

    def test_validate_team_count_valid(self):
        """Test valid team counts"""
        assert InputValidator.validate_team_count(10) == 10
        assert InputValidator.validate_team_count(12) == 12
        assert InputValidator.validate_team_count(32) == 32

    def test_validate_team_count_too_small(self):
        """Test team count too small"""
        with pytest.raises(ValidationError) as exc_info:
            InputValidator.validate_team_count(2)
        assert "at least 4" in str(exc_info.value)

    def test_validate_team_count_too_large(self):
        """Test team count too large"""
        with pytest.raises(ValidationError) as exc_info:
            InputValidator.validate_team_count(50)
        assert "cannot exceed 32" in str(exc_info.value)

    def test_validate_draft_slot(self):
        """Test draft slots must fall inside the order"""
        assert InputValidator.validate_draft_slot(1, 12) == 1
        assert InputValidator.validate_draft_slot(12, 12) == 12

        with pytest.raises(ValidationError):
            InputValidator.validate_draft_slot(0, 12)

        with pytest.raises(ValidationError):
            InputValidator.validate_draft_slot(13, 12)

    def test_validate_round(self):
        """Test round bounds"""
        assert InputValidator.validate_round(16) == 16

        with pytest.raises(ValidationError):
            InputValidator.validate_round(0)

        with pytest.raises(ValidationError):
            InputValidator.validate_round(31)

    def test_validate_adp_valid(self):
        """Test valid ADP values"""
        assert InputValidator.validate_adp(1) == 1.0
        assert InputValidator.validate_adp(25.5) == 25.5
        assert InputValidator.validate_adp("999") == 999.0

    def test_validate_adp_invalid(self):
        """Test invalid ADP values"""
        with pytest.raises(ValidationError):
            InputValidator.validate_adp(0)

        with pytest.raises(ValidationError):
            InputValidator.validate_adp(1000)

        with pytest.raises(ValidationError):
            InputValidator.validate_adp("not a number")

    def test_validate_position(self):
        """Test position codes are normalized"""
        assert InputValidator.validate_position("qb") == "QB"
        assert InputValidator.validate_position(" wr ") == "WR"
        assert InputValidator.validate_position("D/ST") == "DST"
        assert InputValidator.validate_position("DEF") == "DST"

        with pytest.raises(ValidationError) as exc_info:
            InputValidator.validate_position("FLEX")
        assert "Invalid position: FLEX" in str(exc_info.value)

    def test_validate_draft_pick_valid(self):
        """Test valid draft picks"""
        assert InputValidator.validate_draft_pick(1, 12) == 1
        assert InputValidator.validate_draft_pick(360, 12) == 360  # 30 rounds * 12 teams

    def test_validate_draft_pick_invalid(self):
        """Test invalid draft picks"""
        with pytest.raises(ValidationError):
            InputValidator.validate_draft_pick(0, 12)

        with pytest.raises(ValidationError):
            InputValidator.validate_draft_pick(500, 12)  # Too high for 12 teams

    def test_validate_roster_composition(self):
        """Test roster composition validation"""
        assert InputValidator.validate_roster_composition({"qb": 2, "D/ST": 1}) == {"QB": 2, "DST": 1}

        with pytest.raises(ValidationError):
            InputValidator.validate_roster_composition({})

        with pytest.raises(ValidationError):
            InputValidator.validate_roster_composition({"RB": 0})

    def test_validate_strategy(self):
        """Test strategy names map onto the enum"""
        assert InputValidator.validate_strategy("value_based") == DraftStrategy.VALUE_BASED
        assert InputValidator.validate_strategy("BALANCED") == DraftStrategy.BALANCED

        with pytest.raises(ValidationError) as exc_info:
            InputValidator.validate_strategy("yolo")
        assert "Invalid strategy" in str(exc_info.value)

    def test_validate_risk_tolerance(self):
        """Test risk tolerance names map onto the enum"""
        assert InputValidator.validate_risk_tolerance("low") == RiskTolerance.LOW

        with pytest.raises(ValidationError):
            InputValidator.validate_risk_tolerance("extreme")

    def test_validate_candidate_records_valid(self):
        """Test valid candidate records are normalized"""
        records = [
            {"id": "1", "name": "Bijan Robinson", "position": "rb", "team": "ATL", "adp": "1.5", "age": "23"},
            {"id": "2", "name": "Late Kicker", "position": "K", "team": "BAL", "adp": "", "age": None}
        ]

        validated = InputValidator.validate_candidate_records(records)
        assert validated[0]["position"] == "RB"
        assert validated[0]["adp"] == 1.5
        assert validated[0]["age"] == 23
        assert validated[1]["adp"] is None
        assert validated[1]["age"] is None

    def test_validate_candidate_records_missing_fields(self):
        """Test candidate records with missing required fields"""
        with pytest.raises(ValidationError) as exc_info:
            InputValidator.validate_candidate_records([{"id": "1", "name": "Player"}])
        assert "missing required field: position" in str(exc_info.value)

    def test_validate_candidate_records_duplicates(self):
        """Test candidate records with duplicate ids"""
        records = [
            {"id": "1", "name": "Player One", "position": "RB"},
            {"id": "1", "name": "Player Two", "position": "WR"}
        ]

        with pytest.raises(ValidationError) as exc_info:
            InputValidator.validate_candidate_records(records)
        assert "Duplicate candidate id" in str(exc_info.value)

    def test_validate_candidate_records_bad_age(self):
        """Test non-numeric ages are rejected"""
        with pytest.raises(ValidationError):
            InputValidator.validate_candidate_records(
                [{"id": "1", "name": "Player", "position": "QB", "age": "old"}]
            )

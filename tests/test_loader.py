"""Tests for loading draft data files"""
import json

import pytest

from draft_engine.core.keepers import KeeperCostModel, KeeperLeagueConfig
from draft_engine.core.models import UNRANKED_ADP, Position
from draft_engine.data.loader import load_candidates, load_draft_picks, load_keepers, load_roster
from draft_engine.utils.validation import ValidationError


CANDIDATES_CSV = """id,name,position,team,rank,adp,age,injury_prone
1,Bijan Robinson,RB,atl,1,1.5,23,no
2,Josh Allen,QB,BUF,20,20,29,
3,Deep Sleeper,WR,,,,,yes
4,Ravens,D/ST,BAL,,140,,
"""


@pytest.fixture
def candidates_csv(tmp_path):
    path = tmp_path / "candidates.csv"
    path.write_text(CANDIDATES_CSV)
    return path


class TestLoadCandidates:
    """Test candidate pool loading"""

    def test_load_csv(self, candidates_csv):
        """Test CSV rows become validated candidates"""
        pool = load_candidates(candidates_csv)

        assert [c.candidate_id for c in pool] == ["1", "2", "3", "4"]
        assert pool[0].team == "ATL"
        assert pool[0].adp == 1.5
        assert pool[0].age == 23
        assert pool[0].rank == 1
        assert pool[0].injury_prone is False

    def test_missing_values_use_sentinels(self, candidates_csv):
        """Test missing ADP and team fall back to their defaults"""
        sleeper = load_candidates(candidates_csv)[2]

        assert sleeper.adp == UNRANKED_ADP
        assert not sleeper.is_ranked
        assert sleeper.age is None
        assert sleeper.team == "FA"
        assert sleeper.injury_prone is True

    def test_position_aliases(self, candidates_csv):
        """Test defense aliases load as DST"""
        assert load_candidates(candidates_csv)[3].position == Position.DST

    def test_load_json(self, tmp_path):
        """Test JSON files with a candidates key"""
        path = tmp_path / "candidates.json"
        path.write_text(json.dumps({"candidates": [
            {"id": 7, "name": "Travis Kelce", "position": "TE", "team": "KC", "adp": 30, "age": 35,
             "injury_prone": True}
        ]}))

        pool = load_candidates(path)
        assert pool[0].candidate_id == "7"
        assert pool[0].injury_prone is True

    def test_missing_file(self, tmp_path):
        """Test a missing file is a validation error"""
        with pytest.raises(ValidationError) as exc_info:
            load_candidates(tmp_path / "nope.csv")
        assert "File not found" in str(exc_info.value)

    def test_unsupported_format(self, tmp_path):
        """Test only CSV and JSON are accepted"""
        path = tmp_path / "candidates.xlsx"
        path.write_text("")

        with pytest.raises(ValidationError):
            load_candidates(path)

    def test_invalid_json(self, tmp_path):
        """Test malformed JSON is a validation error"""
        path = tmp_path / "candidates.json"
        path.write_text("{not json")

        with pytest.raises(ValidationError):
            load_candidates(path)


class TestLoadRelatedFiles:
    """Test rosters, keepers and draft picks"""

    @pytest.fixture
    def pool(self, candidates_csv):
        return load_candidates(candidates_csv)

    def test_load_roster(self, tmp_path, pool):
        """Test roster ids resolve against the pool"""
        path = tmp_path / "roster.json"
        path.write_text(json.dumps(["2", {"id": "1"}]))

        assert [c.name for c in load_roster(path, pool)] == ["Josh Allen", "Bijan Robinson"]

    def test_roster_unknown_id(self, tmp_path, pool):
        """Test unknown roster ids are rejected"""
        path = tmp_path / "roster.json"
        path.write_text(json.dumps(["99"]))

        with pytest.raises(ValidationError) as exc_info:
            load_roster(path, pool)
        assert "Unknown candidate id" in str(exc_info.value)

    def test_load_keepers(self, tmp_path, pool):
        """Test keeper costs are inflated by years kept"""
        path = tmp_path / "keepers.csv"
        path.write_text("id,cost,value,years_kept,eligible\n1,30,55,2,\n2,10,12,,no\n")

        keepers = load_keepers(path, pool, KeeperLeagueConfig(max_keepers=2, keeper_inflation=5))

        assert keepers[0].keeper_cost == 40
        assert keepers[0].keeper_value == 55
        assert keepers[0].is_eligible is True
        assert keepers[1].years_kept == 0
        assert keepers[1].is_eligible is False

    def test_load_keepers_priced_by_draft_round(self, tmp_path, pool):
        """Test draft round keepers are priced from the round they were drafted in"""
        path = tmp_path / "keepers.csv"
        path.write_text("id,cost,value,original_draft_round\n1,0,55,7\n")
        config = KeeperLeagueConfig(max_keepers=2, cost_model=KeeperCostModel.DRAFT_ROUND,
                                    keeper_cost_increase=1)

        keepers = load_keepers(path, pool, config)

        assert keepers[0].original_draft_round == 7
        assert keepers[0].keeper_cost == 6

    def test_load_draft_picks(self, tmp_path):
        """Test picks load with optional candidates"""
        path = tmp_path / "picks.csv"
        path.write_text("overall,round,pick,team_id,candidate_id\n1,1,1,t1,1\n2,1,2,t2,\n")

        picks = load_draft_picks(path)
        assert picks[0].candidate_id == "1"
        assert picks[0].is_made
        assert not picks[1].is_made

    def test_draft_pick_needs_team(self, tmp_path):
        """Test picks without a team are rejected"""
        path = tmp_path / "picks.json"
        path.write_text(json.dumps({"picks": [{"overall": 1}]}))

        with pytest.raises(ValidationError):
            load_draft_picks(path)

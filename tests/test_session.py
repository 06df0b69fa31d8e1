"""Tests for draft sessions and their tier snapshot cache"""
import asyncio

import pytest

from draft_engine.core.advisor import RosterNeedAdvisor, TeamContext
from draft_engine.core.keepers import KeeperCandidate, KeeperLeagueConfig
from draft_engine.core.models import AutoDraftConfig, Candidate, DraftPick, Position, TimeoutAction
from draft_engine.core.session import DraftSession
from draft_engine.core.snapshot import SnapshotCache, pool_key
from draft_engine.utils.validation import ValidationError


def make_pool():
    return [
        Candidate("rb1", "Running Back One", Position.RB, "SF", rank=1, adp=1, age=27),
        Candidate("wr1", "Receiver One", Position.WR, "CIN", rank=2, adp=3, age=25),
        Candidate("rb2", "Running Back Two", Position.RB, "NYG", rank=3, adp=6, age=24),
        Candidate("qb1", "Quarterback One", Position.QB, "BAL", rank=4, adp=30, age=28),
        Candidate("te1", "Tight End One", Position.TE, "DET", rank=5, adp=45, age=26)
    ]


class TestSnapshotCache:
    """Test the per-session tier snapshot"""

    @pytest.fixture
    def cache(self):
        return SnapshotCache()

    def test_reuses_snapshot_for_same_pool(self, cache):
        """Test an unchanged pool hits the cache"""
        pool = make_pool()
        first = cache.get(pool)
        second = cache.get(list(reversed(pool)))

        assert first is second
        assert cache.stats.get_stats()['hits'] == 1
        assert cache.stats.get_stats()['misses'] == 1

    def test_rebuilds_when_pool_changes(self, cache):
        """Test removing a candidate rebuilds the snapshot"""
        pool = make_pool()
        first = cache.get(pool)
        second = cache.get(pool[1:])

        assert first is not second
        assert first.key != second.key
        assert cache.stats.get_stats()['misses'] == 2

    def test_adp_change_changes_key(self):
        """Test the pool key tracks ADP as well as membership"""
        pool = make_pool()
        moved = [Candidate("rb1", "Running Back One", Position.RB, "SF", adp=2)] + pool[1:]

        assert pool_key(pool) != pool_key(moved)

    def test_invalidate(self, cache):
        """Test invalidation drops the snapshot"""
        cache.get(make_pool())
        cache.invalidate()

        assert cache.current is None
        assert cache.stats.get_stats()['invalidations'] == 1

    def test_caches_are_independent(self):
        """Test two caches never share snapshots"""
        a, b = SnapshotCache(), SnapshotCache()
        a.get(make_pool())

        assert b.current is None


class TestDraftSession:
    """Test a draft session end to end"""

    @pytest.fixture
    def session(self):
        return DraftSession(make_pool(), {"teams": 4, "draft_rounds": 2})

    def test_mark_drafted(self, session):
        """Test a pick removes the candidate and invalidates tiers"""
        before = session.tiers()
        pick = session.mark_drafted("rb1", "t1")

        assert pick.overall == 1
        assert pick.round == 1
        assert "rb1" not in [c.candidate_id for c in session.available]
        assert session.snapshot_cache.current is None
        assert session.tiers() is not before
        assert session.current_pick == 2

    def test_rounds_advance(self, session):
        """Test pick numbering wraps into the next round"""
        for candidate_id, team in (("rb1", "t1"), ("wr1", "t2"), ("rb2", "t3"), ("qb1", "t4")):
            session.mark_drafted(candidate_id, team)
        pick = session.mark_drafted("te1", "t4")

        assert pick.overall == 5
        assert pick.round == 2
        assert pick.pick == 1

    def test_cannot_draft_twice(self, session):
        """Test drafting a taken candidate is rejected"""
        session.mark_drafted("rb1", "t1")

        with pytest.raises(ValidationError) as exc_info:
            session.mark_drafted("rb1", "t2")
        assert "already been drafted" in str(exc_info.value)

    def test_unknown_candidate(self, session):
        """Test drafting an unknown id is rejected"""
        with pytest.raises(ValidationError):
            session.mark_drafted("nobody", "t1")

    def test_record_picks(self, session):
        """Test replaying picks, including a skipped one"""
        session.record_picks([
            DraftPick(overall=2, round=1, pick=2, team_id="t2"),
            DraftPick(overall=1, round=1, pick=1, team_id="t1", candidate_id="wr1")
        ])

        assert session.current_pick == 3
        assert session.roster("t1")[0].candidate_id == "wr1"
        assert session.roster("t2") == []

    def test_recommend_uses_roster(self, session):
        """Test recommendations never include drafted candidates"""
        session.mark_drafted("rb1", "t1")
        recs = session.recommend("t1", AutoDraftConfig())

        ids = [r.candidate.candidate_id for r in recs]
        assert "rb1" not in ids
        assert ids[0] == "wr1"

    def test_recommend_explicit_pick(self, session):
        """Test an explicit pick number is validated"""
        with pytest.raises(ValidationError):
            session.recommend("t1", AutoDraftConfig(), current_pick=0)

    def test_select_pick_with_advisor(self, session):
        """Test the advisor sees the team's roster from the session"""
        session.mark_drafted("rb1", "t1")
        session.mark_drafted("qb1", "t1")
        chosen = asyncio.run(session.select_pick(TeamContext("t1"), AutoDraftConfig(), RosterNeedAdvisor()))

        assert chosen.candidate.position in (Position.WR, Position.TE, Position.RB)
        assert chosen.candidate.candidate_id != "rb1"

    def test_select_pick_skip(self, session):
        """Test the skip timeout action makes no pick"""
        config = AutoDraftConfig(timeout_action=TimeoutAction.SKIP_PICK)

        assert asyncio.run(session.select_pick(TeamContext("t1"), config)) is None

    def test_snake_analysis(self, session):
        """Test snake analysis uses the session's league size"""
        analysis = session.snake_analysis(2, 2)

        assert analysis.turn_analysis.pick_number == 7
        assert analysis.turn_analysis.next_pick_in == 3

        with pytest.raises(ValidationError):
            session.snake_analysis(5, 1)

    def test_select_keepers(self, session):
        """Test keeper selection through the session"""
        keepers = [KeeperCandidate(candidate=c, keeper_cost=10, keeper_value=50 - i)
                   for i, c in enumerate(session.pool[:3])]
        selection = session.select_keepers(keepers, KeeperLeagueConfig(max_keepers=2))

        assert [k.candidate.candidate_id for k in selection.recommended] == ["rb1", "wr1"]

    def test_grade(self, session):
        """Test grading the session's own picks"""
        session.mark_drafted("rb1", "t1")
        session.mark_drafted("qb1", "t2")
        analytics = session.grade("t2")

        assert analytics.position_drafted[Position.QB] == 1
        assert [p.candidate_id for p in analytics.steals] == ["qb1"]
        assert analytics.reaches == []
        assert analytics.efficiency_score == 72

    def test_invalid_league(self):
        """Test league settings are validated"""
        with pytest.raises(ValidationError):
            DraftSession(make_pool(), {"teams": 2})

    def test_snake_dropoffs_ignore_drafted(self):
        """Test drafted tier-mates no longer count toward the tier break"""
        pool = [Candidate(f"rb{adp}", f"Back {adp}", Position.RB, "SF", adp=adp)
                for adp in (1, 3, 5, 6, 8, 9, 40)]
        session = DraftSession(pool, {"teams": 4, "draft_rounds": 2})
        for candidate_id in ("rb1", "rb3", "rb5", "rb6", "rb8"):
            session.mark_drafted(candidate_id, "t1")

        dropoffs = {d.position: d for d in session.snake_analysis(1, 2).value_dropoffs}

        assert dropoffs[Position.RB].players_until_drop == 1
        assert dropoffs[Position.RB].next_tier_drop == 31


class TestAutoDraft:
    """Test drafting a whole league automatically"""

    @pytest.fixture
    def session(self):
        pool = [Candidate(f"p{i}", f"Player {i}", pos, "FA", rank=i, adp=i)
                for i, pos in enumerate([Position.RB, Position.WR, Position.QB, Position.TE] * 4, 1)]
        return DraftSession(pool, {"teams": 4, "draft_rounds": 3})

    def test_drafts_every_pick_once(self, session):
        """Test every slot picks each round and nobody is drafted twice"""
        picks = asyncio.run(session.auto_draft(["a", "b", "c", "d"]))

        assert len(picks) == 12
        assert [p.overall for p in picks] == list(range(1, 13))
        drafted = [p.candidate_id for p in picks]
        assert len(set(drafted)) == 12

    def test_follows_snake_order(self, session):
        """Test the order reverses every round"""
        picks = asyncio.run(session.auto_draft(["a", "b", "c", "d"]))

        assert [p.team_id for p in picks[:8]] == ["a", "b", "c", "d", "d", "c", "b", "a"]

    def test_per_team_timeout_action(self, session):
        """Test a team set to skip forfeits its picks"""
        configs = {"b": AutoDraftConfig(timeout_action=TimeoutAction.SKIP_PICK)}
        picks = asyncio.run(session.auto_draft(["a", "b", "c", "d"], configs, round_limit=2))

        assert len(picks) == 8
        assert all(not p.is_made for p in picks if p.team_id == "b")
        assert session.roster("b") == []
        assert len(session.roster("a")) == 2

    def test_resumes_after_existing_picks(self, session):
        """Test picks already made are kept"""
        session.mark_drafted("p1", "a")
        picks = asyncio.run(session.auto_draft(["a", "b", "c", "d"], round_limit=1))

        assert [p.team_id for p in picks] == ["b", "c", "d"]
        assert "p1" not in [p.candidate_id for p in picks]

    def test_wrong_team_count(self, session):
        """Test the draft order must cover every slot"""
        with pytest.raises(ValidationError):
            asyncio.run(session.auto_draft(["a", "b"]))

"""One draft: the candidate pool, its tier snapshot and the engines that read it"""
import logging
from typing import Dict, List, Optional, Sequence

from draft_engine.core.advisor import TeamContext, TieBreakAdvisor
from draft_engine.core.analytics import DraftAnalytics, DraftAnalyticsCalculator
from draft_engine.core.keepers import KeeperCandidate, KeeperLeagueConfig, KeeperSelection, KeeperSelector
from draft_engine.core.models import AutoDraftConfig, Candidate, DraftPick, Position
from draft_engine.core.pick_values import PickValueTable
from draft_engine.core.recommendations import Recommendation, RecommendationEngine
from draft_engine.core.snake import SnakeDraftAnalysis, SnakeDraftMath
from draft_engine.core.snapshot import SnapshotCache
from draft_engine.core.tiers import Tier, TierBuilder
from draft_engine.utils.validation import InputValidator, ValidationError
from config import DEFAULT_SETTINGS, ADVISOR_TIMEOUT_SECONDS


logger = logging.getLogger(__name__)


class DraftSession:
    """State for a single draft

    Each session owns its own snapshot cache, so tiers computed for one draft
    are never seen by another.
    """

    def __init__(self, pool: Sequence[Candidate], league_settings: Optional[Dict] = None,
                 tier_thresholds: Optional[Dict[str, float]] = None):
        self.settings = dict(DEFAULT_SETTINGS)
        if league_settings:
            self.settings.update(league_settings)

        self.teams = InputValidator.validate_team_count(self.settings['teams'])
        self.rounds = InputValidator.validate_round(self.settings['draft_rounds'])

        self.pool: List[Candidate] = list(pool)
        self._by_id: Dict[str, Candidate] = {c.candidate_id: c for c in self.pool}
        self.picks: List[DraftPick] = []

        self.tier_builder = TierBuilder(tier_thresholds)
        self.snapshot_cache = SnapshotCache(self.tier_builder)
        self.pick_values = PickValueTable()
        self.snake = SnakeDraftMath(self.pick_values)
        self.engine = RecommendationEngine(self.settings, self.snapshot_cache)

    @property
    def available(self) -> List[Candidate]:
        """Candidates not yet drafted"""
        taken = {p.candidate_id for p in self.picks if p.is_made}
        return [c for c in self.pool if c.candidate_id not in taken]

    @property
    def current_pick(self) -> int:
        return len(self.picks) + 1

    def candidate(self, candidate_id: str) -> Candidate:
        try:
            return self._by_id[candidate_id]
        except KeyError:
            raise ValidationError(f"Unknown candidate: {candidate_id}")

    def tiers(self) -> Dict[Position, List[Tier]]:
        """Tiers of the remaining pool"""
        return self.snapshot_cache.get(self.available).tiers

    def roster(self, team_id: str) -> List[Candidate]:
        return [self._by_id[p.candidate_id] for p in self.picks
                if p.team_id == team_id and p.is_made]

    def mark_drafted(self, candidate_id: str, team_id: str) -> DraftPick:
        """Record the next pick and drop the stale tier snapshot"""
        candidate = self.candidate(candidate_id)
        if any(p.candidate_id == candidate_id for p in self.picks):
            raise ValidationError(f"{candidate.name} has already been drafted")

        overall = self.current_pick
        pick = DraftPick(
            overall=overall,
            round=(overall - 1) // self.teams + 1,
            pick=(overall - 1) % self.teams + 1,
            team_id=team_id,
            candidate_id=candidate_id
        )
        self.picks.append(pick)
        self.snapshot_cache.invalidate()

        logger.info(f"Pick {overall}: {team_id} took {candidate}")
        return pick

    def skip_pick(self, team_id: str) -> DraftPick:
        """Record a pick that was forfeited"""
        overall = self.current_pick
        pick = DraftPick(
            overall=overall,
            round=(overall - 1) // self.teams + 1,
            pick=(overall - 1) % self.teams + 1,
            team_id=team_id
        )
        self.picks.append(pick)
        logger.info(f"Pick {overall}: {team_id} skipped")
        return pick

    def record_picks(self, picks: Sequence[DraftPick]) -> None:
        """Replay picks already made, in overall order"""
        for pick in sorted(picks, key=lambda p: p.overall):
            if pick.is_made:
                self.mark_drafted(pick.candidate_id, pick.team_id)
            else:
                self.skip_pick(pick.team_id)

    def recommend(self, team_id: str, config: AutoDraftConfig,
                  roster: Optional[Sequence[Candidate]] = None,
                  current_pick: Optional[int] = None) -> List[Recommendation]:
        """Recommendations for the pick on the clock, or for an explicit pick number"""
        if roster is None:
            roster = self.roster(team_id)
        pick = self.resolve_pick(current_pick)
        return self.engine.get_recommendations(self.available, roster, pick, self.rounds, config)

    async def select_pick(self, team: TeamContext, config: AutoDraftConfig,
                          advisor: Optional[TieBreakAdvisor] = None,
                          timeout: float = ADVISOR_TIMEOUT_SECONDS,
                          current_pick: Optional[int] = None) -> Optional[Recommendation]:
        """Automated pick for the team on the clock, honouring its timeout action"""
        if not team.roster:
            team = TeamContext(team.team_id, team.name, tuple(self.roster(team.team_id)))

        return await self.engine.resolve_timeout(
            team, self.available, self.resolve_pick(current_pick), self.rounds, config, advisor, timeout
        )

    def resolve_pick(self, current_pick: Optional[int]) -> int:
        if current_pick is None:
            return self.current_pick
        return InputValidator.validate_draft_pick(current_pick, self.teams)

    def snake_analysis(self, slot: int, round_number: int) -> SnakeDraftAnalysis:
        InputValidator.validate_draft_slot(slot, self.teams)
        InputValidator.validate_round(round_number)

        return self.snake.analyze(slot, self.teams, round_number, self.tiers())

    def snake_order(self, round_number: int) -> List[int]:
        """Draft slots in the order they pick in a round"""
        return sorted(range(1, self.teams + 1),
                      key=lambda slot: self.snake.pick_number(slot, round_number, self.teams))

    async def auto_draft(self, team_ids: Sequence[str],
                         configs: Optional[Dict[str, AutoDraftConfig]] = None,
                         advisor: Optional[TieBreakAdvisor] = None,
                         timeout: float = ADVISOR_TIMEOUT_SECONDS,
                         round_limit: Optional[int] = None) -> List[DraftPick]:
        """
        Draft for every team, in snake order, until the round limit

        team_ids lists the teams by draft slot. Each team picks with its own
        config (or the default one) and its timeout action. Picks already in
        the session are kept and the draft resumes from the pick on the clock.
        """
        if len(team_ids) != self.teams:
            raise ValidationError(f"Expected {self.teams} teams in draft order, got {len(team_ids)}")
        if len(set(team_ids)) != len(team_ids):
            raise ValidationError("Team ids in the draft order must be unique")

        last_round = self.rounds
        if round_limit is not None:
            last_round = min(InputValidator.validate_round(round_limit), self.rounds)
        configs = configs or {}
        made = []

        logger.info(f"Auto-drafting {self.teams} teams through round {last_round}")

        for round_number in range(1, last_round + 1):
            for slot in self.snake_order(round_number):
                overall = self.snake.pick_number(slot, round_number, self.teams)
                if overall < self.current_pick:
                    continue

                team_id = team_ids[slot - 1]
                config = configs.get(team_id) or AutoDraftConfig()
                chosen = await self.select_pick(TeamContext(team_id), config, advisor, timeout)

                if chosen is None:
                    made.append(self.skip_pick(team_id))
                else:
                    made.append(self.mark_drafted(chosen.candidate.candidate_id, team_id))

        return made

    @staticmethod
    def select_keepers(keepers: List[KeeperCandidate], config: KeeperLeagueConfig) -> KeeperSelection:
        return KeeperSelector(config).select(keepers)

    def grade(self, team_id: str, calculator: Optional[DraftAnalyticsCalculator] = None) -> DraftAnalytics:
        """Grade a team's picks in this session"""
        calculator = calculator or DraftAnalyticsCalculator()
        return calculator.calculate(team_id, self.picks, self._by_id)

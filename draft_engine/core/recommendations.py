"""Pick recommendations from five competing draft heuristics"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

from draft_engine.core.advisor import TeamContext, TieBreakAdvisor, consult_advisor, match_choice
from draft_engine.core.models import (
    ASSUMED_AGE, AutoDraftConfig, Candidate, DraftStrategy, Position,
    RecommendationType, RiskTolerance, RosterNeed, TimeoutAction
)
from draft_engine.core.snapshot import SnapshotCache, TierSnapshot
from draft_engine.core.tiers import TierInfo, tier_info_for
from draft_engine.utils.monitoring import measure_performance
from config import DEFAULT_SETTINGS, ADVISOR_TIMEOUT_SECONDS


logger = logging.getLogger(__name__)

# How much each strategy trusts each heuristic
STRATEGY_WEIGHTS: Dict[DraftStrategy, Dict[RecommendationType, float]] = {
    DraftStrategy.BPA: {
        RecommendationType.BPA: 1.0, RecommendationType.NEED: 0.7, RecommendationType.VALUE: 0.8,
        RecommendationType.UPSIDE: 0.6, RecommendationType.SAFE: 0.8
    },
    DraftStrategy.POSITIONAL_NEED: {
        RecommendationType.BPA: 0.7, RecommendationType.NEED: 1.0, RecommendationType.VALUE: 0.6,
        RecommendationType.UPSIDE: 0.5, RecommendationType.SAFE: 0.9
    },
    DraftStrategy.VALUE_BASED: {
        RecommendationType.BPA: 0.8, RecommendationType.NEED: 0.6, RecommendationType.VALUE: 1.0,
        RecommendationType.UPSIDE: 0.9, RecommendationType.SAFE: 0.7
    },
    DraftStrategy.CONSERVATIVE: {
        RecommendationType.BPA: 0.9, RecommendationType.NEED: 0.8, RecommendationType.VALUE: 0.7,
        RecommendationType.UPSIDE: 0.3, RecommendationType.SAFE: 1.0
    },
    DraftStrategy.AGGRESSIVE: {
        RecommendationType.BPA: 0.7, RecommendationType.NEED: 0.5, RecommendationType.VALUE: 0.9,
        RecommendationType.UPSIDE: 1.0, RecommendationType.SAFE: 0.4
    }
}
NEUTRAL_WEIGHT = 0.5

CONFIDENCE = {
    RecommendationType.BPA: 0.9,
    RecommendationType.NEED: 0.8,
    RecommendationType.VALUE: 0.85,
    RecommendationType.UPSIDE: 0.7,
    RecommendationType.SAFE: 0.9
}
FALLBACK_CONFIDENCE = 0.8

VALUE_MIN_SLIDE = 5
UPSIDE_AGE_CEILING = {RiskTolerance.LOW: 27, RiskTolerance.MEDIUM: 29}
PRIME_AGES = (24, 30)
MAX_RECOMMENDATIONS = 5
ADVISOR_SHORTLIST = 3


def strategy_weight(rec_type: RecommendationType, strategy: Union[DraftStrategy, str, None]) -> float:
    """Weight of a heuristic under a strategy; unknown strategies are neutral"""
    if not isinstance(strategy, DraftStrategy):
        try:
            strategy = DraftStrategy(str(strategy).upper())
        except ValueError:
            return NEUTRAL_WEIGHT
    return STRATEGY_WEIGHTS.get(strategy, {}).get(rec_type, NEUTRAL_WEIGHT)


def _format_adp(candidate: Candidate) -> str:
    return f"{candidate.adp:g}" if candidate.is_ranked else "unranked"


@dataclass
class Recommendation:
    """One suggested pick and why"""
    candidate: Candidate
    confidence: float
    reasoning: str
    type: RecommendationType
    value_vs_adp: float
    position_rank: int
    tier_info: TierInfo

    def score(self, strategy: Union[DraftStrategy, str, None]) -> float:
        return strategy_weight(self.type, strategy) * self.confidence

    def to_dict(self) -> Dict:
        return {
            'candidate': self.candidate.to_dict(),
            'confidence': self.confidence,
            'reasoning': self.reasoning,
            'type': self.type.value,
            'value_vs_adp': self.value_vs_adp,
            'position_rank': self.position_rank,
            'tier_info': self.tier_info.to_dict()
        }


class RecommendationEngine:
    """Score the available pool for one team's pick"""

    def __init__(self, league_settings: Optional[Dict] = None,
                 snapshot_cache: Optional[SnapshotCache] = None):
        self.settings = league_settings or DEFAULT_SETTINGS
        self.num_teams = self.settings.get("teams", DEFAULT_SETTINGS["teams"])
        self.snapshot_cache = snapshot_cache or SnapshotCache()

    def remaining_picks(self, current_pick: int, total_rounds: int) -> int:
        """Picks this team still has, counting the current one"""
        rounds_done = (current_pick - 1) // self.num_teams
        return max(1, total_rounds - rounds_done)

    def analyze_roster_needs(self, roster: Sequence[Candidate],
                             target: Dict[Position, int],
                             remaining_picks: int) -> List[RosterNeed]:
        """Positions still short of the target, most urgent first"""
        counts: Dict[Position, int] = {}
        for candidate in roster:
            counts[candidate.position] = counts.get(candidate.position, 0) + 1

        needs = []
        for position, wanted in target.items():
            current = counts.get(position, 0)
            needed = max(0, wanted - current)
            if needed > 0:
                # Bigger gaps and fewer picks left make a need more urgent
                priority = (needed / wanted) * (1 + (wanted - current) / remaining_picks)
                needs.append(RosterNeed(position=position, needed=needed, priority=priority))

        needs.sort(key=lambda n: n.priority, reverse=True)
        return needs

    @measure_performance("get_recommendations")
    def get_recommendations(self, available: List[Candidate], roster: Sequence[Candidate],
                            current_pick: int, total_rounds: int,
                            config: AutoDraftConfig) -> List[Recommendation]:
        """
        Ranked pick recommendations for the current pick

        Args:
            available: Candidates still on the board
            roster: Candidates the team already drafted
            current_pick: Overall pick number being made
            total_rounds: Rounds in the draft
            config: Team's auto-draft preferences

        Returns:
            Up to five recommendations with distinct candidates, best first
        """
        if not available:
            return []

        snapshot = self.snapshot_cache.get(available)
        needs = self.analyze_roster_needs(
            roster, config.target_roster, self.remaining_picks(current_pick, total_rounds)
        )

        generated = [
            self.best_player_available(available, snapshot),
            self.best_by_need(available, needs, snapshot),
            self.best_value(available, current_pick, snapshot),
            self.best_upside(available, config.risk_tolerance, snapshot),
            self.safest_pick(available, config.avoid_injury_prone, config.prefer_veterans, snapshot)
        ]

        merged: List[Recommendation] = []
        seen = set()
        for rec in generated:
            if rec is None or rec.candidate.candidate_id in seen:
                continue
            seen.add(rec.candidate.candidate_id)
            merged.append(rec)

        merged.sort(key=lambda r: r.score(config.strategy), reverse=True)
        logger.debug(f"Pick {current_pick}: {len(merged)} distinct recommendations "
                     f"({', '.join(r.type.value for r in merged)})")
        return merged[:MAX_RECOMMENDATIONS]

    def best_player_available(self, available: List[Candidate],
                              snapshot: TierSnapshot) -> Optional[Recommendation]:
        if not available:
            return None

        best = min(available, key=lambda c: c.adp)
        return self._recommend(
            best, RecommendationType.BPA,
            f"Highest ranked available player (ADP: {_format_adp(best)})",
            available, snapshot
        )

    def best_by_need(self, available: List[Candidate], needs: List[RosterNeed],
                     snapshot: TierSnapshot) -> Optional[Recommendation]:
        if not needs:
            return None

        top_need = needs[0]
        at_position = [c for c in available if c.position == top_need.position]
        if not at_position:
            return None

        best = min(at_position, key=lambda c: c.adp)
        return self._recommend(
            best, RecommendationType.NEED,
            f"Addresses top roster need ({top_need.position.value}) with {top_need.needed} slots needed",
            available, snapshot
        )

    def best_value(self, available: List[Candidate], current_pick: int,
                   snapshot: TierSnapshot) -> Optional[Recommendation]:
        # Unranked candidates have no market price to slide past
        sliding = [
            c for c in available
            if c.is_ranked and c.adp > current_pick + VALUE_MIN_SLIDE
        ]
        if not sliding:
            return None

        best = max(sliding, key=lambda c: c.adp - current_pick)
        slide = best.adp - current_pick
        return self._recommend(
            best, RecommendationType.VALUE,
            f"Excellent value - ADP {_format_adp(best)} at pick {current_pick} (+{slide:g})",
            available, snapshot, value_vs_adp=slide
        )

    def best_upside(self, available: List[Candidate], risk_tolerance: RiskTolerance,
                    snapshot: TierSnapshot) -> Optional[Recommendation]:
        ceiling = UPSIDE_AGE_CEILING.get(risk_tolerance)
        pool = [
            c for c in available
            if ceiling is None or _age(c) <= ceiling
        ]
        if not pool:
            return None

        best = max(pool, key=lambda c: (1000 - c.adp) + (ASSUMED_AGE - _age(c)) * 10)
        age = best.age if best.age is not None else "unknown"
        return self._recommend(
            best, RecommendationType.UPSIDE,
            f"High upside pick - Age {age}, favorable situation",
            available, snapshot
        )

    def safest_pick(self, available: List[Candidate], avoid_injury_prone: bool,
                    prefer_veterans: bool, snapshot: TierSnapshot) -> Optional[Recommendation]:
        pool = [c for c in available if not (avoid_injury_prone and c.injury_prone)]
        if not pool:
            return None

        youngest, oldest = PRIME_AGES
        prime = [c for c in pool if youngest <= _age(c) <= oldest]

        # Veterans only break ADP ties
        best = min(prime or pool, key=lambda c: (c.adp, -_age(c) if prefer_veterans else 0))
        return self._recommend(
            best, RecommendationType.SAFE,
            "Safe pick - Proven production, minimal injury risk",
            available, snapshot
        )

    def fallback_pick(self, available: List[Candidate]) -> Optional[Recommendation]:
        """Lowest-ADP candidate, used when nothing better can be produced"""
        if not available:
            return None

        best = min(available, key=lambda c: c.adp)
        snapshot = self.snapshot_cache.get(available)
        return Recommendation(
            candidate=best,
            confidence=FALLBACK_CONFIDENCE,
            reasoning="Fallback: Best available player by ADP",
            type=RecommendationType.BPA,
            value_vs_adp=0,
            position_rank=_position_rank(best, available),
            tier_info=tier_info_for(best, snapshot.tiers)
        )

    async def select_pick(self, team: TeamContext, available: List[Candidate],
                          current_pick: int, total_rounds: int, config: AutoDraftConfig,
                          advisor: Optional[TieBreakAdvisor] = None,
                          timeout: float = ADVISOR_TIMEOUT_SECONDS) -> Optional[Recommendation]:
        """
        Choose the pick to make automatically

        The top recommendations go to the advisor, if any. An advisor that
        declines, fails or times out leaves the top recommendation in place.
        """
        recommendations = self.get_recommendations(
            available, team.roster, current_pick, total_rounds, config
        )

        if not recommendations:
            logger.info(f"No recommendations for {team.team_id} at pick {current_pick}; using fallback")
            return self.fallback_pick(available)

        if advisor is None:
            return recommendations[0]

        shortlist = recommendations[:ADVISOR_SHORTLIST]
        result = await consult_advisor(advisor, team, [r.candidate for r in shortlist], timeout)

        if result.ok:
            chosen = match_choice(result.choice, [r.candidate for r in shortlist])
            if chosen is not None:
                logger.info(f"Advisor '{advisor.name}' chose {chosen.name} for {team.team_id}")
                return next(r for r in shortlist if r.candidate.candidate_id == chosen.candidate_id)
        else:
            logger.info(f"Advisor '{advisor.name}' declined: {result.error}")

        return recommendations[0]

    async def resolve_timeout(self, team: TeamContext, available: List[Candidate],
                              current_pick: int, total_rounds: int, config: AutoDraftConfig,
                              advisor: Optional[TieBreakAdvisor] = None,
                              timeout: float = ADVISOR_TIMEOUT_SECONDS) -> Optional[Recommendation]:
        """Apply the team's timeout action when its pick clock expires"""
        if config.timeout_action == TimeoutAction.SKIP_PICK:
            logger.info(f"{team.team_id} skips pick {current_pick}")
            return None

        if config.timeout_action == TimeoutAction.BEST_AVAILABLE:
            return self.fallback_pick(available)

        return await self.select_pick(
            team, available, current_pick, total_rounds, config, advisor, timeout
        )

    def _recommend(self, candidate: Candidate, rec_type: RecommendationType, reasoning: str,
                   available: List[Candidate], snapshot: TierSnapshot,
                   value_vs_adp: float = 0) -> Recommendation:
        return Recommendation(
            candidate=candidate,
            confidence=CONFIDENCE[rec_type],
            reasoning=reasoning,
            type=rec_type,
            value_vs_adp=value_vs_adp,
            position_rank=_position_rank(candidate, available),
            tier_info=tier_info_for(candidate, snapshot.tiers)
        )


def _age(candidate: Candidate) -> int:
    return candidate.age if candidate.age is not None else ASSUMED_AGE


def _position_rank(candidate: Candidate, available: List[Candidate]) -> int:
    """1-based ADP rank among available candidates at the same position"""
    same_position = sorted(
        (c for c in available if c.position == candidate.position),
        key=lambda c: c.adp
    )
    for rank, other in enumerate(same_position, 1):
        if other.candidate_id == candidate.candidate_id:
            return rank
    return 0

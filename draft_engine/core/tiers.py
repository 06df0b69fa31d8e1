"""ADP-gap tiering of candidate pools"""
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from draft_engine.core.models import Candidate, Position
from config import TIER_THRESHOLDS, DEFAULT_TIER_THRESHOLD


logger = logging.getLogger(__name__)

# Tier reported for a candidate missing from the tier snapshot
UNTIERED = 99

Tier = List[Candidate]


@dataclass(frozen=True)
class TierInfo:
    """Where a candidate sits within its position's tiers"""
    tier: int
    players_left_in_tier: int
    next_tier_drop: float

    def to_dict(self) -> Dict:
        return {
            'tier': self.tier,
            'players_left_in_tier': self.players_left_in_tier,
            'next_tier_drop': self.next_tier_drop
        }


UNTIERED_INFO = TierInfo(tier=UNTIERED, players_left_in_tier=0, next_tier_drop=0)


class TierBuilder:
    """Segment each position into tiers wherever the ADP gap gets too wide"""

    def __init__(self, thresholds: Optional[Dict[str, float]] = None):
        self.thresholds = dict(TIER_THRESHOLDS)
        if thresholds:
            self.thresholds.update({pos.upper(): gap for pos, gap in thresholds.items()})

    def threshold_for(self, position: Position) -> float:
        """ADP gap that starts a new tier at this position"""
        return self.thresholds.get(position.value, DEFAULT_TIER_THRESHOLD)

    def build(self, candidates: Iterable[Candidate], position: Position) -> List[Tier]:
        """
        Build tiers for one position

        Args:
            candidates: Full candidate pool (other positions are ignored)
            position: Position to tier

        Returns:
            Tiers ordered by ascending ADP; together they hold every candidate
            at the position exactly once
        """
        ordered = sorted(
            (c for c in candidates if c.position == position),
            key=lambda c: c.adp
        )
        threshold = self.threshold_for(position)

        tiers: List[Tier] = []
        current: Tier = []
        last_adp = None

        for candidate in ordered:
            if current and candidate.adp - last_adp > threshold:
                tiers.append(current)
                current = []
            current.append(candidate)
            last_adp = candidate.adp

        if current:
            tiers.append(current)

        return tiers

    def build_all(self, candidates: Iterable[Candidate]) -> Dict[Position, List[Tier]]:
        """Build tiers for every position present in the pool"""
        by_position = defaultdict(list)
        for candidate in candidates:
            by_position[candidate.position].append(candidate)

        tiers = {}
        for position in Position:
            tiers[position] = self.build(by_position.get(position, []), position)

        logger.debug("Built tiers: " + ", ".join(
            f"{pos.value}={len(t)}" for pos, t in tiers.items() if t
        ))
        return tiers


def tier_info_for(candidate: Candidate, tiers: Dict[Position, List[Tier]]) -> TierInfo:
    """Look up a candidate's tier, remaining tier-mates and drop to the next tier"""
    position_tiers = tiers.get(candidate.position, [])

    for index, tier in enumerate(position_tiers):
        for offset, member in enumerate(tier):
            if member.candidate_id != candidate.candidate_id:
                continue

            if index + 1 < len(position_tiers):
                next_tier_drop = position_tiers[index + 1][0].adp - tier[-1].adp
            else:
                next_tier_drop = 0

            return TierInfo(
                tier=index + 1,
                players_left_in_tier=len(tier) - offset - 1,
                next_tier_drop=next_tier_drop
            )

    return UNTIERED_INFO

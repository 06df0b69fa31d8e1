"""Snake draft pick arithmetic, turn analysis and pick-trade suggestions"""
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from draft_engine.core.models import Position
from draft_engine.core.pick_values import PickValueTable
from draft_engine.core.tiers import Tier


logger = logging.getLogger(__name__)

# Positions whose tier breaks are worth reaching for
DROPOFF_POSITIONS = (Position.QB, Position.RB, Position.WR, Position.TE)

REACH_GAP = 20
TRADE_UP_WINDOW = 10
TRADE_UP_MIN_GAP = 50
TRADE_UP_COMPENSATION = 0.6
TRADE_DOWN_WINDOW = 15
TRADE_DOWN_MAX_LOSS = 100
TRADE_DOWN_PICK_OFFSET = 24
TRADE_DOWN_COMPENSATION = 1.2
MAX_TRADES_PER_DIRECTION = 3


class DraftPositionType(Enum):
    EARLY = "EARLY"
    MIDDLE = "MIDDLE"
    LATE = "LATE"


class TradeDirection(Enum):
    UP = "UP"
    DOWN = "DOWN"


@dataclass
class TurnAnalysis:
    pick_number: int
    round: int
    position: DraftPositionType
    next_pick_in: int
    strategic_value: float
    recommendations: List[str] = field(default_factory=list)


@dataclass
class ValueDropoff:
    position: Position
    next_tier_drop: float
    players_until_drop: int
    should_reach: bool


@dataclass
class DraftPickTrade:
    direction: TradeDirection
    gives_picks: List[int]
    receives_picks: List[int]
    value_gained: float
    rationale: str
    target_position: Optional[Position] = None


@dataclass
class SnakeDraftAnalysis:
    """Everything a team needs to plan its next turn"""
    turn_analysis: TurnAnalysis
    value_dropoffs: List[ValueDropoff]
    suggested_trades: List[DraftPickTrade]
    optimal_draft_position: int

    def to_dict(self) -> Dict:
        return {
            'turn_analysis': {
                'pick_number': self.turn_analysis.pick_number,
                'round': self.turn_analysis.round,
                'position': self.turn_analysis.position.value,
                'next_pick_in': self.turn_analysis.next_pick_in,
                'strategic_value': self.turn_analysis.strategic_value,
                'recommendations': list(self.turn_analysis.recommendations)
            },
            'value_dropoffs': [
                {
                    'position': d.position.value,
                    'next_tier_drop': d.next_tier_drop,
                    'players_until_drop': d.players_until_drop,
                    'should_reach': d.should_reach
                }
                for d in self.value_dropoffs
            ],
            'pick_trading': {
                'suggested_trades': [
                    {
                        'direction': t.direction.value,
                        'gives_picks': t.gives_picks,
                        'receives_picks': t.receives_picks,
                        'value_gained': t.value_gained,
                        'rationale': t.rationale
                    }
                    for t in self.suggested_trades
                ],
                'optimal_draft_position': self.optimal_draft_position
            }
        }


class SnakeDraftMath:
    """Pick-number arithmetic for snake drafts, priced with a pick value chart"""

    def __init__(self, pick_values: Optional[PickValueTable] = None):
        self.pick_values = pick_values or PickValueTable()

    @staticmethod
    def pick_number(slot: int, round_number: int, teams: int) -> int:
        """Overall pick number for a draft slot in a round"""
        if round_number % 2 == 1:
            return (round_number - 1) * teams + slot
        return (round_number - 1) * teams + (teams - slot + 1)

    def next_pick_number(self, slot: int, round_number: int, teams: int) -> int:
        """Overall number of the same team's pick in the following round"""
        return self.pick_number(slot, round_number + 1, teams)

    def picks_until_next(self, slot: int, round_number: int, teams: int) -> int:
        return self.next_pick_number(slot, round_number, teams) - self.pick_number(slot, round_number, teams)

    @staticmethod
    def position_type(slot: int, teams: int) -> DraftPositionType:
        if slot <= math.ceil(teams / 3):
            return DraftPositionType.EARLY
        if slot <= math.ceil(teams * 2 / 3):
            return DraftPositionType.MIDDLE
        return DraftPositionType.LATE

    def strategic_value(self, slot: int, round_number: int, teams: int) -> float:
        """Pick value, boosted when the wait until the team's next pick is short"""
        pick = self.pick_number(slot, round_number, teams)
        wait = self.next_pick_number(slot, round_number, teams) - pick
        return self.pick_values.value_or_zero(pick) * (1 + 1 / wait)

    def positional_recommendations(self, slot: int, round_number: int, teams: int) -> List[str]:
        """Rule-of-thumb advice for this turn"""
        position_type = self.position_type(slot, teams)

        if round_number == 1:
            if position_type == DraftPositionType.EARLY:
                return ['Target top-tier RB or elite WR', 'Consider positional scarcity']
            if position_type == DraftPositionType.MIDDLE:
                return ['Balance between RB and WR', 'Target players with gap to next pick']
            return ['Consider back-to-back strategy', 'Target complementary positions']

        if round_number <= 3:
            return ['Fill core skill positions (RB/WR)', 'Avoid QB/TE unless elite value']
        if round_number <= 6:
            return ['Balance roster construction', 'Consider QB if needed']
        return []

    def value_dropoffs(self, current_pick: int, tiers: Dict[Position, List[Tier]]) -> List[ValueDropoff]:
        """How many candidates are left before each position's next tier break"""
        dropoffs = []

        for position in DROPOFF_POSITIONS:
            position_tiers = tiers.get(position, [])
            players_until_drop = 0
            next_tier_drop = 0

            for index, tier in enumerate(position_tiers):
                remaining = [c for c in tier if c.adp >= current_pick]
                if not remaining:
                    continue

                players_until_drop = len(remaining)
                if index + 1 < len(position_tiers):
                    next_tier_drop = position_tiers[index + 1][0].adp - tier[-1].adp
                break

            dropoffs.append(ValueDropoff(
                position=position,
                next_tier_drop=next_tier_drop,
                players_until_drop=players_until_drop,
                should_reach=next_tier_drop > REACH_GAP
            ))

        return dropoffs

    def suggest_trades(self, slot: int, round_number: int, teams: int) -> List[DraftPickTrade]:
        """Trade-up then trade-down suggestions, best value first in each direction"""
        current_pick = self.pick_number(slot, round_number, teams)
        current_value = self.pick_values.value_or_zero(current_pick)
        next_pick = self.next_pick_number(slot, round_number, teams)
        compensation_value = self.pick_values.value_or_zero(next_pick)

        trade_ups = []
        for target_pick in range(max(1, current_pick - TRADE_UP_WINDOW), current_pick):
            target_value = self.pick_values.value_or_zero(target_pick)
            value_gap = target_value - current_value

            if value_gap > TRADE_UP_MIN_GAP and compensation_value >= value_gap * TRADE_UP_COMPENSATION:
                trade_ups.append(DraftPickTrade(
                    direction=TradeDirection.UP,
                    gives_picks=[current_pick, next_pick],
                    receives_picks=[target_pick],
                    value_gained=target_value - current_value - compensation_value,
                    rationale="Trade up to secure top-tier player before tier break"
                ))

        trade_downs = []
        for target_pick in range(current_pick + 1, current_pick + TRADE_DOWN_WINDOW + 1):
            target_value = self.pick_values.value_or_zero(target_pick)
            value_loss = current_value - target_value

            if value_loss >= TRADE_DOWN_MAX_LOSS:
                continue

            additional_pick = target_pick + TRADE_DOWN_PICK_OFFSET
            additional_value = self.pick_values.value_or_zero(additional_pick)

            if additional_value >= value_loss * TRADE_DOWN_COMPENSATION:
                trade_downs.append(DraftPickTrade(
                    direction=TradeDirection.DOWN,
                    gives_picks=[current_pick],
                    receives_picks=[target_pick, additional_pick],
                    value_gained=target_value + additional_value - current_value,
                    rationale="Trade down to accumulate picks while maintaining value"
                ))

        trade_ups.sort(key=lambda t: t.value_gained, reverse=True)
        trade_downs.sort(key=lambda t: t.value_gained, reverse=True)

        return trade_ups[:MAX_TRADES_PER_DIRECTION] + trade_downs[:MAX_TRADES_PER_DIRECTION]

    @staticmethod
    def optimal_draft_position(teams: int) -> int:
        """Slot generally considered best: top quarter of the order, never past 5"""
        return min(math.ceil(teams * 0.25), 5)

    def analyze(self, slot: int, teams: int, round_number: int,
                tiers: Dict[Position, List[Tier]]) -> SnakeDraftAnalysis:
        """Full turn analysis for a team's slot in a round"""
        current_pick = self.pick_number(slot, round_number, teams)
        next_pick = self.next_pick_number(slot, round_number, teams)

        turn = TurnAnalysis(
            pick_number=current_pick,
            round=round_number,
            position=self.position_type(slot, teams),
            next_pick_in=next_pick - current_pick,
            strategic_value=self.strategic_value(slot, round_number, teams),
            recommendations=self.positional_recommendations(slot, round_number, teams)
        )

        logger.debug(f"Slot {slot}/{teams} round {round_number}: pick {current_pick}, next in {turn.next_pick_in}")

        return SnakeDraftAnalysis(
            turn_analysis=turn,
            value_dropoffs=self.value_dropoffs(current_pick, tiers),
            suggested_trades=self.suggest_trades(slot, round_number, teams),
            optimal_draft_position=self.optimal_draft_position(teams)
        )

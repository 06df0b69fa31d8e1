"""Keeper league selection"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from draft_engine.core.models import Candidate
from draft_engine.utils.validation import InputValidator
from config import KEEPER_CAP_RESERVE


logger = logging.getLogger(__name__)


class KeeperCostModel(Enum):
    """How a league prices keeping a player"""
    DRAFT_ROUND = "DRAFT_ROUND"
    AUCTION_VALUE = "AUCTION_VALUE"
    FLAT_COST = "FLAT_COST"
    NO_COST = "NO_COST"


@dataclass
class KeeperLeagueConfig:
    max_keepers: int
    salary_cap_enabled: bool = False
    salary_cap: Optional[float] = None
    cost_model: KeeperCostModel = KeeperCostModel.AUCTION_VALUE
    keeper_cost_increase: float = 0.0  # percent for auction, rounds for draft round, amount for flat
    keeper_inflation: float = 0.0  # cost added per year already kept

    def __post_init__(self):
        InputValidator.validate_keeper_config(self.max_keepers, self.salary_cap, self.keeper_cost_increase)

    @property
    def capped(self) -> bool:
        return bool(self.salary_cap_enabled and self.salary_cap)

    @property
    def cost_limit(self) -> Optional[float]:
        """Most that keepers may cost in total, or None when uncapped"""
        if not self.capped:
            return None
        return self.salary_cap * KEEPER_CAP_RESERVE


@dataclass(frozen=True)
class KeeperCandidate:
    """A rostered candidate who could be kept, priced for this season"""
    candidate: Candidate
    keeper_cost: float
    keeper_value: float  # value above cost
    years_kept: int = 0
    original_draft_round: Optional[int] = None
    is_eligible: bool = True

    @property
    def name(self) -> str:
        return self.candidate.name

    def to_dict(self) -> Dict:
        return {
            'candidate': self.candidate.to_dict(),
            'keeper_cost': self.keeper_cost,
            'keeper_value': self.keeper_value,
            'years_kept': self.years_kept,
            'original_draft_round': self.original_draft_round,
            'is_eligible': self.is_eligible
        }


@dataclass
class KeeperSelection:
    recommended: List[KeeperCandidate] = field(default_factory=list)
    dropped: List[KeeperCandidate] = field(default_factory=list)
    total_cost: float = 0.0
    analysis: str = ""

    def to_dict(self) -> Dict:
        return {
            'recommended_keepers': [k.to_dict() for k in self.recommended],
            'dropped_keepers': [k.to_dict() for k in self.dropped],
            'total_keeper_cost': self.total_cost,
            'analysis': self.analysis
        }


def keeper_cost(base_cost: float, years_kept: int, config: KeeperLeagueConfig,
                draft_round: Optional[int] = None) -> float:
    """
    Cost of keeping a player this season under the league's cost model

    AUCTION_VALUE raises the base cost by keeper_cost_increase percent.
    DRAFT_ROUND moves the pick keeper_cost_increase rounds earlier than the
    round the player was drafted in (falling back to base_cost), never before
    round 1. FLAT_COST charges keeper_cost_increase regardless of the player.
    Each year already kept adds keeper_inflation, or for DRAFT_ROUND moves
    the pick that many rounds earlier.
    """
    model = config.cost_model
    increase = config.keeper_cost_increase
    yearly = config.keeper_inflation * years_kept

    if model == KeeperCostModel.NO_COST:
        return 0.0

    if model == KeeperCostModel.DRAFT_ROUND:
        kept_round = draft_round if draft_round is not None else base_cost
        return max(1, kept_round - increase - yearly)

    if model == KeeperCostModel.FLAT_COST:
        return increase + yearly

    return base_cost * (1 + increase / 100) + yearly


class KeeperSelector:
    """Greedy keeper selection by value, within the keeper and cap limits"""

    def __init__(self, config: KeeperLeagueConfig):
        self.config = config

    def select(self, keepers: List[KeeperCandidate]) -> KeeperSelection:
        """
        Choose which eligible keepers to retain

        Keepers are taken in descending value order while there is room under
        max_keepers and, in capped leagues, under the cap reserve.
        """
        eligible = [k for k in keepers if k.is_eligible]
        if len(eligible) < len(keepers):
            logger.debug(f"Ignoring {len(keepers) - len(eligible)} ineligible keepers")

        limit = self.config.cost_limit
        selection = KeeperSelection()

        for keeper in sorted(eligible, key=lambda k: k.keeper_value, reverse=True):
            if len(selection.recommended) >= self.config.max_keepers:
                selection.dropped.append(keeper)
                continue

            if limit is not None and selection.total_cost + keeper.keeper_cost > limit:
                selection.dropped.append(keeper)
                continue

            selection.recommended.append(keeper)
            selection.total_cost += keeper.keeper_cost

        selection.analysis = self._summarize(selection)
        logger.info(f"Keeping {len(selection.recommended)} of {len(eligible)} eligible "
                    f"(total cost {selection.total_cost:g})")
        return selection

    def _summarize(self, selection: KeeperSelection) -> str:
        lines = [f"Keeping {len(selection.recommended)}/{self.config.max_keepers} eligible players."]

        if selection.recommended:
            avg_value = sum(k.keeper_value for k in selection.recommended) / len(selection.recommended)
            lines.append(f"Average keeper value: {avg_value:.1f} points above cost.")

            top = selection.recommended[0]
            lines.append(f"Best keeper: {top.name} ({top.keeper_value:.1f} value).")

        if selection.dropped:
            lines.append(f"Top dropped player: {selection.dropped[0].name} (cost vs value not favorable).")

        return ' '.join(lines)

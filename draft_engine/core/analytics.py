"""Post-draft grading"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from draft_engine.core.models import ASSUMED_AGE, ASSUMED_FLOOR_AGE, Candidate, DraftPick, Position
from draft_engine.utils.validation import InputValidator, ValidationError
from config import IDEAL_ROSTER_COMPOSITION, ANALYTICS_MARGINS


logger = logging.getLogger(__name__)


@dataclass
class DraftAnalytics:
    """Grades for one team's completed draft"""
    efficiency_score: float = 0.0
    value_picks: List[DraftPick] = field(default_factory=list)
    reaches: List[DraftPick] = field(default_factory=list)
    steals: List[DraftPick] = field(default_factory=list)
    position_drafted: Dict[Position, int] = field(default_factory=dict)
    average_adp: float = 0.0
    roster_balance: float = 0.0
    upside: float = 0.0
    floor: float = 0.0
    championship_probability: float = 0.0

    def to_dict(self) -> Dict:
        return {
            'efficiency_score': self.efficiency_score,
            'value_picks': [p.to_dict() for p in self.value_picks],
            'reaches': [p.to_dict() for p in self.reaches],
            'steals': [p.to_dict() for p in self.steals],
            'position_drafted': {pos.value: count for pos, count in self.position_drafted.items()},
            'average_adp': self.average_adp,
            'roster_balance': self.roster_balance,
            'upside': self.upside,
            'floor': self.floor,
            'championship_probability': self.championship_probability
        }


class DraftAnalyticsCalculator:
    """Grade a finished draft against ADP and an ideal roster shape

    Margins are in picks: a value pick went more than `value` picks after its
    ADP, a steal more than `steal` picks after, a reach more than `reach`
    picks before.
    """

    def __init__(self, ideal_composition: Optional[Dict[str, int]] = None,
                 margins: Optional[Dict[str, float]] = None):
        composition = InputValidator.validate_roster_composition(ideal_composition or IDEAL_ROSTER_COMPOSITION)
        self.ideal_composition = {Position(pos): count for pos, count in composition.items()}

        self.margins = dict(ANALYTICS_MARGINS)
        if margins:
            self.margins.update(margins)
        self._check_margins()

    def _check_margins(self) -> None:
        value, reach, steal = self.margins['value'], self.margins['reach'], self.margins['steal']

        if steal < value:
            raise ValidationError(f"Steal margin ({steal}) must be at least the value margin ({value})")

        # adp < overall - reach and adp > overall + steal must never both hold
        if reach + steal < 0:
            raise ValidationError(f"Reach margin ({reach}) and steal margin ({steal}) overlap")

    def is_value_pick(self, candidate: Candidate, pick: DraftPick) -> bool:
        return candidate.is_ranked and candidate.adp > pick.overall + self.margins['value']

    def is_reach(self, candidate: Candidate, pick: DraftPick) -> bool:
        return candidate.is_ranked and candidate.adp < pick.overall - self.margins['reach']

    def is_steal(self, candidate: Candidate, pick: DraftPick) -> bool:
        return candidate.is_ranked and candidate.adp > pick.overall + self.margins['steal']

    def calculate(self, team_id: str, picks: Iterable[DraftPick],
                  candidates: Union[Mapping[str, Candidate], Iterable[Candidate]]) -> DraftAnalytics:
        """
        Grade one team's picks

        Args:
            team_id: Team to grade
            picks: Draft picks for the whole league (other teams are ignored)
            candidates: Candidate pool, as a list or keyed by candidate id

        Returns:
            DraftAnalytics; all zeros when the team made no resolvable picks
        """
        lookup = candidates if isinstance(candidates, Mapping) else {
            c.candidate_id: c for c in candidates
        }

        drafted: List[Tuple[DraftPick, Candidate]] = [
            (pick, lookup[pick.candidate_id])
            for pick in picks
            if pick.team_id == team_id and pick.is_made and pick.candidate_id in lookup
        ]

        position_drafted = {pos: 0 for pos in Position}
        if not drafted:
            logger.info(f"No completed picks to grade for {team_id}")
            return DraftAnalytics(position_drafted=position_drafted)

        count = len(drafted)
        average_adp = sum(c.adp for _, c in drafted) / count
        average_pick = sum(p.overall for p, _ in drafted) / count
        efficiency = max(0.0, 100 - (average_adp - average_pick))

        for _, candidate in drafted:
            position_drafted[candidate.position] += 1

        balance = sum(
            1 - abs(position_drafted.get(pos, 0) - ideal) / ideal
            for pos, ideal in self.ideal_composition.items()
        ) / len(self.ideal_composition)

        upside = sum(
            max(0, ASSUMED_AGE - _age(c, ASSUMED_AGE)) / 10 for _, c in drafted
        ) / count
        floor = sum(
            min(1, (_age(c, ASSUMED_FLOOR_AGE) - 22) / 8) for _, c in drafted
        ) / count

        analytics = DraftAnalytics(
            efficiency_score=efficiency,
            value_picks=[p for p, c in drafted if self.is_value_pick(c, p)],
            reaches=[p for p, c in drafted if self.is_reach(c, p)],
            steals=[p for p, c in drafted if self.is_steal(c, p)],
            position_drafted=position_drafted,
            average_adp=average_adp,
            roster_balance=balance,
            upside=upside,
            floor=floor,
            championship_probability=min(100.0, efficiency + balance * 20 + upside * 10)
        )

        logger.info(f"Graded {count} picks for {team_id}: efficiency {efficiency:.1f}, "
                    f"{len(analytics.steals)} steals, {len(analytics.reaches)} reaches")
        return analytics


def _age(candidate: Candidate, assumed: int) -> int:
    return candidate.age if candidate.age is not None else assumed

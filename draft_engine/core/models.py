"""Core data models for FF Draft Engine"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from config import AUTO_DRAFT_PRESETS


# ADP assigned to candidates the market has not ranked
UNRANKED_ADP = 999

# Ages assumed when a candidate's age is unknown
ASSUMED_AGE = 30
ASSUMED_FLOOR_AGE = 25


class Position(Enum):
    """Draftable fantasy football positions"""
    QB = "QB"
    RB = "RB"
    WR = "WR"
    TE = "TE"
    K = "K"
    DST = "DST"


class DraftStrategy(Enum):
    """Auto-draft strategy that weights the recommendation heuristics"""
    BPA = "BPA"
    POSITIONAL_NEED = "POSITIONAL_NEED"
    VALUE_BASED = "VALUE_BASED"
    CONSERVATIVE = "CONSERVATIVE"
    AGGRESSIVE = "AGGRESSIVE"
    BALANCED = "BALANCED"  # every heuristic weighted neutrally


class RecommendationType(Enum):
    """Heuristic that produced a recommendation"""
    BPA = "BPA"
    NEED = "NEED"
    VALUE = "VALUE"
    UPSIDE = "UPSIDE"
    SAFE = "SAFE"


class RiskTolerance(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class TimeoutAction(Enum):
    """What happens when a team's pick clock runs out"""
    AUTO_DRAFT = "AUTO_DRAFT"
    SKIP_PICK = "SKIP_PICK"
    BEST_AVAILABLE = "BEST_AVAILABLE"


@dataclass(frozen=True)
class Candidate:
    """A player available to be drafted"""
    candidate_id: str
    name: str
    position: Position
    team: str
    rank: Optional[int] = None
    adp: float = UNRANKED_ADP
    age: Optional[int] = None
    tier: Optional[int] = None  # derived, never authoritative
    injury_prone: bool = False
    upside: Optional[str] = None
    consistency: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.name} ({self.position.value} - {self.team})"

    @property
    def is_ranked(self) -> bool:
        """True when the candidate has a real market ADP"""
        return self.adp != UNRANKED_ADP

    def to_dict(self) -> Dict:
        return {
            'id': self.candidate_id,
            'name': self.name,
            'position': self.position.value,
            'team': self.team,
            'rank': self.rank,
            'adp': self.adp,
            'age': self.age,
            'injury_prone': self.injury_prone,
            'upside': self.upside,
            'consistency': self.consistency
        }


@dataclass
class DraftPick:
    """A pick slot in the draft, filled once a candidate is taken"""
    overall: int
    round: int
    pick: int
    team_id: str
    candidate_id: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"Round {self.round}, Pick {self.pick} ({self.overall} overall): {self.candidate_id or '-'}"

    @property
    def is_made(self) -> bool:
        return self.candidate_id is not None

    def to_dict(self) -> Dict:
        return {
            'overall': self.overall,
            'round': self.round,
            'pick': self.pick,
            'team_id': self.team_id,
            'candidate_id': self.candidate_id,
            'timestamp': self.timestamp.isoformat()
        }


@dataclass(frozen=True)
class RosterNeed:
    """How badly a roster needs a position"""
    position: Position
    needed: int
    priority: float


@dataclass
class AutoDraftConfig:
    """Auto-draft preferences for one team"""
    strategy: DraftStrategy = DraftStrategy.BPA
    position_priority: List[Position] = field(default_factory=lambda: [
        Position.RB, Position.WR, Position.QB, Position.TE, Position.K, Position.DST
    ])
    risk_tolerance: RiskTolerance = RiskTolerance.MEDIUM
    target_roster: Dict[Position, int] = field(default_factory=lambda: {
        Position.QB: 2, Position.RB: 5, Position.WR: 6,
        Position.TE: 2, Position.K: 1, Position.DST: 1
    })
    avoid_injury_prone: bool = False
    prefer_veterans: bool = False
    timeout_action: TimeoutAction = TimeoutAction.AUTO_DRAFT

    @classmethod
    def from_dict(cls, data: Dict) -> 'AutoDraftConfig':
        """Build a config from plain strings, e.g. a preset or a JSON file"""
        return cls(
            strategy=DraftStrategy(data.get('strategy', 'BPA').upper()),
            position_priority=[Position(p.upper()) for p in data.get(
                'position_priority', ['RB', 'WR', 'QB', 'TE', 'K', 'DST'])],
            risk_tolerance=RiskTolerance(data.get('risk_tolerance', 'MEDIUM').upper()),
            target_roster={
                Position(pos.upper()): count
                for pos, count in data.get('target_roster', {}).items()
            } or cls().target_roster,
            avoid_injury_prone=bool(data.get('avoid_injury_prone', False)),
            prefer_veterans=bool(data.get('prefer_veterans', False)),
            timeout_action=TimeoutAction(data.get('timeout_action', 'AUTO_DRAFT').upper())
        )

    @classmethod
    def from_preset(cls, name: str) -> 'AutoDraftConfig':
        """Load one of the configured auto-draft presets"""
        return cls.from_dict(AUTO_DRAFT_PRESETS[name.upper()])

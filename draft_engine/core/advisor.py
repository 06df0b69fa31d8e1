"""Tie-break advisors consulted for the final automated pick"""
import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import httpx
from fuzzywuzzy import fuzz
from fuzzywuzzy import process

from draft_engine.core.models import Candidate, Position
from config import ADVISOR_URL, ADVISOR_API_KEY, ADVISOR_TIMEOUT_SECONDS, ADVISOR_FUZZY_THRESHOLD


logger = logging.getLogger(__name__)

# Core positions a roster should hold before anything else
CORE_POSITIONS = (Position.QB, Position.RB, Position.WR, Position.TE)


@dataclass(frozen=True)
class TeamContext:
    """What an advisor is told about the drafting team"""
    team_id: str
    name: str = ""
    roster: Tuple[Candidate, ...] = ()

    def to_dict(self) -> Dict:
        return {
            'team_id': self.team_id,
            'name': self.name,
            'roster': [f"{c.name} ({c.position.value})" for c in self.roster]
        }


@dataclass(frozen=True)
class AdvisorResult:
    """Either the name an advisor chose, or why it did not choose"""
    choice: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.choice is not None

    @classmethod
    def chose(cls, name: str) -> 'AdvisorResult':
        return cls(choice=name)

    @classmethod
    def declined(cls, reason: str) -> 'AdvisorResult':
        return cls(error=reason)


class TieBreakAdvisor(ABC):
    """Picks one name from the engine's top recommendations"""

    name = "advisor"

    @abstractmethod
    async def choose(self, team: TeamContext, candidates: Sequence[Candidate]) -> AdvisorResult:
        """Choose among the candidates, or decline"""
        pass


class RosterNeedAdvisor(TieBreakAdvisor):
    """Offline advisor: fill the first core position the roster is missing"""

    name = "roster_need"

    async def choose(self, team: TeamContext, candidates: Sequence[Candidate]) -> AdvisorResult:
        if not candidates:
            return AdvisorResult.declined("no candidates offered")

        held = {c.position for c in team.roster}
        needed = next((pos for pos in CORE_POSITIONS if pos not in held), Position.RB)

        at_need = sorted(
            (c for c in candidates if c.position == needed),
            key=lambda c: (c.rank if c.rank is not None else c.adp, c.adp)
        )
        chosen = at_need[0] if at_need else candidates[0]
        return AdvisorResult.chose(chosen.name)


class HttpTieBreakAdvisor(TieBreakAdvisor):
    """Ask a remote service to break the tie

    The service receives the team context and candidate records as JSON and
    answers with {"choice": "<candidate name>"}. The request runs on the event
    loop, so cancelling the call (e.g. on timeout) aborts it.
    """

    name = "http"

    def __init__(self, url: Optional[str] = None, api_key: Optional[str] = None,
                 request_timeout: float = ADVISOR_TIMEOUT_SECONDS):
        self.url = url or ADVISOR_URL
        self.request_timeout = request_timeout
        self.headers = {'Content-Type': 'application/json'}

        key = api_key or ADVISOR_API_KEY
        if key:
            self.headers['Authorization'] = f'Bearer {key}'

    async def choose(self, team: TeamContext, candidates: Sequence[Candidate]) -> AdvisorResult:
        if not self.url:
            return AdvisorResult.declined("no advisor URL configured")

        payload = {
            'team': team.to_dict(),
            'candidates': [c.to_dict() for c in candidates]
        }

        data = await self._post(payload)

        choice = data.get('choice') if isinstance(data, dict) else None
        if not choice:
            return AdvisorResult.declined("advisor response had no choice")
        return AdvisorResult.chose(str(choice))

    async def _post(self, payload: Dict) -> Dict:
        async with httpx.AsyncClient(timeout=httpx.Timeout(self.request_timeout),
                                     headers=self.headers) as client:
            response = await client.post(self.url, json=payload)
            response.raise_for_status()
            return response.json()


async def consult_advisor(advisor: TieBreakAdvisor, team: TeamContext,
                          candidates: Sequence[Candidate],
                          timeout: float = ADVISOR_TIMEOUT_SECONDS) -> AdvisorResult:
    """Run an advisor under a hard timeout; failures come back as a declined result"""
    try:
        return await asyncio.wait_for(advisor.choose(team, candidates), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Advisor '{advisor.name}' timed out after {timeout:.1f}s")
        return AdvisorResult.declined("timeout")
    except Exception as e:
        logger.warning(f"Advisor '{advisor.name}' failed: {e}")
        return AdvisorResult.declined(str(e))


def match_choice(choice: str, candidates: List[Candidate],
                 threshold: int = ADVISOR_FUZZY_THRESHOLD) -> Optional[Candidate]:
    """Map an advisor's answer to one of the offered candidates"""
    if not choice or not candidates:
        return None

    wanted = ' '.join(choice.split()).lower()
    for candidate in candidates:
        if candidate.name.lower() == wanted:
            return candidate

    names = [c.name for c in candidates]
    best = process.extractOne(choice, names, scorer=fuzz.ratio)
    if best and best[1] >= threshold:
        logger.debug(f"Fuzzy matched advisor choice '{choice}' to '{best[0]}' ({best[1]})")
        return candidates[names.index(best[0])]

    logger.info(f"Advisor chose '{choice}', which is not among the offered candidates")
    return None

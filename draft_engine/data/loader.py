"""Read candidate pools, rosters, keepers and draft results from CSV or JSON files"""
import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from draft_engine.core.keepers import KeeperCandidate, KeeperLeagueConfig, keeper_cost
from draft_engine.core.models import UNRANKED_ADP, Candidate, DraftPick, Position
from draft_engine.utils.validation import InputValidator, ValidationError


logger = logging.getLogger(__name__)

TRUE_VALUES = {'1', 'true', 'yes', 'y', 't'}


def _read_records(path: Union[str, Path], key: str) -> List[Dict[str, Any]]:
    """Rows of a CSV file, or a JSON list (bare or under `key`)"""
    path = Path(path)
    if not path.exists():
        raise ValidationError(f"File not found: {path}")

    suffix = path.suffix.lower()
    if suffix == '.csv':
        with open(path, newline='') as f:
            return [dict(row) for row in csv.DictReader(f)]

    if suffix == '.json':
        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {path}: {e}")

        if isinstance(data, dict):
            data = data.get(key, [])
        if not isinstance(data, list):
            raise ValidationError(f"{path} must hold a list of {key}")
        return data

    raise ValidationError(f"Unsupported file type: {path.suffix} (use .csv or .json)")


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or '').strip().lower() in TRUE_VALUES


def _optional_int(value: Any, field: str) -> Optional[int]:
    if value in (None, ''):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a whole number: {value}")


def _number(value: Any, field: str, default: float = 0.0) -> float:
    if value in (None, ''):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number: {value}")


def load_candidates(path: Union[str, Path]) -> List[Candidate]:
    """
    Load and validate a candidate pool

    Args:
        path: CSV or JSON file with at least id, name and position per candidate

    Returns:
        Candidates in file order; missing ADP becomes UNRANKED_ADP
    """
    records = InputValidator.validate_candidate_records(_read_records(path, 'candidates'))

    candidates = []
    for record in records:
        candidates.append(Candidate(
            candidate_id=str(record['id']),
            name=str(record['name']).strip(),
            position=Position(record['position']),
            team=str(record.get('team') or 'FA').strip().upper(),
            rank=_optional_int(record.get('rank'), 'rank'),
            adp=record['adp'] if record['adp'] is not None else UNRANKED_ADP,
            age=record['age'],
            injury_prone=_flag(record.get('injury_prone', record.get('injury_history'))),
            upside=record.get('upside') or None,
            consistency=record.get('consistency') or None
        ))

    unranked = sum(1 for c in candidates if not c.is_ranked)
    logger.info(f"Loaded {len(candidates)} candidates from {path} ({unranked} unranked)")
    return candidates


def _resolve(candidate_id: Any, pool_by_id: Dict[str, Candidate], path) -> Candidate:
    try:
        return pool_by_id[str(candidate_id)]
    except KeyError:
        raise ValidationError(f"Unknown candidate id in {path}: {candidate_id}")


def load_roster(path: Union[str, Path], pool: Sequence[Candidate]) -> List[Candidate]:
    """Candidates already on a roster, listed by id"""
    pool_by_id = {c.candidate_id: c for c in pool}
    records = _read_records(path, 'roster')

    roster = []
    for record in records:
        candidate_id = record.get('id') if isinstance(record, dict) else record
        roster.append(_resolve(candidate_id, pool_by_id, path))
    return roster


def load_keepers(path: Union[str, Path], pool: Sequence[Candidate],
                 config: Optional[KeeperLeagueConfig] = None) -> List[KeeperCandidate]:
    """
    Keeper candidates with their base cost and value

    With a league config the base cost is adjusted by its cost model and
    inflation for the years already kept.
    """
    pool_by_id = {c.candidate_id: c for c in pool}
    keepers = []

    for record in _read_records(path, 'keepers'):
        candidate = _resolve(record.get('id'), pool_by_id, path)
        years_kept = _optional_int(record.get('years_kept'), 'years_kept') or 0
        cost = _number(record.get('keeper_cost', record.get('cost')), 'keeper_cost')
        draft_round = _optional_int(record.get('original_draft_round'), 'original_draft_round')
        if config is not None:
            cost = keeper_cost(cost, years_kept, config, draft_round)

        eligible = record.get('is_eligible', record.get('eligible'))
        keepers.append(KeeperCandidate(
            candidate=candidate,
            keeper_cost=cost,
            keeper_value=_number(record.get('keeper_value', record.get('value')), 'keeper_value'),
            years_kept=years_kept,
            original_draft_round=draft_round,
            is_eligible=True if eligible in (None, '') else _flag(eligible)
        ))

    logger.info(f"Loaded {len(keepers)} keeper candidates from {path}")
    return keepers


def load_draft_picks(path: Union[str, Path]) -> List[DraftPick]:
    """Completed draft picks; rows without a candidate id are unmade picks"""
    picks = []
    for idx, record in enumerate(_read_records(path, 'picks')):
        overall = _optional_int(record.get('overall'), 'overall')
        if overall is None or overall < 1:
            raise ValidationError(f"Pick entry {idx} needs a positive overall number")
        if not record.get('team_id'):
            raise ValidationError(f"Pick entry {idx} missing required field: team_id")

        candidate_id = record.get('candidate_id')
        picks.append(DraftPick(
            overall=overall,
            round=_optional_int(record.get('round'), 'round') or 0,
            pick=_optional_int(record.get('pick'), 'pick') or 0,
            team_id=str(record['team_id']),
            candidate_id=str(candidate_id) if candidate_id not in (None, '') else None
        ))

    logger.info(f"Loaded {len(picks)} draft picks from {path}")
    return picks

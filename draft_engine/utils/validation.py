"""
Input validation for FF Draft Engine
"""
from typing import Any, Dict, List, Optional, Union


class ValidationError(Exception):
    """Custom exception for validation errors"""
    pass


class InputValidator:
    """Validates user inputs, league configuration and candidate records"""

    # Valid position codes
    VALID_POSITIONS = {'QB', 'RB', 'WR', 'TE', 'K', 'DST'}

    # Team constraints
    MIN_TEAMS = 4
    MAX_TEAMS = 32

    # Draft length constraints
    MAX_ROUNDS = 30

    # ADP constraints (999 is the unranked sentinel)
    MIN_ADP = 1
    MAX_ADP = 999

    @staticmethod
    def validate_team_count(teams: int) -> int:
        """Validate number of teams in league"""
        if not isinstance(teams, int):
            raise ValidationError("Number of teams must be an integer")

        if teams < InputValidator.MIN_TEAMS:
            raise ValidationError(f"Number of teams must be at least {InputValidator.MIN_TEAMS}")

        if teams > InputValidator.MAX_TEAMS:
            raise ValidationError(f"Number of teams cannot exceed {InputValidator.MAX_TEAMS}")

        return teams

    @staticmethod
    def validate_draft_slot(slot: int, teams: int) -> int:
        """Validate a team's position in the draft order"""
        if not isinstance(slot, int):
            raise ValidationError("Draft slot must be an integer")

        if slot < 1 or slot > teams:
            raise ValidationError(f"Draft slot must be between 1 and {teams}: {slot}")

        return slot

    @staticmethod
    def validate_round(round_number: int) -> int:
        """Validate a draft round number"""
        if not isinstance(round_number, int):
            raise ValidationError("Round must be an integer")

        if round_number < 1 or round_number > InputValidator.MAX_ROUNDS:
            raise ValidationError(f"Round must be between 1 and {InputValidator.MAX_ROUNDS}: {round_number}")

        return round_number

    @staticmethod
    def validate_draft_pick(pick: int, total_teams: int) -> int:
        """Validate overall draft pick number"""
        if not isinstance(pick, int):
            raise ValidationError("Draft pick must be an integer")

        if pick < 1:
            raise ValidationError("Draft pick must be positive")

        max_picks = total_teams * InputValidator.MAX_ROUNDS
        if pick > max_picks:
            raise ValidationError(f"Draft pick {pick} exceeds reasonable limit for {total_teams} teams")

        return pick

    @staticmethod
    def validate_adp(adp: Union[int, float]) -> float:
        """Validate Average Draft Position"""
        try:
            adp_float = float(adp)
        except (TypeError, ValueError):
            raise ValidationError(f"ADP must be a number: {adp}")

        if adp_float < InputValidator.MIN_ADP:
            raise ValidationError(f"ADP cannot be less than {InputValidator.MIN_ADP}")

        if adp_float > InputValidator.MAX_ADP:
            raise ValidationError(f"ADP cannot exceed {InputValidator.MAX_ADP}")

        return adp_float

    @staticmethod
    def validate_position(position: str) -> str:
        """Validate and normalize a position code"""
        if not position or not isinstance(position, str):
            raise ValidationError("Position must be a non-empty string")

        pos = position.strip().upper()
        if pos in ('D/ST', 'DEF'):
            pos = 'DST'
        if pos not in InputValidator.VALID_POSITIONS:
            raise ValidationError(f"Invalid position: {position}. Valid positions: {', '.join(sorted(InputValidator.VALID_POSITIONS))}")

        return pos

    @staticmethod
    def validate_roster_composition(roster: Dict[str, int]) -> Dict[str, int]:
        """Validate a target roster composition (position -> count)"""
        if not isinstance(roster, dict) or not roster:
            raise ValidationError("Roster composition must be a non-empty dictionary")

        validated = {}
        for position, count in roster.items():
            pos = InputValidator.validate_position(position)

            if not isinstance(count, int):
                raise ValidationError(f"Roster count for {position} must be an integer")

            if count < 1:
                raise ValidationError(f"Roster count for {position} must be at least 1")

            if count > 10:
                raise ValidationError(f"Roster count for {position} seems too high: {count}")

            validated[pos] = count

        return validated

    @staticmethod
    def validate_strategy(strategy: str):
        """Validate auto-draft strategy selection"""
        from draft_engine.core.models import DraftStrategy

        if not strategy:
            raise ValidationError("Strategy cannot be empty")

        try:
            return DraftStrategy(strategy.upper())
        except ValueError:
            valid = [s.value for s in DraftStrategy]
            raise ValidationError(f"Invalid strategy: {strategy}. Valid options: {', '.join(valid)}")

    @staticmethod
    def validate_risk_tolerance(risk: str):
        """Validate risk tolerance selection"""
        from draft_engine.core.models import RiskTolerance

        try:
            return RiskTolerance(str(risk).upper())
        except ValueError:
            valid = [r.value for r in RiskTolerance]
            raise ValidationError(f"Invalid risk tolerance: {risk}. Valid options: {', '.join(valid)}")

    @staticmethod
    def validate_keeper_config(max_keepers: int, cap_amount: Optional[float] = None,
                               cost_increase: float = 0.0) -> None:
        """Validate keeper league limits"""
        if not isinstance(max_keepers, int) or max_keepers < 0:
            raise ValidationError("Max keepers must be a non-negative integer")

        if cap_amount is not None and cap_amount < 0:
            raise ValidationError("Salary cap cannot be negative")

        if cost_increase < 0:
            raise ValidationError("Keeper cost increase cannot be negative")

    @staticmethod
    def validate_candidate_records(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Validate raw candidate records from a data source"""
        if not isinstance(records, list):
            raise ValidationError("Candidate records must be a list")

        validated = []
        seen_ids = set()

        for idx, record in enumerate(records):
            if not isinstance(record, dict):
                raise ValidationError(f"Candidate entry {idx} must be a dictionary")

            for required in ('id', 'name', 'position'):
                if not record.get(required):
                    raise ValidationError(f"Candidate entry {idx} missing required field: {required}")

            candidate_id = str(record['id'])
            if candidate_id in seen_ids:
                raise ValidationError(f"Duplicate candidate id: {candidate_id}")
            seen_ids.add(candidate_id)

            record['position'] = InputValidator.validate_position(record['position'])

            # Missing ADP is not an error; the loader substitutes the sentinel
            if record.get('adp') not in (None, ''):
                record['adp'] = InputValidator.validate_adp(record['adp'])
            else:
                record['adp'] = None

            if record.get('age') not in (None, ''):
                try:
                    record['age'] = int(record['age'])
                except (TypeError, ValueError):
                    raise ValidationError(f"Age must be a number for {record['name']}: {record['age']}")
            else:
                record['age'] = None

            validated.append(record)

        return validated

"""
Transient bracket entities.

These mirror the backend's JSON DTOs (camelCase keys) but are only ever held
in memory: they are built from a response, handed to the engine, and dropped.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from .errors import InvalidPayload

BYE = 'BYE'


class MatchStatus(str, Enum):
    SCHEDULED = 'SCHEDULED'
    ONGOING = 'ONGOING'
    COMPLETED = 'COMPLETED'
    CANCELLED = 'CANCELLED'

    @property
    def is_terminal(self) -> bool:
        return self in (MatchStatus.COMPLETED, MatchStatus.CANCELLED)


class RoundFormat(str, Enum):
    KNOCKOUT = 'KNOCKOUT'
    ROUND_ROBIN = 'ROUND_ROBIN'
    UNSET = 'UNSET'


def parse_status(value) -> MatchStatus:
    try:
        return MatchStatus(str(value).upper())
    except ValueError:
        raise InvalidPayload(f"Unknown match status: {value!r}")


def parse_format(value) -> RoundFormat:
    """Parse a round type; a missing type means no format was chosen yet."""
    if value is None or value == '':
        return RoundFormat.UNSET
    try:
        return RoundFormat(str(value).upper())
    except ValueError:
        raise InvalidPayload(f"Unknown round format: {value!r}")


def is_bye(team) -> bool:
    return team is None or team.name == BYE


class Team:
    def __init__(self, team_id: Optional[int], name: str, is_placeholder: bool = False):
        self.id = team_id
        self.name = name
        self.is_placeholder = is_placeholder

    def __repr__(self):
        return f"Team(id={self.id}, name={self.name}, is_placeholder={self.is_placeholder})"

    def __eq__(self, other):
        if not isinstance(other, Team):
            return NotImplemented
        return (self.id, self.name, self.is_placeholder) == (other.id, other.name, other.is_placeholder)

    def __hash__(self):
        return hash((self.id, self.name, self.is_placeholder))

    @property
    def key(self):
        """Identity used to tell teams apart inside a round."""
        return self.id if self.id is not None else self.name

    @classmethod
    def from_dict(cls, data: dict) -> 'Team':
        if not isinstance(data, dict):
            raise InvalidPayload(f"Expected a team object, got {data!r}")
        name = data.get('teamName')
        if not name:
            raise InvalidPayload(f"Team is missing 'teamName': {data!r}")
        return cls(data.get('teamId'), name, bool(data.get('dummy', False)))

    def to_dict(self) -> dict:
        return {'teamId': self.id, 'teamName': self.name, 'dummy': self.is_placeholder}


def _parse_time(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        raise InvalidPayload(f"Invalid scheduledTime: {value!r}")


class Match:
    def __init__(self, team1: Team, team2: Optional[Team] = None,
                 status: MatchStatus = MatchStatus.SCHEDULED,
                 winner_team_id: Optional[int] = None,
                 match_id: Optional[int] = None,
                 winner_team_name: Optional[str] = None,
                 venue: Optional[str] = None,
                 scheduled_time: Optional[datetime] = None):
        self.id = match_id
        self.team1 = team1
        self.team2 = team2
        self.status = status
        self.winner_team_id = winner_team_id
        self.winner_team_name = winner_team_name
        self.venue = venue
        self.scheduled_time = scheduled_time

    def __repr__(self):
        team2 = self.team2.name if self.team2 else BYE
        return (f"Match(id={self.id}, teams=({self.team1.name}, {team2}), "
                f"status={self.status.value}, winner_team_id={self.winner_team_id})")

    @property
    def is_bye(self) -> bool:
        return is_bye(self.team1) or is_bye(self.team2)

    @property
    def is_decided(self) -> bool:
        return self.is_bye or self.status.is_terminal

    def winner(self) -> Optional[Team]:
        """Concrete winner of a completed match, or None."""
        if self.status != MatchStatus.COMPLETED or self.winner_team_id is None:
            return None
        for team in (self.team1, self.team2):
            if team is not None and team.id == self.winner_team_id:
                return Team(team.id, team.name)
        name = self.winner_team_name or f"Team {self.winner_team_id}"
        return Team(self.winner_team_id, name)

    @classmethod
    def from_dict(cls, data: dict) -> 'Match':
        if not isinstance(data, dict):
            raise InvalidPayload(f"Expected a match object, got {data!r}")
        team1_name = data.get('team1Name')
        if not team1_name:
            raise InvalidPayload(f"Match is missing 'team1Name': {data!r}")
        team1 = Team(data.get('team1Id'), team1_name)

        # The backend reports a missing opponent as team2Id=null, team2Name="BYE"
        team2_name = data.get('team2Name')
        team2_id = data.get('team2Id')
        if team2_name == BYE or (team2_id is None and not team2_name):
            team2 = None
        else:
            team2 = Team(team2_id, team2_name)

        return cls(
            team1,
            team2,
            status=parse_status(data.get('status', MatchStatus.SCHEDULED.value)),
            winner_team_id=data.get('winnerTeamId'),
            match_id=data.get('matchId'),
            winner_team_name=data.get('winnerTeamName'),
            venue=data.get('venue'),
            scheduled_time=_parse_time(data.get('scheduledTime')),
        )

    def to_dict(self) -> dict:
        return {
            'matchId': self.id,
            'team1Id': self.team1.id,
            'team1Name': self.team1.name,
            'team2Id': self.team2.id if self.team2 else None,
            'team2Name': self.team2.name if self.team2 else BYE,
            'status': self.status.value,
            'winnerTeamId': self.winner_team_id,
            'winnerTeamName': self.winner_team_name,
            'venue': self.venue,
            'scheduledTime': self.scheduled_time.isoformat() if self.scheduled_time else None,
        }


class Round:
    def __init__(self, round_value: int, round_name: str, round_format: RoundFormat,
                 matches: Optional[List[Match]] = None, round_id: Optional[int] = None):
        self.id = round_id
        self.round_value = round_value
        self.round_name = round_name
        self.format = round_format
        self.matches = matches if matches else []

    def __repr__(self):
        return (f"Round(value={self.round_value}, name={self.round_name}, "
                f"format={self.format.value}, matches={len(self.matches)})")

    @classmethod
    def from_dict(cls, data: dict) -> 'Round':
        if not isinstance(data, dict):
            raise InvalidPayload(f"Expected a round object, got {data!r}")
        round_value = data.get('roundValue')
        if not isinstance(round_value, int):
            raise InvalidPayload(f"Round is missing an integer 'roundValue': {data!r}")
        matches = [Match.from_dict(m) for m in data.get('matches') or []]
        return cls(
            round_value,
            data.get('roundName') or '',
            parse_format(data.get('type')),
            matches,
            round_id=data.get('roundId'),
        )

    def to_dict(self) -> dict:
        return {
            'roundId': self.id,
            'roundValue': self.round_value,
            'roundName': self.round_name,
            'type': None if self.format == RoundFormat.UNSET else self.format.value,
            'matches': [m.to_dict() for m in self.matches],
        }


class Fixture:
    def __init__(self, tournament_id: int, rounds: Optional[List[Round]] = None,
                 tournament_name: Optional[str] = None):
        self.tournament_id = tournament_id
        self.tournament_name = tournament_name
        # Earliest round first: higher round values are earlier rounds
        self.rounds = sorted(rounds or [], key=lambda r: -r.round_value)

    def __repr__(self):
        return f"Fixture(tournament_id={self.tournament_id}, rounds={len(self.rounds)})"

    def round_by_value(self, round_value: int) -> Optional[Round]:
        for rnd in self.rounds:
            if rnd.round_value == round_value:
                return rnd
        return None

    @classmethod
    def from_dict(cls, data: dict) -> 'Fixture':
        if not isinstance(data, dict):
            raise InvalidPayload(f"Expected a fixture object, got {data!r}")
        rounds = [Round.from_dict(r) for r in data.get('rounds') or []]
        return cls(data.get('tournamentId'), rounds, data.get('tournamentName'))

    def to_dict(self) -> dict:
        return {
            'tournamentId': self.tournament_id,
            'tournamentName': self.tournament_name,
            'rounds': [r.to_dict() for r in self.rounds],
        }


class MatchDraft:
    """A match proposed for the next round; it never carries a winner."""

    def __init__(self, team1: Team, team2: Optional[Team], round_value: int):
        self.team1 = team1
        self.team2 = team2
        self.round_value = round_value
        self.status = MatchStatus.SCHEDULED

    def __repr__(self):
        team2 = self.team2.name if self.team2 else BYE
        return f"MatchDraft(teams=({self.team1.name}, {team2}), round_value={self.round_value})"

    @property
    def is_bye(self) -> bool:
        return is_bye(self.team2)

    def to_dict(self) -> dict:
        return {
            'team1Id': self.team1.id,
            'team1Name': self.team1.name,
            'team2Id': self.team2.id if self.team2 else None,
            'team2Name': self.team2.name if self.team2 else BYE,
            'status': self.status.value,
            'roundValue': self.round_value,
        }

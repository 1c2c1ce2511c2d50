"""
Unit tests for the bracket entities (Team, Match, Round, Fixture, MatchDraft).
"""
import pytest
import sys
import os
from datetime import datetime

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from bracket.errors import InvalidPayload
from bracket.models import (
    BYE, Fixture, Match, MatchDraft, MatchStatus, Round, RoundFormat, Team, parse_format, parse_status,
)


class TestTeam:
    """Tests for the Team model."""

    def test_team_from_dto(self):
        team = Team.from_dict({'teamId': 4, 'teamName': 'Lions', 'dummy': False, 'sportId': 2})
        assert team.id == 4
        assert team.name == 'Lions'
        assert not team.is_placeholder

    def test_dummy_team_is_placeholder(self):
        team = Team.from_dict({'teamId': 9, 'teamName': 'Winner Team Match 1 Round 2', 'dummy': True})
        assert team.is_placeholder

    def test_missing_name_rejected(self):
        with pytest.raises(InvalidPayload):
            Team.from_dict({'teamId': 1})

    def test_equality(self):
        assert Team(1, 'A') == Team(1, 'A')
        assert Team(1, 'A') != Team(1, 'A', True)
        assert len({Team(1, 'A'), Team(1, 'A')}) == 1

    def test_key_prefers_id(self):
        assert Team(3, 'A').key == 3
        assert Team(None, 'A').key == 'A'

    def test_team_repr(self):
        repr_str = repr(Team(1, 'Lions'))
        assert 'Lions' in repr_str


class TestMatch:
    """Tests for the Match model."""

    def test_match_from_dto(self, round_dto):
        match = Match.from_dict(round_dto['matches'][0])
        assert match.id == 31
        assert match.team1 == Team(1, 'Lions')
        assert match.team2 == Team(2, 'Tigers')
        assert match.status == MatchStatus.COMPLETED
        assert match.venue == 'Court 1'
        assert match.scheduled_time == datetime(2025, 3, 1, 10, 0)

    def test_bye_from_dto(self, round_dto):
        match = Match.from_dict(round_dto['matches'][1])
        assert match.team2 is None
        assert match.is_bye
        assert match.is_decided

    def test_null_opponent_is_bye(self):
        match = Match.from_dict({'team1Id': 1, 'team1Name': 'Lions', 'team2Id': None, 'status': 'SCHEDULED'})
        assert match.is_bye

    def test_winner_resolves_to_team(self, round_dto):
        match = Match.from_dict(round_dto['matches'][0])
        assert match.winner() == Team(2, 'Tigers')

    def test_winner_requires_completion(self):
        match = Match(Team(1, 'A'), Team(2, 'B'), MatchStatus.ONGOING, winner_team_id=1)
        assert match.winner() is None

    def test_winner_outside_match_uses_winner_name(self):
        match = Match(Team(1, 'A'), Team(2, 'B'), MatchStatus.COMPLETED,
                      winner_team_id=7, winner_team_name='G')
        assert match.winner() == Team(7, 'G')

    def test_scheduled_match_not_decided(self):
        assert not Match(Team(1, 'A'), Team(2, 'B')).is_decided

    def test_unknown_status_rejected(self):
        with pytest.raises(InvalidPayload):
            Match.from_dict({'team1Name': 'A', 'team2Name': 'B', 'status': 'POSTPONED'})

    def test_invalid_time_rejected(self):
        with pytest.raises(InvalidPayload):
            Match.from_dict({'team1Name': 'A', 'team2Name': 'B', 'scheduledTime': 'tomorrow'})

    def test_missing_team1_rejected(self):
        with pytest.raises(InvalidPayload):
            Match.from_dict({'team2Name': 'B'})

    def test_to_dict_writes_bye_sentinel(self):
        data = Match(Team(1, 'A'), None).to_dict()
        assert data['team2Id'] is None
        assert data['team2Name'] == BYE


class TestRound:
    """Tests for the Round model."""

    def test_round_from_dto(self, round_dto):
        rnd = Round.from_dict(round_dto)
        assert rnd.id == 7
        assert rnd.round_value == 2
        assert rnd.round_name == 'Semi Final'
        assert rnd.format == RoundFormat.KNOCKOUT
        assert len(rnd.matches) == 2

    def test_null_type_is_unset(self, round_dto):
        round_dto['type'] = None
        assert Round.from_dict(round_dto).format == RoundFormat.UNSET

    def test_round_without_matches(self):
        rnd = Round.from_dict({'roundValue': 1, 'roundName': 'Final', 'type': 'KNOCKOUT'})
        assert rnd.matches == []

    def test_missing_round_value_rejected(self):
        with pytest.raises(InvalidPayload):
            Round.from_dict({'roundName': 'Final'})

    def test_round_trip_keeps_type_null(self):
        rnd = Round(3, 'Round 3', RoundFormat.UNSET)
        assert rnd.to_dict()['type'] is None


class TestFixture:
    """Tests for the Fixture model."""

    def test_rounds_sorted_earliest_first(self):
        fixture = Fixture.from_dict({
            'tournamentId': 5,
            'tournamentName': 'Spring Cup',
            'rounds': [
                {'roundValue': 1, 'roundName': 'Final', 'type': 'KNOCKOUT'},
                {'roundValue': 3, 'roundName': 'Quarter Final', 'type': 'KNOCKOUT'},
                {'roundValue': 2, 'roundName': 'Semi Final', 'type': None},
            ],
        })
        assert [r.round_value for r in fixture.rounds] == [3, 2, 1]
        assert fixture.tournament_name == 'Spring Cup'

    def test_round_by_value(self):
        fixture = Fixture(5, [Round(2, 'Semi Final', RoundFormat.KNOCKOUT)])
        assert fixture.round_by_value(2).round_name == 'Semi Final'
        assert fixture.round_by_value(1) is None

    def test_empty_fixture(self):
        fixture = Fixture.from_dict({'tournamentId': 5})
        assert fixture.rounds == []


class TestMatchDraft:
    """Tests for next-round drafts."""

    def test_draft_is_scheduled(self):
        draft = MatchDraft(Team(1, 'A'), Team(2, 'B'), 1)
        assert draft.status == MatchStatus.SCHEDULED
        assert not draft.is_bye

    def test_bye_draft_dto(self):
        data = MatchDraft(Team(1, 'A'), None, 2).to_dict()
        assert data['team2Name'] == BYE
        assert data['roundValue'] == 2


class TestParsing:
    """Tests for enum parsing."""

    def test_parse_format_case_insensitive(self):
        assert parse_format('round_robin') == RoundFormat.ROUND_ROBIN

    def test_parse_format_empty(self):
        assert parse_format(None) == RoundFormat.UNSET
        assert parse_format('') == RoundFormat.UNSET

    def test_parse_format_unknown(self):
        with pytest.raises(InvalidPayload):
            parse_format('SWISS')

    def test_parse_status(self):
        assert parse_status('completed') == MatchStatus.COMPLETED
        assert MatchStatus.CANCELLED.is_terminal
        assert not MatchStatus.ONGOING.is_terminal

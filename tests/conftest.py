"""
Shared pytest fixtures for bracket engine tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from bracket.models import Match, MatchStatus, Round, RoundFormat, Team


def make_match(team1, team2, status=MatchStatus.SCHEDULED, winner=None, match_id=None):
    """Build a match; winner is the winning Team for completed matches."""
    return Match(
        team1,
        team2,
        status=status,
        winner_team_id=winner.id if winner else None,
        winner_team_name=winner.name if winner else None,
        match_id=match_id,
    )


@pytest.fixture
def teams():
    """Eight concrete teams with ids 1..8."""
    return [Team(i, f"Team {chr(ord('A') + i - 1)}") for i in range(1, 9)]


@pytest.fixture
def knockout_round(teams):
    """Knockout round of 4 matches: matches 1 and 3 completed, 2 and 4 scheduled."""
    a, b, c, d, e, f, g, h = teams
    return Round(3, "Quarter Final", RoundFormat.KNOCKOUT, [
        make_match(a, b, MatchStatus.COMPLETED, winner=a, match_id=11),
        make_match(c, d, MatchStatus.SCHEDULED, match_id=12),
        make_match(e, f, MatchStatus.COMPLETED, winner=f, match_id=13),
        make_match(g, h, MatchStatus.ONGOING, match_id=14),
    ], round_id=100)


@pytest.fixture
def round_robin_round(teams):
    """Completed round robin between A, B, C, D.

    A beats everyone, B beats C and D, D beats C.
    Table: A 3, B 2, D 1, C 0.
    """
    a, b, c, d = teams[:4]
    results = [
        (a, b, a), (a, c, a), (a, d, a),
        (b, c, b), (b, d, b),
        (c, d, d),
    ]
    matches = [
        make_match(t1, t2, MatchStatus.COMPLETED, winner=w, match_id=20 + i)
        for i, (t1, t2, w) in enumerate(results)
    ]
    return Round(2, "Round 2", RoundFormat.ROUND_ROBIN, matches, round_id=200)


@pytest.fixture
def round_dto():
    """A round as returned by GET /api/tournaments/{id}/rounds/value/{value}."""
    return {
        'roundId': 7,
        'roundValue': 2,
        'roundName': 'Semi Final',
        'type': 'KNOCKOUT',
        'matches': [
            {
                'matchId': 31, 'team1Id': 1, 'team1Name': 'Lions', 'team2Id': 2,
                'team2Name': 'Tigers', 'status': 'COMPLETED', 'winnerTeamId': 2,
                'winnerTeamName': 'Tigers', 'venue': 'Court 1',
                'scheduledTime': '2025-03-01T10:00:00',
            },
            {
                'matchId': 32, 'team1Id': 3, 'team1Name': 'Bears', 'team2Id': None,
                'team2Name': 'BYE', 'status': 'SCHEDULED',
            },
        ],
    }

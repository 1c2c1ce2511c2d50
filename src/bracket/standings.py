"""
Round-robin standings.

Ranking: wins -> head-to-head wins among tied teams -> team name
"""
from typing import Dict, List

from .models import MatchStatus, Round, Team, is_bye


def _empty_row(team: Team) -> dict:
    return {
        'team': team,
        'played': 0,
        'wins': 0,
        'losses': 0,
        'cancelled': 0,
    }


def calculate_standings(rnd: Round) -> List[dict]:
    """
    Calculate the table for a round-robin round from its completed matches.

    Returns: [{'team': Team, 'played': n, 'wins': n, 'losses': n, 'cancelled': n}, ...]
    sorted best first.
    """
    rows: Dict[object, dict] = {}
    # (winner_key, loser_key) for every decided pairing
    results = []

    for match in rnd.matches:
        if match.is_bye:
            # A team seen only in a bye still gets a row, with nothing played
            for team in (match.team1, match.team2):
                if not is_bye(team) and team.key not in rows:
                    rows[team.key] = _empty_row(Team(team.id, team.name))
            continue
        team1, team2 = match.team1, match.team2
        for team in (team1, team2):
            if team.key not in rows:
                rows[team.key] = _empty_row(Team(team.id, team.name))

        if match.status == MatchStatus.CANCELLED:
            rows[team1.key]['cancelled'] += 1
            rows[team2.key]['cancelled'] += 1
            continue

        winner = match.winner()
        if winner is None:
            continue
        if winner.id == team1.id and winner.name == team1.name:
            winner_key, loser_key = team1.key, team2.key
        elif winner.id == team2.id and winner.name == team2.name:
            winner_key, loser_key = team2.key, team1.key
        else:
            # Winner id does not belong to either side; count as played only
            rows[team1.key]['played'] += 1
            rows[team2.key]['played'] += 1
            continue

        rows[winner_key]['played'] += 1
        rows[loser_key]['played'] += 1
        rows[winner_key]['wins'] += 1
        rows[loser_key]['losses'] += 1
        results.append((winner_key, loser_key))

    return _sort_rows(list(rows.values()), results)


def _sort_rows(rows: List[dict], results: List[tuple]) -> List[dict]:
    by_wins: Dict[int, List[dict]] = {}
    for row in rows:
        by_wins.setdefault(row['wins'], []).append(row)

    ordered = []
    for wins in sorted(by_wins, reverse=True):
        group = by_wins[wins]
        if len(group) == 1:
            ordered.extend(group)
            continue
        keys = {row['team'].key for row in group}
        head_to_head = {key: 0 for key in keys}
        for winner_key, loser_key in results:
            if winner_key in keys and loser_key in keys:
                head_to_head[winner_key] += 1
        group.sort(key=lambda r: (-head_to_head[r['team'].key], r['team'].name,
                                  r['team'].id if r['team'].id is not None else -1))
        ordered.extend(group)
    return ordered


def rank_advancers(rnd: Round, count: int) -> List[Team]:
    """Top count teams of the round's standings."""
    return [row['team'] for row in calculate_standings(rnd)[:count]]

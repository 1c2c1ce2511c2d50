"""
Round progression for knockout and round-robin fixtures.

Everything here is a pure function of its arguments: rounds come in, new
lists of teams or match drafts come out, and the inputs are never modified.
"""
import math
from itertools import combinations
from typing import List, Optional, Sequence

from .errors import InsufficientAdvancers, InvalidTeamCount, UnsetFormat
from .models import Fixture, MatchDraft, Round, RoundFormat, Team, MatchStatus, is_bye
from . import standings


def round_name(round_number_from_end: int, team_count: int) -> str:
    """Get the display name of a round from the number of teams playing in it."""
    if team_count < 1:
        raise InvalidTeamCount(team_count, minimum=1)
    if team_count == 2:
        return "Final"
    elif team_count == 4:
        return "Semi Final"
    elif team_count == 8:
        return "Quarter Final"
    elif team_count >= 16:
        return f"Round of {team_count}"
    # No agreed label for sizes like 6, 10 or 12
    return f"Round {round_number_from_end}"


def total_rounds_for_bracket(team_count: int) -> int:
    """Number of generate-next-round steps available for a bracket of team_count teams."""
    if team_count < 2:
        raise InvalidTeamCount(team_count)
    return math.ceil(math.log2(team_count)) + 1


def knockout_placeholder_name(index: int, round_value: int) -> str:
    return f"Winner Team Match {index + 1} Round {round_value}"


def round_robin_placeholder_name(index: int, round_value: int) -> str:
    return f"Winner Team {index + 1} Round {round_value}"


def advancing_count(team_count: int) -> int:
    """
    How many teams leave a round-robin round.

    The largest even number not above half the field, but never fewer than
    two while the field has two teams.
    """
    half = team_count // 2
    count = half - half % 2
    if count < 2:
        return min(2, team_count)
    return count


def distinct_teams(rnd: Round) -> List[Team]:
    """Teams appearing in a round, in order of first appearance, byes excluded."""
    seen = {}
    for match in rnd.matches:
        for team in (match.team1, match.team2):
            if is_bye(team):
                continue
            seen.setdefault(team.key, team)
    return list(seen.values())


def is_round_complete(rnd: Round) -> bool:
    """A round is fully decided once every match is a bye or in a terminal state."""
    return all(match.is_decided for match in rnd.matches)


def _placeholder(name: str, backend_placeholders: dict) -> Team:
    existing = backend_placeholders.get(name)
    if existing is not None:
        return Team(existing.id, existing.name, True)
    return Team(None, name, True)


def _knockout_winners(rnd: Round, backend_placeholders: dict) -> List[Team]:
    winners = []
    for index, match in enumerate(rnd.matches):
        winner = match.winner()
        if winner is not None:
            winners.append(winner)
        elif is_bye(match.team2) and not is_bye(match.team1):
            # A bye advances without the match ever being completed
            winners.append(Team(match.team1.id, match.team1.name))
        elif is_bye(match.team1) and not is_bye(match.team2):
            winners.append(Team(match.team2.id, match.team2.name))
        else:
            winners.append(_placeholder(knockout_placeholder_name(index, rnd.round_value),
                                        backend_placeholders))
    return winners


def _round_robin_winners(rnd: Round, backend_placeholders: dict, ranked: bool) -> List[Team]:
    count = advancing_count(len(distinct_teams(rnd)))
    if ranked and is_round_complete(rnd):
        return standings.rank_advancers(rnd, count)
    return [
        _placeholder(round_robin_placeholder_name(i, rnd.round_value), backend_placeholders)
        for i in range(count)
    ]


def compute_winners(rnd: Round, placeholders: Optional[Sequence[Team]] = None,
                    ranked: bool = False) -> List[Team]:
    """
    Determine the teams advancing out of a round.

    Args:
        rnd: Round with its format chosen.
        placeholders: Placeholder teams already stored by the backend for this
            round. One whose name matches a locally generated placeholder is
            returned in its place so the backend id is kept.
        ranked: For round-robin rounds, rank a fully decided round by its
            standings instead of returning anonymous placeholders.

    Returns:
        For knockout, one team per match in match order. For round robin,
        advancing_count(distinct teams) teams.
    """
    backend_placeholders = {team.name: team for team in placeholders or []}

    if rnd.format == RoundFormat.KNOCKOUT:
        return _knockout_winners(rnd, backend_placeholders)
    elif rnd.format == RoundFormat.ROUND_ROBIN:
        return _round_robin_winners(rnd, backend_placeholders, ranked)
    raise UnsetFormat(rnd.round_value)


def next_round_matches(advancers: Sequence[Team], round_format: RoundFormat,
                       round_value: int) -> List[MatchDraft]:
    """
    Pair the advancers of the round with value round_value into next-round drafts.

    Knockout pairs consecutive teams; an odd team out gets a bye. Round robin
    plays every unordered pair once.
    """
    if len(advancers) < 2:
        raise InsufficientAdvancers(len(advancers))

    next_value = round_value - 1
    drafts = []
    if round_format == RoundFormat.KNOCKOUT:
        for i in range(0, len(advancers), 2):
            if i + 1 < len(advancers):
                drafts.append(MatchDraft(advancers[i], advancers[i + 1], next_value))
            else:
                drafts.append(MatchDraft(advancers[i], None, next_value))
    elif round_format == RoundFormat.ROUND_ROBIN:
        for team1, team2 in combinations(advancers, 2):
            drafts.append(MatchDraft(team1, team2, next_value))
    else:
        raise UnsetFormat()
    return drafts


def dependent_round_values(fixture: Fixture, round_value: int) -> List[int]:
    """
    Round values whose pairings derive from the given round, latest round first.

    Regenerating a round invalidates every later round, so these are the
    rounds to tear down before the round is generated again.
    """
    values = [rnd.round_value for rnd in fixture.rounds if rnd.round_value < round_value]
    return sorted(values)


def has_results(rnd: Round) -> bool:
    """True when any real (non-bye) match of the round has been completed."""
    return any(
        match.status == MatchStatus.COMPLETED and not match.is_bye
        for match in rnd.matches
    )

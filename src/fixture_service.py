"""
Fixture workflows on top of the backend client and the bracket engine.

The engine decides who advances and how the next round is paired; this
module fetches the inputs it needs and asks the backend to persist the
outcome.
"""
import logging
from typing import List, Optional, Tuple

from bracket.engine import (
    compute_winners,
    dependent_round_values,
    has_results,
    is_round_complete,
    next_round_matches,
    round_name,
)
from bracket.errors import BracketError, RoundNotFound
from bracket.models import Fixture, MatchDraft, Round, RoundFormat, Team

logger = logging.getLogger(__name__)


class FixtureService:
    def __init__(self, client):
        self.client = client

    def load_fixture(self, tournament_id: int) -> Fixture:
        return self.client.get_existing_fixture(tournament_id)

    def _load_round(self, tournament_id: int, round_value: int) -> Round:
        rnd = self.client.get_round_by_value(tournament_id, round_value)
        if rnd is None:
            raise RoundNotFound(tournament_id, round_value)
        return rnd

    def round_winners(self, tournament_id: int, round_value: int, ranked: bool = False) -> List[Team]:
        """Advancers of a round, preferring placeholder teams the backend already stores."""
        rnd = self._load_round(tournament_id, round_value)
        placeholders = self.client.get_placeholder_teams(tournament_id, round_value)
        return compute_winners(rnd, placeholders, ranked=ranked)

    def describe_fixture(self, tournament_id: int) -> dict:
        """Fixture summary for display: every round with its completeness and advancers."""
        fixture = self.load_fixture(tournament_id)
        rounds = []
        for rnd in fixture.rounds:
            winners = None
            if rnd.format != RoundFormat.UNSET:
                placeholders = self.client.get_placeholder_teams(tournament_id, rnd.round_value)
                winners = [t.to_dict() for t in compute_winners(rnd, placeholders)]
            entry = rnd.to_dict()
            entry['complete'] = is_round_complete(rnd)
            entry['winners'] = winners
            rounds.append(entry)
        return {
            'tournamentId': fixture.tournament_id,
            'tournamentName': fixture.tournament_name,
            'rounds': rounds,
        }

    def preview_next_round(self, tournament_id: int, round_value: int,
                           round_format: RoundFormat) -> List[MatchDraft]:
        winners = self.round_winners(tournament_id, round_value)
        return next_round_matches(winners, round_format, round_value)

    def _persist_placeholders(self, tournament_id: int, winners: List[Team],
                              sport_id: Optional[int], created_by_id: Optional[int]) -> List[Team]:
        advancers = []
        for team in winners:
            if team.is_placeholder and team.id is None:
                logger.info(f'Creating placeholder team {team.name!r} for tournament {tournament_id}')
                team = self.client.create_placeholder_team(team.name, tournament_id, sport_id, created_by_id)
            advancers.append(team)
        return advancers

    def _ensure_no_results(self, fixture: Fixture, round_values: List[int]):
        for value in round_values:
            if has_results(fixture.round_by_value(value)):
                raise BracketError(
                    f"Round {value} already has completed matches and cannot be discarded."
                )

    def _discard_rounds_after(self, tournament_id: int, fixture: Fixture, round_value: int):
        """Delete every round built from round_value's output, latest round first."""
        for value in dependent_round_values(fixture, round_value):
            dependent = fixture.round_by_value(value)
            logger.info(f'Invalidating round {value} of tournament {tournament_id}')
            self.client.delete_placeholder_teams(tournament_id, value)
            if dependent.id is not None:
                self.client.delete_round(tournament_id, dependent.id)
        self.client.delete_placeholder_teams(tournament_id, round_value)

    def generate_next_round(self, tournament_id: int, round_value: int, round_format: RoundFormat,
                            sport_id: Optional[int] = None,
                            created_by_id: Optional[int] = None) -> Tuple[Round, List[MatchDraft]]:
        """
        Create the round after round_value and have the backend generate its matches.

        When that round already exists its matches are replaced, so every
        round built from it is deleted first. Raises InsufficientAdvancers
        before anything is written when the round produces fewer than two
        advancers.
        """
        current = self._load_round(tournament_id, round_value)
        placeholders = self.client.get_placeholder_teams(tournament_id, round_value)
        winners = compute_winners(current, placeholders)
        # Validates the advancer count and format before any write
        next_round_matches(winners, round_format, round_value)

        next_value = round_value - 1
        next_rnd = self.client.get_round_by_value(tournament_id, next_value)
        fixture = None
        if next_rnd is not None:
            if has_results(next_rnd):
                raise BracketError(
                    f"Round {next_value} already has results; regenerate it instead of generating it again."
                )
            fixture = self.load_fixture(tournament_id)
            self._ensure_no_results(fixture, dependent_round_values(fixture, next_value))

        advancers = self._persist_placeholders(tournament_id, winners, sport_id, created_by_id)
        drafts = next_round_matches(advancers, round_format, round_value)

        if next_rnd is None:
            name = round_name(next_value, len(advancers))
            logger.info(f'Creating round {next_value} ({name}) for tournament {tournament_id}')
            next_rnd = self.client.create_round(tournament_id, next_value, name, round_format)
        else:
            self._discard_rounds_after(tournament_id, fixture, next_value)

        if next_rnd.id is None:
            logger.warning(f'Round {next_value} has no id; backend match generation skipped')
            return next_rnd, drafts

        self.client.select_round_type(next_rnd.id, round_format)
        refreshed = self.client.get_round_by_value(tournament_id, next_value)
        return (refreshed or next_rnd), drafts

    def regenerate_round(self, tournament_id: int, round_value: int, round_format: RoundFormat) -> Round:
        """
        Choose a new format for an existing round.

        Every round generated from this round's output is deleted first,
        latest round first, together with the placeholder teams standing in
        for undecided winners. Neither this round nor any of those rounds may
        have completed matches.
        """
        if round_format == RoundFormat.UNSET:
            raise BracketError("Choose KNOCKOUT or ROUND_ROBIN to regenerate a round.")
        fixture = self.load_fixture(tournament_id)
        rnd = fixture.round_by_value(round_value)
        if rnd is None:
            raise RoundNotFound(tournament_id, round_value)
        if has_results(rnd):
            raise BracketError("Cannot regenerate round as some matches are already completed.")
        self._ensure_no_results(fixture, dependent_round_values(fixture, round_value))
        if rnd.id is None:
            raise BracketError(f"Round {round_value} has no id and cannot be regenerated.")

        self._discard_rounds_after(tournament_id, fixture, round_value)
        self.client.select_round_type(rnd.id, round_format)
        return self.client.get_round_by_value(tournament_id, round_value) or rnd

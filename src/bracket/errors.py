"""
Errors raised by the bracket engine.

All of them are recoverable caller errors: the message is meant to be shown
to the user by whichever view invoked the engine.
"""


class BracketError(Exception):
    """Base class for bracket engine errors."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class InsufficientAdvancers(BracketError):
    def __init__(self, count: int):
        super().__init__(
            f"At least 2 advancing teams are needed to generate the next round ({count} available)."
        )
        self.count = count


class InvalidTeamCount(BracketError):
    def __init__(self, team_count: int, minimum: int = 2):
        noun = "team" if minimum == 1 else "teams"
        super().__init__(f"A bracket needs at least {minimum} {noun}, got {team_count}.")
        self.team_count = team_count
        self.minimum = minimum


class UnsetFormat(BracketError):
    def __init__(self, round_value=None):
        if round_value is None:
            message = "Choose a format (KNOCKOUT or ROUND_ROBIN) for this round first."
        else:
            message = f"Choose a format (KNOCKOUT or ROUND_ROBIN) for round {round_value} first."
        super().__init__(message)
        self.round_value = round_value


class InvalidPayload(BracketError):
    """Raised when backend or file data cannot be turned into bracket entities."""


class RoundNotFound(BracketError):
    def __init__(self, tournament_id: int, round_value: int):
        super().__init__(f"Round {round_value} does not exist for tournament {tournament_id}.")
        self.tournament_id = tournament_id
        self.round_value = round_value

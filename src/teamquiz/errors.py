"""Typed failures raised by game commands.

Every error here is recoverable: it is raised before any state is
mutated and is meant to be rendered to the player by the command
dispatcher, not broadcast.
"""


class GameError(Exception):
    """Base class for all rejected game commands."""


class InvalidName(GameError):
    """Raised when a team name is empty or contains disallowed characters."""

    def __init__(self, name: str, reason: str = "invalid team name"):
        self.name = name
        self.reason = reason
        super().__init__(f"{reason}: {name!r}")


class TeamNotFound(GameError):
    """Raised when a referenced team does not exist."""

    def __init__(self, team: str):
        self.team = team
        super().__init__(f"Team not found: {team}")


class NotOnTeam(GameError):
    """Raised when a player without a team tries to play."""

    def __init__(self, player):
        self.player = player
        super().__init__(f"Player {player} is not on a team")


class WrongPhase(GameError):
    """Raised when a command is illegal in the current game or quiz phase."""


class NoQuizInProgress(WrongPhase):
    """Raised by quiz-only commands while the game is in setup."""

    def __init__(self, message: str = "There is no quiz in progress"):
        super().__init__(message)


class TeamLocked(GameError):
    """Raised when a player tries to switch teams during a quiz."""

    def __init__(self, player):
        self.player = player
        super().__init__("Teams can not be changed during a quiz")


class InvalidWager(GameError):
    """Raised when a wager is outside the allowed range."""

    def __init__(self, amount: int, maximum: int):
        self.amount = amount
        self.maximum = maximum
        super().__init__(f"Wager must be between 0 and {maximum}, got {amount}")


class LoadError(GameError):
    """Raised when a quiz definition can not be loaded."""

    def __init__(self, source, message: str):
        self.source = source
        super().__init__(f"Could not load quiz {source}: {message}")


class QuizNotFoundError(LoadError):
    """The quiz definition source does not exist."""

    def __init__(self, source):
        super().__init__(source, "file not found")


class QuizParseError(LoadError):
    """The quiz definition source is not a valid quiz."""

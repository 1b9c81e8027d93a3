"""teamquiz - engine for team trivia games played over chat.

Quick start:
    from teamquiz import Pool, CollectingTransport

    pool = Pool(CollectingTransport())
    game = pool.get_or_create(community_id, channel_id)
    game.join_team(player_id, "Red")
    game.begin("quizzes/sample.json")
    pool.tick_all(1.0)
"""

from teamquiz.engine import Game, GameClock, GamePhase, GuessOutcome, Pool, Quiz, TeamRegistry
from teamquiz.events import QuizPhase
from teamquiz.models import QuizDefinition, QuizSettings, Team, TeamId, sanitize_name
from teamquiz.output import CollectingTransport, ConsoleTransport, OutputPipe, Recipient
from teamquiz.errors import (
    GameError,
    InvalidName,
    TeamNotFound,
    NotOnTeam,
    WrongPhase,
    NoQuizInProgress,
    TeamLocked,
    InvalidWager,
    LoadError,
    QuizNotFoundError,
    QuizParseError,
)

__all__ = [
    "Game",
    "GameClock",
    "GamePhase",
    "GuessOutcome",
    "Pool",
    "Quiz",
    "TeamRegistry",
    "QuizPhase",
    "QuizDefinition",
    "QuizSettings",
    "Team",
    "TeamId",
    "sanitize_name",
    "CollectingTransport",
    "ConsoleTransport",
    "OutputPipe",
    "Recipient",
    "GameError",
    "InvalidName",
    "TeamNotFound",
    "NotOnTeam",
    "WrongPhase",
    "NoQuizInProgress",
    "TeamLocked",
    "InvalidWager",
    "LoadError",
    "QuizNotFoundError",
    "QuizParseError",
]

__version__ = "0.1.0"

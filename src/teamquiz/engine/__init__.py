"""Engine package - game state machines and the community pool."""

from .team_registry import TeamRegistry
from .quiz import Quiz, GuessOutcome, PhaseTimer, RoundState
from .game import Game, GamePhase
from .pool import Pool
from .clock import GameClock

__all__ = [
    "TeamRegistry",
    "Quiz",
    "GuessOutcome",
    "PhaseTimer",
    "RoundState",
    "Game",
    "GamePhase",
    "Pool",
    "GameClock",
]

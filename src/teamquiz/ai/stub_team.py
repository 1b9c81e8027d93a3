"""Stub teams that play a quiz without a human behind them.

Useful for:
- The command-line simulation
- Integration tests (full quiz flow without a chat client)

A StubTeam looks at the open question and answers correctly with a
fixed probability. It acts at most once per phase of each question.
"""

import logging
import random
import string
from typing import Optional

from teamquiz.engine import Game, GuessOutcome
from teamquiz.errors import GameError
from teamquiz.events import QuizPhase
from teamquiz.models import PlayerId, Question, QuizSettings

logger = logging.getLogger(__name__)


class StubTeam:
    """One player standing in for a whole team."""

    def __init__(
        self,
        player: PlayerId,
        team_name: str,
        accuracy: float = 0.5,
        seed: Optional[int] = None,
    ):
        """Initialize the stub.

        Args:
            player: Player id used for every command.
            team_name: Team the player joins.
            accuracy: Probability of answering correctly, 0.0 to 1.0.
            seed: Optional seed for reproducible answers.
        """
        if not 0.0 <= accuracy <= 1.0:
            raise ValueError(f"accuracy must be between 0 and 1, got {accuracy}")
        self.player = player
        self.team_name = team_name
        self.accuracy = accuracy
        self._rng = random.Random(seed)
        self._acted: set[tuple[int, QuizPhase]] = set()

    def join(self, game: Game) -> None:
        game.join_team(self.player, self.team_name)

    def act(
        self,
        game: Game,
        phase: Optional[QuizPhase],
        number: int,
        question: Optional[Question],
        settings: QuizSettings,
    ) -> Optional[GuessOutcome]:
        """Take this stub's turn for the given phase, once per question.

        Returns:
            The guess outcome when a guess was made, else None.
        """
        if phase is None or question is None or (number, phase) in self._acted:
            return None
        self._acted.add((number, phase))
        try:
            if phase == QuizPhase.WAGER:
                game.wager(self.player, self._rng.randint(0, settings.max_wager_floor))
                return None
            if phase == QuizPhase.QUESTION:
                return game.guess(self.player, self._free_answer(question))
            if phase == QuizPhase.VOTE:
                return game.guess(self.player, self._vote(question))
        except GameError as e:
            logger.debug("Stub %s could not act in %s: %s", self.team_name, phase.value, e)
        return None

    def _knows_it(self) -> bool:
        return self._rng.random() < self.accuracy

    def _free_answer(self, question: Question) -> str:
        if self._knows_it():
            return self._rng.choice(question.answers)
        return "no idea"

    def _vote(self, question: Question) -> str:
        if self._knows_it():
            return string.ascii_uppercase[min(question.correct_choices())]
        return string.ascii_uppercase[self._rng.randrange(len(question.choices))]


def create_stub_teams(
    count: int,
    accuracy: float = 0.5,
    seed: Optional[int] = None,
) -> list[StubTeam]:
    """Create ``count`` stub teams named "Team 1", "Team 2", ..."""
    base = seed if seed is not None else random.randint(1, 1000000)
    return [
        StubTeam(player=i + 1, team_name=f"Team {i + 1}", accuracy=accuracy, seed=base + i)
        for i in range(count)
    ]

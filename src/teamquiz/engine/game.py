"""Game - per-community state machine wrapping setup and quiz play.

Phases:
    STARTUP -> SETUP (immediately, at construction)
    SETUP   -> QUIZ  (begin)
    QUIZ    -> SETUP (when the quiz finishes)

Every public method runs under the game's lock for its whole duration,
so a command and a concurrent tick never interleave.
"""

import functools
import logging
import threading
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from teamquiz.engine.quiz import GuessOutcome, Quiz
from teamquiz.engine.team_registry import TeamRegistry
from teamquiz.errors import NoQuizInProgress, NotOnTeam, TeamLocked, WrongPhase
from teamquiz.events import QuizPhase
from teamquiz.models import PlayerId, QuizDefinition, QuizSettings, Team, TeamId, sanitize_name
from teamquiz.output import ALL_TEAMS, ChannelId, OutputPipe

logger = logging.getLogger(__name__)


class GamePhase(str, Enum):
    """Macro phases of a community's game."""

    STARTUP = "STARTUP"
    SETUP = "SETUP"
    QUIZ = "QUIZ"


def _locked(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


class Game:
    """One community's game: its teams, its output and an optional running quiz.

    Usage:
        game = Game(OutputPipe(community, channel, transport))
        game.join_team(player, "Red")
        game.begin("quizzes/sample.json")
        game.tick(1.0)
    """

    def __init__(
        self,
        output: OutputPipe,
        teams: Optional[TeamRegistry] = None,
        settings: Optional[QuizSettings] = None,
    ):
        """Initialize the game in SETUP.

        Args:
            output: Output sink for this community.
            teams: Team registry to use; a fresh one by default.
            settings: Default quiz settings for quizzes started here.
        """
        self._lock = threading.RLock()
        self._output = output
        self._teams = teams if teams is not None else TeamRegistry()
        self._settings = settings or QuizSettings()
        self._paused = False
        self._phase = GamePhase.STARTUP
        self._quiz: Optional[Quiz] = None
        self._set_phase(GamePhase.SETUP)

    @property
    def lock(self) -> threading.RLock:
        """The game lock, for callers that need several commands to be atomic."""
        return self._lock

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def quiz_phase(self) -> Optional[QuizPhase]:
        with self._lock:
            return self._quiz.phase if self._quiz is not None else None

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def output(self) -> OutputPipe:
        return self._output

    def _set_phase(self, phase: GamePhase, quiz: Optional[Quiz] = None) -> None:
        if (phase == GamePhase.QUIZ) != (quiz is not None):
            raise ValueError("A quiz is required exactly in the QUIZ phase")
        logger.info("[%s] Game phase: %s -> %s", self._output.community, self._phase.value, phase.value)
        self._phase = phase
        self._quiz = quiz

    def _require_quiz(self) -> Quiz:
        if self._phase == GamePhase.QUIZ:
            return self._quiz
        if self._phase in (GamePhase.STARTUP, GamePhase.SETUP):
            logger.debug("[%s] Rejected: no quiz in progress", self._output.community)
            raise NoQuizInProgress()
        raise ValueError(f"Unknown game phase: {self._phase}")

    def _require_team(self, player: PlayerId) -> TeamId:
        team_id = self._teams.find_team_of(player)
        if team_id is None:
            logger.debug("[%s] Rejected: player %s is not on a team", self._output.community, player)
            raise NotOnTeam(player)
        return team_id

    def _require_unlocked(self, player: PlayerId) -> None:
        if self._phase != GamePhase.SETUP and self._teams.find_team_of(player) is not None:
            logger.debug(
                "[%s] Rejected: player %s can not change teams mid-quiz",
                self._output.community,
                player,
            )
            raise TeamLocked(player)

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------

    @_locked
    def tick(self, dt: float) -> None:
        """Advance the running quiz by ``dt`` seconds. No-op while paused."""
        if self._paused:
            return
        if self._phase == GamePhase.QUIZ:
            self._quiz.tick(dt)
            if self._quiz.is_over():
                self._set_phase(GamePhase.SETUP)
        elif self._phase in (GamePhase.STARTUP, GamePhase.SETUP):
            return
        else:
            raise ValueError(f"Unknown game phase: {self._phase}")

    # ------------------------------------------------------------------
    # Quiz commands
    # ------------------------------------------------------------------

    @_locked
    def begin(self, quiz_source: Union[str, Path]) -> Quiz:
        """Load a quiz and start it.

        Raises:
            WrongPhase: If a quiz is already running.
            LoadError: If the quiz can not be loaded. The game is unchanged.
        """
        if self._phase != GamePhase.SETUP:
            logger.debug("[%s] Rejected begin in %s", self._output.community, self._phase.value)
            raise WrongPhase("Cannot begin a quiz outside of the setup phase")
        definition = QuizDefinition.open(quiz_source)
        quiz = Quiz(definition, self._teams, self._output, self._settings)
        self._set_phase(GamePhase.QUIZ, quiz)
        return quiz

    @_locked
    def skip(self) -> QuizPhase:
        """Force the running quiz into its next phase.

        Raises:
            NoQuizInProgress: If no quiz is running.
        """
        phase = self._require_quiz().skip_phase()
        if self._quiz.is_over():
            self._set_phase(GamePhase.SETUP)
        return phase

    @_locked
    def guess(self, player: PlayerId, text: str) -> GuessOutcome:
        """Submit an answer on behalf of the player's team.

        Raises:
            NotOnTeam: If the player has no team.
            NoQuizInProgress: If no quiz is running.
            WrongPhase: If no question is open.
        """
        team_id = self._require_team(player)
        return self._require_quiz().guess(team_id, text)

    @_locked
    def wager(self, player: PlayerId, amount: int) -> int:
        """Place the player's team wager for the upcoming question."""
        team_id = self._require_team(player)
        return self._require_quiz().wager(team_id, amount)

    # ------------------------------------------------------------------
    # Team commands
    # ------------------------------------------------------------------

    @_locked
    def join_team(self, player: PlayerId, team_name: str) -> Team:
        """Put a player on a team.

        During a quiz only players without a team may join.

        Raises:
            TeamLocked: If the player is already on a team mid-quiz.
            InvalidName: If the team name is invalid.
        """
        self._require_unlocked(player)
        return self._teams.join(player, team_name)

    @_locked
    def leave_team(self, player: PlayerId) -> None:
        """Take a player off their team. Not allowed mid-quiz."""
        self._require_unlocked(player)
        self._teams.leave_all(player)

    @_locked
    def disband_team(self, team_name: str) -> Team:
        team = self._teams.disband(team_name)
        if self._quiz is not None:
            self._quiz.forget_team(team.id)
        self._output.say(ALL_TEAMS, f"Team {team.display_name} was disbanded")
        return team

    @_locked
    def adjust_score(self, team: Union[TeamId, str], delta: int) -> Team:
        """Add ``delta`` to a team's score and announce the new score.

        Raises:
            InvalidName: If ``team`` is not a valid team name.
            TeamNotFound: If the team does not exist.
        """
        updated = self._teams.adjust_score(sanitize_name(team), delta)
        self._output.say(
            ALL_TEAMS,
            f"Team {updated.display_name}'s score was updated to {updated.score} points",
        )
        return updated

    @_locked
    def reset_teams(self) -> None:
        if self._quiz is not None:
            for team in self._teams.snapshot():
                self._quiz.forget_team(team.id)
        self._teams.reset_all()
        self._output.say(ALL_TEAMS, "Teams were reset")

    @_locked
    def reset_scores(self) -> None:
        self._teams.reset_scores()
        self._output.say(ALL_TEAMS, "Scores were reset")

    @_locked
    def get_teams(self) -> list[Team]:
        """Copies of all teams, highest score first."""
        return sorted(self._teams.snapshot(), key=lambda t: (-t.score, t.display_name.casefold()))

    # ------------------------------------------------------------------
    # Moderation
    # ------------------------------------------------------------------

    @_locked
    def pause(self) -> None:
        if not self._paused:
            self._paused = True
            self._output.say(ALL_TEAMS, "The game is now paused, use `!unpause` to resume.")

    @_locked
    def unpause(self) -> None:
        if self._paused:
            self._paused = False
            self._output.say(ALL_TEAMS, "The game has resumed.")

    @_locked
    def update_team_channels(self, mapping: dict[TeamId, ChannelId]) -> None:
        self._output.update_team_channels(mapping)

"""Quiz - the phase sub-machine that runs one quiz session.

Round order (every question is preceded by a cooldown):
- standard question:        COOLDOWN -> QUESTION -> RESULTS
- multiple choice question: COOLDOWN -> VOTE -> RESULTS
- wager question:           COOLDOWN -> WAGER -> QUESTION|VOTE -> RESULTS

After the last RESULTS the quiz moves to FINISHED.

Time only advances through ``tick(dt)``; the quiz never reads a clock.
Leftover time from an expired phase is carried into the next one.

Skip policy: ``skip_phase()`` expires the current phase and performs
exactly one transition, running the entry effects of the next phase.
Skipping can never jump over RESULTS, so vote and wager scoring always
run. Answers that were not submitted before the skip are not scored.
"""

import logging
from collections import deque
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from teamquiz.engine.team_registry import TeamRegistry
from teamquiz.errors import InvalidWager, TeamNotFound, WrongPhase
from teamquiz.events import (
    CorrectGuess,
    NewQuestion,
    PhaseChanged,
    QuestionResults,
    QuizOver,
    QuizPhase,
    QuizStarted,
    Standing,
    WagerOpened,
)
from teamquiz.models import (
    Question,
    QuestionKind,
    QuizDefinition,
    QuizSettings,
    TeamId,
    choice_letter,
)
from teamquiz.output import ALL_TEAMS, OutputPipe, Recipient

logger = logging.getLogger(__name__)

ANSWER_PHASES = (QuizPhase.QUESTION, QuizPhase.VOTE)


class GuessOutcome(str, Enum):
    """What happened to a submitted guess."""

    CORRECT = "CORRECT"  # scored
    INCORRECT = "INCORRECT"  # wrong free-form answer, may retry
    DUPLICATE = "DUPLICATE"  # team already answered this question, ignored
    RECORDED = "RECORDED"  # vote stored, scored at results
    UNRECOGNIZED = "UNRECOGNIZED"  # vote did not name a choice, not stored


class PhaseTimer(BaseModel):
    """Accumulated time spent in the current phase."""

    duration: float
    elapsed: float = 0.0

    def tick(self, dt: float) -> None:
        self.elapsed += dt

    def is_over(self) -> bool:
        return self.elapsed >= self.duration

    @property
    def overflow(self) -> float:
        return max(0.0, self.elapsed - self.duration)

    @property
    def remaining(self) -> float:
        return max(0.0, self.duration - self.elapsed)


class RoundState(BaseModel):
    """Ephemeral state for the question being played."""

    number: int
    question: Question
    plan: list[QuizPhase]  # phases still to enter, RESULTS last
    correct_teams: list[TeamId] = Field(default_factory=list)
    votes: dict[TeamId, int] = Field(default_factory=dict)
    wagers: dict[TeamId, int] = Field(default_factory=dict)


class Quiz:
    """One running quiz over a game's team registry.

    The registry and output pipe belong to the owning Game; the quiz only
    uses them while the Game holds its lock and calls into the quiz.
    """

    def __init__(
        self,
        definition: QuizDefinition,
        teams: TeamRegistry,
        output: OutputPipe,
        settings: Optional[QuizSettings] = None,
    ):
        """Create the quiz and enter its first cooldown.

        Args:
            definition: The loaded quiz; its questions are copied.
            teams: Registry used for scoring.
            output: Where announcements are sent.
            settings: Game-wide defaults, overridden by the definition's
                own settings block.
        """
        self.title = definition.title
        self.settings = (settings or QuizSettings()).merged(definition.settings)
        self._teams = teams
        self._output = output
        self._queue: deque[Question] = deque(q.model_copy(deep=True) for q in definition.questions)
        self._total = len(self._queue)
        self._round: Optional[RoundState] = None
        self._phase = QuizPhase.STARTUP
        self._timer = PhaseTimer(duration=0.0)
        self._advance()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def phase(self) -> QuizPhase:
        return self._phase

    @property
    def remaining_questions(self) -> int:
        return len(self._queue)

    @property
    def current_question(self) -> Optional[Question]:
        return self._round.question if self._round is not None else None

    @property
    def question_number(self) -> int:
        """1-based number of the question being played, 0 between questions."""
        return self._round.number if self._round is not None else 0

    @property
    def time_remaining(self) -> float:
        return self._timer.remaining

    def is_over(self) -> bool:
        return self._phase == QuizPhase.FINISHED

    def standings(self) -> list[Standing]:
        teams = sorted(self._teams.snapshot(), key=lambda t: (-t.score, t.display_name.casefold()))
        return [Standing(team=t.display_name, score=t.score) for t in teams]

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------

    def tick(self, dt: float) -> None:
        """Advance phase timers by ``dt`` seconds, transitioning as they expire."""
        if self.is_over():
            return
        self._timer.tick(dt)
        while not self.is_over() and self._timer.is_over():
            leftover = self._timer.overflow
            self._advance()
            self._timer.tick(leftover)

    def skip_phase(self) -> QuizPhase:
        """End the current phase now. Returns the phase entered."""
        if not self.is_over():
            logger.info("Skipping %s", self._phase.value)
            self._advance()
        return self._phase

    # ------------------------------------------------------------------
    # Team actions
    # ------------------------------------------------------------------

    def guess(self, team_id: TeamId, text: str) -> GuessOutcome:
        """Submit an answer for a team.

        Raises:
            WrongPhase: If no question is open for answers.
        """
        if self._phase not in ANSWER_PHASES or self._round is None:
            logger.debug("Rejected guess from %s in %s", team_id, self._phase.value)
            raise WrongPhase("Answers are only accepted while a question is open")

        round_state = self._round
        question = round_state.question
        team = Recipient.for_team(team_id)

        if self._phase == QuizPhase.VOTE:
            if team_id in round_state.votes:
                return GuessOutcome.DUPLICATE
            choice = question.choice_index(text)
            if choice is None:
                self._output.say(team, f"{text!r} is not one of the choices")
                return GuessOutcome.UNRECOGNIZED
            round_state.votes[team_id] = choice
            self._output.say(team, f"Vote recorded: {choice_letter(choice)}")
            return GuessOutcome.RECORDED

        if team_id in round_state.correct_teams:
            return GuessOutcome.DUPLICATE
        if not question.is_correct(text):
            self._output.say(team, f"Sorry, {text!r} is not the answer")
            return GuessOutcome.INCORRECT

        points = self._points_for(team_id)
        updated = self._teams.adjust_score(team_id, points)
        round_state.correct_teams.append(team_id)
        logger.info("Team %s answered question %d correctly", team_id, round_state.number)
        self._output.say(team, f"Correct! Your team now has {updated.score} points")
        self._output.push(CorrectGuess(team=updated.display_name, points=points))
        return GuessOutcome.CORRECT

    def wager(self, team_id: TeamId, amount: int) -> int:
        """Place or replace a team's wager for the current question.

        Raises:
            WrongPhase: Outside the wager phase.
            TeamNotFound: If the team no longer exists.
            InvalidWager: If ``amount`` is negative or above the maximum.
        """
        if self._phase != QuizPhase.WAGER or self._round is None:
            logger.debug("Rejected wager from %s in %s", team_id, self._phase.value)
            raise WrongPhase("Wagers are only accepted before a wager question")
        team = self._teams.get(team_id)
        if team is None:
            raise TeamNotFound(team_id)
        maximum = max(team.score, self.settings.max_wager_floor)
        if not 0 <= amount <= maximum:
            logger.debug("Rejected wager of %d from %s, maximum %d", amount, team_id, maximum)
            raise InvalidWager(amount, maximum)
        self._round.wagers[team_id] = amount
        self._output.say(Recipient.for_team(team_id), f"Wager of {amount} points placed")
        return amount

    def forget_team(self, team_id: TeamId) -> None:
        """Drop a team's answers, vote and wager for the current question.

        Called when a team is removed mid-quiz, so a new team created
        under the same name starts the round clean.
        """
        if self._round is None:
            return
        if team_id in self._round.correct_teams:
            self._round.correct_teams.remove(team_id)
        self._round.votes.pop(team_id, None)
        self._round.wagers.pop(team_id, None)
        logger.debug("Round %d forgot team %s", self._round.number, team_id)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _advance(self) -> None:
        """Leave the current phase and enter the next scheduled one."""
        previous = self._phase
        if previous == QuizPhase.STARTUP:
            self._enter(QuizPhase.COOLDOWN, previous)
        elif previous == QuizPhase.COOLDOWN:
            if not self._queue:
                self._enter(QuizPhase.FINISHED, previous)
                return
            question = self._queue.popleft()
            self._round = RoundState(
                number=self._total - len(self._queue),
                question=question,
                plan=self._plan_for(question),
            )
            self._enter(self._round.plan.pop(0), previous)
        elif previous in (QuizPhase.WAGER, QuizPhase.QUESTION, QuizPhase.VOTE):
            self._enter(self._round.plan.pop(0), previous)
        elif previous == QuizPhase.RESULTS:
            self._round = None
            self._enter(QuizPhase.COOLDOWN if self._queue else QuizPhase.FINISHED, previous)
        elif previous == QuizPhase.FINISHED:
            return
        else:
            raise ValueError(f"Unknown quiz phase: {previous}")

    def _enter(self, phase: QuizPhase, previous: QuizPhase) -> None:
        logger.info("Quiz phase: %s -> %s", previous.value, phase.value)
        self._phase = phase
        self._timer = PhaseTimer(duration=self._duration_for(phase))

        if phase == QuizPhase.COOLDOWN:
            if previous == QuizPhase.STARTUP:
                self._output.push(QuizStarted(title=self.title, question_count=self._total))
            else:
                self._output.push(PhaseChanged(previous=previous, current=phase))
        elif phase == QuizPhase.WAGER:
            self._output.push(
                WagerOpened(
                    number=self._round.number,
                    category=self._round.question.category,
                    duration=self._timer.duration,
                )
            )
        elif phase in ANSWER_PHASES:
            question = self._round.question
            self._output.push(
                NewQuestion(
                    number=self._round.number,
                    total=self._total,
                    prompt=question.prompt,
                    choices=list(question.choices),
                    duration=self._timer.duration,
                )
            )
        elif phase == QuizPhase.RESULTS:
            self._score_round()
        elif phase == QuizPhase.FINISHED:
            self._output.push(QuizOver(standings=self.standings()))
        elif phase == QuizPhase.STARTUP:
            raise ValueError("A quiz can not re-enter startup")
        else:
            raise ValueError(f"Unknown quiz phase: {phase}")

    def _plan_for(self, question: Question) -> list[QuizPhase]:
        plan = [QuizPhase.WAGER] if question.wager else []
        if question.kind == QuestionKind.MULTIPLE_CHOICE:
            plan.append(QuizPhase.VOTE)
        elif question.kind == QuestionKind.STANDARD:
            plan.append(QuizPhase.QUESTION)
        else:
            raise ValueError(f"Unknown question kind: {question.kind}")
        plan.append(QuizPhase.RESULTS)
        return plan

    def _duration_for(self, phase: QuizPhase) -> float:
        question = self._round.question if self._round is not None else None
        if phase == QuizPhase.COOLDOWN:
            return self.settings.cooldown
        if phase == QuizPhase.WAGER:
            return self.settings.wager
        if phase == QuizPhase.QUESTION:
            return question.duration or self.settings.question
        if phase == QuizPhase.VOTE:
            return question.duration or self.settings.vote
        if phase == QuizPhase.RESULTS:
            return self.settings.results
        return 0.0

    def _points_for(self, team_id: TeamId) -> int:
        question = self._round.question
        if question.wager:
            return self._round.wagers.get(team_id, 0)
        return question.points if question.points is not None else self.settings.points

    def _score_round(self) -> None:
        """Score votes, settle wagers and reveal the answer."""
        round_state = self._round
        question = round_state.question

        correct_choices = question.correct_choices()
        for team_id, choice in round_state.votes.items():
            if choice in correct_choices:
                self._apply(team_id, self._points_for(team_id))
                round_state.correct_teams.append(team_id)

        for team_id, amount in round_state.wagers.items():
            if team_id not in round_state.correct_teams and amount:
                self._apply(team_id, -amount)

        names = []
        for team_id in round_state.correct_teams:
            team = self._teams.get(team_id)
            if team is not None:
                names.append(team.display_name)

        self._output.push(
            QuestionResults(
                number=round_state.number,
                answer=question.display_answer(),
                correct_teams=names,
                standings=self.standings(),
            ),
            ALL_TEAMS,
        )

    def _apply(self, team_id: TeamId, delta: int) -> None:
        try:
            self._teams.adjust_score(team_id, delta)
        except TeamNotFound:
            logger.debug("Team %s left before results, skipping score change", team_id)

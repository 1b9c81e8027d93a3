"""Structured notifications pushed to the output sink."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class QuizPhase(str, Enum):
    """Sub-phases of a running quiz."""

    STARTUP = "STARTUP"
    COOLDOWN = "COOLDOWN"
    QUESTION = "QUESTION"
    VOTE = "VOTE"
    WAGER = "WAGER"
    RESULTS = "RESULTS"
    FINISHED = "FINISHED"


class Standing(BaseModel):
    """One line of a scoreboard."""

    team: str
    score: int

    def __str__(self) -> str:
        return f"{self.team}: {self.score}"


class QuizEvent(BaseModel):
    """Base class for all quiz notifications."""

    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())

    def __str__(self) -> str:
        return self.__class__.__name__


class QuizStarted(QuizEvent):
    title: str = ""
    question_count: int

    def __str__(self) -> str:
        name = f" {self.title!r}" if self.title else ""
        return f"The quiz{name} is starting: {self.question_count} questions."


class PhaseChanged(QuizEvent):
    previous: QuizPhase
    current: QuizPhase

    def __str__(self) -> str:
        return f"PhaseChanged({self.previous.value} -> {self.current.value})"


class WagerOpened(QuizEvent):
    number: int
    category: Optional[str] = None
    duration: float

    def __str__(self) -> str:
        topic = f" The category is {self.category}." if self.category else ""
        return f"Question {self.number} is a wager question.{topic} Place your wagers!"


class NewQuestion(QuizEvent):
    """A question is open for answers."""

    number: int
    total: int
    prompt: str
    choices: list[str] = Field(default_factory=list)
    duration: float

    def __str__(self) -> str:
        lines = [f"Question {self.number}/{self.total}: {self.prompt}"]
        lines.extend(f"  {chr(ord('A') + i)}) {choice}" for i, choice in enumerate(self.choices))
        return "\n".join(lines)


class CorrectGuess(QuizEvent):
    team: str
    points: int

    def __str__(self) -> str:
        return f"Team {self.team} found the answer (+{self.points})"


class QuestionResults(QuizEvent):
    """The answer is revealed along with the scoreboard."""

    number: int
    answer: str
    correct_teams: list[str] = Field(default_factory=list)
    standings: list[Standing] = Field(default_factory=list)

    def __str__(self) -> str:
        winners = ", ".join(self.correct_teams) if self.correct_teams else "nobody"
        board = "; ".join(str(s) for s in self.standings)
        return f"The answer was {self.answer}. Correct: {winners}. Scores: {board}"


class QuizOver(QuizEvent):
    standings: list[Standing] = Field(default_factory=list)

    def __str__(self) -> str:
        if not self.standings:
            return "The quiz is over."
        return f"The quiz is over! Winner: {self.standings[0].team} with {self.standings[0].score} points"

"""Events package."""

from teamquiz.events.quiz_events import (
    QuizPhase,
    Standing,
    QuizEvent,
    QuizStarted,
    PhaseChanged,
    WagerOpened,
    NewQuestion,
    CorrectGuess,
    QuestionResults,
    QuizOver,
)

__all__ = [
    "QuizPhase",
    "Standing",
    "QuizEvent",
    "QuizStarted",
    "PhaseChanged",
    "WagerOpened",
    "NewQuestion",
    "CorrectGuess",
    "QuestionResults",
    "QuizOver",
]

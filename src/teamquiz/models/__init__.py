"""Models package."""

from teamquiz.models.team import (
    PlayerId,
    TeamId,
    Team,
    sanitize_name,
    clean_display_name,
)
from teamquiz.models.settings import QuizSettings
from teamquiz.models.quiz_definition import (
    Question,
    QuestionKind,
    QuizDefinition,
    normalize_answer,
    choice_letter,
)

__all__ = [
    "PlayerId",
    "TeamId",
    "Team",
    "sanitize_name",
    "clean_display_name",
    "QuizSettings",
    "Question",
    "QuestionKind",
    "QuizDefinition",
    "normalize_answer",
    "choice_letter",
]

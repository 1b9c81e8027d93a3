"""Quiz definition file format.

A quiz is a JSON document::

    {
      "title": "Friday quiz",
      "settings": {"cooldown": 5, "question": 45},
      "questions": [
        {"prompt": "Capital of France?", "answers": ["Paris"]},
        {"prompt": "Largest planet?", "answers": ["B"],
         "choices": ["Mars", "Jupiter", "Venus"]},
        {"prompt": "6 x 7?", "answers": ["42"], "wager": true,
         "category": "Numbers"}
      ]
    }
"""

import logging
import re
import string
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from teamquiz.errors import QuizNotFoundError, QuizParseError
from teamquiz.models.settings import QuizSettings

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def normalize_answer(text: str) -> str:
    """Case-fold and collapse whitespace for answer comparison."""
    return _WHITESPACE.sub(" ", text).strip().casefold()


def choice_letter(index: int) -> str:
    return string.ascii_uppercase[index]


class QuestionKind(str, Enum):
    """How a question is answered."""

    STANDARD = "STANDARD"  # free-form guesses
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"  # one vote per team


class Question(BaseModel):
    """A single quiz question."""

    prompt: str = Field(min_length=1)
    answers: list[str] = Field(min_length=1)
    choices: list[str] = Field(default_factory=list, max_length=len(string.ascii_uppercase))
    category: Optional[str] = None
    wager: bool = False
    points: Optional[int] = Field(default=None, ge=0)
    duration: Optional[float] = Field(default=None, gt=0)

    @field_validator("answers")
    @classmethod
    def answers_not_blank(cls, answers: list[str]) -> list[str]:
        if any(not normalize_answer(a) for a in answers):
            raise ValueError("answers must not be blank")
        return answers

    @model_validator(mode="after")
    def answers_match_choices(self) -> "Question":
        if self.choices:
            for answer in self.answers:
                if self.choice_index(answer) is None:
                    raise ValueError(f"answer {answer!r} does not name one of the choices")
        return self

    @property
    def kind(self) -> QuestionKind:
        return QuestionKind.MULTIPLE_CHOICE if self.choices else QuestionKind.STANDARD

    def choice_index(self, text: str) -> Optional[int]:
        """Resolve a choice letter ("a", "B") or choice text to its index."""
        wanted = normalize_answer(text)
        for index, choice in enumerate(self.choices):
            if wanted == choice_letter(index).casefold() or wanted == normalize_answer(choice):
                return index
        return None

    def correct_choices(self) -> set[int]:
        return {self.choice_index(answer) for answer in self.answers}

    def is_correct(self, text: str) -> bool:
        """Check a free-form guess against the accepted answers."""
        wanted = normalize_answer(text)
        return any(wanted == normalize_answer(answer) for answer in self.answers)

    def display_answer(self) -> str:
        if self.choices:
            return ", ".join(
                f"{choice_letter(i)}) {self.choices[i]}" for i in sorted(self.correct_choices())
            )
        return self.answers[0]


class QuizDefinition(BaseModel):
    """An ordered, immutable list of questions plus optional settings."""

    title: str = ""
    settings: Optional[QuizSettings] = None
    questions: list[Question] = Field(min_length=1)

    @classmethod
    def open(cls, source: Union[str, Path]) -> "QuizDefinition":
        """Load and validate a quiz definition from a JSON file.

        Raises:
            QuizNotFoundError: If the file does not exist.
            QuizParseError: If it can not be read or is not a valid quiz.
        """
        path = Path(source)
        if not path.is_file():
            raise QuizNotFoundError(path)
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise QuizParseError(path, str(e)) from e
        try:
            definition = cls.model_validate_json(raw)
        except ValidationError as e:
            raise QuizParseError(path, f"{e.error_count()} validation error(s)\n{e}") from e
        logger.info("Loaded quiz %s with %d questions", path, len(definition.questions))
        return definition

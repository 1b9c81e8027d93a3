"""Quiz timing and scoring settings."""

from pydantic import BaseModel, ConfigDict, Field


class QuizSettings(BaseModel):
    """Durations (seconds) and scoring rules for a quiz session.

    Settings are layered: library defaults, then the game-wide defaults
    given to ``Game``, then the ``settings`` block of a quiz definition.
    """

    model_config = ConfigDict(extra="forbid")

    cooldown: float = Field(default=5.0, ge=0)
    question: float = Field(default=60.0, ge=0)
    vote: float = Field(default=30.0, ge=0)
    wager: float = Field(default=20.0, ge=0)
    results: float = Field(default=5.0, ge=0)
    points: int = Field(default=1, ge=0)
    max_wager_floor: int = Field(default=10, ge=0)

    def merged(self, overrides: "QuizSettings | None") -> "QuizSettings":
        """Return a copy with every field explicitly set in ``overrides`` applied."""
        if overrides is None:
            return self.model_copy()
        return self.model_copy(update=overrides.model_dump(exclude_unset=True))

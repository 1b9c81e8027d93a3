"""Team model and team name sanitization."""

import re
from typing import NewType

from pydantic import BaseModel, Field

from teamquiz.errors import InvalidName

PlayerId = int  # chat platform user id
TeamId = NewType("TeamId", str)  # normalized team name

MAX_NAME_LENGTH = 32

_WHITESPACE = re.compile(r"\s+")
_ALLOWED = re.compile(r"^[\w '&!?.\-]+$")


def clean_display_name(name: str) -> str:
    """Trim and collapse internal whitespace, keeping the original case."""
    return _WHITESPACE.sub(" ", name).strip()


def sanitize_name(name: str) -> TeamId:
    """Normalize a team name into its identity.

    Args:
        name: Raw team name as typed by a player.

    Returns:
        The trimmed, whitespace-collapsed, case-folded name.

    Raises:
        InvalidName: If the name is empty, too long or uses characters
            other than letters, digits, spaces and ``'&!?.-_``.
    """
    cleaned = clean_display_name(name)
    if not cleaned:
        raise InvalidName(name, "Team name can not be empty")
    if len(cleaned) > MAX_NAME_LENGTH:
        raise InvalidName(name, f"Team name is longer than {MAX_NAME_LENGTH} characters")
    if not _ALLOWED.match(cleaned):
        raise InvalidName(name, "Team name contains invalid characters")
    return TeamId(cleaned.casefold())


class Team(BaseModel):
    """A named group of players sharing a score.

    Identity is the sanitized name; two teams with the same id are the
    same team regardless of how their name was typed.
    """

    id: TeamId
    display_name: str
    score: int = 0
    players: set[PlayerId] = Field(default_factory=set)

    @classmethod
    def from_name(cls, name: str) -> "Team":
        return cls(id=sanitize_name(name), display_name=clean_display_name(name))

    def update_score(self, delta: int) -> int:
        self.score += delta
        return self.score

    def __str__(self) -> str:
        return f"{self.display_name} ({self.score} pts, {len(self.players)} players)"

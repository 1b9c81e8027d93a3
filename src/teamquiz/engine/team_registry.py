"""TeamRegistry - teams, membership and scores for one game."""

import logging
from typing import Optional

from teamquiz.errors import TeamNotFound
from teamquiz.locks import ReadWriteLock
from teamquiz.models import PlayerId, Team, TeamId, sanitize_name

logger = logging.getLogger(__name__)


class TeamRegistry:
    """Mutable collection of teams for one game.

    Invariants:
    - A player belongs to at most one team.
    - A team with no players is pruned.

    Owned by a Game and lent to its running Quiz for scoring. Every
    method takes the registry lock for its whole duration (read lock for
    lookups, write lock for mutation), so callers never observe a
    half-applied change.
    """

    def __init__(self) -> None:
        self._teams: list[Team] = []
        self._lock = ReadWriteLock()

    def join(self, player: PlayerId, team_name: str) -> Team:
        """Move a player onto a team, creating the team if needed.

        Args:
            player: The joining player.
            team_name: Raw team name; sanitized before use.

        Returns:
            A copy of the team the player is now on.

        Raises:
            InvalidName: If the name does not sanitize. Nothing is changed.
        """
        team_id = sanitize_name(team_name)
        with self._lock.write():
            for team in self._teams:
                team.players.discard(player)

            team = self._find(team_id)
            if team is None:
                team = Team.from_name(team_name)
                self._teams.append(team)
                logger.info("Team %s created", team.display_name)
            team.players.add(player)

            self._prune()
            return team.model_copy(deep=True)

    def leave_all(self, player: PlayerId) -> None:
        """Remove a player from whichever team holds them. No-op if none."""
        with self._lock.write():
            for team in self._teams:
                team.players.discard(player)
            self._prune()

    def disband(self, team_name: str) -> Team:
        """Remove a team and all its members, whether empty or not.

        Returns:
            The removed team.

        Raises:
            InvalidName: If the name does not sanitize.
            TeamNotFound: If no team has that name.
        """
        team_id = sanitize_name(team_name)
        with self._lock.write():
            team = self._find(team_id)
            if team is None:
                raise TeamNotFound(team_name)
            self._teams.remove(team)
        logger.info("Team %s disbanded", team.display_name)
        return team

    def adjust_score(self, team_id: TeamId, delta: int) -> Team:
        """Add ``delta`` (may be negative) to a team's score.

        Returns:
            A copy of the team with its updated score.

        Raises:
            TeamNotFound: If the team does not exist. Nothing is changed.
        """
        with self._lock.write():
            team = self._find(team_id)
            if team is None:
                raise TeamNotFound(team_id)
            team.update_score(delta)
            return team.model_copy(deep=True)

    def reset_all(self) -> None:
        with self._lock.write():
            self._teams.clear()

    def reset_scores(self) -> None:
        with self._lock.write():
            for team in self._teams:
                team.score = 0

    def find_team_of(self, player: PlayerId) -> Optional[TeamId]:
        with self._lock.read():
            for team in self._teams:
                if player in team.players:
                    return team.id
            return None

    def get(self, team_id: TeamId) -> Optional[Team]:
        """Return a copy of a team, or None."""
        with self._lock.read():
            team = self._find(team_id)
            return team.model_copy(deep=True) if team is not None else None

    def snapshot(self) -> list[Team]:
        """Copies of all teams, in creation order."""
        with self._lock.read():
            return [team.model_copy(deep=True) for team in self._teams]

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._teams)

    def _find(self, team_id: TeamId) -> Optional[Team]:
        for team in self._teams:
            if team.id == team_id:
                return team
        return None

    def _prune(self) -> None:
        self._teams = [team for team in self._teams if team.players]

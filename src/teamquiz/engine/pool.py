"""Pool - one Game per community, ticked together on a shared clock."""

import logging
from typing import Optional

from teamquiz.engine.game import Game
from teamquiz.locks import ReadWriteLock
from teamquiz.models import QuizSettings
from teamquiz.output import ChannelId, CommunityId, OutputPipe, Transport

logger = logging.getLogger(__name__)


class Pool:
    """Registry of games keyed by community.

    Games are created lazily on first contact and never removed.
    Lookups take the read lock; only the first insert for a community
    takes the write lock.
    """

    def __init__(self, transport: Transport, settings: Optional[QuizSettings] = None):
        """Initialize an empty pool.

        Args:
            transport: Delivery backend shared by every game's output pipe.
            settings: Default quiz settings for every game.
        """
        self._transport = transport
        self._settings = settings
        self._games: dict[CommunityId, Game] = {}
        self._lock = ReadWriteLock()

    def get_or_create(self, community: CommunityId, channel: ChannelId) -> Game:
        """Return the community's game, creating it bound to ``channel`` if absent."""
        with self._lock.read():
            game = self._games.get(community)
        if game is not None:
            return game

        with self._lock.write():
            game = self._games.get(community)
            if game is None:
                output = OutputPipe(community, channel, self._transport)
                game = Game(output, settings=self._settings)
                self._games[community] = game
                logger.info("Created game for community %s (channel %s)", community, channel)
            return game

    def tick_all(self, dt: float) -> None:
        """Tick every game once. A failing game is logged and skipped."""
        with self._lock.read():
            games = list(self._games.items())
        for community, game in games:
            try:
                game.tick(dt)
            except Exception:
                logger.error("Tick failed for community %s", community, exc_info=True)

"""Output sink: routes game notifications to chat destinations.

The core only talks to ``OutputPipe``. Actual delivery is done by a
``Transport`` (the chat client, the console, or a collector in tests).
Delivery is fire-and-forget: a transport failure is logged and never
propagates back into game state.
"""

import logging
from typing import Hashable, Optional, Protocol, Union

from rich.console import Console

from teamquiz.locks import ReadWriteLock
from teamquiz.events import QuizEvent
from teamquiz.models import TeamId

logger = logging.getLogger(__name__)

ChannelId = Hashable
CommunityId = Hashable
Message = Union[str, QuizEvent]


class Recipient:
    """Either every team (broadcast) or one team's destination."""

    __slots__ = ("team",)

    def __init__(self, team: Optional[TeamId] = None):
        self.team = team

    @classmethod
    def all_teams(cls) -> "Recipient":
        return cls()

    @classmethod
    def for_team(cls, team: TeamId) -> "Recipient":
        return cls(team)

    @property
    def is_broadcast(self) -> bool:
        return self.team is None

    def __eq__(self, other) -> bool:
        return isinstance(other, Recipient) and self.team == other.team

    def __hash__(self) -> int:
        return hash(self.team)

    def __repr__(self) -> str:
        return "Recipient(all teams)" if self.team is None else f"Recipient({self.team})"


ALL_TEAMS = Recipient.all_teams()


class Transport(Protocol):
    """Delivers one message to one channel of a community."""

    def send(self, community: CommunityId, channel: ChannelId, message: Message) -> None:
        ...


class OutputPipe:
    """Output sink bound to one community and its main channel.

    Broadcasts go to the main channel and every mapped team channel.
    Team messages go to the team's channel, or the main channel when the
    team has none.
    """

    def __init__(self, community: CommunityId, channel: ChannelId, transport: Transport):
        self.community = community
        self.channel = channel
        self._transport = transport
        self._team_channels: dict[TeamId, ChannelId] = {}
        self._lock = ReadWriteLock()

    def say(self, recipient: Recipient, text: str) -> None:
        """Send freeform text."""
        with self._lock.read():
            self._deliver(self._destinations(recipient), text)

    def push(self, payload: QuizEvent, recipient: Recipient = ALL_TEAMS) -> None:
        """Send a structured notification."""
        with self._lock.read():
            self._deliver(self._destinations(recipient), payload)

    def update_team_channels(self, mapping: dict[TeamId, ChannelId]) -> None:
        """Replace the team -> channel routing table."""
        with self._lock.write():
            self._team_channels = dict(mapping)
        logger.debug("[%s] Team channels updated: %s", self.community, mapping)

    @property
    def team_channels(self) -> dict[TeamId, ChannelId]:
        with self._lock.read():
            return dict(self._team_channels)

    def _destinations(self, recipient: Recipient) -> list[ChannelId]:
        if recipient.is_broadcast:
            destinations = [self.channel]
            for channel in self._team_channels.values():
                if channel not in destinations:
                    destinations.append(channel)
            return destinations
        return [self._team_channels.get(recipient.team, self.channel)]

    def _deliver(self, destinations: list[ChannelId], message: Message) -> None:
        for channel in destinations:
            try:
                self._transport.send(self.community, channel, message)
            except Exception:
                logger.error(
                    "[%s] Failed to deliver message to channel %s",
                    self.community,
                    channel,
                    exc_info=True,
                )


class CollectingTransport:
    """Records every delivered message. Useful in tests and simulations."""

    def __init__(self) -> None:
        self.sent: list[tuple[CommunityId, ChannelId, Message]] = []

    def send(self, community: CommunityId, channel: ChannelId, message: Message) -> None:
        self.sent.append((community, channel, message))

    def messages(self, channel: Optional[ChannelId] = None) -> list[Message]:
        return [m for _, c, m in self.sent if channel is None or c == channel]

    def texts(self, channel: Optional[ChannelId] = None) -> list[str]:
        """Freeform text messages only."""
        return [m for m in self.messages(channel) if isinstance(m, str)]

    def events(self, kind: type = QuizEvent, channel: Optional[ChannelId] = None) -> list:
        """Structured notifications of the given type only."""
        return [m for m in self.messages(channel) if isinstance(m, kind)]

    def clear(self) -> None:
        self.sent.clear()


class ConsoleTransport:
    """Prints notifications with rich, one line prefix per channel."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def send(self, community: CommunityId, channel: ChannelId, message: Message) -> None:
        style = "bold cyan" if isinstance(message, QuizEvent) else "white"
        self.console.print(f"[dim]\\[{community}#{channel}][/dim] ", end="")
        self.console.print(str(message), style=style, markup=False, highlight=False)

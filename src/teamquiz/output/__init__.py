"""Output package - routing of notifications to chat destinations."""

from teamquiz.output.output_pipe import (
    ALL_TEAMS,
    ChannelId,
    CollectingTransport,
    CommunityId,
    ConsoleTransport,
    Message,
    OutputPipe,
    Recipient,
    Transport,
)

__all__ = [
    "ALL_TEAMS",
    "ChannelId",
    "CollectingTransport",
    "CommunityId",
    "ConsoleTransport",
    "Message",
    "OutputPipe",
    "Recipient",
    "Transport",
]

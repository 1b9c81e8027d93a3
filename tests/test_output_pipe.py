"""Tests for OutputPipe routing and delivery."""

import threading

from rich.console import Console

from teamquiz.events import CorrectGuess
from teamquiz.models import sanitize_name
from teamquiz.output import (
    ALL_TEAMS,
    CollectingTransport,
    ConsoleTransport,
    OutputPipe,
    Recipient,
)

RED = sanitize_name("Red")
BLUE = sanitize_name("Blue")


class FailingTransport:
    """Transport that always raises."""

    def __init__(self) -> None:
        self.attempts = 0

    def send(self, community, channel, message) -> None:
        self.attempts += 1
        raise ConnectionError("chat service unavailable")


class TestRecipient:
    """Tests for Recipient values."""

    def test_broadcast(self):
        assert ALL_TEAMS.is_broadcast
        assert Recipient.all_teams() == ALL_TEAMS

    def test_team(self):
        recipient = Recipient.for_team(RED)
        assert not recipient.is_broadcast
        assert recipient == Recipient.for_team(RED)
        assert recipient != Recipient.for_team(BLUE)


class TestRouting:
    """Tests for message destinations."""

    def test_broadcast_without_team_channels(self):
        transport = CollectingTransport()
        pipe = OutputPipe("guild", "main", transport)
        pipe.say(ALL_TEAMS, "hello")
        assert transport.sent == [("guild", "main", "hello")]

    def test_broadcast_reaches_every_team_channel_once(self):
        transport = CollectingTransport()
        pipe = OutputPipe("guild", "main", transport)
        pipe.update_team_channels({RED: "red-room", BLUE: "blue-room", sanitize_name("x"): "main"})
        pipe.say(ALL_TEAMS, "hello")
        assert [c for _, c, _ in transport.sent] == ["main", "red-room", "blue-room"]

    def test_team_message_uses_team_channel(self):
        transport = CollectingTransport()
        pipe = OutputPipe("guild", "main", transport)
        pipe.update_team_channels({RED: "red-room"})
        pipe.say(Recipient.for_team(RED), "psst")
        pipe.say(Recipient.for_team(BLUE), "hi blue")
        assert transport.sent == [
            ("guild", "red-room", "psst"),
            ("guild", "main", "hi blue"),
        ]

    def test_push_structured_payload(self):
        transport = CollectingTransport()
        pipe = OutputPipe("guild", "main", transport)
        pipe.push(CorrectGuess(team="Red", points=2))
        assert transport.texts() == []
        assert [str(e) for e in transport.events(CorrectGuess)] == ["Team Red found the answer (+2)"]

    def test_update_replaces_mapping(self):
        pipe = OutputPipe("guild", "main", CollectingTransport())
        mapping = {RED: "red-room"}
        pipe.update_team_channels(mapping)
        mapping[BLUE] = "blue-room"
        assert pipe.team_channels == {RED: "red-room"}
        pipe.update_team_channels({})
        assert pipe.team_channels == {}


class TestDeliveryFailures:
    """Transport failures never propagate."""

    def test_failing_transport_is_swallowed(self, caplog):
        transport = FailingTransport()
        pipe = OutputPipe("guild", "main", transport)
        pipe.update_team_channels({RED: "red-room"})
        pipe.say(ALL_TEAMS, "hello")
        assert transport.attempts == 2
        assert "Failed to deliver" in caplog.text

    def test_concurrent_sends_and_updates(self):
        transport = CollectingTransport()
        pipe = OutputPipe("guild", "main", transport)

        def sender() -> None:
            for _ in range(200):
                pipe.say(ALL_TEAMS, "tick")

        def updater() -> None:
            for i in range(200):
                pipe.update_team_channels({RED: f"room-{i}"})

        threads = [threading.Thread(target=sender) for _ in range(3)]
        threads.append(threading.Thread(target=updater))
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len([m for m in transport.texts() if m == "tick"]) >= 600


class TestConsoleTransport:
    """Tests for console rendering."""

    def test_prints_message(self):
        console = Console(record=True, width=120)
        ConsoleTransport(console).send("guild", "main", "Scores were reset")
        output = console.export_text()
        assert "[guild#main]" in output
        assert "Scores were reset" in output

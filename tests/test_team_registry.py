"""Tests for TeamRegistry."""

import threading

import pytest

from teamquiz.engine.team_registry import TeamRegistry
from teamquiz.errors import InvalidName, TeamNotFound
from teamquiz.models import sanitize_name


def team_ids(registry: TeamRegistry) -> list[str]:
    return [team.id for team in registry.snapshot()]


class TestJoin:
    """Tests for joining teams."""

    def test_join_creates_team(self):
        registry = TeamRegistry()
        team = registry.join(1, "Red")
        assert team.id == "red"
        assert team.display_name == "Red"
        assert team.players == {1}
        assert team_ids(registry) == ["red"]

    def test_join_existing_team(self):
        registry = TeamRegistry()
        registry.join(1, "Red")
        team = registry.join(2, "Red")
        assert team.players == {1, 2}
        assert len(registry) == 1

    def test_names_are_normalized(self):
        registry = TeamRegistry()
        registry.join(1, "  red  ")
        registry.join(2, "Red")
        assert len(registry) == 1
        assert registry.find_team_of(1) == registry.find_team_of(2) == "red"

    def test_display_name_comes_from_creator(self):
        registry = TeamRegistry()
        registry.join(1, "  red   dragons ")
        registry.join(2, "RED DRAGONS")
        assert registry.snapshot()[0].display_name == "red dragons"

    def test_switching_teams_prunes_empty_team(self):
        registry = TeamRegistry()
        registry.join(1, "Red")
        registry.join(1, "Blue")
        assert registry.find_team_of(1) == "blue"
        assert team_ids(registry) == ["blue"]

    def test_switching_keeps_non_empty_team(self):
        registry = TeamRegistry()
        registry.join(1, "Red")
        registry.join(2, "Red")
        registry.join(1, "Blue")
        red = registry.get(sanitize_name("Red"))
        assert red.players == {2}
        assert registry.get(sanitize_name("Blue")).players == {1}

    def test_rejoining_same_team_is_idempotent(self):
        registry = TeamRegistry()
        registry.join(1, "Red")
        registry.adjust_score(sanitize_name("Red"), 4)
        team = registry.join(1, "RED")
        assert team.players == {1}
        assert team.score == 4
        assert len(registry) == 1

    def test_invalid_name_changes_nothing(self):
        registry = TeamRegistry()
        registry.join(1, "Red")
        with pytest.raises(InvalidName):
            registry.join(1, "   ")
        assert registry.find_team_of(1) == "red"

    def test_returned_team_is_a_copy(self):
        registry = TeamRegistry()
        team = registry.join(1, "Red")
        team.players.add(99)
        team.score = 100
        stored = registry.get(sanitize_name("Red"))
        assert stored.players == {1}
        assert stored.score == 0


class TestLeaveAndDisband:
    """Tests for leaving and disbanding."""

    def test_leave_all_prunes(self):
        registry = TeamRegistry()
        registry.join(1, "Red")
        registry.leave_all(1)
        assert registry.find_team_of(1) is None
        assert len(registry) == 0

    def test_leave_all_without_team_is_noop(self):
        registry = TeamRegistry()
        registry.join(1, "Red")
        registry.leave_all(2)
        assert team_ids(registry) == ["red"]

    def test_disband_removes_all_members(self):
        registry = TeamRegistry()
        registry.join(1, "Red")
        registry.join(2, "Red")
        removed = registry.disband("red")
        assert removed.players == {1, 2}
        assert registry.find_team_of(1) is None
        assert registry.find_team_of(2) is None
        assert len(registry) == 0

    def test_disband_unknown_team(self):
        registry = TeamRegistry()
        registry.join(1, "Red")
        with pytest.raises(TeamNotFound):
            registry.disband("Blue")
        assert team_ids(registry) == ["red"]

    def test_rejoin_after_disband_resets_score(self):
        registry = TeamRegistry()
        registry.join(1, "Red")
        registry.adjust_score(sanitize_name("Red"), 5)
        registry.disband("Red")
        team = registry.join(2, "Red")
        assert team.id == "red"
        assert team.score == 0
        assert team.players == {2}


class TestScores:
    """Tests for score bookkeeping."""

    def test_adjust_score(self):
        registry = TeamRegistry()
        registry.join(1, "Red")
        assert registry.adjust_score(sanitize_name("Red"), 3).score == 3
        assert registry.adjust_score(sanitize_name("Red"), -5).score == -2

    def test_adjust_score_unknown_team(self):
        registry = TeamRegistry()
        registry.join(1, "Red")
        before = registry.snapshot()
        with pytest.raises(TeamNotFound):
            registry.adjust_score(sanitize_name("Blue"), 3)
        assert registry.snapshot() == before

    def test_reset_scores_keeps_members(self):
        registry = TeamRegistry()
        registry.join(1, "Red")
        registry.join(2, "Blue")
        registry.adjust_score(sanitize_name("Red"), 3)
        registry.reset_scores()
        assert [t.score for t in registry.snapshot()] == [0, 0]
        assert registry.find_team_of(1) == "red"

    def test_reset_all(self):
        registry = TeamRegistry()
        registry.join(1, "Red")
        registry.join(2, "Blue")
        registry.reset_all()
        assert len(registry) == 0
        assert registry.find_team_of(1) is None


class TestConcurrency:
    """Concurrent joins keep the one-team-per-player invariant."""

    def test_concurrent_joins(self):
        registry = TeamRegistry()
        names = ["Red", "Blue", "Green"]

        def worker(player: int) -> None:
            for i in range(200):
                registry.join(player, names[(player + i) % len(names)])

        threads = [threading.Thread(target=worker, args=(p,)) for p in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        seen: dict[int, str] = {}
        for team in registry.snapshot():
            assert team.players, "empty teams must be pruned"
            for player in team.players:
                assert player not in seen
                seen[player] = team.id
        assert set(seen) == set(range(8))

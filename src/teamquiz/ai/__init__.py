"""Stub participants for simulations and tests."""

from teamquiz.ai.stub_team import StubTeam, create_stub_teams

__all__ = ["StubTeam", "create_stub_teams"]

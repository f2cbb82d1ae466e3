"""Shared fixtures: a seeded in-memory store for repository-level tests."""

import pytest

from courtside.services import CourtsideRepository, InMemoryDocumentStore


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def repository(store):
    return CourtsideRepository(store, "coach-1")


@pytest.fixture
def seeded(repository):
    """A roster of three players and a two-position, two-period format."""
    roster = repository.create_roster("Hawks", "U12", ["Ana", "Bea", "Cal"])
    game_format = repository.create_game_format(
        "Mini", 2, 10, [("Goal Shooter", "GS", "Target"), ("Goal Attack", "GA", "Target")]
    )
    players = repository.get_players(roster.id)
    return roster, game_format, players

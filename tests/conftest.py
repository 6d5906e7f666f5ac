"""Pytest configuration and fixtures."""

import random

import pytest
from helpers import StubWordProvider, play_card_selection
from undercover.services import ActionDispatcher, SessionManager


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(42)


@pytest.fixture
def words():
    """Word provider with three unplayed pairs."""
    return StubWordProvider()


@pytest.fixture
def dispatcher(words, rng):
    return ActionDispatcher(words, rng)


@pytest.fixture
def manager(dispatcher):
    return SessionManager(dispatcher)


@pytest.fixture
def started(manager):
    """Manager with a 5 player, 1 undercover game in card selection."""
    assert manager.start_game(5, 1).success
    return manager


@pytest.fixture
def described(started):
    """Manager whose game has reached the description phase."""
    play_card_selection(started, ["Ana", "Budi", "Citra", "Dewi", "Eko"])
    return started

"""
Pytest fixtures for Forbidden Island tests.
"""

import random

import pytest

from ..engine_core.adventurer import Adventurer
from ..engine_core.setup import GameSetup, new_game_state, new_random_map
from ..engine_core.state import GameState
from .game_builders import game


@pytest.fixture
def rng() -> random.Random:
    """A seeded random source, so failures are reproducible."""
    return random.Random(20240611)


@pytest.fixture
def two_player_game() -> GameState:
    """Engineer and Messenger on the fixed map, nothing flooded."""
    return game(Adventurer.ENGINEER, Adventurer.MESSENGER)


@pytest.fixture
def dealt_game(rng: random.Random) -> GameState:
    """A freshly dealt four-player game on a random map."""
    setup = GameSetup(
        players=(Adventurer.DIVER, Adventurer.PILOT, Adventurer.NAVIGATOR, Adventurer.EXPLORER),
        map=new_random_map(rng),
    )
    return new_game_state(setup, rng)

"""
Tests for game setup and the opening snapshot.
"""

import random
from collections import Counter

import pytest

from ..engine_core.adventurer import Adventurer
from ..engine_core.board import ALL_LOCATIONS_SET
from ..engine_core.cards import HoldableCard
from ..engine_core.exceptions import InvalidSetupError
from ..engine_core.flood import FloodLevel, LocationFloodState
from ..engine_core.phases import AwaitingPlayerAction
from ..engine_core.setup import GameSetup, new_game_state, new_random_map, new_random_setup
from .game_builders import FIXED_MAP


class TestGameSetup:
    """Tests for GameSetup validation."""

    def test_needs_at_least_two_players(self):
        with pytest.raises(InvalidSetupError):
            GameSetup(players=(Adventurer.DIVER,), map=FIXED_MAP)

    def test_at_most_four_players(self):
        with pytest.raises(InvalidSetupError):
            GameSetup(players=tuple(Adventurer)[:5], map=FIXED_MAP)

    def test_players_must_be_unique(self):
        with pytest.raises(InvalidSetupError):
            GameSetup(players=(Adventurer.DIVER, Adventurer.DIVER), map=FIXED_MAP)

    def test_player_after_wraps(self):
        setup = GameSetup(players=[Adventurer.PILOT, Adventurer.DIVER, Adventurer.ENGINEER], map=FIXED_MAP)
        assert setup.players == (Adventurer.PILOT, Adventurer.DIVER, Adventurer.ENGINEER)
        assert setup.player_after(Adventurer.DIVER) is Adventurer.ENGINEER
        assert setup.player_after(Adventurer.ENGINEER) is Adventurer.PILOT


class TestRandomSetup:
    """Tests for random maps and player selection."""

    def test_random_map_uses_every_location(self, rng):
        game_map = new_random_map(rng)
        assert {site.location for site in game_map.map_sites} == ALL_LOCATIONS_SET

    def test_random_setup_picks_distinct_players(self, rng):
        setup = new_random_setup(rng, number_of_players=4)
        assert len(set(setup.players)) == 4

    def test_random_setup_keeps_given_players(self, rng):
        setup = new_random_setup(rng, players=[Adventurer.MESSENGER, Adventurer.EXPLORER])
        assert setup.players == (Adventurer.MESSENGER, Adventurer.EXPLORER)

    def test_random_setup_rejects_bad_player_count(self, rng):
        with pytest.raises(InvalidSetupError):
            new_random_setup(rng, number_of_players=5)

    def test_same_seed_same_setup(self):
        assert new_random_setup(random.Random(3)) == new_random_setup(random.Random(3))


class TestNewGameState:
    """Tests for the opening deal."""

    def test_each_player_gets_two_cards_without_waters_rise(self, dealt_game):
        for player in dealt_game.players:
            cards = dealt_game.player_cards[player]
            assert len(cards) == 2
            assert HoldableCard.WATERS_RISE not in cards

    def test_waters_rise_cards_are_in_the_deck(self, dealt_game):
        assert Counter(dealt_game.treasure_deck)[HoldableCard.WATERS_RISE] == 3

    def test_six_locations_start_flooded(self, dealt_game):
        flooded = dealt_game.locations_with_state(LocationFloodState.FLOODED)
        assert len(flooded) == 6
        assert set(dealt_game.flood_deck_discard) == set(flooded)
        assert dealt_game.locations_with_state(LocationFloodState.SUNKEN) == []

    def test_players_start_on_their_gates(self, dealt_game):
        for player in dealt_game.players:
            assert dealt_game.location_of(player) is player.starting_location

    def test_first_player_starts(self, dealt_game):
        assert dealt_game.phase == AwaitingPlayerAction(Adventurer.DIVER, 3)
        assert dealt_game.previous_actions == ()
        assert dealt_game.flood_level is FloodLevel.TWO

    def test_starting_flood_level_is_configurable(self, rng):
        setup = new_random_setup(rng)
        state = new_game_state(setup, rng, flood_level=FloodLevel.FOUR)
        assert state.flood_level is FloodLevel.FOUR

    def test_same_seed_same_opening(self):
        def opening(seed):
            rng = random.Random(seed)
            return new_game_state(new_random_setup(rng, number_of_players=3), rng)
        assert opening(11) == opening(11)

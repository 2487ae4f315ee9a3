"""
Tests for GameState construction checks and queries.
"""

import dataclasses

import pytest

from ..engine_core.action import DrawFromTreasureDeck
from ..engine_core.adventurer import Adventurer
from ..engine_core.board import Location, Position
from ..engine_core.cards import Treasure
from ..engine_core.exceptions import InvariantViolationError
from .game_builders import (
    EARTH, FIRE, LIFT, SUNKEN, WATERS_RISE, with_location_flood_states, with_player_cards,
    with_player_position,
)

ENGINEER = Adventurer.ENGINEER
MESSENGER = Adventurer.MESSENGER


class TestInvariants:
    """A state that breaks the rules of the box cannot be built."""

    def test_extra_treasure_card_is_rejected(self, two_player_game):
        with pytest.raises(InvariantViolationError):
            dataclasses.replace(two_player_game, treasure_deck_discard=(WATERS_RISE,))

    def test_missing_treasure_card_is_rejected(self, two_player_game):
        with pytest.raises(InvariantViolationError):
            dataclasses.replace(two_player_game, treasure_deck=two_player_game.treasure_deck[1:])

    def test_sunken_location_in_flood_deck_is_rejected(self, two_player_game):
        states = dict(two_player_game.location_flood_states)
        states[Location.OBSERVATORY] = SUNKEN
        with pytest.raises(InvariantViolationError):
            dataclasses.replace(two_player_game, location_flood_states=states)

    def test_duplicate_flood_card_is_rejected(self, two_player_game):
        with pytest.raises(InvariantViolationError):
            dataclasses.replace(two_player_game, flood_deck_discard=(Location.OBSERVATORY,))

    def test_missing_flood_state_is_rejected(self, two_player_game):
        states = dict(two_player_game.location_flood_states)
        del states[Location.WATCHTOWER]
        with pytest.raises(InvariantViolationError):
            dataclasses.replace(two_player_game, location_flood_states=states)

    def test_missing_treasure_entry_is_rejected(self, two_player_game):
        collected = {t: False for t in Treasure if t is not Treasure.EARTH_STONE}
        with pytest.raises(InvariantViolationError):
            dataclasses.replace(two_player_game, treasures_collected=collected)

    def test_unknown_player_position_is_rejected(self, two_player_game):
        positions = dict(two_player_game.player_positions)
        positions[Adventurer.PILOT] = Position(3, 1)
        with pytest.raises(InvariantViolationError):
            dataclasses.replace(two_player_game, player_positions=positions)

    def test_dealt_game_is_consistent(self, dealt_game):
        held = sum(len(cards) for cards in dealt_game.player_cards.values())
        assert held + len(dealt_game.treasure_deck) == 28
        assert len(dealt_game.flood_deck) + len(dealt_game.flood_deck_discard) == 24


class TestQueries:
    """Tests for the read helpers on GameState."""

    def test_players_at(self, two_player_game):
        state = with_player_position(two_player_game, MESSENGER, Position(4, 3))
        assert state.players_at(Position(4, 3)) == [ENGINEER, MESSENGER]
        assert state.players_at(Position(2, 4)) == []

    def test_location_of(self, two_player_game):
        assert two_player_game.location_of(ENGINEER) is Location.BRONZE_GATE

    def test_sunk_players(self, two_player_game):
        state = with_location_flood_states(two_player_game, SUNKEN, [Location.SILVER_GATE])
        assert state.sunk_players == [MESSENGER]

    def test_cards_held_and_hand_limit(self, two_player_game):
        state = with_player_cards(two_player_game, {ENGINEER: [EARTH, EARTH, FIRE, FIRE, LIFT, EARTH]})
        assert state.cards_held_by(ENGINEER, EARTH) == 3
        assert state.players_over_hand_limit == [ENGINEER]

    def test_hands_are_stored_as_tuples(self, two_player_game):
        state = with_player_cards(two_player_game, {ENGINEER: [EARTH]})
        assert state.player_cards[ENGINEER] == (EARTH,)

    def test_available_actions_are_memoised(self, two_player_game):
        assert two_player_game.available_actions is two_player_game.available_actions


class TestImmutability:
    """Snapshots stay frozen, including their maps."""

    @pytest.mark.parametrize("field_name, key, value", [
        ("location_flood_states", Location.OBSERVATORY, SUNKEN),
        ("player_positions", ENGINEER, Position(3, 1)),
        ("player_cards", ENGINEER, (EARTH,)),
        ("treasures_collected", Treasure.EARTH_STONE, True),
    ])
    def test_maps_are_read_only(self, two_player_game, field_name, key, value):
        with pytest.raises(TypeError):
            getattr(two_player_game, field_name)[key] = value

    def test_successor_cannot_change_its_predecessor(self, two_player_game, rng):
        successor = two_player_game.next_state_after(DrawFromTreasureDeck(ENGINEER), rng)

        with pytest.raises(TypeError):
            successor.location_flood_states[Location.FOOLS_LANDING] = SUNKEN
        assert two_player_game.flood_state_of(Location.FOOLS_LANDING) is not SUNKEN
        assert two_player_game.player_cards[ENGINEER] == ()

    def test_dict_passed_in_is_copied(self, two_player_game):
        positions = dict(two_player_game.player_positions)
        state = dataclasses.replace(two_player_game, player_positions=positions)

        positions[ENGINEER] = Position(3, 1)

        assert state.position_of(ENGINEER) == two_player_game.position_of(ENGINEER)

    def test_states_are_hashable(self, two_player_game):
        same = dataclasses.replace(two_player_game, player_cards=dict(two_player_game.player_cards))

        assert same == two_player_game
        assert hash(same) == hash(two_player_game)
        assert len({two_player_game, same, with_player_cards(two_player_game, {ENGINEER: [EARTH]})}) == 2

    def test_copy_rechecks_the_fields_it_replaces(self, two_player_game):
        with pytest.raises(InvariantViolationError):
            two_player_game._copy_with(treasure_deck=two_player_game.treasure_deck[1:])
        with pytest.raises(InvariantViolationError):
            two_player_game._copy_with(flood_deck_discard=(Location.OBSERVATORY,))

    def test_copy_rejects_unknown_fields(self, two_player_game):
        with pytest.raises(TypeError):
            two_player_game._copy_with(water_level=3)

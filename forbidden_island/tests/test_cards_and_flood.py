"""
Tests for the card, deck and flood models.
"""

import random
from collections import Counter

import pytest

from ..engine_core.cards import (
    HoldableCard, Treasure, TREASURE_DECK_CARD_COUNTS, draw_top, new_treasure_deck,
    remove_cards, replenished, shuffled,
)
from ..engine_core.flood import FloodLevel, LocationFloodState, STARTING_FLOOD_LEVELS


class TestTreasureDeck:
    """Tests for the fixed deck composition."""

    def test_deck_has_28_cards(self):
        assert len(new_treasure_deck()) == 28

    def test_deck_composition(self):
        counts = Counter(new_treasure_deck())
        for treasure in Treasure:
            assert counts[HoldableCard.treasure_card(treasure)] == 5
        assert counts[HoldableCard.HELICOPTER_LIFT] == 3
        assert counts[HoldableCard.SANDBAGS] == 2
        assert counts[HoldableCard.WATERS_RISE] == 3
        assert counts == Counter(TREASURE_DECK_CARD_COUNTS)

    def test_treasure_cards_know_their_treasure(self):
        assert HoldableCard.CRYSTAL_OF_FIRE.treasure is Treasure.CRYSTAL_OF_FIRE
        assert HoldableCard.CRYSTAL_OF_FIRE.is_treasure_card
        assert HoldableCard.SANDBAGS.treasure is None
        assert not HoldableCard.WATERS_RISE.is_treasure_card


class TestPileHelpers:
    """Tests for shuffling, drawing and removing."""

    def test_shuffled_leaves_input_alone(self):
        pile = new_treasure_deck()
        result = shuffled(pile, random.Random(1))
        assert pile == new_treasure_deck()
        assert Counter(result) == Counter(pile)

    def test_shuffled_is_deterministic_for_a_seed(self):
        deck = new_treasure_deck()
        assert shuffled(deck, random.Random(5)) == shuffled(deck, random.Random(5))

    def test_draw_top_takes_index_zero(self):
        card, pile, discard = draw_top(("a", "b"), ("c",), random.Random(1))
        assert card == "a"
        assert pile == ("b",)
        assert discard == ("c",)

    def test_draw_from_empty_pile_reshuffles_discard_first(self):
        card, pile, discard = draw_top((), ("x", "y", "z"), random.Random(1))
        assert card in {"x", "y", "z"}
        assert len(pile) == 2
        assert discard == ()

    def test_draw_from_two_empty_piles_has_no_card(self):
        assert draw_top((), (), random.Random(1)) == (None, (), ())

    def test_replenished_only_when_pile_is_empty(self):
        assert replenished(("a",), ("b",), random.Random(1)) == (("a",), ("b",))
        pile, discard = replenished((), ("b", "c"), random.Random(1))
        assert sorted(pile) == ["b", "c"]
        assert discard == ()

    def test_remove_cards_removes_one_occurrence_each(self):
        hand = (HoldableCard.EARTH_STONE, HoldableCard.EARTH_STONE, HoldableCard.SANDBAGS)
        assert remove_cards(hand, [HoldableCard.EARTH_STONE]) == (
            HoldableCard.EARTH_STONE, HoldableCard.SANDBAGS,
        )

    def test_remove_missing_card_raises(self):
        with pytest.raises(ValueError):
            remove_cards((HoldableCard.SANDBAGS,), [HoldableCard.HELICOPTER_LIFT])


class TestLocationFloodState:
    """Tests for the flood lifecycle of one location."""

    def test_unflooded_floods(self):
        assert LocationFloodState.UNFLOODED.flooded() is LocationFloodState.FLOODED

    def test_flooded_sinks(self):
        assert LocationFloodState.FLOODED.flooded() is LocationFloodState.SUNKEN

    def test_sunken_cannot_flood(self):
        with pytest.raises(ValueError):
            LocationFloodState.SUNKEN.flooded()


class TestFloodLevel:
    """Tests for the water level."""

    def test_tiles_flooding_per_turn(self):
        assert [level.tiles_flooding_per_turn for level in FloodLevel] == [
            2, 2, 3, 3, 3, 4, 4, 5, 5, 0,
        ]

    def test_next_rises_one_step(self):
        assert FloodLevel.ONE.next() is FloodLevel.TWO
        assert FloodLevel.NINE.next() is FloodLevel.DEAD

    def test_dead_stays_dead(self):
        assert FloodLevel.DEAD.next() is FloodLevel.DEAD
        assert FloodLevel.DEAD.is_dead

    def test_levels_are_ordered(self):
        assert FloodLevel.TWO < FloodLevel.THREE
        assert FloodLevel.DEAD <= FloodLevel.DEAD

    def test_difficulties(self):
        assert STARTING_FLOOD_LEVELS["novice"] is FloodLevel.ONE
        assert STARTING_FLOOD_LEVELS["legendary"] is FloodLevel.FOUR

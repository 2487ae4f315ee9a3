"""
Seeded random play-throughs.

Every state reached by applying available actions must satisfy the GameState
invariants (checked on construction), offer only actions the reducer
accepts, and agree with its own result about whether the game is over.
Each step is also compared with the state before it: treasure cards are
never created or lost, and the water only goes down where a tile is
shored up or sandbagged.
"""

from collections import Counter
import random

import pytest

from ..engine_core.action import DrawFromFloodDeck, DrawFromTreasureDeck, Sandbag, ShoreUp
from ..engine_core.cards import TREASURE_DECK_CARD_COUNTS
from ..engine_core.flood import LocationFloodState
from ..engine_core.phases import GameOver, MAX_HAND_SIZE, OBLIGATION_PHASES
from ..engine_core.setup import new_game_state, new_random_setup

MAX_STEPS = 400

FLOOD_RANK = {
    LocationFloodState.UNFLOODED: 0,
    LocationFloodState.FLOODED: 1,
    LocationFloodState.SUNKEN: 2,
}


def play(seed, number_of_players, check=None):
    """Play random available actions; `check(previous, state)` runs after each one."""
    rng = random.Random(seed)
    state = new_game_state(new_random_setup(rng, number_of_players=number_of_players), rng)
    history = [state]
    for _ in range(MAX_STEPS):
        if state.is_game_over:
            break
        actions = state.available_actions
        assert actions, f"No actions available during {state.phase}"
        previous, state = state, state.next_state_after(rng.choice(actions), rng)
        if check:
            check(previous, state)
        history.append(state)
    return history


def treasure_cards(state):
    cards = Counter(state.treasure_deck) + Counter(state.treasure_deck_discard)
    for hand in state.player_cards.values():
        cards.update(hand)
    return cards


def check_state(previous, state):
    assert isinstance(state.phase, GameOver) == (state.result is not None)
    assert state.available_actions == tuple(dict.fromkeys(state.available_actions))
    if not isinstance(state.phase, OBLIGATION_PHASES) and not state.is_game_over:
        assert state.sunk_players == []
        assert all(len(cards) <= MAX_HAND_SIZE for cards in state.player_cards.values())


def check_deck_conservation(previous, state):
    assert treasure_cards(state) == treasure_cards(previous) == Counter(TREASURE_DECK_CARD_COUNTS)

    unsunken = Counter(
        location for location, flood_state in state.location_flood_states.items()
        if flood_state is not LocationFloodState.SUNKEN
    )
    assert Counter(state.flood_deck) + Counter(state.flood_deck_discard) == unsunken


def check_flood_monotonicity(previous, state):
    action = state.previous_actions[-1]
    risen = []
    for location, before in previous.location_flood_states.items():
        after = state.location_flood_states[location]
        if before is LocationFloodState.SUNKEN:
            assert after is LocationFloodState.SUNKEN, f"{location} came back after sinking"
        elif FLOOD_RANK[after] < FLOOD_RANK[before]:
            assert (before, after) == (LocationFloodState.FLOODED, LocationFloodState.UNFLOODED)
            assert isinstance(action, (ShoreUp, Sandbag)), f"{location} drained by {action}"
        elif FLOOD_RANK[after] > FLOOD_RANK[before]:
            assert FLOOD_RANK[after] == FLOOD_RANK[before] + 1
            risen.append(location)

    if risen:
        assert isinstance(action, DrawFromFloodDeck), f"{risen} flooded by {action}"
        assert len(risen) == 1

    assert state.flood_level.value >= previous.flood_level.value
    if state.flood_level != previous.flood_level:
        assert isinstance(action, DrawFromTreasureDeck)


def check_all(previous, state):
    check_state(previous, state)
    check_deck_conservation(previous, state)
    check_flood_monotonicity(previous, state)


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
@pytest.mark.parametrize("number_of_players", [2, 4])
def test_random_play_keeps_state_consistent(seed, number_of_players):
    history = play(seed, number_of_players, check=check_all)
    assert len(history) > 1


@pytest.mark.parametrize("seed", [8, 9, 10])
def test_treasure_cards_are_conserved(seed):
    play(seed, 3, check=check_deck_conservation)


@pytest.mark.parametrize("seed", [11, 12, 13])
def test_water_only_recedes_where_shored_up(seed):
    play(seed, 2, check=check_flood_monotonicity)


@pytest.mark.parametrize("seed", [6, 7])
def test_every_available_action_is_accepted(seed):
    rng = random.Random(seed)
    for state in play(seed, 3)[:40]:
        for action in state.available_actions:
            check_all(state, state.next_state_after(action, rng))


def test_same_seed_same_game():
    first = play(42, 3)
    second = play(42, 3)
    assert first[-1] == second[-1]
    assert [s.previous_actions for s in first] == [s.previous_actions for s in second]

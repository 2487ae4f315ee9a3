"""
Reducer - Applies actions to game state.

The reducer is the single point of state change.
Every new GameState after the opening one comes from next_state_after().

Design principles:
- Pure function: (state, action, random) -> new_state
- Validates before applying: only available actions are accepted
- Randomness is always passed in, never global
- apply() wraps the transition in an ActionResult for callers that prefer
  not to handle exceptions

Order of a transition:
1. Reject the action unless it is available
2. Move any cards the action consumes to the treasure discard pile
3. Apply the action's own effect
4. Append the action to the history
5. Compute the phase from the resulting state
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import random as _random

from .action import (
    ActionResult, ActionType, CaptureTreasure, DrawFromFloodDeck, DrawFromTreasureDeck, GameAction,
    GiveTreasureCard, HelicopterLift, PlayerMovingAction, Sandbag, ShoreUp,
)
from .adventurer import Adventurer
from .cards import HoldableCard, draw_top, remove_cards, replenished, shuffled
from .exceptions import IllegalActionError, InvariantViolationError
from .flood import LocationFloodState
from .phases import OBLIGATION_PHASES
from .state import GameState

logger = logging.getLogger(__name__)


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    """

    def apply(self, state: GameState, action: GameAction, random: _random.Random) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        try:
            new_state = self.next_state(state, action, random)
        except IllegalActionError as e:
            return ActionResult.failure(str(e), error_code="ILLEGAL_ACTION")
        except InvariantViolationError as e:
            logger.error("Action %s produced an invalid state: %s", action, e)
            return ActionResult.failure(str(e), error_code="INVALID_STATE")
        return ActionResult.success_with_state(new_state, changes=_describe_changes(state, new_state, action))

    def next_state(self, state: GameState, action: GameAction, random: _random.Random) -> GameState:
        """
        Calculate the state after an available action.

        Raises IllegalActionError if the action is not available.
        """
        if not state.is_available(action):
            raise IllegalActionError(f"'{action}' is not an available action in this state")

        logger.debug("Applying %s during %s", action, state.phase)

        # Handlers never read the history, so it is recorded with the discard
        changes = {"previous_actions": state.previous_actions + (action,)}
        if action.discarded_cards:
            changes.update(self._discard(state, action.player, action.discarded_cards))

        handler = self._get_handler(action.action_type)
        intermediate = handler(state._copy_with(**changes), action, random)

        new_state = intermediate._copy_with(phase=state.phase.phase_after(action, intermediate))
        if new_state.result is not None:
            logger.info("Game over: %s", new_state.result)
        elif isinstance(new_state.phase, OBLIGATION_PHASES) and new_state.phase != state.phase:
            logger.info("Waiting on %s", new_state.phase)
        return new_state

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.MOVE: self._handle_move,
            ActionType.FLY: self._handle_move,
            ActionType.SWIM_TO_SAFETY: self._handle_move,
            ActionType.SHORE_UP: self._handle_shore_up,
            ActionType.GIVE_TREASURE_CARD: self._handle_give_treasure_card,
            ActionType.CAPTURE_TREASURE: self._handle_capture_treasure,
            ActionType.HELICOPTER_LIFT: self._handle_helicopter_lift,
            ActionType.SANDBAG: self._handle_sandbag,
            ActionType.HELICOPTER_LIFT_OFF_ISLAND: self._handle_card_only,
            ActionType.DISCARD_CARD: self._handle_card_only,
            ActionType.DRAW_FROM_TREASURE_DECK: self._handle_draw_from_treasure_deck,
            ActionType.DRAW_FROM_FLOOD_DECK: self._handle_draw_from_flood_deck,
        }
        return handlers[action_type]

    def _discard(self, state: GameState, player: Adventurer, cards: tuple[HoldableCard, ...]) -> dict:
        """Field changes that move cards from a hand to the treasure discard pile."""
        new_cards = dict(state.player_cards)
        new_cards[player] = remove_cards(state.player_cards[player], cards)
        return {
            "player_cards": new_cards,
            "treasure_deck_discard": state.treasure_deck_discard + cards,
        }

    def _handle_card_only(self, state: GameState, action: GameAction, random: _random.Random) -> GameState:
        """Lifting off and discarding have no effect beyond the discarded card."""
        return state

    def _handle_move(self, state: GameState, action: PlayerMovingAction, random: _random.Random) -> GameState:
        return state.with_player_position(action.player, action.position)

    def _handle_helicopter_lift(self, state: GameState, action: HelicopterLift, random: _random.Random) -> GameState:
        return state.with_player_positions({p: action.position for p in action.players_being_moved})

    def _handle_shore_up(self, state: GameState, action: ShoreUp, random: _random.Random) -> GameState:
        new_flood_states = dict(state.location_flood_states)
        for position in action.positions:
            new_flood_states[state.game_setup.location_at(position)] = LocationFloodState.UNFLOODED
        return state._copy_with(location_flood_states=new_flood_states)

    def _handle_sandbag(self, state: GameState, action: Sandbag, random: _random.Random) -> GameState:
        location = state.game_setup.location_at(action.position)
        return state.with_location_flood_state(location, LocationFloodState.UNFLOODED)

    def _handle_give_treasure_card(self, state: GameState, action: GiveTreasureCard, random: _random.Random) -> GameState:
        new_cards = dict(state.player_cards)
        new_cards[action.player] = remove_cards(state.player_cards[action.player], (action.card,))
        new_cards[action.receiver] = state.player_cards[action.receiver] + (action.card,)
        return state._copy_with(player_cards=new_cards)

    def _handle_capture_treasure(self, state: GameState, action: CaptureTreasure, random: _random.Random) -> GameState:
        collected = dict(state.treasures_collected)
        collected[action.treasure] = True
        logger.info("%s captured %s", action.player, action.treasure)
        return state._copy_with(treasures_collected=collected)

    def _handle_draw_from_treasure_deck(
        self, state: GameState, action: DrawFromTreasureDeck, random: _random.Random
    ) -> GameState:
        card, deck, discard = draw_top(state.treasure_deck, state.treasure_deck_discard, random)
        changes: dict = {}

        if card is HoldableCard.WATERS_RISE:
            new_level = state.flood_level.next()
            logger.info("Waters rise to level %s", new_level.name)
            discard = discard + (card,)
            changes.update(
                flood_level=new_level,
                flood_deck=shuffled(state.flood_deck_discard, random) + state.flood_deck,
                flood_deck_discard=(),
            )
        elif card is not None:
            new_cards = dict(state.player_cards)
            new_cards[action.player] = state.player_cards[action.player] + (card,)
            changes["player_cards"] = new_cards

        deck, discard = replenished(deck, discard, random)
        return state._copy_with(treasure_deck=deck, treasure_deck_discard=discard, **changes)

    def _handle_draw_from_flood_deck(
        self, state: GameState, action: DrawFromFloodDeck, random: _random.Random
    ) -> GameState:
        location, deck, discard = draw_top(state.flood_deck, state.flood_deck_discard, random)
        if location is None:
            return state

        new_flood_state = state.flood_state_of(location).flooded()
        new_flood_states = dict(state.location_flood_states)
        new_flood_states[location] = new_flood_state
        if new_flood_state is LocationFloodState.SUNKEN:
            logger.info("%s has sunk", location)
        else:
            discard = discard + (location,)

        deck, discard = replenished(deck, discard, random)
        return state._copy_with(
            flood_deck=deck,
            flood_deck_discard=discard,
            location_flood_states=new_flood_states,
        )


def _describe_changes(before: GameState, after: GameState, action: GameAction) -> list[str]:
    """Human-readable summary of what an action did."""
    changes = [str(action)]
    if after.flood_level != before.flood_level:
        changes.append(f"The waters rose to level {after.flood_level.name}")
    for location, flood_state in after.location_flood_states.items():
        if before.location_flood_states[location] is not flood_state:
            changes.append(f"{location} is now {flood_state.value}")
    for player in after.players:
        gained = len(after.player_cards[player]) - len(before.player_cards[player])
        if gained > 0 and isinstance(action, DrawFromTreasureDeck):
            changes.append(f"{player} drew {after.player_cards[player][-1]}")
    if after.phase != before.phase:
        changes.append(f"Now {after.phase}")
    return changes


_default_reducer = Reducer()


def next_state_after(state: GameState, action: GameAction, random: _random.Random) -> GameState:
    """
    Apply an available action to a state.

    Raises IllegalActionError if the action is not available.
    """
    return _default_reducer.next_state(state, action, random)

"""
Phase State Machine - What the game is waiting for next.

A turn runs:
    AwaitingPlayerAction(p, 3..1)
    -> AwaitingTreasureDeckDraw(p, 2..1)
    -> AwaitingFloodDeckDraw(p, n..1)    n from the water level
    -> AwaitingPlayerAction(next player, 3)

Two obligations can interrupt any of those phases:
- AwaitingPlayerToSwimToSafety: a player's tile has sunk under them
- AwaitingPlayerToDiscardExtraCards: a player holds more than MAX_HAND_SIZE

Each obligation remembers the phase it interrupted and resumes it once
resolved. Swims are settled before discards, one player at a time, in the
game's player order.

Out-of-turn actions never move the turn sequence along. GameOver absorbs
everything.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .action import (
    ActionCategory, DrawFromFloodDeck, DrawFromTreasureDeck, GameAction, SwimToSafety,
)
from .adventurer import Adventurer
from .exceptions import IllegalActionError

if TYPE_CHECKING:
    from .state import GameState


MAX_ACTIONS_PER_PLAYER_TURN = 3
TREASURE_DECK_CARDS_DRAWN_PER_TURN = 2
MAX_HAND_SIZE = 5


@dataclass(frozen=True)
class GamePhase:
    """Base class for all phases."""

    def phase_after(self, action: GameAction, next_state: GameState) -> GamePhase:
        """
        The phase that follows `action`, given the state it produced.

        Raises IllegalActionError if the action does not fit this phase.
        """
        if next_state.result is not None:
            return GAME_OVER
        if action.is_out_of_turn:
            return self._phase_after_out_of_turn_action(next_state)
        return settle_obligations(self._calculate_next_phase(action, next_state), next_state)

    def _phase_after_out_of_turn_action(self, next_state: GameState) -> GamePhase:
        return self

    def _calculate_next_phase(self, action: GameAction, next_state: GameState) -> GamePhase:
        raise self._unexpected(action)

    def _unexpected(self, action: GameAction) -> IllegalActionError:
        return IllegalActionError(f"Not expecting action '{action}' during phase {self}")


@dataclass(frozen=True)
class AwaitingPlayerAction(GamePhase):
    player: Adventurer
    actions_remaining: int

    def __str__(self) -> str:
        return f"{self.player} to take an action ({self.actions_remaining} remaining)"

    def _calculate_next_phase(self, action: GameAction, next_state: GameState) -> GamePhase:
        if isinstance(action, DrawFromTreasureDeck):
            return AwaitingTreasureDeckDraw(self.player, TREASURE_DECK_CARDS_DRAWN_PER_TURN - 1)
        if action.category is ActionCategory.TURN:
            if self.actions_remaining == 1:
                return AwaitingTreasureDeckDraw(self.player, TREASURE_DECK_CARDS_DRAWN_PER_TURN)
            return AwaitingPlayerAction(self.player, self.actions_remaining - 1)
        raise self._unexpected(action)


@dataclass(frozen=True)
class AwaitingTreasureDeckDraw(GamePhase):
    player: Adventurer
    draws_remaining: int

    def __str__(self) -> str:
        return f"{self.player} to draw from the treasure deck ({self.draws_remaining} remaining)"

    def _calculate_next_phase(self, action: GameAction, next_state: GameState) -> GamePhase:
        if not isinstance(action, DrawFromTreasureDeck):
            raise self._unexpected(action)
        if self.draws_remaining == 1:
            return AwaitingFloodDeckDraw(self.player, next_state.flood_level.tiles_flooding_per_turn)
        return AwaitingTreasureDeckDraw(self.player, self.draws_remaining - 1)


@dataclass(frozen=True)
class AwaitingFloodDeckDraw(GamePhase):
    player: Adventurer
    draws_remaining: int

    def __str__(self) -> str:
        return f"{self.player} to draw from the flood deck ({self.draws_remaining} remaining)"

    def _calculate_next_phase(self, action: GameAction, next_state: GameState) -> GamePhase:
        if not isinstance(action, DrawFromFloodDeck):
            raise self._unexpected(action)
        if self.draws_remaining == 1:
            return AwaitingPlayerAction(
                next_state.game_setup.player_after(self.player), MAX_ACTIONS_PER_PLAYER_TURN
            )
        return AwaitingFloodDeckDraw(self.player, self.draws_remaining - 1)


@dataclass(frozen=True)
class AwaitingPlayerToDiscardExtraCards(GamePhase):
    player: Adventurer
    resume_phase: GamePhase

    def __str__(self) -> str:
        return f"{self.player} to discard extra cards"

    def _phase_after_out_of_turn_action(self, next_state: GameState) -> GamePhase:
        if len(next_state.player_cards[self.player]) > MAX_HAND_SIZE:
            return self
        return settle_obligations(self.resume_phase, next_state)


@dataclass(frozen=True)
class AwaitingPlayerToSwimToSafety(GamePhase):
    player: Adventurer
    resume_phase: GamePhase

    def __str__(self) -> str:
        return f"{self.player} to swim to safety"

    def _calculate_next_phase(self, action: GameAction, next_state: GameState) -> GamePhase:
        if not isinstance(action, SwimToSafety):
            raise self._unexpected(action)
        return self.resume_phase


@dataclass(frozen=True)
class GameOver(GamePhase):

    def phase_after(self, action: GameAction, next_state: GameState) -> GamePhase:
        return self

    def __str__(self) -> str:
        return "GameOver"


GAME_OVER = GameOver()

OBLIGATION_PHASES = (AwaitingPlayerToDiscardExtraCards, AwaitingPlayerToSwimToSafety)


def settle_obligations(phase: GamePhase, state: GameState) -> GamePhase:
    """
    Interrupt `phase` with the first outstanding obligation, if any.

    Obligation phases and GameOver are returned unchanged.
    """
    if isinstance(phase, OBLIGATION_PHASES + (GameOver,)):
        return phase
    sunk = state.sunk_players
    if sunk:
        return AwaitingPlayerToSwimToSafety(sunk[0], phase)
    over_limit = state.players_over_hand_limit
    if over_limit:
        return AwaitingPlayerToDiscardExtraCards(over_limit[0], phase)
    return phase

"""
Action System - Game actions and results.

Actions fall into three categories:
1. Turn actions (move, fly, shore up, give, capture) - cost one of the
   acting player's three actions
2. Out-of-turn actions (helicopter lift, sandbags, discard, lift off) -
   playable by any card holder whenever they are offered, they never
   change whose turn it is
3. Obligations (draws, swim to safety) - forced steps of the turn sequence

Every action is an immutable value. Two actions are equal when they are the
same variant with the same fields, which is what makes "is this action
available?" a plain membership check.

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from .adventurer import Adventurer
from .board import Position
from .cards import CARDS_NEEDED_TO_CAPTURE, HoldableCard, Treasure


class ActionType(Enum):
    """Types of actions in the system."""
    # Turn actions
    MOVE = "move"
    FLY = "fly"
    SHORE_UP = "shore_up"
    GIVE_TREASURE_CARD = "give_treasure_card"
    CAPTURE_TREASURE = "capture_treasure"

    # Out-of-turn actions
    HELICOPTER_LIFT = "helicopter_lift"
    SANDBAG = "sandbag"
    HELICOPTER_LIFT_OFF_ISLAND = "helicopter_lift_off_island"
    DISCARD_CARD = "discard_card"

    # Obligations
    DRAW_FROM_TREASURE_DECK = "draw_from_treasure_deck"
    DRAW_FROM_FLOOD_DECK = "draw_from_flood_deck"
    SWIM_TO_SAFETY = "swim_to_safety"


class ActionCategory(Enum):
    TURN = "turn"
    OUT_OF_TURN = "out_of_turn"
    OBLIGATION = "obligation"


@dataclass(frozen=True)
class GameAction:
    """
    Base class for every action.

    `player` is always the adventurer performing the action: the one
    moving, giving, playing or discarding the card, or drawing.
    """
    action_type: ClassVar[ActionType]
    category: ClassVar[ActionCategory]

    player: Adventurer

    @property
    def is_out_of_turn(self) -> bool:
        return self.category is ActionCategory.OUT_OF_TURN

    @property
    def discarded_cards(self) -> tuple[HoldableCard, ...]:
        """Cards leaving the player's hand for the treasure discard pile."""
        return ()


@dataclass(frozen=True)
class PlayerMovingAction(GameAction):
    """An action that puts the acting player on a new position."""
    position: Position


@dataclass(frozen=True)
class Move(PlayerMovingAction):
    """Move `player` to `position`. For the Navigator, `player` may be anyone."""
    action_type = ActionType.MOVE
    category = ActionCategory.TURN

    def __str__(self) -> str:
        return f"{self.player} moves to {self.position}"


@dataclass(frozen=True)
class Fly(PlayerMovingAction):
    """The Pilot's once-per-turn flight to any position."""
    action_type = ActionType.FLY
    category = ActionCategory.TURN

    def __str__(self) -> str:
        return f"{self.player} flies to {self.position}"


@dataclass(frozen=True)
class SwimToSafety(PlayerMovingAction):
    action_type = ActionType.SWIM_TO_SAFETY
    category = ActionCategory.OBLIGATION

    def __str__(self) -> str:
        return f"{self.player} swims to safety at {self.position}"


@dataclass(frozen=True)
class ShoreUp(GameAction):
    """
    Shore up one flooded position, or two for the Engineer.

    The pair is unordered: it is stored sorted so that both orders compare
    equal.
    """
    action_type = ActionType.SHORE_UP
    category = ActionCategory.TURN

    position: Position
    position2: Position | None = None

    def __post_init__(self):
        if self.position2 is not None:
            if self.position2 == self.position:
                raise ValueError("Cannot shore up the same position twice")
            if self.position2 < self.position:
                first, second = self.position2, self.position
                object.__setattr__(self, "position", first)
                object.__setattr__(self, "position2", second)

    @property
    def positions(self) -> tuple[Position, ...]:
        if self.position2 is None:
            return (self.position,)
        return (self.position, self.position2)

    def __str__(self) -> str:
        targets = " and ".join(str(p) for p in self.positions)
        return f"{self.player} shores up {targets}"


@dataclass(frozen=True)
class GiveTreasureCard(GameAction):
    action_type = ActionType.GIVE_TREASURE_CARD
    category = ActionCategory.TURN

    receiver: Adventurer
    card: HoldableCard

    def __str__(self) -> str:
        return f"{self.player} gives {self.card} to {self.receiver}"


@dataclass(frozen=True)
class CaptureTreasure(GameAction):
    action_type = ActionType.CAPTURE_TREASURE
    category = ActionCategory.TURN

    treasure: Treasure

    @property
    def discarded_cards(self) -> tuple[HoldableCard, ...]:
        return (HoldableCard.treasure_card(self.treasure),) * CARDS_NEEDED_TO_CAPTURE

    def __str__(self) -> str:
        return f"{self.player} captures {self.treasure}"


@dataclass(frozen=True)
class HelicopterLift(GameAction):
    """
    `player` plays a Helicopter Lift card to fly `players_being_moved`
    (who must share a tile) to `position`. The card holder need not be one
    of the passengers.
    """
    action_type = ActionType.HELICOPTER_LIFT
    category = ActionCategory.OUT_OF_TURN

    players_being_moved: frozenset[Adventurer]
    position: Position

    def __post_init__(self):
        if not isinstance(self.players_being_moved, frozenset):
            object.__setattr__(self, "players_being_moved", frozenset(self.players_being_moved))
        if not self.players_being_moved:
            raise ValueError("A helicopter lift must move at least one player")

    @property
    def discarded_cards(self) -> tuple[HoldableCard, ...]:
        return (HoldableCard.HELICOPTER_LIFT,)

    def __str__(self) -> str:
        passengers = ", ".join(sorted(str(p) for p in self.players_being_moved))
        return f"{self.player} plays Helicopter Lift to fly {passengers} to {self.position}"


@dataclass(frozen=True)
class Sandbag(GameAction):
    action_type = ActionType.SANDBAG
    category = ActionCategory.OUT_OF_TURN

    position: Position

    @property
    def discarded_cards(self) -> tuple[HoldableCard, ...]:
        return (HoldableCard.SANDBAGS,)

    def __str__(self) -> str:
        return f"{self.player} plays Sandbags on {self.position}"


@dataclass(frozen=True)
class HelicopterLiftOffIsland(GameAction):
    """Win the game by flying everyone off Fools' Landing."""
    action_type = ActionType.HELICOPTER_LIFT_OFF_ISLAND
    category = ActionCategory.OUT_OF_TURN

    @property
    def discarded_cards(self) -> tuple[HoldableCard, ...]:
        return (HoldableCard.HELICOPTER_LIFT,)

    def __str__(self) -> str:
        return f"{self.player} plays Helicopter Lift to fly everyone off the island"


@dataclass(frozen=True)
class DiscardCard(GameAction):
    action_type = ActionType.DISCARD_CARD
    category = ActionCategory.OUT_OF_TURN

    card: HoldableCard

    @property
    def discarded_cards(self) -> tuple[HoldableCard, ...]:
        return (self.card,)

    def __str__(self) -> str:
        return f"{self.player} discards {self.card}"


@dataclass(frozen=True)
class DrawFromTreasureDeck(GameAction):
    action_type = ActionType.DRAW_FROM_TREASURE_DECK
    category = ActionCategory.OBLIGATION

    def __str__(self) -> str:
        return f"{self.player} draws from the treasure deck"


@dataclass(frozen=True)
class DrawFromFloodDeck(GameAction):
    action_type = ActionType.DRAW_FROM_FLOOD_DECK
    category = ActionCategory.OBLIGATION

    def __str__(self) -> str:
        return f"{self.player} draws from the flood deck"


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Errors (if failed)
    - Human-readable changes (for presentation)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None

    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
        )

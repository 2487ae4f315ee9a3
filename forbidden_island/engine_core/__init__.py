"""
Engine Core - Deterministic Forbidden Island rules.

The engine:
1. Holds an immutable GameState
2. Generates the available actions for it
3. Applies an action via the reducer, with caller-supplied randomness
4. Evaluates the game result on demand
"""

from .adventurer import Adventurer
from .board import ALL_POSITIONS, GameMap, Location, MapSite, Position
from .cards import HoldableCard, Treasure
from .flood import FloodLevel, LocationFloodState
from .action import (
    ActionCategory, ActionResult, ActionType, CaptureTreasure, DiscardCard, DrawFromFloodDeck,
    DrawFromTreasureDeck, Fly, GameAction, GiveTreasureCard, HelicopterLift, HelicopterLiftOffIsland,
    Move, Sandbag, ShoreUp, SwimToSafety,
)
from .phases import (
    AwaitingFloodDeckDraw, AwaitingPlayerAction, AwaitingPlayerToDiscardExtraCards,
    AwaitingPlayerToSwimToSafety, AwaitingTreasureDeckDraw, GAME_OVER, GameOver, GamePhase,
)
from .state import GameState
from .action_generator import ActionGenerator, available_actions
from .reducer import Reducer, next_state_after
from .result import (
    AdventurersWon, BothPickupLocationsSankBeforeCollectingTreasure, FoolsLandingSank, GameResult,
    MaximumWaterLevelReached, PlayerDrowned, evaluate_result,
)
from .setup import GameSetup, new_game_state, new_random_map, new_random_setup
from .exceptions import (
    ForbiddenIslandError, IllegalActionError, InvalidSetupError, InvariantViolationError,
)

__all__ = [
    "Adventurer",
    "ALL_POSITIONS",
    "GameMap",
    "Location",
    "MapSite",
    "Position",
    "HoldableCard",
    "Treasure",
    "FloodLevel",
    "LocationFloodState",
    "ActionCategory",
    "ActionResult",
    "ActionType",
    "GameAction",
    "Move",
    "Fly",
    "ShoreUp",
    "GiveTreasureCard",
    "CaptureTreasure",
    "HelicopterLift",
    "Sandbag",
    "HelicopterLiftOffIsland",
    "DrawFromTreasureDeck",
    "DrawFromFloodDeck",
    "DiscardCard",
    "SwimToSafety",
    "GamePhase",
    "AwaitingPlayerAction",
    "AwaitingTreasureDeckDraw",
    "AwaitingFloodDeckDraw",
    "AwaitingPlayerToDiscardExtraCards",
    "AwaitingPlayerToSwimToSafety",
    "GameOver",
    "GAME_OVER",
    "GameState",
    "ActionGenerator",
    "available_actions",
    "Reducer",
    "next_state_after",
    "GameResult",
    "MaximumWaterLevelReached",
    "PlayerDrowned",
    "BothPickupLocationsSankBeforeCollectingTreasure",
    "FoolsLandingSank",
    "AdventurersWon",
    "evaluate_result",
    "GameSetup",
    "new_game_state",
    "new_random_map",
    "new_random_setup",
    "ForbiddenIslandError",
    "IllegalActionError",
    "InvalidSetupError",
    "InvariantViolationError",
]

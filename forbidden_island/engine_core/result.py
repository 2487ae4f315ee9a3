"""
Game Results - How a game ends.

The adventurers lose when:
1. The water level reaches DEAD
2. A player is on a sunken tile with nowhere to swim
3. Both pickup locations of an uncollected treasure have sunk
4. Fools' Landing sinks

They win by lifting off from Fools' Landing with all four treasures.

Results are never stored; evaluate_result() derives them from a state, and
GameState.result memoises that per instance. When several apply at once the
first in the order above wins.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from .action import HelicopterLiftOffIsland
from .adventurer import Adventurer
from .board import Location, pickup_locations_for
from .cards import Treasure

if TYPE_CHECKING:
    from .state import GameState


@dataclass(frozen=True)
class GameResult:
    adventurers_won: ClassVar[bool] = False


@dataclass(frozen=True)
class MaximumWaterLevelReached(GameResult):
    def __str__(self) -> str:
        return "The water level reached its maximum"


@dataclass(frozen=True)
class PlayerDrowned(GameResult):
    player: Adventurer

    def __str__(self) -> str:
        return f"{self.player} drowned"


@dataclass(frozen=True)
class BothPickupLocationsSankBeforeCollectingTreasure(GameResult):
    treasure: Treasure

    def __str__(self) -> str:
        return f"Both pickup locations for {self.treasure} sank before it was collected"


@dataclass(frozen=True)
class FoolsLandingSank(GameResult):
    def __str__(self) -> str:
        return "Fools' Landing sank"


@dataclass(frozen=True)
class AdventurersWon(GameResult):
    adventurers_won: ClassVar[bool] = True

    def __str__(self) -> str:
        return "The adventurers escaped with all four treasures"


def evaluate_result(state: GameState) -> GameResult | None:
    """The result of the game in this state, or None if it is still going."""
    if state.flood_level.is_dead:
        return MaximumWaterLevelReached()

    drowned = drowned_players(state)
    if drowned:
        return PlayerDrowned(drowned[0])

    for treasure in Treasure:
        if not state.treasures_collected[treasure] and all(
            state.is_sunken(location) for location in pickup_locations_for(treasure)
        ):
            return BothPickupLocationsSankBeforeCollectingTreasure(treasure)

    if state.is_sunken(Location.FOOLS_LANDING):
        return FoolsLandingSank()

    if state.previous_actions and isinstance(state.previous_actions[-1], HelicopterLiftOffIsland):
        return AdventurersWon()

    return None


def drowned_players(state: GameState) -> list[Adventurer]:
    """
    Players on a sunken tile with no unsunken neighbour, in player order.

    The Diver and the Pilot can always get away, so they never drown.
    """
    drowned = []
    for player in state.sunk_players:
        if player in (Adventurer.DIVER, Adventurer.PILOT):
            continue
        neighbours = state.game_setup.map.adjacent_sites(state.position_of(player), player.moves_diagonally)
        if all(state.is_sunken(site.location) for site in neighbours):
            drowned.append(player)
    return drowned

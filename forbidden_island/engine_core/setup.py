"""
Game Setup - Players, island map and the opening snapshot.

The engine consumes a GameSetup but never builds one. This module is the
setup side of the table:
- new_random_map(): deal the 24 location tiles onto the board
- new_random_setup(): pick adventurers and a map
- new_game_state(): shuffle the decks, deal starting hands, flood the first
  six locations and put everyone on their starting tile

Everything random takes an explicit random.Random, so a seed reproduces the
whole opening.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence
import logging
import random as _random

from .adventurer import Adventurer
from .board import ALL_LOCATIONS, GameMap, Location, MapSite, Position
from .cards import HoldableCard, Treasure, new_treasure_deck, shuffled
from .exceptions import InvalidSetupError
from .flood import FloodLevel, LocationFloodState
from .phases import AwaitingPlayerAction, MAX_ACTIONS_PER_PLAYER_TURN
from .state import GameState

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2
MAX_PLAYERS = 4
STARTING_CARDS_PER_PLAYER = 2
LOCATIONS_FLOODED_AT_START = 6


@dataclass(frozen=True)
class GameSetup:
    """The ordered players and the map for one game. Fixed for its lifetime."""
    players: tuple[Adventurer, ...]
    map: GameMap

    def __post_init__(self):
        if not isinstance(self.players, tuple):
            object.__setattr__(self, "players", tuple(self.players))
        if not MIN_PLAYERS <= len(self.players) <= MAX_PLAYERS:
            raise InvalidSetupError(
                f"A game needs {MIN_PLAYERS} to {MAX_PLAYERS} players, got {len(self.players)}"
            )
        if len(set(self.players)) != len(self.players):
            raise InvalidSetupError(f"Each adventurer can only be played once: {list(map(str, self.players))}")

    def player_after(self, player: Adventurer) -> Adventurer:
        """The next player in turn order, wrapping around."""
        index = self.players.index(player)
        return self.players[(index + 1) % len(self.players)]

    def location_at(self, position: Position) -> Location:
        return self.map.location_at(position)

    def position_of(self, location: Location) -> Position:
        return self.map.position_of(location)

    def site_at(self, position: Position) -> MapSite:
        return self.map.site_at(position)


def new_random_map(random: _random.Random) -> GameMap:
    return GameMap.from_locations(shuffled(ALL_LOCATIONS, random))


def new_random_setup(
    random: _random.Random,
    players: Sequence[Adventurer] | None = None,
    number_of_players: int = 2,
) -> GameSetup:
    """
    A setup with a random map. Without explicit players, `number_of_players`
    distinct adventurers are picked at random.
    """
    if players is None:
        if not MIN_PLAYERS <= number_of_players <= MAX_PLAYERS:
            raise InvalidSetupError(
                f"A game needs {MIN_PLAYERS} to {MAX_PLAYERS} players, got {number_of_players}"
            )
        players = random.sample(list(Adventurer), number_of_players)
    return GameSetup(players=tuple(players), map=new_random_map(random))


def new_game_state(
    setup: GameSetup,
    random: _random.Random,
    flood_level: FloodLevel = FloodLevel.TWO,
) -> GameState:
    """
    The opening snapshot for a setup.

    Starting hands never contain Waters Rise: those cards are shuffled into
    the treasure deck only after dealing.
    """
    full_deck = new_treasure_deck()
    waters_rise = tuple(card for card in full_deck if card is HoldableCard.WATERS_RISE)
    dealable = shuffled((card for card in full_deck if card is not HoldableCard.WATERS_RISE), random)

    player_cards = {}
    for i, player in enumerate(setup.players):
        start = i * STARTING_CARDS_PER_PLAYER
        player_cards[player] = dealable[start:start + STARTING_CARDS_PER_PLAYER]
    dealt = len(setup.players) * STARTING_CARDS_PER_PLAYER
    treasure_deck = shuffled(dealable[dealt:] + waters_rise, random)

    flood_deck = shuffled(ALL_LOCATIONS, random)
    initially_flooded = flood_deck[:LOCATIONS_FLOODED_AT_START]
    location_flood_states = {location: LocationFloodState.UNFLOODED for location in ALL_LOCATIONS}
    for location in initially_flooded:
        location_flood_states[location] = LocationFloodState.FLOODED

    state = GameState(
        game_setup=setup,
        flood_level=flood_level,
        treasure_deck=treasure_deck,
        treasure_deck_discard=(),
        flood_deck=flood_deck[LOCATIONS_FLOODED_AT_START:],
        flood_deck_discard=initially_flooded,
        treasures_collected={treasure: False for treasure in Treasure},
        location_flood_states=location_flood_states,
        player_positions={p: setup.position_of(p.starting_location) for p in setup.players},
        player_cards=player_cards,
        phase=AwaitingPlayerAction(setup.players[0], MAX_ACTIONS_PER_PLAYER_TURN),
    )
    logger.info(
        "New game for %s at flood level %s, flooded: %s",
        ", ".join(map(str, setup.players)), flood_level.name, ", ".join(map(str, initially_flooded)),
    )
    return state

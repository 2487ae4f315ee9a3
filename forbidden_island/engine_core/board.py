"""
Board Geometry - Positions, locations and the per-game island map.

The island is a fixed diamond of 24 positions, addressed as (x, y):

      ..        y=1   x=3..4
     ....       y=2   x=2..5
    ......      y=3   x=1..6
    ......      y=4   x=1..6
     ....       y=5   x=2..5
      ..        y=6   x=3..4

Locations are dealt onto positions once per game by the setup collaborator.
After that the GameMap never changes, so adjacency is a pure function of
position and has nothing to do with game state.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Sequence

from .cards import Treasure
from .exceptions import InvalidSetupError


@dataclass(frozen=True, order=True)
class Position:
    """A coordinate on the diamond board."""
    x: int
    y: int

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"

    @property
    def is_on_board(self) -> bool:
        return self in ALL_POSITIONS_SET

    def adjacent_positions(self, include_diagonals: bool = False) -> list[Position]:
        """On-board neighbours, orthogonal first then diagonal."""
        if not self.is_on_board:
            raise ValueError(f"Position {self} is not on the board")
        offsets = ORTHOGONAL_OFFSETS + (DIAGONAL_OFFSETS if include_diagonals else ())
        candidates = (Position(self.x + dx, self.y + dy) for dx, dy in offsets)
        return [p for p in candidates if p in ALL_POSITIONS_SET]


ORTHOGONAL_OFFSETS = ((0, -1), (-1, 0), (1, 0), (0, 1))
DIAGONAL_OFFSETS = ((-1, -1), (1, -1), (-1, 1), (1, 1))

# Columns present in each row of the diamond
_ROW_COLUMNS = {
    1: range(3, 5),
    2: range(2, 6),
    3: range(1, 7),
    4: range(1, 7),
    5: range(2, 6),
    6: range(3, 5),
}

# Row-major reading order, top to bottom
ALL_POSITIONS: tuple[Position, ...] = tuple(
    Position(x, y) for y, columns in _ROW_COLUMNS.items() for x in columns
)
ALL_POSITIONS_SET = frozenset(ALL_POSITIONS)


class Location(Enum):
    """The 24 named island tiles."""
    FOOLS_LANDING = "Fools' Landing"

    # Treasure pickup locations
    TEMPLE_OF_THE_MOON = "Temple of the Moon"
    TEMPLE_OF_THE_SUN = "Temple of the Sun"
    WHISPERING_GARDEN = "Whispering Garden"
    HOWLING_GARDEN = "Howling Garden"
    CAVE_OF_EMBERS = "Cave of Embers"
    CAVE_OF_SHADOWS = "Cave of Shadows"
    CORAL_PALACE = "Coral Palace"
    TIDAL_PALACE = "Tidal Palace"

    # Gates (adventurer starting tiles)
    BRONZE_GATE = "Bronze Gate"
    COPPER_GATE = "Copper Gate"
    GOLD_GATE = "Gold Gate"
    IRON_GATE = "Iron Gate"
    SILVER_GATE = "Silver Gate"

    BREAKERS_BRIDGE = "Breakers Bridge"
    CLIFFS_OF_ABANDON = "Cliffs of Abandon"
    CRIMSON_FOREST = "Crimson Forest"
    DUNES_OF_DECEPTION = "Dunes of Deception"
    LOST_LAGOON = "Lost Lagoon"
    MISTY_MARSH = "Misty Marsh"
    OBSERVATORY = "Observatory"
    PHANTOM_ROCK = "Phantom Rock"
    TWILIGHT_HOLLOW = "Twilight Hollow"
    WATCHTOWER = "Watchtower"

    def __str__(self) -> str:
        return self.value

    @property
    def pickup_treasure(self) -> Treasure | None:
        """The treasure that can be captured here, if any."""
        return _PICKUP_TREASURES.get(self)


_PICKUP_TREASURES = {
    Location.TEMPLE_OF_THE_MOON: Treasure.EARTH_STONE,
    Location.TEMPLE_OF_THE_SUN: Treasure.EARTH_STONE,
    Location.WHISPERING_GARDEN: Treasure.STATUE_OF_THE_WIND,
    Location.HOWLING_GARDEN: Treasure.STATUE_OF_THE_WIND,
    Location.CAVE_OF_EMBERS: Treasure.CRYSTAL_OF_FIRE,
    Location.CAVE_OF_SHADOWS: Treasure.CRYSTAL_OF_FIRE,
    Location.CORAL_PALACE: Treasure.OCEANS_CHALICE,
    Location.TIDAL_PALACE: Treasure.OCEANS_CHALICE,
}

ALL_LOCATIONS: tuple[Location, ...] = tuple(Location)
ALL_LOCATIONS_SET = frozenset(ALL_LOCATIONS)


def pickup_locations_for(treasure: Treasure) -> tuple[Location, ...]:
    """Both locations where a treasure can be captured."""
    return tuple(loc for loc, t in _PICKUP_TREASURES.items() if t is treasure)


@dataclass(frozen=True)
class MapSite:
    """A location fixed to a position for the duration of one game."""
    position: Position
    location: Location

    def __str__(self) -> str:
        return f"{self.location} {self.position}"


@dataclass(frozen=True)
class GameMap:
    """
    The location <-> position bijection for one game.

    Built once by the setup collaborator; the engine only reads it.
    """
    map_sites: tuple[MapSite, ...]

    def __post_init__(self):
        positions = [site.position for site in self.map_sites]
        locations = [site.location for site in self.map_sites]
        if len(self.map_sites) != len(ALL_POSITIONS) or set(positions) != ALL_POSITIONS_SET:
            raise InvalidSetupError("A map must place exactly one location on every board position")
        if set(locations) != ALL_LOCATIONS_SET:
            missing = sorted(str(loc) for loc in ALL_LOCATIONS_SET - set(locations))
            raise InvalidSetupError(f"A map must contain every location exactly once. Missing: {missing}")

    @classmethod
    def from_locations(cls, locations: Sequence[Location]) -> GameMap:
        """Lay locations onto the board in row-major order."""
        return cls(map_sites=tuple(
            MapSite(position, location) for position, location in zip(ALL_POSITIONS, locations)
        ))

    @cached_property
    def _sites_by_position(self) -> dict[Position, MapSite]:
        return {site.position: site for site in self.map_sites}

    @cached_property
    def _positions_by_location(self) -> dict[Location, Position]:
        return {site.location: site.position for site in self.map_sites}

    def site_at(self, position: Position) -> MapSite:
        try:
            return self._sites_by_position[position]
        except KeyError:
            raise ValueError(f"Position {position} is not on the board") from None

    def location_at(self, position: Position) -> Location:
        return self.site_at(position).location

    def position_of(self, location: Location) -> Position:
        return self._positions_by_location[location]

    def adjacent_sites(self, position: Position, include_diagonals: bool = False) -> list[MapSite]:
        """Sites next to a position, with diagonals only when asked for."""
        return [
            self._sites_by_position[p]
            for p in position.adjacent_positions(include_diagonals)
        ]

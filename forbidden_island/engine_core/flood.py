"""
Flood Model - Per-location flood stages and the island-wide water level.

Each location moves UNFLOODED -> FLOODED -> SUNKEN as flood cards are drawn.
Shoring up (or a Sandbags card) brings a FLOODED location back to
UNFLOODED; nothing brings a SUNKEN location back.

The water level only ever rises. It sets how many flood cards are drawn at
the end of each turn, and reaching DEAD ends the game.
"""

from __future__ import annotations
from enum import Enum


class LocationFloodState(Enum):
    UNFLOODED = "unflooded"
    FLOODED = "flooded"
    SUNKEN = "sunken"

    def flooded(self) -> LocationFloodState:
        """The stage after one more flood card for this location."""
        if self is LocationFloodState.UNFLOODED:
            return LocationFloodState.FLOODED
        if self is LocationFloodState.FLOODED:
            return LocationFloodState.SUNKEN
        raise ValueError("A sunken location cannot be flooded")


class FloodLevel(Enum):
    """Water level marker, ONE (lowest) to DEAD."""
    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    DEAD = 10

    @property
    def tiles_flooding_per_turn(self) -> int:
        return _TILES_FLOODING_PER_TURN[self]

    @property
    def is_dead(self) -> bool:
        return self is FloodLevel.DEAD

    def next(self) -> FloodLevel:
        """One step higher; DEAD stays DEAD."""
        if self.is_dead:
            return self
        return FloodLevel(self.value + 1)

    def __lt__(self, other: FloodLevel) -> bool:
        if not isinstance(other, FloodLevel):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: FloodLevel) -> bool:
        if not isinstance(other, FloodLevel):
            return NotImplemented
        return self.value <= other.value


_TILES_FLOODING_PER_TURN = {
    FloodLevel.ONE: 2,
    FloodLevel.TWO: 2,
    FloodLevel.THREE: 3,
    FloodLevel.FOUR: 3,
    FloodLevel.FIVE: 3,
    FloodLevel.SIX: 4,
    FloodLevel.SEVEN: 4,
    FloodLevel.EIGHT: 5,
    FloodLevel.NINE: 5,
    FloodLevel.DEAD: 0,
}

# Difficulty names for the starting water level
STARTING_FLOOD_LEVELS = {
    "novice": FloodLevel.ONE,
    "normal": FloodLevel.TWO,
    "elite": FloodLevel.THREE,
    "legendary": FloodLevel.FOUR,
}

"""
Adventurers - The six player roles.

Every player is identified by their Adventurer; a game never has two
players with the same role. Role abilities are enforced by the action
generator, this module only records the fixed facts about each role.
"""

from __future__ import annotations
from enum import Enum

from .board import Location


class Adventurer(Enum):
    ENGINEER = "Engineer"
    EXPLORER = "Explorer"
    NAVIGATOR = "Navigator"
    DIVER = "Diver"
    PILOT = "Pilot"
    MESSENGER = "Messenger"

    def __str__(self) -> str:
        return self.value

    @property
    def starting_location(self) -> Location:
        return _STARTING_LOCATIONS[self]

    @property
    def moves_diagonally(self) -> bool:
        # Also applies to shoring up and swimming
        return self is Adventurer.EXPLORER


_STARTING_LOCATIONS = {
    Adventurer.ENGINEER: Location.BRONZE_GATE,
    Adventurer.EXPLORER: Location.COPPER_GATE,
    Adventurer.NAVIGATOR: Location.GOLD_GATE,
    Adventurer.DIVER: Location.IRON_GATE,
    Adventurer.PILOT: Location.FOOLS_LANDING,
    Adventurer.MESSENGER: Location.SILVER_GATE,
}

"""
Cards and Decks - Treasures, holdable cards and draw/discard pile helpers.

Two independent deck pairs exist in a game:
- Treasure deck: HoldableCards, drawn into player hands
- Flood deck: one card per Location, drawn to flood the island

Both behave the same way: the top card is at index 0, and an exhausted draw
pile is replaced by the shuffled discard pile. Piles are tuples so a new
GameState can share them with its predecessor.

All shuffling takes an explicit random.Random; nothing here touches the
module-level generator.
"""

from __future__ import annotations
from enum import Enum
from typing import Iterable, Sequence, TypeVar
import random as _random


class Treasure(Enum):
    """The four treasures the adventurers must capture."""
    EARTH_STONE = "The Earth Stone"
    STATUE_OF_THE_WIND = "The Statue of the Wind"
    CRYSTAL_OF_FIRE = "The Crystal of Fire"
    OCEANS_CHALICE = "The Ocean's Chalice"

    def __str__(self) -> str:
        return self.value


class HoldableCard(Enum):
    """
    Every card identity in the treasure deck.

    Treasure cards come in four identities (one per Treasure); the other
    three are special cards. Multiple copies of each identity exist.
    """
    EARTH_STONE = "Earth Stone"
    STATUE_OF_THE_WIND = "Statue of the Wind"
    CRYSTAL_OF_FIRE = "Crystal of Fire"
    OCEANS_CHALICE = "Ocean's Chalice"

    HELICOPTER_LIFT = "Helicopter Lift"
    SANDBAGS = "Sandbags"
    WATERS_RISE = "Waters Rise!"

    def __str__(self) -> str:
        return self.value

    @property
    def treasure(self) -> Treasure | None:
        """The treasure this card counts towards, None for special cards."""
        return _CARD_TREASURES.get(self)

    @property
    def is_treasure_card(self) -> bool:
        return self.treasure is not None

    @classmethod
    def treasure_card(cls, treasure: Treasure) -> HoldableCard:
        return _TREASURE_CARDS[treasure]


_CARD_TREASURES = {
    HoldableCard.EARTH_STONE: Treasure.EARTH_STONE,
    HoldableCard.STATUE_OF_THE_WIND: Treasure.STATUE_OF_THE_WIND,
    HoldableCard.CRYSTAL_OF_FIRE: Treasure.CRYSTAL_OF_FIRE,
    HoldableCard.OCEANS_CHALICE: Treasure.OCEANS_CHALICE,
}
_TREASURE_CARDS = {treasure: card for card, treasure in _CARD_TREASURES.items()}

# Cards needed in hand to capture a treasure
CARDS_NEEDED_TO_CAPTURE = 4

# Fixed composition of the treasure deck (28 cards)
TREASURE_DECK_CARD_COUNTS: dict[HoldableCard, int] = {
    HoldableCard.EARTH_STONE: 5,
    HoldableCard.STATUE_OF_THE_WIND: 5,
    HoldableCard.CRYSTAL_OF_FIRE: 5,
    HoldableCard.OCEANS_CHALICE: 5,
    HoldableCard.HELICOPTER_LIFT: 3,
    HoldableCard.SANDBAGS: 2,
    HoldableCard.WATERS_RISE: 3,
}


def new_treasure_deck() -> tuple[HoldableCard, ...]:
    """A complete, unshuffled treasure deck."""
    return tuple(
        card
        for card, count in TREASURE_DECK_CARD_COUNTS.items()
        for _ in range(count)
    )


T = TypeVar("T")


def shuffled(cards: Iterable[T], random: _random.Random) -> tuple[T, ...]:
    """Return a new shuffled pile; the input is left untouched."""
    pile = list(cards)
    random.shuffle(pile)
    return tuple(pile)


def remove_cards(cards: Sequence[T], to_remove: Iterable[T]) -> tuple[T, ...]:
    """
    Remove one occurrence of each card in to_remove.

    Raises ValueError if a card to remove is not present.
    """
    remaining = list(cards)
    for card in to_remove:
        remaining.remove(card)
    return tuple(remaining)


def distinct(cards: Iterable[T]) -> list[T]:
    """Distinct card identities, in first-seen order."""
    return list(dict.fromkeys(cards))


def draw_top(
    pile: tuple[T, ...],
    discard: tuple[T, ...],
    random: _random.Random,
) -> tuple[T | None, tuple[T, ...], tuple[T, ...]]:
    """
    Take the top card from a pile.

    Returns (card, new pile, new discard). An empty pile is first replaced by
    the shuffled discard; if both are empty the card is None.
    """
    if not pile and discard:
        pile, discard = shuffled(discard, random), ()
    if not pile:
        return None, pile, discard
    return pile[0], pile[1:], discard


def replenished(
    pile: tuple[T, ...],
    discard: tuple[T, ...],
    random: _random.Random,
) -> tuple[tuple[T, ...], tuple[T, ...]]:
    """Reshuffle the discard into a new pile once the pile has run out."""
    if pile:
        return pile, discard
    return shuffled(discard, random), ()

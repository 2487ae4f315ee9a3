"""
Game State - Immutable snapshot of a Forbidden Island game.

Design principles:
- Immutable: every transition returns a new GameState, sharing the
  unchanged tuples and read-only maps of its predecessor
- Self-checking: deck accounting and key coverage are verified on
  construction, so a broken state never exists
- Lazy: available actions and the game result are derived on demand and
  memoised per instance

The engine never mutates a state. Collaborators build the opening snapshot
(see setup.py); after that only next_state_after() produces new ones.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field, fields
from functools import cached_property
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable, Mapping
import random as _random

from .action import GameAction
from .adventurer import Adventurer
from .board import ALL_LOCATIONS_SET, Location, MapSite, Position
from .cards import HoldableCard, TREASURE_DECK_CARD_COUNTS, Treasure
from .exceptions import InvariantViolationError
from .flood import FloodLevel, LocationFloodState
from .phases import GameOver, GamePhase, MAX_HAND_SIZE

if TYPE_CHECKING:
    from .result import GameResult
    from .setup import GameSetup


_TUPLE_FIELDS = frozenset({
    "treasure_deck", "treasure_deck_discard", "flood_deck", "flood_deck_discard", "previous_actions",
})
_MAP_FIELDS = frozenset({
    "treasures_collected", "location_flood_states", "player_positions", "player_cards",
})

# Fields each invariant reads; a copy only rechecks the ones it touches
_TREASURE_CARD_FIELDS = frozenset({"treasure_deck", "treasure_deck_discard", "player_cards"})
_FLOOD_FIELDS = frozenset({"location_flood_states", "flood_deck", "flood_deck_discard"})
_PLAYER_FIELDS = frozenset({"game_setup", "player_positions", "player_cards"})


@dataclass(frozen=True)
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    game_setup: GameSetup
    flood_level: FloodLevel

    # Decks: index 0 is the top card
    treasure_deck: tuple[HoldableCard, ...]
    treasure_deck_discard: tuple[HoldableCard, ...]
    flood_deck: tuple[Location, ...]
    flood_deck_discard: tuple[Location, ...]

    # Read-only views; a state never exposes a dict its successors could change
    treasures_collected: Mapping[Treasure, bool]
    location_flood_states: Mapping[Location, LocationFloodState]
    player_positions: Mapping[Adventurer, Position]
    player_cards: Mapping[Adventurer, tuple[HoldableCard, ...]]

    phase: GamePhase

    # History, oldest first
    previous_actions: tuple[GameAction, ...] = field(default=())

    def __post_init__(self):
        self._normalise(_TUPLE_FIELDS | _MAP_FIELDS)
        self._check_invariants()

    def __hash__(self):
        return hash((
            self.game_setup,
            self.flood_level,
            self.treasure_deck,
            self.treasure_deck_discard,
            self.flood_deck,
            self.flood_deck_discard,
            frozenset(self.treasures_collected.items()),
            frozenset(self.location_flood_states.items()),
            frozenset(self.player_positions.items()),
            frozenset(self.player_cards.items()),
            self.phase,
            self.previous_actions,
        ))

    def _normalise(self, names: Iterable[str]):
        """Freeze the named fields: tuples for sequences, read-only copies for maps."""
        for name in names:
            value = getattr(self, name)
            if name in _TUPLE_FIELDS:
                if not isinstance(value, tuple):
                    object.__setattr__(self, name, tuple(value))
            elif name in _MAP_FIELDS and not isinstance(value, MappingProxyType):
                if name == "player_cards":
                    value = {p: tuple(cards) for p, cards in value.items()}
                else:
                    value = dict(value)
                object.__setattr__(self, name, MappingProxyType(value))

    def _check_invariants(self, changed: Iterable[str] | None = None):
        changed = (_TUPLE_FIELDS | _MAP_FIELDS | _PLAYER_FIELDS) if changed is None else set(changed)

        if changed & _TREASURE_CARD_FIELDS:
            all_treasure_cards = Counter(self.treasure_deck) + Counter(self.treasure_deck_discard)
            for cards in self.player_cards.values():
                all_treasure_cards.update(cards)
            if all_treasure_cards != Counter(TREASURE_DECK_CARD_COUNTS):
                raise InvariantViolationError(
                    f"Treasure cards do not add up to a full deck: {dict(all_treasure_cards)}"
                )

        if changed & _FLOOD_FIELDS:
            if set(self.location_flood_states) != ALL_LOCATIONS_SET:
                raise InvariantViolationError("Every location must have a flood state")

            expected_flood_cards = Counter(
                location for location, flood_state in self.location_flood_states.items()
                if flood_state is not LocationFloodState.SUNKEN
            )
            flood_cards = Counter(self.flood_deck) + Counter(self.flood_deck_discard)
            if flood_cards != expected_flood_cards:
                raise InvariantViolationError(
                    "Flood deck and discard must hold exactly one card per unsunken location"
                )

        if "treasures_collected" in changed and set(self.treasures_collected) != set(Treasure):
            raise InvariantViolationError("treasures_collected must have an entry for every treasure")

        if changed & _PLAYER_FIELDS:
            players = set(self.game_setup.players)
            if set(self.player_positions) != players:
                raise InvariantViolationError("player_positions must have an entry for every player")
            if set(self.player_cards) != players:
                raise InvariantViolationError("player_cards must have an entry for every player")

    # ----- Queries -----

    @property
    def players(self) -> tuple[Adventurer, ...]:
        return self.game_setup.players

    def position_of(self, player: Adventurer) -> Position:
        return self.player_positions[player]

    def site_of(self, player: Adventurer) -> MapSite:
        return self.game_setup.site_at(self.player_positions[player])

    def location_of(self, player: Adventurer) -> Location:
        return self.site_of(player).location

    def flood_state_of(self, location: Location) -> LocationFloodState:
        return self.location_flood_states[location]

    def flood_state_at(self, position: Position) -> LocationFloodState:
        return self.location_flood_states[self.game_setup.location_at(position)]

    def is_sunken(self, location: Location) -> bool:
        return self.location_flood_states[location] is LocationFloodState.SUNKEN

    def is_sunken_at(self, position: Position) -> bool:
        return self.flood_state_at(position) is LocationFloodState.SUNKEN

    def locations_with_state(self, flood_state: LocationFloodState) -> list[Location]:
        return [loc for loc, s in self.location_flood_states.items() if s is flood_state]

    def players_at(self, position: Position) -> list[Adventurer]:
        """Players on a position, in player order."""
        return [p for p in self.players if self.player_positions[p] == position]

    @property
    def sunk_players(self) -> list[Adventurer]:
        """Players standing on a sunken location, in player order."""
        return [p for p in self.players if self.is_sunken_at(self.player_positions[p])]

    @property
    def players_over_hand_limit(self) -> list[Adventurer]:
        return [p for p in self.players if len(self.player_cards[p]) > MAX_HAND_SIZE]

    def cards_held_by(self, player: Adventurer, card: HoldableCard) -> int:
        return self.player_cards[player].count(card)

    @property
    def all_treasures_collected(self) -> bool:
        return all(self.treasures_collected.values())

    @property
    def is_game_over(self) -> bool:
        return isinstance(self.phase, GameOver)

    # ----- Derived, memoised -----

    @cached_property
    def available_actions(self) -> tuple[GameAction, ...]:
        """Every action legal in this state, in a stable order."""
        from .action_generator import ActionGenerator
        return tuple(ActionGenerator().generate(self))

    @cached_property
    def _available_action_set(self) -> frozenset[GameAction]:
        return frozenset(self.available_actions)

    def is_available(self, action: GameAction) -> bool:
        return action in self._available_action_set

    @cached_property
    def result(self) -> GameResult | None:
        """The outcome of the game, or None while it is still going."""
        from .result import evaluate_result
        return evaluate_result(self)

    # ----- Transitions -----

    def next_state_after(self, action: GameAction, random: _random.Random) -> GameState:
        """
        Apply an available action.

        Raises IllegalActionError if the action is not available.
        """
        from .reducer import next_state_after
        return next_state_after(self, action, random)

    def with_player_position(self, player: Adventurer, position: Position) -> GameState:
        """Return new state with one player moved."""
        new_positions = dict(self.player_positions)
        new_positions[player] = position
        return self._copy_with(player_positions=new_positions)

    def with_player_positions(self, moves: dict[Adventurer, Position]) -> GameState:
        new_positions = dict(self.player_positions)
        new_positions.update(moves)
        return self._copy_with(player_positions=new_positions)

    def with_location_flood_state(self, location: Location, flood_state: LocationFloodState) -> GameState:
        """Return new state with one location's flood stage changed."""
        new_states = dict(self.location_flood_states)
        new_states[location] = flood_state
        return self._copy_with(location_flood_states=new_states)

    def _copy_with(self, **kwargs) -> GameState:
        """
        Create a copy with some fields replaced.

        Only the replaced fields are frozen again, and only the invariants
        that read them are rechecked. Memoised values are not carried over.
        """
        unknown = set(kwargs) - _FIELD_NAMES
        if unknown:
            raise TypeError(f"GameState has no field(s) {sorted(unknown)}")
        new_state = object.__new__(type(self))
        for name in _FIELD_NAMES:
            object.__setattr__(new_state, name, kwargs[name] if name in kwargs else getattr(self, name))
        new_state._normalise(kwargs)
        new_state._check_invariants(kwargs)
        return new_state


_FIELD_NAMES = frozenset(f.name for f in fields(GameState))

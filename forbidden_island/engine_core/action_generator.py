"""
Action Generator - Generates all legal actions from a game state.

The action generator is used by:
1. GameState.available_actions (memoised per state)
2. The reducer, to reject actions that are not available
3. Drivers and UIs, to offer choices

Output is deterministic and free of duplicates: the same state always yields
the same actions in the same order.

Out-of-turn actions (Helicopter Lift, Sandbags, lifting off the island) are
overlaid on every phase except swimming to safety and game over. While a
player must discard, only that player's out-of-turn actions are offered.
"""

from __future__ import annotations
from dataclasses import dataclass
from itertools import combinations
from typing import Iterable

from .action import (
    CaptureTreasure, DiscardCard, DrawFromFloodDeck, DrawFromTreasureDeck, Fly, GameAction,
    GiveTreasureCard, HelicopterLift, HelicopterLiftOffIsland, Move, Sandbag, ShoreUp, SwimToSafety,
)
from .adventurer import Adventurer
from .board import ALL_POSITIONS, Location, MapSite, Position
from .cards import CARDS_NEEDED_TO_CAPTURE, HoldableCard, distinct
from .flood import LocationFloodState
from .phases import (
    AwaitingFloodDeckDraw, AwaitingPlayerAction, AwaitingPlayerToDiscardExtraCards,
    AwaitingPlayerToSwimToSafety, AwaitingTreasureDeckDraw, GameOver,
)
from .state import GameState

UNFLOODED = LocationFloodState.UNFLOODED
FLOODED = LocationFloodState.FLOODED


@dataclass
class ActionGenerator:
    """
    Generates legal actions for a game state.

    Stateless - everything it needs is on the GameState.
    """

    def generate(self, state: GameState) -> list[GameAction]:
        """
        Generate every action legal in the state.

        Returns a list of fully-specified GameAction objects.
        """
        phase = state.phase

        if isinstance(phase, GameOver):
            return []

        if isinstance(phase, AwaitingPlayerToSwimToSafety):
            return _unique(self._generate_swim_to_safety_actions(state, phase.player))

        if isinstance(phase, AwaitingPlayerAction):
            actions = self._generate_turn_actions(state, phase.player)
            actions.append(DrawFromTreasureDeck(phase.player))
            actions.extend(self._generate_out_of_turn_actions(state))
        elif isinstance(phase, AwaitingTreasureDeckDraw):
            actions = [DrawFromTreasureDeck(phase.player)]
            actions.extend(self._generate_out_of_turn_actions(state))
        elif isinstance(phase, AwaitingFloodDeckDraw):
            actions = [DrawFromFloodDeck(phase.player)]
            actions.extend(self._generate_out_of_turn_actions(state))
        elif isinstance(phase, AwaitingPlayerToDiscardExtraCards):
            actions = [
                DiscardCard(phase.player, card)
                for card in distinct(state.player_cards[phase.player])
            ]
            actions.extend(
                a for a in self._generate_out_of_turn_actions(state) if a.player == phase.player
            )
        else:
            raise TypeError(f"Unknown game phase: {phase!r}")

        return _unique(actions)

    # ----- Turn actions -----

    def _generate_turn_actions(self, state: GameState, player: Adventurer) -> list[GameAction]:
        actions: list[GameAction] = []
        actions.extend(self._generate_move_and_fly_actions(state, player))
        actions.extend(self._generate_shore_up_actions(state, player))
        actions.extend(self._generate_give_treasure_card_actions(state, player))
        actions.extend(self._generate_capture_treasure_actions(state, player))
        return actions

    def _generate_move_and_fly_actions(self, state: GameState, player: Adventurer) -> list[GameAction]:
        position = state.position_of(player)
        moves = [
            Move(player, site.position)
            for site in _accessible_sites_adjacent_to(state, position, player.moves_diagonally)
        ]
        actions: list[GameAction] = list(moves)

        if player is Adventurer.DIVER:
            actions.extend(Move(player, site.position) for site in _diver_swim_sites_from(state, position))
        elif player is Adventurer.NAVIGATOR:
            for other in state.players:
                if other is not Adventurer.NAVIGATOR:
                    actions.extend(Move(other, site.position) for site in _sites_navigator_can_send(state, other))
        elif player is Adventurer.PILOT and not _pilot_has_flown_this_turn(state):
            move_destinations = {move.position for move in moves}
            actions.extend(
                Fly(player, p)
                for p in ALL_POSITIONS
                if p != position and p not in move_destinations and not state.is_sunken_at(p)
            )

        return actions

    def _generate_shore_up_actions(self, state: GameState, player: Adventurer) -> list[GameAction]:
        position = state.position_of(player)
        candidates = state.game_setup.map.adjacent_sites(position, player.moves_diagonally)
        candidates.append(state.game_setup.site_at(position))
        flooded = [site.position for site in candidates if state.flood_state_of(site.location) is FLOODED]

        actions: list[GameAction] = [ShoreUp(player, p) for p in flooded]
        if player is Adventurer.ENGINEER:
            actions.extend(ShoreUp(player, p1, p2) for p1, p2 in combinations(sorted(flooded), 2))
        return actions

    def _generate_give_treasure_card_actions(self, state: GameState, player: Adventurer) -> list[GameAction]:
        if player is Adventurer.MESSENGER:
            receivers = [p for p in state.players if p is not player]
        else:
            position = state.position_of(player)
            receivers = [p for p in state.players_at(position) if p is not player]

        treasure_cards = [card for card in distinct(state.player_cards[player]) if card.is_treasure_card]
        return [
            GiveTreasureCard(player, receiver, card)
            for receiver in receivers
            for card in treasure_cards
        ]

    def _generate_capture_treasure_actions(self, state: GameState, player: Adventurer) -> list[GameAction]:
        treasure = state.location_of(player).pickup_treasure
        if treasure is None or state.treasures_collected[treasure]:
            return []
        if state.cards_held_by(player, HoldableCard.treasure_card(treasure)) < CARDS_NEEDED_TO_CAPTURE:
            return []
        return [CaptureTreasure(player, treasure)]

    # ----- Out-of-turn actions -----

    def _generate_out_of_turn_actions(self, state: GameState) -> list[GameAction]:
        actions: list[GameAction] = []
        actions.extend(self._generate_helicopter_lift_actions(state))
        actions.extend(self._generate_sandbag_actions(state))
        actions.extend(self._generate_lift_off_island_actions(state))
        return actions

    def _generate_helicopter_lift_actions(self, state: GameState) -> list[GameAction]:
        holders = _players_holding(state, HoldableCard.HELICOPTER_LIFT)
        if not holders:
            return []

        destinations = [p for p in ALL_POSITIONS if not state.is_sunken_at(p)]
        groups: dict[Position, list[Adventurer]] = {}
        for player in state.players:
            groups.setdefault(state.position_of(player), []).append(player)

        actions: list[GameAction] = []
        for holder in holders:
            for group_position, group in groups.items():
                for passengers in _non_empty_subsets(group):
                    actions.extend(
                        HelicopterLift(holder, passengers, destination)
                        for destination in destinations
                        if destination != group_position
                    )
        return actions

    def _generate_sandbag_actions(self, state: GameState) -> list[GameAction]:
        flooded_positions = [
            state.game_setup.position_of(location)
            for location in state.locations_with_state(FLOODED)
        ]
        return [
            Sandbag(holder, position)
            for holder in _players_holding(state, HoldableCard.SANDBAGS)
            for position in flooded_positions
        ]

    def _generate_lift_off_island_actions(self, state: GameState) -> list[GameAction]:
        if not state.all_treasures_collected:
            return []
        fools_landing = state.game_setup.position_of(Location.FOOLS_LANDING)
        if any(position != fools_landing for position in state.player_positions.values()):
            return []
        return [
            HelicopterLiftOffIsland(holder)
            for holder in _players_holding(state, HoldableCard.HELICOPTER_LIFT)
        ]

    # ----- Obligations -----

    def _generate_swim_to_safety_actions(self, state: GameState, player: Adventurer) -> list[GameAction]:
        if player is Adventurer.PILOT:
            positions = [p for p in ALL_POSITIONS if not state.is_sunken_at(p)]
        elif player is Adventurer.DIVER:
            positions = _closest_unsunken_positions(state, state.position_of(player))
        else:
            positions = [
                site.position
                for site in _accessible_sites_adjacent_to(state, state.position_of(player), player.moves_diagonally)
            ]
        return [SwimToSafety(player, p) for p in positions]


def available_actions(state: GameState) -> tuple[GameAction, ...]:
    """Convenience function to get the (memoised) legal actions of a state."""
    return state.available_actions


# ----- Helpers -----

def _unique(actions: Iterable[GameAction]) -> list[GameAction]:
    return list(dict.fromkeys(actions))


def _accessible_sites_adjacent_to(
    state: GameState,
    position: Position,
    include_diagonals: bool = False,
    include_sunken: bool = False,
) -> list[MapSite]:
    return [
        site for site in state.game_setup.map.adjacent_sites(position, include_diagonals)
        if include_sunken or not state.is_sunken(site.location)
    ]


def _diver_swim_sites_from(state: GameState, start: Position) -> list[MapSite]:
    """
    Sites the Diver reaches by swimming through a chain of orthogonally
    adjacent flooded or sunken sites. Never the start, never a sunken site.
    """
    start_site = state.game_setup.site_at(start)
    reachable: dict[MapSite, None] = {}
    frontier = [start_site]
    expanded = {start_site}
    while frontier:
        neighbours = [
            n for site in frontier
            for n in _accessible_sites_adjacent_to(state, site.position, include_sunken=True)
        ]
        next_frontier = []
        for n in neighbours:
            reachable.setdefault(n, None)
            if state.flood_state_of(n.location) is not UNFLOODED and n not in expanded:
                expanded.add(n)
                next_frontier.append(n)
        frontier = next_frontier
    return [
        site for site in reachable
        if site != start_site and not state.is_sunken(site.location)
    ]


def _sites_navigator_can_send(state: GameState, player: Adventurer) -> list[MapSite]:
    """
    Where the Navigator may send another player: up to two hops.

    The first hop must be unflooded, except for the Diver who may pass
    through one flooded or sunken site. The second hop never crosses a
    sunken site. Non-Divers never land on a flooded site.
    """
    current = state.position_of(player)
    is_diver = player is Adventurer.DIVER
    diagonals = player.moves_diagonally

    first_hops = [
        site for site in _accessible_sites_adjacent_to(state, current, diagonals, include_sunken=is_diver)
        if is_diver or state.flood_state_of(site.location) is UNFLOODED
    ]
    candidates: list[MapSite] = []
    for hop in first_hops:
        candidates.extend(_accessible_sites_adjacent_to(state, hop.position, diagonals))
        candidates.append(hop)

    destinations = []
    for site in dict.fromkeys(candidates):
        flood_state = state.flood_state_of(site.location)
        if site.position == current or flood_state is LocationFloodState.SUNKEN:
            continue
        if flood_state is FLOODED and not is_diver:
            continue
        destinations.append(site)
    return destinations


def _pilot_has_flown_this_turn(state: GameState) -> bool:
    for action in reversed(state.previous_actions):
        if isinstance(action, DrawFromFloodDeck):
            return False
        if isinstance(action, Fly):
            return True
    return False


def _closest_unsunken_positions(state: GameState, start: Position) -> list[Position]:
    """Nearest unsunken positions by orthogonal steps, ties included."""
    seen = {start}
    ring = [start]
    while ring:
        next_ring = []
        for position in ring:
            for neighbour in position.adjacent_positions():
                if neighbour not in seen:
                    seen.add(neighbour)
                    next_ring.append(neighbour)
        unsunken = [p for p in next_ring if not state.is_sunken_at(p)]
        if unsunken:
            return unsunken
        ring = next_ring
    return []


def _players_holding(state: GameState, card: HoldableCard) -> list[Adventurer]:
    return [p for p in state.players if card in state.player_cards[p]]


def _non_empty_subsets(players: list[Adventurer]) -> list[frozenset[Adventurer]]:
    return [
        frozenset(subset)
        for size in range(len(players), 0, -1)
        for subset in combinations(players, size)
    ]

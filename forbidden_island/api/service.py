"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions
3. Formats engine state for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
Errors are returned as ErrorResponse values rather than raised.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

from .schemas import (
    # Requests
    CreateGameRequest,
    ApplyActionRequest,
    # Responses
    GameStateResponse,
    ApplyActionResponse,
    ErrorResponse,
    # Shared
    ActionInfo,
    LocationInfo,
    PhaseInfo,
    PlayerInfo,
    PositionInfo,
    # Enums
    ErrorCode,
    SessionStatus,
)
from ..engine_core.action import GameAction
from ..engine_core.adventurer import Adventurer
from ..engine_core.board import ALL_POSITIONS, Position
from ..engine_core.exceptions import InvalidSetupError
from ..engine_core.flood import STARTING_FLOOD_LEVELS
from ..engine_core.phases import GamePhase
from ..session import Session, SessionManager


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Start a game
        state = service.create_game(CreateGameRequest(players=["Diver", "Pilot"], seed=7))

        # Apply the first available action
        response = service.apply_action(state.session_id, ApplyActionRequest(action_index=0))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def create_game(self, request: CreateGameRequest) -> GameStateResponse | ErrorResponse:
        """
        Create a new game session.
        """
        players = None
        if request.players is not None:
            players = [Adventurer(name.value) for name in request.players]

        try:
            session = self.session_manager.create_session(
                players=players,
                number_of_players=request.number_of_players,
                flood_level=STARTING_FLOOD_LEVELS[request.difficulty.value],
                seed=request.seed,
            )
        except InvalidSetupError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_SETUP)

        return self._build_game_state(session)

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        """
        Get current game state.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)

        return self._build_game_state(session)

    def apply_action(
        self, session_id: str, request: ApplyActionRequest
    ) -> ApplyActionResponse | ErrorResponse:
        """
        Apply the available action at the requested index.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)

        actions = session.game_state.available_actions
        action = actions[request.action_index] if request.action_index < len(actions) else None

        result = session.apply_action_index(request.action_index)
        if not result.success:
            error_code = ErrorCode.INVALID_STATE if result.error_code == "INVALID_STATE" else ErrorCode.ILLEGAL_ACTION
            return ErrorResponse(
                error=result.error or "Action failed",
                error_code=error_code,
                details={"action_index": request.action_index, "available_actions": len(actions)},
            )

        return ApplyActionResponse(
            success=True,
            session_id=session_id,
            action=_action_info(request.action_index, action),
            state_changes=result.state_changes,
            game_state=self._build_game_state(session),
        )

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """
        End a game session. Returns False if it did not exist.
        """
        return self.session_manager.end_session(session_id, reason) is not None

    def list_sessions(self) -> list[str]:
        """
        List active session IDs.
        """
        return self.session_manager.list_active_sessions()

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _build_game_state(self, session: Session) -> GameStateResponse:
        """Convert a session's GameState to a GameStateResponse."""
        state = session.game_state
        setup = state.game_setup
        current_player = getattr(state.phase, "player", None)

        players = [
            PlayerInfo(
                adventurer=str(player),
                position=_position_info(state.position_of(player)),
                location=str(state.location_of(player)),
                cards=[str(card) for card in state.player_cards[player]],
                is_current_turn=player is current_player,
            )
            for player in state.players
        ]

        locations = []
        for position in ALL_POSITIONS:
            location = setup.location_at(position)
            treasure = location.pickup_treasure
            locations.append(LocationInfo(
                location=str(location),
                position=_position_info(position),
                flood_state=state.flood_state_of(location).value,
                pickup_treasure=str(treasure) if treasure else None,
            ))

        result = state.result
        return GameStateResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            seed=session.seed,
            flood_level=state.flood_level.value,
            tiles_flooding_per_turn=state.flood_level.tiles_flooding_per_turn,
            treasures_collected={str(t): collected for t, collected in state.treasures_collected.items()},
            players=players,
            locations=locations,
            phase=_phase_info(state.phase),
            treasure_deck_size=len(state.treasure_deck),
            treasure_deck_discard=[str(card) for card in state.treasure_deck_discard],
            flood_deck_size=len(state.flood_deck),
            flood_deck_discard=[str(location) for location in state.flood_deck_discard],
            result=str(result) if result else None,
            adventurers_won=result.adventurers_won if result else None,
            available_actions=[
                _action_info(i, action) for i, action in enumerate(state.available_actions)
            ],
            actions_taken=len(state.previous_actions),
        )


def _session_not_found(session_id: str) -> ErrorResponse:
    return ErrorResponse(
        error=f"Session {session_id} not found",
        error_code=ErrorCode.SESSION_NOT_FOUND,
    )


def _position_info(position: Position) -> PositionInfo:
    return PositionInfo(x=position.x, y=position.y)


def _phase_info(phase: GamePhase) -> PhaseInfo:
    player = getattr(phase, "player", None)
    resume_phase = getattr(phase, "resume_phase", None)
    return PhaseInfo(
        name=type(phase).__name__,
        description=str(phase),
        player=str(player) if player else None,
        actions_remaining=getattr(phase, "actions_remaining", None),
        draws_remaining=getattr(phase, "draws_remaining", None),
        resume_phase=type(resume_phase).__name__ if resume_phase else None,
    )


def _action_info(index: int, action: GameAction) -> ActionInfo:
    details = {
        f.name: _json_value(getattr(action, f.name))
        for f in fields(action)
        if f.name != "player" and getattr(action, f.name) is not None
    }
    return ActionInfo(
        index=index,
        action_type=action.action_type.value,
        player=str(action.player),
        description=str(action),
        details=details,
    )


def _json_value(value: Any) -> Any:
    if isinstance(value, Position):
        return {"x": value.x, "y": value.y}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, frozenset):
        return sorted(_json_value(v) for v in value)
    return value

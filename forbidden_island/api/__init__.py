"""
API Module - HTTP interface.

Exposes the engine via REST API:
1. Start a game session
2. Fetch the state with its numbered available actions
3. Apply an action by number
4. End the session

All state is session-scoped. No persistent user accounts required.
"""

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
    PlayerInfo,
    LocationInfo,
    PhaseInfo,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateGameRequest",
    "ApplyActionRequest",
    # Responses
    "GameStateResponse",
    "ApplyActionResponse",
    "ErrorResponse",
    # Shared
    "ActionInfo",
    "PlayerInfo",
    "LocationInfo",
    "PhaseInfo",
    # Service
    "APIService",
    "create_app",
]

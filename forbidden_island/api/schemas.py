"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between HTTP clients and the engine.
All responses include explicit types for OpenAPI schema generation.

Clients never construct actions themselves: every game state response lists
the available actions with an index, and a client applies one by sending
that index back.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- ILLEGAL_ACTION: Action index out of range, or the game is over
- INVALID_SETUP: Player line-up rejected (duplicates, wrong count)
- INVALID_STATE: The engine produced an inconsistent state
- VALIDATION_ERROR: Request body failed validation
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class AdventurerName(str, Enum):
    """Adventurers a client can choose."""
    ENGINEER = "Engineer"
    EXPLORER = "Explorer"
    NAVIGATOR = "Navigator"
    DIVER = "Diver"
    PILOT = "Pilot"
    MESSENGER = "Messenger"


class Difficulty(str, Enum):
    """Starting water level."""
    NOVICE = "novice"
    NORMAL = "normal"
    ELITE = "elite"
    LEGENDARY = "legendary"


class ErrorCode(str, Enum):
    """Machine-readable error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    ILLEGAL_ACTION = "ILLEGAL_ACTION"
    INVALID_SETUP = "INVALID_SETUP"
    INVALID_STATE = "INVALID_STATE"
    VALIDATION_ERROR = "VALIDATION_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class PositionInfo(BaseModel):
    """A board coordinate."""
    x: int
    y: int


class ActionInfo(BaseModel):
    """An available action, addressable by index."""
    index: int = Field(..., description="Pass this back to apply the action")
    action_type: str = Field(..., description="move, fly, shore_up, draw_from_flood_deck, etc.")
    player: str = Field(..., description="Adventurer performing the action")
    description: str
    details: dict[str, Any] = Field(default_factory=dict)


class PlayerInfo(BaseModel):
    """Player information for display."""
    adventurer: str
    position: PositionInfo
    location: str
    cards: list[str] = Field(default_factory=list)
    is_current_turn: bool = False


class LocationInfo(BaseModel):
    """A location tile and its flood stage."""
    location: str
    position: PositionInfo
    flood_state: str = Field(description="unflooded, flooded or sunken")
    pickup_treasure: Optional[str] = None


class PhaseInfo(BaseModel):
    """What the game is waiting for."""
    name: str = Field(description="Phase class, e.g. AwaitingPlayerAction")
    description: str
    player: Optional[str] = None
    actions_remaining: Optional[int] = None
    draws_remaining: Optional[int] = None
    resume_phase: Optional[str] = Field(None, description="Phase resumed once an obligation is met")


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """Request to start a new game."""
    players: Optional[list[AdventurerName]] = Field(
        None,
        min_length=2,
        max_length=4,
        description="Adventurers in turn order; picked at random if omitted",
    )
    number_of_players: int = Field(2, ge=2, le=4, description="Used when players is omitted")
    difficulty: Difficulty = Difficulty.NORMAL
    seed: Optional[int] = Field(None, ge=0, description="Seed for every shuffle; random if omitted")


class ApplyActionRequest(BaseModel):
    """Request to apply one of the available actions."""
    action_index: int = Field(..., ge=0, description="Index into available_actions")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameStateResponse(BaseModel):
    """Complete game state for display."""
    session_id: str
    status: SessionStatus
    seed: int

    flood_level: int = Field(..., description="1 to 9, or 10 once the water is deadly")
    tiles_flooding_per_turn: int
    treasures_collected: dict[str, bool]

    players: list[PlayerInfo]
    locations: list[LocationInfo]
    phase: PhaseInfo

    treasure_deck_size: int
    treasure_deck_discard: list[str]
    flood_deck_size: int
    flood_deck_discard: list[str]

    result: Optional[str] = None
    adventurers_won: Optional[bool] = None

    available_actions: list[ActionInfo] = Field(default_factory=list)
    actions_taken: int = 0


class ApplyActionResponse(BaseModel):
    """Response after applying an action."""
    success: bool
    session_id: str
    action: ActionInfo
    state_changes: list[str] = Field(default_factory=list)
    game_state: GameStateResponse


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str

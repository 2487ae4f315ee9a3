"""
FastAPI Application - REST API for playing Forbidden Island.

Endpoints:
    GET    /api/v1/health               Health check
    POST   /api/v1/games                Start a game session
    GET    /api/v1/games                List active sessions
    GET    /api/v1/games/{id}           Get game state and available actions
    POST   /api/v1/games/{id}/actions   Apply an available action by index
    DELETE /api/v1/games/{id}           End a session

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional, Union
import logging
import os

# Environment configuration
FORBIDDEN_ISLAND_ENV = os.getenv("FORBIDDEN_ISLAND_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

API_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query, Request
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        # Request models
        CreateGameRequest,
        ApplyActionRequest,
        # Response models
        GameStateResponse,
        ApplyActionResponse,
        ErrorResponse,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )

    app = FastAPI(
        title="Forbidden Island Engine API",
        description="""
Rules engine for the cooperative board game Forbidden Island.

## Playing

1. `POST /api/v1/games` starts a game and returns its state
2. Every state lists `available_actions`, each with an `index`
3. `POST /api/v1/games/{id}/actions` with `{"action_index": n}` applies one

The server never chooses for the players. Shuffles are driven by the
session's seed, so a seed plus the chosen indexes replays a game exactly.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist or has ended |
| `ILLEGAL_ACTION` | Index out of range, or the game is over |
| `INVALID_SETUP` | Player line-up rejected |
| `INVALID_STATE` | Engine produced an inconsistent state |
| `VALIDATION_ERROR` | Request body failed validation |
        """,
        version=API_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service instance
    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def error_status(error: ErrorResponse) -> int:
        return {
            ErrorCode.SESSION_NOT_FOUND: 404,
            ErrorCode.ILLEGAL_ACTION: 409,
            ErrorCode.INVALID_SETUP: 400,
            ErrorCode.INVALID_STATE: 500,
            ErrorCode.VALIDATION_ERROR: 422,
        }[error.error_code]

    def to_error_response(error: ErrorResponse) -> JSONResponse:
        return make_error_response(
            error.error_code, error.error, status_code=error_status(error), details=error.details
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            status_code=422,
            details={"errors": [
                {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
                for err in exc.errors()
            ]},
        )

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=GameStateResponse,
        status_code=201,
        responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Start a new game",
    )
    async def create_game(request: CreateGameRequest) -> Union[GameStateResponse, JSONResponse]:
        """
        Start a new game session.

        Players are dealt onto their starting tiles, six locations are
        flooded, and the first player is awaiting an action.
        """
        response = api_service.create_game(request)
        if isinstance(response, ErrorResponse):
            return to_error_response(response)
        logger.info("Game %s started (%s)", response.session_id, FORBIDDEN_ISLAND_ENV)
        return response

    @app.get(
        "/api/v1/games",
        response_model=SessionListResponse,
        tags=["Games"],
        summary="List active games",
    )
    async def list_games() -> SessionListResponse:
        """List all active session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/games/{session_id}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get game state and available actions",
    )
    async def get_game(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        """Get the complete current game state, including numbered available actions."""
        response = api_service.get_game_state(session_id)
        if isinstance(response, ErrorResponse):
            return to_error_response(response)
        return response

    @app.post(
        "/api/v1/games/{session_id}/actions",
        response_model=ApplyActionResponse,
        responses={
            404: {"model": ErrorResponse, "description": "Session not found"},
            409: {"model": ErrorResponse, "description": "Action not available"},
        },
        tags=["Games"],
        summary="Apply an available action",
    )
    async def apply_action(
        session_id: str, request: ApplyActionRequest
    ) -> Union[ApplyActionResponse, JSONResponse]:
        """Apply the action at `action_index` in the current `available_actions`."""
        response = api_service.apply_action(session_id, request)
        if isinstance(response, ErrorResponse):
            return to_error_response(response)
        return response

    @app.delete(
        "/api/v1/games/{session_id}",
        response_model=EndSessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="End a game session",
    )
    async def end_game(
        session_id: str,
        reason: str = Query("user_ended", description="Reason for ending"),
    ) -> Union[EndSessionResponse, JSONResponse]:
        """End a game session and release it."""
        if not api_service.end_session(session_id, reason):
            return make_error_response(
                ErrorCode.SESSION_NOT_FOUND,
                f"Session {session_id} not found",
                status_code=404,
            )
        return EndSessionResponse(success=True, session_id=session_id)

    # =========================================================================
    # System Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="forbidden-island-engine",
            version=API_VERSION,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Forbidden Island Engine API",
            "version": API_VERSION,
            "environment": FORBIDDEN_ISLAND_ENV,
            "docs": "/api/docs",
            "health": "/api/v1/health",
        }

    return app

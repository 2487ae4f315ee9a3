"""
Session Manager - Creates and manages game sessions.

A session is one play-through of Forbidden Island:
1. Created with players, a difficulty and an optional seed
2. Owns the game's random.Random, seeded once, used for setup and for every
   transition afterwards
3. Advances only by applying one of the currently available actions
4. Ends when the game is over or the client abandons it

Sessions are in-memory only. Replaying a seed with the same sequence of
action choices reproduces the same game.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence
import logging
import random
import secrets
import time
import uuid

from ..engine_core.action import ActionResult, GameAction
from ..engine_core.adventurer import Adventurer
from ..engine_core.flood import FloodLevel
from ..engine_core.reducer import Reducer
from ..engine_core.setup import new_game_state, new_random_setup
from ..engine_core.state import GameState

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Game completed
    ABANDONED = "abandoned"  # Client quit


@dataclass
class Session:
    """
    A game session.

    Contains:
    - The seed and the random source derived from it
    - Current canonical game state
    - Session metadata
    """
    session_id: str
    seed: int
    created_at: float
    game_state: GameState
    random: random.Random

    state: SessionState = SessionState.ACTIVE
    last_activity: float = field(default_factory=time.time)
    reducer: Reducer = field(default_factory=Reducer)

    def is_active(self) -> bool:
        """Check if session is still active."""
        return self.state is SessionState.ACTIVE

    def apply_action(self, action: GameAction) -> ActionResult:
        """Apply an action, keeping the new state on success."""
        if not self.is_active():
            return ActionResult.failure(
                f"Session {self.session_id} is {self.state.value}", error_code="ILLEGAL_ACTION"
            )

        result = self.reducer.apply(self.game_state, action, self.random)
        self.last_activity = time.time()
        if not result.success:
            logger.debug("Session %s rejected %s: %s", self.session_id, action, result.error)
            return result

        self.game_state = result.new_state
        if self.game_state.result is not None:
            self.state = SessionState.GAME_OVER
            logger.info("Session %s finished: %s", self.session_id, self.game_state.result)
        return result

    def apply_action_index(self, index: int) -> ActionResult:
        """Apply the action at `index` in the available actions."""
        actions = self.game_state.available_actions
        if not 0 <= index < len(actions):
            return ActionResult.failure(
                f"Action index {index} is out of range: {len(actions)} actions available",
                error_code="ILLEGAL_ACTION",
            )
        return self.apply_action(actions[index])


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with a seeded setup
    - Track active sessions
    - Clean up finished and stale sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        players: Sequence[Adventurer] | None = None,
        number_of_players: int = 2,
        flood_level: FloodLevel = FloodLevel.TWO,
        seed: int | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            players: Adventurers in turn order; random if omitted
            number_of_players: How many to pick when players is omitted
            flood_level: Starting water level
            seed: Seed for every shuffle in the game; drawn fresh if omitted

        Returns:
            New Session ready for the first action

        Raises:
            InvalidSetupError: If the players are not a valid line-up
        """
        if seed is None:
            seed = secrets.randbits(32)
        rng = random.Random(seed)

        setup = new_random_setup(rng, players=players, number_of_players=number_of_players)
        game_state = new_game_state(setup, rng, flood_level=flood_level)

        session = Session(
            session_id=str(uuid.uuid4()),
            seed=seed,
            created_at=time.time(),
            game_state=game_state,
            random=rng,
        )
        self._sessions[session.session_id] = session
        logger.info("Created session %s with seed %d", session.session_id, seed)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> Session | None:
        """
        End a session and remove it from memory.

        Returns the ended session, or None if it did not exist.
        """
        session = self._sessions.pop(session_id, None)
        if session:
            if reason == "completed" or session.state is SessionState.GAME_OVER:
                session.state = SessionState.GAME_OVER
            else:
                session.state = SessionState.ABANDONED
            logger.info("Ended session %s (%s)", session_id, reason)
        return session

    def list_sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Remove sessions that have been idle longer than max_age.

        Returns the number of sessions removed.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.last_activity > max_age_seconds
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)

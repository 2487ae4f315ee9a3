"""
Session Module - Manages in-memory game sessions.

A session represents one play-through of a game:
- Created when a client starts a game, with a seed
- Holds the current game state and the game's random source
- Applies the actions the client chooses
- Removed when the game ends or is abandoned

Sessions are never persisted; the seed plus the chosen actions is enough to
replay one.
"""

from .manager import SessionManager, Session, SessionState

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
]

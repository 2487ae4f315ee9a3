"""
Engine Exceptions - Error taxonomy for the rules engine.

Three kinds of failure exist:
1. Invariant violations - a snapshot was built with broken deck accounting
   or missing entries. Always a bug in whoever built the state.
2. Illegal actions - the requested action is not available in the current
   state. Fatal to the call only; states are immutable so nothing changed.
3. Invalid setup - the setup collaborator supplied a bad player list or map.

Exhausted decks are not errors: the reducer reshuffles transparently.
"""


class ForbiddenIslandError(Exception):
    """Base class for all engine errors."""
    pass


class InvariantViolationError(ForbiddenIslandError):
    """Raised when a GameState is constructed in an inconsistent shape."""
    pass


class IllegalActionError(ForbiddenIslandError):
    """Raised when an action is not available in the current state."""
    pass


class InvalidSetupError(ForbiddenIslandError):
    """Raised when the player list or map handed to the engine is malformed."""
    pass

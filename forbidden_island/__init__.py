"""
Forbidden Island - Rules engine for the cooperative board game

A deterministic, immutable-state engine for Forbidden Island. It provides:
- Legal action enumeration for every adventurer and phase
- State transitions with explicit, seedable randomness
- Win/loss evaluation
- An in-memory session driver and an HTTP API on top
"""

__version__ = "0.1.0"

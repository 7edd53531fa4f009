"""Session domain services: engine, vote tallies and the countdown.

This package holds the game logic that HTTP routes and socket handlers
call into, keeping transport concerns separated from core game mechanics.
"""

from .countdown import Countdown
from .engine import SessionEngine

__all__ = ['Countdown', 'SessionEngine']

# =============================================================================
# Paranoid Snake - Package
# =============================================================================
"""
Paranoid Snake

Decision engine for a multi-agent snake survival game: an immutable board
model, the official turn rules, and a deadline-bounded paranoid minimax
search that turns a board snapshot into a move.
"""

__version__ = "0.1.0"

from .core import BoardState, Direction, InvalidSnapshot, board_state_from_snapshot
from .ai import SearchConfig, decide
from .log import configure_logging

__all__ = [
    "BoardState",
    "Direction",
    "InvalidSnapshot",
    "board_state_from_snapshot",
    "SearchConfig",
    "decide",
    "configure_logging",
]

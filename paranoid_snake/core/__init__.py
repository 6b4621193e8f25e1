# =============================================================================
# Core Game Module
# =============================================================================
"""
Core game components including:
- Board state representation
- Move generation
- The transition function (official elimination rules)
- Wire snapshot conversion
- A local game runner
"""

from .enums import CANONICAL_DIRECTIONS, Direction, EliminationCause, SearchProfile
from .errors import (
    EngineError, InvalidSnapshot, InvariantViolation, DeadlineExceededBeforeAnyDepth
)
from .data_structures import Cell, Elimination, Agent, RulesConfig
from .board_state import BoardState
from .moves import candidate_moves, joint_moves, opponent_joint_moves, safe_moves
from .transition import apply_moves
from .snapshot import (
    WireGameState, board_state_from_snapshot, deadline_from_snapshot, parse_snapshot
)
from .game_engine import LocalGame, Policy, create_standard_game

__all__ = [
    # Enums
    "CANONICAL_DIRECTIONS", "Direction", "EliminationCause", "SearchProfile",
    # Errors
    "EngineError", "InvalidSnapshot", "InvariantViolation",
    "DeadlineExceededBeforeAnyDepth",
    # Data structures
    "Cell", "Elimination", "Agent", "RulesConfig", "BoardState",
    # Rules
    "candidate_moves", "joint_moves", "opponent_joint_moves", "safe_moves",
    "apply_moves",
    # Snapshot conversion
    "WireGameState", "board_state_from_snapshot", "deadline_from_snapshot",
    "parse_snapshot",
    # Local games
    "LocalGame", "Policy", "create_standard_game",
]

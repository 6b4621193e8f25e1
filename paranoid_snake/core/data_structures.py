# =============================================================================
# Paranoid Snake - Core Data Structures
# =============================================================================
"""
Value types the board state is built from.
Everything here is immutable so search nodes can share it freely.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, NamedTuple, Optional, Tuple

from .enums import Direction, EliminationCause


# =============================================================================
# Cell
# =============================================================================

class Cell(NamedTuple):
    """Integer grid coordinate"""
    x: int
    y: int

    def moved(self, direction: Direction) -> 'Cell':
        """The neighbouring cell in the given direction"""
        dx, dy = direction.delta
        return Cell(self.x + dx, self.y + dy)

    def distance_to(self, other: 'Cell') -> int:
        """Manhattan distance"""
        return abs(self.x - other.x) + abs(self.y - other.y)

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y}


# =============================================================================
# Elimination
# =============================================================================

@dataclass(frozen=True)
class Elimination:
    """
    Record of how an agent was eliminated.

    Attributes:
        cause: Which rule removed the agent
        turn: Turn number of the successor state in which it is gone
        by: Id of the agent responsible, for collisions
    """
    cause: EliminationCause
    turn: int
    by: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"cause": self.cause.name, "turn": self.turn, "by": self.by}


# =============================================================================
# Agent
# =============================================================================

@dataclass(frozen=True)
class Agent:
    """
    One snake on the board.

    The body is stored head-first as a tuple of cells; consecutive cells
    are grid-adjacent or equal (a stacked tail right after eating).
    """
    id: str
    body: Tuple[Cell, ...]
    health: int
    elimination: Optional[Elimination] = None

    @property
    def head(self) -> Cell:
        return self.body[0]

    @property
    def length(self) -> int:
        return len(self.body)

    @property
    def alive(self) -> bool:
        """False once eliminated this or a prior turn"""
        return self.elimination is None

    def eliminated(self, cause: EliminationCause, turn: int,
                   by: Optional[str] = None) -> 'Agent':
        """Copy of this agent marked as eliminated"""
        return replace(self, elimination=Elimination(cause, turn, by))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "body": [cell.to_dict() for cell in self.body],
            "health": self.health,
            "elimination": self.elimination.to_dict() if self.elimination else None,
        }


# =============================================================================
# Rules Configuration
# =============================================================================

@dataclass(frozen=True)
class RulesConfig:
    """
    Rule parameters of a game.

    hazard_damage is zero by default, which makes hazard cells inert.
    """
    width: int = 11
    height: int = 11
    max_health: int = 100
    max_agents: int = 4
    hazard_damage: int = 0

    def in_bounds(self, cell: Cell) -> bool:
        return 0 <= cell.x < self.width and 0 <= cell.y < self.height

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "width": self.width,
            "height": self.height,
            "max_health": self.max_health,
            "max_agents": self.max_agents,
            "hazard_damage": self.hazard_damage,
        }

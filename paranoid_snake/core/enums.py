# =============================================================================
# Paranoid Snake - Enumerations
# =============================================================================
"""
Enumeration types shared by the board model and the search.
"""

from enum import Enum, auto
from typing import Tuple


class Direction(Enum):
    """
    A single-step move on the grid.

    Definition order is the canonical enumeration order used everywhere
    a tie has to be broken: Up, Down, Left, Right.
    Up increases y, Right increases x.
    """
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    def __str__(self) -> str:
        return self.value

    @property
    def delta(self) -> Tuple[int, int]:
        """(dx, dy) applied to a cell moving this way"""
        deltas = {
            Direction.UP: (0, 1),
            Direction.DOWN: (0, -1),
            Direction.LEFT: (-1, 0),
            Direction.RIGHT: (1, 0),
        }
        return deltas[self]

    @property
    def opposite(self) -> 'Direction':
        """Return the reverse direction"""
        opposites = {
            Direction.UP: Direction.DOWN,
            Direction.DOWN: Direction.UP,
            Direction.LEFT: Direction.RIGHT,
            Direction.RIGHT: Direction.LEFT,
        }
        return opposites[self]

    @property
    def order(self) -> int:
        """Position in the canonical order"""
        return CANONICAL_DIRECTIONS.index(self)

    @classmethod
    def from_name(cls, name: str) -> 'Direction':
        """Parse 'up' / 'UP' / 'Up' into a Direction"""
        try:
            return cls(name.lower())
        except ValueError:
            raise ValueError(f"Unknown direction: {name!r}") from None


CANONICAL_DIRECTIONS: Tuple[Direction, ...] = tuple(Direction)


class EliminationCause(Enum):
    """
    Why an agent left the game.
    """
    OUT_OF_BOUNDS = auto()      # Head moved off the board
    OUT_OF_HEALTH = auto()      # Health reached zero
    SELF_COLLISION = auto()     # Head entered its own body
    BODY_COLLISION = auto()     # Head entered another agent's body
    HEAD_COLLISION = auto()     # Lost (or tied) a head-to-head

    def __str__(self) -> str:
        return self.name.lower()


class SearchProfile(Enum):
    """
    Preset search strengths, see create_search_config().
    """
    FAST = 1
    STANDARD = 2
    DEEP = 3

    def __str__(self) -> str:
        return self.name.lower()

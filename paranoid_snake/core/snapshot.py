# =============================================================================
# Paranoid Snake - Wire Snapshot
# =============================================================================
"""
Conversion from the game's JSON snapshot to a BoardState.

The pydantic models only check the shape of the payload; the domain rules
(bounds, unique ids, non-empty bodies) are enforced by BoardState.create.
Both kinds of failure surface as InvalidSnapshot.
"""

import logging
import time
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from .board_state import BoardState
from .data_structures import Agent, Cell, RulesConfig
from .errors import InvalidSnapshot

logger = logging.getLogger(__name__)


# =============================================================================
# Pydantic Models
# =============================================================================

class WirePosition(BaseModel):
    """A board coordinate"""
    x: int
    y: int


class WireSnake(BaseModel):
    """A snake as sent by the game server"""
    id: str
    name: str = ""
    health: int
    body: List[WirePosition]
    head: Optional[WirePosition] = None
    length: Optional[int] = None
    latency: Optional[str] = None
    shout: Optional[str] = None


class WireBoard(BaseModel):
    """Board contents"""
    height: int = Field(gt=0)
    width: int = Field(gt=0)
    food: List[WirePosition] = Field(default_factory=list)
    hazards: List[WirePosition] = Field(default_factory=list)
    snakes: List[WireSnake] = Field(default_factory=list)


class WireRuleset(BaseModel):
    """Ruleset description"""
    name: str = "standard"
    version: str = ""
    settings: Dict[str, Any] = Field(default_factory=dict)


class WireGame(BaseModel):
    """Game metadata"""
    id: str
    ruleset: WireRuleset = Field(default_factory=WireRuleset)
    map: Optional[str] = None
    timeout: int = Field(default=500, ge=0, description="Milliseconds allowed per move")
    source: Optional[str] = None


class WireGameState(BaseModel):
    """The full payload of a move request"""
    game: WireGame
    turn: int
    board: WireBoard
    you: WireSnake

    class Config:
        json_schema_extra = {
            "example": {
                "game": {"id": "game-1", "timeout": 500},
                "turn": 0,
                "board": {
                    "height": 11,
                    "width": 11,
                    "food": [{"x": 5, "y": 5}],
                    "hazards": [],
                    "snakes": [
                        {"id": "you", "health": 100,
                         "body": [{"x": 1, "y": 1}, {"x": 1, "y": 1}, {"x": 1, "y": 1}]},
                    ],
                },
                "you": {"id": "you", "health": 100,
                        "body": [{"x": 1, "y": 1}, {"x": 1, "y": 1}, {"x": 1, "y": 1}]},
            }
        }


Snapshot = Union[WireGameState, Mapping[str, Any]]


# =============================================================================
# Conversion
# =============================================================================

def parse_snapshot(snapshot: Snapshot) -> WireGameState:
    """Validate the payload shape, raising InvalidSnapshot on failure"""
    if isinstance(snapshot, WireGameState):
        return snapshot
    try:
        return WireGameState.model_validate(snapshot)
    except ValidationError as exc:
        raise InvalidSnapshot(f"Malformed snapshot: {exc}") from exc


def board_state_from_snapshot(snapshot: Snapshot,
                              rules: Optional[RulesConfig] = None) -> BoardState:
    """
    Build a BoardState from a move request payload.

    Args:
        snapshot: Raw mapping or an already parsed WireGameState
        rules: Rule parameters; defaults to the payload's board size with
            hazards ignored

    Returns:
        A validated BoardState whose self_id is the ``you`` snake

    Raises:
        InvalidSnapshot: the payload is malformed or breaks a board invariant
    """
    wire = parse_snapshot(snapshot)
    board = wire.board
    if rules is None:
        rules = RulesConfig(width=board.width, height=board.height)

    agents = [
        Agent(
            id=snake.id,
            body=tuple(Cell(pos.x, pos.y) for pos in snake.body),
            health=snake.health,
        )
        for snake in board.snakes
    ]

    state = BoardState.create(
        agents=agents,
        food=[(pos.x, pos.y) for pos in board.food],
        hazards=[(pos.x, pos.y) for pos in board.hazards],
        turn=wire.turn,
        self_id=wire.you.id,
        rules=rules,
    )
    logger.debug(f"Snapshot for game {wire.game.id} turn {wire.turn}: "
                 f"{len(agents)} agents, {len(state.food)} food")
    return state


def deadline_from_snapshot(snapshot: Snapshot, received_at: Optional[float] = None,
                           latency_margin_ms: float = 100.0) -> float:
    """
    Absolute time.time() deadline for answering a move request.

    The game timeout is reduced by latency_margin_ms to leave room for the
    network round trip.
    """
    wire = parse_snapshot(snapshot)
    if received_at is None:
        received_at = time.time()
    budget_ms = max(0.0, wire.game.timeout - latency_margin_ms)
    return received_at + budget_ms / 1000.0

# =============================================================================
# Paranoid Snake - State Evaluation
# =============================================================================
"""
Scores a board from one agent's point of view.

A Score is compared lexicographically: first the outcome (loss < ongoing
< win), then a tuple of evaluator-specific features. Every lost state is
the same minimum and every won state the same maximum, whatever else is on
the board. Evaluators are pure functions of the board, so scores from any
part of a search tree can be compared with each other.
"""

from collections import deque
from typing import NamedTuple, Optional, Tuple

import numpy as np

from ..core.board_state import BoardState
from ..core.enums import CANONICAL_DIRECTIONS

NO_FOOD = float("-inf")


class Score(NamedTuple):
    """Totally ordered evaluation result"""
    outcome: int
    features: Tuple = ()

    @property
    def is_terminal(self) -> bool:
        return self.outcome != ONGOING


LOST = -1
ONGOING = 0
WON = 1

LOSS = Score(LOST)
WIN = Score(WON)


class Evaluator:
    """
    Base class for evaluation functions.

    Subclasses implement features(); terminal handling is shared.
    """

    name = "base"

    def evaluate(self, state: BoardState, self_id: str) -> Score:
        terminal = self.terminal_score(state, self_id)
        if terminal is not None:
            return terminal
        return Score(ONGOING, self.features(state, self_id))

    __call__ = evaluate

    def terminal_score(self, state: BoardState, self_id: str) -> Optional[Score]:
        """
        LOSS once self is gone, WIN once every opponent is gone.
        A game that never had opponents is never won.
        """
        if not state.is_alive(self_id):
            return LOSS
        opponents = state.opponents(self_id)
        if opponents and not any(agent.alive for agent in opponents):
            return WIN
        return None

    def features(self, state: BoardState, self_id: str) -> Tuple:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def nearest_food_distance(state: BoardState, self_id: str) -> Optional[int]:
    head = state.head(self_id)
    distances = [head.distance_to(cell) for cell in state.food]
    return min(distances) if distances else None


class FoodLengthEvaluator(Evaluator):
    """
    Reference heuristic: be long, then be close to food.

    Features are (length, -distance to nearest food); with no food left the
    second feature is -inf. Length comes first so the agent actually eats
    rather than hovering next to the food.
    """

    name = "food_length"

    def features(self, state: BoardState, self_id: str) -> Tuple:
        distance = nearest_food_distance(state, self_id)
        return (state.length(self_id), NO_FOOD if distance is None else -distance)


class SpaceControlEvaluator(Evaluator):
    """
    Length, then territory, then food.

    Territory is the number of free cells self reaches strictly before any
    living opponent, with bodies as walls (breadth-first distances from
    each head on numpy grids).
    """

    name = "space_control"

    def features(self, state: BoardState, self_id: str) -> Tuple:
        blocked = state.occupancy_grid()
        own = distance_grid(state, self_id, blocked)

        opponent_best = np.full(blocked.shape, np.iinfo(np.int32).max, dtype=np.int32)
        for opponent in state.living_opponents(self_id):
            grid = distance_grid(state, opponent.id, blocked)
            reachable = grid >= 0
            opponent_best[reachable] = np.minimum(opponent_best[reachable], grid[reachable])

        territory = int(np.count_nonzero((own > 0) & (own < opponent_best)))
        distance = nearest_food_distance(state, self_id)
        return (
            state.length(self_id),
            territory,
            NO_FOOD if distance is None else -distance,
        )


def distance_grid(state: BoardState, agent_id: str, blocked: np.ndarray) -> np.ndarray:
    """
    Steps from an agent's head to every cell, -1 where unreachable.
    Indexed as grid[x, y]; the head itself is 0.
    """
    grid = np.full(blocked.shape, -1, dtype=np.int32)
    head = state.head(agent_id)
    if not state.in_bounds(head):
        return grid

    grid[head.x, head.y] = 0
    queue = deque([head])
    while queue:
        cell = queue.popleft()
        step = grid[cell.x, cell.y] + 1
        for direction in CANONICAL_DIRECTIONS:
            nxt = cell.moved(direction)
            if not state.in_bounds(nxt) or blocked[nxt.x, nxt.y] or grid[nxt.x, nxt.y] >= 0:
                continue
            grid[nxt.x, nxt.y] = step
            queue.append(nxt)
    return grid


DEFAULT_EVALUATOR = FoodLengthEvaluator()


def evaluate(state: BoardState, self_id: str) -> Score:
    """Score a state with the reference heuristic"""
    return DEFAULT_EVALUATOR.evaluate(state, self_id)

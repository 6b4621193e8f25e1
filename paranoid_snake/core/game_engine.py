# =============================================================================
# Paranoid Snake - Local Game Engine
# =============================================================================
"""
Runs whole games locally, without a game server.

Used for self-play and for exercising the rules end to end: every living agent
picks a move through a policy supplied by the caller, the joint move is
applied with apply_moves, and food is respawned the way the standard
ruleset does it.
"""

import logging
import random
import time
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Sequence

from .board_state import BoardState
from .data_structures import Agent, Cell, RulesConfig
from .enums import Direction
from .errors import InvalidSnapshot
from .transition import apply_moves

logger = logging.getLogger(__name__)

Policy = Callable[[BoardState, str], Direction]

START_LENGTH = 3


# =============================================================================
# Game Setup
# =============================================================================

def _start_points(rules: RulesConfig):
    low, mid = 1, (rules.width - 1) // 2
    high_x, high_y = rules.width - 2, rules.height - 2
    mid_y = (rules.height - 1) // 2
    corners = [Cell(low, low), Cell(low, high_y), Cell(high_x, low), Cell(high_x, high_y)]
    cardinals = [Cell(low, mid_y), Cell(mid, low), Cell(mid, high_y), Cell(high_x, mid_y)]
    return corners, cardinals


def create_standard_game(
    agent_ids: Sequence[str],
    seed: Optional[int] = None,
    rules: Optional[RulesConfig] = None,
) -> BoardState:
    """
    Create the opening board of a standard game.

    Agents start on shuffled corner points with a stacked body of three
    segments; one food is placed diagonally next to each agent on the side
    of the centre, plus one in the centre.
    """
    rules = rules or RulesConfig()
    if not agent_ids:
        raise InvalidSnapshot("A game needs at least one agent")
    if len(agent_ids) > rules.max_agents:
        raise InvalidSnapshot(
            f"{len(agent_ids)} agents exceed the limit of {rules.max_agents}"
        )

    rng = random.Random(seed)
    corners, cardinals = _start_points(rules)
    rng.shuffle(corners)
    rng.shuffle(cardinals)
    points = (corners + cardinals)[:len(agent_ids)]

    agents = [
        Agent(id=agent_id, body=(point,) * START_LENGTH, health=rules.max_health)
        for agent_id, point in zip(agent_ids, points)
    ]

    center = Cell((rules.width - 1) // 2, (rules.height - 1) // 2)
    occupied = set(points)
    food = set()
    for point in points:
        options = [
            Cell(point.x + dx, point.y + dy)
            for dx, dy in ((-1, -1), (-1, 1), (1, -1), (1, 1))
        ]
        options = [
            cell for cell in options
            if rules.in_bounds(cell) and cell not in occupied and cell not in food
            and cell.distance_to(center) < point.distance_to(center)
        ]
        if options:
            food.add(rng.choice(options))
    if center not in occupied:
        food.add(center)

    return BoardState.create(
        agents=agents,
        food=food,
        turn=0,
        self_id=agent_ids[0],
        rules=rules,
    )


# =============================================================================
# Local Game
# =============================================================================

class LocalGame:
    """
    Turn loop for a game played entirely in-process.

    Example usage:
        game = LocalGame(create_standard_game(["a", "b"], seed=1), policy, seed=1)
        while not game.is_over():
            game.step()
        print(game.summary())
    """

    def __init__(
        self,
        state: BoardState,
        policy: Policy,
        seed: Optional[int] = None,
        min_food: int = 1,
        food_spawn_chance: float = 0.15,
    ):
        self.state = state
        self.policy = policy
        self.rng = random.Random(seed)
        self.min_food = min_food
        self.food_spawn_chance = food_spawn_chance
        self.history: List[Dict[str, Direction]] = []
        self.start_time = time.time()

    def is_over(self) -> bool:
        return self.state.is_over

    def winner(self) -> Optional[str]:
        """Id of the last agent standing, None for a draw or a running game"""
        if not self.is_over():
            return None
        living = self.state.living_ids
        return living[0] if len(living) == 1 else None

    def step(self) -> BoardState:
        """Play one turn and return the new state"""
        moves = {
            agent.id: self.policy(self.state.with_self(agent.id), agent.id)
            for agent in self.state.living_agents
        }
        self.history.append(moves)
        next_state = apply_moves(self.state, moves)
        self.state = self._spawn_food(next_state)

        for agent in self.state.agents:
            elimination = agent.elimination
            if elimination is not None and elimination.turn == self.state.turn:
                logger.info(f"Turn {self.state.turn}: {agent.id} eliminated "
                            f"({elimination.cause}, by {elimination.by})")
        return self.state

    def _spawn_food(self, state: BoardState) -> BoardState:
        free = self._free_cells(state)
        if not free:
            return state

        wanted = 0
        if len(state.food) < self.min_food:
            wanted = self.min_food - len(state.food)
        elif self.food_spawn_chance > 0 and self.rng.random() < self.food_spawn_chance:
            wanted = 1
        if wanted == 0:
            return state

        new_food = self.rng.sample(free, min(wanted, len(free)))
        return replace(state, food=state.food | frozenset(new_food))

    @staticmethod
    def _free_cells(state: BoardState) -> List[Cell]:
        occupied = state.occupied_cells() | state.food
        return [
            Cell(x, y)
            for x in range(state.width)
            for y in range(state.height)
            if Cell(x, y) not in occupied
        ]

    def play(self, max_turns: int = 500) -> Dict:
        """Run until the game ends or max_turns turns were played"""
        turns = 0
        while not self.is_over() and turns < max_turns:
            self.step()
            turns += 1
        return self.summary()

    def summary(self) -> Dict:
        winner = self.winner()
        return {
            "winner": winner if winner is not None else ("DRAW" if self.is_over() else None),
            "turns": self.state.turn,
            "eliminations": {
                agent.id: agent.elimination.to_dict()
                for agent in self.state.agents if agent.elimination is not None
            },
            "lengths": {agent.id: agent.length for agent in self.state.agents},
            "duration_s": time.time() - self.start_time,
        }


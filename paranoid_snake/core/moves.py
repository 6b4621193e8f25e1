# =============================================================================
# Paranoid Snake - Move Generation
# =============================================================================
"""
Candidate moves for agents.

All four directions are always candidates for a living agent, even those
that walk into a wall or a body: the rules allow fatal moves, and ranking
them is the job of the search. Eliminated or absent agents get no moves.
"""

from itertools import product
from typing import Dict, Iterator, Optional, Sequence, Tuple

from .board_state import BoardState
from .enums import CANONICAL_DIRECTIONS, Direction


def candidate_moves(state: BoardState, agent_id: Optional[str]) -> Tuple[Direction, ...]:
    """Directions open to an agent, in canonical order"""
    if not state.is_alive(agent_id):
        return ()
    return CANONICAL_DIRECTIONS


def joint_moves(state: BoardState, agent_ids: Sequence[str]) -> Iterator[Dict[str, Direction]]:
    """
    Every combination of one direction per living agent in agent_ids.

    Eliminated agents are skipped rather than contributing an empty factor,
    so with no living agents this yields a single empty assignment.
    Combinations come out in lexicographic canonical order.
    """
    movers = [agent_id for agent_id in agent_ids if state.is_alive(agent_id)]
    for combo in product(*(candidate_moves(state, agent_id) for agent_id in movers)):
        yield dict(zip(movers, combo))


def opponent_joint_moves(state: BoardState, self_id: Optional[str]) -> Iterator[Dict[str, Direction]]:
    """Joint moves of every living opponent of self_id, treated as one adversary"""
    return joint_moves(state, [agent.id for agent in state.living_opponents(self_id)])


def safe_moves(state: BoardState, agent_id: Optional[str]) -> Tuple[Direction, ...]:
    """
    Directions that do not end the agent immediately by a wall or a body.

    Tails that will move away this turn are treated as free; a stacked
    tail stays put and blocks. Head-to-head outcomes are not considered.
    """
    agent = state.get_agent(agent_id)
    if agent is None or not agent.body:
        return ()

    blocked = set()
    for other in state.living_agents + (() if agent.alive else (agent,)):
        body = other.body
        growing = len(body) > 1 and body[-1] == body[-2]
        blocked.update(body if growing else body[:-1])

    safe = []
    for direction in CANONICAL_DIRECTIONS:
        target = agent.head.moved(direction)
        if state.in_bounds(target) and target not in blocked:
            safe.append(direction)
    return tuple(safe)

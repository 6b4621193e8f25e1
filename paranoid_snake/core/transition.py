# =============================================================================
# Paranoid Snake - Transition Function
# =============================================================================
"""
Applies one joint move to a board and returns the successor board.

Rule order for one turn:
1. Every living agent moves its head one cell; the tail follows.
2. Health drops by one (plus hazard damage); agents landing on food
   reset to full health, grow by one segment and remove that food.
3. Agents off the board or out of health are eliminated.
4. Agents whose head lies on a body segment (their own or another
   surviving agent's, heads excluded) are eliminated.
5. Agents sharing a head cell are eliminated unless strictly longer than
   every other agent on that cell.
6. Steps 4 and 5 use the positions and lengths from steps 1-2, ignore
   agents removed in step 3, and apply their eliminations together.
7. The turn counter advances.
"""

from dataclasses import replace
from typing import Dict, List, Mapping, Optional

from .board_state import BoardState
from .data_structures import Agent, Cell
from .enums import Direction, EliminationCause
from .errors import InvariantViolation


def apply_moves(state: BoardState, moves: Mapping[str, Direction]) -> BoardState:
    """
    Advance the board by one turn.

    Args:
        state: Board before the turn
        moves: Exactly one direction per living agent

    Returns:
        The successor board; ``state`` is left untouched

    Raises:
        InvariantViolation: a move names an absent or eliminated agent,
            or a living agent has no move
    """
    _check_moves(state, moves)

    next_turn = state.turn + 1
    moved, eaten = _move_and_feed(state, moves)

    # Step 3: walls and starvation
    survivors: List[Agent] = []
    for index, agent in enumerate(moved):
        if not agent.alive:
            continue
        if not state.in_bounds(agent.head):
            moved[index] = agent.eliminated(EliminationCause.OUT_OF_BOUNDS, next_turn)
        elif agent.health <= 0:
            moved[index] = agent.eliminated(EliminationCause.OUT_OF_HEALTH, next_turn)
        else:
            survivors.append(agent)

    # Steps 4-5: collisions, decided first and applied together
    collisions: Dict[str, Agent] = {}
    for agent in survivors:
        result = _collision_elimination(agent, survivors, next_turn)
        if result is not None:
            collisions[agent.id] = result

    agents = tuple(collisions.get(agent.id, agent) for agent in moved)

    return replace(
        state,
        agents=agents,
        food=state.food - eaten,
        turn=next_turn,
    )


def _check_moves(state: BoardState, moves: Mapping[str, Direction]) -> None:
    for agent_id in moves:
        agent = state.get_agent(agent_id)
        if agent is None:
            raise InvariantViolation(f"Move given for unknown agent {agent_id!r}")
        if not agent.alive:
            raise InvariantViolation(f"Move given for eliminated agent {agent_id!r}")
    for agent in state.living_agents:
        if agent.id not in moves:
            raise InvariantViolation(f"No move given for living agent {agent.id!r}")


def _move_and_feed(state: BoardState, moves: Mapping[str, Direction]):
    """Steps 1-2; returns the moved agents (state order) and the eaten food"""
    rules = state.rules
    moved: List[Agent] = []
    eaten = set()

    for agent in state.agents:
        if not agent.alive:
            moved.append(agent)
            continue

        new_head = agent.head.moved(moves[agent.id])
        body = (new_head,) + agent.body[:-1]

        if new_head in state.food:
            eaten.add(new_head)
            # the tail segment is duplicated and stays put next turn
            body = body + (body[-1],)
            health = rules.max_health
        else:
            health = agent.health - 1
            if rules.hazard_damage and new_head in state.hazards:
                health -= rules.hazard_damage
            health = max(0, health)

        moved.append(replace(agent, body=body, health=health))

    return moved, frozenset(eaten)


def _collision_elimination(agent: Agent, survivors: List[Agent],
                           turn: int) -> Optional[Agent]:
    head: Cell = agent.head

    if head in agent.body[1:]:
        return agent.eliminated(EliminationCause.SELF_COLLISION, turn, agent.id)

    for other in survivors:
        if other.id != agent.id and head in other.body[1:]:
            return agent.eliminated(EliminationCause.BODY_COLLISION, turn, other.id)

    for other in survivors:
        if other.id != agent.id and other.head == head and agent.length <= other.length:
            return agent.eliminated(EliminationCause.HEAD_COLLISION, turn, other.id)

    return None

# =============================================================================
# Paranoid Snake - Self-Play
# =============================================================================
"""
Local games in which every agent decides with the paranoid search.
"""

import logging
from typing import Dict, Optional, Sequence

from ..core.board_state import BoardState
from ..core.enums import Direction
from ..core.game_engine import LocalGame, Policy, create_standard_game
from .deepening import SearchConfig, decide

logger = logging.getLogger(__name__)


def search_policy(config: Optional[SearchConfig] = None) -> Policy:
    """
    Policy that runs decide() for each agent on a fresh deadline.

    Args:
        config: Search settings; the budget per move is config.time_budget_ms
    """
    config = config or SearchConfig()

    def policy(state: BoardState, agent_id: str) -> Direction:
        return decide(state, agent_id, config.deadline_from_now(), config)

    return policy


def play_local_game(
    agent_ids: Sequence[str] = ("you", "opponent"),
    seed: Optional[int] = None,
    max_turns: int = 500,
    policy: Optional[Policy] = None,
) -> Dict:
    """
    Play a complete standard game locally.

    Args:
        agent_ids: Agents to seat, at most the board's agent limit
        seed: Seed for start positions and food spawns
        max_turns: Turn limit
        policy: Move source for every agent; defaults to search_policy()

    Returns:
        Summary dict with winner ("DRAW" when nobody survives), turns,
        eliminations and final lengths
    """
    state = create_standard_game(agent_ids, seed=seed)
    game = LocalGame(state, policy or search_policy(), seed=seed)
    result = game.play(max_turns=max_turns)
    logger.info(f"Local game finished after {result['turns']} turns, winner: {result['winner']}")
    return result

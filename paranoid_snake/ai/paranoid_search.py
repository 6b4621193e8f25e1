# =============================================================================
# Paranoid Snake - Paranoid Minimax Search
# =============================================================================
"""
Fixed-depth paranoid minimax for simultaneous-move snake games.

The paranoid assumption merges all living opponents into one adversary
that picks, from the cross product of their directions, the joint move
worst for us. One ply is a self move, an adversary joint move and one
application of the transition function to both together.

Key Features:
1. Full root scores - every root direction is scored exactly, not just the best
2. Alpha-Beta Pruning - below the root, with ties pruned on the safe side
3. Deterministic tie-breaking - first direction in canonical order wins
4. Deadline checkpoints - TimeoutError every check_interval nodes
"""

import time
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

from ..core.board_state import BoardState
from ..core.enums import Direction
from ..core.moves import candidate_moves, opponent_joint_moves
from ..core.transition import apply_moves
from .evaluation import DEFAULT_EVALUATOR, Evaluator, Score

# Bounds strictly outside every real score
NEG_INF = Score(-2)
INF = Score(2)


@dataclass
class SearchStats:
    """Statistics for a search iteration"""
    nodes_searched: int = 0
    nodes_pruned: int = 0
    depth_reached: int = 0
    time_ms: float = 0.0
    best_move: Optional[Direction] = None
    best_score: Optional[Score] = None

    def to_dict(self) -> Dict:
        return {
            "depth": self.depth_reached,
            "nodes": self.nodes_searched,
            "pruned": self.nodes_pruned,
            "time_ms": self.time_ms,
            "best_move": str(self.best_move) if self.best_move else None,
            "score": tuple(self.best_score) if self.best_score else None,
        }


@dataclass
class RootResult:
    """
    Outcome of one complete fixed-depth search.

    scores holds the exact minimax score of every searched root direction.
    exhausted is True when no line reached the depth limit, i.e. a deeper
    search would return the same scores.
    """
    depth: int
    scores: Dict[Direction, Score] = field(default_factory=dict)
    best_move: Optional[Direction] = None
    best_score: Optional[Score] = None
    exhausted: bool = False
    stats: SearchStats = field(default_factory=SearchStats)


def best_of(scores: Dict[Direction, Score]) -> Optional[Direction]:
    """Highest scoring direction, the earliest in canonical order on ties"""
    best = None
    for direction in sorted(scores, key=lambda d: d.order):
        if best is None or scores[direction] > scores[best]:
            best = direction
    return best


class ParanoidSearch:
    """
    One fixed-depth paranoid search for a single agent.

    An instance belongs to one decision call; it keeps node counters and
    the deadline, nothing that outlives the call.

    Example usage:
        search = ParanoidSearch(evaluator=FoodLengthEvaluator())
        result = search.search(state, "you", depth=2)
        result.best_move, result.scores
    """

    def __init__(
        self,
        evaluator: Optional[Evaluator] = None,
        use_pruning: bool = True,
        deadline: Optional[float] = None,
        check_interval: int = 256,
    ):
        """
        Args:
            evaluator: Heuristic applied at the depth limit
            use_pruning: Whether to use alpha-beta below the root
            deadline: Absolute time.time() after which the search aborts
            check_interval: Nodes between deadline checks
        """
        self.evaluator = evaluator or DEFAULT_EVALUATOR
        self.use_pruning = use_pruning
        self.deadline = deadline
        self.check_interval = max(1, check_interval)

        self.self_id: Optional[str] = None
        self.nodes_searched = 0
        self.nodes_pruned = 0
        self.frontier_reached = False

    def search(
        self,
        state: BoardState,
        self_id: str,
        depth: int,
        root_moves: Optional[Sequence[Direction]] = None,
    ) -> RootResult:
        """
        Search the tree below state to the given depth in plies.

        Args:
            state: Root board
            self_id: Agent to maximize for
            depth: Plies to look ahead, at least 1
            root_moves: Restrict the root to these directions (used to
                split the root between parallel workers)

        Returns:
            RootResult with a score for every searched root direction

        Raises:
            TimeoutError: the deadline passed before the search finished
        """
        start = time.time()
        self.self_id = self_id
        self.nodes_searched = 0
        self.nodes_pruned = 0
        self.frontier_reached = False

        moves = candidate_moves(state, self_id)
        if root_moves is not None:
            moves = tuple(d for d in moves if d in root_moves)

        scores: Dict[Direction, Score] = {}
        for direction in moves:
            scores[direction] = self._min_value(state, direction, depth, NEG_INF, INF)

        best = best_of(scores)
        stats = SearchStats(
            nodes_searched=self.nodes_searched,
            nodes_pruned=self.nodes_pruned,
            depth_reached=depth,
            time_ms=(time.time() - start) * 1000,
            best_move=best,
            best_score=scores.get(best) if best is not None else None,
        )
        return RootResult(
            depth=depth,
            scores=scores,
            best_move=best,
            best_score=stats.best_score,
            exhausted=not self.frontier_reached,
            stats=stats,
        )

    def _max_value(self, state: BoardState, depth: int, alpha: Score, beta: Score) -> Score:
        """Self layer: best score over our own directions"""
        self.nodes_searched += 1
        if self.nodes_searched % self.check_interval == 0 and self._time_exceeded():
            raise TimeoutError("Search time exceeded")

        terminal = self.evaluator.terminal_score(state, self.self_id)
        if terminal is not None:
            return terminal

        if depth <= 0:
            self.frontier_reached = True
            return self.evaluator.evaluate(state, self.self_id)

        best = NEG_INF
        for direction in candidate_moves(state, self.self_id):
            value = self._min_value(state, direction, depth, alpha, beta)
            if value > best:
                best = value
            if self.use_pruning:
                if best >= beta:
                    self.nodes_pruned += 1
                    break
                alpha = max(alpha, best)
        return best

    def _min_value(self, state: BoardState, direction: Direction, depth: int,
                   alpha: Score, beta: Score) -> Score:
        """Adversary layer: worst score for us over all opponent joint moves"""
        best = INF
        for joint in opponent_joint_moves(state, self.self_id):
            joint[self.self_id] = direction
            child = apply_moves(state, joint)
            value = self._max_value(child, depth - 1, alpha, beta)
            if value < best:
                best = value
            if self.use_pruning:
                if best <= alpha:
                    self.nodes_pruned += 1
                    break
                beta = min(beta, best)
        return best

    def _time_exceeded(self) -> bool:
        return self.deadline is not None and time.time() >= self.deadline

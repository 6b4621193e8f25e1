# =============================================================================
# Paranoid Snake - Iterative Deepening Driver
# =============================================================================
"""
Anytime wrapper around the paranoid search.

Runs the search at depth 1, 2, ... and keeps the last complete depth as
the answer. Before each new depth the deadline is checked; a depth that
is interrupted by the deadline is thrown away whole. Whatever happens, a
direction comes back: when self is missing or eliminated, or no depth
could finish, a fallback policy picks one.

Per decision the driver moves through
    Idle -> Searching(1) -> Searching(2) -> ... -> Done
ending on the deadline, on max_depth, or when the tree is exhausted.
"""

import logging
import threading
import time
from concurrent.futures import ProcessPoolExecutor, wait
from concurrent.futures.process import BrokenProcessPool
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..core.board_state import BoardState
from ..core.enums import CANONICAL_DIRECTIONS, Direction, SearchProfile
from ..core.errors import DeadlineExceededBeforeAnyDepth
from ..core.moves import candidate_moves, safe_moves
from .evaluation import Evaluator, FoodLengthEvaluator, Score
from .paranoid_search import ParanoidSearch, RootResult, SearchStats, best_of

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class SearchConfig:
    """
    Settings for one decision.

    Attributes:
        max_depth: Deepest search attempted, in plies
        time_budget_ms: Budget used by deadline_from_now()
        safety_margin_ms: Time kept in reserve before the deadline
        predict_next_depth: Skip a depth that is not expected to finish
        growth_factor: Expected cost ratio of depth d+1 to depth d
        use_pruning: Alpha-beta below the root
        check_interval: Nodes between deadline checks inside a depth
        default_direction: Answer when nothing better can be determined
        workers: Processes splitting the root directions (1 = in-process)
        worker_overhead_ms: Worker time kept back for returning results
        worker_startup_ms: Extra worker time kept back when the pool is new
        evaluator: Heuristic applied at the depth limit
    """
    max_depth: int = 3
    time_budget_ms: float = 200.0
    safety_margin_ms: float = 15.0
    predict_next_depth: bool = True
    growth_factor: float = 4.0
    use_pruning: bool = True
    check_interval: int = 256
    default_direction: Direction = Direction.UP
    workers: int = 1
    worker_overhead_ms: float = 10.0
    worker_startup_ms: float = 50.0
    evaluator: Evaluator = field(default_factory=FoodLengthEvaluator)

    def deadline_from_now(self) -> float:
        """Absolute time.time() deadline for a decision starting now"""
        return time.time() + self.time_budget_ms / 1000.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "max_depth": self.max_depth,
            "time_budget_ms": self.time_budget_ms,
            "safety_margin_ms": self.safety_margin_ms,
            "predict_next_depth": self.predict_next_depth,
            "growth_factor": self.growth_factor,
            "use_pruning": self.use_pruning,
            "check_interval": self.check_interval,
            "default_direction": str(self.default_direction),
            "workers": self.workers,
            "worker_overhead_ms": self.worker_overhead_ms,
            "worker_startup_ms": self.worker_startup_ms,
            "evaluator": self.evaluator.name,
        }


def create_search_config(profile: SearchProfile = SearchProfile.STANDARD) -> SearchConfig:
    """
    Create a search configuration from a preset.

    Args:
        profile: Preset strength (affects depth and time budget)

    Returns:
        Configured SearchConfig instance
    """
    settings = {
        SearchProfile.FAST: {"max_depth": 2, "time_budget_ms": 100.0},
        SearchProfile.STANDARD: {"max_depth": 3, "time_budget_ms": 200.0},
        SearchProfile.DEEP: {"max_depth": 6, "time_budget_ms": 400.0},
    }
    return SearchConfig(**settings.get(profile, settings[SearchProfile.STANDARD]))


# =============================================================================
# Result
# =============================================================================

STOP_DEADLINE = "deadline"
STOP_MAX_DEPTH = "max_depth"
STOP_EXHAUSTED = "exhausted"
STOP_FALLBACK = "fallback"


@dataclass
class SearchResult:
    """
    What a decision produced.

    scores are the root scores of the deepest completed depth (empty for a
    fallback); history holds one SearchStats per completed depth.
    """
    direction: Direction
    depth: int = 0
    scores: Dict[Direction, Score] = field(default_factory=dict)
    history: List[SearchStats] = field(default_factory=list)
    stop_reason: str = STOP_FALLBACK
    time_ms: float = 0.0

    @property
    def fallback(self) -> bool:
        return self.stop_reason == STOP_FALLBACK

    def get_search_history(self) -> List[Dict]:
        return [stats.to_dict() for stats in self.history]


# =============================================================================
# Fallback Policy
# =============================================================================

def fallback_direction(state: BoardState, self_id: Optional[str],
                       default: Direction = Direction.UP) -> Direction:
    """
    Cheap answer used when no search result exists.

    The first direction in canonical order that does not immediately hit
    a wall or a body, else ``default`` when that is a candidate, else the
    first candidate.
    """
    safe = safe_moves(state, self_id)
    if safe:
        return safe[0]
    candidates = candidate_moves(state, self_id)
    if not candidates or default in candidates:
        return default
    return candidates[0]


# =============================================================================
# Worker Pool
# =============================================================================

_worker_pool: Optional[ProcessPoolExecutor] = None
_worker_pool_size = 0
_worker_pool_lock = threading.Lock()


def get_worker_pool(workers: int) -> Tuple[ProcessPoolExecutor, bool]:
    """
    Shared process pool for root-parallel search.

    The pool outlives single decisions so that only the first one pays for
    starting the processes. Returns the pool and whether it was just created.
    """
    global _worker_pool, _worker_pool_size
    with _worker_pool_lock:
        if _worker_pool is not None and _worker_pool_size == workers:
            return _worker_pool, False
        if _worker_pool is not None:
            _worker_pool.shutdown(wait=False, cancel_futures=True)
        _worker_pool = ProcessPoolExecutor(max_workers=workers)
        _worker_pool_size = workers
        logger.debug(f"Started a worker pool with {workers} processes")
        return _worker_pool, True


def shutdown_worker_pool():
    """Release the shared pool without waiting for running partitions"""
    global _worker_pool, _worker_pool_size
    with _worker_pool_lock:
        if _worker_pool is not None:
            _worker_pool.shutdown(wait=False, cancel_futures=True)
            _worker_pool = None
            _worker_pool_size = 0


# =============================================================================
# Iterative Deepening
# =============================================================================

def _deepen(
    state: BoardState,
    self_id: str,
    deadline: float,
    config: SearchConfig,
    root_moves: Optional[Sequence[Direction]] = None,
) -> Tuple[List[RootResult], str]:
    """
    Run successive depths until the deadline, max_depth or exhaustion.

    Returns the completed depths in order and the reason for stopping.
    """
    margin = config.safety_margin_ms / 1000.0
    cutoff = deadline - margin
    completed: List[RootResult] = []
    last_elapsed = 0.0

    for depth in range(1, config.max_depth + 1):
        now = time.time()
        remaining = cutoff - now
        if remaining <= 0:
            return completed, STOP_DEADLINE
        if completed and config.predict_next_depth and \
                last_elapsed * config.growth_factor > remaining:
            logger.debug(f"Skipping depth {depth}: {remaining * 1000:.1f}ms left, "
                         f"last depth took {last_elapsed * 1000:.1f}ms")
            return completed, STOP_DEADLINE

        search = ParanoidSearch(
            evaluator=config.evaluator,
            use_pruning=config.use_pruning,
            deadline=cutoff,
            check_interval=config.check_interval,
        )
        try:
            result = search.search(state, self_id, depth, root_moves=root_moves)
        except TimeoutError:
            logger.debug(f"Depth {depth} interrupted by the deadline")
            return completed, STOP_DEADLINE

        last_elapsed = time.time() - now
        completed.append(result)
        stats = result.stats
        logger.debug(f"Depth {depth}: {stats.nodes_searched} nodes, "
                     f"{stats.nodes_pruned} pruned, {stats.time_ms:.1f}ms, "
                     f"best {result.best_move} {tuple(result.best_score) if result.best_score else None}")

        if result.exhausted:
            return completed, STOP_EXHAUSTED

    return completed, STOP_MAX_DEPTH


def _deepen_partition(state: BoardState, self_id: str, deadline: float,
                      config: SearchConfig, root_moves: Tuple[Direction, ...]):
    """Worker entry point; returns only picklable completed-depth data"""
    completed, reason = _deepen(state, self_id, deadline, config, root_moves)
    return [(r.depth, r.scores, r.stats) for r in completed], reason == STOP_EXHAUSTED


class IterativeDeepeningDriver:
    """
    Anytime decision maker.

    Example usage:
        driver = IterativeDeepeningDriver(SearchConfig(max_depth=4))
        result = driver.run(state, "you", deadline=time.time() + 0.2)
        result.direction, result.depth, result.scores
    """

    def __init__(self, config: Optional[SearchConfig] = None):
        self.config = config or SearchConfig()

    def run(self, state: BoardState, self_id: Optional[str] = None,
            deadline: Optional[float] = None) -> SearchResult:
        """
        Decide a move for self_id (default: state.self_id) by the deadline
        (default: config.time_budget_ms from now).
        """
        start = time.time()
        if self_id is None:
            self_id = state.self_id
        if deadline is None:
            deadline = self.config.deadline_from_now()

        if not state.is_alive(self_id):
            logger.warning(f"Agent {self_id!r} is absent or eliminated, using fallback move")
            return self._fallback(state, self_id, start)

        try:
            result = self._search(state, self_id, deadline)
        except DeadlineExceededBeforeAnyDepth:
            logger.warning(f"No depth finished before the deadline for {self_id!r}, "
                           f"using fallback move")
            return self._fallback(state, self_id, start)
        except (BrokenProcessPool, OSError):
            logger.exception(f"Worker pool failed while deciding for {self_id!r}, "
                             f"using fallback move")
            shutdown_worker_pool()
            return self._fallback(state, self_id, start)

        result.time_ms = (time.time() - start) * 1000
        logger.info(f"Turn {state.turn}: {self_id} moves {result.direction} "
                    f"(depth {result.depth}, {result.stop_reason}, {result.time_ms:.1f}ms)")
        return result

    def _search(self, state: BoardState, self_id: str, deadline: float) -> SearchResult:
        if self.config.workers > 1:
            depth, scores, history, reason = self._search_parallel(state, self_id, deadline)
        else:
            completed, reason = _deepen(state, self_id, deadline, self.config)
            if not completed:
                raise DeadlineExceededBeforeAnyDepth(f"Deadline passed before depth 1 for {self_id!r}")
            depth = completed[-1].depth
            scores = completed[-1].scores
            history = [r.stats for r in completed]

        return SearchResult(
            direction=best_of(scores),
            depth=depth,
            scores=scores,
            history=history,
            stop_reason=reason,
        )

    def _search_parallel(self, state: BoardState, self_id: str, deadline: float):
        """
        Split the root directions round-robin between worker processes.

        Each worker deepens its own share; only depths completed by every
        worker are merged, so scores of different depths never mix. A worker
        whose subtree is exhausted counts as complete at every deeper depth.
        Results are collected until the cutoff; a worker that misses it is
        left out and its directions go unscored.
        """
        config = self.config
        cutoff = deadline - config.safety_margin_ms / 1000.0
        if time.time() >= cutoff:
            raise DeadlineExceededBeforeAnyDepth(
                f"Deadline passed before the workers started for {self_id!r}"
            )

        moves = candidate_moves(state, self_id)
        workers = min(config.workers, len(moves))
        partitions = [tuple(moves[i::workers]) for i in range(workers)]

        pool, fresh = get_worker_pool(workers)
        reserve_ms = config.worker_overhead_ms + (config.worker_startup_ms if fresh else 0.0)
        worker_deadline = deadline - reserve_ms / 1000.0

        futures = [
            pool.submit(_deepen_partition, state, self_id, worker_deadline, config, partition)
            for partition in partitions
        ]
        done, pending = wait(futures, timeout=max(0.0, cutoff - time.time()))
        for future in pending:
            future.cancel()
        if pending:
            logger.warning(f"{len(pending)} of {len(futures)} workers missed the deadline "
                           f"for {self_id!r}")

        outcomes = [future.result() for future in futures if future in done]
        outcomes = [(depths, exhausted) for depths, exhausted in outcomes if depths]
        if not outcomes:
            raise DeadlineExceededBeforeAnyDepth(
                f"No worker finished a depth before the deadline for {self_id!r}"
            )
        complete = len(outcomes) == len(futures)

        reached = [config.max_depth if exhausted else depths[-1][0]
                   for depths, exhausted in outcomes]
        common = min(reached)

        scores: Dict[Direction, Score] = {}
        history: List[SearchStats] = []
        for depths, _ in outcomes:
            usable = [entry for entry in depths if entry[0] <= common]
            _, partition_scores, stats = usable[-1]
            scores.update(partition_scores)
            history.append(stats)

        if complete and all(exhausted for _, exhausted in outcomes):
            reason = STOP_EXHAUSTED
        elif complete and common >= config.max_depth:
            reason = STOP_MAX_DEPTH
        else:
            reason = STOP_DEADLINE
        # keep canonical order so ties resolve as in the sequential search
        scores = {d: scores[d] for d in CANONICAL_DIRECTIONS if d in scores}
        depth = max(entry[0] for depths, _ in outcomes for entry in depths if entry[0] <= common)
        return depth, scores, history, reason

    def _fallback(self, state: BoardState, self_id: Optional[str], start: float) -> SearchResult:
        direction = fallback_direction(state, self_id, self.config.default_direction)
        return SearchResult(
            direction=direction,
            stop_reason=STOP_FALLBACK,
            time_ms=(time.time() - start) * 1000,
        )


def decide(state: BoardState, self_id: Optional[str] = None,
           deadline: Optional[float] = None,
           config: Optional[SearchConfig] = None) -> Direction:
    """
    Choose a direction for self_id before the deadline.

    Always returns a direction; see IterativeDeepeningDriver.run().
    """
    return IterativeDeepeningDriver(config).run(state, self_id, deadline).direction

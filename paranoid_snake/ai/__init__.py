# =============================================================================
# AI Module
# =============================================================================
"""
Decision making for the snake engine.

Contains:
- Evaluators: the reference food/length heuristic and a space-control variant
- ParanoidSearch: fixed-depth paranoid minimax with alpha-beta
- IterativeDeepeningDriver / decide: deadline-bounded anytime search
- play_local_game: self-play games driven by the search
"""

from .evaluation import (
    Score,
    LOSS,
    WIN,
    Evaluator,
    FoodLengthEvaluator,
    SpaceControlEvaluator,
    evaluate,
)

from .paranoid_search import (
    ParanoidSearch,
    RootResult,
    SearchStats,
)

from .deepening import (
    SearchConfig,
    SearchResult,
    IterativeDeepeningDriver,
    create_search_config,
    decide,
    fallback_direction,
    shutdown_worker_pool,
)

from .self_play import play_local_game, search_policy

__all__ = [
    # Evaluation
    "Score",
    "LOSS",
    "WIN",
    "Evaluator",
    "FoodLengthEvaluator",
    "SpaceControlEvaluator",
    "evaluate",

    # Search
    "ParanoidSearch",
    "RootResult",
    "SearchStats",

    # Driver
    "SearchConfig",
    "SearchResult",
    "IterativeDeepeningDriver",
    "create_search_config",
    "decide",
    "fallback_direction",
    "shutdown_worker_pool",

    # Self-play
    "play_local_game",
    "search_policy",
]

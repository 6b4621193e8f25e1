"""
Evaluation Tests

Ordering contract of Score and the bundled evaluators.
"""

import numpy as np

from paranoid_snake.ai import (
    LOSS, WIN, FoodLengthEvaluator, Score, SpaceControlEvaluator, evaluate
)
from paranoid_snake.ai.evaluation import distance_grid
from paranoid_snake.core import EliminationCause

from builders import agent, board


# =============================================================================
# Reference Heuristic
# =============================================================================

def test_features_are_length_then_food_distance():
    state = board(agent("you", (2, 2), (2, 1), (2, 0)), food=[(5, 2), (2, 9)])
    score = evaluate(state, "you")
    assert score == Score(0, (3, -3))
    assert not score.is_terminal


def test_closer_food_scores_higher():
    near = board(agent("you", (4, 2), (3, 2)), food=[(5, 2)])
    far = board(agent("you", (1, 2), (0, 2)), food=[(5, 2)])
    assert evaluate(near, "you") > evaluate(far, "you")


def test_length_outranks_food_distance():
    long_far = board(agent("you", (0, 0), (0, 1), (0, 2)), food=[(10, 10)])
    short_near = board(agent("you", (9, 10), (8, 10)), food=[(10, 10)])
    assert evaluate(long_far, "you") > evaluate(short_near, "you")


def test_no_food_is_the_worst_food_feature():
    with_food = board(agent("you", (0, 0), (0, 1)), food=[(10, 10)])
    without_food = board(agent("you", (0, 0), (0, 1)))
    assert evaluate(with_food, "you") > evaluate(without_food, "you")
    assert evaluate(without_food, "you").features[1] == float("-inf")


# =============================================================================
# Terminal States
# =============================================================================

def test_eliminated_self_is_the_minimum():
    dead = agent("you", *[(x, 0) for x in range(10)]).eliminated(
        EliminationCause.HEAD_COLLISION, 9, "other"
    )
    state = board(dead, agent("other", (5, 5)), food=[(1, 1)])
    assert evaluate(state, "you") == LOSS
    worst_alive = evaluate(board(agent("you", (0, 0)), agent("other", (5, 5))), "you")
    assert LOSS < worst_alive


def test_absent_self_is_a_loss():
    state = board(agent("other", (5, 5)))
    assert evaluate(state, "you") == LOSS


def test_last_agent_standing_is_the_maximum():
    dead = agent("other", *[(x, 0) for x in range(10)]).eliminated(
        EliminationCause.OUT_OF_HEALTH, 9
    )
    state = board(agent("you", (5, 5)), dead)
    assert evaluate(state, "you") == WIN
    best_alive = evaluate(
        board(agent("you", *[(x, 1) for x in range(11)]), agent("other", (5, 5)), food=[(1, 2)]),
        "you",
    )
    assert WIN > best_alive


def test_solo_game_is_never_won():
    state = board(agent("you", (5, 5)))
    assert not evaluate(state, "you").is_terminal


def test_evaluation_is_pure():
    state = board(agent("you", (2, 2), (2, 1)), agent("other", (8, 8)), food=[(4, 4)])
    assert evaluate(state, "you") == evaluate(state, "you")
    assert FoodLengthEvaluator()(state, "you") == evaluate(state, "you")


# =============================================================================
# Space Control
# =============================================================================

def test_distance_grid():
    state = board(agent("you", (0, 0), (0, 1), (0, 2)))
    grid = distance_grid(state, "you", state.occupancy_grid())

    assert grid[0, 0] == 0
    assert grid[1, 0] == 1
    assert grid[0, 1] == -1
    assert grid[1, 1] == 2
    assert grid[0, 3] == 5


def test_space_control_prefers_open_territory():
    evaluator = SpaceControlEvaluator()
    state = board(
        agent("you", (2, 5), (1, 5), (0, 5)),
        agent("other", (8, 5), (9, 5), (10, 5)),
        food=[(5, 5)],
    )
    length, territory, food = evaluator.evaluate(state, "you").features
    assert length == 3
    assert food == -3
    assert 0 < territory < 121

    mirrored = state.with_self("other")
    assert evaluator.evaluate(mirrored, "other").features[1] == territory


def test_space_control_solo_owns_every_reachable_cell():
    evaluator = SpaceControlEvaluator()
    state = board(agent("you", (5, 5), (5, 4)))
    _, territory, _ = evaluator.evaluate(state, "you").features
    assert territory == int(np.prod(state.occupancy_grid().shape)) - 2

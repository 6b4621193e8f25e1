"""
Board State Tests

Construction, validation and read-only queries of BoardState.
"""

import dataclasses

import numpy as np
import pytest

from paranoid_snake.core import (
    Agent, BoardState, Cell, EliminationCause, InvalidSnapshot, RulesConfig
)

from builders import agent, board


# =============================================================================
# Construction
# =============================================================================

def test_create_valid_state():
    """A well-formed board is accepted and normalized to Cells"""
    state = board(
        agent("you", (5, 5), (5, 6), (5, 7)),
        agent("them", (1, 1), (1, 2)),
        food=[(3, 3), (3, 3), (8, 8)],
        turn=7,
    )
    assert state.agent_ids == ("you", "them")
    assert state.self_id == "you"
    assert state.turn == 7
    assert state.food == frozenset({Cell(3, 3), Cell(8, 8)})
    assert isinstance(state.head("you"), Cell)
    assert state.head("you") == Cell(5, 5)
    assert state.length("you") == 3
    assert state.health("them") == 100


def test_create_accepts_plain_tuples():
    """Bodies given as raw tuples become Cell tuples"""
    raw = Agent(id="you", body=[(2, 2), (2, 3)], health=90)
    state = BoardState.create(agents=[raw])
    assert state.get_agent("you").body == (Cell(2, 2), Cell(2, 3))


def test_empty_body_rejected():
    with pytest.raises(InvalidSnapshot, match="empty body"):
        board(agent("you"))


def test_out_of_bounds_body_rejected():
    with pytest.raises(InvalidSnapshot, match="out of bounds"):
        board(agent("you", (10, 10), (11, 10)))


def test_negative_cell_rejected():
    with pytest.raises(InvalidSnapshot):
        board(agent("you", (0, 0), (0, -1)))


def test_duplicate_ids_rejected():
    with pytest.raises(InvalidSnapshot, match="Duplicate"):
        board(agent("you", (1, 1)), agent("you", (5, 5)))


def test_out_of_bounds_food_rejected():
    with pytest.raises(InvalidSnapshot):
        board(agent("you", (1, 1)), food=[(11, 0)])


def test_too_many_agents_rejected():
    agents = [agent(f"s{i}", (i, 0)) for i in range(5)]
    with pytest.raises(InvalidSnapshot):
        board(*agents)


def test_health_out_of_range_rejected():
    with pytest.raises(InvalidSnapshot):
        board(agent("you", (1, 1), health=101))


def test_invalid_snapshot_is_value_error():
    """Callers catching ValueError also catch InvalidSnapshot"""
    with pytest.raises(ValueError):
        board(agent("you"))


def test_custom_board_size():
    rules = RulesConfig(width=7, height=7)
    state = board(agent("you", (6, 6)), rules=rules)
    assert state.width == 7
    with pytest.raises(InvalidSnapshot):
        board(agent("you", (7, 6)), rules=rules)


# =============================================================================
# Immutability
# =============================================================================

def test_state_is_frozen():
    state = board(agent("you", (1, 1)))
    with pytest.raises(dataclasses.FrozenInstanceError):
        state.turn = 3
    with pytest.raises(dataclasses.FrozenInstanceError):
        state.agents[0].health = 5


def test_states_are_hashable_values():
    first = board(agent("you", (1, 1), (1, 2)), food=[(4, 4)])
    second = board(agent("you", (1, 1), (1, 2)), food=[(4, 4)])
    assert first == second
    assert hash(first) == hash(second)


# =============================================================================
# Queries
# =============================================================================

def test_liveness_queries():
    dead = agent("dead", (3, 3)).eliminated(EliminationCause.OUT_OF_HEALTH, 4)
    state = board(agent("you", (1, 1)), dead, agent("other", (8, 8)))

    assert state.is_alive("you")
    assert not state.is_alive("dead")
    assert not state.is_alive("missing")
    assert state.living_ids == ("you", "other")
    assert [a.id for a in state.opponents("you")] == ["dead", "other"]
    assert [a.id for a in state.living_opponents("you")] == ["other"]
    assert state.get_agent("missing") is None


def test_agent_lookup_by_id():
    state = board(agent("you", (1, 1), (1, 2)), agent("other", (8, 8), (8, 9), (8, 10)))

    other = state.get_agent("other")
    assert other is state.agents[1]
    assert state.head("other") == other.head == Cell(8, 8)
    assert state.length("other") == 3
    assert state.health("you") == 100


def test_head_of_unknown_agent_raises():
    state = board(agent("you", (1, 1)))
    with pytest.raises(KeyError):
        state.head("missing")


def test_is_over():
    dead = agent("b", (3, 3)).eliminated(EliminationCause.BODY_COLLISION, 2, "a")
    assert board(agent("a", (1, 1)), dead).is_over
    assert not board(agent("a", (1, 1)), agent("b", (3, 3))).is_over
    assert not board(agent("solo", (1, 1))).is_over


def test_occupancy_grid():
    dead = agent("dead", (9, 9)).eliminated(EliminationCause.OUT_OF_HEALTH, 1)
    state = board(agent("you", (2, 3), (2, 4)), dead)
    grid = state.occupancy_grid()

    assert grid.shape == (11, 11)
    assert grid.dtype == np.bool_
    assert grid[2, 3] and grid[2, 4]
    assert not grid[9, 9]
    assert int(grid.sum()) == 2


def test_with_self_changes_perspective_only():
    state = board(agent("a", (1, 1)), agent("b", (5, 5)))
    flipped = state.with_self("b")
    assert flipped.self_id == "b"
    assert flipped.agents == state.agents
    assert state.self_id == "a"


def test_to_dict():
    state = board(agent("you", (1, 1), (1, 2)), food=[(4, 4)], turn=2)
    data = state.to_dict()
    assert data["turn"] == 2
    assert data["food"] == [{"x": 4, "y": 4}]
    assert data["agents"][0]["body"] == [{"x": 1, "y": 1}, {"x": 1, "y": 2}]
    assert data["rules"]["width"] == 11

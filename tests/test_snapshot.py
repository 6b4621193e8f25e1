"""
Snapshot Tests

Conversion of the game's JSON payload into a BoardState.
"""

import copy

import pytest

from paranoid_snake.core import (
    Cell, InvalidSnapshot, RulesConfig, WireGameState,
    board_state_from_snapshot, deadline_from_snapshot, parse_snapshot
)


def _pos(x, y):
    return {"x": x, "y": y}


SNAPSHOT = {
    "game": {
        "id": "game-00fe20da",
        "ruleset": {"name": "standard", "version": "v1.2.3", "settings": {"hazardDamagePerTurn": 14}},
        "map": "standard",
        "timeout": 500,
        "source": "league",
    },
    "turn": 14,
    "board": {
        "height": 11,
        "width": 11,
        "food": [_pos(5, 5), _pos(9, 0), _pos(2, 6)],
        "hazards": [_pos(0, 0)],
        "snakes": [
            {
                "id": "snake-508e96ac",
                "name": "My Snake",
                "health": 54,
                "body": [_pos(0, 0), _pos(1, 0), _pos(2, 0)],
                "latency": "111",
                "head": _pos(0, 0),
                "length": 3,
                "shout": "why are we shouting??",
                "customizations": {"color": "#FF0000"},
            },
            {
                "id": "snake-b67f4906",
                "name": "Another Snake",
                "health": 16,
                "body": [_pos(5, 4), _pos(5, 3), _pos(6, 3), _pos(6, 2)],
                "latency": "222",
                "head": _pos(5, 4),
                "length": 4,
                "shout": "I'm not really sure...",
            },
        ],
    },
    "you": {
        "id": "snake-508e96ac",
        "name": "My Snake",
        "health": 54,
        "body": [_pos(0, 0), _pos(1, 0), _pos(2, 0)],
        "latency": "111",
        "head": _pos(0, 0),
        "length": 3,
        "shout": "why are we shouting??",
    },
}


# =============================================================================
# Conversion
# =============================================================================

def test_snapshot_converts_to_board_state():
    state = board_state_from_snapshot(SNAPSHOT)

    assert state.self_id == "snake-508e96ac"
    assert state.turn == 14
    assert state.agent_ids == ("snake-508e96ac", "snake-b67f4906")
    assert state.head("snake-b67f4906") == Cell(5, 4)
    assert state.length("snake-b67f4906") == 4
    assert state.health("snake-508e96ac") == 54
    assert state.food == frozenset({Cell(5, 5), Cell(9, 0), Cell(2, 6)})
    assert state.hazards == frozenset({Cell(0, 0)})
    print("✓ Snapshot converted")


def test_hazards_are_ignored_by_default():
    state = board_state_from_snapshot(SNAPSHOT)
    assert state.rules.hazard_damage == 0
    assert state.rules.width == 11 and state.rules.height == 11


def test_explicit_rules_are_used():
    rules = RulesConfig(hazard_damage=14)
    state = board_state_from_snapshot(SNAPSHOT, rules=rules)
    assert state.rules.hazard_damage == 14


def test_parsed_model_is_accepted():
    wire = parse_snapshot(SNAPSHOT)
    assert isinstance(wire, WireGameState)
    assert board_state_from_snapshot(wire) == board_state_from_snapshot(SNAPSHOT)


# =============================================================================
# Failures
# =============================================================================

def test_missing_board_is_invalid():
    data = copy.deepcopy(SNAPSHOT)
    del data["board"]
    with pytest.raises(InvalidSnapshot, match="Malformed"):
        board_state_from_snapshot(data)


def test_wrong_types_are_invalid():
    data = copy.deepcopy(SNAPSHOT)
    data["board"]["snakes"][0]["health"] = "lots"
    with pytest.raises(InvalidSnapshot):
        board_state_from_snapshot(data)


def test_empty_body_is_invalid():
    data = copy.deepcopy(SNAPSHOT)
    data["board"]["snakes"][1]["body"] = []
    with pytest.raises(InvalidSnapshot, match="empty body"):
        board_state_from_snapshot(data)


def test_out_of_bounds_cell_is_invalid():
    data = copy.deepcopy(SNAPSHOT)
    data["board"]["snakes"][1]["body"][0] = _pos(11, 4)
    with pytest.raises(InvalidSnapshot, match="out of bounds"):
        board_state_from_snapshot(data)


def test_duplicate_ids_are_invalid():
    data = copy.deepcopy(SNAPSHOT)
    data["board"]["snakes"][1]["id"] = "snake-508e96ac"
    with pytest.raises(InvalidSnapshot, match="Duplicate"):
        board_state_from_snapshot(data)


# =============================================================================
# Deadline
# =============================================================================

def test_deadline_from_snapshot():
    deadline = deadline_from_snapshot(SNAPSHOT, received_at=1000.0, latency_margin_ms=100)
    assert deadline == pytest.approx(1000.4)


def test_deadline_never_precedes_receipt():
    data = copy.deepcopy(SNAPSHOT)
    data["game"]["timeout"] = 50
    deadline = deadline_from_snapshot(data, received_at=1000.0, latency_margin_ms=100)
    assert deadline == pytest.approx(1000.0)

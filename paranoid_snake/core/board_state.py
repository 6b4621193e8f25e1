# =============================================================================
# Paranoid Snake - Board State
# =============================================================================
"""
The complete board snapshot at one turn.

BoardState is an immutable value: transitions build a new state instead of
editing this one, so every node of a search tree owns its own state and no
node ever aliases another.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

import numpy as np

from .data_structures import Agent, Cell, RulesConfig
from .errors import InvalidSnapshot


@dataclass(frozen=True)
class BoardState:
    """
    Snapshot of a game at one turn.

    Attributes:
        agents: Every agent of the game, in a fixed order, eliminated ones included
        food: Cells holding food
        hazards: Hazard cells (inert unless rules.hazard_damage > 0)
        turn: Turn number, increases by one per transition
        self_id: Agent the engine maximizes for
        rules: Board size and rule parameters
    """

    # ==========================================================================
    # Contents
    # ==========================================================================
    agents: Tuple[Agent, ...] = ()
    food: FrozenSet[Cell] = frozenset()
    hazards: FrozenSet[Cell] = frozenset()
    turn: int = 0
    self_id: Optional[str] = None
    rules: RulesConfig = field(default_factory=RulesConfig)

    # ==========================================================================
    # Construction
    # ==========================================================================

    @classmethod
    def create(
        cls,
        agents: Iterable[Agent],
        food: Iterable[Tuple[int, int]] = (),
        hazards: Iterable[Tuple[int, int]] = (),
        turn: int = 0,
        self_id: Optional[str] = None,
        rules: Optional[RulesConfig] = None,
    ) -> 'BoardState':
        """
        Build a validated state from external data.

        Raises:
            InvalidSnapshot: empty body, cell out of bounds, duplicate agent
                id, too many agents, health out of range or negative turn
        """
        rules = rules or RulesConfig()
        normalized: List[Agent] = []
        seen: Set[str] = set()

        for agent in agents:
            if agent.id in seen:
                raise InvalidSnapshot(f"Duplicate agent id: {agent.id!r}")
            seen.add(agent.id)
            if len(agent.body) == 0:
                raise InvalidSnapshot(f"Agent {agent.id!r} has an empty body")
            body = tuple(Cell(int(x), int(y)) for x, y in agent.body)
            for cell in body:
                if not rules.in_bounds(cell):
                    raise InvalidSnapshot(
                        f"Agent {agent.id!r} has a body cell out of bounds: {tuple(cell)}"
                    )
            if not 0 <= agent.health <= rules.max_health:
                raise InvalidSnapshot(
                    f"Agent {agent.id!r} has health {agent.health} outside [0, {rules.max_health}]"
                )
            normalized.append(replace(agent, body=body))

        if len(normalized) > rules.max_agents:
            raise InvalidSnapshot(
                f"{len(normalized)} agents exceed the limit of {rules.max_agents}"
            )
        if turn < 0:
            raise InvalidSnapshot(f"Negative turn: {turn}")

        food_cells = cls._validated_cells(food, rules, "food")
        hazard_cells = cls._validated_cells(hazards, rules, "hazard")

        return cls(
            agents=tuple(normalized),
            food=food_cells,
            hazards=hazard_cells,
            turn=turn,
            self_id=self_id,
            rules=rules,
        )

    @staticmethod
    def _validated_cells(cells: Iterable[Tuple[int, int]], rules: RulesConfig,
                         kind: str) -> FrozenSet[Cell]:
        result = set()
        for x, y in cells:
            cell = Cell(int(x), int(y))
            if not rules.in_bounds(cell):
                raise InvalidSnapshot(f"{kind} cell out of bounds: {tuple(cell)}")
            result.add(cell)
        return frozenset(result)

    # ==========================================================================
    # Agent Access
    # ==========================================================================

    @property
    def agent_ids(self) -> Tuple[str, ...]:
        return tuple(agent.id for agent in self.agents)

    @property
    def living_agents(self) -> Tuple[Agent, ...]:
        return tuple(agent for agent in self.agents if agent.alive)

    @property
    def living_ids(self) -> Tuple[str, ...]:
        return tuple(agent.id for agent in self.agents if agent.alive)

    def get_agent(self, agent_id: Optional[str]) -> Optional[Agent]:
        """Get an agent by id, None when absent"""
        for agent in self.agents:
            if agent.id == agent_id:
                return agent
        return None

    def _require(self, agent_id: str) -> Agent:
        agent = self.get_agent(agent_id)
        if agent is None:
            raise KeyError(agent_id)
        return agent

    def head(self, agent_id: str) -> Cell:
        return self._require(agent_id).head

    def length(self, agent_id: str) -> int:
        return self._require(agent_id).length

    def health(self, agent_id: str) -> int:
        return self._require(agent_id).health

    def is_alive(self, agent_id: Optional[str]) -> bool:
        agent = self.get_agent(agent_id)
        return agent is not None and agent.alive

    def opponents(self, agent_id: Optional[str]) -> Tuple[Agent, ...]:
        """Every other agent, eliminated ones included"""
        return tuple(agent for agent in self.agents if agent.id != agent_id)

    def living_opponents(self, agent_id: Optional[str]) -> Tuple[Agent, ...]:
        return tuple(agent for agent in self.agents
                     if agent.id != agent_id and agent.alive)

    def with_self(self, agent_id: str) -> 'BoardState':
        """Same board seen from another agent's perspective"""
        return replace(self, self_id=agent_id)

    # ==========================================================================
    # Board Queries
    # ==========================================================================

    @property
    def width(self) -> int:
        return self.rules.width

    @property
    def height(self) -> int:
        return self.rules.height

    def in_bounds(self, cell: Cell) -> bool:
        return self.rules.in_bounds(cell)

    @property
    def is_over(self) -> bool:
        """A multi-agent game ends when at most one agent is left"""
        living = len(self.living_agents)
        if len(self.agents) > 1:
            return living <= 1
        return living == 0

    def occupied_cells(self) -> FrozenSet[Cell]:
        """Cells covered by any living agent's body"""
        return frozenset(cell for agent in self.agents if agent.alive
                         for cell in agent.body)

    def occupancy_grid(self) -> np.ndarray:
        """
        Boolean (width, height) grid, True where a living body lies.
        Indexed as grid[x, y].
        """
        grid = np.zeros((self.width, self.height), dtype=bool)
        for agent in self.living_agents:
            xs = [cell.x for cell in agent.body]
            ys = [cell.y for cell in agent.body]
            grid[xs, ys] = True
        return grid

    # ==========================================================================
    # Serialization
    # ==========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """Convert state to dictionary for JSON serialization"""
        return {
            "turn": self.turn,
            "self_id": self.self_id,
            "agents": [agent.to_dict() for agent in self.agents],
            "food": [cell.to_dict() for cell in sorted(self.food)],
            "hazards": [cell.to_dict() for cell in sorted(self.hazards)],
            "rules": self.rules.to_dict(),
        }

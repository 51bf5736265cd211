from __future__ import annotations
from typing import Iterable, Iterator, List

from swarm_relay.domain.environment.proximity import PositionRow, ProximityIndex
from swarm_relay.errors import InvariantViolation
from .agent import Agent


class AgentStore:
    """Fixed arena of agents indexed by id.

    Agents are only added while the store is being populated; after
    ``seal()`` the population is frozen for the rest of the run.
    """
    def __init__(self, agents: Iterable[Agent] = ()):
        self._agents: List[Agent] = []
        self._sealed = False
        for a in agents:
            self.add(a)

    def add(self, agent: Agent) -> Agent:
        if self._sealed:
            raise InvariantViolation("agent store is sealed; agents cannot be added after initialization")
        if agent.id != len(self._agents):
            raise InvariantViolation(f"agent id {agent.id} out of sequence (expected {len(self._agents)})")
        self._agents.append(agent)
        return agent

    def seal(self) -> "AgentStore":
        self._sealed = True
        return self

    @property
    def sealed(self) -> bool:
        return self._sealed

    def __len__(self) -> int:
        return len(self._agents)

    def __iter__(self) -> Iterator[Agent]:
        return iter(self._agents)

    def __getitem__(self, agent_id: int) -> Agent:
        return self.get(agent_id)

    def get(self, agent_id: int) -> Agent:
        if not (0 <= agent_id < len(self._agents)):
            raise InvariantViolation(f"no such agent: {agent_id}")
        return self._agents[agent_id]

    # --- snapshots ---
    def positions(self) -> List[PositionRow]:
        return [(a.id, a.x, a.y) for a in self._agents]

    def proximity_index(self, cell_size: float | None = None) -> ProximityIndex:
        return ProximityIndex(self.positions(), cell_size=cell_size)

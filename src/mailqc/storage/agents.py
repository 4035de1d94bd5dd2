"""Agent persistence."""

from __future__ import annotations

import re
import time
from typing import Callable, Optional
from urllib.parse import quote_plus

from ..models.agent import Agent
from ..utils.log import get_logger
from .store import KeyValueStore, read_json, write_json

logger = get_logger(__name__)

AGENTS_KEY = "quality_check_agents"
AVATAR_URL = "https://ui-avatars.com/api/?name={name}&background=random"
DEFAULT_EMAIL_DOMAIN = "example.com"


def default_email(name: str) -> str:
    """'Jane Doe' -> 'jane.doe@example.com'."""
    parts = [re.sub(r"[^a-z0-9]", "", p) for p in name.lower().split()]
    local = ".".join(p for p in parts if p) or "agent"
    return f"{local}@{DEFAULT_EMAIL_DOMAIN}"


def default_avatar(name: str) -> str:
    return AVATAR_URL.format(name=quote_plus(name.strip()))


class AgentRepository:
    def __init__(self, store: KeyValueStore, clock: Callable[[], float] = time.time):
        self.store = store
        self.clock = clock

    def get_agents(self) -> list[Agent]:
        raw = read_json(self.store, AGENTS_KEY, [])
        if not isinstance(raw, list):
            logger.error("Expected a list under %s, got %s", AGENTS_KEY, type(raw).__name__)
            return []
        agents: list[Agent] = []
        for item in raw:
            try:
                agents.append(Agent.model_validate(item))
            except ValueError as e:
                logger.warning("Skipping invalid agent record: %s", e)
        return agents

    def save_agents(self, agents: list[Agent]) -> bool:
        return write_json(self.store, AGENTS_KEY, [a.to_json_dict() for a in agents])

    def get_agent(self, agent_id: str) -> Optional[Agent]:
        return next((a for a in self.get_agents() if a.id == agent_id), None)

    def find_by_name(self, name: str) -> Optional[Agent]:
        wanted = name.strip().lower()
        return next((a for a in self.get_agents() if a.name.strip().lower() == wanted), None)

    def _new_id(self, existing: set[str]) -> str:
        base = f"agent-{int(self.clock() * 1000)}"
        candidate, n = base, 1
        while candidate in existing:
            candidate = f"{base}-{n}"
            n += 1
        return candidate

    def add_agent(
        self,
        name: str,
        department: str = "",
        email: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> Agent:
        agents = self.get_agents()
        agent = Agent(
            id=self._new_id({a.id for a in agents}),
            name=name.strip(),
            email=email or default_email(name),
            department=department,
            avatar=avatar or default_avatar(name),
        )
        if not self.save_agents([*agents, agent]):
            logger.warning("Agent %s was created but could not be saved", agent.name)
        return agent

    def ensure_agent(self, name: str, department: str = "") -> Agent:
        """Return the agent with this name (case-insensitive), creating it if needed."""
        return self.find_by_name(name) or self.add_agent(name, department=department)

    def remove_agent(self, agent_id: str) -> bool:
        agents = self.get_agents()
        remaining = [a for a in agents if a.id != agent_id]
        if len(remaining) == len(agents):
            return False
        return self.save_agents(remaining)

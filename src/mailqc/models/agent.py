"""Agent data models."""

from __future__ import annotations

from typing import Optional

from .base import CamelModel


class Agent(CamelModel):
    id: str
    name: str
    email: str = ""
    department: str = ""
    avatar: Optional[str] = None

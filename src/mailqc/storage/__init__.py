"""Persistence for agents, quality checks and settings."""

from .agents import AgentRepository
from .quality_checks import QualityCheckRepository
from .settings import SettingsRepository
from .store import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "AgentRepository",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "QualityCheckRepository",
    "SettingsRepository",
]

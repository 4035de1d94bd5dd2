"""Aggregated performance data models."""

from __future__ import annotations

from .agent import Agent
from .base import CamelModel


class TrendPoint(CamelModel):
    date: str
    score: float


class OverallPoint(CamelModel):
    date: str
    average: float


class CriteriaAverage(CamelModel):
    criteria_id: str
    name: str
    average: float


class AgentPerformance(CamelModel):
    agent: Agent
    trend: list[TrendPoint] = []
    average_score: float = 0
    checks_count: int = 0
    criteria_breakdown: list[CriteriaAverage] = []


class PerformanceData(CamelModel):
    overall: list[OverallPoint] = []
    agents: list[AgentPerformance] = []


class CriteriaScorePoint(CamelModel):
    date: str
    agent_id: str
    agent_name: str = ""
    score: int = 0
    feedback: str = ""


class DashboardSummary(CamelModel):
    total_reviews: int = 0
    average_score: float = 0
    agents_reviewed: int = 0
    low_performers: int = 0


class ScoreBucket(CamelModel):
    name: str
    count: int = 0

"""Agent performance aggregation.

Everything is computed fresh from the stored quality checks on each call.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, TypeVar

from ..models.performance import (
    AgentPerformance,
    CriteriaAverage,
    CriteriaScorePoint,
    DashboardSummary,
    OverallPoint,
    PerformanceData,
    ScoreBucket,
    TrendPoint,
)
from ..models.quality import QualityCheck
from ..scoring.criteria import CRITERIA
from ..scoring.util import round_half_up
from ..storage.agents import AgentRepository
from ..storage.quality_checks import QualityCheckRepository
from ..utils.log import get_logger

logger = get_logger(__name__)

PERIOD_DAYS: dict[str, Optional[int]] = {"7d": 7, "30d": 30, "90d": 90, "all": None}
LOW_PERFORMER_THRESHOLD = 7.0

P = TypeVar("P")

# (name, lower bound) from the highest band down
SCORE_BANDS: tuple[tuple[str, float], ...] = (
    ("Excellent (8-10)", 8.0),
    ("Good (6-7.9)", 6.0),
    ("Needs Improvement (0-5.9)", float("-inf")),
)


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _criteria_breakdown(checks: list[QualityCheck]) -> list[CriteriaAverage]:
    breakdown: list[CriteriaAverage] = []
    for criteria in CRITERIA:
        values: list[float] = []
        for check in checks:
            result = check.score_for(criteria.id)
            values.append(result.score if result else 0)
        breakdown.append(
            CriteriaAverage(criteria_id=criteria.id, name=criteria.name, average=_mean(values))
        )
    return breakdown


def get_performance_data(
    checks_repo: QualityCheckRepository,
    agents_repo: AgentRepository,
    agent_id: Optional[str] = None,
    period: str = "all",
    now: Optional[datetime] = None,
) -> PerformanceData:
    checks = filter_by_period(checks_repo.get_quality_checks(), period, now)
    if agent_id:
        checks = [c for c in checks if c.agent_id == agent_id]

    overall = [OverallPoint(date=c.date, average=c.overall_score) for c in checks]

    grouped: dict[str, list[QualityCheck]] = {}
    for check in checks:
        grouped.setdefault(check.agent_id, []).append(check)

    agents_by_id = {a.id: a for a in agents_repo.get_agents()}
    agents: list[AgentPerformance] = []
    for group_agent_id, agent_checks in grouped.items():
        agent = agents_by_id.get(group_agent_id)
        if agent is None:
            logger.debug("Skipping checks for unknown agent %s", group_agent_id)
            continue
        agents.append(
            AgentPerformance(
                agent=agent,
                trend=[TrendPoint(date=c.date, score=c.overall_score) for c in agent_checks],
                average_score=_mean([c.overall_score for c in agent_checks]),
                checks_count=len(agent_checks),
                criteria_breakdown=_criteria_breakdown(agent_checks),
            )
        )

    return PerformanceData(overall=overall, agents=agents)


def get_performance_by_criteria(
    checks_repo: QualityCheckRepository,
    criteria_id: str,
    agent_id: Optional[str] = None,
) -> list[CriteriaScorePoint]:
    """One point per check for a single criterion, for drill-down reports."""
    points: list[CriteriaScorePoint] = []
    for check in checks_repo.get_quality_checks():
        if agent_id and check.agent_id != agent_id:
            continue
        result = check.score_for(criteria_id)
        points.append(
            CriteriaScorePoint(
                date=check.date,
                agent_id=check.agent_id,
                agent_name=check.agent_name,
                score=result.score if result else 0,
                feedback=result.feedback if result else "",
            )
        )
    return points


def _parse_date(value: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def filter_by_period(points: list[P], period: str, now: Optional[datetime] = None) -> list[P]:
    """Keep points whose ``date`` falls within the period (7d, 30d, 90d or all).

    A naive ``now`` is taken to be UTC; an aware one is converted to UTC.
    """
    if period not in PERIOD_DAYS:
        raise ValueError(f"Unknown period: {period}")
    days = PERIOD_DAYS[period]
    if days is None:
        return list(points)

    if now is None:
        now = datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)
    cutoff = now - timedelta(days=days)
    kept = []
    for point in points:
        parsed = _parse_date(getattr(point, "date", ""))
        if parsed is not None and parsed >= cutoff:
            kept.append(point)
    return kept


def get_dashboard_summary(
    checks_repo: QualityCheckRepository,
    agents_repo: AgentRepository,
    threshold: float = LOW_PERFORMER_THRESHOLD,
    agent_id: Optional[str] = None,
    period: str = "all",
    now: Optional[datetime] = None,
) -> DashboardSummary:
    data = get_performance_data(checks_repo, agents_repo, agent_id, period, now)
    return DashboardSummary(
        total_reviews=len(data.overall),
        average_score=round(_mean([p.average for p in data.overall]), 1),
        agents_reviewed=len(data.agents),
        low_performers=sum(1 for a in data.agents if a.average_score < threshold),
    )


def get_score_distribution(data: PerformanceData) -> list[ScoreBucket]:
    """Count agents per average-score band."""
    counts = {name: 0 for name, _ in SCORE_BANDS}
    for perf in data.agents:
        band = next(name for name, lower in SCORE_BANDS if perf.average_score >= lower)
        counts[band] += 1
    return [ScoreBucket(name=name, count=count) for name, count in counts.items()]


def get_criteria_averages(data: PerformanceData) -> list[CriteriaAverage]:
    """Per-criterion average across agents, each agent weighted equally."""
    averages: list[CriteriaAverage] = []
    for criteria in CRITERIA:
        values = [
            c.average
            for perf in data.agents
            for c in perf.criteria_breakdown
            if c.criteria_id == criteria.id
        ]
        average = round_half_up(_mean(values) * 10) / 10
        averages.append(CriteriaAverage(criteria_id=criteria.id, name=criteria.name, average=average))
    return averages

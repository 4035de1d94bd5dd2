"""Markdown quality report generation."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from .. import __version__
from ..models.performance import DashboardSummary, PerformanceData
from .performance import get_criteria_averages, get_score_distribution


def generate_quality_report(
    data: PerformanceData,
    summary: DashboardSummary,
    period: str = "all",
    title: str = "Email Quality Report",
    generated_at: Optional[datetime] = None,
) -> str:
    timestamp = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")

    lines: list[str] = []
    lines.append(f"# {title}")
    lines.append("")
    lines.append(f"**Date:** {timestamp}")
    lines.append(f"**Period:** {period}")
    lines.append("")

    lines.append("## Summary")
    lines.append("")
    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| Reviews | {summary.total_reviews} |")
    lines.append(f"| Average score | {summary.average_score} |")
    lines.append(f"| Agents reviewed | {summary.agents_reviewed} |")
    lines.append(f"| Low performers | {summary.low_performers} |")
    lines.append("")

    if data.agents:
        criteria_names = [c.name for c in data.agents[0].criteria_breakdown]
        lines.append("## Agent Performance")
        lines.append("")
        lines.append("| Agent | Department | Checks | Average | " + " | ".join(criteria_names) + " |")
        lines.append("|" + "---|" * (4 + len(criteria_names)))

        ranked = sorted(data.agents, key=lambda a: a.average_score, reverse=True)
        for perf in ranked:
            cells = [f"{c.average:.1f}" for c in perf.criteria_breakdown]
            lines.append(
                f"| {perf.agent.name} | {perf.agent.department or '-'} | {perf.checks_count} "
                f"| {perf.average_score:.1f} | " + " | ".join(cells) + " |"
            )
        lines.append("")

        lines.append("## Score Distribution")
        lines.append("")
        lines.append("| Band | Agents |")
        lines.append("|------|--------|")
        for bucket in get_score_distribution(data):
            lines.append(f"| {bucket.name} | {bucket.count} |")
        lines.append("")

        lines.append("## Criteria Averages")
        lines.append("")
        lines.append("| Criterion | Average |")
        lines.append("|-----------|---------|")
        for average in get_criteria_averages(data):
            lines.append(f"| {average.name} | {average.average:.1f} |")
        lines.append("")
    else:
        lines.append("No quality checks recorded for this period.")
        lines.append("")

    lines.append("---")
    lines.append(f"*Generated by MailQC v{__version__} at {timestamp}*")

    return "\n".join(lines)

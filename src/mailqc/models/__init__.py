"""Data models for agents, emails, quality checks and reports."""

from .agent import Agent
from .analysis import (
    ClarityAnalysis,
    GrammarCheckResult,
    ScoringResult,
    StructureAnalysis,
    TemplateAnalysisResult,
    ToneAnalysis,
)
from .email import Email
from .quality import CRITERIA_IDS, CheckStatus, QualityCheck, QualityCriteria, SaveResult, ScoreResult

__all__ = [
    "Agent",
    "CRITERIA_IDS",
    "CheckStatus",
    "ClarityAnalysis",
    "Email",
    "GrammarCheckResult",
    "QualityCheck",
    "QualityCriteria",
    "SaveResult",
    "ScoreResult",
    "ScoringResult",
    "StructureAnalysis",
    "TemplateAnalysisResult",
    "ToneAnalysis",
]

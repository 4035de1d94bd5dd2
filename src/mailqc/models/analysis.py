"""Results produced by the scoring engine."""

from __future__ import annotations

from typing import Optional

from .base import CamelModel
from .quality import ScoreResult


class ToneAnalysis(CamelModel):
    score: int
    feedback: str
    breakdown: dict = {}


class ClarityAnalysis(CamelModel):
    score: int
    feedback: str
    breakdown: dict = {}


class GrammarCheckResult(CamelModel):
    score: int
    feedback: str = ""
    suggestions: list[str] = []


class StructureAnalysis(CamelModel):
    has_greeting: bool
    has_header: bool
    has_signature: bool
    has_footer: bool
    feedback: str
    score: float

    @property
    def missing_elements(self) -> list[str]:
        flags = (
            ("greeting", self.has_greeting),
            ("header", self.has_header),
            ("signature", self.has_signature),
            ("footer", self.has_footer),
        )
        return [name for name, present in flags if not present]


class TemplateAnalysisResult(CamelModel):
    detected_template: Optional[str] = None
    template_name: Optional[str] = None
    score: float = 0
    missing_components: list[str] = []
    prohibited_phrases: list[str] = []
    component_scores: dict[str, int] = {}


class ScoringResult(CamelModel):
    scores: list[ScoreResult]
    general_feedback: str
    recommendations: list[str] = []

"""Quality check data models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .base import CamelModel

CRITERIA_IDS: tuple[str, ...] = ("tone", "clarity", "spelling-grammar", "structure")


class CheckStatus(str, Enum):
    COMPLETED = "completed"
    DRAFT = "draft"


class QualityCriteria(CamelModel):
    id: str
    name: str
    description: str = ""
    weight: float = 0.25


class ScoreResult(CamelModel):
    criteria_id: str
    score: int = Field(ge=0, le=10)
    feedback: str = ""
    breakdown: Optional[dict] = None

    @field_validator("criteria_id")
    @classmethod
    def _known_criteria(cls, value: str) -> str:
        if value not in CRITERIA_IDS:
            raise ValueError(f"Unknown criteria id: {value}")
        return value


class QualityCheck(CamelModel):
    id: str
    agent_id: str
    agent_name: str = ""
    email_id: str = ""
    email_subject: str = ""
    reviewer_id: str = ""
    date: str
    email_content: str = ""
    scores: list[ScoreResult]
    overall_score: float = 0
    feedback: str = ""
    recommendations: list[str] = []
    status: CheckStatus = CheckStatus.COMPLETED

    @model_validator(mode="after")
    def _one_score_per_criterion(self) -> "QualityCheck":
        ids = [s.criteria_id for s in self.scores]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate criteria in scores")
        missing = [c for c in CRITERIA_IDS if c not in ids]
        if missing:
            raise ValueError(f"Missing scores for: {', '.join(missing)}")
        return self

    def score_for(self, criteria_id: str) -> Optional[ScoreResult]:
        return next((s for s in self.scores if s.criteria_id == criteria_id), None)


class SaveResult(BaseModel):
    success: bool
    result: Optional[QualityCheck] = None

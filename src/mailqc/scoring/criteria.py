"""The fixed quality criteria catalog."""

from __future__ import annotations

from ..models.quality import QualityCriteria

CRITERIA: tuple[QualityCriteria, ...] = (
    QualityCriteria(
        id="tone",
        name="Tone",
        description="Professional, polite with semi-formal language. No colloquialisms.",
        weight=0.25,
    ),
    QualityCriteria(
        id="clarity",
        name="Clarity",
        description="Clear explanation of information and next steps",
        weight=0.25,
    ),
    QualityCriteria(
        id="spelling-grammar",
        name="Spelling & Grammar",
        description="Correct spelling and grammar throughout the email",
        weight=0.25,
    ),
    QualityCriteria(
        id="structure",
        name="Structure",
        description="Includes greeting, header, proper signature, and footer",
        weight=0.25,
    ),
)

CRITERIA_BY_ID: dict[str, QualityCriteria] = {c.id: c for c in CRITERIA}

"""Review workflow: turn pasted or imported content into a saved quality check."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Callable, Optional

from ..errors import ValidationError
from ..models.email import Email
from ..models.quality import CRITERIA_IDS, CheckStatus, QualityCheck, SaveResult, ScoreResult
from ..scoring.orchestrator import calculate_overall_score, score_email
from ..storage.agents import AgentRepository
from ..storage.quality_checks import QualityCheckRepository
from ..utils.log import get_logger

logger = get_logger(__name__)


def _now_ms(clock: Callable[[], float]) -> int:
    return int(clock() * 1000)


def _new_check_id(checks: QualityCheckRepository, ms: int) -> str:
    existing = {c.id for c in checks.get_quality_checks()}
    candidate, n = f"qc-{ms}", 1
    while candidate in existing:
        candidate = f"qc-{ms}-{n}"
        n += 1
    return candidate


def build_pasted_email(
    content: str,
    subject: str,
    agent_name: str,
    clock: Callable[[], float] = time.time,
) -> Email:
    """Validate reviewer input and wrap it as an Email."""
    missing = [
        label
        for label, value in (("agent name", agent_name), ("subject", subject), ("content", content))
        if not (value or "").strip()
    ]
    if missing:
        raise ValidationError(f"Please provide: {', '.join(missing)}")

    ms = _now_ms(clock)
    return Email(
        id=f"pasted-{ms}",
        subject=subject.strip(),
        body=content,
        agent_name=agent_name.strip(),
        created_at=datetime.fromtimestamp(ms / 1000, tz=timezone.utc).isoformat(),
    )


def apply_adjustments(
    scores: list[ScoreResult],
    score_overrides: Optional[dict[str, int]] = None,
    feedback_overrides: Optional[dict[str, str]] = None,
) -> list[ScoreResult]:
    """Apply a reviewer's score and feedback changes to computed scores.

    Every override is validated before anything is applied. An overridden
    score keeps the computed value under ``originalScore`` in its breakdown.
    """
    score_overrides = score_overrides or {}
    feedback_overrides = feedback_overrides or {}

    unknown = sorted((set(score_overrides) | set(feedback_overrides)) - set(CRITERIA_IDS))
    if unknown:
        raise ValidationError(f"Unknown criteria: {', '.join(unknown)}")
    for criteria_id, value in score_overrides.items():
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 10:
            raise ValidationError(f"Score for {criteria_id} must be a whole number from 0 to 10")

    adjusted: list[ScoreResult] = []
    for score in scores:
        update: dict = {}
        if score.criteria_id in score_overrides and score_overrides[score.criteria_id] != score.score:
            update["score"] = score_overrides[score.criteria_id]
            update["breakdown"] = {**(score.breakdown or {}), "originalScore": score.score}
        if score.criteria_id in feedback_overrides:
            update["feedback"] = feedback_overrides[score.criteria_id].strip()
        adjusted.append(score.model_copy(update=update) if update else score)
    return adjusted


def review_email(
    email: Email,
    agents: AgentRepository,
    checks: QualityCheckRepository,
    reviewer_id: str,
    agent_name: Optional[str] = None,
    clock: Callable[[], float] = time.time,
    score_overrides: Optional[dict[str, int]] = None,
    feedback_overrides: Optional[dict[str, str]] = None,
    general_feedback: Optional[str] = None,
    recommendations: Optional[list[str]] = None,
    extra_recommendations: Optional[list[str]] = None,
    draft: bool = False,
) -> tuple[QualityCheck, SaveResult]:
    """Score an email and save the resulting quality check.

    The reviewed agent is created on first sight. Reviewer adjustments are
    applied on top of the computed scores and the overall score follows
    them. ``recommendations`` replaces the generated list while
    ``extra_recommendations`` appends to it. A draft is saved with status
    ``draft``. Returns the check and the save outcome; a failed save still
    returns the scored check.
    """
    name = (agent_name or email.agent_name or "").strip()
    if not name:
        raise ValidationError("Please provide: agent name")

    scoring = score_email(email)
    scores = apply_adjustments(scoring.scores, score_overrides, feedback_overrides)

    if recommendations is None:
        recommendations = list(scoring.recommendations)
    recommendations = [r.strip() for r in [*recommendations, *(extra_recommendations or [])] if r.strip()]

    agent = agents.ensure_agent(name)
    ms = _now_ms(clock)
    check = QualityCheck(
        id=_new_check_id(checks, ms),
        agent_id=agent.id,
        agent_name=agent.name,
        email_id=email.id,
        email_subject=email.subject,
        reviewer_id=reviewer_id,
        date=datetime.fromtimestamp(ms / 1000, tz=timezone.utc).isoformat(),
        email_content=email.body,
        scores=scores,
        overall_score=calculate_overall_score(scores),
        feedback=general_feedback.strip() if general_feedback else scoring.general_feedback,
        recommendations=recommendations,
        status=CheckStatus.DRAFT if draft else CheckStatus.COMPLETED,
    )

    result = checks.save_quality_check(check)
    if result.success:
        logger.info("Saved %s quality check %s for %s", check.status.value, check.id, agent.name)
    return check, result

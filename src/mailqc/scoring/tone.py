"""Tone heuristic: professional and polite keyword presence, minus urgency."""

from __future__ import annotations

import re

from ..models.analysis import ToneAnalysis
from .util import clamp_score

PROFESSIONAL_KEYWORDS: tuple[str, ...] = (
    "sincerely",
    "regards",
    "thank you",
    "please",
    "appreciate",
)

POLITE_KEYWORDS: tuple[str, ...] = (
    "hello",
    "hi",
    "dear",
    "good morning",
    "good afternoon",
    "good evening",
)

URGENCY_MARKERS: tuple[str, ...] = ("!", "urgent")

BASE_SCORE = 5
URGENCY_PENALTY = 2

FEEDBACK_PROFESSIONAL = "The email has a professional and polite tone."
FEEDBACK_INFORMAL = (
    "The email tone may be too informal or urgent. "
    "Consider using more professional language."
)
FEEDBACK_NEUTRAL = "The tone of the email is neutral."


def _has_phrase(text: str, phrase: str) -> bool:
    """Whole-word/phrase match, so 'hi' does not fire inside 'this'."""
    words = r"\s+".join(re.escape(part) for part in phrase.split())
    return re.search(rf"\b{words}\b", text) is not None


def analyze_tone(content: str) -> ToneAnalysis:
    lowered = (content or "").lower()

    professional = [k for k in PROFESSIONAL_KEYWORDS if _has_phrase(lowered, k)]
    polite = [k for k in POLITE_KEYWORDS if _has_phrase(lowered, k)]
    urgent = any(marker in lowered for marker in URGENCY_MARKERS)

    score = BASE_SCORE + len(professional) + len(polite)
    if urgent:
        score -= URGENCY_PENALTY
    score = int(clamp_score(score))

    if score >= 7:
        feedback = FEEDBACK_PROFESSIONAL
    elif score < 4:
        feedback = FEEDBACK_INFORMAL
    else:
        feedback = FEEDBACK_NEUTRAL

    return ToneAnalysis(
        score=score,
        feedback=feedback,
        breakdown={
            "professional": len(professional),
            "polite": len(polite),
            "penalty": URGENCY_PENALTY if urgent else 0,
        },
    )

"""Clarity heuristic: word length, sentence density and explicit next steps."""

from __future__ import annotations

import re
import string

from ..models.analysis import ClarityAnalysis
from .util import clamp_score

BASE_SCORE = 5
COMPLEX_WORD_LENGTH = 7
COMPLEX_WORD_RATIO = 0.2
COMPLEX_WORD_PENALTY = 3
SENTENCE_DENSITY = 1 / 15
SENTENCE_DENSITY_BONUS = 2
NEXT_STEPS_BONUS = 3
NEXT_STEPS_MARKERS: tuple[str, ...] = ("next steps", "to do")

FEEDBACK_CLEAR = "The email clearly explains information and next steps."
FEEDBACK_UNCLEAR = (
    "The email may be unclear. Use simpler language, shorter sentences, "
    "and clearly outline next steps."
)
FEEDBACK_NEUTRAL = "The clarity of the email is neutral."


def split_sentences(content: str) -> list[str]:
    return [s for s in re.split(r"[.!?]+", content) if s.strip()]


def analyze_clarity(content: str) -> ClarityAnalysis:
    text = content or ""
    words = [w.strip(string.punctuation) for w in text.split()]
    words = [w for w in words if w]
    sentences = split_sentences(text)

    complex_ratio = (
        sum(1 for w in words if len(w) > COMPLEX_WORD_LENGTH) / len(words) if words else 0.0
    )
    density = len(sentences) / len(words) if words else 0.0
    lowered = text.lower()
    has_next_steps = any(marker in lowered for marker in NEXT_STEPS_MARKERS)

    score = BASE_SCORE
    if complex_ratio > COMPLEX_WORD_RATIO:
        score -= COMPLEX_WORD_PENALTY
    if density > SENTENCE_DENSITY:
        score += SENTENCE_DENSITY_BONUS
    if has_next_steps:
        score += NEXT_STEPS_BONUS
    score = int(clamp_score(score))

    if score >= 7:
        feedback = FEEDBACK_CLEAR
    elif score < 4:
        feedback = FEEDBACK_UNCLEAR
    else:
        feedback = FEEDBACK_NEUTRAL

    return ClarityAnalysis(
        score=score,
        feedback=feedback,
        breakdown={
            "complexWordRatio": round(complex_ratio, 3),
            "sentenceDensity": round(density, 3),
            "hasNextSteps": has_next_steps,
        },
    )

"""Overall feedback, recommendations and sentiment for a scored email."""

from __future__ import annotations

from typing import Optional

from ..models.quality import ScoreResult

FEEDBACK_HIGH = "The email demonstrates high quality and professionalism."
FEEDBACK_LOW = "The email needs improvements to meet quality standards."
FEEDBACK_BASELINE = "The email meets the basic quality standards."

RECOMMENDATIONS: dict[str, tuple[str, str]] = {
    "tone": (
        "Improve professionalism by using courteous greetings, polite phrasing and a formal sign-off.",
        "Avoid urgent or forceful wording and exclamation marks; keep the tone calm and respectful.",
    ),
    "clarity": (
        "Use shorter words and sentences, and state the next steps explicitly.",
        "Organize the email into short paragraphs or bullet points so the key information stands out.",
    ),
    "spelling-grammar": (
        "Use a spelling and grammar checker before sending emails to catch common errors.",
        "Have a colleague review important emails before sending to catch spelling, grammar, "
        "and punctuation mistakes.",
    ),
}

STRUCTURE_RECOMMENDATIONS: tuple[tuple[float, str], ...] = (
    (7.5, "Always include a proper greeting and signature in your emails for a professional appearance."),
    (5, "Follow the company template with appropriate header and footer elements in all customer communications."),
    (2.5, "Review the email template guidelines to ensure all required elements are included in the correct order."),
)

FIRST_TIER = 7
SECOND_TIER = 5

POSITIVE_WORDS = (
    "thank", "appreciate", "pleased", "happy", "glad", "good", "great", "delighted",
    "excellent", "wonderful", "valued", "pleasure", "fantastic", "beneficial", "positive",
)
NEGATIVE_WORDS = (
    "unfortunately", "regret", "sorry", "issue", "problem", "difficult", "inconvenience",
    "concern", "mistake", "error", "disappointed", "frustrating", "disappointing", "negative",
)
NEUTRAL_WORDS = (
    "inform", "advise", "update", "note", "regarding", "reference", "awareness",
    "attention", "review", "consider", "acknowledge", "recognize",
)


def average_score(scores: list[ScoreResult]) -> float:
    if not scores:
        return 0.0
    return sum(s.score for s in scores) / len(scores)


def generate_overall_feedback(scores: list[ScoreResult]) -> str:
    avg = average_score(scores)
    if avg >= 8:
        return FEEDBACK_HIGH
    if avg < 6:
        return FEEDBACK_LOW
    return FEEDBACK_BASELINE


def _structure_value(result: ScoreResult) -> float:
    """The unrounded structure score when the analyzer recorded one."""
    if result.breakdown and "raw" in result.breakdown:
        return float(result.breakdown["raw"])
    return float(result.score)


def generate_recommendations(scores: list[ScoreResult]) -> list[str]:
    recommendations: list[str] = []
    by_id = {s.criteria_id: s for s in scores}

    for criteria_id in ("tone", "clarity", "spelling-grammar"):
        result = by_id.get(criteria_id)
        if result is None:
            continue
        first, second = RECOMMENDATIONS[criteria_id]
        if result.score < FIRST_TIER:
            recommendations.append(first)
            if result.score < SECOND_TIER:
                recommendations.append(second)

    structure = by_id.get("structure")
    if structure is not None:
        value = _structure_value(structure)
        if value < 10:
            for threshold, text in STRUCTURE_RECOMMENDATIONS:
                if value <= threshold:
                    recommendations.append(text)

    return recommendations


def analyze_sentiment(content: str) -> Optional[str]:
    """Describe the overall sentiment of the email, or None if it has no cue words."""
    words = (content or "").lower().split()
    positive = sum(1 for w in words if any(p in w for p in POSITIVE_WORDS))
    negative = sum(1 for w in words if any(n in w for n in NEGATIVE_WORDS))
    neutral = sum(1 for w in words if any(n in w for n in NEUTRAL_WORDS))

    total = positive + negative + neutral
    if total == 0:
        return None

    sentiment = (positive - negative) / total * 10
    if sentiment > 7:
        return "The email has a very positive sentiment, which builds rapport with the customer."
    if sentiment > 3:
        return "The email has a positive sentiment, appropriate for good customer relationships."
    if sentiment > -3:
        if neutral > positive and neutral > negative:
            return "The email has a neutral, factual sentiment, appropriate for informational messages."
        return "The email has a balanced sentiment, combining facts with an appropriate emotional tone."
    if sentiment > -7:
        return (
            "The email has a somewhat negative sentiment. Balance necessary negative "
            "information with solution-oriented language."
        )
    return (
        "The email has a very negative sentiment. Reframe difficult news constructively "
        "and include positive next steps."
    )

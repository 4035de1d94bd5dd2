"""Scoring orchestrator.

Runs the four criterion heuristics over an email and combines them into
score results, general feedback and recommendations.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

from ..models.analysis import ScoringResult
from ..models.email import Email
from ..models.quality import ScoreResult
from .clarity import analyze_clarity
from .criteria import CRITERIA
from .feedback import analyze_sentiment, generate_overall_feedback, generate_recommendations
from .grammar import check_grammar, check_grammar_async
from .structure import analyze_structure
from .tone import analyze_tone
from .util import round_half_up

EQUAL_WEIGHT = 1 / len(CRITERIA)

_TAG = re.compile(r"</?[A-Za-z][^<>]*>")
_BLOCK_TAGS = ["p", "div", "li", "tr", "table", "h1", "h2", "h3", "h4", "h5", "h6"]


def strip_html(body: str) -> str:
    """Reduce an HTML email body to plain text, keeping line breaks.

    Bodies without any markup are returned as they are, so a stray ``<``
    or ``>`` in plain text is never mistaken for a tag.
    """
    if not body or not _TAG.search(body):
        return body or ""
    soup = BeautifulSoup(body, "html.parser")
    for tag in soup(["script", "style", "head"]):
        tag.decompose()
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for block in soup.find_all(_BLOCK_TAGS):
        block.append("\n")
    lines = [line.strip() for line in soup.get_text().splitlines()]
    return re.sub(r"\n{3,}", "\n\n", "\n".join(lines)).strip()


def _score_results(content: str, grammar) -> list[ScoreResult]:
    tone = analyze_tone(content)
    clarity = analyze_clarity(content)
    structure = analyze_structure(content)

    return [
        ScoreResult(
            criteria_id="tone",
            score=tone.score,
            feedback=tone.feedback,
            breakdown=tone.breakdown,
        ),
        ScoreResult(
            criteria_id="clarity",
            score=clarity.score,
            feedback=clarity.feedback,
            breakdown=clarity.breakdown,
        ),
        ScoreResult(
            criteria_id="spelling-grammar",
            score=grammar.score,
            feedback=grammar.feedback,
            breakdown={"suggestions": grammar.suggestions},
        ),
        ScoreResult(
            criteria_id="structure",
            score=round_half_up(structure.score),
            feedback=structure.feedback,
            breakdown={
                "raw": structure.score,
                "hasGreeting": structure.has_greeting,
                "hasHeader": structure.has_header,
                "hasSignature": structure.has_signature,
                "hasFooter": structure.has_footer,
            },
        ),
    ]


def _combine(content: str, scores: list[ScoreResult]) -> ScoringResult:
    general = generate_overall_feedback(scores)
    sentiment = analyze_sentiment(content)
    if sentiment:
        general = f"{general} {sentiment}"
    return ScoringResult(
        scores=scores,
        general_feedback=general,
        recommendations=generate_recommendations(scores),
    )


def score_content(content: str) -> ScoringResult:
    """Score plain-text email content against all four criteria."""
    content = content or ""
    return _combine(content, _score_results(content, check_grammar(content)))


def score_email(email: Email) -> ScoringResult:
    return score_content(strip_html(email.body))


async def score_email_async(email: Email, grammar_delay_seconds: float = 0.0) -> ScoringResult:
    content = strip_html(email.body)
    grammar = await check_grammar_async(content, delay_seconds=grammar_delay_seconds)
    return _combine(content, _score_results(content, grammar))


def calculate_overall_score(scores: list[ScoreResult]) -> int:
    """Equal-weighted (25% each) average of the criterion scores, rounded half up.

    Configured criteria weights are not applied here.
    """
    if not scores:
        return 0
    return round_half_up(sum(s.score * EQUAL_WEIGHT for s in scores))

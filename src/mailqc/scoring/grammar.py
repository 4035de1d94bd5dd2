"""Spelling, grammar and style checker.

Scans the text against an ordered table of regex rules. Every rule that
matches deducts ``min(matches * 0.5, 2)`` points from a starting score of 10
and contributes one suggestion. Long paragraphs, long sentences and heavy use
of the passive voice are checked separately.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from typing import Callable, Optional

from ..models.analysis import GrammarCheckResult
from .clarity import split_sentences
from .util import clamp_score, round_half_up

BASE_SCORE = 10.0
DEDUCTION_PER_MATCH = 0.5
MAX_RULE_DEDUCTION = 2.0

LONG_PARAGRAPH_WORDS = 50
LONG_SENTENCE_WORDS = 25
MAX_LENGTH_DEDUCTION = 2.0

PASSIVE_THRESHOLD = 3
PASSIVE_DEDUCTION_PER_MATCH = 0.25
MAX_PASSIVE_DEDUCTION = 1.5


@dataclass(frozen=True)
class GrammarRule:
    name: str
    pattern: Optional[re.Pattern]
    message: str
    counter: Optional[Callable[[str], int]] = None

    def count(self, text: str) -> int:
        if self.counter is not None:
            return self.counter(text)
        return len(self.pattern.findall(text))


# Sentence ends followed by whitespace, and blank lines. Neither side may
# backtrack into the other, so long runs of whitespace stay linear.
_SEGMENT_BREAK = re.compile(r"[.!?]\s+|\n[^\S\n]*\n")


def count_lowercase_starts(text: str) -> int:
    """Sentences and paragraphs that begin with a lowercase letter."""
    count = 0
    for segment in _SEGMENT_BREAK.split(text):
        first = segment.lstrip()[:1]
        if "a" <= first <= "z":
            count += 1
    return count


_APOS = "['’]"

GRAMMAR_RULES: tuple[GrammarRule, ...] = (
    GrammarRule(
        "double-spaces",
        re.compile(r"(?<=\S) {2,}(?=\S)"),
        "Remove double spaces between words",
    ),
    GrammarRule(
        "repeated-punctuation",
        re.compile(r"([!?.,;:])\1+"),
        "Avoid repeated punctuation marks",
    ),
    GrammarRule(
        "missing-capitalization",
        None,
        "Start each sentence with a capital letter",
        counter=count_lowercase_starts,
    ),
    GrammarRule(
        "contractions",
        re.compile(
            rf"\b(?:I{_APOS}m|(?:you|we|they){_APOS}re|(?:it|that|there|what|let){_APOS}s"
            rf"|(?:I|you|we|they){_APOS}(?:ve|ll|d)"
            rf"|(?:do|does|did|is|are|was|were|have|has|had|could|should|would)n{_APOS}t"
            rf"|can{_APOS}t|won{_APOS}t|shan{_APOS}t)\b",
            re.IGNORECASE,
        ),
        "Avoid contractions in formal emails (for example, write 'I am' instead of 'I'm')",
    ),
    GrammarRule(
        "common-confusions",
        re.compile(
            r"\b(?:your welcome|their is|their are|could of|would of|should of|alot"
            r"|there (?:book|pen|car|company|product|service|account|order))\b",
            re.IGNORECASE,
        ),
        "Check commonly confused words (for example, 'you're welcome', 'there is')",
    ),
    GrammarRule(
        "informal-greetings",
        re.compile(rf"\b(?:hey|yo|hiya|howdy|what{_APOS}?s up|sup)\b", re.IGNORECASE),
        "Use a more formal greeting in professional emails",
    ),
    GrammarRule(
        "exclamation-marks",
        re.compile(r"!"),
        "Limit exclamation marks in professional emails",
    ),
    GrammarRule(
        "intensifiers",
        re.compile(r"\b(?:very|really|extremely|totally|super|awfully)\b", re.IGNORECASE),
        "Reduce intensifiers such as 'very' or 'really'",
    ),
    GrammarRule(
        "filler-words",
        re.compile(r"\b(?:basically|actually|literally|just|kind of|sort of)\b", re.IGNORECASE),
        "Remove filler words such as 'basically' or 'just'",
    ),
    GrammarRule(
        "redundant-phrases",
        re.compile(
            r"\b(?:in order to|at this point in time|due to the fact that|each and every"
            r"|first and foremost|end result|free gift|past history|advance planning)\b",
            re.IGNORECASE,
        ),
        "Replace redundant phrases with concise wording (for example, 'to' instead of 'in order to')",
    ),
    GrammarRule(
        "colloquial-abbreviations",
        re.compile(
            r"\b(?:asap|lol|omg|btw|fyi|imo|tbh|thx|pls|gonna|wanna|gotta)\b",
            re.IGNORECASE,
        ),
        "Avoid chat abbreviations and colloquialisms in formal communication",
    ),
)

PASSIVE_VOICE = re.compile(
    r"\b(?:is|are|was|were|be|been|being)\s+\w+(?:ed|en)\b", re.IGNORECASE
)

SUGGESTION_LONG_PARAGRAPHS = "Break long paragraphs into smaller ones for better readability"
SUGGESTION_LONG_SENTENCES = "Break long sentences into shorter ones"
SUGGESTION_PASSIVE = "Use the active voice for clearer communication"


def _feedback(score: int, suggestions: list[str]) -> str:
    if not suggestions:
        return "No spelling or grammar issues were found."
    if score >= 8:
        return "Spelling and grammar are good, with a few minor style points."
    if score >= 5:
        return "Some spelling, grammar or style issues should be corrected."
    return "The email has many spelling, grammar or style issues."


def check_grammar(text: str) -> GrammarCheckResult:
    text = text or ""
    score = BASE_SCORE
    suggestions: list[str] = []

    def suggest(message: str) -> None:
        if message not in suggestions:
            suggestions.append(message)

    for rule in GRAMMAR_RULES:
        matches = rule.count(text)
        if matches:
            score -= min(matches * DEDUCTION_PER_MATCH, MAX_RULE_DEDUCTION)
            suggest(rule.message)

    paragraphs = [p for p in re.split(r"\n[^\S\n]*\n", text) if p.strip()]
    long_paragraphs = sum(1 for p in paragraphs if len(p.split()) > LONG_PARAGRAPH_WORDS)
    if long_paragraphs:
        score -= min(long_paragraphs * DEDUCTION_PER_MATCH, MAX_LENGTH_DEDUCTION)
        suggest(SUGGESTION_LONG_PARAGRAPHS)

    long_sentences = sum(
        1 for s in split_sentences(text) if len(s.split()) > LONG_SENTENCE_WORDS
    )
    if long_sentences:
        score -= min(long_sentences * DEDUCTION_PER_MATCH, MAX_LENGTH_DEDUCTION)
        suggest(SUGGESTION_LONG_SENTENCES)

    passive = len(PASSIVE_VOICE.findall(text))
    if passive > PASSIVE_THRESHOLD:
        score -= min(passive * PASSIVE_DEDUCTION_PER_MATCH, MAX_PASSIVE_DEDUCTION)
        suggest(SUGGESTION_PASSIVE)

    final = int(clamp_score(round_half_up(score)))
    return GrammarCheckResult(
        score=final,
        feedback=_feedback(final, suggestions),
        suggestions=suggestions,
    )


async def check_grammar_async(text: str, delay_seconds: float = 0.0) -> GrammarCheckResult:
    """Awaitable variant; the optional delay never changes the result."""
    if delay_seconds > 0:
        await asyncio.sleep(delay_seconds)
    return check_grammar(text)

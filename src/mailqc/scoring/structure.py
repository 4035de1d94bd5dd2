"""Structural element detection: greeting, header, signature and footer.

Each element is looked for only where it belongs: greetings on the first two
lines, signatures on the last three, footers on the last two. The header
check is a plain phrase search over the whole (normalized) email.
"""

from __future__ import annotations

import re

from ..models.analysis import StructureAnalysis

GREETING_PATTERN = re.compile(
    r"\b(hello|hi|hey|dear|good\s+(morning|afternoon|evening)|greetings)\b", re.IGNORECASE
)

HEADER_PHRASES: tuple[str, ...] = (
    "my law matters",
    "air travel claim",
    "legal department",
    "claims department",
)

SIGNATURE_PATTERN = re.compile(
    r"\b(many\s+thanks|yours\s+(sincerely|faithfully)|best\s+(regards|wishes)"
    r"|kind\s+regards|thank\s+you|regards|sincerely)\b",
    re.IGNORECASE,
)

# Organization names may appear without spaces in addresses (mylawmatters.co.uk)
FOOTER_PATTERN = re.compile(
    r"(my\s*law\s*matters|air\s*travel\s*claim|\bcontact\s+us\b|www\.|\bhttps?:)", re.IGNORECASE
)

GREETING_LINES = 2
SIGNATURE_LINES = 3
FOOTER_LINES = 2
ELEMENT_WEIGHT = 2.5


def _lines(content: str) -> list[str]:
    return [line.strip() for line in content.split("\n") if line.strip()]


def analyze_structure(content: str) -> StructureAnalysis:
    text = content or ""
    lines = _lines(text)
    normalized = re.sub(r"\s+", " ", text.lower())

    has_greeting = any(GREETING_PATTERN.search(line) for line in lines[:GREETING_LINES])
    has_header = any(phrase in normalized for phrase in HEADER_PHRASES)
    has_signature = any(SIGNATURE_PATTERN.search(line) for line in lines[-SIGNATURE_LINES:])
    has_footer = any(FOOTER_PATTERN.search(line) for line in lines[-FOOTER_LINES:])

    missing = [
        name
        for name, present in (
            ("greeting", has_greeting),
            ("header", has_header),
            ("signature", has_signature),
            ("footer", has_footer),
        )
        if not present
    ]

    score = 10 - len(missing) * ELEMENT_WEIGHT
    if missing:
        feedback = f"Email is missing the following structural elements: {', '.join(missing)}."
    else:
        feedback = (
            "Email has proper structure with all required elements: "
            "greeting, header, signature, and footer."
        )

    return StructureAnalysis(
        has_greeting=has_greeting,
        has_header=has_header,
        has_signature=has_signature,
        has_footer=has_footer,
        feedback=feedback,
        score=score,
    )
